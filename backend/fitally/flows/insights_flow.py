"""
Daily Insights Flow - turns one day of processed metrics into prioritized
insights, a day summary and metric trends.
"""

import logging
import time
from typing import Optional

from ..core.errors import AnalysisError
from ..core.logging_config import FlowLogger
from ..models import DailyInsights, ProcessedHealthData
from ..services.coaching_prompts import insights_prompt
from ..services.media import TextPart
from ..services.model_invoker import ModelInvoker
from .enrichment import utc_timestamp

logger = logging.getLogger(__name__)


class InsightsFlow:
    """Single structured model call; the generation time replaces any model timestamp."""

    def __init__(self, invoker: ModelInvoker):
        self.invoker = invoker

    async def run(self, data: ProcessedHealthData, user_id: Optional[str] = None) -> DailyInsights:
        log = FlowLogger(logger, {"user_id": user_id or "anonymous", "analysis_type": "insights"})
        log.info(f"Generating insights for {data.date}")
        started = time.time()

        try:
            result = await self.invoker.generate_structured(
                [TextPart(insights_prompt(data))], DailyInsights, stage="insights"
            )
        except AnalysisError as e:
            log.warning(f"Insights generation failed: {e.message}", extra={"extra_fields": {"code": e.code}})
            raise

        result.timestamp = utc_timestamp()
        log.info(
            f"Generated {len(result.insights)} insights for {data.date}",
            extra={"extra_fields": {
                "duration_ms": round((time.time() - started) * 1000, 2),
                "overall_score": result.summary.overall_score,
            }}
        )
        return result
