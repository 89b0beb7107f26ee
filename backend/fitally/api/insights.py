"""
Insights API endpoints - daily insights over already-processed health metrics.
"""

import logging

from fastapi import APIRouter, Depends, Request

from ..core.errors import AnalysisError, InputShapeError
from ..flows import InsightsFlow
from ..flows.enrichment import utc_timestamp
from ..models import InsightsRequest
from .dependencies import get_insights_flow
from .responses import read_envelope, rejected, unexpected

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/insights", tags=["insights"])


@router.post("")
async def generate_insights(
    request: Request,
    flow: InsightsFlow = Depends(get_insights_flow),
):
    """
    Generate insights for one day of processed health data.

    Body:
        {"processedData": ProcessedHealthData, "profile": {...}}

    Returns:
        200 {"success": true, "data": DailyInsights, "timestamp": "..."}
    """
    try:
        envelope = await read_envelope(request, InsightsRequest)
        if envelope.processed_data is None:
            raise InputShapeError("MISSING_PROCESSED_DATA", "Missing processed health data")

        user_id = (envelope.profile or {}).get("id")
        result = await flow.run(envelope.processed_data, user_id=user_id)

    except AnalysisError as e:
        return rejected(logger, "Insights", e)
    except Exception as e:
        return unexpected(logger, "Insights", e)

    return {
        "success": True,
        "data": result.to_wire(),
        "timestamp": utc_timestamp(),
    }
