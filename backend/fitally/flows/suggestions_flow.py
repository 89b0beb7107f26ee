"""
Suggestion Flows - personalized recommendations from a user's profile,
recent activities and the current time context.

The full flow summarizes activity patterns into a detailed coaching prompt;
the quick flow sends a short prompt over the five most recent activities.
"""

import logging
import time
from datetime import datetime
from typing import List, Optional

from ..core.errors import AnalysisError
from ..core.logging_config import FlowLogger
from ..models import SuggestionInput, SuggestionSet, TimeContext
from ..models.coaching import PartialTimeContext
from ..services.coaching_prompts import (
    analyze_activity_patterns,
    quick_suggestion_prompt,
    suggestion_prompt,
)
from ..services.media import TextPart
from ..services.model_invoker import ModelInvoker
from .enrichment import utc_timestamp

logger = logging.getLogger(__name__)

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def time_of_day(hour: int) -> str:
    if 5 <= hour < 12:
        return "morning"
    if 12 <= hour < 17:
        return "afternoon"
    if 17 <= hour < 22:
        return "evening"
    return "night"


def season(month: int) -> str:
    """Northern hemisphere meteorological seasons."""
    if month in (12, 1, 2):
        return "winter"
    if month in (3, 4, 5):
        return "spring"
    if month in (6, 7, 8):
        return "summer"
    return "autumn"


def resolve_time_context(partial: Optional[PartialTimeContext] = None,
                         now: Optional[datetime] = None) -> TimeContext:
    """Fill whatever the caller left out from the server clock."""
    now = now or datetime.now()
    partial = partial or PartialTimeContext()
    return TimeContext(
        time_of_day=partial.time_of_day or time_of_day(now.hour),
        day_of_week=partial.day_of_week or WEEKDAYS[now.weekday()],
        season=partial.season or season(now.month),
    )


def _tag_suggestions(result: SuggestionSet, tags: List[str]) -> None:
    for suggestion in result.suggestions:
        for tag in tags:
            if tag not in suggestion.tags:
                suggestion.tags.append(tag)


class SuggestionsFlow:
    """Runs the full or quick suggestion variant over one model invoker."""

    def __init__(self, invoker: ModelInvoker):
        self.invoker = invoker

    async def _generate(self, suggestion_input: SuggestionInput, prompt: str, variant: str) -> SuggestionSet:
        log = FlowLogger(logger, {"user_id": suggestion_input.user_id, "analysis_type": f"suggestions:{variant}"})
        log.info(f"Generating {variant} suggestions from {len(suggestion_input.recent_activities)} activities")
        started = time.time()

        try:
            result = await self.invoker.generate_structured([TextPart(prompt)], SuggestionSet, stage="suggestions")
        except AnalysisError as e:
            log.warning(f"Suggestion generation failed: {e.message}", extra={"extra_fields": {"code": e.code}})
            raise

        result.timestamp = utc_timestamp()
        log.info(
            f"Generated {len(result.suggestions)} {variant} suggestions",
            extra={"extra_fields": {"duration_ms": round((time.time() - started) * 1000, 2)}}
        )
        return result

    async def full(self, suggestion_input: SuggestionInput) -> SuggestionSet:
        patterns = analyze_activity_patterns(suggestion_input.recent_activities)
        prompt = suggestion_prompt(suggestion_input, patterns)
        result = await self._generate(suggestion_input, prompt, "full")

        time_context = suggestion_input.time_context
        tags = [f"generated:{time_context.time_of_day}", f"context:{time_context.day_of_week.lower()}"]
        if suggestion_input.suggestion_type != "general":
            tags.append(f"focus:{suggestion_input.suggestion_type}")
        _tag_suggestions(result, tags)
        return result

    async def quick(self, suggestion_input: SuggestionInput) -> SuggestionSet:
        result = await self._generate(suggestion_input, quick_suggestion_prompt(suggestion_input), "quick")
        _tag_suggestions(result, ["quick-suggestion", f"time:{suggestion_input.time_context.time_of_day}"])
        return result

    async def run(self, suggestion_input: SuggestionInput, variant: str = "quick") -> SuggestionSet:
        if variant == "full":
            return await self.full(suggestion_input)
        return await self.quick(suggestion_input)
