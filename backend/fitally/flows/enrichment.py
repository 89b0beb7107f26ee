"""
Result enrichment - deterministic post-processing of validated model output.
"""

import re
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from ..models import AnalysisContext, HealthActivityResult

_WHITESPACE_RE = re.compile(r"\s+")


def goal_slug(goal: str) -> str:
    """'Lose Weight' -> 'lose_weight'"""
    return _WHITESPACE_RE.sub("_", goal.lower())


def goal_tags(goals: Optional[List[str]]) -> List[str]:
    return [f"goal:{goal_slug(goal)}" for goal in goals or []]


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """UTC time with millisecond precision and a Z suffix, e.g. 2024-05-01T12:30:00.000Z"""
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def processed_tag(now: Optional[datetime] = None) -> str:
    return f"processed:{utc_timestamp(now)}"


def append_tags(result: HealthActivityResult, tags: Iterable[str]) -> None:
    """Append tags in order, skipping any already present."""
    for tag in tags:
        if tag not in result.tags:
            result.tags.append(tag)


def stamp_timestamp(result: HealthActivityResult, context: AnalysisContext) -> None:
    """The caller's timestamp always wins over whatever the model returned."""
    result.timestamp = context.timestamp


def attach_transcript(result: HealthActivityResult, transcript: str) -> None:
    note = f'Transcribed Audio: "{transcript}"'
    if result.notes:
        result.notes = f"{result.notes}\n\n{note}"
    else:
        result.notes = note
