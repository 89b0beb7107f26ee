"""
Suggestions API endpoints - personalized recommendations from the caller's
profile and recent activities.
"""

import logging

from fastapi import APIRouter, Depends, Request

from ..core.errors import AnalysisError
from ..flows import SuggestionsFlow, resolve_time_context
from ..flows.enrichment import utc_timestamp
from ..models import SuggestionInput, SuggestionsRequest
from ..models.coaching import default_profile
from .dependencies import get_suggestions_flow
from .responses import read_envelope, rejected, unexpected

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/suggestions", tags=["suggestions"])


def build_suggestion_input(envelope: SuggestionsRequest) -> SuggestionInput:
    """Apply the default profile, time context and activity switch to a request."""
    return SuggestionInput(
        user_id=envelope.user_id,
        recent_activities=envelope.recent_activities if envelope.include_recent_activities else [],
        user_profile=envelope.user_profile or default_profile(),
        time_context=resolve_time_context(envelope.time_context),
        suggestion_type=envelope.suggestion_type,
    )


@router.post("")
async def generate_suggestions(
    request: Request,
    flow: SuggestionsFlow = Depends(get_suggestions_flow),
):
    """
    Generate personalized suggestions.

    Body:
        {"type": "full" | "quick", "suggestionType": ..., "userProfile": {...},
         "recentActivities": [...], "includeRecentActivities": true, "timeContext": {...}}
    """
    try:
        envelope = await read_envelope(request, SuggestionsRequest)
        suggestion_input = build_suggestion_input(envelope)

        result = await flow.run(suggestion_input, variant=envelope.type)

    except AnalysisError as e:
        return rejected(logger, "Suggestions", e)
    except Exception as e:
        return unexpected(logger, "Suggestions", e)

    return {
        "success": True,
        "data": result.to_wire(),
        "metadata": {
            "suggestionType": envelope.type,
            "timestamp": utc_timestamp(),
            "userContext": {
                "activitiesAnalyzed": len(suggestion_input.recent_activities),
                "timeContext": suggestion_input.time_context.model_dump(by_alias=True, exclude_none=True),
                "userGoals": suggestion_input.user_profile.fitness_goals or [],
            },
        },
    }


@router.get("")
async def describe_suggestions_api():
    """Static capability description of the suggestions endpoint."""
    return {
        "message": "Fitally AI Suggestions API",
        "endpoints": {
            "POST": "/suggestions",
            "description": "Generate personalized health and fitness suggestions",
            "supportedTypes": ["full", "quick"],
            "suggestionTypes": ["workout", "meal", "general", "recovery", "nutrition"],
            "optionalFields": {
                "userProfile": "Profile with fitness_goals, activity_level, dietary_preferences",
                "recentActivities": "Recent activity records, newest first",
                "includeRecentActivities": "Set false to ignore recentActivities (default true)",
                "timeContext": "timeOfDay, dayOfWeek and season; missing parts come from the server clock",
            },
        },
    }
