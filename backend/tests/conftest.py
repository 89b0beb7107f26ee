"""
Shared test fixtures and configuration.
"""

import json
import os
from typing import Any, Dict, List, Optional, Union

import pytest

# Set test environment variables before importing app modules
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("LOG_FILE_ENABLED", "false")
os.environ.setdefault("LOG_API_REQUESTS", "true")
os.environ["LLM_API_KEY"] = ""

from fitally.llm.base import LLMProvider, LLMMessage, LLMResponse  # noqa: E402
from fitally.models import AnalysisContext, AnalysisInput, MediaPayload  # noqa: E402

# Minimal valid 1x1 PNG
PNG_BASE64 = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR4"
    "2mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)
AUDIO_BASE64 = "SUQzBAAAAAAAI1RTU0UAAAAPAAADTGF2ZjU4Ljc2LjEwMAAAAAAAAAAAAAAA"
VIDEO_BASE64 = "AAAAIGZ0eXBpc29tAAACAGlzb21pc28yYXZjMW1wNDE="
CONTEXT_TIMESTAMP = "2024-01-01T08:00:00Z"


class FakeProvider(LLMProvider):
    """
    Test double for the generative model.
    Replays queued responses in order and records every call.
    """

    name = "fake"

    def __init__(self, responses: Optional[List[Union[str, Dict[str, Any]]]] = None,
                 error: Optional[Exception] = None):
        super().__init__(api_key="test-key", model="fake-model")
        self.responses = list(responses or [])
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def chat_completion(self, messages: List[LLMMessage], temperature=None,
                              max_tokens=None, response_format=None, **kwargs) -> LLMResponse:
        self.calls.append({"messages": messages, "response_format": response_format})
        if self.error is not None:
            raise self.error
        content = self.responses.pop(0) if self.responses else ""
        if isinstance(content, dict):
            content = json.dumps(content)
        return LLMResponse(content=content, model=self.model)


def model_result(**overrides) -> Dict[str, Any]:
    """A schema-valid model answer; its timestamp deliberately differs from the request's."""
    result = {
        "activityType": "running",
        "subCategory": "outdoor run",
        "duration": {"value": 25, "unit": "minutes"},
        "intensity": "moderate",
        "calories": {"estimated": 300, "confidence": 0.8},
        "insights": {"primaryMuscleGroups": ["legs"], "improvements": ["add a cool-down"]},
        "timestamp": "1999-12-31T23:59:59Z",
        "confidence": 0.9,
        "tags": ["morning"],
    }
    result.update(overrides)
    return result


def processed_data(**overrides) -> Dict[str, Any]:
    """One day of processed metrics in wire (camelCase) form."""
    data = {
        "date": "2024-05-01",
        "metrics": {
            "calorieDeficit": {"value": 350, "bmr": 1700, "tdee": 2300, "workoutCalories": 400,
                               "foodCalories": 1950, "percentage": 70},
            "protein": {"consumed": 95.5, "goal": 120, "percentage": 80, "sources": ["eggs", "chicken"]},
            "steps": {"count": 8200, "goal": 10000, "percentage": 82, "estimated": True},
            "exercise": {"duration": 40, "goal": 30, "percentage": 133, "workoutCount": 1, "types": ["running"]},
        },
        "activities": {"meals": [{}, {}, {}], "workouts": [{}], "other": []},
        "goals": {"mealsLogged": True, "workoutCompleted": True, "proteinTarget": False, "calorieDeficit": True},
    }
    data.update(overrides)
    return data


def insights_result(**overrides) -> Dict[str, Any]:
    result = {
        "insights": [
            {"type": "nutrition", "message": "Add a protein snack", "priority": "high",
             "actionable": True, "timeRelevant": True},
        ],
        "summary": {"overallScore": 78, "keyWin": "Workout done", "mainImprovement": "Protein",
                    "motivationalMessage": "Keep going"},
        "trends": [{"metric": "steps", "direction": "improving", "confidence": 0.7}],
        "timestamp": "1999-12-31T23:59:59Z",
    }
    result.update(overrides)
    return result


def suggestion_result(**overrides) -> Dict[str, Any]:
    result = {
        "suggestions": [
            {"type": "workout", "title": "Evening walk", "description": "Walk 20 minutes",
             "reasoning": "Steps are below goal", "priority": "medium", "estimatedBenefit": "2000 steps",
             "actionSteps": ["Put on shoes", "Walk"], "timeToImplement": "20 minutes"},
        ],
        "insights": {"patterns": ["Runs most mornings"], "improvements": ["More protein"]},
        "confidence": 0.8,
    }
    result.update(overrides)
    return result


def recent_activity(activity_id: str, kind: str, activity_type: str, calories=None) -> Dict[str, Any]:
    activity = {"id": activity_id, "type": kind, "activityType": activity_type,
                "timestamp": "2024-04-30T07:15:00Z"}
    if calories is not None:
        activity["calories"] = calories
    return activity


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def context() -> AnalysisContext:
    return AnalysisContext(user_id="u1", timestamp=CONTEXT_TIMESTAMP)


@pytest.fixture
def rich_context() -> AnalysisContext:
    return AnalysisContext.model_validate({
        "userId": "u1",
        "timestamp": CONTEXT_TIMESTAMP,
        "userGoals": ["Lose Weight", "build  muscle"],
        "userPreferences": {
            "fitnessLevel": "intermediate",
            "preferredActivities": ["running", "cycling"],
            "healthConditions": ["asthma"],
        },
    })


@pytest.fixture
def image_payload() -> MediaPayload:
    return MediaPayload(base64=PNG_BASE64, mime_type="image/png", size=70, filename="lunch.png")


@pytest.fixture
def audio_payload() -> MediaPayload:
    return MediaPayload(base64=AUDIO_BASE64, mime_type="audio/mp3", size=1024, filename="note.mp3")


@pytest.fixture
def video_payload() -> MediaPayload:
    return MediaPayload(base64=VIDEO_BASE64, mime_type="video/mp4", size=2048)


@pytest.fixture
def make_input(context):
    def _make(**fields) -> AnalysisInput:
        return AnalysisInput(context=fields.pop("context", context), **fields)
    return _make
