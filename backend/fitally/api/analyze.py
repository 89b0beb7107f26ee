"""
Analyze API endpoints - the request gateway for health activity analysis.

Validates the request envelope, checks per-type preconditions, dispatches to the
matching analysis flow and maps failures to the error taxonomy.
"""

import logging
import time

from fastapi import APIRouter, Depends, Request

from ..config import settings
from ..core.errors import AnalysisError, InputShapeError, MediaValidationError
from ..flows import AnalysisOrchestrator
from ..flows.enrichment import utc_timestamp
from ..models import AnalysisType, AnalyzeRequest
from ..services.media import validate_media
from .dependencies import get_orchestrator
from .responses import read_envelope, rejected, unexpected

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analyze", tags=["analyze"])


def check_preconditions(envelope: AnalyzeRequest) -> None:
    """
    Reject requests that cannot succeed before any flow runs.

    Every supplied media payload is validated, then the field required by the
    analysis type is checked.
    """
    analysis_input = envelope.input

    for modality, payload in (
        ("image", analysis_input.image_data),
        ("audio", analysis_input.audio_data),
        ("video", analysis_input.video_data),
    ):
        if payload is None:
            continue
        validation = validate_media(payload, modality)
        if not validation.valid:
            raise MediaValidationError(modality, validation.reason or "invalid payload")

    if envelope.type == AnalysisType.QUICK and not analysis_input.has_text():
        raise InputShapeError("MISSING_TEXT_INPUT", "Text input is required for quick analysis")
    if envelope.type == AnalysisType.IMAGE and analysis_input.image_data is None:
        raise InputShapeError("MISSING_IMAGE_DATA", "Image data is required for image analysis")
    if envelope.type == AnalysisType.AUDIO and analysis_input.audio_data is None:
        raise InputShapeError("MISSING_AUDIO_DATA", "Audio data is required for audio analysis")
    if envelope.type == AnalysisType.FULL and not analysis_input.present_modalities():
        raise InputShapeError(
            "NO_INPUT_PROVIDED",
            "At least one input type (text, image, audio, or video) is required for full analysis",
        )


@router.post("")
async def analyze_activity(
    request: Request,
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
):
    """
    Analyze a health activity from text, image, audio and/or video.

    Body:
        {"type": "full" | "quick" | "image" | "audio", "input": AnalysisInput}

    Returns:
        200 {"success": true, "data": HealthActivityResult, "metadata": {...}}
        or a classified error body {"error", "details", "code"}
    """
    started = time.time()
    try:
        envelope = await read_envelope(request, AnalyzeRequest)
        check_preconditions(envelope)

        result = await orchestrator.analyze(envelope.type, envelope.input)

    except AnalysisError as e:
        return rejected(logger, "Analysis", e)
    except Exception as e:
        return unexpected(logger, "Analysis", e)

    return {
        "success": True,
        "data": result.to_wire(),
        "metadata": {
            "analysisType": envelope.type.value,
            "timestamp": utc_timestamp(),
            "inputTypes": envelope.input.present_modalities(),
            "processingTimeMs": round((time.time() - started) * 1000, 2),
        },
    }


@router.get("")
async def describe_analysis_api():
    """Static capability description of the analyze endpoint."""
    return {
        "message": f"{settings.app_name} Health Activity Analysis API",
        "endpoints": {
            "POST": "/analyze",
            "description": "Analyze health activities using multimodal AI",
            "supportedTypes": [t.value for t in AnalysisType],
            "requiredFields": {
                "type": "Analysis type (full, quick, image, audio)",
                "input": {
                    "textInput": "Text description (optional; required for quick)",
                    "imageData": "Base64 image data with mimeType (optional; required for image)",
                    "audioData": "Base64 audio data with mimeType (optional; required for audio)",
                    "videoData": "Base64 video data with mimeType (optional)",
                    "context": {
                        "userId": "User identifier (required)",
                        "timestamp": "ISO timestamp (required)",
                        "userGoals": "Array of user goals (optional)",
                        "userPreferences": "User preferences object (optional)",
                    },
                },
            },
        },
    }
