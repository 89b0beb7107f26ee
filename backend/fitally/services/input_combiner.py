"""
Input Combiner - turns a multimodal request into an ordered list of prompt parts.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ..core.errors import InputShapeError, MediaValidationError
from ..models import MediaPayload
from .media import PromptPart, TextPart, to_promptable, validate_media

logger = logging.getLogger(__name__)


@dataclass
class CombinedInput:
    prompt_parts: List[PromptPart] = field(default_factory=list)
    input_types: List[str] = field(default_factory=list)


def combine_inputs(
    text: Optional[str] = None,
    image_data: Optional[MediaPayload] = None,
    audio_data: Optional[MediaPayload] = None,
    video_data: Optional[MediaPayload] = None,
) -> CombinedInput:
    """
    Validate and normalize every supplied modality in the order text, image, audio, video.

    Raises:
        MediaValidationError: on the first media payload that fails validation
        InputShapeError: NO_INPUT_PROVIDED when nothing usable was supplied
    """
    combined = CombinedInput()

    if text and text.strip():
        combined.prompt_parts.append(TextPart(text))
        combined.input_types.append("text")

    for modality, payload in (("image", image_data), ("audio", audio_data), ("video", video_data)):
        if payload is None:
            continue
        validation = validate_media(payload, modality)
        if not validation.valid:
            raise MediaValidationError(modality, validation.reason or "invalid payload")
        combined.prompt_parts.append(to_promptable(payload))
        combined.input_types.append(modality)

    if not combined.prompt_parts:
        raise InputShapeError(
            "NO_INPUT_PROVIDED",
            "At least one input type (text, image, audio, or video) is required for full analysis",
        )

    logger.debug(f"Combined inputs: {combined.input_types}")
    return combined
