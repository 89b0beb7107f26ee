"""
Media validation and normalization.

``validate_media`` checks MIME type, encoding and size ceilings without side effects.
``to_promptable`` turns an already-validated payload into a self-contained media
reference (a data URI) that the model invoker can embed in a prompt.
"""

import re
from dataclasses import dataclass
from typing import Optional, Union

from ..models import MediaPayload

MiB = 1024 * 1024

SUPPORTED_IMAGE_TYPES = (
    'image/jpeg',
    'image/jpg',
    'image/png',
    'image/webp',
    'image/gif',
)

SUPPORTED_AUDIO_TYPES = (
    'audio/mp3',
    'audio/wav',
    'audio/m4a',
    'audio/aac',
    'audio/ogg',
    'audio/flac',
)

SUPPORTED_VIDEO_TYPES = (
    'video/mp4',
    'video/webm',
    'video/mov',
    'video/avi',
)

SUPPORTED_TYPES = {
    "image": SUPPORTED_IMAGE_TYPES,
    "audio": SUPPORTED_AUDIO_TYPES,
    "video": SUPPORTED_VIDEO_TYPES,
}

MAX_SIZES = {
    "image": 50 * MiB,
    "audio": 100 * MiB,
    "video": 500 * MiB,
}

_BASE64_RE = re.compile(r'^[A-Za-z0-9+/]+=*$')


@dataclass(frozen=True)
class MediaValidation:
    valid: bool
    reason: Optional[str] = None


@dataclass(frozen=True)
class TextPart:
    """Prompt part carrying a text segment."""
    text: str


@dataclass(frozen=True)
class MediaPart:
    """Prompt part carrying an embedded media reference."""
    url: str
    mime_type: str
    filename: Optional[str] = None


PromptPart = Union[TextPart, MediaPart]


def is_supported(mime_type: str, modality: str) -> bool:
    return mime_type in SUPPORTED_TYPES.get(modality, ())


def validate_media(payload: MediaPayload, modality: str) -> MediaValidation:
    """
    Validate a media payload for the given modality ("image", "audio" or "video").

    Returns:
        MediaValidation(valid=True) or MediaValidation(valid=False, reason=...)
        where the reason names the violated constraint.
    """
    if modality not in SUPPORTED_TYPES:
        return MediaValidation(False, f"Unknown media modality: {modality}")

    if not is_supported(payload.mime_type, modality):
        return MediaValidation(
            False,
            f"Unsupported {modality} type: {payload.mime_type}. "
            f"Supported types: {', '.join(SUPPORTED_TYPES[modality])}"
        )

    if not payload.base64:
        return MediaValidation(False, "Invalid base64 data provided")

    # Character-class check only; the content is never decoded here
    if modality == "image" and not _BASE64_RE.match(payload.base64):
        return MediaValidation(False, "Invalid base64 encoding")

    limit = MAX_SIZES[modality]
    if payload.size is not None and payload.size > limit:
        label = "Image" if modality == "image" else f"{modality.capitalize()} file"
        return MediaValidation(False, f"{label} size too large (max {limit // MiB}MB)")

    return MediaValidation(True)


def create_data_url(payload: MediaPayload) -> str:
    return f"data:{payload.mime_type};base64,{payload.base64}"


def to_promptable(payload: MediaPayload) -> MediaPart:
    """Normalize a payload into a media prompt part. Assumes it was validated."""
    return MediaPart(
        url=create_data_url(payload),
        mime_type=payload.mime_type,
        filename=payload.filename,
    )


def media_kind(mime_type: str) -> str:
    """Media family from a MIME type: image, audio, video or unknown."""
    for kind in ("image", "audio", "video"):
        if mime_type.startswith(f"{kind}/"):
            return kind
    return "unknown"
