"""
Speech-to-Text for the audio analysis flow.

Two interchangeable backends expose ``transcribe(payload) -> Optional[str]``:
the generative model itself (default) or the OpenAI Whisper API.
"""

import base64
import binascii
import io
import logging
from typing import Optional

from openai import AsyncOpenAI

from ..core.errors import ModelFailure, TranscriptionFailure
from ..models import MediaPayload
from .media import TextPart, to_promptable
from .model_invoker import ModelInvoker
from .prompts import TRANSCRIPTION_INSTRUCTION

logger = logging.getLogger(__name__)


class ModelTranscriber:
    """Transcribes audio by sending it to the generative model with a transcription instruction."""

    def __init__(self, invoker: ModelInvoker):
        self.invoker = invoker

    async def transcribe(self, payload: MediaPayload) -> Optional[str]:
        parts = [to_promptable(payload), TextPart(TRANSCRIPTION_INSTRUCTION)]
        try:
            return await self.invoker.generate_text(parts, stage="transcription")
        except TranscriptionFailure:
            raise
        except ModelFailure as e:
            raise TranscriptionFailure(e.reason, e.detail) from e


class WhisperTranscriber:
    """
    Transcribes audio with the OpenAI Whisper API.
    """

    def __init__(self, api_key: Optional[str], model: str = "whisper-1",
                 language: Optional[str] = None):
        """
        Args:
            api_key: OpenAI API key
            model: Whisper model name
            language: Optional ISO 639-1 language hint; auto-detected when omitted
        """
        self.model = model
        self.language = language
        self.client = AsyncOpenAI(api_key=api_key) if api_key else None

    def is_configured(self) -> bool:
        return self.client is not None

    async def transcribe(self, payload: MediaPayload) -> Optional[str]:
        if not self.client:
            raise TranscriptionFailure(
                ModelFailure.PROVIDER_ERROR,
                "OpenAI API key not configured. Please set OPENAI_API_KEY in environment variables."
            )

        try:
            audio_bytes = base64.b64decode(payload.base64, validate=False)
        except (binascii.Error, ValueError) as e:
            raise TranscriptionFailure(ModelFailure.PROVIDER_ERROR, f"audio could not be decoded: {e}") from e

        # Whisper detects the container format from the file name
        audio_file = io.BytesIO(audio_bytes)
        audio_file.name = payload.filename or f"audio.{payload.mime_type.split('/', 1)[-1]}"

        params = {
            "model": self.model,
            "file": audio_file,
        }
        if self.language:
            params["language"] = self.language

        try:
            response = await self.client.audio.transcriptions.create(**params)
        except Exception as e:
            logger.error(f"Whisper transcription failed: {e}", exc_info=True)
            raise TranscriptionFailure(ModelFailure.PROVIDER_ERROR, str(e)) from e

        text = (getattr(response, "text", "") or "").strip()
        return text or None


def create_transcriber(backend: str, invoker: ModelInvoker, openai_api_key: Optional[str] = None,
                       whisper_model: str = "whisper-1"):
    """Build the transcriber selected by configuration."""
    if backend == "model":
        return ModelTranscriber(invoker)
    if backend == "whisper":
        return WhisperTranscriber(openai_api_key, model=whisper_model)
    raise ValueError(f"Unsupported transcription backend: {backend}")
