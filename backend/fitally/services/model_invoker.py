"""
Model Invoker - the single seam between the analysis pipeline and the generative model.

Structured output is validated against the exact pydantic model before anyone
downstream sees it. Nothing here retries.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ..core.errors import ModelFailure
from ..llm.base import LLMMessage, LLMProvider, media_part, text_part
from .media import MediaPart, PromptPart, TextPart

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

STRUCTURED_SYSTEM_PROMPT = (
    "You are a health and fitness analysis assistant. Respond with a single JSON object "
    "that matches the provided schema exactly. Do not add commentary or markdown."
)


def parse_json_object(raw_text: str) -> Dict[str, Any]:
    """
    Parse a JSON object from model output, tolerating surrounding prose or code fences.

    Raises:
        ValueError: when no JSON object can be recovered
    """
    try:
        parsed = json.loads(raw_text)
        if isinstance(parsed, dict):
            return parsed
    except json.JSONDecodeError:
        pass

    start = raw_text.find("{")
    end = raw_text.rfind("}")
    if start != -1 and end > start:
        try:
            parsed = json.loads(raw_text[start:end + 1])
            if isinstance(parsed, dict):
                return parsed
        except json.JSONDecodeError:
            pass
    raise ValueError("Model output is not a JSON object")


def to_content_blocks(parts: List[PromptPart]) -> List[Dict[str, Any]]:
    blocks = []
    for part in parts:
        if isinstance(part, TextPart):
            blocks.append(text_part(part.text))
        elif isinstance(part, MediaPart):
            blocks.append(media_part(part.url, part.mime_type, part.filename))
        else:
            raise TypeError(f"Unsupported prompt part: {type(part).__name__}")
    return blocks


def response_format_for(output_model: Type[BaseModel]) -> Dict[str, Any]:
    return {
        "type": "json_schema",
        "json_schema": {
            "name": output_model.__name__,
            "schema": output_model.model_json_schema(by_alias=True),
        },
    }


class ModelInvoker:
    """
    Calls the configured LLM provider on behalf of the analysis flows.

    The provider is injected at construction time; a missing provider turns
    every call into a provider-error failure.
    """

    def __init__(self, provider: Optional[LLMProvider], temperature: Optional[float] = None):
        self.provider = provider
        self.temperature = temperature

    @property
    def is_configured(self) -> bool:
        return self.provider is not None

    async def _complete(self, messages: List[LLMMessage], stage: str,
                        response_format: Optional[Dict[str, Any]] = None) -> str:
        if self.provider is None:
            raise ModelFailure(
                ModelFailure.PROVIDER_ERROR,
                "LLM provider not configured. Set LLM_API_KEY and LLM_PROVIDER in environment.",
                stage=stage,
            )
        try:
            response = await self.provider.chat_completion(
                messages,
                temperature=self.temperature,
                response_format=response_format,
            )
        except httpx.TimeoutException as e:
            raise ModelFailure(ModelFailure.PROVIDER_ERROR, f"model request timed out: {e}", stage=stage) from e
        except Exception as e:
            raise ModelFailure(ModelFailure.PROVIDER_ERROR, str(e), stage=stage) from e
        return response.content or ""

    async def generate_structured(
        self,
        parts: List[PromptPart],
        output_model: Type[T],
        stage: str = "analysis",
    ) -> T:
        """
        Generate an object conforming to ``output_model``.

        Raises:
            ModelFailure: no-output, provider-error or schema-violation
        """
        messages = [
            LLMMessage.text("system", STRUCTURED_SYSTEM_PROMPT),
            LLMMessage.multimodal("user", to_content_blocks(parts)),
        ]
        content = await self._complete(messages, stage, response_format_for(output_model))

        if not content.strip():
            raise ModelFailure(ModelFailure.NO_OUTPUT, "no output received", stage=stage)

        try:
            payload = parse_json_object(content)
            result = output_model.model_validate(payload)
        except (ValueError, ValidationError) as e:
            logger.warning(
                f"Model output rejected by {output_model.__name__} schema: {e}",
                extra={"extra_fields": {"stage": stage, "output_length": len(content)}}
            )
            raise ModelFailure(ModelFailure.SCHEMA_VIOLATION, str(e), stage=stage) from e

        return result

    async def generate_text(self, parts: List[PromptPart], stage: str = "transcription") -> Optional[str]:
        """
        Generate free text. Returns None when the model answered with nothing.

        Raises:
            ModelFailure: provider-error
        """
        messages = [LLMMessage.multimodal("user", to_content_blocks(parts))]
        content = await self._complete(messages, stage)
        text = content.strip()
        return text or None
