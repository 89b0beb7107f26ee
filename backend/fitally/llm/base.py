"""
LLM Provider Base - Abstract base for all LLM API providers.
Supports multimodal messages (text, images, audio and file attachments).
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, List, Union
from dataclasses import dataclass, field


def text_part(text: str) -> Dict[str, Any]:
    """Content block for a text segment."""
    return {"type": "text", "text": text}


def media_part(data_uri: str, mime_type: str, filename: Optional[str] = None) -> Dict[str, Any]:
    """
    Content block for an embedded media reference.

    Images travel as ``image_url``, audio as ``input_audio`` (raw base64 plus format),
    everything else as an inline ``file``.
    """
    if mime_type.startswith("image/"):
        return {"type": "image_url", "image_url": {"url": data_uri}}

    if mime_type.startswith("audio/"):
        _, _, encoded = data_uri.partition(";base64,")
        return {
            "type": "input_audio",
            "input_audio": {"data": encoded, "format": mime_type.split("/", 1)[1]},
        }

    file_block: Dict[str, Any] = {"file_data": data_uri}
    if filename:
        file_block["filename"] = filename
    return {"type": "file", "file": file_block}


@dataclass
class LLMMessage:
    """
    Represents a message in a conversation.
    Content is either plain text or an ordered list of content blocks.
    """
    role: str  # "system", "user", "assistant"
    content: Union[str, List[Dict[str, Any]]]

    @staticmethod
    def text(role: str, text: str) -> "LLMMessage":
        """Create a text-only message."""
        return LLMMessage(role=role, content=text)

    @staticmethod
    def multimodal(role: str, parts: List[Dict[str, Any]]) -> "LLMMessage":
        """Create a message from ordered content blocks (see text_part/media_part)."""
        return LLMMessage(role=role, content=list(parts))


@dataclass
class LLMResponse:
    """Response from an LLM API call."""
    content: str
    model: str = ""
    usage: Dict[str, int] = field(default_factory=dict)
    raw: Optional[Dict[str, Any]] = None


class LLMProvider(ABC):
    """
    Abstract base class for LLM API providers.
    All providers must implement chat_completion.
    """

    name: str = "base"

    def __init__(self, api_key: str, model: str, base_url: Optional[str] = None,
                 default_temperature: float = 0.4, default_max_tokens: int = 4096):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.default_temperature = default_temperature
        self.default_max_tokens = default_max_tokens

    @abstractmethod
    async def chat_completion(
        self,
        messages: List[LLMMessage],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        response_format: Optional[Dict[str, Any]] = None,
        **kwargs
    ) -> LLMResponse:
        """
        Send a chat completion request.

        Args:
            messages: List of conversation messages (supports multimodal)
            temperature: Sampling temperature override
            max_tokens: Max tokens override
            response_format: Optional structured-output constraint
                (e.g. {"type": "json_schema", "json_schema": {...}})
            **kwargs: Additional provider-specific parameters

        Returns:
            LLMResponse with the generated content
        """
        pass

    def _format_messages(self, messages: List[LLMMessage]) -> List[Dict[str, Any]]:
        """Convert LLMMessage list to API-compatible format."""
        return [{"role": m.role, "content": m.content} for m in messages]
