"""LLM module - provides unified interface for LLM API providers."""

from .base import LLMProvider, LLMMessage, LLMResponse, text_part, media_part
from .openai_provider import OpenAIProvider
from .gemini_provider import GeminiProvider
from .factory import create_llm_provider

__all__ = [
    'LLMProvider',
    'LLMMessage',
    'LLMResponse',
    'text_part',
    'media_part',
    'OpenAIProvider',
    'GeminiProvider',
    'create_llm_provider',
]
