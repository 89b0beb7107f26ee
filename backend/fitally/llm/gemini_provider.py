"""
Google Gemini LLM Provider.
Uses Gemini's OpenAI-compatible endpoint, which accepts the same Chat
Completions payload (including inline image/audio parts and json_schema output).
"""

from .openai_provider import OpenAIProvider


class GeminiProvider(OpenAIProvider):
    """Provider for Gemini models through the OpenAI compatibility layer."""

    name = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai",
        default_temperature: float = 0.4,
        default_max_tokens: int = 4096,
        timeout: float = 120.0,
    ):
        super().__init__(
            api_key,
            model=model,
            base_url=base_url,
            default_temperature=default_temperature,
            default_max_tokens=default_max_tokens,
            timeout=timeout,
        )
