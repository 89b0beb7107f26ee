"""
Unit tests for the LLM module.
Tests LLMMessage, content blocks, providers, and factory.
"""

import pytest
from unittest.mock import AsyncMock, patch, MagicMock

from fitally.llm.base import LLMMessage, LLMResponse, text_part, media_part
from fitally.llm.openai_provider import OpenAIProvider
from fitally.llm.gemini_provider import GeminiProvider
from fitally.llm.factory import create_llm_provider


def _mock_async_client(mock_response):
    mock_instance = AsyncMock()
    mock_instance.post.return_value = mock_response
    mock_instance.__aenter__ = AsyncMock(return_value=mock_instance)
    mock_instance.__aexit__ = AsyncMock(return_value=False)
    return mock_instance


class TestContentBlocks:
    """Tests for text and media content blocks."""

    def test_text_part(self):
        assert text_part("hello") == {"type": "text", "text": "hello"}

    def test_image_part_uses_data_uri(self):
        block = media_part("data:image/png;base64,abc", "image/png")
        assert block == {"type": "image_url", "image_url": {"url": "data:image/png;base64,abc"}}

    def test_audio_part_carries_raw_base64_and_format(self):
        block = media_part("data:audio/wav;base64,UklGRg==", "audio/wav")
        assert block["type"] == "input_audio"
        assert block["input_audio"] == {"data": "UklGRg==", "format": "wav"}

    def test_video_part_is_inline_file(self):
        block = media_part("data:video/mp4;base64,AAAA", "video/mp4", filename="squat.mp4")
        assert block["type"] == "file"
        assert block["file"]["file_data"] == "data:video/mp4;base64,AAAA"
        assert block["file"]["filename"] == "squat.mp4"


class TestLLMMessage:
    """Tests for LLMMessage dataclass."""

    def test_text_message(self):
        msg = LLMMessage.text("user", "Hello")
        assert msg.role == "user"
        assert msg.content == "Hello"

    def test_multimodal_keeps_part_order(self):
        parts = [media_part("data:image/png;base64,abc", "image/png"), text_part("What is this?")]
        msg = LLMMessage.multimodal("user", parts)
        assert isinstance(msg.content, list)
        assert msg.content[0]["type"] == "image_url"
        assert msg.content[1]["text"] == "What is this?"


class TestLLMResponse:

    def test_basic_response(self):
        resp = LLMResponse(content="Hello!", model="gpt-4o")
        assert resp.content == "Hello!"
        assert resp.usage == {}
        assert resp.raw is None


class TestOpenAIProvider:
    """Tests for OpenAI-compatible provider."""

    def test_init_defaults(self):
        provider = OpenAIProvider(api_key="test-key")
        assert provider.model == "gpt-4o"
        assert provider.base_url == "https://api.openai.com/v1"

    def test_headers(self):
        provider = OpenAIProvider(api_key="sk-test123")
        headers = provider._get_headers()
        assert headers["Authorization"] == "Bearer sk-test123"
        assert headers["Content-Type"] == "application/json"

    def test_payload_includes_response_format(self):
        provider = OpenAIProvider(api_key="test")
        fmt = {"type": "json_schema", "json_schema": {"name": "X", "schema": {}}}
        payload = provider._build_payload([LLMMessage.text("user", "hi")], None, None, fmt)
        assert payload["response_format"] == fmt
        assert payload["temperature"] == provider.default_temperature

    def test_payload_omits_response_format_for_free_text(self):
        provider = OpenAIProvider(api_key="test")
        payload = provider._build_payload([LLMMessage.text("user", "hi")], 0.1, 50, None)
        assert "response_format" not in payload
        assert payload["temperature"] == 0.1
        assert payload["max_tokens"] == 50

    @pytest.mark.asyncio
    async def test_chat_completion_success(self):
        provider = OpenAIProvider(api_key="test-key")
        mock_response = MagicMock()
        mock_response.json.return_value = {
            "choices": [{"message": {"content": "{\"ok\": true}"}, "finish_reason": "stop"}],
            "model": "gpt-4o",
            "usage": {"prompt_tokens": 10, "completion_tokens": 5}
        }
        mock_response.raise_for_status = MagicMock()

        with patch("httpx.AsyncClient") as mock_client:
            mock_instance = _mock_async_client(mock_response)
            mock_client.return_value = mock_instance

            result = await provider.chat_completion([LLMMessage.text("user", "Hello")])

            assert result.content == "{\"ok\": true}"
            assert result.model == "gpt-4o"
            url = mock_instance.post.call_args[0][0]
            assert url == "https://api.openai.com/v1/chat/completions"

    @pytest.mark.asyncio
    async def test_null_content_becomes_empty_string(self):
        provider = OpenAIProvider(api_key="test-key")
        mock_response = MagicMock()
        mock_response.json.return_value = {"choices": [{"message": {"content": None}}]}
        mock_response.raise_for_status = MagicMock()

        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value = _mock_async_client(mock_response)
            result = await provider.chat_completion([LLMMessage.text("user", "Hello")])

        assert result.content == ""

    @pytest.mark.asyncio
    async def test_chat_completion_error_propagates(self):
        provider = OpenAIProvider(api_key="test-key")
        mock_response = MagicMock()
        mock_response.raise_for_status.side_effect = RuntimeError("500 Server Error")

        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value = _mock_async_client(mock_response)
            with pytest.raises(RuntimeError, match="500 Server Error"):
                await provider.chat_completion([LLMMessage.text("user", "Hello")])


class TestGeminiProvider:

    def test_init_defaults(self):
        provider = GeminiProvider(api_key="test-key")
        assert provider.model == "gemini-2.0-flash"
        assert "generativelanguage.googleapis.com" in provider.base_url
        assert provider.name == "gemini"


class TestFactory:
    """Tests for the LLM provider factory."""

    def test_no_api_key_returns_none(self):
        assert create_llm_provider(provider="gemini", api_key="") is None

    def test_create_openai(self):
        provider = create_llm_provider(provider="openai", api_key="key", model="gpt-4o-mini")
        assert isinstance(provider, OpenAIProvider)
        assert provider.model == "gpt-4o-mini"

    def test_create_gemini_with_timeout(self):
        provider = create_llm_provider(provider="gemini", api_key="key", timeout=5.0)
        assert isinstance(provider, GeminiProvider)
        assert provider.timeout == 5.0

    def test_unsupported_provider(self):
        with pytest.raises(ValueError, match="Unsupported LLM provider"):
            create_llm_provider(provider="unknown", api_key="key")
