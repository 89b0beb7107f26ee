"""
FastAPI dependencies shared by the AI routers.

Everything that touches the model is built here from settings, so tests can
swap it out with ``app.dependency_overrides``.
"""

import logging
from typing import Optional

from fastapi import Depends

from ..config import settings
from ..core.errors import ConfigurationError
from ..flows import AnalysisOrchestrator, InsightsFlow, SuggestionsFlow
from ..llm.base import LLMProvider
from ..llm.factory import create_llm_provider
from ..services.model_invoker import ModelInvoker
from ..services.transcription import create_transcriber

logger = logging.getLogger(__name__)


def get_llm_provider() -> Optional[LLMProvider]:
    """
    Get configured LLM provider or None.

    Raises:
        ConfigurationError: the configured provider name is unknown
    """
    api_key = settings.resolve_llm_api_key()
    if not api_key:
        return None
    try:
        return create_llm_provider(
            provider=settings.llm_provider,
            api_key=api_key,
            model=settings.llm_model,
            base_url=settings.llm_base_url,
            timeout=settings.llm_timeout_seconds,
            default_max_tokens=settings.llm_max_tokens,
        )
    except ValueError as e:
        logger.error(f"LLM provider misconfigured: {e}")
        raise ConfigurationError(str(e), expose_details=settings.is_development) from e


def get_model_invoker() -> ModelInvoker:
    return ModelInvoker(get_llm_provider(), temperature=settings.llm_temperature)


def get_orchestrator() -> AnalysisOrchestrator:
    """Build the analysis orchestrator with the configured provider injected."""
    invoker = get_model_invoker()
    try:
        transcriber = create_transcriber(
            settings.transcription_backend,
            invoker,
            openai_api_key=settings.openai_api_key,
            whisper_model=settings.whisper_model,
        )
    except ValueError as e:
        logger.error(f"Transcription backend misconfigured: {e}")
        raise ConfigurationError(str(e), expose_details=settings.is_development) from e
    return AnalysisOrchestrator(invoker, transcriber)


def get_insights_flow(invoker: ModelInvoker = Depends(get_model_invoker)) -> InsightsFlow:
    return InsightsFlow(invoker)


def get_suggestions_flow(invoker: ModelInvoker = Depends(get_model_invoker)) -> SuggestionsFlow:
    return SuggestionsFlow(invoker)
