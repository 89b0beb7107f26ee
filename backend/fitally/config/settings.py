"""
Configuration Settings.
"""

from pydantic_settings import BaseSettings
from typing import Literal, Optional


class Settings(BaseSettings):
    """Application settings."""

    # App info
    app_name: str = "Fitally AI"
    app_version: str = "1.0.0"
    environment: Literal["development", "production"] = "production"
    debug: bool = False

    # LLM Provider settings
    llm_provider: Literal["gemini", "openai"] = "gemini"
    llm_api_key: Optional[str] = None
    llm_model: Optional[str] = None  # uses provider default if not set
    llm_base_url: Optional[str] = None  # uses provider default if not set
    llm_timeout_seconds: float = 120.0
    llm_temperature: float = 0.4
    llm_max_tokens: int = 4096

    # Legacy keys (still accepted)
    openai_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None

    # Transcription for the audio flow
    transcription_backend: Literal["model", "whisper"] = "model"
    whisper_model: str = "whisper-1"

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Logging configuration
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file_path: str = "./logs/fitally.log"
    log_file_enabled: bool = True
    log_console_enabled: bool = True
    log_json_format: bool = True  # JSON format for files, human-readable for console
    log_api_requests: bool = True  # Log all API requests/responses
    log_llm_calls: bool = True  # Log all LLM calls with token usage

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    def resolve_llm_api_key(self) -> Optional[str]:
        """Return the configured key for the active provider, falling back to legacy keys."""
        if self.llm_api_key:
            return self.llm_api_key
        if self.llm_provider == "openai":
            return self.openai_api_key
        if self.llm_provider == "gemini":
            return self.gemini_api_key
        return None


settings = Settings()
