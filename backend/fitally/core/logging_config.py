"""
Centralized logging configuration for the Fitally analysis service.

This module provides:
- Console output with colored level names
- File output with JSON structured logging (rotating)
- A logger adapter that stamps request context onto every record
- Sanitizers that keep secrets and raw media payloads out of the logs
"""

import json
import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional


# Keys whose values carry raw media content (base64 blobs or data URIs)
MEDIA_CONTENT_KEYS = ('base64', 'url', 'file_data', 'data')

# Third-party loggers that are chatty at INFO (one line per HTTP call)
QUIET_LOGGERS = ('httpx', 'httpcore', 'openai', 'uvicorn.access')

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


class ColoredFormatter(logging.Formatter):
    """Console formatter that colors the level name."""

    LEVEL_COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        # Color a copy: the same record also reaches the JSON file handler
        colored = logging.makeLogRecord(record.__dict__)
        color = self.LEVEL_COLORS.get(record.levelname, self.RESET)
        colored.levelname = f"{color}{record.levelname:8s}{self.RESET}"
        return super().format(colored)


class JSONFormatter(logging.Formatter):
    """One JSON object per line, with ``extra_fields`` merged at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
            "message": record.getMessage(),
        }

        # Structured context from FlowLogger / extra={"extra_fields": ...}
        entry.update(getattr(record, 'extra_fields', None) or {})

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        # default=str: extra fields may hold enums, datetimes or exceptions
        return json.dumps(entry, ensure_ascii=False, default=str)


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(ColoredFormatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    return handler


def _file_handler(config: Any, level: int) -> logging.Handler:
    log_path = Path(config.log_file_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        filename=log_path,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding='utf-8',
    )
    handler.setLevel(level)

    if config.log_json_format:
        handler.setFormatter(JSONFormatter())
    else:
        # Plain text keeps the call site, which JSON puts under "location"
        handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)s | %(name)s:%(funcName)s:%(lineno)d | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
    return handler


def setup_logging(config: Any) -> None:
    """
    Configure the root logger from settings.

    Safe to call more than once (e.g. on every app startup in tests):
    existing root handlers are replaced, not duplicated.

    Args:
        config: Settings object with the ``log_*`` fields
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    log_level = getattr(logging, config.log_level.upper(), logging.INFO)
    root_logger.setLevel(log_level)

    if config.log_console_enabled:
        root_logger.addHandler(_console_handler(log_level))
    if config.log_file_enabled:
        root_logger.addHandler(_file_handler(config, log_level))

    # Provider call logging (token usage per request) can be switched off on its own
    if not getattr(config, "log_llm_calls", True):
        logging.getLogger("fitally.llm").setLevel(logging.WARNING)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root_logger.info(
        f"Logging initialized: level={config.log_level.upper()}, "
        f"console={config.log_console_enabled}, "
        f"file={config.log_file_enabled}, "
        f"llm_calls={getattr(config, 'log_llm_calls', True)}"
    )


class FlowLogger(logging.LoggerAdapter):
    """
    Logger adapter that carries per-request analysis context.

    Usage:
        log = FlowLogger(logging.getLogger(__name__), {"user_id": "u1", "analysis_type": "quick"})
        log.info("Model invocation started")  # record carries user_id and analysis_type
    """

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        if 'extra' not in kwargs:
            kwargs['extra'] = {}

        kwargs['extra']['extra_fields'] = {**self.extra, **kwargs['extra'].get('extra_fields', {})}

        return msg, kwargs


def _mask_media(value: str) -> str:
    if len(value) > 256 or value.startswith("data:"):
        return f"<media: {len(value)} chars>"
    return value


def filter_sensitive_data(data: Any, sensitive_keys: Optional[list] = None) -> Any:
    """
    Filter sensitive information and raw media content from log data.

    Args:
        data: Data to filter (dict, list, or primitive)
        sensitive_keys: List of keys to mask (default: password, token, secret, authorization, api key)

    Returns:
        Filtered data; secrets become "***FILTERED***" and media bodies a length marker
    """
    if sensitive_keys is None:
        sensitive_keys = ['password', 'token', 'secret', 'authorization', 'api_key', 'api-key']

    if isinstance(data, dict):
        filtered = {}
        for key, value in data.items():
            lowered = str(key).lower()
            if any(sensitive in lowered for sensitive in sensitive_keys):
                filtered[key] = "***FILTERED***"
            elif lowered in MEDIA_CONTENT_KEYS and isinstance(value, str):
                filtered[key] = _mask_media(value)
            else:
                filtered[key] = filter_sensitive_data(value, sensitive_keys)
        return filtered
    elif isinstance(data, list):
        return [filter_sensitive_data(item, sensitive_keys) for item in data]
    else:
        return data


def truncate_large_data(data: str, max_length: int = 5000) -> str:
    """
    Truncate large data to prevent huge logs.

    Args:
        data: String data to truncate
        max_length: Maximum length in characters (default: 5000)

    Returns:
        Truncated string with ellipsis if needed
    """
    if len(data) <= max_length:
        return data
    return data[:max_length] + f"... (truncated, total length: {len(data)})"
