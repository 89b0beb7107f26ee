"""
ASGI middleware for logging API requests and responses.

Pure ASGI (not BaseHTTPMiddleware) so request bodies pass through untouched.
Request and response bodies are logged only after secrets are filtered and
base64 media content is replaced by a length marker.
"""

import json
import logging
import time
from typing import Any, Dict, Optional
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..core.logging_config import filter_sensitive_data, truncate_large_data

logger = logging.getLogger(__name__)


def _sanitize_body(data: bytes, max_length: int = 5000) -> Optional[str]:
    """Decode a body, strip secrets and media payloads, and truncate it for logging."""
    if not data:
        return None
    text = data.decode("utf-8", errors="ignore")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        return truncate_large_data(text, max_length=500)
    return truncate_large_data(
        json.dumps(filter_sensitive_data(payload), ensure_ascii=False), max_length=max_length
    )


def _analysis_summary(body: bytes) -> Dict[str, Any]:
    """Analysis type, user and attached modalities of an /analyze request, if parseable."""
    try:
        payload = json.loads(body.decode("utf-8", errors="ignore"))
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}
    if not isinstance(payload, dict) or not isinstance(payload.get("input"), dict):
        return {}
    analysis_input = payload["input"]
    context = analysis_input.get("context") if isinstance(analysis_input.get("context"), dict) else {}
    return {
        "analysis_type": payload.get("type", "full"),
        "user_id": context.get("userId"),
        "attachments": [
            key for key in ("imageData", "audioData", "videoData") if analysis_input.get(key)
        ],
    }


def _error_code(body: Optional[str]) -> Optional[str]:
    if not body:
        return None
    try:
        payload = json.loads(body)
    except json.JSONDecodeError:
        return None
    if isinstance(payload, dict):
        return payload.get("code") or payload.get("detail")
    return None


class RequestLoggingMiddleware:
    """Pure ASGI middleware to log API requests and responses."""

    def __init__(self, app: ASGIApp, exclude_paths: Optional[list] = None):
        """
        Args:
            app: The ASGI application
            exclude_paths: Paths skipped entirely (defaults to the liveness endpoints)
        """
        self.app = app
        self.exclude_paths = exclude_paths or ["/health", "/"]

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope.get("path", "") in self.exclude_paths:
            await self.app(scope, receive, send)
            return

        start_time = time.time()
        request_id = id(scope)
        method = scope.get("method", "UNKNOWN")
        path = scope.get("path", "")
        client = scope.get("client")

        body_chunks = []
        response_chunks = []
        status_code = 0

        async def logging_receive() -> Message:
            message = await receive()
            if message["type"] == "http.request":
                body_chunks.append(message.get("body", b""))
            return message

        async def logging_send(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 0)
            elif message["type"] == "http.response.body":
                response_chunks.append(message.get("body", b""))
            await send(message)

        logger.info(
            f"Request started: {method} {path}",
            extra={"extra_fields": {
                "request_id": request_id,
                "method": method,
                "path": path,
                "client": client[0] if client else None,
            }}
        )

        try:
            await self.app(scope, logging_receive, logging_send)
        except Exception as e:
            logger.error(
                f"Request failed: {method} {path} - {str(e)}",
                exc_info=True,
                extra={"extra_fields": {
                    "request_id": request_id,
                    "duration_ms": (time.time() - start_time) * 1000,
                    "error": str(e),
                }}
            )
            raise

        duration_ms = (time.time() - start_time) * 1000
        request_body = b"".join(body_chunks)
        request_text = _sanitize_body(request_body)
        response_text = _sanitize_body(b"".join(response_chunks))

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Request body: {request_text or '-'}")
            logger.debug(f"Response body: {response_text or '-'}")

        if status_code < 400:
            log_level = logging.INFO
        elif status_code < 500:
            log_level = logging.WARNING
        else:
            log_level = logging.ERROR

        error_code = _error_code(response_text) if status_code >= 400 else None
        message = f"Request completed: {method} {path} - {status_code} ({duration_ms:.2f}ms)"
        if error_code:
            message += f" | code={error_code}"

        logger.log(
            log_level,
            message,
            extra={"extra_fields": {
                "request_id": request_id,
                "method": method,
                "path": path,
                "status_code": status_code,
                "duration_ms": duration_ms,
                "error_code": error_code,
                **_analysis_summary(request_body),
            }}
        )
