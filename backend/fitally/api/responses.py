"""
Request parsing and error bodies shared by the AI routers.
"""

import logging
from typing import List, Type, TypeVar

from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from ..config import settings
from ..core.errors import AnalysisError, EnvelopeValidationError, internal_error_response

T = TypeVar("T", bound=BaseModel)


def format_validation_errors(error: ValidationError) -> List[str]:
    """pydantic errors as "loc.path: message" strings."""
    return [
        f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
        for err in error.errors()
    ]


def validate_envelope(body, model: Type[T]) -> T:
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise EnvelopeValidationError(format_validation_errors(e)) from e


async def read_envelope(request: Request, model: Type[T]) -> T:
    """
    Parse the JSON body into ``model``.

    Raises:
        EnvelopeValidationError: the body is not JSON or does not match the model
    """
    try:
        body = await request.json()
    except ValueError as e:
        raise EnvelopeValidationError([f"body: Invalid JSON ({e})"]) from e
    return validate_envelope(body, model)


def error_response(exc: AnalysisError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


def rejected(logger: logging.Logger, operation: str, exc: AnalysisError) -> JSONResponse:
    """Log a classified failure (ERROR for 5xx, WARNING for 4xx) and render its body."""
    log_level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(
        log_level,
        f"{operation} request rejected: {exc.code} - {exc.message}",
        extra={"extra_fields": {"code": exc.code, "status_code": exc.status_code}}
    )
    return error_response(exc)


def unexpected(logger: logging.Logger, operation: str, exc: Exception) -> JSONResponse:
    logger.error(f"Unexpected {operation.lower()} error: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=internal_error_response(exc, expose_details=settings.is_development),
    )
