"""
Analysis error taxonomy.

Internal components raise these typed errors; only the request gateway turns
them into wire-format responses via ``to_response``.
"""

from typing import Any, Dict, List, Optional, Union


class AnalysisError(Exception):
    """Base class for every classified analysis failure."""

    code: str = "INTERNAL_ERROR"
    status_code: int = 500
    title: str = "Internal server error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def details(self) -> Union[str, List[str], None]:
        return self.message

    def to_response(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.title, "code": self.code}
        details = self.details()
        if details is not None:
            body["details"] = details
        return body


class EnvelopeValidationError(AnalysisError):
    """The top-level request body does not match the envelope schema."""

    code = "VALIDATION_ERROR"
    status_code = 400
    title = "Invalid request format"

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors) or "Invalid request format")
        self.errors = errors

    def details(self) -> List[str]:
        return self.errors


class InputShapeError(AnalysisError):
    """A modality field required by the analysis type is missing or blank."""

    status_code = 400

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.title = message

    def details(self) -> Optional[str]:
        return None


class MediaValidationError(AnalysisError):
    """A media payload has an unsupported type, bad encoding, or is too large."""

    status_code = 400

    def __init__(self, modality: str, reason: str):
        super().__init__(f"{modality.capitalize()} validation failed: {reason}")
        self.modality = modality
        self.reason = reason
        self.code = f"INVALID_{modality.upper()}_DATA"
        self.title = f"Invalid {modality} data"

    def details(self) -> str:
        return self.reason


class ModelFailure(AnalysisError):
    """
    The generative model produced no usable output.

    ``reason`` is one of ``no-output``, ``provider-error`` or ``schema-violation``;
    ``stage`` tells which model call of a flow broke.
    """

    code = "AI_PROCESSING_ERROR"
    status_code = 500
    title = "AI analysis failed"

    NO_OUTPUT = "no-output"
    PROVIDER_ERROR = "provider-error"
    SCHEMA_VIOLATION = "schema-violation"

    def __init__(self, reason: str, detail: str = "", stage: str = "analysis"):
        message = f"{stage.capitalize()} failed ({reason})"
        if detail:
            message += f": {detail}"
        super().__init__(message)
        self.reason = reason
        self.detail = detail
        self.stage = stage


class TranscriptionFailure(ModelFailure):
    """The first (transcription) stage of the audio flow returned nothing usable."""

    title = "Audio transcription failed"

    def __init__(self, reason: str = ModelFailure.NO_OUTPUT, detail: str = ""):
        super().__init__(reason, detail or "Failed to transcribe audio", stage="transcription")


class ConfigurationError(AnalysisError):
    """Settings name a provider or backend that cannot be built."""

    code = "INTERNAL_ERROR"
    status_code = 500
    title = "Internal server error"

    def __init__(self, message: str, expose_details: bool = False):
        super().__init__(message)
        self.expose_details = expose_details

    def details(self) -> str:
        return self.message if self.expose_details else "An unexpected error occurred"


def internal_error_response(exc: BaseException, expose_details: bool) -> Dict[str, Any]:
    """Body for errors that fall outside the taxonomy."""
    return {
        "error": "Internal server error",
        "details": str(exc) if expose_details else "An unexpected error occurred",
        "code": "INTERNAL_ERROR",
    }
