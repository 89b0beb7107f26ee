"""Core module - logging and error taxonomy."""

from .errors import (
    AnalysisError,
    ConfigurationError,
    EnvelopeValidationError,
    InputShapeError,
    MediaValidationError,
    ModelFailure,
    TranscriptionFailure,
)
from .logging_config import setup_logging, FlowLogger

__all__ = [
    'AnalysisError',
    'ConfigurationError',
    'EnvelopeValidationError',
    'InputShapeError',
    'MediaValidationError',
    'ModelFailure',
    'TranscriptionFailure',
    'setup_logging',
    'FlowLogger',
]
