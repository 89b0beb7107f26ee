"""Services module - media handling, prompts, model invocation and transcription."""

from .media import validate_media, to_promptable, media_kind, TextPart, MediaPart
from .input_combiner import combine_inputs, CombinedInput
from .model_invoker import ModelInvoker
from .transcription import ModelTranscriber, WhisperTranscriber, create_transcriber

__all__ = [
    'validate_media', 'to_promptable', 'media_kind', 'TextPart', 'MediaPart',
    'combine_inputs', 'CombinedInput',
    'ModelInvoker',
    'ModelTranscriber', 'WhisperTranscriber', 'create_transcriber',
]
