"""
Audio Analysis Flow - transcribe first, then analyze the transcript as text.
"""

from ..core.errors import InputShapeError, MediaValidationError, TranscriptionFailure
from ..models import AnalysisInput, HealthActivityResult
from ..services.media import TextPart, validate_media
from ..services.model_invoker import ModelInvoker
from ..services.prompts import audio_analysis_prompt
from ..services.transcription import ModelTranscriber
from .base_flow import AnalysisFlow, FlowRun, PromptPlan
from .enrichment import append_tags, attach_transcript, stamp_timestamp


class AudioAnalysisFlow(AnalysisFlow):
    analysis_type = "audio"

    def __init__(self, invoker: ModelInvoker, transcriber=None):
        super().__init__(invoker)
        self.transcriber = transcriber or ModelTranscriber(invoker)

    def check_input(self, analysis_input: AnalysisInput) -> None:
        if analysis_input.audio_data is None:
            raise InputShapeError("MISSING_AUDIO_DATA", "Audio data is required for audio analysis")
        validation = validate_media(analysis_input.audio_data, "audio")
        if not validation.valid:
            raise MediaValidationError("audio", validation.reason or "invalid payload")

    async def build_prompt(self, analysis_input: AnalysisInput, run: FlowRun) -> PromptPlan:
        transcript = await self.transcriber.transcribe(analysis_input.audio_data)
        if not transcript:
            raise TranscriptionFailure()

        prompt = audio_analysis_prompt(transcript, analysis_input.text_input, analysis_input.context)
        return PromptPlan(parts=[TextPart(prompt)], input_types=["audio"], transcript=transcript)

    def enrich(self, result: HealthActivityResult, analysis_input: AnalysisInput,
               plan: PromptPlan) -> HealthActivityResult:
        stamp_timestamp(result, analysis_input.context)
        append_tags(result, ["analysis:audio", "source:audio"])
        attach_transcript(result, plan.transcript or "")
        return result
