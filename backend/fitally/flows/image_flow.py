"""
Image Analysis Flow - one photo plus optional text, analyzed visually.
"""

from ..core.errors import InputShapeError, MediaValidationError
from ..models import AnalysisInput, HealthActivityResult
from ..services.media import TextPart, media_kind, to_promptable, validate_media
from ..services.prompts import NO_TEXT_PLACEHOLDER, contextual_instructions, modality_instructions
from .base_flow import AnalysisFlow, FlowRun, PromptPlan
from .enrichment import append_tags, stamp_timestamp


class ImageAnalysisFlow(AnalysisFlow):
    analysis_type = "image"

    def check_input(self, analysis_input: AnalysisInput) -> None:
        if analysis_input.image_data is None:
            raise InputShapeError("MISSING_IMAGE_DATA", "Image data is required for image analysis")
        # Validated here as well: this flow may be entered without the combiner
        validation = validate_media(analysis_input.image_data, "image")
        if not validation.valid:
            raise MediaValidationError("image", validation.reason or "invalid payload")

    async def build_prompt(self, analysis_input: AnalysisInput, run: FlowRun) -> PromptPlan:
        context = analysis_input.context
        text = analysis_input.text_input if analysis_input.has_text() else NO_TEXT_PLACEHOLDER
        parts = [
            to_promptable(analysis_input.image_data),
            TextPart(modality_instructions("image", context)),
            TextPart(text),
            TextPart(contextual_instructions(context)),
        ]
        return PromptPlan(parts=parts, input_types=["image"])

    def enrich(self, result: HealthActivityResult, analysis_input: AnalysisInput,
               plan: PromptPlan) -> HealthActivityResult:
        image = analysis_input.image_data
        stamp_timestamp(result, analysis_input.context)
        append_tags(result, ["analysis:visual", "source:image"])
        if image.filename:
            append_tags(result, [f"file:{image.filename}"])
        append_tags(result, [f"format:{media_kind(image.mime_type)}"])
        return result
