"""
Full Analysis Flow - any combination of text, image, audio and video in one model call.
"""

from ..core.errors import InputShapeError
from ..models import AnalysisInput, HealthActivityResult
from ..services.input_combiner import combine_inputs
from ..services.media import TextPart
from ..services.prompts import contextual_instructions
from .base_flow import AnalysisFlow, FlowRun, PromptPlan
from .enrichment import append_tags, goal_tags, processed_tag, stamp_timestamp


class FullAnalysisFlow(AnalysisFlow):
    analysis_type = "full"

    def check_input(self, analysis_input: AnalysisInput) -> None:
        if not analysis_input.present_modalities():
            raise InputShapeError(
                "NO_INPUT_PROVIDED",
                "At least one input type (text, image, audio, or video) is required for full analysis",
            )

    async def build_prompt(self, analysis_input: AnalysisInput, run: FlowRun) -> PromptPlan:
        combined = combine_inputs(
            text=analysis_input.text_input,
            image_data=analysis_input.image_data,
            audio_data=analysis_input.audio_data,
            video_data=analysis_input.video_data,
        )
        parts = combined.prompt_parts + [TextPart(contextual_instructions(analysis_input.context))]
        return PromptPlan(parts=parts, input_types=combined.input_types)

    def enrich(self, result: HealthActivityResult, analysis_input: AnalysisInput,
               plan: PromptPlan) -> HealthActivityResult:
        context = analysis_input.context
        stamp_timestamp(result, context)
        append_tags(result, goal_tags(context.user_goals))
        append_tags(result, [f"source:{input_type}" for input_type in plan.input_types])
        if len(plan.input_types) > 1:
            append_tags(result, ["analysis:multimodal"])
        append_tags(result, [processed_tag()])
        return result
