"""
Quick Text Flow - a single text prompt specialised by a keyword activity hint.
"""

from ..core.errors import InputShapeError
from ..models import AnalysisInput, HealthActivityResult
from ..services.media import TextPart
from ..services.prompts import activity_hint, quick_prompt
from .base_flow import AnalysisFlow, FlowRun, PromptPlan
from .enrichment import append_tags, stamp_timestamp


class QuickTextFlow(AnalysisFlow):
    analysis_type = "quick"

    def check_input(self, analysis_input: AnalysisInput) -> None:
        if not analysis_input.has_text():
            raise InputShapeError("MISSING_TEXT_INPUT", "Text input is required for quick analysis")

    async def build_prompt(self, analysis_input: AnalysisInput, run: FlowRun) -> PromptPlan:
        text = analysis_input.text_input or ""
        hint = activity_hint(text)
        prompt = quick_prompt(text, hint, analysis_input.context)
        return PromptPlan(parts=[TextPart(prompt)], input_types=["text"], hint=hint)

    def enrich(self, result: HealthActivityResult, analysis_input: AnalysisInput,
               plan: PromptPlan) -> HealthActivityResult:
        stamp_timestamp(result, analysis_input.context)
        append_tags(result, ["analysis:quick", "source:text"])
        if plan.hint:
            append_tags(result, [f"detected:{plan.hint}"])
        return result
