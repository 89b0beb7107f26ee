"""Flows module - the analysis pipelines behind POST /analyze plus the coaching flows."""

from .base_flow import AnalysisFlow, FlowState, FlowRun, PromptPlan
from .full_flow import FullAnalysisFlow
from .quick_flow import QuickTextFlow
from .image_flow import ImageAnalysisFlow
from .audio_flow import AudioAnalysisFlow
from .orchestrator import AnalysisOrchestrator
from .insights_flow import InsightsFlow
from .suggestions_flow import SuggestionsFlow, resolve_time_context

__all__ = [
    'AnalysisFlow',
    'FlowState',
    'FlowRun',
    'PromptPlan',
    'FullAnalysisFlow',
    'QuickTextFlow',
    'ImageAnalysisFlow',
    'AudioAnalysisFlow',
    'AnalysisOrchestrator',
    'InsightsFlow',
    'SuggestionsFlow',
    'resolve_time_context',
]
