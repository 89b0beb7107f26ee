"""
Analysis Orchestrator - dispatches an analysis request to the flow for its type.
"""

import logging
from typing import Dict, Optional

from ..models import AnalysisInput, AnalysisType, HealthActivityResult
from ..services.model_invoker import ModelInvoker
from .audio_flow import AudioAnalysisFlow
from .base_flow import AnalysisFlow
from .full_flow import FullAnalysisFlow
from .image_flow import ImageAnalysisFlow
from .quick_flow import QuickTextFlow

logger = logging.getLogger(__name__)


class AnalysisOrchestrator:
    """
    Holds one flow per analysis type, all sharing the same injected model invoker.
    Flows are stateless between runs, so a single orchestrator serves concurrent requests.
    """

    def __init__(self, invoker: ModelInvoker, transcriber=None):
        """
        Args:
            invoker: Configured model invoker shared by every flow
            transcriber: Optional audio transcriber; defaults to transcribing with the model
        """
        self.invoker = invoker
        self.flows: Dict[AnalysisType, AnalysisFlow] = {
            AnalysisType.FULL: FullAnalysisFlow(invoker),
            AnalysisType.QUICK: QuickTextFlow(invoker),
            AnalysisType.IMAGE: ImageAnalysisFlow(invoker),
            AnalysisType.AUDIO: AudioAnalysisFlow(invoker, transcriber),
        }

    def flow_for(self, analysis_type: AnalysisType) -> AnalysisFlow:
        flow: Optional[AnalysisFlow] = self.flows.get(AnalysisType(analysis_type))
        if flow is None:
            raise ValueError(f"No flow registered for analysis type: {analysis_type}")
        return flow

    async def analyze(self, analysis_type: AnalysisType,
                      analysis_input: AnalysisInput) -> HealthActivityResult:
        flow = self.flow_for(analysis_type)
        logger.debug(f"Dispatching {flow.analysis_type} analysis for user {analysis_input.context.user_id}")
        return await flow.run(analysis_input)
