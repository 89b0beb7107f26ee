"""
Base Analysis Flow - the shared pipeline every analysis type runs through.

validating-input -> building-prompt -> invoking-model -> enriching-result -> done,
with any stage allowed to fail. Subclasses supply the precondition check,
the prompt assembly and the enrichment step.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..core.errors import AnalysisError
from ..core.logging_config import FlowLogger
from ..models import AnalysisInput, HealthActivityResult
from ..services.media import PromptPart
from ..services.model_invoker import ModelInvoker

logger = logging.getLogger(__name__)


class FlowState(str, Enum):
    VALIDATING_INPUT = "validating-input"
    BUILDING_PROMPT = "building-prompt"
    INVOKING_MODEL = "invoking-model"
    ENRICHING_RESULT = "enriching-result"
    DONE = "done"
    FAILED = "failed"


@dataclass
class PromptPlan:
    """What a flow decided to send to the model, plus facts enrichment needs later."""
    parts: List[PromptPart]
    input_types: List[str] = field(default_factory=list)
    hint: Optional[str] = None
    transcript: Optional[str] = None


@dataclass
class FlowRun:
    """State of one flow invocation; never shared between requests."""
    analysis_type: str
    state: FlowState = FlowState.VALIDATING_INPUT
    history: List[FlowState] = field(default_factory=lambda: [FlowState.VALIDATING_INPUT])
    started_at: float = field(default_factory=time.time)

    def advance(self, state: FlowState) -> None:
        self.state = state
        self.history.append(state)

    @property
    def elapsed_ms(self) -> float:
        return (time.time() - self.started_at) * 1000


class AnalysisFlow(ABC):
    """
    Abstract analysis flow. Each concrete flow is one entry point
    (full, quick, image, audio) over the same model invoker.
    """

    analysis_type: str = ""

    def __init__(self, invoker: ModelInvoker):
        self.invoker = invoker

    @abstractmethod
    def check_input(self, analysis_input: AnalysisInput) -> None:
        """Raise InputShapeError / MediaValidationError when the input cannot be analyzed."""

    @abstractmethod
    async def build_prompt(self, analysis_input: AnalysisInput, run: FlowRun) -> PromptPlan:
        """Assemble the prompt parts for the structured model call."""

    @abstractmethod
    def enrich(self, result: HealthActivityResult, analysis_input: AnalysisInput,
               plan: PromptPlan) -> HealthActivityResult:
        """Apply tags/notes/timestamp to the validated model output. Runs once per invocation."""

    async def run(self, analysis_input: AnalysisInput) -> HealthActivityResult:
        """
        Execute the flow.

        Raises:
            AnalysisError: the first failure of any stage; no partial result is returned
        """
        run = FlowRun(analysis_type=self.analysis_type)
        log = FlowLogger(logger, {
            "user_id": analysis_input.context.user_id,
            "analysis_type": self.analysis_type,
        })
        log.info(f"Starting {self.analysis_type} analysis")

        try:
            self.check_input(analysis_input)

            run.advance(FlowState.BUILDING_PROMPT)
            plan = await self.build_prompt(analysis_input, run)
            log.debug(f"Prompt built: {len(plan.parts)} parts, input_types={plan.input_types}")

            run.advance(FlowState.INVOKING_MODEL)
            result = await self.invoker.generate_structured(plan.parts, HealthActivityResult)

            run.advance(FlowState.ENRICHING_RESULT)
            result = self.enrich(result, analysis_input, plan)

            run.advance(FlowState.DONE)
        except AnalysisError as e:
            failed_in = run.state
            run.advance(FlowState.FAILED)
            log.warning(
                f"{self.analysis_type} analysis failed during {failed_in.value}: {e.message}",
                extra={"extra_fields": {"failed_state": failed_in.value, "code": e.code}}
            )
            raise

        log.info(
            f"Completed {self.analysis_type} analysis: activity={result.activity_type.value}",
            extra={"extra_fields": {
                "duration_ms": round(run.elapsed_ms, 2),
                "confidence": result.confidence,
                "tag_count": len(result.tags),
            }}
        )
        return result
