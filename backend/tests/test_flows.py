"""
Unit tests for the analysis flows, enrichment and orchestrator.
"""

from datetime import datetime, timedelta, timezone

import pytest

from fitally.core.errors import InputShapeError, MediaValidationError, ModelFailure, TranscriptionFailure
from fitally.flows import (
    AnalysisOrchestrator,
    AudioAnalysisFlow,
    FlowState,
    FullAnalysisFlow,
    ImageAnalysisFlow,
    QuickTextFlow,
)
from fitally.flows.base_flow import FlowRun
from fitally.flows.enrichment import (
    append_tags,
    attach_transcript,
    goal_slug,
    goal_tags,
    processed_tag,
    utc_timestamp,
)
from fitally.models import AnalysisType, HealthActivityResult, MediaPayload
from fitally.services.model_invoker import ModelInvoker
from fitally.services.prompts import NO_TEXT_PLACEHOLDER, TRANSCRIPTION_INSTRUCTION

from conftest import CONTEXT_TIMESTAMP, FakeProvider, model_result


def _invoker(*responses, error=None):
    provider = FakeProvider(list(responses), error=error)
    return ModelInvoker(provider), provider


def _user_blocks(call):
    """Content blocks of the user message sent in a structured or text call."""
    return call["messages"][-1].content


class TestEnrichment:

    @pytest.mark.parametrize("goal,slug", [
        ("Lose Weight", "lose_weight"),
        ("build  muscle", "build_muscle"),
        ("Run\ta Marathon", "run_a_marathon"),
    ])
    def test_goal_slug(self, goal, slug):
        assert goal_slug(goal) == slug

    def test_goal_tags_none(self):
        assert goal_tags(None) == []

    def test_processed_tag_uses_z_suffix(self):
        now = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
        assert processed_tag(now) == "processed:2024-05-01T12:30:00.000Z"

    def test_processed_tag_has_millisecond_precision(self):
        now = datetime(2024, 5, 1, 12, 30, 5, 123456, tzinfo=timezone.utc)
        assert processed_tag(now) == "processed:2024-05-01T12:30:05.123Z"

    def test_utc_timestamp_converts_offsets(self):
        now = datetime(2024, 5, 1, 14, 30, tzinfo=timezone(timedelta(hours=2)))
        assert utc_timestamp(now) == "2024-05-01T12:30:00.000Z"

    def test_append_tags_skips_duplicates(self):
        result = HealthActivityResult.model_validate(model_result(tags=["source:text"]))
        append_tags(result, ["source:text", "analysis:quick", "analysis:quick"])
        assert result.tags == ["source:text", "analysis:quick"]

    def test_attach_transcript(self):
        result = HealthActivityResult.model_validate(model_result())
        attach_transcript(result, "hello")
        assert result.notes == 'Transcribed Audio: "hello"'

        result = HealthActivityResult.model_validate(model_result(notes="Good pace"))
        attach_transcript(result, "hello")
        assert result.notes == 'Good pace\n\nTranscribed Audio: "hello"'


class TestFlowRun:

    def test_state_history(self):
        run = FlowRun(analysis_type="quick")
        run.advance(FlowState.BUILDING_PROMPT)
        run.advance(FlowState.FAILED)
        assert run.state == FlowState.FAILED
        assert run.history == [FlowState.VALIDATING_INPUT, FlowState.BUILDING_PROMPT, FlowState.FAILED]
        assert run.elapsed_ms >= 0


class TestQuickTextFlow:

    @pytest.mark.asyncio
    async def test_tags_and_timestamp(self, make_input):
        invoker, provider = _invoker(model_result())
        result = await QuickTextFlow(invoker).run(make_input(text_input="Ran 5k in 25 minutes"))

        assert result.timestamp == CONTEXT_TIMESTAMP
        assert result.tags == ["morning", "analysis:quick", "source:text", "detected:cardio"]
        assert len(provider.calls) == 1
        blocks = _user_blocks(provider.calls[0])
        assert len(blocks) == 1
        assert blocks[0]["text"].startswith("Ran 5k in 25 minutes")

    @pytest.mark.asyncio
    async def test_no_hint_no_detected_tag(self, make_input):
        invoker, _ = _invoker(model_result(tags=[]))
        result = await QuickTextFlow(invoker).run(make_input(text_input="Slept eight hours"))
        assert result.tags == ["analysis:quick", "source:text"]

    @pytest.mark.asyncio
    async def test_model_tag_not_duplicated(self, make_input):
        invoker, _ = _invoker(model_result(tags=["source:text"]))
        result = await QuickTextFlow(invoker).run(make_input(text_input="Had a meal"))
        assert result.tags.count("source:text") == 1

    @pytest.mark.asyncio
    async def test_blank_text_rejected_before_model(self, make_input):
        invoker, provider = _invoker(model_result())
        with pytest.raises(InputShapeError) as exc_info:
            await QuickTextFlow(invoker).run(make_input(text_input="   "))
        assert exc_info.value.code == "MISSING_TEXT_INPUT"
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_model_failure_propagates(self, make_input):
        invoker, _ = _invoker("not json at all")
        with pytest.raises(ModelFailure) as exc_info:
            await QuickTextFlow(invoker).run(make_input(text_input="Ran 5k"))
        assert exc_info.value.reason == ModelFailure.SCHEMA_VIOLATION


class TestFullAnalysisFlow:

    @pytest.mark.asyncio
    async def test_multimodal_tags(self, make_input, rich_context, image_payload):
        invoker, provider = _invoker(model_result(tags=[]))
        analysis_input = make_input(text_input="Lunch", image_data=image_payload, context=rich_context)

        result = await FullAnalysisFlow(invoker).run(analysis_input)

        assert result.tags[:5] == [
            "goal:lose_weight",
            "goal:build_muscle",
            "source:text",
            "source:image",
            "analysis:multimodal",
        ]
        assert result.tags[5].startswith("processed:")
        assert result.tags[5].endswith("Z")
        assert result.timestamp == CONTEXT_TIMESTAMP

        blocks = _user_blocks(provider.calls[0])
        assert [b["type"] for b in blocks] == ["text", "image_url", "text"]
        assert "- User ID: u1" in blocks[-1]["text"]

    @pytest.mark.asyncio
    async def test_single_input_not_multimodal(self, make_input):
        invoker, _ = _invoker(model_result(tags=[]))
        result = await FullAnalysisFlow(invoker).run(make_input(text_input="Ran 5k"))
        assert "analysis:multimodal" not in result.tags
        assert result.tags[0] == "source:text"

    @pytest.mark.asyncio
    async def test_nothing_supplied(self, make_input):
        invoker, provider = _invoker()
        with pytest.raises(InputShapeError) as exc_info:
            await FullAnalysisFlow(invoker).run(make_input(text_input=""))
        assert exc_info.value.code == "NO_INPUT_PROVIDED"
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_invalid_video(self, make_input):
        invoker, provider = _invoker()
        video = MediaPayload(base64="AAAA", mime_type="video/x-flv")
        with pytest.raises(MediaValidationError) as exc_info:
            await FullAnalysisFlow(invoker).run(make_input(video_data=video))
        assert exc_info.value.code == "INVALID_VIDEO_DATA"
        assert provider.calls == []


class TestImageAnalysisFlow:

    @pytest.mark.asyncio
    async def test_prompt_and_tags(self, make_input, image_payload):
        invoker, provider = _invoker(model_result(activityType="meal", tags=[]))
        result = await ImageAnalysisFlow(invoker).run(make_input(image_data=image_payload))

        assert result.tags == ["analysis:visual", "source:image", "file:lunch.png", "format:image"]
        blocks = _user_blocks(provider.calls[0])
        assert blocks[0]["type"] == "image_url"
        assert blocks[2]["text"] == NO_TEXT_PLACEHOLDER

    @pytest.mark.asyncio
    async def test_without_filename(self, make_input, image_payload):
        invoker, provider = _invoker(model_result(tags=[]))
        image = image_payload.model_copy(update={"filename": None})
        result = await ImageAnalysisFlow(invoker).run(make_input(image_data=image, text_input="my lunch"))

        assert result.tags == ["analysis:visual", "source:image", "format:image"]
        assert _user_blocks(provider.calls[0])[2]["text"] == "my lunch"

    @pytest.mark.asyncio
    async def test_missing_image(self, make_input):
        invoker, provider = _invoker()
        with pytest.raises(InputShapeError) as exc_info:
            await ImageAnalysisFlow(invoker).run(make_input(text_input="lunch"))
        assert exc_info.value.code == "MISSING_IMAGE_DATA"
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_invalid_image(self, make_input):
        invoker, provider = _invoker()
        image = MediaPayload(base64="AAAA", mime_type="image/bmp")
        with pytest.raises(MediaValidationError) as exc_info:
            await ImageAnalysisFlow(invoker).run(make_input(image_data=image))
        assert exc_info.value.code == "INVALID_IMAGE_DATA"
        assert provider.calls == []


class TestAudioAnalysisFlow:

    @pytest.mark.asyncio
    async def test_two_stage_pipeline(self, make_input, audio_payload):
        invoker, provider = _invoker("I swam thirty laps", model_result(activityType="swimming", tags=[]))
        result = await AudioAnalysisFlow(invoker).run(make_input(audio_data=audio_payload))

        assert len(provider.calls) == 2
        transcription_blocks = _user_blocks(provider.calls[0])
        assert transcription_blocks[0]["type"] == "input_audio"
        assert transcription_blocks[1]["text"] == TRANSCRIPTION_INSTRUCTION
        assert provider.calls[0]["response_format"] is None

        analysis_blocks = _user_blocks(provider.calls[1])
        assert len(analysis_blocks) == 1
        assert analysis_blocks[0]["text"].startswith('Transcribed Audio Content: "I swam thirty laps"')

        assert result.tags == ["analysis:audio", "source:audio"]
        assert result.notes == 'Transcribed Audio: "I swam thirty laps"'
        assert result.timestamp == CONTEXT_TIMESTAMP

    @pytest.mark.asyncio
    async def test_empty_transcript_skips_analysis(self, make_input, audio_payload):
        invoker, provider = _invoker("", model_result())
        with pytest.raises(TranscriptionFailure) as exc_info:
            await AudioAnalysisFlow(invoker).run(make_input(audio_data=audio_payload))

        assert exc_info.value.code == "AI_PROCESSING_ERROR"
        assert exc_info.value.stage == "transcription"
        assert len(provider.calls) == 1

    @pytest.mark.asyncio
    async def test_transcription_provider_error(self, make_input, audio_payload):
        invoker, provider = _invoker(error=RuntimeError("unsupported audio"))
        with pytest.raises(TranscriptionFailure) as exc_info:
            await AudioAnalysisFlow(invoker).run(make_input(audio_data=audio_payload))
        assert exc_info.value.reason == ModelFailure.PROVIDER_ERROR
        assert len(provider.calls) == 1

    @pytest.mark.asyncio
    async def test_custom_transcriber(self, make_input, audio_payload):
        class StaticTranscriber:
            async def transcribe(self, payload):
                return "walked the dog"

        invoker, provider = _invoker(model_result(activityType="walking", tags=[]))
        flow = AudioAnalysisFlow(invoker, transcriber=StaticTranscriber())
        result = await flow.run(make_input(audio_data=audio_payload))

        assert len(provider.calls) == 1
        assert result.notes == 'Transcribed Audio: "walked the dog"'

    @pytest.mark.asyncio
    async def test_missing_audio(self, make_input):
        invoker, provider = _invoker()
        with pytest.raises(InputShapeError) as exc_info:
            await AudioAnalysisFlow(invoker).run(make_input(text_input="I swam"))
        assert exc_info.value.code == "MISSING_AUDIO_DATA"
        assert provider.calls == []


class TestAnalysisOrchestrator:

    def test_flow_registry(self):
        orchestrator = AnalysisOrchestrator(ModelInvoker(None))
        assert isinstance(orchestrator.flow_for(AnalysisType.FULL), FullAnalysisFlow)
        assert isinstance(orchestrator.flow_for(AnalysisType.QUICK), QuickTextFlow)
        assert isinstance(orchestrator.flow_for("image"), ImageAnalysisFlow)
        assert isinstance(orchestrator.flow_for(AnalysisType.AUDIO), AudioAnalysisFlow)

    def test_unknown_type(self):
        orchestrator = AnalysisOrchestrator(ModelInvoker(None))
        with pytest.raises(ValueError):
            orchestrator.flow_for("deep")

    @pytest.mark.asyncio
    async def test_dispatch(self, make_input):
        invoker, provider = _invoker(model_result())
        orchestrator = AnalysisOrchestrator(invoker)
        result = await orchestrator.analyze(AnalysisType.QUICK, make_input(text_input="yoga class"))
        assert "detected:yoga" in result.tags
        assert len(provider.calls) == 1
