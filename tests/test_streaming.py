"""Tests for SSE framing, sinks and the terminal event driver."""

import json

import pytest

from conftest import FakeLLMService
from curriculum_builder.errors import ClientInputError, GenerationFailure, InternalError
from curriculum_builder.events import (
    EventType, ProgressStatus, create_chunk_event, create_error_event, create_ping_event, create_progress_event,
)
from curriculum_builder.models import GenerationResult
from curriculum_builder.processing_service import CurriculumService
from curriculum_builder.providers import OllamaProvider
from curriculum_builder.streaming import (
    CallbackSink, QueueEventSink, SSE_PREAMBLE, StreamClosed, format_sse, run_to_sink,
)


def parse_frame(frame):
    event_line, data_line = frame.rstrip("\n").split("\n")
    assert event_line.startswith("event: ")
    assert data_line.startswith("data: ")
    return event_line[len("event: "):], json.loads(data_line[len("data: "):])


class ListSink:
    def __init__(self):
        self.events = []

    def on(self, event):
        self.events.append(event)


class DisconnectingLLMService(FakeLLMService):
    """Closes the sink part way through a long answer and counts pulls."""

    def __init__(self, sink, close_at, total):
        super().__init__([])
        self.sink = sink
        self.close_at = close_at
        self.total = total
        self.pulled = 0

    def stream_text(self, prompt):
        for index in range(self.total):
            self.pulled += 1
            if index == self.close_at:
                self.sink.close()
            yield "{"


class StubRegistry:
    def __init__(self, provider):
        self.provider = provider

    def resolve(self, name=None):
        return self.provider


def drain(sink):
    frames = []
    while not sink.frames.empty():
        frames.append(sink.frames.get_nowait())
    return frames


class FailingService:
    def __init__(self, error):
        self.error = error

    def run_streaming(self, document_bytes, sink, provider_name=None):
        raise self.error


class TestFormatSse:
    def test_progress_frame(self):
        frame = format_sse(create_progress_event(ProgressStatus.PDF_PARSED, "PDF parsed", {"contentLength": 12}))

        assert frame.endswith("\n\n")
        event_type, data = parse_frame(frame)
        assert event_type == "progress"
        assert data == {"status": "pdf_parsed", "message": "PDF parsed", "metadata": {"contentLength": 12}}

    def test_chunk_frame_uses_camel_case(self):
        event_type, data = parse_frame(format_sse(create_chunk_event('{"ti', 3)))
        assert event_type == "chunk"
        assert data == {"chunk": '{"ti', "chunkIndex": 3}

    def test_multiline_chunk_stays_on_one_data_line(self):
        frame = format_sse(create_chunk_event("line one\nline two", 0))
        assert frame.count("\n") == 3

    def test_error_frame_omits_empty_details(self):
        _, data = parse_frame(format_sse(create_error_event("EMPTY_PDF", "empty")))
        assert data == {"code": "EMPTY_PDF", "message": "empty"}

    def test_ping_frame(self):
        event_type, data = parse_frame(format_sse(create_ping_event()))
        assert event_type == "ping"
        assert "timestamp" in data

    def test_preamble_is_a_comment_frame(self):
        assert SSE_PREAMBLE.startswith(":")
        assert SSE_PREAMBLE.endswith("\n\n")


class TestRunToSink:
    def test_success_ends_with_single_complete_event(self, registry):
        sink = ListSink()
        service = CurriculumService(registry=registry, extractor=lambda _data: "Module 1 - A\nTopic 1.1 - B")

        result = run_to_sink(service, b"%PDF", sink)

        assert isinstance(result, GenerationResult)
        terminal = [e for e in sink.events if e.is_terminal]
        assert terminal == [sink.events[-1]]
        complete = sink.events[-1]
        assert complete.type is EventType.COMPLETE
        assert complete.data.provider_name == "mock"
        assert complete.data.curriculum == result.curriculum
        assert complete.data.elapsed_ms >= 0
        assert sink.events[0].data.status is ProgressStatus.STARTED

    def test_app_error_becomes_error_event(self):
        sink = ListSink()
        error = ClientInputError("Uploaded file is empty.", "EMPTY_FILE")

        assert run_to_sink(FailingService(error), b"", sink) is None
        assert len(sink.events) == 1
        assert sink.events[0].type is EventType.ERROR
        assert sink.events[0].data.code == "EMPTY_FILE"
        assert sink.events[0].data.message == "Uploaded file is empty."

    @pytest.mark.parametrize("error", [KeyError("secret"), InternalError("db password leaked")])
    def test_unexpected_errors_are_masked(self, error):
        sink = ListSink()
        run_to_sink(FailingService(error), b"", sink)

        data = sink.events[-1].data
        assert data.code == "INTERNAL_ERROR"
        assert "secret" not in data.message and "password" not in data.message

    def test_malformed_document_code_is_preserved(self, registry, blank_pdf):
        sink = ListSink()
        run_to_sink(CurriculumService(registry=registry), blank_pdf, sink)

        assert sink.events[-1].type is EventType.ERROR
        assert sink.events[-1].data.code == "EMPTY_PDF"
        assert not any(e.type is EventType.COMPLETE for e in sink.events)

    def test_client_disconnect_stops_pulling_fragments(self):
        sink = QueueEventSink()
        llm = DisconnectingLLMService(sink, close_at=2, total=99)
        service = CurriculumService(registry=StubRegistry(OllamaProvider(llm)), extractor=lambda _data: "doc")

        assert run_to_sink(service, b"%PDF", sink) is None

        assert llm.pulled == 3
        event_types = [parse_frame(frame)[0] for frame in drain(sink)]
        assert "complete" not in event_types
        assert "error" not in event_types

    def test_terminal_event_after_close_is_dropped(self):
        sink = QueueEventSink()
        sink.close()

        assert run_to_sink(FailingService(GenerationFailure()), b"", sink) is None
        assert drain(sink) == []


class TestQueueEventSink:
    def test_frames_then_end(self):
        sink = QueueEventSink()
        sink.on(create_chunk_event("a", 0))
        sink.end()

        assert parse_frame(sink.next_frame())[0] == "chunk"
        assert sink.next_frame() is QueueEventSink.END

    def test_events_after_close_raise(self):
        sink = QueueEventSink()
        sink.close()
        with pytest.raises(StreamClosed):
            sink.on(create_chunk_event("a", 0))
        sink.end()

        assert sink.next_frame() is QueueEventSink.END


def test_callback_sink_splits_progress_and_fragments():
    progress, fragments = [], []
    sink = CallbackSink(
        on_progress=lambda status, message, metadata: progress.append((status, message, metadata)),
        on_fragment=lambda text, index: fragments.append((text, index)),
    )
    sink.on(create_progress_event(ProgressStatus.STARTED, "go"))
    sink.on(create_chunk_event("abc", 0))
    sink.on(create_error_event("X", "ignored"))

    assert progress == [("started", "go", None)]
    assert fragments == [("abc", 0)]
