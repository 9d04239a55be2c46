# server-sent events framing and sinks for streaming generation
import json
import queue
import time
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, TYPE_CHECKING

from .errors import AppError, GENERIC_INTERNAL_MESSAGE
from .events import (
    EventType, GenerationEvent, create_complete_event, create_error_event,
)
from .models import GenerationResult

if TYPE_CHECKING:
    from .processing_service import CurriculumService

logger = logging.getLogger(__name__)

# comment frame sent as soon as the stream opens
SSE_PREAMBLE = ": connected\n\n"

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


# frame one event as "event: <type>" plus a json data line, blank line terminated
def format_sse(event: GenerationEvent) -> str:
    payload = event.data.model_dump(mode="json", by_alias=True, exclude_none=True)
    return f"event: {event.type.value}\ndata: {json.dumps(payload, ensure_ascii=False)}\n\n"


class EventSink(ABC):
    """Receives generation events in emission order"""

    @abstractmethod
    def on(self, event: GenerationEvent) -> None:
        ...


# adapts the sink onto separate progress and fragment callbacks
class CallbackSink(EventSink):
    def __init__(self, on_progress: Optional[Callable[[str, str, Optional[Dict[str, Any]]], None]] = None,
                 on_fragment: Optional[Callable[[str, int], None]] = None):
        self.on_progress = on_progress
        self.on_fragment = on_fragment

    def on(self, event: GenerationEvent) -> None:
        if event.type is EventType.PROGRESS and self.on_progress:
            data = event.data
            self.on_progress(data.status.value, data.message, data.metadata)
        elif event.type is EventType.CHUNK and self.on_fragment:
            self.on_fragment(event.data.chunk, event.data.chunk_index)


# raised into the producer once the consumer of a stream has gone away
class StreamClosed(Exception):
    pass


class QueueEventSink(EventSink):
    """Frames events onto a queue drained by the http response.

    Once closed (the client went away) the next event raises StreamClosed so
    the producer stops pulling fragments and unwinds.
    """

    END = None

    def __init__(self):
        self.frames: "queue.Queue[Optional[str]]" = queue.Queue()
        self.closed = False

    def on(self, event: GenerationEvent) -> None:
        if self.closed:
            raise StreamClosed()
        self.frames.put(format_sse(event))

    def end(self) -> None:
        self.frames.put(self.END)

    def close(self) -> None:
        self.closed = True

    def next_frame(self) -> Optional[str]:
        return self.frames.get()


# deliver the final event, a consumer that already left is not an error
def _emit_terminal(sink: EventSink, event: GenerationEvent) -> None:
    try:
        sink.on(event)
    except StreamClosed:
        logger.info(f"Stream closed before the {event.type.value} event was delivered")


# run the streaming pipeline and finish with exactly one complete or error event
def run_to_sink(service: "CurriculumService", document_bytes: bytes, sink: EventSink,
                provider_name: Optional[str] = None) -> Optional[GenerationResult]:
    start_time = time.monotonic()
    try:
        result = service.run_streaming(document_bytes, sink, provider_name)
    except StreamClosed:
        logger.info("Stream closed by the client, generation aborted")
        return None
    except AppError as e:
        logger.warning(f"Streaming generation failed: {e.code} - {e.message}")
        _emit_terminal(sink, create_error_event(e.code, e.public_message))
        return None
    except Exception as e:
        logger.error(f"Unexpected error during streaming generation: {str(e)}", exc_info=True)
        _emit_terminal(sink, create_error_event("INTERNAL_ERROR", GENERIC_INTERNAL_MESSAGE))
        return None

    elapsed_ms = int((time.monotonic() - start_time) * 1000)
    _emit_terminal(sink, create_complete_event(result.curriculum, result.provider_name, elapsed_ms))
    return result
