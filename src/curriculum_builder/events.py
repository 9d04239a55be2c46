# typed events exchanged during streaming generation
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import Field

from .models import Curriculum, WireModel


class EventType(str, Enum):
    PROGRESS = "progress"
    CHUNK = "chunk"
    COMPLETE = "complete"
    ERROR = "error"
    PING = "ping"  # keep-alive, defined but not scheduled


# checkpoints of the streaming pipeline, in emission order
class ProgressStatus(str, Enum):
    STARTED = "started"
    PARSING_PDF = "parsing_pdf"
    PDF_PARSED = "pdf_parsed"
    GENERATING_CURRICULUM = "generating_curriculum"
    AI_PROCESSING = "ai_processing"
    PARSING_RESPONSE = "parsing_response"
    COMPLETED = "completed"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ProgressData(WireModel):
    status: ProgressStatus
    message: str
    metadata: Optional[Dict[str, Any]] = None


class ChunkData(WireModel):
    chunk: str
    chunk_index: int


class CompleteData(WireModel):
    curriculum: Curriculum
    provider_name: str
    elapsed_ms: int


class ErrorData(WireModel):
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None


class PingData(WireModel):
    timestamp: str


EventData = Union[ProgressData, ChunkData, CompleteData, ErrorData, PingData]


class GenerationEvent(WireModel):
    type: EventType
    data: EventData
    timestamp: str = Field(default_factory=_now)

    @property
    def is_terminal(self) -> bool:
        return self.type in (EventType.COMPLETE, EventType.ERROR)


def create_progress_event(status: ProgressStatus, message: str,
                          metadata: Optional[Dict[str, Any]] = None) -> GenerationEvent:
    return GenerationEvent(
        type=EventType.PROGRESS,
        data=ProgressData(status=status, message=message, metadata=metadata),
    )


def create_chunk_event(chunk: str, chunk_index: int) -> GenerationEvent:
    return GenerationEvent(type=EventType.CHUNK, data=ChunkData(chunk=chunk, chunk_index=chunk_index))


def create_complete_event(curriculum: Curriculum, provider_name: str, elapsed_ms: int) -> GenerationEvent:
    return GenerationEvent(
        type=EventType.COMPLETE,
        data=CompleteData(curriculum=curriculum, provider_name=provider_name, elapsed_ms=elapsed_ms),
    )


def create_error_event(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> GenerationEvent:
    return GenerationEvent(type=EventType.ERROR, data=ErrorData(code=code, message=message, details=details))


def create_ping_event() -> GenerationEvent:
    return GenerationEvent(type=EventType.PING, data=PingData(timestamp=_now()))
