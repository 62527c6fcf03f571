"""Diagnostics emitted by the decoder.

The decoder never logs directly; it hands `DiagnosticEvent`s to a sink.
`LoggingSink` is the production sink and routes events to stdlib logging
with the event context as record extras, which `featurefile_logging`
formatters render.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol


class DiagnosticCode(str, Enum):
    EMPTY_SCHEMA = "empty_schema"
    HEADER_READ = "header_read"
    NO_FRAMES = "no_frames"
    UNSUPPORTED_TYPE = "unsupported_type"
    DECODE_SUMMARY = "decode_summary"
    DECODE_FAILED = "decode_failed"


@dataclass(frozen=True)
class DiagnosticEvent:
    code: DiagnosticCode
    level: int
    message: str
    context: Dict[str, Any] = field(default_factory=dict)
    error: Optional[BaseException] = None


class DiagnosticsSink(Protocol):
    def emit(self, event: DiagnosticEvent) -> None:
        ...


class LoggingSink:
    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("featurefile.decoder")

    def emit(self, event: DiagnosticEvent) -> None:
        extra = dict(event.context)
        extra["event"] = event.code.value
        self.logger.log(event.level, event.message, extra=extra, exc_info=event.error)


class RecordingSink:
    """Keeps every event in memory, in emission order."""

    def __init__(self):
        self.events: List[DiagnosticEvent] = []

    def emit(self, event: DiagnosticEvent) -> None:
        self.events.append(event)

    def codes(self) -> List[DiagnosticCode]:
        return [e.code for e in self.events]

    def clear(self) -> None:
        self.events.clear()

