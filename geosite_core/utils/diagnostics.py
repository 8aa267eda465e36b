"""
Structured diagnostics for the ingestion pipeline
Parsers and the fusion engine report row counts and dropped rows as events
instead of writing free text to the console
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


@dataclass
class DiagnosticEvent:
    """One structured pipeline event"""
    event: str
    fields: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return {'event': self.event, **self.fields}


class DiagnosticSink:
    """Receives pipeline events. Subclasses decide where they go."""

    def emit(self, event: str, **fields: Any) -> None:
        raise NotImplementedError


class LoggingDiagnosticSink(DiagnosticSink):
    """Default sink: forwards events to the standard logger with the fields attached"""

    def __init__(self, log: Optional[logging.Logger] = None, level: int = logging.DEBUG):
        self.log = log or logger
        self.level = level

    def emit(self, event: str, **fields: Any) -> None:
        summary = ", ".join(f"{k}={v}" for k, v in fields.items())
        self.log.log(self.level, f"{event}: {summary}",
                     extra={'event': event, 'fields': fields})


class CollectingDiagnosticSink(DiagnosticSink):
    """Keeps every event in memory, for tests and for callers that report counts"""

    def __init__(self):
        self.events: List[DiagnosticEvent] = []

    def emit(self, event: str, **fields: Any) -> None:
        self.events.append(DiagnosticEvent(event=event, fields=dict(fields)))

    def of_type(self, event: str, **match: Any) -> List[DiagnosticEvent]:
        return [e for e in self.events
                if e.event == event
                and all(e.fields.get(k) == v for k, v in match.items())]

    def count(self, event: str, **match: Any) -> int:
        return len(self.of_type(event, **match))

    def clear(self) -> None:
        self.events = []


def resolve_sink(diagnostics: Optional[DiagnosticSink]) -> DiagnosticSink:
    """Use the given sink, or the logging sink when none was injected"""
    return diagnostics if diagnostics is not None else LoggingDiagnosticSink()
