"""Log entry value types.

// [LAW:one-source-of-truth] LogEntry is the only record type stored in buffers.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class LogLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    UNSET = "unset"


class ContentKind(str, Enum):
    TEXT = "text"
    MIME = "mime"


# Marker entries render as a horizontal rule titled with their timestamp.
MARKER_MIME = "application/vnd.logconsole.marker"


@dataclass(frozen=True)
class LogEntry:
    """One immutable log record.

    payload is a str for TEXT entries and a read-only mime bundle
    ({mime type: data}) for MIME entries.
    """

    payload: str | Mapping[str, str]
    kind: ContentKind = ContentKind.TEXT
    level: LogLevel = LogLevel.UNSET
    timestamp: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if self.kind is ContentKind.MIME and not isinstance(self.payload, MappingProxyType):
            object.__setattr__(self, "payload", MappingProxyType(dict(self.payload)))

    @property
    def text(self) -> str:
        """Best plain-text rendition, used by renderers without mime support."""
        if self.kind is ContentKind.TEXT:
            return str(self.payload)
        if "text/plain" in self.payload:
            return self.payload["text/plain"]
        if MARKER_MIME in self.payload:
            return f"--- {self.payload[MARKER_MIME]} ---"
        return next(iter(self.payload.values()), "")


def text_entry(message: str, level: LogLevel | str = LogLevel.UNSET, *, timestamp: datetime | None = None) -> LogEntry:
    return LogEntry(
        payload=message,
        kind=ContentKind.TEXT,
        level=LogLevel(level),
        timestamp=timestamp or datetime.now(),
    )


def mime_entry(bundle: Mapping[str, str], level: LogLevel | str = LogLevel.UNSET, *, timestamp: datetime | None = None) -> LogEntry:
    return LogEntry(
        payload=bundle,
        kind=ContentKind.MIME,
        level=LogLevel(level),
        timestamp=timestamp or datetime.now(),
    )


def marker_entry(timestamp: datetime | None = None) -> LogEntry:
    """Timestamp marker appended by the add-timestamp command."""
    ts = timestamp or datetime.now()
    return mime_entry({MARKER_MIME: ts.strftime("%H:%M:%S")}, timestamp=ts)
