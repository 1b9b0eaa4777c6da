"""Bounded per-source log buffer.

// [LAW:one-source-of-truth] The deque is the only copy of a source's entries.
// [LAW:single-enforcer] Capacity validation happens in validate_capacity() only.
"""

import itertools
from collections import deque
from dataclasses import dataclass
from typing import Iterator, Literal

from logconsole.core.entries import LogEntry
from logconsole.core.errors import InvalidArgument
from logconsole.core.signals import Signal


ChangeKind = Literal["append", "clear", "trim"]


@dataclass(frozen=True)
class ChangeEvent:
    """One buffer mutation, as seen by listeners."""

    source: str | None
    version: int
    kind: ChangeKind
    evicted: int = 0


def validate_capacity(n) -> int:
    # bool is an int subclass but never a meaningful capacity
    if isinstance(n, bool) or not isinstance(n, int):
        raise InvalidArgument(f"capacity must be an integer, got {n!r}")
    if n < 0:
        raise InvalidArgument(f"capacity must be >= 0, got {n}")
    return n


class EntryView:
    """Lazy, restartable view over a range of a buffer.

    Each iteration reads the buffer as it is at that moment; iterating never
    mutates anything.
    """

    __slots__ = ("_buffer", "_start", "_stop")

    def __init__(self, buffer: "LogBuffer", start: int = 0, stop: int | None = None) -> None:
        self._buffer = buffer
        self._start = start
        self._stop = stop

    def _bounds(self) -> tuple[int, int]:
        start, stop, _ = slice(self._start, self._stop).indices(len(self._buffer._entries))
        return start, max(start, stop)

    def __iter__(self) -> Iterator[LogEntry]:
        start, stop = self._bounds()
        return itertools.islice(iter(self._buffer._entries), start, stop)

    def __len__(self) -> int:
        start, stop = self._bounds()
        return stop - start

    def __bool__(self) -> bool:
        return len(self) > 0

    def __repr__(self) -> str:
        return f"EntryView(source={self._buffer.source!r}, start={self._start}, stop={self._stop})"


class LogBuffer:
    """Ordered, bounded sequence of entries for one source.

    version increases on every append and clear, and on set_capacity only
    when entries were actually evicted.
    """

    def __init__(self, source: str | None, max_length: int) -> None:
        self.source = source
        self._entries: deque[LogEntry] = deque(maxlen=validate_capacity(max_length))
        self._version = 0
        self.changed = Signal()

    @property
    def version(self) -> int:
        return self._version

    @property
    def max_length(self) -> int:
        return self._entries.maxlen

    @property
    def entries(self) -> tuple[LogEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def last(self) -> LogEntry | None:
        return self._entries[-1] if self._entries else None

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(self.read())

    def append(self, entry: LogEntry) -> None:
        # deque(maxlen=...) drops the oldest entry in the same step as the insert
        evicted = 1 if len(self._entries) == self._entries.maxlen else 0
        self._entries.append(entry)
        self._version += 1
        self.changed.emit(ChangeEvent(self.source, self._version, "append", evicted))

    def clear(self) -> None:
        self._entries.clear()
        self._version += 1
        self.changed.emit(ChangeEvent(self.source, self._version, "clear"))

    def set_capacity(self, n: int) -> None:
        n = validate_capacity(n)
        if n == self._entries.maxlen:
            return
        evicted = max(0, len(self._entries) - n)
        self._entries = deque(self._entries, maxlen=n)
        if evicted:
            self._version += 1
            self.changed.emit(ChangeEvent(self.source, self._version, "trim", evicted))

    def read(self, start: int = 0, stop: int | None = None) -> EntryView:
        return EntryView(self, start, stop)

    def __repr__(self) -> str:
        return f"LogBuffer(source={self.source!r}, len={len(self)}, max_length={self.max_length}, version={self._version})"
