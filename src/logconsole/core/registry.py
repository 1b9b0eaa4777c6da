"""Logger registry: source -> LogBuffer multiplexer.

// [LAW:one-source-of-truth] This module is the single owner of
//   source -> buffer mapping and of the shared capacity.
// [LAW:single-enforcer] Registry-wide change notification is relayed here only.
"""

import logging
from typing import Iterator

from logconsole.core.entries import LogEntry
from logconsole.core.log_buffer import ChangeEvent, LogBuffer, validate_capacity
from logconsole.core.signals import Signal

logger = logging.getLogger(__name__)

DEFAULT_MAX_LENGTH = 1000


class LoggerRegistry:
    """Lazily creates one bounded buffer per source and never removes it.

    Memory is bounded by distinct sources seen times max_length.
    """

    def __init__(self, max_length: int = DEFAULT_MAX_LENGTH) -> None:
        self._max_length = validate_capacity(max_length)
        self._loggers: dict[str | None, LogBuffer] = {}
        # Every mutation of every buffer, in mutation order.
        self.changed = Signal()

    @property
    def max_length(self) -> int:
        return self._max_length

    @max_length.setter
    def max_length(self, n: int) -> None:
        self.set_max_length(n)

    def set_max_length(self, n: int) -> None:
        n = validate_capacity(n)
        if n == self._max_length:
            return
        logger.debug("max_length %d -> %d across %d loggers", self._max_length, n, len(self._loggers))
        self._max_length = n
        for buf in tuple(self._loggers.values()):
            buf.set_capacity(n)

    def get_logger(self, source: str | None) -> LogBuffer:
        buf = self._loggers.get(source)
        if buf is not None:
            return buf
        buf = LogBuffer(source, self._max_length)
        # Relay is the buffer's first listener, so registry-wide listeners
        # observe a change before per-source subscribers do.
        buf.changed.connect(self._relay)
        self._loggers[source] = buf
        logger.debug("created logger for source %r", source)
        return buf

    def log(self, source: str | None, entry: LogEntry) -> None:
        self.get_logger(source).append(entry)

    def clear(self, source: str | None) -> None:
        self.get_logger(source).clear()

    def has_logger(self, source: str | None) -> bool:
        return source in self._loggers

    def sources(self) -> list[str | None]:
        return list(self._loggers)

    def loggers(self) -> Iterator[LogBuffer]:
        return iter(tuple(self._loggers.values()))

    def _relay(self, event: ChangeEvent) -> None:
        self.changed.emit(event)

    def __len__(self) -> int:
        return len(self._loggers)
