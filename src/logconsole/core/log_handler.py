"""stdlib logging bridge into the logger registry.

Producers log normally and name the source through ``extra``:

    logger.info("kernel restarted", extra={"log_source": "notes.md"})

The handler must run on the thread that owns the registry (the UI event
loop); producers on other threads hop over with App.call_from_thread first.
"""

import logging
from datetime import datetime

from logconsole.core.entries import LogLevel, text_entry
from logconsole.core.registry import LoggerRegistry

SOURCE_ATTR = "log_source"


def level_for(levelno: int) -> LogLevel:
    if levelno >= logging.ERROR:
        return LogLevel.ERROR
    if levelno >= logging.WARNING:
        return LogLevel.WARNING
    if levelno >= logging.INFO:
        return LogLevel.INFO
    if levelno >= logging.DEBUG:
        return LogLevel.DEBUG
    return LogLevel.UNSET


class LoggerRegistryHandler(logging.Handler):
    """Appends each record as a text entry to the record's source log."""

    def __init__(
        self,
        registry: LoggerRegistry,
        *,
        default_source: str | None = None,
        level: int = logging.NOTSET,
    ) -> None:
        super().__init__(level)
        self._registry = registry
        self._default_source = default_source
        self.setFormatter(logging.Formatter("%(message)s"))

    def source_for(self, record: logging.LogRecord) -> str | None:
        return getattr(record, SOURCE_ATTR, self._default_source)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry = text_entry(
                self.format(record),
                level_for(record.levelno),
                timestamp=datetime.fromtimestamp(record.created),
            )
            self._registry.log(self.source_for(record), entry)
        except Exception:
            self.handleError(record)
