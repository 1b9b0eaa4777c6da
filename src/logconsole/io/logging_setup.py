"""Runtime logging for the logconsole process.

Two channels share the `logconsole` logger tree:

- diagnostics from the package's own modules, and
- per-document records on SOURCES_LOGGER, which the workbench routes into
  the in-memory source logs. Those already show in the console, so only
  the loud ones are copied to the run log file.

// [LAW:single-enforcer] Logger handler wiring is enforced in this module only.
// [LAW:one-source-of-truth] Runtime log path/levels are derived here and returned to callers.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path

ROOT_LOGGER = "logconsole"
SOURCES_LOGGER = "logconsole.sources"

ENV_LEVEL = "LOGCONSOLE_LOG_LEVEL"
ENV_FILE = "LOGCONSOLE_LOG_FILE"
ENV_DIR = "LOGCONSOLE_LOG_DIR"
ENV_SOURCES_LEVEL = "LOGCONSOLE_SOURCES_FILE_LEVEL"

DEFAULT_LOG_DIR = "~/.local/share/logconsole/logs"
MAX_BYTES = 5 * 1024 * 1024
BACKUPS = 3

_FILE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
_STREAM_FORMAT = "%(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class LoggingRuntime:
    level_name: str
    level: int
    file_path: str
    # Source-channel records below this level stay out of the file.
    sources_level: int


_RUNTIME: LoggingRuntime | None = None


def _level_from_env(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip().upper()
    level = logging.getLevelName(raw) if raw else default
    # getLevelName returns "Level X" for unknown names
    return level if isinstance(level, int) else default


class SourceChannelFilter(logging.Filter):
    """Drop SOURCES_LOGGER records quieter than `threshold`."""

    def __init__(self, threshold: int) -> None:
        super().__init__()
        self.threshold = threshold

    def filter(self, record: logging.LogRecord) -> bool:
        on_channel = record.name == SOURCES_LOGGER or record.name.startswith(SOURCES_LOGGER + ".")
        return not on_channel or record.levelno >= self.threshold


def _run_log_path() -> Path:
    explicit = os.environ.get(ENV_FILE)
    if explicit:
        return Path(explicit)
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
    log_dir = Path(os.environ.get(ENV_DIR) or os.path.expanduser(DEFAULT_LOG_DIR))
    return log_dir / f"logconsole-{stamp}-{os.getpid()}.log"


def _handlers(level: int, path: Path, channel_filter: logging.Filter, stream: bool) -> list[logging.Handler]:
    file_handler = RotatingFileHandler(path, maxBytes=MAX_BYTES, backupCount=BACKUPS, encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
    handlers: list[logging.Handler] = [file_handler]
    if stream:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(logging.Formatter(_STREAM_FORMAT))
        handlers.append(stream_handler)
    for handler in handlers:
        handler.setLevel(level)
        handler.addFilter(channel_filter)
    return handlers


def configure(*, stream: bool = True) -> LoggingRuntime:
    """Attach the run log (and optionally stderr) to the `logconsole` logger.

    stream=False leaves stderr alone, for when the TUI owns the terminal.
    Repeated calls return the first runtime unchanged.
    """
    global _RUNTIME
    if _RUNTIME is not None:
        return _RUNTIME

    level = _level_from_env(ENV_LEVEL, logging.INFO)
    sources_level = _level_from_env(ENV_SOURCES_LEVEL, logging.WARNING)
    path = _run_log_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)
    root.propagate = False
    root.handlers.clear()
    for handler in _handlers(level, path, SourceChannelFilter(sources_level), stream):
        root.addHandler(handler)
    logging.captureWarnings(True)

    _RUNTIME = LoggingRuntime(
        level_name=logging.getLevelName(level),
        level=level,
        file_path=str(path),
        sources_level=sources_level,
    )
    return _RUNTIME


def get_runtime() -> LoggingRuntime | None:
    return _RUNTIME


def reset_for_tests() -> None:
    """Close handlers and forget the runtime so configure() runs again."""
    global _RUNTIME
    root = logging.getLogger(ROOT_LOGGER)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.propagate = True
    root.setLevel(logging.NOTSET)
    _RUNTIME = None
