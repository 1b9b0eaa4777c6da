"""Entry rendering for the Textual host.

Turns LogEntry values into Rich renderables. Plain-text entries get a
timestamp and level gutter; mime entries dispatch on the richest mime type
the renderer knows.

// [LAW:dataflow-not-control-flow] Level styles and mime handlers are tables.
"""

import json
from typing import Callable, Mapping

from rich.console import Group, RenderableType
from rich.json import JSON
from rich.markdown import Markdown
from rich.rule import Rule
from rich.text import Text

from logconsole.core.entries import MARKER_MIME, ContentKind, LogEntry, LogLevel


LEVEL_STYLES: dict[LogLevel, str] = {
    LogLevel.ERROR: "bold red",
    LogLevel.WARNING: "bold yellow",
    LogLevel.INFO: "bold cyan",
    LogLevel.DEBUG: "dim",
    LogLevel.UNSET: "dim",
}


def _markdown(data: str) -> RenderableType:
    return Markdown(data)


def _json(data) -> RenderableType:
    if not isinstance(data, str):
        data = json.dumps(data)
    return JSON(data)


def _plain(data: str) -> RenderableType:
    return Text(str(data))


# Preference order: first match wins.
MIME_HANDLERS: tuple[tuple[str, Callable[[str], RenderableType]], ...] = (
    ("text/markdown", _markdown),
    ("application/json", _json),
    ("text/plain", _plain),
)


def gutter(entry: LogEntry) -> Text:
    text = Text()
    text.append(entry.timestamp.strftime("%H:%M:%S "), style="dim")
    if entry.level is not LogLevel.UNSET:
        text.append(f"{entry.level.value.upper():7s} ", style=LEVEL_STYLES[entry.level])
    return text


def render_mime(bundle: Mapping[str, str]) -> RenderableType:
    for mime, handler in MIME_HANDLERS:
        if mime in bundle:
            return handler(bundle[mime])
    # Unknown types: show what it is rather than nothing.
    mimes = ", ".join(sorted(bundle)) or "empty bundle"
    return Text(f"<{mimes}>", style="italic dim")


class RichContentRenderer:
    """ContentRenderer producing Rich renderables."""

    def render(self, entry: LogEntry) -> RenderableType:
        if entry.kind is ContentKind.MIME and MARKER_MIME in entry.payload:
            return Rule(entry.payload[MARKER_MIME], style="dim")
        if entry.kind is ContentKind.TEXT:
            line = gutter(entry)
            line.append(str(entry.payload))
            return line
        return Group(gutter(entry), render_mime(entry.payload))
