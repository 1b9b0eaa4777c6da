"""Tests for Rich rendering of log entries."""

from datetime import datetime

from rich.console import Console, Group
from rich.json import JSON
from rich.markdown import Markdown
from rich.rule import Rule
from rich.text import Text

from logconsole.core.entries import LogLevel, marker_entry, mime_entry, text_entry
from logconsole.tui.rendering import RichContentRenderer, gutter, render_mime

TS = datetime(2024, 1, 2, 9, 8, 7)


def _plain(renderable) -> str:
    console = Console(width=60, color_system=None, record=True)
    console.print(renderable)
    return console.export_text()


def test_text_entry_has_time_and_level_gutter():
    rendered = RichContentRenderer().render(text_entry("disk full", LogLevel.ERROR, timestamp=TS))
    assert isinstance(rendered, Text)
    assert rendered.plain.startswith("09:08:07 ERROR")
    assert rendered.plain.endswith("disk full")


def test_unset_level_has_no_level_column():
    assert gutter(text_entry("x", timestamp=TS)).plain == "09:08:07 "


def test_marker_renders_as_rule():
    rendered = RichContentRenderer().render(marker_entry(TS))
    assert isinstance(rendered, Rule)
    assert "09:08:07" in _plain(rendered)


def test_mime_entry_prefers_richest_type():
    bundle = {"text/plain": "plain", "text/markdown": "# Title"}
    assert isinstance(render_mime(bundle), Markdown)
    assert isinstance(render_mime({"application/json": '{"a": 1}'}), JSON)


def test_unknown_mime_shows_type_names():
    rendered = render_mime({"image/png": "...", "application/x-foo": "..."})
    assert rendered.plain == "<application/x-foo, image/png>"


def test_mime_entry_is_grouped_with_gutter():
    rendered = RichContentRenderer().render(mime_entry({"text/plain": "hello"}, "info", timestamp=TS))
    assert isinstance(rendered, Group)
    text = _plain(rendered)
    assert "INFO" in text
    assert "hello" in text
