"""Log console viewer panel.

The panel is a dumb LogSurface: its DisplayCoordinator (attached by
LogConsoleContext) decides what to draw and when.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import RichLog, Static

from logconsole.core.commands import CommandIDs
from logconsole.core.entries import LogEntry
from logconsole.tui.chip import Chip
from logconsole.tui.rendering import RichContentRenderer

if TYPE_CHECKING:
    from logconsole.core.commands import CommandRegistry
    from logconsole.core.display import DisplayCoordinator
    from logconsole.core.protocols import ContentRenderer

PANEL_ID = "log-console"
TITLE = "Log Console"

# toolbar chip id -> command it runs
TOOLBAR_COMMANDS: dict[str, str] = {
    "lc-add-timestamp": CommandIDs.add_timestamp,
    "lc-clear": CommandIDs.clear,
}


class LogConsolePanel(Vertical):
    """Toolbar + scrolling entry list for the bound source."""

    DEFAULT_CSS = """
    LogConsolePanel {
        height: 12;
        border-top: solid $accent;
    }

    LogConsolePanel #lc-toolbar {
        height: 1;
        width: 100%;
    }

    LogConsolePanel #lc-title {
        width: 1fr;
        text-style: bold;
    }

    LogConsolePanel Chip {
        margin-left: 1;
    }

    LogConsolePanel RichLog {
        height: 1fr;
    }
    """

    def __init__(
        self,
        renderer: ContentRenderer | None = None,
        *,
        commands: CommandRegistry | None = None,
        id: str = PANEL_ID,
    ) -> None:
        super().__init__(id=id)
        self._commands = commands
        self.widget_id = id
        self.coordinator: DisplayCoordinator | None = None
        self._renderer = renderer or RichContentRenderer()
        self._log = RichLog(highlight=False, markup=False, wrap=True, max_lines=None, id="lc-log")
        self._title_text = TITLE
        self._title: Static | None = None
        self._ready = False
        # Entries drawn since the last reset; 0 until the first render.
        self.rendered = 0

    def compose(self) -> ComposeResult:
        with Horizontal(id="lc-toolbar"):
            self._title = Static(self._title_text, id="lc-title")
            yield self._title
            yield Chip(" + timestamp ", action=f"app.command('{CommandIDs.add_timestamp}')", id="lc-add-timestamp")
            yield Chip(" clear ", action=f"app.command('{CommandIDs.clear}')", id="lc-clear")
        yield self._log

    def on_mount(self) -> None:
        self.call_after_refresh(self._first_render)

    def _first_render(self) -> None:
        # Closed again before the first refresh.
        if not self.is_attached:
            return
        self._ready = True
        self.sync_commands()
        if self.coordinator is not None:
            self.coordinator.refresh()

    @property
    def is_ready(self) -> bool:
        """True once the first refresh has drawn the bound source."""
        return self._ready

    def sync_commands(self) -> None:
        """Dim toolbar chips whose command is disabled."""
        if not self._ready or self._commands is None:
            return
        for chip_id, command_id in TOOLBAR_COMMANDS.items():
            self.query_one(f"#{chip_id}", Chip).set_class(not self._commands.is_enabled(command_id), "-dim")

    def focus_log(self) -> None:
        self._log.focus()

    # ─── LogSurface ───────────────────────────────────────────────────

    def reset(self, source: str | None, entries: Iterable[LogEntry]) -> None:
        self._title_text = f"{TITLE}: {source}" if source is not None else f"{TITLE}: no source"
        if not self._ready:
            return
        self._title.update(self._title_text)
        self._log.clear()
        self.rendered = 0
        for entry in entries:
            self.add_entry(entry)

    def add_entry(self, entry: LogEntry) -> None:
        if not self._ready:
            return
        self._log.write(self._renderer.render(entry))
        self.rendered += 1
