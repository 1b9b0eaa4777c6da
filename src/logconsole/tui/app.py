"""Workbench TUI hosting the log console.

// [LAW:locality-or-seam] Thin host: all console behavior lives in
//   LogConsoleContext; this module only adapts Textual events to it.
"""

from __future__ import annotations

import logging
import random
from pathlib import Path

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Footer, Header, TabbedContent, TabPane

from logconsole.app.context import LogConsoleContext
from logconsole.app.settings_store import SettingsStore
from logconsole.core.commands import CommandIDs
from logconsole.core.log_handler import SOURCE_ATTR, LoggerRegistryHandler
from logconsole.core.protocols import LayoutRestorer
from logconsole.core.registry import DEFAULT_MAX_LENGTH
from logconsole.io.logging_setup import SOURCES_LOGGER
from logconsole.tui.log_panel import LogConsolePanel
from logconsole.tui.rendering import RichContentRenderer
from logconsole.tui.shell import DOCUMENTS_ID, WORKBENCH_ID, DocumentView, TextualShell
from logconsole.tui.status_indicator import StatusIndicator

logger = logging.getLogger(__name__)

_DEMO_MESSAGES = (
    ("info", "cell executed"),
    ("debug", "autosave checkpoint"),
    ("warning", "kernel is busy"),
    ("error", "NameError: name 'df' is not defined"),
    ("info", "widget state synced"),
)


class LogConsoleApp(App):
    """Multi-document workbench with a single log console viewer."""

    TITLE = "logconsole"

    CSS = """
    #workbench {
        height: 1fr;
    }

    #documents {
        height: 1fr;
    }

    #status-bar {
        height: 1;
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("f2", f"command('{CommandIDs.open}')", "Log console"),
        Binding("f3", f"command('{CommandIDs.add_timestamp}')", "Timestamp"),
        Binding("f4", f"command('{CommandIDs.clear}')", "Clear log"),
        Binding("f5", "log_note", "Log note"),
        Binding("ctrl+r", "reload_settings", "Reload settings"),
    ]

    def __init__(
        self,
        documents: list[tuple[str, str]] | None = None,
        *,
        settings: SettingsStore | None = None,
        restorer: LayoutRestorer | None = None,
        max_length: int = DEFAULT_MAX_LENGTH,
        flash_enabled: bool = False,
        persist_settings: bool = True,
        demo_interval: float | None = None,
    ) -> None:
        super().__init__()
        self._documents = list(documents or [])
        self._demo_interval = demo_interval
        self.shell = TextualShell(self)
        self.renderer = RichContentRenderer()
        self.context = LogConsoleContext(
            self.shell,
            self.shell,
            self._create_viewer,
            settings=settings,
            restorer=restorer,
            max_length=max_length,
            flash_enabled=flash_enabled,
            persist_settings=persist_settings,
        )
        self.context.commands.changed.connect(self._on_commands_changed)
        self._log_handler = LoggerRegistryHandler(self.context.registry)
        self.source_logger = logging.getLogger(SOURCES_LOGGER)

    def _create_viewer(self) -> LogConsolePanel:
        return LogConsolePanel(self.renderer, commands=self.context.commands)

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id=WORKBENCH_ID):
            with TabbedContent(id=DOCUMENTS_ID):
                for index, (path, text) in enumerate(self._documents):
                    pane_id = f"doc-{index}"
                    self.shell.register_document(pane_id, path)
                    view = DocumentView(path, text, id=f"{pane_id}-view")
                    with TabPane(view.title, id=pane_id):
                        yield view
        with Horizontal(id="status-bar"):
            yield StatusIndicator(self.context, id="log-status")
        yield Footer()

    async def on_mount(self) -> None:
        self.source_logger.addHandler(self._log_handler)
        if self.source_logger.getEffectiveLevel() > logging.DEBUG:
            self.source_logger.setLevel(logging.DEBUG)
        self.shell.set_current(self.shell.active_document())
        # Restoration first, so it can reopen the viewer before focus drives it.
        await self.context.restore()
        self.context.ready()
        logger.debug("workbench ready with %d documents", len(self.shell.document_ids()))
        if self._demo_interval:
            self.set_interval(self._demo_interval, self._demo_tick)

    def on_unmount(self) -> None:
        self.source_logger.removeHandler(self._log_handler)

    # ─── Host events → shell ──────────────────────────────────────────

    def on_descendant_focus(self, event: events.DescendantFocus) -> None:
        self.shell.note_focus(event.widget)

    def on_tabbed_content_tab_activated(self, event: TabbedContent.TabActivated) -> None:
        if event.pane is not None and event.pane.id:
            self.shell.set_current(event.pane.id)

    # ─── Commands ─────────────────────────────────────────────────────

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        if action != "command" or not parameters:
            return True
        command_id = str(parameters[0])
        if not self.context.commands.has(command_id):
            return True
        # None = shown but disabled in the footer
        return True if self.context.commands.is_enabled(command_id) else None

    def action_command(self, command_id: str) -> None:
        self.context.commands.execute(command_id)

    def _on_commands_changed(self) -> None:
        self.refresh_bindings()
        viewer = self.context.viewer
        if isinstance(viewer, LogConsolePanel):
            viewer.sync_commands()

    def action_log_note(self) -> None:
        source = self.shell.source_for(self.shell.current_widget())
        self.source_logger.info("note from %s", Path(source).name if source else "workbench",
                                extra={SOURCE_ATTR: source})

    def action_reload_settings(self) -> None:
        settings = self.context.settings
        if settings is None:
            return
        if settings.reload():
            self.notify("Settings reloaded")
        else:
            self.notify("Settings could not be loaded; keeping current values", severity="warning")

    def _demo_tick(self) -> None:
        paths = self.shell.document_paths()
        if not paths:
            return
        level, message = random.choice(_DEMO_MESSAGES)
        source = random.choice(paths)
        self.source_logger.log(logging.getLevelName(level.upper()), message, extra={SOURCE_ATTR: source})
