"""Log console context: the explicitly constructed object that wires the core.

Two-phase startup:
  1. __init__ builds registry, status model and commands with defaults.
     Everything works from here on; nothing listens to the host yet.
  2. ready() binds the live focus listener and loads/applies settings.
     Hosts call it after layout restoration has finished.

// [LAW:no-shared-mutable-globals] No module-level instance; hosts and tests
//   construct as many independent contexts as they need.
// [LAW:single-enforcer] Viewer lifecycle (open/close/toggle) lives here only.
"""

import logging
from typing import Callable

import logconsole.app.settings_store
from logconsole.app.settings_store import SettingsStore
from logconsole.core.commands import Command, CommandIDs, CommandRegistry
from logconsole.core.display import DisplayCoordinator
from logconsole.core.entries import marker_entry
from logconsole.core.protocols import (
    HostShell,
    InsertMode,
    LayoutRestorer,
    RestorationRecipe,
    SourceProvider,
    Viewer,
)
from logconsole.core.registry import DEFAULT_MAX_LENGTH, LoggerRegistry
from logconsole.core.signals import Disposer, dispose_all
from logconsole.core.status import StatusModel

logger = logging.getLogger(__name__)

RESTORE_NAMESPACE = "logconsole"
DEFAULT_INSERT_MODE: InsertMode = "split-bottom"

# Sentinel: "bind to whatever source the host has focused".
FOCUSED = object()


class LogConsoleContext:
    def __init__(
        self,
        shell: HostShell,
        sources: SourceProvider,
        viewer_factory: Callable[[], Viewer],
        *,
        registry: LoggerRegistry | None = None,
        settings: SettingsStore | None = None,
        restorer: LayoutRestorer | None = None,
        max_length: int = DEFAULT_MAX_LENGTH,
        flash_enabled: bool = False,
        persist_settings: bool = True,
    ) -> None:
        self.shell = shell
        self.sources = sources
        self.registry = registry if registry is not None else LoggerRegistry(max_length)
        self.status = StatusModel(
            self.registry,
            flash_enabled=flash_enabled,
            is_displayed=self.is_displayed,
        )
        self.settings = settings
        self.restorer = restorer
        self.commands = CommandRegistry()
        self._viewer_factory = viewer_factory
        self._persist_settings = persist_settings
        self._viewer: Viewer | None = None
        self._viewer_disposers: list[Disposer] = []
        self._live_disposers: list[Disposer] = []
        self._focused_source: str | None = None
        self._ready = False
        self._register_commands()

    # ─── Derived state ─────────────────────────────────────────────────

    @property
    def viewer(self) -> Viewer | None:
        return self._viewer

    @property
    def is_ready(self) -> bool:
        return self._ready

    @property
    def current_source(self) -> str | None:
        """Source shown by the open viewer, or None."""
        viewer = self._viewer
        return viewer.coordinator.source if viewer is not None else None

    def is_displayed(self, source: str | None) -> bool:
        viewer = self._viewer
        return (
            viewer is not None
            and source is not None
            and viewer.coordinator.source == source
            and self.shell.is_visible(viewer.widget_id)
        )

    def restore_recipe(self) -> RestorationRecipe:
        """Reopen with no explicit source."""
        return RestorationRecipe(namespace=RESTORE_NAMESPACE, command=CommandIDs.open, args={})

    # ─── Commands ──────────────────────────────────────────────────────

    def _register_commands(self) -> None:
        self.commands.add(Command(
            id=CommandIDs.open,
            label="Show Log Console",
            execute=self.toggle_viewer,
            is_toggled=lambda: self._viewer is not None,
        ))
        self.commands.add(Command(
            id=CommandIDs.add_timestamp,
            label="Add Timestamp",
            execute=self._add_timestamp,
            is_enabled=self._has_current_source,
        ))
        self.commands.add(Command(
            id=CommandIDs.clear,
            label="Clear Log",
            execute=self._clear_current,
            is_enabled=self._has_current_source,
        ))

    def _has_current_source(self) -> bool:
        return self.current_source is not None

    def _add_timestamp(self) -> None:
        self.registry.log(self.current_source, marker_entry())

    def _clear_current(self) -> None:
        self.registry.clear(self.current_source)

    # ─── Viewer lifecycle ─────────────────────────────────────────────

    def toggle_viewer(self, source=FOCUSED, ref: str | None = None, mode: InsertMode = DEFAULT_INSERT_MODE) -> None:
        # Single viewer: opening while one exists closes it.
        if self._viewer is not None:
            self.close_viewer()
        else:
            self.open_viewer(source, ref=ref, mode=mode)

    def open_viewer(self, source=FOCUSED, *, ref: str | None = None, mode: InsertMode = DEFAULT_INSERT_MODE) -> Viewer:
        if self._viewer is not None:
            return self._viewer

        viewer = self._viewer_factory()
        coordinator = DisplayCoordinator(
            self.registry,
            viewer,
            is_visible=lambda: self.shell.is_visible(viewer.widget_id),
        )
        viewer.coordinator = coordinator
        self._viewer = viewer
        self._viewer_disposers = [
            coordinator.source_changed.connect(lambda _source: self.commands.notify_changed()),
            coordinator.source_displayed.connect(self.status.source_displayed),
        ]

        self.shell.add_widget(viewer, ref=ref, mode=mode)
        coordinator.set_source(self._resolve_focused_source() if source is FOCUSED else source)
        if self.restorer is not None:
            self.restorer.track(RESTORE_NAMESPACE, viewer.widget_id)
        logger.debug("opened viewer %s for source %r", viewer.widget_id, coordinator.source)
        self.commands.notify_changed()
        return viewer

    def close_viewer(self) -> None:
        viewer = self._viewer
        if viewer is None:
            return
        self._viewer = None
        dispose_all(self._viewer_disposers)
        viewer.coordinator.dispose()
        self.shell.remove_widget(viewer.widget_id)
        if self.restorer is not None:
            self.restorer.untrack(RESTORE_NAMESPACE)
        logger.debug("closed viewer %s", viewer.widget_id)
        self.commands.notify_changed()

    def status_clicked(self) -> None:
        """Open a viewer next to the focused widget, or bring the open one forward."""
        if self._viewer is None:
            self.open_viewer(ref=self.shell.current_widget(), mode=DEFAULT_INSERT_MODE)
        else:
            self.shell.activate_by_id(self._viewer.widget_id)

    # ─── Focus tracking ───────────────────────────────────────────────

    def _resolve_focused_source(self) -> str | None:
        if self._ready:
            return self._focused_source
        return self.sources.source_for(self.shell.current_widget())

    def _on_focus(self, widget_id: str | None) -> None:
        viewer = self._viewer
        if viewer is not None and widget_id == viewer.widget_id:
            # Focusing the viewer itself keeps its source.
            viewer.coordinator.acknowledge()
            return
        source = self.sources.source_for(widget_id)
        self._focused_source = source
        if viewer is not None:
            viewer.coordinator.set_source(source)
        self.status.source = source

    # ─── Startup / teardown ───────────────────────────────────────────

    async def restore(self) -> None:
        """Let the layout restorer reopen what was open last session."""
        if self.restorer is None:
            return
        try:
            await self.restorer.restore(self.restore_recipe(), self.commands)
        except Exception:
            logger.exception("layout restoration failed")

    def ready(self) -> None:
        """Phase 2: bind live listeners and apply loaded configuration."""
        if self._ready:
            return
        self._ready = True
        self._live_disposers.append(self.shell.on_current_changed(self._on_focus))
        self._on_focus(self.shell.current_widget())

        if self.settings is not None:
            loaded = self.settings.load()
            self._live_disposers.extend(logconsole.app.settings_store.setup_reactions(
                self.settings,
                {"registry": self.registry, "status": self.status},
                persist=self._persist_settings,
                fire_immediately=loaded,
            ))
        logger.debug("log console ready")

    def dispose(self) -> None:
        dispose_all(self._live_disposers)
        self.close_viewer()
        self.status.dispose()
        self.commands.changed.disconnect_all()
        self._ready = False
