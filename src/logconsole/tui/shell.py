"""Textual workbench shell: documents, focus tracking and panel placement.

TextualShell implements both HostShell and SourceProvider for the core.
Documents are TabPanes inside one TabbedContent; the log console is mounted
next to that TabbedContent in the workbench container.

// [LAW:one-source-of-truth] pane id -> document path lives in _sources only.
// [LAW:single-enforcer] Focus -> "current widget" resolution happens in area_for().
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from textual.app import App
from textual.widget import Widget
from textual.widgets import TabbedContent, TextArea

from logconsole.core.protocols import InsertMode
from logconsole.core.signals import Disposer, Signal

logger = logging.getLogger(__name__)

WORKBENCH_ID = "workbench"
DOCUMENTS_ID = "documents"


class DocumentView(TextArea):
    """Read-only view of one open document."""

    def __init__(self, path: str, text: str = "", **kwargs) -> None:
        super().__init__(text, read_only=True, **kwargs)
        self.path = path

    @property
    def title(self) -> str:
        return Path(self.path).name or self.path


class TextualShell:
    """Host shell over a workbench App."""

    def __init__(self, app: App) -> None:
        self._app = app
        self._current: str | None = None
        self._widgets: dict[str, Widget] = {}
        self._sources: dict[str, str] = {}
        self.current_changed = Signal()

    # ─── Documents ─────────────────────────────────────────────────────

    def register_document(self, pane_id: str, path: str) -> None:
        self._sources[pane_id] = path

    def document_ids(self) -> list[str]:
        return list(self._sources)

    def document_paths(self) -> list[str]:
        return list(self._sources.values())

    def _documents(self) -> TabbedContent:
        return self._app.query_one(f"#{DOCUMENTS_ID}", TabbedContent)

    def active_document(self) -> str | None:
        if not self._sources:
            return None
        active = self._documents().active
        if active in self._sources:
            return active
        return next(iter(self._sources))

    # ─── SourceProvider ───────────────────────────────────────────────

    def source_for(self, widget_id: str | None) -> str | None:
        if widget_id is None:
            return None
        return self._sources.get(widget_id)

    # ─── HostShell ────────────────────────────────────────────────────

    def current_widget(self) -> str | None:
        return self._current

    def on_current_changed(self, callback: Callable[[str | None], None]) -> Disposer:
        return self.current_changed.connect(callback)

    def set_current(self, widget_id: str | None) -> None:
        if widget_id == self._current:
            return
        self._current = widget_id
        self.current_changed.emit(widget_id)

    def add_widget(self, widget: Widget, *, ref: str | None = None, mode: InsertMode = "split-bottom") -> None:
        workbench = self._app.query_one(f"#{WORKBENCH_ID}")
        anchor = self._documents()
        self._widgets[widget.id] = widget
        logger.debug("mounting %s %s of %s (ref=%s)", widget.id, mode, anchor.id, ref)
        if mode == "split-top":
            workbench.mount(widget, before=anchor)
        else:
            workbench.mount(widget, after=anchor)

    def remove_widget(self, widget_id: str) -> None:
        widget = self._widgets.pop(widget_id, None)
        if widget is None:
            return
        widget.remove()
        if self._current == widget_id:
            self.set_current(self.active_document())

    def activate_by_id(self, widget_id: str) -> None:
        widget = self._widgets.get(widget_id)
        if widget is not None:
            focus_log = getattr(widget, "focus_log", None)
            if callable(focus_log):
                focus_log()
            else:
                widget.focus()
            self.set_current(widget_id)
            return
        if widget_id in self._sources:
            self._documents().active = widget_id
            self.set_current(widget_id)

    def is_visible(self, widget_id: str) -> bool:
        widget = self._widgets.get(widget_id)
        # Panels that draw after their first refresh report is_ready.
        return (
            widget is not None
            and widget.is_mounted
            and bool(widget.display)
            and getattr(widget, "is_ready", True)
        )

    # ─── Focus tracking ───────────────────────────────────────────────

    def area_for(self, widget: Widget) -> str | None:
        """The registered panel or document pane that contains widget."""
        for node in widget.ancestors_with_self:
            node_id = getattr(node, "id", None)
            if node_id in self._widgets or node_id in self._sources:
                return node_id
            if isinstance(node, TabbedContent):
                # Focus on the tab strip counts as the active document.
                return self.active_document()
        return None

    def note_focus(self, widget: Widget) -> None:
        area = self.area_for(widget)
        if area is not None:
            self.set_current(area)
