"""Status model: unseen activity across every source.

Pure state + signals; the Textual StatusIndicator widget renders it.

// [LAW:one-source-of-truth] Per-source dirty flags live here only.
"""

from dataclasses import dataclass
from typing import Callable

from logconsole.core.log_buffer import ChangeEvent
from logconsole.core.registry import LoggerRegistry
from logconsole.core.signals import Signal, dispose_all


@dataclass
class SourceVersions:
    """Highest version acknowledged as displayed, and highest one notified."""

    last_displayed: int = 0
    last_notified: int = 0


class StatusModel:
    """Tracks dirty sources and drives the flash affordance.

    is_displayed(source) answers whether the viewer currently shows source
    and is visible; mutations of such a source need no attention.
    """

    def __init__(
        self,
        registry: LoggerRegistry,
        *,
        flash_enabled: bool = False,
        is_displayed: Callable[[str | None], bool] = lambda source: False,
    ) -> None:
        self._registry = registry
        self._flash_enabled = bool(flash_enabled)
        self._is_displayed = is_displayed
        self._source: str | None = None
        self._dirty: dict[str | None, bool] = {}
        self._versions: dict[str | None, SourceVersions] = {}

        self.state_changed = Signal()
        self.flash = Signal()  # flash(source), once per unseen mutation

        self._disposers = [registry.changed.connect(self._on_log_changed)]

    # ─── Focused source ───────────────────────────────────────────────

    @property
    def source(self) -> str | None:
        return self._source

    @source.setter
    def source(self, value: str | None) -> None:
        if value == self._source:
            return
        self._source = value
        self.state_changed.emit()

    @property
    def messages(self) -> int:
        """Entries currently held for the focused source."""
        if self._source is None or not self._registry.has_logger(self._source):
            return 0
        return len(self._registry.get_logger(self._source))

    @property
    def version(self) -> int:
        if self._source is None or not self._registry.has_logger(self._source):
            return 0
        return self._registry.get_logger(self._source).version

    # ─── Flash setting ────────────────────────────────────────────────

    @property
    def flash_enabled(self) -> bool:
        return self._flash_enabled

    @flash_enabled.setter
    def flash_enabled(self, enabled: bool) -> None:
        enabled = bool(enabled)
        if enabled == self._flash_enabled:
            return
        self._flash_enabled = enabled
        self.state_changed.emit()

    # ─── Dirty bookkeeping ────────────────────────────────────────────

    def versions(self, source: str | None) -> SourceVersions:
        return self._versions.setdefault(source, SourceVersions())

    def is_dirty(self, source: str | None) -> bool:
        return self._dirty.get(source, False)

    def dirty_sources(self) -> list[str | None]:
        return [source for source, dirty in self._dirty.items() if dirty]

    @property
    def unseen_count(self) -> int:
        return len(self.dirty_sources())

    def source_displayed(self, source: str | None, version: int) -> None:
        """Acknowledgement from the viewer: clears dirty unconditionally."""
        versions = self.versions(source)
        versions.last_displayed = max(versions.last_displayed, version)
        versions.last_notified = max(versions.last_notified, version)
        was_dirty = self._dirty.pop(source, False)
        if was_dirty or source == self._source:
            self.state_changed.emit()

    def _on_log_changed(self, event: ChangeEvent) -> None:
        # The "no source" log can never be displayed, so it is never dirty.
        if event.source is None or event.kind == "trim" or self._is_displayed(event.source):
            if event.source == self._source:
                self.state_changed.emit()
            return
        self._dirty[event.source] = True
        versions = self.versions(event.source)
        # A version already notified or displayed never flashes again.
        if event.version > versions.last_notified:
            versions.last_notified = event.version
            if self._flash_enabled:
                self.flash.emit(event.source)
        self.state_changed.emit()

    def dispose(self) -> None:
        dispose_all(self._disposers)
        self.state_changed.disconnect_all()
        self.flash.disconnect_all()
