"""Display coordinator: binds the single viewer to one source.

States: Unbound (source is None) and Bound(source).

// [LAW:single-enforcer] source_displayed is the only signal that marks
//   entries as seen; it is emitted here and nowhere else.
"""

import logging
from typing import Callable

from logconsole.core.log_buffer import ChangeEvent, LogBuffer
from logconsole.core.protocols import LogSurface
from logconsole.core.registry import LoggerRegistry
from logconsole.core.signals import Disposer, Signal

logger = logging.getLogger(__name__)


class DisplayCoordinator:
    """Keeps a LogSurface in sync with the current source's buffer.

    Signals:
        source_changed(source): after a real source switch and re-render.
        source_displayed(source, version): after a render while the viewer is
            visible; entries up to version count as seen.
    """

    def __init__(
        self,
        registry: LoggerRegistry,
        surface: LogSurface,
        *,
        is_visible: Callable[[], bool] = lambda: True,
    ) -> None:
        self._registry = registry
        self._surface = surface
        self._is_visible = is_visible
        self._source: str | None = None
        self._subscription: Disposer | None = None
        # Sticky across source switches; never reset on focus loss.
        self._displayed_versions: dict[str, int] = {}
        self._disposed = False
        self.source_changed = Signal()
        self.source_displayed = Signal()

    @property
    def source(self) -> str | None:
        return self._source

    @property
    def is_bound(self) -> bool:
        return self._source is not None

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def last_displayed_version(self, source: str) -> int:
        return self._displayed_versions.get(source, 0)

    def set_source(self, new_source: str | None) -> None:
        if self._disposed or new_source == self._source:
            return
        self._unsubscribe()
        if new_source is not None:
            buf = self._registry.get_logger(new_source)
            self._subscription = buf.changed.connect(self._on_change)
        self._render_all(new_source)
        self._source = new_source
        logger.debug("viewer bound to %r", new_source)
        self.source_changed.emit(new_source)
        self.acknowledge()

    def refresh(self) -> None:
        """Full re-render of the bound source, e.g. when the viewer mounts."""
        if self._disposed:
            return
        self._render_all(self._source)
        self.acknowledge()

    def acknowledge(self) -> None:
        """Emit source_displayed for the current version if the viewer is visible."""
        if self._disposed or self._source is None or not self._is_visible():
            return
        version = self._registry.get_logger(self._source).version
        self._displayed_versions[self._source] = max(version, self.last_displayed_version(self._source))
        self.source_displayed.emit(self._source, version)

    def dispose(self) -> None:
        if self._disposed:
            return
        self._unsubscribe()
        self.source_changed.disconnect_all()
        self.source_displayed.disconnect_all()
        self._disposed = True

    def _buffer(self, source: str | None) -> LogBuffer | None:
        if source is None:
            return None
        return self._registry.get_logger(source)

    def _render_all(self, source: str | None) -> None:
        buf = self._buffer(source)
        self._surface.reset(source, buf.read() if buf is not None else ())

    def _on_change(self, event: ChangeEvent) -> None:
        if event.kind == "append" and not event.evicted:
            self._surface.add_entry(self._registry.get_logger(event.source).last())
        else:
            self._render_all(event.source)
        self.acknowledge()

    def _unsubscribe(self) -> None:
        if self._subscription is not None:
            self._subscription()
            self._subscription = None
