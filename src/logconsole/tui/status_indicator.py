"""Status bar item for the log console.

Renders StatusModel: message count of the focused source, the number of
sources with unseen entries, and a short flash per unseen mutation.
Clicking delegates to LogConsoleContext.status_clicked().
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from textual.timer import Timer
from textual.widgets import Static

from logconsole.core.signals import Disposer, dispose_all

if TYPE_CHECKING:
    from logconsole.app.context import LogConsoleContext

FLASH_SECONDS = 0.4


def status_label(messages: int, unseen: int) -> str:
    label = f" Log: {messages} "
    if unseen:
        label += f"| {unseen} unseen "
    return label


class StatusIndicator(Static):
    """Clickable log status chip."""

    ALLOW_SELECT = False
    DEFAULT_CSS = """
    StatusIndicator {
        width: auto;
        height: 1;
        background: $panel;
        color: $text-muted;
    }

    StatusIndicator.-unseen {
        color: $text;
        text-style: bold;
    }

    StatusIndicator.-flash {
        background: $warning;
        color: $background;
    }
    """

    def __init__(self, context: LogConsoleContext, **kwargs) -> None:
        super().__init__(status_label(0, 0), **kwargs)
        self._log_context = context
        self._disposers: list[Disposer] = []
        self._flash_timer: Timer | None = None
        # Flashes shown since mount; one per unseen mutation while enabled.
        self.flash_count = 0

    def on_mount(self) -> None:
        status = self._log_context.status
        self._disposers = [
            status.state_changed.connect(self.refresh_status),
            status.flash.connect(self._on_flash),
        ]
        self.refresh_status()

    def on_unmount(self) -> None:
        dispose_all(self._disposers)

    def refresh_status(self) -> None:
        status = self._log_context.status
        self.update(status_label(status.messages, status.unseen_count))
        self.set_class(status.unseen_count > 0, "-unseen")

    def _on_flash(self, source: str | None) -> None:
        self.flash_count += 1
        self.add_class("-flash")
        if self._flash_timer is not None:
            self._flash_timer.stop()
        self._flash_timer = self.set_timer(FLASH_SECONDS, self._end_flash)

    def _end_flash(self) -> None:
        self._flash_timer = None
        self.remove_class("-flash")

    def on_click(self, event) -> None:
        self._log_context.status_clicked()
