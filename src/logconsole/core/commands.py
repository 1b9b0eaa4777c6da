"""Command surface: ids, enable gates and dispatch.

// [LAW:one-source-of-truth] Command ids are defined in CommandIDs only.
// [LAW:dataflow-not-control-flow] Disabled commands report False, never raise.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable

from logconsole.core.errors import UnknownCommand
from logconsole.core.signals import Signal

logger = logging.getLogger(__name__)


class CommandIDs:
    open = "logconsole:open"
    add_timestamp = "logconsole:add-timestamp"
    clear = "logconsole:clear"


def _always() -> bool:
    return True


@dataclass(frozen=True)
class Command:
    id: str
    label: str
    execute: Callable[..., Any]
    is_enabled: Callable[[], bool] = _always
    is_toggled: Callable[[], bool] | None = None


class CommandRegistry:
    """Registered commands plus a change signal for hosts to refresh on."""

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}
        self.changed = Signal()

    def add(self, command: Command) -> Command:
        self._commands[command.id] = command
        return command

    def get(self, command_id: str) -> Command:
        try:
            return self._commands[command_id]
        except KeyError:
            raise UnknownCommand(command_id) from None

    def has(self, command_id: str) -> bool:
        return command_id in self._commands

    def ids(self) -> list[str]:
        return list(self._commands)

    def label(self, command_id: str) -> str:
        return self.get(command_id).label

    def is_enabled(self, command_id: str) -> bool:
        return bool(self.get(command_id).is_enabled())

    def is_toggled(self, command_id: str) -> bool:
        toggled = self.get(command_id).is_toggled
        return bool(toggled()) if toggled is not None else False

    def execute(self, command_id: str, **args) -> bool:
        """Run a command if enabled. Returns whether it ran."""
        command = self.get(command_id)
        if not command.is_enabled():
            logger.debug("command %s is disabled", command_id)
            return False
        command.execute(**args)
        return True

    def notify_changed(self) -> None:
        self.changed.emit()
