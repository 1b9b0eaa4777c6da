"""Exception taxonomy for logconsole.

Core operations are total; the only fallible paths are capacity validation
and the settings boundary.
"""


class LogConsoleError(Exception):
    """Base class for all logconsole errors."""


class InvalidArgument(LogConsoleError, ValueError):
    """Raised synchronously for a negative or non-integer capacity."""


class ConfigurationLoadFailure(LogConsoleError):
    """Settings store unavailable or malformed.

    Raised by the settings I/O layer; always caught at the settings store
    boundary and never surfaced to commands.
    """

    def __init__(self, path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"failed to load settings from {path}: {reason}")


class UnknownCommand(LogConsoleError, KeyError):
    """Executing a command id that was never registered."""
