"""Protocol definitions for the collaborators the core talks to.

The core never imports a UI toolkit. A host (the Textual workbench in
logconsole.tui, or a fake in tests) supplies objects satisfying these
protocols. Structural typing: implementers don't inherit from them.

It has no dependencies on other project modules except for type names.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Iterable, Literal, Protocol

if TYPE_CHECKING:
    from logconsole.core.commands import CommandRegistry
    from logconsole.core.display import DisplayCoordinator
    from logconsole.core.entries import LogEntry


InsertMode = Literal["split-bottom", "split-top"]


class HostShell(Protocol):
    """Focus tracking and panel placement provided by the workbench."""

    def current_widget(self) -> str | None:
        """Id of the focused widget, or None."""
        ...

    def on_current_changed(self, callback: Callable[[str | None], None]) -> Callable[[], None]:
        """Subscribe to focus changes. Returns a disposer."""
        ...

    def add_widget(self, widget: Any, *, ref: str | None = None, mode: InsertMode = "split-bottom") -> None:
        ...

    def remove_widget(self, widget_id: str) -> None:
        ...

    def activate_by_id(self, widget_id: str) -> None:
        ...

    def is_visible(self, widget_id: str) -> bool:
        ...


class SourceProvider(Protocol):
    """Capability query: which source, if any, does a widget belong to."""

    def source_for(self, widget_id: str | None) -> str | None:
        ...


class ContentRenderer(Protocol):
    """Turns an entry into whatever the host can display. Opaque to the core."""

    def render(self, entry: LogEntry) -> Any:
        ...


class LogSurface(Protocol):
    """Where a DisplayCoordinator draws."""

    def reset(self, source: str | None, entries: Iterable[LogEntry]) -> None:
        """Replace everything shown with entries."""
        ...

    def add_entry(self, entry: LogEntry) -> None:
        """Show one more entry after the current ones."""
        ...


class Viewer(LogSurface, Protocol):
    """The single visible log viewer."""

    widget_id: str
    coordinator: DisplayCoordinator


@dataclass(frozen=True)
class RestorationRecipe:
    """Everything a host needs to reopen a viewer after restart."""

    namespace: str
    command: str
    args: dict = field(default_factory=dict)


class LayoutRestorer(Protocol):
    def track(self, namespace: str, widget_id: str) -> None:
        ...

    def untrack(self, namespace: str) -> None:
        ...

    async def restore(self, recipe: RestorationRecipe, commands: CommandRegistry) -> None:
        ...
