"""Clickable chip control used by the console toolbar."""

from textual.widgets import Static


class Chip(Static):
    """Clickable text that dispatches an action on click.

    Like Button's action= parameter but renders as plain text, no borders.
    The app adds -dim while the chip's command is disabled.
    """

    ALLOW_SELECT = False
    DEFAULT_CSS = """
    Chip {
        width: auto;
        height: 1;
        text-style: bold;
        background: $panel-lighten-2;
        color: $text;
    }

    Chip:hover {
        background: $panel-lighten-1;
    }

    Chip.-dim {
        background: $surface-lighten-1;
        color: $text-muted;
    }
    """

    def __init__(self, label: str, *, action: str | None = None, **kwargs):
        super().__init__(label, **kwargs)
        self._action = action

    async def on_click(self, event) -> None:
        if self._action:
            await self.run_action(self._action)
