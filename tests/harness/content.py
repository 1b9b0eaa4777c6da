"""Text extraction from the console log and Static widgets."""

from textual.widgets import RichLog

from logconsole.tui.app import LogConsoleApp
from logconsole.tui.log_panel import PANEL_ID


def log_lines(app: LogConsoleApp) -> list[str]:
    """Rendered lines of the open console, or [] when it is closed."""
    logs = app.query(f"#{PANEL_ID} RichLog").results(RichLog)
    log = next(iter(logs), None)
    if log is None:
        return []
    return [line.text for line in log.lines]


def log_text(app: LogConsoleApp) -> str:
    return "\n".join(log_lines(app))


def widget_text(app: LogConsoleApp, selector: str) -> str:
    """Get plain text content from a Static widget by CSS selector."""
    renderable = app.query_one(selector).render()
    return getattr(renderable, "plain", str(renderable))
