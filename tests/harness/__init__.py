"""Textual in-process test harness for logconsole.

Re-exports all public API for convenient imports:
    from tests.harness import run_app, press_and_settle, log_text, ...
"""

from tests.harness.app_runner import run_app
from tests.harness.interactions import (
    press_and_settle,
    click_and_settle,
    focus_and_settle,
)
from tests.harness.content import (
    log_text,
    log_lines,
    widget_text,
)

__all__ = [
    "run_app",
    "press_and_settle",
    "click_and_settle",
    "focus_and_settle",
    "log_text",
    "log_lines",
    "widget_text",
]
