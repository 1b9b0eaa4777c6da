"""App lifecycle management for Textual in-process tests.

Creates LogConsoleApp instances wired for testing and manages run_test() lifecycle.
State isolation: every call creates a fresh app, context and registry.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from textual.pilot import Pilot

from logconsole.tui.app import LogConsoleApp

DOCUMENTS = [
    ("notes/alpha.txt", "alpha body\n"),
    ("notes/beta.txt", "beta body\n"),
]


@asynccontextmanager
async def run_app(
    *,
    size: tuple[int, int] = (100, 30),
    documents: list[tuple[str, str]] | None = None,
    **app_kwargs,
) -> AsyncIterator[tuple[Pilot, LogConsoleApp]]:
    """Create and run a LogConsoleApp in test mode.

    Yields (pilot, app). Extra keyword arguments go to LogConsoleApp, e.g.
    settings=..., restorer=..., flash_enabled=True.
    """
    # [LAW:no-shared-mutable-globals] Fresh state for every test
    app = LogConsoleApp(DOCUMENTS if documents is None else documents, **app_kwargs)
    async with app.run_test(size=size) as pilot:
        # Ensure on_mount (restore + ready) has completed
        await pilot.pause()
        yield pilot, app
