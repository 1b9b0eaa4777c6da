"""CLI entry point for logconsole."""

import argparse
import logging
from pathlib import Path

import logconsole.app.settings_store
import logconsole.io.logging_setup
from logconsole.core.errors import InvalidArgument
from logconsole.tui.app import LogConsoleApp
from logconsole.tui.restorer import SettingsLayoutRestorer

logger = logging.getLogger(__name__)

DEMO_INTERVAL = 1.5

_SCRATCH_DOCUMENTS = [
    ("untitled-1.txt", "Scratch document one.\n"),
    ("untitled-2.txt", "Scratch document two.\n"),
]


def _read_documents(paths: list[str]) -> list[tuple[str, str]]:
    documents = []
    for raw in paths:
        path = Path(raw)
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            logger.warning("cannot open %s: %s", path, exc)
            print(f"   Skipping {path}: {exc}")
            continue
        documents.append((str(path), text))
    return documents


def _positive_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {raw!r}")
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Workbench with a per-document log console")
    parser.add_argument("paths", nargs="*", help="Files to open as documents")
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Periodically log sample entries to random documents",
    )
    parser.add_argument(
        "--max-entries",
        type=_positive_int,
        default=None,
        help="Per-document log capacity for this run (overrides maxLogEntries)",
    )
    parser.add_argument(
        "--flash",
        action="store_true",
        default=None,
        help="Flash the status indicator on unseen log activity (overrides flash)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    # [LAW:single-enforcer] Runtime logger configuration is centralized in io.logging_setup.
    log_runtime = logconsole.io.logging_setup.configure(stream=False)
    logger.info(
        "logging configured level=%s file=%s",
        log_runtime.level_name,
        log_runtime.file_path,
    )

    overrides = {}
    if args.max_entries is not None:
        overrides["maxLogEntries"] = args.max_entries
    if args.flash is not None:
        overrides["flash"] = args.flash
    try:
        settings = logconsole.app.settings_store.create(overrides)
    except InvalidArgument as exc:
        print(f"   Invalid option: {exc}")
        return 2

    documents = _read_documents(args.paths) or list(_SCRATCH_DOCUMENTS)
    app = LogConsoleApp(
        documents,
        settings=settings,
        restorer=SettingsLayoutRestorer(),
        max_length=settings.get("maxLogEntries"),
        flash_enabled=settings.get("flash"),
        demo_interval=DEMO_INTERVAL if args.demo else None,
    )
    app.run()
    logger.info("logconsole exited")
    return 0
