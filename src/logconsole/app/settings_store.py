"""Settings store schema, loading and reactions.

// [LAW:one-source-of-truth] All known settings and their defaults live in SCHEMA.
// [LAW:single-enforcer] Persistence reaction is the single writer to disk.
// [LAW:single-enforcer] Load failures are caught in SettingsStore.load() only.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable

import logconsole.io.settings
from logconsole.core.errors import ConfigurationLoadFailure, InvalidArgument
from logconsole.core.registry import DEFAULT_MAX_LENGTH
from logconsole.core.signals import Disposer

logger = logging.getLogger(__name__)

# [LAW:one-source-of-truth] All known settings and their defaults
SCHEMA: dict[str, object] = {
    "maxLogEntries": DEFAULT_MAX_LENGTH,
    "flash": False,
}


def _positive_int(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidArgument(f"expected a positive integer, got {value!r}")
    return value


def _boolean(value) -> bool:
    if not isinstance(value, bool):
        raise InvalidArgument(f"expected a boolean, got {value!r}")
    return value


VALIDATORS: dict[str, Callable[[Any], Any]] = {
    "maxLogEntries": _positive_int,
    "flash": _boolean,
}


@dataclass
class _Reaction:
    selector: Callable[[], Any]
    effect: Callable[[Any], None]
    last: Any


class SettingsStore:
    """Validated key/value settings with change reactions.

    Values always hold something usable: schema defaults until load()
    succeeds, and the last good values whenever a later load fails.
    """

    def __init__(self, schema: dict[str, object] | None = None, initial: dict | None = None) -> None:
        self._schema = dict(SCHEMA if schema is None else schema)
        self._values: dict[str, object] = dict(self._schema)
        self._reactions: list[_Reaction] = []
        self.last_error: ConfigurationLoadFailure | None = None
        self.loaded = False
        # Explicit overrides (CLI flags) win over whatever load() reads.
        self._overrides = {k: self._validate(k, v) for k, v in (initial or {}).items() if k in self._schema}
        # Values as they would be without overrides; this is what gets persisted.
        self._base: dict[str, object] = dict(self._schema)
        self._values.update(self._overrides)

    @property
    def schema(self) -> dict[str, object]:
        return dict(self._schema)

    def get(self, key: str):
        return self._values[key]

    def snapshot(self) -> dict[str, object]:
        return dict(self._values)

    def persistable(self) -> dict[str, object]:
        """Values to write to disk. Overridden keys keep their loaded value."""
        return dict(self._base)

    def is_overridden(self, key: str) -> bool:
        return key in self._overrides

    def set(self, key: str, value) -> None:
        self.update({key: value})

    def update(self, values: dict) -> None:
        """Validate and apply several values, then run reactions once."""
        unknown = [k for k in values if k not in self._schema]
        if unknown:
            raise KeyError(f"unknown settings: {', '.join(unknown)}")
        validated = {k: self._validate(k, v) for k, v in values.items()}
        # An explicit change replaces the override for that key.
        for key in validated:
            self._overrides.pop(key, None)
        self._base.update(validated)
        self._values.update(validated)
        self._run_reactions()

    def load(self) -> bool:
        """Seed values from disk. Returns False when the store could not be read.

        Unknown keys on disk are ignored; invalid values fall back to the
        schema default with a warning. A read failure keeps current values.
        """
        try:
            disk_data = logconsole.io.settings.load_settings()
        except ConfigurationLoadFailure as exc:
            self.last_error = exc
            logger.warning("settings load failed, keeping current values: %s", exc)
            return False

        merged: dict[str, object] = {}
        for key, default in self._schema.items():
            if key not in disk_data:
                merged[key] = default
                continue
            try:
                merged[key] = self._validate(key, disk_data[key])
            except InvalidArgument as exc:
                logger.warning("invalid setting %s, using default %r: %s", key, default, exc)
                merged[key] = default
        self._base.update(merged)
        merged.update(self._overrides)
        self._values.update(merged)
        self.last_error = None
        self.loaded = True
        self._run_reactions()
        return True

    reload = load

    def reaction(
        self,
        selector: Callable[[], Any],
        effect: Callable[[Any], None],
        *,
        fire_immediately: bool = False,
    ) -> Disposer:
        """Run effect(value) whenever selector() yields a new value. Returns a disposer."""
        record = _Reaction(selector, effect, selector())
        self._reactions.append(record)
        if fire_immediately:
            effect(record.last)

        def dispose() -> None:
            if record in self._reactions:
                self._reactions.remove(record)

        return dispose

    def _validate(self, key: str, value):
        validator = VALIDATORS.get(key)
        return validator(value) if validator is not None else value

    def _run_reactions(self) -> None:
        for record in tuple(self._reactions):
            value = record.selector()
            if value == record.last:
                continue
            record.last = value
            record.effect(value)


def create(initial_overrides: dict | None = None) -> SettingsStore:
    """Create a settings store holding defaults (phase 1). Call load() to read disk."""
    return SettingsStore(SCHEMA, initial=initial_overrides)


def setup_reactions(
    store: SettingsStore,
    context=None,
    *,
    persist: bool = True,
    fire_immediately: bool = True,
) -> list[Disposer]:
    """Register all reactions. Returns list of disposers.

    context: dict with live component refs ("registry", "status").
    fire_immediately=False leaves consumers at their current values until
    the next settings change, e.g. after a failed load.
    """
    disposers = []

    if persist:
        disposers.append(store.reaction(
            store.persistable,
            lambda snapshot: _safe_persist(snapshot),
        ))

    if context:
        registry = context.get("registry")
        if registry is not None:
            disposers.append(store.reaction(
                lambda: store.get("maxLogEntries"),
                lambda val, r=registry: r.set_max_length(int(val)),
                fire_immediately=fire_immediately,
            ))

        status = context.get("status")
        if status is not None:
            disposers.append(store.reaction(
                lambda: store.get("flash"),
                lambda val, s=status: setattr(s, "flash_enabled", bool(val)),
                fire_immediately=fire_immediately,
            ))

    return disposers


def _safe_persist(snapshot: dict) -> None:
    """Write settings to disk. Catches and logs I/O errors."""
    try:
        existing = logconsole.io.settings.load_settings()
        existing.update(snapshot)
        logconsole.io.settings.save_settings(existing)
    except Exception:
        logger.exception("Failed to persist settings to disk")
