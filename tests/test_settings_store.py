"""Tests for settings_store: validated settings with persistence and consumer sync."""

import json
from unittest.mock import MagicMock

import pytest

import logconsole.app.settings_store
from logconsole.core.errors import InvalidArgument
from logconsole.core.registry import LoggerRegistry


def _write(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(data if isinstance(data, str) else json.dumps(data))


class TestCreate:
    def test_creates_store_with_schema_defaults(self, tmp_settings):
        store = logconsole.app.settings_store.create()
        assert store.get("maxLogEntries") == 1000
        assert store.get("flash") is False
        assert store.loaded is False

    def test_create_does_not_touch_disk(self, tmp_settings):
        _write(tmp_settings, {"maxLogEntries": 5})
        store = logconsole.app.settings_store.create()
        assert store.get("maxLogEntries") == 1000

    def test_initial_overrides(self, tmp_settings):
        store = logconsole.app.settings_store.create(initial_overrides={"flash": True})
        assert store.get("flash") is True

    def test_invalid_override_rejected(self, tmp_settings):
        with pytest.raises(InvalidArgument):
            logconsole.app.settings_store.create(initial_overrides={"maxLogEntries": 0})


class TestLoad:
    def test_seeds_from_disk(self, tmp_settings):
        _write(tmp_settings, {"maxLogEntries": 42})
        store = logconsole.app.settings_store.create()
        assert store.load() is True
        assert store.get("maxLogEntries") == 42
        # Unset keys get schema defaults
        assert store.get("flash") is False
        assert store.loaded is True

    def test_missing_file_loads_defaults(self, tmp_settings):
        store = logconsole.app.settings_store.create()
        assert store.load() is True
        assert store.snapshot() == {"maxLogEntries": 1000, "flash": False}

    def test_initial_overrides_win_over_disk(self, tmp_settings):
        _write(tmp_settings, {"flash": False, "maxLogEntries": 9})
        store = logconsole.app.settings_store.create(initial_overrides={"flash": True})
        store.load()
        assert store.get("flash") is True
        assert store.get("maxLogEntries") == 9

    def test_invalid_value_falls_back_per_key(self, tmp_settings, caplog):
        _write(tmp_settings, {"maxLogEntries": -4, "flash": True})
        store = logconsole.app.settings_store.create()
        assert store.load() is True
        assert store.get("maxLogEntries") == 1000
        assert store.get("flash") is True
        assert "invalid setting maxLogEntries" in caplog.text

    def test_malformed_file_keeps_values(self, tmp_settings, caplog):
        store = logconsole.app.settings_store.create()
        store.set("maxLogEntries", 12)
        _write(tmp_settings, "[1, 2")
        assert store.load() is False
        assert store.get("maxLogEntries") == 12
        assert store.last_error is not None
        assert str(tmp_settings) in str(store.last_error)
        assert "settings load failed" in caplog.text

    def test_non_object_file_is_a_failure(self, tmp_settings):
        _write(tmp_settings, "[]")
        store = logconsole.app.settings_store.create()
        assert store.load() is False

    def test_unknown_disk_keys_ignored(self, tmp_settings):
        _write(tmp_settings, {"layout": ["logconsole"], "theme": "dark"})
        store = logconsole.app.settings_store.create()
        store.load()
        assert "layout" not in store.snapshot()


class TestSet:
    def test_unknown_key(self, tmp_settings):
        store = logconsole.app.settings_store.create()
        with pytest.raises(KeyError):
            store.set("nope", 1)

    @pytest.mark.parametrize("key,value", [
        ("maxLogEntries", 0),
        ("maxLogEntries", "10"),
        ("maxLogEntries", True),
        ("flash", "yes"),
    ])
    def test_invalid_values_rejected(self, tmp_settings, key, value):
        store = logconsole.app.settings_store.create()
        with pytest.raises(InvalidArgument):
            store.set(key, value)
        assert store.snapshot() == {"maxLogEntries": 1000, "flash": False}


class TestReaction:
    def test_fires_only_on_change(self, tmp_settings):
        store = logconsole.app.settings_store.create()
        seen = []
        store.reaction(lambda: store.get("flash"), seen.append)
        store.set("flash", False)
        store.set("flash", True)
        assert seen == [True]

    def test_fire_immediately(self, tmp_settings):
        store = logconsole.app.settings_store.create()
        seen = []
        store.reaction(lambda: store.get("maxLogEntries"), seen.append, fire_immediately=True)
        assert seen == [1000]

    def test_disposer_stops_reaction(self, tmp_settings):
        store = logconsole.app.settings_store.create()
        seen = []
        dispose = store.reaction(lambda: store.get("flash"), seen.append)
        dispose()
        store.set("flash", True)
        assert seen == []


class TestSetupReactions:
    def test_persistence_reaction(self, tmp_settings):
        store = logconsole.app.settings_store.create()
        logconsole.app.settings_store.setup_reactions(store)

        store.set("maxLogEntries", 25)

        data = json.loads(tmp_settings.read_text())
        assert data["maxLogEntries"] == 25
        assert data["flash"] is False

    def test_persistence_keeps_other_keys(self, tmp_settings):
        _write(tmp_settings, {"layout": ["logconsole"]})
        store = logconsole.app.settings_store.create()
        logconsole.app.settings_store.setup_reactions(store)
        store.set("flash", True)
        data = json.loads(tmp_settings.read_text())
        assert data["layout"] == ["logconsole"]
        assert data["flash"] is True

    def test_persist_disabled(self, tmp_settings):
        store = logconsole.app.settings_store.create()
        logconsole.app.settings_store.setup_reactions(store, persist=False)
        store.set("flash", True)
        assert not tmp_settings.exists()

    def test_overrides_are_not_persisted(self, tmp_settings):
        _write(tmp_settings, {"maxLogEntries": 1000, "flash": False})
        store = logconsole.app.settings_store.create({"maxLogEntries": 5})
        store.load()
        logconsole.app.settings_store.setup_reactions(store, {})

        _write(tmp_settings, {"maxLogEntries": 1000, "flash": True})
        assert store.reload() is True

        data = json.loads(tmp_settings.read_text())
        assert data == {"maxLogEntries": 1000, "flash": True}
        # The override still applies for this run.
        assert store.get("maxLogEntries") == 5
        assert store.get("flash") is True

    def test_explicit_set_replaces_override(self, tmp_settings):
        _write(tmp_settings, {"maxLogEntries": 1000})
        store = logconsole.app.settings_store.create({"maxLogEntries": 5})
        store.load()
        logconsole.app.settings_store.setup_reactions(store)

        store.set("maxLogEntries", 7)

        assert store.is_overridden("maxLogEntries") is False
        assert json.loads(tmp_settings.read_text())["maxLogEntries"] == 7
        _write(tmp_settings, {"maxLogEntries": 9})
        store.reload()
        assert store.get("maxLogEntries") == 9

    def test_consumer_sync(self, tmp_settings):
        store = logconsole.app.settings_store.create()
        registry = LoggerRegistry(1000)
        status = MagicMock()
        context = {"registry": registry, "status": status}
        logconsole.app.settings_store.setup_reactions(store, context)

        # fire_immediately syncs initial value
        assert status.flash_enabled is False

        store.set("maxLogEntries", 4)
        store.set("flash", True)
        assert registry.max_length == 4
        assert status.flash_enabled is True

    def test_no_immediate_sync_after_failed_load(self, tmp_settings):
        store = logconsole.app.settings_store.create()
        registry = LoggerRegistry(77)
        logconsole.app.settings_store.setup_reactions(
            store, {"registry": registry}, fire_immediately=False,
        )
        assert registry.max_length == 77

    def test_persist_failure_is_logged(self, tmp_settings, monkeypatch, caplog):
        def _boom(data):
            raise OSError("disk full")

        monkeypatch.setattr("logconsole.io.settings.save_settings", _boom)
        store = logconsole.app.settings_store.create()
        logconsole.app.settings_store.setup_reactions(store)
        store.set("flash", True)
        assert store.get("flash") is True
        assert "Failed to persist settings" in caplog.text

    def test_dispose_reactions(self, tmp_settings):
        store = logconsole.app.settings_store.create()
        registry = LoggerRegistry(10)
        disposers = logconsole.app.settings_store.setup_reactions(store, {"registry": registry}, persist=False)
        for dispose in disposers:
            dispose()
        store.set("maxLogEntries", 3)
        assert registry.max_length == 1000
