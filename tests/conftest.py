"""Pytest configuration and shared fixtures for logconsole tests."""

import logging

import pytest

import logconsole.io.logging_setup


@pytest.fixture(autouse=True)
def tmp_settings(tmp_path, monkeypatch):
    """Redirect the settings file to a temp directory for every test."""
    settings_file = tmp_path / "config" / "settings.json"
    monkeypatch.setattr(
        "logconsole.io.settings.get_config_path",
        lambda: settings_file,
    )
    return settings_file


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    logconsole.io.logging_setup.reset_for_tests()
    sources = logging.getLogger(logconsole.io.logging_setup.SOURCES_LOGGER)
    for handler in list(sources.handlers):
        sources.removeHandler(handler)
    sources.setLevel(logging.NOTSET)
