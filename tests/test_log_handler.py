"""Tests for the stdlib logging bridge."""

import logging

import pytest

from logconsole.core.entries import LogLevel
from logconsole.core.log_handler import SOURCE_ATTR, LoggerRegistryHandler, level_for
from logconsole.core.registry import LoggerRegistry


@pytest.fixture
def bridged():
    registry = LoggerRegistry(10)
    handler = LoggerRegistryHandler(registry, default_source="fallback.txt")
    log = logging.getLogger("logconsole.tests.bridge")
    log.setLevel(logging.DEBUG)
    log.addHandler(handler)
    yield registry, log
    log.removeHandler(handler)
    log.setLevel(logging.NOTSET)


def test_record_goes_to_named_source(bridged):
    registry, log = bridged
    log.warning("kernel %s", "busy", extra={SOURCE_ATTR: "a.txt"})
    entry = registry.get_logger("a.txt").last()
    assert entry.payload == "kernel busy"
    assert entry.level is LogLevel.WARNING


def test_record_without_source_uses_default(bridged):
    registry, log = bridged
    log.info("hello")
    assert registry.get_logger("fallback.txt").last().payload == "hello"


def test_explicit_none_source(bridged):
    registry, log = bridged
    log.debug("nowhere", extra={SOURCE_ATTR: None})
    assert registry.get_logger(None).last().level is LogLevel.DEBUG


@pytest.mark.parametrize("levelno,expected", [
    (logging.CRITICAL, LogLevel.ERROR),
    (logging.ERROR, LogLevel.ERROR),
    (logging.WARNING, LogLevel.WARNING),
    (logging.INFO, LogLevel.INFO),
    (logging.DEBUG, LogLevel.DEBUG),
    (5, LogLevel.UNSET),
])
def test_level_mapping(levelno, expected):
    assert level_for(levelno) is expected
