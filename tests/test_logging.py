"""Unit tests for serdegen.logging module."""

import io
import logging

import pytest

from serdegen.logging import (
    SerdeGenLoggerFactory,
    get_logger,
    configure_logging,
    set_level,
    SERDEGEN_ROOT_LOGGER,
)


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger(SERDEGEN_ROOT_LOGGER)
    level = root.level
    yield
    SerdeGenLoggerFactory.reset()
    root.setLevel(level)


class TestSerdeGenLoggerFactory:
    """Tests for SerdeGenLoggerFactory class."""

    def test_get_logger_root(self):
        logger = SerdeGenLoggerFactory.get_logger()
        assert logger.name == SERDEGEN_ROOT_LOGGER

    def test_get_logger_component(self):
        logger = SerdeGenLoggerFactory.get_logger("generator")
        assert logger.name == f"{SERDEGEN_ROOT_LOGGER}.generator"

    def test_level_for(self):
        assert SerdeGenLoggerFactory.level_for(True) == logging.DEBUG
        assert SerdeGenLoggerFactory.level_for(False) == logging.INFO

    def test_configure(self):
        logger = SerdeGenLoggerFactory.configure(level=logging.DEBUG, stream=io.StringIO())
        assert logger.level == logging.DEBUG
        assert SerdeGenLoggerFactory.is_configured() is True

    def test_configure_writes_to_stream(self):
        stream = io.StringIO()
        SerdeGenLoggerFactory.configure(stream=stream)
        get_logger("registry").info("Loaded %d containers", 3)
        assert "INFO serdegen.registry: Loaded 3 containers" in stream.getvalue()

    def test_configure_twice_replaces_handler(self):
        logger = SerdeGenLoggerFactory.configure(stream=io.StringIO())
        count = len(logger.handlers)
        SerdeGenLoggerFactory.configure(stream=io.StringIO())
        assert len(logger.handlers) == count

    def test_reset(self):
        logger = SerdeGenLoggerFactory.configure(stream=io.StringIO())
        count = len(logger.handlers)
        SerdeGenLoggerFactory.reset()
        assert SerdeGenLoggerFactory.is_configured() is False
        assert len(logger.handlers) == count - 1

    def test_set_level(self):
        SerdeGenLoggerFactory.set_level(logging.WARNING, "test_component")
        logger = SerdeGenLoggerFactory.get_logger("test_component")
        assert logger.level == logging.WARNING


class TestModuleFunctions:
    """Tests for module-level functions."""

    def test_get_logger(self):
        logger = get_logger("cli")
        assert logger.name == f"{SERDEGEN_ROOT_LOGGER}.cli"

    def test_get_logger_empty(self):
        logger = get_logger()
        assert logger.name == SERDEGEN_ROOT_LOGGER

    def test_configure_logging_verbose(self):
        logger = configure_logging(verbose=True, stream=io.StringIO())
        assert logger.level == logging.DEBUG

    def test_configure_logging_explicit_level_wins(self):
        logger = configure_logging(level=logging.ERROR, verbose=True, stream=io.StringIO())
        assert logger.level == logging.ERROR

    def test_set_level_function(self):
        set_level(logging.ERROR, "test")
        logger = get_logger("test")
        assert logger.level == logging.ERROR

    def test_loggers_are_hierarchical(self):
        parent = get_logger()
        child = get_logger("child")
        assert child.parent is parent
