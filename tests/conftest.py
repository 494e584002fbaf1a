"""Pytest configuration and fixtures."""

import io
import logging

import pytest

from microtest.config import ColorMode
from microtest.reporting.console import ConsoleReporter, use_reporter


@pytest.fixture(autouse=True)
def cleanup_loggers():
    """Detach handlers from microtest loggers after each test.

    The loggers stay registered because library modules hold references to
    their children.
    """
    yield

    names = [
        name
        for name in logging.Logger.manager.loggerDict.keys()
        if name.startswith("microtest")
    ]

    for name in names:
        logger = logging.getLogger(name)
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)


@pytest.fixture
def report_stream():
    """Install an uncolored reporter writing to a StringIO for the test."""
    stream = io.StringIO()
    with use_reporter(ConsoleReporter(stream=stream, color=ColorMode.NEVER)):
        yield stream
