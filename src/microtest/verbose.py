from __future__ import annotations

import logging
import sys
from pathlib import Path

LOGGER_NAME = "microtest"

_FORMATTER = logging.Formatter(
    fmt="[%(asctime)s] %(message)s", datefmt="%Y-%m-%dT%H:%M:%S"
)


def _attach(logger: logging.Logger, handler: logging.Handler) -> None:
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(_FORMATTER)
    logger.addHandler(handler)


def setup_logger(
    debug_file: Path | None = None,
    verbose: bool = False,
    logger_name: str = LOGGER_NAME,
) -> logging.Logger:
    """Route runner debug events to a file and/or stderr.

    Replaces whatever handlers ``logger_name`` had before. The runner and
    CLI log through children of "microtest", so the default name catches
    both. Stdout is left alone for the test report.
    """
    logger = logging.getLogger(logger_name)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    logger.disabled = False
    logger.setLevel(logging.DEBUG)

    if debug_file is not None:
        debug_file.parent.mkdir(parents=True, exist_ok=True)
        _attach(logger, logging.FileHandler(debug_file, mode="a"))
    if verbose:
        _attach(logger, logging.StreamHandler(sys.stderr))

    # quiet by default: nothing configured means nothing emitted
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger
