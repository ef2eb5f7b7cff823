"""Logging and diagnostics output for mtunit commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Sequence

_LOGGER_NAME = "mtunit"

CONSOLE_FORMAT = "[mtunit] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the mtunit hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Route mtunit diagnostics to the console and, optionally, a log file."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setLevel(level)
        sink.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(sink)

    # Observer threads log every inotify/FSEvents hiccup at DEBUG.
    logging.getLogger("watchdog").setLevel(logging.DEBUG if verbose else logging.WARNING)

    return logger


def report_suite_map(
    logger: logging.Logger, suites: Mapping[str, Sequence[str]]
) -> None:
    """Write the discovered class -> test case map for human consumption."""
    logger.info("Test Suites and Test Cases found:")
    if not suites:
        logger.info("(none)")
    for class_name, test_cases in suites.items():
        logger.info("MTUnit: %s", class_name)
        for test_case in test_cases:
            logger.info("\tTestCase: %s", test_case)


__all__ = ["configure_logging", "get_logger", "report_suite_map"]
