"""Copy the terminal's dated test log into Runners/ with ANSI colours."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Iterable, List

from .config import MTUnitConfig, load_config
from .errors import IOFailureError, MissingInputError
from .logging import get_logger
from .textio import decode_text, split_lines

LOG_FOLDER_CONFIG_NAME = "logFolderPath.ini"
OUTPUT_LOG_NAME = "logFile.log"

GREEN = "\x1b[32m"
RED = "\x1b[31m"
RESET = "\x1b[0m"

PASS_MARKER = "OK"
FAIL_MARKER = "***FAIL***"

# Terminal log lines start with a fixed-width prefix that carries no information.
_PREFIX_WIDTH = 5

logger = get_logger("logfile")


def colorize_line(line: str) -> str:
    line = line[_PREFIX_WIDTH:]
    if PASS_MARKER in line:
        line = f"{GREEN}{line}{RESET}"
    if FAIL_MARKER in line:
        line = f"{RED}{line}{RESET}"
    return line


def colorize_lines(lines: Iterable[str]) -> List[str]:
    return [colorize_line(line) for line in lines]


def dated_log_name(day: date) -> str:
    return f"{day:%Y%m%d}.log"


def colorize_log(
    root: str | Path,
    *,
    config: MTUnitConfig | None = None,
    today: date | None = None,
) -> Path:
    """Colourise today's terminal log into ``Runners/logFile.log`` and delete the original."""
    config = config or load_config(Path(root).expanduser().resolve())
    folder_ini = config.runners_dir / LOG_FOLDER_CONFIG_NAME

    try:
        log_folder = Path(folder_ini.read_text(encoding="utf-8").strip())
    except FileNotFoundError as exc:
        raise MissingInputError(f"{LOG_FOLDER_CONFIG_NAME} not found") from exc
    except OSError as exc:
        raise IOFailureError(f"Error reading {LOG_FOLDER_CONFIG_NAME}: {exc}") from exc

    logger.info("Catching output...")
    if not log_folder.exists():
        raise MissingInputError(f"File: {log_folder} does not exist!")

    source = log_folder / dated_log_name(today or date.today())
    try:
        raw = source.read_bytes()
    except FileNotFoundError as exc:
        raise MissingInputError(f"Log file not found: {source}") from exc
    except OSError as exc:
        raise IOFailureError(f"Error reading log file {source}: {exc}") from exc

    target = config.runners_dir / OUTPUT_LOG_NAME
    lines = colorize_lines(split_lines(decode_text(raw)))
    try:
        with target.open("w", encoding="utf-8", newline="\n") as handle:
            for line in lines:
                handle.write(f"{line}\n")
    except OSError as exc:
        raise IOFailureError(f"Could not write the logFile in: {target}") from exc

    try:
        source.unlink()
    except OSError as exc:
        raise IOFailureError(f"Could not remove original log {source}: {exc}") from exc

    logger.info("%s generated successfully!", OUTPUT_LOG_NAME)
    return target


__all__ = [
    "colorize_line",
    "colorize_lines",
    "colorize_log",
    "dated_log_name",
]
