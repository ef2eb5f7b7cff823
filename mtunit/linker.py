"""Point the terminal's autoRunTest.ini at a compiled expert advisor."""

from __future__ import annotations

from pathlib import Path

from .config import MTUnitConfig, load_config
from .errors import IOFailureError, LinkerError, MissingInputError
from .logging import get_logger

RUNNER_CONFIG_NAME = "autoRunTest.ini"
EXPERT_KEY = "Expert="

_EXPERT_ROOTS = ("MQL5\\Experts\\", "MQL5/Experts/")

logger = get_logger("linker")


def normalize_expert_path(expert_path: str) -> str:
    """Turn an ``.mq5`` source path into the ``.ex5`` path the terminal expects.

    The path is made relative to ``MQL5/Experts`` (either slash style) and the
    extension swapped from ``.mq*`` to ``.ex*``. Header files cannot be run.
    """
    if ".mqh" in expert_path:
        raise LinkerError("Cannot run Header Files (.mqh)")
    for marker in _EXPERT_ROOTS:
        if marker in expert_path:
            expert_path = expert_path[expert_path.index(marker) + len(marker) :]
            break
    return expert_path.replace(".mq", ".ex")


def rewrite_expert_key(content: str, expert: str) -> str:
    lines = content.split("\n")
    for index, line in enumerate(lines):
        if line.startswith(EXPERT_KEY):
            lines[index] = f"{EXPERT_KEY}{expert}"
    return "\n".join(lines)


def link_expert(
    root: str | Path, expert_path: str, *, config: MTUnitConfig | None = None
) -> Path:
    """Rewrite the ``Expert=`` entry of the runner config; return the config path."""
    config = config or load_config(Path(root).expanduser().resolve())
    expert = normalize_expert_path(expert_path)
    ini_path = config.runners_dir / RUNNER_CONFIG_NAME

    try:
        content = ini_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise MissingInputError(f"{RUNNER_CONFIG_NAME} not found") from exc
    except OSError as exc:
        raise IOFailureError(f"Error reading {RUNNER_CONFIG_NAME}: {exc}") from exc

    logger.info("Generating config file to run %s", expert)
    try:
        with ini_path.open("w", encoding="utf-8", newline="\n") as handle:
            handle.write(rewrite_expert_key(content, expert))
    except OSError as exc:
        raise IOFailureError(f"Error writing {RUNNER_CONFIG_NAME}: {exc}") from exc

    logger.info("%s configured successfully!", RUNNER_CONFIG_NAME)
    return ini_path


__all__ = ["link_expert", "normalize_expert_path", "rewrite_expert_key"]
