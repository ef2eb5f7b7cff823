"""Exception hierarchy shared by the mtunit tools."""

from __future__ import annotations


class MTUnitError(RuntimeError):
    """Base class for failures that abort a single tool invocation."""


class MissingInputError(MTUnitError):
    """Raised when a required file or directory does not exist."""


class IOFailureError(MTUnitError):
    """Raised when a file cannot be opened for the required read or write."""


class LinkerError(MTUnitError):
    """Raised when the expert path handed to the linker cannot be run."""


class ConfigError(MTUnitError):
    """Raised when the configuration file cannot be parsed."""


__all__ = [
    "ConfigError",
    "IOFailureError",
    "LinkerError",
    "MTUnitError",
    "MissingInputError",
]
