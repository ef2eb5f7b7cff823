"""Configuration loading for mtunit (.mtunit.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigError

CONFIG_FILENAME = ".mtunit.yml"

DEFAULT_SUPPORT_INCLUDES = ("../Include/MTUnit.mqh", "../Include/MTUnitCfg.mqh")


@dataclass
class PathsConfig:
    """Project layout relative to the MQL5 project root."""

    test_dir: str = "Test"
    include_dir: str = "Include"
    runners_dir: str = "Runners"
    output_name: str = "MTUnitAllTests.mqh"
    file_pattern: str = "*.mqh"


@dataclass
class HeaderConfig:
    """Boilerplate written at the top of the aggregate file."""

    author: str = "MTUnit"
    copyright: str = "Copyright © 2018, MTUnit"
    link: str = ""
    version: str = "1.00"
    support_includes: List[str] = field(
        default_factory=lambda: list(DEFAULT_SUPPORT_INCLUDES)
    )


@dataclass
class WatchConfig:
    """Watch loop tuning."""

    poll_interval: float = 0.5


@dataclass
class MTUnitConfig:
    """Represents the settings defined in .mtunit.yml."""

    root: Path
    paths: PathsConfig = field(default_factory=PathsConfig)
    header: HeaderConfig = field(default_factory=HeaderConfig)
    watch: WatchConfig = field(default_factory=WatchConfig)

    @property
    def test_dir(self) -> Path:
        return self.root / self.paths.test_dir

    @property
    def include_dir(self) -> Path:
        return self.root / self.paths.include_dir

    @property
    def runners_dir(self) -> Path:
        return self.root / self.paths.runners_dir

    @property
    def output_path(self) -> Path:
        return self.include_dir / self.paths.output_name


def load_config(root: Path) -> MTUnitConfig:
    """Load configuration for the project rooted at ``root``."""
    config_file = _resolve_config_path(Path(root))
    project_root = config_file.parent

    if not config_file.exists():
        return MTUnitConfig(root=project_root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    paths = PathsConfig()
    paths_data = _as_dict(data.get("paths"))
    if paths_data:
        paths.test_dir = _as_str(paths_data.get("test_dir")) or paths.test_dir
        paths.include_dir = _as_str(paths_data.get("include_dir")) or paths.include_dir
        paths.runners_dir = _as_str(paths_data.get("runners_dir")) or paths.runners_dir
        paths.output_name = _as_str(paths_data.get("output_name")) or paths.output_name
        paths.file_pattern = _as_str(paths_data.get("file_pattern")) or paths.file_pattern

    header = HeaderConfig()
    header_data = _as_dict(data.get("header"))
    if header_data:
        header.author = _as_str(header_data.get("author")) or header.author
        header.copyright = _as_str(header_data.get("copyright")) or header.copyright
        link = _as_str(header_data.get("link"))
        if link is not None:
            header.link = link
        header.version = _as_str(header_data.get("version")) or header.version
        if "support_includes" in header_data:
            header.support_includes = _as_str_list(header_data.get("support_includes"))

    watch = WatchConfig()
    watch_data = _as_dict(data.get("watch"))
    if watch_data:
        interval = _as_float(watch_data.get("poll_interval"))
        if interval is not None and interval > 0:
            watch.poll_interval = interval

    return MTUnitConfig(root=project_root, paths=paths, header=header, watch=watch)


def _resolve_config_path(root: Path) -> Path:
    root = root.expanduser()
    if root.name == CONFIG_FILENAME:
        return root.resolve()
    return (root / CONFIG_FILENAME).resolve()


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []
