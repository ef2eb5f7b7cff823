"""Tests for mtunit.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from mtunit.config import MTUnitConfig, load_config
from mtunit.errors import ConfigError


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, MTUnitConfig)
    assert config.root == tmp_path.resolve()
    assert config.paths.test_dir == "Test"
    assert config.paths.file_pattern == "*.mqh"
    assert config.output_path == tmp_path.resolve() / "Include" / "MTUnitAllTests.mqh"
    assert config.header.support_includes == [
        "../Include/MTUnit.mqh",
        "../Include/MTUnitCfg.mqh",
    ]
    assert config.watch.poll_interval == 0.5


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    (tmp_path / ".mtunit.yml").write_text(
        """
paths:
  test_dir: Suites
  include_dir: Inc
  runners_dir: Run
  output_name: AllSuites.mqh
  file_pattern: "*.mq?"
header:
  author: Jane Doe
  copyright: "Copyright 2024, Jane Doe"
  link: "https://example.com"
  version: "2.00"
  support_includes:
    - ../Inc/Framework.mqh
watch:
  poll_interval: 2
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.test_dir == tmp_path.resolve() / "Suites"
    assert config.include_dir == tmp_path.resolve() / "Inc"
    assert config.runners_dir == tmp_path.resolve() / "Run"
    assert config.paths.output_name == "AllSuites.mqh"
    assert config.paths.file_pattern == "*.mq?"
    assert config.header.author == "Jane Doe"
    assert config.header.copyright == "Copyright 2024, Jane Doe"
    assert config.header.link == "https://example.com"
    assert config.header.version == "2.00"
    assert config.header.support_includes == ["../Inc/Framework.mqh"]
    assert config.watch.poll_interval == 2.0


def test_load_config_accepts_config_file_path(tmp_path: Path) -> None:
    config_file = tmp_path / ".mtunit.yml"
    config_file.write_text("paths:\n  test_dir: Specs\n", encoding="utf-8")

    config = load_config(config_file)

    assert config.root == tmp_path.resolve()
    assert config.paths.test_dir == "Specs"


def test_load_config_treats_empty_file_as_defaults(tmp_path: Path) -> None:
    (tmp_path / ".mtunit.yml").write_text("\n", encoding="utf-8")

    assert load_config(tmp_path).paths.output_name == "MTUnitAllTests.mqh"


def test_load_config_rejects_non_mapping_root(tmp_path: Path) -> None:
    (tmp_path / ".mtunit.yml").write_text("- Test\n- Include\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / ".mtunit.yml").write_text("paths: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(tmp_path)
