# topmark:header:start
#
#   project      : SpanMark
#   file         : test_config_loaders.py
#   file_relpath : tests/config/test_config_loaders.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for TOML configuration discovery and loading."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from spanmark.config.loaders import (
    discover_config_file,
    load_config,
    load_config_file,
    parse_toml_text,
)
from spanmark.core.errors import ConfigError

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def nested(tmp_path: Path) -> Path:
    """Return ``<tmp>/outer/inner`` with a ``spanmark.toml`` in ``outer``."""
    inner: Path = tmp_path / "outer" / "inner"
    inner.mkdir(parents=True)
    (tmp_path / "outer" / "spanmark.toml").write_text("tab-width = 2\n", encoding="utf-8")
    return inner


def test_parse_error_is_a_config_error() -> None:
    with pytest.raises(ConfigError, match="broken.toml"):
        parse_toml_text("tab-width = = 2", where="broken.toml")


def test_discovery_walks_upwards(nested: Path) -> None:
    assert discover_config_file(nested) == nested.parent / "spanmark.toml"


def test_pyproject_without_tool_table_is_skipped(nested: Path) -> None:
    (nested / "pyproject.toml").write_text("[project]\nname = 'x'\n", encoding="utf-8")
    assert discover_config_file(nested) == nested.parent / "spanmark.toml"


def test_pyproject_with_tool_table_is_used(nested: Path) -> None:
    pyproject: Path = nested / "pyproject.toml"
    pyproject.write_text("[tool.spanmark]\ntool-name = 'mycc'\n", encoding="utf-8")

    assert discover_config_file(nested) == pyproject
    config = load_config(start=nested).freeze()
    assert config.tool_name == "mycc"
    assert config.tab_width == 4


def test_spanmark_toml_wins_in_the_same_directory(nested: Path) -> None:
    outer: Path = nested.parent
    (outer / "pyproject.toml").write_text("[tool.spanmark]\ntab-width = 8\n", encoding="utf-8")
    assert discover_config_file(nested) == outer / "spanmark.toml"


def test_explicit_path_skips_discovery(nested: Path, tmp_path: Path) -> None:
    explicit: Path = tmp_path / "custom.toml"
    explicit.write_text("levels = ['error']\n", encoding="utf-8")

    draft = load_config(explicit, start=nested)

    assert draft.tab_width == 4
    assert draft.config_files == [explicit]


def test_discovery_can_be_disabled(nested: Path) -> None:
    draft = load_config(start=nested, discover=False)
    assert draft.config_files == []
    assert draft.tab_width == 4


def test_pyproject_without_table_cannot_be_loaded_explicitly(tmp_path: Path) -> None:
    pyproject: Path = tmp_path / "pyproject.toml"
    pyproject.write_text("[project]\nname = 'x'\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="tool.spanmark"):
        load_config_file(pyproject)


def test_missing_file_is_a_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config_file(tmp_path / "missing.toml")
