# topmark:header:start
#
#   project      : SpanMark
#   file         : test_render_config.py
#   file_relpath : tests/config/test_render_config.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the rendering configuration model and its merge policy."""

from __future__ import annotations

import logging

import pytest

from spanmark.config.model import ALL_LEVELS, MutableRenderConfig, RenderConfig, parse_levels
from spanmark.core.errors import ConfigError
from spanmark.diagnostic.model import Level
from tests.conftest import make_config, parametrize


def test_defaults() -> None:
    config = RenderConfig()
    assert config.tab_width == 4
    assert config.tool_name == "rustc"
    assert config.levels == ALL_LEVELS
    assert config.explain_codes is None
    assert not config.anonymize_line_numbers
    assert not config.color
    assert MutableRenderConfig.from_defaults().freeze() == config


def test_thaw_freeze_round_trip() -> None:
    config: RenderConfig = make_config(tab_width=2, levels={Level.ERROR}, explain_codes={"E1"})
    assert config.thaw().freeze() == config


def test_from_toml_dict_reads_every_key() -> None:
    draft = MutableRenderConfig.from_toml_dict(
        {
            "tab-width": 8,
            "anonymize-line-numbers": True,
            "tool-name": "mycc",
            "levels": ["error", "Warning"],
            "explain-codes": ["E0001"],
            "color": False,
        }
    )
    config: RenderConfig = draft.freeze()
    assert config.tab_width == 8
    assert config.anonymize_line_numbers
    assert config.tool_name == "mycc"
    assert config.levels == frozenset({Level.ERROR, Level.WARNING})
    assert config.explain_codes == frozenset({"E0001"})


def test_absent_keys_stay_unset() -> None:
    draft = MutableRenderConfig.from_toml_dict({})
    assert draft.tab_width is None
    assert draft.levels is None
    assert draft.freeze() == RenderConfig()


@parametrize(
    "table",
    [
        {"tab-width": "8"},
        {"tab-width": True},
        {"color": "yes"},
        {"tool-name": ""},
        {"levels": "error"},
        {"levels": ["fatal"]},
        {"explain-codes": [1, 2]},
    ],
)
def test_invalid_values_are_rejected(table: dict[str, object]) -> None:
    with pytest.raises(ConfigError):
        MutableRenderConfig.from_toml_dict(table, where="spanmark.toml")


def test_unknown_keys_are_logged_and_ignored(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        draft = MutableRenderConfig.from_toml_dict({"tab-width": 2, "colour": True})
    assert draft.tab_width == 2
    assert "colour" in caplog.text


def test_merge_prefers_values_set_in_the_override() -> None:
    base = MutableRenderConfig.from_defaults()
    override = MutableRenderConfig(tab_width=2, levels={Level.ERROR})
    merged = base.merge_with(override).freeze()
    assert merged.tab_width == 2
    assert merged.levels == frozenset({Level.ERROR})
    assert merged.tool_name == "rustc"


@parametrize(
    "draft",
    [
        MutableRenderConfig(tab_width=0),
        MutableRenderConfig(levels=set()),
    ],
)
def test_freeze_validates(draft: MutableRenderConfig) -> None:
    with pytest.raises(ConfigError):
        draft.freeze()


def test_is_explainable() -> None:
    config = RenderConfig()
    assert config.is_explainable("E0308")
    assert not config.is_explainable("E308")
    assert not config.is_explainable("unused_variables")

    custom: RenderConfig = make_config(explain_codes={"unused_variables"})
    assert custom.is_explainable("unused_variables")
    assert not custom.is_explainable("E0308")


def test_custom_width_function_wins() -> None:
    def width(ch: str) -> int:
        return 3

    config: RenderConfig = make_config(char_width=width)
    assert config.width_function() is width
    assert RenderConfig(tab_width=2).width_function()("\t") == 2


def test_parse_levels_names_the_source() -> None:
    assert parse_levels(["NOTE", "help"]) == {Level.NOTE, Level.HELP}
    with pytest.raises(ConfigError, match="--level"):
        parse_levels(["loud"], where="--level")
