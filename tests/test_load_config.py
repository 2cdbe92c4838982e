"""Tests for configuration loading, merging and validation."""

from pathlib import Path

import pytest
import yaml

from rustdoc_md.deep_merge import deep_merge
from rustdoc_md.errors import ConfigurationError
from rustdoc_md.load_config import DEFAULT_CONFIG, load_config
from rustdoc_md.render_config import MULTI, SINGLE, UNIT_MODULE, RenderConfig


def test_deep_merge_scalars() -> None:
    """Verify scalar replacement in deep merge."""
    assert deep_merge({"a": 1, "b": 2}, {"b": 3, "c": 4}) == {"a": 1, "b": 3, "c": 4}


def test_deep_merge_nested() -> None:
    """Verify recursive merging of dictionaries."""
    base = {"nested": {"x": 1, "y": 2}}
    update = {"nested": {"y": 3, "z": 4}}
    assert deep_merge(base, update) == {"nested": {"x": 1, "y": 3, "z": 4}}


def test_deep_merge_arrays_replace() -> None:
    """Verify that arrays are replaced by default."""
    assert deep_merge({"arr": [1, 2]}, {"arr": [3, 4]}) == {"arr": [3, 4]}


def test_deep_merge_hidden_attributes_additive() -> None:
    """Verify that the hidden attribute list is merged additively."""
    base = {"hidden_attributes": ["#[automatically_derived]", "#[doc(hidden)]"]}
    update = {"hidden_attributes": ["#[doc(hidden)]", "#[inline]"]}
    merged = deep_merge(base, update)
    assert merged["hidden_attributes"] == [
        "#[automatically_derived]",
        "#[doc(hidden)]",
        "#[inline]",
    ]
    assert base["hidden_attributes"] == ["#[automatically_derived]", "#[doc(hidden)]"]


def test_load_config_defaults() -> None:
    """Verify that no path yields a copy of the defaults."""
    config = load_config(None)
    assert config == DEFAULT_CONFIG
    config["hidden_attributes"].append("#[x]")
    assert "#[x]" not in DEFAULT_CONFIG["hidden_attributes"]


def test_load_config_file(tmp_path: Path) -> None:
    """Verify that a YAML file overrides the defaults."""
    path = tmp_path / "rustdoc_md.yml"
    path.write_text(
        yaml.safe_dump({"mode": "multi", "hidden_attributes": ["#[inline]"]}),
        encoding="utf-8",
    )
    config = load_config(path)
    assert config["mode"] == "multi"
    assert config["max_heading_depth"] == 6
    assert config["hidden_attributes"] == ["#[automatically_derived]", "#[inline]"]


def test_load_config_errors(tmp_path: Path) -> None:
    """Verify that missing files, bad YAML and non-mappings are configuration errors."""
    with pytest.raises(ConfigurationError, match="not found"):
        load_config(tmp_path / "missing.yml")

    bad = tmp_path / "bad.yml"
    bad.write_text("mode: [unclosed", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="Invalid YAML"):
        load_config(bad)

    scalar = tmp_path / "scalar.yml"
    scalar.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="mapping"):
        load_config(scalar)


def test_render_config_from_dict() -> None:
    """Verify conversion of a merged dictionary into RenderConfig."""
    config = RenderConfig.from_dict(
        {**DEFAULT_CONFIG, "mode": "multi", "multi_file_unit": "module", "max_heading_depth": 4},
    )
    assert config.mode == MULTI
    assert config.multi_file_unit == UNIT_MODULE
    assert config.max_heading_depth == 4
    assert config.hidden_attributes == ("#[automatically_derived]",)
    assert RenderConfig.from_dict({}).mode == SINGLE


@pytest.mark.parametrize(
    "override",
    [
        {"mode": "double"},
        {"max_heading_depth": 0},
        {"max_heading_depth": 7},
        {"max_heading_depth": "3"},
        {"max_heading_depth": True},
        {"multi_file_unit": "crate"},
        {"include_private": "yes"},
        {"link_external": 1},
        {"hidden_attributes": "#[inline]"},
    ],
)
def test_render_config_rejects_invalid(override: dict) -> None:
    """Verify that out-of-range or mistyped values are rejected."""
    with pytest.raises(ConfigurationError):
        RenderConfig.from_dict({**DEFAULT_CONFIG, **override})
