"""Logic for loading and merging configuration files."""

import copy
import logging
from pathlib import Path
from typing import Any

import yaml

from rustdoc_md.deep_merge import deep_merge
from rustdoc_md.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict[str, Any] = {
    "mode": "single",
    "max_heading_depth": 6,
    "include_private": False,
    "multi_file_unit": "item",
    "link_external": False,
    "hidden_attributes": ["#[automatically_derived]"],
}


def load_config(path: str | Path | None = None) -> dict[str, Any]:
    """Load configuration from a YAML file and merge it with defaults."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    if not path:
        return config
    p = Path(path)
    if not p.exists():
        msg = f"Configuration file not found: {p}"
        raise ConfigurationError(msg)
    try:
        user_config = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        msg = f"Invalid YAML in {p}: {exc}"
        raise ConfigurationError(msg) from exc
    if not isinstance(user_config, dict):
        msg = f"Configuration in {p} must be a mapping"
        raise ConfigurationError(msg)
    logger.debug("Loaded configuration overrides from %s: %s", p, sorted(user_config))
    return deep_merge(config, user_config)
