"""Validated rendering options."""

from dataclasses import dataclass
from typing import Any

from rustdoc_md.errors import ConfigurationError
from rustdoc_md.md_heading import MAX_MARKDOWN_HEADING

SINGLE = "single"
MULTI = "multi"
UNIT_ITEM = "item"
UNIT_MODULE = "module"


@dataclass(frozen=True)
class RenderConfig:
    """Options consumed by the builder and renderer."""

    mode: str = SINGLE
    max_heading_depth: int = MAX_MARKDOWN_HEADING
    include_private: bool = False
    multi_file_unit: str = UNIT_ITEM
    link_external: bool = False
    hidden_attributes: tuple[str, ...] = ("#[automatically_derived]",)

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> "RenderConfig":
        """Validate a merged configuration dictionary."""
        mode = config.get("mode", SINGLE)
        if mode not in {SINGLE, MULTI}:
            msg = f"mode must be 'single' or 'multi', not {mode!r}"
            raise ConfigurationError(msg)

        depth = config.get("max_heading_depth", MAX_MARKDOWN_HEADING)
        if isinstance(depth, bool) or not isinstance(depth, int):
            msg = f"max_heading_depth must be an integer, not {depth!r}"
            raise ConfigurationError(msg)
        if not 1 <= depth <= MAX_MARKDOWN_HEADING:
            msg = f"max_heading_depth must be between 1 and {MAX_MARKDOWN_HEADING}, not {depth}"
            raise ConfigurationError(msg)

        unit = config.get("multi_file_unit", UNIT_ITEM)
        if unit not in {UNIT_ITEM, UNIT_MODULE}:
            msg = f"multi_file_unit must be 'item' or 'module', not {unit!r}"
            raise ConfigurationError(msg)

        for key in ("include_private", "link_external"):
            if not isinstance(config.get(key, False), bool):
                msg = f"{key} must be true or false, not {config[key]!r}"
                raise ConfigurationError(msg)

        hidden = config.get("hidden_attributes") or []
        if not isinstance(hidden, list) or not all(isinstance(a, str) for a in hidden):
            msg = "hidden_attributes must be a list of strings"
            raise ConfigurationError(msg)

        return cls(
            mode=mode,
            max_heading_depth=depth,
            include_private=config.get("include_private", False),
            multi_file_unit=unit,
            link_external=config.get("link_external", False),
            hidden_attributes=tuple(hidden),
        )
