"""Data model for a single documented rustdoc item."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Item:
    """Represents a documented item (module, struct, function, impl, etc.)."""

    id: str
    kind: str  # module/struct/enum/trait/impl/function/use/...
    name: str | None
    visibility: str  # public/crate/restricted/default
    docs: str
    inner: dict[str, Any]  # kind-specific payload, as decoded
    crate_id: int = 0
    links: dict[str, str] = field(default_factory=dict)  # link text -> id
    attrs: tuple[str, ...] = ()
    deprecation: dict[str, Any] | None = None
    span: dict[str, Any] | None = None
    restricted_path: str | None = None  # for pub(in path)

    @property
    def is_public(self) -> bool:
        """Return True when the item is declared `pub`."""
        return self.visibility == "public"

    def visibility_prefix(self) -> str:
        """Render the visibility as Rust source text, e.g. `pub ` or `pub(crate) `."""
        if self.visibility == "public":
            return "pub "
        if self.visibility == "crate":
            return "pub(crate) "
        if self.visibility == "restricted":
            return f"pub(in {self.restricted_path or 'crate'}) "
        return ""
