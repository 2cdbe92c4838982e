"""Outcomes of resolving an identifier against a Document."""

from dataclasses import dataclass

from rustdoc_md.item import Item
from rustdoc_md.item_summary import ItemSummary


@dataclass(frozen=True)
class LocalRef:
    """The id names an item defined in this export."""

    item: Item


@dataclass(frozen=True)
class ExternalRef:
    """The id names an item of another crate; only its path is known."""

    item_id: str
    summary: ItemSummary
    crate_name: str

    @property
    def qualified_name(self) -> str:
        """Return the `::`-joined path of the external item."""
        return self.summary.qualified_name


@dataclass(frozen=True)
class DanglingRef:
    """The id could not be resolved, or its re-export chain loops."""

    item_id: str
    reason: str


ResolvedRef = LocalRef | ExternalRef | DanglingRef
