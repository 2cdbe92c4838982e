"""Immutable snapshot of a decoded rustdoc JSON export."""

from collections.abc import Mapping
from dataclasses import dataclass

from rustdoc_md.item import Item
from rustdoc_md.item_summary import ExternalCrate, ItemSummary


@dataclass(frozen=True)
class Document:
    """The item graph of one crate, as exported by rustdoc."""

    format_version: int
    root: str
    index: Mapping[str, Item]
    paths: Mapping[str, ItemSummary]
    external_crates: Mapping[str, ExternalCrate]
    crate_version: str | None = None
    includes_private: bool = False

    @property
    def root_item(self) -> Item:
        """Return the crate root module."""
        return self.index[self.root]

    @property
    def crate_name(self) -> str:
        """Return the crate name, taken from the root module."""
        return self.root_item.name or "crate"

    def get(self, item_id: str) -> Item | None:
        """Return the local item for an id, if the export defines it."""
        return self.index.get(item_id)

    def summary(self, item_id: str) -> ItemSummary | None:
        """Return the path summary for an id, local or external."""
        return self.paths.get(item_id)

    def crate_name_for(self, crate_id: int) -> str:
        """Return the name of the crate with the given numeric id."""
        if crate_id == 0:
            return self.crate_name
        ext = self.external_crates.get(str(crate_id))
        return ext.name if ext else f"crate#{crate_id}"
