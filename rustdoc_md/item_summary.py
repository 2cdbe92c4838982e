"""Data models for path summaries and external crates."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ItemSummary:
    """Qualified path of an item, local or from another crate."""

    crate_id: int
    path: tuple[str, ...]
    kind: str

    @property
    def qualified_name(self) -> str:
        """Return the `::`-joined path, e.g. `std::vec::Vec`."""
        return "::".join(self.path)

    @property
    def name(self) -> str:
        """Return the last path segment."""
        return self.path[-1] if self.path else "unknown"


@dataclass(frozen=True)
class ExternalCrate:
    """Metadata for a crate referenced by the export."""

    name: str
    html_root_url: str | None = None
