"""The section tree produced by the hierarchy builder and consumed by the renderer."""

from collections.abc import Iterator
from dataclasses import dataclass, field

from rustdoc_md.document import Document
from rustdoc_md.errors import RenderWarning
from rustdoc_md.item import Item
from rustdoc_md.reference_resolver import ReferenceResolver
from rustdoc_md.resolved_ref import ResolvedRef

# Section roles.
ITEM = "item"  # full rendering of a local item
LINK = "link"  # re-export entry pointing at a section rendered elsewhere
EXTERNAL = "external"  # re-export of an item from another crate
PLACEHOLDER = "placeholder"  # dangling reference
UNSUPPORTED = "unsupported"  # item kind this renderer does not know


@dataclass
class SectionGroup:
    """A titled, ordered list of sibling sections (e.g. "Structs", "Methods")."""

    title: str
    sections: list["Section"] = field(default_factory=list)


@dataclass(eq=False)
class Section:
    """One node of the output hierarchy."""

    role: str
    kind: str
    name: str
    path: tuple[str, ...]
    item: Item | None = None
    item_id: str | None = None
    use_item: Item | None = None
    reexported_from: str | None = None
    target: ResolvedRef | None = None
    note: str | None = None
    groups: list[SectionGroup] = field(default_factory=list)
    # trait: impl ids listed under "Implementors"
    implementors: list[str] = field(default_factory=list)
    # type: blanket impl sections that apply to it
    blanket_impls: list["Section"] = field(default_factory=list)
    # blanket impl: ids of the documented types it applies to
    applies_to: list[str] = field(default_factory=list)

    @property
    def qualified_name(self) -> str:
        """Return the `::`-joined output path."""
        return "::".join(self.path)

    @property
    def is_module(self) -> bool:
        """Check if this is a fully rendered module."""
        return self.role == ITEM and self.kind == "module"

    def add(self, title: str, sections: list["Section"]) -> None:
        """Append a group if it has any sections."""
        if sections:
            self.groups.append(SectionGroup(title, sections))

    def children(self) -> Iterator["Section"]:
        """Yield direct child sections in group order."""
        for group in self.groups:
            yield from group.sections

    def walk(self) -> Iterator["Section"]:
        """Yield this section and all descendants, depth-first in render order."""
        yield self
        for child in self.children():
            yield from child.walk()


@dataclass
class SectionTree:
    """Result of one build: the root module section plus lookup tables and warnings."""

    document: Document
    resolver: ReferenceResolver
    root: Section
    by_id: dict[str, Section]
    warnings: list[RenderWarning] = field(default_factory=list)

    @property
    def crate_name(self) -> str:
        """Return the name of the documented crate."""
        return self.document.crate_name

    def section_for(self, item_id: str | None) -> Section | None:
        """Return the section that fully renders an item, if any."""
        if item_id is None:
            return None
        return self.by_id.get(str(item_id))

    def walk(self) -> Iterator[Section]:
        """Yield every section in render order."""
        return self.root.walk()
