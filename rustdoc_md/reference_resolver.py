"""Resolve item ids across re-exports and crate boundaries."""

from rustdoc_md.document import Document
from rustdoc_md.item import Item
from rustdoc_md.resolved_ref import DanglingRef, ExternalRef, LocalRef, ResolvedRef

MAX_REEXPORT_HOPS = 64

# Summary kind -> rustdoc HTML file prefix.
_HTML_PREFIXES = {
    "struct": "struct",
    "enum": "enum",
    "union": "union",
    "trait": "trait",
    "trait_alias": "traitalias",
    "function": "fn",
    "type_alias": "type",
    "constant": "constant",
    "static": "static",
    "macro": "macro",
    "proc_attribute": "attr",
    "proc_derive": "derive",
    "primitive": "primitive",
}


class ReferenceResolver:
    """Classifies ids as local, external or dangling."""

    def __init__(self, document: Document) -> None:
        """Bind the resolver to one immutable document."""
        self.document = document

    def resolve(self, item_id: str | None) -> ResolvedRef:
        """Resolve an id, following `use` re-exports to their final target.

        Chains are followed iteratively; revisiting an id, or exceeding
        MAX_REEXPORT_HOPS, yields a DanglingRef instead of looping.
        """
        if item_id is None:
            return DanglingRef("<none>", "reference has no target id")

        visited: set[str] = set()
        current = str(item_id)
        while True:
            if current in visited:
                return DanglingRef(str(item_id), "cyclic re-export")
            if len(visited) >= MAX_REEXPORT_HOPS:
                return DanglingRef(str(item_id), "re-export chain too long")
            visited.add(current)

            item = self.document.get(current)
            if item is None:
                summary = self.document.summary(current)
                if summary is not None:
                    return ExternalRef(
                        item_id=current,
                        summary=summary,
                        crate_name=self.document.crate_name_for(summary.crate_id),
                    )
                return DanglingRef(current, "id not found in index or paths")

            if item.kind != "use":
                return LocalRef(item)

            target = item.inner.get("id")
            if target is None:
                # e.g. `pub use` of a primitive or of an item rustdoc could not see
                return DanglingRef(current, f"re-export of {use_source(item)} has no target")
            current = str(target)

    def canonical_path(self, item_id: str) -> str | None:
        """Return the `::`-joined summary path of an id, if known."""
        summary = self.document.summary(item_id)
        return summary.qualified_name if summary else None

    def external_url(self, ref: ExternalRef) -> str | None:
        """Build a rustdoc HTML URL for an external item, if its crate has a root URL."""
        ext = self.document.external_crates.get(str(ref.summary.crate_id))
        if ext is None or not ext.html_root_url or not ref.summary.path:
            return None
        base = ext.html_root_url.rstrip("/")
        segments = list(ref.summary.path)
        if ref.summary.kind == "module":
            return f"{base}/{'/'.join(segments)}/index.html"
        prefix = _HTML_PREFIXES.get(ref.summary.kind)
        if prefix is None:
            return None
        return "/".join([base, *segments[:-1], f"{prefix}.{segments[-1]}.html"])


def use_source(item: Item) -> str:
    """Return the source path written in a `use` item."""
    return str(item.inner.get("source") or item.name or "?")
