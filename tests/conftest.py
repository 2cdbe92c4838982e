"""Shared fixtures: a small builder for rustdoc JSON exports."""

import json
from collections.abc import Sequence
from typing import Any

import pytest

from rustdoc_md.document import Document
from rustdoc_md.load_document import SUPPORTED_FORMAT_VERSION, load_document

EMPTY_GENERICS: dict[str, Any] = {"params": [], "where_predicates": []}


def prim(name: str) -> dict[str, Any]:
    """Return a primitive type reference."""
    return {"primitive": name}


def resolved(path: str, item_id: str | None, args: Any = None) -> dict[str, Any]:
    """Return a resolved-path type reference."""
    return {"resolved_path": {"path": path, "id": item_id, "args": args}}


def generic(name: str) -> dict[str, Any]:
    """Return a generic parameter type reference."""
    return {"generic": name}


class CrateBuilder:
    """Assembles a rustdoc JSON export item by item."""

    def __init__(self, name: str = "demo") -> None:
        self.name = name
        self.index: dict[str, dict[str, Any]] = {}
        self.paths: dict[str, dict[str, Any]] = {}
        self.external_crates: dict[str, dict[str, Any]] = {}
        self.format_version = SUPPORTED_FORMAT_VERSION
        self.crate_version: str | None = "0.1.0"
        self.includes_private = False
        self._next = 0
        self.ids: dict[str, str] = {}
        self.root = self.add(
            "module",
            {"is_crate": True, "items": [], "is_stripped": False},
            name=name,
            path=(name,),
        )

    # -----------------------------
    # Generic items
    # -----------------------------

    def add(
        self,
        kind: str,
        inner: Any,
        *,
        name: str | None = None,
        visibility: Any = "public",
        docs: str | None = None,
        links: dict[str, str] | None = None,
        attrs: list[str] | None = None,
        deprecation: dict[str, Any] | None = None,
        path: tuple[str, ...] | None = None,
        parent: str | None = None,
    ) -> str:
        item_id = str(self._next)
        self._next += 1
        self.index[item_id] = {
            "id": int(item_id),
            "crate_id": 0,
            "name": name,
            "span": None,
            "visibility": visibility,
            "docs": docs,
            "links": links or {},
            "attrs": attrs or [],
            "deprecation": deprecation,
            "inner": {kind: inner} if inner is not None else kind,
        }
        if path is not None:
            self.paths[item_id] = {"crate_id": 0, "path": list(path), "kind": kind}
        if parent is not None:
            self.inner(parent)["items"].append(int(item_id))
        return item_id

    def inner(self, item_id: str) -> dict[str, Any]:
        """Return the kind-specific payload of an item, for in-place tweaks."""
        return next(iter(self.index[item_id]["inner"].values()))

    def path_of(self, parent: str | None, name: str) -> tuple[str, ...]:
        parent = parent or self.root
        return (*self.paths[parent]["path"], name)

    # -----------------------------
    # Convenience constructors
    # -----------------------------

    def module(self, name: str, parent: str | None = None, **kw: Any) -> str:
        parent = parent or self.root
        return self.add(
            "module",
            {"is_crate": False, "items": [], "is_stripped": False},
            name=name,
            path=self.path_of(parent, name),
            parent=parent,
            **kw,
        )

    def function(
        self,
        name: str,
        parent: str | None = None,
        inputs: Sequence[tuple[str, Any]] = (),
        output: Any = None,
        *,
        has_body: bool = True,
        in_module: bool = True,
        **kw: Any,
    ) -> str:
        parent = parent or self.root
        inner = {
            "sig": {
                "inputs": [[n, t] for n, t in inputs],
                "output": output,
                "is_c_variadic": False,
            },
            "generics": EMPTY_GENERICS,
            "header": {"is_const": False, "is_unsafe": False, "is_async": False, "abi": "Rust"},
            "has_body": has_body,
        }
        if not in_module:
            return self.add("function", inner, name=name, **kw)
        return self.add(
            "function",
            inner,
            name=name,
            path=self.path_of(parent, name),
            parent=parent,
            **kw,
        )

    def struct(
        self,
        name: str,
        parent: str | None = None,
        fields: Sequence[tuple[str, Any]] = (),
        **kw: Any,
    ) -> str:
        parent = parent or self.root
        field_ids = [
            int(self.add("struct_field", ty, name=fname, visibility="public"))
            for fname, ty in fields
        ]
        return self.add(
            "struct",
            {
                "generics": EMPTY_GENERICS,
                "kind": {"plain": {"fields": field_ids, "has_stripped_fields": False}},
                "impls": [],
            },
            name=name,
            path=self.path_of(parent, name),
            parent=parent,
            **kw,
        )

    def enum(self, name: str, variants: list[str], parent: str | None = None, **kw: Any) -> str:
        parent = parent or self.root
        variant_ids = [
            int(self.add("variant", {"kind": "plain", "discriminant": None}, name=v))
            for v in variants
        ]
        return self.add(
            "enum",
            {
                "generics": EMPTY_GENERICS,
                "variants": variant_ids,
                "has_stripped_variants": False,
                "impls": [],
            },
            name=name,
            path=self.path_of(parent, name),
            parent=parent,
            **kw,
        )

    def trait(self, name: str, parent: str | None = None, items: Sequence[str] = (), **kw: Any) -> str:
        parent = parent or self.root
        return self.add(
            "trait",
            {
                "is_auto": False,
                "is_unsafe": False,
                "is_dyn_compatible": True,
                "items": [int(i) for i in items],
                "generics": EMPTY_GENERICS,
                "bounds": [],
                "implementations": [],
            },
            name=name,
            path=self.path_of(parent, name),
            parent=parent,
            **kw,
        )

    def impl(
        self,
        for_type: Any,
        *,
        trait: tuple[str, str | None] | None = None,
        items: Sequence[str] = (),
        owner: str | None = None,
        parent: str | None = None,
        synthetic: bool = False,
        blanket: Any = None,
        provided: Sequence[str] = (),
    ) -> str:
        """Add an impl block and register it with its owner type and trait."""
        trait_path = None
        if trait is not None:
            trait_path = {"path": trait[0], "id": trait[1], "args": None}
        impl_id = self.add(
            "impl",
            {
                "is_unsafe": False,
                "generics": EMPTY_GENERICS,
                "provided_trait_methods": list(provided),
                "trait": trait_path,
                "for": for_type,
                "items": [int(i) for i in items],
                "is_negative": False,
                "is_synthetic": synthetic,
                "blanket_impl": blanket,
            },
            visibility="default",
            parent=parent,
        )
        if owner is not None:
            self.inner(owner)["impls"].append(int(impl_id))
        if trait is not None and blanket is None and trait[1] in self.index:
            self.inner(trait[1])["implementations"].append(int(impl_id))
        return impl_id

    def use(
        self,
        source: str,
        target: str | None,
        name: str,
        parent: str | None = None,
        *,
        is_glob: bool = False,
        **kw: Any,
    ) -> str:
        parent = parent or self.root
        return self.add(
            "use",
            {
                "source": source,
                "name": name,
                "id": int(target) if target is not None and target.isdigit() else target,
                "is_glob": is_glob,
            },
            name=None,
            parent=parent,
            **kw,
        )

    def external(
        self,
        crate: str,
        path: tuple[str, ...],
        kind: str = "struct",
        html_root_url: str | None = None,
    ) -> str:
        """Register an item of another crate; returns its id."""
        crate_id = next(
            (k for k, v in self.external_crates.items() if v["name"] == crate),
            None,
        )
        if crate_id is None:
            crate_id = str(len(self.external_crates) + 1)
            self.external_crates[crate_id] = {"name": crate, "html_root_url": html_root_url}
        item_id = f"x{self._next}"
        self._next += 1
        self.paths[item_id] = {"crate_id": int(crate_id), "path": list(path), "kind": kind}
        return item_id

    # -----------------------------
    # Output
    # -----------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": int(self.root),
            "crate_version": self.crate_version,
            "includes_private": self.includes_private,
            "index": self.index,
            "paths": self.paths,
            "external_crates": self.external_crates,
            "format_version": self.format_version,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    def document(self) -> Document:
        return load_document(self.to_json())


@pytest.fixture
def crate() -> CrateBuilder:
    """Provide an empty crate named `demo`."""
    return CrateBuilder()


@pytest.fixture
def geometry() -> CrateBuilder:
    """Provide a crate with a privately defined, publicly re-exported `Point` and a `Draw` trait.

    ```rust
    mod internal {
        /// A point in the plane.
        pub struct Point { pub x: i32, pub y: i32 }
    }
    pub use internal::Point;

    /// Something that can be drawn.
    pub trait Draw { fn draw(&self); }
    impl Draw for Point { fn draw(&self) {} }
    ```
    """
    b = CrateBuilder("geometry")
    internal = b.module("internal", visibility="default")
    point = b.struct(
        "Point",
        internal,
        fields=[("x", prim("i32")), ("y", prim("i32"))],
        docs="A point in the plane.",
    )
    b.use("internal::Point", point, "Point")
    required = b.function("draw", inputs=[("self", generic("Self"))], has_body=False, in_module=False)
    draw = b.trait("Draw", items=[required], docs="Something that can be drawn.")
    method = b.function("draw", inputs=[("self", generic("Self"))], in_module=False)
    b.impl(resolved("Point", point), trait=("Draw", draw), items=[method], owner=point)
    b.ids.update({"internal": internal, "point": point, "draw": draw, "method": method})
    return b
