"""Tests for rendering item declarations."""

from conftest import generic, prim, resolved

from rustdoc_md.item_signature import format_item_signature, format_use


def test_function_signature(crate) -> None:
    """Verify a plain function declaration."""
    fn_id = crate.function("add", inputs=[("a", prim("i32")), ("b", prim("i32"))], output=prim("i32"))
    doc = crate.document()
    sig = format_item_signature(doc.get(fn_id), doc)
    assert sig == "pub fn add(a: i32, b: i32) -> i32 { /* ... */ }"


def test_function_qualifiers_and_no_body(crate) -> None:
    """Verify header qualifiers and required trait methods."""
    fn_id = crate.function("run", has_body=False)
    crate.inner(fn_id)["header"].update({"is_async": True, "is_unsafe": True})
    doc = crate.document()
    assert format_item_signature(doc.get(fn_id), doc) == "pub async unsafe fn run();"


def test_struct_signature(crate) -> None:
    """Verify plain, tuple and unit struct declarations."""
    point = crate.struct("Point", fields=[("x", prim("i32")), ("y", prim("i32"))])
    unit = crate.struct("Marker")
    crate.inner(unit)["kind"] = "unit"
    wrapper = crate.struct("Meters")
    shown = crate.add("struct_field", prim("u8"), name="1")
    crate.inner(wrapper)["kind"] = {"tuple": [int(shown), None]}
    doc = crate.document()

    assert format_item_signature(doc.get(point), doc) == (
        "pub struct Point {\n    pub x: i32,\n    pub y: i32,\n}"
    )
    assert format_item_signature(doc.get(unit), doc) == "pub struct Marker;"
    assert format_item_signature(doc.get(wrapper), doc) == (
        "pub struct Meters(pub u8, /* private field */);"
    )


def test_enum_signature(crate) -> None:
    """Verify enum declarations list their variants."""
    enum = crate.enum("Color", ["Red", "Green"])
    doc = crate.document()
    assert format_item_signature(doc.get(enum), doc) == (
        "pub enum Color {\n    Red,\n    Green,\n}"
    )


def test_trait_signature(crate) -> None:
    """Verify trait declarations elide their items."""
    trait = crate.trait("Draw")
    crate.inner(trait)["is_unsafe"] = True
    doc = crate.document()
    assert format_item_signature(doc.get(trait), doc) == (
        "pub unsafe trait Draw {\n    /* Associated items */\n}"
    )


def test_impl_signature(crate) -> None:
    """Verify impl headers with and without a trait."""
    point = crate.struct("Point")
    trait = crate.trait("Draw")
    inherent = crate.impl(resolved("Point", point), owner=point)
    trait_impl = crate.impl(resolved("Point", point), trait=("Draw", trait), owner=point)
    doc = crate.document()
    assert format_item_signature(doc.get(inherent), doc).startswith("impl Point {")
    assert format_item_signature(doc.get(trait_impl), doc).startswith("impl Draw for Point {")


def test_signature_uses_alias_name(crate) -> None:
    """Verify that a re-export alias replaces the declared name."""
    fn_id = crate.function("add", inputs=[("a", generic("T"))])
    doc = crate.document()
    assert format_item_signature(doc.get(fn_id), doc, name="sum").startswith("pub fn sum(a: T)")


def test_other_item_signatures(crate) -> None:
    """Verify constants, statics, type aliases and macros."""
    const = crate.add(
        "constant",
        {"type": prim("u32"), "const": {"expr": "10", "value": "10u32", "is_literal": True}},
        name="LIMIT",
    )
    static = crate.add(
        "static",
        {"type": prim("str"), "is_mutable": False, "is_unsafe": False, "expr": '"hi"'},
        name="GREETING",
    )
    alias = crate.add(
        "type_alias",
        {"type": prim("u64"), "generics": {"params": [], "where_predicates": []}},
        name="Id",
    )
    mac = crate.add("macro", "macro_rules! square {\n    ($x:expr) => { $x * $x };\n}", name="square")
    doc = crate.document()

    assert format_item_signature(doc.get(const), doc) == "pub const LIMIT: u32 = 10;"
    assert format_item_signature(doc.get(static), doc) == 'pub static GREETING: str = "hi";'
    assert format_item_signature(doc.get(alias), doc) == "pub type Id = u64;"
    assert format_item_signature(doc.get(mac), doc).startswith("macro_rules! square {")


def test_format_use(crate) -> None:
    """Verify re-export statements, renamed and glob."""
    target = crate.struct("Point")
    renamed = crate.use("geo::Point", target, "Pt")
    same = crate.use("geo::Point", target, "Point")
    glob = crate.use("geo", None, "geo", is_glob=True)
    doc = crate.document()
    assert format_use(doc.get(renamed)) == "pub use geo::Point as Pt;"
    assert format_use(doc.get(same)) == "pub use geo::Point;"
    assert format_use(doc.get(glob)) == "pub use geo::*;"
