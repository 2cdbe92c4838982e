"""Render the Rust declaration of an item for a signature code block."""

from typing import Any

from rustdoc_md.document import Document
from rustdoc_md.item import Item
from rustdoc_md.reference_resolver import use_source
from rustdoc_md.type_formatting import (
    format_bounds,
    format_constant,
    format_fn_header,
    format_fn_inputs,
    format_fn_output,
    format_generics,
    format_path,
    format_type,
    format_where_clause,
)

BODY = "{ /* ... */ }"
ASSOC_BODY = "{\n    /* Associated items */\n}"


def format_item_signature(item: Item, document: Document, *, name: str | None = None) -> str:
    """Return the declaration of an item as Rust source text.

    `name` overrides the declared name, for items rendered under a re-export alias.
    """
    name = name or item.name or ""
    vis = item.visibility_prefix()
    inner = item.inner
    kind = item.kind

    if kind == "module":
        return f"{vis}mod {name} {{ /* ... */ }}"
    if kind == "struct":
        return vis + _format_struct(name, inner, document)
    if kind == "union":
        head = f"union {name}{format_generics(inner.get('generics'))}"
        body = _format_field_block(inner.get("fields") or [], document, indent="    ")
        if inner.get("has_stripped_fields"):
            body += "    // Some fields omitted\n"
        return f"{vis}{head}{format_where_clause(inner.get('generics'))} {{\n{body}}}"
    if kind == "enum":
        return vis + _format_enum(name, inner, document)
    if kind == "variant":
        return format_variant(name, inner, document)
    if kind == "function":
        return vis + format_function(name, inner)
    if kind == "trait":
        return vis + _format_trait(name, inner)
    if kind == "trait_alias":
        generics = inner.get("generics")
        return (
            f"{vis}trait {name}{format_generics(generics)} = "
            f"{format_bounds(inner.get('params') or [])}{format_where_clause(generics)};"
        )
    if kind == "impl":
        return format_impl_header(inner) + _with_body(inner.get("generics"), ASSOC_BODY)
    if kind == "type_alias":
        generics = inner.get("generics")
        return (
            f"{vis}type {name}{format_generics(generics)}{format_where_clause(generics)}"
            f" = {format_type(inner.get('type'))};"
        )
    if kind == "constant":
        const = inner.get("const") or {}
        return f"{vis}const {name}: {format_type(inner.get('type'))} = {format_constant(const)};"
    if kind == "static":
        mut = "mut " if inner.get("is_mutable") else ""
        unsafe = "unsafe " if inner.get("is_unsafe") else ""
        return (
            f"{vis}{unsafe}static {mut}{name}: {format_type(inner.get('type'))}"
            f" = {inner.get('expr', '_')};"
        )
    if kind == "macro":
        return str(inner.get("value") or f"macro_rules! {name} {{ /* ... */ }}")
    if kind == "proc_macro":
        return _format_proc_macro(name, inner)
    if kind == "use":
        return format_use(item)
    if kind == "extern_crate":
        rename = f" as {inner['rename']}" if inner.get("rename") else ""
        return f"{vis}extern crate {inner.get('name', name)}{rename};"
    if kind == "extern_type":
        return f"{vis}extern type {name};"
    if kind == "struct_field":
        return f"{vis}{name}: {format_type(inner.get('type'))}"
    if kind == "assoc_const":
        text = f"const {name}: {format_type(inner.get('type'))}"
        value = inner.get("value") or inner.get("default")
        return text + (f" = {value};" if value else ";")
    if kind == "assoc_type":
        generics = inner.get("generics")
        text = f"type {name}{format_generics(generics)}"
        if inner.get("bounds"):
            text += ": " + format_bounds(inner["bounds"])
        default = inner.get("type") or inner.get("default")
        if default is not None:
            text += " = " + format_type(default)
        return text + format_where_clause(generics) + ";"
    if kind == "primitive":
        return f"// primitive type `{inner.get('name', name)}`"
    return f"// {kind} {name}"


def format_function(name: str, inner: dict[str, Any]) -> str:
    """Format a function declaration with qualifiers, generics and where clause."""
    sig = inner.get("sig") or inner.get("decl") or {}
    generics = inner.get("generics")
    head = (
        format_fn_header(inner.get("header"))
        + f"fn {name}{format_generics(generics)}"
        + format_fn_inputs(sig)
        + format_fn_output(sig)
    )
    if not inner.get("has_body", True):
        return head + format_where_clause(generics) + ";"
    return head + _with_body(generics, BODY)


def format_impl_header(inner: dict[str, Any]) -> str:
    """Format `impl<..> Trait for Type` without where clause or body."""
    head = "unsafe impl" if inner.get("is_unsafe") else "impl"
    head += format_generics(inner.get("generics"))
    trait = inner.get("trait")
    if trait:
        head += " !" if inner.get("is_negative") else " "
        head += format_path(trait) + " for"
    return f"{head} {format_type(inner.get('for'))}"


def format_use(item: Item) -> str:
    """Format a `use` re-export statement."""
    source = use_source(item)
    text = f"{item.visibility_prefix()}use {source}"
    if item.inner.get("is_glob"):
        return text + "::*;"
    alias = item.inner.get("name") or item.name
    if alias and alias != source.rsplit("::", 1)[-1]:
        text += f" as {alias}"
    return text + ";"


def format_variant(name: str, inner: dict[str, Any], document: Document) -> str:
    """Format an enum variant: `Name`, `Name(T, U)` or `Name { a: T }`."""
    kind = inner.get("kind") or "plain"
    text = name
    if isinstance(kind, dict) and "tuple" in kind:
        text += _format_tuple_fields(kind["tuple"], document, show_vis=False)
    elif isinstance(kind, dict) and "struct" in kind:
        sk = kind["struct"]
        body = _format_field_block(sk.get("fields") or [], document, indent="    ", show_vis=False)
        if sk.get("has_stripped_fields"):
            body += "    // Some fields omitted\n"
        text += " {\n" + body + "}"
    discriminant = inner.get("discriminant")
    if discriminant:
        text += f" = {discriminant.get('expr')}"
    return text


def _with_body(generics: dict[str, Any] | None, body: str) -> str:
    where = format_where_clause(generics)
    return f"{where}\n{body}" if where else f" {body}"


def _format_struct(name: str, inner: dict[str, Any], document: Document) -> str:
    generics = inner.get("generics")
    head = f"struct {name}{format_generics(generics)}"
    where = format_where_clause(generics)
    kind = inner.get("kind") or "unit"
    if isinstance(kind, dict) and "tuple" in kind:
        return head + _format_tuple_fields(kind["tuple"], document) + where + ";"
    if isinstance(kind, dict) and "plain" in kind:
        plain = kind["plain"]
        body = _format_field_block(plain.get("fields") or [], document, indent="    ")
        if plain.get("has_stripped_fields"):
            body += "    // Some fields omitted\n"
        return f"{head}{where} {{\n{body}}}"
    return head + where + ";"


def _format_tuple_fields(
    field_ids: list[Any],
    document: Document,
    *,
    show_vis: bool = True,
) -> str:
    parts = []
    for fid in field_ids:
        field = document.get(str(fid)) if fid is not None else None
        if field is None:
            parts.append("/* private field */")
            continue
        vis = field.visibility_prefix() if show_vis else ""
        parts.append(vis + format_type(field.inner.get("type")))
    return "(" + ", ".join(parts) + ")"


def _format_field_block(
    field_ids: list[Any],
    document: Document,
    *,
    indent: str,
    show_vis: bool = True,
) -> str:
    lines = []
    for fid in field_ids:
        field = document.get(str(fid))
        if field is None or field.name is None:
            continue
        vis = field.visibility_prefix() if show_vis else ""
        lines.append(f"{indent}{vis}{field.name}: {format_type(field.inner.get('type'))},\n")
    return "".join(lines)


def _format_enum(name: str, inner: dict[str, Any], document: Document) -> str:
    generics = inner.get("generics")
    lines = []
    for vid in inner.get("variants") or []:
        variant = document.get(str(vid))
        if variant is None or variant.name is None:
            continue
        text = format_variant(variant.name, variant.inner, document)
        lines.append("    " + text.replace("\n", "\n    ") + ",\n")
    if inner.get("has_stripped_variants"):
        lines.append("    // Some variants omitted\n")
    return f"enum {name}{format_generics(generics)}{format_where_clause(generics)} {{\n{''.join(lines)}}}"


def _format_trait(name: str, inner: dict[str, Any]) -> str:
    generics = inner.get("generics")
    head = ""
    if inner.get("is_auto"):
        head += "auto "
    if inner.get("is_unsafe"):
        head += "unsafe "
    head += f"trait {name}{format_generics(generics)}"
    if inner.get("bounds"):
        head += ": " + format_bounds(inner["bounds"])
    return head + _with_body(generics, ASSOC_BODY)


def _format_proc_macro(name: str, inner: dict[str, Any]) -> str:
    kind = inner.get("kind", "bang")
    if kind == "attr":
        attr = "#[proc_macro_attribute]"
    elif kind == "derive":
        helpers = inner.get("helpers") or []
        attr = f"#[proc_macro_derive({', '.join([name, *helpers])})]"
    else:
        attr = "#[proc_macro]"
    return f"{attr}\npub fn {name}(/* ... */) -> /* ... */ {{ /* ... */ }}"
