"""Item kind tags, labels and module-level categories."""

KNOWN_KINDS = frozenset(
    {
        "module",
        "extern_crate",
        "use",
        "union",
        "struct",
        "struct_field",
        "enum",
        "variant",
        "function",
        "trait",
        "trait_alias",
        "impl",
        "type_alias",
        "constant",
        "static",
        "extern_type",
        "macro",
        "proc_macro",
        "primitive",
        "assoc_const",
        "assoc_type",
    },
)

KIND_LABELS = {
    "module": "Module",
    "extern_crate": "Extern Crate",
    "use": "Re-export",
    "union": "Union",
    "struct": "Struct",
    "struct_field": "Field",
    "enum": "Enum",
    "variant": "Variant",
    "function": "Function",
    "trait": "Trait",
    "trait_alias": "Trait Alias",
    "impl": "Implementation",
    "type_alias": "Type Alias",
    "constant": "Constant",
    "static": "Static",
    "extern_type": "Extern Type",
    "macro": "Macro",
    "proc_macro": "Procedural Macro",
    "primitive": "Primitive",
    "assoc_const": "Associated Constant",
    "assoc_type": "Associated Type",
}

# Module children are grouped in this fixed order.
MODULE_CATEGORIES: tuple[tuple[str, str], ...] = (
    ("modules", "Modules"),
    ("traits", "Traits"),
    ("structs", "Structs"),
    ("enums", "Enums"),
    ("functions", "Functions"),
    ("type_aliases", "Type Aliases"),
    ("constants", "Constants"),
    ("statics", "Statics"),
    ("macros", "Macros"),
    ("reexports", "Re-exports"),
    ("impls", "Implementations"),
    ("other", "Other Items"),
)

_CATEGORY_OF_KIND = {
    "module": "modules",
    "trait": "traits",
    "trait_alias": "traits",
    "struct": "structs",
    "union": "structs",
    "enum": "enums",
    "function": "functions",
    "type_alias": "type_aliases",
    "constant": "constants",
    "static": "statics",
    "macro": "macros",
    "proc_macro": "macros",
    "use": "reexports",
    "impl": "impls",
}

# Kinds that get their own file in multi-file mode.
PAGE_KINDS = frozenset(
    {
        "module",
        "struct",
        "union",
        "enum",
        "trait",
        "trait_alias",
        "function",
        "type_alias",
        "constant",
        "static",
        "macro",
        "proc_macro",
    },
)


def kind_label(kind: str) -> str:
    """Return the display label for a kind tag."""
    return KIND_LABELS.get(kind, kind.replace("_", " ").title())


def category_of(kind: str) -> str:
    """Return the module category key for a kind tag."""
    return _CATEGORY_OF_KIND.get(kind, "other")


def is_type_kind(kind: str) -> bool:
    """Check if the kind is a type that owns implementation blocks."""
    return kind in {"struct", "enum", "union"}


def is_known_kind(kind: str) -> bool:
    """Check if this renderer understands the kind."""
    return kind in KNOWN_KINDS


def is_blanket_impl(kind: str, inner: dict) -> bool:
    """Check if an impl applies to a generic parameter rather than one concrete type."""
    if kind != "impl":
        return False
    if inner.get("blanket_impl") is not None:
        return True
    target = inner.get("for")
    return isinstance(target, dict) and "generic" in target
