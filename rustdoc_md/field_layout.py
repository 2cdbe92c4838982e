"""Field lists of structs, unions and enum variants."""

from rustdoc_md.item import Item


def field_layout(item: Item) -> tuple[list[str | None], bool, bool]:
    """Return (field ids, has stripped fields, is tuple-like) for a record item.

    Tuple-like ids keep `None` for fields rustdoc stripped from the export.
    """
    inner = item.inner
    if item.kind == "union":
        fields = [str(f) for f in inner.get("fields") or []]
        return fields, bool(inner.get("has_stripped_fields")), False

    kind = inner.get("kind")
    if not isinstance(kind, dict):
        # "unit" structs and "plain" variants carry no fields
        return [], False, False
    if "tuple" in kind:
        slots = [str(f) if f is not None else None for f in kind["tuple"] or []]
        return slots, None in slots, True
    body = kind.get("plain") or kind.get("struct") or {}
    fields = [str(f) for f in body.get("fields") or []]
    return fields, bool(body.get("has_stripped_fields")), False
