"""Load and validate a rustdoc JSON export."""

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any

from rustdoc_md.document import Document
from rustdoc_md.errors import MalformedInput, SchemaVersionMismatch
from rustdoc_md.item import Item
from rustdoc_md.item_summary import ExternalCrate, ItemSummary

logger = logging.getLogger(__name__)

SUPPORTED_FORMAT_VERSION = 39


def load_document_file(path: Path) -> Document:
    """Read a rustdoc JSON file from disk and load it."""
    try:
        raw = path.read_bytes()
    except OSError as exc:
        msg = f"Could not read {path}: {exc}"
        raise MalformedInput(msg) from exc
    return load_document(raw)


def load_document(raw: bytes | str) -> Document:
    """Decode a rustdoc JSON export into an immutable Document."""
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        msg = f"Input is not valid JSON: {exc}"
        raise MalformedInput(msg) from exc
    if not isinstance(data, dict):
        msg = "Top-level JSON value must be an object"
        raise MalformedInput(msg)

    found = data.get("format_version")
    if found != SUPPORTED_FORMAT_VERSION:
        raise SchemaVersionMismatch(SUPPORTED_FORMAT_VERSION, found)

    if data.get("root") is None:
        msg = "Missing required field 'root'"
        raise MalformedInput(msg)
    raw_index = data.get("index")
    if not isinstance(raw_index, dict) or not raw_index:
        msg = "Missing or empty item 'index'"
        raise MalformedInput(msg)

    root = str(data["root"])
    index = {str(k): parse_item(str(k), v) for k, v in raw_index.items()}
    if root not in index:
        msg = f"Root id {root} is not present in the item index"
        raise MalformedInput(msg)
    if index[root].kind != "module":
        msg = f"Root id {root} is a {index[root].kind}, not a module"
        raise MalformedInput(msg)

    paths = {
        str(k): parse_summary(v)
        for k, v in (data.get("paths") or {}).items()
        if isinstance(v, dict)
    }
    external_crates = {
        str(k): ExternalCrate(
            name=str(v.get("name") or k),
            html_root_url=v.get("html_root_url"),
        )
        for k, v in (data.get("external_crates") or {}).items()
        if isinstance(v, dict)
    }

    doc = Document(
        format_version=found,
        root=root,
        index=MappingProxyType(index),
        paths=MappingProxyType(paths),
        external_crates=MappingProxyType(external_crates),
        crate_version=data.get("crate_version"),
        includes_private=bool(data.get("includes_private", False)),
    )
    logger.info(
        "Loaded crate %s %s: %d items, %d paths, %d external crates",
        doc.crate_name,
        doc.crate_version or "(unversioned)",
        len(index),
        len(paths),
        len(external_crates),
    )
    return doc


def parse_item(item_id: str, raw: Any) -> Item:
    """Convert one raw index entry into an Item."""
    if not isinstance(raw, dict):
        msg = f"Index entry {item_id} is not an object"
        raise MalformedInput(msg)
    kind, inner = split_inner(raw.get("inner"))

    visibility = raw.get("visibility", "default")
    restricted_path = None
    if isinstance(visibility, dict):
        restricted = visibility.get("restricted") or {}
        restricted_path = restricted.get("path")
        visibility = "restricted"

    return Item(
        id=item_id,
        kind=kind,
        name=raw.get("name"),
        visibility=str(visibility),
        docs=raw.get("docs") or "",
        inner=inner,
        crate_id=int(raw.get("crate_id") or 0),
        links={str(k): str(v) for k, v in (raw.get("links") or {}).items()},
        attrs=tuple(str(a) for a in raw.get("attrs") or []),
        deprecation=raw.get("deprecation"),
        span=raw.get("span"),
        restricted_path=restricted_path,
    )


def split_inner(inner: Any) -> tuple[str, dict[str, Any]]:
    """Split an externally tagged `inner` value into (kind, payload)."""
    # Unit variants serialize as a bare string, e.g. "extern_type".
    if isinstance(inner, str):
        return inner, {}
    if isinstance(inner, dict) and len(inner) == 1:
        kind, payload = next(iter(inner.items()))
        if kind == "struct_field":
            # The payload is the field's type, itself a tagged dict.
            return kind, {"type": payload}
        if isinstance(payload, dict):
            return kind, payload
        # `macro` carries a string, `struct_field` a type.
        return kind, {"value": payload}
    return "unknown", {}


def parse_summary(raw: dict[str, Any]) -> ItemSummary:
    """Convert one raw `paths` entry into an ItemSummary."""
    return ItemSummary(
        crate_id=int(raw.get("crate_id") or 0),
        path=tuple(str(p) for p in raw.get("path") or []),
        kind=str(raw.get("kind") or "unknown"),
    )
