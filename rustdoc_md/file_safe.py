"""Utility for making names safe for use as file and directory names."""

import re

# Conservative: keep lower-case letters, digits and underscore.
FILE_SAFE_RE = re.compile(r"[^a-z0-9_]+")


def file_safe(name: str) -> str:
    """Make a stable, lower-case filename token, e.g. `r#type` -> `r-type`."""
    name = FILE_SAFE_RE.sub("-", name.lower()).strip("-")
    # Avoid pathological emptiness
    return name or "unnamed"
