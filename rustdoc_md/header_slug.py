"""Anchor slugs for rendered sections."""

import re


def header_slug(s: str) -> str:
    """Generate a GitHub-ish anchor slug: lower, hyphenate non-alnum."""
    s = re.sub(r"[^a-z0-9]+", "-", s.strip().lower()).strip("-")
    return s or "section"


class AnchorRegistry:
    """Hands out collision-free anchors in registration order.

    The first path to produce a slug keeps it; later colliding paths get the
    item id appended, then a counter if that is taken too.
    """

    def __init__(self) -> None:
        """Start with no anchors taken."""
        self._taken: set[str] = set()

    def claim(self, qualified_path: str, item_id: str | None = None) -> str:
        """Return a unique anchor for a `::`-separated path."""
        slug = header_slug(qualified_path)
        if slug in self._taken and item_id is not None:
            slug = f"{slug}-{header_slug(item_id)}"
        base, n = slug, 2
        while slug in self._taken:
            slug = f"{base}-{n}"
            n += 1
        self._taken.add(slug)
        return slug
