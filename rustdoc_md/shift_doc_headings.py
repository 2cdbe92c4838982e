"""Shift author-written headings in doc text below the enclosing section."""

import re
from collections.abc import Iterator

from rustdoc_md.md_heading import md_heading

ATX_HEADING_RE = re.compile(r"^(#{1,6})(?:[ \t]+(.*?))?(?:[ \t]+#+)?[ \t]*$")
SETEXT_UNDERLINE_RE = re.compile(r"^ {0,3}(=+|-+)[ \t]*$")
FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})")
INDENTED_CODE_RE = re.compile(r"^(?: {4}|\t)")
BLOCK_START_RE = re.compile(r"^ {0,3}(?:>|[-+*](?:[ \t]|$)|\d{1,9}[.)](?:[ \t]|$))")


def iter_outside_fences(text: str) -> Iterator[tuple[str, bool]]:
    """Yield (line, in_fence) pairs, tracking fenced code blocks."""
    fence: str | None = None
    for line in text.splitlines():
        m = FENCE_RE.match(line)
        if m:
            marker = m.group(1)
            if fence is None:
                fence = marker
            elif marker[0] == fence[0] and len(marker) >= len(fence):
                fence = None
            yield line, True
            continue
        yield line, fence is not None


def shift_doc_headings(text: str, offset: int, max_level: int) -> str:
    """Push every heading down by `offset` levels; past `max_level` it becomes bold.

    Both ATX (`# Title`) and Setext (`Title` over `===` or `---`) headings
    are rewritten as ATX headings at the shifted level.
    """
    if not text:
        return ""
    out: list[str] = []
    paragraph = 0  # number of trailing lines in `out` forming an open paragraph
    for line, in_fence in iter_outside_fences(text):
        if in_fence:
            out.append(line)
            paragraph = 0
            continue
        m = ATX_HEADING_RE.match(line)
        if m:
            out.append(md_heading(len(m.group(1)) + offset, m.group(2) or "", max_level))
            paragraph = 0
            continue
        underline = SETEXT_UNDERLINE_RE.match(line)
        if underline and paragraph:
            title = " ".join(part.strip() for part in out[-paragraph:])
            del out[-paragraph:]
            level = 1 if underline.group(1)[0] == "=" else 2
            out.append(md_heading(level + offset, title, max_level))
            paragraph = 0
            continue
        out.append(line)
        if not line.strip() or underline or BLOCK_START_RE.match(line):
            paragraph = 0
        elif paragraph:
            paragraph += 1
        elif not INDENTED_CODE_RE.match(line):
            paragraph = 1
    return "\n".join(out)
