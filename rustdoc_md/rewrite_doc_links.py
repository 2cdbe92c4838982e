"""Logic for rewriting rustdoc intra-doc links to Markdown links."""

import re
from collections.abc import Callable, Mapping

from rustdoc_md.shift_doc_headings import iter_outside_fences

INLINE_LINK_RE = re.compile(r"\[([^\]\n]+)\]\(([^)\s]+)\)")  # [label](dest)
REFERENCE_LINK_RE = re.compile(r"\[([^\]\n]+)\]\[([^\]\n]+)\]")  # [label][dest]
SHORTCUT_LINK_RE = re.compile(r"(?<![\]\\!])\[([^\]\n]+)\](?![(\[:])")  # [dest]
LINK_DEFINITION_RE = re.compile(r"^( {0,3}\[[^\]\n]+\]:[ \t]*)(\S+)(.*)$")  # [x]: dest

# Maps a target id to (href or None, plain-text annotation used when there is no href).
LinkResolver = Callable[[str], tuple[str | None, str]]


def rewrite_doc_links(text: str, links: Mapping[str, str], resolve: LinkResolver) -> str:
    """Rewrite intra-doc links whose destination appears in the item's `links` map.

    Destinations that cannot be linked lose their brackets and keep their label.
    Code blocks are left untouched.
    """
    if not text or not links:
        return text or ""

    def target_of(dest: str) -> str | None:
        return links.get(dest) or links.get(dest.strip("`"))

    def linked(label: str, target: str) -> str:
        href, annotation = resolve(target)
        if href:
            return f"[{label}]({href})"
        return f"{label}{annotation}"

    def repl_inline(m: re.Match) -> str:
        target = target_of(m.group(2))
        return linked(m.group(1), target) if target else m.group(0)

    def repl_reference(m: re.Match) -> str:
        target = target_of(m.group(2))
        return linked(m.group(1), target) if target else m.group(0)

    def repl_shortcut(m: re.Match) -> str:
        target = target_of(m.group(1))
        return linked(m.group(1), target) if target else m.group(0)

    out = []
    for line, in_fence in iter_outside_fences(text):
        if not in_fence:
            d = LINK_DEFINITION_RE.match(line)
            target = target_of(d.group(2)) if d else None
            if d and target:
                href, _ = resolve(target)
                if href:
                    line = f"{d.group(1)}{href}{d.group(3)}"
            else:
                line = INLINE_LINK_RE.sub(repl_inline, line)
                line = REFERENCE_LINK_RE.sub(repl_reference, line)
                line = SHORTCUT_LINK_RE.sub(repl_shortcut, line)
        out.append(line)
    return "\n".join(out)
