"""Utility for generating capped Markdown headings."""

MAX_MARKDOWN_HEADING = 6


def md_heading(level: int, text: str, max_level: int = MAX_MARKDOWN_HEADING) -> str:
    """Generate an ATX heading, or a bold label once `max_level` is exceeded.

    A capped heading without text yields an empty line, since `****` would
    read as a thematic break.
    """
    cap = min(max(max_level, 1), MAX_MARKDOWN_HEADING)
    if level <= cap:
        return f"{'#' * max(level, 1)} {text}"
    if not text.strip():
        return ""
    return f"**{text}**"
