"""Utility for generating Markdown code blocks."""

import re


def md_codeblock(lang: str, code: str) -> str:
    """Generate a fenced Markdown code block.

    The fence is made longer than any backtick run in the code, so macro
    bodies that contain fences of their own stay intact.
    """
    longest = max((len(m) for m in re.findall(r"`+", code)), default=0)
    fence = "`" * max(3, longest + 1)
    return f"""{fence}{lang}
{code.rstrip()}
{fence}"""
