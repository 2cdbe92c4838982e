"""Persist rendered Markdown to disk."""

import logging
import sys
from collections.abc import Mapping
from pathlib import Path, PurePosixPath

from rustdoc_md.errors import OutputWriteFailure

logger = logging.getLogger(__name__)


def write_single(path: Path, text: str) -> Path:
    """Write one Markdown document; refuses to overwrite a directory."""
    if path.is_dir():
        raise OutputWriteFailure(str(path), "is a directory")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8", newline="\n")
    except OSError as exc:
        raise OutputWriteFailure(str(path), str(exc)) from exc
    logger.debug("Wrote %s", path)
    return path


def write_multi(out_dir: Path, files: Mapping[str, str]) -> int:
    """Write relative path -> text under `out_dir`; returns the number of files written."""
    if out_dir.exists() and not out_dir.is_dir():
        raise OutputWriteFailure(str(out_dir), "exists and is not a directory")
    written = 0
    for rel, text in files.items():
        out_file = output_file_for_page(out_dir, rel)
        try:
            out_file.parent.mkdir(parents=True, exist_ok=True)
            out_file.write_text(text, encoding="utf-8", newline="\n")
        except OSError as exc:
            raise OutputWriteFailure(str(out_file), str(exc)) from exc
        written += 1
        if written % 50 == 0:
            print(f"  ... wrote {written}/{len(files)} files", file=sys.stderr)
    return written


def output_file_for_page(out_root: Path, rel: str) -> Path:
    """Map a relative forward-slash page path to a file under `out_root`."""
    page = PurePosixPath(rel)
    if page.is_absolute() or ".." in page.parts:
        raise OutputWriteFailure(rel, "output paths must stay inside the output directory")
    return out_root.joinpath(*page.parts)
