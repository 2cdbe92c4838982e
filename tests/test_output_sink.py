"""Tests for writing rendered Markdown to disk."""

from pathlib import Path

import pytest

from rustdoc_md.errors import OutputWriteFailure
from rustdoc_md.output_sink import output_file_for_page, write_multi, write_single


def test_write_single(tmp_path: Path) -> None:
    """Verify that one document is written as UTF-8 with LF endings."""
    out = tmp_path / "docs" / "demo.md"
    write_single(out, "# Crate `demo`\n\nÜber\n")
    assert out.read_bytes() == "# Crate `demo`\n\nÜber\n".encode()


def test_write_single_refuses_directory(tmp_path: Path) -> None:
    """Verify that a directory is never overwritten by a single document."""
    with pytest.raises(OutputWriteFailure, match="is a directory"):
        write_single(tmp_path, "text")


def test_write_multi(tmp_path: Path) -> None:
    """Verify that nested relative paths become files under the output directory."""
    files = {"index.md": "root\n", "shapes/index.md": "shapes\n", "shapes/circle.md": "circle\n"}
    assert write_multi(tmp_path / "out", files) == 3
    assert (tmp_path / "out" / "shapes" / "circle.md").read_text(encoding="utf-8") == "circle\n"


def test_write_multi_refuses_file(tmp_path: Path) -> None:
    """Verify that an existing file is not used as the output directory."""
    target = tmp_path / "out.md"
    target.write_text("x", encoding="utf-8")
    with pytest.raises(OutputWriteFailure):
        write_multi(target, {"index.md": "root\n"})


def test_output_file_for_page(tmp_path: Path) -> None:
    """Verify mapping of page paths and rejection of escaping paths."""
    assert output_file_for_page(tmp_path, "a/b.md") == tmp_path / "a" / "b.md"
    with pytest.raises(OutputWriteFailure):
        output_file_for_page(tmp_path, "../escape.md")
    with pytest.raises(OutputWriteFailure):
        output_file_for_page(tmp_path, "/etc/passwd")
