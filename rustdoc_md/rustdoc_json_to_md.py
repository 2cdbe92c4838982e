"""Convert a rustdoc JSON export to Markdown.

Renders the public API of one crate either as a single Markdown document or as
a directory of cross-linked files that mirrors the module hierarchy.
"""

import argparse
import logging
import sys
from pathlib import Path

from rustdoc_md.errors import RustdocMdError
from rustdoc_md.run_conversion import run_conversion


def main(argv: list[str] | None = None) -> int:
    """Run the conversion process."""
    ap = argparse.ArgumentParser(
        description="Convert rustdoc JSON output to Markdown.",
    )
    ap.add_argument(
        "input_json",
        type=Path,
        help="Path to the rustdoc JSON file (target/doc/<crate>.json)",
    )
    ap.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Output file (single mode) or directory (multi-file mode); default: stdout",
    )
    ap.add_argument(
        "--multi-file",
        action="store_true",
        help="Write one file per module/item instead of a single document",
    )
    ap.add_argument(
        "--config",
        help="Path to a YAML configuration file",
    )
    ap.add_argument(
        "--max-heading-depth",
        type=int,
        help="Deepest Markdown heading level to emit (1-6); deeper headings become bold",
    )
    ap.add_argument(
        "--include-private",
        action="store_true",
        help="Also document non-public items (the export must contain them)",
    )
    ap.add_argument(
        "--unit",
        choices=["item", "module"],
        help="Multi-file granularity: a file per item (default) or per module",
    )
    ap.add_argument(
        "--link-external",
        action="store_true",
        help="Link items of other crates to their html_root_url documentation",
    )
    ap.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.multi_file and args.output is None:
        ap.error("--multi-file requires --output DIRECTORY")

    try:
        return run_conversion(args)
    except RustdocMdError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
