"""Orchestration logic for converting rustdoc JSON to Markdown."""

import argparse
import logging
import sys
from typing import Any

from rustdoc_md.errors import ConfigurationError
from rustdoc_md.hierarchy_builder import HierarchyBuilder
from rustdoc_md.load_config import load_config
from rustdoc_md.load_document import load_document_file
from rustdoc_md.markdown_renderer import render
from rustdoc_md.output_sink import write_multi, write_single
from rustdoc_md.reference_resolver import ReferenceResolver
from rustdoc_md.render_config import MULTI, RenderConfig
from rustdoc_md.rendered_output import RenderedOutput

logger = logging.getLogger(__name__)


def run_conversion(args: argparse.Namespace) -> int:
    """Execute the full conversion pipeline.

    Fatal errors propagate as RustdocMdError subclasses; warnings are
    reported after the output has been written.
    """
    config = RenderConfig.from_dict(_merged_config(args))
    if config.mode == MULTI and args.output is None:
        msg = "multi-file mode needs an output directory (-o)"
        raise ConfigurationError(msg)

    print(f"Loading {args.input_json} ...", file=sys.stderr)
    document = load_document_file(args.input_json)
    resolver = ReferenceResolver(document)
    tree = HierarchyBuilder(document, resolver, include_private=config.include_private).build()
    output = render(tree, config)

    if config.mode == MULTI:
        written = write_multi(args.output, output.files)
        print(f"Generated {written} Markdown files into: {args.output}", file=sys.stderr)
    elif args.output:
        write_single(args.output, output.text)
        print(f"Generated Markdown document: {args.output}", file=sys.stderr)
    else:
        sys.stdout.write(output.text)

    _report_warnings(output)
    return 0


def _merged_config(args: argparse.Namespace) -> dict[str, Any]:
    """Load the config file, then apply command-line overrides."""
    config = load_config(args.config)
    if args.multi_file:
        config["mode"] = MULTI
    if args.max_heading_depth is not None:
        config["max_heading_depth"] = args.max_heading_depth
    if args.include_private:
        config["include_private"] = True
    if args.unit:
        config["multi_file_unit"] = args.unit
    if args.link_external:
        config["link_external"] = True
    return config


def _report_warnings(output: RenderedOutput) -> None:
    if not output.warnings:
        return
    logger.warning("Completed with %d warning(s)", len(output.warnings))
    for warning in output.warnings:
        logger.warning("  %s", warning.describe())
