"""Main orchestration script for generating rustdoc JSON and Markdown documentation."""

import argparse
import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path


def run_command(cmd_list: Sequence[str | Path], cwd: Path | str | None = None) -> None:
    """Run a command and exit if it fails."""
    cmd_str = " ".join(str(x) for x in cmd_list)
    print(f"Running: {cmd_str}")
    try:
        subprocess.run(cmd_list, check=True, cwd=cwd)
    except subprocess.CalledProcessError as e:
        print(f"Error executing command: {cmd_str}")
        sys.exit(e.returncode)


def main() -> None:
    """Run the full documentation generation pipeline."""
    parser = argparse.ArgumentParser(
        description="Generate rustdoc JSON for a crate and convert it to Markdown."
    )
    parser.add_argument(
        "--crate-dir",
        type=Path,
        default=Path(),
        help="Directory containing the crate's Cargo.toml (default: current directory)",
    )
    parser.add_argument(
        "--crate-name",
        help="Crate name, if it differs from the directory name",
    )
    parser.add_argument(
        "--dev",
        action="store_true",
        help="Run development checks (linting, tests) before generating documentation",
    )
    parser.add_argument(
        "--multi-file",
        action="store_true",
        help="Write a directory of cross-linked files instead of one document",
    )
    parser.add_argument(
        "--include-private",
        action="store_true",
        help="Document private items as well",
    )
    parser.add_argument(
        "--config",
        help="Path to configuration file",
    )
    args = parser.parse_args()

    root_dir = Path(__file__).parent
    crate_dir = args.crate_dir.resolve()
    crate_name = (args.crate_name or crate_dir.name).replace("-", "_")

    if args.dev:
        print("--- Running Development Checks ---")
        run_command([sys.executable, str(root_dir / "dev.py"), "--ci"])
        print("\nDevelopment checks passed. Proceeding with documentation generation.\n")

    # 1. Generate rustdoc JSON (requires a nightly toolchain)
    print("--- Step 1: Generating rustdoc JSON ---")
    rustdoc_cmd = ["cargo", "+nightly", "rustdoc", "--lib", "--", "-Z", "unstable-options"]
    rustdoc_cmd += ["--output-format", "json"]
    if args.include_private:
        rustdoc_cmd.append("--document-private-items")
    run_command(rustdoc_cmd, cwd=crate_dir)

    # 2. Convert JSON to Markdown
    print("\n--- Step 2: Converting rustdoc JSON to Markdown ---")
    json_file = crate_dir / "target" / "doc" / f"{crate_name}.json"
    out = root_dir / ("docs_out" if args.multi_file else f"{crate_name}.md")

    cmd = [
        sys.executable,
        "-m",
        "rustdoc_md.rustdoc_json_to_md",
        str(json_file),
        "-o",
        str(out),
    ]
    if args.multi_file:
        cmd.append("--multi-file")
    if args.include_private:
        cmd.append("--include-private")
    if args.config:
        cmd.extend(["--config", args.config])

    run_command(cmd, cwd=root_dir)

    print(f"\nSUCCESS: Documentation generated in {out}")


if __name__ == "__main__":
    main()
