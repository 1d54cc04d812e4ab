from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates parsed arguments into
configuration overrides understood by the domain layer.
"""

import argparse
from typing import Any, Dict

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the fstree CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="fstree",
        description="Build a content-addressed snapshot of a directory and print its root hash.",
    )

    p.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Directory to snapshot (default: current directory).",
    )

    # --- Output ---
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the full tree as JSON instead of the root hash.",
    )
    p.add_argument(
        "--indent",
        dest="json_indent",
        type=int,
        default=None,
        help="JSON indentation width (0 for compact single-line output).",
    )
    p.add_argument(
        "-o", "--output",
        dest="output_file",
        default=None,
        help="Write the result to this file instead of stdout.",
    )

    # --- Hashing ---
    p.add_argument(
        "--chunk-size",
        dest="chunk_size",
        type=int,
        default=None,
        help="Leaf chunk size in bytes for file content hashing.",
    )

    # --- Configuration and Diagnostics ---
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write diagnostics to this rotating log file.",
    )
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore the persisted configuration file.",
    )
    p.add_argument(
        "--save-config",
        action="store_true",
        help="Persist the effective configuration (including other options given) and exit.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration as JSON and exit.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Only options explicitly given on the command line are returned.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    if args.json_output:
        overrides["output_format"] = "json"
    if args.json_indent is not None:
        overrides["json_indent"] = args.json_indent
    if args.chunk_size is not None:
        overrides["chunk_size"] = args.chunk_size
    if args.log_file:
        overrides["log_file"] = args.log_file
    if args.debug:
        overrides["log_level"] = "DEBUG"

    return overrides
