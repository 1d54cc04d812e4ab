from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: configuration resolution (defaults,
persisted file, command-line overrides), logging bootstrap, tree
construction and result rendering.
"""

import json
import os
import sys
from typing import Any, Dict, List, Optional

from fstree.core.hashing.content import make_merkle_hasher
from fstree.core.serialization import digest_to_hex, to_json
from fstree.core.services.tree_builder import build_file_tree
from fstree.domain.config import get_default_config, load_config, save_config, validate_config
from fstree.domain.errors import TreeError
from fstree.domain.tree_models import Node
from fstree.infra.fs import ensure_parent_dir, normalize_path
from fstree.infra.logging import LoggingConfig, configure_logging, get_logger
from fstree.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_BUILD_FAILED = 1
EXIT_FAILED = 1
EXIT_BAD_INPUT = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code.
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 1. Resolve configuration hierarchy
    base_conf = get_default_config() if args.use_defaults else load_config()
    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))
    conf, warnings = validate_config(raw_conf)

    # 2. Logging bootstrap (console on stderr, optional rotating file)
    configure_logging(LoggingConfig(level=conf["log_level"], console=True, log_file=conf["log_file"]))

    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.dump_config:
        print(json.dumps(conf, ensure_ascii=False, indent=2))
        return EXIT_OK

    if args.save_config:
        try:
            saved = save_config(conf)
        except OSError as e:
            logger.error(f"Cannot save configuration: {e}")
            print(f"ERROR: {e}", file=sys.stderr)
            return EXIT_FAILED
        print(saved)
        return EXIT_OK

    # 3. Pre-flight input verification
    input_path = normalize_path(args.path, fallback=os.getcwd())
    if not os.path.isdir(input_path):
        msg = f"Input path is not a directory: {input_path}"
        logger.error(msg)
        print(f"ERROR: {msg}", file=sys.stderr)
        return EXIT_BAD_INPUT

    # 4. Tree construction
    try:
        root = build_file_tree(input_path, content_hasher=make_merkle_hasher(conf["chunk_size"]))
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        return EXIT_INTERRUPTED
    except TreeError as e:
        logger.error(f"Tree construction failed: {e}")
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_BUILD_FAILED

    # 5. Rendering
    try:
        output = _render(root, conf)
    except RecursionError:
        msg = "Tree is nested too deeply to serialize as JSON; use the hash output instead."
        logger.error(msg)
        print(f"ERROR: {msg}", file=sys.stderr)
        return EXIT_FAILED

    if args.output_file:
        _write_output(args.output_file, output)
    else:
        print(output)

    return EXIT_OK

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow-merge non-None overrides for known keys into the base config."""
    out = dict(base)
    for k, v in overrides.items():
        if k in out and v is not None:
            out[k] = v
    return out


def _render(root: Node, conf: Dict[str, Any]) -> str:
    if conf["output_format"] == "json":
        indent = conf["json_indent"] or None
        return to_json(root, indent=indent)
    return digest_to_hex(root.digest)


def _write_output(path: str, text: str) -> None:
    ensure_parent_dir(path)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text + "\n")
    logger.info(f"Result saved to file: {path}")
