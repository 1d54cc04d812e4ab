from __future__ import annotations

"""
Main Entry Point and Global Supervisor.

Routes execution to the CLI controller and installs a last-resort
exception hook so unexpected crashes are logged with their traceback.
"""

import logging
import os
import sys
import traceback
from typing import Any, List, Optional

# Allow running this file directly from a source checkout
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
SRC_DIR = os.path.dirname(BASE_DIR)
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)


def global_exception_handler(exctype: type[BaseException], value: BaseException, tb: Any) -> None:
    """
    Log an unhandled exception and print its trace to stderr.

    Args:
        exctype: Exception class.
        value: Exception instance.
        tb: Traceback object.
    """
    stack_trace = "".join(traceback.format_exception(exctype, value, tb))
    logging.getLogger("fstree.supervisor").critical(f"FATAL EXCEPTION DETECTED: {value}\n{stack_trace}")

    print("\n" + "=" * 80, file=sys.stderr)
    print("CRITICAL ERROR (FSTREE CLI)", file=sys.stderr)
    print("=" * 80, file=sys.stderr)
    print(stack_trace, file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    """Console script entry point."""
    from fstree.interface.cli.app import main as cli_main

    sys.excepthook = global_exception_handler
    return cli_main(argv)


if __name__ == "__main__":
    sys.exit(main())
