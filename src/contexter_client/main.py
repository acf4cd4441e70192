from __future__ import annotations

"""
Main Entry Point and Global Supervisor.

Installs a last-resort exception hook that logs unexpected crashes with
their traceback before delegating to the CLI controller.
"""

import logging
import sys
import traceback
from typing import Any, List, Optional

from contexter_client.interface.cli.app import main as cli_main


def global_exception_handler(exctype: type[BaseException], value: BaseException, tb: Any) -> None:
    """Log an unhandled exception and print its trace to stderr."""
    if issubclass(exctype, KeyboardInterrupt):
        sys.__excepthook__(exctype, value, tb)
        return

    stack_trace = "".join(traceback.format_exception(exctype, value, tb))
    logging.getLogger("contexter_client.supervisor").critical(
        f"FATAL EXCEPTION DETECTED: {value}\n{stack_trace}"
    )
    print("CRITICAL ERROR (CONTEXTER CLIENT)", file=sys.stderr)
    print(stack_trace, file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    sys.excepthook = global_exception_handler
    return cli_main(argv)


if __name__ == "__main__":
    sys.exit(main())
