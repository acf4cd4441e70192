from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates the parsed namespace into
settings overrides and selection toggles.
"""

import argparse
from typing import Any, Dict, List, Optional, Tuple

from contexter_client import __version__

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the contexter-client CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="contexter-client",
        description="Browse remote contexter projects and fetch selected file contents.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    _add_connection_args(p, default=None)

    # --- Diagnostics ---
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write logs to this rotating file.",
    )

    sub = p.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    sub.add_parser("projects", help="List available projects.")

    tree = sub.add_parser("tree", help="Show a project's file tree with selection state.")
    _add_selection_args(tree)

    fetch = sub.add_parser("fetch", help="Fetch the content of the selected files.")
    _add_selection_args(fetch)
    fetch.add_argument(
        "-o", "--output",
        dest="output",
        default=None,
        help="Write content to this file instead of stdout.",
    )
    fetch.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print a JSON document with the request paths and content.",
    )

    sub.add_parser("validate", help="Check the configured API key against the server.")

    configure = sub.add_parser("configure", help="Persist connection settings.")
    # Sub-command copies must not reset values given before the sub-command.
    _add_connection_args(configure, default=argparse.SUPPRESS)
    configure.add_argument("--show", action="store_true", help="Print stored settings and exit.")

    return p


def _add_connection_args(parser: argparse.ArgumentParser, default: Any) -> None:
    parser.add_argument(
        "--server-url",
        dest="server_url",
        default=default,
        help="Base URL of the contexter server (overrides stored settings).",
    )
    parser.add_argument(
        "--api-key",
        dest="api_key",
        default=default,
        help="API key sent with every request (overrides stored settings).",
    )
    parser.add_argument(
        "--timeout",
        dest="timeout",
        type=float,
        default=default,
        help="Request timeout in seconds.",
    )


def _add_selection_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("project", help="Project name.")
    parser.add_argument(
        "--include",
        dest="include",
        action="append",
        default=None,
        metavar="NODE",
        help="Select only these files or folders (repeatable, one node per flag).",
    )
    parser.add_argument(
        "--exclude",
        dest="exclude",
        action="append",
        default=None,
        metavar="NODE",
        help="Deselect these files or folders (repeatable, one node per flag).",
    )

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Extract connection overrides from the parsed namespace.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Settings overrides. Unset options map to None.
    """
    return {
        "server_url": args.server_url,
        "api_key": args.api_key,
        "timeout": args.timeout,
    }


def args_to_toggles(args: argparse.Namespace) -> Tuple[Optional[List[str]], List[str]]:
    """
    Extract selection toggles.

    Returns:
        Tuple[Optional[List[str]], List[str]]: Nodes to include (None keeps
            the default full selection) and nodes to exclude.
    """
    include = _normalize_nodes(getattr(args, "include", None))
    exclude = _normalize_nodes(getattr(args, "exclude", None)) or []
    return include, exclude

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _normalize_nodes(values: Optional[List[str]]) -> Optional[List[str]]:
    """Turn repeated flag values into node ids, one id per value."""
    if values is None:
        return None
    # File names may contain commas; each value is one node id.
    return [v.strip("/") for v in values if v.strip("/")]
