from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Boots logging, resolves connection settings (stored file, environment and
command-line overrides), dispatches the sub-command and maps errors to
exit codes. All tree and selection logic lives in the core services; this
module only renders results.
"""

import argparse
import json
import sys
from typing import Callable, Dict, List, Optional

from contexter_client.core.analysis.tree_renderer import render_selection_tree, render_summary
from contexter_client.core.services.selection import SelectionStore
from contexter_client.core.services.session import ProjectSession
from contexter_client.domain.config import (
    CONFIG_FILE,
    apply_overrides,
    load_settings,
    resolve_settings,
    save_settings,
)
from contexter_client.domain.errors import (
    ConfigurationError,
    ContexterError,
    InvalidPathError,
    UnknownNodeError,
)
from contexter_client.infra import network
from contexter_client.infra.fs import write_text_file
from contexter_client.infra.logging import LoggingConfig, configure_logging, get_logger
from contexter_client.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_REMOTE_FAILURE = 1
EXIT_USAGE = 2
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

    log_level = "DEBUG" if args.debug else "WARNING"
    configure_logging(LoggingConfig(level=log_level, console=True, log_file=args.log_file))

    overrides = cli_args.args_to_overrides(args)
    handler = _COMMANDS[args.command]

    try:
        return handler(args, overrides)
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED
    except ConfigurationError as e:
        print(f"ERROR: {e} Run 'contexter-client configure' or pass --server-url/--api-key.",
              file=sys.stderr)
        return EXIT_USAGE
    except (UnknownNodeError, InvalidPathError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_USAGE
    except ContexterError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_REMOTE_FAILURE

# -----------------------------------------------------------------------------
# COMMAND HANDLERS
# -----------------------------------------------------------------------------

def _cmd_projects(args: argparse.Namespace, overrides: Dict[str, object]) -> int:
    session = ProjectSession(resolve_settings(overrides))
    projects = session.list_projects()
    if not projects:
        print("No projects available.")
        return EXIT_OK
    for project in projects:
        print(f"{project.name}\t{project.path}" if project.path else project.name)
    return EXIT_OK


def _cmd_tree(args: argparse.Namespace, overrides: Dict[str, object]) -> int:
    session = ProjectSession(resolve_settings(overrides))
    selection = _open_with_toggles(session, args)

    assert session.metadata is not None
    print(f"{session.metadata.name} ({session.metadata.path})")
    for line in render_selection_tree(selection):
        print(line)
    print(render_summary(selection))
    return EXIT_OK


def _cmd_fetch(args: argparse.Namespace, overrides: Dict[str, object]) -> int:
    session = ProjectSession(resolve_settings(overrides))
    selection = _open_with_toggles(session, args)
    content = session.fetch_content()

    if args.json_output:
        request = network.encode_selection(selection.snapshot(), selection.tree.all_files)
        payload = {
            "project": session.metadata.name if session.metadata else args.project,
            "paths": request.paths,
            "content": content,
        }
        text = json.dumps(payload, ensure_ascii=False, indent=2)
    else:
        text = content

    if args.output:
        dest = write_text_file(args.output, text)
        print(f"Content written to {dest} ({render_summary(selection)}).", file=sys.stderr)
    else:
        sys.stdout.write(text)
        if not text.endswith("\n"):
            sys.stdout.write("\n")
    return EXIT_OK


def _cmd_validate(args: argparse.Namespace, overrides: Dict[str, object]) -> int:
    settings = resolve_settings(overrides)
    if network.validate_api_key(settings):
        print("API key is valid.")
        return EXIT_OK
    print("API key is invalid.", file=sys.stderr)
    return EXIT_REMOTE_FAILURE


def _cmd_configure(args: argparse.Namespace, overrides: Dict[str, object]) -> int:
    stored = load_settings()
    if args.show:
        print(f"Settings file: {CONFIG_FILE}")
        print(f"server_url: {stored.server_url or '(unset)'}")
        print(f"api_key: {'(set)' if stored.api_key else '(unset)'}")
        print(f"timeout: {stored.timeout:g}")
        return EXIT_OK

    updated = apply_overrides(stored, overrides)
    if updated == stored:
        print("Nothing to change. Pass --server-url, --api-key or --timeout.", file=sys.stderr)
        return EXIT_USAGE

    try:
        save_settings(updated)
    except OSError as e:
        print(f"ERROR: Failed to save settings: {e}", file=sys.stderr)
        return EXIT_REMOTE_FAILURE
    print(f"Settings saved to {CONFIG_FILE}")
    return EXIT_OK


_COMMANDS: Dict[str, Callable[[argparse.Namespace, Dict[str, object]], int]] = {
    "projects": _cmd_projects,
    "tree": _cmd_tree,
    "fetch": _cmd_fetch,
    "validate": _cmd_validate,
    "configure": _cmd_configure,
}

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _open_with_toggles(session: ProjectSession, args: argparse.Namespace) -> SelectionStore:
    """Open the requested project and apply --include/--exclude toggles."""
    selection = session.open_project(args.project)
    include, exclude = cli_args.args_to_toggles(args)

    if include is not None:
        selection.clear()
        for node_id in include:
            selection.set_node(node_id, True)
    for node_id in exclude:
        selection.set_node(node_id, False)

    logger.debug(render_summary(selection))
    return selection
