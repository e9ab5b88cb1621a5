"""
jumble.__main__ -- CLI entry point.

Usage:
    jumble serve [--root DIR] [--config PATH] [--transport stdio|sse|streamable-http]
    jumble check [--root DIR] [--config PATH] [--json]
    jumble list  [--root DIR] [--config PATH]
    jumble call TOOL [--args JSON] [--root DIR] [--config PATH]

The workspace root is taken from $JUMBLE_ROOT, then --root, then the
current directory.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional

from jumble.core.config import Config
from jumble.core.errors import WorkspaceError
from jumble.core.logging import configure_logging


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="jumble",
        description="jumble -- queryable project context for LLM agents",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    sub = parser.add_subparsers(dest="command")

    def add_common(p: argparse.ArgumentParser) -> None:
        p.add_argument("--root", default=None, help="Workspace root to scan")
        p.add_argument("--config", default=None, help="Path to jumble.yaml config")

    # -- serve -------------------------------------------------------------
    serve_p = sub.add_parser("serve", help="Start the MCP server")
    add_common(serve_p)
    serve_p.add_argument(
        "--transport",
        default="stdio",
        choices=["stdio", "sse", "streamable-http"],
        help="MCP transport (default: stdio)",
    )
    serve_p.add_argument("--host", default="127.0.0.1", help="Bind address for HTTP transports")
    serve_p.add_argument("--port", type=int, default=8765, help="Port for HTTP transports")

    # -- check -------------------------------------------------------------
    check_p = sub.add_parser("check", help="Scan descriptors and report problems")
    add_common(check_p)
    check_p.add_argument("--json", action="store_true", help="Print the scan result as JSON")

    # -- list --------------------------------------------------------------
    list_p = sub.add_parser("list", help="List discovered projects")
    add_common(list_p)

    # -- call --------------------------------------------------------------
    call_p = sub.add_parser("call", help="Run one tool locally and print the result")
    call_p.add_argument("tool", help="Tool name, e.g. get_commands")
    call_p.add_argument("--args", default="{}", help="Tool arguments as a JSON object")
    add_common(call_p)

    args = parser.parse_args(argv)

    # -- Logging -----------------------------------------------------------
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    if args.command is None:
        parser.print_help()
        return 0

    # -- Dispatch ----------------------------------------------------------
    try:
        if args.command == "serve":
            return _cmd_serve(args)
        elif args.command == "check":
            return _cmd_check(args)
        elif args.command == "list":
            return _cmd_list(args)
        elif args.command == "call":
            return _cmd_call(args)
    except (WorkspaceError, FileNotFoundError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    parser.print_help()
    return 0


# ---------------------------------------------------------------------------
# Command implementations
# ---------------------------------------------------------------------------


def _load_config(args: argparse.Namespace) -> Config:
    config = Config.load(root=args.root, config_path=args.config)
    if args.verbose:
        config.log_level = "DEBUG"
    configure_logging(structured=config.structured_logging, level=config.log_level)
    return config


def _cmd_serve(args: argparse.Namespace) -> int:
    """Start the MCP server."""
    from jumble.server import run_server

    run_server(
        transport=args.transport,
        host=args.host,
        port=args.port,
        config=_load_config(args),
    )
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    """Build the workspace and print projects plus diagnostics.

    Exit status is 1 when any descriptor failed to load.
    """
    from jumble.workspace import build

    config = _load_config(args)
    ws = build(config.root, config)

    if args.json:
        print(json.dumps(ws.to_dict(), indent=2))
        return 1 if ws.load_errors else 0

    print(f"Root: {ws.root}")
    print(f"Projects ({len(ws.projects)}):")
    for name in ws.project_names():
        print(f"  {name:<24} {ws.projects[name].source}")
    if ws.settings is not None:
        print(f"Workspace settings: {ws.settings.source}")

    if ws.load_errors:
        print(f"Problems ({len(ws.load_errors)}):")
        for diag in ws.load_errors:
            print(f"  [{diag.kind}] {diag.message}")
        return 1

    print("No problems found.")
    return 0


def _cmd_list(args: argparse.Namespace) -> int:
    """Print the project list as JSON."""
    from jumble import query
    from jumble.workspace import build

    config = _load_config(args)
    ws = build(config.root, config)
    print(json.dumps(query.list_projects(ws), indent=2))
    return 0


def _cmd_call(args: argparse.Namespace) -> int:
    """Run one tool call against a fresh scan and print the JSON result."""
    from jumble.server import call_tool
    from jumble.workspace import WorkspaceState

    try:
        arguments = json.loads(args.args)
    except json.JSONDecodeError as exc:
        print(f"error: --args is not valid JSON: {exc}", file=sys.stderr)
        return 2
    if not isinstance(arguments, dict):
        print("error: --args must be a JSON object", file=sys.stderr)
        return 2

    state = WorkspaceState(_load_config(args))
    state.rebuild()
    result = call_tool(args.tool, arguments, state=state)
    print(json.dumps(result, indent=2, default=str))
    return 0 if result["ok"] else 1


def run(argv: Optional[list[str]] = None) -> None:
    """Console-script entry point."""
    sys.exit(main(argv))


if __name__ == "__main__":
    run()
