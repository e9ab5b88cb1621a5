"""
jumble -- MCP server exposing project context as narrow lookup tools.

Run with:
    jumble serve --root /path/to/workspace

Or configure in your MCP client as:
    {
        "mcpServers": {
            "jumble": {
                "command": "jumble",
                "args": ["serve", "--root", "/path/to/workspace"]
            }
        }
    }

Tools exposed:
    Discovery:
        list_projects             -- All projects with descriptions
        get_workspace_overview    -- Projects, dependencies, load errors
        get_workspace_conventions -- Workspace-wide conventions/gotchas
    Per project:
        get_project_info   -- Full descriptor, or one field by path
        get_commands       -- build/test/lint/run commands
        get_architecture   -- Files + summary for one concept
        get_related_files  -- Search concepts by keyword
        get_conventions    -- Conventions and gotchas
        get_docs           -- Documentation index / one doc path
        list_skills        -- Task guide topics
        get_skill          -- One task guide
    Authoring / maintenance:
        get_jumble_authoring_prompt -- How to write .jumble files
        reload_workspace            -- Re-scan the workspace from disk
"""

from __future__ import annotations

import inspect
import json
import logging
import traceback
from typing import Any, Callable, Dict, Optional

from mcp.server.fastmcp import FastMCP

from jumble import query
from jumble.core.config import Config
from jumble.core.errors import InvalidArgument, JumbleError, QueryError
from jumble.workspace import Workspace, WorkspaceState

log = logging.getLogger("jumble.server")

# ---------------------------------------------------------------------------
# Server singleton
# ---------------------------------------------------------------------------

mcp = FastMCP(
    "jumble",
    instructions=(
        "Queryable project context. Call get_workspace_overview first, then "
        "fetch single facts (commands, concepts, conventions) instead of "
        "reading whole files."
    ),
)

# The WorkspaceState is initialized once when the server starts.
# Tools reference it via _get_state().
_state: Optional[WorkspaceState] = None


def init_workspace(
    root: Optional[str] = None,
    config_path: Optional[str] = None,
    config: Optional[Config] = None,
) -> WorkspaceState:
    """Resolve configuration, build the first snapshot, and publish it."""
    global _state

    if config is None:
        config = Config.load(root=root, config_path=config_path)

    state = WorkspaceState(config)
    state.rebuild()
    _state = state
    return state


def _get_state() -> WorkspaceState:
    """Get the global WorkspaceState, initializing with defaults if needed."""
    global _state
    if _state is None:
        _state = init_workspace()
    return _state


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------

#: Tool name -> query function.  Each takes the workspace snapshot first.
TOOLS: Dict[str, Callable[..., Any]] = {
    "list_projects": query.list_projects,
    "get_project_info": query.get_project_info,
    "get_commands": query.get_commands,
    "get_architecture": query.get_architecture,
    "get_related_files": query.get_related_files,
    "get_conventions": query.get_conventions,
    "get_docs": query.get_docs,
    "list_skills": query.list_skills,
    "get_skill": query.get_skill,
    "get_workspace_overview": query.get_workspace_overview,
    "get_workspace_conventions": query.get_workspace_conventions,
    "get_jumble_authoring_prompt": query.get_jumble_authoring_prompt,
}


def _error(kind: str, message: str) -> Dict[str, Any]:
    return {"ok": False, "error": {"kind": kind, "message": message}}


def _reload(state: WorkspaceState) -> Dict[str, Any]:
    ws = state.rebuild()
    return {
        "reloaded": True,
        "projects": ws.project_names(),
        "load_errors": [d.to_dict() for d in ws.load_errors],
    }


def call_tool(
    name: str,
    arguments: Optional[Dict[str, Any]] = None,
    workspace: Optional[Workspace] = None,
    state: Optional[WorkspaceState] = None,
) -> Dict[str, Any]:
    """Run one tool call and normalise the outcome.

    Queries run against *workspace* if given, else the current snapshot
    of *state*, else the server's global state.  ``reload_workspace``
    rebuilds *state* (or the global state).

    Returns ``{"ok": True, "result": ...}`` or ``{"ok": False, "error":
    {...}}``.  Never raises: query errors carry their kind and any valid
    alternatives, anything unexpected is logged and reported as
    ``internal``.
    """
    arguments = dict(arguments or {})
    context = {"tool": name, "project": arguments.get("project")}
    try:
        if name == "reload_workspace":
            return {"ok": True, "result": _reload(state or _get_state())}

        handler = TOOLS.get(name)
        if handler is None:
            raise InvalidArgument(
                f"Unknown tool: {name}. Available: {', '.join(sorted([*TOOLS, 'reload_workspace']))}"
            )

        ws = workspace
        if ws is None:
            ws = (state or _get_state()).current
        try:
            bound = inspect.signature(handler).bind(ws, **arguments)
        except TypeError as exc:
            raise InvalidArgument(f"Bad arguments for {name}: {exc}") from exc

        result = handler(*bound.args, **bound.kwargs)
    except QueryError as exc:
        log.debug("Tool %s: %s", name, exc, extra=context)
        return {"ok": False, "error": exc.to_dict()}
    except JumbleError as exc:
        log.error("Tool %s failed: %s", name, exc, extra=context)
        return _error("workspace_error", str(exc))
    except Exception as exc:
        log.error("Tool %s failed: %s\n%s", name, exc, traceback.format_exc(), extra=context)
        return _error("internal", str(exc))

    return {"ok": True, "result": result}


def _respond(name: str, **arguments: Any) -> str:
    return json.dumps(call_tool(name, arguments), indent=2, default=str)


# ===========================================================================
# Discovery Tools
# ===========================================================================


@mcp.tool()
def list_projects() -> str:
    """List all projects in the workspace with their descriptions.

    Use this to discover project names for the other tools.
    """
    return _respond("list_projects")


@mcp.tool()
def get_workspace_overview() -> str:
    """High-level overview of the workspace.

    Returns the root path, every project with description, language and
    path, cross-project dependencies, and any descriptor files that
    failed to load.  Call this first.
    """
    return _respond("get_workspace_overview")


@mcp.tool()
def get_workspace_conventions(category: str = "") -> str:
    """Workspace-level conventions and gotchas that apply to every project.

    Args:
        category: Optional filter: "conventions" or "gotchas".
    """
    return _respond("get_workspace_conventions", category=category)


# ===========================================================================
# Project Tools
# ===========================================================================


@mcp.tool()
def get_project_info(project: str, field: str = "") -> str:
    """Project metadata, or a single field of it.

    Args:
        project: The project name.
        field: Optional dotted path such as "commands.test",
               "dependencies", or "concepts.auth.files".
    """
    return _respond("get_project_info", project=project, field=field)


@mcp.tool()
def get_commands(project: str, command_type: str = "") -> str:
    """Executable commands for a project (build, test, lint, run, dev...).

    Args:
        project: The project name.
        command_type: Optional command key, e.g. "test".
    """
    return _respond("get_commands", project=project, command_type=command_type)


@mcp.tool()
def get_architecture(project: str, concept: str) -> str:
    """Files and summary for one architectural concept of a project.

    Args:
        project: The project name.
        concept: Concept name (e.g. "auth", "routing", "database").
    """
    return _respond("get_architecture", project=project, concept=concept)


@mcp.tool()
def get_related_files(project: str, query: str) -> str:
    """Find files by searching concept names, summaries, and file paths.

    Args:
        project: The project name.
        query: Case-insensitive search text.
    """
    return _respond("get_related_files", project=project, query=query)


@mcp.tool()
def get_conventions(project: str, category: str = "") -> str:
    """Project coding conventions and gotchas (common mistakes to avoid).

    Args:
        project: The project name.
        category: Optional filter: "conventions" or "gotchas".
    """
    return _respond("get_conventions", project=project, category=category)


@mcp.tool()
def get_docs(project: str, topic: str = "") -> str:
    """Documentation index for a project, or the path of one doc.

    Args:
        project: The project name.
        topic: Optional doc topic.
    """
    return _respond("get_docs", project=project, topic=topic)


@mcp.tool()
def list_skills(project: str) -> str:
    """List task-specific guides (skills) available for a project.

    Args:
        project: The project name.
    """
    return _respond("list_skills", project=project)


@mcp.tool()
def get_skill(project: str, topic: str) -> str:
    """Retrieve one task-specific guide.

    Args:
        project: The project name.
        topic: Skill topic, e.g. "add-endpoint".
    """
    return _respond("get_skill", project=project, topic=topic)


# ===========================================================================
# Authoring / Maintenance Tools
# ===========================================================================


@mcp.tool()
def get_jumble_authoring_prompt() -> str:
    """Guidance for writing .jumble/project.toml and companion files."""
    return _respond("get_jumble_authoring_prompt")


@mcp.tool()
def reload_workspace() -> str:
    """Re-scan the workspace from disk after descriptor files change."""
    return _respond("reload_workspace")


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------


def run_server(
    root: Optional[str] = None,
    config_path: Optional[str] = None,
    transport: str = "stdio",
    host: str = "127.0.0.1",
    port: int = 8765,
    config: Optional[Config] = None,
) -> None:
    """Build the workspace and run the MCP server.

    Args:
        root: Workspace root (``$JUMBLE_ROOT`` takes precedence).
        config_path: Path to a YAML config file.
        transport: MCP transport: "stdio", "streamable-http", or "sse".
        host: Bind address for HTTP transports.
        port: Port for HTTP transports.
        config: Ready-made config; overrides *root* and *config_path*.
    """
    state = init_workspace(root=root, config_path=config_path, config=config)
    ws = state.current
    log.info(
        "Starting jumble MCP server (transport=%s, root=%s, projects=%d)",
        transport,
        ws.root,
        len(ws.projects),
    )
    if transport in ("streamable-http", "sse"):
        mcp.settings.host = host
        mcp.settings.port = port
        log.info("HTTP endpoint: http://%s:%d", host, port)
    mcp.run(transport=transport)  # type: ignore[arg-type]
