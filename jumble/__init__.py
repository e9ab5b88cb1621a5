"""
jumble -- Queryable, on-demand project context for LLM agents.

    from jumble import build

    ws = build("/path/to/workspace")
    print(sorted(ws.projects))
"""

from jumble.core.config import Config
from jumble.core.errors import (
    InvalidArgument,
    JumbleError,
    LoadError,
    NotFound,
    ParseError,
    ReadError,
    ValidationError,
    WorkspaceError,
)
from jumble.descriptor.model import Concept, Descriptor, Skill
from jumble.workspace import LoadDiagnostic, Workspace, WorkspaceState, build

__version__ = "0.3.0"

__all__ = [
    "Config",
    "Concept",
    "Descriptor",
    "Skill",
    "Workspace",
    "WorkspaceState",
    "LoadDiagnostic",
    "build",
    "JumbleError",
    "LoadError",
    "ReadError",
    "ParseError",
    "ValidationError",
    "WorkspaceError",
    "NotFound",
    "InvalidArgument",
]
