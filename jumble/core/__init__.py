"""jumble.core — Configuration, logging, and the error taxonomy."""

from jumble.core.config import Config
from jumble.core.errors import (
    InvalidArgument,
    JumbleError,
    LoadError,
    NotFound,
    ParseError,
    QueryError,
    ReadError,
    ValidationError,
    WorkspaceError,
)

__all__ = [
    "Config",
    "JumbleError",
    "LoadError",
    "ReadError",
    "ParseError",
    "ValidationError",
    "WorkspaceError",
    "QueryError",
    "NotFound",
    "InvalidArgument",
]
