"""
jumble.core.errors — Error taxonomy.

Load-time errors (``LoadError`` and subclasses) are recorded as workspace
diagnostics and never abort a scan.  Query-time errors (``QueryError``
and subclasses) are turned into structured tool results by the
dispatcher.  ``WorkspaceError`` is the only fatal one.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional


class JumbleError(Exception):
    """Base class for every error raised by jumble."""


# ---------------------------------------------------------------------------
# Load-time
# ---------------------------------------------------------------------------


class LoadError(JumbleError):
    """A descriptor file could not be turned into a Descriptor."""

    kind = "load"

    def __init__(self, path: Optional[Path], message: str) -> None:
        self.path = Path(path) if path is not None else None
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.path}: {self.message}"


class ReadError(LoadError):
    """File missing, unreadable, or not valid UTF-8 text."""

    kind = "read"


class ParseError(LoadError):
    """Malformed TOML / YAML syntax."""

    kind = "parse"

    def __init__(
        self,
        path: Optional[Path],
        message: str,
        line: Optional[int] = None,
        col: Optional[int] = None,
    ) -> None:
        self.line = line
        self.col = col
        super().__init__(path, message)

    def __str__(self) -> str:
        where = str(self.path) if self.path is not None else "<string>"
        if self.line is not None:
            where = f"{where}:{self.line}"
        return f"{where}: {self.message}"


class ValidationError(LoadError):
    """Syntactically fine, but the document does not match the schema."""

    kind = "validation"


# ---------------------------------------------------------------------------
# Fatal
# ---------------------------------------------------------------------------


class WorkspaceError(JumbleError):
    """The workspace root itself is unusable."""


# ---------------------------------------------------------------------------
# Query-time
# ---------------------------------------------------------------------------


class QueryError(JumbleError):
    """A tool call could not be answered."""

    kind = "query_error"

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "message": str(self)}


class NotFound(QueryError):
    """A lookup referenced something the workspace does not have.

    ``what`` names the kind of thing (``project``, ``concept``, ...).
    ``available`` lists the valid names so the caller can retry.
    """

    kind = "not_found"

    def __init__(
        self,
        what: str,
        name: str = "",
        available: Optional[Iterable[str]] = None,
        scope: str = "",
    ) -> None:
        self.what = what
        self.name = name
        self.available: List[str] = sorted(available) if available is not None else []
        self.scope = scope
        super().__init__(self._format())

    def _format(self) -> str:
        label = self.what.replace("_", " ")
        msg = f"{label.capitalize()} '{self.name}' not found"
        if self.scope:
            msg += f" in {self.scope}"
        if self.available:
            msg += f". Available: {', '.join(self.available)}"
        return msg

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["what"] = self.what
        if self.available:
            d["available"] = self.available
        return d


class InvalidArgument(QueryError):
    """A required argument is missing or malformed."""

    kind = "invalid_argument"
