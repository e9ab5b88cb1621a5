"""
jumble.workspace — Discover descriptor files and build the workspace index.

``build(root)`` walks the tree once, loads every ``.jumble/project.toml``
it finds, and returns an immutable ``Workspace``.  Bad files become
``LoadDiagnostic`` entries; they never abort the scan.

``WorkspaceState`` holds the published snapshot.  Readers take
``state.current`` without locking; ``rebuild()`` builds a fresh
``Workspace`` and swaps the reference in one assignment.
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Set, Tuple

from jumble.core.config import Config
from jumble.core.errors import LoadError, WorkspaceError
from jumble.descriptor.loader import load, load_workspace_settings
from jumble.descriptor.model import Descriptor, WorkspaceSettings

log = logging.getLogger("jumble.workspace")


def now_iso() -> str:
    """Current UTC timestamp in ISO-8601 with Z suffix."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


# ---------------------------------------------------------------------------
# LoadDiagnostic
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LoadDiagnostic:
    """A descriptor file that was skipped, and why."""

    path: Path
    kind: str  # "read" | "parse" | "validation" | "collision"
    message: str

    @classmethod
    def from_error(cls, exc: LoadError, path: Path) -> "LoadDiagnostic":
        return cls(path=exc.path or path, kind=exc.kind, message=str(exc))

    def to_dict(self) -> Dict[str, Any]:
        return {"path": str(self.path), "kind": self.kind, "message": self.message}


# ---------------------------------------------------------------------------
# Workspace
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Workspace:
    """Immutable snapshot of every project found under ``root``."""

    root: Path
    projects: Mapping[str, Descriptor] = field(default_factory=lambda: MappingProxyType({}))
    load_errors: Tuple[LoadDiagnostic, ...] = ()
    settings: Optional[WorkspaceSettings] = None
    built_at: str = field(default_factory=now_iso)

    def project_names(self) -> List[str]:
        return sorted(self.projects)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root": str(self.root),
            "built_at": self.built_at,
            "projects": {
                name: str(desc.source) if desc.source else None
                for name, desc in sorted(self.projects.items())
            },
            "load_errors": [d.to_dict() for d in self.load_errors],
            "workspace": self.settings.to_dict() if self.settings else None,
        }


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


def iter_descriptor_paths(root: Path, config: Config) -> Iterator[Path]:
    """Yield descriptor file paths under *root* in deterministic pre-order.

    Directory entries are visited in lexical order.  Each directory is
    entered at most once, keyed by its canonical path, so symlink
    cycles terminate.  Unreadable directories are logged and skipped.
    """
    visited: Set[str] = set()
    stack: List[Path] = [root]

    while stack:
        directory = stack.pop()
        try:
            canonical = os.path.realpath(directory)
        except OSError:
            continue
        if canonical in visited:
            log.debug("Skipping already visited directory %s", directory)
            continue
        visited.add(canonical)

        descriptor = directory / config.marker_dir / config.descriptor_filename
        # os.path.isfile swallows EACCES; Path.is_file does not everywhere.
        if os.path.isfile(descriptor):
            yield descriptor

        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as exc:
            log.warning("Cannot read directory %s: %s", directory, exc)
            continue

        children: List[Path] = []
        for entry in entries:
            if entry.name == config.marker_dir or entry.name in config.skip_dirs:
                continue
            try:
                if not entry.is_dir(follow_symlinks=config.follow_symlinks):
                    continue
            except OSError:
                continue
            children.append(Path(entry.path))

        # Reverse so the lexically first child is popped first.
        stack.extend(reversed(children))


def build(root: str | Path, config: Optional[Config] = None) -> Workspace:
    """Scan *root* and return a fully populated ``Workspace``.

    Raises ``WorkspaceError`` only if *root* itself is not a directory.
    First-discovered wins on duplicate project names; the loser is
    recorded as a ``collision`` diagnostic.
    """
    root = Path(root).expanduser()
    if not root.exists():
        raise WorkspaceError(f"Workspace root does not exist: {root}")
    if not root.is_dir():
        raise WorkspaceError(f"Workspace root is not a directory: {root}")
    root = root.resolve()
    if config is None:
        config = Config(root=root)
    elif config.root != root:
        config = replace(config, root=root)

    projects: Dict[str, Descriptor] = {}
    errors: List[LoadDiagnostic] = []

    def skip(diag: LoadDiagnostic) -> None:
        log.warning(
            "Skipped (%s): %s",
            diag.kind,
            diag.message,
            extra={"path": str(diag.path), "kind": diag.kind},
        )
        errors.append(diag)

    for path in iter_descriptor_paths(root, config):
        try:
            desc = load(path, config)
        except LoadError as exc:
            skip(LoadDiagnostic.from_error(exc, path))
            continue

        existing = projects.get(desc.name)
        if existing is not None:
            message = (
                f"duplicate project name '{desc.name}': already defined in "
                f"{existing.source}, ignoring {path}"
            )
            skip(LoadDiagnostic(path=path, kind="collision", message=message))
            continue
        projects[desc.name] = desc

    settings: Optional[WorkspaceSettings] = None
    settings_path = config.workspace_path
    if settings_path.is_file():
        try:
            settings = load_workspace_settings(settings_path)
        except LoadError as exc:
            skip(LoadDiagnostic.from_error(exc, settings_path))

    log.info(
        "Indexed %d project(s) under %s (%d diagnostic(s))",
        len(projects),
        root,
        len(errors),
        extra={"root": str(root), "projects": len(projects), "diagnostics": len(errors)},
    )
    return Workspace(
        root=root,
        projects=MappingProxyType(projects),
        load_errors=tuple(errors),
        settings=settings,
    )


# ---------------------------------------------------------------------------
# WorkspaceState
# ---------------------------------------------------------------------------


class WorkspaceState:
    """Holder for the published ``Workspace`` snapshot.

    ``current`` is a plain attribute read.  ``rebuild()`` serialises
    concurrent rebuilds with a lock; readers never take it.  If a
    rebuild fails the previous snapshot stays published.
    """

    def __init__(self, config: Config, workspace: Optional[Workspace] = None) -> None:
        self.config = config
        self._workspace = workspace
        self._rebuild_lock = threading.Lock()

    @property
    def current(self) -> Workspace:
        ws = self._workspace
        if ws is None:
            ws = self.rebuild()
        return ws

    def rebuild(self) -> Workspace:
        with self._rebuild_lock:
            ws = build(self.config.root, self.config)
            self._workspace = ws
        return ws
