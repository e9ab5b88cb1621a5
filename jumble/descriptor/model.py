"""
jumble.descriptor.model — In-memory form of one project's descriptor.

Every structure here is a plain dataclass, serialisable to the same
nested dict shape as the ``project.toml`` it came from.  Fields the
schema does not name are kept verbatim in ``Descriptor.extra`` so that
field-path projection can reach anything the author wrote.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from jumble.core.errors import NotFound

#: Keys of the ``[project]`` table that map to named attributes.
PROJECT_FIELDS = ("name", "description", "language", "version")

#: Top-level sections that map to named attributes.
SECTIONS = (
    "commands",
    "entry_points",
    "concepts",
    "conventions",
    "gotchas",
    "docs",
    "skills",
)

_MISSING = object()


# ---------------------------------------------------------------------------
# Concept / Skill
# ---------------------------------------------------------------------------


@dataclass
class Concept:
    """An architectural area of a project: where it lives and what it is."""

    files: List[str]
    summary: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"files": list(self.files), "summary": self.summary}


@dataclass
class Skill:
    """Task-specific guidance, either inline (``content``) or in a file."""

    description: str = ""
    content: Optional[str] = None
    file: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"description": self.description}
        if self.content is not None:
            d["content"] = self.content
        if self.file is not None:
            d["file"] = self.file
        return d


# ---------------------------------------------------------------------------
# Descriptor
# ---------------------------------------------------------------------------


@dataclass
class Descriptor:
    """
    One project's declarative context.

    ``source`` and ``root`` record where the descriptor was found; they
    are not part of the descriptor's content and are excluded from
    equality so that two loads of the same text compare equal.
    """

    name: str
    description: str
    language: Optional[str] = None
    version: Optional[str] = None
    commands: Dict[str, str] = field(default_factory=dict)
    entry_points: Dict[str, str] = field(default_factory=dict)
    concepts: Dict[str, Concept] = field(default_factory=dict)
    conventions: List[str] = field(default_factory=list)
    gotchas: List[str] = field(default_factory=list)
    docs: Dict[str, str] = field(default_factory=dict)
    doc_summaries: Dict[str, str] = field(default_factory=dict)
    skills: Dict[str, Skill] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)

    source: Optional[Path] = field(default=None, compare=False, repr=False)
    root: Optional[Path] = field(default=None, compare=False, repr=False)

    # -- serialisation ------------------------------------------------------

    def named_dict(self) -> Dict[str, Any]:
        """The named attributes only, in file shape."""
        project: Dict[str, Any] = {"name": self.name, "description": self.description}
        if self.language is not None:
            project["language"] = self.language
        if self.version is not None:
            project["version"] = self.version

        return {
            "project": project,
            "commands": dict(self.commands),
            "entry_points": dict(self.entry_points),
            "concepts": {k: c.to_dict() for k, c in self.concepts.items()},
            "conventions": list(self.conventions),
            "gotchas": list(self.gotchas),
            "docs": dict(self.docs),
            "skills": {k: s.to_dict() for k, s in self.skills.items()},
        }

    def to_dict(self) -> Dict[str, Any]:
        """Full document: named attributes merged back with ``extra``.

        Named values win where both define the same leaf.
        """
        named = self.named_dict()
        named["docs"] = self._docs_tree()
        merged = copy.deepcopy(self.extra)
        _deep_merge(merged, named)
        return merged

    def _docs_tree(self) -> Dict[str, Any]:
        """``docs`` in file shape: a table wherever the topic had one."""
        extra_docs = self.extra.get("docs")
        if not isinstance(extra_docs, dict):
            extra_docs = {}
        tree: Dict[str, Any] = {}
        for topic, path in self.docs.items():
            if topic in self.doc_summaries:
                tree[topic] = {"path": path, "summary": self.doc_summaries[topic]}
            elif isinstance(extra_docs.get(topic), dict):
                tree[topic] = {"path": path}
            else:
                tree[topic] = path
        return tree

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        source: Optional[Path] = None,
        root: Optional[Path] = None,
    ) -> "Descriptor":
        """Build from a parsed document tree.

        Validation is the loader's job; this only maps keys.  Use
        ``jumble.descriptor.loader.parse_descriptor`` for untrusted input.
        """
        from jumble.descriptor.loader import parse_descriptor

        return parse_descriptor(data, source=source, root=root)

    # -- projection ---------------------------------------------------------

    def _named_view(self) -> Dict[str, Any]:
        view = self.named_dict()
        view["docs"] = self._docs_tree()
        # Top-level aliases so "name" works as well as "project.name".
        for key in PROJECT_FIELDS:
            if key in view["project"]:
                view[key] = view["project"][key]
        return view

    def resolve(self, path: str) -> Any:
        """Resolve a dotted (or ``/``-separated) field path.

        Named attributes are tried first, then ``extra``.  A table found
        in both trees is merged, so a parent path carries every key its
        children resolve to.  Integer segments index into lists.  Raises
        ``NotFound("field")`` if neither tree has the path.
        """
        segments = split_path(path)
        if not segments:
            return self.to_dict()

        named = walk(self._named_view(), segments)
        extra = walk(self.extra, segments)
        if named is _MISSING and extra is _MISSING:
            raise NotFound(
                "field",
                path,
                available=sorted(self.to_dict().keys()),
                scope=f"project '{self.name}'",
            )
        if named is _MISSING:
            return copy.deepcopy(extra)
        if isinstance(named, dict) and isinstance(extra, dict):
            merged = copy.deepcopy(extra)
            _deep_merge(merged, named)
            return merged
        return copy.deepcopy(named)


# ---------------------------------------------------------------------------
# Workspace-level descriptor
# ---------------------------------------------------------------------------


@dataclass
class WorkspaceSettings:
    """Contents of ``<root>/.jumble/workspace.toml``."""

    name: Optional[str] = None
    description: Optional[str] = None
    conventions: List[str] = field(default_factory=list)
    gotchas: List[str] = field(default_factory=list)
    source: Optional[Path] = field(default=None, compare=False, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {}
        if self.name is not None:
            d["name"] = self.name
        if self.description is not None:
            d["description"] = self.description
        d["conventions"] = list(self.conventions)
        d["gotchas"] = list(self.gotchas)
        return d


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------


def split_path(path: str) -> List[str]:
    """Split ``"concepts.auth/files"`` into ``["concepts", "auth", "files"]``."""
    return [seg for seg in path.replace("/", ".").split(".") if seg.strip()]


def walk(tree: Any, segments: List[str]) -> Any:
    """Walk *segments* into a nested dict/list tree.

    Returns the module sentinel ``_MISSING`` instead of raising so callers
    can try another tree.
    """
    node = tree
    for seg in segments:
        seg = seg.strip()
        if isinstance(node, dict):
            if seg not in node:
                return _MISSING
            node = node[seg]
        elif isinstance(node, list):
            try:
                idx = int(seg)
            except ValueError:
                return _MISSING
            if not -len(node) <= idx < len(node):
                return _MISSING
            node = node[idx]
        else:
            return _MISSING
    return node


def _deep_merge(base: Dict[str, Any], overlay: Dict[str, Any]) -> None:
    """Merge *overlay* into *base* in place; overlay wins on leaves."""
    for key, value in overlay.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _deep_merge(base[key], value)
        else:
            base[key] = copy.deepcopy(value)
