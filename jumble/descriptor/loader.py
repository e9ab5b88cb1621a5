"""
jumble.descriptor.loader — Read, parse, and validate descriptor files.

``load(path)`` turns one ``.jumble/project.toml`` (plus its companion
files in the same directory) into a ``Descriptor`` or raises a
``LoadError`` subclass:

* ``ReadError``       — file missing, unreadable, or not UTF-8
* ``ParseError``      — malformed TOML (line number when known)
* ``ValidationError`` — well-formed TOML that breaks the schema

Companion files, all optional:

* ``conventions.toml`` — more ``conventions`` / ``gotchas``
* ``docs.toml``        — more ``docs`` entries
* ``skills/*.md``      — one skill per Markdown file

Nothing here writes to disk.
"""

from __future__ import annotations

import logging
import re
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from jumble.core.config import Config
from jumble.core.errors import ParseError, ReadError, ValidationError
from jumble.descriptor.frontmatter import load_skill_dir
from jumble.descriptor.model import (
    PROJECT_FIELDS,
    SECTIONS,
    Concept,
    Descriptor,
    Skill,
    WorkspaceSettings,
)

log = logging.getLogger("jumble.descriptor.loader")

# tomllib only exposes position attributes from 3.14 on; older versions
# embed it in the message.
_POSITION_RE = re.compile(r"\(at line (\d+), column (\d+)\)")


# ---------------------------------------------------------------------------
# Reading / parsing
# ---------------------------------------------------------------------------


def read_text(path: Path) -> str:
    """Read *path* as UTF-8 text, raising ``ReadError`` on any failure."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ReadError(path, "file not found") from exc
    except IsADirectoryError as exc:
        raise ReadError(path, "is a directory") from exc
    except PermissionError as exc:
        raise ReadError(path, "permission denied") from exc
    except UnicodeDecodeError as exc:
        raise ReadError(path, f"not valid UTF-8 text: {exc.reason}") from exc
    except OSError as exc:
        raise ReadError(path, f"cannot read file: {exc.strerror or exc}") from exc


def parse_toml(text: str, path: Optional[Path] = None) -> Dict[str, Any]:
    """Parse TOML text into a plain dict tree, raising ``ParseError``."""
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        line = getattr(exc, "lineno", None)
        col = getattr(exc, "colno", None)
        message = getattr(exc, "msg", None) or str(exc)
        match = _POSITION_RE.search(str(exc))
        if match and line is None:
            line, col = int(match.group(1)), int(match.group(2))
        message = _POSITION_RE.sub("", message).strip()
        raise ParseError(path, message, line=line, col=col) from exc


def load_tree(path: Path) -> Dict[str, Any]:
    return parse_toml(read_text(path), path)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _expect_table(value: Any, where: str, path: Optional[Path]) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ValidationError(path, f"{where} must be a table")
    return value


def _optional_str(table: Dict[str, Any], key: str, where: str, path: Optional[Path]) -> Optional[str]:
    value = table.get(key)
    if value is not None and not isinstance(value, str):
        raise ValidationError(path, f"{where}.{key} must be a string")
    return value


def _string_table(value: Any, where: str, path: Optional[Path]) -> Dict[str, str]:
    table = _expect_table(value, where, path)
    for key, item in table.items():
        if not isinstance(item, str):
            raise ValidationError(path, f"{where}.{key} must be a string")
    return dict(table)


def _string_list(value: Any, where: str, path: Optional[Path]) -> List[str]:
    """Accept an array of strings, or a ``name = "text"`` table."""
    if isinstance(value, list):
        for i, item in enumerate(value):
            if not isinstance(item, str):
                raise ValidationError(path, f"{where}[{i}] must be a string")
        return list(value)
    if isinstance(value, dict):
        out = []
        for key, item in value.items():
            if not isinstance(item, str):
                raise ValidationError(path, f"{where}.{key} must be a string")
            out.append(f"{key}: {item}")
        return out
    raise ValidationError(path, f"{where} must be an array of strings or a table of strings")


def _leftover(table: Dict[str, Any], known: Tuple[str, ...]) -> Dict[str, Any]:
    return {k: v for k, v in table.items() if k not in known}


# ---------------------------------------------------------------------------
# Section parsers
# ---------------------------------------------------------------------------


def _parse_concepts(
    value: Any, path: Optional[Path], extra: Dict[str, Any]
) -> Dict[str, Concept]:
    concepts: Dict[str, Concept] = {}
    for name, raw in _expect_table(value, "concepts", path).items():
        where = f"concepts.{name}"
        table = _expect_table(raw, where, path)
        files = table.get("files")
        if (
            not isinstance(files, list)
            or not files
            or not all(isinstance(f, str) for f in files)
        ):
            raise ValidationError(path, f"{where}.files must be a non-empty list of strings")
        summary = _optional_str(table, "summary", where, path) or ""
        concepts[name] = Concept(files=list(files), summary=summary)
        rest = _leftover(table, ("files", "summary"))
        if rest:
            extra.setdefault("concepts", {})[name] = rest
    return concepts


def _parse_skills(
    value: Any, path: Optional[Path], extra: Dict[str, Any]
) -> Dict[str, Skill]:
    skills: Dict[str, Skill] = {}
    for topic, raw in _expect_table(value, "skills", path).items():
        where = f"skills.{topic}"
        table = _expect_table(raw, where, path)
        content = _optional_str(table, "content", where, path)
        file = _optional_str(table, "file", where, path)
        if (content is None) == (file is None):
            raise ValidationError(path, f"{where} must have exactly one of 'content' or 'file'")
        description = _optional_str(table, "description", where, path) or ""
        skills[topic] = Skill(description=description, content=content, file=file)
        rest = _leftover(table, ("description", "content", "file"))
        if rest:
            extra.setdefault("skills", {})[topic] = rest
    return skills


def _parse_docs(
    value: Any, path: Optional[Path], extra: Dict[str, Any], where: str = "docs"
) -> Tuple[Dict[str, str], Dict[str, str]]:
    """Docs entries are either ``topic = "path"`` or ``[docs.topic]`` tables."""
    docs: Dict[str, str] = {}
    summaries: Dict[str, str] = {}
    for topic, raw in _expect_table(value, where, path).items():
        if isinstance(raw, str):
            docs[topic] = raw
            continue
        table = _expect_table(raw, f"{where}.{topic}", path)
        doc_path = table.get("path")
        if not isinstance(doc_path, str):
            raise ValidationError(path, f"{where}.{topic}.path must be a string")
        docs[topic] = doc_path
        summary = _optional_str(table, "summary", f"{where}.{topic}", path)
        if summary is not None:
            summaries[topic] = summary
        rest = _leftover(table, ("path", "summary"))
        if rest:
            extra.setdefault("docs", {})[topic] = rest
    return docs, summaries


# ---------------------------------------------------------------------------
# Tree -> Descriptor
# ---------------------------------------------------------------------------


def parse_descriptor(
    tree: Any,
    source: Optional[Path] = None,
    root: Optional[Path] = None,
) -> Descriptor:
    """Validate a parsed document tree and build a ``Descriptor``.

    Unknown sections and fields are not errors: they are copied into
    ``extra`` under their original path.
    """
    path = source
    if not isinstance(tree, dict):
        raise ValidationError(path, "descriptor must be a table")

    project = tree.get("project")
    if not isinstance(project, dict):
        raise ValidationError(path, "missing project.name")
    name = project.get("name")
    if name is None:
        raise ValidationError(path, "missing project.name")
    if not isinstance(name, str):
        raise ValidationError(path, "project.name must be a string")
    if not name.strip():
        raise ValidationError(path, "missing project.name")
    if "description" not in project:
        raise ValidationError(path, "missing project.description")
    description = _optional_str(project, "description", "project", path)
    language = _optional_str(project, "language", "project", path)
    version = _optional_str(project, "version", "project", path)

    extra: Dict[str, Any] = {
        k: v for k, v in tree.items() if k != "project" and k not in SECTIONS
    }
    project_rest = _leftover(project, PROJECT_FIELDS)
    if project_rest:
        extra["project"] = project_rest

    docs, doc_summaries = _parse_docs(tree.get("docs", {}), path, extra)

    return Descriptor(
        name=name,
        description=description or "",
        language=language,
        version=version,
        commands=_string_table(tree.get("commands", {}), "commands", path),
        entry_points=_string_table(tree.get("entry_points", {}), "entry_points", path),
        concepts=_parse_concepts(tree.get("concepts", {}), path, extra),
        conventions=_string_list(tree.get("conventions", []), "conventions", path),
        gotchas=_string_list(tree.get("gotchas", []), "gotchas", path),
        docs=docs,
        doc_summaries=doc_summaries,
        skills=_parse_skills(tree.get("skills", {}), path, extra),
        extra=extra,
        source=source,
        root=root,
    )


# ---------------------------------------------------------------------------
# Companion files
# ---------------------------------------------------------------------------


def _merge_conventions(desc: Descriptor, path: Path) -> None:
    tree = load_tree(path)
    desc.conventions.extend(_string_list(tree.get("conventions", []), "conventions", path))
    desc.gotchas.extend(_string_list(tree.get("gotchas", []), "gotchas", path))


def _merge_docs(desc: Descriptor, path: Path) -> None:
    tree = load_tree(path)
    # Structure-only extras from the companion file are not kept.
    docs, summaries = _parse_docs(tree.get("docs", {}), path, {})
    for topic, doc_path in docs.items():
        if topic in desc.docs:
            continue
        desc.docs[topic] = doc_path
        if topic in summaries:
            desc.doc_summaries[topic] = summaries[topic]


def _merge_skill_dir(desc: Descriptor, skills_dir: Path) -> None:
    for topic, skill in load_skill_dir(skills_dir).items():
        desc.skills.setdefault(topic, skill)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load(path: str | Path, config: Optional[Config] = None) -> Descriptor:
    """Load one descriptor file and its companions.

    The project root is the parent of the marker directory holding
    *path*.  Raises a ``LoadError`` subclass on failure.
    """
    path = Path(path)
    marker_dir = path.parent
    root = marker_dir.parent
    if config is None:
        config = Config(root=root)

    desc = parse_descriptor(load_tree(path), source=path, root=root)

    conventions_path = marker_dir / config.conventions_filename
    if conventions_path.is_file():
        _merge_conventions(desc, conventions_path)
    docs_path = marker_dir / config.docs_filename
    if docs_path.is_file():
        _merge_docs(desc, docs_path)
    _merge_skill_dir(desc, marker_dir / config.skills_dirname)

    log.debug(
        "Loaded %s from %s (%d concepts, %d skills)",
        desc.name,
        path,
        len(desc.concepts),
        len(desc.skills),
    )
    return desc


def load_workspace_settings(path: str | Path) -> WorkspaceSettings:
    """Load ``<root>/.jumble/workspace.toml``.

    Every field is optional.  ``name`` / ``description`` live under a
    ``[workspace]`` table; ``conventions`` / ``gotchas`` use the same
    shapes as in a project descriptor.
    """
    path = Path(path)
    tree = load_tree(path)
    info = _expect_table(tree.get("workspace", {}), "workspace", path)
    return WorkspaceSettings(
        name=_optional_str(info, "name", "workspace", path),
        description=_optional_str(info, "description", "workspace", path),
        conventions=_string_list(tree.get("conventions", []), "conventions", path),
        gotchas=_string_list(tree.get("gotchas", []), "gotchas", path),
        source=path,
    )
