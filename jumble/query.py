"""
jumble.query — Read-only lookups over a ``Workspace``.

One function per tool.  Every function takes the workspace snapshot as
its first argument and never mutates it.  Lookups that miss raise
``NotFound`` (carrying the valid alternatives); malformed arguments
raise ``InvalidArgument``.  A search that matches nothing returns an
empty list: that is an answer, not an error.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from jumble.core.errors import InvalidArgument, NotFound
from jumble.descriptor.model import Descriptor
from jumble.prompts import AUTHORING_PROMPT
from jumble.workspace import Workspace

#: Valid values for the ``category`` filter on conventions tools.
CONVENTION_CATEGORIES = ("conventions", "gotchas")


# ---------------------------------------------------------------------------
# Argument helpers
# ---------------------------------------------------------------------------


def _require(value: Any, name: str) -> str:
    if value is None:
        raise InvalidArgument(f"Missing '{name}' argument")
    if not isinstance(value, str):
        raise InvalidArgument(f"'{name}' must be a string")
    if not value.strip():
        raise InvalidArgument(f"'{name}' must not be empty")
    return value


def _optional(value: Any, name: str) -> Optional[str]:
    """Treat ``None`` and ``""`` as "not given"."""
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise InvalidArgument(f"'{name}' must be a string")
    return value


def _project(ws: Workspace, project: Any) -> Descriptor:
    name = _require(project, "project")
    desc = ws.projects.get(name)
    if desc is None:
        raise NotFound("project", name, available=ws.projects.keys())
    return desc


def _category(value: Any) -> Optional[str]:
    category = _optional(value, "category")
    if category is not None and category not in CONVENTION_CATEGORIES:
        raise InvalidArgument(
            f"Unknown category '{category}'. Use 'conventions' or 'gotchas'."
        )
    return category


def _conventions_payload(
    conventions: List[str], gotchas: List[str], category: Optional[str]
) -> Dict[str, List[str]]:
    payload = {"conventions": list(conventions), "gotchas": list(gotchas)}
    if category is not None:
        return {category: payload[category]}
    return payload


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


def list_projects(ws: Workspace) -> List[Dict[str, str]]:
    """All projects as ``{name, description}``, sorted by name."""
    return [
        {"name": name, "description": ws.projects[name].description}
        for name in ws.project_names()
    ]


def get_project_info(ws: Workspace, project: Any, field: Any = None) -> Any:
    """Full descriptor, or the value at a dotted *field* path."""
    desc = _project(ws, project)
    path = _optional(field, "field")
    if path is None:
        info = desc.to_dict()
        if desc.root is not None:
            info["path"] = str(desc.root)
        return info
    return desc.resolve(path)


def get_commands(ws: Workspace, project: Any, command_type: Any = None) -> Union[Dict[str, str], str]:
    desc = _project(ws, project)
    kind = _optional(command_type, "command_type")
    if kind is None:
        return dict(desc.commands)
    if kind not in desc.commands:
        raise NotFound(
            "command_type", kind, available=desc.commands.keys(), scope=f"project '{desc.name}'"
        )
    return desc.commands[kind]


# ---------------------------------------------------------------------------
# Architecture
# ---------------------------------------------------------------------------


def get_architecture(ws: Workspace, project: Any, concept: Any) -> Dict[str, Any]:
    """Exact lookup of one concept; a miss lists the concepts that exist."""
    desc = _project(ws, project)
    name = _require(concept, "concept")
    found = desc.concepts.get(name)
    if found is None:
        raise NotFound(
            "concept", name, available=desc.concepts.keys(), scope=f"project '{desc.name}'"
        )
    return {"concept": name, "files": list(found.files), "summary": found.summary}


def get_related_files(ws: Workspace, project: Any, query: Any) -> List[Dict[str, Any]]:
    """Concepts whose name, summary, or file paths contain *query*.

    Matching is case-insensitive.  A name or summary hit returns all of
    the concept's files; a hit on file paths alone returns just those
    files.  Name hits rank first, then summary hits, then file-only
    hits; ties go by concept name.
    """
    desc = _project(ws, project)
    needle = _require(query, "query").strip().lower()

    ranked = []
    for name, concept in desc.concepts.items():
        if needle in name.lower():
            rank, files = 0, list(concept.files)
        elif needle in concept.summary.lower():
            rank, files = 1, list(concept.files)
        else:
            files = [f for f in concept.files if needle in f.lower()]
            if not files:
                continue
            rank = 2
        ranked.append((rank, name, files))

    ranked.sort(key=lambda item: (item[0], item[1]))
    return [{"concept": name, "files": files} for _, name, files in ranked]


# ---------------------------------------------------------------------------
# Conventions / docs / skills
# ---------------------------------------------------------------------------


def get_conventions(ws: Workspace, project: Any, category: Any = None) -> Dict[str, List[str]]:
    desc = _project(ws, project)
    return _conventions_payload(desc.conventions, desc.gotchas, _category(category))


def get_docs(ws: Workspace, project: Any, topic: Any = None) -> Dict[str, Any]:
    """Doc index (``topic -> path``), or one topic's path and summary."""
    desc = _project(ws, project)
    name = _optional(topic, "topic")
    if name is None:
        return dict(desc.docs)
    if name not in desc.docs:
        raise NotFound("doc", name, available=desc.docs.keys(), scope=f"project '{desc.name}'")
    result: Dict[str, Any] = {"topic": name, "path": desc.docs[name]}
    if name in desc.doc_summaries:
        result["summary"] = desc.doc_summaries[name]
    return result


def list_skills(ws: Workspace, project: Any) -> List[str]:
    return sorted(_project(ws, project).skills)


def get_skill(ws: Workspace, project: Any, topic: Any) -> Dict[str, Any]:
    desc = _project(ws, project)
    name = _require(topic, "topic")
    skill = desc.skills.get(name)
    if skill is None:
        raise NotFound("skill", name, available=desc.skills.keys(), scope=f"project '{desc.name}'")

    result: Dict[str, Any] = {"topic": name, "description": skill.description}
    if skill.content is not None:
        result["content"] = skill.content
    else:
        result["file"] = skill.file
        if desc.root is not None:
            result["path"] = str(desc.root / skill.file)
    return result


# ---------------------------------------------------------------------------
# Workspace-wide
# ---------------------------------------------------------------------------


def _related(desc: Descriptor) -> Dict[str, List[str]]:
    related = desc.extra.get("related_projects")
    if not isinstance(related, dict):
        return {}
    out = {}
    for key in ("upstream", "downstream"):
        value = related.get(key)
        if isinstance(value, list) and value:
            out[key] = [str(v) for v in value]
    return out


def get_workspace_overview(ws: Workspace) -> Dict[str, Any]:
    """Project summaries, cross-project dependencies, and scan diagnostics."""
    overview: Dict[str, Any] = {"root": str(ws.root)}
    if ws.settings is not None:
        if ws.settings.name is not None:
            overview["name"] = ws.settings.name
        if ws.settings.description is not None:
            overview["description"] = ws.settings.description

    projects = []
    dependencies = {}
    for name in ws.project_names():
        desc = ws.projects[name]
        projects.append(
            {
                "name": name,
                "description": desc.description,
                "language": desc.language,
                "path": str(desc.root) if desc.root is not None else None,
            }
        )
        related = _related(desc)
        if related:
            dependencies[name] = related

    overview["projects"] = projects
    overview["dependencies"] = dependencies
    overview["load_errors"] = [d.to_dict() for d in ws.load_errors]
    return overview


def get_workspace_conventions(ws: Workspace, category: Any = None) -> Dict[str, List[str]]:
    """Workspace-level conventions; empty lists when no workspace.toml exists."""
    settings = ws.settings
    conventions = settings.conventions if settings is not None else []
    gotchas = settings.gotchas if settings is not None else []
    return _conventions_payload(conventions, gotchas, _category(category))


def get_jumble_authoring_prompt(ws: Optional[Workspace] = None) -> str:
    """Static guidance for writing descriptor files."""
    return AUTHORING_PROMPT
