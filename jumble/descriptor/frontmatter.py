"""
jumble.descriptor.frontmatter — Skill files with YAML frontmatter.

Besides ``[skills.<topic>]`` tables in ``project.toml``, a project can
drop Markdown files into ``.jumble/skills/``.  Each file becomes one
skill keyed by its stem.  Optional YAML frontmatter (Jekyll-style,
between ``---`` delimiters) supplies the description; the body is the
skill content.

Format example::

    ---
    description: Adding a new HTTP endpoint
    ---
    # Add an endpoint

    1. Declare the route in ``src/routes.rs``
    ...

Files without frontmatter are fully supported: the first heading (or
first non-empty line) becomes the description.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, Tuple

import yaml

from jumble.core.errors import ReadError, ValidationError
from jumble.descriptor.model import Skill

log = logging.getLogger("jumble.descriptor.frontmatter")

# Regex to match YAML frontmatter between --- delimiters at the start of a file.
_FRONTMATTER_RE = re.compile(
    r"\A---\s*\n(.*?)\n---\s*\n?",
    re.DOTALL,
)


def parse_frontmatter(text: str) -> Tuple[Dict[str, Any], str]:
    """Split a markdown document into (frontmatter dict, body).

    If no frontmatter is found, or it is not a YAML mapping, returns an
    empty dict and the full text as body.
    """
    match = _FRONTMATTER_RE.match(text)
    if not match:
        return {}, text

    yaml_text = match.group(1)
    body = text[match.end() :]

    try:
        data = yaml.safe_load(yaml_text)
    except yaml.YAMLError:
        # unparseable frontmatter: the whole file is the body
        log.debug("Ignoring malformed frontmatter", exc_info=True)
        return {}, text

    if not isinstance(data, dict):
        return {}, text

    return data, body


def _first_line(body: str) -> str:
    for line in body.splitlines():
        line = line.strip().lstrip("#").strip()
        if line:
            return line
    return ""


def parse_skill_text(text: str, path: Path | None = None) -> Skill:
    """Turn a skill document into a ``Skill`` with inline content."""
    meta, body = parse_frontmatter(text)
    description = meta.get("description", "")
    if not isinstance(description, str):
        raise ValidationError(path, "skill frontmatter 'description' must be a string")
    body = body.strip("\n")
    return Skill(description=description or _first_line(body), content=body)


def load_skill_file(path: Path) -> Skill:
    """Read and parse one ``.jumble/skills/<topic>.md`` file."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ReadError(path, f"cannot read skill file: {exc}") from exc
    return parse_skill_text(text, path)


def load_skill_dir(skills_dir: Path) -> Dict[str, Skill]:
    """Load every ``*.md`` file in *skills_dir*, keyed by file stem.

    A missing directory is simply no skills.
    """
    if not skills_dir.is_dir():
        return {}
    skills: Dict[str, Skill] = {}
    for path in sorted(skills_dir.glob("*.md")):
        if path.is_file():
            skills[path.stem] = load_skill_file(path)
    return skills
