"""jumble.descriptor — Descriptor model, loader, and skill-file parsing."""

from jumble.descriptor.loader import (
    load,
    load_workspace_settings,
    parse_descriptor,
    parse_toml,
)
from jumble.descriptor.model import (
    Concept,
    Descriptor,
    Skill,
    WorkspaceSettings,
)

__all__ = [
    "Concept",
    "Descriptor",
    "Skill",
    "WorkspaceSettings",
    "load",
    "load_workspace_settings",
    "parse_descriptor",
    "parse_toml",
]
