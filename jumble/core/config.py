"""
jumble.core.config — Configuration for the jumble context server.

Supports loading from YAML, environment variables, and programmatic
construction.  Only ``root`` is usually set; everything else names the
on-disk layout of descriptor files and rarely needs changing.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional

#: Environment variable that overrides the workspace root.
ROOT_ENV_VAR = "JUMBLE_ROOT"

#: Directories never descended into while scanning for descriptors.
DEFAULT_SKIP_DIRS = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        "node_modules",
        "target",
        ".venv",
        "venv",
        "__pycache__",
        ".tox",
        ".mypy_cache",
        ".pytest_cache",
    }
)


@dataclass
class Config:
    """
    Central configuration object.

    Construct directly, via ``Config.from_yaml(path)``, or via
    ``Config.from_root(path)`` for quick bootstrap.
    """

    # -- workspace ----------------------------------------------------------
    root: Path = field(default_factory=Path.cwd)

    # -- descriptor layout --------------------------------------------------
    marker_dir: str = ".jumble"
    descriptor_filename: str = "project.toml"
    workspace_filename: str = "workspace.toml"
    conventions_filename: str = "conventions.toml"
    docs_filename: str = "docs.toml"
    skills_dirname: str = "skills"

    # -- scanning -----------------------------------------------------------
    skip_dirs: FrozenSet[str] = DEFAULT_SKIP_DIRS
    follow_symlinks: bool = True

    # -- logging ------------------------------------------------------------
    log_level: str = "INFO"
    structured_logging: bool = False  # emit JSON log lines when True

    # -----------------------------------------------------------------------
    # Derived paths
    # -----------------------------------------------------------------------

    @property
    def root_marker_dir(self) -> Path:
        return self.root / self.marker_dir

    @property
    def workspace_path(self) -> Path:
        return self.root_marker_dir / self.workspace_filename

    # -----------------------------------------------------------------------
    # Construction helpers
    # -----------------------------------------------------------------------

    def __post_init__(self) -> None:
        # normalise root to an absolute Path
        self.root = Path(self.root).expanduser().resolve()
        self.skip_dirs = frozenset(self.skip_dirs)

    @classmethod
    def from_yaml(cls, path: str | Path, **overrides: Any) -> "Config":
        """Load configuration from a YAML file.

        Any key in the YAML that matches a Config field is applied.
        Unknown keys are silently ignored so the file can carry
        application-level settings alongside jumble config.
        """
        import yaml

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
        if not isinstance(raw, dict):
            raw = {}

        # pull the jumble section if nested, else use top-level
        data = raw.get("jumble", raw)
        if not isinstance(data, dict):
            data = {}
        data = dict(data)

        if "root" in data:
            data["root"] = Path(data["root"])
        if "skip_dirs" in data:
            data["skip_dirs"] = frozenset(data["skip_dirs"] or ())

        # filter to known fields only
        known = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in known}
        filtered.update({k: v for k, v in overrides.items() if v is not None})

        return cls(**filtered)

    @classmethod
    def from_root(cls, root: str | Path, **overrides: Any) -> "Config":
        """Config for *root* with every other setting at its default."""
        return cls(root=Path(root), **overrides)

    @classmethod
    def load(
        cls,
        root: Optional[str | Path] = None,
        config_path: Optional[str | Path] = None,
    ) -> "Config":
        """Build the config the server and CLI run with.

        With *config_path* the YAML file supplies every setting; an
        explicit root (``$JUMBLE_ROOT`` or *root*) still overrides the
        file's ``root``.  Without it, defaults apply.
        """
        explicit = bool(os.environ.get(ROOT_ENV_VAR)) or bool(root)
        if config_path:
            if explicit:
                return cls.from_yaml(config_path, root=cls.resolve_root(root))
            return cls.from_yaml(config_path)
        return cls.from_root(cls.resolve_root(root))

    @staticmethod
    def resolve_root(cli_root: Optional[str | Path] = None) -> Path:
        """Pick the workspace root.

        Order: ``$JUMBLE_ROOT``, then the command-line argument, then the
        current working directory.  First one present wins.
        """
        env_root = os.environ.get(ROOT_ENV_VAR)
        if env_root:
            return Path(env_root)
        if cli_root:
            return Path(cli_root)
        return Path.cwd()

    # -----------------------------------------------------------------------
    # Serialisation
    # -----------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to a plain dict (YAML/JSON-safe)."""
        return {
            "root": str(self.root),
            "marker_dir": self.marker_dir,
            "descriptor_filename": self.descriptor_filename,
            "workspace_filename": self.workspace_filename,
            "conventions_filename": self.conventions_filename,
            "docs_filename": self.docs_filename,
            "skills_dirname": self.skills_dirname,
            "skip_dirs": sorted(self.skip_dirs),
            "follow_symlinks": self.follow_symlinks,
            "log_level": self.log_level,
            "structured_logging": self.structured_logging,
        }
