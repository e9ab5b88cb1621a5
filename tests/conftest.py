"""Shared fixtures for jumble tests."""

import textwrap
from pathlib import Path

import pytest

from jumble.core.config import Config
from jumble.workspace import build


API_TOML = """\
conventions = [
  "Handlers return Result<Json<T>, ApiError>",
  "One module per resource",
]
gotchas = ["Migrations run on startup"]

[project]
name = "api"
description = "REST API for orders"
language = "rust"
version = "0.4.1"
repository = "https://example.com/api"

[commands]
build = "cargo build"
test = "cargo test"
lint = "cargo clippy"

[entry_points]
main = "src/main.rs"

[concepts.auth]
files = ["src/auth.rs"]
summary = "JWT middleware"

[concepts.routing]
files = ["src/routes.rs", "src/handlers/mod.rs"]
summary = "Axum router and handler registry"

[concepts.storage]
files = ["src/db/pool.rs", "src/db/auth_tokens.rs"]
summary = "Postgres connection pool"

[docs]
architecture = "docs/architecture.md"

[docs.api]
path = "docs/api.md"
summary = "Endpoint reference"

[skills.debug-auth]
description = "Debugging 401s"
content = "Check clock skew first."

[skills.add-endpoint]
description = "Adding an endpoint"
file = "guides/add-endpoint.md"

[dependencies]
internal = ["models"]
external = ["axum", "sqlx"]

[related_projects]
upstream = ["models"]
downstream = ["web"]
"""

WEB_TOML = """\
[project]
name = "web"
description = "Browser client"
language = "typescript"

[commands]
dev = "npm run dev"
"""

WORKSPACE_TOML = """\
conventions = ["All services log JSON to stderr"]
gotchas = ["CI uses the oldest supported toolchain"]

[workspace]
name = "acme"
description = "Order platform"
"""


def write_descriptor(project_dir: Path, text: str, filename: str = "project.toml") -> Path:
    """Write *text* to ``<project_dir>/.jumble/<filename>`` and return the path."""
    marker = project_dir / ".jumble"
    marker.mkdir(parents=True, exist_ok=True)
    path = marker / filename
    path.write_text(textwrap.dedent(text), encoding="utf-8")
    return path


@pytest.fixture
def tmp_dir(tmp_path):
    """Provide a temporary directory that persists for the test."""
    return tmp_path


@pytest.fixture
def workspace_root(tmp_dir):
    """A workspace with two projects and a workspace.toml."""
    write_descriptor(tmp_dir / "services" / "api", API_TOML)
    write_descriptor(tmp_dir / "web", WEB_TOML)
    write_descriptor(tmp_dir, WORKSPACE_TOML, filename="workspace.toml")
    return tmp_dir


@pytest.fixture
def config(workspace_root):
    """Provide a Config pointing at the sample workspace."""
    return Config.from_root(workspace_root)


@pytest.fixture
def workspace(workspace_root, config):
    """A built Workspace over the sample tree."""
    return build(workspace_root, config)
