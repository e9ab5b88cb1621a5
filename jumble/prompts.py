"""
jumble.prompts — Static text served to agents.

``AUTHORING_PROMPT`` is returned by ``get_jumble_authoring_prompt`` so an
agent can write or extend a project's ``.jumble/`` files itself.
"""

AUTHORING_PROMPT = """\
# Authoring jumble context files

jumble answers narrow questions about a codebase ("what is the test
command for X?", "which files implement auth?") from small declarative
files.  Keep every entry short and factual.  Agents read single fields,
not whole documents.

## Layout

Each project gets a `.jumble/` directory next to its sources:

    my-project/
      .jumble/
        project.toml        required
        conventions.toml    optional, extra conventions and gotchas
        docs.toml           optional, extra doc index entries
        skills/*.md         optional, one task guide per file

A workspace root may also hold `.jumble/workspace.toml` with
workspace-wide conventions that apply to every project.

## project.toml

```toml
[project]
name = "api-server"                 # required, unique in the workspace
description = "REST API for orders" # required, one sentence
language = "rust"
version = "0.4.1"
repository = "https://example.com/api-server"   # any extra field is kept

conventions = [
  "Handlers return Result<Json<T>, ApiError>",
]
gotchas = [
  "Migrations run on startup; never edit an applied migration",
]

[commands]
build = "cargo build"
test = "cargo test"
lint = "cargo clippy -- -D warnings"
run = "cargo run -- --port 8080"

[entry_points]
main = "src/main.rs"

[concepts.auth]
files = ["src/auth.rs", "src/middleware/jwt.rs"]
summary = "JWT validation middleware and session lookup"

[docs]
architecture = "docs/architecture.md"

[docs.api]
path = "docs/api.md"
summary = "Endpoint reference"

[skills.add-endpoint]
description = "Adding a new HTTP endpoint"
file = ".jumble/guides/add-endpoint.md"

[skills.debug-auth]
description = "Debugging 401s"
content = "Check the clock skew setting first, then the key rotation log."

[related_projects]
upstream = ["shared-models"]
downstream = ["web-client"]
```

Top-level arrays (`conventions`, `gotchas`) must come before the first
`[table]` header.  Either may also be written as a table of
`name = "text"` pairs.

## Rules

* `project.name` and `project.description` are required.
* Every concept needs a non-empty `files` list of paths relative to the
  project root, plus a one-sentence `summary`.
* Every skill needs exactly one of `content` (inline text) or `file`
  (path relative to the project root).
* Unknown sections are allowed and can be read back with
  `get_project_info(project, field="section.key")`.

## skills/*.md

```markdown
---
description: Adding a new HTTP endpoint
---
1. Add the handler in `src/handlers/`.
2. Register the route in `src/routes.rs`.
3. Add an integration test in `tests/api/`.
```

## workspace.toml

```toml
conventions = ["All services log JSON to stderr"]
gotchas = ["CI runs on the oldest supported toolchain"]

[workspace]
name = "acme"
description = "Order management platform"
```

After editing, call `reload_workspace` (or restart the server) and check
`get_workspace_overview` for `load_errors`.
"""
