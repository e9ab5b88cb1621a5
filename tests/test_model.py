"""Tests for jumble.descriptor.model."""

import pytest

from jumble.core.errors import NotFound
from jumble.descriptor.loader import parse_toml
from jumble.descriptor.model import (
    Concept,
    Descriptor,
    Skill,
    WorkspaceSettings,
    split_path,
    walk,
)

from conftest import API_TOML


@pytest.fixture
def api():
    return Descriptor.from_dict(parse_toml(API_TOML))


class TestConceptAndSkill:
    def test_concept_to_dict(self):
        c = Concept(files=["a.py"], summary="thing")
        assert c.to_dict() == {"files": ["a.py"], "summary": "thing"}

    def test_skill_to_dict_inline(self):
        s = Skill(description="d", content="body")
        assert s.to_dict() == {"description": "d", "content": "body"}

    def test_skill_to_dict_file(self):
        s = Skill(description="d", file="guide.md")
        assert s.to_dict() == {"description": "d", "file": "guide.md"}


class TestDescriptorSerialisation:
    def test_named_fields(self, api):
        assert api.name == "api"
        assert api.language == "rust"
        assert api.commands["test"] == "cargo test"
        assert api.concepts["auth"].files == ["src/auth.rs"]
        assert api.docs == {"architecture": "docs/architecture.md", "api": "docs/api.md"}
        assert api.doc_summaries == {"api": "Endpoint reference"}

    def test_extra_holds_unmodelled_fields(self, api):
        assert api.extra["project"] == {"repository": "https://example.com/api"}
        assert api.extra["dependencies"]["external"] == ["axum", "sqlx"]
        assert "commands" not in api.extra

    def test_to_dict_merges_extra(self, api):
        d = api.to_dict()
        assert d["project"]["name"] == "api"
        assert d["project"]["repository"] == "https://example.com/api"
        assert d["related_projects"]["upstream"] == ["models"]
        assert d["docs"]["api"] == {"path": "docs/api.md", "summary": "Endpoint reference"}
        assert d["docs"]["architecture"] == "docs/architecture.md"

    def test_round_trip(self, api):
        again = Descriptor.from_dict(api.to_dict())
        assert again == api
        assert again.extra == api.extra

    def test_round_trip_doc_table_without_summary(self):
        d = Descriptor.from_dict(
            parse_toml(
                '[project]\nname = "x"\ndescription = "d"\n'
                '[docs.api]\npath = "docs/api.md"\nowner = "team-a"\n'
            )
        )
        assert d.extra == {"docs": {"api": {"owner": "team-a"}}}
        assert d.to_dict()["docs"]["api"] == {"path": "docs/api.md", "owner": "team-a"}
        again = Descriptor.from_dict(d.to_dict())
        assert again == d
        assert again.extra == d.extra

    def test_round_trip_minimal(self):
        d = Descriptor(name="x", description="")
        assert Descriptor.from_dict(d.to_dict()) == d

    def test_equality_ignores_location(self, api, tmp_path):
        located = Descriptor.from_dict(api.to_dict(), source=tmp_path / "p.toml", root=tmp_path)
        assert located == api


class TestResolve:
    def test_named_section(self, api):
        assert api.resolve("commands") == api.commands

    def test_nested_named(self, api):
        assert api.resolve("commands.test") == "cargo test"

    def test_top_level_alias(self, api):
        assert api.resolve("name") == "api"
        assert api.resolve("project.language") == "rust"

    def test_falls_back_to_extra(self, api):
        assert api.resolve("dependencies") == {"internal": ["models"], "external": ["axum", "sqlx"]}
        assert api.resolve("project.repository") == "https://example.com/api"

    def test_list_index(self, api):
        assert api.resolve("concepts.routing.files.1") == "src/handlers/mod.rs"
        assert api.resolve("dependencies.external.-1") == "sqlx"

    def test_slash_separator(self, api):
        assert api.resolve("concepts/auth/summary") == "JWT middleware"

    def test_unknown_path(self, api):
        with pytest.raises(NotFound) as info:
            api.resolve("nonexistent.path")
        assert info.value.what == "field"
        assert "commands" in info.value.available

    def test_index_out_of_range(self, api):
        with pytest.raises(NotFound):
            api.resolve("concepts.auth.files.5")

    def test_parent_path_includes_extra_keys(self, api):
        project = api.resolve("project")
        assert project["name"] == "api"
        assert project["repository"] == "https://example.com/api"

    def test_concept_includes_unknown_keys(self):
        d = Descriptor.from_dict(
            parse_toml(
                '[project]\nname = "x"\ndescription = "d"\n'
                '[concepts.auth]\nfiles = ["a.rs"]\nowner = "team-a"\n'
            )
        )
        assert d.resolve("concepts.auth") == {"files": ["a.rs"], "summary": "", "owner": "team-a"}
        assert d.resolve("concepts.auth.owner") == "team-a"

    def test_resolve_returns_copy(self, api):
        files = api.resolve("concepts.auth.files")
        files.append("mutated.rs")
        assert api.concepts["auth"].files == ["src/auth.rs"]


class TestPathHelpers:
    def test_split_path(self):
        assert split_path("a.b/c") == ["a", "b", "c"]
        assert split_path("..a..") == ["a"]
        assert split_path("") == []

    def test_walk_missing_is_sentinel(self):
        sentinel = walk({}, ["x"])
        assert sentinel is walk({"a": 1}, ["a", "b"])


class TestWorkspaceSettings:
    def test_to_dict(self):
        s = WorkspaceSettings(name="acme", conventions=["c"])
        assert s.to_dict() == {"name": "acme", "conventions": ["c"], "gotchas": []}
