"""Tests for jumble.descriptor.frontmatter (skill Markdown files)."""

import pytest

from jumble.core.errors import ValidationError
from jumble.descriptor.frontmatter import (
    load_skill_dir,
    parse_frontmatter,
    parse_skill_text,
)


class TestParseFrontmatter:
    def test_with_frontmatter(self):
        meta, body = parse_frontmatter("---\ndescription: hi\ntags: [a]\n---\nbody\n")
        assert meta == {"description": "hi", "tags": ["a"]}
        assert body == "body\n"

    def test_without_frontmatter(self):
        meta, body = parse_frontmatter("# Title\ntext\n")
        assert meta == {}
        assert body == "# Title\ntext\n"

    def test_malformed_yaml_is_plain_markdown(self):
        text = "---\ndescription: [unclosed\n---\nbody\n"
        meta, body = parse_frontmatter(text)
        assert meta == {}
        assert body == text

    def test_non_mapping_yaml(self):
        text = "---\n- just\n- a list\n---\nbody\n"
        meta, body = parse_frontmatter(text)
        assert meta == {}
        assert body == text


class TestParseSkillText:
    def test_description_from_frontmatter(self):
        skill = parse_skill_text("---\ndescription: Release steps\n---\n1. tag\n")
        assert skill.description == "Release steps"
        assert skill.content == "1. tag"
        assert skill.file is None

    def test_description_from_heading(self):
        skill = parse_skill_text("\n# Debugging auth\n\nCheck the clock.\n")
        assert skill.description == "Debugging auth"
        assert skill.content.startswith("# Debugging auth")

    def test_bad_description_type(self):
        with pytest.raises(ValidationError):
            parse_skill_text("---\ndescription: 42\n---\nbody\n")


class TestLoadSkillDir:
    def test_missing_dir(self, tmp_path):
        assert load_skill_dir(tmp_path / "skills") == {}

    def test_only_markdown(self, tmp_path):
        (tmp_path / "a.md").write_text("# A\n", encoding="utf-8")
        (tmp_path / "b.txt").write_text("ignored", encoding="utf-8")
        skills = load_skill_dir(tmp_path)
        assert list(skills) == ["a"]
