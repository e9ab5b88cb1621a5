"""Tests for the jumble command line (jumble.__main__)."""

import json

import pytest

from jumble.__main__ import main

from conftest import write_descriptor


@pytest.fixture(autouse=True)
def no_env_root(monkeypatch):
    monkeypatch.delenv("JUMBLE_ROOT", raising=False)


class TestCheck:
    def test_clean_workspace(self, workspace_root, capsys):
        assert main(["check", "--root", str(workspace_root)]) == 0
        out = capsys.readouterr().out
        assert "Projects (2):" in out
        assert "api" in out
        assert "No problems found." in out

    def test_problems_exit_one(self, workspace_root, capsys):
        write_descriptor(workspace_root / "broken", "[project\n")
        assert main(["check", "--root", str(workspace_root)]) == 1
        out = capsys.readouterr().out
        assert "Problems (1):" in out
        assert "[parse]" in out

    def test_missing_root(self, tmp_path, capsys):
        assert main(["check", "--root", str(tmp_path / "nope")]) == 2
        assert "does not exist" in capsys.readouterr().err

    def test_json_output(self, workspace_root, capsys):
        write_descriptor(workspace_root / "broken", "[project\n")
        assert main(["check", "--json", "--root", str(workspace_root)]) == 1
        data = json.loads(capsys.readouterr().out)
        assert sorted(data["projects"]) == ["api", "web"]
        assert data["projects"]["api"].endswith("project.toml")
        assert [d["kind"] for d in data["load_errors"]] == ["parse"]
        assert data["workspace"]["name"] == "acme"

    def test_missing_config_file(self, workspace_root, capsys):
        code = main([
            "check", "--root", str(workspace_root),
            "--config", str(workspace_root / "absent.yaml"),
        ])
        assert code == 2
        assert "Config file not found" in capsys.readouterr().err

    def test_empty_config_section(self, workspace_root, capsys):
        config_path = workspace_root / "jumble.yaml"
        config_path.write_text("jumble:\n", encoding="utf-8")
        code = main(["check", "--root", str(workspace_root), "--config", str(config_path)])
        assert code == 0
        assert "Projects (2):" in capsys.readouterr().out


class TestList:
    def test_json(self, workspace_root, capsys):
        assert main(["list", "--root", str(workspace_root)]) == 0
        data = json.loads(capsys.readouterr().out)
        assert [p["name"] for p in data] == ["api", "web"]


class TestCall:
    def test_ok(self, workspace_root, capsys):
        code = main([
            "call", "get_commands",
            "--args", '{"project": "api", "command_type": "test"}',
            "--root", str(workspace_root),
        ])
        assert code == 0
        assert json.loads(capsys.readouterr().out) == {"ok": True, "result": "cargo test"}

    def test_not_found_exit_one(self, workspace_root, capsys):
        code = main([
            "call", "get_architecture",
            "--args", '{"project": "api", "concept": "db"}',
            "--root", str(workspace_root),
        ])
        assert code == 1
        data = json.loads(capsys.readouterr().out)
        assert data["error"]["kind"] == "not_found"

    def test_reload_uses_given_root(self, workspace_root, tmp_path_factory, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path_factory.mktemp("elsewhere"))
        code = main(["call", "reload_workspace", "--root", str(workspace_root)])
        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["result"]["projects"] == ["api", "web"]

    def test_invalid_json(self, workspace_root, capsys):
        code = main(["call", "list_projects", "--args", "{nope", "--root", str(workspace_root)])
        assert code == 2
        assert "not valid JSON" in capsys.readouterr().err

    def test_args_must_be_object(self, workspace_root, capsys):
        code = main(["call", "list_projects", "--args", "[1]", "--root", str(workspace_root)])
        assert code == 2


class TestNoCommand:
    def test_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()
