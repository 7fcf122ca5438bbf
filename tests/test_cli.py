"""Tests for dburl.cli: resolve/capabilities/env commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from dburl.cli import app

runner = CliRunner()


class TestResolve:
    def test_literal(self):
        result = runner.invoke(app, ["resolve", "foo"])
        assert result.exit_code == 0
        assert result.output.strip() == "foo"

    def test_env_reference(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("lolvar", "lololol")
        result = runner.invoke(app, ["resolve", "env:lolvar"])
        assert result.exit_code == 0
        assert result.output.strip() == "lololol"

    def test_url_with_brackets_is_printed_verbatim(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("BRACKET_URL", "postgres://[::1]:5432/app")
        result = runner.invoke(app, ["resolve", "env:BRACKET_URL"])
        assert result.exit_code == 0
        assert "postgres://[::1]:5432/app" in result.output

    def test_unset_env_fails(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("selfdestructvar", raising=False)
        result = runner.invoke(app, ["resolve", "env:selfdestructvar"])
        assert result.exit_code == 1
        assert "selfdestructvar" in result.output

    def test_config_file_option(self, tmp_path: Path):
        path = tmp_path / "custom.toml"
        path.write_text('[database]\nurl = "postgres://cli/app"\n')
        result = runner.invoke(app, ["resolve", "config:database.url", "--config-file", str(path)])
        assert result.exit_code == 0
        assert result.output.strip() == "postgres://cli/app"

    def test_no_config(self, tmp_path: Path):
        path = tmp_path / "custom.toml"
        path.write_text('[database]\nurl = "postgres://cli/app"\n')
        result = runner.invoke(
            app, ["resolve", "config:database.url", "--config-file", str(path), "--no-config"]
        )
        assert result.exit_code == 1
        assert "config feature" in result.output

    def test_dotenv_reference(self, project_dir: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("CLI_DOTENV_URL", raising=False)
        monkeypatch.setenv("DBURL_PROJECT_ROOT", str(project_dir))
        (project_dir / ".env").write_text("CLI_DOTENV_URL=sqlite:///cli.db\n")
        result = runner.invoke(app, ["resolve", "dotenv:CLI_DOTENV_URL"])
        assert result.exit_code == 0
        assert result.output.strip() == "sqlite:///cli.db"

    def test_no_dotenv(self, project_dir: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("CLI_DOTENV_URL", raising=False)
        monkeypatch.setenv("DBURL_PROJECT_ROOT", str(project_dir))
        (project_dir / ".env").write_text("CLI_DOTENV_URL=sqlite:///cli.db\n")
        result = runner.invoke(app, ["resolve", "dotenv:CLI_DOTENV_URL", "--no-dotenv"])
        assert result.exit_code == 1
        assert "CLI_DOTENV_URL" in result.output

    def test_json_ok(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("JSON_URL", "sqlite://")
        result = runner.invoke(app, ["resolve", "env:JSON_URL", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output) == {"ok": True, "value": "sqlite://"}

    def test_json_err(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("JSON_MISSING", raising=False)
        result = runner.invoke(app, ["resolve", "env:JSON_MISSING", "--json"])
        assert result.exit_code == 1
        payload = json.loads(result.output)
        assert payload["ok"] is False
        assert payload["error"]["error_type"] == "EnvVarNotFoundError"


class TestCapabilitiesCommand:
    def test_lists_capabilities(self):
        result = runner.invoke(app, ["capabilities"])
        assert result.exit_code == 0
        assert "dotenv" in result.output
        assert "config" in result.output
        assert "DBURL_FF_CONFIG" in result.output

    def test_disabled_by_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("DBURL_FF_CONFIG", "off")
        result = runner.invoke(app, ["capabilities"])
        assert result.exit_code == 0
        rows = {line.split()[1]: line for line in result.output.splitlines() if "DBURL_FF_" in line}
        assert " no " in rows["config"]
        assert " yes " in rows["dotenv"]


class TestEnvCommand:
    def test_lists_files(self, project_dir: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("DBURL_PROJECT_ROOT", str(project_dir))
        (project_dir / ".env.base").write_text("A=1\n")
        (project_dir / ".env").write_text("B=2\n")
        result = runner.invoke(app, ["env"])
        assert result.exit_code == 0
        assert ".env.base" in result.output
        assert result.output.index(".env.base") < result.output.rindex(".env\n")

    def test_no_files(self, project_dir: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("DBURL_PROJECT_ROOT", str(project_dir))
        result = runner.invoke(app, ["env"])
        assert result.exit_code == 0
        assert "No .env files found" in result.output


class TestVersion:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.output.startswith("dburl ")
