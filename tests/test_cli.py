"""
Tests for CLI commands — install, sync, config check, and global options.
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from devbox.adapters.mock import MockAdapter
from devbox.adapters.registry import AdapterRegistry
from devbox.core.models.action import Receipt
from devbox.core.services import tool_install
from devbox.main import cli
from devbox.ui.cli.install import install
from devbox.ui.cli.sync import sync
from tests.helpers import make_repo, requires_git


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path: Path):
    """Run every command from an empty directory with no user config."""
    monkeypatch.delenv("DEVBOX_CONFIG", raising=False)
    monkeypatch.delenv("INSTALL_DOCKER_DESKTOP", raising=False)
    monkeypatch.delenv("DEVBOX_LOG_FILE", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    cwd = tmp_path / "cwd"
    cwd.mkdir()
    monkeypatch.chdir(cwd)


@pytest.fixture
def all_but_editor_present(monkeypatch):
    """Every command exists except ``code``; no Flatpak duplicates."""
    monkeypatch.setattr(tool_install, "has_cmd", lambda name: name != "code")
    monkeypatch.setattr(tool_install, "flatpak_installed", lambda app_id: False)
    monkeypatch.setattr(tool_install, "flatpak_remotes", lambda: ["flathub"])
    monkeypatch.setattr(tool_install, "installed_extensions", lambda editor="code": set())


class TestCLIGlobal:
    """Tests for global CLI behavior."""

    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "install" in result.output
        assert "sync" in result.output

    def test_short_help(self):
        result = CliRunner().invoke(cli, ["-h"])
        assert result.exit_code == 0

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestInstallCommand:
    def test_help_describes_environment(self):
        result = CliRunner().invoke(install, ["-h"], prog_name="install-dev-tools")
        assert result.exit_code == 0
        assert "INSTALL_DOCKER_DESKTOP" in result.output
        assert "install-dev-tools" in result.output

    def test_dry_run(self, all_but_editor_present):
        result = CliRunner().invoke(cli, ["install", "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "[dry-run]" in result.output
        assert "code" in result.output
        assert "would run. Nothing was changed." in result.output
        assert "Planned: 2 |" in result.output
        assert "Changed:" not in result.output
        assert "Flatpak duplicates removed" not in result.output

    def test_dry_run_json(self, all_but_editor_present):
        result = CliRunner().invoke(install, ["--dry-run", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["dry_run"] is True
        assert data["catalog"] == "built-in"
        outcomes = {s["target"]: s["outcome"] for s in data["report"]["steps"]}
        assert outcomes["code"] == "planned"
        assert outcomes["git"] == "present"
        assert "docker-desktop" not in outcomes

    def test_docker_desktop_from_environment(self, all_but_editor_present, monkeypatch):
        monkeypatch.setenv("INSTALL_DOCKER_DESKTOP", "true")

        result = CliRunner().invoke(install, ["--dry-run", "--json"])

        data = json.loads(result.output)
        targets = [s["target"] for s in data["report"]["steps"]]
        assert data["docker_desktop"] is True
        assert "docker-desktop" in targets
        assert "docker" not in targets

    def test_bad_catalog_exits_1(self, tmp_path: Path):
        bad = tmp_path / "tools.yml"
        bad.write_text("tools: not-a-list\n")

        result = CliRunner().invoke(install, ["--catalog", str(bad)])

        assert result.exit_code == 1
        assert "Invalid catalog" in result.output

    def test_failures_exit_0_unless_strict(self, all_but_editor_present, monkeypatch):
        def _failing_registry(settings, *, editor_command="code", dry_run=False):
            registry = AdapterRegistry(dry_run=dry_run)
            for name in ("dnf", "flatpak", "shell", "editor"):
                mock = MockAdapter(name)
                mock.set_operation_response(
                    "install" if name == "dnf" else "run",
                    Receipt.failure(adapter=name, action_id="x", error="no network"),
                )
                registry.register(mock)
            return registry

        monkeypatch.setattr("devbox.core.use_cases.install.build_registry", _failing_registry)
        runner = CliRunner()

        lenient = runner.invoke(install, [])
        strict = runner.invoke(install, ["--strict"])

        assert lenient.exit_code == 0
        assert "steps failed" in lenient.output
        assert strict.exit_code == 1


class TestSyncCommand:
    def test_no_arguments_prints_usage(self):
        result = CliRunner().invoke(sync, [], prog_name="sync-repos")
        assert result.exit_code == 1
        assert "Usage: sync-repos <repo-list-file> <local-dir>" in result.output

    def test_one_argument_prints_usage(self, tmp_path: Path):
        result = CliRunner().invoke(cli, ["sync", str(tmp_path / "repos.txt")])
        assert result.exit_code == 1
        assert "<repo-list-file> <local-dir>" in result.output

    def test_help(self):
        result = CliRunner().invoke(sync, ["--help"], prog_name="sync-repos")
        assert result.exit_code == 0
        assert "fork-url" in result.output

    def test_unreadable_list_exits_1(self, tmp_path: Path):
        result = CliRunner().invoke(sync, [str(tmp_path / "absent.txt"), str(tmp_path / "work")])
        assert result.exit_code == 1
        assert "Cannot read repo list" in result.output

    @requires_git
    def test_sync_run(self, fork_repo: Path, upstream_repo: Path, base_dir: Path, tmp_path: Path, write_list):
        repo_list = write_list(
            "# forks",
            f"{fork_repo} {upstream_repo}",
            f"{tmp_path / 'missing' / 'gone.git'}",
        )

        result = CliRunner().invoke(cli, ["sync", str(repo_list), str(base_dir)])

        assert result.exit_code == 0, result.output
        assert "Processing app" in result.output
        assert "Processing gone" in result.output
        assert "Upstream added" in result.output
        assert "All repos processed." in result.output
        assert "Failed: 1" in result.output
        assert (base_dir / "app" / ".git").is_dir()

    @requires_git
    def test_sync_json(self, fork_repo: Path, base_dir: Path, write_list):
        result = CliRunner().invoke(sync, [str(write_list(str(fork_repo))), str(base_dir), "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["entries"] == 1
        repo = data["report"]["repositories"][0]
        assert repo["name"] == "app"
        assert repo["clone"] == "cloned"
        assert repo["upstream"] == "none"

    @requires_git
    def test_verify_origin_from_config(
        self, fork_repo: Path, base_dir: Path, tmp_path: Path, write_list,
    ):
        make_repo(base_dir / "app")
        config = tmp_path / "devbox.yml"
        config.write_text("sync:\n  verify_origin: true\n")

        result = CliRunner().invoke(
            cli, ["--config", str(config), "sync", str(write_list(str(fork_repo))), str(base_dir), "--json"],
        )

        assert result.exit_code == 0, result.output
        repo = json.loads(result.output)["report"]["repositories"][0]
        assert repo["status"] == "failed"


class TestConfigCheck:
    def test_defaults_are_valid(self):
        result = CliRunner().invoke(cli, ["config", "check"])
        assert result.exit_code == 0
        assert "Configuration is valid" in result.output
        assert "(defaults)" in result.output

    def test_invalid_config(self, tmp_path: Path):
        config = tmp_path / "devbox.yml"
        config.write_text("install:\n  strict: [1, 2]\n")

        result = CliRunner().invoke(cli, ["--config", str(config), "config", "check"])

        assert result.exit_code == 1
        assert "Configuration errors" in result.output

    def test_json(self, tmp_path: Path):
        (tmp_path / "tools.yml").write_text("tools: [{name: gh, package: gh}]\nextensions: [golang.go]\n")
        config = tmp_path / "devbox.yml"
        config.write_text("install:\n  catalog: tools.yml\n")

        result = CliRunner().invoke(cli, ["--config", str(config), "config", "check", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["valid"] is True
        assert data["tools"] == 1
        assert data["extensions"] == 1

    def test_reports_adapter_availability(self):
        with patch("shutil.which", side_effect=lambda cmd: None if cmd == "flatpak" else f"/usr/bin/{cmd}"):
            result = CliRunner().invoke(cli, ["config", "check", "--json"])

        data = json.loads(result.output)
        assert set(data["adapters"]) == {"git", "dnf", "flatpak", "shell", "editor"}
        assert data["adapters"]["git"]["available"] is True
        assert data["adapters"]["flatpak"]["available"] is False

    def test_missing_tool_shown_in_text_output(self):
        with patch("shutil.which", side_effect=lambda cmd: None if cmd == "git" else f"/usr/bin/{cmd}"):
            result = CliRunner().invoke(cli, ["config", "check"])

        assert result.exit_code == 0
        assert "✗ git (not installed)" in result.output
        assert "✓ dnf" in result.output
