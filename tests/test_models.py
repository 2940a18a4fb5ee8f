"""
Tests for core models — repositories, tool catalog, settings, receipts.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from devbox.core.data import default_catalog
from devbox.core.models import (
    InstallerCatalog,
    Receipt,
    RepoDescriptor,
    RepoSyncResult,
    Settings,
    ToolDescriptor,
    repo_name_from_url,
)
from devbox.core.models.repo import same_repo_url

# ── Repositories ─────────────────────────────────────────────────────


class TestRepoName:
    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("https://github.com/me/app.git", "app"),
            ("https://github.com/me/app", "app"),
            ("https://github.com/me/app/", "app"),
            ("git@github.com:me/tool.git", "tool"),
            ("git@github.com:tool.git", "tool"),
            ("/srv/git/lib.git", "lib"),
            ("https://host/me/app.git.git", "app.git"),
        ],
    )
    def test_names(self, url, expected):
        assert repo_name_from_url(url) == expected

    @pytest.mark.parametrize("url", ["https://host/..", "https://host/.", "", "/"])
    def test_unusable(self, url):
        assert repo_name_from_url(url) == ""

    def test_descriptor_local_path(self, tmp_path: Path):
        entry = RepoDescriptor(fork_url="git@github.com:me/app.git")
        assert entry.name == "app"
        assert entry.local_path(tmp_path) == tmp_path / "app"


class TestSameRepoUrl:
    def test_suffix_and_slash_ignored(self):
        assert same_repo_url("https://github.com/me/app.git", "https://github.com/me/app/")

    def test_different_owner(self):
        assert not same_repo_url("https://github.com/me/app.git", "https://github.com/org/app.git")

    def test_scheme_matters(self):
        assert not same_repo_url("git@github.com:me/app.git", "https://github.com/me/app.git")


class TestRepoSyncResult:
    def test_defaults(self):
        result = RepoSyncResult(name="app", fork_url="u")
        assert result.ok
        assert (result.clone, result.upstream, result.merge) == ("none", "none", "none")

    def test_fail_returns_self(self):
        result = RepoSyncResult(name="app", fork_url="u")
        assert result.fail("boom") is result
        assert not result.ok
        assert result.error == "boom"


# ── Tool catalog ─────────────────────────────────────────────────────


class TestToolDescriptor:
    def test_script_channel_needs_script(self):
        with pytest.raises(ValidationError):
            ToolDescriptor(name="oc", package="oc", channel="script")

    def test_unknown_channel_rejected(self):
        with pytest.raises(ValidationError):
            ToolDescriptor(name="x", package="x", channel="snap")

    def test_commands_include_alternates(self):
        tool = ToolDescriptor(name="yarn", package="yarnpkg", alternates=["yarnpkg"])
        assert tool.commands == ["yarn", "yarnpkg"]

    def test_duplicate_flatpak(self):
        native = ToolDescriptor(name="yarn", package="yarnpkg", flatpak_id="com.yarnpkg.yarn")
        flatpak = ToolDescriptor(name="slack", package="com.slack.Slack", channel="flatpak")
        plain = ToolDescriptor(name="gh", package="gh")

        assert native.duplicate_flatpak == "com.yarnpkg.yarn"
        assert flatpak.duplicate_flatpak == "com.slack.Slack"
        assert plain.duplicate_flatpak is None

    def test_display_name(self):
        assert ToolDescriptor(name="oc", package="oc", label="OpenShift CLI").display_name == "OpenShift CLI"
        assert ToolDescriptor(name="gh", package="gh").display_name == "gh"


class TestInstallerCatalog:
    def test_tools_for_variant(self):
        catalog = InstallerCatalog(tools=[
            ToolDescriptor(name="git", package="git"),
            ToolDescriptor(name="docker", package="moby-engine", variant="docker-engine"),
            ToolDescriptor(
                name="docker-desktop", package="docker-desktop", channel="script",
                script="true", variant="docker-desktop",
            ),
        ])

        assert [t.name for t in catalog.tools_for(docker_desktop=False)] == ["git", "docker"]
        assert [t.name for t in catalog.tools_for(docker_desktop=True)] == ["git", "docker-desktop"]


class TestDefaultCatalog:
    def test_loads(self):
        catalog = default_catalog()
        assert catalog.flatpak_remote.name == "flathub"
        assert "flatpak" in catalog.base_packages
        assert catalog.extensions

    def test_expected_tools(self):
        names = {t.name for t in default_catalog().tools}
        assert {"slack", "ffmpeg", "podman", "docker", "docker-desktop", "code",
                "go", "yarn", "oc", "kustomize", "gh", "notify-send"} <= names

    def test_yarn_has_flatpak_duplicate(self):
        yarn = next(t for t in default_catalog().tools if t.name == "yarn")
        assert yarn.duplicate_flatpak == "com.yarnpkg.yarn"
        assert "yarnpkg" in yarn.commands

    def test_one_docker_per_variant(self):
        catalog = default_catalog()
        for desktop in (False, True):
            dockers = [t for t in catalog.tools_for(docker_desktop=desktop) if t.name.startswith("docker")]
            assert len(dockers) == 1


# ── Settings / Receipt ───────────────────────────────────────────────


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.install.catalog is None
        assert settings.install.strict is False
        assert settings.sync.verify_origin is False

    def test_partial_sections(self):
        settings = Settings.model_validate({"sync": {"verify_origin": True}})
        assert settings.sync.verify_origin is True
        assert settings.sync.network_timeout == 600
        assert settings.install.timeout == 1800


class TestReceipt:
    def test_status_properties(self):
        assert Receipt.success(adapter="git", action_id="a").ok
        assert Receipt.failure(adapter="git", action_id="a", error="e").failed
        skipped = Receipt.skip(adapter="git", action_id="a", reason="dry")
        assert skipped.skipped
        assert skipped.output == "dry"
