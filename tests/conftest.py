"""
Shared test fixtures — throwaway git repositories for sync tests.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from tests.helpers import make_fork, make_repo


@pytest.fixture
def upstream_repo(tmp_path: Path) -> Path:
    """The "org" repository: the upstream every fork derives from."""
    return make_repo(tmp_path / "org" / "app")


@pytest.fixture
def fork_repo(tmp_path: Path, upstream_repo: Path) -> Path:
    """The user's fork of ``upstream_repo``."""
    return make_fork(upstream_repo, tmp_path / "me" / "app.git")


@pytest.fixture
def base_dir(tmp_path: Path) -> Path:
    """Target directory for clones (not created: sync creates it)."""
    return tmp_path / "work"


@pytest.fixture
def write_list(tmp_path: Path):
    """Write a repo list file from lines and return its path."""

    def _write(*lines: str) -> Path:
        path = tmp_path / "repos.txt"
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write
