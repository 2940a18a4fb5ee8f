"""
Git helpers for building throwaway repositories in tests.
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")

_GIT_IDENTITY = [
    "-c", "user.name=devbox tests",
    "-c", "user.email=tests@example.com",
    "-c", "commit.gpgsign=false",
]


def git(cwd: Path, *args: str) -> str:
    """Run git in ``cwd`` for test setup and return stripped stdout."""
    result = subprocess.run(
        ["git", *_GIT_IDENTITY, *args],
        cwd=str(cwd),
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


def commit_file(repo: Path, name: str, content: str, message: str | None = None) -> str:
    """Write a file, commit it, and return the new HEAD sha."""
    (repo / name).write_text(content)
    git(repo, "add", name)
    git(repo, "commit", "-q", "-m", message or f"update {name}")
    return git(repo, "rev-parse", "HEAD")


def head(repo: Path, ref: str = "HEAD") -> str:
    return git(repo, "rev-parse", ref)


def make_repo(path: Path, branch: str = "main") -> Path:
    """A non-bare repository with one commit on ``branch``."""
    path.mkdir(parents=True)
    git(path, "init", "-q", "-b", branch)
    commit_file(path, "README.md", "hello\n", "initial commit")
    return path


def make_fork(upstream: Path, fork: Path) -> Path:
    """A bare clone of ``upstream`` standing in for a hosted fork."""
    fork.parent.mkdir(parents=True, exist_ok=True)
    git(upstream.parent, "clone", "-q", "--bare", str(upstream), str(fork))
    return fork


