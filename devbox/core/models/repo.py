"""
Repository models — one line of a repo list, and what syncing it did.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

UPSTREAM_REMOTE = "upstream"
ORIGIN_REMOTE = "origin"


def repo_name_from_url(url: str) -> str:
    """Last path segment of a clone URL with any ``.git`` suffix removed.

    Handles scp-style URLs (``git@host:me/app.git``) and trailing slashes.
    Returns an empty string when nothing usable is left.
    """
    segment = re.split(r"[/:]", url.strip().rstrip("/"))[-1]
    name = segment.removesuffix(".git")
    if name in (".", ".."):
        return ""
    return name


def _normalize_url(url: str) -> str:
    return url.strip().rstrip("/").removesuffix(".git").rstrip("/")


def same_repo_url(a: str, b: str) -> bool:
    """Whether two clone URLs name the same repository.

    Ignores a trailing slash and a ``.git`` suffix; everything else
    (scheme, host, case) must match.
    """
    return _normalize_url(a) == _normalize_url(b)


class RepoDescriptor(BaseModel):
    """A fork URL with an optional upstream, as read from the list file."""

    fork_url: str
    upstream_url: str | None = None
    line_no: int = 0

    @property
    def name(self) -> str:
        return repo_name_from_url(self.fork_url)

    def local_path(self, base_dir: Path) -> Path:
        return base_dir / self.name


class RepoSyncResult(BaseModel):
    """What happened to one repository during a sync run."""

    name: str
    fork_url: str
    upstream_url: str | None = None
    path: str = ""

    status: Literal["ok", "failed"] = "ok"
    clone: Literal["cloned", "existing", "none"] = "none"
    upstream: Literal["added", "existing", "none"] = "none"
    default_branch: str | None = None
    merge: Literal["fast-forwarded", "up-to-date", "diverged", "not-merged", "none"] = "none"

    error: str | None = None
    messages: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    def note(self, message: str) -> None:
        self.messages.append(message)

    def fail(self, error: str) -> RepoSyncResult:
        self.status = "failed"
        self.error = error
        return self
