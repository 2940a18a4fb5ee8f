"""
Repository sync — keep local clones of forks level with their upstreams.

For every entry of a repo list:

    clone fork (once) → add "upstream" remote (once) → ask upstream for
    its default branch → fetch it → check out the matching local branch
    → merge --ff-only

Entries are independent. A failure in one (clone, fetch, checkout) is
recorded on that entry's result and the next entry proceeds. A
refused fast-forward is not a failure: the branch is left untouched
and the result says "diverged" (history split) or "not-merged" (local
changes in the way).

All git commands run with an explicit repository path; the process
working directory is never changed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from devbox.adapters.registry import AdapterRegistry
from devbox.core.models.action import Action, Receipt
from devbox.core.models.repo import (
    ORIGIN_REMOTE,
    UPSTREAM_REMOTE,
    RepoDescriptor,
    RepoSyncResult,
    same_repo_url,
)

logger = logging.getLogger(__name__)


class SyncError(Exception):
    """Raised for problems that abort the whole sync run."""


def prepare_base_dir(path: Path) -> Path:
    """Resolve the target directory and create it if needed.

    Raises:
        SyncError: If the directory cannot be created.
    """
    base = path.expanduser().resolve()
    try:
        base.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise SyncError(f"Cannot create directory {base}: {e}") from e
    if not base.is_dir():
        raise SyncError(f"Not a directory: {base}")
    return base


@dataclass
class SyncReport:
    """Results of one sync run, in list order."""

    base_dir: str = ""
    results: list[RepoSyncResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.ok)

    @property
    def diverged(self) -> int:
        return sum(1 for r in self.results if r.merge == "diverged")

    @property
    def not_merged(self) -> int:
        return sum(1 for r in self.results if r.merge == "not-merged")

    @property
    def status(self) -> str:
        if self.failed == 0:
            return "ok"
        if self.succeeded > 0:
            return "partial"
        return "failed"

    def to_dict(self) -> dict[str, Any]:
        return {
            "base_dir": self.base_dir,
            "status": self.status,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "diverged": self.diverged,
            "not_merged": self.not_merged,
            "repositories": [r.model_dump() for r in self.results],
        }


class RepoSyncer:
    """Sync repo list entries into ``base_dir`` through the git adapter.

    Args:
        registry: Registry with a ``git`` adapter registered.
        base_dir: Directory the clones live in. Must exist.
        verify_origin: Fail entries whose existing clone has an ``origin``
            other than the fork URL instead of syncing them.
    """

    def __init__(
        self,
        registry: AdapterRegistry,
        base_dir: Path,
        *,
        verify_origin: bool = False,
    ):
        self.registry = registry
        self.base_dir = base_dir
        self.verify_origin = verify_origin

    def sync_entry(self, entry: RepoDescriptor) -> RepoSyncResult:
        """Sync one repository. Never raises for per-entry problems."""
        name = entry.name
        result = RepoSyncResult(
            name=name or entry.fork_url,
            fork_url=entry.fork_url,
            upstream_url=entry.upstream_url,
        )
        logger.info("Processing %s (line %d)", result.name, entry.line_no)

        if not name:
            return result.fail(f"Cannot derive a repository name from {entry.fork_url}")

        path = entry.local_path(self.base_dir)
        result.path = str(path)

        if not self._ensure_clone(entry, path, result):
            return result

        if not entry.upstream_url:
            result.note("No upstream provided. Skipping upstream sync.")
            return result

        if not self._ensure_upstream(entry.upstream_url, path, result):
            return result

        self._sync_default_branch(path, result)
        return result

    # ── Steps ───────────────────────────────────────────────────

    def _ensure_clone(self, entry: RepoDescriptor, path: Path, result: RepoSyncResult) -> bool:
        if path.exists():
            result.clone = "existing"
            if not path.is_dir():
                result.fail(f"{path} exists and is not a directory")
                return False

            top = self._git("toplevel", result.name, path)
            if not top.ok or Path(top.output).resolve() != path.resolve():
                result.fail(f"{path} exists but is not a git repository")
                return False

            if self.verify_origin and not self._origin_matches(entry, path, result):
                return False

            result.note("Repository already exists. Skipping clone.")
            return True

        logger.info("Cloning %s from %s", result.name, entry.fork_url)
        receipt = self._git(
            "clone", result.name, self.base_dir,
            url=entry.fork_url, dest=str(path),
        )
        if not receipt.ok:
            result.fail(f"Failed to clone {entry.fork_url}: {receipt.summary}")
            return False

        result.clone = "cloned"
        result.note(f"Cloned from {entry.fork_url}.")
        return True

    def _origin_matches(self, entry: RepoDescriptor, path: Path, result: RepoSyncResult) -> bool:
        receipt = self._git("remote_url", result.name, path, remote=ORIGIN_REMOTE)
        if not receipt.ok:
            result.fail(f"{path} has no '{ORIGIN_REMOTE}' remote to verify")
            return False
        if not same_repo_url(receipt.output, entry.fork_url):
            result.fail(
                f"{path} is a clone of {receipt.output}, not {entry.fork_url}"
            )
            return False
        return True

    def _ensure_upstream(self, upstream_url: str, path: Path, result: RepoSyncResult) -> bool:
        remotes = self._git("remotes", result.name, path)
        if not remotes.ok:
            result.fail(f"Cannot list remotes: {remotes.summary}")
            return False

        if UPSTREAM_REMOTE in remotes.metadata.get("remotes", []):
            result.upstream = "existing"
            current = self._git("remote_url", result.name, path, remote=UPSTREAM_REMOTE)
            if current.ok and not same_repo_url(current.output, upstream_url):
                logger.warning(
                    "%s: upstream points at %s, list says %s",
                    result.name, current.output, upstream_url,
                )
                result.note(f"Upstream already points at {current.output}; left unchanged.")
            else:
                result.note("Upstream already exists.")
            return True

        receipt = self._git(
            "remote_add", result.name, path,
            remote=UPSTREAM_REMOTE, url=upstream_url,
        )
        if not receipt.ok:
            result.fail(f"Failed to add upstream remote: {receipt.summary}")
            return False

        result.upstream = "added"
        result.note(f"Upstream added: {upstream_url}")
        return True

    def _sync_default_branch(self, path: Path, result: RepoSyncResult) -> None:
        head = self._git("default_branch", result.name, path, remote=UPSTREAM_REMOTE)
        branch = head.metadata.get("branch") if head.ok else None
        if not branch:
            result.fail(
                "Could not detect upstream default branch: "
                f"{head.summary or 'no symbolic HEAD'}"
            )
            return
        result.default_branch = branch
        result.note(f"Default branch detected: {branch}")

        fetch = self._git("fetch", result.name, path, remote=UPSTREAM_REMOTE, branch=branch)
        if not fetch.ok:
            result.fail(f"Failed to fetch upstream {branch}: {fetch.summary}")
            return

        if not self._checkout(path, branch, result):
            return

        upstream_ref = f"{UPSTREAM_REMOTE}/{branch}"
        before = self._git("rev_parse", result.name, path, ref="HEAD")
        merge = self._git("merge_ff", result.name, path, ref=upstream_ref)
        if not merge.ok:
            reason = merge.summary
            behind = self._git(
                "is_ancestor", result.name, path, ancestor="HEAD", descendant=upstream_ref,
            )
            if behind.ok and behind.metadata.get("ancestor"):
                result.merge = "not-merged"
                why = "history has not diverged; local changes are in the way"
            else:
                result.merge = "diverged"
                why = f"{branch} has diverged from {upstream_ref}"
            result.note(
                f"No update merged: {branch} cannot be fast-forwarded to {upstream_ref}, {why}"
                + (f" ({reason})" if reason else "")
            )
            logger.info("%s: fast-forward refused: %s", result.name, reason)
            return

        after = self._git("rev_parse", result.name, path, ref="HEAD")
        if before.ok and after.ok and before.output == after.output:
            result.merge = "up-to-date"
            result.note(f"{branch} is up to date with {upstream_ref}.")
        else:
            result.merge = "fast-forwarded"
            result.note(f"Fast-forwarded {branch} to {upstream_ref}.")

    def _checkout(self, path: Path, branch: str, result: RepoSyncResult) -> bool:
        local = self._git("ref_exists", result.name, path, ref=f"refs/heads/{branch}")
        if not local.ok:
            result.fail(f"Cannot inspect branches: {local.summary}")
            return False

        if local.metadata.get("exists"):
            receipt = self._git("checkout", result.name, path, branch=branch)
        else:
            origin_ref = f"{ORIGIN_REMOTE}/{branch}"
            on_origin = self._git(
                "ref_exists", result.name, path, ref=f"refs/remotes/{origin_ref}",
            )
            if on_origin.ok and on_origin.metadata.get("exists"):
                receipt = self._git(
                    "create_branch", result.name, path,
                    branch=branch, start_point=origin_ref, track=True,
                )
            else:
                # No origin counterpart: plain local branch at the fetched upstream tip
                receipt = self._git(
                    "create_branch", result.name, path,
                    branch=branch, start_point=f"{UPSTREAM_REMOTE}/{branch}", track=False,
                )

        if not receipt.ok:
            result.fail(f"Failed to check out {branch}: {receipt.summary}")
            return False
        return True

    # ── Helpers ─────────────────────────────────────────────────

    def _git(self, operation: str, repo: str, cwd: Path, **params: Any) -> Receipt:
        action = Action(
            id=f"git:{operation}:{repo}",
            adapter="git",
            operation=operation,
            params=params,
            cwd=str(cwd),
        )
        return self.registry.execute(action)
