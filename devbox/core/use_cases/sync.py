"""
Sync use case — bring every clone in a repo list up to date.

Structural problems (unreadable list, unusable target directory) end
the run with ``error`` set. Per-repository problems never do: they are
recorded on that repository's result and the run carries on.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from devbox.adapters.registry import AdapterRegistry
from devbox.core.models.repo import RepoSyncResult
from devbox.core.models.settings import Settings
from devbox.core.services.repo_list import RepoListError, load_repo_list
from devbox.core.services.repo_sync import RepoSyncer, SyncError, SyncReport, prepare_base_dir

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Result of a sync run."""

    report: SyncReport | None = None
    repo_list: str = ""
    entries: int = 0
    error: str | None = None

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            return result

        result["repo_list"] = self.repo_list
        result["entries"] = self.entries
        if self.report:
            result["report"] = self.report.to_dict()
        return result


def build_registry(settings: Settings) -> AdapterRegistry:
    """Registry with the real git adapter."""
    from devbox.adapters import GitAdapter

    registry = AdapterRegistry()
    registry.register(
        GitAdapter(
            network_timeout=settings.sync.network_timeout,
            local_timeout=settings.sync.local_timeout,
        )
    )
    return registry


def run_sync(
    repo_list: Path,
    local_dir: Path,
    *,
    settings: Settings | None = None,
    verify_origin: bool | None = None,
    registry: AdapterRegistry | None = None,
    on_start: Callable[[str], None] | None = None,
    on_result: Callable[[RepoSyncResult], None] | None = None,
) -> SyncResult:
    """Sync every repository listed in ``repo_list`` under ``local_dir``.

    Args:
        repo_list: Path to the repo list file.
        local_dir: Target directory (created if absent).
        settings: Loaded devbox.yml settings (defaults if None).
        verify_origin: Override ``sync.verify_origin`` from settings.
        registry: Pre-built registry (tests); built from settings if None.
        on_start: Called with the repository name before it is processed.
        on_result: Called with each repository's result when it is done.

    Returns:
        SyncResult. ``error`` is set only for run-aborting problems.
    """
    settings = settings or Settings()
    if verify_origin is None:
        verify_origin = settings.sync.verify_origin

    result = SyncResult(repo_list=str(repo_list))

    try:
        entries = load_repo_list(repo_list)
        base_dir = prepare_base_dir(local_dir)
    except (RepoListError, SyncError) as e:
        result.error = str(e)
        return result
    result.entries = len(entries)

    logger.info("Starting repo sync of %d entries in %s", len(entries), base_dir)

    if registry is None:
        registry = build_registry(settings)

    syncer = RepoSyncer(registry, base_dir, verify_origin=verify_origin)
    report = SyncReport(base_dir=str(base_dir))
    for entry in entries:
        if on_start:
            on_start(entry.name or entry.fork_url)
        entry_result = syncer.sync_entry(entry)
        report.results.append(entry_result)
        if on_result:
            on_result(entry_result)

    result.report = report
    return result
