"""
Tool detection — read-only presence probes.

These never change the system, so they run for real even in dry-run
mode. A probe that cannot run (binary missing, timeout) answers
"not present".
"""

from __future__ import annotations

import logging
import shutil
import subprocess

logger = logging.getLogger(__name__)

_PROBE_TIMEOUT = 30


def has_cmd(name: str) -> bool:
    """Whether ``name`` resolves to an executable on PATH."""
    return shutil.which(name) is not None


def _probe(cmd: list[str]) -> subprocess.CompletedProcess[str] | None:
    try:
        return subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=_PROBE_TIMEOUT,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug("Probe %s failed: %s", cmd, e)
        return None


def flatpak_installed(app_id: str) -> bool:
    """Whether a Flatpak application is installed (``flatpak info``)."""
    if not has_cmd("flatpak"):
        return False
    result = _probe(["flatpak", "info", app_id])
    return result is not None and result.returncode == 0


def flatpak_remotes() -> list[str]:
    """Names of configured Flatpak remotes."""
    if not has_cmd("flatpak"):
        return []
    result = _probe(["flatpak", "remotes", "--columns=name"])
    if result is None or result.returncode != 0:
        return []
    return [line.strip() for line in result.stdout.splitlines() if line.strip()]


def installed_extensions(editor: str = "code") -> set[str]:
    """Lower-cased ids of installed editor extensions."""
    if not has_cmd(editor):
        return set()
    result = _probe([editor, "--list-extensions"])
    if result is None or result.returncode != 0:
        return set()
    return {line.strip().lower() for line in result.stdout.splitlines() if line.strip()}
