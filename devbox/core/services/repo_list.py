"""
Repo list parsing — turns the line-oriented list file into descriptors.

Format, one repository per line::

    <fork-url> [<upstream-url>]

Blank lines and lines starting with ``#`` are ignored. Windows line
endings are tolerated. No quoting or escaping.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from devbox.core.models.repo import RepoDescriptor

logger = logging.getLogger(__name__)

COMMENT_MARKER = "#"


class RepoListError(Exception):
    """Raised when the repo list file cannot be read."""


def parse_repo_list(lines: Iterable[str]) -> list[RepoDescriptor]:
    """Parse repo list lines into descriptors, in file order."""
    entries: list[RepoDescriptor] = []

    for line_no, raw in enumerate(lines, start=1):
        line = raw.replace("\r", "").strip()
        if not line or line.startswith(COMMENT_MARKER):
            continue

        fields = line.split()
        if len(fields) > 2:
            logger.warning("Line %d: ignoring extra fields %s", line_no, fields[2:])

        entries.append(
            RepoDescriptor(
                fork_url=fields[0],
                upstream_url=fields[1] if len(fields) > 1 else None,
                line_no=line_no,
            )
        )

    logger.debug("Parsed %d repository entries", len(entries))
    return entries


def load_repo_list(path: Path) -> list[RepoDescriptor]:
    """Read and parse a repo list file.

    Raises:
        RepoListError: If the file is missing or unreadable.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise RepoListError(f"Cannot read repo list {path}: {e}") from e
    return parse_repo_list(text.splitlines())
