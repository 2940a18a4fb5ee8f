"""Adapters — one per external tool devbox drives.

    git      devbox.adapters.vcs.git.GitAdapter
    dnf      devbox.adapters.packages.dnf.DnfAdapter
    flatpak  devbox.adapters.packages.flatpak.FlatpakAdapter
    shell    devbox.adapters.shell.command.ShellCommandAdapter
    editor   devbox.adapters.editors.vscode.EditorAdapter
"""

from devbox.adapters.base import Adapter, ExecutionContext
from devbox.adapters.editors.vscode import EditorAdapter
from devbox.adapters.mock import MockAdapter
from devbox.adapters.packages.dnf import DnfAdapter
from devbox.adapters.packages.flatpak import FlatpakAdapter
from devbox.adapters.registry import AdapterRegistry
from devbox.adapters.shell.command import ShellCommandAdapter
from devbox.adapters.vcs.git import GitAdapter

__all__ = [
    "Adapter",
    "AdapterRegistry",
    "DnfAdapter",
    "EditorAdapter",
    "ExecutionContext",
    "FlatpakAdapter",
    "GitAdapter",
    "MockAdapter",
    "ShellCommandAdapter",
]
