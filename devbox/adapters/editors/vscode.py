"""
Editor adapter — extension installs through the VS Code CLI.
"""

from __future__ import annotations

import shutil

from devbox.adapters.base import Adapter, ExecutionContext
from devbox.core.models.action import Receipt


class EditorAdapter(Adapter):
    """Install editor extensions with ``<editor> --install-extension``.

    Action params:
        extension (str): Marketplace id, e.g. ``ms-python.python``.
    """

    operations = {"install_extension": ("extension",)}

    def __init__(self, command: str = "code", *, timeout: int = 300):
        self.command = command
        self.timeout = timeout

    @property
    def name(self) -> str:
        return "editor"

    def is_available(self) -> bool:
        return shutil.which(self.command) is not None

    def execute(self, context: ExecutionContext) -> Receipt:
        return self._run(
            context,
            [self.command, "--install-extension", context.params["extension"], "--force"],
            timeout=self.timeout,
        )
