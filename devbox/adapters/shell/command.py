"""
Shell command adapter — run install scripts through ``sh``.

Used for tools that are not packaged: tarball downloads, vendor repo
setup, symlinks after an install. Scripts get ``$SUDO`` in their
environment: ``sudo`` for normal users, empty when running as root.
"""

from __future__ import annotations

import logging
import os
import shutil

from devbox.adapters.base import Adapter, ExecutionContext
from devbox.adapters.packages.dnf import sudo_prefix
from devbox.core.models.action import Receipt

logger = logging.getLogger(__name__)


class ShellCommandAdapter(Adapter):
    """Execute shell snippets and capture output.

    Action params:
        command (str): The script to execute with ``sh -c``.
        env (dict): Extra environment variables.
    """

    operations = {"run": ("command",)}

    def __init__(self, *, timeout: int = 1800):
        self.timeout = timeout

    @property
    def name(self) -> str:
        return "shell"

    def is_available(self) -> bool:
        return shutil.which("sh") is not None

    def execute(self, context: ExecutionContext) -> Receipt:
        env = os.environ.copy()
        env["SUDO"] = " ".join(sudo_prefix())
        env.update({k: str(v) for k, v in (context.params.get("env") or {}).items()})

        return self._run(
            context,
            ["sh", "-e", "-c", context.params["command"]],
            timeout=self.timeout,
            env=env,
        )
