"""
dnf adapter — native package installs on Fedora-family systems.
"""

from __future__ import annotations

import logging
import os
import shutil

from devbox.adapters.base import Adapter, ExecutionContext
from devbox.core.models.action import Receipt

logger = logging.getLogger(__name__)


def sudo_prefix() -> list[str]:
    """``["sudo"]`` unless we already run as root."""
    if os.geteuid() == 0:
        return []
    return ["sudo"]


class DnfAdapter(Adapter):
    """Install packages with ``dnf install -y``.

    Action params:
        packages (list[str]): Packages to install.
    """

    operations = {"install": ("packages",)}

    def __init__(self, *, timeout: int = 1800):
        self.timeout = timeout

    @property
    def name(self) -> str:
        return "dnf"

    def is_available(self) -> bool:
        return shutil.which("dnf") is not None

    def execute(self, context: ExecutionContext) -> Receipt:
        packages = [str(p) for p in context.params["packages"]]
        return self._run(
            context,
            [*sudo_prefix(), "dnf", "install", "-y", *packages],
            timeout=self.timeout,
            metadata={"packages": packages},
        )
