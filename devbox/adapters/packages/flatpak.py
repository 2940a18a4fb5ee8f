"""
Flatpak adapter — install and remove Flatpak applications, add remotes.
"""

from __future__ import annotations

import logging
import shutil

from devbox.adapters.base import Adapter, ExecutionContext
from devbox.core.models.action import Receipt

logger = logging.getLogger(__name__)


class FlatpakAdapter(Adapter):
    """Flatpak operations.

    Action params by operation:
        install:    remote, app_id
        uninstall:  app_id
        remote_add: remote, url
    """

    operations = {
        "install": ("remote", "app_id"),
        "uninstall": ("app_id",),
        "remote_add": ("remote", "url"),
    }

    def __init__(self, *, timeout: int = 1800):
        self.timeout = timeout

    @property
    def name(self) -> str:
        return "flatpak"

    def is_available(self) -> bool:
        return shutil.which("flatpak") is not None

    def execute(self, context: ExecutionContext) -> Receipt:
        params = context.params
        operation = context.action.operation

        if operation == "install":
            cmd = ["flatpak", "install", "-y", params["remote"], params["app_id"]]
        elif operation == "uninstall":
            cmd = ["flatpak", "uninstall", "-y", params["app_id"]]
        else:
            cmd = ["flatpak", "remote-add", "--if-not-exists", params["remote"], params["url"]]

        return self._run(context, cmd, timeout=self.timeout)
