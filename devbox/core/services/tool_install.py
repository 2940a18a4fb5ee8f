"""
Tool installer — idempotent walk over the installer catalog.

Order of work:

    1. base packages (dnf)
    2. Flatpak remote (added when missing)
    3. every catalog tool for the selected Docker variant
    4. editor extensions (when the editor is present)

Each tool is checked first. Present → skip, and remove a Flatpak copy
if a native binary already provides the command. Missing → install
through its channel. Every step yields an ``InstallStep``; a failed step
never stops the ones after it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, Literal

from devbox.adapters.registry import AdapterRegistry
from devbox.core.models.action import Action, Receipt
from devbox.core.models.tool import InstallerCatalog, ToolDescriptor
from devbox.core.services.tool_detection import (
    flatpak_installed,
    flatpak_remotes,
    has_cmd,
    installed_extensions,
)

logger = logging.getLogger(__name__)

StepKind = Literal["base", "remote", "tool", "extension"]
Outcome = Literal["installed", "present", "removed-duplicate", "planned", "failed"]


@dataclass
class InstallStep:
    """What the installer did for one target."""

    kind: StepKind
    target: str
    outcome: Outcome
    message: str = ""
    receipts: list[Receipt] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return self.outcome == "failed"

    @property
    def changed(self) -> bool:
        return self.outcome in ("installed", "removed-duplicate")

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "target": self.target,
            "outcome": self.outcome,
            "message": self.message,
            "commands": [r.command_line for r in self.receipts if r.command],
        }


@dataclass
class InstallReport:
    """All steps of one installer run."""

    steps: list[InstallStep] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.steps)

    @property
    def failed(self) -> int:
        return sum(1 for s in self.steps if s.failed)

    @property
    def changed(self) -> int:
        return sum(1 for s in self.steps if s.changed)

    @property
    def present(self) -> int:
        return sum(1 for s in self.steps if s.outcome == "present")

    @property
    def planned(self) -> int:
        return sum(1 for s in self.steps if s.outcome == "planned")

    @property
    def status(self) -> str:
        if self.failed == 0:
            return "ok"
        if self.failed < self.total:
            return "partial"
        return "failed"

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "total": self.total,
            "changed": self.changed,
            "present": self.present,
            "planned": self.planned,
            "failed": self.failed,
            "steps": [s.to_dict() for s in self.steps],
        }


class ToolInstaller:
    """Install the catalog through the adapter registry.

    Args:
        catalog: What to install.
        registry: Registry with ``dnf``, ``flatpak``, ``shell`` and
            ``editor`` adapters (or mocks standing in for them).
        docker_desktop: Select ``docker-desktop`` variant tools instead
            of ``docker-engine`` ones.
    """

    def __init__(
        self,
        catalog: InstallerCatalog,
        registry: AdapterRegistry,
        *,
        docker_desktop: bool = False,
    ):
        self.catalog = catalog
        self.registry = registry
        self.docker_desktop = docker_desktop

    def run(self) -> InstallReport:
        return InstallReport(steps=list(self.iter_steps()))

    def iter_steps(self) -> Iterator[InstallStep]:
        """Run every step in order, yielding each as it completes."""
        if self.catalog.base_packages:
            yield self.ensure_base_packages()
        if self._needs_flatpak():
            yield self.ensure_flatpak_remote()
        for tool in self.catalog.tools_for(docker_desktop=self.docker_desktop):
            yield self.ensure_tool(tool)
        yield from self.ensure_extensions()

    # ── Steps ───────────────────────────────────────────────────

    def ensure_base_packages(self) -> InstallStep:
        packages = self.catalog.base_packages
        receipt = self._execute(
            "dnf", "install", "base", packages=packages,
        )
        return self._step_from("base", "base packages", receipt, f"Ensured {', '.join(packages)}.")

    def ensure_flatpak_remote(self) -> InstallStep:
        remote = self.catalog.flatpak_remote
        if remote.name in flatpak_remotes():
            return InstallStep("remote", remote.name, "present", f"Flatpak remote {remote.name} already configured.")
        receipt = self._execute(
            "flatpak", "remote_add", remote.name,
            remote=remote.name, url=remote.url,
        )
        return self._step_from("remote", remote.name, receipt, f"Added Flatpak remote {remote.name}.")

    def ensure_tool(self, tool: ToolDescriptor) -> InstallStep:
        """Check one tool and install it, or drop its Flatpak duplicate."""
        present = next((cmd for cmd in tool.commands if has_cmd(cmd)), None)
        if present:
            return self._handle_present(tool, present)

        if tool.channel == "flatpak":
            if flatpak_installed(tool.package):
                return InstallStep("tool", tool.name, "present", f"{tool.package} (Flatpak) already installed.")
            receipt = self._execute(
                "flatpak", "install", tool.name,
                remote=self.catalog.flatpak_remote.name, app_id=tool.package,
            )
            via = "Flatpak"
        elif tool.channel == "native":
            receipt = self._execute("dnf", "install", tool.name, packages=[tool.package])
            via = "dnf"
        else:
            receipt = self._execute("shell", "run", tool.name, command=tool.script)
            via = "install script"

        step = self._step_from("tool", tool.name, receipt, f"Installed {tool.display_name} via {via}.")
        if step.outcome == "installed" and tool.post_install.strip():
            post = self._execute("shell", "run", f"{tool.name}:post-install", command=tool.post_install)
            step.receipts.append(post)
            if post.failed:
                step.outcome = "failed"
                step.message = f"{tool.display_name} installed but post-install failed: {post.error}"
        return step

    def ensure_extensions(self) -> Iterator[InstallStep]:
        editor = self.catalog.editor_command
        if not self.catalog.extensions:
            return
        if not has_cmd(editor):
            logger.info("%s not found, skipping %d extensions", editor, len(self.catalog.extensions))
            return

        installed = installed_extensions(editor)
        for ext in self.catalog.extensions:
            if ext.lower() in installed:
                yield InstallStep("extension", ext, "present", f"Extension {ext} already installed.")
                continue
            receipt = self._execute("editor", "install_extension", ext, extension=ext)
            yield self._step_from("extension", ext, receipt, f"Installed extension {ext}.")

    # ── Helpers ─────────────────────────────────────────────────

    def _handle_present(self, tool: ToolDescriptor, command: str) -> InstallStep:
        duplicate = tool.duplicate_flatpak
        if not duplicate or not flatpak_installed(duplicate):
            return InstallStep("tool", tool.name, "present", f"{command} already present. Skip.")

        logger.warning(
            "Both native (%s) and Flatpak (%s) found. Removing Flatpak version",
            command, duplicate,
        )
        receipt = self._execute("flatpak", "uninstall", f"{tool.name}:duplicate", app_id=duplicate)
        if receipt.ok:
            return InstallStep(
                "tool", tool.name, "removed-duplicate",
                f"{command} is native; removed Flatpak {duplicate}.", [receipt],
            )
        return self._step_from("tool", tool.name, receipt, "")

    def _execute(self, adapter: str, operation: str, target: str, **params: Any) -> Receipt:
        action = Action(
            id=f"{adapter}:{operation}:{target}",
            adapter=adapter,
            operation=operation,
            params=params,
        )
        return self.registry.execute(action)

    @staticmethod
    def _step_from(kind: StepKind, target: str, receipt: Receipt, message: str) -> InstallStep:
        if receipt.skipped:
            return InstallStep(kind, target, "planned", receipt.output, [receipt])
        if receipt.failed:
            return InstallStep(kind, target, "failed", receipt.error or "failed", [receipt])
        return InstallStep(kind, target, "installed", message, [receipt])

    def _needs_flatpak(self) -> bool:
        tools = self.catalog.tools_for(docker_desktop=self.docker_desktop)
        return any(t.channel == "flatpak" for t in tools)
