"""
Install use case — set up the workstation from the tool catalog.

Resolves the catalog (explicit file, devbox.yml, or built-in default),
wires the package adapters into a registry and runs the installer.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from devbox.adapters.registry import AdapterRegistry
from devbox.core.config.loader import ConfigError, load_catalog, resolve_relative
from devbox.core.data import default_catalog
from devbox.core.models.settings import Settings
from devbox.core.models.tool import InstallerCatalog
from devbox.core.services.tool_install import InstallReport, InstallStep, ToolInstaller

logger = logging.getLogger(__name__)

DOCKER_DESKTOP_ENV = "INSTALL_DOCKER_DESKTOP"


def docker_desktop_requested() -> bool:
    """``INSTALL_DOCKER_DESKTOP=true`` selects Docker Desktop over the engine."""
    return os.environ.get(DOCKER_DESKTOP_ENV, "false").strip().lower() in ("1", "true", "yes")


@dataclass
class InstallResult:
    """Result of an installer run."""

    report: InstallReport | None = None
    catalog_source: str = ""
    docker_desktop: bool = False
    dry_run: bool = False
    error: str | None = None

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            return result

        result["catalog"] = self.catalog_source
        result["docker_desktop"] = self.docker_desktop
        result["dry_run"] = self.dry_run
        if self.report:
            result["report"] = self.report.to_dict()
        return result


def build_registry(settings: Settings, *, editor_command: str = "code", dry_run: bool = False) -> AdapterRegistry:
    """Registry with the real package, shell and editor adapters."""
    from devbox.adapters import DnfAdapter, EditorAdapter, FlatpakAdapter, ShellCommandAdapter

    timeout = settings.install.timeout
    registry = AdapterRegistry(dry_run=dry_run)
    registry.register(DnfAdapter(timeout=timeout))
    registry.register(FlatpakAdapter(timeout=timeout))
    registry.register(ShellCommandAdapter(timeout=timeout))
    registry.register(EditorAdapter(editor_command))
    return registry


def resolve_catalog(
    catalog_path: Path | None,
    settings: Settings,
    config_path: Path | None = None,
) -> tuple[InstallerCatalog, str]:
    """Pick the catalog: explicit path, then devbox.yml, then built-in."""
    if catalog_path is None and settings.install.catalog:
        catalog_path = resolve_relative(settings.install.catalog, config_path)
    if catalog_path is None:
        return default_catalog(), "built-in"
    return load_catalog(catalog_path), str(catalog_path)


def run_install(
    *,
    settings: Settings | None = None,
    config_path: Path | None = None,
    catalog_path: Path | None = None,
    docker_desktop: bool | None = None,
    dry_run: bool = False,
    registry: AdapterRegistry | None = None,
    on_step: Callable[[InstallStep], None] | None = None,
) -> InstallResult:
    """Install every catalog tool that is missing.

    Args:
        settings: Loaded devbox.yml settings (defaults if None).
        config_path: Where the settings came from, for relative paths.
        catalog_path: Explicit catalog YAML; overrides settings.
        docker_desktop: Variant selection; None reads INSTALL_DOCKER_DESKTOP.
        dry_run: Probe for real but only report what would be installed.
        registry: Pre-built registry (tests); built from settings if None.
        on_step: Called with each step as soon as it completes.

    Returns:
        InstallResult with the report, or ``error`` set for a bad catalog.
    """
    settings = settings or Settings()
    if docker_desktop is None:
        docker_desktop = docker_desktop_requested()

    result = InstallResult(docker_desktop=docker_desktop, dry_run=dry_run)

    try:
        catalog, source = resolve_catalog(catalog_path, settings, config_path)
    except ConfigError as e:
        result.error = str(e)
        return result
    result.catalog_source = source

    if registry is None:
        registry = build_registry(settings, editor_command=catalog.editor_command, dry_run=dry_run)

    logger.info(
        "Installing from %s catalog (%s variant%s)",
        source,
        "docker-desktop" if docker_desktop else "docker-engine",
        ", dry-run" if dry_run else "",
    )

    installer = ToolInstaller(catalog, registry, docker_desktop=docker_desktop)
    report = InstallReport()
    for step in installer.iter_steps():
        report.steps.append(step)
        if on_step:
            on_step(step)

    result.report = report
    return result
