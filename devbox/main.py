"""
devbox — CLI entrypoint.

Usage:
    devbox --help
    devbox install [--dry-run]
    devbox sync repo-list.txt ~/src
    devbox config check

The two workflows are also installed as standalone commands,
``install-dev-tools`` and ``sync-repos``.
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from devbox import __version__
from devbox.core.observability.logging_config import (
    LOG_FILE_ENV,
    LOG_FILE_LEVEL_ENV,
    resolve_level,
    setup_logging,
)
from devbox.ui.cli.common import CONTEXT_SETTINGS
from devbox.ui.cli.install import install
from devbox.ui.cli.sync import sync


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(version=__version__, prog_name="devbox")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, path_type=Path),
    default=None,
    help="Path to devbox.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: Path | None,
) -> None:
    """devbox — workstation tool installer and repository sync."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = config_path

    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(LOG_FILE_ENV),
        log_file_level=os.environ.get(LOG_FILE_LEVEL_ENV),
    )


@cli.group()
def config() -> None:
    """Configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate devbox.yml and the installer catalog it selects.

    Also reports which of the tools devbox drives (git, dnf, flatpak,
    sh, the editor) are on this machine.
    """
    from devbox.core.config.loader import ConfigError, load_settings
    from devbox.core.use_cases import install as install_uc
    from devbox.core.use_cases import sync as sync_uc

    errors: list[str] = []
    source_path: Path | None = None
    catalog_source = ""
    tool_count = extension_count = 0
    adapters: dict[str, dict] = {}

    try:
        settings, source_path = load_settings(ctx.obj.get("config_path"))
        catalog, catalog_source = install_uc.resolve_catalog(None, settings, source_path)
        tool_count = len(catalog.tools)
        extension_count = len(catalog.extensions)
        adapters.update(sync_uc.build_registry(settings).adapter_status())
        adapters.update(
            install_uc.build_registry(settings, editor_command=catalog.editor_command).adapter_status()
        )
    except ConfigError as e:
        errors.append(str(e))

    if as_json:
        click.echo(json.dumps({
            "valid": not errors,
            "config": str(source_path) if source_path else None,
            "catalog": catalog_source,
            "tools": tool_count,
            "extensions": extension_count,
            "adapters": adapters,
            "errors": errors,
        }, indent=2))
        sys.exit(0 if not errors else 1)

    if errors:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in errors:
            click.echo(f"   • {err}")
        click.echo()
        sys.exit(1)

    click.secho("✅ Configuration is valid", fg="green", bold=True)
    click.echo(f"   Config:  {source_path or '(defaults)'}")
    click.echo(f"   Catalog: {catalog_source} ({tool_count} tools, {extension_count} extensions)")
    click.echo()
    click.secho("Adapters:", bold=True)
    for name, status in adapters.items():
        if status["available"]:
            click.secho(f"   ✓ {name}", fg="green")
        else:
            click.secho(f"   ✗ {name} (not installed)", fg="yellow")
    click.echo()


cli.add_command(install)
cli.add_command(sync)


def install_dev_tools() -> None:
    """Entry point for the standalone ``install-dev-tools`` command."""
    install.main(prog_name="install-dev-tools")


def sync_repos() -> None:
    """Entry point for the standalone ``sync-repos`` command."""
    sync.main(prog_name="sync-repos")


if __name__ == "__main__":
    cli()
