"""
CLI command for the workstation tool installer.

Thin wrapper over ``devbox.core.use_cases.install``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from devbox.core.services.tool_install import InstallStep
from devbox.ui.cli.common import CONTEXT_SETTINGS, cli_state, load_cli_settings

_STEP_STYLE = {
    "installed": ("✓", "green"),
    "removed-duplicate": ("⚠️ ", "yellow"),
    "present": ("•", "white"),
    "planned": ("…", "cyan"),
    "failed": ("✗", "red"),
}


def _print_step(step: InstallStep) -> None:
    icon, color = _STEP_STYLE.get(step.outcome, ("?", "white"))
    click.secho(f"   {icon} {step.target} ", fg=color, nl=False)
    click.echo(step.message)


@click.command(context_settings=CONTEXT_SETTINGS)
@click.option(
    "--catalog",
    "catalog_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Catalog YAML to install from (default: built-in).",
)
@click.option("--dry-run", is_flag=True, help="Check what is installed, change nothing.")
@click.option("--strict", is_flag=True, help="Exit 1 if any step failed.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(
    ctx: click.Context,
    catalog_path: Path | None,
    dry_run: bool,
    strict: bool,
    as_json: bool,
) -> None:
    """Install the developer tool set on a Fedora workstation.

    \b
    Installs (skipping anything already present):
      Slack, Kdenlive, Kooha, Podman Desktop (Flatpak)
      ffmpeg, Podman, Docker Engine, Python3 + pip, Go, Yarn,
      Git, GitHub CLI, libnotify (dnf)
      VS Code + extensions, OpenShift CLI (oc, kubectl), kustomize

    \b
    Behaviour:
      1. Tools whose command already exists are skipped.
      2. If the command exists natively AND a Flatpak copy is installed,
         the Flatpak copy is uninstalled so only one version remains.
      3. Docker Engine by default; Docker Desktop on request.

    \b
    Environment:
      INSTALL_DOCKER_DESKTOP=true   install Docker Desktop (default: false)

    \b
    Examples:
      install-dev-tools
      INSTALL_DOCKER_DESKTOP=true install-dev-tools
      install-dev-tools --dry-run
    """
    from devbox.core.use_cases.install import run_install

    state = cli_state(ctx)
    settings, config_path = load_cli_settings(ctx)
    strict = strict or settings.install.strict

    if not as_json and not state.get("quiet"):
        mode = "[dry-run] " if dry_run else ""
        click.secho(f"\n🧰 {mode}Checking developer tools", fg="cyan", bold=True)

    result = run_install(
        settings=settings,
        config_path=config_path,
        catalog_path=catalog_path,
        dry_run=dry_run,
        on_step=None if as_json else _print_step,
    )
    report = result.report

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error or (strict and report and report.failed):
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    assert report is not None
    click.echo()
    if report.failed:
        click.secho(
            f"⚠️  {report.failed}/{report.total} steps failed. See messages above.",
            fg="yellow",
            bold=True,
        )
    elif dry_run:
        click.secho(
            f"✅ [dry-run] Check complete: {report.planned} step(s) would run. Nothing was changed.",
            fg="green",
            bold=True,
        )
    else:
        click.secho("✅ All tools checked. Flatpak duplicates removed if any.", fg="green", bold=True)
    if dry_run:
        click.echo(
            f"   Planned: {report.planned} | Already present: {report.present} | Failed: {report.failed}"
        )
    else:
        click.echo(
            f"   Changed: {report.changed} | Already present: {report.present} | Failed: {report.failed}"
        )
    click.echo()

    if strict and report.failed:
        sys.exit(1)
