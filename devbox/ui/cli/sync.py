"""
CLI command for repository sync.

Thin wrapper over ``devbox.core.use_cases.sync``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from devbox.core.models.repo import RepoSyncResult
from devbox.ui.cli.common import CONTEXT_SETTINGS, load_cli_settings

_MERGE_STYLE = {
    "fast-forwarded": "green",
    "up-to-date": "green",
    "diverged": "yellow",
    "not-merged": "yellow",
}


def _print_start(name: str) -> None:
    click.echo("-------------------------------")
    click.secho(f"Processing {name} ...", bold=True)


def _print_result(result: RepoSyncResult) -> None:
    for message in result.messages:
        click.echo(f"   {message}")
    if not result.ok:
        click.secho(f"   ✗ {result.error}", fg="red")
        return
    if result.merge in _MERGE_STYLE:
        click.secho(f"   ✓ {result.merge}", fg=_MERGE_STYLE[result.merge])


@click.command(context_settings=CONTEXT_SETTINGS)
@click.argument("repo_list", required=False, type=click.Path(path_type=Path))
@click.argument("local_dir", required=False, type=click.Path(path_type=Path))
@click.option(
    "--verify-origin/--no-verify-origin",
    default=None,
    help="Refuse existing clones whose origin is not the fork URL.",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def sync(
    ctx: click.Context,
    repo_list: Path | None,
    local_dir: Path | None,
    verify_origin: bool | None,
    as_json: bool,
) -> None:
    """Clone forks and fast-forward them to their upstreams.

    \b
    REPO_LIST has one repository per line:
      <fork-url> [<upstream-url>]
    Blank lines and lines starting with # are ignored.

    Forks are cloned into LOCAL_DIR once. When an upstream is given it is
    added as the "upstream" remote, its default branch is fetched and the
    local branch of that name is fast-forwarded. Branches that cannot be
    fast-forwarded are reported and left alone. A failing repository never stops the run.
    """
    from devbox.core.use_cases.sync import run_sync

    if repo_list is None or local_dir is None:
        click.echo(f"Usage: {ctx.command_path} <repo-list-file> <local-dir>")
        sys.exit(1)

    settings, _ = load_cli_settings(ctx)

    if not as_json:
        click.echo(f"Starting repo sync in {local_dir.expanduser().resolve()} ...")

    result = run_sync(
        repo_list,
        local_dir,
        settings=settings,
        verify_origin=verify_origin,
        on_start=None if as_json else _print_start,
        on_result=None if as_json else _print_result,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error:
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    report = result.report
    assert report is not None
    click.echo("-------------------------------")
    status_color = {"ok": "green", "partial": "yellow", "failed": "red"}.get(report.status, "white")
    click.secho("✅ All repos processed.", fg=status_color, bold=True)
    click.echo(
        f"   Synced: {report.succeeded}/{report.total} | "
        f"Diverged: {report.diverged} | Not merged: {report.not_merged} | "
        f"Failed: {report.failed}"
    )
