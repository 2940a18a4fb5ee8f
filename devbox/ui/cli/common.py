"""
Shared CLI plumbing for commands that run under the ``devbox`` group
or on their own (``install-dev-tools``, ``sync-repos``).
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from devbox.core.config.loader import ConfigError, load_settings
from devbox.core.models.settings import Settings
from devbox.core.observability.logging_config import setup_logging_from_env

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def cli_state(ctx: click.Context) -> dict:
    """The group's ``ctx.obj``; sets up logging when run standalone."""
    root = ctx.find_root()
    if root.obj is None:
        root.obj = {}
        setup_logging_from_env()
    return root.obj


def load_cli_settings(ctx: click.Context) -> tuple[Settings, Path | None]:
    """Load devbox.yml for a command, exiting 1 on a broken file."""
    state = cli_state(ctx)
    try:
        return load_settings(state.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)
