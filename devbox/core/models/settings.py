"""
Settings model — the optional devbox.yml configuration file.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class InstallSettings(BaseModel):
    catalog: str | None = None      # path to a catalog YAML, relative to devbox.yml
    strict: bool = False            # exit non-zero when any step failed
    timeout: int = 1800             # seconds per package / script install


class SyncSettings(BaseModel):
    verify_origin: bool = False     # refuse existing clones whose origin differs
    network_timeout: int = 600      # clone / fetch / ls-remote
    local_timeout: int = 30         # everything else


class Settings(BaseModel):
    """Root of devbox.yml. Every section is optional."""

    install: InstallSettings = Field(default_factory=InstallSettings)
    sync: SyncSettings = Field(default_factory=SyncSettings)
