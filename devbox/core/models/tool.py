"""
Tool catalog models — what the installer knows how to install.

A catalog is a static list of tools, each checked by command name and
installed through one channel: the native package manager, Flatpak,
or an install script. Loaded from the built-in defaults or a YAML file.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator

Channel = Literal["native", "flatpak", "script"]
Variant = Literal["docker-engine", "docker-desktop"]


class ToolDescriptor(BaseModel):
    """One installable tool.

    ``name`` is the command whose presence means "installed". For the
    Flatpak channel ``package`` is the Flatpak application id; for the
    native channel it is the dnf package name.
    """

    name: str
    package: str
    channel: Channel = "native"
    label: str = ""

    alternates: list[str] = Field(default_factory=list)  # other commands that count
    flatpak_id: str | None = None   # Flatpak duplicate to remove when native exists
    script: str = ""                # shell snippet (channel == "script")
    post_install: str = ""          # shell snippet run after a fresh install
    variant: Variant | None = None

    @model_validator(mode="after")
    def _check_script(self) -> ToolDescriptor:
        if self.channel == "script" and not self.script.strip():
            raise ValueError(f"tool '{self.name}': channel 'script' requires a script")
        return self

    @property
    def display_name(self) -> str:
        return self.label or self.name

    @property
    def commands(self) -> list[str]:
        """All command names that count as this tool being present."""
        return [self.name, *self.alternates]

    @property
    def duplicate_flatpak(self) -> str | None:
        """Flatpak id that duplicates a native install of this tool."""
        if self.flatpak_id:
            return self.flatpak_id
        if self.channel == "flatpak":
            return self.package
        return None


class FlatpakRemote(BaseModel):
    name: str = "flathub"
    url: str = "https://flathub.org/repo/flathub.flatpakrepo"


class InstallerCatalog(BaseModel):
    """Everything the installer walks through, in order."""

    base_packages: list[str] = Field(default_factory=list)
    flatpak_remote: FlatpakRemote = Field(default_factory=FlatpakRemote)
    tools: list[ToolDescriptor] = Field(default_factory=list)
    editor_command: str = "code"
    extensions: list[str] = Field(default_factory=list)

    def tools_for(self, *, docker_desktop: bool) -> list[ToolDescriptor]:
        """Tools applicable to the selected container variant."""
        wanted = "docker-desktop" if docker_desktop else "docker-engine"
        return [t for t in self.tools if t.variant is None or t.variant == wanted]
