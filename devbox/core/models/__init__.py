"""
Domain models — Pydantic types for devbox.

All models are re-exported here for convenient access:

    from devbox.core.models import Action, Receipt, ToolDescriptor, RepoDescriptor
"""

from devbox.core.models.action import Action, Receipt
from devbox.core.models.repo import RepoDescriptor, RepoSyncResult, repo_name_from_url
from devbox.core.models.settings import InstallSettings, Settings, SyncSettings
from devbox.core.models.tool import FlatpakRemote, InstallerCatalog, ToolDescriptor

__all__ = [
    # action.py
    "Action",
    "Receipt",
    # repo.py
    "RepoDescriptor",
    "RepoSyncResult",
    "repo_name_from_url",
    # settings.py
    "InstallSettings",
    "Settings",
    "SyncSettings",
    # tool.py
    "FlatpakRemote",
    "InstallerCatalog",
    "ToolDescriptor",
]
