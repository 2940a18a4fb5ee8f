"""
Static data shipped with devbox.

The built-in installer catalog lives in ``catalogs/default.yml`` and is
loaded once per process.

Usage::

    from devbox.core.data import default_catalog

    catalog = default_catalog()
    tools = catalog.tools_for(docker_desktop=False)
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from devbox.core.config.loader import load_catalog
from devbox.core.models.tool import InstallerCatalog

_DATA_DIR = Path(__file__).parent

DEFAULT_CATALOG_PATH = _DATA_DIR / "catalogs" / "default.yml"


@lru_cache(maxsize=1)
def default_catalog() -> InstallerCatalog:
    """The built-in Fedora workstation catalog."""
    return load_catalog(DEFAULT_CATALOG_PATH)
