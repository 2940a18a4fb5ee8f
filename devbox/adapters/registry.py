"""
Adapter registry — the one place services send Actions to.

An action names its adapter (``git``, ``dnf``, ``flatpak``, ``shell``,
``editor``); the registry looks it up, validates the action and runs
it. Dry-run stops after validation with a "skipped" receipt, so a
dry-run reports exactly the actions a real run would attempt.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from devbox.adapters.base import Adapter, ExecutionContext
from devbox.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Name → adapter map plus the dispatch rules around it."""

    def __init__(self, *, dry_run: bool = False):
        self._adapters: dict[str, Adapter] = {}
        self._dry_run = dry_run

    def register(self, adapter: Adapter) -> None:
        if adapter.name in self._adapters:
            logger.warning("Replacing adapter %s", adapter.name)
        self._adapters[adapter.name] = adapter

    def adapter_status(self) -> dict[str, dict[str, Any]]:
        """Whether each registered adapter's binary is on this machine."""
        return {
            name: {
                "name": name,
                "available": _safe_available(adapter),
                "type": type(adapter).__name__,
            }
            for name, adapter in self._adapters.items()
        }

    def execute(self, action: Action) -> Receipt:
        """Run ``action`` through its adapter. Never raises."""
        started = time.monotonic()
        receipt = self._dispatch(action)
        receipt.duration_ms = int((time.monotonic() - started) * 1000)

        if receipt.failed:
            logger.info("%s failed: %s", action.id, receipt.summary)
        return receipt

    def _dispatch(self, action: Action) -> Receipt:
        adapter = self._adapters.get(action.adapter)
        if adapter is None:
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"No adapter registered for '{action.adapter}'",
            )

        context = ExecutionContext(action=action, dry_run=self._dry_run)
        try:
            valid, reason = adapter.validate(context)
        except Exception as e:
            valid, reason = False, f"validator raised {e!r}"
        if not valid:
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Validation failed: {reason}",
            )

        if self._dry_run:
            logger.debug("[dry-run] %s %s", action.id, action.params)
            return Receipt.skip(
                adapter=action.adapter,
                action_id=action.id,
                reason=f"[dry-run] Would execute {action.id}",
                metadata={"dry_run": True},
            )

        try:
            return adapter.execute(context)
        except Exception as e:
            # an adapter broke its never-raise contract
            logger.error("Adapter %s raised on %s: %s", action.adapter, action.id, e)
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Unexpected error: {e}",
            )


def _safe_available(adapter: Adapter) -> bool:
    try:
        return adapter.is_available()
    except Exception:
        return False
