"""
Adapter base — the contract between services and external tools.

Services never call git, dnf, flatpak or code directly. They build
Actions and dispatch them through the registry to an adapter, which
runs the command and hands back a Receipt.
"""

from __future__ import annotations

import logging
import subprocess
import time
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel

from devbox.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)


class ExecutionContext(BaseModel):
    """Everything an adapter needs to execute an action."""

    action: Action
    dry_run: bool = False

    @property
    def params(self) -> dict[str, Any]:
        return self.action.params

    @property
    def working_dir(self) -> str | None:
        return self.action.cwd


class Adapter(ABC):
    """Abstract base class for all adapters.

    Adapters perform external side effects and return receipts.
    They NEVER raise exceptions — failures are captured in the Receipt.

    Subclasses declare ``operations``: a map of operation name to the
    params it requires. ``validate`` checks against it.
    """

    operations: Mapping[str, tuple[str, ...]] = {}

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g. 'git', 'dnf', 'flatpak')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the underlying binary is installed. Fast, never raises."""

    @abstractmethod
    def execute(self, context: ExecutionContext) -> Receipt:
        """Execute the action and return a receipt. MUST never raise."""

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        """Check the operation is known and its required params are set.

        Returns:
            (is_valid, error_message). error_message is empty if valid.
        """
        operation = context.action.operation
        if operation not in self.operations:
            valid = ", ".join(sorted(self.operations))
            return False, f"Unknown operation '{operation}'. Valid: {valid}"

        missing = [p for p in self.operations[operation] if not context.params.get(p)]
        if missing:
            return False, f"Missing required param(s) for {operation}: {', '.join(missing)}"
        return True, ""

    # ── Helpers ─────────────────────────────────────────────────

    def _run(
        self,
        context: ExecutionContext,
        command: Sequence[str],
        *,
        timeout: int,
        env: Mapping[str, str] | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Receipt:
        """Run a command for ``context`` and turn the outcome into a receipt."""
        cmd = list(command)
        cwd = context.working_dir
        action_id = context.action.id
        logger.debug("Executing: %s (cwd=%s)", " ".join(cmd), cwd)
        start = time.monotonic()

        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=timeout,
                env=dict(env) if env is not None else None,
            )
        except subprocess.TimeoutExpired:
            return Receipt.failure(
                adapter=self.name,
                action_id=action_id,
                error=f"Command timed out after {timeout}s",
                command=cmd,
                metadata=metadata or {},
            )
        except OSError as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=action_id,
                error=f"Command execution error: {e}",
                command=cmd,
                metadata=metadata or {},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        output = result.stdout.strip()
        stderr = result.stderr.strip()

        if result.returncode == 0:
            return Receipt.success(
                adapter=self.name,
                action_id=action_id,
                output=output,
                duration_ms=elapsed_ms,
                command=cmd,
                return_code=0,
                metadata={"stderr": stderr, **(metadata or {})},
            )

        return Receipt.failure(
            adapter=self.name,
            action_id=action_id,
            error=stderr or f"Command exited with code {result.returncode}",
            output=output,
            duration_ms=elapsed_ms,
            command=cmd,
            return_code=result.returncode,
            metadata=metadata or {},
        )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
