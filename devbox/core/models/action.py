"""
Action and Receipt models — the command execution contract.

An Action names one external command to run (``git clone``,
``dnf install``, ``flatpak uninstall`` ...). A Receipt records how it
went. Services hand Actions to the adapter registry and only ever look
at Receipts: adapters report failures, they do not raise them.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

ReceiptStatus = Literal["ok", "skipped", "failed"]


class Action(BaseModel):
    """A requested external operation.

    ``operation`` selects what the adapter does and ``params`` carries
    its arguments. ``cwd`` names the directory the command runs in; the
    process working directory is never changed.
    """

    id: str                         # e.g. "git:clone:app"
    adapter: str                    # registry key: git, dnf, flatpak, shell, editor
    operation: str = ""
    params: dict[str, Any] = Field(default_factory=dict)
    cwd: str | None = None


class Receipt(BaseModel):
    """What running an Action produced."""

    adapter: str
    action_id: str
    status: ReceiptStatus = "ok"

    started_at: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    duration_ms: int = 0

    command: list[str] = Field(default_factory=list)   # argv as executed
    return_code: int | None = None
    output: str = ""                                   # stdout, or the skip reason
    error: str | None = None                           # stderr or a synthesized message

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @property
    def skipped(self) -> bool:
        return self.status == "skipped"

    @property
    def command_line(self) -> str:
        return " ".join(self.command)

    @property
    def summary(self) -> str:
        """First non-empty line of the error (or output), for one-line reports."""
        text = self.error if self.failed else self.output
        for line in (text or "").splitlines():
            if line.strip():
                return line.strip()
        return ""

    @classmethod
    def success(cls, adapter: str, action_id: str, output: str = "", **kwargs: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, status="ok", output=output, **kwargs)

    @classmethod
    def failure(cls, adapter: str, action_id: str, error: str, **kwargs: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, status="failed", error=error, **kwargs)

    @classmethod
    def skip(cls, adapter: str, action_id: str, reason: str = "", **kwargs: Any) -> Receipt:
        """A receipt for an action that was deliberately not run (dry-run)."""
        return cls(adapter=adapter, action_id=action_id, status="skipped", output=reason, **kwargs)
