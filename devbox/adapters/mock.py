"""
Mock adapter — scripted stand-in for git, dnf, flatpak, shell or editor.

Registered under the name of the adapter it replaces. Unscripted
actions succeed; scripted ones return the stored receipt, matched by
action id first and operation second. Every context it sees is kept
for assertions.
"""

from __future__ import annotations

from collections.abc import Mapping

from devbox.adapters.base import Adapter, ExecutionContext
from devbox.core.models.action import Receipt


class MockAdapter(Adapter):
    """Test double for any adapter.

    Pass ``operations`` (usually the real adapter's table) to have
    actions validated exactly as the real adapter would.
    """

    def __init__(
        self,
        adapter_name: str = "mock",
        available: bool = True,
        default_output: str = "[mock] executed",
        operations: Mapping[str, tuple[str, ...]] | None = None,
    ):
        self._name = adapter_name
        self._available = available
        self._default_output = default_output
        self._by_id: dict[str, Receipt] = {}
        self._by_operation: dict[str, Receipt] = {}
        self._seen: list[ExecutionContext] = []
        self.operations = dict(operations or {})

    @property
    def name(self) -> str:
        return self._name

    def is_available(self) -> bool:
        return self._available

    # ── Scripting ───────────────────────────────────────────────

    def set_response(self, action_id: str, receipt: Receipt) -> None:
        self._by_id[action_id] = receipt

    def set_operation_response(self, operation: str, receipt: Receipt) -> None:
        """Answer every action of ``operation`` with ``receipt``."""
        self._by_operation[operation] = receipt

    def set_failure(self, action_id: str, error: str = "Mock failure") -> None:
        self.set_response(
            action_id,
            Receipt.failure(adapter=self._name, action_id=action_id, error=error, return_code=1),
        )

    def reset(self) -> None:
        self._seen.clear()
        self._by_id.clear()
        self._by_operation.clear()

    # ── Inspection ──────────────────────────────────────────────

    @property
    def call_log(self) -> list[ExecutionContext]:
        return self._seen

    @property
    def call_count(self) -> int:
        return len(self._seen)

    def calls_for(self, operation: str) -> list[ExecutionContext]:
        return [ctx for ctx in self._seen if ctx.action.operation == operation]

    # ── Adapter protocol ────────────────────────────────────────

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        if self.operations:
            return super().validate(context)
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        self._seen.append(context)
        action = context.action

        scripted = self._by_id.get(action.id)
        if scripted is None:
            scripted = self._by_operation.get(action.operation)
        if scripted is not None:
            return scripted

        return Receipt.success(
            adapter=self._name,
            action_id=action.id,
            output=self._default_output,
            metadata={"mock": True},
        )
