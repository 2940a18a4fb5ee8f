"""
Git adapter — version control operations used by repository sync.

Uses the git CLI. Every operation runs in the directory named by the
action's ``cwd``; nothing here changes the process working directory.
"""

from __future__ import annotations

import logging
import shutil

from devbox.adapters.base import Adapter, ExecutionContext
from devbox.core.models.action import Receipt

logger = logging.getLogger(__name__)

_HEADS_PREFIX = "refs/heads/"


def parse_symref_head(output: str) -> str | None:
    """Extract the branch HEAD points to from ``git ls-remote --symref`` output.

    The first line looks like ``ref: refs/heads/main<TAB>HEAD``.
    """
    for line in output.splitlines():
        if not line.startswith("ref:"):
            continue
        target, _, ref_name = line[len("ref:"):].strip().partition("\t")
        if ref_name.strip() != "HEAD":
            continue
        if target.startswith(_HEADS_PREFIX):
            return target[len(_HEADS_PREFIX):] or None
    return None


class GitAdapter(Adapter):
    """Git operations for clone / remote / fetch / checkout / merge.

    Action params by operation:
        clone:          url, dest
        remotes:        —
        remote_add:     remote, url
        remote_url:     remote
        default_branch: remote
        fetch:          remote, branch
        ref_exists:     ref
        is_ancestor:    ancestor, descendant
        rev_parse:      ref
        toplevel:       —
        checkout:       branch
        create_branch:  branch, start_point (optional), track (bool)
        merge_ff:       ref
    """

    operations = {
        "clone": ("url", "dest"),
        "remotes": (),
        "remote_add": ("remote", "url"),
        "remote_url": ("remote",),
        "default_branch": ("remote",),
        "fetch": ("remote", "branch"),
        "ref_exists": ("ref",),
        "is_ancestor": ("ancestor", "descendant"),
        "rev_parse": ("ref",),
        "toplevel": (),
        "checkout": ("branch",),
        "create_branch": ("branch",),
        "merge_ff": ("ref",),
    }

    def __init__(self, *, network_timeout: int = 600, local_timeout: int = 30):
        self.network_timeout = network_timeout
        self.local_timeout = local_timeout

    @property
    def name(self) -> str:
        return "git"

    def is_available(self) -> bool:
        return shutil.which("git") is not None

    def execute(self, context: ExecutionContext) -> Receipt:
        handler = getattr(self, f"_{context.action.operation}")
        return handler(context)

    # ── Operations ──────────────────────────────────────────────

    def _clone(self, ctx: ExecutionContext) -> Receipt:
        return self._git(
            ctx, ["clone", "--", ctx.params["url"], str(ctx.params["dest"])],
            network=True,
        )

    def _remotes(self, ctx: ExecutionContext) -> Receipt:
        receipt = self._git(ctx, ["remote"])
        if receipt.ok:
            receipt.metadata["remotes"] = [r for r in receipt.output.splitlines() if r.strip()]
        return receipt

    def _remote_add(self, ctx: ExecutionContext) -> Receipt:
        return self._git(ctx, ["remote", "add", ctx.params["remote"], ctx.params["url"]])

    def _remote_url(self, ctx: ExecutionContext) -> Receipt:
        return self._git(ctx, ["remote", "get-url", ctx.params["remote"]])

    def _default_branch(self, ctx: ExecutionContext) -> Receipt:
        remote = ctx.params["remote"]
        receipt = self._git(ctx, ["ls-remote", "--symref", remote, "HEAD"], network=True)
        if not receipt.ok:
            return receipt

        branch = parse_symref_head(receipt.output)
        if branch is None:
            return Receipt.failure(
                adapter=self.name,
                action_id=ctx.action.id,
                error=f"Remote '{remote}' does not advertise a symbolic HEAD",
                output=receipt.output,
                command=receipt.command,
                return_code=receipt.return_code,
            )
        receipt.metadata["branch"] = branch
        return receipt

    def _fetch(self, ctx: ExecutionContext) -> Receipt:
        return self._git(
            ctx, ["fetch", ctx.params["remote"], ctx.params["branch"]],
            network=True,
        )

    def _ref_exists(self, ctx: ExecutionContext) -> Receipt:
        ref = ctx.params["ref"]
        receipt = self._git(ctx, ["show-ref", "--verify", "--quiet", ref])
        if receipt.ok:
            receipt.metadata["exists"] = True
        elif receipt.return_code == 1:
            # show-ref exits 1 for a missing ref: that is an answer, not an error
            receipt = Receipt.success(
                adapter=self.name,
                action_id=ctx.action.id,
                command=receipt.command,
                return_code=1,
                metadata={"exists": False},
            )
        return receipt

    def _is_ancestor(self, ctx: ExecutionContext) -> Receipt:
        receipt = self._git(
            ctx, ["merge-base", "--is-ancestor", ctx.params["ancestor"], ctx.params["descendant"]],
        )
        if receipt.ok:
            receipt.metadata["ancestor"] = True
        elif receipt.return_code == 1:
            # exit 1 is "no"; anything else is a real error
            receipt = Receipt.success(
                adapter=self.name,
                action_id=ctx.action.id,
                command=receipt.command,
                return_code=1,
                metadata={"ancestor": False},
            )
        return receipt

    def _rev_parse(self, ctx: ExecutionContext) -> Receipt:
        return self._git(ctx, ["rev-parse", "--verify", "--quiet", ctx.params["ref"]])

    def _toplevel(self, ctx: ExecutionContext) -> Receipt:
        return self._git(ctx, ["rev-parse", "--show-toplevel"])

    def _checkout(self, ctx: ExecutionContext) -> Receipt:
        return self._git(ctx, ["checkout", ctx.params["branch"]])

    def _create_branch(self, ctx: ExecutionContext) -> Receipt:
        args = ["checkout", "-b", ctx.params["branch"]]
        start_point = ctx.params.get("start_point")
        if start_point:
            args += ["--track" if ctx.params.get("track") else "--no-track", start_point]
        return self._git(ctx, args)

    def _merge_ff(self, ctx: ExecutionContext) -> Receipt:
        return self._git(ctx, ["merge", "--ff-only", ctx.params["ref"]])

    # ── Helpers ─────────────────────────────────────────────────

    def _git(self, ctx: ExecutionContext, args: list[str], *, network: bool = False) -> Receipt:
        timeout = self.network_timeout if network else self.local_timeout
        return self._run(ctx, ["git", *args], timeout=timeout)
