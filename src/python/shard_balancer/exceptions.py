"""Exception hierarchy for the shard placement engine.

Degenerate inputs (no nodes, no shards) are never errors; planners and
assigners return empty results for them.  These exceptions cover caller
contract violations detected by the helper APIs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from .models import MovePlan, Node


class ShardBalancerError(Exception):
    """Base exception for all shard balancer errors."""

    def __init__(self, message: str = "") -> None:
        self.message = message
        super().__init__(message)


# ── Plan Errors ───────────────────────────────────────────────────

class StalePlanError(ShardBalancerError):
    """Raised when a plan's source no longer hosts the shard it moves."""

    def __init__(self, plan: MovePlan, current_owner: Node | None = None) -> None:
        self.plan = plan
        self.current_owner = current_owner
        msg = f"Shard {plan.shard} is not hosted by {plan.source}."
        if current_owner is not None:
            msg += f" Current owner: {current_owner}"
        super().__init__(msg)


class UnknownNodeError(ShardBalancerError):
    """Raised when a node is not part of the snapshot being operated on."""

    def __init__(self, node: Node) -> None:
        self.node = node
        super().__init__(f"Node not found in snapshot: {node}")


# ── Config Errors ─────────────────────────────────────────────────

class InvalidConfigError(ShardBalancerError):
    """Raised when a balancer config file cannot be read or validated."""

    def __init__(self, path: Path, reason: str = "") -> None:
        self.path = path
        msg = f"Invalid balancer config at '{path}'."
        if reason:
            msg += f" Reason: {reason}"
        super().__init__(msg)
