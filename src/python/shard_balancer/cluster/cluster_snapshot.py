"""Cluster snapshot: a point-in-time view of shard → node placement.

The snapshot is handed to the planner by the coordinator and is never
mutated.  Loads are derived from the shard lists, so every call gets a
fresh copy of the per-node counts to simulate against.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from ..exceptions import StalePlanError, UnknownNodeError
from ..models import LoadSummary, MovePlan, Node, Shard

logger = logging.getLogger(__name__)


class ClusterSnapshot:
    """Immutable mapping of each node to the shards it hosts.

    Parameters:
        assignments: Mapping of node → shards currently hosted there.
            Every shard must appear under exactly one node; this is the
            caller's contract and is not checked.
    """

    def __init__(self, assignments: Mapping[Node, Iterable[Shard]]) -> None:
        self._assignments: Mapping[Node, tuple[Shard, ...]] = MappingProxyType(
            {node: tuple(shards) for node, shards in assignments.items()}
        )
        self._nodes: tuple[Node, ...] = tuple(sorted(self._assignments))
        self._owners: dict[Shard, Node] | None = None

    @classmethod
    def from_owners(
        cls,
        owners: Mapping[Shard, Node],
        nodes: Iterable[Node] = (),
    ) -> ClusterSnapshot:
        """Build a snapshot from a shard → node map.

        ``nodes`` lists members that may host nothing yet; they appear
        in the snapshot with an empty shard list.
        """
        assignments: dict[Node, list[Shard]] = {node: [] for node in nodes}
        for shard, node in owners.items():
            assignments.setdefault(node, []).append(shard)
        return cls(assignments)

    # ── Properties ────────────────────────────────────────────────

    @property
    def nodes(self) -> tuple[Node, ...]:
        """All nodes, sorted by identity."""
        return self._nodes

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def total_load(self) -> int:
        return sum(len(shards) for shards in self._assignments.values())

    @property
    def is_empty(self) -> bool:
        return self.total_load == 0

    # ── Query ─────────────────────────────────────────────────────

    def shards_on(self, node: Node) -> tuple[Shard, ...]:
        """Return the shards hosted by ``node``, in the order supplied."""
        try:
            return self._assignments[node]
        except KeyError:
            raise UnknownNodeError(node) from None

    def load(self, node: Node) -> int:
        return len(self.shards_on(node))

    def loads(self) -> dict[Node, int]:
        """Return a fresh node → shard count map."""
        return {node: len(shards) for node, shards in self._assignments.items()}

    def owner_of(self, shard: Shard) -> Node | None:
        """Return the node hosting ``shard``, or None."""
        if self._owners is None:
            self._owners = self.to_owners()
        return self._owners.get(shard)

    def to_owners(self) -> dict[Shard, Node]:
        """Return the shard → node map for this snapshot."""
        return {
            shard: node
            for node in self._nodes
            for shard in self._assignments[node]
        }

    def summary(self) -> LoadSummary:
        return LoadSummary.from_loads(self.loads().values())

    # ── Replay ────────────────────────────────────────────────────

    def apply(self, plans: Iterable[MovePlan]) -> ClusterSnapshot:
        """Replay ``plans`` in order and return the resulting snapshot.

        Each plan is validated against this snapshot plus the plans
        already replayed before it.

        Raises:
            StalePlanError: The plan's source does not host the shard.
            UnknownNodeError: The plan's destination is not a member.
        """
        working: dict[Node, list[Shard]] = {
            node: list(shards) for node, shards in self._assignments.items()
        }
        owners = self.to_owners()
        applied = 0
        for plan in plans:
            if plan.destination not in working:
                raise UnknownNodeError(plan.destination)
            if owners.get(plan.shard) != plan.source:
                raise StalePlanError(plan, owners.get(plan.shard))
            working[plan.source].remove(plan.shard)
            working[plan.destination].append(plan.shard)
            owners[plan.shard] = plan.destination
            applied += 1
        logger.debug("Replayed %d move plans against snapshot", applied)
        return ClusterSnapshot(working)

    # ── Dunder ────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node: object) -> bool:
        return node in self._assignments

    def __iter__(self):
        return iter(self._nodes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ClusterSnapshot):
            return NotImplemented
        return {n: set(s) for n, s in self._assignments.items()} == {
            n: set(s) for n, s in other._assignments.items()
        }

    __hash__ = None

    def __repr__(self) -> str:
        loads = ", ".join(str(self.load(node)) for node in self._nodes)
        return f"ClusterSnapshot({{ {loads} }})"
