"""Balance planner: computes the moves that even out shard load.

Every node must end up holding either ``floor(avg)`` or ``ceil(avg)``
shards, with exactly ``total % nodes`` of them at the ceiling.  Moves
are produced greedily by pairing the most loaded node with the least
loaded one until every node has reached its target.

This module is stateless: it reads a :class:`ClusterSnapshot`,
simulates the moves on a private copy of the per-node loads, and
returns the plans.  Executing them is the coordinator's job.
"""

from __future__ import annotations

import heapq
import logging
import math
import time
from collections import deque
from fractions import Fraction

from ..cluster.cluster_snapshot import ClusterSnapshot
from ..models import LoadSummary, MovePlan, Node, Shard

logger = logging.getLogger(__name__)


class BalancePlanner:
    """Plans shard moves that bring a cluster into balance.

    Parameters:
        slop: Fraction of the average load a node may deviate by before
            the cluster counts as unbalanced (0 = strict floor/ceil).
        log_plans: Log each emitted plan at INFO instead of DEBUG.
    """

    def __init__(self, slop: float = 0.0, log_plans: bool = False) -> None:
        if slop < 0:
            raise ValueError("slop must be >= 0")
        self._slop = slop
        self._log_plans = log_plans

    @property
    def slop(self) -> float:
        return self._slop

    def balance_cluster(self, snapshot: ClusterSnapshot) -> list[MovePlan]:
        """Compute the move plans that balance ``snapshot``.

        Returns an empty list when there is nothing to do: no nodes, no
        shards, a single node, or a cluster that is already balanced.
        The snapshot is never modified.

        Args:
            snapshot: Current shard placement.

        Returns:
            Move plans in the order they were simulated.  Replaying them
            against ``snapshot`` leaves every node at its target load.
        """
        started = time.monotonic()

        if snapshot.node_count == 0:
            logger.debug("No nodes in snapshot, nothing to balance")
            return []

        summary = snapshot.summary()
        logger.debug("Cluster load %s", summary)

        if snapshot.node_count == 1 or summary.shard_count == 0:
            return []

        if self._within_slop(summary):
            logger.info(
                "Skipping load balancing; cluster is balanced %s (slop=%.2f)",
                summary,
                self._slop,
            )
            return []

        loads = snapshot.loads()
        targets = _compute_targets(loads, summary)
        plans = self._plan_moves(snapshot, loads, targets)

        logger.info(
            "Calculated %d move plans for %s in %.1fms",
            len(plans),
            summary,
            (time.monotonic() - started) * 1000.0,
        )
        return plans

    def _within_slop(self, summary: LoadSummary) -> bool:
        if summary.is_balanced:
            return True
        if self._slop <= 0:
            return False
        # Exact arithmetic; a whole-number bound must not drift by float error.
        avg = Fraction(summary.shard_count, summary.node_count)
        slop = Fraction(str(self._slop))
        return (
            summary.max_load <= math.ceil(avg * (1 + slop))
            and summary.min_load >= math.floor(avg * (1 - slop))
        )

    def _plan_moves(
        self,
        snapshot: ClusterSnapshot,
        loads: dict[Node, int],
        targets: dict[Node, int],
    ) -> list[MovePlan]:
        # Max-heap via negated load; ties fall back to node identity.
        overloaded = [
            (-load, node) for node, load in loads.items() if load > targets[node]
        ]
        underloaded = [
            (load, node) for node, load in loads.items() if load < targets[node]
        ]
        heapq.heapify(overloaded)
        heapq.heapify(underloaded)

        movable: dict[Node, deque[Shard]] = {
            node: deque(snapshot.shards_on(node)) for _, node in overloaded
        }

        plans: list[MovePlan] = []
        while overloaded and underloaded:
            _, source = heapq.heappop(overloaded)
            _, destination = heapq.heappop(underloaded)

            plan = MovePlan(
                shard=movable[source].popleft(),
                source=source,
                destination=destination,
            )
            plans.append(plan)
            if self._log_plans:
                logger.info("Move plan %s", plan)
            else:
                logger.debug("Move plan %s", plan)

            loads[source] -= 1
            loads[destination] += 1
            if loads[source] > targets[source]:
                heapq.heappush(overloaded, (-loads[source], source))
            if loads[destination] < targets[destination]:
                heapq.heappush(underloaded, (loads[destination], destination))

        return plans


def _compute_targets(loads: dict[Node, int], summary: LoadSummary) -> dict[Node, int]:
    """Assign each node its final load, floor(avg) or ceil(avg).

    The ``total % nodes`` ceiling slots go to nodes already at or above
    the ceiling (heaviest first), then to nodes below the floor (largest
    deficit first), then to nodes sitting at the floor.  This keeps the
    move count at its minimum and leaves in-range nodes alone wherever
    the totals allow.
    """
    floor_avg = summary.floor_average
    ceil_avg = summary.ceil_average
    targets = {node: floor_avg for node in loads}

    ceil_slots = summary.shard_count - floor_avg * summary.node_count
    if ceil_slots == 0:
        return targets

    heavy = sorted(
        (node for node, load in loads.items() if load >= ceil_avg),
        key=lambda node: (-loads[node], node),
    )
    light = sorted(
        (node for node, load in loads.items() if load < floor_avg),
        key=lambda node: (loads[node], node),
    )
    level = sorted(node for node, load in loads.items() if load == floor_avg)

    for node in (heavy + light + level)[:ceil_slots]:
        targets[node] = ceil_avg
    return targets
