"""Immediate assigner: fast placement for shards that lost their owner.

Only completeness is guaranteed: every shard is placed on some supplied
node.  Skew left behind is corrected by a later balancing pass.
"""

from __future__ import annotations

import heapq
import logging
import random
from collections.abc import Iterable, Mapping, Sequence

from ..models import Node, Shard

logger = logging.getLogger(__name__)


def immediate_assignment(
    shards: Iterable[Shard],
    nodes: Iterable[Node],
) -> dict[Shard, Node]:
    """Assign every shard to the least-loaded node seen so far.

    Ties are broken by node identity, so identical input always yields
    the same map.

    Returns:
        Mapping of shard → node.  Empty when ``nodes`` is empty; the
        caller should retry once nodes are available.
    """
    shard_list = list(shards)
    node_set = set(nodes)
    if not shard_list:
        return {}
    if not node_set:
        logger.warning(
            "No nodes available; %d shards left unassigned", len(shard_list)
        )
        return {}

    assignments: dict[Shard, Node] = {}
    place_least_loaded(shard_list, {node: 0 for node in node_set}, assignments)
    logger.info(
        "Immediately assigned %d shards across %d nodes",
        len(assignments),
        len(node_set),
    )
    return assignments


def random_assignment(
    nodes: Sequence[Node],
    rng: random.Random | None = None,
) -> Node | None:
    """Pick a node at random for a single unplaced shard.

    Returns None if ``nodes`` is empty.
    """
    if not nodes:
        logger.warning("No nodes available for random assignment")
        return None
    return (rng or random).choice(sorted(nodes))


def place_least_loaded(
    shards: Iterable[Shard],
    counts: Mapping[Node, int],
    assignments: dict[Shard, Node],
) -> None:
    """Place each shard on the node with the lowest running count."""
    heap = [(count, node) for node, count in counts.items()]
    heapq.heapify(heap)
    for shard in shards:
        count, node = heapq.heappop(heap)
        assignments[shard] = node
        heapq.heappush(heap, (count + 1, node))
