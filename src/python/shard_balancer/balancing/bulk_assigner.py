"""Bulk assigner: round-robin placement used at cluster bootstrap.

Shards with no placement history are dealt out across the sorted node
list, so the result already satisfies the balance planner's floor/ceil
target and needs no follow-up balancing.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from ..models import Node, Shard

logger = logging.getLogger(__name__)


def bulk_assignment(
    shards: Sequence[Shard],
    nodes: Iterable[Node],
) -> dict[Node, list[Shard]]:
    """Distribute ``shards`` round-robin across ``nodes``.

    Shard ``i`` (in input order) goes to node ``i % len(nodes)`` of the
    nodes sorted by identity.  Every node ends up with
    ``floor(shards / nodes)`` or ``ceil(shards / nodes)`` shards.

    Args:
        shards: Shards to place.
        nodes: Available nodes.  Duplicates are ignored.

    Returns:
        Mapping of node → assigned shards.  Empty when there are no
        shards or no nodes; nodes left without shards are omitted.
    """
    if not shards:
        return {}

    sorted_nodes = sorted(set(nodes))
    if not sorted_nodes:
        logger.warning(
            "No nodes available; %d shards left unassigned", len(shards)
        )
        return {}

    node_count = len(sorted_nodes)
    assignments: dict[Node, list[Shard]] = {}
    for idx, shard in enumerate(shards):
        assignments.setdefault(sorted_nodes[idx % node_count], []).append(shard)

    logger.info(
        "Bulk assigned %d shards across %d nodes", len(shards), node_count
    )
    return assignments
