"""Retain assigner: restart-time placement that honours prior owners.

When a cluster restarts, shards are sent back to the node that hosted
them before whenever that node is still around.  A restarted process
has a new start code but the same ``host:port``, so it is matched by
address.  Shards whose owner is gone are spread over the least-loaded
nodes.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from ..models import Node, Shard
from .immediate_assigner import place_least_loaded

logger = logging.getLogger(__name__)


def retain_assignment(
    previous: Mapping[Shard, Node | None],
    nodes: Iterable[Node],
) -> dict[Node, list[Shard]]:
    """Assign shards back to their previous node where possible.

    Args:
        previous: Mapping of shard → node that hosted it before (None if
            unknown).
        nodes: Nodes currently available.

    Returns:
        Mapping of node → shards.  Empty when ``nodes`` is empty.
    """
    sorted_nodes = sorted(set(nodes))
    if not previous:
        return {}
    if not sorted_nodes:
        logger.warning(
            "No nodes available; %d shards left unassigned", len(previous)
        )
        return {}

    by_address: dict[str, Node] = {}
    for node in sorted_nodes:
        # Newest incarnation wins if an address is listed twice.
        current = by_address.get(node.address)
        if current is None or node.start_code > current.start_code:
            by_address[node.address] = node

    owners: dict[Shard, Node] = {}
    orphans: list[Shard] = []
    for shard, old_node in previous.items():
        target = by_address.get(old_node.address) if old_node is not None else None
        if target is None:
            orphans.append(shard)
        else:
            owners[shard] = target

    counts = {node: 0 for node in sorted_nodes}
    for node in owners.values():
        counts[node] += 1
    place_least_loaded(orphans, counts, owners)

    assignments: dict[Node, list[Shard]] = {}
    for shard, node in owners.items():
        assignments.setdefault(node, []).append(shard)

    logger.info(
        "Retained %d of %d shards on their previous nodes; %d reassigned",
        len(previous) - len(orphans),
        len(previous),
        len(orphans),
    )
    return assignments
