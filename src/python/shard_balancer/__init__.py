"""Shard Balancer: placement engine for a sharded storage cluster.

Given a snapshot of which nodes host which shards, the engine decides
whether the cluster is balanced and, if not, which shards should move
where.  It also places shards that have no owner: round-robin at
bootstrap, least-loaded on failover, and back onto their previous
node on restart.

The engine never executes moves, performs no I/O and keeps no state
between calls.

Quick Start::

    from shard_balancer import ClusterSnapshot, LoadBalancer, Node, Shard

    a = Node(host="10.0.0.1", port=9100, start_code=1)
    b = Node(host="10.0.0.2", port=9100, start_code=1)
    shards = [Shard(table="users", shard_id=i) for i in range(6)]

    snapshot = ClusterSnapshot({a: shards, b: []})
    balancer = LoadBalancer()
    for plan in balancer.balance_cluster(snapshot):
        print(plan.shard, plan.source, "->", plan.destination)

    balanced = snapshot.apply(balancer.balance_cluster(snapshot))
"""

from .balancing.balance_planner import BalancePlanner
from .balancing.bulk_assigner import bulk_assignment
from .balancing.immediate_assigner import immediate_assignment, random_assignment
from .balancing.load_balancer import LoadBalancer
from .balancing.retain_assigner import retain_assignment
from .cluster.cluster_snapshot import ClusterSnapshot
from .config import BalancerConfig, dump_config, load_config
from .exceptions import (
    InvalidConfigError,
    ShardBalancerError,
    StalePlanError,
    UnknownNodeError,
)
from .models import LoadSummary, MovePlan, Node, Shard

__all__ = [
    # Main entry point
    "LoadBalancer",
    # Planning and assignment
    "BalancePlanner",
    "bulk_assignment",
    "immediate_assignment",
    "random_assignment",
    "retain_assignment",
    # Cluster state
    "ClusterSnapshot",
    # Models
    "LoadSummary",
    "MovePlan",
    "Node",
    "Shard",
    # Config
    "BalancerConfig",
    "dump_config",
    "load_config",
    # Exceptions
    "InvalidConfigError",
    "ShardBalancerError",
    "StalePlanError",
    "UnknownNodeError",
]
