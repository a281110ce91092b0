"""Cluster state views consumed by the planner."""

from .cluster_snapshot import ClusterSnapshot

__all__ = ["ClusterSnapshot"]
