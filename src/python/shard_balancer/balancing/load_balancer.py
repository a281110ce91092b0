"""Load balancer: single entry point for placement decisions.

Usage::

    from shard_balancer import LoadBalancer, load_config

    balancer = LoadBalancer(load_config(Path("balancer.yaml")))

    plans = balancer.balance_cluster(snapshot)
    startup = balancer.bulk_assignment(shards, nodes)
    recovered = balancer.immediate_assignment(orphans, nodes)
"""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable, Mapping, Sequence

from ..cluster.cluster_snapshot import ClusterSnapshot
from ..config import BalancerConfig
from ..models import MovePlan, Node, Shard
from .balance_planner import BalancePlanner
from .bulk_assigner import bulk_assignment
from .immediate_assigner import immediate_assignment, random_assignment
from .retain_assigner import retain_assignment

logger = logging.getLogger(__name__)


class LoadBalancer:
    """Stateless facade over the planner and the assigners.

    The only state is the config and a private random generator, so a
    single instance may be shared by concurrent callers.  With a fixed
    ``random_seed`` the sequence of ``random_assignment`` picks is
    reproducible only while calls are not interleaved across threads.

    Parameters:
        config: Balancer tunables (defaults to ``BalancerConfig()``).
    """

    def __init__(self, config: BalancerConfig | None = None) -> None:
        self._config = config or BalancerConfig()
        self._planner = BalancePlanner(
            slop=self._config.slop,
            log_plans=self._config.log_plans,
        )
        self._rng = random.Random(self._config.random_seed)
        logger.debug("LoadBalancer initialized with %s", self._config)

    @property
    def config(self) -> BalancerConfig:
        return self._config

    def balance_cluster(
        self,
        snapshot: ClusterSnapshot | Mapping[Node, Iterable[Shard]],
    ) -> list[MovePlan]:
        """Return the moves that balance ``snapshot`` (empty if none)."""
        if not isinstance(snapshot, ClusterSnapshot):
            snapshot = ClusterSnapshot(snapshot)
        return self._planner.balance_cluster(snapshot)

    def bulk_assignment(
        self,
        shards: Sequence[Shard],
        nodes: Iterable[Node],
    ) -> dict[Node, list[Shard]]:
        return bulk_assignment(shards, nodes)

    def immediate_assignment(
        self,
        shards: Iterable[Shard],
        nodes: Iterable[Node],
    ) -> dict[Shard, Node]:
        return immediate_assignment(shards, nodes)

    def random_assignment(self, nodes: Sequence[Node]) -> Node | None:
        return random_assignment(nodes, self._rng)

    def retain_assignment(
        self,
        previous: Mapping[Shard, Node | None],
        nodes: Iterable[Node],
    ) -> dict[Node, list[Shard]]:
        return retain_assignment(previous, nodes)
