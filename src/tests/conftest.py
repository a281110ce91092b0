"""Shared factories for shard balancer tests."""

import itertools
import random
import string

import pytest

from shard_balancer import ClusterSnapshot, Node, Shard


@pytest.fixture
def rng():
    return random.Random(20100927)


@pytest.fixture
def make_node():
    def factory(index: int, start_code: int = 1, port: int = 9100) -> Node:
        return Node(host=f"host-{index:03d}", port=port, start_code=start_code)

    return factory


@pytest.fixture
def make_shards():
    counter = itertools.count()

    def factory(count: int, table: str = "table") -> list[Shard]:
        shards = []
        for _ in range(count):
            shard_id = next(counter)
            shards.append(
                Shard(
                    table=table,
                    start_key=shard_id.to_bytes(4, "big"),
                    end_key=(shard_id + 1).to_bytes(4, "big"),
                    shard_id=shard_id,
                )
            )
        return shards

    return factory


@pytest.fixture
def random_nodes(rng):
    def factory(count: int) -> list[Node]:
        nodes: set[Node] = set()
        while len(nodes) < count:
            host = "".join(rng.choices(string.ascii_lowercase, k=16))
            nodes.add(
                Node(
                    host=host,
                    port=rng.randrange(60000),
                    start_code=rng.getrandbits(63),
                )
            )
        return list(nodes)

    return factory


@pytest.fixture
def mock_cluster(random_nodes, make_shards):
    """Build a snapshot whose i-th node (in identity order) hosts loads[i] shards."""

    def factory(loads: list[int]) -> ClusterSnapshot:
        nodes = sorted(random_nodes(len(loads)))
        return ClusterSnapshot(
            {node: make_shards(load) for node, load in zip(nodes, loads)}
        )

    return factory
