"""Tests for the cluster snapshot."""

import pytest

from shard_balancer import (
    ClusterSnapshot,
    MovePlan,
    StalePlanError,
    UnknownNodeError,
)


def test_snapshot_copies_caller_data(make_node, make_shards):
    a, b = make_node(1), make_node(2)
    raw = {b: make_shards(3), a: []}
    snapshot = ClusterSnapshot(raw)

    raw[b].clear()
    loads = snapshot.loads()
    loads[a] = 99

    assert snapshot.nodes == (a, b)
    assert snapshot.load(b) == 3
    assert snapshot.load(a) == 0
    assert snapshot.total_load == 3


def test_owner_lookup_round_trip(make_node, make_shards):
    a, b, idle = make_node(1), make_node(2), make_node(3)
    shards = make_shards(3)
    owners = {shards[0]: a, shards[1]: b, shards[2]: a}

    snapshot = ClusterSnapshot.from_owners(owners, nodes=[idle])

    assert snapshot.owner_of(shards[1]) == b
    assert snapshot.owner_of(make_shards(1)[0]) is None
    assert snapshot.to_owners() == owners
    assert snapshot.load(idle) == 0
    assert idle in snapshot


def test_apply_replays_plans(make_node, make_shards):
    a, b = make_node(1), make_node(2)
    shards = make_shards(4)
    snapshot = ClusterSnapshot({a: shards, b: []})
    plans = [
        MovePlan(shard=shards[0], source=a, destination=b),
        MovePlan(shard=shards[1], source=a, destination=b),
    ]

    moved = snapshot.apply(plans)

    assert moved.shards_on(a) == tuple(shards[2:])
    assert moved.shards_on(b) == tuple(shards[:2])
    assert snapshot.load(a) == 4


def test_apply_rejects_stale_plan(make_node, make_shards):
    a, b = make_node(1), make_node(2)
    shards = make_shards(2)
    snapshot = ClusterSnapshot({a: shards, b: []})
    plans = [
        MovePlan(shard=shards[0], source=a, destination=b),
        MovePlan(shard=shards[0], source=a, destination=b),
    ]

    with pytest.raises(StalePlanError) as exc_info:
        snapshot.apply(plans)

    assert exc_info.value.current_owner == b
    assert exc_info.value.plan == plans[1]


def test_apply_rejects_unknown_destination(make_node, make_shards):
    a, b = make_node(1), make_node(2)
    shards = make_shards(1)
    snapshot = ClusterSnapshot({a: shards})

    with pytest.raises(UnknownNodeError):
        snapshot.apply([MovePlan(shard=shards[0], source=a, destination=b)])


def test_shards_on_unknown_node(make_node):
    with pytest.raises(UnknownNodeError):
        ClusterSnapshot({}).shards_on(make_node(1))


def test_summary_and_equality(make_node, make_shards):
    a, b = make_node(1), make_node(2)
    shards = make_shards(5)
    snapshot = ClusterSnapshot({a: shards[:4], b: shards[4:]})

    summary = snapshot.summary()

    assert (summary.max_load, summary.min_load, summary.spread) == (4, 1, 3)
    assert snapshot == ClusterSnapshot({b: shards[4:], a: list(reversed(shards[:4]))})
    assert repr(snapshot) == "ClusterSnapshot({ 4, 1 })"
