"""Data models for the shard placement engine.

All models use Pydantic for validation.  Identity models are frozen so
they can be used as dict keys and sorted deterministically.
"""

from __future__ import annotations

import functools
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ── Cluster Members ───────────────────────────────────────────────


@functools.total_ordering
class Node(BaseModel):
    """A worker that can host shards.

    Identity is ``(host, port, start_code)``.  The start code changes
    every time the process on ``host:port`` restarts, so two incarnations
    of the same address are distinct nodes.  Load is not part of a node;
    it is derived from a :class:`ClusterSnapshot` on every call.
    """

    model_config = ConfigDict(frozen=True)

    host: str
    """Hostname or IP address."""

    port: int = Field(ge=0, le=65535)
    """RPC port."""

    start_code: int = 0
    """Epoch token distinguishing restarts of the same address."""

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    @property
    def server_name(self) -> str:
        """Render as ``host,port,start_code``."""
        return f"{self.host},{self.port},{self.start_code}"

    @property
    def sort_key(self) -> tuple[str, int, int]:
        return (self.host, self.port, self.start_code)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self.sort_key < other.sort_key

    def __str__(self) -> str:
        return self.server_name


@functools.total_ordering
class Shard(BaseModel):
    """An individually placeable unit of data (a key range of a table).

    The engine only relies on equality and hashing; the key range is
    carried for the caller's benefit.
    """

    model_config = ConfigDict(frozen=True)

    table: str
    """Owning table name."""

    start_key: bytes = b""
    """Inclusive start of the key range (empty = table start)."""

    end_key: bytes = b""
    """Exclusive end of the key range (empty = table end)."""

    shard_id: int = 0
    """Creation id, distinguishes shards re-created over the same range."""

    @property
    def name(self) -> str:
        return f"{self.table},{self.start_key.hex()},{self.shard_id}"

    @property
    def sort_key(self) -> tuple[str, bytes, bytes, int]:
        return (self.table, self.start_key, self.end_key, self.shard_id)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Shard):
            return NotImplemented
        return self.sort_key < other.sort_key

    def __str__(self) -> str:
        return self.name


# ── Planner Output ────────────────────────────────────────────────


@functools.total_ordering
class MovePlan(BaseModel):
    """Instruction to relocate one shard from ``source`` to ``destination``."""

    model_config = ConfigDict(frozen=True)

    shard: Shard
    source: Node
    destination: Node

    @model_validator(mode="after")
    def _check_distinct_nodes(self) -> MovePlan:
        if self.source == self.destination:
            raise ValueError(
                f"source and destination are the same node: {self.source}"
            )
        return self

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, MovePlan):
            return NotImplemented
        return (self.shard, self.source, self.destination) < (
            other.shard,
            other.source,
            other.destination,
        )

    def __str__(self) -> str:
        return f"{self.shard} {self.source} -> {self.destination}"


class LoadSummary(BaseModel):
    """Aggregate load figures for one snapshot."""

    model_config = ConfigDict(frozen=True)

    node_count: int = 0
    shard_count: int = 0
    max_load: int = 0
    min_load: int = 0

    @classmethod
    def from_loads(cls, loads: Iterable[int]) -> LoadSummary:
        values = list(loads)
        if not values:
            return cls()
        return cls(
            node_count=len(values),
            shard_count=sum(values),
            max_load=max(values),
            min_load=min(values),
        )

    @property
    def average(self) -> float:
        if self.node_count == 0:
            return 0.0
        return self.shard_count / self.node_count

    @property
    def floor_average(self) -> int:
        if self.node_count == 0:
            return 0
        return self.shard_count // self.node_count

    @property
    def ceil_average(self) -> int:
        if self.node_count == 0:
            return 0
        return -(-self.shard_count // self.node_count)

    @property
    def spread(self) -> int:
        return self.max_load - self.min_load

    @property
    def is_balanced(self) -> bool:
        """Every node holds either floor(avg) or ceil(avg) shards."""
        return (
            self.min_load >= self.floor_average
            and self.max_load <= self.ceil_average
        )

    def __str__(self) -> str:
        return (
            f"[nodes={self.node_count} shards={self.shard_count} "
            f"avg={self.average:.3f} ceil={self.ceil_average} "
            f"floor={self.floor_average} max_load={self.max_load} "
            f"min_load={self.min_load}]"
        )
