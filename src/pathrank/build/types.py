# src/pathrank/build/types.py

"""
Value types for the path ranking engine.

Node and Edge carry an identifier plus an open attribute bag; node "types"
(Work, Author, Source, ...) are plain data on the ``type`` field rather than
subclasses. Path and RankedPath are immutable results produced by the
ranking, planting and baseline code.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

# Separator used when turning a path into a stable string key.
PATH_KEY_SEPARATOR = "→"


@dataclass
class Node:
    id: str
    type: Optional[str] = None
    attributes: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Look up ``key`` in the attribute bag (``type`` is also accepted)."""
        if key == "type":
            return self.type if self.type is not None else default
        return self.attributes.get(key, default)


@dataclass
class Edge:
    id: str
    source: str
    target: str
    weight: Optional[float] = None
    type: Optional[str] = None
    attributes: Dict[str, Any] = field(default_factory=dict)

    def connects(self, u: str, v: str) -> bool:
        """True if the edge joins u and v in either orientation."""
        return (self.source == u and self.target == v) or (self.source == v and self.target == u)

    def other(self, node_id: str) -> str:
        """Endpoint opposite to ``node_id``."""
        return self.target if self.source == node_id else self.source


@dataclass(frozen=True)
class Path:
    """
    Ordered node sequence plus the edges joining consecutive nodes.

    Edge i must join node i and node i+1. Orientation is not checked here
    because it depends on the traversal mode; see Graph.validate_path().
    """

    nodes: Tuple[Node, ...]
    edges: Tuple[Edge, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "edges", tuple(self.edges))

        if not self.nodes:
            raise ValueError("A path needs at least one node")
        if len(self.edges) != len(self.nodes) - 1:
            raise ValueError(
                f"A path with {len(self.nodes)} nodes needs {len(self.nodes) - 1} edges, "
                f"got {len(self.edges)}"
            )
        for i, edge in enumerate(self.edges):
            u, v = self.nodes[i].id, self.nodes[i + 1].id
            if not edge.connects(u, v):
                raise ValueError(f"Edge {edge.id} does not connect {u} and {v}")

    @property
    def length(self) -> int:
        """Number of hops."""
        return len(self.edges)

    @property
    def node_ids(self) -> Tuple[str, ...]:
        return tuple(n.id for n in self.nodes)

    @property
    def key(self) -> str:
        """Readable node sequence, e.g. ``a→b→c``."""
        return PATH_KEY_SEPARATOR.join(self.node_ids)

    @property
    def uid(self) -> str:
        """``key`` plus edge ids, so paths over parallel edges stay distinct."""
        return f"{self.key}[{','.join(e.id for e in self.edges)}]"

    @property
    def total_weight(self) -> float:
        # Unweighted edges count as 1.0
        return float(sum(1.0 if e.weight is None else e.weight for e in self.edges))

    @property
    def source(self) -> Node:
        return self.nodes[0]

    @property
    def target(self) -> Node:
        return self.nodes[-1]


@dataclass(frozen=True)
class RankedPath:
    """A path with the score a ranker gave it."""

    path: Path
    score: float
    geometric_mean_mi: Optional[float] = None
    edge_mi_values: Tuple[float, ...] = ()
    length_penalty: Optional[float] = None

    @property
    def key(self) -> str:
        return self.path.key

    @property
    def uid(self) -> str:
        return self.path.uid


def geometric_mean(values) -> float:
    """
    Geometric mean of per-edge MI values.

    Any non-positive value makes the aggregate 0.0; an empty sequence
    (zero-hop path) is treated as perfect quality.
    """
    vals = list(values)
    if not vals:
        return 1.0
    if any(v <= 0.0 for v in vals):
        return 0.0
    return math.exp(sum(math.log(v) for v in vals) / len(vals))
