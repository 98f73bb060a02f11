# src/pathrank/analytics/mutual_information.py

"""
Per-edge mutual information (MI) for path ranking.

"MI" here is a neighbourhood-overlap similarity between the two endpoints of
an edge, not information-theoretic MI over random variables. Three strategies
are available:

  1. Structural (default): Jaccard overlap of the endpoints' open
     neighbourhoods, |N(u) ∩ N(v)| / |N(u) ∪ N(v)|, via
     networkx.jaccard_coefficient. Neighbourhoods take both edge directions
     into account.
  2. Attribute-based: |Pearson correlation| of numeric attribute vectors
     returned by ``attribute_extractor``; falls back to structural MI when
     either vector is missing.
  3. Type rarity (opt-in, heterogeneous graphs only): -log P(type_u, type_v)
     normalised to [0, 1], so rare type pairs carry more information.

The cache produced by precompute_mutual_information() is a plain
``{edge_id: mi}`` dict so it can be reused across many queries on an
unchanged graph.
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Sequence, Tuple

import networkx as nx
import numpy as np

from ..build.graph import Graph
from ..build.types import Edge, Node

MICache = Dict[str, float]

AttributeExtractor = Callable[[Node], Optional[Sequence[float]]]

# Smoothing for the type-rarity normaliser when no epsilon is configured.
_TYPE_EPSILON = 1e-10


@dataclass
class MutualInformationConfig:
    """
    Parameters
    ----------
    attribute_extractor : callable, optional
        Maps a Node to a numeric vector (or None). Enables attribute MI.
    use_type_rarity : bool
        Score edges by node-type pair rarity when the graph has more than one
        node type. Ignored when an attribute extractor is supplied.
    epsilon : float
        Additive smoothing. 0.0 keeps zero-overlap edges at exactly 0.
    """

    attribute_extractor: Optional[AttributeExtractor] = None
    use_type_rarity: bool = False
    epsilon: float = 0.0


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------
def structural_graph(graph: Graph) -> nx.Graph:
    """
    Simple undirected copy of ``graph`` for neighbourhood overlap.

    Parallel edges collapse and directed edges count for both endpoints.
    """
    return nx.Graph(graph.nx_view(undirected=True))


def jaccard_mi(
    simple: nx.Graph,
    pairs: Iterable[Tuple[str, str]],
    epsilon: float = 0.0,
) -> Dict[Tuple[str, str], float]:
    """
    Jaccard overlap of the open neighbourhoods of each pair (plus ``epsilon``).

    ``simple`` comes from structural_graph(). Pairs with an empty union
    score ``epsilon``.
    """
    return {(u, v): s + epsilon for u, v, s in nx.jaccard_coefficient(simple, pairs)}


def structural_mi(simple: nx.Graph, u: str, v: str, epsilon: float = 0.0) -> float:
    """Jaccard MI of a single node pair."""
    return jaccard_mi(simple, [(u, v)], epsilon)[(u, v)]


def attribute_mi(a1: Sequence[float], a2: Sequence[float], epsilon: float = 0.0) -> float:
    """
    Absolute Pearson correlation of two attribute vectors.

    Vectors of different length are truncated to the shorter one. Constant
    vectors (zero variance) give ``epsilon``.
    """
    n = min(len(a1), len(a2))
    if n == 0:
        return epsilon
    x = np.asarray(a1[:n], dtype=float)
    y = np.asarray(a2[:n], dtype=float)
    dx = x - x.mean()
    dy = y - y.mean()
    denom = math.sqrt(float(np.dot(dx, dx)) * float(np.dot(dy, dy)))
    if denom <= max(epsilon, 1e-12):
        return epsilon
    return min(1.0, abs(float(np.dot(dx, dy)) / denom)) + epsilon


def type_rarity_mi(pair_count: int, total_edges: int, epsilon: float = 0.0) -> float:
    """-log P(type pair), normalised by the largest attainable value."""
    eps = epsilon if epsilon > 0 else _TYPE_EPSILON
    probability = (pair_count + eps) / (total_edges + eps)
    max_mi = -math.log(eps / (total_edges + eps))
    if max_mi <= 0:
        return 0.0
    return max(0.0, -math.log(probability)) / max_mi


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _type_pair(graph: Graph, edge: Edge) -> Tuple[str, str]:
    src = graph.get_node(edge.source)
    tgt = graph.get_node(edge.target)
    pair = (
        (src.type if src is not None else None) or "",
        (tgt.type if tgt is not None else None) or "",
    )
    # orientation is meaningless for undirected graphs
    return pair if graph.directed else tuple(sorted(pair))  # type: ignore[return-value]


def _is_heterogeneous(graph: Graph) -> bool:
    return len({n.type for n in graph.get_all_nodes()}) > 1


def _type_pair_counts(graph: Graph) -> Counter:
    return Counter(_type_pair(graph, e) for e in graph.get_all_edges())


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def compute_edge_mi(
    graph: Graph,
    edge: Edge,
    config: Optional[MutualInformationConfig] = None,
    _type_counts: Optional[Counter] = None,
    _simple: Optional[nx.Graph] = None,
) -> float:
    """
    MI of a single edge under ``config``.

    Endpoints missing from the graph give ``config.epsilon``.
    """
    cfg = config or MutualInformationConfig()
    if not graph.has_node(edge.source) or not graph.has_node(edge.target):
        return cfg.epsilon

    if cfg.attribute_extractor is not None:
        a1 = cfg.attribute_extractor(graph.get_node(edge.source))
        a2 = cfg.attribute_extractor(graph.get_node(edge.target))
        if a1 is not None and a2 is not None and len(a1) > 0 and len(a2) > 0:
            return attribute_mi(a1, a2, cfg.epsilon)
    elif cfg.use_type_rarity and _is_heterogeneous(graph):
        counts = _type_counts if _type_counts is not None else _type_pair_counts(graph)
        return type_rarity_mi(counts[_type_pair(graph, edge)], graph.edge_count, cfg.epsilon)

    simple = _simple if _simple is not None else structural_graph(graph)
    return structural_mi(simple, edge.source, edge.target, cfg.epsilon)


def precompute_mutual_information(
    graph: Graph,
    config: Optional[MutualInformationConfig] = None,
) -> MICache:
    """
    Compute MI for every edge of ``graph`` once.

    Returns
    -------
    Dict[str, float]
        edge id -> MI. Invalid once the graph is mutated.
    """
    cfg = config or MutualInformationConfig()
    edges = graph.get_all_edges()
    simple = structural_graph(graph)

    type_counts: Optional[Counter] = None
    if cfg.attribute_extractor is None and cfg.use_type_rarity and _is_heterogeneous(graph):
        type_counts = _type_pair_counts(graph)

    if cfg.attribute_extractor is not None or type_counts is not None:
        return {
            edge.id: compute_edge_mi(graph, edge, cfg, _type_counts=type_counts, _simple=simple)
            for edge in edges
        }

    scores = jaccard_mi(simple, [(e.source, e.target) for e in edges], cfg.epsilon)
    return {edge.id: scores[(edge.source, edge.target)] for edge in edges}


def edge_mi_lookup(
    graph: Graph,
    mi_cache: Optional[MICache] = None,
    config: Optional[MutualInformationConfig] = None,
) -> Callable[[Edge], float]:
    """
    Return ``edge -> mi``, reading ``mi_cache`` first and memoising misses.

    Used by rankers that only touch a handful of edges, where precomputing
    the whole graph would be wasted work.
    """
    cfg = config or MutualInformationConfig()
    memo: MICache = dict(mi_cache) if mi_cache else {}
    type_counts: Optional[Counter] = None
    if cfg.attribute_extractor is None and cfg.use_type_rarity and _is_heterogeneous(graph):
        type_counts = _type_pair_counts(graph)
    simple: Optional[nx.Graph] = None

    def lookup(edge: Edge) -> float:
        nonlocal simple
        value = memo.get(edge.id)
        if value is None:
            if simple is None:
                simple = structural_graph(graph)
            value = compute_edge_mi(graph, edge, cfg, _type_counts=type_counts, _simple=simple)
            memo[edge.id] = value
        return value

    return lookup
