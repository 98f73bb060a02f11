# src/pathrank/planting/path_generator.py

"""
Ground-truth path planting.

Planting inserts new paths into an existing graph so that a path with a known
signal strength provably exists between two chosen nodes. Each planted path:

  - runs from an existing source node to an existing target node through
    fresh intermediate nodes
  - carries edge weights sampled from the requested signal band
  - gets its own set of shared "support" neighbours wired to every node on
    the path, so the structural MI the ranker computes lands in the band

Each support node joins the neighbourhoods of every path node, so it adds
one to both the overlap and the union of every path edge. Starting from the
Jaccard overlap of the freshly wired path, the support count is the one
whose geometric-mean MI comes closest to the path's target (the geometric
mean of its planted weights). Existing endpoints with large neighbourhoods
therefore get more support nodes than isolated ones, up to
utils.constants.MAX_SUPPORT_NODES.

All randomness comes from SeededRandom(config.seed): the same graph and
config always give the same planted paths, node ids and weights.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

import networkx as nx

from ..analytics.mutual_information import structural_graph, structural_mi
from ..build.errors import PlantingError
from ..build.graph import Graph
from ..build.types import Edge, Node, Path, geometric_mean
from ..utils.constants import MAX_SUPPORT_NODES, SIGNAL_BANDS, SIGNAL_STRENGTHS
from ..utils.seeded_random import SeededRandom


@dataclass
class PlantedPathConfig:
    """
    Parameters
    ----------
    num_paths : int
        Number of paths to plant.
    path_length : (int, int)
        Inclusive hop range.
    signal_strength : {"weak", "medium", "strong"}
    allow_overlap : bool
        Allow planted paths to share endpoint nodes.
    seed : int
    source_nodes, target_nodes : list of str, optional
        Restrict endpoint choice. Ids absent from the graph are ignored.
    """

    num_paths: int = 5
    path_length: Tuple[int, int] = (2, 4)
    signal_strength: str = "medium"
    allow_overlap: bool = False
    seed: int = 42
    source_nodes: Optional[List[str]] = None
    target_nodes: Optional[List[str]] = None

    def validate(self) -> None:
        lo, hi = self.path_length
        if self.num_paths < 0:
            raise PlantingError(f"num_paths must be >= 0, got {self.num_paths}")
        if lo < 1 or hi < lo:
            raise PlantingError(f"Invalid path length range: min={lo}, max={hi}")
        if self.signal_strength not in SIGNAL_STRENGTHS:
            raise PlantingError(
                f"Unknown signal strength '{self.signal_strength}' "
                f"(expected one of {', '.join(SIGNAL_STRENGTHS)})"
            )


@dataclass
class PlantingMetadata:
    nodes_added: int = 0
    edges_added: int = 0
    avg_path_mi: float = 0.0
    avg_structural_mi: float = 0.0
    signal_strength: Optional[str] = None


@dataclass
class PlantingResult:
    graph: Graph
    ground_truth_paths: List[Path] = field(default_factory=list)
    relevance_scores: Dict[str, float] = field(default_factory=dict)
    metadata: PlantingMetadata = field(default_factory=PlantingMetadata)


# ---------------------------------------------------------------------------
# Shared helpers (also used by heterogeneous and citation planting)
# ---------------------------------------------------------------------------
def fresh_node_id(graph: Graph, base: str) -> str:
    """``base``, or ``base_1``, ``base_2``, ... if already taken."""
    if not graph.has_node(base):
        return base
    i = 1
    while graph.has_node(f"{base}_{i}"):
        i += 1
    return f"{base}_{i}"


def fresh_edge_id(graph: Graph, base: str) -> str:
    if not graph.has_edge(base):
        return base
    i = 1
    while graph.has_edge(f"{base}_{i}"):
        i += 1
    return f"{base}_{i}"


def pick_node(
    rng: SeededRandom,
    candidates: Sequence[str],
    exclude: Set[str],
    avoid: Set[str],
) -> Optional[str]:
    """
    Random candidate outside ``exclude``, preferring ones outside ``avoid``.
    """
    preferred = [c for c in candidates if c not in exclude and c not in avoid]
    if preferred:
        return rng.choice(preferred)
    fallback = [c for c in candidates if c not in exclude]
    return rng.choice(fallback) if fallback else None


def _overlap_counts(simple: nx.Graph, u: str, v: str) -> Tuple[float, float]:
    """(|N(u) ∩ N(v)|, |N(u) ∪ N(v)|) recovered from the Jaccard score."""
    j = structural_mi(simple, u, v)
    union = (len(simple[u]) + len(simple[v])) / (1.0 + j)
    return j * union, union


def calibrate_support(graph: Graph, node_ids: Sequence[str], target: float) -> int:
    """
    Number of shared support nodes that brings the path's geometric-mean MI
    closest to ``target``.

    The path edges must already be wired. Each support node adds one to the
    overlap and to the union of every path edge, so MI never decreases as
    support nodes are added.
    """
    simple = structural_graph(graph)
    counts = [_overlap_counts(simple, u, v) for u, v in zip(node_ids, node_ids[1:])]

    def path_mi(k: int) -> float:
        return geometric_mean((a + k) / (b + k) for a, b in counts)

    best, best_gap = 0, abs(path_mi(0) - target)
    for k in range(1, MAX_SUPPORT_NODES + 1):
        mi = path_mi(k)
        gap = abs(mi - target)
        if gap < best_gap:
            best, best_gap = k, gap
        if mi >= target:
            break
    return best


def wire_path(
    graph: Graph,
    node_ids: Sequence[str],
    weights: Sequence[float],
    prefix: str,
    edge_type: str = "planted",
    support: Optional[int] = None,
) -> Path:
    """
    Join ``node_ids`` in order with new weighted edges and attach shared
    support neighbours to every node of the path.

    ``support=None`` calibrates the count to the geometric mean of
    ``weights`` (see calibrate_support).
    """
    edges: List[Edge] = []
    for j, (u, v) in enumerate(zip(node_ids, node_ids[1:])):
        edge = Edge(
            id=fresh_edge_id(graph, f"{prefix}_e{j}"),
            source=u,
            target=v,
            weight=float(weights[j]),
            type=edge_type,
        )
        graph.add_edge(edge)
        edges.append(edge)

    if support is None:
        support = calibrate_support(graph, node_ids, geometric_mean(weights))

    for m in range(support):
        cid = fresh_node_id(graph, f"{prefix}_s{m}")
        graph.add_node(Node(id=cid, attributes={"planted": True, "role": "support"}))
        for nid in node_ids:
            graph.add_edge(
                Edge(id=fresh_edge_id(graph, f"{cid}_{nid}"), source=cid, target=nid, type="support")
            )

    return Path(nodes=tuple(graph.get_node(n) for n in node_ids), edges=tuple(edges))


def band_weights(rng: SeededRandom, strength: str, n: int) -> List[float]:
    lo, hi = SIGNAL_BANDS[strength]
    return [rng.uniform(lo, hi) for _ in range(n)]


def structural_path_mi(simple: nx.Graph, path: Path) -> float:
    """Geometric mean of the structural MI of a path's edges."""
    return geometric_mean(structural_mi(simple, e.source, e.target) for e in path.edges)


def summarise(
    graph: Graph,
    paths: Iterable[Path],
    relevance: Dict[str, float],
    nodes_before: int,
    edges_before: int,
    strength: Optional[str],
) -> PlantingMetadata:
    paths = list(paths)
    simple = structural_graph(graph)
    structural = [structural_path_mi(simple, p) for p in paths]
    return PlantingMetadata(
        nodes_added=graph.node_count - nodes_before,
        edges_added=graph.edge_count - edges_before,
        avg_path_mi=sum(relevance.values()) / len(relevance) if relevance else 0.0,
        avg_structural_mi=sum(structural) / len(structural) if structural else 0.0,
        signal_strength=strength,
    )


def _endpoint_pool(graph: Graph, requested: Optional[List[str]], fallback: List[str]) -> List[str]:
    if requested:
        pool = [nid for nid in requested if graph.has_node(nid)]
        if pool:
            return pool
    return fallback


# ---------------------------------------------------------------------------
# Ground-truth planting
# ---------------------------------------------------------------------------
def plant_ground_truth_paths(graph: Graph, config: PlantedPathConfig) -> PlantingResult:
    """
    Plant ``config.num_paths`` paths of the configured signal strength.

    Parameters
    ----------
    graph : Graph
        Mutated in place.
    config : PlantedPathConfig

    Returns
    -------
    PlantingResult
        Planted paths, relevance per path uid (geometric mean of the planted
        edge weights) and metadata.

    Raises
    ------
    PlantingError
        Empty or single-node graph, or an invalid config.
    """
    if graph.node_count == 0:
        raise PlantingError("Cannot plant paths in empty graph")
    config.validate()
    if graph.node_count < 2:
        raise PlantingError("Need at least 2 nodes to plant paths")

    rng = SeededRandom(config.seed)
    nodes_before, edges_before = graph.node_count, graph.edge_count
    existing = [n.id for n in graph.get_all_nodes()]
    sources = _endpoint_pool(graph, config.source_nodes, existing)
    targets = _endpoint_pool(graph, config.target_nodes, existing)
    min_len, max_len = config.path_length

    paths: List[Path] = []
    relevance: Dict[str, float] = {}
    used: Set[str] = set()

    for i in range(config.num_paths):
        avoid = set() if config.allow_overlap else used
        src = pick_node(rng, sources, set(), avoid)
        tgt = pick_node(rng, targets, {src}, avoid)
        if tgt is None:
            # every allowed target is the source itself
            tgt = pick_node(rng, existing, {src}, avoid)
        used.update((src, tgt))

        length = rng.randint(min_len, max_len)
        prefix = f"planted_{config.seed}_{i}"
        inner = []
        for j in range(length - 1):
            nid = fresh_node_id(graph, f"{prefix}_n{j}")
            graph.add_node(Node(id=nid, attributes={"planted": True}))
            inner.append(nid)

        weights = band_weights(rng, config.signal_strength, length)
        path = wire_path(graph, [src, *inner, tgt], weights, prefix)
        paths.append(path)
        relevance[path.uid] = geometric_mean(weights)

    metadata = summarise(graph, paths, relevance, nodes_before, edges_before, config.signal_strength)
    return PlantingResult(graph=graph, ground_truth_paths=paths, relevance_scores=relevance, metadata=metadata)
