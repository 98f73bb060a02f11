# src/pathrank/evaluation/ground_truth.py

"""
Ground-truth strategies: structural oracles that score a set of paths
independently of the ranker under test.

  - attribute-importance : node attribute propagated along the path
  - between-graph        : every path between seed sources and targets,
                           scored by planted edge strength
  - ego-network          : paths from a centre node inside its ego network
  - degree               : mean node degree along the path

All strategies return RankedPath lists, best first, and never mutate the
graph.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence

from ..analytics.centrality import degree_scores
from ..analytics.traversal import ego_network, enumerate_simple_paths
from ..build.errors import ConfigError
from ..build.graph import Graph
from ..build.types import Path, RankedPath, geometric_mean

GROUND_TRUTH_TYPES = ("attribute-importance", "between-graph", "ego-network", "degree")


def _ranked(paths: Sequence[Path], score: Callable[[Path], float]) -> List[RankedPath]:
    return sorted((RankedPath(path=p, score=score(p)) for p in paths), key=lambda rp: rp.score, reverse=True)


def _edge_strength(path: Path) -> float:
    return geometric_mean(1.0 if e.weight is None else e.weight for e in path.edges)


def attribute_importance_ground_truth(
    graph: Graph,
    paths: Sequence[Path],
    attribute: str = "importance",
    decay: float = 0.9,
) -> List[RankedPath]:
    """
    Mean of a numeric node attribute along each path, damped by
    ``decay ** hops``. Nodes without the attribute contribute 0.
    """
    def score(p: Path) -> float:
        values = [float(n.get(attribute, 0.0) or 0.0) for n in p.nodes]
        return (sum(values) / len(values)) * (decay ** p.length)

    return _ranked(paths, score)


def between_graph_ground_truth(
    graph: Graph,
    sources: Sequence[str],
    targets: Sequence[str],
    max_length: int = 3,
    undirected: Optional[bool] = None,
) -> List[RankedPath]:
    """
    Enumerate paths for every (source, target) seed pair and rank them by
    the geometric mean of their edge weights (unweighted edges count 1.0).
    """
    if undirected is None:
        undirected = not graph.directed
    paths: List[Path] = []
    seen = set()
    for s in sources:
        for t in targets:
            if s == t:
                continue
            for p in enumerate_simple_paths(graph, s, t, max_length, undirected=undirected):
                if p.uid not in seen:
                    seen.add(p.uid)
                    paths.append(p)
    return _ranked(paths, _edge_strength)


def ego_network_ground_truth(
    graph: Graph,
    center_id: str,
    radius: int = 2,
    max_length: int = 2,
) -> List[RankedPath]:
    """
    Paths from ``center_id`` to every other ego-network member, ranked by
    proximity (1 / hops) and then by edge strength.
    """
    ego = ego_network(graph, center_id, radius=radius)
    paths: List[Path] = []
    for node in ego.get_all_nodes():
        if node.id == center_id:
            continue
        paths.extend(enumerate_simple_paths(ego, center_id, node.id, max_length, undirected=True))

    ranked = [RankedPath(path=p, score=1.0 / p.length + 1e-3 * _edge_strength(p)) for p in paths]
    return sorted(ranked, key=lambda rp: rp.score, reverse=True)


def degree_ground_truth(graph: Graph, paths: Sequence[Path]) -> List[RankedPath]:
    """Mean distinct-neighbour degree of each path's nodes."""
    deg = degree_scores(graph)
    return _ranked(paths, lambda p: sum(deg.get(n, 0) for n in p.node_ids) / len(p.nodes))


_STRATEGIES: Dict[str, Callable[..., List[RankedPath]]] = {
    "attribute-importance": attribute_importance_ground_truth,
    "between-graph": between_graph_ground_truth,
    "ego-network": ego_network_ground_truth,
    "degree": degree_ground_truth,
}


def compute_ground_truth(graph: Graph, gt_type: str, **kwargs) -> List[RankedPath]:
    """Dispatch to the named ground-truth strategy."""
    try:
        strategy = _STRATEGIES[gt_type]
    except KeyError:
        raise ConfigError(
            f"Unknown ground truth type '{gt_type}' (expected one of {', '.join(GROUND_TRUTH_TYPES)})"
        ) from None
    return strategy(graph, **kwargs)
