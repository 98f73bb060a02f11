# src/pathrank/evaluation/baselines.py

"""
Baseline path rankers and the ranker registry.

Every ranker has the same shape as the MI ranker:

    ranker(graph, paths, **options) -> List[RankedPath]   (best first)

so the experiment runner can treat them as interchangeable table entries.
Ties keep input order.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, Sequence

from ..analytics.centrality import degree_scores, pagerank_scores
from ..analytics.path_ranking import score_paths
from ..build.errors import ConfigError
from ..build.graph import Graph
from ..build.types import Edge, Path, RankedPath
from ..utils.constants import DEFAULT_LAMBDA, PAGERANK_DAMPING
from ..utils.seeded_random import SeededRandom

Ranker = Callable[..., List[RankedPath]]


def _sorted(ranked: Iterable[RankedPath]) -> List[RankedPath]:
    return sorted(ranked, key=lambda rp: rp.score, reverse=True)


def mi_ranker(
    graph: Graph,
    paths: Sequence[Path],
    lambda_: float = DEFAULT_LAMBDA,
    mi_cache=None,
    mi_config=None,
    **_,
) -> List[RankedPath]:
    """Geometric-mean MI minus lambda * hops (see analytics.path_ranking)."""
    return score_paths(graph, paths, lambda_=lambda_, mi_cache=mi_cache, mi_config=mi_config)


def random_ranker(graph: Optional[Graph], paths: Sequence[Path], seed: int = 42, **_) -> List[RankedPath]:
    """Seeded shuffle; scores descend from 1.0 in steps of 1/n."""
    n = len(paths)
    shuffled = SeededRandom(seed).shuffle(list(paths))
    return [RankedPath(path=p, score=1.0 - i / n) for i, p in enumerate(shuffled)]


def degree_based_ranker(graph: Graph, paths: Sequence[Path], normalize: bool = False, **_) -> List[RankedPath]:
    """Sum of node degrees along the path (mean when ``normalize``)."""
    deg = degree_scores(graph)
    ranked = []
    for p in paths:
        total = float(sum(deg.get(nid, 0) for nid in p.node_ids))
        ranked.append(RankedPath(path=p, score=total / len(p.nodes) if normalize else total))
    return _sorted(ranked)


def page_rank_ranker(
    graph: Graph,
    paths: Sequence[Path],
    damping: float = PAGERANK_DAMPING,
    **_,
) -> List[RankedPath]:
    """Mean PageRank of the path's nodes."""
    if not paths:
        return []
    pr = pagerank_scores(graph, damping=damping)
    return _sorted(
        RankedPath(path=p, score=sum(pr.get(nid, 0.0) for nid in p.node_ids) / len(p.nodes))
        for p in paths
    )


def shortest_path_ranker(graph: Optional[Graph], paths: Sequence[Path], **_) -> List[RankedPath]:
    """1 / (hops + 1): a zero-hop path scores 1.0."""
    return _sorted(RankedPath(path=p, score=1.0 / (p.length + 1)) for p in paths)


def _default_weight(edge: Edge) -> float:
    return 1.0 if edge.weight is None else edge.weight


def weight_based_ranker(
    graph: Optional[Graph],
    paths: Sequence[Path],
    weight_fn: Callable[[Edge], float] = _default_weight,
    normalize: bool = False,
    **_,
) -> List[RankedPath]:
    """Sum of edge weights (mean when ``normalize``); zero-hop paths score 0."""
    ranked = []
    for p in paths:
        total = float(sum(weight_fn(e) for e in p.edges))
        score = total / p.length if normalize and p.length else total
        ranked.append(RankedPath(path=p, score=score))
    return _sorted(ranked)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------
RANKERS: Dict[str, Ranker] = {
    "mi": mi_ranker,
    "random": random_ranker,
    "degree": degree_based_ranker,
    "pagerank": page_rank_ranker,
    "shortest": shortest_path_ranker,
    "weight": weight_based_ranker,
}


def get_ranker(name: str) -> Ranker:
    try:
        return RANKERS[name.lower()]
    except KeyError:
        raise ConfigError(f"Unknown method '{name}' (expected one of {', '.join(RANKERS)})") from None
