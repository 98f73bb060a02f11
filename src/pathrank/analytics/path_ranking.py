# src/pathrank/analytics/path_ranking.py

"""
MI-based path ranking.

Every simple path between two nodes (up to ``max_length`` hops) is scored as

    score = geometric_mean(edge MI values) - lambda * hops

The geometric mean keeps quality comparable across path lengths; lambda
trades that quality against hop count. At lambda = 0 a long, well-connected
path can beat a short, weakly-connected one. Past some lambda the shorter
path always wins.
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional

from ..build.errors import InvalidNodeError
from ..build.graph import Graph
from ..build.types import Edge, Path, RankedPath, geometric_mean
from ..utils.constants import (
    DEFAULT_LAMBDA,
    DEFAULT_MAX_LENGTH,
    DEFAULT_MAX_PATHS,
    MAX_ENUMERATED_PATHS,
    TRAVERSAL_MODES,
)
from .mutual_information import (
    MICache,
    MutualInformationConfig,
    edge_mi_lookup,
    precompute_mutual_information,
)
from .traversal import enumerate_simple_paths, shortest_hop_distance


def _resolve_mode(graph: Graph, traversal_mode: Optional[str]) -> bool:
    """Return True when traversal should ignore edge direction."""
    if traversal_mode is None:
        return not graph.directed
    if traversal_mode not in TRAVERSAL_MODES:
        raise ValueError(f"traversal_mode must be one of {TRAVERSAL_MODES}, got {traversal_mode!r}")
    return traversal_mode == "undirected"


def score_path(
    path: Path,
    mi_of: Callable[[Edge], float],
    lambda_: float = DEFAULT_LAMBDA,
) -> RankedPath:
    """Score one path with a precomputed or lazy ``edge -> MI`` function."""
    edge_mi = tuple(mi_of(e) for e in path.edges)
    gm = geometric_mean(edge_mi)
    penalty = lambda_ * path.length if lambda_ > 0 else None
    return RankedPath(
        path=path,
        score=gm - (penalty or 0.0),
        geometric_mean_mi=gm,
        edge_mi_values=edge_mi,
        length_penalty=penalty,
    )


def score_paths(
    graph: Graph,
    paths: Iterable[Path],
    lambda_: float = DEFAULT_LAMBDA,
    mi_cache: Optional[MICache] = None,
    mi_config: Optional[MutualInformationConfig] = None,
) -> List[RankedPath]:
    """
    Score ``paths`` and return them sorted by score, best first.

    Ties keep input order.
    """
    if lambda_ < 0:
        raise ValueError(f"lambda_ must be >= 0, got {lambda_}")
    mi_of = edge_mi_lookup(graph, mi_cache, mi_config)
    ranked = [score_path(p, mi_of, lambda_) for p in paths]
    ranked.sort(key=lambda rp: rp.score, reverse=True)
    return ranked


def rank_paths(
    graph: Graph,
    start_id: str,
    end_id: str,
    *,
    traversal_mode: Optional[str] = None,
    lambda_: float = DEFAULT_LAMBDA,
    shortest_only: bool = False,
    max_length: int = DEFAULT_MAX_LENGTH,
    max_paths: int = DEFAULT_MAX_PATHS,
    max_enumerated: int = MAX_ENUMERATED_PATHS,
    mi_cache: Optional[MICache] = None,
    mi_config: Optional[MutualInformationConfig] = None,
) -> Optional[List[RankedPath]]:
    """
    Rank the simple paths between two nodes.

    Parameters
    ----------
    graph : Graph
    start_id, end_id : str
    traversal_mode : {"directed", "undirected"}, optional
        Defaults to the graph's own directedness.
    lambda_ : float
        Length penalty per hop (>= 0).
    shortest_only : bool
        Only score paths of minimum hop count.
    max_length : int
        Hop cap (clamped to >= 1).
    max_paths : int
        Number of ranked paths returned.
    max_enumerated : int
        Cap on enumerated candidate paths.
    mi_cache : dict, optional
        Precomputed edge MI (see precompute_mutual_information).
    mi_config : MutualInformationConfig, optional

    Returns
    -------
    Optional[List[RankedPath]]
        Best first, or None when no path exists within ``max_length``.

    Raises
    ------
    InvalidNodeError
        If start or end is not in the graph.
    """
    for nid in (start_id, end_id):
        if not graph.has_node(nid):
            raise InvalidNodeError(f"Node '{nid}' not found in graph")
    if lambda_ < 0:
        raise ValueError(f"lambda_ must be >= 0, got {lambda_}")

    undirected = _resolve_mode(graph, traversal_mode)
    max_length = max(1, int(max_length))

    if start_id == end_id:
        trivial = Path(nodes=(graph.get_node(start_id),))
        return [RankedPath(path=trivial, score=1.0, geometric_mean_mi=1.0)]

    cutoff = max_length
    if shortest_only:
        dist = shortest_hop_distance(graph, start_id, end_id, undirected=undirected)
        if dist is None or dist > max_length:
            return None
        cutoff = dist

    paths = enumerate_simple_paths(
        graph, start_id, end_id, cutoff, undirected=undirected, limit=max_enumerated
    )
    if shortest_only:
        paths = [p for p in paths if p.length == cutoff]
    if not paths:
        return None

    ranked = score_paths(graph, paths, lambda_=lambda_, mi_cache=mi_cache, mi_config=mi_config)
    return ranked[: max(0, int(max_paths))]


def get_best_path(graph: Graph, start_id: str, end_id: str, **options) -> Optional[RankedPath]:
    """Top-ranked path between two nodes, or None."""
    ranked = rank_paths(graph, start_id, end_id, **{**options, "max_paths": 1})
    return ranked[0] if ranked else None


class PathRanker:
    """
    Reusable ranker holding a precomputed MI cache for one graph.

    The cache is built on construction; call refresh() after mutating the
    graph.
    """

    def __init__(
        self,
        graph: Graph,
        *,
        lambda_: float = DEFAULT_LAMBDA,
        traversal_mode: Optional[str] = None,
        shortest_only: bool = False,
        max_length: int = DEFAULT_MAX_LENGTH,
        max_paths: int = DEFAULT_MAX_PATHS,
        mi_config: Optional[MutualInformationConfig] = None,
    ) -> None:
        self.graph = graph
        self.mi_config = mi_config
        self.options = {
            "lambda_": lambda_,
            "traversal_mode": traversal_mode,
            "shortest_only": shortest_only,
            "max_length": max_length,
            "max_paths": max_paths,
        }
        self.mi_cache: MICache = precompute_mutual_information(graph, mi_config)

    def refresh(self) -> None:
        self.mi_cache = precompute_mutual_information(self.graph, self.mi_config)

    def rank(self, start_id: str, end_id: str, **overrides) -> Optional[List[RankedPath]]:
        opts = {**self.options, **overrides}
        return rank_paths(
            self.graph,
            start_id,
            end_id,
            mi_cache=self.mi_cache,
            mi_config=self.mi_config,
            **opts,
        )

    def get_best(self, start_id: str, end_id: str, **overrides) -> Optional[RankedPath]:
        ranked = self.rank(start_id, end_id, **{**overrides, "max_paths": 1})
        return ranked[0] if ranked else None
