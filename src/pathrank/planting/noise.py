# src/pathrank/planting/noise.py

"""
Noise path planting.

Noise paths are distractors: 2-4 hop chains through fresh intermediate
nodes, with low edge weights and no shared support neighbours, so their
structural MI stays near zero. Endpoint pairs already joined by a planted
path are never reused.
"""

from __future__ import annotations

from typing import Iterable, List, Set

from ..build.graph import Graph
from ..build.types import Edge, Node, Path
from ..utils.constants import NOISE_LENGTH_RANGE, NOISE_WEIGHT_RANGE
from ..utils.seeded_random import SeededRandom
from .path_generator import fresh_edge_id, fresh_node_id


def _pair(u: str, v: str) -> frozenset:
    return frozenset((u, v))


def plant_noise_paths(
    graph: Graph,
    existing_paths: Iterable[Path],
    count: int,
    seed: int,
) -> List[Path]:
    """
    Add up to ``count`` low-MI paths to ``graph`` and return them.

    Fewer paths are returned when the graph runs out of unused endpoint
    pairs. Nothing is added when ``count`` <= 0 or the graph has fewer than
    two nodes.
    """
    if count <= 0 or graph.node_count < 2:
        return []

    rng = SeededRandom(seed)
    node_ids = [n.id for n in graph.get_all_nodes()]
    taken: Set[frozenset] = {_pair(p.source.id, p.target.id) for p in existing_paths}
    lo_len, hi_len = NOISE_LENGTH_RANGE
    lo_w, hi_w = NOISE_WEIGHT_RANGE

    paths: List[Path] = []
    attempts = 0
    max_attempts = count * 20
    while len(paths) < count and attempts < max_attempts:
        attempts += 1
        src, tgt = rng.sample(node_ids, 2)
        if _pair(src, tgt) in taken:
            continue
        taken.add(_pair(src, tgt))

        i = len(paths)
        length = rng.randint(lo_len, hi_len)
        chain = [src]
        for j in range(length - 1):
            nid = fresh_node_id(graph, f"noise_{seed}_{i}_n{j}")
            graph.add_node(Node(id=nid, attributes={"planted": True, "role": "noise"}))
            chain.append(nid)
        chain.append(tgt)

        edges = []
        for j, (u, v) in enumerate(zip(chain, chain[1:])):
            edge = Edge(
                id=fresh_edge_id(graph, f"noise_{seed}_{i}_e{j}"),
                source=u,
                target=v,
                weight=rng.uniform(lo_w, hi_w),
                type="noise",
            )
            graph.add_edge(edge)
            edges.append(edge)

        paths.append(Path(nodes=tuple(graph.get_node(n) for n in chain), edges=tuple(edges)))

    return paths


def add_noise_paths(
    graph: Graph,
    existing_paths: Iterable[Path],
    count: int,
    seed: int,
) -> Graph:
    """
    Add ``count`` noise paths and return the same graph object.

    Returns the input unchanged when ``count`` is 0 or the graph has fewer
    than two nodes.
    """
    plant_noise_paths(graph, existing_paths, count, seed)
    return graph
