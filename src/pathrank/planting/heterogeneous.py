# src/pathrank/planting/heterogeneous.py

"""
Type-template planting for heterogeneous graphs.

A template such as ["Work", "Author", "Work"] fixes the node type at every
position of a planted path. Existing nodes of the right type are used first;
once they run out, fresh nodes of that type are created so the requested
number of paths is always reached.
"""

from __future__ import annotations

from typing import Dict, List, Sequence, Set

from ..build.errors import PlantingError
from ..build.graph import Graph
from ..build.types import Node, Path, geometric_mean
from ..utils.seeded_random import SeededRandom
from .path_generator import (
    PlantedPathConfig,
    PlantingResult,
    band_weights,
    fresh_node_id,
    pick_node,
    summarise,
    wire_path,
)


def path_follows_template(path: Path, template: Sequence[str]) -> bool:
    """True iff the node types of ``path`` equal ``template`` position by position."""
    if len(path.nodes) != len(template):
        return False
    return all(node.type == t for node, t in zip(path.nodes, template))


def plant_heterogeneous_paths(
    graph: Graph,
    path_template: Sequence[str],
    config: PlantedPathConfig,
) -> PlantingResult:
    """
    Plant ``config.num_paths`` paths whose node types follow ``path_template``.

    Path length is ``len(path_template) - 1``; ``config.path_length`` is not
    used. Signal strength and seed behave as in plant_ground_truth_paths().

    Raises
    ------
    PlantingError
        Template shorter than 2, empty graph, or a template type with no node
        in the graph.
    """
    template = list(path_template)
    if len(template) < 2:
        raise PlantingError("Path template must have at least 2 node types")
    if graph.node_count == 0:
        raise PlantingError("Cannot plant paths in empty graph")
    config.validate()

    pools: Dict[str, List[str]] = {}
    for t in template:
        if t not in pools:
            nodes = graph.nodes_of_type(t)
            if not nodes:
                raise PlantingError(f"No nodes found with type: {t}")
            pools[t] = [n.id for n in nodes]

    rng = SeededRandom(config.seed)
    nodes_before, edges_before = graph.node_count, graph.edge_count

    paths: List[Path] = []
    relevance: Dict[str, float] = {}
    used: Set[str] = set()

    for i in range(config.num_paths):
        prefix = f"typed_{config.seed}_{i}"
        chain: List[str] = []
        for pos, t in enumerate(template):
            exclude = set(chain)
            if config.allow_overlap:
                nid = pick_node(rng, pools[t], exclude, set())
            else:
                fresh = [c for c in pools[t] if c not in used and c not in exclude]
                nid = rng.choice(fresh) if fresh else None
            if nid is None:
                nid = fresh_node_id(graph, f"{prefix}_{t.lower()}{pos}")
                graph.add_node(Node(id=nid, type=t, attributes={"planted": True}))
            chain.append(nid)
        used.update(chain)

        weights = band_weights(rng, config.signal_strength, len(chain) - 1)
        path = wire_path(graph, chain, weights, prefix)
        paths.append(path)
        relevance[path.uid] = geometric_mean(weights)

    metadata = summarise(graph, paths, relevance, nodes_before, edges_before, config.signal_strength)
    return PlantingResult(graph=graph, ground_truth_paths=paths, relevance_scores=relevance, metadata=metadata)
