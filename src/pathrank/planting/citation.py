# src/pathrank/planting/citation.py

"""
Citation-network planting.

Plants paths that mirror real scholarly communication patterns over
Work / Author / Source nodes:

    direct-citation-chain   W1 -> W2 -> W3   (cites, cites)
    co-citation-bridge      W1 <- W2 -> W3   (W2 cites both)
    bibliographic-coupling  W1 -> W2 <- W3   (both cite W2)
    author-mediated         W1 -> A  <- W2   (shared author)
    venue-mediated          W1 -> S  <- W2   (shared venue)

Edges are named ``citation_{src}_{dst}``, ``authorship_{work}_{author}`` and
``publication_{work}_{source}``. An edge that already exists under that id is
reused rather than duplicated.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from ..build.errors import PlantingError
from ..build.graph import Graph
from ..build.types import Edge, Path, geometric_mean
from ..utils.constants import AUTHOR_TYPE, SOURCE_TYPE, WORK_TYPE
from ..utils.seeded_random import SeededRandom
from .path_generator import PlantedPathConfig, PlantingResult, summarise

CITATION_PATH_TYPES = (
    "direct-citation-chain",
    "co-citation-bridge",
    "bibliographic-coupling",
    "author-mediated",
    "venue-mediated",
)

# edge kind -> (id prefix, weight floor); weights are floor + U[0,1) * (1 - floor)
_EDGE_KINDS: Dict[str, Tuple[str, float]] = {
    "citation": ("citation", 0.5),
    "authorship": ("authorship", 0.6),
    "publication": ("publication", 0.4),
}


def _link(graph: Graph, kind: str, source: str, target: str, rng: SeededRandom) -> Edge:
    prefix, floor = _EDGE_KINDS[kind]
    edge_id = f"{prefix}_{source}_{target}"
    existing = graph.get_edge(edge_id)
    if existing is not None:
        return existing
    edge = Edge(
        id=edge_id,
        source=source,
        target=target,
        weight=floor + rng.next_double() * (1.0 - floor),
        type=kind,
    )
    graph.add_edge(edge)
    return edge


def _chain_triples(
    graph: Graph,
    works: List[str],
    num_paths: int,
    rng: SeededRandom,
    orient: Tuple[Tuple[int, int], Tuple[int, int]],
) -> List[Path]:
    """Plant W1-W2-W3 patterns; ``orient`` gives (src, dst) positions for both edges."""
    paths: List[Path] = []
    for i in range(num_paths):
        idx = i * 3
        if idx + 3 > len(works):
            break
        trio = works[idx:idx + 3]
        e1 = _link(graph, "citation", trio[orient[0][0]], trio[orient[0][1]], rng)
        e2 = _link(graph, "citation", trio[orient[1][0]], trio[orient[1][1]], rng)
        paths.append(Path(nodes=tuple(graph.get_node(n) for n in trio), edges=(e1, e2)))
    return paths


def _mediated(
    graph: Graph,
    works: List[str],
    mediators: List[str],
    kind: str,
    num_paths: int,
    rng: SeededRandom,
) -> List[Path]:
    paths: List[Path] = []
    for i in range(num_paths):
        idx = i * 2
        if idx + 2 > len(works):
            break
        w1, w2 = works[idx], works[idx + 1]
        hub = mediators[i % len(mediators)]
        e1 = _link(graph, kind, w1, hub, rng)
        e2 = _link(graph, kind, w2, hub, rng)
        nodes = (graph.get_node(w1), graph.get_node(hub), graph.get_node(w2))
        paths.append(Path(nodes=nodes, edges=(e1, e2)))
    return paths


def plant_citation_paths(graph: Graph, path_type: str, config: PlantedPathConfig) -> PlantingResult:
    """
    Plant ``config.num_paths`` citation-pattern paths of ``path_type``.

    Fewer paths are planted when the graph lacks enough Work nodes for every
    requested pattern instance.

    Raises
    ------
    PlantingError
        Unknown ``path_type``, fewer than 3 Work nodes, or no Author / Source
        node for the mediated patterns.
    """
    if path_type not in CITATION_PATH_TYPES:
        raise PlantingError(
            f"Unknown citation path type '{path_type}' (expected one of {', '.join(CITATION_PATH_TYPES)})"
        )

    works = [n.id for n in graph.nodes_of_type(WORK_TYPE)]
    if len(works) < 3:
        raise PlantingError("Need at least 3 work nodes to plant citation paths")

    rng = SeededRandom(config.seed)
    nodes_before, edges_before = graph.node_count, graph.edge_count
    selected = rng.shuffle(works)[: min(config.num_paths * 3, len(works))]

    if path_type == "direct-citation-chain":
        paths = _chain_triples(graph, selected, config.num_paths, rng, ((0, 1), (1, 2)))
    elif path_type == "co-citation-bridge":
        paths = _chain_triples(graph, selected, config.num_paths, rng, ((1, 0), (1, 2)))
    elif path_type == "bibliographic-coupling":
        paths = _chain_triples(graph, selected, config.num_paths, rng, ((0, 1), (2, 1)))
    else:
        mediator_type, kind = (
            (AUTHOR_TYPE, "authorship") if path_type == "author-mediated" else (SOURCE_TYPE, "publication")
        )
        mediators = [n.id for n in graph.nodes_of_type(mediator_type)]
        if not mediators:
            raise PlantingError(f"No {mediator_type} nodes found for {path_type} paths")
        paths = _mediated(graph, selected, mediators, kind, config.num_paths, rng)

    relevance = {
        p.uid: geometric_mean(1.0 if e.weight is None else e.weight for e in p.edges) for p in paths
    }
    metadata = summarise(graph, paths, relevance, nodes_before, edges_before, None)
    return PlantingResult(graph=graph, ground_truth_paths=paths, relevance_scores=relevance, metadata=metadata)
