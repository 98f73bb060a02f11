# src/pathrank/analytics/traversal.py

"""
Traversal utilities for path ranking and ground truth.

This module implements:
  - bounded simple-path enumeration between two nodes
  - shortest hop distance under a traversal mode
  - ego-network extraction around a node

Enumeration runs on the Graph's NetworkX multigraph index, so parallel edges
produce distinct paths and every hop maps back to an Edge record.
"""

from __future__ import annotations

from itertools import islice
from typing import List, Optional

import networkx as nx

from ..build.errors import InvalidNodeError
from ..build.graph import Graph
from ..build.types import Path
from ..utils.constants import MAX_ENUMERATED_PATHS


def _view(graph: Graph, undirected: bool) -> nx.Graph:
    return graph.nx_view(undirected=undirected)


def _require(graph: Graph, *node_ids: str) -> None:
    for nid in node_ids:
        if not graph.has_node(nid):
            raise InvalidNodeError(f"Node '{nid}' not found in graph")


def shortest_hop_distance(
    graph: Graph,
    start_id: str,
    end_id: str,
    undirected: bool = False,
) -> Optional[int]:
    """Fewest hops from start to end, or None when unreachable."""
    _require(graph, start_id, end_id)
    try:
        return nx.shortest_path_length(_view(graph, undirected), start_id, end_id)
    except nx.NetworkXNoPath:
        return None


def enumerate_simple_paths(
    graph: Graph,
    start_id: str,
    end_id: str,
    max_length: int,
    undirected: bool = False,
    limit: int = MAX_ENUMERATED_PATHS,
) -> List[Path]:
    """
    All simple paths from ``start_id`` to ``end_id`` with at most
    ``max_length`` hops, in DFS discovery order.

    Parameters
    ----------
    graph : Graph
    start_id, end_id : str
        Must both exist (InvalidNodeError otherwise).
    max_length : int
        Hop cap; values below 1 are treated as 1.
    undirected : bool
        Follow directed edges against their orientation too.
    limit : int
        Stop after this many paths.

    Returns
    -------
    List[Path]
        A single zero-hop path when start == end; empty when unreachable.
    """
    _require(graph, start_id, end_id)

    if start_id == end_id:
        return [Path(nodes=(graph.get_node(start_id),))]

    cutoff = max(1, int(max_length))
    G = _view(graph, undirected)

    edge_paths = nx.all_simple_edge_paths(G, start_id, end_id, cutoff=cutoff)
    paths: List[Path] = []
    for edge_path in islice(edge_paths, max(0, int(limit))):
        # multigraph edges come back as (u, v, key); key is the edge id
        paths.append(graph.path_from_edge_ids(start_id, [key for _, _, key in edge_path]))
    return paths


def ego_network(graph: Graph, center_id: str, radius: int = 1) -> Graph:
    """
    Induced subgraph of every node within ``radius`` hops of ``center_id``
    (edge direction ignored).
    """
    _require(graph, center_id)
    G = _view(graph, undirected=True)
    members = nx.single_source_shortest_path_length(G, center_id, cutoff=max(0, radius))

    ego = Graph(directed=graph.directed)
    for node in graph.get_all_nodes():
        if node.id in members:
            ego.add_node(node)
    for edge in graph.get_all_edges():
        if edge.source in members and edge.target in members:
            ego.add_edge(edge)
    return ego
