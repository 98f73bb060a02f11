# src/pathrank/analytics/centrality.py

"""
Centrality computations used by baseline rankers and ground truth.

This module computes:
  - Raw degree (distinct neighbours, both directions)
  - PageRank (NetworkX, damping 0.85 by default)
"""

from __future__ import annotations

from typing import Dict

import networkx as nx

from ..build.graph import Graph
from ..utils.constants import PAGERANK_DAMPING


def degree_scores(graph: Graph) -> Dict[str, int]:
    """Distinct-neighbour degree per node id."""
    return {n.id: graph.degree(n.id) for n in graph.get_all_nodes()}


def pagerank_scores(
    graph: Graph,
    damping: float = PAGERANK_DAMPING,
    use_weights: bool = False,
) -> Dict[str, float]:
    """
    PageRank per node id.

    Parallel edges are collapsed first. Graphs without edges give the
    uniform distribution.
    """
    if graph.node_count == 0:
        return {}
    G = graph.to_networkx()
    if G.number_of_edges() == 0:
        return {n: 1.0 / G.number_of_nodes() for n in G.nodes()}
    return nx.pagerank(G, alpha=damping, weight="weight" if use_weights else None)
