# src/pathrank/build/graph.py

"""
Graph container for the path ranking engine.

This module is responsible ONLY for:
  - storing typed nodes and identified edges
  - keeping a NetworkX multigraph index in step with every insertion
  - neighbour / degree / edge lookups used by ranking and planting
  - returning basic build statistics

It deliberately does NOT score or rank anything.

Edges are stored in a MultiGraph (undirected) or MultiDiGraph (directed) keyed
by edge id, so parallel edges between the same pair survive and every
traversal can be mapped back to the original Edge record.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

import networkx as nx

from .errors import InvalidEdgeError, InvalidNodeError
from .types import Edge, Node, Path


@dataclass
class BuildStats:
    n_nodes: int
    n_edges: int
    types: Counter


class Graph:
    """
    Directed or undirected graph over Node/Edge records.

    Nodes and edges are kept in insertion order. Directedness is fixed at
    construction; in an undirected graph every edge is traversable both ways
    but keeps the orientation it was added with.
    """

    def __init__(self, directed: bool = False) -> None:
        self.directed = directed
        self._nodes: Dict[str, Node] = {}
        self._edges: Dict[str, Edge] = {}
        self._nx = nx.MultiDiGraph() if directed else nx.MultiGraph()

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def add_node(self, node: Node) -> None:
        """Insert ``node``; a node whose id is already present is ignored."""
        if node.id in self._nodes:
            return
        self._nodes[node.id] = node
        self._nx.add_node(node.id)

    def add_edge(self, edge: Edge) -> None:
        """
        Insert ``edge`` and index it under both endpoints.

        Raises
        ------
        InvalidEdgeError
            If either endpoint is missing or the edge id is already in use.
        """
        if edge.source not in self._nodes:
            raise InvalidEdgeError(f"Edge {edge.id}: source node '{edge.source}' not found in graph")
        if edge.target not in self._nodes:
            raise InvalidEdgeError(f"Edge {edge.id}: target node '{edge.target}' not found in graph")
        if edge.id in self._edges:
            raise InvalidEdgeError(f"Edge id '{edge.id}' already exists in graph")

        self._edges[edge.id] = edge
        self._nx.add_edge(edge.source, edge.target, key=edge.id)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def has_edge(self, edge_id: str) -> bool:
        return edge_id in self._edges

    def get_node(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def get_edge(self, edge_id: str) -> Optional[Edge]:
        return self._edges.get(edge_id)

    def has_edge_between(self, u: str, v: str) -> bool:
        """True if any edge joins u and v (either orientation)."""
        if u not in self._nodes or v not in self._nodes:
            return False
        if self.directed:
            return self._nx.has_edge(u, v) or self._nx.has_edge(v, u)
        return self._nx.has_edge(u, v)

    def get_neighbors(self, node_id: str, both_directions: bool = False) -> Optional[List[str]]:
        """
        Adjacent node ids, or None when ``node_id`` is not in the graph.

        Directed graphs return successors only unless ``both_directions``
        is set. Ids are de-duplicated and keep adjacency order.
        """
        if node_id not in self._nodes:
            return None
        if not self.directed:
            return list(self._nx.neighbors(node_id))

        out = list(self._nx.successors(node_id))
        if both_directions:
            seen = set(out)
            for n in self._nx.predecessors(node_id):
                if n not in seen:
                    seen.add(n)
                    out.append(n)
        return out

    def get_outgoing_edges(self, node_id: str) -> Optional[List[Edge]]:
        """Edges leaving ``node_id`` (all incident edges when undirected)."""
        if node_id not in self._nodes:
            return None
        return [self._edges[k] for _, _, k in self._nx.edges(node_id, keys=True)]

    def get_incident_edges(self, node_id: str) -> Optional[List[Edge]]:
        """Every edge touching ``node_id`` regardless of direction."""
        if node_id not in self._nodes:
            return None
        if not self.directed:
            return self.get_outgoing_edges(node_id)
        keys = [k for _, _, k in self._nx.out_edges(node_id, keys=True)]
        keys += [k for _, _, k in self._nx.in_edges(node_id, keys=True)]
        return [self._edges[k] for k in keys]

    def degree(self, node_id: str) -> int:
        """Number of distinct neighbours in either direction (0 if absent)."""
        nbrs = self.get_neighbors(node_id, both_directions=True)
        return len(nbrs) if nbrs is not None else 0

    def get_all_nodes(self) -> Tuple[Node, ...]:
        return tuple(self._nodes.values())

    def get_all_edges(self) -> Tuple[Edge, ...]:
        return tuple(self._edges.values())

    def nodes_of_type(self, node_type: str) -> List[Node]:
        return [n for n in self._nodes.values() if n.type == node_type]

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------
    def path_from_edge_ids(self, start_id: str, edge_ids: Iterable[str]) -> Path:
        """Build a Path by walking ``edge_ids`` from ``start_id``."""
        if start_id not in self._nodes:
            raise InvalidNodeError(f"Node '{start_id}' not found in graph")
        nodes = [self._nodes[start_id]]
        edges: List[Edge] = []
        current = start_id
        for eid in edge_ids:
            edge = self._edges.get(eid)
            if edge is None:
                raise InvalidEdgeError(f"Edge '{eid}' not found in graph")
            if current not in (edge.source, edge.target):
                raise InvalidEdgeError(f"Edge '{eid}' is not incident to '{current}'")
            current = edge.other(current)
            edges.append(edge)
            nodes.append(self._nodes[current])
        return Path(nodes=tuple(nodes), edges=tuple(edges))

    def validate_path(self, path: Path, respect_direction: Optional[bool] = None) -> bool:
        """
        Check that every node and edge of ``path`` lives in this graph and
        that each edge runs node i → node i+1 when direction is respected.
        """
        if respect_direction is None:
            respect_direction = self.directed
        if any(n.id not in self._nodes for n in path.nodes):
            return False
        for i, edge in enumerate(path.edges):
            if edge.id not in self._edges:
                return False
            if respect_direction and not (
                edge.source == path.nodes[i].id and edge.target == path.nodes[i + 1].id
            ):
                return False
        return True

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------
    def copy(self) -> "Graph":
        """Independent copy (node/edge records are shared, indexes are not)."""
        g = Graph(directed=self.directed)
        for node in self._nodes.values():
            g.add_node(node)
        for edge in self._edges.values():
            g.add_edge(edge)
        return g

    def nx_view(self, undirected: bool = False) -> nx.Graph:
        """
        Read-only view of the internal multigraph, keyed by edge id.

        ``undirected=True`` on a directed graph returns an undirected view so
        traversal may follow edges against their orientation.
        """
        if undirected and self.directed:
            return self._nx.to_undirected(as_view=True)
        return self._nx.copy(as_view=True)

    def to_networkx(self) -> nx.Graph:
        """
        Simple nx.Graph / nx.DiGraph with node and edge attributes.

        Parallel edges collapse into one; the largest weight wins.
        """
        G = nx.DiGraph() if self.directed else nx.Graph()
        for node in self._nodes.values():
            G.add_node(node.id, type=node.type, **node.attributes)
        for edge in self._edges.values():
            u, v = edge.source, edge.target
            if G.has_edge(u, v):
                # preserve the max weight if multiple contributions exist
                existing = G[u][v].get("weight")
                if edge.weight is not None and (existing is None or edge.weight > existing):
                    G[u][v]["weight"] = edge.weight
                continue
            attrs = {"id": edge.id, "type": edge.type}
            if edge.weight is not None:
                attrs["weight"] = edge.weight
            G.add_edge(u, v, **attrs)
        return G

    @classmethod
    def from_networkx(cls, G: nx.Graph, weight: str = "weight") -> "Graph":
        """
        Convert a NetworkX graph into a Graph.

        Node keys become string ids; ``type`` attributes are lifted onto
        Node.type and everything else goes into the attribute bag. Edge ids
        are ``e{index}`` in NetworkX edge order.
        """
        graph = cls(directed=G.is_directed())
        for n, data in G.nodes(data=True):
            attrs = {k: v for k, v in data.items() if k != "type"}
            graph.add_node(Node(id=str(n), type=data.get("type"), attributes=attrs))

        for i, (u, v, data) in enumerate(G.edges(data=True)):
            w = data.get(weight)
            attrs = {k: val for k, val in data.items() if k not in (weight, "type", "id")}
            graph.add_edge(
                Edge(
                    id=str(data.get("id", f"e{i}")),
                    source=str(u),
                    target=str(v),
                    weight=float(w) if w is not None else None,
                    type=data.get("type"),
                    attributes=attrs,
                )
            )
        return graph


def graph_stats(graph: Graph) -> BuildStats:
    """Size and node-type counts for summaries and reports."""
    types = Counter(n.type or "untyped" for n in graph.get_all_nodes())
    return BuildStats(n_nodes=graph.node_count, n_edges=graph.edge_count, types=types)
