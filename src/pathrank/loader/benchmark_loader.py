# src/pathrank/loader/benchmark_loader.py

"""
Benchmark graph loading utilities.

This module loads Graph instances from:
1. Graphs bundled with NetworkX (Zachary's Karate Club, Les Misérables).
2. Plain edge-list files ("u v [weight]" per line), the format used by the
   Cora / CiteSeer / Facebook / DBLP dumps, read with nx.read_edgelist.
   Text after the comment character ('#' by default) is ignored.
3. Triple files ("subject predicate object" per line); the predicate
   becomes the edge type. Blank lines and lines starting with '#' or '%'
   are skipped.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

import networkx as nx

from ..build.graph import Graph
from ..build.types import Edge, Node

PathLike = Union[str, Path]

_COMMENT_PREFIXES = ("#", "%")


def from_networkx(G: nx.Graph, weight: str = "weight") -> Graph:
    """Convert any NetworkX graph (ids become strings)."""
    return Graph.from_networkx(G, weight=weight)


def load_karate_club() -> Graph:
    """Zachary's Karate Club: 34 nodes, 78 undirected edges, ids "0".."33"."""
    return from_networkx(nx.karate_club_graph())


def load_les_miserables() -> Graph:
    """Les Misérables co-occurrence network: 77 nodes, 254 weighted edges."""
    return from_networkx(nx.les_miserables_graph())


def _data_lines(path: Path, delimiter: Optional[str]) -> Iterator[Tuple[int, str, List[str]]]:
    with open(path, "r", encoding="utf-8") as f:
        for lineno, raw in enumerate(f, start=1):
            line = raw.strip()
            if not line or line.startswith(_COMMENT_PREFIXES):
                continue
            yield lineno, raw.rstrip("\n"), line.split(delimiter)


def _ensure_node(graph: Graph, node_id: str) -> None:
    if not graph.has_node(node_id):
        graph.add_node(Node(id=node_id))


def load_edge_list(
    path: PathLike,
    directed: bool = False,
    delimiter: Optional[str] = None,
    comments: str = "#",
) -> Graph:
    """
    Load a whitespace (or ``delimiter``) separated edge list.

    Parameters
    ----------
    path : str or Path
    directed : bool
    delimiter : str, optional
        Defaults to any whitespace.
    comments : str
        Text after this character is ignored.

    Returns
    -------
    Graph
        Edge ids are ``e{n}`` in NetworkX edge order. A third column
        becomes the edge weight; parallel edges are kept.

    Raises
    ------
    FileNotFoundError
        Missing file.
    ValueError
        A weight column that is not a number, or extra columns.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Edge list not found: {path}")

    try:
        G = nx.read_edgelist(
            path,
            comments=comments,
            delimiter=delimiter,
            nodetype=str,
            data=(("weight", float),),
            create_using=nx.MultiDiGraph if directed else nx.MultiGraph,
            encoding="utf-8",
        )
    except (TypeError, IndexError) as err:
        raise ValueError(f"Malformed edge list {path}: {err}") from err

    if G.number_of_edges() == 0:
        print(f"[WARN] No edges loaded from {path}")
    return from_networkx(G)


def load_triples(
    path: PathLike,
    directed: bool = True,
    delimiter: Optional[str] = None,
) -> Graph:
    """
    Load ``subject predicate object`` triples.

    Tab-separated files keep spaces inside terms when ``delimiter="\\t"``.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Triple file not found: {path}")

    graph = Graph(directed=directed)
    for lineno, raw, parts in _data_lines(path, delimiter):
        parts = [p.strip() for p in parts if p.strip()]
        if len(parts) != 3:
            print(f"[WARN] Skipping triple line {lineno} (expected 3 columns): {raw}")
            continue

        subj, pred, obj = parts
        _ensure_node(graph, subj)
        _ensure_node(graph, obj)
        graph.add_edge(Edge(id=f"t{graph.edge_count}", source=subj, target=obj, type=pred))

    return graph
