"""Tests for the Graph container and path value types."""

import networkx as nx
import pytest

from pathrank.build.errors import InvalidEdgeError, InvalidNodeError
from pathrank.build.graph import Graph, graph_stats
from pathrank.build.types import Edge, Node, Path, geometric_mean


def test_add_node_is_idempotent():
    """Adding a node id twice keeps the first record."""
    g = Graph()
    g.add_node(Node(id="a", type="Work"))
    g.add_node(Node(id="a", type="Author"))
    assert g.node_count == 1
    assert g.get_node("a").type == "Work"


def test_add_edge_unknown_endpoint_raises():
    """Edges must reference existing nodes."""
    g = Graph()
    g.add_node(Node(id="a"))
    with pytest.raises(InvalidEdgeError, match="target node 'b'"):
        g.add_edge(Edge(id="e", source="a", target="b"))


def test_add_edge_duplicate_id_raises(triangle_graph):
    """Edge ids are unique."""
    with pytest.raises(InvalidEdgeError, match="already exists"):
        triangle_graph.add_edge(Edge(id="a-b", source="a", target="c"))


def test_parallel_edges_are_kept():
    """Two edges between the same pair are distinct records."""
    g = Graph()
    g.add_node(Node(id="a"))
    g.add_node(Node(id="b"))
    g.add_edge(Edge(id="e1", source="a", target="b"))
    g.add_edge(Edge(id="e2", source="a", target="b"))
    assert g.edge_count == 2
    assert g.get_neighbors("a") == ["b"]


def test_get_neighbors_absent_node_is_none(triangle_graph):
    """Unknown nodes give None rather than an empty list."""
    assert triangle_graph.get_neighbors("zzz") is None
    assert triangle_graph.get_outgoing_edges("zzz") is None


def test_directed_neighbors():
    """Directed graphs return successors unless both directions are requested."""
    g = Graph(directed=True)
    for nid in "abc":
        g.add_node(Node(id=nid))
    g.add_edge(Edge(id="ab", source="a", target="b"))
    g.add_edge(Edge(id="cb", source="c", target="b"))
    assert g.get_neighbors("b") == []
    assert sorted(g.get_neighbors("b", both_directions=True)) == ["a", "c"]
    assert g.degree("b") == 2
    assert len(g.get_incident_edges("b")) == 2


def test_insertion_order_preserved(triangle_graph):
    """Nodes and edges come back in insertion order."""
    assert [n.id for n in triangle_graph.get_all_nodes()] == ["a", "b", "c", "d"]
    assert [e.id for e in triangle_graph.get_all_edges()] == ["a-b", "b-c", "a-c", "c-d"]


def test_path_from_edge_ids(triangle_graph):
    """Walking edge ids builds a valid Path."""
    path = triangle_graph.path_from_edge_ids("a", ["a-b", "b-c", "c-d"])
    assert path.node_ids == ("a", "b", "c", "d")
    assert path.length == 3
    assert path.key == "a→b→c→d"
    assert triangle_graph.validate_path(path)


def test_parallel_edge_paths_have_distinct_uids(triangle_graph):
    """Two paths over parallel edges share a key but not a uid."""
    triangle_graph.add_edge(Edge(id="a-b-2", source="a", target="b"))
    first = triangle_graph.path_from_edge_ids("a", ["a-b"])
    second = triangle_graph.path_from_edge_ids("a", ["a-b-2"])
    assert first.key == second.key == "a→b"
    assert first.uid == "a→b[a-b]"
    assert second.uid == "a→b[a-b-2]"


def test_path_from_edge_ids_rejects_non_incident_edge(triangle_graph):
    """An edge that does not touch the current node is rejected."""
    with pytest.raises(InvalidEdgeError):
        triangle_graph.path_from_edge_ids("a", ["c-d"])
    with pytest.raises(InvalidNodeError):
        triangle_graph.path_from_edge_ids("zzz", [])


def test_path_requires_matching_edges():
    """Path construction checks the node/edge alignment."""
    a, b, c = Node(id="a"), Node(id="b"), Node(id="c")
    with pytest.raises(ValueError):
        Path(nodes=(a, b), edges=())
    with pytest.raises(ValueError, match="does not connect"):
        Path(nodes=(a, b), edges=(Edge(id="x", source="b", target="c"),))
    assert Path(nodes=(a,)).length == 0
    assert Path(nodes=(a, c), edges=(Edge(id="y", source="c", target="a", weight=0.5),)).total_weight == 0.5


def test_validate_path_respects_direction():
    """Against-the-arrow edges fail directed validation only."""
    g = Graph(directed=True)
    g.add_node(Node(id="a"))
    g.add_node(Node(id="b"))
    g.add_edge(Edge(id="ab", source="a", target="b"))
    backwards = g.path_from_edge_ids("b", ["ab"])
    assert not g.validate_path(backwards)
    assert g.validate_path(backwards, respect_direction=False)


def test_copy_is_independent(triangle_graph):
    """Mutating a copy leaves the original untouched."""
    clone = triangle_graph.copy()
    clone.add_node(Node(id="e"))
    clone.add_edge(Edge(id="d-e", source="d", target="e"))
    assert triangle_graph.node_count == 4
    assert triangle_graph.edge_count == 4
    assert clone.edge_count == 5


def test_from_networkx_lifts_type_and_weight():
    """Node 'type' and edge 'weight' attributes map onto the records."""
    G = nx.Graph()
    G.add_node(1, type="Work", year=2020)
    G.add_node(2, type="Author")
    G.add_edge(1, 2, weight=3, role="wrote")
    g = Graph.from_networkx(G)
    assert g.get_node("1").type == "Work"
    assert g.get_node("1").get("year") == 2020
    edge = g.get_edge("e0")
    assert edge.weight == 3.0
    assert edge.attributes == {"role": "wrote"}


def test_to_networkx_collapses_parallel_edges():
    """Parallel edges become one networkx edge carrying the larger weight."""
    g = Graph()
    g.add_node(Node(id="a"))
    g.add_node(Node(id="b"))
    g.add_edge(Edge(id="e1", source="a", target="b", weight=0.2))
    g.add_edge(Edge(id="e2", source="a", target="b", weight=0.9))
    G = g.to_networkx()
    assert G.number_of_edges() == 1
    assert G["a"]["b"]["weight"] == 0.9


def test_graph_stats_counts_types(citation_graph):
    """Build stats report node types."""
    stats = graph_stats(citation_graph)
    assert stats.n_nodes == 9
    assert stats.types["Work"] == 6
    assert stats.types["Source"] == 1


def test_geometric_mean_edge_cases():
    """Empty gives 1.0, any non-positive value gives 0.0."""
    assert geometric_mean([]) == 1.0
    assert geometric_mean([0.5, 0.0]) == 0.0
    assert geometric_mean([0.25, 1.0]) == pytest.approx(0.5)
