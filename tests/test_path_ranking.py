"""Tests for MI path ranking and traversal."""

import pytest

from pathrank.analytics.path_ranking import PathRanker, get_best_path, rank_paths
from pathrank.analytics.traversal import ego_network, enumerate_simple_paths, shortest_hop_distance
from pathrank.build.errors import InvalidNodeError
from pathrank.build.graph import Graph
from pathrank.build.types import Edge, Node


def test_long_path_wins_without_length_penalty(crossover_graph):
    """At lambda=0 the well-supported 3-hop chain beats the bare direct edge."""
    ranked = rank_paths(crossover_graph, "A", "B", lambda_=0.0, max_length=3)
    assert ranked is not None
    assert len(ranked) == 2
    assert ranked[0].path.node_ids == ("A", "X", "Y", "B")
    assert ranked[1].path.node_ids == ("A", "B")
    assert ranked[1].score == 0.0
    assert ranked[0].length_penalty is None


def test_short_path_wins_with_large_penalty(crossover_graph):
    """At lambda=5 hop count dominates and the direct edge wins."""
    ranked = rank_paths(crossover_graph, "A", "B", lambda_=5.0, max_length=3)
    assert ranked[0].path.node_ids == ("A", "B")
    assert ranked[0].length_penalty == pytest.approx(5.0)


def test_single_crossover_in_lambda(crossover_graph):
    """The winner flips exactly once as lambda grows."""
    winners = []
    for lam in [0.0, 0.05, 0.1, 0.2, 0.5, 1.0, 2.0, 5.0]:
        best = get_best_path(crossover_graph, "A", "B", lambda_=lam, max_length=3)
        winners.append(best.path.length)
    flips = sum(1 for x, y in zip(winners, winners[1:]) if x != y)
    assert winners[0] == 3
    assert winners[-1] == 1
    assert flips == 1


def test_score_is_geometric_mean_minus_penalty(crossover_graph):
    """Score, geometric mean and per-edge MI are consistent."""
    ranked = rank_paths(crossover_graph, "A", "B", lambda_=0.1, max_length=3)
    chain = next(rp for rp in ranked if rp.path.length == 3)
    mi = chain.edge_mi_values
    assert len(mi) == 3
    assert mi[0] == pytest.approx(3 / 10)
    assert mi[1] == pytest.approx(3 / 13)
    expected = (mi[0] * mi[1] * mi[2]) ** (1 / 3)
    assert chain.geometric_mean_mi == pytest.approx(expected)
    assert chain.score == pytest.approx(expected - 0.3)


def test_no_path_returns_none():
    """Disconnected nodes give None, not an exception."""
    g = Graph()
    for nid in "abcd":
        g.add_node(Node(id=nid))
    g.add_edge(Edge(id="ab", source="a", target="b"))
    g.add_edge(Edge(id="cd", source="c", target="d"))
    assert rank_paths(g, "a", "d") is None
    assert get_best_path(g, "a", "d") is None


def test_path_longer_than_cap_is_not_found(triangle_graph):
    """Paths beyond max_length are not reported."""
    assert rank_paths(triangle_graph, "a", "d", max_length=1) is None
    assert rank_paths(triangle_graph, "a", "d", max_length=2) is not None


def test_unknown_node_raises(triangle_graph):
    """Ranking from a missing node is a programming error."""
    with pytest.raises(InvalidNodeError, match="zzz"):
        rank_paths(triangle_graph, "zzz", "a")


def test_negative_lambda_rejected(triangle_graph):
    """Lambda must be non-negative."""
    with pytest.raises(ValueError):
        rank_paths(triangle_graph, "a", "b", lambda_=-1.0)


def test_trivial_path(triangle_graph):
    """start == end gives one zero-hop path scored 1.0."""
    ranked = rank_paths(triangle_graph, "a", "a")
    assert len(ranked) == 1
    assert ranked[0].path.length == 0
    assert ranked[0].score == 1.0


def test_ranking_is_deterministic(karate):
    """Repeated runs give identical keys and scores."""
    first = rank_paths(karate, "0", "33", max_length=3, max_paths=20)
    second = rank_paths(karate, "0", "33", max_length=3, max_paths=20)
    assert [(r.key, r.score) for r in first] == [(r.key, r.score) for r in second]


def test_results_sorted_and_capped(karate):
    """Output is best-first and truncated to max_paths."""
    ranked = rank_paths(karate, "0", "33", max_length=3, max_paths=5)
    assert len(ranked) == 5
    scores = [r.score for r in ranked]
    assert scores == sorted(scores, reverse=True)


def test_shortest_only(triangle_graph):
    """shortest_only keeps minimum-hop paths."""
    ranked = rank_paths(triangle_graph, "a", "d", shortest_only=True)
    assert [r.key for r in ranked] == ["a→c→d"]


def test_directed_traversal_modes():
    """Directed mode follows arrows; undirected mode ignores them."""
    g = Graph(directed=True)
    for nid in "abc":
        g.add_node(Node(id=nid))
    g.add_edge(Edge(id="ab", source="a", target="b"))
    g.add_edge(Edge(id="cb", source="c", target="b"))
    assert rank_paths(g, "a", "c") is None
    ranked = rank_paths(g, "a", "c", traversal_mode="undirected")
    assert ranked[0].key == "a→b→c"
    with pytest.raises(ValueError):
        rank_paths(g, "a", "c", traversal_mode="sideways")


def test_path_ranker_reuses_cache(crossover_graph):
    """PathRanker gives the same ranking as rank_paths()."""
    ranker = PathRanker(crossover_graph, max_length=3)
    assert set(ranker.mi_cache) == {e.id for e in crossover_graph.get_all_edges()}
    direct = rank_paths(crossover_graph, "A", "B", max_length=3)
    assert [r.key for r in ranker.rank("A", "B")] == [r.key for r in direct]
    assert ranker.get_best("A", "B", lambda_=5.0).key == "A→B"


def test_enumeration_limit_and_distance(karate):
    """The enumeration cap bounds output; hop distance is BFS depth."""
    assert len(enumerate_simple_paths(karate, "0", "33", 4, limit=7)) == 7
    assert shortest_hop_distance(karate, "0", "33") == 2


def test_ego_network(triangle_graph):
    """Radius-1 ego network of d is d and c only."""
    ego = ego_network(triangle_graph, "d", radius=1)
    assert {n.id for n in ego.get_all_nodes()} == {"c", "d"}
    assert ego.edge_count == 1
