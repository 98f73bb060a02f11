"""Shared fixtures for pathrank tests."""

import pytest

from pathrank.build.graph import Graph
from pathrank.build.types import Edge, Node
from pathrank.evaluation.baselines import get_ranker
from pathrank.experiment.models import ExperimentConfig, MethodConfig
from pathrank.loader.benchmark_loader import load_karate_club
from pathrank.planting.path_generator import PlantedPathConfig


def _connect(graph: Graph, u: str, v: str, weight=None) -> None:
    graph.add_edge(Edge(id=f"{u}-{v}", source=u, target=v, weight=weight))


@pytest.fixture
def triangle_graph() -> Graph:
    """Undirected triangle a-b-c plus a pendant d on c."""
    g = Graph()
    for nid in "abcd":
        g.add_node(Node(id=nid))
    _connect(g, "a", "b", 1.0)
    _connect(g, "b", "c", 0.5)
    _connect(g, "a", "c", 0.2)
    _connect(g, "c", "d")
    return g


@pytest.fixture
def crossover_graph() -> Graph:
    """
    A and B joined directly and through the 3-hop chain A-X-Y-B.

    Every hop of the chain gets three shared support neighbours, so the chain
    has high structural MI while the direct edge has none.
    """
    g = Graph()
    for nid in ("A", "X", "Y", "B"):
        g.add_node(Node(id=nid))
    _connect(g, "A", "B")
    chain = [("A", "X"), ("X", "Y"), ("Y", "B")]
    for u, v in chain:
        _connect(g, u, v)
    for h, (u, v) in enumerate(chain):
        for k in range(3):
            sid = f"s{h}_{k}"
            g.add_node(Node(id=sid))
            _connect(g, sid, u)
            _connect(g, sid, v)
    return g


@pytest.fixture
def citation_graph() -> Graph:
    """Directed graph with six works, two authors and one venue."""
    g = Graph(directed=True)
    for i in range(6):
        g.add_node(Node(id=f"W{i}", type="Work"))
    for i in range(2):
        g.add_node(Node(id=f"A{i}", type="Author"))
    g.add_node(Node(id="S0", type="Source"))
    return g


@pytest.fixture
def karate() -> Graph:
    """Zachary's Karate Club."""
    return load_karate_club()


@pytest.fixture
def small_experiment() -> ExperimentConfig:
    """Three-method experiment with few repetitions for fast runs."""
    return ExperimentConfig(
        name="Small experiment",
        methods=[
            MethodConfig(name="MI", ranker=get_ranker("mi")),
            MethodConfig(name="Random", ranker=get_ranker("random")),
            MethodConfig(name="Degree", ranker=get_ranker("degree")),
        ],
        metrics=["ndcg", "spearman", "map"],
        statistical_tests=["paired-t", "wilcoxon"],
        repetitions=4,
        path_planting=PlantedPathConfig(num_paths=4, path_length=(2, 3), signal_strength="strong"),
        seed=7,
        graph_spec="karate",
    )
