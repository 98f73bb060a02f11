# src/pathrank/experiment/models.py

"""
Experiment configuration and result records.

Methods are plain (name, ranker function) entries rather than subclasses;
the ranker is any callable ``(graph, paths, **options) -> List[RankedPath]``.
Report serialisation lives in report.report_json.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..build.errors import ConfigError
from ..evaluation.baselines import Ranker
from ..evaluation.metrics import validate_metric
from ..planting.path_generator import PlantedPathConfig
from ..utils.constants import DEFAULT_ALPHA

STATISTICAL_TESTS = ("paired-t", "wilcoxon", "bootstrap")
_CORRECTION_NAMES = ("bonferroni", "benjamini-hochberg", "bh", "holm", "holm-bonferroni", "storey")


@dataclass
class MethodConfig:
    name: str
    ranker: Ranker
    options: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ExperimentConfig:
    """
    Parameters
    ----------
    name : str
    methods : list of MethodConfig
        Declaration order breaks winner ties.
    metrics : list of str
        The first entry is the primary metric.
    statistical_tests : list of str
        Any of "paired-t", "wilcoxon", "bootstrap"; run pairwise.
    repetitions : int
    path_planting : PlantedPathConfig
        Its seed is replaced by a per-trial derived seed.
    noise_paths : int, optional
        Noise paths per trial (defaults to path_planting.num_paths).
    seed : int
    correction : str, optional
        Multiple-comparison correction over all pairwise tests.
    alpha : float
    graph_spec : str, optional
        Free-form label of the input graph, shown in reports.
    """

    name: str
    methods: List[MethodConfig]
    metrics: List[str] = field(default_factory=lambda: ["spearman", "ndcg", "map"])
    statistical_tests: List[str] = field(default_factory=list)
    repetitions: int = 5
    path_planting: PlantedPathConfig = field(default_factory=PlantedPathConfig)
    noise_paths: Optional[int] = None
    seed: int = 42
    correction: Optional[str] = None
    alpha: float = DEFAULT_ALPHA
    graph_spec: Optional[str] = None

    @property
    def primary_metric(self) -> Optional[str]:
        return self.metrics[0] if self.metrics else None

    def validate(self) -> None:
        if self.repetitions < 1:
            raise ConfigError(f"repetitions must be >= 1, got {self.repetitions}")
        if not self.methods:
            raise ConfigError("Experiment needs at least one method")
        names = [m.name for m in self.methods]
        if len(set(names)) != len(names):
            raise ConfigError(f"Method names must be unique: {names}")
        for metric in self.metrics:
            validate_metric(metric)
        for test in self.statistical_tests:
            if test not in STATISTICAL_TESTS:
                raise ConfigError(
                    f"Unknown statistical test '{test}' (expected one of {', '.join(STATISTICAL_TESTS)})"
                )
        if self.correction is not None and self.correction.lower() not in _CORRECTION_NAMES:
            raise ConfigError(f"Unknown correction '{self.correction}'")
        self.path_planting.validate()


@dataclass
class MethodResult:
    method: str
    results: Dict[str, float]
    runtime: Optional[float] = None
    samples: Dict[str, List[float]] = field(default_factory=dict)


@dataclass
class StatisticalTestResult:
    type: str
    comparison: str
    p_value: float
    significant: bool
    statistic: Optional[float] = None
    adjusted_p_value: Optional[float] = None
    effect_size: Optional[float] = None


@dataclass
class ExperimentReport:
    """
    Aggregated outcome of one experiment. ``duration`` and method
    ``runtime`` are in milliseconds.
    """

    name: str
    methods: List[MethodResult]
    winner: str
    statistical_tests: List[StatisticalTestResult] = field(default_factory=list)
    timestamp: str = ""
    duration: Optional[float] = None
    graph_spec: Optional[str] = None
    primary_metric: Optional[str] = None
    repetitions: int = 0

    def method(self, name: str) -> Optional[MethodResult]:
        return next((m for m in self.methods if m.method == name), None)

    @property
    def metric_names(self) -> List[str]:
        names: List[str] = []
        for m in self.methods:
            for key in m.results:
                if key not in names:
                    names.append(key)
        return names


@dataclass
class CrossValidationResult:
    folds: int
    fold_results: List[ExperimentReport]
    aggregated: Dict[str, Dict[str, float]]
    std_dev: Dict[str, Dict[str, float]]
