# src/pathrank/utils/config_loader.py

"""
Experiment config loading.

Experiments can be described in a lightweight ``key: value`` file
(``#`` starts a comment, list values are comma-separated):

    # experiment.ini
    name: MI vs baselines
    methods: mi, random, degree, pagerank
    metrics: spearman, ndcg, map, precision_at_5
    tests: paired-t, wilcoxon
    correction: holm
    repetitions: 10
    folds: 5
    seed: 42
    num_paths: 5
    path_length: 2-4
    signal_strength: strong
    noise_paths: 10
    lambda: 0.0

load_experiment_config() parses the file into ExperimentSettings, and
build_experiment_config() resolves method names through the ranker registry.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from ..build.errors import ConfigError
from ..evaluation.baselines import RANKERS, get_ranker
from ..experiment.models import ExperimentConfig, MethodConfig
from ..planting.path_generator import PlantedPathConfig

METHOD_LABELS: Dict[str, str] = {
    "mi": "MI",
    "random": "Random",
    "degree": "Degree",
    "pagerank": "PageRank",
    "shortest": "Shortest",
    "weight": "Weight",
}


@dataclass
class ExperimentSettings:
    """Parsed experiment file (all fields optional in the file)."""

    name: str = "MI path ranking experiment"
    methods: List[str] = field(default_factory=lambda: ["mi", "random", "degree", "pagerank"])
    metrics: List[str] = field(default_factory=lambda: ["spearman", "ndcg", "map", "mrr", "precision_at_5"])
    tests: List[str] = field(default_factory=lambda: ["paired-t", "wilcoxon"])
    correction: Optional[str] = None
    repetitions: int = 10
    folds: int = 0
    seed: int = 42
    num_paths: int = 5
    path_length: Tuple[int, int] = (2, 4)
    signal_strength: str = "strong"
    noise_paths: Optional[int] = None
    lambda_: float = 0.0
    alpha: float = 0.05


def _split_list(value: str) -> List[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


def _int(key: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"'{key}' must be an integer, got '{value}'") from None


def _float(key: str, value: str) -> float:
    try:
        return float(value)
    except ValueError:
        raise ConfigError(f"'{key}' must be a number, got '{value}'") from None


def _length_range(key: str, value: str) -> Tuple[int, int]:
    """'3' -> (3, 3); '2-4' -> (2, 4)."""
    if "-" in value:
        lo, hi = value.split("-", 1)
        return _int(key, lo.strip()), _int(key, hi.strip())
    n = _int(key, value)
    return n, n


_PARSERS: Dict[str, Tuple[str, Callable[[str, str], object]]] = {
    "name": ("name", lambda k, v: v),
    "methods": ("methods", lambda k, v: [m.lower() for m in _split_list(v)]),
    "metrics": ("metrics", lambda k, v: _split_list(v)),
    "tests": ("tests", lambda k, v: _split_list(v)),
    "correction": ("correction", lambda k, v: v or None),
    "repetitions": ("repetitions", _int),
    "folds": ("folds", _int),
    "seed": ("seed", _int),
    "num_paths": ("num_paths", _int),
    "path_length": ("path_length", _length_range),
    "signal_strength": ("signal_strength", lambda k, v: v.lower()),
    "noise_paths": ("noise_paths", _int),
    "lambda": ("lambda_", _float),
    "alpha": ("alpha", _float),
}


def parse_experiment_text(text: str, source: str = "<string>") -> ExperimentSettings:
    """
    Parse ``key: value`` lines into ExperimentSettings.

    Unknown keys and malformed lines are skipped with a warning; values of
    the wrong type raise ConfigError.
    """
    settings = ExperimentSettings()

    for raw in text.splitlines():
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue

        if ":" not in line:
            print(f"[WARN] Skipping invalid line in {source} (missing ':'): {raw}")
            continue

        left, right = line.split(":", 1)
        key = left.strip().lower()
        value = right.strip()

        if key not in _PARSERS:
            print(f"[WARN] Skipping unknown key '{key}' in {source}")
            continue

        attr, parse = _PARSERS[key]
        setattr(settings, attr, parse(key, value))

    if settings.repetitions < 1:
        raise ConfigError(f"repetitions must be >= 1, got {settings.repetitions}")
    if settings.folds and settings.folds < 2:
        raise ConfigError(f"folds must be >= 2 (or 0 to disable), got {settings.folds}")
    for m in settings.methods:
        if m not in RANKERS:
            raise ConfigError(f"Unknown method '{m}' in {source} (expected one of {', '.join(RANKERS)})")

    return settings


def load_experiment_config(path: Path) -> ExperimentSettings:
    """
    Load experiment settings from ``path``.

    A missing file gives the defaults.
    """
    path = Path(path)
    if not path.exists():
        print(f"[INFO] No experiment config found at {path} – proceeding with defaults.")
        return ExperimentSettings()
    return parse_experiment_text(path.read_text(encoding="utf-8"), source=str(path))


def build_experiment_config(settings: ExperimentSettings, graph_spec: Optional[str] = None) -> ExperimentConfig:
    """Turn parsed settings into a runnable ExperimentConfig."""
    methods = []
    for key in settings.methods:
        options = {"lambda_": settings.lambda_} if key == "mi" else {}
        methods.append(MethodConfig(name=METHOD_LABELS.get(key, key), ranker=get_ranker(key), options=options))

    config = ExperimentConfig(
        name=settings.name,
        methods=methods,
        metrics=list(settings.metrics),
        statistical_tests=list(settings.tests),
        repetitions=settings.repetitions,
        path_planting=PlantedPathConfig(
            num_paths=settings.num_paths,
            path_length=settings.path_length,
            signal_strength=settings.signal_strength,
            seed=settings.seed,
        ),
        noise_paths=settings.noise_paths,
        seed=settings.seed,
        correction=settings.correction,
        alpha=settings.alpha,
        graph_spec=graph_spec,
    )
    config.validate()
    return config
