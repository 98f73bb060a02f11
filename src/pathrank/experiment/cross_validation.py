# src/pathrank/experiment/cross_validation.py

"""
Cross validation over experiment repetitions.

Trials are dealt round-robin into ``folds`` groups (trial i goes to fold
i % folds). Each fold is aggregated like a full experiment, and the spread of
the fold means shows how stable a method's advantage is.
"""

from __future__ import annotations

import time
from typing import Dict, List

import numpy as np

from ..build.errors import ConfigError
from ..build.graph import Graph
from ..utils.constants import DEFAULT_FOLDS
from .models import CrossValidationResult, ExperimentConfig
from .runner import _now, build_report, run_trial


def run_cross_validation(
    config: ExperimentConfig,
    graph: Graph,
    folds: int = DEFAULT_FOLDS,
    verbose: bool = False,
) -> CrossValidationResult:
    """
    Run max(config.repetitions, folds) trials and report per-fold results.

    Returns
    -------
    CrossValidationResult
        ``aggregated`` holds the mean of the fold means and ``std_dev`` their
        sample standard deviation, both as method -> metric -> value.
    """
    if folds < 2:
        raise ConfigError(f"folds must be >= 2, got {folds}")
    config.validate()

    total = max(config.repetitions, folds)
    trials = []
    for i in range(total):
        trials.append(run_trial(config, graph, i))
        if verbose:
            print(f"   Trial {i + 1}/{total} → fold {i % folds + 1}")

    fold_results = []
    for f in range(folds):
        start = time.perf_counter()
        members = [t for t in trials if t.index % folds == f]
        report = build_report(
            config,
            members,
            name=f"{config.name} (fold {f + 1}/{folds})",
            timestamp=_now(),
        )
        report.duration = round((time.perf_counter() - start) * 1000.0 + sum(
            sum(t.runtimes.values()) for t in members
        ), 3)
        fold_results.append(report)

    aggregated: Dict[str, Dict[str, float]] = {}
    std_dev: Dict[str, Dict[str, float]] = {}
    for m in config.methods:
        aggregated[m.name] = {}
        std_dev[m.name] = {}
        for metric in config.metrics:
            means: List[float] = [r.method(m.name).results[metric] for r in fold_results]
            aggregated[m.name][metric] = float(np.mean(means))
            std_dev[m.name][metric] = float(np.std(means, ddof=1))

    return CrossValidationResult(folds=folds, fold_results=fold_results, aggregated=aggregated, std_dev=std_dev)
