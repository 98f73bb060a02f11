# src/pathrank/experiment/runner.py

"""
Experiment runner.

One trial:
  1. copy the input graph
  2. plant ground-truth paths, then noise paths, with seeds derived from
     (config.seed, trial index)
  3. hand the candidate set (planted + noise) to every method
  4. score each method's ranking against the planted ground truth

Trials are independent: trial i depends only on config.seed and i, so the
aggregate does not depend on execution order. Method failures propagate;
a broken method aborts the run.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

import numpy as np

from ..analytics.statistics import bootstrap_difference_test, paired_t_test, wilcoxon_signed_rank
from ..build.graph import Graph
from ..evaluation.effect_size import cohens_d
from ..evaluation.metrics import evaluate_metric
from ..evaluation.multiple_comparison import apply_correction
from ..planting.noise import plant_noise_paths
from ..planting.path_generator import plant_ground_truth_paths
from ..utils.seeded_random import derive_seed
from .models import ExperimentConfig, ExperimentReport, MethodResult, StatisticalTestResult


@dataclass
class TrialOutcome:
    index: int
    seed: int
    values: Dict[str, Dict[str, float]]
    runtimes: Dict[str, float]


def run_trial(config: ExperimentConfig, graph: Graph, index: int) -> TrialOutcome:
    """Plant, rank and score one repetition on a private copy of ``graph``."""
    trial_seed = derive_seed(config.seed, index)
    g = graph.copy()

    planting_cfg = replace(config.path_planting, seed=derive_seed(trial_seed, 0))
    planted = plant_ground_truth_paths(g, planting_cfg)
    noise_count = config.noise_paths if config.noise_paths is not None else planting_cfg.num_paths
    noise = plant_noise_paths(g, planted.ground_truth_paths, noise_count, derive_seed(trial_seed, 1))

    candidates = list(planted.ground_truth_paths) + noise
    relevance = {p.uid: planted.relevance_scores.get(p.uid, 0.0) for p in candidates}
    truth = [key for key, _ in sorted(relevance.items(), key=lambda kv: kv[1], reverse=True)]

    values: Dict[str, Dict[str, float]] = {}
    runtimes: Dict[str, float] = {}
    method_seed = derive_seed(trial_seed, 2)
    for method in config.methods:
        options = {"seed": method_seed, **method.options}
        t0 = time.perf_counter()
        ranked = method.ranker(g, candidates, **options)
        runtimes[method.name] = (time.perf_counter() - t0) * 1000.0

        predicted = [rp.uid for rp in ranked]
        values[method.name] = {
            metric: evaluate_metric(metric, predicted, truth, relevance) for metric in config.metrics
        }

    return TrialOutcome(index=index, seed=trial_seed, values=values, runtimes=runtimes)


def _pairwise_tests(
    config: ExperimentConfig,
    samples: Dict[str, List[float]],
    seed: int,
) -> List[StatisticalTestResult]:
    names = [m.name for m in config.methods]
    results: List[StatisticalTestResult] = []
    if len(names) < 2 or not config.statistical_tests:
        return results

    for i in range(len(names)):
        for j in range(i + 1, len(names)):
            a, b = samples[names[i]], samples[names[j]]
            effect = cohens_d(a, b)
            for test in config.statistical_tests:
                if test == "paired-t":
                    outcome = paired_t_test(a, b, alpha=config.alpha)
                elif test == "wilcoxon":
                    outcome = wilcoxon_signed_rank(a, b, alpha=config.alpha)
                else:
                    outcome = bootstrap_difference_test(a, b, seed=seed, alpha=config.alpha)
                results.append(
                    StatisticalTestResult(
                        type=test,
                        comparison=f"{names[i]} vs {names[j]}",
                        p_value=outcome.p_value,
                        significant=outcome.significant,
                        statistic=outcome.statistic,
                        effect_size=effect,
                    )
                )

    if config.correction and results:
        corrected = apply_correction(config.correction, [r.p_value for r in results], config.alpha)
        for r, adj, sig in zip(results, corrected.adjusted_p_values, corrected.significant):
            r.adjusted_p_value = adj
            r.significant = sig
    return results


def build_report(
    config: ExperimentConfig,
    trials: Sequence[TrialOutcome],
    name: Optional[str] = None,
    timestamp: str = "",
    duration: Optional[float] = None,
) -> ExperimentReport:
    """Aggregate trial outcomes into an ExperimentReport (means per metric)."""
    primary = config.primary_metric
    methods: List[MethodResult] = []
    for m in config.methods:
        samples = {metric: [t.values[m.name][metric] for t in trials] for metric in config.metrics}
        methods.append(
            MethodResult(
                method=m.name,
                results={metric: float(np.mean(v)) if v else 0.0 for metric, v in samples.items()},
                runtime=float(sum(t.runtimes[m.name] for t in trials)),
                samples=samples,
            )
        )

    winner = methods[0].method
    if primary is not None:
        best = methods[0].results[primary]
        for mr in methods[1:]:
            if mr.results[primary] > best:
                best, winner = mr.results[primary], mr.method

    tests: List[StatisticalTestResult] = []
    if primary is not None:
        primary_samples = {mr.method: mr.samples[primary] for mr in methods}
        tests = _pairwise_tests(config, primary_samples, derive_seed(config.seed, len(trials)))

    return ExperimentReport(
        name=name or config.name,
        methods=methods,
        winner=winner,
        statistical_tests=tests,
        timestamp=timestamp,
        duration=duration,
        graph_spec=config.graph_spec,
        primary_metric=primary,
        repetitions=len(trials),
    )


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def run_experiment(config: ExperimentConfig, graph: Graph, verbose: bool = False) -> ExperimentReport:
    """
    Run ``config.repetitions`` trials and aggregate them.

    Parameters
    ----------
    config : ExperimentConfig
    graph : Graph
        Left untouched; each trial plants into its own copy.
    verbose : bool
        Print one progress line per repetition.

    Raises
    ------
    ConfigError
        Invalid configuration.
    """
    config.validate()
    timestamp = _now()
    start = time.perf_counter()

    trials: List[TrialOutcome] = []
    for i in range(config.repetitions):
        trial = run_trial(config, graph, i)
        trials.append(trial)
        if verbose and config.primary_metric:
            scores = ", ".join(
                f"{name}={vals[config.primary_metric]:.4f}" for name, vals in trial.values.items()
            )
            print(f"   Repetition {i + 1}/{config.repetitions} (seed {trial.seed}): {scores}")

    duration = (time.perf_counter() - start) * 1000.0
    return build_report(config, trials, timestamp=timestamp, duration=round(duration, 3))
