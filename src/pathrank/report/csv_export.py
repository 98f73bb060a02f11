# src/pathrank/report/csv_export.py

"""
CSV export utilities for experiment results.

This module writes:
  - Method results (method, runtime, one column per metric)
  - Statistical tests (type, comparison, statistic, p-values, significance)
  - Ranked paths (rank, path key, hops, score, geometric-mean MI)
  - Cross-validation summary (method, metric, mean, std)

All functions create parent directories before writing.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, Dict, List, Sequence

from ..build.types import RankedPath
from ..experiment.models import CrossValidationResult, ExperimentReport


# ---------------------------------------------------------------------------
# Helper: safe writer
# ---------------------------------------------------------------------------
def _write_csv(path: Path, rows: List[Dict[str, Any]], fieldnames: List[str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for r in rows:
            writer.writerow(r)
    print(f"[INFO] Saved CSV → {path}")


# ---------------------------------------------------------------------------
# METHOD RESULTS
# ---------------------------------------------------------------------------
def export_method_results_csv(report: ExperimentReport, path: Path) -> None:
    """
    Write one row per method: method, runtime_ms, <metric>...
    """
    metrics = report.metric_names
    rows = []
    for mr in report.methods:
        row: Dict[str, Any] = {"method": mr.method, "runtime_ms": mr.runtime}
        row.update({m: mr.results.get(m) for m in metrics})
        rows.append(row)

    _write_csv(path, rows, ["method", "runtime_ms", *metrics])


# ---------------------------------------------------------------------------
# STATISTICAL TESTS
# ---------------------------------------------------------------------------
def export_statistical_tests_csv(report: ExperimentReport, path: Path) -> None:
    fields = ["type", "comparison", "statistic", "p_value", "adjusted_p_value", "effect_size", "significant"]
    rows = [{f: getattr(t, f) for f in fields} for t in report.statistical_tests]
    _write_csv(path, rows, fields)


# ---------------------------------------------------------------------------
# RANKED PATHS
# ---------------------------------------------------------------------------
def export_ranked_paths_csv(ranked: Sequence[RankedPath], path: Path) -> None:
    """
    Write a ranked path list: rank, path, hops, score, geometric_mean_mi, length_penalty
    """
    rows = []
    for i, rp in enumerate(ranked, start=1):
        rows.append({
            "rank": i,
            "path": rp.key,
            "hops": rp.path.length,
            "score": rp.score,
            "geometric_mean_mi": rp.geometric_mean_mi,
            "length_penalty": rp.length_penalty,
        })

    _write_csv(path, rows, ["rank", "path", "hops", "score", "geometric_mean_mi", "length_penalty"])


# ---------------------------------------------------------------------------
# CROSS VALIDATION
# ---------------------------------------------------------------------------
def export_cross_validation_csv(cv: CrossValidationResult, path: Path) -> None:
    rows = []
    for method, metrics in cv.aggregated.items():
        for metric, mean in metrics.items():
            rows.append({
                "method": method,
                "metric": metric,
                "mean": mean,
                "std": cv.std_dev.get(method, {}).get(metric),
                "folds": cv.folds,
            })

    _write_csv(path, rows, ["method", "metric", "mean", "std", "folds"])
