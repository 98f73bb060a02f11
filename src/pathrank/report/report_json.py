# src/pathrank/report/report_json.py

"""
JSON summary of an experiment report, and the matching parser.

generate_json_summary() followed by parse_json_summary() gives back the
same method names and metric values. The output is strict JSON: non-finite
numbers (an infinite t statistic for a constant shift, say) are written as
the strings "Infinity", "-Infinity" and "NaN" and turned back into floats by
the parser.
"""

from __future__ import annotations

import json
import math
from typing import Any, Dict, List, Optional

from ..experiment.models import ExperimentReport, MethodResult, StatisticalTestResult

_NON_FINITE = ("Infinity", "-Infinity", "NaN")


def _encode(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        if math.isnan(value):
            return "NaN"
        return "Infinity" if value > 0 else "-Infinity"
    if isinstance(value, dict):
        return {k: _encode(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_encode(v) for v in value]
    return value


def _number(value: Any) -> Optional[float]:
    if isinstance(value, str) and value in _NON_FINITE:
        return float(value)
    return value


def _numbers(values: List[Any]) -> List[Optional[float]]:
    return [_number(v) for v in values]


def report_to_summary(report: ExperimentReport, include_samples: bool = False) -> Dict[str, Any]:
    methods = []
    for m in report.methods:
        entry: Dict[str, Any] = {"name": m.method, "results": dict(m.results), "runtime": m.runtime}
        if include_samples:
            entry["samples"] = {k: list(v) for k, v in m.samples.items()}
        methods.append(entry)

    return {
        "name": report.name,
        "graph_spec": report.graph_spec,
        "timestamp": report.timestamp,
        "duration": report.duration,
        "repetitions": report.repetitions,
        "primary_metric": report.primary_metric,
        "winner": report.winner,
        "methods": methods,
        "statistical_tests": [
            {
                "type": t.type,
                "comparison": t.comparison,
                "statistic": t.statistic,
                "p_value": t.p_value,
                "adjusted_p_value": t.adjusted_p_value,
                "effect_size": t.effect_size,
                "significant": t.significant,
            }
            for t in report.statistical_tests
        ],
    }


def generate_json_summary(report: ExperimentReport, include_samples: bool = False, indent: int = 2) -> str:
    """Indented, strict JSON string for ``report``."""
    summary = _encode(report_to_summary(report, include_samples))
    return json.dumps(summary, indent=indent, ensure_ascii=False, allow_nan=False)


def _test_from_summary(t: Dict[str, Any]) -> StatisticalTestResult:
    data = dict(t)
    for key in ("statistic", "p_value", "adjusted_p_value", "effect_size"):
        if key in data:
            data[key] = _number(data[key])
    return StatisticalTestResult(**data)


def parse_json_summary(text: str) -> ExperimentReport:
    """Rebuild an ExperimentReport from generate_json_summary() output."""
    data = json.loads(text)
    return ExperimentReport(
        name=data["name"],
        methods=[
            MethodResult(
                method=m["name"],
                results={k: _number(v) for k, v in m.get("results", {}).items()},
                runtime=_number(m.get("runtime")),
                samples={k: _numbers(v) for k, v in m.get("samples", {}).items()},
            )
            for m in data.get("methods", [])
        ],
        winner=data.get("winner", ""),
        statistical_tests=[_test_from_summary(t) for t in data.get("statistical_tests", [])],
        timestamp=data.get("timestamp", ""),
        duration=_number(data.get("duration")),
        graph_spec=data.get("graph_spec"),
        primary_metric=data.get("primary_metric"),
        repetitions=data.get("repetitions", 0),
    )
