# src/pathrank/report/report_markdown.py

"""
Markdown report generation for experiment results.

The report contains:

- Header (name, timestamp, graph spec, duration)
- Winner
- Method performance table (one row per method, 4-decimal metrics)
- Statistical tests table
- A short interpretation paragraph

The output is a Markdown string; no files are written here.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from ..experiment.models import ExperimentReport

_AT_K = re.compile(r"^(precision|recall|ndcg)_at_(\d+)$")


def format_metric_name(metric: str) -> str:
    """'precision_at_5' -> 'PRECISION@5'; 'ndcg' -> 'Ndcg'."""
    m = _AT_K.match(metric)
    if m:
        return f"{m.group(1).upper()}@{m.group(2)}"
    return metric[:1].upper() + metric[1:]


def format_value(value: Optional[float]) -> str:
    if value is None:
        return "-"
    return f"{value:.4f}"


def format_ms(value: float) -> str:
    return f"{int(value)}" if float(value).is_integer() else f"{value:.1f}"


def _fmt_table(rows: List[Dict[str, Any]], cols: List[str]) -> str:
    """
    Format a list of dicts as a simple Markdown table.
    """
    if not rows:
        return "(none)"

    header = "| " + " | ".join(cols) + " |\n"
    header += "|" + "---|" * len(cols) + "\n"

    lines: List[str] = []
    for r in rows:
        lines.append("| " + " | ".join(str(r.get(c, "")) for c in cols) + " |")

    return header + "\n".join(lines)


def _interpretation(report: ExperimentReport) -> str:
    primary = report.primary_metric or (report.metric_names[0] if report.metric_names else None)
    if primary is None or not report.methods:
        return f"**{report.winner}** was the only method evaluated."

    ranked = sorted(report.methods, key=lambda m: m.results.get(primary, 0.0), reverse=True)
    best = report.method(report.winner) or ranked[0]
    text = (
        f"**{best.method}** achieved the best {format_metric_name(primary)} "
        f"({format_value(best.results.get(primary))})"
    )
    others = [m for m in ranked if m.method != best.method]
    if others:
        runner_up = others[0]
        margin = best.results.get(primary, 0.0) - runner_up.results.get(primary, 0.0)
        text += (
            f", ahead of {runner_up.method} ({format_value(runner_up.results.get(primary))}) "
            f"by {margin:.4f}"
        )
    text += "."

    if report.statistical_tests:
        n_sig = sum(1 for t in report.statistical_tests if t.significant)
        text += (
            f"\n\n{n_sig} of {len(report.statistical_tests)} pairwise tests were significant."
        )
        if n_sig == 0:
            text += " Differences between methods may be due to chance."
    return text


def generate_markdown_report(report: ExperimentReport) -> str:
    """Render ``report`` as Markdown."""
    metrics = report.metric_names

    sections: List[str] = [f"# {report.name}"]

    meta = [f"**Timestamp:** {report.timestamp}", f"**Graph Spec:** {report.graph_spec or 'n/a'}"]
    if report.duration is not None:
        meta.append(f"**Duration:** {format_ms(report.duration)}ms")
    if report.repetitions:
        meta.append(f"**Repetitions:** {report.repetitions}")
    sections.append("\n".join(f"{line}  " for line in meta))

    sections.append(f"## Winner\n\n**{report.winner}**")

    cols = ["Method"] + [format_metric_name(m) for m in metrics] + ["Runtime (ms)"]
    rows = []
    for mr in report.methods:
        row: Dict[str, Any] = {"Method": mr.method}
        for metric in metrics:
            row[format_metric_name(metric)] = format_value(mr.results.get(metric))
        row["Runtime (ms)"] = format_ms(mr.runtime) if mr.runtime is not None else "-"
        rows.append(row)
    sections.append("## Method Performance\n\n" + _fmt_table(rows, cols))

    test_rows = [
        {
            "Test": t.type,
            "Comparison": t.comparison,
            "Statistic": format_value(t.statistic),
            "p-value": format_value(t.p_value),
            "Adjusted p": format_value(t.adjusted_p_value),
            "Significant": "yes" if t.significant else "no",
        }
        for t in report.statistical_tests
    ]
    test_cols = ["Test", "Comparison", "Statistic", "p-value", "Significant"]
    if any(t.adjusted_p_value is not None for t in report.statistical_tests):
        test_cols.insert(4, "Adjusted p")
    sections.append("## Statistical Tests\n\n" + _fmt_table(test_rows, test_cols))

    sections.append("## Interpretation\n\n" + _interpretation(report))

    return "\n\n".join(sections) + "\n"
