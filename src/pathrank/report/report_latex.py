# src/pathrank/report/report_latex.py

"""
LaTeX (booktabs) results table.

Rows are methods and columns are metrics. The best value in each metric
column is set in bold, as is the winning method's name.
"""

from __future__ import annotations

from typing import Dict, List

from ..experiment.models import ExperimentReport
from .report_markdown import format_metric_name

_LATEX_SPECIAL = {
    "\\": r"\textbackslash{}",
    "&": r"\&",
    "%": r"\%",
    "$": r"\$",
    "#": r"\#",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
}


def escape_latex(text: str) -> str:
    return "".join(_LATEX_SPECIAL.get(ch, ch) for ch in str(text))


def _bold(text: str) -> str:
    return f"\\textbf{{{text}}}"


def generate_latex_table(report: ExperimentReport) -> str:
    """Render the method x metric table of ``report`` as a LaTeX table float."""
    metrics = report.metric_names

    best: Dict[str, float] = {}
    for metric in metrics:
        values = [m.results[metric] for m in report.methods if metric in m.results]
        if values:
            best[metric] = max(values)

    lines: List[str] = [
        "\\begin{table}[h]",
        "\\centering",
        f"\\caption{{Results for {escape_latex(report.name)}}}",
        f"\\label{{tab:{escape_latex(report.name.lower().replace(' ', '-'))}}}",
        "\\begin{tabular}{l" + "r" * len(metrics) + "}",
        "\\toprule",
        " & ".join(["Method"] + [escape_latex(format_metric_name(m)) for m in metrics]) + " \\\\",
        "\\midrule",
    ]

    for mr in report.methods:
        name = escape_latex(mr.method)
        cells = [_bold(name) if mr.method == report.winner else name]
        for metric in metrics:
            value = mr.results.get(metric)
            if value is None:
                cells.append("--")
                continue
            text = f"{value:.4f}"
            cells.append(_bold(text) if value == best.get(metric) else text)
        lines.append(" & ".join(cells) + " \\\\")

    lines += [
        "\\bottomrule",
        "\\end{tabular}",
        "\\end{table}",
    ]
    return "\n".join(lines) + "\n"
