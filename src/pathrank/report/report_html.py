# src/pathrank/report/report_html.py

"""
Standalone HTML report.

Single self-contained page with inline CSS: winner, method table (winner row
in bold), and statistical tests with significant / not-significant classes.
All report text is HTML-escaped.
"""

from __future__ import annotations

from html import escape
from typing import List

from ..experiment.models import ExperimentReport
from .report_markdown import format_metric_name, format_ms, format_value

_STYLE = """
body { font-family: -apple-system, "Segoe UI", Helvetica, Arial, sans-serif; margin: 2rem; color: #222; }
h1 { border-bottom: 2px solid #1f77b4; padding-bottom: 0.3rem; }
.meta { color: #555; }
table { border-collapse: collapse; margin: 1rem 0; }
th, td { border: 1px solid #ccc; padding: 0.4rem 0.8rem; text-align: right; }
th:first-child, td:first-child { text-align: left; }
th { background: #f3f6fa; }
tr.winner td { font-weight: bold; background: #eef7ee; }
.significant { color: #2ca02c; font-weight: bold; }
.not-significant { color: #7f7f7f; }
""".strip()


def generate_html_report(report: ExperimentReport) -> str:
    """Render ``report`` as a complete HTML document."""
    metrics = report.metric_names
    title = escape(report.name)

    parts: List[str] = [
        "<!DOCTYPE html>",
        '<html lang="en">',
        "<head>",
        '<meta charset="utf-8">',
        f"<title>{title}</title>",
        f"<style>\n{_STYLE}\n</style>",
        "</head>",
        "<body>",
        f"<h1>{title}</h1>",
        '<p class="meta">',
        f"<strong>Timestamp:</strong> {escape(report.timestamp)}<br>",
        f"<strong>Graph Spec:</strong> {escape(report.graph_spec or 'n/a')}",
    ]
    if report.duration is not None:
        parts.append(f"<br><strong>Duration:</strong> {format_ms(report.duration)}ms")
    parts.append("</p>")

    parts.append("<h2>Winner</h2>")
    parts.append(f'<p style="font-weight: bold">{escape(report.winner)}</p>')

    parts.append("<h2>Method Performance</h2>")
    parts.append("<table>")
    header = "".join(f"<th>{escape(format_metric_name(m))}</th>" for m in metrics)
    parts.append(f"<tr><th>Method</th>{header}<th>Runtime (ms)</th></tr>")
    for mr in report.methods:
        row_class = ' class="winner"' if mr.method == report.winner else ""
        cells = "".join(f"<td>{format_value(mr.results.get(m))}</td>" for m in metrics)
        runtime = format_ms(mr.runtime) if mr.runtime is not None else "-"
        parts.append(f"<tr{row_class}><td>{escape(mr.method)}</td>{cells}<td>{runtime}</td></tr>")
    parts.append("</table>")

    parts.append("<h2>Statistical Tests</h2>")
    if report.statistical_tests:
        parts.append("<table>")
        parts.append(
            "<tr><th>Test</th><th>Comparison</th><th>Statistic</th>"
            "<th>p-value</th><th>Adjusted p</th><th>Significant</th></tr>"
        )
        for t in report.statistical_tests:
            css = "significant" if t.significant else "not-significant"
            parts.append(
                f"<tr><td>{escape(t.type)}</td><td>{escape(t.comparison)}</td>"
                f"<td>{format_value(t.statistic)}</td><td>{format_value(t.p_value)}</td>"
                f"<td>{format_value(t.adjusted_p_value)}</td>"
                f'<td class="{css}">{"yes" if t.significant else "no"}</td></tr>'
            )
        parts.append("</table>")
    else:
        parts.append("<p>No statistical tests were run.</p>")

    parts += ["</body>", "</html>"]
    return "\n".join(parts) + "\n"
