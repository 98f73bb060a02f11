"""Tests for Markdown, LaTeX, JSON, HTML and CSV report output."""

import csv
import json
import math

import pytest

from pathrank.analytics.path_ranking import rank_paths
from pathrank.experiment.cross_validation import run_cross_validation
from pathrank.experiment.models import ExperimentReport, MethodResult, StatisticalTestResult
from pathrank.experiment.runner import run_experiment
from pathrank.report.csv_export import (
    export_cross_validation_csv,
    export_method_results_csv,
    export_ranked_paths_csv,
    export_statistical_tests_csv,
)
from pathrank.report.report_html import generate_html_report
from pathrank.report.report_json import generate_json_summary, parse_json_summary
from pathrank.report.report_latex import escape_latex, generate_latex_table
from pathrank.report.report_markdown import format_metric_name, generate_markdown_report


@pytest.fixture
def report() -> ExperimentReport:
    """Two-method report with one significant test."""
    return ExperimentReport(
        name="MI vs Random",
        methods=[
            MethodResult(method="MI", results={"ndcg": 0.91234, "precision_at_5": 0.8}, runtime=12.0),
            MethodResult(method="Random", results={"ndcg": 0.55, "precision_at_5": 0.4}, runtime=3.5),
        ],
        winner="MI",
        statistical_tests=[
            StatisticalTestResult(
                type="paired-t", comparison="MI vs Random", p_value=0.001, significant=True, statistic=5.2
            )
        ],
        timestamp="2024-01-01T00:00:00+00:00",
        duration=1500.0,
        graph_spec="karate",
        primary_metric="ndcg",
        repetitions=10,
    )


def test_format_metric_name():
    """at-K metrics become NAME@K, others are capitalised."""
    assert format_metric_name("precision_at_5") == "PRECISION@5"
    assert format_metric_name("ndcg") == "Ndcg"


# ---------------------------------------------------------------------------
# Markdown
# ---------------------------------------------------------------------------
def test_markdown_sections(report):
    """Header, winner, tables and interpretation appear in order."""
    md = generate_markdown_report(report)
    assert md.startswith("# MI vs Random")
    assert "**Timestamp:** 2024-01-01T00:00:00+00:00" in md
    assert "**Graph Spec:** karate" in md
    assert "**Duration:** 1500ms" in md
    assert "## Winner\n\n**MI**" in md
    assert "| Method | Ndcg | PRECISION@5 | Runtime (ms) |" in md
    assert "| MI | 0.9123 | 0.8000 | 12 |" in md
    assert "| Random | 0.5500 | 0.4000 | 3.5 |" in md
    assert "| paired-t | MI vs Random | 5.2000 | 0.0010 | yes |" in md
    order = [md.index(h) for h in ("## Winner", "## Method Performance", "## Statistical Tests", "## Interpretation")]
    assert order == sorted(order)
    assert "1 of 1 pairwise tests were significant" in md


def test_markdown_without_tests_or_duration(report):
    """Missing sections degrade gracefully."""
    report.statistical_tests = []
    report.duration = None
    md = generate_markdown_report(report)
    assert "**Duration:**" not in md
    assert "## Statistical Tests\n\n(none)" in md


def test_markdown_adjusted_p_column(report):
    """The adjusted p column appears only when a correction ran."""
    assert "Adjusted p" not in generate_markdown_report(report)
    report.statistical_tests[0].adjusted_p_value = 0.004
    assert "| Adjusted p |" in generate_markdown_report(report)


# ---------------------------------------------------------------------------
# LaTeX
# ---------------------------------------------------------------------------
def test_latex_table(report):
    """booktabs table with the winner and column bests in bold."""
    tex = generate_latex_table(report)
    assert tex.startswith("\\begin{table}[h]")
    assert "\\caption{Results for MI vs Random}" in tex
    assert "\\toprule" in tex and "\\midrule" in tex and "\\bottomrule" in tex
    assert "Method & Ndcg & PRECISION@5 \\\\" in tex
    assert "\\textbf{MI} & \\textbf{0.9123} & \\textbf{0.8000} \\\\" in tex
    assert "Random & 0.5500 & 0.4000 \\\\" in tex
    assert tex.rstrip().endswith("\\end{table}")


def test_latex_escaping():
    """Special characters are escaped."""
    assert escape_latex("a_b & 50%") == "a\\_b \\& 50\\%"


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------
def test_json_round_trip(report):
    """Parsing the summary gives back names and metric values."""
    text = generate_json_summary(report)
    data = json.loads(text)
    assert data["winner"] == "MI"
    assert [m["name"] for m in data["methods"]] == ["MI", "Random"]

    parsed = parse_json_summary(text)
    assert [m.method for m in parsed.methods] == ["MI", "Random"]
    for original, restored in zip(report.methods, parsed.methods):
        assert restored.results == pytest.approx(original.results)
    assert parsed.statistical_tests[0].p_value == pytest.approx(0.001)
    assert parsed.graph_spec == "karate"
    assert parsed.repetitions == 10


def _reject_constant(token):
    raise ValueError(f"non-standard JSON token {token}")


def test_json_is_strict_with_non_finite_values(report):
    """Infinite statistics survive as strings that any JSON parser accepts."""
    report.statistical_tests[0].statistic = math.inf
    report.statistical_tests[0].effect_size = -math.inf
    report.methods[1].results["ndcg"] = math.nan
    text = generate_json_summary(report)

    data = json.loads(text, parse_constant=_reject_constant)
    assert data["statistical_tests"][0]["statistic"] == "Infinity"
    assert data["statistical_tests"][0]["effect_size"] == "-Infinity"

    parsed = parse_json_summary(text)
    assert parsed.statistical_tests[0].statistic == math.inf
    assert parsed.statistical_tests[0].effect_size == -math.inf
    assert math.isnan(parsed.methods[1].results["ndcg"])
    assert parsed.name == "MI vs Random"


def test_json_round_trip_of_real_run(small_experiment, karate):
    """A full run survives the round trip, samples included."""
    original = run_experiment(small_experiment, karate)
    parsed = parse_json_summary(generate_json_summary(original, include_samples=True))
    assert parsed.winner == original.winner
    for a, b in zip(original.methods, parsed.methods):
        assert a.method == b.method
        assert b.results == pytest.approx(a.results)
        assert b.samples == a.samples


# ---------------------------------------------------------------------------
# HTML
# ---------------------------------------------------------------------------
def test_html_report(report):
    """Self-contained page with winner row and significance classes."""
    page = generate_html_report(report)
    assert page.startswith("<!DOCTYPE html>")
    assert "<title>MI vs Random</title>" in page
    assert "<style>" in page and "table {" in page
    assert '<p style="font-weight: bold">MI</p>' in page
    assert '<tr class="winner"><td>MI</td>' in page
    assert 'class="significant"' in page


def test_html_escapes_text(report):
    """Report text cannot inject markup."""
    report.name = "<script>alert(1)</script>"
    page = generate_html_report(report)
    assert "<script>" not in page
    assert "&lt;script&gt;" in page


def test_html_not_significant_class(report):
    """Non-significant tests are marked as such."""
    report.statistical_tests[0].significant = False
    assert 'class="not-significant"' in generate_html_report(report)


# ---------------------------------------------------------------------------
# CSV
# ---------------------------------------------------------------------------
def _read(path):
    with open(path, encoding="utf-8", newline="") as f:
        return list(csv.DictReader(f))


def test_method_and_test_csv(report, tmp_path):
    """One row per method and per test."""
    export_method_results_csv(report, tmp_path / "methods.csv")
    export_statistical_tests_csv(report, tmp_path / "nested" / "tests.csv")
    rows = _read(tmp_path / "methods.csv")
    assert [r["method"] for r in rows] == ["MI", "Random"]
    assert float(rows[0]["ndcg"]) == pytest.approx(0.91234)
    tests = _read(tmp_path / "nested" / "tests.csv")
    assert tests[0]["comparison"] == "MI vs Random"


def test_ranked_paths_csv(crossover_graph, tmp_path):
    """Ranked paths are written best first."""
    ranked = rank_paths(crossover_graph, "A", "B", max_length=3)
    export_ranked_paths_csv(ranked, tmp_path / "paths.csv")
    rows = _read(tmp_path / "paths.csv")
    assert [r["rank"] for r in rows] == ["1", "2"]
    assert rows[0]["path"] == "A→X→Y→B"
    assert rows[0]["hops"] == "3"


def test_cross_validation_csv(small_experiment, karate, tmp_path):
    """One row per method and metric."""
    cv = run_cross_validation(small_experiment, karate, folds=2)
    export_cross_validation_csv(cv, tmp_path / "cv.csv")
    rows = _read(tmp_path / "cv.csv")
    assert len(rows) == 3 * 3
    assert {r["folds"] for r in rows} == {"2"}
