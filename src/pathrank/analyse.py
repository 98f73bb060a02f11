#!/usr/bin/env python3
"""
pathrank – MI path ranking experiments
-------------------------------------------------------
Loads a benchmark graph (Karate Club, Les Misérables, an edge list or a triple
file), plants ground-truth and noise paths, compares the MI ranker against
baseline rankers over repeated seeded trials, and writes Markdown, LaTeX,
JSON and HTML reports plus CSVs. Optionally cross-validates across folds and
ranks the paths between two nodes. Configurable via an experiment file and
CLI flags (CLI flags win).
"""

from __future__ import annotations

import argparse
import time
from pathlib import Path
from typing import Optional

from .analytics.path_ranking import PathRanker
from .build.graph import Graph, graph_stats
from .experiment.cross_validation import run_cross_validation
from .experiment.runner import run_experiment
from .loader.benchmark_loader import load_edge_list, load_karate_club, load_les_miserables, load_triples
from .report.csv_export import (
    export_cross_validation_csv,
    export_method_results_csv,
    export_ranked_paths_csv,
    export_statistical_tests_csv,
)
from .report.report_html import generate_html_report
from .report.report_json import generate_json_summary
from .report.report_latex import generate_latex_table
from .report.report_markdown import generate_markdown_report
from .utils.config_loader import build_experiment_config, load_experiment_config, parse_experiment_text

BENCHMARKS = {
    "karate": load_karate_club,
    "lesmis": load_les_miserables,
}


# ──────────────────────────────────────────────────────────────────────────────
# CLI
# ──────────────────────────────────────────────────────────────────────────────


def parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Compare MI path ranking against baselines on planted paths.")
    src = p.add_mutually_exclusive_group()
    src.add_argument(
        "--dataset",
        choices=sorted(BENCHMARKS),
        default="karate",
        help="Bundled benchmark graph (default: karate)",
    )
    src.add_argument("--edge-list", help="Edge-list file ('u v [weight]' per line)")
    src.add_argument("--triples", help="Triple file ('subject predicate object' per line)")
    p.add_argument("--directed", action="store_true", help="Treat --edge-list input as directed")
    p.add_argument("--config", help="Experiment file (key: value lines)")
    p.add_argument("--outdir", default="results", help="Output directory (default: results)")
    p.add_argument("--repetitions", type=int, help="Override number of repetitions")
    p.add_argument("--seed", type=int, help="Override top-level seed")
    p.add_argument("--folds", type=int, help="Run cross validation with this many folds (>= 2)")
    p.add_argument("--signal-strength", choices=["weak", "medium", "strong"], help="Planted signal strength")
    p.add_argument("--lambda", dest="lambda_", type=float, help="Length penalty for the MI ranker")
    p.add_argument("--methods", help="Comma-separated methods (mi, random, degree, pagerank, shortest, weight)")
    p.add_argument(
        "--query",
        nargs=2,
        metavar=("SOURCE", "TARGET"),
        help="Also rank the paths between two nodes of the loaded graph",
    )
    p.add_argument("--max-length", type=int, default=3, help="Hop cap for --query (default: 3)")
    p.add_argument("--verbose", action="store_true", help="Print one line per repetition")
    return p.parse_args(argv)


def _load_graph(args: argparse.Namespace) -> tuple[Graph, str]:
    if args.edge_list:
        return load_edge_list(args.edge_list, directed=args.directed), Path(args.edge_list).stem
    if args.triples:
        return load_triples(args.triples), Path(args.triples).stem
    return BENCHMARKS[args.dataset](), args.dataset


def _apply_overrides(settings, args: argparse.Namespace):
    overrides = []
    if args.methods:
        overrides.append(f"methods: {args.methods}")
    if args.repetitions is not None:
        overrides.append(f"repetitions: {args.repetitions}")
    if args.seed is not None:
        overrides.append(f"seed: {args.seed}")
    if args.folds is not None:
        overrides.append(f"folds: {args.folds}")
    if args.signal_strength:
        overrides.append(f"signal_strength: {args.signal_strength}")
    if args.lambda_ is not None:
        overrides.append(f"lambda: {args.lambda_}")
    if not overrides:
        return settings

    # re-parse so CLI values go through the same validation as file values
    parsed = parse_experiment_text("\n".join(overrides), source="command line")
    for line in overrides:
        key = line.split(":", 1)[0]
        attr = "lambda_" if key == "lambda" else key
        setattr(settings, attr, getattr(parsed, attr))
    return settings


# ──────────────────────────────────────────────────────────────────────────────
# Main orchestration
# ──────────────────────────────────────────────────────────────────────────────


def main(argv=None) -> None:
    args = parse_args(argv)
    outdir = Path(args.outdir)
    outdir.mkdir(parents=True, exist_ok=True)

    start_time = time.time()

    print("📥 Loading graph …")
    graph, graph_label = _load_graph(args)
    stats = graph_stats(graph)
    print(f"✅ Graph loaded: {stats.n_nodes} nodes, {stats.n_edges} edges. Types: {dict(stats.types)}")

    settings = load_experiment_config(Path(args.config)) if args.config else None
    if settings is None:
        settings = parse_experiment_text("", source="defaults")
    settings = _apply_overrides(settings, args)
    config = build_experiment_config(settings, graph_spec=graph_label)

    # Optional path query on the unmodified graph
    if args.query:
        source, target = args.query
        print(f"🧭 Ranking paths {source} → {target} (max {args.max_length} hops) …")
        ranker = PathRanker(graph, lambda_=settings.lambda_, max_length=args.max_length)
        ranked: Optional[list] = ranker.rank(source, target)
        if ranked is None:
            print(f"   No path between {source} and {target} within {args.max_length} hops")
        else:
            for i, rp in enumerate(ranked[:5], start=1):
                print(f"   {i:>2}. {rp.key} (score={rp.score:.4f}, gm_mi={rp.geometric_mean_mi:.4f})")
            export_ranked_paths_csv(ranked, outdir / "ranked_paths.csv")

    print(
        f"🧪 Running experiment '{config.name}' "
        f"({config.repetitions} repetitions, {len(config.methods)} methods) …"
    )
    report = run_experiment(config, graph, verbose=args.verbose)
    print(f"🏆 Winner: {report.winner} (by {report.primary_metric})")
    for mr in report.methods:
        vals = ", ".join(f"{k}={v:.4f}" for k, v in mr.results.items())
        print(f"   {mr.method}: {vals}")

    if settings.folds:
        print(f"🔁 Cross validation ({settings.folds} folds) …")
        cv = run_cross_validation(config, graph, folds=settings.folds, verbose=args.verbose)
        for method, metrics in cv.aggregated.items():
            primary = config.primary_metric
            if primary:
                print(f"   {method}: {primary}={metrics[primary]:.4f} ± {cv.std_dev[method][primary]:.4f}")
        export_cross_validation_csv(cv, outdir / "cross_validation.csv")

    print("📝 Rendering reports …")
    outputs = {
        "report.md": generate_markdown_report(report),
        "report.tex": generate_latex_table(report),
        "summary.json": generate_json_summary(report, include_samples=True),
        "report.html": generate_html_report(report),
    }
    for filename, text in outputs.items():
        path = outdir / filename
        path.write_text(text, encoding="utf-8")
        print(f"💾 Saved {filename} → {path}")

    export_method_results_csv(report, outdir / "method_results.csv")
    export_statistical_tests_csv(report, outdir / "statistical_tests.csv")

    elapsed = time.time() - start_time
    print(f"⏱️ Total execution time: {elapsed:.1f}s")
    print("✔️ pathrank complete.")


if __name__ == "__main__":
    main()
