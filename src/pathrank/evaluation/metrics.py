# src/pathrank/evaluation/metrics.py

"""
Ranking evaluation metrics.

Rank correlation
  - spearman_correlation / kendall_tau on two ranked id lists (only ids
    present in both lists are compared)
  - spearman_from_scores / kendall_from_scores on paired score vectors
    (SciPy, average ranks for ties)

Information retrieval
  - ndcg, mean_average_precision, mean_reciprocal_rank,
    precision_at_k, recall_at_k

All functions are pure and return a defined sentinel instead of raising on
degenerate input (see each docstring).
"""

from __future__ import annotations

import math
import re
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from scipy import stats

from ..build.errors import ConfigError

RelevanceList = Sequence[Tuple[str, float]]


# ---------------------------------------------------------------------------
# Rank correlation
# ---------------------------------------------------------------------------
def _common_ranks(predicted: Sequence[str], truth: Sequence[str]) -> Tuple[List[int], List[int]]:
    truth_set = set(truth)
    pred_common = [x for x in dict.fromkeys(predicted) if x in truth_set]
    pred_set = set(pred_common)
    truth_common = [x for x in dict.fromkeys(truth) if x in pred_set]
    truth_rank = {x: i for i, x in enumerate(truth_common)}
    return list(range(len(pred_common))), [truth_rank[x] for x in pred_common]


def spearman_correlation(predicted: Sequence[str], truth: Sequence[str]) -> float:
    """
    Spearman's rho between two rankings of ids.

    Returns 0.0 when the lists share no ids and 1.0 when they share one.
    """
    pr, tr = _common_ranks(predicted, truth)
    n = len(pr)
    if n == 0:
        return 0.0
    if n == 1:
        return 1.0
    d2 = sum((a - b) ** 2 for a, b in zip(pr, tr))
    return 1.0 - (6.0 * d2) / (n * (n * n - 1))


def kendall_tau(predicted: Sequence[str], truth: Sequence[str]) -> float:
    """
    Kendall's tau between two rankings of ids.

    Returns 1.0 when fewer than two ids are shared.
    """
    pr, tr = _common_ranks(predicted, truth)
    n = len(pr)
    if n < 2:
        return 1.0
    concordant = discordant = 0
    for i in range(n):
        for j in range(i + 1, n):
            s = (pr[i] - pr[j]) * (tr[i] - tr[j])
            if s > 0:
                concordant += 1
            elif s < 0:
                discordant += 1
    return (concordant - discordant) / (n * (n - 1) / 2)


def _score_correlation(fn, x: Sequence[float], y: Sequence[float]) -> float:
    if len(x) != len(y):
        raise ValueError(f"Score vectors must have equal length ({len(x)} != {len(y)})")
    if len(x) < 2 or len(set(x)) < 2 or len(set(y)) < 2:
        return 0.0
    value = float(fn(x, y)[0])
    return 0.0 if math.isnan(value) else value


def spearman_from_scores(x: Sequence[float], y: Sequence[float]) -> float:
    """Spearman's rho of paired scores; 0.0 for constant or too-short input."""
    return _score_correlation(stats.spearmanr, x, y)


def kendall_from_scores(x: Sequence[float], y: Sequence[float]) -> float:
    """Kendall's tau-b of paired scores; 0.0 for constant or too-short input."""
    return _score_correlation(stats.kendalltau, x, y)


# ---------------------------------------------------------------------------
# IR metrics
# ---------------------------------------------------------------------------
def _gain(rel: float, gain: str) -> float:
    if gain == "exponential":
        return 2.0 ** rel - 1.0
    return rel


def _dcg(relevances: Iterable[float], gain: str) -> float:
    return sum(_gain(r, gain) / math.log2(i + 2) for i, r in enumerate(relevances))


def ndcg(
    predicted: RelevanceList,
    ideal: RelevanceList,
    k: Optional[int] = None,
    gain: str = "linear",
) -> float:
    """
    Normalised discounted cumulative gain.

    Parameters
    ----------
    predicted : list of (id, relevance)
        Ranked output. Relevance of an id is taken from ``ideal`` when the
        id appears there.
    ideal : list of (id, relevance)
        Ground-truth judgments (any order; sorted internally).
    k : int, optional
        Cutoff.
    gain : {"linear", "exponential"}
        rel or 2**rel - 1; discount is log2(rank + 1).

    Returns
    -------
    float
        0.0 for empty predictions, 1.0 when nothing is relevant.
    """
    if not predicted:
        return 0.0
    judged: Dict[str, float] = dict(ideal)
    pred_rels = [judged.get(pid, rel) for pid, rel in predicted]
    ideal_rels = sorted((r for _, r in ideal), reverse=True)
    if k is not None:
        pred_rels = pred_rels[:k]
        ideal_rels = ideal_rels[:k]

    idcg = _dcg(ideal_rels, gain)
    if idcg <= 0:
        return 1.0
    return _dcg(pred_rels, gain) / idcg


def mean_average_precision(predicted: Sequence[str], relevant: Set[str]) -> float:
    """Average precision at each relevant hit, over |relevant|. 0.0 if either is empty."""
    if not predicted or not relevant:
        return 0.0
    hits = 0
    total = 0.0
    for i, pid in enumerate(predicted, start=1):
        if pid in relevant:
            hits += 1
            total += hits / i
    return total / len(relevant)


def mean_reciprocal_rank(predicted: Sequence[str], relevant: Set[str]) -> float:
    """1 / rank of the first relevant id; 0.0 if none."""
    for i, pid in enumerate(predicted, start=1):
        if pid in relevant:
            return 1.0 / i
    return 0.0


def precision_at_k(predicted: Sequence[str], relevant: Set[str], k: int) -> float:
    """Relevant ids among the top ``k``, divided by ``k`` (not by len(predicted))."""
    if not predicted or not relevant or k <= 0:
        return 0.0
    return sum(1 for pid in predicted[:k] if pid in relevant) / k


def recall_at_k(predicted: Sequence[str], relevant: Set[str], k: int) -> float:
    if not predicted or not relevant or k <= 0:
        return 0.0
    return sum(1 for pid in predicted[:k] if pid in relevant) / len(relevant)


# ---------------------------------------------------------------------------
# Metric names used by experiment configs
# ---------------------------------------------------------------------------
BASE_METRICS = ("spearman", "kendall", "ndcg", "map", "mrr")
_AT_K = re.compile(r"^(precision|recall|ndcg)_at_(\d+)$")


def validate_metric(name: str) -> None:
    """Raise ConfigError unless ``name`` is a known metric (e.g. 'precision_at_5')."""
    if name in BASE_METRICS:
        return
    m = _AT_K.match(name)
    if m is None or int(m.group(2)) < 1:
        raise ConfigError(
            f"Unknown metric '{name}' (expected one of {', '.join(BASE_METRICS)} "
            f"or precision_at_K / recall_at_K / ndcg_at_K)"
        )


def evaluate_metric(
    name: str,
    predicted: Sequence[str],
    truth: Sequence[str],
    relevance: Mapping[str, float],
) -> float:
    """
    Compute metric ``name`` for one ranked id list.

    Parameters
    ----------
    predicted : list of str
        Method output, best first.
    truth : list of str
        Ground-truth ranking, best first.
    relevance : dict
        id -> graded relevance; ids with relevance > 0 count as relevant.
    """
    validate_metric(name)
    relevant = {pid for pid, r in relevance.items() if r > 0}

    if name == "spearman":
        return spearman_correlation(predicted, truth)
    if name == "kendall":
        return kendall_tau(predicted, truth)
    if name == "map":
        return mean_average_precision(predicted, relevant)
    if name == "mrr":
        return mean_reciprocal_rank(predicted, relevant)

    pred_rel = [(pid, relevance.get(pid, 0.0)) for pid in predicted]
    ideal_rel = list(relevance.items())
    if name == "ndcg":
        return ndcg(pred_rel, ideal_rel)

    kind, k = _AT_K.match(name).groups()
    k = int(k)
    if kind == "precision":
        return precision_at_k(predicted, relevant, k)
    if kind == "recall":
        return recall_at_k(predicted, relevant, k)
    return ndcg(pred_rel, ideal_rel, k=k)
