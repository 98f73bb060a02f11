# src/pathrank/evaluation/effect_size.py

"""
Effect sizes for two-method comparisons.

Cohen's d and Glass's delta are standardised mean differences; Cliff's delta
and the rank-biserial correlation are rank-based. Degenerate inputs (empty
samples, zero spread) give 0.0.
"""

from __future__ import annotations

import math
from typing import Dict, Sequence, Tuple

import numpy as np
from scipy.stats import rankdata

# (upper bound, label) in ascending order, applied to |value|
_THRESHOLDS: Dict[str, Tuple[Tuple[float, str], ...]] = {
    # Cohen (1988)
    "cohens_d": ((0.2, "negligible"), (0.5, "small"), (0.8, "medium")),
    "glass_delta": ((0.2, "negligible"), (0.5, "small"), (0.8, "medium")),
    # Romano et al. (2006)
    "cliffs_delta": ((0.147, "negligible"), (0.33, "small"), (0.474, "medium")),
    "rank_biserial": ((0.1, "negligible"), (0.3, "small"), (0.5, "medium")),
}


def cohens_d(a: Sequence[float], b: Sequence[float]) -> float:
    """(mean(a) - mean(b)) / pooled standard deviation."""
    x = np.asarray(a, dtype=float)
    y = np.asarray(b, dtype=float)
    if x.size < 2 or y.size < 2:
        return 0.0
    pooled = ((x.size - 1) * x.var(ddof=1) + (y.size - 1) * y.var(ddof=1)) / (x.size + y.size - 2)
    if pooled <= 0:
        return 0.0
    return float((x.mean() - y.mean()) / math.sqrt(pooled))


def glass_delta(treatment: Sequence[float], control: Sequence[float]) -> float:
    """(mean(treatment) - mean(control)) / sd(control)."""
    t = np.asarray(treatment, dtype=float)
    c = np.asarray(control, dtype=float)
    if t.size == 0 or c.size < 2:
        return 0.0
    sd = float(c.std(ddof=1))
    if sd == 0:
        return 0.0
    return float((t.mean() - c.mean()) / sd)


def cliffs_delta(a: Sequence[float], b: Sequence[float]) -> float:
    """P(a > b) - P(a < b) over all cross pairs."""
    if len(a) == 0 or len(b) == 0:
        return 0.0
    x = np.asarray(a, dtype=float)[:, None]
    y = np.asarray(b, dtype=float)[None, :]
    greater = int(np.sum(x > y))
    less = int(np.sum(x < y))
    return (greater - less) / (len(a) * len(b))


def rank_biserial_correlation(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Matched-pairs rank-biserial correlation, (R+ - R-) / (R+ + R-), over the
    ranked non-zero differences a - b.
    """
    if len(a) != len(b):
        raise ValueError(f"Paired samples must have equal length ({len(a)} != {len(b)})")
    diffs = np.asarray(a, dtype=float) - np.asarray(b, dtype=float)
    diffs = diffs[diffs != 0]
    if diffs.size == 0:
        return 0.0
    ranks = rankdata(np.abs(diffs))
    r_plus = float(ranks[diffs > 0].sum())
    r_minus = float(ranks[diffs < 0].sum())
    return (r_plus - r_minus) / (r_plus + r_minus)


def interpret_effect_size(value: float, measure: str = "cohens_d") -> str:
    """Label |value| as negligible / small / medium / large for ``measure``."""
    try:
        thresholds = _THRESHOLDS[measure]
    except KeyError:
        raise ValueError(f"Unknown effect size measure '{measure}'") from None
    magnitude = abs(value)
    for bound, label in thresholds:
        if magnitude < bound:
            return label
    return "large"
