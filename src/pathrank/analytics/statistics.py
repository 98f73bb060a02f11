# src/pathrank/analytics/statistics.py

"""
Paired significance tests for comparing ranking methods.

This module performs:

1. Parametric / rank-based tests on paired per-repetition scores:
      - paired t-test (SciPy ttest_rel)
      - Wilcoxon signed-rank test (SciPy wilcoxon)

2. Resampling:
      - bootstrap percentile confidence interval
      - bootstrap test on paired differences

Degenerate inputs never raise: fewer than two pairs, or all-zero
differences, give statistic 0.0 and p-value 1.0.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, List, Sequence

import numpy as np
from scipy import stats

from ..utils.constants import DEFAULT_ALPHA, DEFAULT_BOOTSTRAP_SAMPLES
from ..utils.seeded_random import SeededRandom


@dataclass
class TestOutcome:
    statistic: float
    p_value: float
    significant: bool

    # keep pytest from collecting this as a test class
    __test__ = False


@dataclass
class ConfidenceInterval:
    estimate: float
    lower: float
    upper: float
    confidence: float


def _no_effect() -> TestOutcome:
    return TestOutcome(statistic=0.0, p_value=1.0, significant=False)


def _differences(a: Sequence[float], b: Sequence[float]) -> np.ndarray:
    if len(a) != len(b):
        raise ValueError(f"Paired samples must have equal length ({len(a)} != {len(b)})")
    return np.asarray(a, dtype=float) - np.asarray(b, dtype=float)


def paired_t_test(a: Sequence[float], b: Sequence[float], alpha: float = DEFAULT_ALPHA) -> TestOutcome:
    """Two-sided paired t-test of a - b against 0."""
    diffs = _differences(a, b)
    if diffs.size < 2 or np.all(diffs == 0):
        return _no_effect()

    if np.std(diffs, ddof=1) == 0:
        # constant non-zero shift: infinitely significant
        return TestOutcome(statistic=math.copysign(math.inf, float(diffs.mean())), p_value=0.0, significant=True)

    res = stats.ttest_rel(np.asarray(a, dtype=float), np.asarray(b, dtype=float))
    p = float(res.pvalue)
    return TestOutcome(statistic=float(res.statistic), p_value=p, significant=p < alpha)


def wilcoxon_signed_rank(a: Sequence[float], b: Sequence[float], alpha: float = DEFAULT_ALPHA) -> TestOutcome:
    """
    Two-sided Wilcoxon signed-rank test on paired samples.

    Zero differences are dropped before ranking. The statistic is SciPy's
    W (the smaller of the positive and negative rank sums).
    """
    diffs = _differences(a, b)
    nonzero = diffs[diffs != 0]
    if diffs.size < 2 or nonzero.size == 0:
        return _no_effect()

    res = stats.wilcoxon(nonzero)
    p = float(res.pvalue)
    return TestOutcome(statistic=float(res.statistic), p_value=p, significant=p < alpha)


def bootstrap_confidence_interval(
    samples: Sequence[float],
    confidence: float = 0.95,
    n_resamples: int = DEFAULT_BOOTSTRAP_SAMPLES,
    seed: int = 42,
    statistic: Callable[[np.ndarray], float] = np.mean,
) -> ConfidenceInterval:
    """
    Percentile bootstrap interval for ``statistic`` of ``samples``.

    Empty input gives a zero-width interval at 0.0.
    """
    data = np.asarray(samples, dtype=float)
    if data.size == 0:
        return ConfidenceInterval(estimate=0.0, lower=0.0, upper=0.0, confidence=confidence)

    rng = SeededRandom(seed)
    values = list(data)
    boot: List[float] = [
        float(statistic(np.asarray(rng.resample(values)))) for _ in range(max(1, n_resamples))
    ]
    tail = (1.0 - confidence) / 2.0 * 100.0
    lower, upper = np.percentile(boot, [tail, 100.0 - tail])
    return ConfidenceInterval(
        estimate=float(statistic(data)),
        lower=float(lower),
        upper=float(upper),
        confidence=confidence,
    )


def bootstrap_difference_test(
    a: Sequence[float],
    b: Sequence[float],
    n_resamples: int = DEFAULT_BOOTSTRAP_SAMPLES,
    seed: int = 42,
    alpha: float = DEFAULT_ALPHA,
) -> TestOutcome:
    """
    Two-sided bootstrap test of mean(a - b) = 0.

    Differences are re-centred on zero to simulate the null; the p-value is
    the share of resampled means at least as extreme as the observed one.
    The statistic is the observed mean difference.
    """
    diffs = _differences(a, b)
    if diffs.size < 2 or np.all(diffs == 0):
        return _no_effect()

    observed = float(diffs.mean())
    centred = list(diffs - observed)
    rng = SeededRandom(seed)

    n = max(1, n_resamples)
    extreme = 0
    for _ in range(n):
        if abs(float(np.mean(rng.resample(centred)))) >= abs(observed) - 1e-12:
            extreme += 1
    p = (extreme + 1) / (n + 1)
    return TestOutcome(statistic=observed, p_value=p, significant=p < alpha)
