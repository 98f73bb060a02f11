"""Tests for significance tests, corrections and effect sizes."""

import math

import pytest
from statsmodels.stats.multitest import multipletests

from pathrank.analytics.statistics import (
    bootstrap_confidence_interval,
    bootstrap_difference_test,
    paired_t_test,
    wilcoxon_signed_rank,
)
from pathrank.build.errors import ConfigError
from pathrank.evaluation.effect_size import (
    cliffs_delta,
    cohens_d,
    glass_delta,
    interpret_effect_size,
    rank_biserial_correlation,
)
from pathrank.evaluation.multiple_comparison import (
    apply_correction,
    benjamini_hochberg,
    bonferroni_correction,
    holm_bonferroni,
    storey_q_values,
)

A = [0.81, 0.78, 0.85, 0.90, 0.76, 0.88, 0.83, 0.79, 0.86, 0.84]
B = [0.52, 0.61, 0.49, 0.58, 0.55, 0.50, 0.63, 0.57, 0.54, 0.60]


# ---------------------------------------------------------------------------
# Paired tests
# ---------------------------------------------------------------------------
def test_paired_t_detects_clear_difference():
    """A large consistent gap is significant."""
    outcome = paired_t_test(A, B)
    assert outcome.statistic > 0
    assert outcome.p_value < 0.001
    assert outcome.significant


def test_paired_t_degenerate_inputs():
    """Too few pairs or identical samples give statistic 0 and p 1."""
    for a, b in (([0.5], [0.4]), (A, A), ([], [])):
        outcome = paired_t_test(a, b)
        assert outcome.statistic == 0.0
        assert outcome.p_value == 1.0
        assert not outcome.significant


def test_paired_t_constant_shift():
    """A constant non-zero difference is infinitely significant."""
    outcome = paired_t_test([2.0, 3.0, 4.0], [1.0, 2.0, 3.0])
    assert outcome.p_value == 0.0
    assert math.isinf(outcome.statistic) and outcome.statistic > 0


def test_paired_tests_require_equal_length():
    """Unpaired samples are a programming error."""
    with pytest.raises(ValueError):
        paired_t_test([1.0, 2.0], [1.0])
    with pytest.raises(ValueError):
        wilcoxon_signed_rank([1.0, 2.0], [1.0])


def test_wilcoxon():
    """Every difference positive: small p; no differences: p 1."""
    outcome = wilcoxon_signed_rank(A, B)
    assert outcome.p_value < 0.01
    assert outcome.significant
    assert wilcoxon_signed_rank(A, A).p_value == 1.0


def test_bootstrap_confidence_interval():
    """Interval brackets the sample mean and is reproducible."""
    ci = bootstrap_confidence_interval(A, n_resamples=500, seed=3)
    assert ci.lower <= ci.estimate <= ci.upper
    assert ci.estimate == pytest.approx(sum(A) / len(A))
    assert bootstrap_confidence_interval(A, n_resamples=500, seed=3) == ci
    empty = bootstrap_confidence_interval([])
    assert (empty.lower, empty.upper) == (0.0, 0.0)


def test_bootstrap_difference_test():
    """Clear differences are significant; noise around zero is not."""
    outcome = bootstrap_difference_test(A, B, n_resamples=500, seed=1)
    assert outcome.significant
    assert outcome.statistic == pytest.approx(sum(A) / 10 - sum(B) / 10)

    noisy = bootstrap_difference_test([0.5, 0.6, 0.4, 0.55], [0.55, 0.5, 0.45, 0.6], n_resamples=500, seed=1)
    assert not noisy.significant
    assert bootstrap_difference_test(A, A).p_value == 1.0


# ---------------------------------------------------------------------------
# Multiple comparison corrections
# ---------------------------------------------------------------------------
P = [0.01, 0.04, 0.03, 0.20]


def test_bonferroni():
    """Adjusted p = min(1, p * m); threshold alpha / m."""
    result = bonferroni_correction(P)
    assert result.adjusted_p_values == pytest.approx([0.04, 0.16, 0.12, 0.80])
    assert result.significant == [True, False, False, False]
    assert result.corrected_alpha == pytest.approx(0.0125)


def test_benjamini_hochberg():
    """Step-up adjusted values, monotone in p order."""
    result = benjamini_hochberg(P)
    assert result.adjusted_p_values == pytest.approx([0.04, 0.16 / 3, 0.16 / 3, 0.20])
    assert result.significant == [True, False, False, False]


def test_holm():
    """Step-down stops at the first failure."""
    result = holm_bonferroni(P)
    assert result.adjusted_p_values == pytest.approx([0.04, 0.09, 0.09, 0.20])
    assert result.significant == [True, False, False, False]


def test_storey_q_values():
    """pi0 estimated from p-values above lambda."""
    result = storey_q_values(P)
    # no p-value exceeds 0.5, so pi0 = 0
    assert result.pi0 == 0.0
    assert all(q == 0.0 for q in result.adjusted_p_values)
    assert storey_q_values([0.9, 0.8, 0.01, 0.6]).pi0 == pytest.approx(1.0)


@pytest.mark.parametrize(
    "method, correct",
    [("bonferroni", bonferroni_correction), ("fdr_bh", benjamini_hochberg), ("holm", holm_bonferroni)],
)
def test_corrections_agree_with_statsmodels(method, correct):
    """Adjusted values and decisions match multipletests on an unsorted family."""
    p = [0.001, 0.2, 0.04, 0.5, 0.012, 0.03]
    reject, adjusted, _, _ = multipletests(p, alpha=0.05, method=method)
    result = correct(p)
    assert result.adjusted_p_values == pytest.approx(list(adjusted))
    assert result.significant == [bool(r) for r in reject]


def test_corrections_preserve_order_and_handle_empty():
    """Output lines up with input; empty input is fine."""
    assert bonferroni_correction([]).adjusted_p_values == []
    assert benjamini_hochberg([]).significant == []
    assert holm_bonferroni([0.5]).adjusted_p_values == [0.5]


def test_apply_correction_dispatch():
    """Names and aliases dispatch; unknown names raise ConfigError."""
    assert apply_correction("BH", P).method == "benjamini-hochberg"
    assert apply_correction("holm-bonferroni", P).method == "holm"
    assert apply_correction("storey", P).method == "storey"
    with pytest.raises(ConfigError):
        apply_correction("sidak", P)


# ---------------------------------------------------------------------------
# Effect sizes
# ---------------------------------------------------------------------------
def test_cohens_d():
    """Standardised mean difference with pooled SD."""
    assert cohens_d([1, 2, 3], [1, 2, 3]) == 0.0
    assert cohens_d([2, 3, 4], [1, 2, 3]) == pytest.approx(1.0)
    assert cohens_d([1], [2, 3]) == 0.0
    assert cohens_d(A, B) > 0.8


def test_glass_delta():
    """Difference scaled by the control SD."""
    assert glass_delta([3, 4, 5], [1, 2, 3]) == pytest.approx(2.0)
    assert glass_delta([3, 4, 5], [2, 2, 2]) == 0.0


def test_cliffs_delta():
    """Dominance probability difference."""
    assert cliffs_delta([4, 5, 6], [1, 2, 3]) == 1.0
    assert cliffs_delta([1, 2, 3], [4, 5, 6]) == -1.0
    assert cliffs_delta([1, 2], [1, 2]) == 0.0
    assert cliffs_delta([], [1]) == 0.0


def test_rank_biserial_correlation():
    """All positive differences give +1."""
    assert rank_biserial_correlation(A, B) == pytest.approx(1.0)
    assert rank_biserial_correlation(B, A) == pytest.approx(-1.0)
    assert rank_biserial_correlation(A, A) == 0.0


@pytest.mark.parametrize(
    "value, measure, label",
    [
        (0.1, "cohens_d", "negligible"),
        (0.3, "cohens_d", "small"),
        (-0.6, "cohens_d", "medium"),
        (1.2, "cohens_d", "large"),
        (0.1, "cliffs_delta", "negligible"),
        (0.2, "cliffs_delta", "small"),
        (0.4, "cliffs_delta", "medium"),
        (0.5, "cliffs_delta", "large"),
    ],
)
def test_interpret_effect_size(value, measure, label):
    """Cohen and Romano thresholds on |value|."""
    assert interpret_effect_size(value, measure) == label


def test_interpret_unknown_measure():
    """Unknown measures are rejected."""
    with pytest.raises(ValueError):
        interpret_effect_size(0.5, "eta_squared")
