# src/pathrank/evaluation/multiple_comparison.py

"""
Multiple-comparison corrections for families of p-values.

Every function preserves input order and returns a CorrectionResult with
adjusted values and per-comparison significance decisions. Bonferroni,
Benjamini-Hochberg and Holm delegate to statsmodels' multipletests; Storey
q-values are computed here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np
from statsmodels.stats.multitest import multipletests

from ..build.errors import ConfigError
from ..utils.constants import DEFAULT_ALPHA

CORRECTION_METHODS = ("bonferroni", "benjamini-hochberg", "holm", "storey")


@dataclass
class CorrectionResult:
    method: str
    adjusted_p_values: List[float] = field(default_factory=list)
    significant: List[bool] = field(default_factory=list)
    corrected_alpha: Optional[float] = None
    pi0: Optional[float] = None


def _multipletests(p_values: Sequence[float], alpha: float, method: str):
    reject, adjusted, _, alpha_bonf = multipletests(np.asarray(p_values, dtype=float), alpha=alpha, method=method)
    return [bool(r) for r in reject], [float(p) for p in adjusted], float(alpha_bonf)


def bonferroni_correction(p_values: Sequence[float], alpha: float = DEFAULT_ALPHA) -> CorrectionResult:
    """Compare each p to alpha / m; adjusted p = min(1, p * m)."""
    if len(p_values) == 0:
        return CorrectionResult(method="bonferroni", corrected_alpha=alpha)
    significant, adjusted, corrected = _multipletests(p_values, alpha, "bonferroni")
    return CorrectionResult(
        method="bonferroni",
        adjusted_p_values=adjusted,
        significant=significant,
        corrected_alpha=corrected,
    )


def benjamini_hochberg(p_values: Sequence[float], fdr: float = DEFAULT_ALPHA) -> CorrectionResult:
    """Step-up FDR control; adjusted p-values are made monotone from the top."""
    if len(p_values) == 0:
        return CorrectionResult(method="benjamini-hochberg")
    significant, adjusted, _ = _multipletests(p_values, fdr, "fdr_bh")
    return CorrectionResult(method="benjamini-hochberg", adjusted_p_values=adjusted, significant=significant)


def holm_bonferroni(p_values: Sequence[float], alpha: float = DEFAULT_ALPHA) -> CorrectionResult:
    """Step-down Holm procedure; stops rejecting at the first non-significant p."""
    if len(p_values) == 0:
        return CorrectionResult(method="holm")
    significant, adjusted, _ = _multipletests(p_values, alpha, "holm")
    return CorrectionResult(method="holm", adjusted_p_values=adjusted, significant=significant)


def storey_q_values(
    p_values: Sequence[float],
    fdr: float = DEFAULT_ALPHA,
    lambda_: float = 0.5,
) -> CorrectionResult:
    """
    Storey q-values with pi0 estimated at a single ``lambda_``.

    pi0 = min(1, #{p > lambda} / (m * (1 - lambda))).
    """
    m = len(p_values)
    if m == 0:
        return CorrectionResult(method="storey", pi0=1.0)

    pi0 = min(1.0, (sum(1 for p in p_values if p > lambda_) / m) / (1.0 - lambda_))
    order = sorted(range(m), key=lambda i: p_values[i])
    q = [0.0] * m
    previous = 0.0
    for rank in range(m - 1, -1, -1):
        i = order[rank]
        value = max(min(1.0, p_values[i] * m * pi0 / (rank + 1)), previous)
        q[i] = value
        previous = value

    return CorrectionResult(
        method="storey",
        adjusted_p_values=q,
        significant=[v < fdr for v in q],
        pi0=pi0,
    )


def apply_correction(method: str, p_values: Sequence[float], alpha: float = DEFAULT_ALPHA) -> CorrectionResult:
    """Dispatch by name: bonferroni, benjamini-hochberg (bh), holm, storey."""
    key = method.lower()
    if key == "bonferroni":
        return bonferroni_correction(p_values, alpha)
    if key in ("benjamini-hochberg", "bh"):
        return benjamini_hochberg(p_values, alpha)
    if key in ("holm", "holm-bonferroni"):
        return holm_bonferroni(p_values, alpha)
    if key == "storey":
        return storey_q_values(p_values, alpha)
    raise ConfigError(f"Unknown correction '{method}' (expected one of {', '.join(CORRECTION_METHODS)})")
