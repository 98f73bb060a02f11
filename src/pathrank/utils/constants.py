# src/pathrank/utils/constants.py

"""
Shared constants for pathrank.

Signal bands, support-node counts and the ranking/planting defaults live here
so planting, ranking and the experiment runner stay in step.
"""

from __future__ import annotations

from typing import Dict, Tuple


# ─────────────────────────────────────────────────────────────────────────────
# Planted signal strength
# ─────────────────────────────────────────────────────────────────────────────

SIGNAL_STRENGTHS = ("weak", "medium", "strong")

# Target MI band (inclusive bounds used when sampling edge weights).
SIGNAL_BANDS: Dict[str, Tuple[float, float]] = {
    "weak": (0.05, 0.30),
    "medium": (0.30, 0.70),
    "strong": (0.70, 0.95),
}

# Upper bound on the shared neighbours wired to one planted path.
MAX_SUPPORT_NODES = 250

# ─────────────────────────────────────────────────────────────────────────────
# Noise paths
# ─────────────────────────────────────────────────────────────────────────────

NOISE_LENGTH_RANGE: Tuple[int, int] = (2, 4)
NOISE_WEIGHT_RANGE: Tuple[float, float] = (0.01, 0.15)

# ─────────────────────────────────────────────────────────────────────────────
# Path ranking defaults
# ─────────────────────────────────────────────────────────────────────────────

DEFAULT_LAMBDA = 0.0
DEFAULT_MAX_LENGTH = 5
DEFAULT_MAX_PATHS = 10
MAX_ENUMERATED_PATHS = 10_000

TRAVERSAL_MODES = ("directed", "undirected")

# ─────────────────────────────────────────────────────────────────────────────
# Evaluation
# ─────────────────────────────────────────────────────────────────────────────

DEFAULT_ALPHA = 0.05
DEFAULT_BOOTSTRAP_SAMPLES = 1000
DEFAULT_FOLDS = 5
PAGERANK_DAMPING = 0.85

# Node types used by citation planting
WORK_TYPE = "Work"
AUTHOR_TYPE = "Author"
SOURCE_TYPE = "Source"
