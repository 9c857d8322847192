"""
Evaluation components for hanoikit.

This package contains:
- Best-score ordering and the persisted score store
- Metrics over finished sessions
"""

from hanoikit.evaluation.scoring import Score, ScoreStore, is_better_score, is_score_eligible
from hanoikit.evaluation.metrics import MetricsCalculator

__all__ = [
    "Score",
    "ScoreStore",
    "is_better_score",
    "is_score_eligible",
    "MetricsCalculator",
]
