"""Scoring and diversity sampling for feed candidates.

Everything here is pure and synchronous: no I/O, no shared state.
"""

from .combiner import apply_boosts, combine, factor_scores, score_post
from .diversity import apply_diversity_sampling
from .factors import (
    engagement_score,
    quality_score,
    recency_score,
    relationship_score,
    relevance_score,
)

__all__ = [
    "apply_boosts",
    "apply_diversity_sampling",
    "combine",
    "engagement_score",
    "factor_scores",
    "quality_score",
    "recency_score",
    "relationship_score",
    "relevance_score",
    "score_post",
]
