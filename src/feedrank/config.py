"""Ranking tunables.

All weights, decay parameters, boosts and diversity caps live in a single
immutable ``RankingConfig`` that is handed to ``FeedEngine`` at construction.
Use ``DEFAULT_RANKING_CONFIG.model_copy(update=...)`` for alternate tunings.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ScoreWeights(BaseModel):
    """Linear weights for the five score factors. Must sum to 1.0."""

    model_config = ConfigDict(frozen=True)

    recency: float = Field(0.20, ge=0, le=1)
    engagement: float = Field(0.25, ge=0, le=1)
    relationship: float = Field(0.25, ge=0, le=1)
    quality: float = Field(0.15, ge=0, le=1)
    relevance: float = Field(0.15, ge=0, le=1)

    @model_validator(mode="after")
    def _check_sum(self) -> "ScoreWeights":
        total = (
            self.recency + self.engagement + self.relationship
            + self.quality + self.relevance
        )
        if abs(total - 1.0) > 1e-9:
            raise ValueError(f"score weights must sum to 1.0, got {total}")
        return self


class RankingConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    weights: ScoreWeights = Field(default_factory=ScoreWeights)

    # Recency: exp(-(age / half_life) * decay_factor)
    half_life_hours: float = Field(24.0, gt=0)
    time_decay_factor: float = Field(0.5, gt=0)

    # Age boosts, first match wins.
    very_fresh_hours: float = 1.0
    very_fresh_boost: float = 1.5
    fresh_hours: float = 6.0
    fresh_boost: float = 1.2

    popularity_threshold: float = 100.0
    popularity_boost: float = 1.3
    novelty_boost: float = 1.1

    # Compared against the 0-100 final score.
    min_score: float = 0.1

    max_posts_per_author: int = Field(2, ge=1)
    max_posts_per_tag: int = Field(3, ge=1)

    # Pool sizes as multiples of the page limit.
    candidate_pool_multiplier: int = Field(3, ge=1)
    diversity_pool_multiplier: int = Field(2, ge=1)

    trending_window_hours: float = Field(24.0, gt=0)


DEFAULT_RANKING_CONFIG = RankingConfig()
