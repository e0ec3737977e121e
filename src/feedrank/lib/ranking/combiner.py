"""Weighted combination of the score factors plus post-hoc boosts."""

from datetime import datetime, timezone

from ...config import DEFAULT_RANKING_CONFIG, RankingConfig
from ...models import FeedContext, Post, Viewer
from .factors import (
    age_hours,
    engagement_score,
    quality_score,
    recency_score,
    relationship_score,
    relevance_score,
)

MAX_SCORE = 100.0


def factor_scores(
    post: Post,
    viewer: Viewer | None,
    now: datetime | None = None,
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> dict[str, float]:
    """Return every factor keyed by the name of its weight."""
    return {
        "recency": recency_score(post, now, config),
        "engagement": engagement_score(post),
        "relationship": relationship_score(post, viewer),
        "quality": quality_score(post),
        "relevance": relevance_score(post, viewer),
    }


def combine(scores: dict[str, float], config: RankingConfig = DEFAULT_RANKING_CONFIG) -> float:
    weights = config.weights
    return (
        scores["recency"] * weights.recency
        + scores["engagement"] * weights.engagement
        + scores["relationship"] * weights.relationship
        + scores["quality"] * weights.quality
        + scores["relevance"] * weights.relevance
    )


def apply_boosts(
    score: float,
    post: Post,
    context: FeedContext | None = None,
    now: datetime | None = None,
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> float:
    """Apply freshness, popularity and novelty boosts, in that order."""
    boosted = score

    age = age_hours(post, now)
    if age < config.very_fresh_hours:
        boosted *= config.very_fresh_boost
    elif age < config.fresh_hours:
        boosted *= config.fresh_boost

    if post.popularity_score > config.popularity_threshold:
        boosted *= config.popularity_boost

    if context is not None and post.author_id not in set(context.seen_authors):
        boosted *= config.novelty_boost

    return boosted


def score_post(
    post: Post,
    viewer: Viewer | None,
    context: FeedContext | None = None,
    now: datetime | None = None,
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> float:
    """Final score of a post for a viewer on a 0-100 scale."""
    now = now or datetime.now(timezone.utc)
    total = combine(factor_scores(post, viewer, now, config), config)
    total = apply_boosts(total, post, context, now, config)
    return min(MAX_SCORE, max(0.0, total * MAX_SCORE))
