"""The five score factors.

Each factor is a pure function of a post and an optional viewer and returns a
value in ``[0, 1]``.  None of them raise for missing optional fields: every
branch that depends on optional data has an explicit fallback.
"""

import math
from datetime import datetime, timezone

from ...config import DEFAULT_RANKING_CONFIG, RankingConfig
from ...models import Post, Viewer

# Baseline for anonymous viewers, posts without author data and posts with no
# quality signals.
BASELINE_SCORE = 0.1

FOLLOW_BONUS = 0.6
MUTUAL_FOLLOW_BONUS = 0.2

MEDIA_BONUS = 0.3
MULTI_MEDIA_BONUS = 0.1
# (minimum word count exclusive, bonus), highest tier first.
WORD_COUNT_TIERS = ((100, 0.3), (50, 0.2), (20, 0.1))
TAG_BONUS_PER_TAG = 0.05
TAG_BONUS_CAP = 0.2
LOCATION_BONUS = 0.1
LINK_PREVIEW_BONUS = 0.15
POLL_BONUS = 0.2
CONTENT_WARNING_BONUS = 0.1
VERIFIED_AUTHOR_BONUS = 0.15


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def age_hours(post: Post, now: datetime | None = None) -> float:
    """Hours since the post was created; never negative."""
    now = now or datetime.now(timezone.utc)
    return max(0.0, (now - post.created_at).total_seconds() / 3600.0)


def recency_score(
    post: Post,
    now: datetime | None = None,
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> float:
    """Exponential decay: 1.0 for a brand-new post, ~0.61 after one half-life."""
    half_lives = age_hours(post, now) / config.half_life_hours
    return math.exp(-half_lives * config.time_decay_factor)


def engagement_score(post: Post) -> float:
    """Log-normalised interactions, averaged with the view rate when known."""
    base = post.like_count * 1 + post.comment_count * 2
    normalized = math.log10(base + 1) / 5

    if post.view_count > 0:
        rate = base / post.view_count
        return _clamp01((normalized + rate) / 2)

    return _clamp01(normalized)


def relationship_score(post: Post, viewer: Viewer | None) -> float:
    if viewer is None:
        return BASELINE_SCORE

    if post.author_id == viewer.id:
        return 1.0

    author = post.author
    if author is None:
        return BASELINE_SCORE

    score = BASELINE_SCORE
    factors = 0

    if post.author_id in set(viewer.following_ids):
        score += FOLLOW_BONUS
        factors += 1

        if viewer.id in set(author.follower_ids):
            score += MUTUAL_FOLLOW_BONUS
            factors += 1

    if author.rank is not None:
        score += author.rank.bonus
        factors += 1

    return _clamp01(score / factors if factors > 0 else score)


def _word_count(content: str | None) -> int:
    return len(content.split()) if content else 0


def quality_score(post: Post) -> float:
    """Average of the content signals that are present; 0.1 if none are."""
    score = 0.0
    factors = 0

    if post.media:
        score += MEDIA_BONUS
        factors += 1

        if len(post.media) > 1:
            score += MULTI_MEDIA_BONUS
            factors += 1

    words = _word_count(post.content)
    for min_words, bonus in WORD_COUNT_TIERS:
        if words > min_words:
            score += bonus
            factors += 1
            break

    if post.tags:
        score += min(len(post.tags) * TAG_BONUS_PER_TAG, TAG_BONUS_CAP)
        factors += 1

    if post.location is not None and post.location.name:
        score += LOCATION_BONUS
        factors += 1

    if post.link_preview is not None and post.link_preview.url:
        score += LINK_PREVIEW_BONUS
        factors += 1

    if post.poll is not None and post.poll.question:
        score += POLL_BONUS
        factors += 1

    if post.has_content_warning:
        score += CONTENT_WARNING_BONUS
        factors += 1

    if post.author is not None and post.author.is_verified:
        score += VERIFIED_AUTHOR_BONUS
        factors += 1

    return _clamp01(score / factors) if factors > 0 else BASELINE_SCORE


def relevance_score(post: Post, viewer: Viewer | None) -> float:
    # Placeholder for topic affinity; intentionally constant.
    return BASELINE_SCORE
