"""Trending candidate generator.

Public, non-hidden posts from the trailing window (24h by default), ordered
by ``like_count + 3 * comment_count``.  The same for every viewer.
"""

import logging
from datetime import datetime, timedelta, timezone

from ...models import Post, Viewer, Visibility
from ..elasticsearch import POSTS_INDEX, search_hits
from .base import (
    Candidate,
    CandidateGenerator,
    CandidateResult,
    candidates_from_hits,
    weighted_field_sort,
)

logger = logging.getLogger(__name__)

TRENDING_WEIGHTS = {"like_count": 1.0, "comment_count": 3.0}
DEFAULT_WINDOW_HOURS = 24.0


def is_trending_eligible(post: Post, cutoff: datetime) -> bool:
    return (
        post.visibility == Visibility.PUBLIC
        and not post.is_hidden
        and post.created_at >= cutoff
    )


async def trending_search(
    es,
    num_candidates: int,
    window_hours: float = DEFAULT_WINDOW_HOURS,
    now: datetime | None = None,
) -> list[Candidate]:
    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(hours=window_hours)

    query = {
        "bool": {
            "filter": [
                {"term": {"visibility": Visibility.PUBLIC.value}},
                {"range": {"created_at": {"gte": cutoff.isoformat()}}},
            ],
            "must_not": [{"term": {"is_hidden": True}}],
        }
    }

    hits = await search_hits(
        es,
        index=POSTS_INDEX,
        query=query,
        sort=[weighted_field_sort(TRENDING_WEIGHTS)],
        size=num_candidates,
    )

    candidates = candidates_from_hits(hits)
    eligible = [c for c in candidates if is_trending_eligible(c.post, cutoff)]
    if len(eligible) != len(candidates):
        logger.warning(
            "Dropped %d trending hits outside the %sh public window",
            len(candidates) - len(eligible),
            window_hours,
        )
    return eligible


class TrendingCandidateGenerator(CandidateGenerator):
    """Recent engagement-weighted public posts.

    ``viewer`` is accepted for interface consistency but is not used.
    """

    def __init__(self, window_hours: float = DEFAULT_WINDOW_HOURS):
        self.window_hours = window_hours

    @property
    def name(self) -> str:
        return "trending"

    async def generate(
        self,
        es,
        viewer: Viewer | None = None,
        num_candidates: int = 20,
        now: datetime | None = None,
    ) -> CandidateResult:
        candidates = await trending_search(es, num_candidates, self.window_hours, now)
        return CandidateResult(generator_name=self.name, candidates=candidates)
