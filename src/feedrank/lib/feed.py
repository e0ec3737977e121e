"""Feed orchestration.

``FeedEngine.generate_feed`` runs the full pipeline for one viewer:

    viewer lookup -> network candidates -> author join -> score
    -> min-score filter -> sort -> diversity sampling -> page slice

The trending and discovery variants reuse candidate retrieval with their own
filters and sort keys and return store order without scoring.

An engine holds only a store client and an immutable ``RankingConfig``, so a
single instance can serve any number of concurrent requests.
"""

import logging
from datetime import datetime, timezone

from ..config import DEFAULT_RANKING_CONFIG, RankingConfig
from ..models import FeedContext, FeedPage, Pagination, Post, ScoredCandidate, Viewer
from .candidates import (
    DiscoveryCandidateGenerator,
    NetworkCandidateGenerator,
    TrendingCandidateGenerator,
)
from .ranking import apply_diversity_sampling, score_post
from .users import fetch_viewer, resolve_authors

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 20


def rank_candidates(
    posts: list[Post],
    viewer: Viewer | None,
    context: FeedContext,
    now: datetime | None = None,
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> list[ScoredCandidate]:
    """Score, threshold and sort posts by descending final score.

    Posts listed in ``context.exclude_ids`` are dropped.  The sort is stable,
    so equal scores keep store order.
    """
    now = now or datetime.now(timezone.utc)
    excluded = set(context.exclude_ids)

    scored = [
        ScoredCandidate(post=post, score=score_post(post, viewer, context, now, config))
        for post in posts
        if post.id not in excluded
    ]
    kept = [item for item in scored if item.score >= config.min_score]
    kept.sort(key=lambda item: item.score, reverse=True)
    return kept


def paginate(
    ranked: list[ScoredCandidate],
    sampled: list[ScoredCandidate],
    page: int,
    limit: int,
) -> FeedPage:
    """Slice one page out of the diversity-sampled pool.

    ``total`` counts ranked candidates before sampling.  A page beyond the
    sampled pool is empty with ``has_more`` false.
    """
    start = (page - 1) * limit
    end = start + limit
    window = sampled[start:end]
    has_more = bool(window) and end < len(ranked)

    return FeedPage(
        posts=[item.post for item in window],
        scores=[item.score for item in window],
        pagination=Pagination(page=page, limit=limit, total=len(ranked), has_more=has_more),
    )


class FeedEngine:
    """Personalized, trending and discovery feeds over an Elasticsearch store."""

    def __init__(self, es, config: RankingConfig = DEFAULT_RANKING_CONFIG):
        self.es = es
        self.config = config
        self.network = NetworkCandidateGenerator()
        self.trending = TrendingCandidateGenerator(window_hours=config.trending_window_hours)
        self.discovery = DiscoveryCandidateGenerator()

    async def generate_feed(
        self,
        viewer_id: str,
        page: int = 1,
        limit: int = DEFAULT_LIMIT,
        exclude_ids: list[str] | None = None,
        seen_authors: list[str] | None = None,
        seen_tags: list[str] | None = None,
        now: datetime | None = None,
    ) -> FeedPage:
        """Return one ranked, diversity-sampled page of the viewer's feed.

        Raises ``ViewerNotFound`` for an unknown viewer and
        ``StoreUnavailable`` if any store call fails.
        """
        context = FeedContext(
            page=page,
            limit=limit,
            exclude_ids=list(exclude_ids or []),
            seen_authors=list(seen_authors or []),
            seen_tags=list(seen_tags or []),
        )
        viewer = await fetch_viewer(self.es, viewer_id)

        result = await self.network.generate(
            self.es,
            viewer,
            num_candidates=context.limit * self.config.candidate_pool_multiplier,
            exclude_ids=context.exclude_ids,
        )
        posts = await resolve_authors(self.es, result.posts)

        ranked = rank_candidates(posts, viewer, context, now, self.config)
        sampled = apply_diversity_sampling(ranked, context.limit, self.config)
        feed_page = paginate(ranked, sampled, context.page, context.limit)

        logger.info(
            "Feed for %s page %d: %d candidates, %d ranked, %d sampled, %d returned",
            viewer_id,
            context.page,
            len(posts),
            len(ranked),
            len(sampled),
            len(feed_page.posts),
        )
        return feed_page

    async def get_trending_posts(
        self,
        limit: int = DEFAULT_LIMIT,
        now: datetime | None = None,
    ) -> list[Post]:
        """Public posts from the trailing window in engagement order.

        ``now`` anchors the window and defaults to the current UTC time.
        """
        if limit <= 0:
            raise ValueError("limit must be positive")
        result = await self.trending.generate(self.es, None, num_candidates=limit, now=now)
        return await resolve_authors(self.es, result.posts)

    async def get_discovery_feed(self, viewer_id: str, limit: int = DEFAULT_LIMIT) -> list[Post]:
        """Public posts from authors outside the viewer's network."""
        if limit <= 0:
            raise ValueError("limit must be positive")
        viewer = await fetch_viewer(self.es, viewer_id)
        result = await self.discovery.generate(self.es, viewer, num_candidates=limit)
        return await resolve_authors(self.es, result.posts)
