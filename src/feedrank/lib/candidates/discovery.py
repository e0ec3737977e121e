"""Discovery candidate generator.

Public, non-hidden posts from authors the viewer does not follow (and not
the viewer's own), ordered by
``0.5 * like_count + comment_count + engagement_score`` then newest first.
"""

import logging

from ...models import Viewer, Visibility
from ..elasticsearch import POSTS_INDEX, search_hits
from .base import CandidateGenerator, CandidateResult, candidates_from_hits, weighted_field_sort

logger = logging.getLogger(__name__)

DISCOVERY_WEIGHTS = {"like_count": 0.5, "comment_count": 1.0, "engagement_score": 1.0}


def build_discovery_query(viewer: Viewer) -> dict:
    excluded_authors = list(viewer.following_ids) + [viewer.id]
    return {
        "bool": {
            "filter": [{"term": {"visibility": Visibility.PUBLIC.value}}],
            "must_not": [
                {"term": {"is_hidden": True}},
                {"terms": {"author_id": excluded_authors}},
            ],
        }
    }


class DiscoveryCandidateGenerator(CandidateGenerator):
    """Out-of-network posts for a viewer."""

    @property
    def name(self) -> str:
        return "discovery"

    async def generate(
        self,
        es,
        viewer: Viewer | None,
        num_candidates: int = 20,
    ) -> CandidateResult:
        if viewer is None:
            raise ValueError("discovery candidates require a viewer")

        hits = await search_hits(
            es,
            index=POSTS_INDEX,
            query=build_discovery_query(viewer),
            sort=[weighted_field_sort(DISCOVERY_WEIGHTS), {"created_at": "desc"}],
            size=num_candidates,
        )
        excluded = set(viewer.following_ids) | {viewer.id}
        candidates = [
            c for c in candidates_from_hits(hits)
            if c.post.author_id not in excluded
        ]
        logger.info("Discovery pool for %s: %d candidates", viewer.id, len(candidates))
        return CandidateResult(generator_name=self.name, candidates=candidates)
