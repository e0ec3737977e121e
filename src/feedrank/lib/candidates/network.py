"""Network candidate generator.

Builds the candidate pool for the personalized feed from two populations:

* posts by authors the viewer follows, visible to ``public`` or
  ``followers``;
* ``public`` posts by everyone else.

Hidden posts and explicitly excluded ids are filtered out.  Elasticsearch
assigns each hit a coarse **priority tier** through a ``function_score``
query with ``score_mode: first``:

====  ==========================================
tier  condition (first match wins)
====  ==========================================
3     author is followed by the viewer
2     ``engagement_score`` above 50
1     ``like_count`` above 100
0     anything else
====  ==========================================

The tier orders and truncates the pool only.  It rides along on the
``Candidate`` wrapper and is never seen by the scorer.
"""

import logging

from ...models import Viewer, Visibility
from ..elasticsearch import POSTS_INDEX, search_hits
from .base import CandidateGenerator, CandidateResult, candidates_from_hits

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Tunables
# ---------------------------------------------------------------------------

FOLLOWED_TIER = 3
HIGH_ENGAGEMENT_TIER = 2
HIGH_ENGAGEMENT_THRESHOLD = 50
WELL_LIKED_TIER = 1
WELL_LIKED_THRESHOLD = 100

# function_score with boost_mode "replace" yields 1 when nothing matches, so
# every tier is shifted up by one and a catch-all function supplies tier 0.
_TIER_OFFSET = 1


# ---------------------------------------------------------------------------
# Query helpers
# ---------------------------------------------------------------------------

def build_network_query(following_ids: list[str], exclude_ids: list[str] | None = None) -> dict:
    """Return the ``function_score`` query selecting and tiering candidates."""
    followed = {"terms": {"author_id": following_ids}}

    must_not = [{"term": {"is_hidden": True}}]
    if exclude_ids:
        must_not.append({"terms": {"id": exclude_ids}})

    return {
        "function_score": {
            "query": {
                "bool": {
                    "must_not": must_not,
                    "should": [
                        {
                            "bool": {
                                "filter": [
                                    followed,
                                    {"terms": {"visibility": [
                                        Visibility.PUBLIC.value,
                                        Visibility.FOLLOWERS.value,
                                    ]}},
                                ],
                            }
                        },
                        {
                            "bool": {
                                "filter": [{"term": {"visibility": Visibility.PUBLIC.value}}],
                                "must_not": [followed],
                            }
                        },
                    ],
                    "minimum_should_match": 1,
                }
            },
            "functions": [
                {"filter": followed, "weight": FOLLOWED_TIER + _TIER_OFFSET},
                {
                    "filter": {"range": {"engagement_score": {"gt": HIGH_ENGAGEMENT_THRESHOLD}}},
                    "weight": HIGH_ENGAGEMENT_TIER + _TIER_OFFSET,
                },
                {
                    "filter": {"range": {"like_count": {"gt": WELL_LIKED_THRESHOLD}}},
                    "weight": WELL_LIKED_TIER + _TIER_OFFSET,
                },
                {"weight": _TIER_OFFSET},
            ],
            "score_mode": "first",
            "boost_mode": "replace",
        }
    }


NETWORK_SORT = [
    {"_score": "desc"},
    {"engagement_score": "desc"},
    {"created_at": "desc"},
]


def priority_from_hit(hit: dict) -> int:
    """Recover the priority tier from a hit's ``_score``."""
    score = hit.get("_score")
    if score is None:
        return 0
    return max(0, int(round(score)) - _TIER_OFFSET)


async def network_search(
    es,
    following_ids: list[str],
    num_candidates: int,
    exclude_ids: list[str] | None = None,
):
    hits = await search_hits(
        es,
        index=POSTS_INDEX,
        query=build_network_query(following_ids, exclude_ids),
        sort=NETWORK_SORT,
        size=num_candidates,
        track_scores=True,
    )
    return candidates_from_hits(hits, priority_of=priority_from_hit)


# ---------------------------------------------------------------------------
# Generator class
# ---------------------------------------------------------------------------

class NetworkCandidateGenerator(CandidateGenerator):
    """Followed-author and public posts, ordered by priority tier."""

    @property
    def name(self) -> str:
        return "network"

    async def generate(
        self,
        es,
        viewer: Viewer | None,
        num_candidates: int = 60,
        exclude_ids: list[str] | None = None,
    ) -> CandidateResult:
        following = list(viewer.following_ids) if viewer is not None else []
        candidates = await network_search(es, following, num_candidates, exclude_ids)
        logger.info(
            "Network pool: %d candidates (%d followed authors)",
            len(candidates),
            len(following),
        )
        return CandidateResult(generator_name=self.name, candidates=candidates)
