"""Tests for the network candidate generator."""

import pytest

from ...errors import StoreUnavailable
from ...models import Viewer
from ..candidates.network import (
    NetworkCandidateGenerator,
    build_network_query,
    network_search,
    priority_from_hit,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def generator():
    return NetworkCandidateGenerator()


class FakeEs:
    """Configurable fake Elasticsearch client for unit tests."""

    def __init__(self, responses: dict | None = None, error: Exception | None = None):
        self._responses = responses or {}
        self._default = {"hits": {"hits": []}}
        self._error = error
        self.calls: list[dict] = []

    async def search(self, *, index=None, query=None, size=None, sort=None, **kwargs):
        self.calls.append({"index": index, "query": query, "size": size, "sort": sort, **kwargs})
        if self._error is not None:
            raise self._error
        return self._responses.get(index, self._default)


def hit(post_id: str, author: str, score: float, **source) -> dict:
    return {
        "_id": post_id,
        "_score": score,
        "_source": {
            "id": post_id,
            "author_id": author,
            "created_at": "2024-06-01T10:00:00Z",
            **source,
        },
    }


# ---------------------------------------------------------------------------
# Unit tests – query helpers
# ---------------------------------------------------------------------------

class TestBuildNetworkQuery:
    def test_tier_functions_in_priority_order(self):
        query = build_network_query(["a1", "a2"])
        functions = query["function_score"]["functions"]
        assert query["function_score"]["score_mode"] == "first"
        assert query["function_score"]["boost_mode"] == "replace"
        assert [f["weight"] for f in functions] == [4, 3, 2, 1]
        assert functions[0]["filter"] == {"terms": {"author_id": ["a1", "a2"]}}
        assert functions[1]["filter"] == {"range": {"engagement_score": {"gt": 50}}}
        assert functions[2]["filter"] == {"range": {"like_count": {"gt": 100}}}
        assert "filter" not in functions[3]

    def test_visibility_branches(self):
        bool_q = build_network_query(["a1"])["function_score"]["query"]["bool"]
        followed, others = bool_q["should"]
        assert {"terms": {"visibility": ["public", "followers"]}} in followed["bool"]["filter"]
        assert others["bool"]["filter"] == [{"term": {"visibility": "public"}}]
        assert others["bool"]["must_not"] == [{"terms": {"author_id": ["a1"]}}]
        assert bool_q["minimum_should_match"] == 1

    def test_hidden_and_excluded_posts_filtered(self):
        must_not = build_network_query([], ["p9"])["function_score"]["query"]["bool"]["must_not"]
        assert {"term": {"is_hidden": True}} in must_not
        assert {"terms": {"id": ["p9"]}} in must_not

    def test_no_exclusion_clause_without_ids(self):
        must_not = build_network_query([])["function_score"]["query"]["bool"]["must_not"]
        assert must_not == [{"term": {"is_hidden": True}}]


class TestPriorityFromHit:
    @pytest.mark.parametrize("score,tier", [(4.0, 3), (3.0, 2), (2.0, 1), (1.0, 0)])
    def test_tiers(self, score, tier):
        assert priority_from_hit({"_score": score}) == tier

    def test_missing_score(self):
        assert priority_from_hit({}) == 0


class TestNetworkSearch:
    @pytest.mark.asyncio
    async def test_returns_candidates_in_store_order(self):
        es = FakeEs(responses={
            "posts": {"hits": {"hits": [
                hit("p1", "followed", 4.0),
                hit("p2", "stranger", 3.0, engagement_score=80),
                hit("p3", "stranger", 1.0),
            ]}}
        })
        candidates = await network_search(es, ["followed"], num_candidates=9)

        assert [c.post.id for c in candidates] == ["p1", "p2", "p3"]
        assert [c.priority for c in candidates] == [3, 2, 0]

        call = es.calls[0]
        assert call["index"] == "posts"
        assert call["size"] == 9
        assert call["sort"][0] == {"_score": "desc"}
        assert call["sort"][1:] == [{"engagement_score": "desc"}, {"created_at": "desc"}]

    @pytest.mark.asyncio
    async def test_skips_malformed_hits(self):
        es = FakeEs(responses={
            "posts": {"hits": {"hits": [
                hit("p1", "a", 1.0),
                {"_id": "broken", "_score": 1.0, "_source": {"author_id": "a"}},
                hit("p3", "b", 1.0, like_count=-5),
            ]}}
        })
        candidates = await network_search(es, [], num_candidates=3)
        assert [c.post.id for c in candidates] == ["p1"]

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self):
        es = FakeEs(error=ConnectionError("boom"))
        with pytest.raises(StoreUnavailable):
            await network_search(es, [], num_candidates=3)


# ---------------------------------------------------------------------------
# Integration-style tests – full generator
# ---------------------------------------------------------------------------

class TestNetworkCandidateGenerator:
    @pytest.mark.asyncio
    async def test_name(self, generator):
        assert generator.name == "network"

    @pytest.mark.asyncio
    async def test_generate_uses_viewer_following(self, generator):
        es = FakeEs(responses={"posts": {"hits": {"hits": [hit("p1", "a1", 4.0)]}}})
        viewer = Viewer(id="v1", following_ids=["a1"])

        result = await generator.generate(es, viewer, num_candidates=6, exclude_ids=["old"])

        assert result.generator_name == "network"
        assert [p.id for p in result.posts] == ["p1"]
        query = es.calls[0]["query"]
        assert query["function_score"]["functions"][0]["filter"] == {"terms": {"author_id": ["a1"]}}
        assert {"terms": {"id": ["old"]}} in query["function_score"]["query"]["bool"]["must_not"]

    @pytest.mark.asyncio
    async def test_posts_carry_no_priority(self, generator):
        es = FakeEs(responses={"posts": {"hits": {"hits": [hit("p1", "a1", 4.0)]}}})
        result = await generator.generate(es, Viewer(id="v1"), num_candidates=3)
        assert not hasattr(result.posts[0], "priority")

    @pytest.mark.asyncio
    async def test_generate_empty(self, generator):
        result = await generator.generate(FakeEs(), None, num_candidates=3)
        assert result.candidates == []
