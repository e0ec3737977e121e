import os
from unittest.mock import patch

import pytest

from ..errors import StoreUnavailable
from .elasticsearch import create_es_client, search_hits, unwrap_es_response


class FakeEs:
    def __init__(self, response=None, error: Exception | None = None):
        self.response = response
        self.error = error

    async def search(self, **kwargs):
        if self.error is not None:
            raise self.error
        return self.response


def test_unwrap_dict():
    assert unwrap_es_response({"hits": {}}) == {"hits": {}}


def test_unwrap_unexpected_type():
    with pytest.raises(StoreUnavailable):
        unwrap_es_response(["not", "a", "response"])


@pytest.mark.asyncio
async def test_search_hits_returns_hit_list():
    es = FakeEs({"hits": {"hits": [{"_id": "1"}]}})
    assert await search_hits(es, index="posts", query={}) == [{"_id": "1"}]


@pytest.mark.asyncio
async def test_search_hits_tolerates_missing_hits():
    assert await search_hits(FakeEs({}), index="posts") == []


@pytest.mark.asyncio
async def test_search_hits_wraps_client_errors():
    es = FakeEs(error=TimeoutError("slow"))
    with pytest.raises(StoreUnavailable) as excinfo:
        await search_hits(es, index="posts")
    assert isinstance(excinfo.value.__cause__, TimeoutError)


@pytest.mark.asyncio
async def test_search_hits_without_client():
    with pytest.raises(StoreUnavailable, match="not configured"):
        await search_hits(None, index="posts")


def test_create_es_client_unconfigured():
    with patch.dict(os.environ, {"ELASTICSEARCH_URL": ""}):
        assert create_es_client() is None
