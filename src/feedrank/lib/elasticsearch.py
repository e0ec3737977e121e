"""Shared Elasticsearch utilities.

Helpers for talking to the post/user store that are used by candidate
generators, user lookups and the app lifespan.  Every failure surfaces as
``StoreUnavailable`` so a request either gets a full ranking or an error.
"""

import logging
import os

from elastic_transport import ObjectApiResponse
from elasticsearch import AsyncElasticsearch

from ..errors import StoreUnavailable

logger = logging.getLogger(__name__)

POSTS_INDEX = "posts"
USERS_INDEX = "users"


def create_es_client() -> AsyncElasticsearch | None:
    """Build a client from ``ELASTICSEARCH_URL`` / ``ELASTICSEARCH_API_KEY``.

    Returns ``None`` when no URL is configured.
    """
    url = os.environ.get("ELASTICSEARCH_URL")
    if not url:
        return None
    api_key = os.environ.get("ELASTICSEARCH_API_KEY") or None
    return AsyncElasticsearch(url, api_key=api_key)


def unwrap_es_response(resp) -> dict:
    """Unwrap an Elasticsearch response, handling both ObjectApiResponse and dict.

    Raises ``StoreUnavailable`` if the response type is unexpected.
    """
    if isinstance(resp, ObjectApiResponse):
        return resp.body
    elif isinstance(resp, dict):
        return resp
    else:
        logger.error("Unexpected Elasticsearch response type: %s", type(resp))
        raise StoreUnavailable("Invalid Elasticsearch response")


async def search_hits(es, *, index: str, **kwargs) -> list[dict]:
    """Run ``es.search`` and return the raw hit list.

    Client errors are logged and re-raised as ``StoreUnavailable``; no retry
    happens here.
    """
    if es is None:
        raise StoreUnavailable("Elasticsearch client is not configured")

    try:
        resp = await es.search(index=index, **kwargs)
    except Exception as exc:
        logger.exception("Elasticsearch search on '%s' failed", index)
        raise StoreUnavailable(f"Search on '{index}' failed") from exc

    data = unwrap_es_response(resp)
    return data.get("hits", {}).get("hits", [])
