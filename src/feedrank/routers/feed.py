"""Feed router – thin HTTP adapter over ``FeedEngine``.

GET /feed/{viewer_id}
    A ranked, diversity-sampled page of the viewer's feed.

GET /feed/{viewer_id}/discovery
    Popular posts from outside the viewer's network.

GET /trending
    Trending public posts from the last 24 hours.  Lives outside ``/feed`` so
    every string stays usable as a viewer id.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel

from ..errors import StoreUnavailable, ViewerNotFound
from ..lib.feed import FeedEngine
from ..models import FeedPage, Post
from ..security import verify_api_key

router = APIRouter(tags=["feed"], dependencies=[Depends(verify_api_key)])

logger = logging.getLogger(__name__)

MAX_LIMIT = 50


class PostListResponse(BaseModel):
    posts: list[Post]


def get_feed_engine(request: Request) -> FeedEngine:
    return FeedEngine(request.app.state.es, request.app.state.ranking_config)


Engine = Annotated[FeedEngine, Depends(get_feed_engine)]


def _store_error(exc: StoreUnavailable) -> HTTPException:
    logger.error("Feed store unavailable: %s", exc)
    return HTTPException(status_code=502, detail="Post store request failed")


@router.get("/trending", response_model=PostListResponse)
async def feed_trending(
    engine: Engine,
    limit: int = Query(20, ge=1, le=MAX_LIMIT),
) -> PostListResponse:
    try:
        posts = await engine.get_trending_posts(limit)
    except StoreUnavailable as exc:
        raise _store_error(exc) from exc
    return PostListResponse(posts=posts)


@router.get("/feed/{viewer_id}", response_model=FeedPage)
async def feed_generate(
    viewer_id: str,
    engine: Engine,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=MAX_LIMIT),
    exclude_ids: Annotated[list[str] | None, Query()] = None,
    seen_authors: Annotated[list[str] | None, Query()] = None,
    seen_tags: Annotated[list[str] | None, Query()] = None,
) -> FeedPage:
    """Return one page of the viewer's ranked feed with per-post scores."""
    try:
        return await engine.generate_feed(
            viewer_id,
            page=page,
            limit=limit,
            exclude_ids=exclude_ids,
            seen_authors=seen_authors,
            seen_tags=seen_tags,
        )
    except ViewerNotFound as exc:
        raise HTTPException(status_code=404, detail="Viewer not found") from exc
    except StoreUnavailable as exc:
        raise _store_error(exc) from exc


@router.get("/feed/{viewer_id}/discovery", response_model=PostListResponse)
async def feed_discovery(
    viewer_id: str,
    engine: Engine,
    limit: int = Query(20, ge=1, le=MAX_LIMIT),
) -> PostListResponse:
    try:
        posts = await engine.get_discovery_feed(viewer_id, limit)
    except ViewerNotFound as exc:
        raise HTTPException(status_code=404, detail="Viewer not found") from exc
    except StoreUnavailable as exc:
        raise _store_error(exc) from exc
    return PostListResponse(posts=posts)
