"""Viewer and author lookups against the ``users`` index."""

import logging

from pydantic import ValidationError

from ..errors import StoreUnavailable, ViewerNotFound
from ..models import AuthorSummary, Post, Viewer
from .elasticsearch import USERS_INDEX, search_hits

logger = logging.getLogger(__name__)

VIEWER_FIELDS = ["id", "following", "followers", "rank", "score"]
AUTHOR_FIELDS = ["id", "username", "profile_picture", "is_verified", "rank", "followers"]


def _source_with_id(hit: dict) -> dict:
    src = dict(hit.get("_source") or {})
    src.setdefault("id", hit.get("_id"))
    return src


async def fetch_viewer(es, viewer_id: str) -> Viewer:
    """Load the viewer's follow graph, rank and score.

    Raises ``ViewerNotFound`` if no user document matches.
    """
    hits = await search_hits(
        es,
        index=USERS_INDEX,
        query={"term": {"id": viewer_id}},
        size=1,
        _source=VIEWER_FIELDS,
    )
    if not hits:
        raise ViewerNotFound(viewer_id)

    try:
        return Viewer.model_validate(_source_with_id(hits[0]))
    except ValidationError as exc:
        logger.error("Viewer document %s failed validation: %s", viewer_id, exc)
        raise StoreUnavailable(f"Malformed viewer document for {viewer_id}") from exc


async def fetch_author_summaries(es, author_ids: list[str]) -> dict[str, AuthorSummary]:
    """Return author summaries keyed by id.

    Authors that are missing or fail validation are left out of the mapping.
    """
    unique_ids = list(dict.fromkeys(author_ids))
    if not unique_ids:
        return {}

    hits = await search_hits(
        es,
        index=USERS_INDEX,
        query={"terms": {"id": unique_ids}},
        size=len(unique_ids),
        _source=AUTHOR_FIELDS,
    )

    authors: dict[str, AuthorSummary] = {}
    for hit in hits:
        src = _source_with_id(hit)
        try:
            author = AuthorSummary.model_validate(src)
        except ValidationError:
            logger.warning("Skipping malformed author document %s", src.get("id"))
            continue
        authors[author.id] = author
    return authors


async def resolve_authors(es, posts: list[Post]) -> list[Post]:
    """Join an ``AuthorSummary`` onto every post that lacks one.

    Posts whose author cannot be found are returned unchanged; scoring falls
    back to its no-author branches for them.
    """
    missing = [p.author_id for p in posts if p.author is None]
    if not missing:
        return posts

    authors = await fetch_author_summaries(es, missing)
    unresolved = {a for a in missing if a not in authors}
    if unresolved:
        logger.warning("Could not resolve %d authors: %s", len(unresolved), sorted(unresolved))

    return [
        p.model_copy(update={"author": authors[p.author_id]})
        if p.author is None and p.author_id in authors
        else p
        for p in posts
    ]
