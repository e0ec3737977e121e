"""Errors raised by the ranking core.

The lib layer raises these; routers translate them to HTTP responses.
"""


class FeedError(Exception):
    """Base class for feed ranking errors."""


class ViewerNotFound(FeedError):
    """The requesting viewer id does not resolve to a user document."""

    def __init__(self, viewer_id: str):
        super().__init__(f"Viewer not found: {viewer_id}")
        self.viewer_id = viewer_id


class StoreUnavailable(FeedError):
    """The post/user store failed or returned something unusable."""


class MalformedCandidate(FeedError):
    """A store hit could not be turned into a ``Post``.

    Only ever raised for a single record; callers skip the record and carry on.
    """

    def __init__(self, post_id: str | None, reason: str):
        super().__init__(f"Malformed candidate {post_id!r}: {reason}")
        self.post_id = post_id
        self.reason = reason
