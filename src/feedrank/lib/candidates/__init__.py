"""Candidate generation for the feed.

Each generator turns a store query into a bounded, store-ordered pool of
posts.  The personalized feed scores the ``network`` pool; the trending and
discovery feeds return their pools as-is.
"""

from .base import (
    Candidate,
    CandidateGenerator,
    CandidateResult,
    candidates_from_hits,
    post_from_hit,
)
from .discovery import DiscoveryCandidateGenerator
from .network import NetworkCandidateGenerator
from .trending import TrendingCandidateGenerator

__all__ = [
    "Candidate",
    "CandidateGenerator",
    "CandidateResult",
    "candidates_from_hits",
    "post_from_hit",
    "DiscoveryCandidateGenerator",
    "NetworkCandidateGenerator",
    "TrendingCandidateGenerator",
]
