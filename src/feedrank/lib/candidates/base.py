"""Base abstraction for candidate generators.

Each generator has a unique name and an async `generate` method that returns
a `CandidateResult` holding a bounded pool of posts in store order.  Any
store-side ordering key (e.g. the network priority tier) stays on the
`Candidate` wrapper and is dropped before scoring.
"""

import logging
from abc import ABC, abstractmethod

from pydantic import BaseModel, Field, ValidationError

from ...errors import MalformedCandidate
from ...models import Post, Viewer

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class Candidate(BaseModel):
    """A single candidate post returned by a generator."""

    post: Post
    priority: int = Field(
        0, description="Store-side pool ordering tier; never used for ranking"
    )


class CandidateResult(BaseModel):
    """The output of a candidate generator invocation."""

    generator_name: str = Field(..., description="Name of the generator that produced these candidates")
    candidates: list[Candidate] = Field(default_factory=list)

    @property
    def posts(self) -> list[Post]:
        """The candidate posts in store order, without their priority tiers."""
        return [c.post for c in self.candidates]


# ---------------------------------------------------------------------------
# Hit parsing
# ---------------------------------------------------------------------------

def post_from_hit(hit: dict) -> Post:
    """Build a ``Post`` from an Elasticsearch hit.

    Falls back to the hit ``_id`` when the source has no ``id``.  Raises
    ``MalformedCandidate`` when required fields are missing or invalid.
    """
    src = dict(hit.get("_source") or {})
    src.setdefault("id", hit.get("_id"))
    try:
        return Post.model_validate(src)
    except ValidationError as exc:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in exc.errors()})
        raise MalformedCandidate(src.get("id"), f"invalid fields: {', '.join(fields)}") from exc


def candidates_from_hits(hits: list[dict], priority_of=None) -> list[Candidate]:
    """Convert hits to candidates, skipping (and logging) malformed ones.

    ``priority_of`` optionally maps a hit to its pool priority tier.
    """
    candidates: list[Candidate] = []
    for hit in hits:
        try:
            post = post_from_hit(hit)
        except MalformedCandidate as exc:
            logger.warning("Skipping candidate: %s", exc)
            continue
        priority = priority_of(hit) if priority_of is not None else 0
        candidates.append(Candidate(post=post, priority=priority))
    return candidates


def weighted_field_sort(weights: dict[str, float]) -> dict:
    """Script sort clause ordering hits by ``sum(field * weight)`` descending.

    Missing numeric fields count as 0.
    """
    terms = [
        f"(doc['{field}'].size() == 0 ? 0 : doc['{field}'].value) * params['{field}']"
        for field in weights
    ]
    return {
        "_script": {
            "type": "number",
            "script": {"source": " + ".join(terms), "params": dict(weights)},
            "order": "desc",
        }
    }


# ---------------------------------------------------------------------------
# Abstract base
# ---------------------------------------------------------------------------

class CandidateGenerator(ABC):
    """Abstract base class for named candidate generators.

    Subclasses must implement `name` (property) and `generate`.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name identifying this generator (e.g. ``network``)."""
        ...

    @abstractmethod
    async def generate(
        self,
        es,
        viewer: Viewer | None,
        num_candidates: int = 60,
    ) -> CandidateResult:
        """Produce a bounded candidate pool for the given viewer.

        Parameters
        ----------
        es:
            An ``AsyncElasticsearch`` client instance.
        viewer:
            The requesting viewer, or ``None`` for anonymous variants.
        num_candidates:
            Maximum number of candidates to return.

        Returns
        -------
        CandidateResult

        Raises
        ------
        StoreUnavailable
            If the store query fails.
        """
        ...
