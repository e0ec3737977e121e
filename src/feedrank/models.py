from datetime import datetime, timezone
from enum import Enum

from pydantic import AliasChoices, BaseModel, Field, field_validator


class Visibility(str, Enum):
    PUBLIC = "public"
    FOLLOWERS = "followers"
    PRIVATE = "private"


class AuthorRank(str, Enum):
    """Ten reputation tiers, lowest first."""

    ROOKIE = "Rookie"
    BRONZE = "Bronze"
    SILVER = "Silver"
    GOLD = "Gold"
    PLATINUM = "Platinum"
    DIAMOND = "Diamond"
    MASTER = "Master"
    GRANDMASTER = "Grandmaster"
    LEGEND = "Legend"
    MYTHIC = "Mythic"

    @property
    def bonus(self) -> float:
        """Relationship bonus contributed by an author of this rank."""
        return RANK_BONUS[self]


RANK_BONUS: dict[AuthorRank, float] = {
    AuthorRank.ROOKIE: 0.0,
    AuthorRank.BRONZE: 0.05,
    AuthorRank.SILVER: 0.1,
    AuthorRank.GOLD: 0.15,
    AuthorRank.PLATINUM: 0.2,
    AuthorRank.DIAMOND: 0.25,
    AuthorRank.MASTER: 0.3,
    AuthorRank.GRANDMASTER: 0.35,
    AuthorRank.LEGEND: 0.4,
    AuthorRank.MYTHIC: 0.5,
}


def _known_rank_or_none(value):
    if value is None or isinstance(value, AuthorRank):
        return value
    try:
        return AuthorRank(value)
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Store documents
# ---------------------------------------------------------------------------

class MediaItem(BaseModel):
    url: str
    media_type: str = Field("image", description="image, video or gif")


class Location(BaseModel):
    name: str | None = None
    coordinates: list[float] = Field(default_factory=list)


class LinkPreview(BaseModel):
    url: str | None = None
    title: str | None = None


class Poll(BaseModel):
    question: str | None = None
    options: list[str] = Field(default_factory=list)


class AuthorSummary(BaseModel):
    """Author fields joined onto a post before scoring."""

    id: str
    username: str | None = None
    profile_picture: str | None = None
    is_verified: bool = False
    rank: AuthorRank | None = Field(
        None, description="Author tier; unknown tier names are dropped to None"
    )
    follower_ids: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("follower_ids", "followers"),
    )

    @field_validator("rank", mode="before")
    @classmethod
    def _drop_unknown_rank(cls, value):
        return _known_rank_or_none(value)


class Post(BaseModel):
    """A candidate post as stored in the ``posts`` index."""

    id: str
    author_id: str
    author: AuthorSummary | None = None
    content: str | None = None
    media: list[MediaItem] = Field(default_factory=list)
    like_count: int = Field(0, ge=0)
    comment_count: int = Field(0, ge=0)
    view_count: int = Field(0, ge=0)
    tags: list[str] = Field(default_factory=list)
    created_at: datetime
    visibility: Visibility = Visibility.PUBLIC
    location: Location | None = None
    link_preview: LinkPreview | None = None
    poll: Poll | None = None
    has_content_warning: bool = False
    popularity_score: float = Field(
        0.0, description="Maintained by the store layer; read-only here"
    )
    engagement_score: float = Field(
        0.0, description="Maintained by the store layer; read-only here"
    )
    is_hidden: bool = False

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class Viewer(BaseModel):
    """The user a feed is generated for."""

    id: str
    following_ids: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("following_ids", "following"),
    )
    follower_ids: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("follower_ids", "followers"),
    )
    rank: AuthorRank = AuthorRank.ROOKIE
    score: float = 0.0

    @field_validator("rank", mode="before")
    @classmethod
    def _default_unknown_rank(cls, value):
        return _known_rank_or_none(value) or AuthorRank.ROOKIE


# ---------------------------------------------------------------------------
# Request / response
# ---------------------------------------------------------------------------

class FeedContext(BaseModel):
    page: int = Field(1, ge=1)
    limit: int = Field(20, gt=0)
    exclude_ids: list[str] = Field(
        default_factory=list, description="Post ids never to surface"
    )
    seen_authors: list[str] = Field(
        default_factory=list,
        description="Author ids already shown this session (novelty boost only)",
    )
    seen_tags: list[str] = Field(default_factory=list)


class ScoredCandidate(BaseModel):
    post: Post
    score: float


class Pagination(BaseModel):
    page: int
    limit: int
    total: int = Field(..., description="Scored candidates before diversity sampling")
    has_more: bool


class FeedPage(BaseModel):
    """A ranked page with a parallel list of final scores."""

    posts: list[Post]
    scores: list[float]
    pagination: Pagination
