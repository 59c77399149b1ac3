"""Domain models for artist profiles."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

ARTFORMS = ("warli", "pithora", "madhubani", "tanjore", "kalamkari", "gond", "other")
CATEGORIES = ("music", "dance", "painting", "sculpture", "crafts", "textiles")
DEFAULT_CURRENCY = "INR"


def round_rating(value: float) -> float:
    """Round an average half-up to one decimal place."""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class Specialization:
    """An artform the artist practices."""

    artform: str
    category: str
    experience: int
    description: str | None = None


@dataclass(frozen=True)
class PortfolioItem:
    """A piece of work shown on the artist profile."""

    title: str
    description: str | None = None
    images: list[str] = field(default_factory=list)
    category: str | None = None
    artform: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class ArtistLocation:
    """Where the artist is based."""

    state: str
    city: str
    region: str | None = None


@dataclass(frozen=True)
class ArtistPricing:
    """Base pricing for a session with the artist."""

    session_rate: float
    currency: str = DEFAULT_CURRENCY


@dataclass(frozen=True)
class ArtistRatings:
    """Aggregate rating derived from rated sessions.

    ``total`` is the running sum of scores so the average can be updated
    from a single new score without rescanning every session.
    """

    average: float = 0.0
    count: int = 0
    total: int = 0

    @classmethod
    def from_scores(cls, scores: list[int]) -> "ArtistRatings":
        """Build the aggregate from every rated score."""
        if not scores:
            return cls()
        total = sum(scores)
        return cls(
            average=round_rating(total / len(scores)),
            count=len(scores),
            total=total,
        )

    def add(self, score: int) -> "ArtistRatings":
        """Return the aggregate with one more score applied."""
        total = self.total + score
        count = self.count + 1
        return ArtistRatings(
            average=round_rating(total / count), count=count, total=total
        )


@dataclass(frozen=True)
class ArtistProfile:
    """Artist-specific attributes linked to one identity."""

    id: UUID
    user_id: UUID
    bio: str
    location: ArtistLocation
    pricing: ArtistPricing
    specializations: list[Specialization] = field(default_factory=list)
    portfolio: list[PortfolioItem] = field(default_factory=list)
    ratings: ArtistRatings = field(default_factory=ArtistRatings)
    is_verified: bool = False
    is_active: bool = True
    joined_at: datetime | None = None

    def with_ratings(self, ratings: ArtistRatings) -> "ArtistProfile":
        return replace(self, ratings=ratings)


@dataclass(frozen=True)
class ArtistSummary:
    """Display-friendly view of an artist."""

    id: UUID
    user_id: UUID
    name: str
    profile_image: str = ""


@dataclass(frozen=True)
class ArtistFilters:
    """Catalogue filters for listing artists."""

    artform: str | None = None
    category: str | None = None
    state: str | None = None
    city: str | None = None
    min_rating: float | None = None
    max_price: float | None = None
    search: str | None = None
    active_only: bool = True
