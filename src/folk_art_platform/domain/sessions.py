"""Domain models for booked sessions."""

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from uuid import UUID

from folk_art_platform.domain.artists import (
    DEFAULT_CURRENCY,
    ArtistRatings,
    ArtistSummary,
)
from folk_art_platform.domain.models import IdentitySummary

SESSION_TYPES = ("lesson", "workshop", "consultation", "performance")
SESSION_FORMATS = ("online", "in-person", "hybrid")
SESSION_STATUSES = ("pending", "confirmed", "completed", "cancelled", "rescheduled")
PAYMENT_STATUSES = ("pending", "paid", "refunded", "failed")

# Sessions in these statuses occupy the artist's calendar.
BLOCKING_STATUSES = frozenset({"pending", "confirmed"})

STATUS_TRANSITIONS: dict[str, frozenset[str]] = {
    "pending": frozenset({"confirmed", "cancelled"}),
    "confirmed": frozenset({"completed", "cancelled", "rescheduled"}),
    "rescheduled": frozenset({"confirmed", "cancelled"}),
    "completed": frozenset(),
    "cancelled": frozenset(),
}

MIN_SCORE = 1
MAX_SCORE = 5


def intervals_overlap(
    start: datetime, end: datetime, other_start: datetime, other_end: datetime
) -> bool:
    """Return True when two half-open intervals share any instant."""
    return other_start < end and other_end > start


def is_transition_allowed(current: str, target: str) -> bool:
    """Return True when the status table allows moving current -> target."""
    return target in STATUS_TRANSITIONS.get(current, frozenset())


@dataclass(frozen=True)
class SessionLocation:
    """Venue for in-person sessions."""

    address: str | None = None
    city: str | None = None
    state: str | None = None


@dataclass(frozen=True)
class SessionPricing:
    """Agreed price for the session."""

    amount: float
    currency: str = DEFAULT_CURRENCY


@dataclass(frozen=True)
class SessionRating:
    """Customer rating left after a completed session."""

    score: int
    review: str | None
    rated_at: datetime


@dataclass(frozen=True)
class BookingRequest:
    """Customer input for booking a session."""

    artist_id: UUID
    session_type: str
    title: str
    scheduled_date: datetime
    duration: int
    format: str
    pricing: SessionPricing
    description: str | None = None
    location: SessionLocation | None = None
    meeting_link: str | None = None

    @property
    def ends_at(self) -> datetime:
        return self.scheduled_date + timedelta(minutes=self.duration)


@dataclass(frozen=True)
class SessionDraft:
    """A validated booking ready to be persisted."""

    customer_id: UUID
    request: BookingRequest
    status: str = "pending"
    payment_status: str = "pending"


@dataclass(frozen=True)
class SessionRecord:
    """Represents a persisted booking between a customer and an artist."""

    id: UUID
    customer_id: UUID
    artist_id: UUID
    session_type: str
    title: str
    scheduled_date: datetime
    duration: int
    format: str
    pricing: SessionPricing
    status: str = "pending"
    payment_status: str = "pending"
    description: str | None = None
    location: SessionLocation | None = None
    meeting_link: str | None = None
    rating: SessionRating | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def ends_at(self) -> datetime:
        return self.scheduled_date + timedelta(minutes=self.duration)

    @property
    def is_blocking(self) -> bool:
        return self.status in BLOCKING_STATUSES

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return intervals_overlap(start, end, self.scheduled_date, self.ends_at)


@dataclass(frozen=True)
class RatedSession:
    """Result of recording a rating: the session and the new artist aggregate."""

    session: SessionRecord
    ratings: ArtistRatings


@dataclass(frozen=True)
class SessionFilters:
    """Filters for listing sessions."""

    customer_id: UUID | None = None
    artist_id: UUID | None = None
    status: str | None = None
    scheduled_from: datetime | None = None


@dataclass(frozen=True)
class SessionView:
    """Session with its customer and artist expanded for display."""

    record: SessionRecord
    customer: IdentitySummary | None
    artist: ArtistSummary | None


@dataclass(frozen=True)
class SessionPage:
    """One page of sessions."""

    items: list[SessionView] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0
