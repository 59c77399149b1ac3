"""Session booking, status and rating workflow."""

import logging
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from folk_art_platform.domain.artists import ArtistRatings
from folk_art_platform.domain.errors import (
    ConflictError,
    ForbiddenError,
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
)
from folk_art_platform.domain.models import ROLE_ARTIST, Identity
from folk_art_platform.domain.sessions import (
    BLOCKING_STATUSES,
    MAX_SCORE,
    MIN_SCORE,
    SESSION_FORMATS,
    SESSION_STATUSES,
    SESSION_TYPES,
    BookingRequest,
    RatedSession,
    SessionDraft,
    SessionFilters,
    SessionPage,
    SessionRating,
    SessionRecord,
    SessionView,
    is_transition_allowed,
)
from folk_art_platform.services.artists import ArtistRepository, ArtistService
from folk_art_platform.services.locks import ArtistLocks
from folk_art_platform.services.users import UserService

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


class SessionRepository(Protocol):
    """Persistence interface for booked sessions."""

    def create_session(self, draft: SessionDraft) -> SessionRecord:
        """Insert a session and return it."""

    def get_session(self, session_id: UUID) -> SessionRecord | None:
        """Return a session by id, if present."""

    def list_sessions(
        self, filters: SessionFilters, offset: int, limit: int
    ) -> tuple[list[SessionRecord], int]:
        """Return one page of sessions ordered by start time and the total."""

    def find_overlapping(
        self,
        artist_id: UUID,
        start: datetime,
        end: datetime,
        exclude_id: UUID | None = None,
    ) -> SessionRecord | None:
        """Return a pending or confirmed session of the artist overlapping [start, end).

        `exclude_id` leaves one session out of the search.
        """

    def update_status(self, session_id: UUID, status: str) -> SessionRecord:
        """Overwrite the session status and return the session.

        Raises ConflictError when the session would block a window another
        pending or confirmed session already holds.
        """

    def record_rating(
        self, session_id: UUID, rating: SessionRating
    ) -> RatedSession | None:
        """Set the rating if none is present and add it to the artist aggregate.

        Both writes happen in one unit of work. Returns None when the session
        already carries a rating or is no longer completed.
        """

    def list_rating_scores(self, artist_id: UUID) -> list[int]:
        """Return the scores of every rated session of an artist."""


@dataclass
class BookingService:
    """Books sessions with artists and tracks their lifecycle."""

    session_repository: SessionRepository
    artist_service: ArtistService
    user_service: UserService
    strict_transitions: bool = True
    max_page_size: int = MAX_PAGE_SIZE
    locks: ArtistLocks = field(default_factory=ArtistLocks)

    @property
    def artist_repository(self) -> ArtistRepository:
        return self.artist_service.repository

    def book_session(self, caller: Identity, request: BookingRequest) -> SessionView:
        """Book a session for the caller if the artist is free."""
        _validate_request(request)
        artist = self.artist_repository.get_artist(request.artist_id)
        if artist is None or not artist.is_active:
            raise NotFoundError("Artist not found")

        request = _with_utc(request)
        with self.locks.hold(artist.id):
            self._ensure_available(artist.id, request.scheduled_date, request.ends_at)
            record = self.session_repository.create_session(
                SessionDraft(customer_id=caller.id, request=request)
            )
        logger.info(
            "Session booked",
            extra={"session_id": str(record.id), "artist_id": str(artist.id)},
        )
        return self._view(record)

    def list_sessions(
        self,
        caller: Identity,
        status: str | None = None,
        upcoming: bool = False,
        page: int = 1,
        limit: int = 10,
    ) -> SessionPage:
        """Return the caller's sessions: bookings made, or bookings received for artists."""
        if page < 1 or limit < 1:
            raise InvalidArgumentError("page and limit must be positive")
        limit = min(limit, self.max_page_size)
        if status is not None and status not in SESSION_STATUSES:
            raise InvalidArgumentError("Invalid status")

        filters = SessionFilters(
            customer_id=caller.id,
            status=status,
            scheduled_from=datetime.now(tz=UTC) if upcoming else None,
        )
        if caller.role == ROLE_ARTIST:
            artist = self.artist_repository.get_by_user(caller.id)
            if artist is not None:
                filters = SessionFilters(
                    artist_id=artist.id,
                    status=filters.status,
                    scheduled_from=filters.scheduled_from,
                )

        records, total = self.session_repository.list_sessions(
            filters, offset=(page - 1) * limit, limit=limit
        )
        return SessionPage(
            items=self._views(records), total=total, page=page, limit=limit
        )

    def get_session(self, caller: Identity, session_id: UUID) -> SessionView:
        """Return a session visible to the caller."""
        record = self._require_session(session_id)
        self._require_participant(caller, record, "Not authorized to view this session")
        return self._view(record)

    def update_status(
        self, caller: Identity, session_id: UUID, status: str
    ) -> SessionView:
        """Move a session to a new status."""
        if status not in SESSION_STATUSES:
            raise InvalidArgumentError("Invalid status")
        record = self._require_session(session_id)
        self._require_participant(
            caller, record, "Not authorized to update this session"
        )
        if self.strict_transitions and not is_transition_allowed(record.status, status):
            raise InvalidStateError(
                f"Cannot change session status from {record.status} to {status}"
            )

        if status in BLOCKING_STATUSES and not record.is_blocking:
            with self.locks.hold(record.artist_id):
                self._ensure_available(
                    record.artist_id,
                    record.scheduled_date,
                    record.ends_at,
                    exclude_id=record.id,
                )
                updated = self.session_repository.update_status(session_id, status)
        else:
            updated = self.session_repository.update_status(session_id, status)
        logger.info(
            "Session status updated",
            extra={"session_id": str(session_id), "status": status},
        )
        return self._view(updated)

    def rate_session(
        self,
        caller: Identity,
        session_id: UUID,
        score: int,
        review: str | None = None,
    ) -> SessionView:
        """Rate a completed session and fold the score into the artist aggregate."""
        if isinstance(score, bool) or not MIN_SCORE <= score <= MAX_SCORE:
            raise InvalidArgumentError("Rating must be between 1 and 5")
        record = self._require_session(session_id)
        if record.customer_id != caller.id:
            raise ForbiddenError("Not authorized to rate this session")
        if record.status != "completed":
            raise InvalidStateError("Session must be completed before rating")
        if record.rating is not None:
            raise InvalidStateError("Session has already been rated")

        rating = SessionRating(score=score, review=review, rated_at=datetime.now(tz=UTC))
        with self.locks.hold(record.artist_id):
            rated = self.session_repository.record_rating(session_id, rating)
        if rated is None:
            raise self._rating_rejected(session_id)
        logger.info(
            "Session rated",
            extra={
                "session_id": str(session_id),
                "artist_id": str(record.artist_id),
                "rating_average": rated.ratings.average,
                "rating_count": rated.ratings.count,
            },
        )
        return self._view(rated.session)

    def recompute_artist_ratings(
        self, caller: Identity, artist_id: UUID
    ) -> ArtistRatings:
        """Rebuild an artist's aggregate from every rated session."""
        if not caller.is_admin:
            raise ForbiddenError("Not authorized to recompute ratings")
        artist = self.artist_repository.get_artist(artist_id)
        if artist is None:
            raise NotFoundError("Artist not found")
        with self.locks.hold(artist_id):
            ratings = ArtistRatings.from_scores(
                self.session_repository.list_rating_scores(artist_id)
            )
            self.artist_repository.set_ratings(artist_id, ratings)
        if ratings != artist.ratings:
            logger.warning(
                "Artist rating aggregate was out of date",
                extra={"artist_id": str(artist_id)},
            )
        return ratings

    def _ensure_available(
        self,
        artist_id: UUID,
        start: datetime,
        end: datetime,
        exclude_id: UUID | None = None,
    ) -> None:
        """Raise ConflictError if a blocking session of the artist overlaps the window.

        Callers hold the artist lock.
        """
        clash = self.session_repository.find_overlapping(
            artist_id, start, end, exclude_id=exclude_id
        )
        if clash is not None:
            logger.warning(
                "Session overlaps existing session",
                extra={"artist_id": str(artist_id), "session_id": str(clash.id)},
            )
            raise ConflictError("Artist is not available at the requested time")

    def _rating_rejected(self, session_id: UUID) -> InvalidStateError:
        """Explain why storage refused a rating, from the session as it is now."""
        current = self._require_session(session_id)
        if current.status != "completed":
            return InvalidStateError("Session must be completed before rating")
        return InvalidStateError("Session has already been rated")

    def _require_session(self, session_id: UUID) -> SessionRecord:
        record = self.session_repository.get_session(session_id)
        if record is None:
            raise NotFoundError("Session not found")
        return record

    def _require_participant(
        self, caller: Identity, record: SessionRecord, message: str
    ) -> None:
        if caller.is_admin or record.customer_id == caller.id:
            return
        artist = self.artist_repository.get_by_user(caller.id)
        if artist is not None and artist.id == record.artist_id:
            return
        raise ForbiddenError(message)

    def _view(self, record: SessionRecord) -> SessionView:
        return self._views([record])[0]

    def _views(self, records: list[SessionRecord]) -> list[SessionView]:
        customers = self.user_service.summaries(
            [record.customer_id for record in records]
        )
        artists = self.artist_service.summaries(
            [record.artist_id for record in records]
        )
        return [
            SessionView(
                record=record,
                customer=customers.get(record.customer_id),
                artist=artists.get(record.artist_id),
            )
            for record in records
        ]


def _validate_request(request: BookingRequest) -> None:
    if request.session_type not in SESSION_TYPES:
        raise InvalidArgumentError("Invalid session type")
    if request.format not in SESSION_FORMATS:
        raise InvalidArgumentError("Invalid session format")
    if request.duration <= 0:
        raise InvalidArgumentError("Duration must be a positive number of minutes")
    if request.pricing.amount < 0:
        raise InvalidArgumentError("Price must not be negative")
    if not request.title.strip():
        raise InvalidArgumentError("Title is required")


def _with_utc(request: BookingRequest) -> BookingRequest:
    """Treat naive start times as UTC so interval comparisons are consistent."""
    if request.scheduled_date.tzinfo is not None:
        return request
    return replace(request, scheduled_date=request.scheduled_date.replace(tzinfo=UTC))
