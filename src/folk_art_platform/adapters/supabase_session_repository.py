"""Supabase-backed session repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from folk_art_platform.adapters.supabase_artist_repository import parse_ratings
from folk_art_platform.domain.artists import DEFAULT_CURRENCY
from folk_art_platform.domain.errors import ConflictError
from folk_art_platform.domain.sessions import (
    BLOCKING_STATUSES,
    RatedSession,
    SessionDraft,
    SessionFilters,
    SessionLocation,
    SessionPricing,
    SessionRating,
    SessionRecord,
)
from folk_art_platform.services.bookings import SessionRepository

_SESSION_COLUMNS = (
    "id, customer_id, artist_id, session_type, title, description, "
    "scheduled_date, duration_minutes, format, location, meeting_link, "
    "price_amount, price_currency, status, payment_status, rating_score, "
    "rating_review, rated_at, created_at, updated_at"
)

# exclusion_violation: the sessions_no_overlap constraint rejected the row.
_EXCLUSION_VIOLATION = "23P01"


@dataclass
class SupabaseSessionRepository(SessionRepository):
    """Supabase implementation for booked sessions."""

    client: Client

    def create_session(self, draft: SessionDraft) -> SessionRecord:
        """Insert a session row and return it."""
        request = draft.request
        location = request.location
        row = {
            "customer_id": str(draft.customer_id),
            "artist_id": str(request.artist_id),
            "session_type": request.session_type,
            "title": request.title,
            "description": request.description,
            "scheduled_date": request.scheduled_date.isoformat(),
            "duration_minutes": request.duration,
            "ends_at": request.ends_at.isoformat(),
            "format": request.format,
            "location": (
                {
                    "address": location.address,
                    "city": location.city,
                    "state": location.state,
                }
                if location
                else None
            ),
            "meeting_link": request.meeting_link,
            "price_amount": request.pricing.amount,
            "price_currency": request.pricing.currency,
            "status": draft.status,
            "payment_status": draft.payment_status,
        }
        try:
            response = self.client.table("sessions").insert(row).execute()
        except APIError as exc:
            _raise_if_overlap(exc)
            raise
        if not response.data:
            raise RuntimeError("Failed to create session")
        return _parse_session(response.data[0])

    def get_session(self, session_id: UUID) -> SessionRecord | None:
        """Return a session by id, if present."""
        response = (
            self.client.table("sessions")
            .select(_SESSION_COLUMNS)
            .eq("id", str(session_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_session(response.data[0])

    def list_sessions(
        self, filters: SessionFilters, offset: int, limit: int
    ) -> tuple[list[SessionRecord], int]:
        """Return a page of sessions ordered by start time with the total count."""
        query = self.client.table("sessions").select(_SESSION_COLUMNS, count="exact")
        if filters.customer_id is not None:
            query = query.eq("customer_id", str(filters.customer_id))
        if filters.artist_id is not None:
            query = query.eq("artist_id", str(filters.artist_id))
        if filters.status is not None:
            query = query.eq("status", filters.status)
        if filters.scheduled_from is not None:
            query = query.gte("scheduled_date", filters.scheduled_from.isoformat())
        response = (
            query.order("scheduled_date", desc=False)
            .range(offset, offset + limit - 1)
            .execute()
        )
        sessions = [_parse_session(row) for row in response.data or []]
        return sessions, response.count or 0

    def find_overlapping(
        self,
        artist_id: UUID,
        start: datetime,
        end: datetime,
        exclude_id: UUID | None = None,
    ) -> SessionRecord | None:
        """Return a blocking session of the artist that overlaps [start, end)."""
        query = (
            self.client.table("sessions")
            .select(_SESSION_COLUMNS)
            .eq("artist_id", str(artist_id))
            .in_("status", sorted(BLOCKING_STATUSES))
            .lt("scheduled_date", end.isoformat())
            .gt("ends_at", start.isoformat())
        )
        if exclude_id is not None:
            query = query.neq("id", str(exclude_id))
        response = query.limit(1).execute()
        if not response.data:
            return None
        return _parse_session(response.data[0])

    def update_status(self, session_id: UUID, status: str) -> SessionRecord:
        """Update the session status."""
        try:
            response = (
                self.client.table("sessions")
                .update(
                    {
                        "status": status,
                        "updated_at": datetime.now(tz=UTC).isoformat(),
                    }
                )
                .eq("id", str(session_id))
                .execute()
            )
        except APIError as exc:
            _raise_if_overlap(exc)
            raise
        if not response.data:
            raise RuntimeError("Failed to update session status")
        return _parse_session(response.data[0])

    def record_rating(
        self, session_id: UUID, rating: SessionRating
    ) -> RatedSession | None:
        """Rate the session and bump the artist aggregate in one transaction."""
        response = self.client.rpc(
            "rate_session",
            {
                "p_session_id": str(session_id),
                "p_score": rating.score,
                "p_review": rating.review,
                "p_rated_at": rating.rated_at.isoformat(),
            },
        ).execute()
        data = response.data
        if isinstance(data, list):
            data = data[0] if data else None
        if not isinstance(data, dict) or not data.get("session"):
            return None
        return RatedSession(
            session=_parse_session(data["session"]),
            ratings=parse_ratings(data.get("ratings") or {}),
        )

    def list_rating_scores(self, artist_id: UUID) -> list[int]:
        """Return the scores of every rated session of an artist."""
        response = (
            self.client.table("sessions")
            .select("rating_score")
            .eq("artist_id", str(artist_id))
            .not_.is_("rating_score", "null")
            .execute()
        )
        return [
            int(row["rating_score"])
            for row in response.data or []
            if row.get("rating_score") is not None
        ]


def _raise_if_overlap(exc: APIError) -> None:
    if exc.code == _EXCLUSION_VIOLATION:
        raise ConflictError("Artist is not available at the requested time") from exc


def _parse_datetime(raw: object) -> datetime | None:
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return None


def _parse_session(row: dict[str, object]) -> SessionRecord:
    location_raw = row.get("location")
    rating = None
    if row.get("rating_score") is not None:
        rating = SessionRating(
            score=int(row["rating_score"]),
            review=row.get("rating_review"),
            rated_at=_parse_datetime(row.get("rated_at")) or datetime.now(tz=UTC),
        )
    return SessionRecord(
        id=UUID(str(row["id"])),
        customer_id=UUID(str(row["customer_id"])),
        artist_id=UUID(str(row["artist_id"])),
        session_type=str(row["session_type"]),
        title=str(row.get("title") or ""),
        description=row.get("description"),
        scheduled_date=datetime.fromisoformat(str(row["scheduled_date"])),
        duration=int(row["duration_minutes"]),
        format=str(row["format"]),
        location=(
            SessionLocation(
                address=location_raw.get("address"),
                city=location_raw.get("city"),
                state=location_raw.get("state"),
            )
            if isinstance(location_raw, dict)
            else None
        ),
        meeting_link=row.get("meeting_link"),
        pricing=SessionPricing(
            amount=float(row.get("price_amount") or 0.0),
            currency=str(row.get("price_currency") or DEFAULT_CURRENCY),
        ),
        status=str(row.get("status") or "pending"),
        payment_status=str(row.get("payment_status") or "pending"),
        rating=rating,
        created_at=_parse_datetime(row.get("created_at")),
        updated_at=_parse_datetime(row.get("updated_at")),
    )
