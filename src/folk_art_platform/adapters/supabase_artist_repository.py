"""Supabase-backed artist profile repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from folk_art_platform.domain.artists import (
    DEFAULT_CURRENCY,
    ArtistFilters,
    ArtistLocation,
    ArtistPricing,
    ArtistProfile,
    ArtistRatings,
    PortfolioItem,
    Specialization,
)
from folk_art_platform.domain.errors import InvalidStateError
from folk_art_platform.services.artists import ArtistRepository

_ARTIST_COLUMNS = (
    "id, user_id, bio, specializations, portfolio, location_state, location_city, "
    "location_region, session_rate, currency, rating_average, rating_count, "
    "rating_total, is_verified, is_active, joined_at"
)

_SORT_COLUMNS = {
    "joined_at": ("joined_at", True),
    "rating": ("rating_average", True),
    "price": ("session_rate", False),
}

# unique_violation: the identity already owns a profile.
_UNIQUE_VIOLATION = "23505"

# Characters with meaning inside a PostgREST or=() filter.
_FILTER_RESERVED = str.maketrans("", "", ",()*%")


@dataclass
class SupabaseArtistRepository(ArtistRepository):
    """Supabase implementation for artist profiles."""

    client: Client

    def get_artist(self, artist_id: UUID) -> ArtistProfile | None:
        """Return an artist by id, if present."""
        response = (
            self.client.table("artists")
            .select(_ARTIST_COLUMNS)
            .eq("id", str(artist_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_artist(response.data[0])

    def get_artists(self, artist_ids: list[UUID]) -> dict[UUID, ArtistProfile]:
        """Return artists keyed by id."""
        response = (
            self.client.table("artists")
            .select(_ARTIST_COLUMNS)
            .in_("id", [str(artist_id) for artist_id in artist_ids])
            .execute()
        )
        artists = [_parse_artist(row) for row in response.data or []]
        return {artist.id: artist for artist in artists}

    def get_by_user(self, user_id: UUID) -> ArtistProfile | None:
        """Return the profile owned by a user, if present."""
        response = (
            self.client.table("artists")
            .select(_ARTIST_COLUMNS)
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_artist(response.data[0])

    def list_artists(
        self, filters: ArtistFilters, sort: str, offset: int, limit: int
    ) -> tuple[list[ArtistProfile], int]:
        """Return a filtered, sorted page of artists with the total count."""
        query = self.client.table("artists").select(_ARTIST_COLUMNS, count="exact")
        if filters.active_only:
            query = query.eq("is_active", True)
        if filters.artform:
            query = query.contains("specializations", [{"artform": filters.artform}])
        if filters.category:
            query = query.contains(
                "specializations", [{"category": filters.category}]
            )
        if filters.state:
            query = query.ilike("location_state", f"%{filters.state}%")
        if filters.city:
            query = query.ilike("location_city", f"%{filters.city}%")
        if filters.min_rating is not None:
            query = query.gte("rating_average", filters.min_rating)
        if filters.max_price is not None:
            query = query.lte("session_rate", filters.max_price)
        if filters.search:
            term = filters.search.translate(_FILTER_RESERVED).strip()
            if term:
                query = query.or_(f"bio.ilike.*{term}*,search_text.ilike.*{term}*")

        column, desc = _SORT_COLUMNS.get(sort, _SORT_COLUMNS["joined_at"])
        response = (
            query.order(column, desc=desc).range(offset, offset + limit - 1).execute()
        )
        artists = [_parse_artist(row) for row in response.data or []]
        return artists, response.count or 0

    def create_artist(self, user_id: UUID, payload: dict[str, object]) -> ArtistProfile:
        """Create an artist row and return it."""
        row = {"user_id": str(user_id), **_payload_to_row(payload)}
        try:
            response = self.client.table("artists").insert(row).execute()
        except APIError as exc:
            if exc.code == _UNIQUE_VIOLATION:
                raise InvalidStateError("Artist profile already exists") from exc
            raise
        if not response.data:
            raise RuntimeError("Failed to create artist profile")
        return _parse_artist(response.data[0])

    def update_artist(
        self, artist_id: UUID, payload: dict[str, object]
    ) -> ArtistProfile:
        """Update the given profile fields and return the profile."""
        response = (
            self.client.table("artists")
            .update(_payload_to_row(payload))
            .eq("id", str(artist_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update artist profile")
        return _parse_artist(response.data[0])

    def add_portfolio_item(self, artist_id: UUID, item: PortfolioItem) -> PortfolioItem:
        """Append a portfolio item in a single database statement."""
        response = self.client.rpc(
            "append_portfolio_item",
            {"p_artist_id": str(artist_id), "p_item": _portfolio_to_json(item)},
        ).execute()
        data = response.data
        if isinstance(data, list):
            data = data[0] if data else None
        if not isinstance(data, dict):
            raise RuntimeError("Failed to add portfolio item")
        return _parse_portfolio_item(data)

    def set_ratings(self, artist_id: UUID, ratings: ArtistRatings) -> None:
        """Overwrite the stored rating aggregate."""
        self.client.table("artists").update(
            {
                "rating_average": ratings.average,
                "rating_count": ratings.count,
                "rating_total": ratings.total,
            }
        ).eq("id", str(artist_id)).execute()


def parse_ratings(row: dict[str, object]) -> ArtistRatings:
    """Read the rating aggregate columns of an artist row."""
    return ArtistRatings(
        average=float(row.get("rating_average") or 0.0),
        count=int(row.get("rating_count") or 0),
        total=int(row.get("rating_total") or 0),
    )


def _parse_artist(row: dict[str, object]) -> ArtistProfile:
    joined_raw = row.get("joined_at")
    return ArtistProfile(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        bio=str(row.get("bio") or ""),
        location=ArtistLocation(
            state=str(row.get("location_state") or ""),
            city=str(row.get("location_city") or ""),
            region=row.get("location_region"),
        ),
        pricing=ArtistPricing(
            session_rate=float(row.get("session_rate") or 0.0),
            currency=str(row.get("currency") or DEFAULT_CURRENCY),
        ),
        specializations=[
            Specialization(
                artform=entry["artform"],
                category=entry["category"],
                experience=int(entry.get("experience", 0)),
                description=entry.get("description"),
            )
            for entry in row.get("specializations") or []
        ],
        portfolio=[_parse_portfolio_item(entry) for entry in row.get("portfolio") or []],
        ratings=parse_ratings(row),
        is_verified=bool(row.get("is_verified", False)),
        is_active=bool(row.get("is_active", True)),
        joined_at=(
            datetime.fromisoformat(joined_raw)
            if isinstance(joined_raw, str) and joined_raw
            else None
        ),
    )


def _parse_portfolio_item(entry: dict[str, object]) -> PortfolioItem:
    created_raw = entry.get("created_at")
    return PortfolioItem(
        title=str(entry.get("title") or ""),
        description=entry.get("description"),
        images=list(entry.get("images") or []),
        category=entry.get("category"),
        artform=entry.get("artform"),
        created_at=(
            datetime.fromisoformat(created_raw)
            if isinstance(created_raw, str) and created_raw
            else None
        ),
    )


def _portfolio_to_json(item: PortfolioItem) -> dict[str, object]:
    created_at = item.created_at or datetime.now(tz=UTC)
    return {
        "title": item.title,
        "description": item.description,
        "images": item.images,
        "category": item.category,
        "artform": item.artform,
        "created_at": created_at.isoformat(),
    }


def _payload_to_row(payload: dict[str, object]) -> dict[str, object]:
    """Flatten a profile payload onto artist table columns."""
    row: dict[str, object] = {}
    for key in ("bio", "is_active", "specializations"):
        if key in payload:
            row[key] = payload[key]
    if "portfolio" in payload:
        row["portfolio"] = payload["portfolio"]
    location = payload.get("location")
    if isinstance(location, dict):
        row["location_state"] = location.get("state")
        row["location_city"] = location.get("city")
        row["location_region"] = location.get("region")
    pricing = payload.get("pricing")
    if isinstance(pricing, dict):
        row["session_rate"] = pricing.get("session_rate")
        row["currency"] = pricing.get("currency") or DEFAULT_CURRENCY
    return row
