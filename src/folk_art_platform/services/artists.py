"""Services for the artist profile catalogue."""

import logging
import math
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from folk_art_platform.domain.artists import (
    ArtistFilters,
    ArtistProfile,
    ArtistRatings,
    ArtistSummary,
    PortfolioItem,
)
from folk_art_platform.domain.errors import (
    ForbiddenError,
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
)
from folk_art_platform.domain.models import ROLE_CUSTOMER, Identity
from folk_art_platform.services.users import UserService

logger = logging.getLogger(__name__)

SORT_OPTIONS = ("joined_at", "rating", "price")
DEFAULT_SORT = "joined_at"

# Rating aggregates are derived from sessions and never written from input.
_READ_ONLY_FIELDS = frozenset({"id", "user_id", "ratings", "joined_at"})


class ArtistRepository(Protocol):
    """Persistence interface for artist profiles."""

    def get_artist(self, artist_id: UUID) -> ArtistProfile | None:
        """Return an artist by id, if present."""

    def get_artists(self, artist_ids: list[UUID]) -> dict[UUID, ArtistProfile]:
        """Return artists keyed by id."""

    def get_by_user(self, user_id: UUID) -> ArtistProfile | None:
        """Return the artist profile owned by an identity, if present."""

    def list_artists(
        self, filters: ArtistFilters, sort: str, offset: int, limit: int
    ) -> tuple[list[ArtistProfile], int]:
        """Return one page of matching artists and the total match count."""

    def create_artist(self, user_id: UUID, payload: dict[str, object]) -> ArtistProfile:
        """Create an artist profile and return it.

        Raises InvalidStateError when the identity already owns a profile.
        """

    def update_artist(
        self, artist_id: UUID, payload: dict[str, object]
    ) -> ArtistProfile:
        """Update profile fields and return the profile."""

    def add_portfolio_item(self, artist_id: UUID, item: PortfolioItem) -> PortfolioItem:
        """Append a portfolio item atomically and return it."""

    def set_ratings(self, artist_id: UUID, ratings: ArtistRatings) -> None:
        """Overwrite the rating aggregate."""


@dataclass
class ArtistPage:
    """One page of artists."""

    items: list[ArtistProfile]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


@dataclass
class ArtistService:
    """Application service for artist profiles."""

    repository: ArtistRepository
    user_service: UserService

    def list_artists(
        self,
        filters: ArtistFilters,
        page: int = 1,
        limit: int = 12,
        sort: str = DEFAULT_SORT,
    ) -> ArtistPage:
        """Return a page of active artists matching the filters."""
        if page < 1 or limit < 1:
            raise InvalidArgumentError("page and limit must be positive")
        if sort not in SORT_OPTIONS:
            sort = DEFAULT_SORT
        items, total = self.repository.list_artists(
            filters, sort, offset=(page - 1) * limit, limit=limit
        )
        return ArtistPage(items=items, total=total, page=page, limit=limit)

    def list_by_location(self, state: str, city: str | None = None) -> list[ArtistProfile]:
        """Return active artists in a state, optionally narrowed to a city."""
        items, _ = self.repository.list_artists(
            ArtistFilters(state=state, city=city), "rating", offset=0, limit=100
        )
        return items

    def search(self, artform: str, category: str) -> list[ArtistProfile]:
        """Return active artists practicing an artform in a category."""
        items, _ = self.repository.list_artists(
            ArtistFilters(artform=artform, category=category),
            "rating",
            offset=0,
            limit=100,
        )
        return items

    def get_artist(self, artist_id: UUID) -> ArtistProfile:
        """Return an artist or raise NotFoundError."""
        artist = self.repository.get_artist(artist_id)
        if artist is None:
            raise NotFoundError("Artist not found")
        return artist

    def create_profile(
        self, caller: Identity, payload: dict[str, object]
    ) -> ArtistProfile:
        """Create the caller's artist profile and promote them to artist."""
        if self.repository.get_by_user(caller.id) is not None:
            raise InvalidStateError("Artist profile already exists")
        artist = self.repository.create_artist(caller.id, _writable(payload))
        if caller.role == ROLE_CUSTOMER:
            self.user_service.promote_to_artist(caller.id)
        logger.info("Artist profile created", extra={"artist_id": str(artist.id)})
        return artist

    def update_profile(
        self, caller: Identity, artist_id: UUID, payload: dict[str, object]
    ) -> ArtistProfile:
        """Update a profile owned by the caller, or any profile for admins."""
        artist = self.get_artist(artist_id)
        if artist.user_id != caller.id and not caller.is_admin:
            raise ForbiddenError("Not authorized to update this profile")
        return self.repository.update_artist(artist_id, _writable(payload))

    def add_portfolio_item(
        self, caller: Identity, artist_id: UUID, item: PortfolioItem
    ) -> PortfolioItem:
        """Append a portfolio item; only the owner may do this."""
        artist = self.get_artist(artist_id)
        if artist.user_id != caller.id:
            raise ForbiddenError("Not authorized to update this portfolio")
        return self.repository.add_portfolio_item(artist_id, item)

    def summaries(self, artist_ids: list[UUID]) -> dict[UUID, ArtistSummary]:
        """Return display summaries for artists, named after their owners."""
        unique_ids = list(dict.fromkeys(artist_ids))
        if not unique_ids:
            return {}
        artists = self.repository.get_artists(unique_ids)
        owners = self.user_service.summaries(
            [artist.user_id for artist in artists.values()]
        )
        summaries = {}
        for artist_id, artist in artists.items():
            owner = owners.get(artist.user_id)
            summaries[artist_id] = ArtistSummary(
                id=artist.id,
                user_id=artist.user_id,
                name=owner.name if owner else "",
                profile_image=owner.profile_image if owner else "",
            )
        return summaries


def _writable(payload: dict[str, object]) -> dict[str, object]:
    return {key: value for key, value in payload.items() if key not in _READ_ONLY_FIELDS}
