"""Artist profile endpoints."""

from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from folk_art_platform.api.auth import get_current_identity, require_role
from folk_art_platform.api.schemas import ArtistCreateIn, ArtistUpdateIn, PortfolioItemIn
from folk_art_platform.api.serializers import (
    envelope,
    paginated,
    serialize_artist,
    serialize_portfolio_item,
    serialize_ratings,
)
from folk_art_platform.domain.artists import ArtistFilters
from folk_art_platform.domain.models import ROLE_ADMIN, Identity

if TYPE_CHECKING:
    from folk_art_platform.containers import AppContainer

router = APIRouter(prefix="/artists", tags=["artists"])


@router.get("")
def list_artists(  # noqa: PLR0913
    request: Request,
    artform: str | None = None,
    category: str | None = None,
    state: str | None = None,
    city: str | None = None,
    min_rating: float | None = Query(default=None, alias="minRating", ge=0, le=5),
    max_price: float | None = Query(default=None, alias="maxPrice", ge=0),
    search: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=12, ge=1, le=100),
    sort: str = "joined_at",
) -> dict[str, object]:
    """Return active artists with filtering, sorting and pagination."""
    container: AppContainer = request.app.state.container
    filters = ArtistFilters(
        artform=artform,
        category=category,
        state=state,
        city=city,
        min_rating=min_rating,
        max_price=max_price,
        search=search,
    )
    result = container.artist_service.list_artists(
        filters, page=page, limit=limit, sort=sort
    )
    return paginated(
        [serialize_artist(artist) for artist in result.items],
        total=result.total,
        total_pages=result.total_pages,
        page=result.page,
    )


@router.get("/location/{state}")
@router.get("/location/{state}/{city}")
def artists_by_location(
    state: str, request: Request, city: str | None = None
) -> dict[str, object]:
    """Return active artists in a state and optional city, best rated first."""
    container: AppContainer = request.app.state.container
    artists = container.artist_service.list_by_location(state, city)
    return {
        "success": True,
        "count": len(artists),
        "data": [serialize_artist(artist) for artist in artists],
    }


@router.get("/search/{artform}/{category}")
def search_artists(artform: str, category: str, request: Request) -> dict[str, object]:
    """Return active artists for an artform and category, best rated first."""
    container: AppContainer = request.app.state.container
    artists = container.artist_service.search(artform, category)
    return {
        "success": True,
        "count": len(artists),
        "data": [serialize_artist(artist) for artist in artists],
    }


@router.get("/{artist_id}")
def get_artist(artist_id: UUID, request: Request) -> dict[str, object]:
    """Return one artist profile."""
    container: AppContainer = request.app.state.container
    return envelope(serialize_artist(container.artist_service.get_artist(artist_id)))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_artist(
    body: ArtistCreateIn,
    request: Request,
    identity: Identity = Depends(get_current_identity),
) -> dict[str, object]:
    """Create the caller's artist profile."""
    container: AppContainer = request.app.state.container
    artist = container.artist_service.create_profile(
        identity, body.model_dump(exclude_none=True)
    )
    return envelope(
        serialize_artist(artist), message="Artist profile created successfully"
    )


@router.put("/{artist_id}")
def update_artist(
    artist_id: UUID,
    body: ArtistUpdateIn,
    request: Request,
    identity: Identity = Depends(get_current_identity),
) -> dict[str, object]:
    """Update an artist profile."""
    container: AppContainer = request.app.state.container
    artist = container.artist_service.update_profile(
        identity, artist_id, body.model_dump(exclude_unset=True, exclude_none=True)
    )
    return envelope(
        serialize_artist(artist), message="Artist profile updated successfully"
    )


@router.post("/{artist_id}/portfolio", status_code=status.HTTP_201_CREATED)
def add_portfolio_item(
    artist_id: UUID,
    body: PortfolioItemIn,
    request: Request,
    identity: Identity = Depends(get_current_identity),
) -> dict[str, object]:
    """Add an item to the caller's portfolio."""
    container: AppContainer = request.app.state.container
    item = container.artist_service.add_portfolio_item(
        identity, artist_id, body.to_item()
    )
    return envelope(
        serialize_portfolio_item(item), message="Portfolio item added successfully"
    )


@router.post("/{artist_id}/ratings/recompute")
def recompute_ratings(
    artist_id: UUID,
    request: Request,
    identity: Identity = Depends(require_role(ROLE_ADMIN)),
) -> dict[str, object]:
    """Rebuild an artist's rating aggregate from its rated sessions."""
    container: AppContainer = request.app.state.container
    ratings = container.booking_service.recompute_artist_ratings(identity, artist_id)
    return envelope(serialize_ratings(ratings))
