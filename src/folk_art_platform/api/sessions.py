"""Session booking endpoints."""

from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from folk_art_platform.api.auth import get_current_identity
from folk_art_platform.api.schemas import BookSessionIn, RateSessionIn, StatusUpdateIn
from folk_art_platform.api.serializers import (
    envelope,
    serialize_session,
    serialize_session_page,
)
from folk_art_platform.domain.models import Identity

if TYPE_CHECKING:
    from folk_art_platform.containers import AppContainer

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.get("")
def list_sessions(
    request: Request,
    status_filter: str | None = Query(default=None, alias="status"),
    upcoming: bool = False,
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
    identity: Identity = Depends(get_current_identity),
) -> dict[str, object]:
    """Return the caller's sessions, paginated."""
    container: AppContainer = request.app.state.container
    result = container.booking_service.list_sessions(
        identity,
        status=status_filter,
        upcoming=upcoming,
        page=page,
        limit=limit or container.settings.default_page_size,
    )
    return serialize_session_page(result)


@router.get("/{session_id}")
def get_session(
    session_id: UUID,
    request: Request,
    identity: Identity = Depends(get_current_identity),
) -> dict[str, object]:
    """Return one session visible to the caller."""
    container: AppContainer = request.app.state.container
    view = container.booking_service.get_session(identity, session_id)
    return envelope(serialize_session(view))


@router.post("", status_code=status.HTTP_201_CREATED)
def book_session(
    body: BookSessionIn,
    request: Request,
    identity: Identity = Depends(get_current_identity),
) -> dict[str, object]:
    """Book a session with an artist."""
    container: AppContainer = request.app.state.container
    view = container.booking_service.book_session(identity, body.to_request())
    return envelope(serialize_session(view), message="Session booked successfully")


@router.put("/{session_id}/status")
def update_session_status(
    session_id: UUID,
    body: StatusUpdateIn,
    request: Request,
    identity: Identity = Depends(get_current_identity),
) -> dict[str, object]:
    """Change the status of a session."""
    container: AppContainer = request.app.state.container
    view = container.booking_service.update_status(identity, session_id, body.status)
    return envelope(
        serialize_session(view), message="Session status updated successfully"
    )


@router.put("/{session_id}/rate")
def rate_session(
    session_id: UUID,
    body: RateSessionIn,
    request: Request,
    identity: Identity = Depends(get_current_identity),
) -> dict[str, object]:
    """Rate a completed session."""
    container: AppContainer = request.app.state.container
    view = container.booking_service.rate_session(
        identity, session_id, body.score, body.review
    )
    return envelope(serialize_session(view), message="Session rated successfully")
