"""User account endpoints."""

from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import APIRouter, Depends, Request

from folk_art_platform.api.auth import get_current_identity, require_role
from folk_art_platform.api.schemas import PreferencesIn
from folk_art_platform.api.serializers import envelope, serialize_identity
from folk_art_platform.domain.models import ROLE_ADMIN, Identity

if TYPE_CHECKING:
    from folk_art_platform.containers import AppContainer

router = APIRouter(prefix="/users", tags=["users"])


@router.get("")
def list_users(
    request: Request, identity: Identity = Depends(require_role(ROLE_ADMIN))
) -> dict[str, object]:
    """Return all users (admin only)."""
    container: AppContainer = request.app.state.container
    users = container.user_service.list_users(identity)
    return {
        "success": True,
        "count": len(users),
        "data": [serialize_identity(user) for user in users],
    }


@router.put("/preferences")
def update_preferences(
    body: PreferencesIn,
    request: Request,
    identity: Identity = Depends(get_current_identity),
) -> dict[str, object]:
    """Replace the caller's preferences."""
    container: AppContainer = request.app.state.container
    user = container.user_service.update_preferences(
        identity, body.artforms, body.interests
    )
    return envelope(serialize_identity(user), message="Preferences updated successfully")


@router.get("/{user_id}")
def get_user(
    user_id: UUID,
    request: Request,
    identity: Identity = Depends(get_current_identity),
) -> dict[str, object]:
    """Return a user profile to its owner or an admin."""
    container: AppContainer = request.app.state.container
    return envelope(serialize_identity(container.user_service.get_user(identity, user_id)))


@router.delete("/{user_id}")
def delete_user(
    user_id: UUID,
    request: Request,
    identity: Identity = Depends(get_current_identity),
) -> dict[str, object]:
    """Delete an account, by its owner or an admin."""
    container: AppContainer = request.app.state.container
    container.user_service.delete_user(identity, user_id)
    return {"success": True, "message": "Account deleted successfully"}
