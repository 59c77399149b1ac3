"""Bearer token authentication for API routes."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from folk_art_platform.domain.errors import ForbiddenError, UnauthorizedError
from folk_art_platform.domain.models import Identity

if TYPE_CHECKING:
    from folk_art_platform.containers import AppContainer

bearer_scheme = HTTPBearer(auto_error=False)

_NOT_AUTHORIZED = "Not authorized to access this route"


def create_access_token(
    identity_id: UUID,
    secret: str,
    algorithm: str = "HS256",
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed token for an identity."""
    expire = datetime.now(tz=UTC) + (expires_delta or timedelta(days=30))
    payload = {"sub": str(identity_id), "exp": expire}
    return jwt.encode(payload, secret, algorithm=algorithm)


def get_current_identity(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Identity:
    """Resolve the caller from the bearer token."""
    if credentials is None:
        raise UnauthorizedError(_NOT_AUTHORIZED)
    container: AppContainer = request.app.state.container
    settings = container.settings
    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as exc:
        raise UnauthorizedError(_NOT_AUTHORIZED) from exc

    subject = payload.get("sub") or payload.get("id")
    try:
        identity_id = UUID(str(subject))
    except ValueError as exc:
        raise UnauthorizedError(_NOT_AUTHORIZED) from exc

    identity = container.user_service.get_identity(identity_id)
    if identity is None:
        raise UnauthorizedError(_NOT_AUTHORIZED)
    return identity


def require_role(*roles: str) -> Callable[..., Identity]:
    """Build a dependency that admits only callers with one of the roles."""

    def dependency(identity: Identity = Depends(get_current_identity)) -> Identity:
        if identity.role not in roles:
            raise ForbiddenError(
                f"User role {identity.role} is not authorized to access this route"
            )
        return identity

    return dependency
