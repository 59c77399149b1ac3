"""User-related business logic."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from folk_art_platform.domain.artists import ARTFORMS, CATEGORIES
from folk_art_platform.domain.errors import (
    ForbiddenError,
    InvalidArgumentError,
    NotFoundError,
)
from folk_art_platform.domain.models import (
    ROLE_ARTIST,
    Identity,
    IdentitySummary,
    Preferences,
)

logger = logging.getLogger(__name__)


class UserRepository(Protocol):
    """Persistence interface for identities."""

    def get_user(self, user_id: UUID) -> Identity | None:
        """Return the identity for an id, if present."""

    def list_users(self) -> list[Identity]:
        """Return all identities."""

    def get_summaries(self, user_ids: list[UUID]) -> dict[UUID, IdentitySummary]:
        """Return display summaries keyed by identity id."""

    def update_role(self, user_id: UUID, role: str) -> None:
        """Change the role of an identity."""

    def update_preferences(self, user_id: UUID, preferences: Preferences) -> Identity:
        """Replace the preferences of an identity and return it."""

    def delete_user(self, user_id: UUID) -> None:
        """Remove an identity.

        Raises InvalidStateError while sessions still reference it.
        """


@dataclass
class UserService:
    """Application service for identity lookups and profile settings."""

    repository: UserRepository

    def get_identity(self, user_id: UUID) -> Identity | None:
        """Return the identity for an authenticated subject."""
        return self.repository.get_user(user_id)

    def summaries(self, user_ids: list[UUID]) -> dict[UUID, IdentitySummary]:
        """Return display summaries for a set of identities."""
        unique_ids = list(dict.fromkeys(user_ids))
        if not unique_ids:
            return {}
        return self.repository.get_summaries(unique_ids)

    def list_users(self, caller: Identity) -> list[Identity]:
        """Return all users; admins only."""
        if not caller.is_admin:
            raise ForbiddenError("Not authorized to list users")
        return self.repository.list_users()

    def get_user(self, caller: Identity, user_id: UUID) -> Identity:
        """Return a user the caller is allowed to see."""
        user = self.repository.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        if caller.id != user_id and not caller.is_admin:
            raise ForbiddenError("Not authorized to view this profile")
        return user

    def update_preferences(
        self, caller: Identity, artforms: list[str], interests: list[str]
    ) -> Identity:
        """Replace the caller's artform and interest preferences."""
        unknown = [value for value in artforms if value not in ARTFORMS]
        unknown += [value for value in interests if value not in CATEGORIES]
        if unknown:
            raise InvalidArgumentError(f"Unknown preferences: {', '.join(unknown)}")
        return self.repository.update_preferences(
            caller.id, Preferences(artforms=artforms, interests=interests)
        )

    def delete_user(self, caller: Identity, user_id: UUID) -> None:
        """Delete an account; users may delete their own, admins any."""
        if self.repository.get_user(user_id) is None:
            raise NotFoundError("User not found")
        if caller.id != user_id and not caller.is_admin:
            raise ForbiddenError("Not authorized to delete this account")
        self.repository.delete_user(user_id)
        logger.info("Account deleted", extra={"user_id": str(user_id)})

    def promote_to_artist(self, user_id: UUID) -> None:
        """Give the identity the artist role."""
        self.repository.update_role(user_id, ROLE_ARTIST)
