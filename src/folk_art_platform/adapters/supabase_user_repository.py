"""Supabase-backed user repository."""

from dataclasses import dataclass
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from folk_art_platform.domain.errors import InvalidStateError
from folk_art_platform.domain.models import (
    Identity,
    IdentitySummary,
    Preferences,
    normalize_role,
)
from folk_art_platform.services.users import UserRepository

_USER_COLUMNS = "id, name, email, role, phone, profile_image, preferences"

# foreign_key_violation: sessions still point at the account.
_FOREIGN_KEY_VIOLATION = "23503"


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for identity persistence."""

    client: Client

    def get_user(self, user_id: UUID) -> Identity | None:
        """Return the user for an id, if present."""
        response = (
            self.client.table("users")
            .select(_USER_COLUMNS)
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_identity(response.data[0])

    def list_users(self) -> list[Identity]:
        """Return all users, newest first."""
        response = (
            self.client.table("users")
            .select(_USER_COLUMNS)
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_identity(row) for row in response.data or []]

    def get_summaries(self, user_ids: list[UUID]) -> dict[UUID, IdentitySummary]:
        """Return name, email and image for each requested user."""
        response = (
            self.client.table("users")
            .select("id, name, email, profile_image")
            .in_("id", [str(user_id) for user_id in user_ids])
            .execute()
        )
        summaries = {}
        for row in response.data or []:
            summary = IdentitySummary(
                id=UUID(row["id"]),
                name=row.get("name") or "",
                email=row.get("email") or "",
                profile_image=row.get("profile_image") or "",
            )
            summaries[summary.id] = summary
        return summaries

    def update_role(self, user_id: UUID, role: str) -> None:
        """Update the role column for a user."""
        self.client.table("users").update({"role": role}).eq(
            "id", str(user_id)
        ).execute()

    def update_preferences(self, user_id: UUID, preferences: Preferences) -> Identity:
        """Replace the stored preferences and return the user."""
        response = (
            self.client.table("users")
            .update(
                {
                    "preferences": {
                        "artforms": preferences.artforms,
                        "interests": preferences.interests,
                    }
                }
            )
            .eq("id", str(user_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update user preferences")
        return _parse_identity(response.data[0])

    def delete_user(self, user_id: UUID) -> None:
        """Delete the user row; its artist profile and products go with it."""
        try:
            self.client.table("users").delete().eq("id", str(user_id)).execute()
        except APIError as exc:
            if exc.code == _FOREIGN_KEY_VIOLATION:
                raise InvalidStateError(
                    "Account has booked sessions and cannot be deleted"
                ) from exc
            raise


def _parse_identity(row: dict[str, object]) -> Identity:
    raw_preferences = row.get("preferences")
    preferences = raw_preferences if isinstance(raw_preferences, dict) else {}
    return Identity(
        id=UUID(str(row["id"])),
        name=str(row.get("name") or ""),
        email=str(row.get("email") or ""),
        role=normalize_role(row.get("role")),
        phone=row.get("phone"),
        profile_image=str(row.get("profile_image") or ""),
        preferences=Preferences(
            artforms=list(preferences.get("artforms") or []),
            interests=list(preferences.get("interests") or []),
        ),
    )
