"""Domain models for platform identities."""

from dataclasses import dataclass, field
from uuid import UUID

ROLE_CUSTOMER = "customer"
ROLE_ARTIST = "artist"
ROLE_ADMIN = "admin"
ROLES = (ROLE_CUSTOMER, ROLE_ARTIST, ROLE_ADMIN)

# Older accounts were created with the role "user".
_ROLE_ALIASES = {"user": ROLE_CUSTOMER}


def normalize_role(raw: str | None) -> str:
    """Map a stored role onto one of the known roles."""
    value = (raw or ROLE_CUSTOMER).strip().lower()
    value = _ROLE_ALIASES.get(value, value)
    return value if value in ROLES else ROLE_CUSTOMER


@dataclass(frozen=True)
class Preferences:
    """Artforms and interests a user wants to see."""

    artforms: list[str] = field(default_factory=list)
    interests: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Identity:
    """Represents an account stored in the database."""

    id: UUID
    name: str
    email: str
    role: str = ROLE_CUSTOMER
    phone: str | None = None
    profile_image: str = ""
    preferences: Preferences = field(default_factory=Preferences)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


@dataclass(frozen=True)
class IdentitySummary:
    """Display-friendly view of an identity."""

    id: UUID
    name: str
    email: str
    profile_image: str = ""
