"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from folk_art_platform.adapters.supabase_artist_repository import (
    SupabaseArtistRepository,
)
from folk_art_platform.adapters.supabase_product_repository import (
    SupabaseProductRepository,
)
from folk_art_platform.adapters.supabase_session_repository import (
    SupabaseSessionRepository,
)
from folk_art_platform.adapters.supabase_user_repository import SupabaseUserRepository
from folk_art_platform.config import Settings
from folk_art_platform.services.artists import ArtistService
from folk_art_platform.services.bookings import BookingService
from folk_art_platform.services.products import ProductService
from folk_art_platform.services.users import UserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    user_service: UserService
    artist_service: ArtistService
    booking_service: BookingService
    product_service: ProductService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    user_service = UserService(SupabaseUserRepository(supabase_client))
    artist_service = ArtistService(
        repository=SupabaseArtistRepository(supabase_client),
        user_service=user_service,
    )
    booking_service = BookingService(
        session_repository=SupabaseSessionRepository(supabase_client),
        artist_service=artist_service,
        user_service=user_service,
        strict_transitions=resolved_settings.strict_status_transitions,
        max_page_size=resolved_settings.max_page_size,
    )
    product_service = ProductService(
        repository=SupabaseProductRepository(supabase_client),
        artist_service=artist_service,
    )
    return AppContainer(
        settings=resolved_settings,
        user_service=user_service,
        artist_service=artist_service,
        booking_service=booking_service,
        product_service=product_service,
    )
