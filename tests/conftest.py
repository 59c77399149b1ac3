"""Shared test fixtures."""

import threading
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from folk_art_platform.api.auth import create_access_token
from folk_art_platform.config import Settings
from folk_art_platform.containers import AppContainer
from folk_art_platform.domain.artists import (
    ArtistFilters,
    ArtistLocation,
    ArtistPricing,
    ArtistProfile,
    ArtistRatings,
    PortfolioItem,
    Specialization,
)
from folk_art_platform.domain.errors import ConflictError, InvalidStateError
from folk_art_platform.domain.models import (
    ROLE_ADMIN,
    ROLE_ARTIST,
    ROLE_CUSTOMER,
    Identity,
    IdentitySummary,
    Preferences,
)
from folk_art_platform.domain.products import (
    Product,
    ProductCustomization,
    ProductDimensions,
    ProductFilters,
    ProductImage,
    ProductInventory,
    ProductPrice,
    ProductShipping,
    ShippingOption,
)
from folk_art_platform.domain.sessions import (
    BLOCKING_STATUSES,
    RatedSession,
    SessionDraft,
    SessionFilters,
    SessionRating,
    SessionRecord,
)
from folk_art_platform.services.artists import ArtistRepository, ArtistService
from folk_art_platform.services.bookings import BookingService, SessionRepository
from folk_art_platform.services.products import ProductRepository, ProductService
from folk_art_platform.services.users import UserRepository, UserService

JWT_SECRET = "test-jwt-secret"


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory user repository for tests.

    Deleting a user cascades to its artist profile and is refused while
    sessions reference it, as the foreign keys do.
    """

    artist_repository: "InMemoryArtistRepository | None" = None
    session_repository: "InMemorySessionRepository | None" = None
    users: dict[UUID, Identity] = field(default_factory=dict)

    def add(self, name: str, role: str = ROLE_CUSTOMER) -> Identity:
        user = Identity(
            id=uuid4(),
            name=name,
            email=f"{name.lower().replace(' ', '.')}@example.com",
            role=role,
            profile_image=f"https://img.example.com/{name.lower()}.png",
        )
        self.users[user.id] = user
        return user

    def get_user(self, user_id: UUID) -> Identity | None:
        return self.users.get(user_id)

    def list_users(self) -> list[Identity]:
        return list(self.users.values())

    def get_summaries(self, user_ids: list[UUID]) -> dict[UUID, IdentitySummary]:
        return {
            user_id: IdentitySummary(
                id=user.id,
                name=user.name,
                email=user.email,
                profile_image=user.profile_image,
            )
            for user_id in user_ids
            if (user := self.users.get(user_id)) is not None
        }

    def update_role(self, user_id: UUID, role: str) -> None:
        self.users[user_id] = replace(self.users[user_id], role=role)

    def update_preferences(self, user_id: UUID, preferences: Preferences) -> Identity:
        self.users[user_id] = replace(self.users[user_id], preferences=preferences)
        return self.users[user_id]

    def delete_user(self, user_id: UUID) -> None:
        artist = (
            self.artist_repository.get_by_user(user_id)
            if self.artist_repository
            else None
        )
        if self.session_repository and any(
            session.customer_id == user_id
            or (artist is not None and session.artist_id == artist.id)
            for session in self.session_repository.sessions.values()
        ):
            raise InvalidStateError("Account has booked sessions and cannot be deleted")
        if artist is not None:
            del self.artist_repository.artists[artist.id]
        del self.users[user_id]


@dataclass
class InMemoryArtistRepository(ArtistRepository):
    """In-memory artist repository for tests."""

    artists: dict[UUID, ArtistProfile] = field(default_factory=dict)

    def add(  # noqa: PLR0913
        self,
        user_id: UUID,
        session_rate: float = 500,
        state: str = "Maharashtra",
        city: str = "Pune",
        artform: str = "warli",
        category: str = "painting",
        bio: str = "Warli painter from the Sahyadri foothills",
        is_active: bool = True,
    ) -> ArtistProfile:
        artist = ArtistProfile(
            id=uuid4(),
            user_id=user_id,
            bio=bio,
            location=ArtistLocation(state=state, city=city),
            pricing=ArtistPricing(session_rate=session_rate),
            specializations=[
                Specialization(artform=artform, category=category, experience=5)
            ],
            is_active=is_active,
            joined_at=datetime.now(tz=UTC),
        )
        self.artists[artist.id] = artist
        return artist

    def get_artist(self, artist_id: UUID) -> ArtistProfile | None:
        return self.artists.get(artist_id)

    def get_artists(self, artist_ids: list[UUID]) -> dict[UUID, ArtistProfile]:
        return {
            artist_id: self.artists[artist_id]
            for artist_id in artist_ids
            if artist_id in self.artists
        }

    def get_by_user(self, user_id: UUID) -> ArtistProfile | None:
        for artist in self.artists.values():
            if artist.user_id == user_id:
                return artist
        return None

    def list_artists(
        self, filters: ArtistFilters, sort: str, offset: int, limit: int
    ) -> tuple[list[ArtistProfile], int]:
        matches = [
            artist for artist in self.artists.values() if _matches(artist, filters)
        ]
        if sort == "rating":
            matches.sort(key=lambda artist: artist.ratings.average, reverse=True)
        elif sort == "price":
            matches.sort(key=lambda artist: artist.pricing.session_rate)
        else:
            matches.sort(key=lambda artist: artist.joined_at, reverse=True)
        return matches[offset : offset + limit], len(matches)

    def create_artist(self, user_id: UUID, payload: dict[str, object]) -> ArtistProfile:
        if any(artist.user_id == user_id for artist in self.artists.values()):
            raise InvalidStateError("Artist profile already exists")
        location = payload["location"]
        pricing = payload["pricing"]
        artist = ArtistProfile(
            id=uuid4(),
            user_id=user_id,
            bio=str(payload["bio"]),
            location=ArtistLocation(**location),
            pricing=ArtistPricing(**pricing),
            specializations=[
                Specialization(**spec) for spec in payload.get("specializations", [])
            ],
            joined_at=datetime.now(tz=UTC),
        )
        self.artists[artist.id] = artist
        return artist

    def update_artist(
        self, artist_id: UUID, payload: dict[str, object]
    ) -> ArtistProfile:
        current = self.artists[artist_id]
        changes: dict[str, object] = {}
        if "bio" in payload:
            changes["bio"] = payload["bio"]
        if "is_active" in payload:
            changes["is_active"] = payload["is_active"]
        if "location" in payload:
            changes["location"] = ArtistLocation(**payload["location"])
        if "pricing" in payload:
            changes["pricing"] = ArtistPricing(**payload["pricing"])
        if "specializations" in payload:
            changes["specializations"] = [
                Specialization(**spec) for spec in payload["specializations"]
            ]
        self.artists[artist_id] = replace(current, **changes)
        return self.artists[artist_id]

    def add_portfolio_item(self, artist_id: UUID, item: PortfolioItem) -> PortfolioItem:
        stored = replace(item, created_at=item.created_at or datetime.now(tz=UTC))
        current = self.artists[artist_id]
        self.artists[artist_id] = replace(
            current, portfolio=[*current.portfolio, stored]
        )
        return stored

    def set_ratings(self, artist_id: UUID, ratings: ArtistRatings) -> None:
        self.artists[artist_id] = self.artists[artist_id].with_ratings(ratings)


@dataclass
class InMemorySessionRepository(SessionRepository):
    """In-memory session repository for tests.

    Mirrors the database: overlapping blocking sessions are rejected on insert
    and on reactivation, and rating plus aggregate update happen under one lock.
    """

    artist_repository: InMemoryArtistRepository
    sessions: dict[UUID, SessionRecord] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def create_session(self, draft: SessionDraft) -> SessionRecord:
        request = draft.request
        with self._lock:
            if self._overlapping(
                request.artist_id, request.scheduled_date, request.ends_at
            ):
                raise ConflictError("Artist is not available at the requested time")
            now = datetime.now(tz=UTC)
            session = SessionRecord(
                id=uuid4(),
                customer_id=draft.customer_id,
                artist_id=request.artist_id,
                session_type=request.session_type,
                title=request.title,
                description=request.description,
                scheduled_date=request.scheduled_date,
                duration=request.duration,
                format=request.format,
                location=request.location,
                meeting_link=request.meeting_link,
                pricing=request.pricing,
                status=draft.status,
                payment_status=draft.payment_status,
                created_at=now,
                updated_at=now,
            )
            self.sessions[session.id] = session
        return session

    def get_session(self, session_id: UUID) -> SessionRecord | None:
        return self.sessions.get(session_id)

    def list_sessions(
        self, filters: SessionFilters, offset: int, limit: int
    ) -> tuple[list[SessionRecord], int]:
        matches = [
            session
            for session in self.sessions.values()
            if (filters.customer_id is None or session.customer_id == filters.customer_id)
            and (filters.artist_id is None or session.artist_id == filters.artist_id)
            and (filters.status is None or session.status == filters.status)
            and (
                filters.scheduled_from is None
                or session.scheduled_date >= filters.scheduled_from
            )
        ]
        matches.sort(key=lambda session: session.scheduled_date)
        return matches[offset : offset + limit], len(matches)

    def find_overlapping(
        self,
        artist_id: UUID,
        start: datetime,
        end: datetime,
        exclude_id: UUID | None = None,
    ) -> SessionRecord | None:
        return self._overlapping(artist_id, start, end, exclude_id)

    def update_status(self, session_id: UUID, status: str) -> SessionRecord:
        with self._lock:
            current = self.sessions[session_id]
            if (
                status in BLOCKING_STATUSES
                and not current.is_blocking
                and self._overlapping(
                    current.artist_id, current.scheduled_date, current.ends_at, session_id
                )
            ):
                raise ConflictError("Artist is not available at the requested time")
            session = replace(current, status=status, updated_at=datetime.now(tz=UTC))
            self.sessions[session_id] = session
        return session

    def record_rating(
        self, session_id: UUID, rating: SessionRating
    ) -> RatedSession | None:
        with self._lock:
            session = self.sessions[session_id]
            if session.status != "completed" or session.rating is not None:
                return None
            session = replace(session, rating=rating)
            self.sessions[session_id] = session
            artist = self.artist_repository.artists[session.artist_id]
            ratings = artist.ratings.add(rating.score)
            self.artist_repository.set_ratings(artist.id, ratings)
        return RatedSession(session=session, ratings=ratings)

    def list_rating_scores(self, artist_id: UUID) -> list[int]:
        return [
            session.rating.score
            for session in self.sessions.values()
            if session.artist_id == artist_id and session.rating is not None
        ]

    def _overlapping(
        self,
        artist_id: UUID,
        start: datetime,
        end: datetime,
        exclude_id: UUID | None = None,
    ) -> SessionRecord | None:
        for session in self.sessions.values():
            if (
                session.id != exclude_id
                and session.artist_id == artist_id
                and session.is_blocking
                and session.overlaps(start, end)
            ):
                return session
        return None


@dataclass
class InMemoryProductRepository(ProductRepository):
    """In-memory product repository for tests."""

    products: dict[UUID, Product] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def add(  # noqa: PLR0913
        self,
        seller_id: UUID,
        title: str = "Warli harvest scene",
        category: str = "painting",
        artform: str = "warli",
        amount: float = 2500,
        featured: bool = False,
        status: str = "active",
        tags: list[str] | None = None,
        created_at: datetime | None = None,
    ) -> Product:
        product = Product(
            id=uuid4(),
            seller_id=seller_id,
            title=title,
            description=f"{title} on handmade paper",
            category=category,
            artform=artform,
            price=ProductPrice(amount=amount),
            status=status,
            tags=tags or [],
            featured=featured,
            created_at=created_at or datetime.now(tz=UTC),
        )
        self.products[product.id] = product
        return product

    def get_product(self, product_id: UUID) -> Product | None:
        return self.products.get(product_id)

    def list_products(
        self, filters: ProductFilters, sort: str, offset: int, limit: int
    ) -> tuple[list[Product], int]:
        matches = [
            product
            for product in self.products.values()
            if _product_matches(product, filters)
        ]
        if sort == "price":
            matches.sort(key=lambda product: product.price.amount)
        elif sort == "price_desc":
            matches.sort(key=lambda product: product.price.amount, reverse=True)
        elif sort == "rating":
            matches.sort(key=lambda product: product.rating_average, reverse=True)
        elif sort == "views":
            matches.sort(key=lambda product: product.views, reverse=True)
        else:
            matches.sort(key=lambda product: product.created_at, reverse=True)
        return matches[offset : offset + limit], len(matches)

    def create_product(self, seller_id: UUID, payload: dict[str, object]) -> Product:
        now = datetime.now(tz=UTC)
        product = Product(
            id=uuid4(),
            seller_id=seller_id,
            title=str(payload["title"]),
            description=str(payload["description"]),
            category=str(payload["category"]),
            artform=str(payload["artform"]),
            price=ProductPrice(**payload["price"]),
            created_at=now,
            updated_at=now,
        )
        product = replace(product, **_product_changes(payload))
        self.products[product.id] = product
        return product

    def update_product(self, product_id: UUID, payload: dict[str, object]) -> Product:
        product = replace(
            self.products[product_id],
            updated_at=datetime.now(tz=UTC),
            **_product_changes(payload),
        )
        self.products[product_id] = product
        return product

    def delete_product(self, product_id: UUID) -> None:
        del self.products[product_id]

    def increment_views(self, product_id: UUID) -> Product | None:
        with self._lock:
            product = self.products.get(product_id)
            if product is None:
                return None
            product = replace(product, views=product.views + 1)
            self.products[product_id] = product
        return product


def _product_changes(payload: dict[str, object]) -> dict[str, object]:
    changes = {
        key: payload[key]
        for key in (
            "title",
            "description",
            "category",
            "artform",
            "materials",
            "techniques",
            "status",
            "tags",
            "featured",
        )
        if key in payload
    }
    if "price" in payload:
        changes["price"] = ProductPrice(**payload["price"])
    if "images" in payload:
        changes["images"] = [ProductImage(**image) for image in payload["images"]]
    if "dimensions" in payload:
        changes["dimensions"] = ProductDimensions(**payload["dimensions"])
    if "customization" in payload:
        changes["customization"] = ProductCustomization(**payload["customization"])
    if "inventory" in payload:
        changes["inventory"] = ProductInventory(**payload["inventory"])
    if "shipping" in payload:
        shipping = payload["shipping"]
        changes["shipping"] = ProductShipping(
            domestic=ShippingOption(**shipping.get("domestic", {"available": True})),
            international=ShippingOption(
                **shipping.get("international", {"available": False})
            ),
        )
    return changes


def _product_matches(product: Product, filters: ProductFilters) -> bool:  # noqa: PLR0911
    if product.status != "active":
        return False
    if filters.category and product.category != filters.category:
        return False
    if filters.artform and product.artform != filters.artform:
        return False
    if filters.min_price is not None and product.price.amount < filters.min_price:
        return False
    if filters.max_price is not None and product.price.amount > filters.max_price:
        return False
    if filters.featured_only and not product.featured:
        return False
    if filters.search:
        term = filters.search.lower()
        return (
            term in product.title.lower()
            or term in product.description.lower()
            or term in product.tags
        )
    return True


def _matches(artist: ArtistProfile, filters: ArtistFilters) -> bool:  # noqa: PLR0911
    if filters.active_only and not artist.is_active:
        return False
    if filters.artform and not any(
        spec.artform == filters.artform for spec in artist.specializations
    ):
        return False
    if filters.category and not any(
        spec.category == filters.category for spec in artist.specializations
    ):
        return False
    if filters.state and filters.state.lower() not in artist.location.state.lower():
        return False
    if filters.city and filters.city.lower() not in artist.location.city.lower():
        return False
    if filters.min_rating is not None and artist.ratings.average < filters.min_rating:
        return False
    if (
        filters.max_price is not None
        and artist.pricing.session_rate > filters.max_price
    ):
        return False
    if filters.search:
        term = filters.search.lower()
        descriptions = " ".join(
            spec.description or "" for spec in artist.specializations
        )
        return term in artist.bio.lower() or term in descriptions.lower()
    return True


@dataclass
class World:
    """Seeded identities and the artist profile they book against."""

    customer: Identity
    other_customer: Identity
    artist_user: Identity
    admin: Identity
    artist: ArtistProfile


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=(
            "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
            "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
            "c2lnbmF0dXJl"
        ),
        jwt_secret=JWT_SECRET,
    )


@pytest.fixture
def artist_repository() -> InMemoryArtistRepository:
    return InMemoryArtistRepository()


@pytest.fixture
def user_repository(
    artist_repository: InMemoryArtistRepository,
) -> InMemoryUserRepository:
    return InMemoryUserRepository(artist_repository=artist_repository)


@pytest.fixture
def session_repository(
    artist_repository: InMemoryArtistRepository,
    user_repository: InMemoryUserRepository,
) -> InMemorySessionRepository:
    repository = InMemorySessionRepository(artist_repository=artist_repository)
    user_repository.session_repository = repository
    return repository


@pytest.fixture
def product_repository() -> InMemoryProductRepository:
    return InMemoryProductRepository()


@pytest.fixture
def user_service(user_repository: InMemoryUserRepository) -> UserService:
    return UserService(user_repository)


@pytest.fixture
def artist_service(
    artist_repository: InMemoryArtistRepository, user_service: UserService
) -> ArtistService:
    return ArtistService(repository=artist_repository, user_service=user_service)


@pytest.fixture
def booking_service(
    session_repository: InMemorySessionRepository,
    artist_service: ArtistService,
    user_service: UserService,
) -> BookingService:
    return BookingService(
        session_repository=session_repository,
        artist_service=artist_service,
        user_service=user_service,
    )


@pytest.fixture
def product_service(
    product_repository: InMemoryProductRepository, artist_service: ArtistService
) -> ProductService:
    return ProductService(repository=product_repository, artist_service=artist_service)


@pytest.fixture
def world(
    user_repository: InMemoryUserRepository,
    artist_repository: InMemoryArtistRepository,
) -> World:
    artist_user = user_repository.add("Jivya Mashe", role=ROLE_ARTIST)
    return World(
        customer=user_repository.add("Asha"),
        other_customer=user_repository.add("Ravi"),
        artist_user=artist_user,
        admin=user_repository.add("Admin", role=ROLE_ADMIN),
        artist=artist_repository.add(artist_user.id, session_rate=500),
    )


@pytest.fixture
def container(
    settings: Settings,
    user_service: UserService,
    artist_service: ArtistService,
    booking_service: BookingService,
    product_service: ProductService,
) -> AppContainer:
    return AppContainer(
        settings=settings,
        user_service=user_service,
        artist_service=artist_service,
        booking_service=booking_service,
        product_service=product_service,
    )


def auth_headers(identity: Identity) -> dict[str, str]:
    """Bearer header for an identity signed with the test secret."""
    token = create_access_token(identity.id, JWT_SECRET)
    return {"Authorization": f"Bearer {token}"}
