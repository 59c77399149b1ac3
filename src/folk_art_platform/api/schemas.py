"""Pydantic models for API request bodies."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from folk_art_platform.domain.artists import ARTFORMS, CATEGORIES, PortfolioItem
from folk_art_platform.domain.products import (
    DIMENSION_UNITS,
    PRODUCT_CATEGORIES,
    PRODUCT_STATUSES,
)
from folk_art_platform.domain.sessions import (
    SESSION_FORMATS,
    SESSION_TYPES,
    BookingRequest,
    SessionLocation,
    SessionPricing,
)


def _one_of(value: str | None, allowed: tuple[str, ...], label: str) -> str | None:
    if value is not None and value not in allowed:
        raise ValueError(f"{label} must be one of: {', '.join(allowed)}")
    return value


class RequestModel(BaseModel):
    """Base model accepting both snake_case and camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SessionLocationIn(RequestModel):
    """Venue of an in-person session."""

    address: str | None = None
    city: str | None = None
    state: str | None = None


class SessionPricingIn(RequestModel):
    """Agreed session price."""

    amount: float = Field(ge=0)
    currency: str = "INR"


class BookSessionIn(RequestModel):
    """Body for booking a session."""

    artist_id: UUID
    session_type: str
    title: str = Field(min_length=1)
    description: str | None = Field(default=None, max_length=500)
    scheduled_date: datetime
    duration: int = Field(gt=0)
    format: str
    location: SessionLocationIn | None = None
    meeting_link: str | None = None
    pricing: SessionPricingIn

    @field_validator("session_type")
    @classmethod
    def _check_session_type(cls, value: str) -> str:
        return _one_of(value, SESSION_TYPES, "sessionType")

    @field_validator("format")
    @classmethod
    def _check_format(cls, value: str) -> str:
        return _one_of(value, SESSION_FORMATS, "format")

    def to_request(self) -> BookingRequest:
        """Convert to the domain booking request."""
        location = self.location
        return BookingRequest(
            artist_id=self.artist_id,
            session_type=self.session_type,
            title=self.title,
            description=self.description,
            scheduled_date=self.scheduled_date,
            duration=self.duration,
            format=self.format,
            location=(
                SessionLocation(
                    address=location.address, city=location.city, state=location.state
                )
                if location
                else None
            ),
            meeting_link=self.meeting_link,
            pricing=SessionPricing(
                amount=self.pricing.amount, currency=self.pricing.currency
            ),
        )


class StatusUpdateIn(RequestModel):
    """Body for changing a session status."""

    status: str


class RateSessionIn(RequestModel):
    """Body for rating a session."""

    score: int
    review: str | None = None


class SpecializationIn(RequestModel):
    """An artform the artist practices."""

    artform: str
    category: str
    experience: int = Field(ge=0)
    description: str | None = None

    @field_validator("artform")
    @classmethod
    def _check_artform(cls, value: str) -> str:
        return _one_of(value, ARTFORMS, "artform")

    @field_validator("category")
    @classmethod
    def _check_category(cls, value: str) -> str:
        return _one_of(value, CATEGORIES, "category")


class ArtistLocationIn(RequestModel):
    """Where the artist is based."""

    state: str = Field(min_length=1)
    city: str = Field(min_length=1)
    region: str | None = None


class ArtistPricingIn(RequestModel):
    """Base session rate."""

    session_rate: float = Field(ge=0)
    currency: str = "INR"


class PortfolioItemIn(RequestModel):
    """A portfolio entry."""

    title: str = Field(min_length=1)
    description: str | None = None
    images: list[str] = Field(default_factory=list)
    category: str | None = None
    artform: str | None = None

    @field_validator("artform")
    @classmethod
    def _check_artform(cls, value: str | None) -> str | None:
        return _one_of(value, ARTFORMS, "artform")

    @field_validator("category")
    @classmethod
    def _check_category(cls, value: str | None) -> str | None:
        return _one_of(value, CATEGORIES, "category")

    def to_item(self) -> PortfolioItem:
        """Convert to the domain portfolio item."""
        return PortfolioItem(
            title=self.title,
            description=self.description,
            images=list(self.images),
            category=self.category,
            artform=self.artform,
        )


class ArtistCreateIn(RequestModel):
    """Body for creating an artist profile."""

    bio: str = Field(min_length=1, max_length=1000)
    specializations: list[SpecializationIn] = Field(default_factory=list)
    location: ArtistLocationIn
    pricing: ArtistPricingIn


class ArtistUpdateIn(RequestModel):
    """Body for updating an artist profile. Ratings are not accepted."""

    bio: str | None = Field(default=None, min_length=1, max_length=1000)
    specializations: list[SpecializationIn] | None = None
    location: ArtistLocationIn | None = None
    pricing: ArtistPricingIn | None = None
    is_active: bool | None = None


class PreferencesIn(RequestModel):
    """Body for updating user preferences."""

    artforms: list[str] = Field(default_factory=list)
    interests: list[str] = Field(default_factory=list)


class ProductImageIn(RequestModel):
    url: str = Field(min_length=1)
    alt: str | None = None
    is_primary: bool = False


class ProductPriceIn(RequestModel):
    """Sale price and optional pre-discount price."""

    amount: float = Field(ge=0)
    currency: str = "INR"
    original_price: float | None = Field(default=None, ge=0)


class ProductDimensionsIn(RequestModel):
    length: float | None = Field(default=None, ge=0)
    width: float | None = Field(default=None, ge=0)
    height: float | None = Field(default=None, ge=0)
    weight: float | None = Field(default=None, ge=0)
    unit: str = "cm"

    @field_validator("unit")
    @classmethod
    def _check_unit(cls, value: str) -> str:
        return _one_of(value, DIMENSION_UNITS, "unit")


class ProductCustomizationIn(RequestModel):
    available: bool = False
    options: list[str] = Field(default_factory=list)
    additional_cost: float | None = Field(default=None, ge=0)


class ProductInventoryIn(RequestModel):
    quantity: int = Field(default=0, ge=0)
    is_unlimited: bool = False


class ShippingOptionIn(RequestModel):
    available: bool
    cost: float | None = Field(default=None, ge=0)
    estimated_days: int | None = Field(default=None, ge=0)


class ProductShippingIn(RequestModel):
    domestic: ShippingOptionIn = Field(
        default_factory=lambda: ShippingOptionIn(available=True)
    )
    international: ShippingOptionIn = Field(
        default_factory=lambda: ShippingOptionIn(available=False)
    )


class ProductFieldsIn(RequestModel):
    """Validators shared by product create and update bodies."""

    @field_validator("category", check_fields=False)
    @classmethod
    def _check_category(cls, value: str | None) -> str | None:
        return _one_of(value, PRODUCT_CATEGORIES, "category")

    @field_validator("artform", check_fields=False)
    @classmethod
    def _check_artform(cls, value: str | None) -> str | None:
        return _one_of(value, ARTFORMS, "artform")

    @field_validator("status", check_fields=False)
    @classmethod
    def _check_status(cls, value: str | None) -> str | None:
        return _one_of(value, PRODUCT_STATUSES, "status")


class ProductCreateIn(ProductFieldsIn):
    """Body for listing a product."""

    title: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=2000)
    category: str
    artform: str
    price: ProductPriceIn
    images: list[ProductImageIn] = Field(default_factory=list)
    dimensions: ProductDimensionsIn | None = None
    materials: list[str] = Field(default_factory=list)
    techniques: list[str] = Field(default_factory=list)
    customization: ProductCustomizationIn = Field(default_factory=ProductCustomizationIn)
    inventory: ProductInventoryIn = Field(default_factory=ProductInventoryIn)
    shipping: ProductShippingIn = Field(default_factory=ProductShippingIn)
    status: str = "active"
    tags: list[str] = Field(default_factory=list)
    featured: bool = False


class ProductUpdateIn(ProductFieldsIn):
    """Body for updating a product. Views and ratings are not accepted."""

    title: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, min_length=1, max_length=2000)
    category: str | None = None
    artform: str | None = None
    price: ProductPriceIn | None = None
    images: list[ProductImageIn] | None = None
    dimensions: ProductDimensionsIn | None = None
    materials: list[str] | None = None
    techniques: list[str] | None = None
    customization: ProductCustomizationIn | None = None
    inventory: ProductInventoryIn | None = None
    shipping: ProductShippingIn | None = None
    status: str | None = None
    tags: list[str] | None = None
    featured: bool | None = None
