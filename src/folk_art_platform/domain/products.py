"""Domain models for the product catalogue."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from folk_art_platform.domain.artists import DEFAULT_CURRENCY, ArtistSummary

PRODUCT_CATEGORIES = (
    "painting",
    "sculpture",
    "textiles",
    "crafts",
    "jewelry",
    "pottery",
    "other",
)
PRODUCT_STATUSES = ("active", "inactive", "sold_out", "discontinued")
DIMENSION_UNITS = ("cm", "inch", "mm")

FEATURED_LIMIT = 8


@dataclass(frozen=True)
class ProductImage:
    url: str
    alt: str | None = None
    is_primary: bool = False


@dataclass(frozen=True)
class ProductPrice:
    """Sale price, with the pre-discount price when one is shown."""

    amount: float
    currency: str = DEFAULT_CURRENCY
    original_price: float | None = None


@dataclass(frozen=True)
class ProductDimensions:
    length: float | None = None
    width: float | None = None
    height: float | None = None
    weight: float | None = None
    unit: str = "cm"


@dataclass(frozen=True)
class ProductCustomization:
    available: bool = False
    options: list[str] = field(default_factory=list)
    additional_cost: float | None = None


@dataclass(frozen=True)
class ProductInventory:
    quantity: int = 0
    is_unlimited: bool = False


@dataclass(frozen=True)
class ShippingOption:
    available: bool
    cost: float | None = None
    estimated_days: int | None = None


@dataclass(frozen=True)
class ProductShipping:
    domestic: ShippingOption = field(default_factory=lambda: ShippingOption(True))
    international: ShippingOption = field(
        default_factory=lambda: ShippingOption(False)
    )


@dataclass(frozen=True)
class Product:
    """An item an artist sells through the catalogue."""

    id: UUID
    seller_id: UUID
    title: str
    description: str
    category: str
    artform: str
    price: ProductPrice
    images: list[ProductImage] = field(default_factory=list)
    dimensions: ProductDimensions | None = None
    materials: list[str] = field(default_factory=list)
    techniques: list[str] = field(default_factory=list)
    customization: ProductCustomization = field(default_factory=ProductCustomization)
    inventory: ProductInventory = field(default_factory=ProductInventory)
    shipping: ProductShipping = field(default_factory=ProductShipping)
    status: str = "active"
    tags: list[str] = field(default_factory=list)
    rating_average: float = 0.0
    rating_count: int = 0
    views: int = 0
    featured: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class ProductFilters:
    """Catalogue filters; only active products are ever listed."""

    category: str | None = None
    artform: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    search: str | None = None
    featured_only: bool = False


@dataclass(frozen=True)
class ProductView:
    """Product with its seller expanded for display."""

    product: Product
    seller: ArtistSummary | None
