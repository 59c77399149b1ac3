"""Services for the product catalogue."""

import logging
import math
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from folk_art_platform.domain.errors import (
    ForbiddenError,
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
)
from folk_art_platform.domain.models import Identity
from folk_art_platform.domain.products import (
    FEATURED_LIMIT,
    Product,
    ProductFilters,
    ProductView,
)
from folk_art_platform.services.artists import ArtistService

logger = logging.getLogger(__name__)

SORT_OPTIONS = ("created_at", "price", "price_desc", "rating", "views")
DEFAULT_SORT = "created_at"

# Set by the platform, never from request bodies.
_READ_ONLY_FIELDS = frozenset(
    {"id", "seller_id", "views", "rating_average", "rating_count", "created_at"}
)


class ProductRepository(Protocol):
    """Persistence interface for products."""

    def get_product(self, product_id: UUID) -> Product | None:
        """Return a product by id, if present."""

    def list_products(
        self, filters: ProductFilters, sort: str, offset: int, limit: int
    ) -> tuple[list[Product], int]:
        """Return one page of active matching products and the total count."""

    def create_product(self, seller_id: UUID, payload: dict[str, object]) -> Product:
        """Create a product and return it."""

    def update_product(self, product_id: UUID, payload: dict[str, object]) -> Product:
        """Update product fields and return the product."""

    def delete_product(self, product_id: UUID) -> None:
        """Remove a product."""

    def increment_views(self, product_id: UUID) -> Product | None:
        """Add one to the view counter atomically and return the product."""


@dataclass
class ProductPage:
    """One page of products."""

    items: list[ProductView]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


@dataclass
class ProductService:
    """Application service for products sold by artists."""

    repository: ProductRepository
    artist_service: ArtistService

    def list_products(
        self,
        filters: ProductFilters,
        page: int = 1,
        limit: int = 12,
        sort: str = DEFAULT_SORT,
    ) -> ProductPage:
        """Return a page of active products matching the filters."""
        if page < 1 or limit < 1:
            raise InvalidArgumentError("page and limit must be positive")
        if sort not in SORT_OPTIONS:
            sort = DEFAULT_SORT
        items, total = self.repository.list_products(
            filters, sort, offset=(page - 1) * limit, limit=limit
        )
        return ProductPage(items=self._views(items), total=total, page=page, limit=limit)

    def featured(self) -> list[ProductView]:
        """Return the newest featured products."""
        items, _ = self.repository.list_products(
            ProductFilters(featured_only=True),
            DEFAULT_SORT,
            offset=0,
            limit=FEATURED_LIMIT,
        )
        return self._views(items)

    def by_category(self, category: str, page: int = 1, limit: int = 12) -> ProductPage:
        return self.list_products(ProductFilters(category=category), page, limit)

    def get_product(self, product_id: UUID) -> ProductView:
        """Return a product and count the view."""
        product = self.repository.increment_views(product_id)
        if product is None:
            raise NotFoundError("Product not found")
        return self._views([product])[0]

    def create_product(
        self, caller: Identity, payload: dict[str, object]
    ) -> ProductView:
        """List a new product under the caller's artist profile."""
        artist = self.artist_service.repository.get_by_user(caller.id)
        if artist is None:
            raise InvalidStateError("Artist profile required to create products")
        product = self.repository.create_product(artist.id, _writable(caller, payload))
        logger.info(
            "Product created",
            extra={"product_id": str(product.id), "artist_id": str(artist.id)},
        )
        return self._views([product])[0]

    def update_product(
        self, caller: Identity, product_id: UUID, payload: dict[str, object]
    ) -> ProductView:
        """Update a product owned by the caller, or any product for admins."""
        product = self._require_product(product_id)
        self._require_owner(caller, product, "Not authorized to update this product")
        updated = self.repository.update_product(product_id, _writable(caller, payload))
        return self._views([updated])[0]

    def delete_product(self, caller: Identity, product_id: UUID) -> None:
        """Delete a product owned by the caller, or any product for admins."""
        product = self._require_product(product_id)
        self._require_owner(caller, product, "Not authorized to delete this product")
        self.repository.delete_product(product_id)
        logger.info("Product deleted", extra={"product_id": str(product_id)})

    def _require_product(self, product_id: UUID) -> Product:
        product = self.repository.get_product(product_id)
        if product is None:
            raise NotFoundError("Product not found")
        return product

    def _require_owner(self, caller: Identity, product: Product, message: str) -> None:
        if caller.is_admin:
            return
        seller = self.artist_service.repository.get_artist(product.seller_id)
        if seller is None or seller.user_id != caller.id:
            raise ForbiddenError(message)

    def _views(self, products: list[Product]) -> list[ProductView]:
        sellers = self.artist_service.summaries(
            [product.seller_id for product in products]
        )
        return [
            ProductView(product=product, seller=sellers.get(product.seller_id))
            for product in products
        ]


def _writable(caller: Identity, payload: dict[str, object]) -> dict[str, object]:
    blocked = _READ_ONLY_FIELDS if caller.is_admin else _READ_ONLY_FIELDS | {"featured"}
    return {key: value for key, value in payload.items() if key not in blocked}
