"""Supabase-backed product repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from folk_art_platform.domain.artists import DEFAULT_CURRENCY
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
from folk_art_platform.services.products import ProductRepository

_PRODUCT_COLUMNS = (
    "id, seller_id, title, description, category, artform, images, price_amount, "
    "price_currency, original_price, dimensions, materials, techniques, "
    "customization, inventory_quantity, inventory_unlimited, shipping, status, "
    "tags, rating_average, rating_count, views, featured, created_at, updated_at"
)

_SORT_COLUMNS = {
    "created_at": ("created_at", True),
    "price": ("price_amount", False),
    "price_desc": ("price_amount", True),
    "rating": ("rating_average", True),
    "views": ("views", True),
}

_PASSTHROUGH_FIELDS = (
    "title",
    "description",
    "category",
    "artform",
    "images",
    "dimensions",
    "materials",
    "techniques",
    "customization",
    "shipping",
    "status",
    "tags",
    "featured",
)

# Characters with meaning inside a PostgREST or=() filter.
_FILTER_RESERVED = str.maketrans("", "", ",(){}*%")


@dataclass
class SupabaseProductRepository(ProductRepository):
    """Supabase implementation for products."""

    client: Client

    def get_product(self, product_id: UUID) -> Product | None:
        """Return a product by id, if present."""
        response = (
            self.client.table("products")
            .select(_PRODUCT_COLUMNS)
            .eq("id", str(product_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_product(response.data[0])

    def list_products(
        self, filters: ProductFilters, sort: str, offset: int, limit: int
    ) -> tuple[list[Product], int]:
        """Return a filtered, sorted page of active products with the total count."""
        query = (
            self.client.table("products")
            .select(_PRODUCT_COLUMNS, count="exact")
            .eq("status", "active")
        )
        if filters.category:
            query = query.eq("category", filters.category)
        if filters.artform:
            query = query.eq("artform", filters.artform)
        if filters.min_price is not None:
            query = query.gte("price_amount", filters.min_price)
        if filters.max_price is not None:
            query = query.lte("price_amount", filters.max_price)
        if filters.featured_only:
            query = query.eq("featured", True)
        if filters.search:
            term = filters.search.translate(_FILTER_RESERVED).strip()
            if term:
                query = query.or_(
                    f"title.ilike.*{term}*,description.ilike.*{term}*,"
                    f"tags.cs.{{{term}}}"
                )

        column, desc = _SORT_COLUMNS.get(sort, _SORT_COLUMNS["created_at"])
        response = (
            query.order(column, desc=desc).range(offset, offset + limit - 1).execute()
        )
        products = [_parse_product(row) for row in response.data or []]
        return products, response.count or 0

    def create_product(self, seller_id: UUID, payload: dict[str, object]) -> Product:
        """Insert a product row and return it."""
        row = {"seller_id": str(seller_id), **_payload_to_row(payload)}
        response = self.client.table("products").insert(row).execute()
        if not response.data:
            raise RuntimeError("Failed to create product")
        return _parse_product(response.data[0])

    def update_product(self, product_id: UUID, payload: dict[str, object]) -> Product:
        """Update the given product fields and return the product."""
        row = _payload_to_row(payload)
        row["updated_at"] = datetime.now(tz=UTC).isoformat()
        response = (
            self.client.table("products")
            .update(row)
            .eq("id", str(product_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update product")
        return _parse_product(response.data[0])

    def delete_product(self, product_id: UUID) -> None:
        """Delete a product row."""
        self.client.table("products").delete().eq("id", str(product_id)).execute()

    def increment_views(self, product_id: UUID) -> Product | None:
        """Bump the view counter in the database and return the product."""
        response = self.client.rpc(
            "increment_product_views", {"p_product_id": str(product_id)}
        ).execute()
        data = response.data
        if isinstance(data, list):
            data = data[0] if data else None
        if not isinstance(data, dict) or not data.get("id"):
            return None
        return _parse_product(data)


def _payload_to_row(payload: dict[str, object]) -> dict[str, object]:
    """Flatten a product payload onto product table columns."""
    row = {key: payload[key] for key in _PASSTHROUGH_FIELDS if key in payload}
    price = payload.get("price")
    if isinstance(price, dict):
        row["price_amount"] = price.get("amount")
        row["price_currency"] = price.get("currency") or DEFAULT_CURRENCY
        row["original_price"] = price.get("original_price")
    inventory = payload.get("inventory")
    if isinstance(inventory, dict):
        row["inventory_quantity"] = inventory.get("quantity", 0)
        row["inventory_unlimited"] = bool(inventory.get("is_unlimited", False))
    return row


def _parse_datetime(raw: object) -> datetime | None:
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return None


def _parse_shipping_option(raw: object, default_available: bool) -> ShippingOption:
    if not isinstance(raw, dict):
        return ShippingOption(available=default_available)
    return ShippingOption(
        available=bool(raw.get("available", default_available)),
        cost=raw.get("cost"),
        estimated_days=raw.get("estimated_days"),
    )


def _parse_product(row: dict[str, object]) -> Product:
    dimensions = row.get("dimensions")
    customization = row.get("customization")
    shipping = row.get("shipping") if isinstance(row.get("shipping"), dict) else {}
    original_price = row.get("original_price")
    return Product(
        id=UUID(str(row["id"])),
        seller_id=UUID(str(row["seller_id"])),
        title=str(row.get("title") or ""),
        description=str(row.get("description") or ""),
        category=str(row["category"]),
        artform=str(row["artform"]),
        price=ProductPrice(
            amount=float(row.get("price_amount") or 0.0),
            currency=str(row.get("price_currency") or DEFAULT_CURRENCY),
            original_price=float(original_price) if original_price is not None else None,
        ),
        images=[
            ProductImage(
                url=str(image.get("url") or ""),
                alt=image.get("alt"),
                is_primary=bool(image.get("is_primary", False)),
            )
            for image in row.get("images") or []
        ],
        dimensions=(
            ProductDimensions(
                length=dimensions.get("length"),
                width=dimensions.get("width"),
                height=dimensions.get("height"),
                weight=dimensions.get("weight"),
                unit=str(dimensions.get("unit") or "cm"),
            )
            if isinstance(dimensions, dict)
            else None
        ),
        materials=list(row.get("materials") or []),
        techniques=list(row.get("techniques") or []),
        customization=(
            ProductCustomization(
                available=bool(customization.get("available", False)),
                options=list(customization.get("options") or []),
                additional_cost=customization.get("additional_cost"),
            )
            if isinstance(customization, dict)
            else ProductCustomization()
        ),
        inventory=ProductInventory(
            quantity=int(row.get("inventory_quantity") or 0),
            is_unlimited=bool(row.get("inventory_unlimited", False)),
        ),
        shipping=ProductShipping(
            domestic=_parse_shipping_option(shipping.get("domestic"), True),
            international=_parse_shipping_option(shipping.get("international"), False),
        ),
        status=str(row.get("status") or "active"),
        tags=list(row.get("tags") or []),
        rating_average=float(row.get("rating_average") or 0.0),
        rating_count=int(row.get("rating_count") or 0),
        views=int(row.get("views") or 0),
        featured=bool(row.get("featured", False)),
        created_at=_parse_datetime(row.get("created_at")),
        updated_at=_parse_datetime(row.get("updated_at")),
    )
