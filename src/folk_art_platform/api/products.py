"""Product catalogue endpoints."""

from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from folk_art_platform.api.auth import require_role
from folk_art_platform.api.schemas import ProductCreateIn, ProductUpdateIn
from folk_art_platform.api.serializers import (
    envelope,
    serialize_product,
    serialize_product_page,
)
from folk_art_platform.domain.models import ROLE_ADMIN, ROLE_ARTIST, Identity
from folk_art_platform.domain.products import ProductFilters

if TYPE_CHECKING:
    from folk_art_platform.containers import AppContainer

router = APIRouter(prefix="/products", tags=["products"])


@router.get("")
def list_products(  # noqa: PLR0913
    request: Request,
    category: str | None = None,
    artform: str | None = None,
    min_price: float | None = Query(default=None, alias="minPrice", ge=0),
    max_price: float | None = Query(default=None, alias="maxPrice", ge=0),
    search: str | None = None,
    featured: bool = False,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=12, ge=1, le=100),
    sort: str = "created_at",
) -> dict[str, object]:
    """Return active products with filtering, sorting and pagination."""
    container: AppContainer = request.app.state.container
    filters = ProductFilters(
        category=category,
        artform=artform,
        min_price=min_price,
        max_price=max_price,
        search=search,
        featured_only=featured,
    )
    result = container.product_service.list_products(
        filters, page=page, limit=limit, sort=sort
    )
    return serialize_product_page(result)


@router.get("/featured/list")
def featured_products(request: Request) -> dict[str, object]:
    """Return the newest featured products."""
    container: AppContainer = request.app.state.container
    products = container.product_service.featured()
    return {
        "success": True,
        "count": len(products),
        "data": [serialize_product(view) for view in products],
    }


@router.get("/category/{category}")
def products_by_category(
    category: str,
    request: Request,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=12, ge=1, le=100),
) -> dict[str, object]:
    """Return active products in one category."""
    container: AppContainer = request.app.state.container
    result = container.product_service.by_category(category, page=page, limit=limit)
    return serialize_product_page(result)


@router.get("/{product_id}")
def get_product(product_id: UUID, request: Request) -> dict[str, object]:
    """Return one product and count the view."""
    container: AppContainer = request.app.state.container
    return envelope(serialize_product(container.product_service.get_product(product_id)))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_product(
    body: ProductCreateIn,
    request: Request,
    identity: Identity = Depends(require_role(ROLE_ARTIST, ROLE_ADMIN)),
) -> dict[str, object]:
    """List a product under the caller's artist profile."""
    container: AppContainer = request.app.state.container
    product = container.product_service.create_product(
        identity, body.model_dump(exclude_none=True)
    )
    return envelope(serialize_product(product), message="Product created successfully")


@router.put("/{product_id}")
def update_product(
    product_id: UUID,
    body: ProductUpdateIn,
    request: Request,
    identity: Identity = Depends(require_role(ROLE_ARTIST, ROLE_ADMIN)),
) -> dict[str, object]:
    """Update a product owned by the caller."""
    container: AppContainer = request.app.state.container
    product = container.product_service.update_product(
        identity, product_id, body.model_dump(exclude_unset=True, exclude_none=True)
    )
    return envelope(serialize_product(product), message="Product updated successfully")


@router.delete("/{product_id}")
def delete_product(
    product_id: UUID,
    request: Request,
    identity: Identity = Depends(require_role(ROLE_ARTIST, ROLE_ADMIN)),
) -> dict[str, object]:
    """Delete a product owned by the caller."""
    container: AppContainer = request.app.state.container
    container.product_service.delete_product(identity, product_id)
    return {"success": True, "message": "Product deleted successfully"}
