"""JSON response shaping for API routes."""

from folk_art_platform.domain.artists import (
    ArtistProfile,
    ArtistRatings,
    ArtistSummary,
    PortfolioItem,
)
from folk_art_platform.domain.models import Identity, IdentitySummary
from folk_art_platform.domain.products import ProductView, ShippingOption
from folk_art_platform.domain.sessions import SessionPage, SessionView
from folk_art_platform.services.products import ProductPage


def envelope(data: object, message: str | None = None) -> dict[str, object]:
    """Wrap a payload in the standard success envelope."""
    body: dict[str, object] = {"success": True}
    if message:
        body["message"] = message
    body["data"] = data
    return body


def paginated(
    items: list[dict[str, object]], total: int, total_pages: int, page: int
) -> dict[str, object]:
    """Wrap a page of items with paging metadata."""
    return {
        "success": True,
        "count": len(items),
        "total": total,
        "totalPages": total_pages,
        "currentPage": page,
        "data": items,
    }


def serialize_session_page(page: SessionPage) -> dict[str, object]:
    return paginated(
        [serialize_session(view) for view in page.items],
        total=page.total,
        total_pages=page.total_pages,
        page=page.page,
    )


def serialize_session(view: SessionView) -> dict[str, object]:
    """Flatten a session and its expanded participants."""
    record = view.record
    location = record.location
    rating = record.rating
    return {
        "id": str(record.id),
        "customer": (
            serialize_identity_summary(view.customer)
            if view.customer
            else {"id": str(record.customer_id)}
        ),
        "artist": (
            serialize_artist_summary(view.artist)
            if view.artist
            else {"id": str(record.artist_id)}
        ),
        "session_type": record.session_type,
        "title": record.title,
        "description": record.description,
        "scheduled_date": record.scheduled_date.isoformat(),
        "ends_at": record.ends_at.isoformat(),
        "duration": record.duration,
        "format": record.format,
        "location": (
            {"address": location.address, "city": location.city, "state": location.state}
            if location
            else None
        ),
        "meeting_link": record.meeting_link,
        "pricing": {
            "amount": record.pricing.amount,
            "currency": record.pricing.currency,
        },
        "status": record.status,
        "payment_status": record.payment_status,
        "rating": (
            {
                "score": rating.score,
                "review": rating.review,
                "rated_at": rating.rated_at.isoformat(),
            }
            if rating
            else None
        ),
        "created_at": record.created_at.isoformat() if record.created_at else None,
        "updated_at": record.updated_at.isoformat() if record.updated_at else None,
    }


def serialize_identity_summary(summary: IdentitySummary) -> dict[str, object]:
    return {
        "id": str(summary.id),
        "name": summary.name,
        "email": summary.email,
        "profile_image": summary.profile_image,
    }


def serialize_artist_summary(summary: ArtistSummary) -> dict[str, object]:
    return {
        "id": str(summary.id),
        "user_id": str(summary.user_id),
        "name": summary.name,
        "profile_image": summary.profile_image,
    }


def serialize_identity(identity: Identity) -> dict[str, object]:
    return {
        "id": str(identity.id),
        "name": identity.name,
        "email": identity.email,
        "role": identity.role,
        "phone": identity.phone,
        "profile_image": identity.profile_image,
        "preferences": {
            "artforms": identity.preferences.artforms,
            "interests": identity.preferences.interests,
        },
    }


def serialize_ratings(ratings: ArtistRatings) -> dict[str, object]:
    return {"average": ratings.average, "count": ratings.count}


def serialize_portfolio_item(item: PortfolioItem) -> dict[str, object]:
    return {
        "title": item.title,
        "description": item.description,
        "images": item.images,
        "category": item.category,
        "artform": item.artform,
        "created_at": item.created_at.isoformat() if item.created_at else None,
    }


def serialize_artist(artist: ArtistProfile) -> dict[str, object]:
    """Serialize a full artist profile."""
    return {
        "id": str(artist.id),
        "user_id": str(artist.user_id),
        "bio": artist.bio,
        "specializations": [
            {
                "artform": spec.artform,
                "category": spec.category,
                "experience": spec.experience,
                "description": spec.description,
            }
            for spec in artist.specializations
        ],
        "portfolio": [serialize_portfolio_item(item) for item in artist.portfolio],
        "location": {
            "state": artist.location.state,
            "city": artist.location.city,
            "region": artist.location.region,
        },
        "pricing": {
            "session_rate": artist.pricing.session_rate,
            "currency": artist.pricing.currency,
        },
        "ratings": serialize_ratings(artist.ratings),
        "is_verified": artist.is_verified,
        "is_active": artist.is_active,
        "joined_at": artist.joined_at.isoformat() if artist.joined_at else None,
    }


def _serialize_shipping_option(option: ShippingOption) -> dict[str, object]:
    return {
        "available": option.available,
        "cost": option.cost,
        "estimated_days": option.estimated_days,
    }


def serialize_product(view: ProductView) -> dict[str, object]:
    """Serialize a product with its seller expanded."""
    product = view.product
    dimensions = product.dimensions
    return {
        "id": str(product.id),
        "seller": (
            serialize_artist_summary(view.seller)
            if view.seller
            else {"id": str(product.seller_id)}
        ),
        "title": product.title,
        "description": product.description,
        "category": product.category,
        "artform": product.artform,
        "price": {
            "amount": product.price.amount,
            "currency": product.price.currency,
            "original_price": product.price.original_price,
        },
        "images": [
            {"url": image.url, "alt": image.alt, "is_primary": image.is_primary}
            for image in product.images
        ],
        "dimensions": (
            {
                "length": dimensions.length,
                "width": dimensions.width,
                "height": dimensions.height,
                "weight": dimensions.weight,
                "unit": dimensions.unit,
            }
            if dimensions
            else None
        ),
        "materials": product.materials,
        "techniques": product.techniques,
        "customization": {
            "available": product.customization.available,
            "options": product.customization.options,
            "additional_cost": product.customization.additional_cost,
        },
        "inventory": {
            "quantity": product.inventory.quantity,
            "is_unlimited": product.inventory.is_unlimited,
        },
        "shipping": {
            "domestic": _serialize_shipping_option(product.shipping.domestic),
            "international": _serialize_shipping_option(product.shipping.international),
        },
        "status": product.status,
        "tags": product.tags,
        "ratings": {"average": product.rating_average, "count": product.rating_count},
        "views": product.views,
        "featured": product.featured,
        "created_at": product.created_at.isoformat() if product.created_at else None,
        "updated_at": product.updated_at.isoformat() if product.updated_at else None,
    }


def serialize_product_page(page: ProductPage) -> dict[str, object]:
    return paginated(
        [serialize_product(view) for view in page.items],
        total=page.total,
        total_pages=page.total_pages,
        page=page.page,
    )
