"""Pydantic request/response schemas for the Catalog API.

Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from catalog.offer.engine import is_expired, offer_status


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Item Request Schemas ---


class CreateItemRequest(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "name": "Paneer Tikka",
                    "basePrice": 240.0,
                    "category": "Starters",
                    "subcategory": "Tandoor",
                    "discountPercentage": 10,
                    "foodType": "veg",
                    "unit": "plate",
                }
            ]
        },
    )

    name: str = Field(..., max_length=200)
    base_price: float
    category: str | None = Field(None, max_length=100)
    subcategory: str | None = Field(None, max_length=100)
    discount_percentage: float | None = None
    description: str | None = None
    food_type: str | None = Field(None, max_length=10)
    unit: str | None = Field(None, max_length=10)
    in_stock: bool | None = None
    quantity: int | None = None


class UpdateItemRequest(CamelModel):
    name: str | None = Field(None, max_length=200)
    base_price: float | None = None
    category: str | None = Field(None, max_length=100)
    subcategory: str | None = Field(None, max_length=100)
    discount_percentage: float | None = None
    description: str | None = None
    food_type: str | None = Field(None, max_length=10)
    unit: str | None = Field(None, max_length=10)
    in_stock: bool | None = None
    quantity: int | None = None


class DiscountRequest(CamelModel):
    """Either a percentage or a target price. Zero or neither clears the discount."""

    discount_percentage: float | None = None
    discounted_price: float | None = None


class BulkAddRequest(CamelModel):
    items: list[CreateItemRequest] = Field(..., min_length=1)


class BulkDeleteRequest(CamelModel):
    item_ids: list[str] = Field(..., min_length=1)


class RenameCategoryRequest(CamelModel):
    old_name: str = Field(..., max_length=100)
    new_name: str = Field(..., max_length=100)


class RenameSubcategoryRequest(CamelModel):
    old_name: str = Field(..., max_length=100)
    new_name: str = Field(..., max_length=100)
    category: str | None = Field(None, max_length=100)


# --- Item Response Schemas ---


class ItemResponse(CamelModel):
    id: str
    business_id: str
    name: str
    description: str | None = None
    base_price: float
    current_price: float
    discount_amount: float
    discount_percentage: float
    is_on_discount: bool
    category: str
    subcategory: str
    food_type: str | None = None
    unit: str | None = None
    in_stock: bool
    quantity: int | None = None
    is_available: bool

    @classmethod
    def from_item(cls, item) -> ItemResponse:
        return cls(
            id=str(item.id),
            business_id=str(item.business_id),
            name=item.name,
            description=item.description,
            base_price=item.base_price,
            current_price=float(item.current_price),
            discount_amount=float(item.discount_amount),
            discount_percentage=item.discount_percentage or 0.0,
            is_on_discount=item.is_on_discount,
            category=item.category,
            subcategory=item.subcategory,
            food_type=item.food_type,
            unit=item.unit,
            in_stock=bool(item.in_stock),
            quantity=item.quantity,
            is_available=item.is_available,
        )


class SubcategoryResponse(CamelModel):
    name: str
    items: list[ItemResponse]


class CategoryResponse(CamelModel):
    name: str
    item_count: int
    subcategories: list[SubcategoryResponse]

    @classmethod
    def from_group(cls, group) -> CategoryResponse:
        return cls(
            name=group.name,
            item_count=group.item_count,
            subcategories=[
                SubcategoryResponse(name=sub.name, items=[ItemResponse.from_item(item) for item in sub.items])
                for sub in group.subcategories
            ],
        )


class CatalogResponse(CamelModel):
    mode: str
    business_id: str
    items: list[ItemResponse] | None = None
    categories: list[CategoryResponse] | None = None


class MutationResponse(CamelModel):
    item_ids: list[str] = []
    affected_count: int
    categories: list[CategoryResponse]


class BulkDeleteResponse(CamelModel):
    deleted_count: int
    requested_count: int
    partial: bool
    categories: list[CategoryResponse]


# --- Offer Request Schemas ---


class CreateOfferRequest(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "itemId": "item-042",
                    "offerType": "bulk-price",
                    "title": "3 for 240",
                    "purchaseQuantity": 3,
                    "discountedPrice": 240.0,
                    "endDate": "2026-12-31T23:59:59Z",
                }
            ]
        },
    )

    item_id: str | None = None
    offer_type: str | None = Field(None, max_length=20)
    title: str | None = Field(None, max_length=100)
    description: str | None = Field(None, max_length=200)
    purchase_quantity: int | None = None
    discounted_price: float | None = None
    buy_quantity: int | None = None
    free_quantity: int | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    is_active: bool = True


class UpdateOfferRequest(CamelModel):
    item_id: str | None = None
    offer_type: str | None = Field(None, max_length=20)
    title: str | None = Field(None, max_length=100)
    description: str | None = Field(None, max_length=200)
    purchase_quantity: int | None = None
    discounted_price: float | None = None
    buy_quantity: int | None = None
    free_quantity: int | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None


# --- Offer Response Schemas ---


class OfferResponse(CamelModel):
    id: str
    business_id: str
    item_id: str
    offer_type: str
    title: str
    description: str | None = None
    purchase_quantity: int | None = None
    discounted_price: float | None = None
    buy_quantity: int | None = None
    free_quantity: int | None = None
    is_active: bool
    is_expired: bool
    status: str
    start_date: datetime
    end_date: datetime | None = None
    created_at: datetime | None = None

    @classmethod
    def from_offer(cls, offer, now=None) -> OfferResponse:
        bulk = offer.bulk_price
        bxgy = offer.buy_x_get_y
        return cls(
            id=str(offer.id),
            business_id=str(offer.business_id),
            item_id=str(offer.item_id),
            offer_type=offer.offer_type,
            title=offer.title,
            description=offer.description,
            purchase_quantity=bulk.purchase_quantity if bulk else None,
            discounted_price=bulk.discounted_price if bulk else None,
            buy_quantity=bxgy.buy_quantity if bxgy else None,
            free_quantity=bxgy.free_quantity if bxgy else None,
            is_active=bool(offer.is_active),
            is_expired=is_expired(offer, now),
            status=offer_status(offer, now).value,
            start_date=offer.start_date,
            end_date=offer.end_date,
            created_at=offer.created_at,
        )


class OfferIdResponse(CamelModel):
    offer_id: str


class OfferStatusResponse(CamelModel):
    offer_id: str
    is_active: bool


class OfferPageResponse(CamelModel):
    offers: list[OfferResponse]
    total: int
    page: int
    limit: int
    total_pages: int
    has_more: bool


class RecommendedOfferResponse(CamelModel):
    offer_id: str
    savings: float
    unit_saving: float
    effective_unit_price: float
    warnings: list[str] = []


class ItemOffersResponse(CamelModel):
    item_id: str
    unit_price: float
    offers: list[OfferResponse]
    count: int
    recommended: RecommendedOfferResponse | None = None


class PublicOfferResponse(OfferResponse):
    item_name: str
    item_category: str
    item_price: float


class PublicOffersResponse(CamelModel):
    offers: list[PublicOfferResponse]
    count: int


class StatusResponse(CamelModel):
    status: str = "ok"
