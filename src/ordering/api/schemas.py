"""Pydantic request/response schemas for the Ordering API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ordering.cart.guard import ItemSnapshot, PendingConflict, SellerSnapshot


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Request Schemas ---


class CreateCartRequest(CamelModel):
    customer_id: str


class ItemSnapshotSchema(CamelModel):
    item_id: str
    unit_price: float = Field(..., ge=0)
    name: str | None = Field(None, max_length=200)
    in_stock: bool = True
    stock_quantity: int | None = None

    def to_snapshot(self) -> ItemSnapshot:
        return ItemSnapshot(
            item_id=self.item_id,
            unit_price=self.unit_price,
            name=self.name,
            in_stock=self.in_stock,
            quantity=self.stock_quantity,
        )

    @classmethod
    def from_snapshot(cls, item: ItemSnapshot) -> ItemSnapshotSchema:
        return cls(
            item_id=str(item.item_id),
            unit_price=item.unit_price,
            name=item.name,
            in_stock=item.in_stock,
            stock_quantity=item.quantity,
        )


class SellerSnapshotSchema(CamelModel):
    seller_id: str
    name: str | None = Field(None, max_length=200)
    service_type: str | None = Field(None, max_length=50)
    is_open: bool = True

    def to_snapshot(self) -> SellerSnapshot:
        return SellerSnapshot(
            seller_id=self.seller_id,
            name=self.name,
            service_type=self.service_type,
            is_open=self.is_open,
        )

    @classmethod
    def from_snapshot(cls, seller: SellerSnapshot) -> SellerSnapshotSchema:
        return cls(
            seller_id=str(seller.seller_id),
            name=seller.name,
            service_type=seller.service_type,
            is_open=seller.is_open,
        )


class AddCartItemRequest(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "item": {"itemId": "item-042", "name": "Masala Dosa", "unitPrice": 120.0},
                    "seller": {"sellerId": "seller-007", "name": "Udupi Corner", "serviceType": "restaurant"},
                    "quantity": 1,
                }
            ]
        },
    )

    item: ItemSnapshotSchema
    seller: SellerSnapshotSchema
    quantity: int = Field(1, ge=1)


class PendingConflictSchema(CamelModel):
    current_seller_id: str
    item: ItemSnapshotSchema
    seller: SellerSnapshotSchema
    quantity: int = Field(1, ge=1)

    def to_pending(self) -> PendingConflict:
        return PendingConflict(
            current_seller_id=self.current_seller_id,
            item=self.item.to_snapshot(),
            seller=self.seller.to_snapshot(),
            quantity=self.quantity,
        )

    @classmethod
    def from_pending(cls, pending: PendingConflict) -> PendingConflictSchema:
        return cls(
            current_seller_id=pending.current_seller_id,
            item=ItemSnapshotSchema.from_snapshot(pending.item),
            seller=SellerSnapshotSchema.from_snapshot(pending.seller),
            quantity=pending.quantity,
        )


class ResolveConflictRequest(CamelModel):
    decision: str = Field(..., pattern="^(cancel|reset)$")
    pending: PendingConflictSchema


class UpdateQuantityRequest(CamelModel):
    quantity: int = Field(..., ge=1)


# --- Response Schemas ---


class CartIdResponse(CamelModel):
    cart_id: str


class CartLineResponse(CamelModel):
    item_id: str
    name: str | None = None
    unit_price: float
    quantity: int
    line_total: float


class CartResponse(CamelModel):
    cart_id: str
    customer_id: str
    state: str
    seller_id: str | None = None
    seller_name: str | None = None
    seller_service_type: str | None = None
    lines: list[CartLineResponse]
    total: float

    @classmethod
    def from_cart(cls, cart) -> CartResponse:
        first = cart.lines[0] if cart.lines else None
        return cls(
            cart_id=str(cart.id),
            customer_id=str(cart.customer_id),
            state=cart.state.value,
            seller_id=cart.seller_id,
            seller_name=first.seller_name if first else None,
            seller_service_type=first.seller_service_type if first else None,
            lines=[
                CartLineResponse(
                    item_id=str(line.item_id),
                    name=line.name,
                    unit_price=line.unit_price,
                    quantity=line.quantity,
                    line_total=float(line.line_total),
                )
                for line in cart.lines
            ],
            total=float(cart.total),
        )


class AddToCartResponse(CamelModel):
    outcome: str
    cart_id: str
    item_id: str | None = None
    message: str = ""
    pending: PendingConflictSchema | None = None
    cart: CartResponse | None = None
