"""CartSession aggregate — one customer's basket, bound to a single seller.

Each line carries a snapshot of the seller taken when the line was added.
Every line in a non-empty cart names the same seller as the first line; the
cart has no notion of a mixed-seller basket.
"""

from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from ordering.cart.events import (
    CartCleared,
    CartCreated,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
)
from ordering.domain import ordering


class CartState(Enum):
    EMPTY = "Empty"
    SINGLE_SELLER = "SingleSeller"


@ordering.entity(part_of="CartSession")
class CartLineItem:
    item_id = Identifier(required=True)
    name = String(max_length=200)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    seller_id = Identifier(required=True)
    seller_name = String(max_length=200)
    seller_service_type = String(max_length=50)
    added_at = DateTime()

    @property
    def line_total(self) -> Decimal:
        return Decimal(str(self.unit_price)) * self.quantity


@ordering.aggregate
class CartSession:
    customer_id = Identifier(required=True)
    lines = HasMany(CartLineItem)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def cart_must_hold_a_single_seller(self):
        sellers = {str(line.seller_id) for line in self.lines}
        if len(sellers) > 1:
            raise ValidationError({"seller_id": ["A cart can only hold items from one seller"]})

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def seller_id(self) -> str | None:
        return str(self.lines[0].seller_id) if self.lines else None

    @property
    def state(self) -> CartState:
        return CartState.EMPTY if self.is_empty else CartState.SINGLE_SELLER

    @property
    def total(self) -> Decimal:
        amount = sum((line.line_total for line in self.lines), Decimal("0"))
        return amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    def line_for(self, item_id):
        return next((line for line in self.lines if str(line.item_id) == str(item_id)), None)

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id):
        now = datetime.now(UTC)
        cart = cls(customer_id=customer_id, created_at=now, updated_at=now)
        cart.raise_(CartCreated(cart_id=cart.id, customer_id=customer_id, created_at=now))
        return cart

    # -------------------------------------------------------------------
    # Line management
    # -------------------------------------------------------------------
    def add_line(
        self,
        item_id,
        unit_price,
        seller_id,
        quantity=1,
        name=None,
        seller_name=None,
        seller_service_type=None,
    ):
        if self.line_for(item_id) is not None:
            raise ValidationError({"item_id": ["Item is already in the cart"]})
        if self.seller_id is not None and self.seller_id != str(seller_id):
            raise ValidationError({"seller_id": ["Cart already holds items from another seller"]})

        now = datetime.now(UTC)
        self.add_lines(
            CartLineItem(
                item_id=item_id,
                name=name,
                unit_price=unit_price,
                quantity=quantity,
                seller_id=seller_id,
                seller_name=seller_name,
                seller_service_type=seller_service_type,
                added_at=now,
            )
        )
        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=self.id,
                item_id=item_id,
                seller_id=seller_id,
                quantity=quantity,
                unit_price=unit_price,
            )
        )

    def update_quantity(self, item_id, quantity):
        line = self.line_for(item_id)
        if line is None:
            raise ValidationError({"item_id": ["Item not found in cart"]})
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        previous_quantity = line.quantity
        line.quantity = quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=self.id,
                item_id=item_id,
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )

    def remove_line(self, item_id):
        line = self.line_for(item_id)
        if line is None:
            raise ValidationError({"item_id": ["Item not found in cart"]})

        self.remove_lines(line)
        self.updated_at = datetime.now(UTC)
        self.raise_(CartItemRemoved(cart_id=self.id, item_id=item_id))

    def clear(self):
        previous_seller = self.seller_id
        removed = list(self.lines)
        if removed:
            self.remove_lines(removed)

        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(
            CartCleared(
                cart_id=self.id,
                previous_seller_id=previous_seller,
                removed_count=len(removed),
                cleared_at=now,
            )
        )
