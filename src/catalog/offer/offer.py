"""Offer aggregate — a promotion attached to one catalog item.

An offer is one of two kinds, each with its own terms value object:

- ``bulk-price``: buy ``purchase_quantity`` units for ``discounted_price`` in total.
- ``buy-x-get-y-free``: every ``buy_quantity`` units bought earn ``free_quantity`` free.

``is_active`` is an operator switch. Expiry is derived from ``end_date`` and
is never stored.
"""

from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, ValueObject

from catalog.domain import catalog
from catalog.offer.events import OfferActivated, OfferCreated, OfferDeactivated, OfferUpdated


class OfferType(Enum):
    BULK_PRICE = "bulk-price"
    BUY_X_GET_Y_FREE = "buy-x-get-y-free"


TERM_FIELDS = {
    OfferType.BULK_PRICE.value: ("purchase_quantity", "discounted_price"),
    OfferType.BUY_X_GET_Y_FREE.value: ("buy_quantity", "free_quantity"),
}

# Optional fields an edit may reset to empty
CLEARABLE_FIELDS = ("description", "end_date")


def as_utc(value):
    """Treat naive datetimes as UTC so they compare with aware ones."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


@catalog.value_object(part_of="Offer")
class BulkPriceTerms:
    """Buy N units for a fixed total price."""

    purchase_quantity: Integer(required=True, min_value=2)
    discounted_price: Float(required=True)

    @invariant.post
    def discounted_price_must_be_positive(self):
        if self.discounted_price is None or self.discounted_price <= 0:
            raise ValidationError({"discounted_price": ["Discounted price must be greater than zero"]})


@catalog.value_object(part_of="Offer")
class BuyXGetYFreeTerms:
    """Y free units for every X purchased."""

    buy_quantity: Integer(required=True, min_value=1)
    free_quantity: Integer(required=True, min_value=1)


def _is_quantity(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_offer_spec(spec: dict) -> None:
    """Check an offer specification, stopping at the first violated field.

    Checks run in a fixed order: item reference, offer type, title, the
    type-specific terms, then the validity window.
    """
    if not spec.get("item_id"):
        raise ValidationError({"item_id": ["Menu item reference is required"]})

    offer_type = spec.get("offer_type")
    if offer_type not in TERM_FIELDS:
        raise ValidationError({"offer_type": [f"Invalid offer type: {offer_type}"]})

    if not (spec.get("title") or "").strip():
        raise ValidationError({"title": ["Title is required"]})

    if offer_type == OfferType.BULK_PRICE.value:
        quantity = spec.get("purchase_quantity")
        if not _is_quantity(quantity) or quantity < 2:
            raise ValidationError({"purchase_quantity": ["Purchase quantity must be at least 2 for bulk pricing"]})
        price = spec.get("discounted_price")
        if isinstance(price, bool) or not isinstance(price, int | float | Decimal) or price <= 0:
            raise ValidationError({"discounted_price": ["Discounted price must be greater than zero"]})
    elif offer_type == OfferType.BUY_X_GET_Y_FREE.value:
        for name in ("buy_quantity", "free_quantity"):
            quantity = spec.get(name)
            if not _is_quantity(quantity) or quantity < 1:
                raise ValidationError({name: ["Quantity must be at least 1"]})

    start_date = as_utc(spec.get("start_date"))
    end_date = as_utc(spec.get("end_date"))
    if end_date is not None and start_date is not None and end_date <= start_date:
        raise ValidationError({"end_date": ["End date must be after start date"]})


def _terms_from_spec(spec):
    if spec["offer_type"] == OfferType.BULK_PRICE.value:
        return (
            BulkPriceTerms(
                purchase_quantity=spec["purchase_quantity"],
                discounted_price=float(spec["discounted_price"]),
            ),
            None,
        )
    return None, BuyXGetYFreeTerms(buy_quantity=spec["buy_quantity"], free_quantity=spec["free_quantity"])


@catalog.aggregate
class Offer:
    business_id: Identifier(required=True)
    item_id: Identifier(required=True)
    offer_type: String(required=True, choices=OfferType)
    title: String(required=True, max_length=100)
    description: String(max_length=200, default="")
    bulk_price: ValueObject(BulkPriceTerms)
    buy_x_get_y: ValueObject(BuyXGetYFreeTerms)
    is_active: Boolean(default=True)
    start_date: DateTime(required=True)
    end_date: DateTime()
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def terms_must_match_offer_type(self):
        if self.offer_type == OfferType.BULK_PRICE.value:
            if self.bulk_price is None or self.buy_x_get_y is not None:
                raise ValidationError({"offer_type": ["Bulk-price offers carry only bulk-price terms"]})
        elif self.offer_type == OfferType.BUY_X_GET_Y_FREE.value:
            if self.buy_x_get_y is None or self.bulk_price is not None:
                raise ValidationError({"offer_type": ["Buy-x-get-y-free offers carry only buy-x-get-y-free terms"]})

    @invariant.post
    def end_date_must_follow_start_date(self):
        if self.end_date and self.start_date and as_utc(self.end_date) <= as_utc(self.start_date):
            raise ValidationError({"end_date": ["End date must be after start date"]})

    @property
    def terms(self):
        if self.offer_type == OfferType.BULK_PRICE.value:
            return self.bulk_price
        if self.offer_type == OfferType.BUY_X_GET_Y_FREE.value:
            return self.buy_x_get_y
        raise ValueError(f"Unknown offer type: {self.offer_type}")

    def spec(self) -> dict:
        """Current specification, in the shape accepted by ``validate_offer_spec``."""
        spec = {
            "item_id": str(self.item_id),
            "offer_type": self.offer_type,
            "title": self.title,
            "description": self.description,
            "start_date": self.start_date,
            "end_date": self.end_date,
        }
        for name in TERM_FIELDS[self.offer_type]:
            spec[name] = getattr(self.terms, name)
        return spec

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, business_id, spec: dict, is_active=True):
        spec = {**spec, "start_date": as_utc(spec.get("start_date")) or datetime.now(UTC)}
        validate_offer_spec(spec)
        bulk_price, buy_x_get_y = _terms_from_spec(spec)
        now = datetime.now(UTC)

        offer = cls(
            business_id=business_id,
            item_id=spec["item_id"],
            offer_type=spec["offer_type"],
            title=spec["title"].strip(),
            description=(spec.get("description") or "").strip(),
            bulk_price=bulk_price,
            buy_x_get_y=buy_x_get_y,
            is_active=is_active is not False,
            start_date=spec["start_date"],
            end_date=as_utc(spec.get("end_date")),
            created_at=now,
            updated_at=now,
        )
        offer.raise_(
            OfferCreated(
                offer_id=offer.id,
                business_id=business_id,
                item_id=offer.item_id,
                offer_type=offer.offer_type,
                title=offer.title,
                start_date=offer.start_date,
                end_date=offer.end_date,
            )
        )
        return offer

    # -------------------------------------------------------------------
    # Revision
    # -------------------------------------------------------------------
    def revise(self, changes: dict, cleared=()):
        """Apply a partial edit and re-validate the whole offer.

        ``None`` values in ``changes`` mean "unchanged". Fields named in
        ``cleared`` are reset to empty; only ``CLEARABLE_FIELDS`` may be.
        Switching ``offer_type`` discards the previous terms, so the new
        type's terms must be supplied in ``changes``.
        """
        changes = {key: value for key, value in changes.items() if value is not None}
        for name in cleared:
            if name not in CLEARABLE_FIELDS:
                raise ValidationError({name: ["Field cannot be cleared"]})
            changes[name] = None
        base = self.spec()
        if changes.get("offer_type", self.offer_type) != self.offer_type:
            for name in TERM_FIELDS[self.offer_type]:
                base.pop(name, None)
        spec = {**base, **changes}
        spec["start_date"] = as_utc(spec.get("start_date"))
        spec["end_date"] = as_utc(spec.get("end_date"))
        validate_offer_spec(spec)
        bulk_price, buy_x_get_y = _terms_from_spec(spec)

        with atomic_change(self):
            self.item_id = spec["item_id"]
            self.offer_type = spec["offer_type"]
            self.title = spec["title"].strip()
            self.description = (spec.get("description") or "").strip()
            self.bulk_price = bulk_price
            self.buy_x_get_y = buy_x_get_y
            self.start_date = spec["start_date"]
            self.end_date = spec["end_date"]
            self.updated_at = datetime.now(UTC)

        self.raise_(
            OfferUpdated(
                offer_id=self.id,
                item_id=self.item_id,
                offer_type=self.offer_type,
                title=self.title,
                start_date=self.start_date,
                end_date=self.end_date,
            )
        )

    def toggle_status(self) -> bool:
        """Flip the operator switch and return the resulting state."""
        now = datetime.now(UTC)
        self.is_active = not self.is_active
        self.updated_at = now

        if self.is_active:
            self.raise_(OfferActivated(offer_id=self.id, activated_at=now))
        else:
            self.raise_(OfferDeactivated(offer_id=self.id, deactivated_at=now))
        return self.is_active
