"""Offer evaluation — expiry, listing status and savings.

These functions read offers and never change them. Expiry is computed from
``end_date`` against a supplied instant and is independent of ``is_active``.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from protean.exceptions import ValidationError

from catalog.offer.offer import OfferType, as_utc
from catalog.shared.pricing import round2, to_decimal
from catalog.utils.logging import get_logger

logger = get_logger(__name__)


class OfferStatus(Enum):
    ACTIVE = "active"
    UPCOMING = "upcoming"
    EXPIRED = "expired"


def parse_status(value) -> OfferStatus | None:
    if value is None or value == "":
        return None
    try:
        return OfferStatus(str(value).strip().lower())
    except ValueError:
        raise ValidationError({"status": [f"Invalid status: {value}. Must be active, upcoming or expired"]}) from None


def is_expired(offer, now=None) -> bool:
    now = as_utc(now) or datetime.now(UTC)
    return offer.end_date is not None and as_utc(offer.end_date) < now


def has_started(offer, now=None) -> bool:
    now = as_utc(now) or datetime.now(UTC)
    return as_utc(offer.start_date) <= now


def is_honourable(offer, now=None) -> bool:
    """Whether checkout may apply the offer right now."""
    now = as_utc(now) or datetime.now(UTC)
    return bool(offer.is_active) and has_started(offer, now) and not is_expired(offer, now)


def offer_status(offer, now=None) -> OfferStatus:
    """Listing bucket for an offer.

    Switched-off or past-end offers are ``expired``, switched-on offers that
    have not started are ``upcoming``, the rest are ``active``.
    """
    now = as_utc(now) or datetime.now(UTC)
    if not offer.is_active or is_expired(offer, now):
        return OfferStatus.EXPIRED
    if not has_started(offer, now):
        return OfferStatus.UPCOMING
    return OfferStatus.ACTIVE


@dataclass(frozen=True)
class SavingsEvaluation:
    """What one offer is worth against a unit price.

    ``regular_total`` and ``offer_total`` cover one full offer cycle: the
    bulk quantity, or the bought plus free units.
    """

    offer_type: str
    units: int
    savings: Decimal
    effective_unit_price: Decimal
    regular_total: Decimal
    offer_total: Decimal
    warnings: tuple[str, ...] = ()

    @property
    def unit_saving(self) -> Decimal:
        return round2(self.savings / self.units)

    @property
    def is_beneficial(self) -> bool:
        return self.savings > 0


def evaluate_savings(offer, unit_price) -> SavingsEvaluation:
    price = to_decimal(unit_price)
    terms = offer.terms

    if offer.offer_type == OfferType.BULK_PRICE.value:
        units = terms.purchase_quantity
        regular_total = price * units
        offer_total = to_decimal(terms.discounted_price)
        effective_unit_price = offer_total / units
    elif offer.offer_type == OfferType.BUY_X_GET_Y_FREE.value:
        units = terms.buy_quantity + terms.free_quantity
        regular_total = price * units
        offer_total = price * terms.buy_quantity
        effective_unit_price = offer_total / units
    else:
        raise ValueError(f"Unknown offer type: {offer.offer_type}")

    savings = round2(regular_total - offer_total)
    warnings = ()
    if savings < 0:
        warnings = (f"Offer costs {-savings} more than buying {units} units individually",)
        logger.warning(
            "Offer costs more than regular price",
            offer_id=str(offer.id),
            item_id=str(offer.item_id),
            savings=str(savings),
        )

    return SavingsEvaluation(
        offer_type=offer.offer_type,
        units=units,
        savings=savings,
        effective_unit_price=round2(effective_unit_price),
        regular_total=round2(regular_total),
        offer_total=round2(offer_total),
        warnings=warnings,
    )
