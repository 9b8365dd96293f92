"""Item pricing — effective price and discount arithmetic.

All amounts are rounded once, to two decimals, half-up, at the point they
are produced. Callers receive ``Decimal`` values and must not round again.
"""

import math
from decimal import ROUND_HALF_UP, Decimal

from protean.exceptions import ValidationError

CENT = Decimal("0.01")
HUNDRED = Decimal("100")


class InvalidDiscount(ValidationError):
    """A discount percentage that cannot be applied to a base price."""

    def __init__(self, message):
        super().__init__({"discount_percentage": [message]})


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value or 0))


def round2(amount) -> Decimal:
    """Round a monetary amount to two decimals, half-up."""
    return to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def current_price(base_price, discount_percentage=None) -> Decimal:
    """Price a customer pays after the item's own percentage discount."""
    base = to_decimal(base_price)
    if not discount_percentage:
        return round2(base)
    return round2(base * (1 - to_decimal(discount_percentage) / HUNDRED))


def discount_amount(base_price, discount_percentage=None) -> Decimal:
    """Money saved by the discount.

    Derived from ``current_price`` so that ``current + discount`` always
    reconstructs the base price exactly, including on half-cent ties.
    """
    return round2(to_decimal(base_price)) - current_price(base_price, discount_percentage)


def is_on_discount(discount_percentage) -> bool:
    return bool(discount_percentage) and discount_percentage > 0


def validate_discount(candidate, base_price) -> float:
    """Check that ``candidate`` is a usable percentage for ``base_price``.

    Returns the candidate as a float. Raises ``InvalidDiscount`` when it is not
    a finite number, falls outside [0, 100], or would drive the price to zero
    or below.
    """
    if isinstance(candidate, bool) or not isinstance(candidate, int | float | Decimal):
        raise InvalidDiscount("Discount percentage must be a number")
    if not math.isfinite(candidate):
        raise InvalidDiscount("Discount percentage must be a finite number")
    if candidate < 0 or candidate > 100:
        raise InvalidDiscount("Discount percentage must be between 0 and 100")
    if candidate > 0 and current_price(base_price, candidate) <= 0:
        raise InvalidDiscount("Discount would make the price zero or negative")
    return float(candidate)


def percentage_for_price(base_price, discounted_price) -> float:
    """Discount percentage that turns ``base_price`` into ``discounted_price``.

    A target at or above the base price means no discount at all.
    """
    base = to_decimal(base_price)
    target = to_decimal(discounted_price)
    if target <= 0:
        raise InvalidDiscount("Discounted price must be greater than zero")
    if target >= base:
        return 0.0
    return float(round2(HUNDRED - target / base * HUNDRED))
