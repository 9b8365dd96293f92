"""Checkout policy for items carrying several honourable offers.

The offer with the greatest saving per unit wins. Offers that save nothing
are never recommended. Ties go to the offer ending soonest (open-ended
last), then the one that started first, then the lowest identifier.
"""

from datetime import UTC, datetime

from catalog.offer.engine import evaluate_savings, is_honourable
from catalog.offer.offer import as_utc

_OPEN_ENDED = datetime.max.replace(tzinfo=UTC)


def _rank(candidate):
    offer, evaluation = candidate
    end_date = as_utc(offer.end_date) or _OPEN_ENDED
    return (-evaluation.unit_saving, end_date, as_utc(offer.start_date), str(offer.id))


def select_offer_for_checkout(offers, unit_price, now=None):
    """Return ``(offer, evaluation)`` for the recommended offer, or ``None``."""
    now = as_utc(now) or datetime.now(UTC)
    candidates = []
    for offer in offers:
        if not is_honourable(offer, now):
            continue
        evaluation = evaluate_savings(offer, unit_price)
        if evaluation.is_beneficial:
            candidates.append((offer, evaluation))

    if not candidates:
        return None
    return min(candidates, key=_rank)
