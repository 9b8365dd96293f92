"""Ordering bounded context — customer cart sessions.

A cart holds items from exactly one seller. The consistency guard decides
what happens when a customer reaches for an item from another seller.
"""

from protean.domain import Domain

from ordering.utils.logging import get_logger

ordering = Domain(name="ordering")

logger = get_logger(__name__)
