"""Cart consistency guard — keeps a cart to one seller and drives the
conflict workflow when a customer reaches for another seller's item.

``evaluate_add`` is the pure decision. ``CartConsistencyGuard`` applies it to
a stored cart for one customer session: it appends on success, remembers the
pending item on a seller conflict, and resolves the conflict on request.

A reset clears the cart, reloads it to confirm the clear took effect, and
only then adds the pending item. If the clear fails the add is never tried.
A conflict whose cart has since changed seller is re-evaluated instead.
"""

from dataclasses import dataclass, field
from enum import Enum

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from ordering.cart.cart import CartSession
from ordering.cart.management import AddToCart, ClearCart
from ordering.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ItemSnapshot:
    item_id: str
    unit_price: float
    name: str | None = None
    in_stock: bool = True
    quantity: int | None = None

    @property
    def is_available(self) -> bool:
        return self.in_stock and (self.quantity is None or self.quantity > 0)


@dataclass(frozen=True)
class SellerSnapshot:
    seller_id: str
    name: str | None = None
    service_type: str | None = None
    is_open: bool = True


class AddOutcome(Enum):
    ADDED = "added"
    ALREADY_IN_CART = "already_in_cart"
    UNAVAILABLE = "unavailable"
    SELLER_CONFLICT = "seller_conflict"
    CANCELLED = "cancelled"
    RESET_FAILED = "reset_failed"
    NO_CONFLICT = "no_conflict"
    REJECTED = "rejected"
    NOT_FOUND = "not_found"


class ConflictDecision(Enum):
    CANCEL = "cancel"
    RESET = "reset"


@dataclass(frozen=True)
class PendingConflict:
    """An add held back because the cart belongs to another seller."""

    current_seller_id: str
    item: ItemSnapshot
    seller: SellerSnapshot
    quantity: int = 1

    @property
    def new_seller_id(self) -> str:
        return self.seller.seller_id


@dataclass(frozen=True)
class AddToCartResult:
    outcome: AddOutcome
    cart_id: str
    seller_id: str | None = None
    item_id: str | None = None
    pending: PendingConflict | None = None
    message: str = ""
    errors: dict = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.outcome is AddOutcome.ADDED


def evaluate_add(cart_seller_id, cart_item_ids, item: ItemSnapshot, seller: SellerSnapshot) -> AddOutcome:
    """Decide what adding ``item`` from ``seller`` to a cart should do.

    Availability is checked before anything else, then duplicates, then
    the seller.
    """
    if not item.is_available or not seller.is_open:
        return AddOutcome.UNAVAILABLE
    if str(item.item_id) in {str(i) for i in cart_item_ids}:
        return AddOutcome.ALREADY_IN_CART
    if cart_seller_id is None or str(cart_seller_id) == str(seller.seller_id):
        return AddOutcome.ADDED
    return AddOutcome.SELLER_CONFLICT


class CartConsistencyGuard:
    """Guards one cart for the length of a customer session."""

    def __init__(self, cart_id):
        self.cart_id = str(cart_id)
        self.pending: PendingConflict | None = None

    def cart(self) -> CartSession:
        return current_domain.repository_for(CartSession).get(self.cart_id)

    # -------------------------------------------------------------------
    # Add
    # -------------------------------------------------------------------
    def add_item(self, item: ItemSnapshot, seller: SellerSnapshot, quantity=1) -> AddToCartResult:
        try:
            cart = self.cart()
        except ObjectNotFoundError as exc:
            return AddToCartResult(outcome=AddOutcome.NOT_FOUND, cart_id=self.cart_id, message=str(exc))

        outcome = evaluate_add(cart.seller_id, [line.item_id for line in cart.lines], item, seller)

        if outcome is AddOutcome.UNAVAILABLE:
            reason = "Seller is closed" if not seller.is_open else "Item is out of stock"
            logger.info("Cart add rejected", cart_id=self.cart_id, item_id=str(item.item_id), reason=reason)
            return AddToCartResult(
                outcome=outcome,
                cart_id=self.cart_id,
                seller_id=cart.seller_id,
                item_id=str(item.item_id),
                message=reason,
            )

        if outcome is AddOutcome.ALREADY_IN_CART:
            return AddToCartResult(
                outcome=outcome,
                cart_id=self.cart_id,
                seller_id=cart.seller_id,
                item_id=str(item.item_id),
                message="Item is already in your cart",
            )

        if outcome is AddOutcome.SELLER_CONFLICT:
            self.pending = PendingConflict(
                current_seller_id=cart.seller_id,
                item=item,
                seller=seller,
                quantity=quantity,
            )
            logger.info(
                "Seller conflict on cart add",
                cart_id=self.cart_id,
                current_seller_id=cart.seller_id,
                new_seller_id=str(seller.seller_id),
            )
            return AddToCartResult(
                outcome=outcome,
                cart_id=self.cart_id,
                seller_id=cart.seller_id,
                item_id=str(item.item_id),
                pending=self.pending,
                message="Your cart has items from another seller",
            )

        return self._append(item, seller, quantity)

    # -------------------------------------------------------------------
    # Conflict resolution
    # -------------------------------------------------------------------
    def resolve_conflict(self, decision: ConflictDecision, pending: PendingConflict | None = None) -> AddToCartResult:
        """Apply the customer's choice to the pending add.

        ``pending`` defaults to the conflict this guard last reported.
        """
        decision = ConflictDecision(decision)
        pending = pending or self.pending
        if pending is None:
            return AddToCartResult(
                outcome=AddOutcome.NO_CONFLICT,
                cart_id=self.cart_id,
                message="There is no pending seller conflict",
            )

        if decision is ConflictDecision.CANCEL:
            self.pending = None
            logger.info("Seller conflict cancelled", cart_id=self.cart_id, new_seller_id=pending.new_seller_id)
            return AddToCartResult(
                outcome=AddOutcome.CANCELLED,
                cart_id=self.cart_id,
                seller_id=pending.current_seller_id,
                item_id=str(pending.item.item_id),
            )

        try:
            cart = self.cart()
        except ObjectNotFoundError as exc:
            logger.error("Cart reset failed", cart_id=self.cart_id, error=str(exc))
            return self._reset_failed(pending, str(exc))

        if self._is_stale(pending, cart):
            self.pending = None
            logger.info(
                "Stale seller conflict re-evaluated",
                cart_id=self.cart_id,
                cart_seller_id=cart.seller_id,
                pending_seller_id=pending.current_seller_id,
            )
            return self.add_item(pending.item, pending.seller, pending.quantity)

        try:
            current_domain.process(ClearCart(cart_id=self.cart_id), asynchronous=False)
            cleared = self.cart().is_empty
        except (ObjectNotFoundError, ValidationError) as exc:
            logger.error("Cart reset failed", cart_id=self.cart_id, error=str(exc))
            return self._reset_failed(pending, str(exc))

        if not cleared:
            logger.error("Cart reset failed", cart_id=self.cart_id, error="cart still holds items")
            return self._reset_failed(pending, "Cart still holds items after clearing")

        result = self._append(pending.item, pending.seller, pending.quantity)
        if result.succeeded:
            self.pending = None
            logger.info("Cart reset for new seller", cart_id=self.cart_id, seller_id=pending.new_seller_id)
        return result

    # -------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------
    def _append(self, item: ItemSnapshot, seller: SellerSnapshot, quantity) -> AddToCartResult:
        try:
            command = AddToCart(
                cart_id=self.cart_id,
                item_id=item.item_id,
                name=item.name,
                unit_price=item.unit_price,
                quantity=quantity,
                seller_id=seller.seller_id,
                seller_name=seller.name,
                seller_service_type=seller.service_type,
            )
            current_domain.process(command, asynchronous=False)
        except ObjectNotFoundError as exc:
            return AddToCartResult(outcome=AddOutcome.NOT_FOUND, cart_id=self.cart_id, message=str(exc))
        except ValidationError as exc:
            return AddToCartResult(
                outcome=AddOutcome.REJECTED,
                cart_id=self.cart_id,
                item_id=str(item.item_id),
                errors=exc.messages,
            )

        return AddToCartResult(
            outcome=AddOutcome.ADDED,
            cart_id=self.cart_id,
            seller_id=str(seller.seller_id),
            item_id=str(item.item_id),
        )

    @staticmethod
    def _is_stale(pending, cart) -> bool:
        """A conflict only stands while the cart still belongs to the seller it was raised against."""
        if cart.seller_id is None or str(cart.seller_id) != str(pending.current_seller_id):
            return True
        return str(cart.seller_id) == str(pending.new_seller_id)

    def _reset_failed(self, pending, message) -> AddToCartResult:
        return AddToCartResult(
            outcome=AddOutcome.RESET_FAILED,
            cart_id=self.cart_id,
            seller_id=pending.current_seller_id,
            item_id=str(pending.item.item_id),
            pending=pending,
            message=message,
        )
