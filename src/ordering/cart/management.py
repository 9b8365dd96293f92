"""Cart management — commands and handler."""

from protean import handle
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from ordering.cart.cart import CartSession
from ordering.domain import ordering
from ordering.utils.logging import get_logger

logger = get_logger(__name__)


@ordering.command(part_of="CartSession")
class CreateCart:
    customer_id = Identifier(required=True)


@ordering.command(part_of="CartSession")
class AddToCart:
    """Append a line. Seller and duplicate checks belong to the consistency guard."""

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    name = String(max_length=200)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(default=1, min_value=1)
    seller_id = Identifier(required=True)
    seller_name = String(max_length=200)
    seller_service_type = String(max_length=50)


@ordering.command(part_of="CartSession")
class UpdateCartQuantity:
    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@ordering.command(part_of="CartSession")
class RemoveFromCart:
    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)


@ordering.command(part_of="CartSession")
class ClearCart:
    cart_id = Identifier(required=True)


@ordering.command_handler(part_of=CartSession)
class ManageCartHandler:
    @handle(CreateCart)
    def create_cart(self, command):
        cart = CartSession.create(customer_id=command.customer_id)
        current_domain.repository_for(CartSession).add(cart)
        return str(cart.id)

    @handle(AddToCart)
    def add_to_cart(self, command):
        repo = current_domain.repository_for(CartSession)
        cart = repo.get(command.cart_id)
        cart.add_line(
            item_id=command.item_id,
            unit_price=command.unit_price,
            seller_id=command.seller_id,
            quantity=command.quantity,
            name=command.name,
            seller_name=command.seller_name,
            seller_service_type=command.seller_service_type,
        )
        repo.add(cart)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        repo = current_domain.repository_for(CartSession)
        cart = repo.get(command.cart_id)
        cart.update_quantity(item_id=command.item_id, quantity=command.quantity)
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(CartSession)
        cart = repo.get(command.cart_id)
        cart.remove_line(item_id=command.item_id)
        repo.add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        """Empty the cart and acknowledge with the number of lines removed."""
        repo = current_domain.repository_for(CartSession)
        cart = repo.get(command.cart_id)
        removed = len(cart.lines)
        cart.clear()
        repo.add(cart)

        logger.info("Cart cleared", cart_id=str(cart.id), removed=removed)
        return removed
