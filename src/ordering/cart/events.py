"""Domain events for the CartSession aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="CartSession")
class CartCreated:
    """A customer opened a cart session."""

    __version__ = 1

    cart_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    created_at = DateTime(required=True)


@ordering.event(part_of="CartSession")
class CartItemAdded:
    """An item was placed in the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    quantity = Integer(required=True)
    unit_price = Float(required=True)


@ordering.event(part_of="CartSession")
class CartQuantityUpdated:
    """The quantity of a cart line was changed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@ordering.event(part_of="CartSession")
class CartItemRemoved:
    """A line was taken out of the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)


@ordering.event(part_of="CartSession")
class CartCleared:
    """Every line was removed; the cart is free to take any seller."""

    __version__ = 1

    cart_id = Identifier(required=True)
    previous_seller_id = String()
    removed_count = Integer(required=True)
    cleared_at = DateTime(required=True)
