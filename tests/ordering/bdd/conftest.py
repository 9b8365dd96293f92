"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from ordering.cart.guard import AddOutcome, CartConsistencyGuard, ItemSnapshot, SellerSnapshot
from ordering.cart.management import CreateCart
from protean import current_domain
from pytest_bdd import given, parsers, then, when


def _item(item_id, in_stock=True):
    return ItemSnapshot(item_id=item_id, unit_price=100.0, name=item_id.title(), in_stock=in_stock)


def _seller(seller_id):
    return SellerSnapshot(seller_id=seller_id, name=seller_id.title())


def _ids(value):
    return [part.strip() for part in value.split(",")]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def outcome():
    """Container for the result of the last guard call."""
    return {"result": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("an empty cart", target_fixture="guard")
def empty_cart():
    cart_id = current_domain.process(CreateCart(customer_id="cust-001"), asynchronous=False)
    return CartConsistencyGuard(cart_id)


@given(parsers.cfparse('a cart holding "{item_ids}" from "{seller_id}"'), target_fixture="guard")
def cart_holding(item_ids, seller_id):
    guard = empty_cart()
    for item_id in _ids(item_ids):
        assert guard.add_item(_item(item_id), _seller(seller_id)).succeeded
    return guard


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the customer adds "{item_id}" from "{seller_id}"'))
def customer_adds(guard, outcome, item_id, seller_id):
    outcome["result"] = guard.add_item(_item(item_id), _seller(seller_id))


@when(parsers.cfparse('the customer adds out-of-stock "{item_id}" from "{seller_id}"'))
def customer_adds_unavailable(guard, outcome, item_id, seller_id):
    outcome["result"] = guard.add_item(_item(item_id, in_stock=False), _seller(seller_id))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the outcome is "{expected}"'))
def outcome_is(outcome, expected):
    assert outcome["result"].outcome is AddOutcome(expected)


@then(parsers.cfparse('the cart holds only "{item_ids}"'))
def cart_holds_only(guard, item_ids):
    assert [str(line.item_id) for line in guard.cart().lines] == _ids(item_ids)


@then(parsers.cfparse('the cart belongs to "{seller_id}"'))
def cart_belongs_to(guard, seller_id):
    assert guard.cart().seller_id == seller_id


@then("no conflict is pending")
def no_conflict_pending(guard):
    assert guard.pending is None


@then(parsers.cfparse('a conflict with "{seller_id}" is pending'))
def conflict_pending(guard, seller_id):
    assert guard.pending is not None
    assert guard.pending.new_seller_id == seller_id
