"""FastAPI endpoints for the Ordering domain.

Adds go through a ``CartConsistencyGuard``. Each request gets its own guard,
so the pending conflict travels with the client: a 409 response carries it,
and the client sends it back with its decision.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    AddCartItemRequest,
    AddToCartResponse,
    CartIdResponse,
    CartResponse,
    CreateCartRequest,
    PendingConflictSchema,
    ResolveConflictRequest,
    UpdateQuantityRequest,
)
from ordering.cart.cart import CartSession
from ordering.cart.guard import AddOutcome, AddToCartResult, CartConsistencyGuard, ConflictDecision
from ordering.cart.management import ClearCart, CreateCart, RemoveFromCart, UpdateCartQuantity

router = APIRouter(prefix="/carts", tags=["carts"])

_STATUS_BY_OUTCOME = {
    AddOutcome.ADDED: 201,
    AddOutcome.ALREADY_IN_CART: 200,
    AddOutcome.CANCELLED: 200,
    AddOutcome.UNAVAILABLE: 422,
    AddOutcome.SELLER_CONFLICT: 409,
    AddOutcome.RESET_FAILED: 409,
}


def _load_cart(cart_id: str) -> CartSession:
    return current_domain.repository_for(CartSession).get(cart_id)


def _guard_response(result: AddToCartResult) -> JSONResponse:
    if result.outcome is AddOutcome.NOT_FOUND:
        raise ObjectNotFoundError(result.message)
    if result.outcome is AddOutcome.REJECTED:
        raise ValidationError(result.errors)
    if result.outcome is AddOutcome.NO_CONFLICT:
        raise ValidationError({"decision": [result.message]})

    body = AddToCartResponse(
        outcome=result.outcome.value,
        cart_id=result.cart_id,
        item_id=result.item_id,
        message=result.message,
        pending=PendingConflictSchema.from_pending(result.pending) if result.pending else None,
        cart=CartResponse.from_cart(_load_cart(result.cart_id)),
    )
    return JSONResponse(
        status_code=_STATUS_BY_OUTCOME[result.outcome],
        content=body.model_dump(by_alias=True, mode="json"),
    )


@router.post("", status_code=201, response_model=CartIdResponse)
async def create_cart(body: CreateCartRequest) -> CartIdResponse:
    result = current_domain.process(CreateCart(customer_id=body.customer_id), asynchronous=False)
    return CartIdResponse(cart_id=result)


@router.get("/{cart_id}", response_model=CartResponse)
async def get_cart(cart_id: str) -> CartResponse:
    return CartResponse.from_cart(_load_cart(cart_id))


@router.post("/{cart_id}/items", response_model=AddToCartResponse)
async def add_cart_item(cart_id: str, body: AddCartItemRequest) -> JSONResponse:
    guard = CartConsistencyGuard(cart_id)
    result = guard.add_item(body.item.to_snapshot(), body.seller.to_snapshot(), quantity=body.quantity)
    return _guard_response(result)


@router.post("/{cart_id}/conflict", response_model=AddToCartResponse)
async def resolve_conflict(cart_id: str, body: ResolveConflictRequest) -> JSONResponse:
    guard = CartConsistencyGuard(cart_id)
    result = guard.resolve_conflict(ConflictDecision(body.decision), body.pending.to_pending())
    return _guard_response(result)


@router.put("/{cart_id}/items/{item_id}", response_model=CartResponse)
async def update_cart_quantity(cart_id: str, item_id: str, body: UpdateQuantityRequest) -> CartResponse:
    command = UpdateCartQuantity(cart_id=cart_id, item_id=item_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return CartResponse.from_cart(_load_cart(cart_id))


@router.delete("/{cart_id}/items/{item_id}", response_model=CartResponse)
async def remove_cart_item(cart_id: str, item_id: str) -> CartResponse:
    current_domain.process(RemoveFromCart(cart_id=cart_id, item_id=item_id), asynchronous=False)
    return CartResponse.from_cart(_load_cart(cart_id))


@router.delete("/{cart_id}/items", response_model=CartResponse)
async def clear_cart(cart_id: str) -> CartResponse:
    current_domain.process(ClearCart(cart_id=cart_id), asynchronous=False)
    return CartResponse.from_cart(_load_cart(cart_id))
