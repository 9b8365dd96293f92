"""FastAPI endpoints for the Catalog domain.

Item mutations go through a per-request ``CatalogReconciler`` and respond with
the rebuilt grouped view. Failed reconciliations surface as the domain
exceptions the Protean FastAPI handlers translate into 400/404 responses.
"""

import json
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, Query
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from catalog.api.schemas import (
    BulkAddRequest,
    BulkDeleteRequest,
    BulkDeleteResponse,
    CatalogResponse,
    CategoryResponse,
    CreateItemRequest,
    CreateOfferRequest,
    DiscountRequest,
    ItemOffersResponse,
    ItemResponse,
    MutationResponse,
    OfferIdResponse,
    OfferPageResponse,
    OfferResponse,
    OfferStatusResponse,
    PublicOfferResponse,
    PublicOffersResponse,
    RecommendedOfferResponse,
    RenameCategoryRequest,
    RenameSubcategoryRequest,
    StatusResponse,
    UpdateItemRequest,
    UpdateOfferRequest,
)
from catalog.item.reconciler import CatalogReconciler, Reconciliation
from catalog.item.view_selector import CatalogScope, resolve_scope, select_view
from catalog.offer.engine import OfferStatus
from catalog.offer.management import CreateOffer, DeleteOffer, ToggleOfferStatus, UpdateOffer
from catalog.offer.queries import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_PUBLIC_LIMIT,
    business_offers,
    item_offers,
    public_business_offers,
)
from catalog.utils.logging import add_context
from shared.auth import AuthExpired, acting_seller

catalog_router = APIRouter(prefix="/catalog", tags=["catalog"])
offer_router = APIRouter(prefix="/offers", tags=["offers"])


async def catalog_scope(
    owner_id: str | None = Query(None, alias="ownerId"),
    seller_id: str | None = Depends(acting_seller),
) -> CatalogScope:
    """Whose catalog the request targets; ``ownerId`` selects administrative mode."""
    scope = resolve_scope(seller_id, owner_id)
    if scope is None:
        raise AuthExpired()
    add_context(business_id=scope.business_id, catalog_mode=scope.mode.value)
    return scope


def _settle(result: Reconciliation) -> Reconciliation:
    if result.not_found:
        raise ObjectNotFoundError(result.errors["item_id"][0])
    if not result.succeeded:
        raise ValidationError(result.errors)
    return result


def _mutation_response(result: Reconciliation) -> MutationResponse:
    return MutationResponse(
        item_ids=list(result.created_ids),
        affected_count=result.affected_count,
        categories=[CategoryResponse.from_group(group) for group in result.categories],
    )


def _bulk_delete_response(result: Reconciliation) -> BulkDeleteResponse:
    return BulkDeleteResponse(
        deleted_count=result.affected_count,
        requested_count=result.requested_count,
        partial=result.partial,
        categories=[CategoryResponse.from_group(group) for group in result.categories],
    )


# --- Catalog read endpoints ---


@catalog_router.get("", response_model=CatalogResponse, response_model_exclude_none=True)
async def get_catalog(scope: CatalogScope = Depends(catalog_scope)) -> CatalogResponse:
    view = select_view(scope)
    if scope.is_admin:
        return CatalogResponse(
            mode=scope.mode.value,
            business_id=scope.business_id,
            categories=[CategoryResponse.from_group(group) for group in view],
        )
    return CatalogResponse(
        mode=scope.mode.value,
        business_id=scope.business_id,
        items=[ItemResponse.from_item(item) for item in view],
    )


@catalog_router.get("/grouped", response_model=list[CategoryResponse])
async def get_grouped_catalog(scope: CatalogScope = Depends(catalog_scope)) -> list[CategoryResponse]:
    return [CategoryResponse.from_group(group) for group in select_view(scope, grouped=True)]


# --- Bulk and category endpoints (declared before /{item_id}) ---


@catalog_router.post("/bulk", status_code=201, response_model=MutationResponse)
async def bulk_add_items(body: BulkAddRequest, scope: CatalogScope = Depends(catalog_scope)) -> MutationResponse:
    items = [entry.model_dump(exclude_none=True) for entry in body.items]
    result = _settle(CatalogReconciler(scope.business_id).bulk_add(items))
    return _mutation_response(result)


@catalog_router.delete("/bulk", response_model=BulkDeleteResponse)
async def bulk_delete_items(
    body: BulkDeleteRequest, scope: CatalogScope = Depends(catalog_scope)
) -> BulkDeleteResponse:
    result = _settle(CatalogReconciler(scope.business_id).bulk_remove(body.item_ids))
    return _bulk_delete_response(result)


@catalog_router.put("/category/rename", response_model=MutationResponse)
async def rename_category(
    body: RenameCategoryRequest, scope: CatalogScope = Depends(catalog_scope)
) -> MutationResponse:
    result = _settle(CatalogReconciler(scope.business_id).rename_category(body.old_name, body.new_name))
    return _mutation_response(result)


@catalog_router.put("/subcategory/rename", response_model=MutationResponse)
async def rename_subcategory(
    body: RenameSubcategoryRequest, scope: CatalogScope = Depends(catalog_scope)
) -> MutationResponse:
    reconciler = CatalogReconciler(scope.business_id)
    result = _settle(reconciler.rename_subcategory(body.old_name, body.new_name, category=body.category))
    return _mutation_response(result)


@catalog_router.delete("/category/{name}", response_model=BulkDeleteResponse)
async def delete_category(name: str, scope: CatalogScope = Depends(catalog_scope)) -> BulkDeleteResponse:
    result = _settle(CatalogReconciler(scope.business_id).delete_category(name))
    return _bulk_delete_response(result)


# --- Single item endpoints ---


@catalog_router.post("", status_code=201, response_model=MutationResponse)
async def add_item(body: CreateItemRequest, scope: CatalogScope = Depends(catalog_scope)) -> MutationResponse:
    result = _settle(CatalogReconciler(scope.business_id).add(**body.model_dump(exclude_none=True)))
    return _mutation_response(result)


@catalog_router.put("/{item_id}", response_model=MutationResponse)
async def update_item(
    item_id: str, body: UpdateItemRequest, scope: CatalogScope = Depends(catalog_scope)
) -> MutationResponse:
    result = _settle(CatalogReconciler(scope.business_id).update(item_id, **body.model_dump(exclude_none=True)))
    return _mutation_response(result)


@catalog_router.delete("/{item_id}", response_model=MutationResponse)
async def remove_item(item_id: str, scope: CatalogScope = Depends(catalog_scope)) -> MutationResponse:
    result = _settle(CatalogReconciler(scope.business_id).remove(item_id))
    return _mutation_response(result)


@catalog_router.patch("/{item_id}/discount", response_model=MutationResponse)
async def change_discount(
    item_id: str, body: DiscountRequest, scope: CatalogScope = Depends(catalog_scope)
) -> MutationResponse:
    reconciler = CatalogReconciler(scope.business_id)
    if body.discounted_price is not None:
        result = reconciler.set_discounted_price(item_id, body.discounted_price)
    elif body.discount_percentage:
        result = reconciler.apply_discount(item_id, body.discount_percentage)
    else:
        result = reconciler.remove_discount(item_id)
    return _mutation_response(_settle(result))


# --- Seller offer endpoints ---


@offer_router.get("/business", response_model=OfferPageResponse)
async def list_business_offers(
    status: str = OfferStatus.ACTIVE.value,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    scope: CatalogScope = Depends(catalog_scope),
) -> OfferPageResponse:
    now = datetime.now(UTC)
    result = business_offers(scope.business_id, status=status, page=page, limit=limit, now=now)
    return OfferPageResponse(
        offers=[OfferResponse.from_offer(offer, now) for offer in result.offers],
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
        has_more=result.has_more,
    )


@offer_router.post("/business", status_code=201, response_model=OfferIdResponse)
async def create_offer(body: CreateOfferRequest, scope: CatalogScope = Depends(catalog_scope)) -> OfferIdResponse:
    command = CreateOffer(business_id=scope.business_id, **body.model_dump(exclude_none=True))
    result = current_domain.process(command, asynchronous=False)
    return OfferIdResponse(offer_id=result)


@offer_router.put("/business/{offer_id}", response_model=StatusResponse)
async def update_offer(
    offer_id: str, body: UpdateOfferRequest, scope: CatalogScope = Depends(catalog_scope)
) -> StatusResponse:
    payload = body.model_dump(exclude_unset=True)
    cleared = [name for name, value in payload.items() if value is None]
    fields = {name: value for name, value in payload.items() if value is not None}
    command = UpdateOffer(
        business_id=scope.business_id,
        offer_id=offer_id,
        cleared=json.dumps(cleared) if cleared else None,
        **fields,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@offer_router.delete("/business/{offer_id}", response_model=StatusResponse)
async def delete_offer(offer_id: str, scope: CatalogScope = Depends(catalog_scope)) -> StatusResponse:
    current_domain.process(DeleteOffer(business_id=scope.business_id, offer_id=offer_id), asynchronous=False)
    return StatusResponse()


@offer_router.patch("/business/{offer_id}/status", response_model=OfferStatusResponse)
async def toggle_offer_status(offer_id: str, scope: CatalogScope = Depends(catalog_scope)) -> OfferStatusResponse:
    command = ToggleOfferStatus(business_id=scope.business_id, offer_id=offer_id)
    is_active = current_domain.process(command, asynchronous=False)
    return OfferStatusResponse(offer_id=offer_id, is_active=is_active)


# --- Public offer endpoints ---


@offer_router.get("/public/item/{item_id}", response_model=ItemOffersResponse)
async def get_item_offers(
    item_id: str,
    include_inactive: bool = Query(False, alias="includeInactive"),
) -> ItemOffersResponse:
    now = datetime.now(UTC)
    result = item_offers(item_id, include_inactive=include_inactive, now=now)

    recommended = None
    if result.recommended is not None:
        offer, evaluation = result.recommended
        recommended = RecommendedOfferResponse(
            offer_id=str(offer.id),
            savings=float(evaluation.savings),
            unit_saving=float(evaluation.unit_saving),
            effective_unit_price=float(evaluation.effective_unit_price),
            warnings=list(evaluation.warnings),
        )

    return ItemOffersResponse(
        item_id=str(result.item.id),
        unit_price=float(result.item.current_price),
        offers=[OfferResponse.from_offer(offer, now) for offer in result.offers],
        count=len(result.offers),
        recommended=recommended,
    )


@offer_router.get("/public/business/{business_id}", response_model=PublicOffersResponse)
async def get_business_offers(
    business_id: str,
    category: str | None = None,
    limit: int = DEFAULT_PUBLIC_LIMIT,
) -> PublicOffersResponse:
    now = datetime.now(UTC)
    pairs = public_business_offers(business_id, category=category, limit=limit, now=now)
    offers = [
        PublicOfferResponse(
            **OfferResponse.from_offer(offer, now).model_dump(),
            item_name=item.name,
            item_category=item.category,
            item_price=float(item.current_price),
        )
        for offer, item in pairs
    ]
    return PublicOffersResponse(offers=offers, count=len(offers))

