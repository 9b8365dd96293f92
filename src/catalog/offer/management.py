"""Offer management — commands and handler."""

import json
from datetime import UTC, datetime

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from catalog.domain import catalog
from catalog.item.lookup import owned_item
from catalog.offer.events import OfferDeleted
from catalog.offer.offer import Offer
from catalog.utils.logging import get_logger

logger = get_logger(__name__)

_SPEC_FIELDS = (
    "item_id",
    "offer_type",
    "title",
    "description",
    "purchase_quantity",
    "discounted_price",
    "buy_quantity",
    "free_quantity",
    "start_date",
    "end_date",
)


@catalog.command(part_of="Offer")
class CreateOffer:
    business_id: Identifier(required=True)
    item_id: Identifier()
    offer_type: String(max_length=20)
    title: String(max_length=100)
    description: String(max_length=200)
    purchase_quantity: Integer()
    discounted_price: Float()
    buy_quantity: Integer()
    free_quantity: Integer()
    start_date: DateTime()
    end_date: DateTime()
    is_active: Boolean(default=True)


@catalog.command(part_of="Offer")
class UpdateOffer:
    business_id: Identifier(required=True)
    offer_id: Identifier(required=True)
    item_id: Identifier()
    offer_type: String(max_length=20)
    title: String(max_length=100)
    description: String(max_length=200)
    purchase_quantity: Integer()
    discounted_price: Float()
    buy_quantity: Integer()
    free_quantity: Integer()
    start_date: DateTime()
    end_date: DateTime()
    cleared: Text()  # JSON: list of field names to reset


@catalog.command(part_of="Offer")
class ToggleOfferStatus:
    business_id: Identifier(required=True)
    offer_id: Identifier(required=True)


@catalog.command(part_of="Offer")
class DeleteOffer:
    business_id: Identifier(required=True)
    offer_id: Identifier(required=True)


def owned_offer(business_id, offer_id) -> Offer:
    """Load an offer, treating another seller's offer as missing."""
    offer = current_domain.repository_for(Offer).get(offer_id)
    if str(offer.business_id) != str(business_id):
        raise ObjectNotFoundError(f"Offer {offer_id} not found for business {business_id}")
    return offer


def _spec_from(command):
    return {name: getattr(command, name) for name in _SPEC_FIELDS}


@catalog.command_handler(part_of=Offer)
class ManageOfferHandler:
    @handle(CreateOffer)
    def create_offer(self, command):
        spec = _spec_from(command)
        offer = Offer.create(command.business_id, spec, is_active=command.is_active)
        owned_item(command.business_id, offer.item_id)

        current_domain.repository_for(Offer).add(offer)
        logger.info(
            "Offer created",
            offer_id=str(offer.id),
            item_id=str(offer.item_id),
            offer_type=offer.offer_type,
        )
        return str(offer.id)

    @handle(UpdateOffer)
    def update_offer(self, command):
        repo = current_domain.repository_for(Offer)
        offer = owned_offer(command.business_id, command.offer_id)

        offer.revise(_spec_from(command), cleared=json.loads(command.cleared) if command.cleared else ())
        if command.item_id:
            owned_item(command.business_id, offer.item_id)

        repo.add(offer)
        logger.info("Offer updated", offer_id=str(offer.id), offer_type=offer.offer_type)

    @handle(ToggleOfferStatus)
    def toggle_offer_status(self, command):
        repo = current_domain.repository_for(Offer)
        offer = owned_offer(command.business_id, command.offer_id)

        is_active = offer.toggle_status()
        repo.add(offer)
        logger.info("Offer status toggled", offer_id=str(offer.id), is_active=is_active)
        return is_active

    @handle(DeleteOffer)
    def delete_offer(self, command):
        repo = current_domain.repository_for(Offer)
        offer = owned_offer(command.business_id, command.offer_id)

        offer.raise_(OfferDeleted(offer_id=offer.id, item_id=offer.item_id, deleted_at=datetime.now(UTC)))
        repo.add(offer)
        repo._dao.delete(offer)
        logger.info("Offer deleted", offer_id=str(command.offer_id), business_id=str(command.business_id))
