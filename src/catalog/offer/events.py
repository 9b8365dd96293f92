"""Domain events for the Offer aggregate."""

from protean.fields import DateTime, Identifier, String

from catalog.domain import catalog


@catalog.event(part_of="Offer")
class OfferCreated:
    """A promotional offer was attached to an item."""

    __version__ = 1

    offer_id: Identifier(required=True)
    business_id: Identifier(required=True)
    item_id: Identifier(required=True)
    offer_type: String(required=True)
    title: String(required=True)
    start_date: DateTime(required=True)
    end_date: DateTime()


@catalog.event(part_of="Offer")
class OfferUpdated:
    """An offer's terms, texts or validity window were revised."""

    __version__ = 1

    offer_id: Identifier(required=True)
    item_id: Identifier(required=True)
    offer_type: String(required=True)
    title: String(required=True)
    start_date: DateTime(required=True)
    end_date: DateTime()


@catalog.event(part_of="Offer")
class OfferActivated:
    """An operator switched an offer on."""

    __version__ = 1

    offer_id: Identifier(required=True)
    activated_at: DateTime(required=True)


@catalog.event(part_of="Offer")
class OfferDeactivated:
    """An operator switched an offer off."""

    __version__ = 1

    offer_id: Identifier(required=True)
    deactivated_at: DateTime(required=True)


@catalog.event(part_of="Offer")
class OfferDeleted:
    """An offer was withdrawn and no longer takes part in any evaluation."""

    __version__ = 1

    offer_id: Identifier(required=True)
    item_id: Identifier(required=True)
    deleted_at: DateTime(required=True)
