"""CatalogItem aggregate — the sellable unit of a seller's catalog."""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from catalog.domain import catalog
from catalog.item.events import ItemAdded, ItemDetailsUpdated, ItemDiscountChanged, ItemRecategorized
from catalog.item.grouping import GENERAL, UNCATEGORIZED, normalize_category, normalize_subcategory
from catalog.shared import pricing


class FoodType(Enum):
    VEG = "veg"
    NONVEG = "nonveg"
    EGG = "egg"


class Unit(Enum):
    GRAMS = "grams"
    ML = "ml"
    KG = "kg"
    LTR = "ltr"
    PIECE = "piece"
    BOX = "box"
    PLATE = "plate"
    BOTTLE = "bottle"
    CUP = "cup"
    PACKET = "packet"


@catalog.aggregate
class CatalogItem:
    """A sellable item belonging to exactly one seller.

    ``current_price``, ``discount_amount`` and ``is_on_discount`` are derived
    from ``base_price`` and ``discount_percentage`` and never stored.
    """

    business_id: Identifier(required=True)
    name: String(required=True, max_length=200)
    description: Text()
    base_price: Float(required=True, min_value=0.0)
    category: String(max_length=100, default=UNCATEGORIZED)
    subcategory: String(max_length=100, default=GENERAL)
    discount_percentage: Float(default=0.0, min_value=0.0, max_value=100.0)
    food_type: String(choices=FoodType, default=FoodType.VEG.value)
    unit: String(choices=Unit, default=Unit.PIECE.value)
    in_stock: Boolean(default=True)
    quantity: Integer(min_value=0)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def discount_must_leave_a_positive_price(self):
        pricing.validate_discount(self.discount_percentage or 0.0, self.base_price)

    # -------------------------------------------------------------------
    # Derived pricing
    # -------------------------------------------------------------------
    @property
    def current_price(self):
        return pricing.current_price(self.base_price, self.discount_percentage)

    @property
    def discount_amount(self):
        return pricing.discount_amount(self.base_price, self.discount_percentage)

    @property
    def is_on_discount(self) -> bool:
        return pricing.is_on_discount(self.discount_percentage)

    @property
    def is_available(self) -> bool:
        return bool(self.in_stock) and (self.quantity is None or self.quantity > 0)

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        business_id,
        name,
        base_price,
        category=None,
        subcategory=None,
        discount_percentage=0.0,
        description=None,
        food_type=None,
        unit=None,
        in_stock=True,
        quantity=None,
    ):
        discount = pricing.validate_discount(discount_percentage or 0.0, base_price)
        now = datetime.now(UTC)

        item = cls(
            business_id=business_id,
            name=name.strip() if name else name,
            description=description,
            base_price=base_price,
            category=normalize_category(category),
            subcategory=normalize_subcategory(subcategory),
            discount_percentage=discount,
            food_type=food_type or FoodType.VEG.value,
            unit=unit or Unit.PIECE.value,
            in_stock=True if in_stock is None else in_stock,
            quantity=quantity,
            created_at=now,
            updated_at=now,
        )
        item.raise_(
            ItemAdded(
                item_id=item.id,
                business_id=business_id,
                name=item.name,
                base_price=item.base_price,
                category=item.category,
                subcategory=item.subcategory,
                discount_percentage=item.discount_percentage,
                created_at=now,
            )
        )
        return item

    # -------------------------------------------------------------------
    # Edits
    # -------------------------------------------------------------------
    def update_details(
        self,
        name=None,
        description=None,
        base_price=None,
        food_type=None,
        unit=None,
        in_stock=None,
        quantity=None,
        category=None,
        subcategory=None,
        discount_percentage=None,
    ):
        """Apply a partial edit. ``None`` leaves a field unchanged.

        The discount that applies after the edit is checked against the price
        that applies after the edit.
        """
        new_price = self.base_price if base_price is None else base_price
        new_discount = self.discount_percentage if discount_percentage is None else discount_percentage
        new_discount = pricing.validate_discount(new_discount or 0.0, new_price)

        previous_discount = self.discount_percentage

        with atomic_change(self):
            if name is not None:
                self.name = name.strip()
            if description is not None:
                self.description = description
            if food_type is not None:
                self.food_type = food_type
            if unit is not None:
                self.unit = unit
            if in_stock is not None:
                self.in_stock = in_stock
            if quantity is not None:
                self.quantity = quantity
            self.base_price = new_price
            self.discount_percentage = new_discount
            self.updated_at = datetime.now(UTC)

        self.raise_(
            ItemDetailsUpdated(
                item_id=self.id,
                name=self.name,
                base_price=self.base_price,
                in_stock=self.in_stock,
                quantity=self.quantity,
            )
        )

        if new_discount != previous_discount:
            self._discount_changed(previous_discount)
        if category is not None or subcategory is not None:
            self.recategorize(category=category, subcategory=subcategory)

    def apply_discount(self, percentage):
        self._set_discount(pricing.validate_discount(percentage, self.base_price))

    def set_discounted_price(self, discounted_price):
        percentage = pricing.percentage_for_price(self.base_price, discounted_price)
        self._set_discount(pricing.validate_discount(percentage, self.base_price))

    def remove_discount(self):
        self._set_discount(0.0)

    def _set_discount(self, percentage):
        previous = self.discount_percentage
        self.discount_percentage = percentage
        self.updated_at = datetime.now(UTC)
        self._discount_changed(previous)

    def _discount_changed(self, previous):
        self.raise_(
            ItemDiscountChanged(
                item_id=self.id,
                previous_percentage=previous,
                new_percentage=self.discount_percentage,
                current_price=float(self.current_price),
            )
        )

    def recategorize(self, category=None, subcategory=None):
        previous_category = self.category
        previous_subcategory = self.subcategory

        with atomic_change(self):
            if category is not None:
                self.category = normalize_category(category)
            if subcategory is not None:
                self.subcategory = normalize_subcategory(subcategory)
            self.updated_at = datetime.now(UTC)

        if (self.category, self.subcategory) == (previous_category, previous_subcategory):
            return

        self.raise_(
            ItemRecategorized(
                item_id=self.id,
                previous_category=previous_category,
                previous_subcategory=previous_subcategory,
                category=self.category,
                subcategory=self.subcategory,
            )
        )
