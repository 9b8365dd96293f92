"""Faker-based data generators for Locust load test scenarios.

Payloads use the camelCase field names of the API's Pydantic request schemas
and stay inside the catalog's pricing rules.
"""

import random
import uuid

from faker import Faker

fake = Faker()

CATEGORIES = {
    "Starters": ["Tandoor", "Chaat", None],
    "Mains": ["Curry", "Rice", "Breads"],
    "Desserts": [None],
    None: [None],
}

# ---------- Catalog Domain ----------


def business_id() -> str:
    return f"biz-lt-{uuid.uuid4().hex[:8]}"


def item_data() -> dict:
    """Generate a CreateItemRequest payload."""
    category = random.choice(list(CATEGORIES))
    payload = {
        "name": f"{fake.word().capitalize()} {fake.word()}"[:200],
        "basePrice": round(random.uniform(20.0, 600.0), 2),
        "foodType": random.choice(["veg", "nonveg", "egg"]),
        "unit": random.choice(["plate", "piece", "cup"]),
    }
    if category:
        payload["category"] = category
        subcategory = random.choice(CATEGORIES[category])
        if subcategory:
            payload["subcategory"] = subcategory
    if random.random() < 0.3:
        payload["discountPercentage"] = random.choice([5, 10, 15, 20, 25])
    return payload


def bulk_items(count: int = 5) -> dict:
    return {"items": [item_data() for _ in range(count)]}


def offer_data(item_id: str) -> dict:
    """Generate a CreateOfferRequest payload of either offer type."""
    if random.random() < 0.5:
        quantity = random.randint(2, 5)
        return {
            "itemId": item_id,
            "offerType": "bulk-price",
            "title": f"{quantity} for less",
            "purchaseQuantity": quantity,
            "discountedPrice": round(random.uniform(50.0, 400.0), 2),
        }
    buy = random.randint(1, 3)
    return {
        "itemId": item_id,
        "offerType": "buy-x-get-y-free",
        "title": f"Buy {buy} get 1 free",
        "buyQuantity": buy,
        "freeQuantity": 1,
    }


# ---------- Ordering Domain ----------


def customer_id() -> str:
    return f"cust-lt-{uuid.uuid4().hex[:8]}"


def seller_snapshot(seller_id: str | None = None) -> dict:
    return {
        "sellerId": seller_id or f"seller-lt-{uuid.uuid4().hex[:6]}",
        "name": fake.company()[:200],
        "serviceType": random.choice(["restaurant", "bakery", "grocery"]),
    }


def cart_item(seller: dict, in_stock: bool = True) -> dict:
    return {
        "item": {
            "itemId": f"item-lt-{uuid.uuid4().hex[:8]}",
            "name": fake.word().capitalize(),
            "unitPrice": round(random.uniform(20.0, 500.0), 2),
            "inStock": in_stock,
        },
        "seller": seller,
        "quantity": random.randint(1, 3),
    }
