"""Integration tests for the offer endpoints."""

from datetime import UTC, datetime, timedelta

import pytest
from catalog.api import catalog_router, offer_router
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean.integrations.fastapi import register_exception_handlers
from shared.auth import register_auth_handlers

SELLER = {"X-Seller-Id": "biz-001"}


@pytest.fixture()
def client():
    app = FastAPI()
    register_exception_handlers(app)
    register_auth_handlers(app)
    app.include_router(catalog_router)
    app.include_router(offer_router)
    return TestClient(app)


@pytest.fixture()
def item_id(client):
    response = client.post(
        "/catalog", json={"name": "Samosa", "basePrice": 30.0, "category": "Snacks"}, headers=SELLER
    )
    return response.json()["itemIds"][0]


def _create(client, item_id, **payload):
    body = {
        "itemId": item_id,
        "offerType": "bulk-price",
        "title": "4 for 100",
        "purchaseQuantity": 4,
        "discountedPrice": 100.0,
    }
    body.update(payload)
    return client.post("/offers/business", json=body, headers=SELLER)


class TestSellerOffers:
    def test_create_and_list(self, client, item_id):
        response = _create(client, item_id)
        assert response.status_code == 201
        offer_id = response.json()["offerId"]

        listing = client.get("/offers/business", headers=SELLER).json()
        assert listing["total"] == 1
        offer = listing["offers"][0]
        assert offer["id"] == offer_id
        assert offer["status"] == "active"
        assert offer["isExpired"] is False
        assert offer["purchaseQuantity"] == 4

    def test_create_requires_identity(self, client, item_id):
        response = client.post("/offers/business", json={"itemId": item_id})
        assert response.status_code == 401

    def test_invalid_terms(self, client, item_id):
        response = _create(client, item_id, purchaseQuantity=1)
        assert response.status_code == 400

    def test_item_of_another_seller(self, client, item_id):
        response = client.post(
            "/offers/business",
            json={"itemId": item_id, "offerType": "buy-x-get-y-free", "title": "B1G1", "buyQuantity": 1,
                  "freeQuantity": 1},
            headers={"X-Seller-Id": "biz-002"},
        )
        assert response.status_code == 404

    def test_update(self, client, item_id):
        offer_id = _create(client, item_id).json()["offerId"]
        response = client.put(f"/offers/business/{offer_id}", json={"title": "Party pack"}, headers=SELLER)
        assert response.status_code == 200
        listing = client.get("/offers/business", headers=SELLER).json()
        assert listing["offers"][0]["title"] == "Party pack"

    def test_null_end_date_makes_offer_open_ended(self, client, item_id):
        end = (datetime.now(UTC) + timedelta(days=7)).isoformat()
        offer_id = _create(client, item_id, endDate=end).json()["offerId"]

        response = client.put(f"/offers/business/{offer_id}", json={"endDate": None}, headers=SELLER)
        assert response.status_code == 200
        offer = client.get("/offers/business", headers=SELLER).json()["offers"][0]
        assert offer["endDate"] is None

    def test_omitted_end_date_is_kept(self, client, item_id):
        end = (datetime.now(UTC) + timedelta(days=7)).isoformat()
        offer_id = _create(client, item_id, endDate=end).json()["offerId"]

        client.put(f"/offers/business/{offer_id}", json={"title": "Party pack"}, headers=SELLER)
        offer = client.get("/offers/business", headers=SELLER).json()["offers"][0]
        assert offer["endDate"] is not None

    def test_null_title_is_rejected(self, client, item_id):
        offer_id = _create(client, item_id).json()["offerId"]
        response = client.put(f"/offers/business/{offer_id}", json={"title": None}, headers=SELLER)
        assert response.status_code == 400

    def test_toggle_status(self, client, item_id):
        offer_id = _create(client, item_id).json()["offerId"]
        response = client.patch(f"/offers/business/{offer_id}/status", headers=SELLER)
        assert response.json() == {"offerId": offer_id, "isActive": False}

    def test_delete(self, client, item_id):
        offer_id = _create(client, item_id).json()["offerId"]
        assert client.delete(f"/offers/business/{offer_id}", headers=SELLER).status_code == 200
        assert client.get("/offers/business", headers=SELLER).json()["total"] == 0

    def test_status_filter_and_pagination(self, client, item_id):
        start = (datetime.now(UTC) + timedelta(days=5)).isoformat()
        _create(client, item_id)
        _create(client, item_id)
        _create(client, item_id, startDate=start)

        upcoming = client.get("/offers/business", params={"status": "upcoming"}, headers=SELLER).json()
        assert upcoming["total"] == 1
        assert upcoming["offers"][0]["status"] == "upcoming"

        paged = client.get("/offers/business", params={"limit": 1}, headers=SELLER).json()
        assert paged["totalPages"] == 2
        assert paged["hasMore"] is True

    def test_default_listing_hides_switched_off_offers(self, client, item_id):
        offer_id = _create(client, item_id).json()["offerId"]
        client.patch(f"/offers/business/{offer_id}/status", headers=SELLER)

        assert client.get("/offers/business", headers=SELLER).json()["total"] == 0
        expired = client.get("/offers/business", params={"status": "expired"}, headers=SELLER).json()
        assert [offer["id"] for offer in expired["offers"]] == [offer_id]

    def test_limit_above_maximum_is_clamped(self, client, item_id):
        _create(client, item_id)
        response = client.get("/offers/business", params={"limit": 500}, headers=SELLER)
        assert response.status_code == 200
        assert response.json()["limit"] == 50

    def test_unknown_status(self, client):
        response = client.get("/offers/business", params={"status": "stale"}, headers=SELLER)
        assert response.status_code == 400


class TestPublicOffers:
    def test_item_offers_with_recommendation(self, client, item_id):
        offer_id = _create(client, item_id).json()["offerId"]
        response = client.get(f"/offers/public/item/{item_id}")
        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 1
        assert data["recommended"]["offerId"] == offer_id
        assert data["recommended"]["savings"] == 20.0
        assert data["recommended"]["unitSaving"] == 5.0

    def test_unknown_item(self, client):
        assert client.get("/offers/public/item/missing").status_code == 404

    def test_business_offers_carry_item_details(self, client, item_id):
        _create(client, item_id)
        data = client.get("/offers/public/business/biz-001", params={"category": "snacks"}).json()
        assert data["count"] == 1
        assert data["offers"][0]["itemName"] == "Samosa"
        assert data["offers"][0]["itemPrice"] == 30.0

        assert client.get("/offers/public/business/biz-001", params={"category": "drinks"}).json()["count"] == 0
