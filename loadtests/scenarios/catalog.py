"""Catalog domain load test scenarios.

A seller builds a catalog in bulk, reshapes it, runs offers against it and
reads it back in both views. Steps execute in order; each depends on the
previous step succeeding.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import bulk_items, business_id, item_data, offer_data
from loadtests.helpers.state import SellerState


class SellerCatalogJourney(SequentialTaskSet):
    """Bulk Add -> Add -> Discount -> Rename Category -> Offer -> Toggle -> Views -> Bulk Delete."""

    def on_start(self):
        self.state = SellerState(business_id=business_id())

    @task
    def bulk_add(self):
        with self.client.post(
            "/catalog/bulk",
            json=bulk_items(random.randint(3, 8)),
            headers=self.state.headers,
            catch_response=True,
            name="POST /catalog/bulk",
        ) as resp:
            if resp.status_code == 201:
                self.state.item_ids.extend(resp.json()["itemIds"])
            else:
                resp.failure(f"Bulk add failed: {resp.status_code}")
                self.interrupt()

    @task
    def add_item(self):
        with self.client.post(
            "/catalog",
            json=item_data(),
            headers=self.state.headers,
            catch_response=True,
            name="POST /catalog",
        ) as resp:
            if resp.status_code == 201:
                self.state.item_ids.extend(resp.json()["itemIds"])
            else:
                resp.failure(f"Add item failed: {resp.status_code}")

    @task
    def apply_discount(self):
        item_id = random.choice(self.state.item_ids)
        with self.client.patch(
            f"/catalog/{item_id}/discount",
            json={"discountPercentage": random.choice([0, 10, 20])},
            headers=self.state.headers,
            catch_response=True,
            name="PATCH /catalog/{id}/discount",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Discount failed: {resp.status_code}")

    @task
    def rename_category(self):
        with self.client.put(
            "/catalog/category/rename",
            json={"oldName": "Mains", "newName": "Main Course"},
            headers=self.state.headers,
            catch_response=True,
            name="PUT /catalog/category/rename",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Rename failed: {resp.status_code}")

    @task
    def create_offer(self):
        with self.client.post(
            "/offers/business",
            json=offer_data(random.choice(self.state.item_ids)),
            headers=self.state.headers,
            catch_response=True,
            name="POST /offers/business",
        ) as resp:
            if resp.status_code == 201:
                self.state.offer_ids.append(resp.json()["offerId"])
            else:
                resp.failure(f"Create offer failed: {resp.status_code}")

    @task
    def toggle_offer(self):
        if not self.state.offer_ids:
            return
        with self.client.patch(
            f"/offers/business/{self.state.offer_ids[0]}/status",
            headers=self.state.headers,
            catch_response=True,
            name="PATCH /offers/business/{id}/status",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Toggle offer failed: {resp.status_code}")

    @task
    def read_views(self):
        self.client.get("/catalog", headers=self.state.headers, name="GET /catalog")
        self.client.get("/catalog", params={"ownerId": self.state.business_id}, name="GET /catalog?ownerId")
        self.client.get(f"/offers/public/business/{self.state.business_id}", name="GET /offers/public/business/{id}")
        self.client.get(
            f"/offers/public/item/{random.choice(self.state.item_ids)}", name="GET /offers/public/item/{id}"
        )

    @task
    def bulk_delete(self):
        doomed = self.state.item_ids[: len(self.state.item_ids) // 2] + ["lt-missing"]
        with self.client.request(
            "DELETE",
            "/catalog/bulk",
            json={"itemIds": doomed},
            headers=self.state.headers,
            catch_response=True,
            name="DELETE /catalog/bulk",
        ) as resp:
            if resp.status_code == 200 and resp.json()["partial"]:
                resp.success()
            else:
                resp.failure(f"Bulk delete did not report a partial removal: {resp.status_code}")

    @task
    def done(self):
        self.interrupt()


class SellerCatalogUser(HttpUser):
    tasks = [SellerCatalogJourney]
    wait_time = between(1, 3)
