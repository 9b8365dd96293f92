"""Ordering domain load test scenarios.

A shopper fills a cart from one seller, reaches for another seller's item and
either keeps the cart or starts over.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import cart_item, customer_id, seller_snapshot
from loadtests.helpers.state import ShopperState


class SellerSwitchJourney(SequentialTaskSet):
    """Create Cart -> Add x2 -> Add From Other Seller (409) -> Cancel or Reset."""

    def on_start(self):
        self.state = ShopperState()
        self.first_seller = seller_snapshot()

    @task
    def create_cart(self):
        with self.client.post(
            "/carts",
            json={"customerId": customer_id()},
            catch_response=True,
            name="POST /carts",
        ) as resp:
            if resp.status_code == 201:
                self.state.cart_id = resp.json()["cartId"]
            else:
                resp.failure(f"Create cart failed: {resp.status_code}")
                self.interrupt()

    @task
    def fill_cart(self):
        for _ in range(2):
            with self.client.post(
                f"/carts/{self.state.cart_id}/items",
                json=cart_item(self.first_seller),
                catch_response=True,
                name="POST /carts/{id}/items",
            ) as resp:
                if resp.status_code == 201:
                    self.state.seller_id = self.first_seller["sellerId"]
                else:
                    resp.failure(f"Add to cart failed: {resp.status_code}")

    @task
    def add_from_other_seller(self):
        with self.client.post(
            f"/carts/{self.state.cart_id}/items",
            json=cart_item(seller_snapshot()),
            catch_response=True,
            name="POST /carts/{id}/items [conflict]",
        ) as resp:
            if resp.status_code == 409:
                self.state.pending = resp.json()["pending"]
                resp.success()
            else:
                resp.failure(f"Expected a seller conflict: {resp.status_code}")
                self.interrupt()

    @task
    def resolve(self):
        decision = random.choice(["cancel", "reset"])
        with self.client.post(
            f"/carts/{self.state.cart_id}/conflict",
            json={"decision": decision, "pending": self.state.pending},
            catch_response=True,
            name=f"POST /carts/{{id}}/conflict [{decision}]",
        ) as resp:
            if resp.status_code in (200, 201):
                self.state.seller_id = resp.json()["cart"]["sellerId"]
                self.state.pending = None
            else:
                resp.failure(f"Resolve {decision} failed: {resp.status_code}")

    @task
    def read_cart(self):
        self.client.get(f"/carts/{self.state.cart_id}", name="GET /carts/{id}")

    @task
    def done(self):
        self.interrupt()


class ShopperCartUser(HttpUser):
    tasks = [SellerSwitchJourney]
    wait_time = between(1, 3)
