"""Per-user state carried between the steps of a sequential journey."""

from dataclasses import dataclass, field


@dataclass
class SellerState:
    business_id: str
    item_ids: list[str] = field(default_factory=list)
    offer_ids: list[str] = field(default_factory=list)

    @property
    def headers(self) -> dict:
        return {"X-Seller-Id": self.business_id}


@dataclass
class ShopperState:
    cart_id: str | None = None
    seller_id: str | None = None
    pending: dict | None = None
