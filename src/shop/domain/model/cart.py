"""Cart aggregate.

A cart owns an ordered list of line items and guarantees there is at most
one line item per product: adding a product that is already present merges
the quantities instead of appending a duplicate.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from shop.domain.exceptions import NotFoundError, ValidationError
from shop.domain.model.value_objects import Quantity


@dataclass
class CartLineItem:
    """A (product reference, quantity) pair."""

    product_id: str
    quantity: Quantity

    def to_record(self) -> dict[str, Any]:
        return {"product": self.product_id, "quantity": self.quantity.value}

    @staticmethod
    def from_input(raw: Any) -> CartLineItem:
        if not isinstance(raw, dict):
            raise ValidationError("Cart item must be an object")
        product_id = raw.get("product", raw.get("productId"))
        if not isinstance(product_id, str) or not product_id.strip():
            raise ValidationError("Cart item product must be a non-empty string")
        return CartLineItem(
            product_id=product_id.strip(),
            quantity=Quantity.of(raw.get("quantity", 1)),
        )


@dataclass
class Cart:
    """Aggregate root for shopping carts."""

    id: str
    items: list[CartLineItem] = field(default_factory=list)

    # --- Queries --------------------------------------------------------------

    def find_item(self, product_id: str) -> CartLineItem | None:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    # --- Commands -------------------------------------------------------------

    def add_product(self, product_id: str, quantity: Quantity) -> None:
        """Add *quantity* units, merging into an existing line item."""
        existing = self.find_item(product_id)
        if existing is not None:
            existing.quantity = existing.quantity + quantity
        else:
            self.items.append(CartLineItem(product_id=product_id, quantity=quantity))

    def set_quantity(self, product_id: str, quantity: Quantity) -> None:
        """Replace the stored quantity for a product already in the cart."""
        item = self.find_item(product_id)
        if item is None:
            raise NotFoundError(
                f"Product '{product_id}' not found in cart '{self.id}'"
            )
        item.quantity = quantity

    def replace_items(self, items: list[CartLineItem]) -> None:
        """Replace every line item; duplicates in *items* are merged."""
        self.items = []
        for item in items:
            self.add_product(item.product_id, item.quantity)

    def clear(self) -> None:
        self.items = []

    # --- Serialization --------------------------------------------------------

    def to_record(self) -> dict[str, Any]:
        return {"id": self.id, "products": [i.to_record() for i in self.items]}

    @staticmethod
    def from_record(record: dict[str, Any]) -> Cart:
        items = [
            CartLineItem(product_id=raw["product"], quantity=Quantity(raw["quantity"]))
            for raw in record.get("products", [])
        ]
        return Cart(id=record["id"], items=items)
