"""Controller for cart operations."""

from __future__ import annotations

from typing import Any

from shop.application.cart_service import CartService
from shop.domain.exceptions import ValidationError


def _items_from_body(body: Any, *, required: bool) -> list[Any]:
    """Accept ``{"products": [...]}``, a bare list, or (if optional) nothing."""
    if body is None and not required:
        return []
    if isinstance(body, list):
        return body
    if isinstance(body, dict):
        items = body.get("products", body.get("items"))
        if items is None and not required:
            return []
        if isinstance(items, list):
            return items
    raise ValidationError("Cart body must contain a 'products' list")


class CartController:

    def __init__(self, service: CartService) -> None:
        self._service = service

    def add_cart(self, body: Any = None) -> dict[str, Any]:
        return self._service.add_cart(_items_from_body(body, required=False)).to_record()

    def get_cart(self, cart_id: str) -> dict[str, Any]:
        return self._service.get_cart(cart_id).to_record()

    def update_cart(self, cart_id: str, body: Any) -> dict[str, Any]:
        items = _items_from_body(body, required=True)
        return self._service.update_cart(cart_id, items).to_record()

    def add_product_to_cart(
        self, cart_id: str, product_id: str, quantity: Any = None
    ) -> dict[str, Any]:
        if quantity is None:
            quantity = 1
        return self._service.add_product_to_cart(cart_id, product_id, quantity).to_record()

    def set_product_quantity(
        self, cart_id: str, product_id: str, quantity: Any
    ) -> dict[str, Any]:
        return self._service.set_product_quantity(cart_id, product_id, quantity).to_record()

    def remove_products_from_cart(self, cart_id: str) -> dict[str, Any]:
        return self._service.remove_products_from_cart(cart_id).to_record()
