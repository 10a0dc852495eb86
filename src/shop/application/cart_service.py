"""Application service for shopping carts.

Adding a product does not check that the product exists or has stock;
carts only hold product references.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Callable, Iterable

from shop.domain.model.cart import Cart, CartLineItem
from shop.domain.model.value_objects import Quantity
from shop.domain.repository.record_store import Record, RecordStore

logger = logging.getLogger(__name__)


class CartService:

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    def add_cart(self, items: Iterable[Any] | None = None) -> Cart:
        cart = Cart(id=uuid.uuid4().hex)
        cart.replace_items([CartLineItem.from_input(raw) for raw in items or []])
        self._store.create(cart.to_record())
        logger.info("Cart %s created with %d item(s)", cart.id, len(cart.items))
        return cart

    def get_cart(self, cart_id: str) -> Cart:
        return Cart.from_record(self._store.read(cart_id))

    def update_cart(self, cart_id: str, items: Iterable[Any]) -> Cart:
        """Replace the whole line-item list of an existing cart."""
        new_items = [CartLineItem.from_input(raw) for raw in items]
        return self._change(cart_id, lambda cart: cart.replace_items(new_items))

    def add_product_to_cart(
        self, cart_id: str, product_id: str, quantity: Any = 1
    ) -> Cart:
        """Add units of a product, merging with an existing line item."""
        qty = Quantity.of(quantity)
        return self._change(cart_id, lambda cart: cart.add_product(product_id, qty))

    def set_product_quantity(self, cart_id: str, product_id: str, quantity: Any) -> Cart:
        """Overwrite (not increment) the quantity of a product in the cart."""
        qty = Quantity.of(quantity)
        return self._change(cart_id, lambda cart: cart.set_quantity(product_id, qty))

    def remove_products_from_cart(self, cart_id: str) -> Cart:
        return self._change(cart_id, lambda cart: cart.clear())

    def _change(self, cart_id: str, mutate: Callable[[Cart], Any]) -> Cart:
        """Apply *mutate* to the stored cart in one atomic read-modify-write."""

        def change(record: Record) -> Record:
            cart = Cart.from_record(record)
            mutate(cart)
            return {**record, "products": cart.to_record()["products"]}

        cart = Cart.from_record(self._store.modify(cart_id, change))
        logger.info("Cart %s saved with %d item(s)", cart.id, len(cart.items))
        return cart
