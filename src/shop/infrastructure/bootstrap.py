"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions, and receives what it
needs through the Container rather than module-level globals.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from shop.application.cart_controller import CartController
from shop.application.cart_service import CartService
from shop.application.product_controller import ProductController
from shop.application.product_service import ProductService
from shop.application.publisher import NullPublisher, Publisher
from shop.domain.repository.record_store import RecordStore
from shop.infrastructure.config import Settings
from shop.infrastructure.persistence.json_record_store import JsonRecordStore
from shop.infrastructure.persistence.session import (
    create_db_engine,
    create_session_factory,
)
from shop.infrastructure.persistence.sql_document_store import SqlDocumentStore

logger = logging.getLogger(__name__)

PRODUCTS = "products"
CARTS = "carts"


@dataclass(frozen=True)
class Container:
    settings: Settings
    product_store: RecordStore
    cart_store: RecordStore
    product_service: ProductService
    cart_service: CartService
    product_controller: ProductController
    cart_controller: CartController
    publisher: Publisher


def build_stores(settings: Settings) -> tuple[RecordStore, RecordStore]:
    """Return (product store, cart store) for the configured persistence mode."""
    if settings.uses_filesystem:
        logger.info("Using filesystem persistence in %s", settings.data_dir)
        return (
            JsonRecordStore(settings.data_dir / f"{PRODUCTS}.json"),
            JsonRecordStore(settings.data_dir / f"{CARTS}.json"),
        )

    logger.info("Using database persistence at %s", settings.database_url)
    factory = create_session_factory(create_db_engine(settings.database_url))
    return SqlDocumentStore(factory, PRODUCTS), SqlDocumentStore(factory, CARTS)


def build_container(
    settings: Settings,
    publisher: Publisher | None = None,
    *,
    product_store: RecordStore | None = None,
    cart_store: RecordStore | None = None,
) -> Container:
    if product_store is None or cart_store is None:
        default_products, default_carts = build_stores(settings)
        product_store = product_store or default_products
        cart_store = cart_store or default_carts

    publisher = publisher or NullPublisher()
    product_service = ProductService(product_store)
    cart_service = CartService(cart_store)
    return Container(
        settings=settings,
        product_store=product_store,
        cart_store=cart_store,
        product_service=product_service,
        cart_service=cart_service,
        product_controller=ProductController(
            product_service, publisher, logging.getLogger("shop.products")
        ),
        cart_controller=CartController(cart_service),
        publisher=publisher,
    )
