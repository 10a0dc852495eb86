"""Application service for the product catalog."""

from __future__ import annotations

import logging
import math
import uuid
from typing import Any

from shop.application.dto import ProductPage
from shop.application.queries import Availability, ProductQuery, SortOrder
from shop.domain.model.product import Product
from shop.domain.repository.record_store import Record, RecordStore

logger = logging.getLogger(__name__)


class ProductService:

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    # --- Queries --------------------------------------------------------------

    def list_all(self) -> list[Product]:
        return [Product.from_record(r) for r in self._store.read_all()]

    def get_products(self, query: ProductQuery | None = None) -> ProductPage:
        """Filter, then sort, then paginate the catalog.

        Paging is computed over the filtered and sorted set, so
        ``total_pages`` reflects only matching products.
        """
        query = query or ProductQuery()
        products = self._apply_filter(self.list_all(), query)
        products = self._apply_sort(products, query.sort)

        total_pages = max(1, math.ceil(len(products) / query.limit))
        start = (query.page - 1) * query.limit
        payload = products[start:start + query.limit]

        has_prev = query.page > 1
        has_next = query.page < total_pages
        prev_page = query.page - 1 if has_prev else None
        next_page = query.page + 1 if has_next else None
        return ProductPage(
            payload=payload,
            total_pages=total_pages,
            page=query.page,
            has_prev_page=has_prev,
            has_next_page=has_next,
            prev_page=prev_page,
            next_page=next_page,
            prev_link=query.link_for(prev_page) if prev_page else None,
            next_link=query.link_for(next_page) if next_page else None,
        )

    def get_product(self, product_id: str) -> Product:
        return Product.from_record(self._store.read(product_id))

    # --- Commands -------------------------------------------------------------

    def add_product(self, fields: dict[str, Any]) -> Product:
        """Validate *fields* and persist a new product under a fresh id."""
        product = Product.create(uuid.uuid4().hex, fields)
        self._store.create(product.to_record())
        logger.info("Product %s '%s' created", product.id, product.name)
        return product

    def update_product(self, product_id: str, patch: dict[str, Any]) -> Product:
        """Apply a partial update atomically; the id is never changed."""

        def change(record: Record) -> Record:
            return Product.from_record(record).merged_with(patch).to_record()

        updated = Product.from_record(self._store.modify(product_id, change))
        logger.info("Product %s updated", product_id)
        return updated

    def delete_product(self, product_id: str) -> None:
        self._store.delete(product_id)
        logger.info("Product %s deleted", product_id)

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _apply_filter(products: list[Product], query: ProductQuery) -> list[Product]:
        criteria = query.filter
        if criteria.category is not None:
            products = [p for p in products if p.category == criteria.category]
        if criteria.availability is Availability.AVAILABLE:
            products = [p for p in products if p.is_available]
        elif criteria.availability is Availability.UNAVAILABLE:
            products = [p for p in products if not p.is_available]
        return products

    @staticmethod
    def _apply_sort(products: list[Product], order: SortOrder) -> list[Product]:
        if order is SortOrder.PRICE_ASC:
            return sorted(products, key=lambda p: p.price)
        if order is SortOrder.PRICE_DESC:
            return sorted(products, key=lambda p: p.price, reverse=True)
        return products
