"""Controller for product operations.

Turns raw request data into service calls and service results into
JSON-ready payloads. Domain errors are not caught here; the HTTP layer
maps them to responses.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from shop.application.product_service import ProductService
from shop.application.publisher import PRODUCTS_EVENT, Publisher
from shop.application.queries import ProductQuery, handle_product_queries
from shop.domain.exceptions import ValidationError


class ProductController:

    def __init__(
        self,
        service: ProductService,
        publisher: Publisher,
        logger: logging.Logger | None = None,
    ) -> None:
        self._service = service
        self._publisher = publisher
        self._logger = logger or logging.getLogger(__name__)

    def get_products(
        self, query: ProductQuery | Mapping[str, str] | None = None
    ) -> dict[str, Any]:
        if not isinstance(query, ProductQuery):
            query = handle_product_queries(query)
        return self._service.get_products(query).to_dict()

    def get_product(self, product_id: str) -> dict[str, Any]:
        return self._service.get_product(product_id).to_record()

    def add_product(self, body: Any) -> dict[str, Any]:
        product = self._service.add_product(_require_object(body))
        self._broadcast()
        return product.to_record()

    def update_product(self, product_id: str, body: Any) -> dict[str, Any]:
        product = self._service.update_product(product_id, _require_object(body))
        self._broadcast()
        return product.to_record()

    def delete_product(self, product_id: str) -> None:
        self._service.delete_product(product_id)
        self._broadcast()

    def _broadcast(self) -> None:
        """Push the full catalog to listeners; failures never reach the caller."""
        try:
            products = [p.to_record() for p in self._service.list_all()]
            self._publisher.publish(PRODUCTS_EVENT, products)
        except Exception:
            self._logger.warning("Failed to broadcast product list", exc_info=True)


def _require_object(body: Any) -> dict[str, Any]:
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body
