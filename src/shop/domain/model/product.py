"""Product entity.

Products are created, updated and deleted by catalog administrators and
are referenced (never embedded) by cart line items.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from shop.domain.exceptions import ValidationError

REQUIRED_FIELDS = ("name", "price", "stock")
OPTIONAL_FIELDS = ("description", "category", "thumbnails")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class Product:
    """A product in the catalog.

    ``__init__`` does not validate so persisted records can be
    reconstituted as-is; use ``Product.create()`` for caller input.
    """

    id: str
    name: str
    price: float
    stock: int
    description: str = ""
    category: str = ""
    thumbnails: list[str] = field(default_factory=list)

    @property
    def is_available(self) -> bool:
        return self.stock > 0

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def create(product_id: str, fields: dict[str, Any]) -> Product:
        """Build a product from untrusted fields, enforcing every invariant."""
        if not isinstance(fields, dict):
            raise ValidationError("Product data must be an object")

        unknown = set(fields) - set(REQUIRED_FIELDS) - set(OPTIONAL_FIELDS) - {"id"}
        if unknown:
            raise ValidationError(
                f"Unknown product field(s): {', '.join(sorted(unknown))}"
            )

        missing = [name for name in REQUIRED_FIELDS if fields.get(name) is None]
        if missing:
            raise ValidationError(
                f"Missing required product field(s): {', '.join(missing)}"
            )

        name = fields["name"]
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Product name must be a non-empty string")

        price = fields["price"]
        if not _is_number(price) or not math.isfinite(price):
            raise ValidationError(f"Product price must be a finite number, got {price!r}")
        if price < 0:
            raise ValidationError("Product price cannot be negative")

        stock = fields["stock"]
        if not _is_integer(stock):
            raise ValidationError(f"Product stock must be an integer, got {stock!r}")
        if stock < 0:
            raise ValidationError("Product stock cannot be negative")

        description = fields.get("description", "")
        category = fields.get("category", "")
        for label, value in (("description", description), ("category", category)):
            if not isinstance(value, str):
                raise ValidationError(f"Product {label} must be a string")

        thumbnails = fields.get("thumbnails", [])
        if not isinstance(thumbnails, list) or not all(
            isinstance(t, str) for t in thumbnails
        ):
            raise ValidationError("Product thumbnails must be a list of strings")

        return Product(
            id=product_id,
            name=name.strip(),
            price=price,
            stock=stock,
            description=description,
            category=category,
            thumbnails=list(thumbnails),
        )

    @staticmethod
    def from_record(record: dict[str, Any]) -> Product:
        return Product(
            id=record["id"],
            name=record["name"],
            price=record["price"],
            stock=record["stock"],
            description=record.get("description", ""),
            category=record.get("category", ""),
            thumbnails=list(record.get("thumbnails", [])),
        )

    # --- Serialization --------------------------------------------------------

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "stock": self.stock,
            "category": self.category,
            "thumbnails": list(self.thumbnails),
        }

    def merged_with(self, patch: dict[str, Any]) -> Product:
        """Return a revalidated copy with *patch* applied.

        The identifier never changes; an ``id`` key in the patch is ignored.
        """
        if not isinstance(patch, dict):
            raise ValidationError("Product data must be an object")
        fields = self.to_record()
        fields.update({k: v for k, v in patch.items() if k != "id"})
        return Product.create(self.id, fields)
