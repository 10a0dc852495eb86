"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from shop.domain.exceptions import ValidationError


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    Enforces the invariant that a cart can never hold zero or negative
    units of a product.
    """

    value: int

    def __post_init__(self) -> None:
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __add__(self, other: Quantity) -> Quantity:
        return Quantity(self.value + other.value)

    def __str__(self) -> str:
        return str(self.value)

    @staticmethod
    def of(value: Any) -> Quantity:
        """Factory that also accepts integral strings (e.g. from a CLI)."""
        if isinstance(value, str):
            try:
                value = int(value.strip())
            except ValueError as exc:
                raise ValidationError(f"Invalid quantity: {value!r}") from exc
        return Quantity(value)
