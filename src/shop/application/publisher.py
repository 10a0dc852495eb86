"""Port for pushing realtime events to connected listeners."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

PRODUCTS_EVENT = "products"


class Publisher(ABC):

    @abstractmethod
    def publish(self, event: str, payload: Any) -> None:
        """Deliver *payload* under *event* to every listener, best effort."""


class NullPublisher(Publisher):
    """Publisher for contexts without listeners (CLI, scripts)."""

    def publish(self, event: str, payload: Any) -> None:
        return None
