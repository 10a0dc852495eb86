"""Abstract record store shared by every collection.

Defined in the domain layer so services never depend on infrastructure.
The filesystem (JSON file) and database (document table) backends live
in the infrastructure layer and are chosen once at start-up.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable

Record = dict[str, Any]


class RecordStore(ABC):

    @abstractmethod
    def read_all(self) -> list[Record]:
        """Return every record in the collection, in insertion order."""

    @abstractmethod
    def write_all(self, records: list[Record]) -> None:
        """Replace the whole collection with *records*."""

    @abstractmethod
    def create(self, record: Record) -> Record:
        """Insert a record, assigning an ``id`` if it has none."""

    @abstractmethod
    def read(self, record_id: str) -> Record:
        """Return one record. Raises NotFoundError if it does not exist."""

    @abstractmethod
    def update(self, record_id: str, patch: Record) -> Record:
        """Shallow-merge *patch* into a record and return the result.

        The identifier is never changed. Raises NotFoundError if absent.
        """

    @abstractmethod
    def modify(self, record_id: str, change: Callable[[Record], Record]) -> Record:
        """Replace a record with ``change(current)`` as one atomic step.

        No other mutation of the record can interleave between the read and
        the write. If *change* raises, nothing is written. The identifier is
        never changed. Raises NotFoundError if absent.
        """

    @abstractmethod
    def delete(self, record_id: str) -> None:
        """Remove a record. Raises NotFoundError if it does not exist."""
