"""Database-backed implementation of RecordStore.

Each collection is a set of rows in the ``documents`` table, one JSON
document per record. Every operation runs in its own short transaction;
there is no local caching and no cross-document transaction.

``modify`` reads the row with ``SELECT ... FOR UPDATE`` and writes it back
in the same transaction. SQLite ignores row locks, so mutations through one
store instance are additionally serialized by a process-local lock.
"""

from __future__ import annotations

import logging
import threading
import uuid
from typing import Any, Callable

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from shop.domain.exceptions import NotFoundError, PersistenceError
from shop.domain.repository.record_store import Record, RecordStore
from shop.infrastructure.persistence.models import Document
from shop.infrastructure.persistence.session import transaction

logger = logging.getLogger(__name__)


class SqlDocumentStore(RecordStore):

    def __init__(self, session_factory: sessionmaker[Session], collection: str) -> None:
        self._session_factory = session_factory
        self._collection = collection
        self._write_lock = threading.Lock()

    @property
    def collection(self) -> str:
        return self._collection

    # --- RecordStore interface ------------------------------------------------

    def read_all(self) -> list[Record]:
        def op(session: Session) -> list[Record]:
            stmt = (
                select(Document)
                .where(Document.collection == self._collection)
                .order_by(Document.seq)
            )
            return [dict(doc.data) for doc in session.execute(stmt).scalars()]

        return self._run(op)

    def write_all(self, records: list[Record]) -> None:
        def op(session: Session) -> None:
            session.execute(
                delete(Document).where(Document.collection == self._collection)
            )
            for record in records:
                session.add(self._new_document(record))

        self._run(op, exclusive=True)

    def create(self, record: Record) -> Record:
        def op(session: Session) -> Record:
            doc = self._new_document(record)
            session.add(doc)
            return dict(doc.data)

        return self._run(op, exclusive=True)

    def read(self, record_id: str) -> Record:
        return self._run(lambda session: dict(self._get(session, record_id).data))

    def update(self, record_id: str, patch: Record) -> Record:
        def op(session: Session) -> Record:
            doc = self._get(session, record_id)
            # Assign a new dict so the JSON column is flagged as modified.
            doc.data = {**doc.data, **patch, "id": doc.doc_id}
            return dict(doc.data)

        return self._run(op, exclusive=True)

    def modify(self, record_id: str, change: Callable[[Record], Record]) -> Record:
        def op(session: Session) -> Record:
            doc = self._get(session, record_id, for_update=True)
            doc.data = {**change(dict(doc.data)), "id": doc.doc_id}
            return dict(doc.data)

        return self._run(op, exclusive=True)

    def delete(self, record_id: str) -> None:
        self._run(
            lambda session: session.delete(self._get(session, record_id)), exclusive=True
        )

    # --- Internal helpers -----------------------------------------------------

    def _new_document(self, record: Record) -> Document:
        data = dict(record)
        data.setdefault("id", uuid.uuid4().hex)
        return Document(collection=self._collection, doc_id=str(data["id"]), data=data)

    def _get(self, session: Session, record_id: str, for_update: bool = False) -> Document:
        stmt = select(Document).where(
            Document.collection == self._collection,
            Document.doc_id == str(record_id),
        )
        if for_update:
            stmt = stmt.with_for_update()
        doc = session.execute(stmt).scalar_one_or_none()
        if doc is None:
            raise NotFoundError(f"Record with ID '{record_id}' not found")
        return doc

    def _run(self, op: Any, exclusive: bool = False) -> Any:
        try:
            if exclusive:
                with self._write_lock, transaction(self._session_factory) as session:
                    result = op(session)
            else:
                with transaction(self._session_factory) as session:
                    result = op(session)
        except SQLAlchemyError as exc:
            logger.error("Database error on collection %s: %s", self._collection, exc)
            raise PersistenceError(f"Database error: {exc}") from exc
        logger.debug("Completed operation on collection %s", self._collection)
        return result
