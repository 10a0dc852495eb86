"""JSON-file-backed implementation of RecordStore.

The whole collection lives in one JSON array. Every operation reads and
parses the entire file; every mutation serializes and rewrites it.

Reads and mutations through one store instance are serialized by a lock,
and ``modify`` holds it across the read and the write, so concurrent
requests in one process never lose updates. The file is replaced
atomically (temporary file, then ``os.replace``), so readers never see a
half-written array.

Known limitation: two processes (or two instances on the same file) still
race. The later writer silently discards the earlier writer's change.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
import uuid
from pathlib import Path
from typing import Callable

from shop.domain.exceptions import NotFoundError, PersistenceError
from shop.domain.repository.record_store import Record, RecordStore

logger = logging.getLogger(__name__)


class JsonRecordStore(RecordStore):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.Lock()
        self._ensure_file()

    @property
    def file_path(self) -> Path:
        return self._file_path

    # --- RecordStore interface ------------------------------------------------

    def read_all(self) -> list[Record]:
        with self._lock:
            return self._load()

    def write_all(self, records: list[Record]) -> None:
        with self._lock:
            self._persist(records)

    def create(self, record: Record) -> Record:
        stored = dict(record)
        stored.setdefault("id", uuid.uuid4().hex)
        with self._lock:
            records = self._load()
            records.append(stored)
            self._persist(records)
        return stored

    def read(self, record_id: str) -> Record:
        with self._lock:
            records = self._load()
        return records[self._index_of(records, record_id)]

    def update(self, record_id: str, patch: Record) -> Record:
        with self._lock:
            records = self._load()
            index = self._index_of(records, record_id)
            merged = {**records[index], **patch, "id": records[index]["id"]}
            records[index] = merged
            self._persist(records)
        return merged

    def modify(self, record_id: str, change: Callable[[Record], Record]) -> Record:
        with self._lock:
            records = self._load()
            index = self._index_of(records, record_id)
            original_id = records[index]["id"]
            changed = {**change(dict(records[index])), "id": original_id}
            records[index] = changed
            self._persist(records)
        return changed

    def delete(self, record_id: str) -> None:
        with self._lock:
            records = self._load()
            del records[self._index_of(records, record_id)]
            self._persist(records)

    # --- Serialization helpers ------------------------------------------------

    def _index_of(self, records: list[Record], record_id: str) -> int:
        for index, record in enumerate(records):
            if str(record.get("id")) == str(record_id):
                return index
        raise NotFoundError(f"Record with ID '{record_id}' not found")

    def _load(self) -> list[Record]:
        try:
            raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise PersistenceError(f"Could not read {self._file_path}: {exc}") from exc
        if not isinstance(raw, list):
            raise PersistenceError(f"{self._file_path} does not contain a JSON array")
        return raw

    def _persist(self, records: list[Record]) -> None:
        try:
            content = json.dumps(records, indent=2) + "\n"
            fd, tmp_name = tempfile.mkstemp(
                dir=self._file_path.parent, prefix=f".{self._file_path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                    tmp.write(content)
                os.replace(tmp_name, self._file_path)
            except BaseException:
                os.unlink(tmp_name)
                raise
        except (OSError, TypeError, ValueError) as exc:
            raise PersistenceError(f"Could not write {self._file_path}: {exc}") from exc
        logger.debug("Wrote %d record(s) to %s", len(records), self._file_path)

    def _ensure_file(self) -> None:
        try:
            if not self._file_path.exists():
                self._file_path.parent.mkdir(parents=True, exist_ok=True)
                self._file_path.write_text("[]", encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"Could not create {self._file_path}: {exc}") from exc
