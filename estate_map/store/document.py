"""In-process document store with optimistic multi-document transactions."""

import copy
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from estate_map.exceptions import EstateMapError, TransactionConflictError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_DELETED = object()


@dataclass
class _Record:
    data: dict[str, Any]
    version: int = 1


@dataclass
class DocumentStore:
    """Named collections of JSON-like documents keyed by id.

    Every document carries a version that increases on each committed write.
    Reads hand out deep copies, so callers can never mutate stored state
    outside of a session commit.
    """

    _collections: dict[str, dict[str, _Record]] = field(default_factory=dict)
    _tombstones: dict[tuple[str, str], int] = field(default_factory=dict)
    _open_sessions: set["Session"] = field(default_factory=set)
    _lock: threading.RLock = field(default_factory=threading.RLock)

    # Non-transactional helpers

    def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        """Return a copy of a document, or None."""
        with self._lock:
            record = self._collections.get(collection, {}).get(doc_id)
            return copy.deepcopy(record.data) if record else None

    def find(
        self,
        collection: str,
        predicate: Callable[[dict[str, Any]], bool] | None = None,
    ) -> list[dict[str, Any]]:
        """Return copies of all documents matching ``predicate``."""
        with self._lock:
            records = list(self._collections.get(collection, {}).values())
            docs = [copy.deepcopy(r.data) for r in records]
        if predicate is None:
            return docs
        return [doc for doc in docs if predicate(doc)]

    def insert(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        """Insert a new document; fails if the id is taken."""
        with self._lock:
            docs = self._collections.setdefault(collection, {})
            if doc_id in docs:
                raise EstateMapError(f"Document {collection}/{doc_id} already exists")
            version = self._next_version(collection, doc_id)
            docs[doc_id] = _Record(data=copy.deepcopy(data), version=version)

    def delete(self, collection: str, doc_id: str) -> bool:
        """Delete a document; returns whether it existed."""
        with self._lock:
            record = self._collections.get(collection, {}).pop(doc_id, None)
            if record is None:
                return False
            self._tombstones[(collection, doc_id)] = record.version
            return True

    def count(self, collection: str) -> int:
        with self._lock:
            return len(self._collections.get(collection, {}))

    def version_of(self, collection: str, doc_id: str) -> int | None:
        with self._lock:
            record = self._collections.get(collection, {}).get(doc_id)
            return record.version if record else None

    # Transactions

    def session(self) -> "Session":
        """Open a new transaction session."""
        session = Session(self)
        with self._lock:
            self._open_sessions.add(session)
        return session

    def run_transaction(self, fn: Callable[["Session"], T], max_retries: int = 5) -> T:
        """Run ``fn`` inside a session and commit it.

        The whole callback is re-run on a fresh session whenever the commit
        detects a concurrent write, up to ``max_retries`` extra attempts.
        Any other exception aborts the attempt and propagates.

        Parameters
        ----------
        fn : Callable[[Session], T]
            Unit of work; must only touch the store through the session.
        max_retries : int
            Retries allowed after a conflicting commit.

        Returns
        -------
        T
            Whatever ``fn`` returned on the attempt that committed.

        Raises
        ------
        TransactionConflictError
            If every attempt lost to a concurrent writer.
        """
        attempt = 0
        while True:
            session = self.session()
            try:
                result = fn(session)
            except Exception:
                session.abort()
                raise
            try:
                session.commit()
            except TransactionConflictError:
                if attempt >= max_retries:
                    logger.warning("Transaction gave up after %d attempts", attempt + 1)
                    raise
                attempt += 1
                logger.debug("Write conflict, retrying transaction (attempt %d)", attempt + 1)
                continue
            return result

    def _commit(
        self,
        read_versions: dict[tuple[str, str], int | None],
        writes: dict[tuple[str, str], Any],
    ) -> None:
        with self._lock:
            for (collection, doc_id), seen in read_versions.items():
                record = self._collections.get(collection, {}).get(doc_id)
                current = record.version if record else None
                if current != seen:
                    raise TransactionConflictError(
                        f"Document {collection}/{doc_id} changed during transaction"
                    )

            for (collection, doc_id), data in writes.items():
                docs = self._collections.setdefault(collection, {})
                if data is _DELETED:
                    removed = docs.pop(doc_id, None)
                    if removed is not None:
                        self._tombstones[(collection, doc_id)] = removed.version
                    continue
                record = docs.get(doc_id)
                if record is None:
                    docs[doc_id] = _Record(data=data, version=self._next_version(collection, doc_id))
                else:
                    record.data = data
                    record.version += 1

    def _next_version(self, collection: str, doc_id: str) -> int:
        # A re-created id continues past its deleted predecessor's version
        return self._tombstones.pop((collection, doc_id), 0) + 1

    def _release(self, session: "Session") -> None:
        """Forget a closed session and the tombstones only it could still need.

        A tombstone matters only to an open session that read the document
        before it was deleted, so each close prunes the rest.
        """
        with self._lock:
            self._open_sessions.discard(session)
            if not self._tombstones:
                return
            still_read = {
                key
                for open_session in self._open_sessions
                for key, version in open_session._read_versions.items()
                if version is not None
            }
            for key in [k for k in self._tombstones if k not in still_read]:
                del self._tombstones[key]


class Session:
    """A single optimistic transaction over a :class:`DocumentStore`.

    Reads record the version they observed; writes are staged locally and
    only reach the store on :meth:`commit`, which fails with
    :class:`TransactionConflictError` if any observed document has moved on.
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store
        self._read_versions: dict[tuple[str, str], int | None] = {}
        self._writes: dict[tuple[str, str], Any] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        """Read a document, seeing this session's own staged writes."""
        self._ensure_open()
        key = (collection, doc_id)
        if key in self._writes:
            staged = self._writes[key]
            return None if staged is _DELETED else copy.deepcopy(staged)

        with self._store._lock:
            record = self._store._collections.get(collection, {}).get(doc_id)
            data = copy.deepcopy(record.data) if record else None
            version = record.version if record else None
            self._read_versions.setdefault(key, version)
        return data

    def put(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        """Stage an insert or full replacement."""
        self._ensure_open()
        self._writes[(collection, doc_id)] = copy.deepcopy(data)

    def delete(self, collection: str, doc_id: str) -> None:
        """Stage a delete."""
        self._ensure_open()
        self._writes[(collection, doc_id)] = _DELETED

    def commit(self) -> None:
        """Apply all staged writes atomically."""
        self._ensure_open()
        self._closed = True
        try:
            if self._writes:
                self._store._commit(self._read_versions, self._writes)
        finally:
            self._store._release(self)

    def abort(self) -> None:
        """Drop staged writes."""
        self._writes.clear()
        if not self._closed:
            self._closed = True
            self._store._release(self)

    def _ensure_open(self) -> None:
        if self._closed:
            raise EstateMapError("Session is already closed")
