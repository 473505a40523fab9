"""
In-process document store for local development and tests.

Implements the same interface as ``FirestoreClient``: realtime listeners
receive full ordered snapshots after every committed write, and
transactions are serialized under a single lock.
"""
import copy
import threading
import uuid
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List, Callable, Tuple

from .base import (
    DocumentClient, TransactionContext, DocumentSnapshot, ChangeCallback,
    ErrorCallback, Unsubscribe
)
from ..utils.errors import StorageError
from ..utils.logger import get_logger


class _Listener:
    def __init__(self, on_change: ChangeCallback, on_error: Optional[ErrorCallback],
                 order_by: Optional[str], descending: bool):
        self.on_change = on_change
        self.on_error = on_error
        self.order_by = order_by
        self.descending = descending


class MemoryTransactionContext(TransactionContext):
    """Buffers writes until the transaction function returns."""

    def __init__(self, client: 'MemoryDocumentClient'):
        self.client = client
        self.writes: List[Tuple[str, str, str, Dict[str, Any]]] = []

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        if self.writes:
            raise StorageError("Transactions require all reads before writes")
        return self.client._read(collection, doc_id)

    def update(self, collection: str, doc_id: str, updates: Dict[str, Any]) -> None:
        self.writes.append(("update", collection, doc_id, copy.deepcopy(updates)))

    def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        self.writes.append(("set", collection, doc_id, copy.deepcopy(data)))


class MemoryDocumentClient(DocumentClient):
    """Dictionary-backed document store."""

    def __init__(self):
        self.logger = get_logger("memory_client")
        self.collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.listeners: Dict[str, List[_Listener]] = {}
        self.lock = threading.RLock()
        self.notify_lock = threading.RLock()
        self.initialized = False

    def initialize(self) -> bool:
        self.initialized = True
        return True

    def _read(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        doc = self.collections.get(collection, {}).get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    def _resolve(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Replace server timestamp sentinels with the commit time."""
        now = datetime.now(timezone.utc)
        return {k: (now if v is _SERVER_TIMESTAMP else v) for k, v in data.items()}

    def _ordered(self, collection: str, order_by: Optional[str], descending: bool) -> List[DocumentSnapshot]:
        docs = [(doc_id, copy.deepcopy(data))
                for doc_id, data in self.collections.get(collection, {}).items()]
        if order_by:
            # Firestore omits documents missing the ordering field
            docs = [d for d in docs if d[1].get(order_by) is not None]
            docs.sort(key=lambda d: d[1][order_by], reverse=descending)
        return docs

    def _apply(self, op: str, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        docs = self.collections.setdefault(collection, {})
        if op == "set":
            docs[doc_id] = self._resolve(data)
        elif op == "update":
            if doc_id not in docs:
                raise StorageError(f"No document to update: {collection}/{doc_id}")
            docs[doc_id].update(self._resolve(data))
        elif op == "delete":
            docs.pop(doc_id, None)

    def _notify(self, collections) -> None:
        # Deliveries are serialized; each snapshot is read at delivery time
        with self.notify_lock:
            for collection in collections:
                for listener in list(self.listeners.get(collection, [])):
                    with self.lock:
                        snapshot = self._ordered(collection, listener.order_by, listener.descending)
                    try:
                        listener.on_change(snapshot)
                    except Exception as e:
                        self.logger.error("Realtime listener callback failed",
                                          collection=collection, error=str(e))
                        if listener.on_error:
                            listener.on_error(e)

    def _apply_all(self, writes: List[Tuple[str, str, str, Dict[str, Any]]]) -> None:
        with self.lock:
            # Validate first so a failing write leaves nothing applied
            for op, collection, doc_id, _ in writes:
                if op == "update" and doc_id not in self.collections.get(collection, {}):
                    raise StorageError(f"No document to update: {collection}/{doc_id}")
            for op, collection, doc_id, data in writes:
                self._apply(op, collection, doc_id, data)

    def _commit(self, writes: List[Tuple[str, str, str, Dict[str, Any]]]) -> None:
        self._apply_all(writes)
        self._notify(dict.fromkeys(w[1] for w in writes))

    def fetch_all(
        self,
        collection: str,
        order_by: Optional[str] = None,
        descending: bool = False
    ) -> List[DocumentSnapshot]:
        with self.lock:
            return self._ordered(collection, order_by, descending)

    def find_documents(self, collection: str, field: str, value: Any) -> List[DocumentSnapshot]:
        with self.lock:
            return [(doc_id, data) for doc_id, data in self._ordered(collection, None, False)
                    if data.get(field) == value]

    def get_document(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        with self.lock:
            return self._read(collection, doc_id)

    def add_document(self, collection: str, data: Dict[str, Any]) -> str:
        doc_id = uuid.uuid4().hex[:20]
        self._commit([("set", collection, doc_id, copy.deepcopy(data))])
        return doc_id

    def set_document(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        self._commit([("set", collection, doc_id, copy.deepcopy(data))])

    def update_document(self, collection: str, doc_id: str, updates: Dict[str, Any]) -> None:
        self._commit([("update", collection, doc_id, copy.deepcopy(updates))])

    def delete_document(self, collection: str, doc_id: str) -> None:
        self._commit([("delete", collection, doc_id, {})])

    def batch_set(self, collection: str, documents: Dict[str, Dict[str, Any]]) -> None:
        self._commit([("set", collection, doc_id, copy.deepcopy(data))
                      for doc_id, data in documents.items()])

    def subscribe(
        self,
        collection: str,
        on_change: ChangeCallback,
        on_error: Optional[ErrorCallback] = None,
        order_by: Optional[str] = None,
        descending: bool = False
    ) -> Unsubscribe:
        listener = _Listener(on_change, on_error, order_by, descending)
        with self.notify_lock:
            with self.lock:
                self.listeners.setdefault(collection, []).append(listener)
                snapshot = self._ordered(collection, order_by, descending)
            # Firestore delivers the current state immediately on attach
            on_change(snapshot)

        def _unsubscribe():
            with self.lock:
                if listener in self.listeners.get(collection, []):
                    self.listeners[collection].remove(listener)

        return _unsubscribe

    def run_transaction(self, fn: Callable[[TransactionContext], Any]) -> Any:
        with self.lock:
            context = MemoryTransactionContext(self)
            result = fn(context)
            self._apply_all(context.writes)
        self._notify(dict.fromkeys(w[1] for w in context.writes))
        return result

    def server_timestamp(self) -> Any:
        return _SERVER_TIMESTAMP


class _ServerTimestamp:
    def __repr__(self):
        return "SERVER_TIMESTAMP"


_SERVER_TIMESTAMP = _ServerTimestamp()
