"""
Backend-agnostic interface over the document database.

Stores talk to this interface only, so the Firestore client and the
in-memory client are interchangeable.
"""
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Tuple

# (document id, document data)
DocumentSnapshot = Tuple[str, Dict[str, Any]]
ChangeCallback = Callable[[List[DocumentSnapshot]], None]
ErrorCallback = Callable[[Exception], None]
Unsubscribe = Callable[[], None]


class TransactionContext(ABC):
    """Reads and buffered writes inside an atomic multi-document transaction.

    All reads must happen before the first write.
    """

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    def update(self, collection: str, doc_id: str, updates: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        pass


class DocumentClient(ABC):
    """Operations the marketplace needs from its document database.

    Every method raises ``StorageError`` when the backend fails; callers
    decide whether to propagate.
    """

    @abstractmethod
    def initialize(self) -> bool:
        pass

    @abstractmethod
    def fetch_all(
        self,
        collection: str,
        order_by: Optional[str] = None,
        descending: bool = False
    ) -> List[DocumentSnapshot]:
        pass

    @abstractmethod
    def find_documents(self, collection: str, field: str, value: Any) -> List[DocumentSnapshot]:
        pass

    @abstractmethod
    def get_document(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    def add_document(self, collection: str, data: Dict[str, Any]) -> str:
        pass

    @abstractmethod
    def set_document(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    def update_document(self, collection: str, doc_id: str, updates: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    def delete_document(self, collection: str, doc_id: str) -> None:
        pass

    @abstractmethod
    def batch_set(self, collection: str, documents: Dict[str, Dict[str, Any]]) -> None:
        pass

    @abstractmethod
    def subscribe(
        self,
        collection: str,
        on_change: ChangeCallback,
        on_error: Optional[ErrorCallback] = None,
        order_by: Optional[str] = None,
        descending: bool = False
    ) -> Unsubscribe:
        pass

    @abstractmethod
    def run_transaction(self, fn: Callable[[TransactionContext], Any]) -> Any:
        pass

    @abstractmethod
    def server_timestamp(self) -> Any:
        pass
