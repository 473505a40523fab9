"""
Firebase Firestore client for the marketplace collections.
"""
import firebase_admin
from firebase_admin import credentials, firestore
from typing import Optional, Dict, Any, List, Callable

from .base import (
    DocumentClient, TransactionContext, DocumentSnapshot, ChangeCallback,
    ErrorCallback, Unsubscribe
)
from ..utils.errors import StorageError
from ..utils.logger import get_logger
from config.settings import firebase_config


class FirestoreTransactionContext(TransactionContext):
    """Adapts a ``google.cloud.firestore.Transaction`` to ``TransactionContext``."""

    def __init__(self, db: firestore.Client, transaction):
        self.db = db
        self.transaction = transaction

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        doc = self.db.collection(collection).document(doc_id).get(transaction=self.transaction)
        return doc.to_dict() if doc.exists else None

    def update(self, collection: str, doc_id: str, updates: Dict[str, Any]) -> None:
        self.transaction.update(self.db.collection(collection).document(doc_id), updates)

    def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        self.transaction.set(self.db.collection(collection).document(doc_id), data)


class FirestoreClient(DocumentClient):
    """Firebase Firestore client for marketplace data."""

    def __init__(self):
        self.logger = get_logger("firestore_client")
        self.db: Optional[firestore.Client] = None
        self.initialized = False

    def initialize(self) -> bool:
        """
        Initialize Firebase Admin SDK and Firestore client.

        Returns:
            True if initialization successful, False otherwise
        """
        try:
            if not self.initialized:
                cred_dict = firebase_config.get_credentials_dict()

                if not cred_dict.get('project_id'):
                    self.logger.error("Firebase project ID not configured")
                    return False

                if not firebase_admin._apps:
                    cred = credentials.Certificate(cred_dict)
                    firebase_admin.initialize_app(cred)

                self.db = firestore.client()
                self.initialized = True

                self.logger.info("Firebase Firestore client initialized successfully",
                                 project_id=firebase_config.project_id)
            return True

        except Exception as e:
            self.logger.error("Failed to initialize Firebase Firestore", error=str(e))
            self.initialized = False
            return False

    def _require_db(self) -> firestore.Client:
        if not self.initialized and not self.initialize():
            raise StorageError("Failed to initialize Firestore client")
        return self.db

    def _query(self, collection: str, order_by: Optional[str], descending: bool):
        query = self._require_db().collection(collection)
        if order_by:
            direction = firestore.Query.DESCENDING if descending else firestore.Query.ASCENDING
            query = query.order_by(order_by, direction=direction)
        return query

    def fetch_all(
        self,
        collection: str,
        order_by: Optional[str] = None,
        descending: bool = False
    ) -> List[DocumentSnapshot]:
        try:
            docs = self._query(collection, order_by, descending).stream()
            results = [(doc.id, doc.to_dict()) for doc in docs]
            self.logger.debug("Fetched collection", collection=collection, count=len(results))
            return results
        except StorageError:
            raise
        except Exception as e:
            self.logger.error("Error fetching collection", collection=collection, error=str(e))
            raise StorageError(f"Error fetching {collection}: {e}") from e

    def find_documents(self, collection: str, field: str, value: Any) -> List[DocumentSnapshot]:
        try:
            docs = self._require_db().collection(collection).where(field, '==', value).stream()
            return [(doc.id, doc.to_dict()) for doc in docs]
        except StorageError:
            raise
        except Exception as e:
            self.logger.error("Error querying collection",
                              collection=collection, field=field, error=str(e))
            raise StorageError(f"Error querying {collection}: {e}") from e

    def get_document(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        try:
            doc = self._require_db().collection(collection).document(doc_id).get()
            return doc.to_dict() if doc.exists else None
        except StorageError:
            raise
        except Exception as e:
            self.logger.error("Error getting document",
                              collection=collection, doc_id=doc_id, error=str(e))
            raise StorageError(f"Error getting {collection}/{doc_id}: {e}") from e

    def add_document(self, collection: str, data: Dict[str, Any]) -> str:
        try:
            _, doc_ref = self._require_db().collection(collection).add(data)
            self.logger.info("Added document", collection=collection, doc_id=doc_ref.id)
            return doc_ref.id
        except StorageError:
            raise
        except Exception as e:
            self.logger.error("Error adding document", collection=collection, error=str(e))
            raise StorageError(f"Error adding to {collection}: {e}") from e

    def set_document(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        try:
            self._require_db().collection(collection).document(doc_id).set(data)
            self.logger.info("Set document", collection=collection, doc_id=doc_id)
        except StorageError:
            raise
        except Exception as e:
            self.logger.error("Error setting document",
                              collection=collection, doc_id=doc_id, error=str(e))
            raise StorageError(f"Error setting {collection}/{doc_id}: {e}") from e

    def update_document(self, collection: str, doc_id: str, updates: Dict[str, Any]) -> None:
        try:
            self._require_db().collection(collection).document(doc_id).update(updates)
            self.logger.info("Updated document", collection=collection, doc_id=doc_id,
                             fields=sorted(updates))
        except StorageError:
            raise
        except Exception as e:
            self.logger.error("Error updating document",
                              collection=collection, doc_id=doc_id, error=str(e))
            raise StorageError(f"Error updating {collection}/{doc_id}: {e}") from e

    def delete_document(self, collection: str, doc_id: str) -> None:
        try:
            self._require_db().collection(collection).document(doc_id).delete()
            self.logger.info("Deleted document", collection=collection, doc_id=doc_id)
        except StorageError:
            raise
        except Exception as e:
            self.logger.error("Error deleting document",
                              collection=collection, doc_id=doc_id, error=str(e))
            raise StorageError(f"Error deleting {collection}/{doc_id}: {e}") from e

    def batch_set(self, collection: str, documents: Dict[str, Dict[str, Any]]) -> None:
        try:
            db = self._require_db()
            batch = db.batch()
            for doc_id, data in documents.items():
                batch.set(db.collection(collection).document(doc_id), data)
            batch.commit()
            self.logger.info("Committed batch write", collection=collection, count=len(documents))
        except StorageError:
            raise
        except Exception as e:
            self.logger.error("Error committing batch", collection=collection, error=str(e))
            raise StorageError(f"Error writing batch to {collection}: {e}") from e

    def subscribe(
        self,
        collection: str,
        on_change: ChangeCallback,
        on_error: Optional[ErrorCallback] = None,
        order_by: Optional[str] = None,
        descending: bool = False
    ) -> Unsubscribe:
        """
        Attach a realtime listener to a collection.

        ``on_change`` receives the complete, ordered collection snapshot on
        every change. Callbacks run on the Firestore watch thread.

        Returns:
            Function that detaches the listener
        """
        def _on_snapshot(col_snapshot, changes, read_time):
            try:
                on_change([(doc.id, doc.to_dict()) for doc in col_snapshot])
            except Exception as e:
                self.logger.error("Realtime listener callback failed",
                                  collection=collection, error=str(e))
                if on_error:
                    on_error(e)

        try:
            watch = self._query(collection, order_by, descending).on_snapshot(_on_snapshot)
        except StorageError:
            raise
        except Exception as e:
            self.logger.error("Error subscribing to collection", collection=collection, error=str(e))
            raise StorageError(f"Error subscribing to {collection}: {e}") from e
        self.logger.info("Subscribed to collection", collection=collection)

        def _unsubscribe():
            watch.unsubscribe()
            self.logger.info("Unsubscribed from collection", collection=collection)

        return _unsubscribe

    def run_transaction(self, fn: Callable[[TransactionContext], Any]) -> Any:
        """
        Run ``fn`` inside a Firestore transaction.

        The SDK retries ``fn`` on contention; exceptions raised by ``fn``
        abort the transaction and propagate unchanged.
        """
        db = self._require_db()
        transaction = db.transaction()

        @firestore.transactional
        def _run(txn):
            return fn(FirestoreTransactionContext(db, txn))

        return _run(transaction)

    def server_timestamp(self) -> Any:
        return firestore.SERVER_TIMESTAMP

    def __enter__(self):
        """Context manager entry."""
        self.initialize()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        pass
