"""
Document database clients.
"""
from typing import Optional

from .base import DocumentClient, TransactionContext
from .firestore_client import FirestoreClient
from .memory_client import MemoryDocumentClient
from config.settings import app_config


def create_document_client(backend: Optional[str] = None) -> DocumentClient:
    """Build the client for the configured storage backend ("firestore" or "memory")."""
    backend = (backend or app_config.storage_backend).lower()
    if backend == "memory":
        return MemoryDocumentClient()
    if backend == "firestore":
        return FirestoreClient()
    raise ValueError(f"Unknown storage backend: {backend}")


__all__ = [
    'DocumentClient', 'TransactionContext', 'FirestoreClient',
    'MemoryDocumentClient', 'create_document_client'
]
