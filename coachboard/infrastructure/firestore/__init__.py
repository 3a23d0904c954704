from .client import (
    CollectionPaths,
    FirestoreConfig,
    FirestoreConnectionError,
    MockFirestoreClient,
    create_firestore_client,
)

__all__ = [
    "CollectionPaths",
    "FirestoreConfig",
    "FirestoreConnectionError",
    "MockFirestoreClient",
    "create_firestore_client",
]
