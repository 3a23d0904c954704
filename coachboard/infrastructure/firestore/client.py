"""
Firestore client management.

Provides the factory that signs in to Firebase and returns a Firestore
client, plus an in-memory mock for local development and tests.

Using the repository pattern means most code never touches this module
directly - it goes through StudentRepository and LexiconRepository, which
translate between domain models and documents.
"""

import copy
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterator, Optional, Protocol

logger = logging.getLogger(__name__)

ASCENDING = "ASCENDING"
DESCENDING = "DESCENDING"


class FirestoreConnectionError(Exception):
    """Raised when Firebase sign-in or Firestore initialization fails."""
    pass


class FirestoreClient(Protocol):
    """
    The slice of google.cloud.firestore.Client the repositories use.

    Using a protocol means tests can provide the mock without importing
    firebase-admin at all.
    """

    def collection(self, path: str): ...
    def batch(self): ...


@dataclass
class FirestoreConfig:
    """Configuration for the Firebase app and Firestore client."""
    app_id: str = "default-app-id"
    project_id: Optional[str] = None
    credentials_path: Optional[str] = None
    initial_auth_token: Optional[str] = None


@dataclass(frozen=True)
class CollectionPaths:
    """
    Where each collection lives.

    Everything is nested under the app's public data document so several
    deployments can share one Firebase project.
    """
    app_id: str

    @property
    def root(self) -> str:
        return f"artifacts/{self.app_id}/public/data"

    @property
    def students(self) -> str:
        return f"{self.root}/students"

    @property
    def lexicon(self) -> str:
        return f"{self.root}/exerciseLexicon"

    def training_history(self, student_id: str) -> str:
        return f"{self.students}/{student_id}/trainingHistory"

    def weight_history(self, student_id: str) -> str:
        return f"{self.students}/{student_id}/weightHistory"


# ---------------------------------------------------------------------------
# Firebase
# ---------------------------------------------------------------------------

def _firebase_app(config: FirestoreConfig):
    """
    Initialize (or reuse) the default Firebase app.

    A service-account file is used when configured; otherwise application
    default credentials, which is what the deployment environment provides.
    """
    import firebase_admin
    from firebase_admin import credentials

    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    if config.credentials_path:
        logger.info("Using service account credentials for Firebase")
        cred = credentials.Certificate(config.credentials_path)
    else:
        logger.info("Using application default credentials for Firebase")
        cred = credentials.ApplicationDefault()

    options = {"projectId": config.project_id} if config.project_id else None
    return firebase_admin.initialize_app(cred, options)


def connect_firestore(config: FirestoreConfig):
    """
    Sign in and return a Firestore client.

    When an initial auth token is configured it must verify before any
    store access happens. Every failure surfaces as FirestoreConnectionError.
    """
    try:
        from firebase_admin import auth, firestore
    except ImportError:
        raise ImportError(
            "firebase-admin is required. "
            "Install with: pip install firebase-admin"
        )

    try:
        app = _firebase_app(config)

        if config.initial_auth_token:
            claims = auth.verify_id_token(config.initial_auth_token, app=app)
            logger.info("Verified initial auth token", extra={"uid": claims.get("uid")})

        client = firestore.client(app)

    except Exception as e:
        logger.error(
            "Firestore initialization failed",
            extra={"error": str(e), "app_id": config.app_id},
        )
        raise FirestoreConnectionError(f"Firestore initialization failed: {e}")

    logger.debug(
        "Established Firestore client",
        extra={"app_id": config.app_id, "project_id": config.project_id},
    )
    return client


# ---------------------------------------------------------------------------
# Mock client for local development
# ---------------------------------------------------------------------------

def _new_document_id() -> str:
    return uuid.uuid4().hex[:20]


class MockDocumentSnapshot:
    """Read-only copy of a document, like DocumentSnapshot."""

    def __init__(self, doc_id: str, data: Optional[dict]) -> None:
        self.id = doc_id
        self._data = copy.deepcopy(data)

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> Optional[dict]:
        return copy.deepcopy(self._data)


class MockDocumentReference:
    def __init__(self, store: "MockFirestoreClient", collection_path: str, doc_id: str) -> None:
        self._store = store
        self._collection_path = collection_path
        self.id = doc_id

    @property
    def path(self) -> str:
        return f"{self._collection_path}/{self.id}"

    def collection(self, name: str) -> "MockCollectionReference":
        return MockCollectionReference(self._store, f"{self.path}/{name}")

    def get(self) -> MockDocumentSnapshot:
        return MockDocumentSnapshot(self.id, self._store._documents(self._collection_path).get(self.id))

    def set(self, data: dict) -> None:
        self._store._documents(self._collection_path)[self.id] = copy.deepcopy(data)

    def update(self, data: dict) -> None:
        """Merge top-level fields. Like Firestore, fails on a missing document."""
        documents = self._store._documents(self._collection_path)
        if self.id not in documents:
            raise KeyError(f"No document to update: {self.path}")
        documents[self.id].update(copy.deepcopy(data))

    def delete(self) -> None:
        self._store._documents(self._collection_path).pop(self.id, None)


class MockQuery:
    """
    Ordering and limits over one collection.

    Documents missing the order-by field are left out, as Firestore does.
    """

    def __init__(
        self,
        store: "MockFirestoreClient",
        path: str,
        order_field: Optional[str] = None,
        direction: str = ASCENDING,
        count: Optional[int] = None,
    ) -> None:
        self._store = store
        self._path = path
        self._order_field = order_field
        self._direction = direction
        self._count = count

    def order_by(self, field_path: str, direction: str = ASCENDING) -> "MockQuery":
        return MockQuery(self._store, self._path, field_path, direction, self._count)

    def limit(self, count: int) -> "MockQuery":
        return MockQuery(self._store, self._path, self._order_field, self._direction, count)

    def stream(self) -> Iterator[MockDocumentSnapshot]:
        items = list(self._store._documents(self._path).items())

        if self._order_field is not None:
            items = [(doc_id, data) for doc_id, data in items if self._order_field in data]
            items.sort(
                key=lambda item: item[1][self._order_field],
                reverse=self._direction == DESCENDING,
            )

        if self._count is not None:
            items = items[:self._count]

        for doc_id, data in items:
            yield MockDocumentSnapshot(doc_id, data)


class MockCollectionReference(MockQuery):
    def __init__(self, store: "MockFirestoreClient", path: str) -> None:
        super().__init__(store, path)

    def document(self, doc_id: Optional[str] = None) -> MockDocumentReference:
        return MockDocumentReference(self._store, self._path, doc_id or _new_document_id())

    def add(self, data: dict) -> tuple[datetime, MockDocumentReference]:
        """Store under a generated id; returns (update time, reference) like the real client."""
        ref = self.document()
        ref.set(data)
        return datetime.now(timezone.utc), ref


class MockWriteBatch:
    """Buffers writes until commit, so a failed seed leaves nothing behind."""

    def __init__(self) -> None:
        self._writes: list[tuple[MockDocumentReference, dict]] = []

    def set(self, ref: MockDocumentReference, data: dict) -> None:
        self._writes.append((ref, data))

    def commit(self) -> list:
        for ref, data in self._writes:
            ref.set(data)
        committed = list(self._writes)
        self._writes.clear()
        logger.debug("Mock batch commit", extra={"writes": len(committed)})
        return committed


class MockFirestoreClient:
    """
    In-memory Firestore for local development.

    Stores documents as {collection_path: {doc_id: data}}, with
    sub-collections addressed by their full slash path. This enables
    running the full API without a Firebase project.

    Not suitable for production, but perfect for:
    - Local development
    - Unit tests
    - CI/CD environments
    """

    def __init__(self) -> None:
        self._storage: dict[str, dict[str, dict]] = {}
        logger.info("Initialized mock Firestore client (in-memory)")

    def _documents(self, path: str) -> dict[str, dict]:
        return self._storage.setdefault(path.strip("/"), {})

    def collection(self, path: str) -> MockCollectionReference:
        return MockCollectionReference(self, path.strip("/"))

    def batch(self) -> MockWriteBatch:
        return MockWriteBatch()

    # Helpers for tests
    def _count(self, path: str) -> int:
        return len(self._documents(path))


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_firestore_client(
    config: Optional[FirestoreConfig] = None,
    mock_mode: bool = False,
) -> FirestoreClient:
    """
    Create a Firestore client based on configuration.

    Args:
        config: Firebase configuration (required if not mock_mode)
        mock_mode: If True, return the in-memory client

    Returns:
        FirestoreClient implementation (real or mock)
    """
    if mock_mode:
        return MockFirestoreClient()

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return connect_firestore(config)
