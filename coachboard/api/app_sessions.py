"""
In-process store of app sessions.

An app session is one user's running copy of the application: the latest
AppState snapshot, keyed by an opaque id handed to the client. Nothing here
survives a restart; the durable data is in Firestore.
"""

import logging
import threading
import uuid

from ..core.controller import AppState

logger = logging.getLogger(__name__)


class AppSessionNotFoundError(Exception):
    """Raised when a client presents an unknown or closed app session id."""
    pass


class AppSessionStore:
    def __init__(self) -> None:
        self._states: dict[str, AppState] = {}
        self._lock = threading.Lock()

    def open(self, state: AppState) -> str:
        session_id = uuid.uuid4().hex
        with self._lock:
            self._states[session_id] = state
        logger.info("Opened app session", extra={"session_id": session_id})
        return session_id

    def get(self, session_id: str) -> AppState:
        with self._lock:
            state = self._states.get(session_id)
        if state is None:
            raise AppSessionNotFoundError(f"App session {session_id} not found")
        return state

    def put(self, session_id: str, state: AppState) -> None:
        with self._lock:
            if session_id not in self._states:
                raise AppSessionNotFoundError(f"App session {session_id} not found")
            self._states[session_id] = state

    def close(self, session_id: str) -> None:
        with self._lock:
            if self._states.pop(session_id, None) is None:
                raise AppSessionNotFoundError(f"App session {session_id} not found")
        logger.info("Closed app session", extra={"session_id": session_id})

    def __len__(self) -> int:
        return len(self._states)
