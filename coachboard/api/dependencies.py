"""
FastAPI dependency injection.

Dependencies provide the Firestore client, repositories, the controller and
the app session store to route handlers. Routes never build their own, so
tests can swap any of them through app.dependency_overrides.
"""

import logging
from typing import Annotated

from fastapi import Depends

from ..config.settings import Settings, get_settings
from ..core.controller import CoachingController
from ..infrastructure.firestore.client import (
    CollectionPaths,
    FirestoreClient,
    FirestoreConfig,
    create_firestore_client,
)
from ..infrastructure.firestore.repositories import LexiconRepository, StudentRepository
from ..infrastructure.firestore.seed import DemoDataSeeder
from .app_sessions import AppSessionStore

logger = logging.getLogger(__name__)

# Shared across requests: the mock keeps its data for the life of the
# process, and firebase-admin allows one default app per process.
_firestore_client = None
_app_sessions = AppSessionStore()


# ---------------------------------------------------------------------------
# Store Dependencies
# ---------------------------------------------------------------------------

def get_firestore_client(
    settings: Annotated[Settings, Depends(get_settings)],
) -> FirestoreClient:
    """
    Provide the Firestore client, created on first use.

    Raises FirestoreConnectionError when sign-in fails; the next request
    tries again.
    """
    global _firestore_client

    if _firestore_client is None:
        if settings.firestore_mock_mode:
            _firestore_client = create_firestore_client(mock_mode=True)
            logger.info("Created shared mock Firestore client")
        else:
            config = FirestoreConfig(
                app_id=settings.app_id,
                project_id=settings.firebase_project_id,
                credentials_path=settings.firebase_credentials_path,
                initial_auth_token=settings.firebase_initial_auth_token,
            )
            _firestore_client = create_firestore_client(config=config)
            logger.info("Created Firestore client", extra={"app_id": settings.app_id})

    return _firestore_client


def get_collection_paths(
    settings: Annotated[Settings, Depends(get_settings)],
) -> CollectionPaths:
    return CollectionPaths(app_id=settings.app_id)


# ---------------------------------------------------------------------------
# Application Dependencies
# ---------------------------------------------------------------------------

def build_controller(client: FirestoreClient, settings: Settings) -> CoachingController:
    paths = CollectionPaths(app_id=settings.app_id)
    return CoachingController(
        students=StudentRepository(client, paths),
        lexicon=LexiconRepository(client, paths),
        seeder=DemoDataSeeder(client, paths) if settings.seed_demo_data else None,
    )


def get_controller(
    client: Annotated[FirestoreClient, Depends(get_firestore_client)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> CoachingController:
    """The controller is stateless; a new one per request is cheap."""
    return build_controller(client, settings)


def get_app_sessions() -> AppSessionStore:
    return _app_sessions


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

# These type aliases make route signatures cleaner
ControllerDep = Annotated[CoachingController, Depends(get_controller)]
AppSessionsDep = Annotated[AppSessionStore, Depends(get_app_sessions)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
