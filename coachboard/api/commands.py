"""
Running controller commands against an app session.

Loads the session's snapshot, applies one command, stores the result and
renders it. Domain exceptions become HTTP errors here so the route modules
stay one call per endpoint.
"""

import logging
from typing import Callable

from fastapi import HTTPException, status

from ..core.controller import AppState, StudentNotFoundError
from ..core.navigation import InvalidScreenError
from ..core.program.editing import ProgramEditError
from .app_sessions import AppSessionNotFoundError, AppSessionStore
from .views import ScreenView, render

logger = logging.getLogger(__name__)


def load_state(sessions: AppSessionStore, session_id: str) -> AppState:
    try:
        return sessions.get(session_id)
    except AppSessionNotFoundError:
        logger.warning("Unknown app session", extra={"session_id": session_id})
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="App session not found",
        )


def execute(
    sessions: AppSessionStore,
    session_id: str,
    command: Callable[[AppState], AppState],
) -> ScreenView:
    """Apply a command to the session's current state and render the result."""
    state = load_state(sessions, session_id)

    try:
        new_state = command(state)

    except InvalidScreenError as e:
        logger.warning(
            "Command not available on current screen",
            extra={"session_id": session_id, "screen": state.screen.kind, "error": str(e)},
        )
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    except StudentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    except (ProgramEditError, IndexError, ValueError) as e:
        logger.warning(
            "Rejected command",
            extra={"session_id": session_id, "error": str(e)},
        )
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    try:
        sessions.put(session_id, new_state)
    except AppSessionNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="App session not found",
        )

    return render(session_id, new_state)
