"""
App session endpoints.

Opening an app session runs the application's startup (load, seed) and
lands on the login screen, or on the error screen when the store can't be
reached. Login, logout, language, back and dismiss work from any screen
that offers them.
"""

import logging

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from ...core.controller import AppState
from ...i18n.translations import get_translations
from ...infrastructure.firestore.client import FirestoreConnectionError
from ..commands import execute, load_state
from ..dependencies import (
    AppSessionsDep,
    ControllerDep,
    SettingsDep,
    build_controller,
    get_firestore_client,
)
from ..views import ScreenView, render

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request Models
# ---------------------------------------------------------------------------

class OpenSessionRequest(BaseModel):
    language: str | None = Field(default=None, description="fr or en; the configured default otherwise")


class LoginRequest(BaseModel):
    username: str = Field(description="Student username, or a coach login")
    password: str


class LanguageRequest(BaseModel):
    language: str = Field(description="fr or en")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=ScreenView,
    status_code=status.HTTP_201_CREATED,
    summary="Open an app session",
)
async def open_app_session(
    settings: SettingsDep,
    sessions: AppSessionsDep,
    request: OpenSessionRequest | None = None,
) -> ScreenView:
    """
    Start the application for one user.

    Store sign-in happens here on first use. A failure ends on the terminal
    error screen rather than an HTTP error, like any other startup failure.
    """
    language = (request.language if request else None) or settings.default_language
    try:
        get_translations(language)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    try:
        client = get_firestore_client(settings)
    except FirestoreConnectionError as e:
        logger.error("Store unavailable at startup", extra={"error": str(e)})
        state = AppState.failed(get_translations(language)["init_error"], language=language)
    else:
        state = build_controller(client, settings).initialize(language=language)

    session_id = sessions.open(state)
    return render(session_id, state)


@router.get(
    "/{session_id}",
    response_model=ScreenView,
    summary="Current screen",
)
async def get_app_session(session_id: str, sessions: AppSessionsDep) -> ScreenView:
    return render(session_id, load_state(sessions, session_id))


@router.delete(
    "/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Close an app session",
)
async def close_app_session(session_id: str, sessions: AppSessionsDep) -> None:
    load_state(sessions, session_id)
    sessions.close(session_id)


@router.post("/{session_id}/login", response_model=ScreenView, summary="Log in")
async def login(
    session_id: str,
    request: LoginRequest,
    sessions: AppSessionsDep,
    controller: ControllerDep,
) -> ScreenView:
    return execute(
        sessions, session_id,
        lambda state: controller.login(state, request.username, request.password),
    )


@router.post("/{session_id}/logout", response_model=ScreenView, summary="Log out")
async def logout(session_id: str, sessions: AppSessionsDep, controller: ControllerDep) -> ScreenView:
    return execute(sessions, session_id, controller.logout)


@router.post("/{session_id}/language", response_model=ScreenView, summary="Switch language")
async def set_language(
    session_id: str,
    request: LanguageRequest,
    sessions: AppSessionsDep,
    controller: ControllerDep,
) -> ScreenView:
    return execute(sessions, session_id, lambda state: controller.set_language(state, request.language))


@router.post("/{session_id}/back", response_model=ScreenView, summary="Go back one screen")
async def back(session_id: str, sessions: AppSessionsDep, controller: ControllerDep) -> ScreenView:
    return execute(sessions, session_id, controller.back)


@router.post(
    "/{session_id}/dismiss",
    response_model=ScreenView,
    summary="Close the notice or exercise details",
)
async def dismiss(session_id: str, sessions: AppSessionsDep, controller: ControllerDep) -> ScreenView:
    return execute(sessions, session_id, controller.dismiss)
