"""
Student area endpoints.

Browsing the program (dashboard, folder, session) and everything done while
running a session: substitution swaps, checklist, logged performance, the
comment, the rest timer, exercise details and completion.

Run state lives on the session screen only; going back drops it.
"""

import logging
from typing import Annotated, Literal

from fastapi import APIRouter, Path
from pydantic import BaseModel, Field

from ..commands import execute
from ..dependencies import AppSessionsDep, ControllerDep
from ..views import ScreenView

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request Models
# ---------------------------------------------------------------------------

class CheckRequest(BaseModel):
    section: Literal["warmup", "workout"]
    index: int = Field(ge=0, description="Position in the warmup or in the displayed workout")


class PerformanceRequest(BaseModel):
    exercise: int = Field(ge=0)
    set_index: int = Field(ge=0)
    field: Literal["weight", "reps"]
    value: str = Field(description="Free text, as typed")


class CommentRequest(BaseModel):
    comment: str = Field(max_length=5000)


class TimerRequest(BaseModel):
    action: Literal["start", "stop"]
    exercise: int = Field(default=0, ge=0)
    set_index: int = Field(default=0, ge=0)


class ExerciseDetailsRequest(BaseModel):
    name: str = Field(description="Exercise name as shown; matched exactly against the lexicon")


# ---------------------------------------------------------------------------
# Program browsing
# ---------------------------------------------------------------------------

@router.post("/{session_id}/folders/{folder_index}", response_model=ScreenView, summary="Open a folder")
async def select_folder(
    session_id: str,
    folder_index: Annotated[int, Path(ge=0)],
    sessions: AppSessionsDep,
    controller: ControllerDep,
) -> ScreenView:
    return execute(sessions, session_id, lambda state: controller.select_folder(state, folder_index))


@router.post(
    "/{session_id}/sessions/{session_index}",
    response_model=ScreenView,
    summary="Start a session from the open folder",
)
async def select_session(
    session_id: str,
    session_index: Annotated[int, Path(ge=0)],
    sessions: AppSessionsDep,
    controller: ControllerDep,
) -> ScreenView:
    return execute(sessions, session_id, lambda state: controller.select_session(state, session_index))


@router.post(
    "/{session_id}/progression",
    response_model=ScreenView,
    summary="Open the logged-in student's own progression",
)
async def show_own_progression(
    session_id: str,
    sessions: AppSessionsDep,
    controller: ControllerDep,
) -> ScreenView:
    return execute(sessions, session_id, controller.show_own_progression)


# ---------------------------------------------------------------------------
# Session run
# ---------------------------------------------------------------------------

@router.post(
    "/{session_id}/run/swap/{exercise_index}",
    response_model=ScreenView,
    summary="Swap an exercise with its substitution",
)
async def swap_exercise(
    session_id: str,
    exercise_index: Annotated[int, Path(ge=0)],
    sessions: AppSessionsDep,
    controller: ControllerDep,
) -> ScreenView:
    return execute(sessions, session_id, lambda state: controller.swap_exercise(state, exercise_index))


@router.post("/{session_id}/run/check", response_model=ScreenView, summary="Toggle a checklist item")
async def toggle_check(
    session_id: str,
    request: CheckRequest,
    sessions: AppSessionsDep,
    controller: ControllerDep,
) -> ScreenView:
    return execute(
        sessions, session_id,
        lambda state: controller.toggle_check(state, request.section, request.index),
    )


@router.post("/{session_id}/run/performance", response_model=ScreenView, summary="Log a set")
async def record_performance(
    session_id: str,
    request: PerformanceRequest,
    sessions: AppSessionsDep,
    controller: ControllerDep,
) -> ScreenView:
    return execute(
        sessions, session_id,
        lambda state: controller.record_performance(
            state, request.exercise, request.set_index, request.field, request.value,
        ),
    )


@router.post("/{session_id}/run/comment", response_model=ScreenView, summary="Set the session comment")
async def set_comment(
    session_id: str,
    request: CommentRequest,
    sessions: AppSessionsDep,
    controller: ControllerDep,
) -> ScreenView:
    return execute(sessions, session_id, lambda state: controller.set_comment(state, request.comment))


@router.post("/{session_id}/run/timer", response_model=ScreenView, summary="Start or stop the rest timer")
async def rest_timer(
    session_id: str,
    request: TimerRequest,
    sessions: AppSessionsDep,
    controller: ControllerDep,
) -> ScreenView:
    if request.action == "stop":
        return execute(sessions, session_id, controller.stop_timer)
    return execute(
        sessions, session_id,
        lambda state: controller.start_timer(state, request.exercise, request.set_index),
    )


@router.post(
    "/{session_id}/run/exercise-details",
    response_model=ScreenView,
    summary="Look an exercise up in the lexicon",
)
async def show_exercise_details(
    session_id: str,
    request: ExerciseDetailsRequest,
    sessions: AppSessionsDep,
    controller: ControllerDep,
) -> ScreenView:
    return execute(sessions, session_id, lambda state: controller.show_exercise_details(state, request.name))


@router.post(
    "/{session_id}/run/complete",
    response_model=ScreenView,
    summary="Finish the session and save it to history",
)
async def complete_session(
    session_id: str,
    sessions: AppSessionsDep,
    controller: ControllerDep,
) -> ScreenView:
    return execute(sessions, session_id, controller.complete_session)
