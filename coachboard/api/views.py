"""
Rendering AppState snapshots for the client.

Every command answers with a ScreenView: which screen is showing, the
session-wide bits (language, notice, login error, exercise modal) and a
`data` payload shaped for that screen. The client holds no state of its
own beyond the app session id.
"""

from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from pydantic import BaseModel, Field

from ..core.controller import AppState
from ..core.navigation import (
    AdminScreen,
    DashboardScreen,
    ErrorScreen,
    FolderScreen,
    HistoryScreen,
    LexiconManagerScreen,
    LoginScreen,
    ProgramManagerScreen,
    ProgressionScreen,
    SessionScreen,
    WeightTrackingScreen,
)
from ..core.program.editing import SESSION_SCHEMAS, available_sessions
from ..core.program.models import Student, TrainingHistoryEntry
from ..core.tracking.progression import exercise_names, progression_chart, weight_chart


class ScreenView(BaseModel):
    """What the client renders after a command."""
    session_id: str = Field(description="App session id to send with the next command")
    screen: str = Field(description="Current screen, e.g. 'login', 'admin', 'session'")
    language: str
    notice: Optional[str] = Field(default=None, description="Pending alert text, cleared by dismiss")
    login_error: str = ""
    exercise_details: Optional[dict[str, Any]] = Field(
        default=None, description="Lexicon entry shown in the exercise modal",
    )
    data: dict[str, Any] = Field(default_factory=dict, description="Screen-specific payload")
    labels: dict[str, str] = Field(default_factory=dict, description="UI strings in the session language")


def _student(student: Student) -> dict[str, Any]:
    return {"id": student.id, "name": student.name, "username": student.username}


def _history_entry(entry: TrainingHistoryEntry) -> dict[str, Any]:
    return asdict(entry)


def _login(state: AppState, screen: LoginScreen, now: datetime) -> dict[str, Any]:
    return {}


def _error(state: AppState, screen: ErrorScreen, now: datetime) -> dict[str, Any]:
    return {"message": screen.message}


def _admin(state: AppState, screen: AdminScreen, now: datetime) -> dict[str, Any]:
    return {
        "students": [_student(student) for student in state.students],
        "recent_activity": [_history_entry(entry) for entry in state.recent_activity],
    }


def _dashboard(state: AppState, screen: DashboardScreen, now: datetime) -> dict[str, Any]:
    program = screen.student.program
    return {
        "student": _student(screen.student),
        "program_name": program.name,
        "coach_notes": screen.student.coach_notes,
        "folders": [
            {"index": i, "name": folder.name, "session_count": len(folder.sessions)}
            for i, folder in enumerate(program.folders)
        ],
    }


def _folder(state: AppState, screen: FolderScreen, now: datetime) -> dict[str, Any]:
    return {
        "student": _student(screen.student),
        "folder": screen.folder.name,
        "sessions": [
            {"index": i, "name": session.name} for i, session in enumerate(screen.folder.sessions)
        ],
    }


def _session(state: AppState, screen: SessionScreen, now: datetime) -> dict[str, Any]:
    run = screen.run
    timer = None
    if run.timer is not None:
        timer = {
            "duration_seconds": run.timer.duration_seconds,
            "remaining_seconds": run.timer.remaining_seconds(now),
            "display": run.timer.display(now),
            "finished": run.timer.is_finished(now),
        }

    exercises = []
    for e, exercise in enumerate(run.displayed_workout.exercises):
        exercises.append({
            "index": e,
            "name": exercise.name,
            "checked": run.is_checked("workout", e),
            "can_swap": exercise.has_active_substitution,
            "sets": [
                {
                    "index": s,
                    "reps": prescription.reps,
                    "load": prescription.load,
                    "rest": prescription.rest,
                    "performance": run.performance.get((e, s), {}),
                }
                for s, prescription in enumerate(exercise.sets)
            ],
        })

    return {
        "student": _student(screen.student),
        "folder": screen.folder.name,
        "session": screen.session.name,
        "warmup": [
            {
                "index": i,
                "name": item.name,
                "duration": item.duration,
                "checked": run.is_checked("warmup", i),
            }
            for i, item in enumerate(screen.session.warmup)
        ],
        "workout_type": run.displayed_workout.type,
        "exercises": exercises,
        "comment": run.comment,
        "timer": timer,
    }


def _program_manager(state: AppState, screen: ProgramManagerScreen, now: datetime) -> dict[str, Any]:
    return {
        "student": _student(screen.student),
        "draft": asdict(screen.draft),
        "coach_notes": screen.coach_notes,
        "schemas": list(SESSION_SCHEMAS),
        "copy_sources": [source.display_name for source in available_sessions(state.students)],
    }


def _lexicon_manager(state: AppState, screen: LexiconManagerScreen, now: datetime) -> dict[str, Any]:
    return {"entries": [asdict(entry) for entry in state.lexicon]}


def _history(state: AppState, screen: HistoryScreen, now: datetime) -> dict[str, Any]:
    return {
        "student": _student(screen.student),
        "entries": [_history_entry(entry) for entry in state.training_history],
    }


def _progression(state: AppState, screen: ProgressionScreen, now: datetime) -> dict[str, Any]:
    chart = None
    if screen.selected_exercise:
        line = progression_chart(
            state.training_history, screen.selected_exercise, state.t["max_weight_lifted"],
        )
        chart = None if line.is_empty else line.to_config()

    return {
        "student": _student(screen.student),
        "return_to": screen.return_to,
        "exercises": exercise_names(state.training_history),
        "selected_exercise": screen.selected_exercise,
        "chart": chart,
    }


def _weight_tracking(state: AppState, screen: WeightTrackingScreen, now: datetime) -> dict[str, Any]:
    line = weight_chart(screen.entries, state.t["weight_in_kg"])
    return {
        "student": _student(screen.student),
        "entries": [asdict(entry) for entry in screen.entries],
        "chart": None if line.is_empty else line.to_config(),
    }


_RENDERERS: dict[type, Callable[[AppState, Any, datetime], dict[str, Any]]] = {
    LoginScreen: _login,
    ErrorScreen: _error,
    AdminScreen: _admin,
    DashboardScreen: _dashboard,
    FolderScreen: _folder,
    SessionScreen: _session,
    ProgramManagerScreen: _program_manager,
    LexiconManagerScreen: _lexicon_manager,
    HistoryScreen: _history,
    ProgressionScreen: _progression,
    WeightTrackingScreen: _weight_tracking,
}


def render(session_id: str, state: AppState, now: Optional[datetime] = None) -> ScreenView:
    now = now or datetime.now(timezone.utc)
    screen = state.screen
    return ScreenView(
        session_id=session_id,
        screen=screen.kind,
        language=state.language,
        notice=state.notice,
        login_error=state.login_error,
        exercise_details=asdict(state.exercise_details) if state.exercise_details else None,
        data=_RENDERERS[type(screen)](state, screen, now),
        labels=state.t,
    )
