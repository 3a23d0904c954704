"""
Screens of the coaching app.

Each screen is a frozen variant carrying the selection it needs to render:
a FolderScreen can't exist without its student and folder, so there is no
"no folder selected" state to redirect away from. The set is closed -
Screen below is the full union.

Screens that own local interaction state (the session run, the program
draft, the weight list) carry it too. Leaving the screen drops that state.
"""

from dataclasses import dataclass, field
from typing import Literal, Optional, Union

from .program.models import Folder, Program, Session, Student, WeightEntry
from .program.session_run import SessionRun


class InvalidScreenError(Exception):
    """Raised when a command is issued on a screen that doesn't offer it."""
    pass


@dataclass(frozen=True)
class LoginScreen:
    kind: str = field(default="login", init=False)


@dataclass(frozen=True)
class ErrorScreen:
    """Terminal: the store or identity service could not be initialised."""
    message: str
    kind: str = field(default="error", init=False)


@dataclass(frozen=True)
class AdminScreen:
    kind: str = field(default="admin", init=False)


@dataclass(frozen=True)
class DashboardScreen:
    student: Student
    kind: str = field(default="dashboard", init=False)


@dataclass(frozen=True)
class FolderScreen:
    student: Student
    folder: Folder
    kind: str = field(default="folder_detail", init=False)


@dataclass(frozen=True)
class SessionScreen:
    student: Student
    folder: Folder
    session: Session
    run: SessionRun
    kind: str = field(default="session", init=False)


@dataclass(frozen=True)
class ProgramManagerScreen:
    """The coach's draft of one student's program and notes, unsaved until save."""
    student: Student
    draft: Program
    coach_notes: str = ""
    kind: str = field(default="program_manager", init=False)


@dataclass(frozen=True)
class LexiconManagerScreen:
    kind: str = field(default="lexicon_manager", init=False)


@dataclass(frozen=True)
class HistoryScreen:
    student: Student
    kind: str = field(default="training_history", init=False)


@dataclass(frozen=True)
class ProgressionScreen:
    """
    Progression chart for a student.

    Opened by the coach (back goes to the admin screen) or by the student
    from the dashboard (back goes to the dashboard).
    """
    student: Student
    return_to: Literal["admin", "dashboard"] = "admin"
    selected_exercise: Optional[str] = None
    kind: str = field(default="progression", init=False)


@dataclass(frozen=True)
class WeightTrackingScreen:
    student: Student
    entries: tuple[WeightEntry, ...] = ()
    kind: str = field(default="weight_tracking", init=False)


Screen = Union[
    LoginScreen,
    ErrorScreen,
    AdminScreen,
    DashboardScreen,
    FolderScreen,
    SessionScreen,
    ProgramManagerScreen,
    LexiconManagerScreen,
    HistoryScreen,
    ProgressionScreen,
    WeightTrackingScreen,
]

def require_screen(screen: Screen, *expected: type) -> None:
    """Raise InvalidScreenError unless the screen is one of the expected variants."""
    if not isinstance(screen, expected):
        names = ", ".join(kind.__name__ for kind in expected)
        raise InvalidScreenError(f"Not available on {type(screen).__name__} (expected {names})")


def back_from(screen: Screen) -> Screen:
    """
    Parent of a screen.

    Login, admin, dashboard and error screens have no parent and are
    returned unchanged.
    """
    if isinstance(screen, FolderScreen):
        return DashboardScreen(student=screen.student)
    if isinstance(screen, SessionScreen):
        return FolderScreen(student=screen.student, folder=screen.folder)
    if isinstance(screen, ProgressionScreen) and screen.return_to == "dashboard":
        return DashboardScreen(student=screen.student)
    if isinstance(screen, (ProgramManagerScreen, LexiconManagerScreen, HistoryScreen,
                           ProgressionScreen, WeightTrackingScreen)):
        return AdminScreen()
    return screen
