"""
Root controller of the coaching app.

AppState is the whole application as one frozen snapshot: the in-memory
copies of students, lexicon and history, the current screen, the language
and any pending notice. CoachingController turns a snapshot plus a user
action into the next snapshot, doing whatever store reads and writes the
action needs on the way. It never mutates the snapshot it was given.

Store calls are sequential and collections are replaced wholesale after
every write - no merging, no conflict detection. Two coaches editing the
same student means the last save wins.
"""

import copy
import logging
import math
import re
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Callable, Optional, Protocol

from ..i18n.translations import DEFAULT_LANGUAGE, get_translations
from .navigation import (
    AdminScreen,
    DashboardScreen,
    ErrorScreen,
    FolderScreen,
    HistoryScreen,
    LexiconManagerScreen,
    LoginScreen,
    ProgramManagerScreen,
    ProgressionScreen,
    Screen,
    SessionScreen,
    WeightTrackingScreen,
    back_from,
    require_screen,
)
from .program.models import (
    ExerciseLexiconEntry,
    Program,
    Student,
    TrainingHistoryEntry,
    WeightEntry,
)
from .program.session_run import ChecklistSection, PerformanceField, SessionRun
from .tracking.progression import RECENT_ACTIVITY_LIMIT, recent_activity

logger = logging.getLogger(__name__)

# Plain decimal weights only, e.g. "80" or " 82.5 ".
_DECIMAL = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?\s*$")

# Local coach logins. They bypass the student credential check entirely.
COACH_CREDENTIALS = frozenset({("admin", "admin"), ("coach", "coach")})

NEW_PROGRAM_NAME = "Nouveau programme"


class StudentNotFoundError(Exception):
    """Raised when a student id doesn't match any loaded student."""
    pass


# ---------------------------------------------------------------------------
# Protocols (interfaces)
# ---------------------------------------------------------------------------

class StudentStore(Protocol):
    """Student documents and their history / weight sub-collections."""

    def list_students(self) -> list[Student]: ...
    def add_student(self, name: str, username: str, password: str, program: Program) -> str: ...
    def update_program(self, student_id: str, program: Program, coach_notes: str) -> None: ...
    def list_history(self, student_id: str, limit: Optional[int] = None) -> list[TrainingHistoryEntry]: ...
    def add_history(self, entry: TrainingHistoryEntry) -> str: ...
    def list_weights(self, student_id: str) -> list[WeightEntry]: ...
    def add_weight(self, student_id: str, entry: WeightEntry) -> str: ...


class LexiconStore(Protocol):
    def list_entries(self) -> list[ExerciseLexiconEntry]: ...
    def add_entry(self, entry: ExerciseLexiconEntry) -> str: ...
    def update_entry(self, entry_id: str, entry: ExerciseLexiconEntry) -> None: ...
    def delete_entry(self, entry_id: str) -> None: ...


class DemoSeeder(Protocol):
    """Fills an empty store with demo data on first start."""

    def seed_students(self) -> None: ...
    def seed_lexicon(self) -> None: ...


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AppState:
    """
    One snapshot of the application.

    `notice` stands in for the blocking alert dialog and `exercise_details`
    for the exercise modal; both stay until dismissed.
    """
    screen: Screen = field(default_factory=LoginScreen)
    students: tuple[Student, ...] = ()
    lexicon: tuple[ExerciseLexiconEntry, ...] = ()
    training_history: tuple[TrainingHistoryEntry, ...] = ()
    recent_activity: tuple[TrainingHistoryEntry, ...] = ()
    language: str = DEFAULT_LANGUAGE
    login_error: str = ""
    notice: Optional[str] = None
    exercise_details: Optional[ExerciseLexiconEntry] = None

    @property
    def t(self) -> dict[str, str]:
        return get_translations(self.language)

    @property
    def is_failed(self) -> bool:
        return isinstance(self.screen, ErrorScreen)

    def find_student(self, student_id: str) -> Student:
        for student in self.students:
            if student.id == student_id:
                return student
        raise StudentNotFoundError(f"Student {student_id} not found")

    @classmethod
    def failed(cls, message: str, language: str = DEFAULT_LANGUAGE) -> "AppState":
        return cls(screen=ErrorScreen(message=message), language=language)


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------

class CoachingController:
    """
    Applies user actions to AppState snapshots.

    Each public method corresponds to a callback a screen offers. Methods
    that only make sense on one screen check for it first and raise
    InvalidScreenError otherwise.
    """

    def __init__(
        self,
        students: StudentStore,
        lexicon: LexiconStore,
        seeder: Optional[DemoSeeder] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._students = students
        self._lexicon = lexicon
        self._seeder = seeder
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # -- startup -------------------------------------------------------------

    def initialize(self, language: str = DEFAULT_LANGUAGE) -> AppState:
        """
        Load students and lexicon, seeding demo data into an empty store.

        Any failure lands on the terminal error screen; there is no retry.
        """
        try:
            students = self._students.list_students()
            if not students and self._seeder is not None:
                logger.info("No students found, seeding demo data")
                self._seeder.seed_students()
                students = self._students.list_students()

            lexicon = self._lexicon.list_entries()
            if not lexicon and self._seeder is not None:
                logger.info("Exercise lexicon empty, seeding demo exercises")
                self._seeder.seed_lexicon()
                lexicon = self._lexicon.list_entries()

        except Exception as e:
            logger.error(
                "Application initialization failed",
                extra={"error": str(e)},
                exc_info=e,
            )
            return AppState.failed(get_translations(language)["init_error"], language=language)

        logger.info(
            "Application initialized",
            extra={"students": len(students), "lexicon_entries": len(lexicon)},
        )
        return AppState(
            screen=LoginScreen(),
            students=tuple(students),
            lexicon=tuple(lexicon),
            language=language,
        )

    # -- session-wide --------------------------------------------------------

    def login(self, state: AppState, username: str, password: str) -> AppState:
        """
        Route a login attempt.

        The coach logins never touch the store's credentials. Students must
        match username and password exactly.
        """
        require_screen(state.screen, LoginScreen)
        if not username or not password:
            return state

        if (username, password) in COACH_CREDENTIALS:
            activity = self._fetch_recent_activity(state.students)
            logger.info("Coach logged in", extra={"username": username})
            return replace(
                state,
                screen=AdminScreen(),
                recent_activity=tuple(activity),
                login_error="",
            )

        for student in state.students:
            if student.username == username and student.password == password:
                logger.info("Student logged in", extra={"student_id": student.id})
                return replace(state, screen=DashboardScreen(student=student), login_error="")

        logger.warning("Failed login attempt", extra={"username": username})
        return replace(state, login_error=state.t["login_error"])

    def logout(self, state: AppState) -> AppState:
        """Back to the login screen. A failed startup stays on its error screen."""
        if state.is_failed:
            return state
        return replace(
            state,
            screen=LoginScreen(),
            login_error="",
            notice=None,
            exercise_details=None,
        )

    def set_language(self, state: AppState, language: str) -> AppState:
        get_translations(language)
        return replace(state, language=language)

    def back(self, state: AppState) -> AppState:
        return replace(state, screen=back_from(state.screen))

    def dismiss(self, state: AppState) -> AppState:
        """Close the notice and the exercise-details modal."""
        return replace(state, notice=None, exercise_details=None)

    # -- student area --------------------------------------------------------

    def select_folder(self, state: AppState, folder_index: int) -> AppState:
        require_screen(state.screen, DashboardScreen)
        student = state.screen.student
        folder = _pick(student.program.folders, folder_index, "folder")
        return replace(state, screen=FolderScreen(student=student, folder=folder))

    def select_session(self, state: AppState, session_index: int) -> AppState:
        require_screen(state.screen, FolderScreen)
        screen = state.screen
        session = _pick(screen.folder.sessions, session_index, "session")
        return replace(state, screen=SessionScreen(
            student=screen.student,
            folder=screen.folder,
            session=session,
            run=SessionRun(session=session),
        ))

    def _update_run(self, state: AppState, change: Callable[[SessionRun], object]) -> AppState:
        require_screen(state.screen, SessionScreen)
        run = copy.deepcopy(state.screen.run)
        change(run)
        return replace(state, screen=replace(state.screen, run=run))

    def swap_exercise(self, state: AppState, exercise_index: int) -> AppState:
        return self._update_run(state, lambda run: run.swap_exercise(exercise_index))

    def toggle_check(self, state: AppState, section: ChecklistSection, index: int) -> AppState:
        return self._update_run(state, lambda run: run.toggle_check(section, index))

    def record_performance(
        self,
        state: AppState,
        exercise_index: int,
        set_index: int,
        field_name: PerformanceField,
        value: str,
    ) -> AppState:
        return self._update_run(
            state,
            lambda run: run.record_performance(exercise_index, set_index, field_name, value),
        )

    def set_comment(self, state: AppState, comment: str) -> AppState:
        def change(run: SessionRun) -> None:
            run.comment = comment
        return self._update_run(state, change)

    def start_timer(self, state: AppState, exercise_index: int, set_index: int) -> AppState:
        now = self._clock()
        return self._update_run(state, lambda run: run.start_timer(exercise_index, set_index, now))

    def stop_timer(self, state: AppState) -> AppState:
        return self._update_run(state, lambda run: run.stop_timer())

    def show_exercise_details(self, state: AppState, exercise_name: str) -> AppState:
        """Open the lexicon entry for a name; a miss is a notice, not an error."""
        require_screen(state.screen, SessionScreen)
        for entry in state.lexicon:
            if entry.name == exercise_name:
                return replace(state, exercise_details=entry)

        logger.info("Exercise not in lexicon", extra={"exercise": exercise_name})
        return replace(state, notice=state.t["exercise_not_found"].format(name=exercise_name))

    def complete_session(self, state: AppState) -> AppState:
        """Append the run to the student's history and go back to the folder."""
        require_screen(state.screen, SessionScreen)
        screen = state.screen
        entry = screen.run.complete(
            student=screen.student,
            completed_at=self._clock(),
        )
        entry_id = self._students.add_history(entry)

        logger.info(
            "Session completed",
            extra={
                "student_id": screen.student.id,
                "session_name": entry.session_name,
                "history_id": entry_id,
            },
        )
        return replace(
            state,
            screen=FolderScreen(student=screen.student, folder=screen.folder),
            notice=state.t["session_saved"],
        )

    def show_own_progression(self, state: AppState) -> AppState:
        require_screen(state.screen, DashboardScreen)
        student = state.screen.student
        history = self._students.list_history(student.id)
        return replace(
            state,
            screen=ProgressionScreen(student=student, return_to="dashboard"),
            training_history=tuple(history),
        )

    # -- coach area ----------------------------------------------------------

    def add_student(self, state: AppState, name: str, username: str, password: str) -> AppState:
        require_screen(state.screen, AdminScreen)
        name, username, password = name.strip(), username.strip(), password.strip()
        if not (name and username and password):
            return state

        student_id = self._students.add_student(
            name=name,
            username=username,
            password=password,
            program=Program(name=NEW_PROGRAM_NAME),
        )
        logger.info("Student added", extra={"student_id": student_id})
        return replace(state, students=tuple(self._students.list_students()))

    def manage_student(self, state: AppState, student_id: str) -> AppState:
        require_screen(state.screen, AdminScreen)
        student = state.find_student(student_id)
        return replace(state, screen=ProgramManagerScreen(
            student=student,
            draft=copy.deepcopy(student.program),
            coach_notes=student.coach_notes,
        ))

    def edit_program(self, state: AppState, edit: Callable[[Program], Program]) -> AppState:
        """Apply one editing command to the draft. Nothing is written until save."""
        require_screen(state.screen, ProgramManagerScreen)
        return replace(state, screen=replace(state.screen, draft=edit(state.screen.draft)))

    def set_coach_notes(self, state: AppState, notes: str) -> AppState:
        require_screen(state.screen, ProgramManagerScreen)
        return replace(state, screen=replace(state.screen, coach_notes=notes))

    def save_program(self, state: AppState) -> AppState:
        """Write the whole draft and notes in one update, then return to admin."""
        require_screen(state.screen, ProgramManagerScreen)
        screen = state.screen
        self._students.update_program(screen.student.id, screen.draft, screen.coach_notes)

        logger.info("Program saved", extra={"student_id": screen.student.id})
        return replace(
            state,
            screen=AdminScreen(),
            students=tuple(self._students.list_students()),
        )

    def open_lexicon(self, state: AppState) -> AppState:
        require_screen(state.screen, AdminScreen)
        return replace(state, screen=LexiconManagerScreen())

    def add_exercise(self, state: AppState, entry: ExerciseLexiconEntry) -> AppState:
        require_screen(state.screen, LexiconManagerScreen)
        if not entry.is_complete:
            return state
        self._lexicon.add_entry(entry)
        return replace(state, lexicon=tuple(self._lexicon.list_entries()))

    def update_exercise(self, state: AppState, entry_id: str, entry: ExerciseLexiconEntry) -> AppState:
        require_screen(state.screen, LexiconManagerScreen)
        if not entry.is_complete:
            return state
        self._lexicon.update_entry(entry_id, entry)
        return replace(state, lexicon=tuple(self._lexicon.list_entries()))

    def delete_exercise(self, state: AppState, entry_id: str) -> AppState:
        require_screen(state.screen, LexiconManagerScreen)
        self._lexicon.delete_entry(entry_id)
        return replace(state, lexicon=tuple(self._lexicon.list_entries()))

    def show_history(self, state: AppState, student_id: str) -> AppState:
        require_screen(state.screen, AdminScreen)
        student = state.find_student(student_id)
        history = self._students.list_history(student.id)
        return replace(state, screen=HistoryScreen(student=student), training_history=tuple(history))

    def show_progression(self, state: AppState, student_id: str) -> AppState:
        require_screen(state.screen, AdminScreen)
        student = state.find_student(student_id)
        history = self._students.list_history(student.id)
        return replace(
            state,
            screen=ProgressionScreen(student=student, return_to="admin"),
            training_history=tuple(history),
        )

    def select_progression_exercise(self, state: AppState, exercise_name: str) -> AppState:
        require_screen(state.screen, ProgressionScreen)
        return replace(state, screen=replace(state.screen, selected_exercise=exercise_name or None))

    def show_weight_tracking(self, state: AppState, student_id: str) -> AppState:
        require_screen(state.screen, AdminScreen)
        student = state.find_student(student_id)
        entries = self._students.list_weights(student.id)
        return replace(state, screen=WeightTrackingScreen(student=student, entries=tuple(entries)))

    def add_weight(self, state: AppState, value: str) -> AppState:
        """
        Record a body-weight measurement taken now.

        Blank or non-numeric input is ignored without touching the store.
        """
        require_screen(state.screen, WeightTrackingScreen)
        if not isinstance(value, str) or not _DECIMAL.match(value):
            return state
        weight = float(value)
        if not math.isfinite(weight):
            return state

        screen = state.screen
        self._students.add_weight(screen.student.id, WeightEntry(date=self._clock(), weight=weight))
        entries = self._students.list_weights(screen.student.id)
        return replace(state, screen=replace(screen, entries=tuple(entries)))

    # -- helpers -------------------------------------------------------------

    def _fetch_recent_activity(self, students: tuple[Student, ...]) -> list[TrainingHistoryEntry]:
        """Latest entries per student, merged into one feed."""
        per_student = [
            self._students.list_history(student.id, limit=RECENT_ACTIVITY_LIMIT)
            for student in students
        ]
        return recent_activity(per_student, limit=RECENT_ACTIVITY_LIMIT)


def _pick(items: list, index: int, what: str):
    if index < 0 or index >= len(items):
        raise IndexError(f"No {what} at index {index}")
    return items[index]
