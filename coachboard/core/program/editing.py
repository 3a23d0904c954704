"""
Program editing commands.

The program manager edits a draft Program and saves it in one write. Each
command here takes a Program and returns a new one; the input is never
mutated, so a discarded draft leaves nothing behind.

Indexes address elements by position (folder, session, exercise, set). An
index outside the list raises ProgramEditError rather than IndexError so the
API layer can tell a bad request from a bug.
"""

import copy
from dataclasses import dataclass
from typing import Iterable, TypeVar

from .models import (
    Folder,
    Program,
    Session,
    SetPrescription,
    Student,
    Substitution,
    WarmupExercise,
    Workout,
    WorkoutExercise,
)

T = TypeVar("T")


class ProgramEditError(Exception):
    """Raised when an edit addresses an element that doesn't exist."""
    pass


NEW_FOLDER_NAME = "Nouveau Dossier"
NEW_EXERCISE_NAME = "Nouvel Exercice"
SCHEMA_EXERCISE_NAME = "Nom de l'exercice"

SET_FIELDS = ("reps", "load", "rest")
WARMUP_FIELDS = ("name", "duration")

SESSION_SCHEMAS = ("force", "hypertrophy", "crossfit", "blank")


def _at(items: list[T], index: int, what: str) -> T:
    if index < 0 or index >= len(items):
        raise ProgramEditError(f"No {what} at index {index}")
    return items[index]


def _without(items: list[T], index: int, what: str) -> list[T]:
    _at(items, index, what)
    return [item for i, item in enumerate(items) if i != index]


def _session(program: Program, folder: int, session: int) -> Session:
    return _at(_at(program.folders, folder, "folder").sessions, session, "session")


def _exercise(program: Program, folder: int, session: int, exercise: int) -> WorkoutExercise:
    return _at(_session(program, folder, session).workout.exercises, exercise, "exercise")


def _check_field(name: str, allowed: Iterable[str]) -> None:
    if name not in allowed:
        raise ProgramEditError(f"Unknown field '{name}'")


def _ensure_substitution(exercise: WorkoutExercise) -> Substitution:
    if exercise.substitution is None:
        exercise.substitution = Substitution()
    return exercise.substitution


def _draft(program: Program) -> Program:
    return copy.deepcopy(program)


# ---------------------------------------------------------------------------
# Renames and field edits
# ---------------------------------------------------------------------------

def rename_program(program: Program, name: str) -> Program:
    updated = _draft(program)
    updated.name = name
    return updated


def rename_folder(program: Program, folder: int, name: str) -> Program:
    updated = _draft(program)
    _at(updated.folders, folder, "folder").name = name
    return updated


def rename_session(program: Program, folder: int, session: int, name: str) -> Program:
    updated = _draft(program)
    _session(updated, folder, session).name = name
    return updated


def set_workout_type(program: Program, folder: int, session: int, workout_type: str) -> Program:
    updated = _draft(program)
    _session(updated, folder, session).workout.type = workout_type
    return updated


def set_warmup_field(
    program: Program, folder: int, session: int, warmup: int, field_name: str, value: str,
) -> Program:
    _check_field(field_name, WARMUP_FIELDS)
    updated = _draft(program)
    item = _at(_session(updated, folder, session).warmup, warmup, "warmup exercise")
    setattr(item, field_name, value)
    return updated


def rename_exercise(program: Program, folder: int, session: int, exercise: int, name: str) -> Program:
    updated = _draft(program)
    _exercise(updated, folder, session, exercise).name = name
    return updated


def rename_substitution(
    program: Program, folder: int, session: int, exercise: int, name: str,
) -> Program:
    """Name the substitution, creating an empty one first if needed."""
    updated = _draft(program)
    _ensure_substitution(_exercise(updated, folder, session, exercise)).name = name
    return updated


def set_set_field(
    program: Program,
    folder: int,
    session: int,
    exercise: int,
    set_index: int,
    field_name: str,
    value: str,
) -> Program:
    _check_field(field_name, SET_FIELDS)
    updated = _draft(program)
    target = _at(_exercise(updated, folder, session, exercise).sets, set_index, "set")
    setattr(target, field_name, value)
    return updated


def set_substitution_set_field(
    program: Program,
    folder: int,
    session: int,
    exercise: int,
    set_index: int,
    field_name: str,
    value: str,
) -> Program:
    _check_field(field_name, SET_FIELDS)
    updated = _draft(program)
    substitution = _exercise(updated, folder, session, exercise).substitution
    if substitution is None:
        raise ProgramEditError(f"Exercise {exercise} has no substitution")
    setattr(_at(substitution.sets, set_index, "substitution set"), field_name, value)
    return updated


# ---------------------------------------------------------------------------
# Folders and sessions
# ---------------------------------------------------------------------------

def add_folder(program: Program) -> Program:
    updated = _draft(program)
    updated.folders.append(Folder(name=NEW_FOLDER_NAME))
    return updated


def delete_folder(program: Program, folder: int) -> Program:
    updated = _draft(program)
    updated.folders = _without(updated.folders, folder, "folder")
    return updated


def _schema_exercises(count: int, sets: int, reps: str, rest: str) -> list[WorkoutExercise]:
    return [
        WorkoutExercise(
            name=SCHEMA_EXERCISE_NAME,
            substitution=Substitution(),
            sets=[SetPrescription(reps=reps, load="0kg", rest=rest) for _ in range(sets)],
        )
        for _ in range(count)
    ]


def session_from_schema(schema: str) -> Session:
    """
    Build a new session from a template.

    force        4 exercises x 4 sets of 4 reps, 120s rest
    hypertrophy  4 exercises x 4 sets of 10 reps, 60s rest
    crossfit     skipping-rope warmup, AMRAP 15min of 3 exercises
    anything else gives an empty "Nouvelle Séance".
    """
    if schema == "force":
        return Session(
            name="Séance Force",
            workout=Workout(type="Force", exercises=_schema_exercises(4, 4, "4", "120s")),
        )
    if schema == "hypertrophy":
        return Session(
            name="Séance Hypertrophie",
            workout=Workout(type="Force", exercises=_schema_exercises(4, 4, "10", "60s")),
        )
    if schema == "crossfit":
        return Session(
            name="Nouveau WOD",
            warmup=[WarmupExercise(name="Corde à sauter", duration="3min")],
            workout=Workout(type="AMRAP 15min", exercises=_schema_exercises(3, 1, "10", "0")),
        )
    return Session(name="Nouvelle Séance")


def add_session_from_schema(program: Program, folder: int, schema: str) -> Program:
    updated = _draft(program)
    _at(updated.folders, folder, "folder").sessions.append(session_from_schema(schema))
    return updated


def copy_session(program: Program, folder: int, session: Session) -> Program:
    """Append a copy of any session (possibly from another student) to a folder."""
    updated = _draft(program)
    _at(updated.folders, folder, "folder").sessions.append(copy.deepcopy(session))
    return updated


def delete_session(program: Program, folder: int, session: int) -> Program:
    updated = _draft(program)
    target = _at(updated.folders, folder, "folder")
    target.sessions = _without(target.sessions, session, "session")
    return updated


# ---------------------------------------------------------------------------
# Warmups, exercises and sets
# ---------------------------------------------------------------------------

def add_warmup_exercise(program: Program, folder: int, session: int) -> Program:
    updated = _draft(program)
    _session(updated, folder, session).warmup.append(
        WarmupExercise(name="Jumping Jacks", duration="60s")
    )
    return updated


def delete_warmup_exercise(program: Program, folder: int, session: int, warmup: int) -> Program:
    updated = _draft(program)
    target = _session(updated, folder, session)
    target.warmup = _without(target.warmup, warmup, "warmup exercise")
    return updated


def add_workout_exercise(program: Program, folder: int, session: int) -> Program:
    updated = _draft(program)
    _session(updated, folder, session).workout.exercises.append(
        WorkoutExercise(name=NEW_EXERCISE_NAME, substitution=Substitution())
    )
    return updated


def delete_workout_exercise(program: Program, folder: int, session: int, exercise: int) -> Program:
    updated = _draft(program)
    workout = _session(updated, folder, session).workout
    workout.exercises = _without(workout.exercises, exercise, "exercise")
    return updated


def add_set(program: Program, folder: int, session: int, exercise: int) -> Program:
    updated = _draft(program)
    _exercise(updated, folder, session, exercise).sets.append(SetPrescription())
    return updated


def delete_set(program: Program, folder: int, session: int, exercise: int, set_index: int) -> Program:
    updated = _draft(program)
    target = _exercise(updated, folder, session, exercise)
    target.sets = _without(target.sets, set_index, "set")
    return updated


def add_substitution_set(program: Program, folder: int, session: int, exercise: int) -> Program:
    updated = _draft(program)
    _ensure_substitution(_exercise(updated, folder, session, exercise)).sets.append(SetPrescription())
    return updated


def delete_substitution_set(
    program: Program, folder: int, session: int, exercise: int, set_index: int,
) -> Program:
    updated = _draft(program)
    substitution = _exercise(updated, folder, session, exercise).substitution
    if substitution is None:
        raise ProgramEditError(f"Exercise {exercise} has no substitution")
    substitution.sets = _without(substitution.sets, set_index, "substitution set")
    return updated


# ---------------------------------------------------------------------------
# Copy sources
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SessionSource:
    """A session offered in the copy dialog, labelled with its owner."""
    display_name: str
    session: Session


def available_sessions(students: Iterable[Student]) -> list[SessionSource]:
    """Every session of every student's program, in program order."""
    sources = []
    for student in students:
        for folder in student.program.folders:
            for session in folder.sessions:
                sources.append(SessionSource(
                    display_name=f"{session.name} ({student.name})",
                    session=session,
                ))
    return sources
