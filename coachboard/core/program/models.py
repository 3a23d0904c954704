"""
Domain models for coaching programs.

A student owns one Program: an ordered tree of folders, sessions, warmups,
workout exercises and sets. Everything below the Program is plain data that
the coach edits as a whole and saves in one write, so these models carry no
identity of their own - position in the parent list is the identity.

Set prescriptions (reps, load, rest) are free text on purpose. Coaches write
"8-10", "RPE 8" or "60kg" and the app never does arithmetic on them.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


# Logged performance value used when the student typed nothing
NOT_AVAILABLE = "N/A"


@dataclass
class SetPrescription:
    """One prescribed set: what the coach asks for."""
    reps: str = "10"
    load: str = "0kg"
    rest: str = "60s"


@dataclass
class Substitution:
    """
    An alternate exercise the student may swap in.

    Programs created from schemas carry an empty substitution on every
    exercise, so the presence of the object means nothing on its own.
    Only a named substitution is offered to the student.
    """
    name: str = ""
    sets: list[SetPrescription] = field(default_factory=list)

    @property
    def is_active(self) -> bool:
        return bool(self.name)


@dataclass
class WorkoutExercise:
    """An exercise in the main workout block."""
    name: str
    sets: list[SetPrescription] = field(default_factory=list)
    substitution: Optional[Substitution] = None

    @property
    def has_active_substitution(self) -> bool:
        return self.substitution is not None and self.substitution.is_active


@dataclass
class Workout:
    """The main block of a session: a type label ("Force", "AMRAP 15min") and exercises."""
    type: str = "Force"
    exercises: list[WorkoutExercise] = field(default_factory=list)


@dataclass
class WarmupExercise:
    name: str
    duration: str = ""


@dataclass
class Session:
    """A single training session as prescribed by the coach."""
    name: str
    warmup: list[WarmupExercise] = field(default_factory=list)
    workout: Workout = field(default_factory=Workout)


@dataclass
class Folder:
    """A group of sessions, usually a training block ("Mois 1")."""
    name: str
    sessions: list[Session] = field(default_factory=list)


@dataclass
class Program:
    name: str
    folders: list[Folder] = field(default_factory=list)


@dataclass
class Student:
    """
    A coached student.

    Credentials are compared as stored. Training history and weight entries
    live in the student's sub-collections and are loaded on demand, not
    carried here.
    """
    id: str
    name: str
    username: str
    password: str
    program: Program = field(default_factory=lambda: Program(name="Nouveau programme"))
    coach_notes: str = ""


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Performance:
    """What the student actually did on a set. Free text, like the prescription."""
    weight: str = NOT_AVAILABLE
    reps: str = NOT_AVAILABLE


@dataclass(frozen=True)
class LoggedSet:
    target: str = ""
    performance: Performance = field(default_factory=Performance)


@dataclass(frozen=True)
class LoggedExercise:
    name: str
    completed: bool = False
    sets: tuple[LoggedSet, ...] = ()


@dataclass(frozen=True)
class LoggedWarmup:
    name: str
    completed: bool = False


@dataclass(frozen=True)
class TrainingHistoryEntry:
    """
    Frozen snapshot of a completed session.

    Student id and name are denormalized so the entry reads on its own in
    the coach's recent-activity feed. Entries are append-only.
    """
    student_id: str
    student_name: str
    session_name: str
    completed_at: datetime
    comment: str = ""
    warmup: tuple[LoggedWarmup, ...] = ()
    workout_type: str = ""
    exercises: tuple[LoggedExercise, ...] = ()
    id: Optional[str] = None

    def find_exercise(self, name: str) -> Optional[LoggedExercise]:
        """First logged exercise with this name, if the session included it."""
        for exercise in self.exercises:
            if exercise.name == name:
                return exercise
        return None


@dataclass(frozen=True)
class WeightEntry:
    """A body-weight measurement."""
    date: datetime
    weight: float
    id: Optional[str] = None


@dataclass
class ExerciseLexiconEntry:
    """
    An exercise in the coach's library.

    Program exercises reference lexicon entries by name, not id. Renaming
    one side silently breaks the link, which the UI reports as a notice.
    """
    name: str
    muscle_group: str
    description: str
    video_url: str
    id: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return all((self.name, self.muscle_group, self.description, self.video_url))
