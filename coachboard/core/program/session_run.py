"""
Executing a session.

A SessionRun is the student's working copy of a session while they train:
checklist state, logged performance, the comment, the rest timer and the
displayed workout (which may differ from the program after substitution
swaps). Nothing here touches the stored program. Completing the run
produces a TrainingHistoryEntry; abandoning it simply drops the object.
"""

import copy
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal, Optional

from .models import (
    NOT_AVAILABLE,
    LoggedExercise,
    LoggedSet,
    LoggedWarmup,
    Performance,
    Session,
    Student,
    TrainingHistoryEntry,
    Workout,
    WorkoutExercise,
)

ChecklistSection = Literal["warmup", "workout"]
PerformanceField = Literal["weight", "reps"]

# Stored history keeps one wording whatever the display language.
TARGET_TEMPLATE = "Répétitions: {reps}, Charge: {load}"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def rest_seconds(rest: str) -> Optional[int]:
    """
    Seconds of rest encoded in a free-text rest prescription.

    Reads the leading integer ("90s" -> 90, "120" -> 120). Returns None when
    there is no leading integer or it isn't positive, e.g. "0" for a WOD.
    """
    match = _LEADING_INT.match(rest or "")
    if not match:
        return None
    seconds = int(match.group(1))
    return seconds if seconds > 0 else None


@dataclass(frozen=True)
class RestTimer:
    """A countdown started from a set's rest prescription."""
    duration_seconds: int
    started_at: datetime

    def remaining_seconds(self, now: datetime) -> int:
        elapsed = int((now - self.started_at).total_seconds())
        return max(0, self.duration_seconds - elapsed)

    def is_finished(self, now: datetime) -> bool:
        return self.remaining_seconds(now) == 0

    def display(self, now: datetime) -> str:
        """MM:SS, as shown on the floating timer."""
        minutes, seconds = divmod(self.remaining_seconds(now), 60)
        return f"{minutes:02d}:{seconds:02d}"


@dataclass
class SessionRun:
    """
    In-progress state of a session.

    Checklist and performance are keyed by position in the displayed
    workout, so swapping an exercise keeps whatever was already logged on
    that row.
    """
    session: Session
    displayed_workout: Optional[Workout] = None  # deep copy of session.workout when omitted
    checked: set[tuple[str, int]] = field(default_factory=set)
    performance: dict[tuple[int, int], dict[str, str]] = field(default_factory=dict)
    comment: str = ""
    timer: Optional[RestTimer] = None

    def __post_init__(self) -> None:
        if self.displayed_workout is None:
            self.displayed_workout = copy.deepcopy(self.session.workout)

    def _exercise(self, exercise_index: int) -> WorkoutExercise:
        exercises = self.displayed_workout.exercises
        if exercise_index < 0 or exercise_index >= len(exercises):
            raise IndexError(f"No exercise at index {exercise_index}")
        return exercises[exercise_index]

    # -- substitution --------------------------------------------------------

    def swap_exercise(self, exercise_index: int) -> bool:
        """
        Exchange an exercise with its substitution, in the working copy.

        Name and sets trade places, so calling this twice restores the
        original. Returns False (and changes nothing) when the exercise has
        no named substitution.
        """
        exercise = self._exercise(exercise_index)
        if not exercise.has_active_substitution:
            return False

        substitution = exercise.substitution
        exercise.name, substitution.name = substitution.name, exercise.name
        exercise.sets, substitution.sets = substitution.sets, exercise.sets
        return True

    # -- checklist and logging ----------------------------------------------

    def toggle_check(self, section: ChecklistSection, index: int) -> bool:
        """Flip a warmup or workout item's done flag; returns the new value."""
        items = self.session.warmup if section == "warmup" else self.displayed_workout.exercises
        if index < 0 or index >= len(items):
            raise IndexError(f"No {section} item at index {index}")

        key = (section, index)
        if key in self.checked:
            self.checked.discard(key)
            return False
        self.checked.add(key)
        return True

    def is_checked(self, section: ChecklistSection, index: int) -> bool:
        return (section, index) in self.checked

    def record_performance(
        self, exercise_index: int, set_index: int, field_name: PerformanceField, value: str,
    ) -> None:
        sets = self._exercise(exercise_index).sets
        if set_index < 0 or set_index >= len(sets):
            raise IndexError(f"No set at index {set_index}")
        self.performance.setdefault((exercise_index, set_index), {})[field_name] = value

    # -- rest timer ----------------------------------------------------------

    def start_timer(self, exercise_index: int, set_index: int, now: datetime) -> Optional[RestTimer]:
        """Start (or restart) the rest timer for a set; None if the set has no usable rest."""
        sets = self._exercise(exercise_index).sets
        if set_index < 0 or set_index >= len(sets):
            raise IndexError(f"No set at index {set_index}")
        seconds = rest_seconds(sets[set_index].rest)
        if seconds is None:
            return None
        self.timer = RestTimer(duration_seconds=seconds, started_at=now)
        return self.timer

    def stop_timer(self) -> None:
        self.timer = None

    # -- completion ----------------------------------------------------------

    def _logged_value(self, exercise_index: int, set_index: int, field_name: str) -> str:
        return self.performance.get((exercise_index, set_index), {}).get(field_name) or NOT_AVAILABLE

    def complete(
        self,
        student: Student,
        completed_at: Optional[datetime] = None,
    ) -> TrainingHistoryEntry:
        """
        Freeze the run into a history entry.

        Warmup items come from the prescribed session, workout exercises from
        the displayed (possibly swapped) workout. Empty performance fields
        become "N/A".
        """
        warmup = tuple(
            LoggedWarmup(name=item.name, completed=self.is_checked("warmup", index))
            for index, item in enumerate(self.session.warmup)
        )

        exercises = tuple(
            LoggedExercise(
                name=exercise.name,
                completed=self.is_checked("workout", exercise_index),
                sets=tuple(
                    LoggedSet(
                        target=TARGET_TEMPLATE.format(reps=prescription.reps, load=prescription.load),
                        performance=Performance(
                            weight=self._logged_value(exercise_index, set_index, "weight"),
                            reps=self._logged_value(exercise_index, set_index, "reps"),
                        ),
                    )
                    for set_index, prescription in enumerate(exercise.sets)
                ),
            )
            for exercise_index, exercise in enumerate(self.displayed_workout.exercises)
        )

        return TrainingHistoryEntry(
            student_id=student.id,
            student_name=student.name,
            session_name=self.session.name,
            completed_at=completed_at or datetime.now(timezone.utc),
            comment=self.comment,
            warmup=warmup,
            workout_type=self.displayed_workout.type,
            exercises=exercises,
        )
