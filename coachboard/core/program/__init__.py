"""
Training programs: the nested Program model, the coach's editing commands
and the student's session execution.
"""

from .models import (
    NOT_AVAILABLE,
    ExerciseLexiconEntry,
    Folder,
    LoggedExercise,
    LoggedSet,
    LoggedWarmup,
    Performance,
    Program,
    Session,
    SetPrescription,
    Student,
    Substitution,
    TrainingHistoryEntry,
    WarmupExercise,
    WeightEntry,
    Workout,
    WorkoutExercise,
)
from .editing import ProgramEditError, SessionSource, available_sessions
from .session_run import RestTimer, SessionRun, rest_seconds

__all__ = [
    "NOT_AVAILABLE",
    "ExerciseLexiconEntry",
    "Folder",
    "LoggedExercise",
    "LoggedSet",
    "LoggedWarmup",
    "Performance",
    "Program",
    "Session",
    "SetPrescription",
    "Student",
    "Substitution",
    "TrainingHistoryEntry",
    "WarmupExercise",
    "WeightEntry",
    "Workout",
    "WorkoutExercise",
    "ProgramEditError",
    "SessionSource",
    "available_sessions",
    "RestTimer",
    "SessionRun",
    "rest_seconds",
]
