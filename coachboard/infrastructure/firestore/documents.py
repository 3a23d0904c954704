"""
Translation between domain models and Firestore documents.

Documents keep the camelCase field names existing data was written with.
Readers tolerate missing fields: seeded history entries have no warmup,
workout type, completed flags or targets, and older students have no
coach notes.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from ...core.program.models import (
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

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _timestamp(value: Any) -> datetime:
    """Firestore hands back timezone-aware datetimes; anything else is treated as missing."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    return EPOCH


# ---------------------------------------------------------------------------
# Program
# ---------------------------------------------------------------------------

def _sets_to_list(sets: list[SetPrescription]) -> list[dict]:
    return [{"reps": s.reps, "load": s.load, "rest": s.rest} for s in sets]


def _sets_from_list(items: Optional[list]) -> list[SetPrescription]:
    return [
        SetPrescription(
            reps=str(item.get("reps", "")),
            load=str(item.get("load", "")),
            rest=str(item.get("rest", "")),
        )
        for item in items or []
    ]


def program_to_dict(program: Program) -> dict:
    folders = []
    for folder in program.folders:
        sessions = []
        for session in folder.sessions:
            exercises = []
            for exercise in session.workout.exercises:
                data = {"name": exercise.name, "sets": _sets_to_list(exercise.sets)}
                if exercise.substitution is not None:
                    data["substitution"] = {
                        "name": exercise.substitution.name,
                        "sets": _sets_to_list(exercise.substitution.sets),
                    }
                exercises.append(data)

            sessions.append({
                "name": session.name,
                "warmup": [{"name": w.name, "duration": w.duration} for w in session.warmup],
                "workout": {"type": session.workout.type, "exercises": exercises},
            })
        folders.append({"name": folder.name, "sessions": sessions})

    return {"name": program.name, "folders": folders}


def _exercise_from_dict(data: dict) -> WorkoutExercise:
    substitution = None
    if isinstance(data.get("substitution"), dict):
        raw = data["substitution"]
        substitution = Substitution(name=raw.get("name", ""), sets=_sets_from_list(raw.get("sets")))
    return WorkoutExercise(
        name=data.get("name", ""),
        sets=_sets_from_list(data.get("sets")),
        substitution=substitution,
    )


def _session_from_dict(data: dict) -> Session:
    workout = data.get("workout") or {}
    return Session(
        name=data.get("name", ""),
        warmup=[
            WarmupExercise(name=item.get("name", ""), duration=item.get("duration", ""))
            for item in data.get("warmup") or []
        ],
        workout=Workout(
            type=workout.get("type", ""),
            exercises=[_exercise_from_dict(item) for item in workout.get("exercises") or []],
        ),
    )


def program_from_dict(data: Optional[dict]) -> Program:
    if not data:
        return Program(name="")
    return Program(
        name=data.get("name", ""),
        folders=[
            Folder(
                name=folder.get("name", ""),
                sessions=[_session_from_dict(session) for session in folder.get("sessions") or []],
            )
            for folder in data.get("folders") or []
        ],
    )


# ---------------------------------------------------------------------------
# Student
# ---------------------------------------------------------------------------

def student_to_dict(name: str, username: str, password: str, program: Program, coach_notes: str = "") -> dict:
    data = {
        "name": name,
        "username": username,
        "password": password,
        "program": program_to_dict(program),
    }
    if coach_notes:
        data["coachNotes"] = coach_notes
    return data


def student_from_dict(doc_id: str, data: dict) -> Student:
    return Student(
        id=doc_id,
        name=data.get("name", ""),
        username=data.get("username", ""),
        password=data.get("password", ""),
        program=program_from_dict(data.get("program")),
        coach_notes=data.get("coachNotes", ""),
    )


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------

def history_to_dict(entry: TrainingHistoryEntry) -> dict:
    return {
        "studentId": entry.student_id,
        "studentName": entry.student_name,
        "sessionName": entry.session_name,
        "completedAt": entry.completed_at,
        "comment": entry.comment,
        "warmup": [{"name": w.name, "completed": w.completed} for w in entry.warmup],
        "workout": {
            "type": entry.workout_type,
            "exercises": [
                {
                    "name": exercise.name,
                    "completed": exercise.completed,
                    "sets": [
                        {
                            "target": logged.target,
                            "performance": {
                                "weight": logged.performance.weight,
                                "reps": logged.performance.reps,
                            },
                        }
                        for logged in exercise.sets
                    ],
                }
                for exercise in entry.exercises
            ],
        },
    }


def _logged_set_from_dict(data: dict) -> LoggedSet:
    performance = data.get("performance") or {}
    return LoggedSet(
        target=data.get("target", ""),
        performance=Performance(
            weight=str(performance.get("weight", NOT_AVAILABLE)),
            reps=str(performance.get("reps", NOT_AVAILABLE)),
        ),
    )


def history_from_dict(doc_id: str, data: dict) -> TrainingHistoryEntry:
    workout = data.get("workout") or {}
    return TrainingHistoryEntry(
        id=doc_id,
        student_id=data.get("studentId", ""),
        student_name=data.get("studentName", ""),
        session_name=data.get("sessionName", ""),
        completed_at=_timestamp(data.get("completedAt")),
        comment=data.get("comment", ""),
        warmup=tuple(
            LoggedWarmup(name=item.get("name", ""), completed=bool(item.get("completed", False)))
            for item in data.get("warmup") or []
        ),
        workout_type=workout.get("type", ""),
        exercises=tuple(
            LoggedExercise(
                name=item.get("name", ""),
                completed=bool(item.get("completed", False)),
                sets=tuple(_logged_set_from_dict(s) for s in item.get("sets") or []),
            )
            for item in workout.get("exercises") or []
        ),
    )


# ---------------------------------------------------------------------------
# Weight and lexicon
# ---------------------------------------------------------------------------

def weight_to_dict(entry: WeightEntry) -> dict:
    return {"date": entry.date, "weight": entry.weight}


def weight_from_dict(doc_id: str, data: dict) -> WeightEntry:
    return WeightEntry(
        id=doc_id,
        date=_timestamp(data.get("date")),
        weight=float(data.get("weight", 0.0)),
    )


def lexicon_to_dict(entry: ExerciseLexiconEntry) -> dict:
    return {
        "name": entry.name,
        "muscleGroup": entry.muscle_group,
        "description": entry.description,
        "videoUrl": entry.video_url,
    }


def lexicon_from_dict(doc_id: str, data: dict) -> ExerciseLexiconEntry:
    return ExerciseLexiconEntry(
        id=doc_id,
        name=data.get("name", ""),
        muscle_group=data.get("muscleGroup", ""),
        description=data.get("description", ""),
        video_url=data.get("videoUrl", ""),
    )
