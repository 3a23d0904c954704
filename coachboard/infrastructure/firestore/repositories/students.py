"""
Firestore repository for students.

A student document holds the whole program tree and the coach's notes;
training history and body-weight entries live in the student's
sub-collections and are only read when a screen needs them.

The application never builds document paths or dicts itself - it asks the
repository for what it needs in domain terms.
"""

import logging
from typing import Optional

from ....core.controller import StudentNotFoundError
from ....core.program.models import Program, Student, TrainingHistoryEntry, WeightEntry
from ..client import ASCENDING, DESCENDING, CollectionPaths, FirestoreClient
from ..documents import (
    history_from_dict,
    history_to_dict,
    program_to_dict,
    student_from_dict,
    student_to_dict,
    weight_from_dict,
    weight_to_dict,
)

logger = logging.getLogger(__name__)


class StudentRepository:
    """
    Repository for students and their sub-collections.

    Reads are full-collection fetches; callers replace their in-memory
    copies wholesale after each write.
    """

    def __init__(self, client: FirestoreClient, paths: CollectionPaths) -> None:
        self._client = client
        self._paths = paths

    def list_students(self) -> list[Student]:
        return [
            student_from_dict(doc.id, doc.to_dict() or {})
            for doc in self._client.collection(self._paths.students).stream()
        ]

    def add_student(self, name: str, username: str, password: str, program: Program) -> str:
        _, ref = self._client.collection(self._paths.students).add(
            student_to_dict(name, username, password, program)
        )
        logger.info("Created student", extra={"student_id": ref.id, "username": username})
        return ref.id

    def update_program(self, student_id: str, program: Program, coach_notes: str) -> None:
        """Write the program tree and notes together; the last save wins."""
        ref = self._client.collection(self._paths.students).document(student_id)
        if not ref.get().exists:
            raise StudentNotFoundError(f"Student {student_id} not found")

        ref.update({"program": program_to_dict(program), "coachNotes": coach_notes})
        logger.debug("Updated program", extra={"student_id": student_id})

    # -- training history ----------------------------------------------------

    def list_history(self, student_id: str, limit: Optional[int] = None) -> list[TrainingHistoryEntry]:
        """History entries, newest first."""
        query = self._client.collection(self._paths.training_history(student_id)).order_by(
            "completedAt", direction=DESCENDING,
        )
        if limit is not None:
            query = query.limit(limit)
        return [history_from_dict(doc.id, doc.to_dict() or {}) for doc in query.stream()]

    def add_history(self, entry: TrainingHistoryEntry) -> str:
        _, ref = self._client.collection(self._paths.training_history(entry.student_id)).add(
            history_to_dict(entry)
        )
        return ref.id

    # -- weight --------------------------------------------------------------

    def list_weights(self, student_id: str) -> list[WeightEntry]:
        """Weight entries, oldest first."""
        query = self._client.collection(self._paths.weight_history(student_id)).order_by(
            "date", direction=ASCENDING,
        )
        return [weight_from_dict(doc.id, doc.to_dict() or {}) for doc in query.stream()]

    def add_weight(self, student_id: str, entry: WeightEntry) -> str:
        _, ref = self._client.collection(self._paths.weight_history(student_id)).add(
            weight_to_dict(entry)
        )
        logger.debug("Added weight entry", extra={"student_id": student_id, "weight": entry.weight})
        return ref.id
