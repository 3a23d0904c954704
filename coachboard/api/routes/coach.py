"""
Coach area endpoints.

Student management, the program manager (draft edits, notes, save), the
exercise lexicon, history, progression and weight tracking.

Program edits arrive as one discriminated command per request and only
change the draft held by the program manager screen. Nothing reaches the
store until /program/save.
"""

import logging
from typing import Annotated, Literal, Union

from fastapi import APIRouter
from pydantic import BaseModel, Field

from ...core.program import editing
from ...core.program.models import ExerciseLexiconEntry, Program, Student
from ..commands import execute
from ..dependencies import AppSessionsDep, ControllerDep
from ..views import ScreenView

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Program edit commands
# ---------------------------------------------------------------------------

class _SessionAddress(BaseModel):
    folder: int
    session: int


class _ExerciseAddress(_SessionAddress):
    exercise: int


class RenameProgram(BaseModel):
    op: Literal["rename_program"]
    name: str

    def apply(self, program: Program, students: tuple[Student, ...]) -> Program:
        return editing.rename_program(program, self.name)


class RenameFolder(BaseModel):
    op: Literal["rename_folder"]
    folder: int
    name: str

    def apply(self, program: Program, students: tuple[Student, ...]) -> Program:
        return editing.rename_folder(program, self.folder, self.name)


class RenameSession(_SessionAddress):
    op: Literal["rename_session"]
    name: str

    def apply(self, program: Program, students: tuple[Student, ...]) -> Program:
        return editing.rename_session(program, self.folder, self.session, self.name)


class SetWorkoutType(_SessionAddress):
    op: Literal["set_workout_type"]
    workout_type: str

    def apply(self, program: Program, students: tuple[Student, ...]) -> Program:
        return editing.set_workout_type(program, self.folder, self.session, self.workout_type)


class SetWarmupField(_SessionAddress):
    op: Literal["set_warmup_field"]
    warmup: int
    field_name: Literal["name", "duration"]
    value: str

    def apply(self, program: Program, students: tuple[Student, ...]) -> Program:
        return editing.set_warmup_field(
            program, self.folder, self.session, self.warmup, self.field_name, self.value,
        )


class RenameExercise(_ExerciseAddress):
    op: Literal["rename_exercise"]
    name: str

    def apply(self, program: Program, students: tuple[Student, ...]) -> Program:
        return editing.rename_exercise(program, self.folder, self.session, self.exercise, self.name)


class RenameSubstitution(_ExerciseAddress):
    op: Literal["rename_substitution"]
    name: str

    def apply(self, program: Program, students: tuple[Student, ...]) -> Program:
        return editing.rename_substitution(program, self.folder, self.session, self.exercise, self.name)


class SetSetField(_ExerciseAddress):
    op: Literal["set_set_field"]
    set_index: int
    field_name: Literal["reps", "load", "rest"]
    value: str

    def apply(self, program: Program, students: tuple[Student, ...]) -> Program:
        return editing.set_set_field(
            program, self.folder, self.session, self.exercise,
            self.set_index, self.field_name, self.value,
        )


class SetSubstitutionSetField(_ExerciseAddress):
    op: Literal["set_substitution_set_field"]
    set_index: int
    field_name: Literal["reps", "load", "rest"]
    value: str

    def apply(self, program: Program, students: tuple[Student, ...]) -> Program:
        return editing.set_substitution_set_field(
            program, self.folder, self.session, self.exercise,
            self.set_index, self.field_name, self.value,
        )


class AddFolder(BaseModel):
    op: Literal["add_folder"]

    def apply(self, program: Program, students: tuple[Student, ...]) -> Program:
        return editing.add_folder(program)


class DeleteFolder(BaseModel):
    op: Literal["delete_folder"]
    folder: int

    def apply(self, program: Program, students: tuple[Student, ...]) -> Program:
        return editing.delete_folder(program, self.folder)


class AddSession(BaseModel):
    op: Literal["add_session"]
    folder: int
    schema_name: str = Field(default="blank", description="force, hypertrophy, crossfit or blank")

    def apply(self, program: Program, students: tuple[Student, ...]) -> Program:
        return editing.add_session_from_schema(program, self.folder, self.schema_name)


class CopySession(BaseModel):
    """Copy one of the listed copy sources (any student's session) into a folder."""
    op: Literal["copy_session"]
    folder: int
    source: int = Field(description="Index into the program manager's copy_sources")

    def apply(self, program: Program, students: tuple[Student, ...]) -> Program:
        sources = editing.available_sessions(students)
        if self.source < 0 or self.source >= len(sources):
            raise editing.ProgramEditError(f"No session to copy at index {self.source}")
        return editing.copy_session(program, self.folder, sources[self.source].session)


class DeleteSession(_SessionAddress):
    op: Literal["delete_session"]

    def apply(self, program: Program, students: tuple[Student, ...]) -> Program:
        return editing.delete_session(program, self.folder, self.session)


class AddWarmup(_SessionAddress):
    op: Literal["add_warmup"]

    def apply(self, program: Program, students: tuple[Student, ...]) -> Program:
        return editing.add_warmup_exercise(program, self.folder, self.session)


class DeleteWarmup(_SessionAddress):
    op: Literal["delete_warmup"]
    warmup: int

    def apply(self, program: Program, students: tuple[Student, ...]) -> Program:
        return editing.delete_warmup_exercise(program, self.folder, self.session, self.warmup)


class AddExercise(_SessionAddress):
    op: Literal["add_exercise"]

    def apply(self, program: Program, students: tuple[Student, ...]) -> Program:
        return editing.add_workout_exercise(program, self.folder, self.session)


class DeleteExercise(_ExerciseAddress):
    op: Literal["delete_exercise"]

    def apply(self, program: Program, students: tuple[Student, ...]) -> Program:
        return editing.delete_workout_exercise(program, self.folder, self.session, self.exercise)


class AddSet(_ExerciseAddress):
    op: Literal["add_set"]

    def apply(self, program: Program, students: tuple[Student, ...]) -> Program:
        return editing.add_set(program, self.folder, self.session, self.exercise)


class DeleteSet(_ExerciseAddress):
    op: Literal["delete_set"]
    set_index: int

    def apply(self, program: Program, students: tuple[Student, ...]) -> Program:
        return editing.delete_set(program, self.folder, self.session, self.exercise, self.set_index)


class AddSubstitutionSet(_ExerciseAddress):
    op: Literal["add_substitution_set"]

    def apply(self, program: Program, students: tuple[Student, ...]) -> Program:
        return editing.add_substitution_set(program, self.folder, self.session, self.exercise)


class DeleteSubstitutionSet(_ExerciseAddress):
    op: Literal["delete_substitution_set"]
    set_index: int

    def apply(self, program: Program, students: tuple[Student, ...]) -> Program:
        return editing.delete_substitution_set(
            program, self.folder, self.session, self.exercise, self.set_index,
        )


ProgramEdit = Annotated[
    Union[
        RenameProgram,
        RenameFolder,
        RenameSession,
        SetWorkoutType,
        SetWarmupField,
        RenameExercise,
        RenameSubstitution,
        SetSetField,
        SetSubstitutionSetField,
        AddFolder,
        DeleteFolder,
        AddSession,
        CopySession,
        DeleteSession,
        AddWarmup,
        DeleteWarmup,
        AddExercise,
        DeleteExercise,
        AddSet,
        DeleteSet,
        AddSubstitutionSet,
        DeleteSubstitutionSet,
    ],
    Field(discriminator="op"),
]


# ---------------------------------------------------------------------------
# Request Models
# ---------------------------------------------------------------------------

class AddStudentRequest(BaseModel):
    name: str
    username: str
    password: str


class ProgramEditRequest(BaseModel):
    edit: ProgramEdit


class CoachNotesRequest(BaseModel):
    coach_notes: str = Field(max_length=5000)


class LexiconEntryRequest(BaseModel):
    """All four fields are required; a blank one makes the request a no-op."""
    name: str
    muscle_group: str
    description: str
    video_url: str

    def to_entry(self) -> ExerciseLexiconEntry:
        return ExerciseLexiconEntry(
            name=self.name.strip(),
            muscle_group=self.muscle_group.strip(),
            description=self.description.strip(),
            video_url=self.video_url.strip(),
        )


class ProgressionExerciseRequest(BaseModel):
    exercise: str = Field(description="Exercise name; empty clears the selection")


class WeightRequest(BaseModel):
    weight: str = Field(description="Body weight in kg as typed; non-numeric input is ignored")


# ---------------------------------------------------------------------------
# Students
# ---------------------------------------------------------------------------

@router.post("/{session_id}/students", response_model=ScreenView, summary="Add a student")
async def add_student(
    session_id: str,
    request: AddStudentRequest,
    sessions: AppSessionsDep,
    controller: ControllerDep,
) -> ScreenView:
    return execute(
        sessions, session_id,
        lambda state: controller.add_student(state, request.name, request.username, request.password),
    )


@router.post(
    "/{session_id}/students/{student_id}/program",
    response_model=ScreenView,
    summary="Open the program manager for a student",
)
async def manage_student(
    session_id: str,
    student_id: str,
    sessions: AppSessionsDep,
    controller: ControllerDep,
) -> ScreenView:
    return execute(sessions, session_id, lambda state: controller.manage_student(state, student_id))


@router.post(
    "/{session_id}/students/{student_id}/history",
    response_model=ScreenView,
    summary="Open a student's training history",
)
async def show_history(
    session_id: str,
    student_id: str,
    sessions: AppSessionsDep,
    controller: ControllerDep,
) -> ScreenView:
    return execute(sessions, session_id, lambda state: controller.show_history(state, student_id))


@router.post(
    "/{session_id}/students/{student_id}/progression",
    response_model=ScreenView,
    summary="Open a student's progression charts",
)
async def show_progression(
    session_id: str,
    student_id: str,
    sessions: AppSessionsDep,
    controller: ControllerDep,
) -> ScreenView:
    return execute(sessions, session_id, lambda state: controller.show_progression(state, student_id))


@router.post(
    "/{session_id}/students/{student_id}/weight",
    response_model=ScreenView,
    summary="Open a student's weight tracking",
)
async def show_weight_tracking(
    session_id: str,
    student_id: str,
    sessions: AppSessionsDep,
    controller: ControllerDep,
) -> ScreenView:
    return execute(sessions, session_id, lambda state: controller.show_weight_tracking(state, student_id))


# ---------------------------------------------------------------------------
# Program manager
# ---------------------------------------------------------------------------

@router.post("/{session_id}/program/edits", response_model=ScreenView, summary="Edit the draft program")
async def edit_program(
    session_id: str,
    request: ProgramEditRequest,
    sessions: AppSessionsDep,
    controller: ControllerDep,
) -> ScreenView:
    logger.debug("Program edit", extra={"session_id": session_id, "op": request.edit.op})
    return execute(
        sessions, session_id,
        lambda state: controller.edit_program(
            state, lambda program: request.edit.apply(program, state.students),
        ),
    )


@router.post("/{session_id}/program/notes", response_model=ScreenView, summary="Edit the draft coach notes")
async def set_coach_notes(
    session_id: str,
    request: CoachNotesRequest,
    sessions: AppSessionsDep,
    controller: ControllerDep,
) -> ScreenView:
    return execute(sessions, session_id, lambda state: controller.set_coach_notes(state, request.coach_notes))


@router.post("/{session_id}/program/save", response_model=ScreenView, summary="Save program and notes")
async def save_program(session_id: str, sessions: AppSessionsDep, controller: ControllerDep) -> ScreenView:
    return execute(sessions, session_id, controller.save_program)


# ---------------------------------------------------------------------------
# Lexicon
# ---------------------------------------------------------------------------

@router.post("/{session_id}/lexicon", response_model=ScreenView, summary="Open the exercise lexicon")
async def open_lexicon(session_id: str, sessions: AppSessionsDep, controller: ControllerDep) -> ScreenView:
    return execute(sessions, session_id, controller.open_lexicon)


@router.post("/{session_id}/lexicon/entries", response_model=ScreenView, summary="Add a lexicon entry")
async def add_lexicon_entry(
    session_id: str,
    request: LexiconEntryRequest,
    sessions: AppSessionsDep,
    controller: ControllerDep,
) -> ScreenView:
    return execute(sessions, session_id, lambda state: controller.add_exercise(state, request.to_entry()))


@router.put(
    "/{session_id}/lexicon/entries/{entry_id}",
    response_model=ScreenView,
    summary="Update a lexicon entry",
)
async def update_lexicon_entry(
    session_id: str,
    entry_id: str,
    request: LexiconEntryRequest,
    sessions: AppSessionsDep,
    controller: ControllerDep,
) -> ScreenView:
    return execute(
        sessions, session_id,
        lambda state: controller.update_exercise(state, entry_id, request.to_entry()),
    )


@router.delete(
    "/{session_id}/lexicon/entries/{entry_id}",
    response_model=ScreenView,
    summary="Delete a lexicon entry",
)
async def delete_lexicon_entry(
    session_id: str,
    entry_id: str,
    sessions: AppSessionsDep,
    controller: ControllerDep,
) -> ScreenView:
    return execute(sessions, session_id, lambda state: controller.delete_exercise(state, entry_id))


# ---------------------------------------------------------------------------
# Progression and weight
# ---------------------------------------------------------------------------

@router.post(
    "/{session_id}/progression/exercise",
    response_model=ScreenView,
    summary="Choose the exercise to chart",
)
async def select_progression_exercise(
    session_id: str,
    request: ProgressionExerciseRequest,
    sessions: AppSessionsDep,
    controller: ControllerDep,
) -> ScreenView:
    return execute(
        sessions, session_id,
        lambda state: controller.select_progression_exercise(state, request.exercise),
    )


@router.post("/{session_id}/weights", response_model=ScreenView, summary="Add a weight measurement")
async def add_weight(
    session_id: str,
    request: WeightRequest,
    sessions: AppSessionsDep,
    controller: ControllerDep,
) -> ScreenView:
    return execute(sessions, session_id, lambda state: controller.add_weight(state, request.weight))
