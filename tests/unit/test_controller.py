"""
Controller tests against the in-memory store.

Each test drives the controller the way the screens would, from a seeded
store, and checks both the returned snapshot and what reached the store.
"""

from datetime import datetime, timezone

import pytest

from coachboard.core.controller import AppState, CoachingController, StudentNotFoundError
from coachboard.core.navigation import (
    AdminScreen,
    DashboardScreen,
    ErrorScreen,
    FolderScreen,
    HistoryScreen,
    InvalidScreenError,
    LexiconManagerScreen,
    LoginScreen,
    ProgramManagerScreen,
    ProgressionScreen,
    SessionScreen,
    WeightTrackingScreen,
)
from coachboard.core.program import editing
from coachboard.core.program.models import ExerciseLexiconEntry
from coachboard.infrastructure.firestore.client import CollectionPaths, MockFirestoreClient
from coachboard.infrastructure.firestore.repositories import LexiconRepository, StudentRepository
from coachboard.infrastructure.firestore.seed import DemoDataSeeder

NOW = datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc)


class FailingStudents:
    """Student store whose reads always fail."""

    def list_students(self):
        raise ConnectionError("store unreachable")


@pytest.fixture
def client() -> MockFirestoreClient:
    return MockFirestoreClient()


@pytest.fixture
def paths() -> CollectionPaths:
    return CollectionPaths(app_id="test-app")


@pytest.fixture
def students(client, paths) -> StudentRepository:
    return StudentRepository(client, paths)


@pytest.fixture
def controller(client, paths, students) -> CoachingController:
    return CoachingController(
        students=students,
        lexicon=LexiconRepository(client, paths),
        seeder=DemoDataSeeder(client, paths),
        clock=lambda: NOW,
    )


@pytest.fixture
def state(controller) -> AppState:
    return controller.initialize()


@pytest.fixture
def alex_id(state) -> str:
    return state.students[0].id


def as_coach(controller, state) -> AppState:
    return controller.login(state, "coach", "coach")


def stored_student(students, student_id):
    return next(s for s in students.list_students() if s.id == student_id)


# ---------------------------------------------------------------------------
# Startup
# ---------------------------------------------------------------------------

class TestInitialize:
    def test_empty_store_is_seeded(self, state):
        assert isinstance(state.screen, LoginScreen)
        assert [s.name for s in state.students] == ["Alex Dubois"]
        assert len(state.lexicon) == 7

    def test_seeding_happens_once(self, controller, state):
        """A second startup reads the existing data instead of seeding again."""
        again = controller.initialize()
        assert len(again.students) == 1
        assert len(again.lexicon) == 7

    def test_no_seeder_leaves_store_empty(self, client, paths):
        controller = CoachingController(
            students=StudentRepository(client, paths),
            lexicon=LexiconRepository(client, paths),
        )
        state = controller.initialize()
        assert state.students == ()
        assert state.lexicon == ()

    def test_store_failure_lands_on_error_screen(self, client, paths):
        controller = CoachingController(
            students=FailingStudents(),
            lexicon=LexiconRepository(client, paths),
        )

        state = controller.initialize(language="en")

        assert isinstance(state.screen, ErrorScreen)
        assert state.is_failed
        assert state.screen.message == "The application could not be initialized."

    def test_error_screen_survives_logout_and_login(self, client, paths):
        """A failed start offers no way back into the app."""
        controller = CoachingController(
            students=FailingStudents(),
            lexicon=LexiconRepository(client, paths),
        )
        failed = controller.initialize()

        after_logout = controller.logout(failed)

        assert after_logout is failed
        with pytest.raises(InvalidScreenError):
            controller.login(after_logout, "admin", "admin")


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------

class TestLogin:
    @pytest.mark.parametrize("username,password", [("admin", "admin"), ("coach", "coach")])
    def test_coach_logins_open_admin(self, controller, state, username, password):
        after = controller.login(state, username, password)

        assert isinstance(after.screen, AdminScreen)
        assert len(after.recent_activity) == 8
        assert after.recent_activity[0].session_name == "Semaine 4 - PUSH"

    def test_student_login_opens_dashboard(self, controller, state):
        after = controller.login(state, "alex", "password123")

        assert isinstance(after.screen, DashboardScreen)
        assert after.screen.student.name == "Alex Dubois"

    def test_wrong_password_sets_localized_error(self, controller, state):
        after = controller.login(state, "alex", "wrong")

        assert isinstance(after.screen, LoginScreen)
        assert after.login_error == "Nom d'utilisateur ou mot de passe incorrect."

        english = controller.login(controller.set_language(state, "en"), "alex", "wrong")
        assert english.login_error == "Incorrect username or password."

    def test_coach_password_on_student_username_fails(self, controller, state):
        after = controller.login(state, "admin", "coach")
        assert isinstance(after.screen, LoginScreen)
        assert after.login_error

    def test_empty_credentials_are_ignored(self, controller, state):
        assert controller.login(state, "", "password123") is state

    def test_successful_login_clears_previous_error(self, controller, state):
        failed = controller.login(state, "alex", "nope")
        after = controller.login(failed, "alex", "password123")
        assert after.login_error == ""

    def test_logout_returns_to_login(self, controller, state):
        after = controller.logout(controller.login(state, "alex", "password123"))
        assert isinstance(after.screen, LoginScreen)

    def test_login_only_from_login_screen(self, controller, state):
        admin = as_coach(controller, state)
        with pytest.raises(InvalidScreenError):
            controller.login(admin, "alex", "password123")

    def test_unknown_language_rejected(self, controller, state):
        with pytest.raises(ValueError):
            controller.set_language(state, "de")


# ---------------------------------------------------------------------------
# Student area
# ---------------------------------------------------------------------------

class TestStudentSession:
    @pytest.fixture
    def in_session(self, controller, state) -> AppState:
        dashboard = controller.login(state, "alex", "password123")
        folder = controller.select_folder(dashboard, 0)
        return controller.select_session(folder, 0)

    def test_browse_to_session(self, in_session):
        assert isinstance(in_session.screen, SessionScreen)
        assert in_session.screen.folder.name == "Mois 1"
        assert in_session.screen.session.name == "Semaine 1 - PUSH"

    def test_commands_leave_previous_snapshot_alone(self, controller, in_session):
        after = controller.toggle_check(in_session, "warmup", 0)

        assert after.screen.run.is_checked("warmup", 0)
        assert not in_session.screen.run.is_checked("warmup", 0)

    def test_back_from_session_discards_run(self, controller, in_session):
        logged = controller.record_performance(in_session, 0, 0, "weight", "60")

        folder = controller.back(logged)
        again = controller.select_session(folder, 0)

        assert isinstance(folder.screen, FolderScreen)
        assert again.screen.run.performance == {}

    def test_negative_swap_index_is_rejected(self, controller, in_session):
        with pytest.raises(IndexError):
            controller.swap_exercise(in_session, -1)

        names = [e.name for e in in_session.screen.run.displayed_workout.exercises]
        assert names == [e.name for e in in_session.screen.session.workout.exercises]

    def test_timer_starts_from_set_rest(self, controller, in_session):
        after = controller.start_timer(in_session, 0, 0)

        assert after.screen.run.timer.duration_seconds == 90
        assert after.screen.run.timer.started_at == NOW
        assert controller.stop_timer(after).screen.run.timer is None

    def test_complete_saves_history_and_returns_to_folder(self, controller, students, alex_id, in_session):
        run = controller.record_performance(in_session, 0, 0, "weight", "62.5")
        run = controller.set_comment(run, "Facile")

        after = controller.complete_session(run)

        assert isinstance(after.screen, FolderScreen)
        assert after.notice == "Séance enregistrée !"

        latest = students.list_history(alex_id, limit=1)[0]
        assert latest.session_name == "Semaine 1 - PUSH"
        assert latest.completed_at == NOW
        assert latest.comment == "Facile"
        assert latest.exercises[0].sets[0].performance.weight == "62.5"
        assert latest.exercises[0].sets[0].performance.reps == "N/A"

    def test_exercise_details_found(self, controller, in_session):
        after = controller.show_exercise_details(in_session, "Développé couché")
        assert after.exercise_details.muscle_group == "Pectoraux"
        assert controller.dismiss(after).exercise_details is None

    def test_exercise_details_missing_is_a_notice(self, controller, in_session):
        after = controller.show_exercise_details(in_session, "Écarté incliné")

        assert after.exercise_details is None
        assert "Écarté incliné" in after.notice

    def test_own_progression_goes_back_to_dashboard(self, controller, state):
        dashboard = controller.login(state, "alex", "password123")

        progression = controller.show_own_progression(dashboard)

        assert isinstance(progression.screen, ProgressionScreen)
        assert len(progression.training_history) == 8
        assert isinstance(controller.back(progression).screen, DashboardScreen)

    def test_bad_folder_index(self, controller, state):
        dashboard = controller.login(state, "alex", "password123")
        with pytest.raises(IndexError):
            controller.select_folder(dashboard, 5)


# ---------------------------------------------------------------------------
# Coach area
# ---------------------------------------------------------------------------

class TestCoach:
    def test_add_student(self, controller, state):
        after = controller.add_student(as_coach(controller, state), "  Léa Martin ", "lea", "secret")

        added = [s for s in after.students if s.username == "lea"][0]
        assert added.name == "Léa Martin"
        assert added.program.name == "Nouveau programme"
        assert added.program.folders == []

    def test_add_student_with_blank_field_is_ignored(self, controller, state):
        admin = as_coach(controller, state)
        assert controller.add_student(admin, "Léa", "   ", "secret") is admin

    def test_program_edits_stay_in_draft_until_save(self, controller, students, state, alex_id):
        manager = controller.manage_student(as_coach(controller, state), alex_id)
        assert isinstance(manager.screen, ProgramManagerScreen)

        edited = controller.edit_program(manager, editing.add_folder)
        edited = controller.edit_program(edited, lambda p: editing.rename_program(p, "Sèche 2025"))
        edited = controller.set_coach_notes(edited, "Dors plus.")

        assert stored_student(students, alex_id).program.name == "Prise de Masse - 2025"

        saved = controller.save_program(edited)

        assert isinstance(saved.screen, AdminScreen)
        stored = stored_student(students, alex_id)
        assert stored.program.name == "Sèche 2025"
        assert [f.name for f in stored.program.folders] == ["Mois 1", "Mois 2", "Nouveau Dossier"]
        assert stored.coach_notes == "Dors plus."
        assert saved.students[0].program.name == "Sèche 2025"

    def test_back_from_manager_discards_draft(self, controller, state, alex_id):
        manager = controller.manage_student(as_coach(controller, state), alex_id)
        edited = controller.edit_program(manager, lambda p: editing.delete_folder(p, 0))

        admin = controller.back(edited)
        reopened = controller.manage_student(admin, alex_id)

        assert len(reopened.screen.draft.folders) == 2

    def test_unknown_student(self, controller, state):
        with pytest.raises(StudentNotFoundError):
            controller.manage_student(as_coach(controller, state), "nope")

    def test_history(self, controller, state, alex_id):
        after = controller.show_history(as_coach(controller, state), alex_id)

        assert isinstance(after.screen, HistoryScreen)
        dates = [e.completed_at for e in after.training_history]
        assert dates == sorted(dates, reverse=True)

    def test_progression_exercise_selection(self, controller, state, alex_id):
        progression = controller.show_progression(as_coach(controller, state), alex_id)
        selected = controller.select_progression_exercise(progression, "Squat")

        assert selected.screen.selected_exercise == "Squat"
        assert isinstance(controller.back(selected).screen, AdminScreen)


class TestLexicon:
    @pytest.fixture
    def lexicon_screen(self, controller, state) -> AppState:
        return controller.open_lexicon(as_coach(controller, state))

    def test_add_entry(self, controller, lexicon_screen):
        entry = ExerciseLexiconEntry(
            name="Fentes", muscle_group="Jambes", description="Un pas en avant.", video_url="https://v",
        )

        after = controller.add_exercise(lexicon_screen, entry)

        assert isinstance(after.screen, LexiconManagerScreen)
        assert "Fentes" in [e.name for e in after.lexicon]

    def test_incomplete_entry_is_ignored(self, controller, lexicon_screen):
        entry = ExerciseLexiconEntry(name="Fentes", muscle_group="", description="x", video_url="y")
        assert controller.add_exercise(lexicon_screen, entry) is lexicon_screen

    def test_update_and_delete(self, controller, lexicon_screen):
        squat = [e for e in lexicon_screen.lexicon if e.name == "Squat"][0]

        updated = controller.update_exercise(lexicon_screen, squat.id, ExerciseLexiconEntry(
            name="Squat", muscle_group="Quadriceps", description="d", video_url="v",
        ))
        assert [e.muscle_group for e in updated.lexicon if e.id == squat.id] == ["Quadriceps"]

        deleted = controller.delete_exercise(updated, squat.id)
        assert squat.id not in [e.id for e in deleted.lexicon]
        assert len(deleted.lexicon) == 6


class TestWeightTracking:
    @pytest.fixture
    def weight_screen(self, controller, state, alex_id) -> AppState:
        return controller.show_weight_tracking(as_coach(controller, state), alex_id)

    def test_seeded_entries_oldest_first(self, weight_screen):
        assert isinstance(weight_screen.screen, WeightTrackingScreen)
        assert [e.weight for e in weight_screen.screen.entries] == [80.5, 80.1, 79.5, 79.2]

    def test_add_weight(self, controller, students, alex_id, weight_screen):
        after = controller.add_weight(weight_screen, "82.5")

        entries = after.screen.entries
        assert len(entries) == 5
        assert entries[-1].weight == 82.5
        assert entries[-1].date == NOW
        assert len(students.list_weights(alex_id)) == 5

    @pytest.mark.parametrize("value", ["", "abc", "nan", "inf", "1_000", "1e999", "12kg"])
    def test_invalid_weight_is_ignored(self, controller, students, alex_id, weight_screen, value):
        assert controller.add_weight(weight_screen, value) is weight_screen
        assert len(students.list_weights(alex_id)) == 4
