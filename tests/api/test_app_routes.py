"""
API tests in mock mode.

Drives the HTTP surface end to end against a fresh in-memory store per
test, through FastAPI's TestClient.
"""

import pytest
from fastapi.testclient import TestClient

from coachboard.api import dependencies
from coachboard.api.app_sessions import AppSessionStore
from coachboard.config.settings import get_settings
from coachboard.infrastructure.firestore.client import FirestoreConnectionError, MockFirestoreClient

BASE = "/api/v1/app"


@pytest.fixture
def client(monkeypatch) -> TestClient:
    monkeypatch.setenv("FIRESTORE_MOCK_MODE", "true")
    monkeypatch.setenv("DEFAULT_LANGUAGE", "fr")
    get_settings.cache_clear()
    monkeypatch.setattr(dependencies, "_firestore_client", MockFirestoreClient())
    monkeypatch.setattr(dependencies, "_app_sessions", AppSessionStore())

    from coachboard.main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client

    get_settings.cache_clear()


@pytest.fixture
def session_id(client) -> str:
    response = client.post(BASE, json={})
    assert response.status_code == 201
    return response.json()["session_id"]


def post(client, session_id, path, json=None):
    response = client.post(f"{BASE}/{session_id}{path}", json=json)
    assert response.status_code == 200, response.text
    return response.json()


# ---------------------------------------------------------------------------
# App sessions and login
# ---------------------------------------------------------------------------

class TestAppSession:
    def test_open_lands_on_login(self, client):
        view = client.post(BASE, json={"language": "en"}).json()

        assert view["screen"] == "login"
        assert view["language"] == "en"
        assert view["labels"]["login_button"] == "Login"

    def test_unknown_session_is_404(self, client):
        assert client.get(f"{BASE}/nope").status_code == 404
        assert client.post(f"{BASE}/nope/back").status_code == 404

    def test_unsupported_language_is_400(self, client, session_id):
        assert client.post(BASE, json={"language": "de"}).status_code == 400
        response = client.post(f"{BASE}/{session_id}/language", json={"language": "de"})
        assert response.status_code == 400

    def test_close_session(self, client, session_id):
        assert client.delete(f"{BASE}/{session_id}").status_code == 204
        assert client.get(f"{BASE}/{session_id}").status_code == 404

    def test_store_failure_opens_on_error_screen(self, client, monkeypatch):
        def fail(settings):
            raise FirestoreConnectionError("no credentials")

        monkeypatch.setattr("coachboard.api.routes.app.get_firestore_client", fail)

        view = client.post(BASE, json={}).json()

        assert view["screen"] == "error"
        assert view["data"]["message"] == "Impossible d'initialiser l'application."

    def test_error_screen_survives_logout(self, client, monkeypatch):
        def fail(settings):
            raise FirestoreConnectionError("no credentials")

        monkeypatch.setattr("coachboard.api.routes.app.get_firestore_client", fail)
        sid = client.post(BASE, json={}).json()["session_id"]

        assert post(client, sid, "/logout")["screen"] == "error"
        response = client.post(f"{BASE}/{sid}/login", json={"username": "admin", "password": "admin"})
        assert response.status_code == 409
        assert client.get(f"{BASE}/{sid}").json()["screen"] == "error"

    def test_failed_login_shows_error(self, client, session_id):
        view = post(client, session_id, "/login", {"username": "alex", "password": "nope"})

        assert view["screen"] == "login"
        assert view["login_error"] == "Nom d'utilisateur ou mot de passe incorrect."

    def test_coach_login(self, client, session_id):
        view = post(client, session_id, "/login", {"username": "admin", "password": "admin"})

        assert view["screen"] == "admin"
        assert [s["name"] for s in view["data"]["students"]] == ["Alex Dubois"]
        assert len(view["data"]["recent_activity"]) == 8

    def test_command_on_wrong_screen_is_409(self, client, session_id):
        response = client.post(f"{BASE}/{session_id}/run/complete")
        assert response.status_code == 409


# ---------------------------------------------------------------------------
# Student flow
# ---------------------------------------------------------------------------

class TestStudentFlow:
    def test_run_and_complete_session(self, client, session_id):
        view = post(client, session_id, "/login", {"username": "alex", "password": "password123"})
        assert view["screen"] == "dashboard"
        assert view["data"]["coach_notes"].startswith("Prochaines séances")

        view = post(client, session_id, "/folders/0")
        assert view["screen"] == "folder_detail"
        assert len(view["data"]["sessions"]) == 4

        view = post(client, session_id, "/sessions/0")
        assert view["screen"] == "session"
        assert view["data"]["exercises"][0]["name"] == "Développé couché"

        post(client, session_id, "/run/check", {"section": "warmup", "index": 0})
        post(client, session_id, "/run/performance", {
            "exercise": 0, "set_index": 0, "field": "weight", "value": "62.5",
        })
        view = post(client, session_id, "/run/timer", {"action": "start", "exercise": 0, "set_index": 0})
        assert view["data"]["timer"]["duration_seconds"] == 90

        view = post(client, session_id, "/run/complete")
        assert view["screen"] == "folder_detail"
        assert view["notice"] == "Séance enregistrée !"

        view = post(client, session_id, "/dismiss")
        assert view["notice"] is None

    def test_exercise_details_modal(self, client, session_id):
        post(client, session_id, "/login", {"username": "alex", "password": "password123"})
        post(client, session_id, "/folders/0")
        post(client, session_id, "/sessions/0")

        view = post(client, session_id, "/run/exercise-details", {"name": "Squat"})

        assert view["exercise_details"]["muscle_group"] == "Jambes"

    def test_swap_index_out_of_range(self, client, session_id):
        post(client, session_id, "/login", {"username": "alex", "password": "password123"})
        post(client, session_id, "/folders/0")
        before = post(client, session_id, "/sessions/0")

        assert client.post(f"{BASE}/{session_id}/run/swap/-1").status_code == 422
        assert client.post(f"{BASE}/{session_id}/run/swap/9").status_code == 400

        after = client.get(f"{BASE}/{session_id}").json()
        assert after["data"]["exercises"] == before["data"]["exercises"]

    def test_bad_index_is_400(self, client, session_id):
        post(client, session_id, "/login", {"username": "alex", "password": "password123"})
        assert client.post(f"{BASE}/{session_id}/folders/9").status_code == 400


# ---------------------------------------------------------------------------
# Coach flow
# ---------------------------------------------------------------------------

class TestCoachFlow:
    @pytest.fixture
    def admin(self, client, session_id) -> dict:
        return post(client, session_id, "/login", {"username": "coach", "password": "coach"})

    def test_edit_and_save_program(self, client, session_id, admin):
        alex = admin["data"]["students"][0]["id"]

        view = post(client, session_id, f"/students/{alex}/program")
        assert view["screen"] == "program_manager"
        assert "Semaine 1 - PUSH (Alex Dubois)" in view["data"]["copy_sources"]

        view = post(client, session_id, "/program/edits", {"edit": {"op": "add_folder"}})
        view = post(client, session_id, "/program/edits", {
            "edit": {"op": "add_session", "folder": 2, "schema_name": "crossfit"},
        })
        assert view["data"]["draft"]["folders"][2]["sessions"][0]["name"] == "Nouveau WOD"

        view = post(client, session_id, "/program/edits", {
            "edit": {"op": "copy_session", "folder": 2, "source": 0},
        })
        assert view["data"]["draft"]["folders"][2]["sessions"][1]["name"] == "Semaine 1 - PUSH"

        post(client, session_id, "/program/notes", {"coach_notes": "Bravo"})
        view = post(client, session_id, "/program/save")
        assert view["screen"] == "admin"

        view = post(client, session_id, f"/students/{alex}/program")
        assert len(view["data"]["draft"]["folders"]) == 3
        assert view["data"]["coach_notes"] == "Bravo"

    def test_bad_edit_index_is_400(self, client, session_id, admin):
        alex = admin["data"]["students"][0]["id"]
        post(client, session_id, f"/students/{alex}/program")

        response = client.post(f"{BASE}/{session_id}/program/edits", json={
            "edit": {"op": "delete_folder", "folder": 7},
        })

        assert response.status_code == 400

    def test_unknown_edit_op_is_422(self, client, session_id, admin):
        alex = admin["data"]["students"][0]["id"]
        post(client, session_id, f"/students/{alex}/program")

        response = client.post(f"{BASE}/{session_id}/program/edits", json={"edit": {"op": "explode"}})

        assert response.status_code == 422

    def test_unknown_student_is_404(self, client, session_id, admin):
        assert client.post(f"{BASE}/{session_id}/students/ghost/history").status_code == 404

    def test_progression_chart(self, client, session_id, admin):
        alex = admin["data"]["students"][0]["id"]

        view = post(client, session_id, f"/students/{alex}/progression")
        assert set(view["data"]["exercises"]) == {"Développé couché", "Tirage vertical", "Squat"}
        assert view["data"]["chart"] is None

        view = post(client, session_id, "/progression/exercise", {"exercise": "Squat"})
        chart = view["data"]["chart"]
        assert chart["data"]["labels"] == ["13/01/2025", "10/02/2025"]
        assert chart["data"]["datasets"][0]["data"] == [80.0, 85.0]

    def test_weight_tracking(self, client, session_id, admin):
        alex = admin["data"]["students"][0]["id"]
        post(client, session_id, f"/students/{alex}/weight")

        view = post(client, session_id, "/weights", {"weight": "abc"})
        assert len(view["data"]["entries"]) == 4
        view = post(client, session_id, "/weights", {"weight": "1_000"})
        assert len(view["data"]["entries"]) == 4

        view = post(client, session_id, "/weights", {"weight": "82.5"})
        assert len(view["data"]["entries"]) == 5
        assert view["data"]["chart"]["data"]["datasets"][0]["data"][-1] == 82.5

    def test_lexicon(self, client, session_id, admin):
        view = post(client, session_id, "/lexicon")
        assert view["screen"] == "lexicon_manager"
        assert len(view["data"]["entries"]) == 7

        view = post(client, session_id, "/lexicon/entries", {
            "name": "Fentes", "muscle_group": "Jambes", "description": "d", "video_url": "v",
        })
        fentes = [e for e in view["data"]["entries"] if e["name"] == "Fentes"][0]

        response = client.delete(f"{BASE}/{session_id}/lexicon/entries/{fentes['id']}")
        assert response.status_code == 200
        assert len(response.json()["data"]["entries"]) == 7

    def test_back_to_admin(self, client, session_id, admin):
        post(client, session_id, "/lexicon")
        assert post(client, session_id, "/back")["screen"] == "admin"


class TestHealth:
    def test_health(self, client):
        body = client.get("/health").json()
        assert body["status"] == "ok"
        assert body["details"]["mock_mode"] is True

    def test_ready_in_mock_mode(self, client):
        response = client.get("/health/ready")
        assert response.status_code == 200
        assert response.json()["status"] == "ready"
