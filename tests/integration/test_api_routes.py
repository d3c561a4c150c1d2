"""
API integration tests using FastAPI TestClient with in-memory DB.
"""
import pytest
from fastapi.testclient import TestClient


def _create_course_tree(client: TestClient, headers: dict) -> dict:
    """Course with one module and two lessons, created through the API."""
    course = client.post("/courses", json={"title": "Intro", "categories": []}, headers=headers).json()
    module = client.post(f"/courses/{course['id']}/modules", json={"title": "Basics"}, headers=headers).json()
    lessons = [
        client.post(
            f"/courses/{course['id']}/modules/{module['id']}/lessons",
            json={"title": title, "videoUrl": f"https://media.test/{title}.m3u8", "quizId": "q1"},
            headers=headers,
        ).json()
        for title in ("first", "second")
    ]
    return {"course": course, "module": module, "lessons": lessons}


@pytest.mark.integration
class TestHealthRoutes:
    def test_root_returns_healthy(self, api_client: TestClient):
        response = api_client.get("/")
        assert response.status_code == 200
        assert "Healthy" in response.json()["message"]

    def test_request_id_is_echoed(self, api_client: TestClient):
        response = api_client.get("/", headers={"x-request-id": "abc-123"})
        assert response.headers["x-request-id"] == "abc-123"

    def test_request_id_is_generated(self, api_client: TestClient):
        assert api_client.get("/").headers.get("x-request-id")


@pytest.mark.integration
class TestCourseRoutes:
    def test_catalog_crud(self, api_client: TestClient, admin_headers):
        tree = _create_course_tree(api_client, admin_headers)
        course_id = tree["course"]["id"]

        response = api_client.get(f"/courses/{course_id}")
        assert response.status_code == 200
        body = response.json()
        assert body["modules"][0]["title"] == "Basics"
        assert [l["order"] for l in body["modules"][0]["lessons"]] == [1, 2]
        assert body["modules"][0]["lessons"][0]["videoUrl"] == "https://media.test/first.m3u8"

        response = api_client.patch(f"/courses/{course_id}", json={"title": "Intro v2"}, headers=admin_headers)
        assert response.json()["title"] == "Intro v2"
        assert response.json()["modules"][0]["id"] == tree["module"]["id"]

    def test_delete_course_cascades(self, api_client: TestClient, admin_headers):
        tree = _create_course_tree(api_client, admin_headers)
        course_id = tree["course"]["id"]

        assert api_client.delete(f"/courses/{course_id}", headers=admin_headers).status_code == 200
        assert api_client.get(f"/courses/{course_id}").status_code == 404
        assert api_client.delete(f"/courses/{course_id}", headers=admin_headers).status_code == 404

    def test_reorder_modules(self, api_client: TestClient, admin_headers):
        tree = _create_course_tree(api_client, admin_headers)
        course_id = tree["course"]["id"]
        second = api_client.post(f"/courses/{course_id}/modules", json={"title": "More"}, headers=admin_headers).json()
        assert second["order"] == 2

        response = api_client.patch(
            f"/courses/{course_id}/modules/reorder",
            json={"moduleIds": [second["id"], tree["module"]["id"]]},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert [(m["id"], m["order"]) for m in response.json()["modules"]] == [
            (second["id"], 1),
            (tree["module"]["id"], 2),
        ]

    def test_reorder_lessons(self, api_client: TestClient, admin_headers):
        tree = _create_course_tree(api_client, admin_headers)
        course_id, module_id = tree["course"]["id"], tree["module"]["id"]
        first, second = (l["id"] for l in tree["lessons"])

        response = api_client.patch(
            f"/courses/{course_id}/modules/{module_id}/lessons/reorder",
            json={"lessonIds": [second, first]},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert [l["id"] for l in response.json()["lessons"]] == [second, first]

    def test_update_and_delete_lesson(self, api_client: TestClient, admin_headers):
        tree = _create_course_tree(api_client, admin_headers)
        base = f"/courses/{tree['course']['id']}/modules/{tree['module']['id']}/lessons"
        lesson_id = tree["lessons"][0]["id"]

        response = api_client.patch(f"{base}/{lesson_id}", json={"title": "Renamed", "quizId": ""}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["title"] == "Renamed"
        assert response.json()["quizId"] is None

        assert api_client.delete(f"{base}/{lesson_id}", headers=admin_headers).status_code == 200
        assert api_client.delete(f"{base}/{lesson_id}", headers=admin_headers).status_code == 404

    def test_category_filter(self, api_client: TestClient, admin_headers, test_store):
        from lms_api.schemas.user_schemas import User
        api_client.post("/courses", json={"title": "Open"}, headers=admin_headers)
        api_client.post("/courses", json={"title": "Sales", "categories": ["sales"]}, headers=admin_headers)
        api_client.post("/courses", json={"title": "Support", "categories": ["support"]}, headers=admin_headers)
        test_store.users.add(User(id="seller", name="Seller", category="sales"))

        titles = {c["title"] for c in api_client.get("/courses", params={"userId": "seller"}).json()}
        assert titles == {"Open", "Sales"}
        assert len(api_client.get("/courses").json()) == 3

    def test_mutations_require_admin(self, api_client: TestClient, student_headers):
        assert api_client.post("/courses", json={"title": "x"}).status_code == 401
        assert api_client.post("/courses", json={"title": "x"}, headers=student_headers).status_code == 403

    def test_invalid_token(self, api_client: TestClient):
        response = api_client.post("/courses", json={"title": "x"}, headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401


@pytest.mark.integration
class TestQuizRoutes:
    def test_seeded_quizzes(self, api_client: TestClient):
        quizzes = api_client.get("/quizzes").json()
        assert {q["id"] for q in quizzes} >= {"q1", "q2", "q3", "q4", "q5", "q6"}
        quiz = api_client.get("/quizzes/q1").json()
        assert len(quiz["questions"]) == 5
        assert all(len(q["options"]) == 3 for q in quiz["questions"])

    def test_unknown_quiz(self, api_client: TestClient):
        assert api_client.get("/quizzes/nope").status_code == 404

    def test_create_quiz(self, api_client: TestClient, admin_headers):
        payload = {
            "passingScore": 80,
            "questions": [{"text": "2 + 2?", "options": ["3", "4", "5"], "correctOptionIndex": 1}],
        }
        response = api_client.post("/quizzes", json=payload, headers=admin_headers)
        assert response.status_code == 200
        quiz = response.json()
        assert quiz["passingScore"] == 80
        assert quiz["questions"][0]["id"] == "1"
        assert api_client.get(f"/quizzes/{quiz['id']}").status_code == 200

    def test_create_quiz_validates_options(self, api_client: TestClient, admin_headers):
        payload = {"questions": [{"text": "?", "options": ["a", "b"], "correctOptionIndex": 0}]}
        assert api_client.post("/quizzes", json=payload, headers=admin_headers).status_code == 422


@pytest.mark.integration
class TestProgressAndCertificates:
    def test_completion_flow(self, api_client: TestClient, admin_headers, student_headers):
        tree = _create_course_tree(api_client, admin_headers)
        first, second = (l["id"] for l in tree["lessons"])

        response = api_client.post("/progress/attempt", json={"userId": "u1", "lessonId": first, "score": 5}, headers=student_headers)
        assert response.status_code == 200
        assert response.json()["status"] == "COMPLETED"
        assert api_client.get("/certificates/u1").json() == []
        assert api_client.get("/users/u1").json()["xp"] == 0

        api_client.post("/progress/attempt", json={"userId": "u1", "lessonId": second, "score": 2}, headers=student_headers)
        assert api_client.get("/certificates/u1").json() == []

        response = api_client.post("/progress/attempt", json={"userId": "u1", "lessonId": second, "score": 4}, headers=student_headers)
        assert response.json()["attempts"] == 2
        certs = api_client.get("/certificates", params={"userId": "u1"}).json()
        assert len(certs) == 1
        assert certs[0]["courseId"] == tree["course"]["id"]
        assert certs[0]["userName"] == "Ana"
        assert api_client.get("/users/u1").json()["xp"] == 10

        # Re-completing does not issue again or award more XP.
        api_client.post("/progress", json={"userId": "u1", "lessonId": second}, headers=student_headers)
        assert len(api_client.get("/certificates/u1").json()) == 1
        assert api_client.get("/users/u1").json()["xp"] == 10

        progress = api_client.get("/progress/u1").json()
        assert {p["lessonId"] for p in progress} == {first, second}
        assert len(api_client.get("/progress").json()) == 2

    def test_unknown_lesson_or_user(self, api_client: TestClient, admin_headers, student_headers):
        response = api_client.post("/progress/attempt", json={"userId": "u1", "lessonId": "nope", "score": 5}, headers=student_headers)
        assert response.status_code == 404
        response = api_client.post("/progress", json={"userId": "ghost", "lessonId": "nope"}, headers=admin_headers)
        assert response.status_code == 404

    def test_negative_score_rejected(self, api_client: TestClient, student_headers):
        response = api_client.post("/progress/attempt", json={"userId": "u1", "lessonId": "l1", "score": -1}, headers=student_headers)
        assert response.status_code == 422

    def test_progress_requires_own_session_or_admin(
        self, api_client: TestClient, admin_headers, student_headers, test_store
    ):
        from lms_api.schemas.user_schemas import User
        tree = _create_course_tree(api_client, admin_headers)
        lesson_id = tree["lessons"][0]["id"]
        test_store.users.add(User(id="u2", name="Bruno"))
        payload = {"userId": "u2", "lessonId": lesson_id, "score": 5}

        assert api_client.post("/progress/attempt", json=payload).status_code == 401
        assert api_client.post("/progress/attempt", json=payload, headers=student_headers).status_code == 403
        assert api_client.post("/progress", json={"userId": "u2", "lessonId": lesson_id}, headers=student_headers).status_code == 403
        assert api_client.get("/progress/u2").json() == []

        assert api_client.post("/progress/attempt", json=payload, headers=admin_headers).status_code == 200


@pytest.mark.integration
class TestUserRoutes:
    def test_create_and_list(self, api_client: TestClient, admin_headers):
        response = api_client.post("/users", json={"name": "carla", "category": "sales"}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["id"] == "carla"
        assert api_client.post("/users", json={"name": "carla"}, headers=admin_headers).status_code == 409
        assert "carla" in {u["id"] for u in api_client.get("/users").json()}

    def test_xp_and_ranking(self, api_client: TestClient, admin_headers, student_headers):
        api_client.post("/users/u1/xp", json={"amount": 10}, headers=admin_headers)
        response = api_client.post("/users/u1/xp", json={"amount": 10}, headers=admin_headers)
        assert response.json()["xp"] == 20
        assert api_client.post("/users/ghost/xp", json={"amount": 1}, headers=admin_headers).status_code == 404
        assert api_client.post("/users/u1/xp", json={"amount": 1}, headers=student_headers).status_code == 403

        ranking = api_client.get("/users/ranking").json()
        assert ranking[0]["id"] == "u1"
        assert len(api_client.get("/users/ranking", params={"limit": 1}).json()) == 1

    def test_category(self, api_client: TestClient, student_headers):
        response = api_client.post("/users/u1/category", json={"category": "support"})
        assert response.json()["category"] == "support"
        assert api_client.post("/users/ghost/category", json={"category": "x"}).status_code == 404

    def test_delete_user(self, api_client: TestClient, admin_headers, student_headers):
        assert api_client.delete("/users/u1", headers=admin_headers).status_code == 200
        assert api_client.get("/users/u1").status_code == 404
        assert api_client.delete("/users/u1", headers=admin_headers).status_code == 404

    def test_me(self, api_client: TestClient, student_headers):
        response = api_client.get("/users/me", headers=student_headers)
        assert response.status_code == 200
        assert response.json()["id"] == "u1"
        assert api_client.get("/users/me").status_code == 401


@pytest.mark.integration
class TestLoginRoutes:
    def test_login_sets_cookie_and_returns_profile(self, api_client: TestClient, identity_provider):
        response = api_client.post("/users/login", json={"usuario": " jdoe ", "senha": "secret"})
        assert response.status_code == 200
        body = response.json()
        assert body["accessToken"]
        assert body["user"]["username"] == "jdoe"
        assert body["user"]["usuario"] == "jdoe"
        assert body["user"]["nome"] == "Jdoe"
        assert body["user"]["email"] == "jdoe@corp.test"
        assert body["user"]["role"] == "student"
        assert body["user"]["xp"] == 0
        assert identity_provider.calls == [("jdoe", "secret")]
        assert "access_token" in response.cookies

        me = api_client.get("/users/me")
        assert me.status_code == 200
        assert me.json()["name"] == "Jdoe"

    def test_admin_role_comes_from_grants(self, api_client: TestClient):
        response = api_client.post("/users/login", json={"username": "boss", "password": "secret"})
        assert response.json()["user"]["role"] == "admin"

    def test_failed_login_is_generic_401(self, api_client: TestClient):
        response = api_client.post("/users/login", json={"username": "jdoe", "password": "wrong"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Authentication failed"
        assert api_client.get("/users/jdoe").status_code == 404

    def test_logout_clears_cookie(self, api_client: TestClient):
        api_client.post("/users/login", json={"username": "jdoe", "password": "secret"})
        response = api_client.post("/users/logout")
        assert response.status_code == 200
        assert api_client.get("/users/me").status_code == 401


@pytest.mark.integration
class TestUploadRoutes:
    def test_upload_relays_to_flussonic(self, api_client: TestClient, admin_headers, flussonic_requests):
        response = api_client.post(
            "/uploads",
            files={"file": ("lesson.mp4", b"fake-video", "video/mp4")},
            headers=admin_headers,
        )
        assert response.status_code == 200
        url = response.json()["url"]
        assert url.startswith("https://media.test/lessons/")
        assert url.endswith(".mp4/index.m3u8")
        assert flussonic_requests[0].method == "PUT"

    def test_missing_file(self, api_client: TestClient, admin_headers):
        assert api_client.post("/uploads", headers=admin_headers).status_code == 400

    def test_too_large(self, api_client: TestClient, admin_headers, monkeypatch):
        from lms_api.config import settings
        monkeypatch.setattr(settings, "upload_max_bytes", 4)
        response = api_client.post(
            "/uploads",
            files={"file": ("lesson.mp4", b"more than four bytes", "video/mp4")},
            headers=admin_headers,
        )
        assert response.status_code == 413
        assert response.json()["detail"].startswith("File exceeds")

    def test_upload_requires_admin(self, api_client: TestClient, student_headers):
        response = api_client.post(
            "/uploads",
            files={"file": ("lesson.mp4", b"x", "video/mp4")},
            headers=student_headers,
        )
        assert response.status_code == 403

    def test_configure_cors(self, api_client: TestClient, admin_headers, flussonic_requests):
        response = api_client.post("/uploads/cors", json={"origins": ["https://lms.test"]}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json() == {"configured": True, "origins": ["https://lms.test"]}
        assert str(flussonic_requests[0].url).endswith("/streamer/api/v3/vods/lessons")
