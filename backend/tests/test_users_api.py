import unittest
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import patch

from fastapi.testclient import TestClient

from movienight.db.session import get_db
from movienight.deps.identity import get_current_user
from movienight.main import app
from movienight.services.user_service import (
    InvalidReorderError,
    InvalidUsernameError,
    UserNotFoundError,
)


def _fake_user(**overrides):
    base = {
        "id": "alice",
        "name": "Alice",
        "unseen_movies": ["550", "603"],
        "created_at": datetime.now(timezone.utc),
        "updated_at": datetime.now(timezone.utc),
    }
    base.update(overrides)
    return SimpleNamespace(**base)


class TestUsersApi(unittest.TestCase):
    def setUp(self) -> None:
        self.client = TestClient(app)
        app.dependency_overrides[get_db] = lambda: iter([object()])

    def tearDown(self) -> None:
        app.dependency_overrides.clear()

    def test_identify_creates_user(self) -> None:
        with patch("movienight.api.users.identify_user", return_value=(_fake_user(unseen_movies=[]), True)):
            response = self.client.post("/users/identify", json={"name": "Alice"})

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["name"], "Alice")
        self.assertEqual(response.json()["unseen_movies"], [])

    def test_identify_existing_user_returns_200(self) -> None:
        with patch("movienight.api.users.identify_user", return_value=(_fake_user(), False)):
            response = self.client.post("/users/identify", json={"name": "alice"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["unseen_movies"], ["550", "603"])

    def test_identify_rejects_invalid_name(self) -> None:
        with patch(
            "movienight.api.users.identify_user",
            side_effect=InvalidUsernameError("Name must be at least 2 characters"),
        ):
            response = self.client.post("/users/identify", json={"name": "a"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"]["error"]["code"], "INVALID_USERNAME")

    def test_username_availability(self) -> None:
        with patch("movienight.api.users.is_username_available", return_value=False):
            response = self.client.get("/users/availability/Alice")
        self.assertEqual(response.json(), {"name": "Alice", "available": False})

    def test_get_unknown_user_returns_404(self) -> None:
        with patch("movienight.api.users.get_user", side_effect=UserNotFoundError("User 'zed' not found")):
            response = self.client.get("/users/zed")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["detail"]["error"]["code"], "USER_NOT_FOUND")

    def test_me_routes_require_identity_header(self) -> None:
        response = self.client.get("/users/me/unseen")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["detail"]["error"]["code"], "IDENTITY_REQUIRED")

    def test_get_my_unseen(self) -> None:
        app.dependency_overrides[get_current_user] = lambda: _fake_user()
        response = self.client.get("/users/me/unseen")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"name": "Alice", "unseen_movies": ["550", "603"]})

    def test_toggle_unseen(self) -> None:
        app.dependency_overrides[get_current_user] = lambda: _fake_user()
        with patch("movienight.api.users.toggle_unseen", return_value=["550", "603", "680"]) as toggle:
            response = self.client.post("/users/me/unseen/680/toggle")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["unseen_movies"], ["550", "603", "680"])
        self.assertEqual(toggle.call_args.args[1:], ("Alice", "680"))

    def test_toggle_rejects_oversized_movie_id(self) -> None:
        app.dependency_overrides[get_current_user] = lambda: _fake_user()
        movie_id = "9" * 21
        with patch("movienight.api.users.toggle_unseen") as toggle:
            response = self.client.post(f"/users/me/unseen/{movie_id}/toggle")

        self.assertEqual(response.status_code, 422)
        toggle.assert_not_called()

    def test_reorder_unseen(self) -> None:
        app.dependency_overrides[get_current_user] = lambda: _fake_user()
        with patch("movienight.api.users.reorder_unseen", return_value=["603", "550"]):
            response = self.client.put("/users/me/unseen", json={"unseen_movies": ["603", "550"]})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["unseen_movies"], ["603", "550"])

    def test_reorder_with_different_membership_returns_400(self) -> None:
        app.dependency_overrides[get_current_user] = lambda: _fake_user()
        with patch(
            "movienight.api.users.reorder_unseen",
            side_effect=InvalidReorderError("Reorder must contain exactly the current unseen movies"),
        ):
            response = self.client.put("/users/me/unseen", json={"unseen_movies": ["603"]})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"]["error"]["code"], "INVALID_REORDER")

    def test_reorder_rejects_blank_ids(self) -> None:
        app.dependency_overrides[get_current_user] = lambda: _fake_user()
        response = self.client.put("/users/me/unseen", json={"unseen_movies": ["550", " "]})
        self.assertEqual(response.status_code, 422)


class TestHealth(unittest.TestCase):
    def test_health(self) -> None:
        response = TestClient(app).get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "ok")
