"""Tests for the task API."""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient


def _create(client: TestClient, user: dict, title: str, description: str | None = None) -> dict:
    body = {"title": title}
    if description is not None:
        body["description"] = description
    response = client.post("/api/tasks", json=body, headers=user["headers"])
    assert response.status_code == 201, response.text
    return response.json()


class TestTaskCreate:
    """Tests for creating tasks."""

    def test_create_minimal(self, client: TestClient, test_user: dict):
        """Create a task with only a title."""
        task = _create(client, test_user, "Buy milk")
        assert task["title"] == "Buy milk"
        assert task["description"] is None
        assert task["completed"] is False
        assert task["user_id"] == test_user["user_id"]
        assert task["created_at"] == task["updated_at"]

    def test_create_trims_fields(self, client: TestClient, test_user: dict):
        task = _create(client, test_user, "  Buy milk  ", "  two litres ")
        assert task["title"] == "Buy milk"
        assert task["description"] == "two litres"

    def test_blank_description_stored_as_null(self, client: TestClient, test_user: dict):
        task = _create(client, test_user, "Buy milk", "   ")
        assert task["description"] is None

    def test_create_then_get_returns_same_fields(self, client: TestClient, test_user: dict):
        created = _create(client, test_user, "Write report", "Quarterly numbers")
        response = client.get(f"/api/tasks/{created['id']}", headers=test_user["headers"])
        assert response.status_code == 200
        fetched = response.json()
        assert fetched["title"] == "Write report"
        assert fetched["description"] == "Quarterly numbers"
        assert fetched["completed"] is False

    @pytest.mark.parametrize(
        "body",
        [
            {"title": ""},
            {"title": "    "},
            {"title": "x" * 201},
            {"title": "ok", "description": "d" * 1001},
            {"description": "no title"},
            {"title": None},
            {"title": "ok", "completed": True},
        ],
    )
    def test_create_invalid(self, client: TestClient, test_user: dict, body: dict):
        response = client.post("/api/tasks", json=body, headers=test_user["headers"])
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    def test_create_boundary_lengths(self, client: TestClient, test_user: dict):
        task = _create(client, test_user, "x" * 200, "d" * 1000)
        assert len(task["title"]) == 200
        assert len(task["description"]) == 1000

    def test_create_requires_auth(self, client: TestClient):
        response = client.post("/api/tasks", json={"title": "Buy milk"})
        assert response.status_code == 401


class TestTaskList:
    """Tests for listing, filtering and sorting tasks."""

    def test_list_empty(self, client: TestClient, test_user: dict):
        response = client.get("/api/tasks", headers=test_user["headers"])
        assert response.status_code == 200
        assert response.json() == []

    def test_list_default_newest_first(self, client: TestClient, test_user: dict):
        first = _create(client, test_user, "first")
        second = _create(client, test_user, "second")
        ids = [t["id"] for t in client.get("/api/tasks", headers=test_user["headers"]).json()]
        assert ids == [second["id"], first["id"]]

    def test_status_filters(self, client: TestClient, test_user: dict):
        a = _create(client, test_user, "a")
        _create(client, test_user, "b")
        c = _create(client, test_user, "c")
        for task in (a, c):
            client.patch(f"/api/tasks/{task['id']}/complete", headers=test_user["headers"])

        def ids(status: str) -> set[int]:
            response = client.get(f"/api/tasks?status={status}", headers=test_user["headers"])
            assert response.status_code == 200
            return {t["id"] for t in response.json()}

        completed = ids("completed")
        pending = ids("pending")
        assert completed == {a["id"], c["id"]}
        assert completed.isdisjoint(pending)
        assert completed | pending == ids("all")

    def test_completed_filter_only_returns_completed(self, client: TestClient, test_user: dict):
        task = _create(client, test_user, "a")
        _create(client, test_user, "b")
        client.patch(f"/api/tasks/{task['id']}/complete", headers=test_user["headers"])
        tasks = client.get("/api/tasks?status=completed", headers=test_user["headers"]).json()
        assert tasks and all(t["completed"] for t in tasks)

    def test_sort_by_title(self, client: TestClient, test_user: dict):
        for title in ("pear", "apple", "mango"):
            _create(client, test_user, title)
        tasks = client.get("/api/tasks?sort=title", headers=test_user["headers"]).json()
        assert [t["title"] for t in tasks] == ["apple", "mango", "pear"]

    def test_sort_by_updated(self, client: TestClient, test_user: dict):
        old = _create(client, test_user, "old")
        _create(client, test_user, "new")
        client.put(f"/api/tasks/{old['id']}", json={"title": "old, edited"}, headers=test_user["headers"])
        tasks = client.get("/api/tasks?sort=updated", headers=test_user["headers"]).json()
        assert tasks[0]["id"] == old["id"]

    def test_invalid_query_params(self, client: TestClient, test_user: dict):
        assert client.get("/api/tasks?status=done", headers=test_user["headers"]).status_code == 400
        assert client.get("/api/tasks?sort=priority", headers=test_user["headers"]).status_code == 400


class TestTaskUpdate:
    """Tests for updating tasks."""

    def test_update_title_only(self, client: TestClient, test_user: dict):
        task = _create(client, test_user, "Buy milk", "semi-skimmed")
        response = client.put(f"/api/tasks/{task['id']}", json={"title": "Buy oat milk"}, headers=test_user["headers"])
        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Buy oat milk"
        assert data["description"] == "semi-skimmed"
        assert datetime.fromisoformat(data["updated_at"]) > datetime.fromisoformat(task["updated_at"])

    def test_update_description_only(self, client: TestClient, test_user: dict):
        task = _create(client, test_user, "Buy milk")
        response = client.put(f"/api/tasks/{task['id']}", json={"description": "two"}, headers=test_user["headers"])
        assert response.json()["title"] == "Buy milk"
        assert response.json()["description"] == "two"

    def test_clear_description(self, client: TestClient, test_user: dict):
        task = _create(client, test_user, "Buy milk", "two")
        response = client.put(f"/api/tasks/{task['id']}", json={"description": None}, headers=test_user["headers"])
        assert response.status_code == 200
        assert response.json()["description"] is None

    def test_update_does_not_touch_completed(self, client: TestClient, test_user: dict):
        task = _create(client, test_user, "Buy milk")
        client.patch(f"/api/tasks/{task['id']}/complete", headers=test_user["headers"])
        response = client.put(f"/api/tasks/{task['id']}", json={"title": "x"}, headers=test_user["headers"])
        assert response.json()["completed"] is True

    @pytest.mark.parametrize("body", [{"title": ""}, {"title": "   "}, {"title": None}, {"title": "x" * 201}])
    def test_update_invalid(self, client: TestClient, test_user: dict, body: dict):
        task = _create(client, test_user, "Buy milk")
        response = client.put(f"/api/tasks/{task['id']}", json=body, headers=test_user["headers"])
        assert response.status_code == 400
        unchanged = client.get(f"/api/tasks/{task['id']}", headers=test_user["headers"]).json()
        assert unchanged["title"] == "Buy milk"

    def test_update_missing(self, client: TestClient, test_user: dict):
        response = client.put("/api/tasks/9999", json={"title": "x"}, headers=test_user["headers"])
        assert response.status_code == 404
        assert response.json() == {"error": "not_found", "detail": "Task not found"}


class TestTaskToggle:
    """Tests for toggling completion."""

    def test_toggle_twice_restores(self, client: TestClient, test_user: dict):
        task = _create(client, test_user, "Buy milk")
        first = client.patch(f"/api/tasks/{task['id']}/complete", headers=test_user["headers"])
        assert first.status_code == 200
        assert first.json()["completed"] is True
        second = client.patch(f"/api/tasks/{task['id']}/complete", headers=test_user["headers"])
        assert second.json()["completed"] is False

        stamps = [datetime.fromisoformat(t["updated_at"]) for t in (task, first.json(), second.json())]
        assert stamps[0] < stamps[1] < stamps[2]

    def test_toggle_missing(self, client: TestClient, test_user: dict):
        response = client.patch("/api/tasks/9999/complete", headers=test_user["headers"])
        assert response.status_code == 404


class TestTaskDelete:
    """Tests for deleting tasks."""

    def test_delete(self, client: TestClient, test_user: dict):
        task = _create(client, test_user, "Buy milk")
        response = client.delete(f"/api/tasks/{task['id']}", headers=test_user["headers"])
        assert response.status_code == 204
        assert response.content == b""

        assert client.get(f"/api/tasks/{task['id']}", headers=test_user["headers"]).status_code == 404
        assert client.delete(f"/api/tasks/{task['id']}", headers=test_user["headers"]).status_code == 404

    def test_delete_missing(self, client: TestClient, test_user: dict):
        response = client.delete("/api/tasks/9999", headers=test_user["headers"])
        assert response.status_code == 404


class TestUserIsolation:
    """Another user's tasks behave exactly like tasks that do not exist."""

    def test_list_only_own_tasks(self, client: TestClient, test_user: dict, other_user: dict):
        _create(client, test_user, "alice's")
        _create(client, other_user, "bob's")
        for status in ("all", "pending", "completed"):
            for sort in ("created", "title", "updated"):
                tasks = client.get(f"/api/tasks?status={status}&sort={sort}", headers=other_user["headers"]).json()
                assert all(t["user_id"] == other_user["user_id"] for t in tasks)
                assert "alice's" not in [t["title"] for t in tasks]

    def test_cross_user_access_is_not_found(self, client: TestClient, test_user: dict, other_user: dict):
        task = _create(client, test_user, "private")
        url = f"/api/tasks/{task['id']}"
        headers = other_user["headers"]

        responses = [
            client.get(url, headers=headers),
            client.put(url, json={"title": "hijacked"}, headers=headers),
            client.patch(f"{url}/complete", headers=headers),
            client.delete(url, headers=headers),
        ]
        missing = client.get("/api/tasks/9999", headers=headers)
        for response in responses:
            assert response.status_code == 404
            assert response.json() == missing.json()

        untouched = client.get(url, headers=test_user["headers"]).json()
        assert untouched["title"] == "private"
        assert untouched["completed"] is False
        assert untouched["updated_at"] == task["updated_at"]


class TestErrors:
    """Tests for error envelopes."""

    def test_non_integer_id(self, client: TestClient, test_user: dict):
        response = client.get("/api/tasks/abc", headers=test_user["headers"])
        assert response.status_code == 400

    def test_unknown_route(self, client: TestClient):
        response = client.get("/api/nothing-here")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_internal_error_is_generic(self, test_user: dict, db_session, monkeypatch):
        """Unexpected failures return a generic 500 without internals."""
        from sqlalchemy.exc import OperationalError

        from app.database import get_db
        from app.services.task import TaskService
        from main import app

        def boom(*args, **kwargs):
            raise OperationalError("SELECT secret_internal_detail", {}, Exception("db down"))

        monkeypatch.setattr(TaskService, "list_tasks", boom)
        app.dependency_overrides[get_db] = lambda: db_session
        try:
            with TestClient(app, raise_server_exceptions=False) as c:
                response = c.get("/api/tasks", headers=test_user["headers"])
        finally:
            app.dependency_overrides.clear()
        assert response.status_code == 500
        assert response.headers["x-content-type-options"] == "nosniff"
        assert response.json() == {"error": "internal_error", "detail": "Internal server error"}
        assert "secret_internal_detail" not in response.text


class TestScenario:
    """End-to-end walk through sign-up, task lifecycle and isolation."""

    def test_full_flow(self, client: TestClient):
        alice = client.post(
            "/auth/signup",
            json={"email": "alice@example.com", "password": "StrongPass1", "name": "Alice"},
        )
        assert alice.status_code == 201
        alice_headers = {"Authorization": f"Bearer {alice.json()['access_token']}"}

        created = client.post("/api/tasks", json={"title": "Buy milk"}, headers=alice_headers)
        assert created.status_code == 201
        task_id = created.json()["id"]
        assert created.json()["completed"] is False

        toggled = client.patch(f"/api/tasks/{task_id}/complete", headers=alice_headers)
        assert toggled.status_code == 200
        assert toggled.json()["completed"] is True
        toggled = client.patch(f"/api/tasks/{task_id}/complete", headers=alice_headers)
        assert toggled.json()["completed"] is False

        bob = client.post(
            "/auth/signup",
            json={"email": "bob@example.com", "password": "StrongPass1", "name": "Bob"},
        )
        bob_headers = {"Authorization": f"Bearer {bob.json()['access_token']}"}
        assert client.get(f"/api/tasks/{task_id}", headers=bob_headers).status_code == 404

        assert client.put(f"/api/tasks/{task_id}", json={"title": ""}, headers=alice_headers).status_code == 400

        assert client.delete(f"/api/tasks/{task_id}", headers=alice_headers).status_code == 204
        assert client.get(f"/api/tasks/{task_id}", headers=alice_headers).status_code == 404


class TestTaskIdBounds:
    """Ids the database cannot hold are simply tasks that do not exist."""

    HUGE_ID = "99999999999999999999"

    def test_get_huge_id(self, client: TestClient, test_user: dict):
        response = client.get(f"/api/tasks/{self.HUGE_ID}", headers=test_user["headers"])
        assert response.status_code == 404
        assert response.json() == {"error": "not_found", "detail": "Task not found"}

    def test_delete_huge_id(self, client: TestClient, test_user: dict):
        response = client.delete(f"/api/tasks/{self.HUGE_ID}", headers=test_user["headers"])
        assert response.status_code == 404

    def test_update_and_toggle_huge_id(self, client: TestClient, test_user: dict):
        url = f"/api/tasks/{self.HUGE_ID}"
        assert client.put(url, json={"title": "x"}, headers=test_user["headers"]).status_code == 404
        assert client.patch(f"{url}/complete", headers=test_user["headers"]).status_code == 404

    @pytest.mark.parametrize("task_id", ["0", "-1", "2147483648"])
    def test_out_of_range_ids(self, client: TestClient, test_user: dict, task_id: str):
        response = client.get(f"/api/tasks/{task_id}", headers=test_user["headers"])
        assert response.status_code == 404
