"""Integration tests for the storage HTTP API."""

from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from kidstreak.core.config import settings
from kidstreak.interface.auth import make_token
from kidstreak.main import app


@pytest.fixture
def client(db_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[TestClient]:
    """Client for an app started on a fresh, seeded database with open access."""
    monkeypatch.setattr(settings, "app_password", None)
    monkeypatch.setattr(settings, "seed_demo_data", True)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def locked_client(db_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[TestClient]:
    """Client for an app protected by the password 'hunter2'."""
    monkeypatch.setattr(settings, "app_password", "hunter2")
    with TestClient(app) as test_client:
        yield test_client


def _command(client: TestClient, action: str, payload: dict | None = None, **kwargs):
    body = {"action": action} if payload is None else {"action": action, "payload": payload}
    return client.post("/api/storage", json=body, **kwargs)


@pytest.mark.integration
class TestStorageRead:
    """Tests for GET /api/storage."""

    def test_health(self, client: TestClient) -> None:
        """Test the health endpoint."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_first_start_seeds_demo_data(self, client: TestClient) -> None:
        """Test a fresh database is seeded and stamped as reset today."""
        response = client.get("/api/storage")

        assert response.status_code == 200
        data = response.json()
        assert [kid["name"] for kid in data["kids"]] == ["Alice", "Bob"]
        assert len(data["tasks"]) == 12
        assert data["lastResetDate"] is not None
        assert data["streaks"] == []
        assert {"id", "kidId", "title", "iconType", "iconValue", "order", "isDone", "isActive"} <= set(data["tasks"][0])


@pytest.mark.integration
class TestStorageCommands:
    """Tests for POST /api/storage."""

    def test_add_kid(self, client: TestClient) -> None:
        """Test adding a kid returns the created kid in camelCase."""
        response = _command(client, "addKid", {"name": "Cara", "color": "#ABCDEF", "photoDataUrl": ""})

        assert response.status_code == 200
        assert response.json()["name"] == "Cara"
        assert "photoDataUrl" in response.json()

    def test_complete_all_tasks_starts_streak(self, client: TestClient) -> None:
        """Test finishing every active task of a kid records a streak."""
        tasks = [task for task in client.get("/api/storage").json()["tasks"] if task["kidId"] == "kid1"]

        for task in tasks:
            response = _command(client, "updateTask", {"id": task["id"], "updates": {"isDone": True}})
            assert response.status_code == 200
            assert response.json()["isDone"] is True

        streaks = client.get("/api/storage").json()["streaks"]
        assert len(streaks) == 1
        assert streaks[0]["kidId"] == "kid1"
        assert streaks[0]["streakCount"] == 1
        assert streaks[0]["longestStreak"] == 1

    def test_reset_same_day_is_noop(self, client: TestClient) -> None:
        """Test the reset command does nothing on the seeding day."""
        response = _command(client, "resetTasksIfNeeded")

        assert response.status_code == 200
        assert response.json()["resetPerformed"] is False

    def test_reorder_and_delete(self, client: TestClient) -> None:
        """Test commands without a model result report success."""
        response = _command(client, "reorderTasks", {"kidId": "kid1", "taskIds": ["task6", "task1"]})
        assert response.json() == {"success": True}

        response = _command(client, "deleteTask", {"id": "task6"})
        assert response.json() == {"success": True}

        tasks = client.get("/api/storage").json()["tasks"]
        assert "task6" not in [task["id"] for task in tasks]

    def test_unknown_action_is_rejected(self, client: TestClient) -> None:
        """Test an action outside the closed set gets 422."""
        response = _command(client, "dropDatabase", {})

        assert response.status_code == 422

    def test_invalid_payload_is_rejected(self, client: TestClient) -> None:
        """Test a malformed payload gets 422 and changes nothing."""
        response = _command(client, "addKid", {"name": "Cara", "color": "blue"})

        assert response.status_code == 422
        assert len(client.get("/api/storage").json()["kids"]) == 2

    def test_unknown_task_returns_404(self, client: TestClient) -> None:
        """Test engine NotFoundError maps to a structured 404."""
        response = _command(client, "updateTask", {"id": "task404", "updates": {"isDone": True}})

        assert response.status_code == 404
        assert response.json()["code"] == "ERR_NOT_FOUND"

    def test_delete_unknown_kid_returns_404(self, client: TestClient) -> None:
        """Test deleting a missing kid maps to 404."""
        response = _command(client, "deleteKid", {"id": "ghost"})

        assert response.status_code == 404


@pytest.mark.integration
class TestAuth:
    """Tests for the shared-password login."""

    def test_login_open_access(self, client: TestClient) -> None:
        """Test login succeeds without a password when none is configured."""
        response = client.post("/api/auth", json={})

        assert response.status_code == 200
        assert response.json() == {"success": True, "token": make_token(None)}

    def test_wrong_password_is_rejected(self, locked_client: TestClient) -> None:
        """Test a wrong password gets 401."""
        response = locked_client.post("/api/auth", json={"password": "guess"})

        assert response.status_code == 401

    def test_storage_requires_token(self, locked_client: TestClient) -> None:
        """Test storage calls need the bearer token from login."""
        assert locked_client.get("/api/storage").status_code == 401
        assert _command(locked_client, "resetTasksIfNeeded").status_code == 401

        token = locked_client.post("/api/auth", json={"password": "hunter2"}).json()["token"]
        headers = {"Authorization": f"Bearer {token}"}

        assert locked_client.get("/api/storage", headers=headers).status_code == 200
        assert _command(locked_client, "resetTasksIfNeeded", headers=headers).status_code == 200
