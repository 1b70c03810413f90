"""Tests for the user directory endpoints."""
from tests.conftest import create_test_user


class TestUserCRUD:
    """User create / get / update / list."""

    def test_create_user(self, client):
        data = create_test_user(client, name="Alice", email="alice@example.com")
        assert data["display_name"] == "Alice"
        assert data["email"] == "alice@example.com"
        assert "user_id" in data

    def test_get_user(self, client):
        user = create_test_user(client)
        resp = client.get(f"/api/users/{user['user_id']}")
        assert resp.status_code == 200
        assert resp.json()["display_name"] == "Test User"

    def test_get_user_not_found(self, client):
        resp = client.get("/api/users/00000000-0000-0000-0000-000000000000")
        assert resp.status_code == 404

    def test_update_user(self, client):
        user = create_test_user(client)
        resp = client.patch(f"/api/users/{user['user_id']}", json={
            "display_name": "Updated Name",
            "avatar_url": "https://example.com/me.png",
        })
        assert resp.status_code == 200
        assert resp.json()["display_name"] == "Updated Name"
        assert resp.json()["avatar_url"] == "https://example.com/me.png"

    def test_duplicate_email_conflicts(self, client):
        create_test_user(client, name="Alice", email="same@example.com")
        resp = client.post("/api/users/", json={"display_name": "Bob", "email": "same@example.com"})
        assert resp.status_code == 409

    def test_blank_display_name_rejected(self, client):
        resp = client.post("/api/users/", json={"display_name": ""})
        assert resp.status_code == 422

    def test_list_users(self, client):
        create_test_user(client, name="Bob")
        create_test_user(client, name="Alice")
        resp = client.get("/api/users/")
        assert resp.status_code == 200
        assert [u["display_name"] for u in resp.json()] == ["Alice", "Bob"]
