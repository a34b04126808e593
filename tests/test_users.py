"""Tests for user registration, profile and role management."""
from datetime import datetime, timedelta

from tourmarket.models.user import Role
from tests.conftest import create_test_user, create_admin, create_approved_guide, set_role


class TestUserCRUD:
    """User register / get / update."""

    def test_register_user(self, client):
        data = create_test_user(client, first_name="Alice", telegram_id="4242")
        assert data["first_name"] == "Alice"
        assert data["telegram_id"] == "4242"
        assert data["role"] == "TOURIST"
        assert data["is_guide"] is False
        assert "user_id" in data

    def test_duplicate_telegram_id(self, client):
        create_test_user(client, telegram_id="777")
        resp = client.post("/api/users/", json={"telegram_id": "777", "first_name": "Again"})
        assert resp.status_code == 400

    def test_get_user(self, client):
        user = create_test_user(client)
        resp = client.get(f"/api/users/{user['user_id']}")
        assert resp.status_code == 200
        assert resp.json()["first_name"] == "Test"

    def test_get_user_not_found(self, client):
        resp = client.get("/api/users/00000000-0000-0000-0000-000000000000")
        assert resp.status_code == 404

    def test_update_me(self, client):
        user = create_test_user(client)
        resp = client.patch("/api/users/me", params={"actor_user_id": user["user_id"]}, json={
            "first_name": "Updated",
            "language_code": "ka",
        })
        assert resp.status_code == 200
        assert resp.json()["first_name"] == "Updated"
        assert resp.json()["language_code"] == "ka"

    def test_first_name_cannot_be_blank(self, client):
        user = create_test_user(client)
        resp = client.patch("/api/users/me", params={"actor_user_id": user["user_id"]}, json={"first_name": ""})
        assert resp.status_code == 400

    def test_created_at_is_utc(self, client):
        user = create_test_user(client)
        created_at = datetime.fromisoformat(user["created_at"].replace("Z", "+00:00"))
        assert created_at.utcoffset() == timedelta(0)

    def test_caller_identity_required(self, client):
        assert client.get("/api/users/me").status_code == 422
        assert client.get("/api/users/me", params={"actor_user_id": "ghost"}).status_code == 404


class TestRoles:

    def test_super_admin_grants_admin(self, client, db):
        boss = create_test_user(client, first_name="Boss")
        set_role(db, boss["user_id"], Role.SUPER_ADMIN)
        user = create_test_user(client)

        resp = client.patch(
            f"/api/admin/users/{user['user_id']}/role",
            params={"actor_user_id": boss["user_id"]},
            json={"role": "ADMIN"},
        )
        assert resp.status_code == 200
        assert resp.json()["role"] == "ADMIN"
        assert resp.json()["is_admin"] is True

    def test_plain_admin_cannot_grant(self, client, db):
        admin = create_admin(client, db)
        user = create_test_user(client)
        resp = client.patch(
            f"/api/admin/users/{user['user_id']}/role",
            params={"actor_user_id": admin["user_id"]},
            json={"role": "ADMIN"},
        )
        assert resp.status_code == 403

    def test_guide_role_not_grantable(self, client, db):
        boss = create_test_user(client, first_name="Boss")
        set_role(db, boss["user_id"], Role.SUPER_ADMIN)
        user = create_test_user(client)
        resp = client.patch(
            f"/api/admin/users/{user['user_id']}/role",
            params={"actor_user_id": boss["user_id"]},
            json={"role": "GUIDE"},
        )
        assert resp.status_code == 400

    def test_demoted_admin_with_approved_guide_becomes_guide(self, client, db):
        boss = create_test_user(client, first_name="Boss")
        set_role(db, boss["user_id"], Role.SUPER_ADMIN)
        admin = create_admin(client, db)
        guide_user, _ = create_approved_guide(client, admin)
        set_role(db, guide_user["user_id"], Role.ADMIN)

        resp = client.patch(
            f"/api/admin/users/{guide_user['user_id']}/role",
            params={"actor_user_id": boss["user_id"]},
            json={"role": "TOURIST"},
        )
        assert resp.json()["role"] == "GUIDE"


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}
