"""Tests for guide registration, approval and the dual-channel profile update."""
import pytest

from tourmarket.models.guide import Guide
from tourmarket.models.user import User, Role
from tourmarket.services import guide_service
from tests.conftest import (
    create_test_user, create_admin, register_guide, approve_guide, create_approved_guide, create_program,
)


def _patch_profile(client, user, **fields):
    return client.patch("/api/guides/me", params={"actor_user_id": user["user_id"]}, json=fields)


def _decide(client, admin, request_id, approve, comment=None):
    return client.patch(
        f"/api/admin/change-requests/{request_id}",
        params={"actor_user_id": admin["user_id"]},
        json={"approve": approve, "admin_comment": comment},
    )


def _set_images(db, guide_id, images):
    db.query(Guide).filter(Guide.guide_id == guide_id).update({"images": images})
    db.commit()


class TestGuideRegistration:

    def test_register_pending_approval(self, client):
        user = create_test_user(client)
        guide = register_guide(client, user, bio="Mountain guide", phone_number="+995 555 000")
        assert guide["is_approved"] is False
        assert guide["bio"] == "Mountain guide"
        me = client.get("/api/users/me", params={"actor_user_id": user["user_id"]}).json()
        assert me["role"] == "TOURIST"

    def test_register_twice(self, client):
        user = create_test_user(client)
        register_guide(client, user)
        resp = client.post("/api/guides/register", params={"actor_user_id": user["user_id"]}, json={})
        assert resp.status_code == 400

    def test_unapproved_guide_cannot_create_program(self, client, db):
        user = create_test_user(client)
        register_guide(client, user)
        resp = client.post("/api/programs/", params={"actor_user_id": user["user_id"]}, json={"title": "x"})
        assert resp.status_code == 403


class TestGuideApproval:

    def test_approval_grants_guide_role(self, client, db, sent_messages):
        admin = create_admin(client, db)
        user = create_test_user(client)
        guide = register_guide(client, user)

        approved = approve_guide(client, admin, guide["guide_id"])
        assert approved["is_approved"] is True
        me = client.get("/api/users/me", params={"actor_user_id": user["user_id"]}).json()
        assert me["role"] == "GUIDE"
        assert me["is_guide"] is True
        assert sent_messages[-1][0] == user["telegram_id"]
        assert "approved" in sent_messages[-1][1]

    def test_revoking_approval_demotes(self, client, db):
        admin = create_admin(client, db)
        user, guide = create_approved_guide(client, admin)
        approve_guide(client, admin, guide["guide_id"], approved=False)
        me = client.get("/api/users/me", params={"actor_user_id": user["user_id"]}).json()
        assert me["role"] == "TOURIST"

    def test_admin_keeps_role_when_approved_as_guide(self, client, db):
        admin = create_admin(client, db)
        guide = register_guide(client, admin)
        approve_guide(client, admin, guide["guide_id"])
        me = client.get("/api/users/me", params={"actor_user_id": admin["user_id"]}).json()
        assert me["role"] == "ADMIN"

    def test_approval_and_role_change_are_atomic(self, client, db, monkeypatch):
        user = create_test_user(client)
        guide = register_guide(client, user)

        def _boom(*args, **kwargs):
            raise RuntimeError("role store unavailable")

        monkeypatch.setattr(guide_service, "_sync_user_role", _boom)
        with pytest.raises(RuntimeError):
            guide_service.update_guide_approval_status(db, guide["guide_id"], True)

        db.expire_all()
        assert db.query(Guide).filter(Guide.guide_id == guide["guide_id"]).one().is_approved is False
        assert db.query(User).filter(User.user_id == user["user_id"]).one().role == Role.TOURIST

    def test_pending_list_and_admin_only(self, client, db):
        admin = create_admin(client, db)
        user = create_test_user(client)
        guide = register_guide(client, user)

        pending = client.get("/api/admin/guides/pending", params={"actor_user_id": admin["user_id"]}).json()
        assert [g["guide_id"] for g in pending] == [guide["guide_id"]]
        resp = client.get("/api/admin/guides/pending", params={"actor_user_id": user["user_id"]})
        assert resp.status_code == 403


class TestProfileUpdate:

    def test_gated_fields_never_written_directly(self, client, db):
        admin = create_admin(client, db)
        user, guide = create_approved_guide(client, admin, bio="Old bio")

        resp = _patch_profile(client, user, bio="New bio", new_images=["a.jpg"], phone_number="+1 555")
        assert resp.status_code == 200
        data = resp.json()
        assert data["pending_changes"] is True
        assert data["change_request_id"]
        assert data["guide"]["bio"] == "Old bio"
        assert data["guide"]["images"] == []
        assert data["guide"]["phone_number"] == "+1 555"

        requests = client.get("/api/admin/change-requests", params={"actor_user_id": admin["user_id"]}).json()
        assert len(requests) == 1
        assert requests[0]["change_type"] == "BIO_AND_IMAGES_UPDATE"
        assert requests[0]["proposed_bio"] == "New bio"
        assert requests[0]["proposed_images"] == ["a.jpg"]
        assert requests[0]["status"] == "PENDING"

    def test_direct_only_patch_files_no_request(self, client, db):
        admin = create_admin(client, db)
        user, _ = create_approved_guide(client, admin)

        resp = _patch_profile(client, user, email="guide@example.com", first_name="Nino")
        assert resp.status_code == 200
        assert resp.json()["pending_changes"] is False
        assert resp.json()["change_request_id"] is None
        assert resp.json()["guide"]["email"] == "guide@example.com"
        assert resp.json()["guide"]["user"]["first_name"] == "Nino"
        assert client.get("/api/admin/change-requests", params={"actor_user_id": admin["user_id"]}).json() == []

    def test_approve_replaces_bio_and_appends_images(self, client, db, sent_messages):
        admin = create_admin(client, db)
        user, guide = create_approved_guide(client, admin, bio="Old bio")
        _set_images(db, guide["guide_id"], ["c.jpg"])

        request_id = _patch_profile(client, user, bio="New bio", new_images=["a.jpg", "b.jpg"]).json()["change_request_id"]
        resp = _decide(client, admin, request_id, approve=True, comment="Looks good")
        assert resp.status_code == 200
        assert resp.json()["status"] == "APPROVED"
        assert resp.json()["admin_comment"] == "Looks good"
        assert resp.json()["resolved_at"] is not None

        profile = client.get(f"/api/guides/{guide['guide_id']}").json()
        assert profile["bio"] == "New bio"
        assert profile["images"] == ["c.jpg", "a.jpg", "b.jpg"]
        assert sent_messages[-1][0] == user["telegram_id"]
        assert "Looks good" in sent_messages[-1][1]

    def test_images_only_request_keeps_bio(self, client, db):
        admin = create_admin(client, db)
        user, guide = create_approved_guide(client, admin, bio="Keep me")
        request_id = _patch_profile(client, user, new_images=["x.jpg"]).json()["change_request_id"]
        _decide(client, admin, request_id, approve=True)

        profile = client.get(f"/api/guides/{guide['guide_id']}").json()
        assert profile["bio"] == "Keep me"
        assert profile["images"] == ["x.jpg"]

    def test_reject_leaves_profile_untouched(self, client, db):
        admin = create_admin(client, db)
        user, guide = create_approved_guide(client, admin, bio="Old bio")
        request_id = _patch_profile(client, user, bio="Spam").json()["change_request_id"]

        resp = _decide(client, admin, request_id, approve=False, comment="No links please")
        assert resp.status_code == 200
        assert resp.json()["status"] == "REJECTED"
        assert resp.json()["change_type"] == "BIO_UPDATE"
        assert client.get(f"/api/guides/{guide['guide_id']}").json()["bio"] == "Old bio"

    def test_request_resolves_once(self, client, db):
        admin = create_admin(client, db)
        user, guide = create_approved_guide(client, admin, bio="Old bio")
        request_id = _patch_profile(client, user, bio="First").json()["change_request_id"]
        _decide(client, admin, request_id, approve=False)

        assert _decide(client, admin, request_id, approve=True).status_code == 400
        assert client.get(f"/api/guides/{guide['guide_id']}").json()["bio"] == "Old bio"

    def test_unknown_request(self, client, db):
        admin = create_admin(client, db)
        assert _decide(client, admin, "missing", approve=True).status_code == 404

    def test_existing_images_reorder_and_remove(self, client, db):
        admin = create_admin(client, db)
        user, guide = create_approved_guide(client, admin)
        _set_images(db, guide["guide_id"], ["a.jpg", "b.jpg", "c.jpg"])

        resp = _patch_profile(client, user, existing_images=["c.jpg", "a.jpg"])
        assert resp.status_code == 200
        assert resp.json()["guide"]["images"] == ["c.jpg", "a.jpg"]
        assert resp.json()["pending_changes"] is False

    def test_existing_images_cannot_smuggle_new_ones(self, client, db):
        admin = create_admin(client, db)
        user, guide = create_approved_guide(client, admin)
        _set_images(db, guide["guide_id"], ["a.jpg"])

        resp = _patch_profile(client, user, existing_images=["a.jpg", "evil.jpg"], phone_number="+7")
        assert resp.status_code == 400
        profile = client.get(f"/api/guides/{guide['guide_id']}").json()
        assert profile["images"] == ["a.jpg"]
        assert profile["phone_number"] is None

    def test_program_selection(self, client, db):
        admin = create_admin(client, db)
        author, _ = create_approved_guide(client, admin, first_name="Author")
        user, guide = create_approved_guide(client, admin)
        program = create_program(client, author, admin)

        resp = _patch_profile(client, user, program_ids=[program["program_id"]])
        assert resp.status_code == 200
        assert [p["program_id"] for p in resp.json()["guide"]["selected_programs"]] == [program["program_id"]]
        listed = client.get(f"/api/guides/{guide['guide_id']}/programs").json()
        assert [p["program_id"] for p in listed] == [program["program_id"]]

        assert _patch_profile(client, user, program_ids=["does-not-exist"]).status_code == 400

    def test_activity_toggle_notifies(self, client, db, sent_messages):
        admin = create_admin(client, db)
        user, _ = create_approved_guide(client, admin)
        sent_messages.clear()

        resp = _patch_profile(client, user, is_active=False)
        assert resp.json()["guide"]["is_active"] is False
        assert len(sent_messages) == 1
        assert "inactive" in sent_messages[0][1]

    def test_non_guide_has_no_profile(self, client):
        user = create_test_user(client)
        assert client.get("/api/guides/me", params={"actor_user_id": user["user_id"]}).status_code == 403
