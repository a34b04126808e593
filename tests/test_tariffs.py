"""Tests for pricing tiers: bounds, overlap and ownership."""
from tests.conftest import create_test_user, create_admin, create_approved_guide, create_program, future


def _tier(client, guide_user, program_id, min_people, max_people, price=50, title="Tier"):
    return client.post(
        f"/api/tariffs/program/{program_id}",
        params={"actor_user_id": guide_user["user_id"]},
        json={"title": title, "min_people": min_people, "max_people": max_people, "price_per_person": price},
    )


class TestTierCreate:

    def test_create_and_list(self, client, db):
        admin = create_admin(client, db)
        guide_user, _ = create_approved_guide(client, admin)
        program = create_program(client, guide_user, admin)

        assert _tier(client, guide_user, program["program_id"], 5, 8, title="Big").status_code == 201
        assert _tier(client, guide_user, program["program_id"], 1, 4, title="Small").status_code == 201

        tiers = client.get(f"/api/tariffs/program/{program['program_id']}").json()
        assert [t["title"] for t in tiers] == ["Small", "Big"]

    def test_overlap_rejected(self, client, db):
        admin = create_admin(client, db)
        guide_user, _ = create_approved_guide(client, admin)
        program = create_program(client, guide_user, admin)
        _tier(client, guide_user, program["program_id"], 1, 4)

        resp = _tier(client, guide_user, program["program_id"], 4, 6)
        assert resp.status_code == 400
        assert "overlaps" in resp.json()["detail"]

    def test_bounds(self, client, db):
        admin = create_admin(client, db)
        guide_user, _ = create_approved_guide(client, admin)
        program = create_program(client, guide_user, admin)

        assert _tier(client, guide_user, program["program_id"], 0, 4).status_code == 400
        assert _tier(client, guide_user, program["program_id"], 5, 4).status_code == 400
        assert _tier(client, guide_user, program["program_id"], 1, 4, price=0).status_code == 400

    def test_other_guide_cannot_add(self, client, db):
        admin = create_admin(client, db)
        owner, _ = create_approved_guide(client, admin, first_name="Owner")
        other, _ = create_approved_guide(client, admin, first_name="Other")
        program = create_program(client, owner, admin)
        assert _tier(client, other, program["program_id"], 1, 4).status_code == 404

    def test_overlapping_tiers_in_new_program(self, client, db):
        admin = create_admin(client, db)
        guide_user, _ = create_approved_guide(client, admin)
        resp = client.post(
            "/api/programs/",
            params={"actor_user_id": guide_user["user_id"]},
            json={
                "title": "Overlap", "description": "d", "base_price": 10, "duration_days": 1,
                "max_group_size": 5, "start_location": "x", "regions": ["r"],
                "days": [{"title": "Day"}],
                "pricing_tiers": [
                    {"min_people": 1, "max_people": 3, "price_per_person": 10},
                    {"min_people": 3, "max_people": 5, "price_per_person": 9},
                ],
            },
        )
        assert resp.status_code == 400


class TestTierUpdate:

    def test_update_checks_overlap_excluding_itself(self, client, db):
        admin = create_admin(client, db)
        guide_user, _ = create_approved_guide(client, admin)
        program = create_program(client, guide_user, admin)
        small = _tier(client, guide_user, program["program_id"], 1, 4).json()
        _tier(client, guide_user, program["program_id"], 5, 8)

        resp = client.patch(
            f"/api/tariffs/{small['tier_id']}",
            params={"actor_user_id": guide_user["user_id"]},
            json={"max_people": 3, "price_per_person": 60},
        )
        assert resp.status_code == 200
        assert resp.json()["max_people"] == 3
        assert resp.json()["price_per_person"] == 60

        resp = client.patch(
            f"/api/tariffs/{small['tier_id']}",
            params={"actor_user_id": guide_user["user_id"]},
            json={"max_people": 6},
        )
        assert resp.status_code == 400

    def test_other_guide_forbidden(self, client, db):
        admin = create_admin(client, db)
        owner, _ = create_approved_guide(client, admin, first_name="Owner")
        other, _ = create_approved_guide(client, admin, first_name="Other")
        program = create_program(client, owner, admin)
        tier = _tier(client, owner, program["program_id"], 1, 4).json()

        resp = client.patch(f"/api/tariffs/{tier['tier_id']}", params={"actor_user_id": other["user_id"]}, json={"title": "x"})
        assert resp.status_code == 403
        resp = client.post(f"/api/tariffs/{tier['tier_id']}/toggle", params={"actor_user_id": other["user_id"]})
        assert resp.status_code == 403


class TestTierDelete:

    def test_delete_unused_tier(self, client, db):
        admin = create_admin(client, db)
        guide_user, _ = create_approved_guide(client, admin)
        program = create_program(client, guide_user, admin)
        tier = _tier(client, guide_user, program["program_id"], 1, 4).json()

        resp = client.delete(f"/api/tariffs/{tier['tier_id']}", params={"actor_user_id": guide_user["user_id"]})
        assert resp.status_code == 204
        assert client.get(f"/api/tariffs/program/{program['program_id']}").json() == []

    def test_tier_with_bookings_kept(self, client, db):
        admin = create_admin(client, db)
        guide_user, _ = create_approved_guide(client, admin)
        program = create_program(client, guide_user, admin)
        tier = _tier(client, guide_user, program["program_id"], 1, 4).json()
        tourist = create_test_user(client)
        client.post(
            "/api/bookings/",
            params={"actor_user_id": tourist["user_id"]},
            json={"program_id": program["program_id"], "start_date": future(240), "number_of_people": 2},
        )

        resp = client.delete(f"/api/tariffs/{tier['tier_id']}", params={"actor_user_id": guide_user["user_id"]})
        assert resp.status_code == 400
