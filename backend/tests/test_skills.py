"""Tests for skill listings: discovery filters and owner-gated edits."""

from helpers import create_skill, skill_payload


class TestCreateSkill:
    def test_requires_authentication(self, client):
        response = client.post("/api/skills", json=skill_payload())
        assert response.status_code == 401

    def test_owner_is_the_caller(self, login_as):
        alice = login_as("alice")
        skill = create_skill(alice, tags=[" guitar ", "guitar", "", "music"])
        assert skill["userId"] == alice.user["id"]
        assert skill["isOffering"] is True
        assert skill["tags"] == ["guitar", "music"]

    def test_missing_fields_are_rejected(self, login_as):
        alice = login_as("alice")
        response = alice.post("/api/skills", json={"title": "Only a title"})
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid request data"


class TestDiscover:
    def _seed(self, login_as):
        alice = login_as("alice")
        bob = login_as("bob")
        skills = {
            "python": create_skill(alice, title="Python tutoring", category="Programming", tags=["python", "data"]),
            "go": create_skill(bob, title="Go pairing", category="Programming", tags=["go", "python"]),
            "guitar": create_skill(alice, title="Guitar", category="Music", tags=["guitar"]),
            "wanted": create_skill(bob, title="Need piano", category="Music", tags=["piano"], isOffering=False),
        }
        return alice, bob, skills

    def test_tags_filter_returns_every_match_and_nothing_else(self, client, login_as):
        _, _, skills = self._seed(login_as)
        response = client.get("/api/skills", params={"tags": "python"})
        assert response.status_code == 200
        assert {s["id"] for s in response.json()} == {skills["python"]["id"], skills["go"]["id"]}

    def test_multiple_tags_match_any(self, client, login_as):
        _, _, skills = self._seed(login_as)
        response = client.get("/api/skills", params={"tags": "guitar,piano"})
        assert {s["id"] for s in response.json()} == {skills["guitar"]["id"], skills["wanted"]["id"]}

    def test_category_is_case_insensitive(self, client, login_as):
        _, _, skills = self._seed(login_as)
        response = client.get("/api/skills", params={"category": "music"})
        assert {s["id"] for s in response.json()} == {skills["guitar"]["id"], skills["wanted"]["id"]}

    def test_type_filter(self, client, login_as):
        _, _, skills = self._seed(login_as)
        requesting = client.get("/api/skills", params={"type": "requesting"}).json()
        assert [s["id"] for s in requesting] == [skills["wanted"]["id"]]
        offering = client.get("/api/skills", params={"type": "offering"}).json()
        assert len(offering) == 3

    def test_filters_combine(self, client, login_as):
        _, _, skills = self._seed(login_as)
        response = client.get("/api/skills", params={"category": "Music", "type": "offering"})
        assert [s["id"] for s in response.json()] == [skills["guitar"]["id"]]

    def test_unknown_type_is_rejected(self, client):
        assert client.get("/api/skills", params={"type": "bartering"}).status_code == 400

    def test_no_filters_returns_recent_with_owner(self, client, login_as):
        alice, _, skills = self._seed(login_as)
        listed = client.get("/api/skills").json()
        assert listed[0]["id"] == skills["wanted"]["id"]
        assert len(listed) == 4
        guitar = next(s for s in listed if s["id"] == skills["guitar"]["id"])
        assert guitar["user"]["username"] == "alice"
        assert "password" not in guitar["user"]
        assert "email" not in guitar["user"]

    def test_recent_limit(self, client, login_as):
        self._seed(login_as)
        assert len(client.get("/api/skills/recent", params={"limit": 2}).json()) == 2

    def test_by_user_and_single(self, client, login_as):
        alice, _, skills = self._seed(login_as)
        mine = client.get(f"/api/skills/user/{alice.user['id']}").json()
        assert {s["id"] for s in mine} == {skills["python"]["id"], skills["guitar"]["id"]}

        single = client.get(f"/api/skills/{skills['go']['id']}")
        assert single.status_code == 200
        assert single.json()["user"]["username"] == "bob"
        assert client.get("/api/skills/999").status_code == 404


class TestEditSkill:
    def test_owner_can_update(self, login_as):
        alice = login_as("alice")
        skill = create_skill(alice)
        response = alice.put(f"/api/skills/{skill['id']}", json={"title": "Advanced guitar", "tags": ["jazz"]})
        assert response.status_code == 200
        assert response.json()["title"] == "Advanced guitar"
        assert response.json()["tags"] == ["jazz"]
        assert response.json()["category"] == "Music"

    def test_required_field_cannot_be_cleared(self, login_as):
        alice = login_as("alice")
        skill = create_skill(alice)
        response = alice.put(f"/api/skills/{skill['id']}", json={"title": None})
        assert response.status_code == 400

    def test_other_user_cannot_update_or_delete(self, login_as):
        alice = login_as("alice")
        bob = login_as("bob")
        skill = create_skill(alice)
        assert bob.put(f"/api/skills/{skill['id']}", json={"title": "Mine now"}).status_code == 403
        assert bob.delete(f"/api/skills/{skill['id']}").status_code == 403

    def test_admin_can_update_and_delete(self, login_as, login_admin):
        alice = login_as("alice")
        admin = login_admin()
        skill = create_skill(alice)
        assert admin.put(f"/api/skills/{skill['id']}", json={"title": "Moderated"}).status_code == 200
        assert admin.delete(f"/api/skills/{skill['id']}").status_code == 204

    def test_delete_then_missing(self, client, login_as):
        alice = login_as("alice")
        skill = create_skill(alice)
        assert alice.delete(f"/api/skills/{skill['id']}").status_code == 204
        assert alice.delete(f"/api/skills/{skill['id']}").status_code == 404
        assert client.get(f"/api/skills/{skill['id']}").status_code == 404
        assert alice.put("/api/skills/999", json={"title": "x"}).status_code == 404
