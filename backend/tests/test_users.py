"""Tests for public profiles, profile edits and admin user management."""

from fastapi.testclient import TestClient

from helpers import create_skill, request_exchange


class TestProfiles:
    def test_public_profile_hides_password(self, client, login_as):
        alice = login_as("alice", bio="Guitarist")
        response = client.get(f"/api/user/{alice.user['id']}")
        assert response.status_code == 200
        assert response.json()["bio"] == "Guitarist"
        assert "password" not in response.json()
        assert client.get("/api/user/999").status_code == 404

    def test_update_own_profile(self, login_as):
        alice = login_as("alice")
        response = alice.put(f"/api/user/{alice.user['id']}", json={
            "name": "Alice Liddell",
            "profileImage": "https://cdn.example.com/alice.png",
        })
        assert response.status_code == 200
        assert response.json()["name"] == "Alice Liddell"
        assert response.json()["profileImage"] == "https://cdn.example.com/alice.png"
        assert response.json()["username"] == "alice"

    def test_cannot_edit_someone_else(self, login_as):
        alice = login_as("alice")
        bob = login_as("bob")
        assert bob.put(f"/api/user/{alice.user['id']}", json={"name": "Hacked"}).status_code == 403

    def test_admin_can_edit_anyone(self, login_as, login_admin):
        alice = login_as("alice")
        admin = login_admin()
        response = admin.put(f"/api/user/{alice.user['id']}", json={"bio": "Moderated"})
        assert response.status_code == 200
        assert response.json()["bio"] == "Moderated"

    def test_username_and_email_stay_unique(self, login_as):
        alice = login_as("alice")
        login_as("bob")
        assert alice.put(f"/api/user/{alice.user['id']}", json={"username": "BOB"}).status_code == 400
        assert alice.put(f"/api/user/{alice.user['id']}", json={"email": "bob@example.com"}).status_code == 400
        # Changing only the case of your own username is fine
        assert alice.put(f"/api/user/{alice.user['id']}", json={"username": "Alice"}).status_code == 200

    def test_password_change_is_rehashed(self, app, login_as, repository):
        alice = login_as("alice")
        alice.put(f"/api/user/{alice.user['id']}", json={"password": "new-pass"})

        assert repository.get_user(alice.user["id"]).password != "new-pass"
        fresh = TestClient(app)
        assert fresh.post("/api/login", json={"username": "alice", "password": "new-pass"}).status_code == 200
        assert fresh.post("/api/login", json={"username": "alice", "password": "s3cret-pass"}).status_code == 401

    def test_required_fields_cannot_be_cleared(self, login_as):
        alice = login_as("alice")
        assert alice.put(f"/api/user/{alice.user['id']}", json={"name": None}).status_code == 400


class TestAdmin:
    def test_admin_routes_require_admin(self, client, login_as):
        alice = login_as("alice")
        for path in ("/api/admin/users", "/api/admin/skills"):
            assert client.get(path).status_code == 401
            assert alice.get(path).status_code == 403
        assert alice.delete("/api/admin/users/1").status_code == 403

    def test_list_users_and_skills(self, login_as, login_admin):
        alice = login_as("alice")
        admin = login_admin()
        create_skill(alice)

        users = admin.get("/api/admin/users").json()
        assert [u["username"] for u in users] == ["alice", "admin"]
        assert all("password" not in u for u in users)

        skills = admin.get("/api/admin/skills").json()
        assert skills[0]["user"]["username"] == "alice"

    def test_delete_user_cascades(self, client, login_as, login_admin):
        alice = login_as("alice")
        bob = login_as("bob")
        admin = login_admin()
        skill = create_skill(alice)
        request_exchange(bob, alice, provider_skill_id=skill["id"])

        assert admin.delete(f"/api/admin/users/{alice.user['id']}").status_code == 204

        assert client.get(f"/api/user/{alice.user['id']}").status_code == 404
        assert client.get(f"/api/skills/{skill['id']}").status_code == 404
        assert bob.get("/api/exchanges").json() == []
        assert alice.get("/api/user").status_code == 401
        assert admin.delete(f"/api/admin/users/{alice.user['id']}").status_code == 404

    def test_admin_cannot_delete_themselves(self, login_admin):
        admin = login_admin()
        response = admin.delete(f"/api/admin/users/{admin.user['id']}")
        assert response.status_code == 400
        assert admin.get("/api/user").status_code == 200
