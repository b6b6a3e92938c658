"""Tests for the exchange lifecycle state machine and its routes."""

import pytest

from skillswap.auth.dependencies import Principal
from skillswap.core.exceptions import AuthorizationError, InvalidTransitionError
from skillswap.enums.exchange import ExchangeStatus
from skillswap.repository import InMemoryRepository
from skillswap.services import exchanges as exchange_service

from helpers import completed_exchange, create_skill, request_exchange, set_status


# ============ State machine ============

@pytest.fixture
def repo():
    return InMemoryRepository()


@pytest.fixture
def people(repo):
    def user(name, is_admin=False):
        record = repo.create_user({
            "username": name,
            "email": f"{name}@example.com",
            "name": name,
            "password": "x",
            "is_admin": is_admin,
        })
        return Principal.from_user(record)

    return {
        "requester": user("requester"),
        "provider": user("provider"),
        "outsider": user("outsider"),
        "admin": user("admin", is_admin=True),
    }


def exchange_in(repo, people, status):
    exchange = repo.create_exchange({
        "requester_id": people["requester"].user_id,
        "provider_id": people["provider"].user_id,
    })
    return repo.update_exchange_status(exchange.id, status)


class TestTransitionTable:
    @pytest.mark.parametrize("current, target", [
        (ExchangeStatus.PENDING, ExchangeStatus.ACCEPTED),
        (ExchangeStatus.PENDING, ExchangeStatus.REJECTED),
        (ExchangeStatus.ACCEPTED, ExchangeStatus.IN_PROGRESS),
        (ExchangeStatus.IN_PROGRESS, ExchangeStatus.COMPLETED),
    ])
    def test_allowed(self, current, target):
        assert exchange_service.can_transition(current, target)

    @pytest.mark.parametrize("terminal", [ExchangeStatus.COMPLETED, ExchangeStatus.REJECTED])
    def test_terminal_states_have_no_exits(self, terminal):
        assert all(not exchange_service.can_transition(terminal, target) for target in ExchangeStatus)

    def test_no_skipping_ahead(self):
        assert not exchange_service.can_transition(ExchangeStatus.PENDING, ExchangeStatus.COMPLETED)
        assert not exchange_service.can_transition(ExchangeStatus.ACCEPTED, ExchangeStatus.COMPLETED)
        assert not exchange_service.can_transition(ExchangeStatus.IN_PROGRESS, ExchangeStatus.PENDING)


class TestChangeStatus:
    @pytest.mark.parametrize("target", [ExchangeStatus.ACCEPTED, ExchangeStatus.REJECTED])
    def test_only_provider_accepts_or_rejects(self, repo, people, target):
        exchange = exchange_in(repo, people, ExchangeStatus.PENDING)

        for who in ("requester", "outsider"):
            with pytest.raises(AuthorizationError):
                exchange_service.change_status(repo, people[who], exchange.id, target)

        updated = exchange_service.change_status(repo, people["provider"], exchange.id, target)
        assert updated.status == target

    @pytest.mark.parametrize("current, target", [
        (ExchangeStatus.ACCEPTED, ExchangeStatus.IN_PROGRESS),
        (ExchangeStatus.IN_PROGRESS, ExchangeStatus.COMPLETED),
    ])
    @pytest.mark.parametrize("who", ["requester", "provider"])
    def test_either_participant_progresses(self, repo, people, current, target, who):
        exchange = exchange_in(repo, people, current)
        assert exchange_service.change_status(repo, people[who], exchange.id, target).status == target

    @pytest.mark.parametrize("terminal", [ExchangeStatus.COMPLETED, ExchangeStatus.REJECTED])
    def test_terminal_states_reject_further_moves(self, repo, people, terminal):
        exchange = exchange_in(repo, people, terminal)
        for target in ExchangeStatus:
            with pytest.raises(InvalidTransitionError):
                exchange_service.change_status(repo, people["provider"], exchange.id, target)
        assert repo.get_exchange(exchange.id).status == terminal

    def test_admin_may_force_any_transition(self, repo, people):
        exchange = exchange_in(repo, people, ExchangeStatus.COMPLETED)
        updated = exchange_service.change_status(repo, people["admin"], exchange.id, ExchangeStatus.PENDING)
        assert updated.status == ExchangeStatus.PENDING

    def test_outsider_is_forbidden_before_table_check(self, repo, people):
        exchange = exchange_in(repo, people, ExchangeStatus.COMPLETED)
        with pytest.raises(AuthorizationError):
            exchange_service.change_status(repo, people["outsider"], exchange.id, ExchangeStatus.PENDING)


class TestPartition:
    def test_partition_by_status(self, repo, people):
        by_status = {status: exchange_in(repo, people, status) for status in ExchangeStatus}
        partitions = exchange_service.partition_exchanges(list(by_status.values()))

        assert [e.id for e in partitions.pending] == [by_status[ExchangeStatus.PENDING].id]
        assert {e.id for e in partitions.active} == {
            by_status[ExchangeStatus.ACCEPTED].id,
            by_status[ExchangeStatus.IN_PROGRESS].id,
        }
        assert [e.id for e in partitions.completed] == [by_status[ExchangeStatus.COMPLETED].id]


# ============ Routes ============

class TestCreateExchange:
    def test_request_against_provider_skill(self, login_as):
        alice = login_as("alice")
        bob = login_as("bob")
        skill = create_skill(alice)

        exchange = request_exchange(bob, alice, provider_skill_id=skill["id"])

        assert exchange["status"] == "pending"
        assert exchange["requesterId"] == bob.user["id"]
        assert exchange["providerId"] == alice.user["id"]
        assert exchange["providerSkillId"] == skill["id"]
        assert exchange["nextSession"] is None

    def test_requester_must_be_caller(self, login_as):
        alice = login_as("alice")
        bob = login_as("bob")
        carol = login_as("carol")
        response = bob.post("/api/exchanges", json={
            "requesterId": carol.user["id"],
            "providerId": alice.user["id"],
        })
        assert response.status_code == 400

    def test_cannot_exchange_with_yourself(self, login_as):
        alice = login_as("alice")
        response = alice.post("/api/exchanges", json={
            "requesterId": alice.user["id"],
            "providerId": alice.user["id"],
        })
        assert response.status_code == 400

    def test_unknown_provider_or_skill(self, login_as):
        alice = login_as("alice")
        bob = login_as("bob")
        response = bob.post("/api/exchanges", json={"requesterId": bob.user["id"], "providerId": 999})
        assert response.status_code == 404

        response = bob.post("/api/exchanges", json={
            "requesterId": bob.user["id"],
            "providerId": alice.user["id"],
            "providerSkillId": 999,
        })
        assert response.status_code == 404

    def test_skills_must_belong_to_their_side(self, login_as):
        alice = login_as("alice")
        bob = login_as("bob")
        bobs_skill = create_skill(bob)
        alices_skill = create_skill(alice)

        response = bob.post("/api/exchanges", json={
            "requesterId": bob.user["id"],
            "providerId": alice.user["id"],
            "providerSkillId": bobs_skill["id"],
        })
        assert response.status_code == 400

        response = bob.post("/api/exchanges", json={
            "requesterId": bob.user["id"],
            "providerId": alice.user["id"],
            "requesterSkillId": alices_skill["id"],
        })
        assert response.status_code == 400


class TestStatusRoutes:
    def test_requester_cannot_accept(self, login_as):
        alice = login_as("alice")
        bob = login_as("bob")
        exchange = request_exchange(bob, alice)

        response = set_status(bob, exchange["id"], "accepted")

        assert response.status_code == 403
        assert "message" in response.json()

    def test_invalid_transition_is_400(self, login_as):
        alice = login_as("alice")
        bob = login_as("bob")
        exchange = completed_exchange(bob, alice)

        response = set_status(alice, exchange["id"], "in_progress")

        assert response.status_code == 400
        assert "completed" in response.json()["message"]

    def test_unknown_status_value(self, login_as):
        alice = login_as("alice")
        bob = login_as("bob")
        exchange = request_exchange(bob, alice)
        assert set_status(alice, exchange["id"], "active").status_code == 400

    def test_missing_exchange(self, login_as):
        alice = login_as("alice")
        assert set_status(alice, 999, "accepted").status_code == 404


class TestNextSession:
    def test_only_while_accepted_or_in_progress(self, login_as):
        alice = login_as("alice")
        bob = login_as("bob")
        exchange = request_exchange(bob, alice)
        url = f"/api/exchanges/{exchange['id']}/next-session"
        body = {"nextSession": "2030-05-01T17:00:00"}

        assert bob.put(url, json=body).status_code == 400

        set_status(alice, exchange["id"], "accepted")
        response = bob.put(url, json=body)
        assert response.status_code == 200
        assert response.json()["nextSession"].startswith("2030-05-01T17:00:00")
        assert response.json()["status"] == "accepted"

        set_status(bob, exchange["id"], "in_progress")
        assert alice.put(url, json={"nextSession": "2030-05-08T17:00:00"}).status_code == 200

        set_status(alice, exchange["id"], "completed")
        assert alice.put(url, json=body).status_code == 400

    def test_outsider_cannot_schedule(self, login_as):
        alice = login_as("alice")
        bob = login_as("bob")
        carol = login_as("carol")
        exchange = request_exchange(bob, alice)
        set_status(alice, exchange["id"], "accepted")
        response = carol.put(
            f"/api/exchanges/{exchange['id']}/next-session",
            json={"nextSession": "2030-05-01T17:00:00"},
        )
        assert response.status_code == 403


class TestListing:
    def test_lists_and_detail(self, login_as):
        alice = login_as("alice")
        bob = login_as("bob")
        carol = login_as("carol")
        skill = create_skill(alice)
        first = request_exchange(bob, alice, provider_skill_id=skill["id"])
        second = request_exchange(carol, alice)
        set_status(alice, second["id"], "accepted")

        listed = alice.get("/api/exchanges").json()
        assert [e["id"] for e in listed] == [second["id"], first["id"]]
        assert listed[1]["providerSkill"]["title"] == skill["title"]
        assert listed[1]["requester"]["username"] == "bob"

        active = alice.get("/api/exchanges/active").json()
        assert [e["id"] for e in active] == [second["id"]]

        detail = bob.get(f"/api/exchanges/{first['id']}")
        assert detail.status_code == 200
        assert detail.json()["provider"]["username"] == "alice"

        assert carol.get(f"/api/exchanges/{first['id']}").status_code == 403
        assert bob.get("/api/exchanges/999").status_code == 404

    def test_requires_authentication(self, client):
        assert client.get("/api/exchanges").status_code == 401


class TestDashboardStats:
    def test_stats(self, login_as):
        alice = login_as("alice")
        bob = login_as("bob")
        done = completed_exchange(bob, alice)
        ongoing = request_exchange(bob, alice)
        set_status(alice, ongoing["id"], "accepted")
        request_exchange(bob, alice)
        bob.post("/api/reviews", json={"exchangeId": done["id"], "rating": 5})
        bob.post("/api/messages", json={
            "senderId": bob.user["id"],
            "receiverId": alice.user["id"],
            "content": "See you Saturday",
        })

        stats = alice.get("/api/stats").json()

        assert stats == {
            "activeExchanges": 1,
            "completedExchanges": 1,
            "averageRating": 5.0,
            "unreadMessages": 1,
        }
