"""
Payload builders and request helpers shared by the API tests
"""

from typing import Any, Dict

from fastapi.testclient import TestClient


# ============ Sample Data ============

def user_payload(username: str, /, **overrides: Any) -> Dict[str, Any]:
    payload = {
        "username": username,
        "email": f"{username}@example.com",
        "name": username.capitalize(),
        "password": "s3cret-pass",
        "confirmPassword": "s3cret-pass",
    }
    payload.update(overrides)
    return payload


def skill_payload(**overrides: Any) -> Dict[str, Any]:
    payload = {
        "title": "Guitar lessons",
        "description": "Beginner friendly acoustic guitar",
        "category": "Music",
        "tags": ["guitar", "music"],
        "isOffering": True,
        "timeAvailability": "Weekends",
    }
    payload.update(overrides)
    return payload


# ============ Helpers ============

def create_skill(user_client: TestClient, **overrides: Any) -> Dict[str, Any]:
    response = user_client.post("/api/skills", json=skill_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()


def request_exchange(requester: TestClient, provider: TestClient, provider_skill_id=None) -> Dict[str, Any]:
    response = requester.post("/api/exchanges", json={
        "requesterId": requester.user["id"],
        "providerId": provider.user["id"],
        "providerSkillId": provider_skill_id,
    })
    assert response.status_code == 201, response.text
    return response.json()


def set_status(user_client: TestClient, exchange_id: int, status: str):
    return user_client.put(f"/api/exchanges/{exchange_id}/status", json={"status": status})


def completed_exchange(requester: TestClient, provider: TestClient) -> Dict[str, Any]:
    """Drive a new exchange all the way to completed"""
    exchange = request_exchange(requester, provider)
    for who, target in ((provider, "accepted"), (requester, "in_progress"), (provider, "completed")):
        response = set_status(who, exchange["id"], target)
        assert response.status_code == 200, response.text
    return response.json()
