"""
API tests for the Route Matcher service.
Runs against an in-memory repository; no database needed.
"""

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from helpers import LISBON, make_stop, make_user, north_of

from route_matcher.core.matcher import RouteMatcher
from route_matcher.main import app
from route_matcher.repository import InMemoryRepository, JSONRepository, RepositoryError

PREFIX = "/api/v1"


@pytest.fixture
def repository(requester):
    near = make_user(
        "near",
        [make_stop(north_of(LISBON, 50), "2024-06-05", "2024-06-15")],
        ["surfing", "yoga"],
    )
    nearer = make_user(
        "nearer",
        [make_stop(north_of(LISBON, 5), "2024-06-09", "2024-06-12", "Sintra")],
    )
    far = make_user("far", [make_stop(north_of(LISBON, 300), "2024-06-01", "2024-06-10")])
    return InMemoryRepository([requester, near, nearer, far])


@pytest.fixture
def client(repository):
    with patch("route_matcher.main.get_matcher", return_value=RouteMatcher(repository)):
        yield TestClient(app)


def test_route_matches(client):
    response = client.get(f"{PREFIX}/users/me/route-matches")
    assert response.status_code == 200
    data = response.json()

    assert data["count"] == 2
    assert [m["user"]["user_id"] for m in data["matches"]] == ["near", "nearer"]
    assert [m["rank"] for m in data["matches"]] == [1, 2]

    top = data["matches"][0]
    assert top["shared_interests"] == ["surfing", "yoga"]
    assert top["overlaps"] == [{
        "location_name": "Lisbon",
        "date_range": {"start": "2024-06-05", "end": "2024-06-10"},
        "distance_km": 50,
    }]
    assert top["score"] == pytest.approx(26 - 50 / 15, abs=1e-3)


def test_unknown_user_gets_empty_list(client):
    response = client.get(f"{PREFIX}/users/ghost/route-matches")
    assert response.status_code == 200
    assert response.json() == {"user_id": "ghost", "count": 0, "matches": []}


def test_swipe_removes_candidate(client):
    response = client.post(
        f"{PREFIX}/swipes",
        json={"swiper_id": "me", "swiped_id": "near", "action": "pass"},
    )
    assert response.status_code == 200
    assert response.json() == {"recorded": True}

    duplicate = client.post(
        f"{PREFIX}/swipes",
        json={"swiper_id": "me", "swiped_id": "near", "action": "like"},
    )
    assert duplicate.json() == {"recorded": False}

    matches = client.get(f"{PREFIX}/users/me/route-matches").json()["matches"]
    assert [m["user"]["user_id"] for m in matches] == ["nearer"]

    reset = client.delete(f"{PREFIX}/users/me/swipes")
    assert reset.json() == {"user_id": "me", "deleted": 1}
    assert client.get(f"{PREFIX}/users/me/route-matches").json()["count"] == 2


def test_self_swipe_rejected(client):
    response = client.post(
        f"{PREFIX}/swipes",
        json={"swiper_id": "me", "swiped_id": "me", "action": "like"},
    )
    assert response.status_code == 400


def test_invalid_action_rejected(client):
    response = client.post(
        f"{PREFIX}/swipes",
        json={"swiper_id": "me", "swiped_id": "near", "action": "superlike"},
    )
    assert response.status_code == 422


def test_sync_status(client):
    response = client.get(f"{PREFIX}/users/me/sync/far")
    assert response.status_code == 200
    data = response.json()
    assert data["user_id"] == "me"
    assert data["other_user_id"] == "far"
    assert data["status"] in {"same_stop", "syncing", "crossing", "departed", "none"}


def test_sync_status_unknown_user(client):
    response = client.get(f"{PREFIX}/users/me/sync/ghost")
    assert response.status_code == 404


def test_repository_failure_returns_503(requester):
    repository = MagicMock()
    repository.get_user.return_value = requester
    repository.list_users.side_effect = RepositoryError("users unavailable")

    with patch("route_matcher.main.get_matcher", return_value=RouteMatcher(repository)):
        response = TestClient(app).get(f"{PREFIX}/users/me/route-matches")

    assert response.status_code == 503
    body = response.json()
    assert body["error"] == "repository_unavailable"
    assert body["message"]


def test_swipe_storage_failure_returns_503():
    repository = MagicMock()
    repository.record_swipe.side_effect = RepositoryError("write failed")

    with patch("route_matcher.main.get_matcher", return_value=RouteMatcher(repository)):
        response = TestClient(app).post(
            f"{PREFIX}/swipes",
            json={"swiper_id": "me", "swiped_id": "you", "action": "like"},
        )

    assert response.status_code == 503
    assert response.json()["error"] == "repository_unavailable"


def test_shutdown_closes_repository():
    repository = MagicMock()

    with patch("route_matcher.main.get_matcher", return_value=RouteMatcher(repository)):
        with TestClient(app):
            repository.close.assert_not_called()

    repository.close.assert_called_once_with()


def test_shutdown_without_close(requester):
    repository = InMemoryRepository([requester])

    with patch("route_matcher.main.get_matcher", return_value=RouteMatcher(repository)):
        with TestClient(app) as client:
            assert client.get(f"{PREFIX}/health").status_code == 200


def test_health(client):
    response = client.get(f"{PREFIX}/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["components"]["repository"] == "InMemoryRepository"


def test_sample_data_end_to_end():
    """Ana overlaps Ben near Lisbon and Chloe in the Algarve."""
    matcher = RouteMatcher(JSONRepository("data/users.json"))
    with patch("route_matcher.main.get_matcher", return_value=matcher):
        data = TestClient(app).get(f"{PREFIX}/users/user_ana/route-matches").json()

    assert [m["user"]["user_id"] for m in data["matches"]] == ["user_ben", "user_chloe"]
    chloe = data["matches"][1]
    assert chloe["overlaps"][0]["location_name"] == "Albufeira"
    assert chloe["overlaps"][0]["date_range"] == {"start": "2024-06-15", "end": "2024-06-20"}
