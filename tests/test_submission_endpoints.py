"""Tests for the submission form endpoints."""

from datetime import timedelta
from uuid import uuid4

from fastapi.testclient import TestClient

from form_duration_tracker.api.app import create_app
from form_duration_tracker.containers import AppContainer
from tests.conftest import NOW, FrozenClock


def _session_values(container: AppContainer, client: TestClient) -> dict[str, str]:
    session_id = client.cookies.get(container.settings.session_cookie)
    assert session_id
    store = container.session_registry.session_for(session_id)
    assert store is not None
    return store.values


def test_health(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_new_form_starts_timer(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/submissions/new")

    assert response.status_code == 200
    assert response.json() == {"started_at": NOW.isoformat()}
    assert _session_values(container, client) == {
        "started_at_timestamp": NOW.isoformat(),
        "started_at_timestamp_expires_at": (NOW + timedelta(hours=2)).isoformat(),
    }


def test_create_uses_session_timestamp(
    container: AppContainer, clock: FrozenClock
) -> None:
    client = TestClient(create_app(container))
    client.get("/submissions/new")
    clock.advance(seconds=30)

    response = client.post("/submissions", json={"submission": {"title": "Hello"}})

    assert response.status_code == 201
    data = response.json()["submission"]
    assert data["title"] == "Hello"
    assert data["started_at"] == NOW.isoformat()
    assert _session_values(container, client) == {}


def test_create_too_quickly_preserves_timer(
    container: AppContainer, clock: FrozenClock
) -> None:
    client = TestClient(create_app(container))
    client.get("/submissions/new")
    clock.advance(seconds=2)

    response = client.post("/submissions", json={"submission": {"title": "Hello"}})

    assert response.status_code == 422
    assert response.json() == {
        "errors": {"started_at": ["form was completed too quickly (min: 5 seconds)"]}
    }
    assert _session_values(container, client) == {
        "started_at_timestamp": NOW.isoformat(),
        "started_at_timestamp_expires_at": (
            NOW + timedelta(seconds=2) + timedelta(hours=2)
        ).isoformat(),
    }

    clock.advance(seconds=10)
    retry = client.post("/submissions", json={"submission": {"title": "Hello"}})

    assert retry.status_code == 201
    assert retry.json()["submission"]["started_at"] == NOW.isoformat()


def test_create_without_session_is_blank(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.post("/submissions", json={"submission": {"title": "Hello"}})

    assert response.status_code == 422
    assert response.json() == {"errors": {"started_at": ["can't be blank"]}}


def test_create_after_expiry_is_blank(
    container: AppContainer, clock: FrozenClock
) -> None:
    client = TestClient(create_app(container))
    client.get("/submissions/new")
    clock.advance(hours=3)

    response = client.post("/submissions", json={"submission": {"title": "Hello"}})

    assert response.status_code == 422
    assert response.json() == {"errors": {"started_at": ["can't be blank"]}}
    assert _session_values(container, client) == {}


def test_create_keeps_submitted_timestamp(
    container: AppContainer, clock: FrozenClock
) -> None:
    client = TestClient(create_app(container))
    client.get("/submissions/new")
    clock.advance(minutes=1)
    submitted = (NOW - timedelta(minutes=10)).isoformat()

    response = client.post(
        "/submissions",
        json={"submission": {"title": "Hello", "started_at": submitted}},
    )

    assert response.status_code == 201
    assert response.json()["submission"]["started_at"] == submitted


def test_create_rejects_future_timestamp(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    submitted = (NOW + timedelta(minutes=10)).isoformat()

    response = client.post(
        "/submissions",
        json={"submission": {"title": "Hello", "started_at": submitted}},
    )

    assert response.status_code == 422
    assert "can't be in the future" in response.json()["errors"]["started_at"]


def test_create_without_param_bag(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    client.get("/submissions/new")

    response = client.post("/submissions", json={})

    assert response.status_code == 422


def test_edit_and_update_keep_started_at(
    container: AppContainer, clock: FrozenClock
) -> None:
    client = TestClient(create_app(container))
    client.get("/submissions/new")
    clock.advance(minutes=1)
    created = client.post("/submissions", json={"submission": {"title": "Hello"}})
    submission_id = created.json()["submission"]["id"]

    edit = client.get(f"/submissions/{submission_id}/edit")
    update = client.patch(
        f"/submissions/{submission_id}",
        json={
            "submission": {
                "title": "Edited",
                "started_at": (NOW + timedelta(minutes=1)).isoformat(),
            }
        },
    )

    assert edit.status_code == 200
    assert edit.json()["submission"]["title"] == "Hello"
    assert update.status_code == 200
    assert update.json()["submission"]["title"] == "Edited"
    assert update.json()["submission"]["started_at"] == NOW.isoformat()


def test_unknown_submission_returns_404(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    missing = uuid4()

    assert client.get(f"/submissions/{missing}/edit").status_code == 404
    assert (
        client.patch(
            f"/submissions/{missing}", json={"submission": {"title": "x"}}
        ).status_code
        == 404
    )


def test_unknown_session_cookies_are_replaced(
    container: AppContainer, clock: FrozenClock
) -> None:
    client = TestClient(create_app(container))
    cookie_name = container.settings.session_cookie

    issued: set[str | None] = set()
    for index in range(50):
        client.cookies.clear()
        client.cookies.set(cookie_name, f"made-up-{index}")
        response = client.get("/submissions/new")
        issued.add(response.cookies.get(cookie_name))

    assert len(issued) == 50
    assert not any(
        session_id is None or session_id.startswith("made-up-")
        for session_id in issued
    )
    assert all(
        container.session_registry.session_for(f"made-up-{index}") is None
        for index in range(50)
    )

    clock.advance(hours=24)
    client.cookies.clear()
    client.get("/submissions/new")

    assert len(container.session_registry) == 1


def test_issued_session_cookie_is_reused(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    first = client.get("/submissions/new")
    second = client.get("/submissions/new")

    assert first.cookies.get(container.settings.session_cookie)
    assert container.settings.session_cookie not in second.cookies
    assert len(container.session_registry) == 1
