from datetime import UTC, datetime, timedelta

import pytest

from kanri.sessions import SessionStore


@pytest.fixture
def store() -> SessionStore:
    return SessionStore(max_age_seconds=60)


def _age(store: SessionStore, token: str, seconds: int) -> None:
    entry = store._sessions[token]
    store._sessions[token] = type(entry)(
        user_id=entry.user_id,
        expires_at=datetime.now(UTC) - timedelta(seconds=seconds),
    )


def test_create_and_resolve(store: SessionStore):
    token = store.create(7)
    assert store.resolve(token) == 7


def test_tokens_are_unique(store: SessionStore):
    assert store.create(1) != store.create(1)
    assert len(store) == 2


def test_resolve_unknown_or_empty(store: SessionStore):
    assert store.resolve("missing") is None
    assert store.resolve(None) is None
    assert store.resolve("") is None


def test_destroy_is_idempotent(store: SessionStore):
    token = store.create(1)
    store.destroy(token)
    store.destroy(token)
    store.destroy(None)
    assert store.resolve(token) is None


def test_expired_session_is_dropped(store: SessionStore):
    token = store.create(1)
    _age(store, token, 1)
    assert store.resolve(token) is None
    assert len(store) == 0


def test_lifetime_is_fixed_from_creation(store: SessionStore):
    token = store.create(1)
    expires_at = store._sessions[token].expires_at
    store.resolve(token)
    assert store._sessions[token].expires_at == expires_at


def test_purge_expired(store: SessionStore):
    stale = store.create(1)
    fresh = store.create(2)
    _age(store, stale, 5)
    assert store.purge_expired() == 1
    assert store.resolve(fresh) == 2


def test_default_lifetime_is_one_day():
    from kanri.sessions import session_store

    assert session_store.max_age == timedelta(hours=24)


def test_create_drops_abandoned_sessions(store: SessionStore):
    abandoned = [store.create(i) for i in range(5)]
    for token in abandoned:
        _age(store, token, 1)
    fresh = store.create(99)
    assert len(store) == 1
    assert store.resolve(fresh) == 99


def test_login_traffic_cleans_up_expired_sessions(client, user):
    from fastapi.testclient import TestClient

    from kanri.main import app
    from kanri.sessions import session_store

    for _ in range(5):
        TestClient(app).post("/api/login", json={"username": "testuser", "password": "testpass"})
    assert len(session_store) == 5
    for token in list(session_store._sessions):
        _age(session_store, token, 1)

    client.post("/api/login", json={"username": "testuser", "password": "testpass"})
    assert len(session_store) == 1
    assert client.get("/api/me").json()["loggedIn"] is True
