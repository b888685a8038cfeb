import pytest
import requests

from helpers import FakeHttp, FakeResponse
from src.models import LoginResult
from src.session import (
    AUTH_STORAGE_KEY,
    LOGIN_FAILED_MESSAGE,
    MemoryStore,
    SessionState,
)

LOGIN_URL = "https://api.test/login"


def _session(store=None, **routes):
    http = FakeHttp(**routes)
    return SessionState(store if store is not None else MemoryStore(), LOGIN_URL, timeout=5, http=http), http


def test_starts_loading_until_initialized():
    session, _ = _session()
    assert session.loading is True
    assert session.authenticated is False
    assert session.initialize() is False
    assert session.loading is False


def test_initialize_restores_persisted_flag():
    session, _ = _session(MemoryStore({AUTH_STORAGE_KEY: "true"}))
    assert session.initialize() is True
    assert session.authenticated is True


def test_initialize_ignores_other_values():
    session, _ = _session(MemoryStore({AUTH_STORAGE_KEY: "yes"}))
    assert session.initialize() is False


def test_login_success_persists_flag():
    store = MemoryStore()
    session, http = _session(store, login=FakeResponse(200, {"ok": True}))
    session.initialize()
    result = session.login("alice", "s3cret")
    assert result == LoginResult(success=True)
    assert session.authenticated is True
    assert store.get(AUTH_STORAGE_KEY) == "true"
    method, url, body, _, timeout = http.calls[0]
    assert (method, url, body, timeout) == ("POST", LOGIN_URL, {"username": "alice", "password": "s3cret"}, 5)


def test_login_rejected_returns_endpoint_message():
    store = MemoryStore()
    session, _ = _session(store, login=FakeResponse(401, {"message": "Invalid credentials"}))
    session.initialize()
    result = session.login("alice", "wrong")
    assert result == LoginResult(success=False, error="Invalid credentials")
    assert session.authenticated is False
    assert store.get(AUTH_STORAGE_KEY) is None


def test_login_rejected_without_message_uses_generic_error():
    session, _ = _session(login=FakeResponse(500, text="<html>oops</html>"))
    assert session.login("a", "b") == LoginResult(False, LOGIN_FAILED_MESSAGE)
    session, _ = _session(login=FakeResponse(403, {"detail": "nope"}))
    assert session.login("a", "b") == LoginResult(False, LOGIN_FAILED_MESSAGE)


def test_login_network_failure_is_generic_and_retryable():
    session, http = _session(login=requests.ConnectionError("down"))
    assert session.login("a", "b") == LoginResult(False, LOGIN_FAILED_MESSAGE)
    assert session.authenticated is False
    http.routes["login"] = FakeResponse(200, {})
    assert session.login("a", "b").success is True
    assert len(http.calls) == 2


def test_logout_clears_flag():
    store = MemoryStore({AUTH_STORAGE_KEY: "true"})
    session, _ = _session(store)
    session.initialize()
    session.logout()
    assert session.authenticated is False
    assert store.get(AUTH_STORAGE_KEY) is None


def test_login_in_one_browser_does_not_unlock_another():
    owner, _ = _session(MemoryStore(), login=FakeResponse(200, {}))
    owner.initialize()
    assert owner.login("alice", "pw").success is True

    stranger, _ = _session(MemoryStore())
    assert stranger.initialize() is False
    assert stranger.authenticated is False


@pytest.mark.parametrize("status", [300, 302, 304])
def test_login_redirect_is_not_success(status):
    store = MemoryStore()
    session, _ = _session(store, login=FakeResponse(status, {"message": "moved"}))
    session.initialize()
    result = session.login("u", "wrong")
    assert result == LoginResult(success=False, error="moved")
    assert session.authenticated is False
    assert store.get(AUTH_STORAGE_KEY) is None


class _BrokenStore(MemoryStore):
    def set(self, key, value):
        raise OSError("storage unavailable")


def test_login_store_failure_leaves_session_unauthenticated():
    session, _ = _session(_BrokenStore(), login=FakeResponse(200, {}))
    session.initialize()
    assert session.login("alice", "pw") == LoginResult(False, LOGIN_FAILED_MESSAGE)
    assert session.authenticated is False
