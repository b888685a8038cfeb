"""
session.py - authentication state

SessionState owns the single "authenticated" flag. The flag survives page
reloads through an injected key/value store with get/set/remove:
  - BrowserStore (src.ui.browser_store): the visitor's browser localStorage,
    used by the app so each browser carries its own flag
  - MemoryStore: in-process dict (used by tests)

Only SessionState reads or writes AUTH_STORAGE_KEY. Logout is client side only:
the remote API keeps no session.
"""

from typing import Dict, Optional

import requests

from src.logging_setup import get_logger
from src.models import LoginResult

logger = get_logger(__name__)

AUTH_STORAGE_KEY = "expense_tracker_auth"
LOGIN_FAILED_MESSAGE = "Login failed. Please try again."


class MemoryStore:
    """Dict-backed store with the same interface as BrowserStore."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


class SessionState:
    """
    Authentication gate for the viewer.

    `loading` stays True until initialize() has read the persisted flag; the
    dashboard shows a spinner meanwhile instead of guessing which view to render.
    """

    def __init__(self, store, login_url: str, timeout: float = 15.0, http=None):
        self._store = store
        self.login_url = login_url
        self.timeout = timeout
        # anything with a requests-style post(); a requests.Session by default
        self._http = http if http is not None else requests.Session()
        self.authenticated = False
        self.loading = True

    def initialize(self) -> bool:
        """Restore the flag from the store. Returns the resulting state."""
        self.authenticated = self._store.get(AUTH_STORAGE_KEY) == "true"
        self.loading = False
        return self.authenticated

    def login(self, username: str, password: str) -> LoginResult:
        """
        POST the credentials to the auth endpoint.

        Only a 2xx answer authenticates, and only once the flag is persisted.
        Otherwise the endpoint's `message` is returned; transport and storage
        errors map to a generic message.
        """
        try:
            response = self._http.post(
                self.login_url,
                json={"username": username, "password": password},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Login request failed: %s", exc.__class__.__name__)
            return LoginResult(success=False, error=LOGIN_FAILED_MESSAGE)

        if not _is_success(response.status_code):
            logger.info("Login rejected (status=%s)", response.status_code)
            return LoginResult(success=False, error=_error_message(response))

        try:
            self._store.set(AUTH_STORAGE_KEY, "true")
        except Exception:
            logger.exception("Could not persist the session flag")
            return LoginResult(success=False, error=LOGIN_FAILED_MESSAGE)
        self.authenticated = True
        logger.info("Login succeeded")
        return LoginResult(success=True)

    def logout(self) -> None:
        self.authenticated = False
        self._store.remove(AUTH_STORAGE_KEY)
        logger.info("Logged out")


def _error_message(response) -> str:
    try:
        body = response.json()
    except ValueError:
        return LOGIN_FAILED_MESSAGE
    message = body.get("message") if isinstance(body, dict) else None
    if isinstance(message, str) and message.strip():
        return message
    return LOGIN_FAILED_MESSAGE
