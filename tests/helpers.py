"""Shared fakes: no test talks to the network."""

import threading

import requests


def raw_row(expense="Coffee", amount=3.5, date="2024-02-01", category="Food"):
    """Build a raw row in the data endpoint's nested shape."""
    return {
        "properties": {
            "Expense": {"title": [{"text": {"content": expense}}]},
            "Amount": {"number": amount},
            "Date": {"date": {"start": date}},
            "Category": {"select": {"name": category}},
        }
    }


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self._text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self._text is not None:
            raise ValueError("not JSON: %r" % self._text)
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)


class FakeHttp:
    """
    Stand-in for requests.Session.

    `routes` maps "primary" / "cc" / "login" to a FakeResponse, a payload dict
    (wrapped in a 200 response) or an exception instance to raise.
    """

    def __init__(self, **routes):
        self.routes = routes
        self.calls = []
        self._lock = threading.Lock()

    def _answer(self, name):
        target = self.routes[name]
        if isinstance(target, Exception):
            raise target
        if isinstance(target, FakeResponse):
            return target
        return FakeResponse(200, target)

    def get(self, url, params=None, headers=None, timeout=None):
        name = (params or {}).get("type", "primary")
        with self._lock:
            self.calls.append(("GET", url, name, headers, timeout))
        return self._answer(name)

    def post(self, url, json=None, timeout=None):
        with self._lock:
            self.calls.append(("POST", url, json, None, timeout))
        return self._answer("login")
