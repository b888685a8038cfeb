"""
browser_store.py - session flag storage in the visitor's browser

Wraps streamlit-local-storage's LocalStorage behind the get/set/remove
interface SessionState expects. Values live in window.localStorage of the
browser that set them, so one visitor logging in never unlocks another.
"""

from typing import Any, Optional

from streamlit_local_storage import LocalStorage


class BrowserStore:
    def __init__(self, local_storage: Any = None):
        self._ls = local_storage if local_storage is not None else LocalStorage()

    def get(self, key: str) -> Optional[str]:
        value = self._ls.getItem(key)
        if value is None:
            return None
        # the component hands back JSON-decoded values
        if value is True:
            return "true"
        return str(value)

    def set(self, key: str, value: str) -> None:
        self._ls.setItem(key, value, key=f"set_{key}")

    def remove(self, key: str) -> None:
        self._ls.deleteItem(key, key=f"delete_{key}")
