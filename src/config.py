"""
config.py - environment driven settings

All endpoints and file locations are read from environment variables so the
same code runs locally and on Streamlit Cloud (app.py copies matching
Streamlit secrets into the environment before anything here is read).
"""

import os
from dataclasses import dataclass

_DATA_DIR = os.path.join(os.path.dirname(__file__), "..", "data")

DEFAULT_API_BASE_URL = "https://ver-px.vercel.app/api"
# static placeholder accepted by the data endpoint, not a per-user credential
DEFAULT_API_TOKEN = "authenticated"
DEFAULT_TIMEOUT = 15.0
DEFAULT_FALLBACK_FILE = os.path.join(_DATA_DIR, "notion-data.json")

# names of the environment variables (also looked up in Streamlit secrets)
ENV_KEYS = (
    "EXPENSE_API_BASE_URL",
    "EXPENSE_API_TOKEN",
    "EXPENSE_API_TIMEOUT",
    "EXPENSE_FALLBACK_FILE",
)


@dataclass(frozen=True)
class Settings:
    api_base_url: str = DEFAULT_API_BASE_URL
    api_token: str = DEFAULT_API_TOKEN
    timeout: float = DEFAULT_TIMEOUT
    fallback_file: str = DEFAULT_FALLBACK_FILE

    @property
    def login_url(self) -> str:
        return f"{self.api_base_url.rstrip('/')}/login"

    @property
    def data_url(self) -> str:
        return f"{self.api_base_url.rstrip('/')}/notion"


def _env_str(name: str, default: str) -> str:
    return (os.getenv(name) or "").strip() or default


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def load_settings() -> Settings:
    """Build Settings from the current environment; unset keys use defaults."""
    return Settings(
        api_base_url=_env_str("EXPENSE_API_BASE_URL", DEFAULT_API_BASE_URL),
        api_token=_env_str("EXPENSE_API_TOKEN", DEFAULT_API_TOKEN),
        timeout=_env_float("EXPENSE_API_TIMEOUT", DEFAULT_TIMEOUT),
        fallback_file=_env_str("EXPENSE_FALLBACK_FILE", DEFAULT_FALLBACK_FILE),
    )
