"""
app.py - minimal entrypoint for Streamlit app

Keep this file tiny so streamlit can import it without side-effects.
Run the app with:
    streamlit run app.py

This module simply delegates to src.ui.dashboard.main().

"""
import os
try:
    # If running on Streamlit Cloud, transfer secrets to env vars so src.config can read them
    import streamlit as _st
    from src.config import ENV_KEYS as _ENV_KEYS
    _secrets = getattr(_st, "secrets", {}) or {}
    for _k in _ENV_KEYS:
        if _k in _secrets and _secrets[_k] and _k not in os.environ:
            os.environ[_k] = str(_secrets[_k])
except Exception:
    # st.secrets raises when no secrets.toml exists; environment variables still apply
    pass

from src.ui import dashboard


def main():
    dashboard.main()


if __name__ == "__main__":
    main()
