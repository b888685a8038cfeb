"""
dashboard.py - Streamlit UI entrypoint and orchestration

This module wires the UI components (src.ui.components) with the session layer
(src.session) and the data layer (src.tracker). main() decides between the
loading indicator, the login form and the expense view on every rerun.

Design notes:
 - Keep the dashboard responsible only for UI orchestration and presentation.
 - SessionState and ExpenseTracker live in st.session_state so the data is
   fetched once per browser session.
 - The displayed set is recomputed from scratch on each rerun via
   tracker.compute(view_state); no incremental updates.
"""

import streamlit as st

from src.config import load_settings
from src.session import SessionState
from src.tracker import ExpenseSource, ExpenseTracker
from src.ui.browser_store import BrowserStore
from src.ui import components
from src.view import ViewState, aggregate_total, toggle_sort

SESSION_KEY = "auth_session"
TRACKER_KEY = "expense_tracker"
VIEW_KEY = "view_state"


def _get_session() -> SessionState:
    if SESSION_KEY not in st.session_state:
        settings = load_settings()
        st.session_state[SESSION_KEY] = SessionState(
            BrowserStore(),
            login_url=settings.login_url,
            timeout=settings.timeout,
        )
    return st.session_state[SESSION_KEY]


def _get_tracker() -> ExpenseTracker:
    if TRACKER_KEY not in st.session_state:
        st.session_state[TRACKER_KEY] = ExpenseTracker(ExpenseSource(load_settings()))
    return st.session_state[TRACKER_KEY]


def _get_view_state() -> ViewState:
    if VIEW_KEY not in st.session_state:
        st.session_state[VIEW_KEY] = ViewState()
    return st.session_state[VIEW_KEY]


def _logout(session: SessionState):
    session.logout()
    # drop the cached snapshot so the next login fetches again
    st.session_state.pop(TRACKER_KEY, None)
    for key in (VIEW_KEY, components.SEARCH_WIDGET_KEY, components.CATEGORY_WIDGET_KEY):
        st.session_state.pop(key, None)


def display_expense_view(session: SessionState):
    tracker = _get_tracker()
    if not tracker.loaded:
        with st.spinner("Loading your expenses..."):
            tracker.ensure_loaded()

    components.display_header(
        on_logout=lambda: _logout(session),
        on_reload=tracker.reload,
        origin=tracker.origin,
    )

    state = _get_view_state()
    category, search = components.display_filters(tracker.categories())
    state = ViewState(category, search, state.sort_field, state.sort_direction)

    requested = components.display_sort_controls(state)
    if requested is not None:
        field_name, direction = toggle_sort(state.sort_field, state.sort_direction, requested)
        state = ViewState(state.selected_category, state.search_term, field_name, direction)
        st.session_state[VIEW_KEY] = state
        # rerun so the sort buttons show the new direction
        components.trigger_rerun()
    st.session_state[VIEW_KEY] = state

    rows = tracker.compute(state)
    available = len(tracker.original_data)
    components.display_total(aggregate_total(rows), shown=len(rows), available=available)
    components.display_expense_table(rows, available=available)
    components.display_category_breakdown(tracker.breakdown())


def main():
    """
    Streamlit page:
      - loading indicator until the persisted auth flag has been read
      - login form when not authenticated
      - expense view (filters, sort, total, table, breakdown) otherwise
    """
    st.set_page_config(page_title="Expense Tracker", page_icon="💰", layout="wide")
    session = _get_session()
    if session.loading:
        components.show_loading()
        session.initialize()
        components.trigger_rerun()
        return

    if not session.authenticated:
        components.display_login_form(session.login)
        return

    display_expense_view(session)


if __name__ == "__main__":
    main()
