"""
components.py - reusable Streamlit components / forms / displays

This module contains pure-UI helpers used by the dashboard:
 - show_loading(message)
 - display_login_form(on_login)
 - display_header(on_logout, on_reload, origin)
 - display_filters(categories, state) / display_sort_controls(state)
 - display_total / display_expense_table / display_category_breakdown

DataFrame builders (records_frame, breakdown_frame) are kept free of Streamlit
calls so they can be tested directly.
"""

from typing import Callable, Dict, List, Optional, Sequence, Tuple

import altair as alt
import pandas as pd
import streamlit as st

from src.models import ExpenseRecord, LoginResult
from src.tracker import ORIGIN_EMPTY, ORIGIN_FALLBACK
from src.view import CategoryTotal, ViewState, format_amount

CURRENCY = "₹"

CATEGORY_ICONS = {
    "Food": "🛒",
    "Travel": "🚗",
    "Groceries": "🛒",
    "Medicine": "💊",
    "Housing": "🏠",
    "Utilities": "⚡",
    "Entertainment": "🎬",
    "Shopping": "🛍️",
    "Other": "📦",
}

SEARCH_WIDGET_KEY = "search_term"
CATEGORY_WIDGET_KEY = "selected_category"

SORT_LABELS = {
    "expense": "Expense",
    "category": "Category",
    "amount": "Amount",
    "date": "Date",
}

# Palette shared with the breakdown chart; cycled when there are more categories
PALETTE = [
    "#1f77b4", "#ff7f0e", "#2ca02c", "#d62728", "#9467bd",
    "#8c564b", "#e377c2", "#7f7f7f", "#bcbd22", "#17becf"
]


def trigger_rerun():
    if hasattr(st, "rerun"):
        st.rerun()
    else:
        st.experimental_rerun()


def category_icon(category: str) -> str:
    return CATEGORY_ICONS.get(category, CATEGORY_ICONS["Other"])


def money(amount: float) -> str:
    return f"{CURRENCY}{format_amount(amount)}"


def records_frame(records: Sequence[ExpenseRecord]) -> pd.DataFrame:
    """Display-order DataFrame of the given records."""
    return pd.DataFrame(
        [r.to_dict() for r in records],
        columns=["expense", "category", "amount", "date"],
    )


def breakdown_frame(breakdown: Dict[str, CategoryTotal]) -> pd.DataFrame:
    """
    One row per category with total, count and share of the overall total.
    Rows are ordered by total, largest first.
    """
    overall = sum(v.total for v in breakdown.values())
    rows = []
    for cat, entry in breakdown.items():
        pct = (entry.total / overall * 100) if overall > 0 else 0.0
        rows.append({
            "category": cat,
            "total": float(entry.total),
            "count": int(entry.count),
            "percent": pct,
        })
    df = pd.DataFrame(rows, columns=["category", "total", "count", "percent"])
    return df.sort_values("total", ascending=False, kind="stable").reset_index(drop=True)


def show_loading(message: str = "Loading Expense Tracker..."):
    st.info(f"💰 {message}")


def display_login_form(on_login: Callable[[str, str], LoginResult]):
    """
    Render the login form. On submit, call on_login(username, password) and
    show its error inline; a successful login reruns the app into the viewer.
    """
    st.header("💰 Expense Tracker")
    with st.form(key="login_form"):
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in")

    if not submitted:
        return
    with st.spinner("Signing in..."):
        result = on_login(username, password)
    if result.success:
        trigger_rerun()
    else:
        st.error(f"⚠️ {result.error}")


def display_header(on_logout: Callable[[], None], on_reload: Callable[[], None], origin: Optional[str]):
    col1, col2, col3 = st.columns([6, 1, 1])
    with col1:
        st.title("💰 Expense Tracker")
    with col2:
        if st.button("🔄 Reload"):
            on_reload()
            trigger_rerun()
    with col3:
        if st.button("🚪 Logout"):
            on_logout()
            trigger_rerun()
    if origin == ORIGIN_FALLBACK:
        st.warning("Remote data unavailable, showing the local copy.")
    elif origin == ORIGIN_EMPTY:
        st.warning("Could not load expense data.")


def display_filters(categories: List[str]) -> Tuple[str, str]:
    """Search box and category selector; returns (category, search_term)."""
    # a category can disappear after a reload
    if st.session_state.get(CATEGORY_WIDGET_KEY) not in categories:
        st.session_state.pop(CATEGORY_WIDGET_KEY, None)
    search = st.text_input("🔍 Search expenses...", key=SEARCH_WIDGET_KEY)
    category = st.radio(
        "Category",
        options=categories,
        key=CATEGORY_WIDGET_KEY,
        horizontal=True,
        format_func=lambda c: c if c == categories[0] else f"{category_icon(c)} {c}",
    )
    return category, search


def display_sort_controls(state: ViewState) -> Optional[str]:
    """
    One button per sortable column; the active one shows its direction.
    Returns the clicked field, or None.
    """
    clicked = None
    cols = st.columns(len(SORT_LABELS))
    for col, field_name in zip(cols, SORT_LABELS):
        label = SORT_LABELS[field_name]
        if field_name == state.sort_field:
            label += " ↓" if state.sort_direction == "desc" else " ↑"
        with col:
            if st.button(label, key=f"sort_{field_name}", use_container_width=True):
                clicked = field_name
    return clicked


def display_total(total: float, shown: int, available: int):
    st.metric(label=f"🎯 Total ({shown} of {available} expenses)", value=money(total))


def display_expense_table(records: Sequence[ExpenseRecord], available: int):
    """Table of the displayed records, or the matching empty-state message."""
    if not records:
        if available:
            st.info("📋 No expenses match your filters")
        else:
            st.info("📋 No expense data available")
        return
    df = records_frame(records)
    df["category"] = [f"{category_icon(c)} {c}" for c in df["category"]]
    df["amount"] = [money(a) for a in df["amount"]]
    st.dataframe(df, use_container_width=True, hide_index=True)


def display_category_breakdown(breakdown: Dict[str, CategoryTotal]):
    """Show total and count per category with a donut chart of the shares."""
    if not breakdown:
        return
    with st.expander("📊 Category breakdown"):
        df = breakdown_frame(breakdown)
        for _, r in df.iterrows():
            st.write(
                f"{category_icon(r['category'])} {r['category']}: "
                f"{CURRENCY}{r['total']:.2f} ({int(r['count'])} items, {r['percent']:.1f}%)"
            )

        if df["total"].sum() <= 0:
            st.info("No positive amounts to chart.")
            return

        ordered = list(df["category"])
        times = (len(ordered) + len(PALETTE) - 1) // len(PALETTE)
        colors = (PALETTE * max(times, 1))[: len(ordered)]
        pie = alt.Chart(df).mark_arc(innerRadius=50).encode(
            theta=alt.Theta(field="total", type="quantitative"),
            color=alt.Color(
                field="category",
                type="nominal",
                scale=alt.Scale(domain=ordered, range=colors),
                legend=alt.Legend(title="Category"),
            ),
            tooltip=[
                alt.Tooltip("category:N", title="Category"),
                alt.Tooltip("total:Q", title=f"Total ({CURRENCY})", format=".2f"),
                alt.Tooltip("count:Q", title="Expenses"),
                alt.Tooltip("percent:Q", title="Share", format=".1f"),
            ],
        ).properties(title="Category share")
        st.altair_chart(pie, use_container_width=True)
