"""
view.py - filtering, sorting and aggregation of the fetched records

Everything here is a pure function over a sequence of ExpenseRecord: inputs are
never mutated and every call returns a new list. The dashboard calls
compute_view() on each Streamlit rerun, so any change to the filters, the sort
or the underlying data is picked up by plain re-invocation.

Sort directions follow the original viewer: "desc" is the natural order
(newest date first, largest amount first, A to Z for text) and "asc" inverts
it. Records without a usable date always go last.
"""

import datetime
import locale
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from src.models import ALL_CATEGORIES, ExpenseRecord

SORT_FIELDS = ("date", "amount", "category", "expense")
SORT_DIRECTIONS = ("asc", "desc")
DEFAULT_SORT_FIELD = "date"
DEFAULT_SORT_DIRECTION = "asc"

# fields whose natural ("desc") order is largest/newest first
_DESCENDING_FIELDS = ("date", "amount")


@dataclass(frozen=True)
class ViewState:
    selected_category: str = ALL_CATEGORIES
    search_term: str = ""
    sort_field: str = DEFAULT_SORT_FIELD
    sort_direction: str = DEFAULT_SORT_DIRECTION


@dataclass
class CategoryTotal:
    total: float = 0.0
    count: int = 0


def filter_records(
    records: Sequence[ExpenseRecord],
    category: str = ALL_CATEGORIES,
    search_term: str = "",
) -> List[ExpenseRecord]:
    """
    Keep records in `category` whose description contains `search_term`.

    The "All" category and an empty search term disable their predicate.
    """
    needle = (search_term or "").lower()
    out: List[ExpenseRecord] = []
    for r in records:
        if category != ALL_CATEGORIES and r.category != category:
            continue
        if needle and needle not in r.expense.lower():
            continue
        out.append(r)
    return out


def parse_display_date(value: str) -> Optional[datetime.date]:
    """Rebuild a date from "dd-mm-yy" (year read as 2000+yy); None if invalid."""
    parts = value.split("-")
    if len(parts) != 3:
        return None
    try:
        day, month, year = (int(p) for p in parts)
        return datetime.date(2000 + year, month, day)
    except ValueError:
        return None


def _text_key(value: str):
    return locale.strxfrm(value.casefold()), value


def sort_records(
    records: Sequence[ExpenseRecord],
    field_name: str = DEFAULT_SORT_FIELD,
    direction: str = DEFAULT_SORT_DIRECTION,
) -> List[ExpenseRecord]:
    """
    Stable sort of `records` by `field_name` in `direction`.

    Ties keep their input order. For "date", records whose date cannot be
    rebuilt (including the placeholder) follow all dated records in either
    direction.
    """
    if field_name not in SORT_FIELDS:
        raise ValueError(f"unknown sort field: {field_name!r}")
    if direction not in SORT_DIRECTIONS:
        raise ValueError(f"unknown sort direction: {direction!r}")

    natural_reverse = field_name in _DESCENDING_FIELDS
    reverse = natural_reverse if direction == "desc" else not natural_reverse

    if field_name == "date":
        dated: List[Tuple[datetime.date, ExpenseRecord]] = []
        undated: List[ExpenseRecord] = []
        for r in records:
            d = parse_display_date(r.date) if r.has_date else None
            if d is None:
                undated.append(r)
            else:
                dated.append((d, r))
        ordered = sorted(dated, key=lambda pair: pair[0], reverse=reverse)
        return [r for _, r in ordered] + undated

    if field_name == "amount":
        return sorted(records, key=lambda r: r.amount, reverse=reverse)
    return sorted(records, key=lambda r: _text_key(getattr(r, field_name)), reverse=reverse)


def toggle_sort(current_field: str, current_direction: str, requested_field: str) -> Tuple[str, str]:
    """Same field flips the direction; a new field starts at "desc"."""
    if requested_field not in SORT_FIELDS:
        raise ValueError(f"unknown sort field: {requested_field!r}")
    if requested_field == current_field:
        return current_field, "asc" if current_direction == "desc" else "desc"
    return requested_field, "desc"


def aggregate_total(records: Sequence[ExpenseRecord]) -> float:
    return sum((r.amount for r in records), 0)


def aggregate_by_category(records: Sequence[ExpenseRecord]) -> Dict[str, CategoryTotal]:
    """Total amount and record count per category present in `records`."""
    breakdown: Dict[str, CategoryTotal] = {}
    for r in records:
        entry = breakdown.setdefault(r.category, CategoryTotal())
        entry.total += r.amount
        entry.count += 1
    return breakdown


def distinct_categories(records: Sequence[ExpenseRecord]) -> List[str]:
    """["All"] followed by each category present, in first-seen order."""
    seen: Dict[str, None] = {}
    for r in records:
        seen.setdefault(r.category, None)
    return [ALL_CATEGORIES] + [c for c in seen if c != ALL_CATEGORIES]


def compute_view(original_data: Sequence[ExpenseRecord], state: ViewState) -> List[ExpenseRecord]:
    """Display set for `state`: sort(filter(original_data))."""
    filtered = filter_records(original_data, state.selected_category, state.search_term)
    return sort_records(filtered, state.sort_field, state.sort_direction)


def format_amount(amount: float) -> str:
    """Whole amounts without decimals, everything else with two."""
    if float(amount).is_integer():
        return str(int(amount))
    return f"{amount:.2f}"
