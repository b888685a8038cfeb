"""
normalizer.py - raw payload -> ExpenseRecord conversion

Raw rows come from a Notion-style database query:

    {"properties": {
        "Expense":  {"title": [{"text": {"content": "Coffee"}}]},
        "Amount":   {"number": 3.5},
        "Date":     {"date": {"start": "2024-02-01"}},
        "Category": {"select": {"name": "Food"}}}}

Any of the nested fields may be missing, null or of the wrong type. Each field
is read with `_dig` and passed through `coerce`, so a broken row degrades to
defaults instead of failing the page.
"""

import datetime
from typing import Any, Iterable, List, Optional, Tuple, Union

from src.errors import MalformedPayloadError
from src.logging_setup import get_logger
from src.models import DEFAULT_CATEGORY, PLACEHOLDER, ExpenseRecord

logger = get_logger(__name__)

DISPLAY_DATE_FORMAT = "%d-%m-%y"

_EXPENSE_PATH = ("properties", "Expense", "title", 0, "text", "content")
_AMOUNT_PATH = ("properties", "Amount", "number")
_DATE_PATH = ("properties", "Date", "date", "start")
_CATEGORY_PATH = ("properties", "Category", "select", "name")


def _dig(obj: Any, *path: Union[str, int]) -> Any:
    """Follow dict keys / list indexes; None as soon as a step is missing."""
    for step in path:
        if isinstance(step, int):
            if not isinstance(obj, list) or len(obj) <= step:
                return None
        elif not isinstance(obj, dict):
            return None
        obj = obj[step] if isinstance(step, int) else obj.get(step)
        if obj is None:
            return None
    return obj


def coerce(value: Any, expected: Union[type, Tuple[type, ...]], default: Any) -> Any:
    """
    Return `value` when it is a non-empty instance of `expected`, else `default`.

    Booleans are never accepted as numbers, and blank strings count as empty.
    """
    if isinstance(value, bool) and bool not in _as_tuple(expected):
        return default
    if not isinstance(value, expected):
        return default
    if isinstance(value, str) and not value.strip():
        return default
    return value


def _as_tuple(expected) -> Tuple[type, ...]:
    return expected if isinstance(expected, tuple) else (expected,)


def _coerce_amount(value: Any) -> float:
    amount = coerce(value, (int, float), 0)
    # NaN and negative amounts are treated as malformed
    if amount != amount or amount < 0:
        return 0
    return amount


def format_date(raw: Optional[Any]) -> str:
    """
    Convert an ISO date or datetime string to "dd-mm-yy".

    Returns PLACEHOLDER for None, empty, non-string or unparseable input; the
    calendar date is taken as written, without timezone conversion.
    """
    if not isinstance(raw, str):
        return PLACEHOLDER
    text = raw.strip()
    if not text or text == PLACEHOLDER:
        return PLACEHOLDER
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.datetime.fromisoformat(text)
    except ValueError:
        return PLACEHOLDER
    return parsed.strftime(DISPLAY_DATE_FORMAT)


def normalize_row(row: Any) -> ExpenseRecord:
    """Build one ExpenseRecord from a raw row, substituting per-field defaults."""
    return ExpenseRecord(
        expense=coerce(_dig(row, *_EXPENSE_PATH), str, PLACEHOLDER),
        amount=_coerce_amount(_dig(row, *_AMOUNT_PATH)),
        date=format_date(_dig(row, *_DATE_PATH)),
        category=coerce(_dig(row, *_CATEGORY_PATH), str, DEFAULT_CATEGORY),
    )


def results_of(raw_page: Any) -> List[Any]:
    """Return the `results` list of a page or raise MalformedPayloadError."""
    if not isinstance(raw_page, dict):
        raise MalformedPayloadError(f"expected a JSON object, got {type(raw_page).__name__}")
    results = raw_page.get("results")
    if not isinstance(results, list):
        raise MalformedPayloadError("payload has no 'results' list")
    return results


def normalize(raw_page: Any) -> List[ExpenseRecord]:
    """
    Normalize every row of a page, one ExpenseRecord per raw row.

    Individual rows never fail; only a page without a `results` list raises.
    """
    results = results_of(raw_page)
    records = [normalize_row(row) for row in results]
    broken = sum(1 for row in results if not isinstance(row, dict))
    if broken:
        logger.warning("Normalized %d non-object rows to default records", broken)
    return records


def combine(pages: Iterable[List[ExpenseRecord]]) -> List[ExpenseRecord]:
    """Concatenate already-normalized pages in source order (no dedup)."""
    combined: List[ExpenseRecord] = []
    for page in pages:
        combined.extend(page)
    return combined
