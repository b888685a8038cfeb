import pytest

from helpers import raw_row
from src.errors import MalformedPayloadError
from src.models import PLACEHOLDER, ExpenseRecord
from src.normalizer import coerce, combine, format_date, normalize, normalize_row


@pytest.mark.parametrize("raw, expected", [
    ("2024-02-01", "01-02-24"),
    ("2023-12-31T23:30:00.000+05:30", "31-12-23"),
    ("2024-02-01T10:00:00Z", "01-02-24"),
    (" 2024-02-01 ", "01-02-24"),
])
def test_format_date_valid(raw, expected):
    assert format_date(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "   ", PLACEHOLDER, "not a date", "2024-13-01", 20240201, {}])
def test_format_date_unparseable_returns_placeholder(raw):
    assert format_date(raw) == PLACEHOLDER


def test_normalize_row_complete():
    rec = normalize_row(raw_row("Bus", 2, "2024-02-01", "Travel"))
    assert rec == ExpenseRecord(expense="Bus", amount=2, date="01-02-24", category="Travel")


def test_missing_amount_defaults_to_zero():
    row = raw_row()
    del row["properties"]["Amount"]
    assert normalize_row(row).amount == 0
    assert normalize_row(raw_row(amount=None)).amount == 0


@pytest.mark.parametrize("amount", ["12", True, -5, float("nan"), [1]])
def test_malformed_amount_defaults_to_zero(amount):
    assert normalize_row(raw_row(amount=amount)).amount == 0


def test_missing_fields_use_defaults():
    rec = normalize_row({"properties": {}})
    assert rec == ExpenseRecord(expense=PLACEHOLDER, amount=0, date=PLACEHOLDER, category="Other")


def test_partially_broken_nesting_uses_defaults():
    row = {
        "properties": {
            "Expense": {"title": []},
            "Amount": {"number": 7},
            "Date": {"date": None},
            "Category": {"select": "Food"},
        }
    }
    rec = normalize_row(row)
    assert rec.expense == PLACEHOLDER
    assert rec.amount == 7
    assert rec.date == PLACEHOLDER
    assert rec.category == "Other"


def test_blank_text_counts_as_missing():
    rec = normalize_row(raw_row(expense="  ", category=""))
    assert rec.expense == PLACEHOLDER
    assert rec.category == "Other"


def test_normalize_keeps_one_record_per_row():
    page = {"results": [raw_row("A"), "garbage", None, {}, raw_row("B")]}
    records = normalize(page)
    assert len(records) == 5
    assert records[0].expense == "A"
    assert records[4].expense == "B"
    assert all(r == ExpenseRecord() for r in records[1:4])


def test_normalize_empty_page():
    assert normalize({"results": []}) == []


@pytest.mark.parametrize("page", [None, [], {}, {"results": None}, {"results": {"a": 1}}])
def test_normalize_rejects_page_without_results(page):
    with pytest.raises(MalformedPayloadError):
        normalize(page)


def test_coerce():
    assert coerce("x", str, "d") == "x"
    assert coerce(None, str, "d") == "d"
    assert coerce(3, (int, float), 0) == 3
    assert coerce(False, (int, float), 0) == 0


def test_combine_concatenates_in_order_and_keeps_duplicates():
    a = [ExpenseRecord("Coffee", 3.5, "01-02-24", "Food")]
    b = [ExpenseRecord("Coffee", 3.5, "01-02-24", "Food"), ExpenseRecord("Bus", 2, PLACEHOLDER, "Travel")]
    assert combine([a, b]) == a + b
    assert combine([]) == []
