"""
models.py - Data model definitions

This file defines the ExpenseRecord value type shown by the viewer and the
LoginResult returned by the session layer. Records are frozen once built: the
normalizer produces them, everything downstream only reads them.
"""

from dataclasses import dataclass
from typing import Dict, Optional

# shown in place of missing text and missing/unparseable dates
PLACEHOLDER = "—"
DEFAULT_CATEGORY = "Other"
ALL_CATEGORIES = "All"


@dataclass(frozen=True)
class ExpenseRecord:
    """
    A single expense row as displayed to the user.

    Fields:
      - expense: free-text description (PLACEHOLDER when absent)
      - amount: non-negative monetary value (0 when absent)
      - date: display date "dd-mm-yy" (PLACEHOLDER when absent or unparseable)
      - category: category label (DEFAULT_CATEGORY when absent)
    """
    expense: str = PLACEHOLDER
    amount: float = 0.0
    date: str = PLACEHOLDER
    category: str = DEFAULT_CATEGORY

    @property
    def has_date(self) -> bool:
        return self.date != PLACEHOLDER

    def to_dict(self) -> Dict:
        """Plain dict used to build DataFrames for display."""
        return {
            "expense": self.expense,
            "amount": self.amount,
            "date": self.date,
            "category": self.category,
        }


@dataclass(frozen=True)
class LoginResult:
    """Outcome of a login attempt; error carries the message shown inline."""
    success: bool
    error: Optional[str] = None
