"""Normalized transaction model shared by every statement format."""

from dataclasses import dataclass, asdict
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional


INCOME = "income"
EXPENSE = "expense"


class StatementFormat(str, Enum):
    """Known bank statement formats, keyed by the bank that exports them."""

    CAPITEC = "capitec"
    DISCOVERY = "discovery"


@dataclass(frozen=True)
class Transaction:
    """A single normalized bank transaction.

    ``amount`` is signed: income is never negative, expense never positive.
    """

    datetime: datetime
    description: str
    amount: int
    type: str
    source: str
    category: Optional[str] = None

    def __post_init__(self):
        if self.type not in (INCOME, EXPENSE):
            raise ValueError(f"Unknown transaction type: {self.type!r}")
        if self.type == INCOME and self.amount < 0:
            raise ValueError("Income transactions cannot have a negative amount")
        if self.type == EXPENSE and self.amount > 0:
            raise ValueError("Expense transactions cannot have a positive amount")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        data = asdict(self)
        data["datetime"] = self.datetime.isoformat()
        return data


def sort_by_date_descending(transactions: Iterable[Transaction]) -> List[Transaction]:
    """Return a new list ordered newest first."""
    return sorted(transactions, key=lambda trx: trx.datetime, reverse=True)
