"""
Budget Statement Parser

Normalizes Capitec and Discovery Bank CSV exports into transactions.
"""

__version__ = "0.1.0"

from .exceptions import StatementError, StatementParseError, UnsupportedStatementError
from .formats import detect_format, parse_statement
from .models import StatementFormat, Transaction, sort_by_date_descending

__all__ = [
    "StatementError",
    "StatementParseError",
    "UnsupportedStatementError",
    "StatementFormat",
    "Transaction",
    "detect_format",
    "parse_statement",
    "sort_by_date_descending",
]
