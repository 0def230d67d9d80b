"""Field-level helpers used by the per-bank parsers.

Both banks export amounts as display strings ("R1,234.56", "-45.00").
``normalize_amount`` strips them down to a bare digit string and reads it
as an integer magnitude, so "R1,234.56" becomes 123456. The unit is
whatever is left after the separators are removed; callers must not
reinterpret it as cents or whole rands.
"""

from datetime import datetime
from io import StringIO
from typing import Any, Dict, List

import pandas as pd

from .exceptions import InvalidTimestampError
from .models import INCOME

# Removal order matters and mirrors the statement exports.
AMOUNT_STRIP_TOKENS = ("R", ",", ".", "-", " ")


def strip_amount(value: str) -> str:
    """Remove currency, separator and sign markers from an amount string."""
    stripped = value
    for token in AMOUNT_STRIP_TOKENS:
        stripped = stripped.replace(token, "")
    return stripped


def normalize_amount(value: str, transaction_type: str) -> int:
    """Parse an amount string into a signed integer.

    Raises:
        ValueError: if anything other than digits remains after stripping.
    """
    digits = strip_amount(value)
    if not digits:
        magnitude = 0
    elif digits.isdigit():
        magnitude = int(digits)
    else:
        raise ValueError(f"Unparseable amount: {value!r}")
    return magnitude if transaction_type == INCOME else -magnitude


def parse_local_datetime(value: str) -> datetime:
    """Parse an ISO-style timestamp into a naive local datetime.

    A space between date and time is accepted. Timestamps carrying an
    offset are converted to the local zone and made naive, so they compare
    against the naive cutoff.

    Raises:
        InvalidTimestampError: if the value is empty or not ISO-like.
    """
    text = value.strip()
    if not text:
        raise InvalidTimestampError("Empty timestamp")
    try:
        parsed = datetime.fromisoformat(text.replace(" ", "T", 1))
    except ValueError as e:
        raise InvalidTimestampError(f"Unparseable timestamp: {value!r}") from e
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def cell(record: Dict[str, Any], column: str) -> str:
    """Read a CSV cell as a string, treating missing values as empty."""
    value = record.get(column)
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    return str(value)


def read_records(content: str, lenient: bool = False) -> List[Dict[str, Any]]:
    """Parse CSV text with a header row into a list of row dictionaries.

    Every value is read as a string. In lenient mode rows with too many
    fields are skipped instead of failing the whole file.
    """
    options: Dict[str, Any] = {
        "dtype": str,
        "keep_default_na": False,
        "skip_blank_lines": True,
    }
    if lenient:
        options.update(engine="python", on_bad_lines="skip")

    try:
        df = pd.read_csv(StringIO(content), **options)
    except pd.errors.EmptyDataError:
        return []
    df.columns = [str(c).strip() for c in df.columns]
    return df.to_dict(orient="records")
