"""Capitec account statement parser.

Capitec exports one row per transaction with separate ``Money In``,
``Money Out`` and ``Fee`` columns, at most one of which is populated.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List

import pandas as pd

from .exceptions import InvalidTimestampError, StatementParseError
from .models import EXPENSE, INCOME, StatementFormat, Transaction
from .normalization import cell, normalize_amount, parse_local_datetime, read_records

logger = logging.getLogger(__name__)

PENDING_MARKER = "(Pending)"


def parse_capitec_record(record: Dict[str, Any]) -> Transaction:
    """Normalize one Capitec row.

    Amount precedence is Money In (income), then Money Out, then Fee
    (both expenses). A row with none of the three is a zero expense.
    """
    description = cell(record, "Description").replace(PENDING_MARKER, "").strip()

    money_in = cell(record, "Money In")
    money_out = cell(record, "Money Out")
    fee = cell(record, "Fee")

    if money_in:
        transaction_type, raw_amount = INCOME, money_in
    elif money_out:
        transaction_type, raw_amount = EXPENSE, money_out
    else:
        transaction_type, raw_amount = EXPENSE, fee

    return Transaction(
        datetime=parse_local_datetime(cell(record, "Transaction Date")),
        description=description,
        amount=normalize_amount(raw_amount, transaction_type),
        type=transaction_type,
        source=StatementFormat.CAPITEC.value,
    )


def parse_capitec_statement(content: str, cutoff: datetime) -> List[Transaction]:
    """Parse a Capitec CSV export, keeping transactions after ``cutoff``.

    Rows without a readable Transaction Date can never be after the cutoff
    and are dropped along with the old ones. Any other malformed row aborts
    the whole file.

    Raises:
        StatementParseError: if the CSV structure or an amount is malformed.
    """
    try:
        records = read_records(content)
    except pd.errors.ParserError as e:
        raise StatementParseError(f"Malformed Capitec CSV: {e}") from e

    transactions = []
    for index, record in enumerate(records):
        # +2: header row and 1-based numbering
        row_number = index + 2
        try:
            trx = parse_capitec_record(record)
        except InvalidTimestampError as e:
            logger.debug(f"Dropping Capitec row {row_number}: {e}")
            continue
        except ValueError as e:
            raise StatementParseError(str(e), row_number=row_number) from e
        if trx.datetime > cutoff:
            transactions.append(trx)

    logger.info(f"Processed Capitec file, found {len(transactions)} transactions")
    return transactions
