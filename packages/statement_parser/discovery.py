"""Discovery Bank statement parser.

Discovery exports a single signed ``Amount`` column plus separate value
date and time columns. The export is not always well formed, so rows
that cannot be read are dropped rather than failing the file.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List

import pandas as pd

from .exceptions import StatementParseError
from .models import EXPENSE, INCOME, StatementFormat, Transaction
from .normalization import cell, normalize_amount, parse_local_datetime, read_records

logger = logging.getLogger(__name__)

PREPAID_ELECTRICITY = "Prepaid Electricity"


def parse_discovery_record(record: Dict[str, Any]) -> Transaction:
    """Normalize one Discovery row. The sign of ``Amount`` decides the type."""
    raw_amount = cell(record, "Amount").strip()
    if not raw_amount:
        raise ValueError("Row has no Amount value")

    transaction_type = EXPENSE if raw_amount.startswith("-") else INCOME

    value_date = cell(record, "Value Date").strip()
    value_time = cell(record, "Value Time").strip()
    timestamp = parse_local_datetime(f"{value_date}T{value_time}")

    description = cell(record, "Description")
    if cell(record, "Type") == PREPAID_ELECTRICITY:
        description = f"{PREPAID_ELECTRICITY} {description}"

    return Transaction(
        datetime=timestamp,
        description=description,
        amount=normalize_amount(raw_amount, transaction_type),
        type=transaction_type,
        source=StatementFormat.DISCOVERY.value,
    )


def parse_discovery_statement(content: str, cutoff: datetime) -> List[Transaction]:
    """Parse a Discovery CSV export, keeping transactions after ``cutoff``."""
    try:
        records = read_records(content, lenient=True)
    except pd.errors.ParserError as e:
        raise StatementParseError(f"Unreadable Discovery CSV: {e}") from e

    transactions = []
    skipped = 0
    for index, record in enumerate(records):
        try:
            trx = parse_discovery_record(record)
        except ValueError as e:
            skipped += 1
            logger.warning(f"Skipping malformed Discovery row {index + 2}: {e}")
            continue
        if trx.datetime > cutoff:
            transactions.append(trx)

    if skipped:
        logger.info(f"Dropped {skipped} malformed Discovery rows")
    logger.info(f"Processed Discovery file, found {len(transactions)} transactions")
    return transactions
