"""Destination for parsed statement transactions.

Nothing downstream consumes the transactions yet. ``TransactionSink`` is
the seam where a persistence or notification step plugs in; the default
implementation only records what it received.
"""

from typing import Protocol, Sequence

import structlog

from packages.statement_parser import Transaction

logger = structlog.get_logger()


class TransactionSink(Protocol):
    def handle(self, transactions: Sequence[Transaction], *, source_filename: str) -> None: ...


class LoggingTransactionSink:
    """Default sink: logs the batch size and discards the transactions."""

    def handle(self, transactions: Sequence[Transaction], *, source_filename: str) -> None:
        logger.info("transactions_processed", count=len(transactions), filename=source_filename)


def get_transaction_sink() -> TransactionSink:
    return LoggingTransactionSink()
