"""Statement format detection and parser dispatch.

Banks are told apart by the filename their export uses, e.g.
``account_statement_2024-07.csv`` for Capitec and
``DiscoveryBank_Transactions.csv`` for Discovery.
"""

from datetime import datetime
from typing import Callable, Dict, List, Tuple

from .capitec import parse_capitec_statement
from .discovery import parse_discovery_statement
from .exceptions import UnsupportedStatementError
from .models import StatementFormat, Transaction

StatementParser = Callable[[str, datetime], List[Transaction]]

FILENAME_PREFIXES: Tuple[Tuple[str, StatementFormat], ...] = (
    ("account_statement", StatementFormat.CAPITEC),
    ("DiscoveryBank", StatementFormat.DISCOVERY),
)

PARSERS: Dict[StatementFormat, StatementParser] = {
    StatementFormat.CAPITEC: parse_capitec_statement,
    StatementFormat.DISCOVERY: parse_discovery_statement,
}


def detect_format(filename: str) -> StatementFormat:
    """Match a filename against the known statement exports.

    Raises:
        UnsupportedStatementError: if no known prefix matches.
    """
    for prefix, statement_format in FILENAME_PREFIXES:
        if filename.startswith(prefix):
            return statement_format
    raise UnsupportedStatementError(filename)


def parse_statement(
    statement_format: StatementFormat, content: str, cutoff: datetime
) -> List[Transaction]:
    """Parse ``content`` with the parser registered for ``statement_format``."""
    return PARSERS[statement_format](content, cutoff)
