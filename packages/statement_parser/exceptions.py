class StatementError(Exception):
    """Base class for statement parsing errors."""


class UnsupportedStatementError(StatementError):
    """The attachment does not match any known statement format."""

    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(f"Unsupported statement file: {filename}")


class StatementParseError(StatementError):
    """A statement row could not be normalized into a transaction."""

    def __init__(self, message: str, row_number: int = 0):
        self.row_number = row_number
        if row_number:
            message = f"Row {row_number}: {message}"
        super().__init__(message)


class InvalidTimestampError(ValueError):
    """A row's date/time fields do not form a readable timestamp."""
