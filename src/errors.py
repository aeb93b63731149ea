from typing import Optional


class LedgerError(Exception):
    """Base class for errors that abort a replay run."""


class RecordParseError(LedgerError):
    """An input row could not be turned into a transaction."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.message = message
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
