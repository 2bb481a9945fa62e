"""
Custom exceptions for journal and ledger processing.
Parse errors are block-scoped: one error aborts one block, never the document.
"""
from typing import Any, Dict, Optional


class AccountingJournalException(Exception):
    """Base exception for all accounting journal errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize exception.

        Args:
            message: Error message
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ParseError(AccountingJournalException):
    """Raised when a journal or ledger block cannot be parsed."""
    pass


class MalformedHeader(ParseError):
    """Raised when the journal header lacks a date or a description."""
    pass


class MalformedEntrySeparator(ParseError):
    """Raised when a journal entry does not have exactly one debit and one credit section."""
    pass


class MalformedLedgerSeparator(ParseError):
    """Raised when a ledger block does not have exactly one debit and one credit section."""
    pass


class MalformedLine(ParseError):
    """Raised when a journal line is missing its account code or amount."""
    pass


class InvalidAmount(ParseError):
    """Raised when an amount is not a number under either decimal convention."""

    def __init__(self, raw: str, line: Optional[str] = None):
        self.raw = raw
        where = f" in entry: {line}" if line is not None else ""
        details: Dict[str, Any] = {"amount": raw}
        if line is not None:
            details["line"] = line
        super().__init__(
            f'Invalid amount "{raw}"{where}. Please ensure that the amount is a valid number '
            "using a period (.) or a comma (,) as the decimal separator, "
            "and do not use thousands separators.",
            details=details
        )


class NegativeAmount(ParseError):
    """Raised when a journal line amount is negative."""
    pass


class MissingAccount(ParseError):
    """Raised when a ledger block has no account code on its first line."""
    pass


class AccountEquivalenceLoadError(AccountingJournalException):
    """Raised when the account equivalence CSV cannot be read or is malformed."""
    pass


class ValidationError(AccountingJournalException):
    """Raised when request data validation fails."""
    pass


class ExportError(AccountingJournalException):
    """Raised when table export fails."""
    pass


class ConfigurationError(AccountingJournalException):
    """Raised when configuration is invalid."""
    pass


class DataNotFoundError(AccountingJournalException):
    """Raised when required data is not found."""
    pass
