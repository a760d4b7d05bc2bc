"""Custom exceptions for the reconciliation application."""

from typing import Optional


class ReconciliationError(Exception):
    """Base exception for reconciliation errors."""

    pass


class CsvParseError(ReconciliationError):
    """Error reading or decoding a transaction CSV file."""

    pass


class ConfigurationError(ReconciliationError):
    """Error in configuration."""

    pass


class ValidationError(ReconciliationError):
    """A record collection failed the minimum schema check."""

    def __init__(
        self,
        message: str,
        kind: str,
        row_numbers: Optional[tuple[int, ...]] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.row_numbers = row_numbers or ()


class PrecheckNotRunError(ReconciliationError):
    """Reconciliation was invoked on a collection that was never validated."""

    pass


class MissingCollectionError(ReconciliationError):
    """Reconciliation was requested before both sides were uploaded."""

    pass


class ReportGenerationError(ReconciliationError):
    """Error writing an export or report."""

    pass
