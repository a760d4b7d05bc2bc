"""Data models for reconciliation."""

from .transaction import (
    CANONICAL_FIELDS,
    TransactionRecord,
    RecordSource,
    UploadedCollection,
    ValidatedCollection,
    Mismatch,
    ReconciliationResult,
    ReconciliationSummary,
)

__all__ = [
    "CANONICAL_FIELDS",
    "TransactionRecord",
    "RecordSource",
    "UploadedCollection",
    "ValidatedCollection",
    "Mismatch",
    "ReconciliationResult",
    "ReconciliationSummary",
]
