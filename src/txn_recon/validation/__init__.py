"""Record validation gate in front of the reconciliation engine."""

from .validator import (
    REQUIRED_FIELDS,
    ValidationErrorKind,
    ValidationFailure,
    validate,
)

__all__ = [
    "REQUIRED_FIELDS",
    "ValidationErrorKind",
    "ValidationFailure",
    "validate",
]
