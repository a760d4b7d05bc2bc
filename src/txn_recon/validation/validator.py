"""
Minimum-schema validation for transaction record collections.
Collections must pass here before they can be reconciled.
"""

from dataclasses import dataclass
from decimal import InvalidOperation
from enum import Enum
from typing import Any, Iterable, Mapping, Sequence, Union
import logging

from ..matching.comparison import to_decimal
from ..models.transaction import TransactionRecord, ValidatedCollection
from ..utils.exceptions import ValidationError

logger = logging.getLogger(__name__)

# Date is required and compared (see DESIGN.md)
REQUIRED_FIELDS: tuple[str, ...] = ("transaction_reference", "amount", "status", "date")


class ValidationErrorKind(Enum):
    """Why a collection was rejected."""

    EMPTY_COLLECTION = "EmptyCollection"
    MISSING_REQUIRED_FIELDS = "MissingRequiredFields"


@dataclass(frozen=True)
class ValidationFailure:
    """Structured validation failure returned instead of raising."""

    kind: ValidationErrorKind
    message: str
    row_numbers: tuple[int, ...] = ()

    def to_exception(self) -> ValidationError:
        return ValidationError(self.message, kind=self.kind.value, row_numbers=self.row_numbers)


def _is_missing(record: TransactionRecord, name: str) -> bool:
    value = record.get(name)
    if value is None:
        return True
    # A zero amount is a value; NaN, infinities and non-numbers are not
    if name == "amount":
        if isinstance(value, bool):
            return True
        try:
            return not to_decimal(value).is_finite()
        except (InvalidOperation, ValueError, TypeError):
            return True
    return value == ""


def _as_records(records: Sequence[Any]) -> Sequence[Any]:
    """Convert plain mappings to records; a sequence of records passes through as is."""
    if all(isinstance(record, TransactionRecord) for record in records):
        return records
    return tuple(
        TransactionRecord.from_mapping(record) if isinstance(record, Mapping) else record
        for record in records
    )


def validate(
    records: Sequence[Union[TransactionRecord, Mapping[str, Any]]],
    required_fields: Iterable[str] = REQUIRED_FIELDS,
    *,
    label: str = "records",
) -> Union[ValidatedCollection, ValidationFailure]:
    """
    Check that a record collection can be reconciled.

    Args:
        records: Parsed records from one side. Plain mappings are
            converted with ``TransactionRecord.from_mapping``
        required_fields: Field names every record must carry
        label: Name used in failure messages (e.g. "internal")

    Returns:
        The same sequence wrapped as a ValidatedCollection, or a
        ValidationFailure describing the first rule that failed
    """
    required = tuple(required_fields)

    if len(records) == 0:
        logger.warning(f"Validation failed for {label}: no records")
        return ValidationFailure(
            kind=ValidationErrorKind.EMPTY_COLLECTION,
            message=f"{label} file is empty",
        )

    records = _as_records(records)
    bad_rows = tuple(
        row_number
        for row_number, record in enumerate(records, start=1)
        if not isinstance(record, TransactionRecord)
        or any(_is_missing(record, name) for name in required)
    )
    if bad_rows:
        logger.warning(
            f"Validation failed for {label}: {len(bad_rows)} record(s) missing "
            f"required fields (first at row {bad_rows[0]})"
        )
        return ValidationFailure(
            kind=ValidationErrorKind.MISSING_REQUIRED_FIELDS,
            message=f"{label} file missing required fields: {', '.join(required)}",
            row_numbers=bad_rows,
        )

    logger.debug(f"Validated {len(records)} {label} records")
    return ValidatedCollection(records=records, label=label)
