"""Data models for transaction records and reconciliation results."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Iterator, Mapping, Optional, Sequence, Union

Amount = Union[Decimal, int, float]

# Columns with a dedicated attribute on TransactionRecord, in export order
CANONICAL_FIELDS = (
    "transaction_reference",
    "amount",
    "status",
    "date",
    "counterparty",
    "currency",
)
OPTIONAL_FIELDS = ("counterparty", "currency")


class RecordSource(Enum):
    """Which side of the reconciliation a collection came from."""

    INTERNAL = "internal"
    PROVIDER = "provider"


@dataclass(frozen=True)
class TransactionRecord:
    """
    One financial transaction as reported by one side.

    Recognised fields are typed attributes; any other column from the
    source file is kept untouched in ``extra`` so it can be re-exported.
    Required fields are optional here because ingestion may produce
    incomplete rows; the validator decides whether a record may be
    reconciled.
    """

    transaction_reference: Optional[str] = None
    amount: Optional[Amount] = None
    status: Optional[str] = None
    date: Optional[str] = None
    counterparty: Optional[str] = None
    currency: Optional[str] = None

    # Unrecognised columns, in source column order
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def reference_key(self) -> str:
        """Trimmed reference used as the matching key."""
        if self.transaction_reference is None:
            return ""
        return str(self.transaction_reference).strip()

    def get(self, name: str, default: Any = None) -> Any:
        """Look up a field by column name, canonical or extra."""
        if name in CANONICAL_FIELDS:
            value = getattr(self, name)
            return default if value is None else value
        return self.extra.get(name, default)

    def to_dict(self) -> dict[str, Any]:
        """Flatten to a single row: canonical fields first, then extras."""
        row: dict[str, Any] = {}
        for name in CANONICAL_FIELDS:
            value = getattr(self, name)
            if name in OPTIONAL_FIELDS and value is None:
                continue
            row[name] = value
        row.update(self.extra)
        return row

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "TransactionRecord":
        """Build a record from a flat field mapping, keeping unknown keys."""
        known = {name: row.get(name) for name in CANONICAL_FIELDS if name in row}
        extra = {key: value for key, value in row.items() if key not in CANONICAL_FIELDS}
        return cls(**known, extra=extra)


@dataclass(frozen=True)
class UploadedCollection:
    """A named set of records produced by one file ingestion."""

    name: str
    source: RecordSource
    records: tuple[TransactionRecord, ...]

    def __len__(self) -> int:
        return len(self.records)


@dataclass(frozen=True)
class ValidatedCollection:
    """
    A record sequence that has passed validation.

    Only ``validate`` should construct these; the engine refuses anything
    else. The wrapped sequence is the caller's own, not a copy.
    """

    records: Sequence[TransactionRecord]
    label: str = "records"

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[TransactionRecord]:
        return iter(self.records)


@dataclass(frozen=True)
class Mismatch:
    """A reference present on both sides whose compared fields disagree."""

    internal: TransactionRecord
    provider: TransactionRecord
    differences: tuple[str, ...]

    @property
    def differing_fields(self) -> tuple[str, ...]:
        """Field labels of the differences, e.g. ("Amount", "Status")."""
        return tuple(diff.split(":", 1)[0] for diff in self.differences)

    def to_export_row(self, separator: str = "; ") -> dict[str, Any]:
        """Internal record's fields plus a single joined differences column."""
        row = self.internal.to_dict()
        row["differences"] = separator.join(self.differences)
        return row


@dataclass(frozen=True)
class ReconciliationResult:
    """Four-way partition produced by a single reconciliation run."""

    matched: tuple[TransactionRecord, ...] = ()
    mismatched: tuple[Mismatch, ...] = ()
    internal_only: tuple[TransactionRecord, ...] = ()
    provider_only: tuple[TransactionRecord, ...] = ()

    @property
    def counts(self) -> dict[str, int]:
        return {
            "matched": len(self.matched),
            "mismatched": len(self.mismatched),
            "internal_only": len(self.internal_only),
            "provider_only": len(self.provider_only),
        }

    @property
    def is_fully_reconciled(self) -> bool:
        """True when every record found an agreeing counterpart."""
        return not (self.mismatched or self.internal_only or self.provider_only)


@dataclass
class ReconciliationSummary:
    """Summary statistics of a reconciliation run."""

    # File information
    internal_filename: str
    provider_filename: str
    reconciliation_date: datetime

    # Record counts
    total_internal_records: int
    total_provider_records: int

    # Outcome counts
    matched_count: int
    mismatched_count: int
    internal_only_count: int
    provider_only_count: int

    # Amount totals
    internal_total_amount: Decimal
    provider_total_amount: Decimal
    total_amount_variance: Decimal

    # Mismatch breakdown by field ("Amount", "Status", "Date")
    mismatches_by_field: dict[str, int] = field(default_factory=dict)

    # Processing metadata
    processing_time_seconds: float = 0.0
    config_file_used: Optional[str] = None

    @property
    def match_rate_internal(self) -> float:
        """Percentage of internal records that matched outright."""
        if self.total_internal_records == 0:
            return 0.0
        return (self.matched_count / self.total_internal_records) * 100

    @property
    def match_rate_provider(self) -> float:
        """Percentage of provider records that matched outright."""
        if self.total_provider_records == 0:
            return 0.0
        return (self.matched_count / self.total_provider_records) * 100

    @property
    def net_amount_difference(self) -> Decimal:
        """Internal total minus provider total."""
        return self.internal_total_amount - self.provider_total_amount
