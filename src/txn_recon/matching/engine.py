"""
Reference-keyed reconciliation engine.
Partitions two validated collections into matched, mismatched,
internal-only and provider-only records.
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional
import logging

from ..models.transaction import (
    Mismatch,
    ReconciliationResult,
    ReconciliationSummary,
    TransactionRecord,
    ValidatedCollection,
)
from ..config import ReconConfig
from ..utils.exceptions import PrecheckNotRunError
from .comparison import amount_variance, compare_records, to_decimal

logger = logging.getLogger(__name__)


def build_lookup(records: Iterable[TransactionRecord]) -> dict[str, TransactionRecord]:
    """
    Index records by trimmed reference.

    References are expected to be unique per side; when they are not,
    the later record overwrites the earlier one.
    """
    lookup: dict[str, TransactionRecord] = {}
    for record in records:
        lookup[record.reference_key] = record
    return lookup


def _require_validated(collection: object, side: str) -> ValidatedCollection:
    if not isinstance(collection, ValidatedCollection):
        raise PrecheckNotRunError(
            f"{side} collection must be validated before reconciliation "
            f"(got {type(collection).__name__})"
        )
    return collection


class ReconciliationEngine:
    """
    Runs reconciliations and summarises their results.

    The engine holds configuration only; every call builds its own lookups
    and returns a fresh result, so one instance can be reused freely.
    """

    def __init__(self, config: Optional[ReconConfig] = None):
        """
        Initialize the reconciliation engine.

        Args:
            config: Application configuration (defaults if omitted)
        """
        self.config = config or ReconConfig()

    def reconcile(
        self,
        internal: ValidatedCollection,
        provider: ValidatedCollection,
    ) -> ReconciliationResult:
        """
        Reconcile internal records against provider records.

        Args:
            internal: Validated internal collection
            provider: Validated provider collection

        Returns:
            Four-way reconciliation result

        Raises:
            PrecheckNotRunError: If either input skipped validation
        """
        internal = _require_validated(internal, "internal")
        provider = _require_validated(provider, "provider")

        start_time = datetime.now()
        logger.info(
            f"Starting reconciliation: {len(internal)} internal records, "
            f"{len(provider)} provider records"
        )

        internal_lookup = build_lookup(internal)
        provider_lookup = build_lookup(provider)

        matched: list[TransactionRecord] = []
        mismatched: list[Mismatch] = []
        internal_only: list[TransactionRecord] = []
        provider_only: list[TransactionRecord] = []

        for internal_record in internal:
            provider_record = provider_lookup.get(internal_record.reference_key)
            if provider_record is None:
                internal_only.append(internal_record)
                continue

            differences = compare_records(internal_record, provider_record)
            if differences:
                mismatched.append(
                    Mismatch(
                        internal=internal_record,
                        provider=provider_record,
                        differences=tuple(differences),
                    )
                )
            else:
                matched.append(internal_record)

        # Provider records with an internal counterpart were classified above
        for provider_record in provider:
            if provider_record.reference_key not in internal_lookup:
                provider_only.append(provider_record)

        result = ReconciliationResult(
            matched=tuple(matched),
            mismatched=tuple(mismatched),
            internal_only=tuple(internal_only),
            provider_only=tuple(provider_only),
        )

        elapsed = (datetime.now() - start_time).total_seconds()
        logger.info(
            f"Reconciliation complete in {elapsed:.2f}s: {len(matched)} matched, "
            f"{len(mismatched)} mismatched, {len(internal_only)} internal-only, "
            f"{len(provider_only)} provider-only"
        )

        return result

    def generate_summary(
        self,
        internal: ValidatedCollection,
        provider: ValidatedCollection,
        result: ReconciliationResult,
        internal_filename: str,
        provider_filename: str,
        processing_time: float,
    ) -> ReconciliationSummary:
        """
        Generate a summary of a reconciliation run.

        Args:
            internal: Internal collection that was reconciled
            provider: Provider collection that was reconciled
            result: Result of the run
            internal_filename: Name of the internal file
            provider_filename: Name of the provider file
            processing_time: Time taken in seconds

        Returns:
            Reconciliation summary object
        """
        internal_total = sum((to_decimal(r.amount) for r in internal), Decimal("0"))
        provider_total = sum((to_decimal(r.amount) for r in provider), Decimal("0"))

        total_variance = sum(
            (amount_variance(m.internal, m.provider) for m in result.mismatched),
            Decimal("0"),
        )

        field_counts: dict[str, int] = {}
        for mismatch in result.mismatched:
            for field_name in mismatch.differing_fields:
                field_counts[field_name] = field_counts.get(field_name, 0) + 1

        return ReconciliationSummary(
            internal_filename=internal_filename,
            provider_filename=provider_filename,
            reconciliation_date=datetime.now(),
            total_internal_records=len(internal),
            total_provider_records=len(provider),
            matched_count=len(result.matched),
            mismatched_count=len(result.mismatched),
            internal_only_count=len(result.internal_only),
            provider_only_count=len(result.provider_only),
            internal_total_amount=internal_total,
            provider_total_amount=provider_total,
            total_amount_variance=total_variance,
            mismatches_by_field=field_counts,
            processing_time_seconds=processing_time,
            config_file_used=self.config.config_file_path,
        )


def reconcile(
    internal: ValidatedCollection,
    provider: ValidatedCollection,
) -> ReconciliationResult:
    """Reconcile with a default-configured engine."""
    return ReconciliationEngine().reconcile(internal, provider)
