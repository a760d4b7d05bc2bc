"""
Field comparison between an internal record and its provider counterpart.
Each check contributes at most one human-readable difference entry.
"""

from decimal import Decimal
from typing import Callable, Optional

from ..models.transaction import Amount, TransactionRecord

# Fixed policy: not configurable, independent of currency and magnitude
AMOUNT_TOLERANCE = Decimal("0.01")


def to_decimal(amount: Amount) -> Decimal:
    """
    Convert a record amount to Decimal via its string form.

    Going through ``str`` keeps float inputs such as ``100.01`` exact, so
    a difference of exactly one cent stays inside the tolerance.
    """
    if isinstance(amount, Decimal):
        return amount
    return Decimal(str(amount))


def compare_amount(internal: TransactionRecord, provider: TransactionRecord) -> Optional[str]:
    """Amount differs when the absolute gap exceeds the tolerance."""
    variance = abs(to_decimal(internal.amount) - to_decimal(provider.amount))
    if variance > AMOUNT_TOLERANCE:
        return f"Amount: {internal.amount} vs {provider.amount}"
    return None


def compare_status(internal: TransactionRecord, provider: TransactionRecord) -> Optional[str]:
    """Exact, case-sensitive status comparison."""
    if internal.status != provider.status:
        return f"Status: {internal.status} vs {provider.status}"
    return None


def compare_date(internal: TransactionRecord, provider: TransactionRecord) -> Optional[str]:
    """Raw string comparison; no parsing or normalisation."""
    if internal.date != provider.date:
        return f"Date: {internal.date} vs {provider.date}"
    return None


# Order here is the order differences are reported in
FIELD_CHECKS: tuple[Callable[[TransactionRecord, TransactionRecord], Optional[str]], ...] = (
    compare_amount,
    compare_status,
    compare_date,
)


def compare_records(internal: TransactionRecord, provider: TransactionRecord) -> list[str]:
    """
    Run every field check and collect the differences.

    Args:
        internal: Record from the internal side
        provider: Record from the provider side with the same reference

    Returns:
        Difference descriptions in Amount, Status, Date order (empty when
        the pair agrees)
    """
    differences: list[str] = []
    for check in FIELD_CHECKS:
        difference = check(internal, provider)
        if difference:
            differences.append(difference)
    return differences


def amount_variance(internal: TransactionRecord, provider: TransactionRecord) -> Decimal:
    """Absolute amount gap between two records."""
    return abs(to_decimal(internal.amount) - to_decimal(provider.amount))
