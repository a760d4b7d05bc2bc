"""Matching engine and field comparison."""

from .comparison import AMOUNT_TOLERANCE, compare_records
from .engine import ReconciliationEngine, build_lookup, reconcile

__all__ = [
    "AMOUNT_TOLERANCE",
    "compare_records",
    "ReconciliationEngine",
    "build_lookup",
    "reconcile",
]
