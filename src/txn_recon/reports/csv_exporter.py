"""
CSV export of reconciliation result lists.
One file per outcome class; mismatches are flattened to a single row each.
"""

from decimal import Decimal
from pathlib import Path
from typing import Any, Iterable, Optional
import logging

import pandas as pd

from ..models.transaction import (
    Mismatch,
    ReconciliationResult,
    TransactionRecord,
)
from ..config import ReconConfig
from ..utils.exceptions import ReportGenerationError

logger = logging.getLogger(__name__)

BASE_COLUMNS = ["transaction_reference", "amount", "status", "date"]


def rows_for(records: Iterable[TransactionRecord]) -> list[dict[str, Any]]:
    """Flatten records to export rows, extra fields included."""
    return [record.to_dict() for record in records]


def mismatch_rows(mismatches: Iterable[Mismatch], separator: str = "; ") -> list[dict[str, Any]]:
    """Internal side of each mismatch plus a joined ``differences`` column."""
    return [mismatch.to_export_row(separator) for mismatch in mismatches]


def format_currency(amount: Any, currency_code: str = "KES") -> str:
    """Display formatting for terminal previews, e.g. ``KES 1,250.00``."""
    if amount is None:
        return "-"
    try:
        value = Decimal(str(amount))
    except ArithmeticError:
        return str(amount)
    return f"{currency_code} {value:,.2f}"


class CsvExporter:
    """Writes each result list to its own CSV file."""

    def __init__(self, config: ReconConfig):
        self.config = config
        self.csv_config = config.output.csv

    def export_result(
        self, result: ReconciliationResult, output_dir: Path
    ) -> dict[str, Path]:
        """
        Write all four outcome lists.

        Args:
            result: Reconciliation result
            output_dir: Directory to write into (created if needed)

        Returns:
            Mapping of outcome class to the written file path
        """
        separator = self.csv_config.differences_separator
        exports = {
            "matched": (rows_for(result.matched), self.csv_config.matched, None),
            "mismatched": (
                mismatch_rows(result.mismatched, separator),
                self.csv_config.mismatched,
                BASE_COLUMNS + ["differences"],
            ),
            "internal_only": (
                rows_for(result.internal_only),
                self.csv_config.internal_only,
                None,
            ),
            "provider_only": (
                rows_for(result.provider_only),
                self.csv_config.provider_only,
                None,
            ),
        }

        written: dict[str, Path] = {}
        for name, (rows, filename, empty_columns) in exports.items():
            written[name] = self.write_rows(rows, output_dir / filename, empty_columns)
        return written

    def write_rows(
        self,
        rows: list[dict[str, Any]],
        output_path: Path,
        empty_columns: Optional[list[str]] = None,
    ) -> Path:
        """
        Write rows to a CSV file.

        Columns are the union of all row keys in first-seen order. An
        empty list still produces a header-only file.

        Raises:
            ReportGenerationError: If the file cannot be written
        """
        if rows:
            df = pd.DataFrame(rows)
        else:
            df = pd.DataFrame(columns=empty_columns or BASE_COLUMNS)

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            df.to_csv(output_path, index=False)
        except OSError as e:
            raise ReportGenerationError(f"Failed to write {output_path}: {e}") from e

        logger.info(f"Exported {len(rows)} rows to {output_path}")
        return output_path
