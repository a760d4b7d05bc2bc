"""
Transaction CSV parser.
Reads internal exports and provider statements into transaction records.
"""

from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Optional
import logging

import pandas as pd

from ..models.transaction import (
    CANONICAL_FIELDS,
    OPTIONAL_FIELDS,
    RecordSource,
    TransactionRecord,
    UploadedCollection,
)
from ..config import CsvInputConfig, ReconConfig
from ..utils.exceptions import CsvParseError

logger = logging.getLogger(__name__)

# Stripped from amounts before Decimal conversion
AMOUNT_NOISE = ("$", "KES", "KSh", ",", " ")


class TransactionCsvParser:
    """
    Parser for transaction CSV files from either side.

    Every column is read as text; only ``amount`` is coerced. Columns that
    are not mapped to a canonical field are kept verbatim in the record's
    ``extra`` mapping.
    """

    def __init__(self, config: ReconConfig):
        """
        Initialize the parser with configuration.

        Args:
            config: Application configuration object
        """
        self.config = config

    def _source_config(self, source: RecordSource) -> CsvInputConfig:
        if source == RecordSource.INTERNAL:
            return self.config.input.internal
        return self.config.input.provider

    def parse_file(self, file_path: Path, source: RecordSource) -> UploadedCollection:
        """
        Parse a transaction CSV file.

        Args:
            file_path: Path to the CSV file
            source: Which side the file belongs to

        Returns:
            Uploaded collection holding the parsed records

        Raises:
            CsvParseError: If the file is not a CSV or cannot be read
        """
        logger.info(f"Parsing {source.value} CSV file: {file_path}")
        source_config = self._source_config(source)

        df = self._read_csv(file_path, source_config)
        records = self._process_dataframe(df, source_config)
        logger.info(f"Extracted {len(records)} records from {file_path.name}")

        return UploadedCollection(
            name=file_path.name,
            source=source,
            records=tuple(records),
        )

    def _read_csv(self, file_path: Path, source_config: CsvInputConfig) -> pd.DataFrame:
        allowed = [ext.lower() for ext in source_config.allowed_extensions]
        if file_path.suffix.lower() not in allowed:
            raise CsvParseError("Please upload CSV files only")

        try:
            return pd.read_csv(
                file_path,
                encoding=source_config.encoding,
                delimiter=source_config.delimiter,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
            )
        except pd.errors.EmptyDataError:
            # A file with no header at all parses as an empty collection
            return pd.DataFrame()
        except Exception as e:
            logger.error(f"Failed to read CSV file: {e}")
            raise CsvParseError(f"Failed to read CSV file {file_path.name}: {e}") from e

    def _process_dataframe(
        self, df: pd.DataFrame, source_config: CsvInputConfig
    ) -> list[TransactionRecord]:
        """
        Convert every DataFrame row into a TransactionRecord.

        Args:
            df: DataFrame read with all columns as strings
            source_config: Column mappings for this side

        Returns:
            Records in file order
        """
        header_to_field = {
            header: field_name
            for field_name, header in source_config.column_mappings.items()
            if field_name in CANONICAL_FIELDS
        }

        records: list[TransactionRecord] = []
        for idx, row in df.iterrows():
            records.append(self._normalize_row(row.to_dict(), header_to_field, int(idx)))
        return records

    def _normalize_row(
        self,
        row: dict[str, Any],
        header_to_field: dict[str, str],
        idx: int,
    ) -> TransactionRecord:
        known: dict[str, Any] = {}
        extra: dict[str, Any] = {}

        for header, value in row.items():
            field_name = header_to_field.get(header)
            if field_name is None:
                extra[header] = value
            else:
                known[field_name] = value

        if "amount" in known:
            raw_amount = known["amount"]
            known["amount"] = self._parse_amount(raw_amount)
            if known["amount"] is None and str(raw_amount).strip():
                logger.warning(f"Row {idx + 1}: Unparseable amount {raw_amount!r}")

        for name in OPTIONAL_FIELDS:
            if known.get(name) == "":
                known[name] = None

        return TransactionRecord(**known, extra=extra)

    def _parse_amount(self, amount_value: Any) -> Optional[Decimal]:
        """
        Parse an amount value from the CSV.

        Args:
            amount_value: Raw cell text

        Returns:
            Decimal amount or None when empty or not numeric
        """
        if amount_value is None:
            return None

        text = str(amount_value).strip()
        for noise in AMOUNT_NOISE:
            text = text.replace(noise, "")
        text = text.strip()
        if not text:
            return None

        try:
            amount = Decimal(text)
        except InvalidOperation:
            return None
        if not amount.is_finite():
            return None
        return amount

    def get_file_summary(self, file_path: Path, source: RecordSource) -> dict:
        """
        Get summary information from a transaction CSV file.

        Args:
            file_path: Path to the CSV file
            source: Which side the file belongs to

        Returns:
            Dictionary with file summary information
        """
        source_config = self._source_config(source)
        df = self._read_csv(file_path, source_config)
        records = self._process_dataframe(df, source_config)

        amounts = [r.amount for r in records if r.amount is not None]
        references = [r.reference_key for r in records if r.reference_key]

        return {
            "row_count": len(df),
            "columns": list(df.columns),
            "unique_references": len(set(references)),
            "duplicate_references": len(references) - len(set(references)),
            "total_amount": float(sum(amounts, Decimal("0"))),
        }
