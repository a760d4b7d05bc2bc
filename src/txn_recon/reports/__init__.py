"""CSV and Excel output for reconciliation results."""

from .csv_exporter import CsvExporter, format_currency, mismatch_rows, rows_for
from .excel_generator import ExcelReportGenerator

__all__ = [
    "CsvExporter",
    "ExcelReportGenerator",
    "format_currency",
    "mismatch_rows",
    "rows_for",
]
