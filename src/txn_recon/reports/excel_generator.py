"""
Excel report generator for reconciliation results.
Creates a workbook with a summary sheet and one sheet per outcome class.
"""

from decimal import Decimal
from pathlib import Path
from typing import Any, Iterable
import logging

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.worksheet.worksheet import Worksheet

from ..models.transaction import (
    Mismatch,
    ReconciliationResult,
    ReconciliationSummary,
    TransactionRecord,
)
from ..config import ReconConfig
from ..utils.exceptions import ReportGenerationError

logger = logging.getLogger(__name__)

# Style definitions
HEADER_FILL = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
HEADER_FONT = Font(color="FFFFFF", bold=True)
MATCH_FILL = PatternFill(start_color="C6EFCE", end_color="C6EFCE", fill_type="solid")
MISMATCH_FILL = PatternFill(start_color="FFEB9C", end_color="FFEB9C", fill_type="solid")
UNMATCHED_FILL = PatternFill(start_color="FFC7CE", end_color="FFC7CE", fill_type="solid")
THIN_BORDER = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)

RECORD_HEADERS = ["Reference", "Amount", "Status", "Date", "Counterparty", "Currency"]


def _cell_value(value: Any) -> Any:
    # openpyxl cannot store Decimal directly
    if isinstance(value, Decimal):
        return float(value)
    return value


def _record_cells(record: TransactionRecord) -> list[Any]:
    return [
        record.transaction_reference,
        _cell_value(record.amount),
        record.status,
        record.date,
        record.counterparty or "",
        record.currency or "",
    ]


class ExcelReportGenerator:
    """Generates Excel reconciliation reports with multiple sheets."""

    def __init__(self, config: ReconConfig):
        """
        Initialize the report generator.

        Args:
            config: Application configuration
        """
        self.config = config
        self.sheet_config = config.output.sheets
        self.currency_code = config.output.display.currency_code

    def generate_report(
        self,
        summary: ReconciliationSummary,
        result: ReconciliationResult,
        output_path: Path,
    ) -> Path:
        """
        Generate the complete reconciliation report.

        Args:
            summary: Reconciliation summary
            result: Reconciliation result
            output_path: Path for output file

        Returns:
            Path to generated report

        Raises:
            ReportGenerationError: If the workbook cannot be saved
        """
        logger.info(f"Generating Excel report: {output_path}")

        wb = Workbook()

        # Remove default sheet
        if wb.active:
            wb.remove(wb.active)

        sheets = self.sheet_config
        if sheets.summary.enabled:
            self._create_summary_sheet(wb, summary)
        if sheets.matched.enabled:
            self._create_record_sheet(wb, sheets.matched.name, result.matched, MATCH_FILL)
        if sheets.mismatched.enabled:
            self._create_mismatch_sheet(wb, result.mismatched)
        if sheets.internal_only.enabled:
            self._create_record_sheet(
                wb, sheets.internal_only.name, result.internal_only, UNMATCHED_FILL
            )
        if sheets.provider_only.enabled:
            self._create_record_sheet(
                wb, sheets.provider_only.name, result.provider_only, UNMATCHED_FILL
            )

        # A workbook must keep at least one sheet
        if not wb.sheetnames:
            wb.create_sheet("Summary")

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            wb.save(output_path)
        except OSError as e:
            raise ReportGenerationError(f"Failed to save report {output_path}: {e}") from e

        logger.info(f"Report saved: {output_path}")
        return output_path

    def _create_summary_sheet(self, wb: Workbook, summary: ReconciliationSummary) -> None:
        """Create the summary sheet with key metrics."""
        ws = wb.create_sheet(self.sheet_config.summary.name)

        ws["A1"] = "Transaction Reconciliation Summary"
        ws["A1"].font = Font(size=16, bold=True)
        ws.merge_cells("A1:D1")

        sections: list[tuple[str, list[tuple[str, Any]]]] = [
            (
                "File Information",
                [
                    ("Internal File:", summary.internal_filename),
                    ("Provider File:", summary.provider_filename),
                    (
                        "Reconciliation Date:",
                        summary.reconciliation_date.strftime("%Y-%m-%d %H:%M:%S"),
                    ),
                    ("Config File:", summary.config_file_used or "Default"),
                ],
            ),
            (
                "Record Counts",
                [
                    ("Internal Records:", summary.total_internal_records),
                    ("Provider Records:", summary.total_provider_records),
                    ("Matched:", summary.matched_count),
                    ("Mismatched:", summary.mismatched_count),
                    ("Internal Only:", summary.internal_only_count),
                    ("Provider Only:", summary.provider_only_count),
                ],
            ),
            (
                "Match Rates",
                [
                    ("Internal Match Rate:", f"{summary.match_rate_internal:.1f}%"),
                    ("Provider Match Rate:", f"{summary.match_rate_provider:.1f}%"),
                ],
            ),
            (
                "Amount Totals",
                [
                    (
                        "Internal Total:",
                        f"{self.currency_code} {summary.internal_total_amount:,.2f}",
                    ),
                    (
                        "Provider Total:",
                        f"{self.currency_code} {summary.provider_total_amount:,.2f}",
                    ),
                    (
                        "Mismatch Amount Variance:",
                        f"{self.currency_code} {summary.total_amount_variance:,.2f}",
                    ),
                ],
            ),
            (
                "Mismatches by Field",
                [(f"{name}:", count) for name, count in summary.mismatches_by_field.items()],
            ),
        ]

        row = 3
        for title, entries in sections:
            ws[f"A{row}"] = title
            ws[f"A{row}"].font = Font(bold=True)
            row += 1
            for label, value in entries:
                ws[f"A{row}"] = label
                ws[f"B{row}"] = value
                row += 1
            row += 1

        ws.column_dimensions["A"].width = 30
        ws.column_dimensions["B"].width = 40

    def _write_header(self, ws: Worksheet, headers: list[str]) -> None:
        for col, header in enumerate(headers, start=1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.fill = HEADER_FILL
            cell.font = HEADER_FONT
            cell.border = THIN_BORDER

    def _create_record_sheet(
        self,
        wb: Workbook,
        sheet_name: str,
        records: Iterable[TransactionRecord],
        fill: PatternFill,
    ) -> None:
        """Create a sheet listing single records (matched or one-sided)."""
        ws = wb.create_sheet(sheet_name)
        self._write_header(ws, RECORD_HEADERS)

        for row_num, record in enumerate(records, start=2):
            for col, value in enumerate(_record_cells(record), start=1):
                cell = ws.cell(row=row_num, column=col, value=value)
                cell.border = THIN_BORDER
                cell.fill = fill

        self._auto_fit_columns(ws)

    def _create_mismatch_sheet(self, wb: Workbook, mismatches: Iterable[Mismatch]) -> None:
        """Create the mismatched pairs sheet, both sides side by side."""
        ws = wb.create_sheet(self.sheet_config.mismatched.name)

        headers = [
            "Reference",
            "Internal Amount",
            "Provider Amount",
            "Internal Status",
            "Provider Status",
            "Internal Date",
            "Provider Date",
            "Differences",
        ]
        self._write_header(ws, headers)

        for row_num, mismatch in enumerate(mismatches, start=2):
            internal, provider = mismatch.internal, mismatch.provider
            row_data = [
                internal.transaction_reference,
                _cell_value(internal.amount),
                _cell_value(provider.amount),
                internal.status,
                provider.status,
                internal.date,
                provider.date,
                "\n".join(mismatch.differences),
            ]

            for col, value in enumerate(row_data, start=1):
                cell = ws.cell(row=row_num, column=col, value=value)
                cell.border = THIN_BORDER
                cell.fill = MISMATCH_FILL
                if col == len(row_data):
                    cell.alignment = Alignment(wrap_text=True, vertical="top")

        self._auto_fit_columns(ws)

    def _auto_fit_columns(self, ws: Worksheet) -> None:
        """Auto-fit column widths based on content."""
        for column_cells in ws.columns:
            max_length = 0
            column = column_cells[0].column_letter

            for cell in column_cells:
                if cell.value is not None:
                    longest_line = max(len(line) for line in str(cell.value).split("\n"))
                    max_length = max(max_length, longest_line)

            ws.column_dimensions[column].width = min(max_length + 2, 50)
