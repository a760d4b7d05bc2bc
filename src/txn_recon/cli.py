"""
Command-line interface for the transaction reconciliation tool.
"""

from pathlib import Path
from typing import Optional
import logging
import sys

import click
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from . import __version__
from .config import ReconConfig, generate_default_config, load_config
from .models.transaction import (
    RecordSource,
    ReconciliationResult,
    ReconciliationSummary,
    TransactionRecord,
)
from .parsers.csv_parser import TransactionCsvParser
from .pipeline import ReconciliationSession
from .reports.csv_exporter import CsvExporter, format_currency
from .reports.excel_generator import ExcelReportGenerator
from .utils.exceptions import ReconciliationError
from .utils.logging_config import setup_logging
from .validation.validator import ValidationFailure, validate

console = Console()


@click.group()
@click.version_option(version=__version__)
def main():
    """Internal vs provider transaction reconciliation tool."""
    pass


@main.command()
@click.argument("internal_file", type=click.Path(exists=True, path_type=Path))
@click.argument("provider_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "-c",
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file (YAML)",
)
@click.option(
    "-o",
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("out"),
    show_default=True,
    help="Directory for the CSV exports",
)
@click.option("--excel", type=click.Path(path_type=Path), help="Also write an Excel report")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option("--dry-run", is_flag=True, help="Reconcile and show results without writing files")
def reconcile(
    internal_file: Path,
    provider_file: Path,
    config: Optional[Path],
    output_dir: Path,
    excel: Optional[Path],
    verbose: bool,
    dry_run: bool,
):
    """
    Reconcile an internal transaction export against a provider statement.

    INTERNAL_FILE: Path to the platform's transaction export (CSV)
    PROVIDER_FILE: Path to the payment provider statement (CSV)
    """
    try:
        recon_config = load_config(config)
        setup_logging(
            logging.DEBUG if verbose else recon_config.logging.level,
            log_format=recon_config.logging.format,
        )

        session = ReconciliationSession(recon_config)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task("Loading internal export...", total=None)
            session.load(internal_file, RecordSource.INTERNAL)
            progress.update(task, completed=True)

            task = progress.add_task("Loading provider statement...", total=None)
            session.load(provider_file, RecordSource.PROVIDER)
            progress.update(task, completed=True)

            task = progress.add_task("Processing reconciliation...", total=None)
            result, summary = session.run()
            progress.update(task, completed=True)

        _display_summary(summary)
        _display_previews(result, recon_config)

        if dry_run:
            console.print("\n[yellow]Dry run - no files written[/yellow]")
            return

        written = CsvExporter(recon_config).export_result(result, output_dir)
        for name, path in written.items():
            console.print(f"[green]Exported {name}: {path}[/green]")

        if excel is not None:
            report_path = ExcelReportGenerator(recon_config).generate_report(
                summary=summary, result=result, output_path=excel
            )
            console.print(f"[green]Report generated: {report_path}[/green]")

    except ReconciliationError as e:
        console.print(f"[red]Error: {e}[/red]")
        if verbose:
            console.print_exception()
        sys.exit(1)


@main.command()
@click.argument("csv_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--source",
    type=click.Choice([s.value for s in RecordSource]),
    default=RecordSource.INTERNAL.value,
    show_default=True,
    help="Which side's column mappings to use",
)
@click.option("-c", "--config", type=click.Path(exists=True, path_type=Path))
def parse(csv_file: Path, source: str, config: Optional[Path]):
    """
    Parse and validate one transaction file and preview its records.

    CSV_FILE: Path to an internal export or provider statement
    """
    try:
        recon_config = load_config(config)
        record_source = RecordSource(source)
        upload = TransactionCsvParser(recon_config).parse_file(csv_file, record_source)
    except ReconciliationError as e:
        console.print(f"[red]Error parsing file: {e}[/red]")
        sys.exit(1)

    display = recon_config.output.display
    _print_records(
        f"{record_source.value.title()} Transactions: {upload.name}",
        upload.records,
        display.preview_rows,
        display.currency_code,
    )
    console.print(f"\nTotal transactions: {len(upload)}")

    outcome = validate(upload.records, label=record_source.value)
    if isinstance(outcome, ValidationFailure):
        rows = ", ".join(str(n) for n in outcome.row_numbers[:10])
        suffix = f" (rows {rows})" if rows else ""
        console.print(f"[red]Validation failed: {outcome.message}{suffix}[/red]")
        sys.exit(1)

    console.print("[green]Validation passed[/green]")


@main.command("init-config")
@click.option(
    "-o", "--output", type=click.Path(path_type=Path), default=Path("config.yaml")
)
def init_config(output: Path):
    """Generate a sample configuration file."""
    generate_default_config(output)
    console.print(f"[green]Configuration file generated: {output}[/green]")


def _display_summary(summary: ReconciliationSummary) -> None:
    """Display reconciliation summary in console."""
    table = Table(title="Reconciliation Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Internal Records", str(summary.total_internal_records))
    table.add_row("Provider Records", str(summary.total_provider_records))
    table.add_row("Matched", str(summary.matched_count))
    table.add_row("Mismatched", str(summary.mismatched_count))
    table.add_row("Internal Only", str(summary.internal_only_count))
    table.add_row("Provider Only", str(summary.provider_only_count))
    table.add_row("Internal Match Rate", f"{summary.match_rate_internal:.1f}%")
    table.add_row("Provider Match Rate", f"{summary.match_rate_provider:.1f}%")
    table.add_row("Net Amount Difference", f"{summary.net_amount_difference:,.2f}")
    table.add_row("Processing Time", f"{summary.processing_time_seconds:.2f}s")

    console.print(table)


def _print_records(
    title: str,
    records: tuple[TransactionRecord, ...],
    limit: int,
    currency_code: str,
) -> None:
    table = Table(title=title)
    table.add_column("Reference")
    table.add_column("Amount", justify="right")
    table.add_column("Status")
    table.add_column("Date")

    for record in records[:limit]:
        table.add_row(
            str(record.transaction_reference or "-"),
            format_currency(record.amount, currency_code),
            record.status or "-",
            record.date or "-",
        )

    console.print(table)
    if len(records) > limit:
        console.print(f"Showing first {limit} of {len(records)} transactions")


def _display_previews(result: ReconciliationResult, config: ReconConfig) -> None:
    """Preview each outcome list the way the upload screen does."""
    display = config.output.display

    for title, records in (
        ("Matched Transactions", result.matched),
        ("Internal Only", result.internal_only),
        ("Provider Only", result.provider_only),
    ):
        if records:
            _print_records(
                f"{title} ({len(records)})", records, display.preview_rows, display.currency_code
            )

    if not result.mismatched:
        return

    table = Table(title=f"Mismatched Transactions ({len(result.mismatched)})")
    table.add_column("Reference")
    table.add_column("Internal")
    table.add_column("Provider")
    table.add_column("Differences", style="yellow")

    for mismatch in result.mismatched[: display.mismatch_preview_rows]:
        internal, provider = mismatch.internal, mismatch.provider
        table.add_row(
            str(internal.transaction_reference),
            f"{format_currency(internal.amount, display.currency_code)} • {internal.status}",
            f"{format_currency(provider.amount, display.currency_code)} • {provider.status}",
            "\n".join(mismatch.differences),
        )

    console.print(table)
    if len(result.mismatched) > display.mismatch_preview_rows:
        console.print(
            f"Showing first {display.mismatch_preview_rows} of "
            f"{len(result.mismatched)} mismatched transactions"
        )


if __name__ == "__main__":
    main()
