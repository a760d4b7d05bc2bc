from click.testing import CliRunner

from txn_recon.cli import main


def test_reconcile_writes_csv_exports(sample_files, tmp_path):
    internal_path, provider_path = sample_files
    out_dir = tmp_path / "exports"

    result = CliRunner().invoke(
        main, ["reconcile", str(internal_path), str(provider_path), "-o", str(out_dir)]
    )

    assert result.exit_code == 0, result.output
    assert "Reconciliation Summary" in result.output
    assert "Net Amount Difference" in result.output
    assert (out_dir / "matched-transactions.csv").exists()
    assert (out_dir / "mismatched-transactions.csv").exists()
    assert (out_dir / "internal-only-transactions.csv").exists()
    assert (out_dir / "provider-only-transactions.csv").exists()


def test_reconcile_dry_run_writes_nothing(sample_files, tmp_path):
    internal_path, provider_path = sample_files
    out_dir = tmp_path / "exports"

    result = CliRunner().invoke(
        main,
        ["reconcile", str(internal_path), str(provider_path), "-o", str(out_dir), "--dry-run"],
    )

    assert result.exit_code == 0, result.output
    assert "Dry run" in result.output
    assert not out_dir.exists()


def test_reconcile_writes_excel_report(sample_files, tmp_path):
    internal_path, provider_path = sample_files
    report = tmp_path / "report.xlsx"

    result = CliRunner().invoke(
        main,
        [
            "reconcile",
            str(internal_path),
            str(provider_path),
            "-o",
            str(tmp_path / "exports"),
            "--excel",
            str(report),
        ],
    )

    assert result.exit_code == 0, result.output
    assert report.exists()


def test_reconcile_reports_validation_failure(write_csv, sample_files, tmp_path):
    _, provider_path = sample_files
    empty = write_csv("empty.csv", "transaction_reference,amount,status,date\n")

    result = CliRunner().invoke(
        main, ["reconcile", str(empty), str(provider_path), "-o", str(tmp_path / "x")]
    )

    assert result.exit_code == 1
    assert "internal file is empty" in result.output


def test_reconcile_reports_unknown_logging_level(sample_files, tmp_path):
    internal_path, provider_path = sample_files
    config_path = tmp_path / "config.yaml"
    config_path.write_text("logging:\n  level: LOUD\n")

    result = CliRunner().invoke(
        main,
        [
            "reconcile",
            str(internal_path),
            str(provider_path),
            "-c",
            str(config_path),
            "-o",
            str(tmp_path / "x"),
        ],
    )

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "Unknown logging level" in result.output


def test_parse_previews_and_validates(sample_files):
    _, provider_path = sample_files
    result = CliRunner().invoke(main, ["parse", str(provider_path), "--source", "provider"])

    assert result.exit_code == 0, result.output
    assert "Total transactions: 4" in result.output
    assert "Validation passed" in result.output


def test_parse_reports_missing_fields(write_csv):
    path = write_csv("partial.csv", "transaction_reference,status\nA1,OK\n")
    result = CliRunner().invoke(main, ["parse", str(path)])

    assert result.exit_code == 1
    assert "missing required fields" in result.output


def test_init_config_writes_file(tmp_path):
    target = tmp_path / "config.yaml"
    result = CliRunner().invoke(main, ["init-config", "-o", str(target)])

    assert result.exit_code == 0, result.output
    assert target.exists()
