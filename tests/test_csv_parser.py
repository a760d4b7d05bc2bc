from decimal import Decimal

import pytest

from txn_recon.config import ReconConfig
from txn_recon.models.transaction import RecordSource
from txn_recon.parsers import TransactionCsvParser
from txn_recon.utils.exceptions import CsvParseError


def test_parse_file_reads_records_in_order(config, sample_files):
    internal_path, _ = sample_files
    upload = TransactionCsvParser(config).parse_file(internal_path, RecordSource.INTERNAL)

    assert upload.name == "internal.csv"
    assert upload.source is RecordSource.INTERNAL
    assert [r.reference_key for r in upload.records] == ["A1", "A2", "A3", "A4"]
    first = upload.records[0]
    assert first.amount == Decimal("100.00")
    assert first.status == "OK"
    assert first.date == "2024-01-01"
    assert first.counterparty == "Acme"
    assert first.currency == "KES"


def test_unrecognised_columns_are_kept_as_extra(config, sample_files):
    internal_path, _ = sample_files
    upload = TransactionCsvParser(config).parse_file(internal_path, RecordSource.INTERNAL)
    assert upload.records[0].extra == {"channel": "mobile"}
    assert list(upload.records[0].to_dict())[-1] == "channel"


def test_raw_reference_is_kept_untrimmed(config, sample_files):
    internal_path, _ = sample_files
    upload = TransactionCsvParser(config).parse_file(internal_path, RecordSource.INTERNAL)
    assert upload.records[2].transaction_reference == " A3 "


def test_amounts_are_cleaned_before_conversion(config, write_csv):
    path = write_csv(
        "amounts.csv",
        'transaction_reference,amount,status,date\nA1,"KES 1,250.50",OK,2024-01-01\nA2,$3,OK,2024-01-01\n',
    )
    upload = TransactionCsvParser(config).parse_file(path, RecordSource.PROVIDER)
    assert [r.amount for r in upload.records] == [Decimal("1250.50"), Decimal("3")]


@pytest.mark.parametrize("raw", ["", "n/a", "abc"])
def test_unusable_amount_becomes_none(config, write_csv, raw):
    path = write_csv("bad.csv", f"transaction_reference,amount,status,date\nA1,{raw},OK,2024-01-01\n")
    upload = TransactionCsvParser(config).parse_file(path, RecordSource.INTERNAL)
    assert upload.records[0].amount is None


def test_empty_optional_fields_become_none(config, write_csv):
    path = write_csv(
        "opt.csv",
        "transaction_reference,amount,status,date,counterparty,currency\nA1,1,OK,2024-01-01,,\n",
    )
    record = TransactionCsvParser(config).parse_file(path, RecordSource.INTERNAL).records[0]
    assert record.counterparty is None
    assert record.currency is None


def test_header_only_file_yields_no_records(config, write_csv):
    path = write_csv("empty.csv", "transaction_reference,amount,status,date\n")
    upload = TransactionCsvParser(config).parse_file(path, RecordSource.INTERNAL)
    assert len(upload) == 0


def test_blank_lines_are_skipped(config, write_csv):
    path = write_csv(
        "blank.csv",
        "transaction_reference,amount,status,date\nA1,1,OK,2024-01-01\n\nA2,2,OK,2024-01-02\n",
    )
    upload = TransactionCsvParser(config).parse_file(path, RecordSource.INTERNAL)
    assert len(upload) == 2


def test_non_csv_extension_is_rejected(config, write_csv):
    path = write_csv("statement.txt", "transaction_reference,amount,status,date\n")
    with pytest.raises(CsvParseError, match="CSV files only"):
        TransactionCsvParser(config).parse_file(path, RecordSource.PROVIDER)


def test_column_mappings_rename_provider_headers(write_csv):
    config = ReconConfig()
    config.input.provider.column_mappings.update(
        {"transaction_reference": "Ref", "amount": "Value", "status": "State", "date": "Posted"}
    )
    path = write_csv("mapped.csv", "Ref;Value;State;Posted\nA1;9.99;OK;2024-01-01\n")
    config.input.provider.delimiter = ";"

    record = TransactionCsvParser(config).parse_file(path, RecordSource.PROVIDER).records[0]

    assert record.transaction_reference == "A1"
    assert record.amount == Decimal("9.99")
    assert record.status == "OK"
    assert record.date == "2024-01-01"
    assert record.extra == {}


def test_get_file_summary(config, write_csv):
    path = write_csv(
        "dups.csv",
        "transaction_reference,amount,status,date\nA1,1,OK,d\nA1,2,OK,d\nA2,3.5,OK,d\n",
    )
    summary = TransactionCsvParser(config).get_file_summary(path, RecordSource.INTERNAL)
    assert summary["row_count"] == 3
    assert summary["unique_references"] == 2
    assert summary["duplicate_references"] == 1
    assert summary["total_amount"] == pytest.approx(6.5)
