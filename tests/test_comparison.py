from decimal import Decimal

import pytest

from txn_recon.matching.comparison import (
    AMOUNT_TOLERANCE,
    amount_variance,
    compare_records,
    to_decimal,
)

from conftest import make_record


def test_identical_records_have_no_differences():
    assert compare_records(make_record("A1"), make_record("A1")) == []


@pytest.mark.parametrize(
    "internal_amount, provider_amount",
    [
        ("100.01", "100.00"),
        ("100.00", "100.01"),
        (Decimal("100.01"), 100),
        (100.01, 100.0),
    ],
)
def test_difference_of_exactly_one_cent_is_within_tolerance(internal_amount, provider_amount):
    internal = make_record("A1", amount=internal_amount)
    provider = make_record("A1", amount=provider_amount)
    assert compare_records(internal, provider) == []


@pytest.mark.parametrize("gap", ["0.0100001", "0.011", "0.02", "5"])
def test_difference_above_tolerance_is_reported(gap):
    internal = make_record("A1", amount=Decimal("100") + Decimal(gap))
    provider = make_record("A1", amount="100")
    differences = compare_records(internal, provider)
    assert len(differences) == 1
    assert differences[0].startswith("Amount: ")


def test_amount_difference_embeds_raw_values():
    internal = make_record("A1", amount="100.02")
    provider = make_record("A1", amount="100.00")
    assert compare_records(internal, provider) == ["Amount: 100.02 vs 100.00"]


def test_status_comparison_is_case_sensitive():
    internal = make_record("A1", status="OK")
    provider = make_record("A1", status="ok")
    assert compare_records(internal, provider) == ["Status: OK vs ok"]


def test_dates_are_compared_as_raw_strings():
    internal = make_record("A1", date="2024-01-01")
    provider = make_record("A1", date="01/01/2024")
    assert compare_records(internal, provider) == ["Date: 2024-01-01 vs 01/01/2024"]


def test_differences_are_reported_in_fixed_order():
    internal = make_record("A1", amount="10", status="OK", date="2024-01-01")
    provider = make_record("A1", amount="20", status="FAILED", date="2024-01-02")
    differences = compare_records(internal, provider)
    assert [d.split(":")[0] for d in differences] == ["Amount", "Status", "Date"]


def test_to_decimal_keeps_float_inputs_exact():
    assert to_decimal(100.01) == Decimal("100.01")
    assert to_decimal(7) == Decimal("7")
    assert AMOUNT_TOLERANCE == Decimal("0.01")


def test_amount_variance_is_absolute():
    assert amount_variance(make_record("A", amount="5"), make_record("A", amount="8")) == Decimal("3")
