from decimal import Decimal
from pathlib import Path
from typing import Callable

import pytest

from txn_recon.config import ReconConfig
from txn_recon.models.transaction import TransactionRecord, ValidatedCollection
from txn_recon.validation import validate


def make_record(
    ref: str,
    amount="100.00",
    status: str = "OK",
    date: str = "2024-01-01",
    **extra,
) -> TransactionRecord:
    if isinstance(amount, str):
        amount = Decimal(amount)
    return TransactionRecord(
        transaction_reference=ref,
        amount=amount,
        status=status,
        date=date,
        extra=extra,
    )


def validated(*records: TransactionRecord, label: str = "records") -> ValidatedCollection:
    outcome = validate(list(records), label=label)
    assert isinstance(outcome, ValidatedCollection), outcome
    return outcome


@pytest.fixture
def config() -> ReconConfig:
    return ReconConfig()


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write CSV text to a file under tmp_path and return its path."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


INTERNAL_CSV = (
    "transaction_reference,amount,status,date,counterparty,currency,channel\n"
    "A1,100.00,OK,2024-01-01,Acme,KES,mobile\n"
    "A2,250.50,OK,2024-01-02,Beta,KES,web\n"
    " A3 ,75.00,PENDING,2024-01-03,Gamma,KES,web\n"
    "A4,10.00,OK,2024-01-04,Delta,KES,branch\n"
)

PROVIDER_CSV = (
    "transaction_reference,amount,status,date,counterparty,currency\n"
    "A1,100.00,OK,2024-01-01,Acme,KES\n"
    "A2,250.00,OK,2024-01-02,Beta,KES\n"
    "A3,75.00,FAILED,2024-01-03,Gamma,KES\n"
    "B9,42.00,OK,2024-01-05,Omega,KES\n"
)


@pytest.fixture
def sample_files(write_csv) -> tuple[Path, Path]:
    return write_csv("internal.csv", INTERNAL_CSV), write_csv("provider.csv", PROVIDER_CSV)
