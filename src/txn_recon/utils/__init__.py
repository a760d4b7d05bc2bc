"""Utility modules."""

from .exceptions import (
    ReconciliationError,
    CsvParseError,
    ConfigurationError,
    ValidationError,
    PrecheckNotRunError,
    MissingCollectionError,
    ReportGenerationError,
)
from .logging_config import setup_logging

__all__ = [
    "ReconciliationError",
    "CsvParseError",
    "ConfigurationError",
    "ValidationError",
    "PrecheckNotRunError",
    "MissingCollectionError",
    "ReportGenerationError",
    "setup_logging",
]
