"""Parsers for internal and provider transaction files."""

from .csv_parser import TransactionCsvParser

__all__ = ["TransactionCsvParser"]
