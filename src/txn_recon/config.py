"""Configuration loader and validation for reconciliation settings."""

from pathlib import Path
from typing import Any, Optional
import logging

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_COLUMN_MAPPINGS = {
    "transaction_reference": "transaction_reference",
    "amount": "amount",
    "status": "status",
    "date": "date",
    "counterparty": "counterparty",
    "currency": "currency",
}


class CsvInputConfig(BaseModel):
    """How one side's CSV export is read."""

    encoding: str = "utf-8"
    delimiter: str = ","
    allowed_extensions: list[str] = Field(default_factory=lambda: [".csv"])
    # Canonical field name -> column header in the file
    column_mappings: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_COLUMN_MAPPINGS)
    )


class InputConfig(BaseModel):
    """Configuration for input file parsing."""

    internal: CsvInputConfig = Field(default_factory=CsvInputConfig)
    provider: CsvInputConfig = Field(default_factory=CsvInputConfig)


class CsvOutputConfig(BaseModel):
    """File names for the per-class CSV exports."""

    matched: str = "matched-transactions.csv"
    mismatched: str = "mismatched-transactions.csv"
    internal_only: str = "internal-only-transactions.csv"
    provider_only: str = "provider-only-transactions.csv"
    differences_separator: str = "; "


class ExcelOutputConfig(BaseModel):
    """Configuration for Excel output."""

    filename_template: str = "reconciliation_report_{date}_{time}.xlsx"


class SheetConfig(BaseModel):
    """Configuration for a report sheet."""

    enabled: bool = True
    name: str


class SheetsConfig(BaseModel):
    """Configuration for all report sheets."""

    summary: SheetConfig = Field(default_factory=lambda: SheetConfig(name="Summary"))
    matched: SheetConfig = Field(default_factory=lambda: SheetConfig(name="Matched"))
    mismatched: SheetConfig = Field(default_factory=lambda: SheetConfig(name="Mismatched"))
    internal_only: SheetConfig = Field(
        default_factory=lambda: SheetConfig(name="Internal Only")
    )
    provider_only: SheetConfig = Field(
        default_factory=lambda: SheetConfig(name="Provider Only")
    )


class DisplayConfig(BaseModel):
    """Terminal preview settings."""

    currency_code: str = "KES"
    preview_rows: int = 10
    mismatch_preview_rows: int = 5


class OutputConfig(BaseModel):
    """Configuration for output."""

    csv: CsvOutputConfig = Field(default_factory=CsvOutputConfig)
    excel: ExcelOutputConfig = Field(default_factory=ExcelOutputConfig)
    sheets: SheetsConfig = Field(default_factory=SheetsConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Normalise to upper case and reject names logging does not know."""
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown logging level: {v}")
        return level


class ReconConfig(BaseModel):
    """Main configuration model for reconciliation."""

    input: InputConfig = Field(default_factory=InputConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    config_file_path: Optional[str] = None


def get_default_config() -> dict[str, Any]:
    """Return the default configuration as a dictionary."""
    csv_input = {
        "encoding": "utf-8",
        "delimiter": ",",
        "allowed_extensions": [".csv"],
        "column_mappings": dict(DEFAULT_COLUMN_MAPPINGS),
    }
    return {
        "input": {
            "internal": dict(csv_input, column_mappings=dict(DEFAULT_COLUMN_MAPPINGS)),
            "provider": dict(csv_input, column_mappings=dict(DEFAULT_COLUMN_MAPPINGS)),
        },
        "output": {
            "csv": {
                "matched": "matched-transactions.csv",
                "mismatched": "mismatched-transactions.csv",
                "internal_only": "internal-only-transactions.csv",
                "provider_only": "provider-only-transactions.csv",
                "differences_separator": "; ",
            },
            "excel": {
                "filename_template": "reconciliation_report_{date}_{time}.xlsx",
            },
            "sheets": {
                "summary": {"enabled": True, "name": "Summary"},
                "matched": {"enabled": True, "name": "Matched"},
                "mismatched": {"enabled": True, "name": "Mismatched"},
                "internal_only": {"enabled": True, "name": "Internal Only"},
                "provider_only": {"enabled": True, "name": "Provider Only"},
            },
            "display": {
                "currency_code": "KES",
                "preview_rows": 10,
                "mismatch_preview_rows": 5,
            },
        },
        "logging": {
            "level": "INFO",
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        },
    }


def load_config(config_path: Optional[Path] = None) -> ReconConfig:
    """
    Load configuration from a YAML file or use defaults.

    Args:
        config_path: Path to YAML configuration file (optional)

    Returns:
        ReconConfig object with loaded or default settings

    Raises:
        ConfigurationError: If the file is not valid YAML or has bad values
    """
    config_dict = get_default_config()

    if config_path and config_path.exists():
        logger.info(f"Loading configuration from: {config_path}")
        try:
            with open(config_path, "r") as f:
                user_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

        if not isinstance(user_config, dict):
            raise ConfigurationError(f"Configuration root must be a mapping: {config_path}")

        config_dict = _deep_merge(config_dict, user_config)
        config_dict["config_file_path"] = str(config_path)
    else:
        logger.info("Using default configuration")

    try:
        return ReconConfig(**config_dict)
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def _deep_merge(base: dict, override: dict) -> dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Dictionary to merge on top

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def generate_default_config(output_path: Path) -> None:
    """
    Generate a default configuration file.

    Args:
        output_path: Path to write the configuration file
    """
    config_dict = get_default_config()

    yaml_content = """# Transaction Reconciliation Configuration
# Column mappings map canonical fields to the headers in each CSV export.
# The amount tolerance (0.01) and the required fields are fixed.

"""
    yaml_content += yaml.dump(config_dict, default_flow_style=False, sort_keys=False)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        f.write(yaml_content)

    logger.info(f"Generated configuration file: {output_path}")
