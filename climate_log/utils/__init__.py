"""Utility modules for the zone climate log pipeline."""

from .logging import setup_logging, get_logger, log_stats
from .exceptions import (
    ClimateLogError,
    IngestionError,
    NormalizationError,
    ValidationError,
    SubmissionError,
    ExportError,
    ConfigurationError
)
from .parsing import parse_number, parse_date_parts, date_portion, fold_key

__all__ = [
    "setup_logging",
    "get_logger",
    "log_stats",
    "ClimateLogError",
    "IngestionError",
    "NormalizationError",
    "ValidationError",
    "SubmissionError",
    "ExportError",
    "ConfigurationError",
    "parse_number",
    "parse_date_parts",
    "date_portion",
    "fold_key"
]
