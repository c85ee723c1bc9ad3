"""
Custom exceptions for the zone climate log pipeline.

Field- and record-level problems never raise: they resolve to None and are
filtered downstream. These exceptions cover the failures a caller must see.
"""


class ClimateLogError(Exception):
    """Base exception for all climate log errors."""
    pass


class IngestionError(ClimateLogError):
    """Raised when the remote store cannot be read and the caller asked to know."""
    pass


class NormalizationError(ClimateLogError):
    """Raised when a batch handed to the normalizer is not a list of records."""
    pass


class ValidationError(ClimateLogError):
    """Raised when batch range validation cannot run."""
    pass


class SubmissionError(ClimateLogError):
    """Raised when a form cannot be submitted (rule violation or dispatch failure)."""
    pass


class ExportError(ClimateLogError):
    """Raised when the CSV export cannot be written."""
    pass


class ConfigurationError(ClimateLogError):
    """Raised when configuration is invalid or missing."""
    pass
