"""Pipeline components for the zone climate log."""

from .base import (
    PipelineComponent,
    IngestionComponent,
    NormalizationComponent,
    ValidationComponent,
    FilterComponent,
    AggregationComponent,
    ExportComponent
)

from .normalization import RecordNormalizer
from .ingestion import RemoteStoreIngestionComponent
from .validation import ZoneRangeValidator, resolve_zone_limits, is_out_of_range
from .filtering import RecordFilter, filter_records
from .aggregation import ChartAggregator, calculate_average, summary_averages
from .export import CsvExportComponent
from .submission import RecordSubmissionComponent

__all__ = [
    "PipelineComponent",
    "IngestionComponent",
    "NormalizationComponent",
    "ValidationComponent",
    "FilterComponent",
    "AggregationComponent",
    "ExportComponent",
    "RecordNormalizer",
    "RemoteStoreIngestionComponent",
    "ZoneRangeValidator",
    "resolve_zone_limits",
    "is_out_of_range",
    "RecordFilter",
    "filter_records",
    "ChartAggregator",
    "calculate_average",
    "summary_averages",
    "CsvExportComponent",
    "RecordSubmissionComponent"
]
