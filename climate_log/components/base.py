"""
Abstract base classes for pipeline components.

These define the interfaces that all pipeline components implement, so the
application can be wired with substitutes in tests.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

from climate_log.config import ClimateLogConfig
from climate_log.models import CanonicalRecord, ChartPoint, FilterCriteria, RawRecord, ValidationResult


class PipelineComponent(ABC):
    """Base class for all pipeline components."""

    def __init__(self, config: ClimateLogConfig):
        """Initialize component with application configuration."""
        self.config = config

    @abstractmethod
    def execute(self, *args, **kwargs) -> Any:
        """Execute the component's main functionality."""
        pass


class IngestionComponent(PipelineComponent):
    """Abstract base for components reading the remote store."""

    @abstractmethod
    def execute(self) -> List[CanonicalRecord]:
        """
        Fetch and normalize the whole dataset.

        Returns:
            Canonical records; empty when the store is unreachable
        """
        pass


class NormalizationComponent(PipelineComponent):
    """Abstract base for raw-to-canonical record mapping."""

    @abstractmethod
    def execute(self, raw_records: Sequence[RawRecord]) -> List[CanonicalRecord]:
        """
        Map raw rows to canonical records, one output per input row.

        Args:
            raw_records: Rows as received from the remote store

        Returns:
            Canonical records with ids assigned by position
        """
        pass


class ValidationComponent(PipelineComponent):
    """Abstract base for zone-aware range validation."""

    @abstractmethod
    def execute(self, records: Sequence[CanonicalRecord]) -> ValidationResult:
        pass


class FilterComponent(PipelineComponent):
    """Abstract base for record selection."""

    @abstractmethod
    def execute(self, records: Sequence[CanonicalRecord], criteria: FilterCriteria) -> List[CanonicalRecord]:
        pass


class AggregationComponent(PipelineComponent):
    """Abstract base for chart series construction."""

    @abstractmethod
    def execute(self, records: Sequence[CanonicalRecord], criteria: FilterCriteria) -> List[ChartPoint]:
        """
        Group filtered records into chart buckets.

        Args:
            records: Output of the filter engine for ``criteria``
            criteria: Selection the records were filtered with

        Returns:
            Chart points in ascending date order
        """
        pass


class ExportComponent(PipelineComponent):
    """Abstract base for serializing filtered records."""

    @abstractmethod
    def execute(self, records: Sequence[CanonicalRecord], output_path: Optional[Any] = None) -> str:
        pass
