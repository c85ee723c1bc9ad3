"""
Filter engine for the zone climate log.

Selects the records of one zone, calendar month and (optionally) shift.
Records whose date cannot be parsed never pass.
"""

from typing import List, Sequence

from climate_log.components.base import FilterComponent
from climate_log.config import ClimateLogConfig
from climate_log.models import CanonicalRecord, FilterCriteria
from climate_log.utils import get_logger, parse_date_parts


def matches(record: CanonicalRecord, criteria: FilterCriteria) -> bool:
    """Whether one record belongs to the selection."""
    parts = parse_date_parts(record.date)
    if parts is None:
        return False

    year, month, _ = parts
    if record.zone != criteria.zone:
        return False
    if year != criteria.year or month - 1 != criteria.month:
        return False
    if criteria.all_shifts:
        return True
    return record.shift is not None and record.shift.value == criteria.shift


def filter_records(records: Sequence[CanonicalRecord], criteria: FilterCriteria) -> List[CanonicalRecord]:
    """Records matching ``criteria``, in input order."""
    return [record for record in records if matches(record, criteria)]


class RecordFilter(FilterComponent):
    """Filter component wrapping :func:`filter_records` with counters."""

    def __init__(self, config: ClimateLogConfig):
        super().__init__(config)
        self.logger = get_logger(__name__)
        self.stats = {
            "records_in": 0,
            "records_selected": 0,
            "records_without_date": 0
        }

    def execute(self, records: Sequence[CanonicalRecord], criteria: FilterCriteria) -> List[CanonicalRecord]:
        """
        Apply the selection.

        Args:
            records: Whole in-memory dataset
            criteria: Zone, year, 0-based month and shift

        Returns:
            Matching records in input order
        """
        selected = filter_records(records, criteria)

        self.stats["records_in"] = len(records)
        self.stats["records_selected"] = len(selected)
        self.stats["records_without_date"] = sum(1 for r in records if parse_date_parts(r.date) is None)

        self.logger.debug(
            f"Filter {criteria.zone} {criteria.year}-{criteria.month + 1:02d} shift={criteria.shift}: "
            f"{len(selected)}/{len(records)} records"
        )
        return selected
