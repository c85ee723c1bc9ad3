"""
Zone-aware range validation for the zone climate log.

Resolves a zone's acceptable ranges from the limits table and flags readings
strictly outside them. Used for form feedback, report reference lines and
batch validation of a record set.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from climate_log.components.base import ValidationComponent
from climate_log.config import ClimateLogConfig, ValueRange, ZoneLimits, ZoneRange
from climate_log.models import CanonicalRecord, ReadingKind, ValidationResult
from climate_log.models.data import READING_FIELDS
from climate_log.utils import ValidationError, get_logger, log_stats, parse_date_parts, parse_number

Bounds = Union[ValueRange, Tuple[float, float]]


def resolve_zone_limits(zone: Optional[str], limits: ZoneLimits) -> ZoneRange:
    """
    Return the ranges of the first table key contained in ``zone``.

    Matching is case-insensitive substring containment, so
    "LABORATORIO - CONGELADOR" matches "CONGELADOR". Falls back to DEFAULT.
    """
    name = (zone or "").upper()
    for key in limits.keys():
        if key.upper() in name:
            return limits.zones[key]
    return limits.default


def range_for(zone_range: ZoneRange, kind: ReadingKind) -> ValueRange:
    return zone_range.temperature if kind is ReadingKind.TEMPERATURE else zone_range.humidity


def is_out_of_range(value: Any, bounds: Bounds) -> bool:
    """
    True when ``value`` lies strictly outside the inclusive ``bounds``.

    Empty or unparsable values are never flagged.
    """
    number = parse_number(value)
    if number is None:
        return False
    low, high = bounds.as_tuple() if isinstance(bounds, ValueRange) else bounds
    return number < low or number > high


class ZoneRangeValidator(ValidationComponent):
    """Validates canonical records against their zone's limits."""

    def __init__(self, config: ClimateLogConfig):
        """
        Initialize validator.

        Args:
            config: Application configuration holding the limits table
        """
        super().__init__(config)
        self.logger = get_logger(__name__)
        self.limits = config.limits

        self.stats = {
            "total_records": 0,
            "records_without_date": 0,
            "readings_checked": 0,
            "range_violations": 0
        }

    def resolve(self, zone: Optional[str]) -> ZoneRange:
        return resolve_zone_limits(zone, self.limits)

    def bounds(self, zone: Optional[str], kind: ReadingKind) -> ValueRange:
        """Range applying to ``kind`` readings in ``zone``."""
        return range_for(self.resolve(zone), kind)

    def execute(self, records: Sequence[CanonicalRecord]) -> ValidationResult:
        """
        Check every reading of every record against its zone's range.

        Args:
            records: Canonical records, usually one filtered selection

        Returns:
            ValidationResult listing each out-of-range reading
        """
        try:
            self.logger.info(f"Validating {len(records)} records against zone limits")
            self.stats["total_records"] = len(records)
            self.stats["readings_checked"] = 0

            if not records:
                return ValidationResult(passed=True, total_records=0, issues_found=[], quality_metrics={})

            self.stats["records_without_date"] = sum(
                1 for record in records if parse_date_parts(record.date) is None
            )

            issues: List[str] = []
            violations: Dict[str, int] = {}
            for field in READING_FIELDS:
                field_issues = self._check_field(records, field)
                violations[field] = len(field_issues)
                issues.extend(field_issues)

            self.stats["range_violations"] = len(issues)
            log_stats(self.logger, "Validation", self.stats)

            return ValidationResult(
                passed=not issues,
                total_records=len(records),
                issues_found=issues,
                quality_metrics={
                    "violations_by_field": violations,
                    "records_without_date": self.stats["records_without_date"],
                    "readings_checked": self.stats["readings_checked"]
                }
            )

        except Exception as e:
            self.logger.error(f"Validation failed: {str(e)}")
            raise ValidationError(f"Range validation failed: {str(e)}") from e

    def _check_field(self, records: Sequence[CanonicalRecord], field: str) -> List[str]:
        """Vectorised range check of one reading field across records."""
        kind = ReadingKind.TEMPERATURE if field.startswith("temp") else ReadingKind.HUMIDITY
        values = np.array(
            [np.nan if getattr(r, field) is None else getattr(r, field) for r in records],
            dtype=float
        )
        ranges = [self.bounds(r.zone, kind) for r in records]
        lows = np.array([rng.min for rng in ranges], dtype=float)
        highs = np.array([rng.max for rng in ranges], dtype=float)

        present = ~np.isnan(values)
        self.stats["readings_checked"] += int(present.sum())

        # NaN compares False on both sides, so absent readings never flag
        out_of_range = (values < lows) | (values > highs)

        issues = []
        for i in np.flatnonzero(out_of_range):
            record = records[int(i)]
            issues.append(
                f"Record {record.id} ({record.zone} {record.date}): {field} {values[i]:g} "
                f"outside range [{lows[i]:g}, {highs[i]:g}]"
            )
        return issues
