"""
Chart aggregation for the zone climate log.

Groups a filtered record set into one bucket per day (and per shift when all
shifts are selected). Within a bucket the last non-null value of each reading,
in date order, wins; readings are never averaged into a bucket.
"""

from typing import Any, Dict, List, Sequence

import pandas as pd

from climate_log.components.base import AggregationComponent
from climate_log.config import ClimateLogConfig
from climate_log.models import NO_DATA, CanonicalRecord, ChartPoint, FilterCriteria
from climate_log.models.data import READING_FIELDS
from climate_log.utils import get_logger, log_stats, parse_date_parts

_ALIAS_TO_FIELD = {
    info.alias: name for name, info in CanonicalRecord.model_fields.items() if info.alias
}


def _field_name(field: str) -> str:
    """Accept either the attribute name or its camelCase alias."""
    return _ALIAS_TO_FIELD.get(field, field)


def _none_if_na(value: Any) -> Any:
    return None if pd.isna(value) else value


def calculate_average(records: Sequence[CanonicalRecord], field: str) -> str:
    """
    Mean of ``field`` over records where it is set, to one decimal place.

    Args:
        records: Filtered record set
        field: Reading attribute ("temp_current") or alias ("tempCurrent")

    Returns:
        The mean formatted like "22.0", or NO_DATA when no record has a value
    """
    name = _field_name(field)
    values = pd.Series([getattr(record, name) for record in records], dtype=float).dropna()
    if values.empty:
        return NO_DATA
    return f"{values.mean():.1f}"


def summary_averages(records: Sequence[CanonicalRecord]) -> Dict[str, str]:
    """Averages of every reading field keyed by alias."""
    return {
        CanonicalRecord.model_fields[field].alias: calculate_average(records, field)
        for field in READING_FIELDS
    }


class ChartAggregator(AggregationComponent):
    """Builds chart series from a filtered record set."""

    def __init__(self, config: ClimateLogConfig):
        """
        Initialize aggregator.

        Args:
            config: Application configuration
        """
        super().__init__(config)
        self.logger = get_logger(__name__)
        self.stats = {
            "records_in": 0,
            "records_skipped": 0,
            "buckets": 0,
            "bucket_collisions": 0
        }

    def execute(self, records: Sequence[CanonicalRecord], criteria: FilterCriteria) -> List[ChartPoint]:
        """
        Aggregate records into chart points.

        Args:
            records: Output of the filter engine for ``criteria``
            criteria: Selection; decides whether buckets are split by shift

        Returns:
            Chart points in ascending date order
        """
        self.stats["records_in"] = len(records)
        frame = self._to_frame(records, criteria)
        if frame.empty:
            self.logger.info("No records to aggregate")
            return []

        # Stable sort keeps input order among records of the same day
        frame = frame.sort_values("sort_key", kind="mergesort")

        heads = frame.drop_duplicates("key", keep="first").set_index("key")[["label", "date", "shift", "sort_key"]]
        readings = frame.groupby("key", sort=False)[list(READING_FIELDS)].last()
        buckets = heads.join(readings).sort_values("sort_key", kind="mergesort")

        self.stats["buckets"] = len(buckets)
        self.stats["bucket_collisions"] = len(frame) - len(buckets)
        if self.stats["bucket_collisions"]:
            self.logger.debug(f"{self.stats['bucket_collisions']} records merged into existing buckets")
        log_stats(self.logger, "Aggregation", self.stats)

        return [
            ChartPoint(
                label=row.label,
                date=row.date,
                shift=_none_if_na(row.shift),
                **{field: _none_if_na(getattr(row, field)) for field in READING_FIELDS}
            )
            for row in buckets.itertuples()
        ]

    def _to_frame(self, records: Sequence[CanonicalRecord], criteria: FilterCriteria) -> pd.DataFrame:
        """One row per dated record with its bucket key, label and sort key."""
        rows = []
        self.stats["records_skipped"] = 0
        for record in records:
            parts = parse_date_parts(record.date)
            if parts is None:
                self.stats["records_skipped"] += 1
                continue

            day = f"{parts[2]:02d}"
            shift = record.shift.value if record.shift is not None else None
            if criteria.all_shifts:
                key = f"{day}-{shift}"
                label = f"{day} ({shift[0] if shift else '-'})"
            else:
                key = label = day

            rows.append({
                "key": key,
                "label": label,
                "date": record.date,
                "shift": shift,
                "sort_key": parts[0] * 10000 + parts[1] * 100 + parts[2],
                **{field: getattr(record, field) for field in READING_FIELDS}
            })

        if not rows:
            return pd.DataFrame()

        frame = pd.DataFrame(rows)
        frame[list(READING_FIELDS)] = frame[list(READING_FIELDS)].astype(float)
        return frame
