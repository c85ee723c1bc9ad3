"""
Record normalization component for the zone climate log.

Maps loosely-structured rows from the remote store onto CanonicalRecord. The
store's column names have drifted over time (renames, case, accents, legacy
transcoding damage), so every logical field is resolved through a prioritized
alias list and anything unresolvable becomes None instead of raising.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from climate_log.components.base import NormalizationComponent
from climate_log.config import ClimateLogConfig
from climate_log.models import CanonicalRecord, RawRecord, ReadingKind, Shift
from climate_log.utils import NormalizationError, fold_key, get_logger, log_stats, parse_number

# Logical field -> raw key aliases, highest priority first.
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "kind": ("tipo", "type", "kind"),
    "current": ("actual", "tempcurrent", "humcurrent", "tempactual", "humactual"),
    "minimum": ("mínima", "minima", "min", "mÃ\u00adnima", "mÃnima", "tempmin", "hummin"),
    "maximum": ("máxima", "maxima", "max", "mÃ¡xima", "tempmax", "hummax"),
    "date": ("fecha", "date"),
    "time": ("hora registro", "hora", "time"),
    "shift": ("jornada", "shift"),
    "zone": ("area", "área", "zone"),
    "recorded_by": ("responsable", "registradopor", "recordedby"),
    "notes": ("observaciones", "notes"),
}

SHIFT_ALIASES: Dict[str, Shift] = {
    "morning": Shift.MORNING,
    "mañana": Shift.MORNING,
    "manana": Shift.MORNING,
    "afternoon": Shift.AFTERNOON,
    "tarde": Shift.AFTERNOON,
}

DEFAULT_KIND = "temperatura"


def build_key_index(raw: Mapping[Any, Any]) -> Dict[str, Any]:
    """Index a raw row by folded key. Later duplicates of a folded key are ignored."""
    index: Dict[str, Any] = {}
    for key, value in raw.items():
        index.setdefault(fold_key(key), value)
    return index


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def lookup(index: Mapping[str, Any], field: str) -> Any:
    """Return the value of the first alias of ``field`` present and non-blank."""
    for alias in FIELD_ALIASES[field]:
        value = index.get(fold_key(alias))
        if not _is_blank(value):
            return value
    return None


def resolve_kind(raw_kind: Any) -> ReadingKind:
    """Humidity when the type mentions 'hum', Temperature otherwise."""
    text = str(raw_kind if not _is_blank(raw_kind) else DEFAULT_KIND).lower()
    return ReadingKind.HUMIDITY if "hum" in text else ReadingKind.TEMPERATURE


def resolve_shift(raw_shift: Any) -> Optional[Shift]:
    if _is_blank(raw_shift):
        return None
    return SHIFT_ALIASES.get(fold_key(raw_shift))


def _text(value: Any) -> Optional[str]:
    if _is_blank(value):
        return None
    return str(value).strip()


class RecordNormalizer(NormalizationComponent):
    """Concrete normalizer for rows read from the spreadsheet store."""

    def __init__(self, config: ClimateLogConfig):
        """
        Initialize normalizer.

        Args:
            config: Application configuration
        """
        super().__init__(config)
        self.logger = get_logger(__name__)
        self._reset_stats()

    def _reset_stats(self):
        self.stats = {
            "records_normalized": 0,
            "temperature_records": 0,
            "humidity_records": 0,
            "records_without_date": 0,
            "unparsable_numbers": 0,
            "unknown_shifts": 0,
            "non_object_rows": 0
        }

    def execute(self, raw_records: Sequence[RawRecord]) -> List[CanonicalRecord]:
        """
        Normalize a fetched batch. Never drops a row.

        Args:
            raw_records: Rows as received from the remote store

        Returns:
            One CanonicalRecord per row, ``id`` being the row position

        Raises:
            NormalizationError: If the batch is not a list of rows
        """
        if not isinstance(raw_records, (list, tuple)):
            raise NormalizationError(f"Expected a list of records, got {type(raw_records).__name__}")

        self._reset_stats()
        self.logger.info(f"Normalizing {len(raw_records)} raw records")
        records = [self.normalize(raw, index) for index, raw in enumerate(raw_records)]

        log_stats(self.logger, "Normalization", self.stats)
        return records

    def normalize(self, raw: RawRecord, record_id: int) -> CanonicalRecord:
        """
        Map one raw row to a CanonicalRecord.

        Args:
            raw: Untrusted row
            record_id: Position of the row within the fetch

        Returns:
            Canonical record; unresolvable fields are None or empty
        """
        if not isinstance(raw, Mapping):
            self.stats["non_object_rows"] += 1
            self.logger.warning(f"Row {record_id} is not an object ({type(raw).__name__}); normalized as empty")
            raw = {}

        index = build_key_index(raw)
        kind = resolve_kind(lookup(index, "kind"))

        minimum = self._number(index, "minimum", record_id)
        current = self._number(index, "current", record_id)
        maximum = self._number(index, "maximum", record_id)
        readings = dict(zip(kind.fields, (minimum, current, maximum)))

        raw_shift = lookup(index, "shift")
        shift = resolve_shift(raw_shift)
        if raw_shift is not None and shift is None:
            self.stats["unknown_shifts"] += 1
            self.logger.debug(f"Row {record_id}: unknown shift {raw_shift!r} left unset")

        date = _text(lookup(index, "date"))
        if date is None:
            self.stats["records_without_date"] += 1
            self.logger.warning(f"Row {record_id} has no date; it will not appear in filtered views")

        self.stats["records_normalized"] += 1
        self.stats["temperature_records" if kind is ReadingKind.TEMPERATURE else "humidity_records"] += 1

        return CanonicalRecord(
            id=record_id,
            date=date,
            time=_text(lookup(index, "time")),
            shift=shift,
            zone=_text(lookup(index, "zone")) or "",
            recorded_by=_text(lookup(index, "recorded_by")) or "",
            notes=_text(lookup(index, "notes")),
            kind=kind,
            **readings
        )

    def _number(self, index: Mapping[str, Any], field: str, record_id: int) -> Optional[float]:
        value = lookup(index, field)
        number = parse_number(value)
        if value is not None and number is None:
            self.stats["unparsable_numbers"] += 1
            self.logger.debug(f"Row {record_id}: {field} value {value!r} is not a number")
        return number
