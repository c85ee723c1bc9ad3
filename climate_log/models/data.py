"""
Pydantic models for data structures used throughout the pipeline.

Wire-facing models (CanonicalRecord, ChartPoint) dump with camelCase aliases
(``tempMin``, ``recordedBy``); Python code uses the snake_case attributes.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

# Untrusted remote row: arbitrary keys, scalar values
RawRecord = Mapping[str, Any]

ALL_SHIFTS = "All"
NO_DATA = "--"

TEMPERATURE_FIELDS = ("temp_min", "temp_current", "temp_max")
HUMIDITY_FIELDS = ("hum_min", "hum_current", "hum_max")
READING_FIELDS = TEMPERATURE_FIELDS + HUMIDITY_FIELDS


class ReadingKind(str, Enum):
    """Whether a record is a temperature or a humidity reading."""
    TEMPERATURE = "Temperature"
    HUMIDITY = "Humidity"

    @property
    def fields(self) -> Tuple[str, str, str]:
        """(min, current, max) attribute names owned by this kind."""
        return TEMPERATURE_FIELDS if self is ReadingKind.TEMPERATURE else HUMIDITY_FIELDS

    @property
    def other(self) -> "ReadingKind":
        return ReadingKind.HUMIDITY if self is ReadingKind.TEMPERATURE else ReadingKind.TEMPERATURE


class Shift(str, Enum):
    """Reporting period within a day."""
    MORNING = "Morning"
    AFTERNOON = "Afternoon"


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CanonicalRecord(_WireModel):
    """One normalized reading. Exactly one reading group may hold values."""
    id: Optional[int] = Field(None, description="Ingestion order within one fetch")
    date: Optional[str] = Field(None, description="Date, possibly timestamped; None when absent")
    time: Optional[str] = Field(None, description="Time of day, display only")
    shift: Optional[Shift] = Field(None, description="Morning, Afternoon or unset")
    zone: str = Field("", description="Facility area, may be 'LABORATORIO - <sub-zone>'")
    recorded_by: str = Field("", description="Operator name")
    notes: Optional[str] = Field(None, description="Free-text observations")
    kind: ReadingKind = Field(ReadingKind.TEMPERATURE, description="Reading kind")
    temp_min: Optional[float] = None
    temp_current: Optional[float] = None
    temp_max: Optional[float] = None
    hum_min: Optional[float] = None
    hum_current: Optional[float] = None
    hum_max: Optional[float] = None

    @model_validator(mode='after')
    def single_reading_group(self):
        for field in self.kind.other.fields:
            if getattr(self, field) is not None:
                raise ValueError(f"{self.kind.value} record cannot carry {field}")
        return self

    def readings(self) -> Dict[str, Optional[float]]:
        """Values of this record's own reading group keyed by attribute name."""
        return {field: getattr(self, field) for field in self.kind.fields}

    @property
    def current(self) -> Optional[float]:
        return self.temp_current if self.kind is ReadingKind.TEMPERATURE else self.hum_current

    def to_payload(self) -> Dict[str, Any]:
        """JSON body for the remote store (ingestion id excluded)."""
        return self.model_dump(mode="json", by_alias=True, exclude={"id"})


class FilterCriteria(BaseModel):
    """Selection driving the filter engine and report labels."""
    zone: str = Field(..., description="Exact zone name")
    year: int = Field(..., description="Calendar year")
    month: int = Field(..., ge=0, le=11, description="0-based month")
    shift: str = Field(ALL_SHIFTS, description="'All' or a Shift value")

    @field_validator('shift', mode='before')
    @classmethod
    def known_shift(cls, v):
        if isinstance(v, Shift):
            return v.value
        if v != ALL_SHIFTS and v not in {s.value for s in Shift}:
            raise ValueError(f"shift must be '{ALL_SHIFTS}' or one of {[s.value for s in Shift]}")
        return v

    @property
    def all_shifts(self) -> bool:
        return self.shift == ALL_SHIFTS


class ChartPoint(_WireModel):
    """One aggregation bucket of the chart series."""
    label: str
    date: str
    shift: Optional[Shift] = None
    temp_min: Optional[float] = None
    temp_current: Optional[float] = None
    temp_max: Optional[float] = None
    hum_min: Optional[float] = None
    hum_current: Optional[float] = None
    hum_max: Optional[float] = None


class FormEntry(BaseModel):
    """Operator input as typed, before parsing."""
    date: str = Field(default_factory=lambda: date.today().isoformat())
    time: Optional[str] = None
    shift: Shift = Shift.MORNING
    zone: str = ""
    kind: ReadingKind = ReadingKind.TEMPERATURE
    temp_min: str = ""
    temp_current: str = ""
    temp_max: str = ""
    hum_min: str = ""
    hum_current: str = ""
    hum_max: str = ""
    recorded_by: str = ""
    notes: str = ""

    @field_validator(*READING_FIELDS, mode='before')
    @classmethod
    def as_text(cls, v):
        return "" if v is None else str(v)

    def cleared(self) -> "FormEntry":
        """Copy keeping date, shift, zone, kind and operator; readings and notes emptied."""
        return self.model_copy(update={**{field: "" for field in READING_FIELDS}, "notes": ""})


class WriteStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    STALE = "stale"
    FAILED = "failed"


class PendingWrite(BaseModel):
    """A submitted record and what is known about its arrival in the store."""
    record: CanonicalRecord
    form: FormEntry
    status: WriteStatus = WriteStatus.PENDING
    submitted_at: datetime = Field(default_factory=datetime.now)
    attempts: int = 0
    error: Optional[str] = None


class ValidationResult(BaseModel):
    """Results from batch range validation."""
    passed: bool = Field(..., description="Whether no reading was out of range")
    total_records: int = Field(..., description="Total number of records validated")
    issues_found: List[str] = Field(default_factory=list, description="Out-of-range readings")
    quality_metrics: Dict[str, Any] = Field(default_factory=dict, description="Counts per field")


class MonthlyReport(BaseModel):
    """Everything the report view renders for one selection."""
    title: str
    criteria: FilterCriteria
    records: List[CanonicalRecord] = Field(default_factory=list)
    chart: List[ChartPoint] = Field(default_factory=list)
    averages: Dict[str, str] = Field(default_factory=dict)
    temperature_limits: Tuple[float, float]
    humidity_limits: Tuple[float, float]
    out_of_range_count: int = 0


class AppState(BaseModel):
    """Whole application state, replaced (never mutated) by each event."""
    model_config = ConfigDict(frozen=True)

    records: List[CanonicalRecord] = Field(default_factory=list)
    criteria: FilterCriteria
    form: FormEntry = Field(default_factory=FormEntry)
    last_fetch_error: Optional[str] = None
    notice: Optional[str] = None
    writes: List[PendingWrite] = Field(default_factory=list)
