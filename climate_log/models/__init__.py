"""Data models for the zone climate log pipeline."""

from .data import (
    RawRecord,
    ReadingKind,
    Shift,
    ALL_SHIFTS,
    NO_DATA,
    CanonicalRecord,
    FilterCriteria,
    ChartPoint,
    FormEntry,
    WriteStatus,
    PendingWrite,
    ValidationResult,
    MonthlyReport,
    AppState
)

__all__ = [
    "RawRecord",
    "ReadingKind",
    "Shift",
    "ALL_SHIFTS",
    "NO_DATA",
    "CanonicalRecord",
    "FilterCriteria",
    "ChartPoint",
    "FormEntry",
    "WriteStatus",
    "PendingWrite",
    "ValidationResult",
    "MonthlyReport",
    "AppState"
]
