"""Configuration models for the zone climate log."""

from .models import (
    AppInfo,
    RemoteStoreSettings,
    Enumerations,
    ValueRange,
    ZoneRange,
    ZoneLimits,
    ExportSettings,
    LoggingSettings,
    ClimateLogConfig,
    DEFAULT_ZONE
)

__all__ = [
    "AppInfo",
    "RemoteStoreSettings",
    "Enumerations",
    "ValueRange",
    "ZoneRange",
    "ZoneLimits",
    "ExportSettings",
    "LoggingSettings",
    "ClimateLogConfig",
    "DEFAULT_ZONE"
]
