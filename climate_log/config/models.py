"""
Pydantic models for application configuration.

These models provide type-safe parsing and validation of the YAML configuration
file. The zone limits table is frozen once loaded.
"""

from datetime import date
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_serializer, field_validator, model_validator

from climate_log.utils.exceptions import ConfigurationError

DEFAULT_ZONE = "DEFAULT"

# Project root (parent of the package directory)
PROJECT_ROOT = Path(__file__).parent.parent.parent


def _resolve_path(value):
    """Resolve a relative path against the project root."""
    if isinstance(value, str):
        path = Path(value)
        if not path.is_absolute():
            path = (PROJECT_ROOT / value).resolve()
        return str(path)
    return value


class AppInfo(BaseModel):
    """Basic application metadata."""
    name: str = Field("Control de Temperatura y Humedad", description="Application title")
    version: str = Field("1.0.0", description="Application version")


class RemoteStoreSettings(BaseModel):
    """Remote key-value log accessed over HTTP."""
    url: str = Field("", description="Store endpoint; empty disables network access")
    timeout_seconds: float = Field(15.0, gt=0, description="HTTP timeout per request")
    confirm_delay_seconds: float = Field(1.0, ge=0, description="Delay between write-confirmation polls")
    confirm_attempts: int = Field(3, ge=1, description="Polls before a pending write becomes stale")


class Enumerations(BaseModel):
    """Closed, statically configured selector lists."""
    zones: List[str] = Field(
        default_factory=lambda: ["OPTICA", "FARMACIA", "PROCEDIMIENTOS", "TOMA MUESTRA", "ODONTOLOGIA", "LABORATORIO"],
        description="Facility zones"
    )
    laboratory_zone: str = Field("LABORATORIO", description="Zone whose sub-zones use the composite form")
    laboratory_subzones: List[str] = Field(default_factory=list, description="Laboratory sub-zones")
    shifts: List[str] = Field(default_factory=lambda: ["Morning", "Afternoon"], description="Shift values")
    months: List[str] = Field(
        default_factory=lambda: [
            "Enero", "Febrero", "Marzo", "Abril", "Mayo", "Junio",
            "Julio", "Agosto", "Septiembre", "Octubre", "Noviembre", "Diciembre"
        ],
        description="Month display labels, index is the 0-based month"
    )
    year_span: int = Field(5, ge=1, description="Number of years offered by the year selector")

    @field_validator('months')
    @classmethod
    def twelve_months(cls, v):
        if len(v) != 12:
            raise ValueError(f"months must list 12 labels, got {len(v)}")
        return v

    def zone_options(self) -> List[str]:
        """Configured zones with the laboratory composites expanded after the laboratory."""
        options = []
        for zone in self.zones:
            options.append(zone)
            if zone == self.laboratory_zone:
                options.extend(f"{zone} - {sub}" for sub in self.laboratory_subzones)
        return options

    def month_label(self, month: int) -> str:
        """Display label for a 0-based month."""
        return self.months[month]

    def year_options(self, today: Optional[date] = None) -> List[int]:
        """Current year followed by the previous years, newest first."""
        current = (today or date.today()).year
        return [current - i for i in range(self.year_span)]


class ValueRange(BaseModel):
    """Acceptable inclusive range for one reading type."""
    model_config = ConfigDict(frozen=True)

    min: float = Field(..., description="Minimum acceptable value")
    max: float = Field(..., description="Maximum acceptable value")

    @model_validator(mode='after')
    def ordered(self):
        if self.min > self.max:
            raise ValueError(f"range min {self.min} is greater than max {self.max}")
        return self

    def as_tuple(self) -> Tuple[float, float]:
        return self.min, self.max


class ZoneRange(BaseModel):
    """Temperature and humidity ranges for one zone."""
    model_config = ConfigDict(frozen=True)

    temperature: ValueRange
    humidity: ValueRange


class ZoneLimits(BaseModel):
    """
    Ordered, immutable mapping of zone-name substring to its ranges.

    Iteration order is the YAML order and decides which key wins when a zone
    name contains several keys.
    """
    model_config = ConfigDict(frozen=True)

    zones: Mapping[str, ZoneRange]

    @field_validator('zones')
    @classmethod
    def has_default(cls, v):
        if DEFAULT_ZONE not in v:
            raise ValueError(f"limits must define a '{DEFAULT_ZONE}' entry")
        return MappingProxyType(dict(v))

    @field_serializer('zones')
    def dump_zones(self, zones):
        return dict(zones)

    @property
    def default(self) -> ZoneRange:
        return self.zones[DEFAULT_ZONE]

    def keys(self) -> List[str]:
        """Non-default keys in table order."""
        return [key for key in self.zones if key != DEFAULT_ZONE]


def _default_limits() -> Dict[str, ZoneRange]:
    freezer = ZoneRange(temperature=ValueRange(min=-25, max=-15), humidity=ValueRange(min=0, max=100))
    fridge = ZoneRange(temperature=ValueRange(min=2, max=8), humidity=ValueRange(min=35, max=70))
    return {
        "CONGELADOR": freezer,
        "FREEZER": freezer,
        "NEVERA": fridge,
        "FRIDGE": fridge,
        DEFAULT_ZONE: ZoneRange(
            temperature=ValueRange(min=15, max=30),
            humidity=ValueRange(min=35, max=70)
        )
    }


class ExportSettings(BaseModel):
    """CSV export configuration."""
    reports_dir: str = Field("reports", description="Directory for exported CSV files")
    filename: str = Field("IPS_Reporte.csv", description="Default export file name")
    missing_marker: str = Field("-", description="Rendered in place of missing values")

    @field_validator('reports_dir', mode='before')
    @classmethod
    def resolve_paths(cls, v):
        """Convert relative paths to absolute paths."""
        return _resolve_path(v)


class LoggingSettings(BaseModel):
    """Logging configuration."""
    level: str = Field("INFO", description="Root logging level")
    log_file: Optional[str] = Field(None, description="Optional log file path")

    @field_validator('log_file', mode='before')
    @classmethod
    def resolve_log_path(cls, v):
        return _resolve_path(v)


class ClimateLogConfig(BaseModel):
    """Complete application configuration model."""
    model_config = ConfigDict(extra='forbid')

    app: AppInfo = Field(default_factory=AppInfo, description="Application metadata")
    remote_store: RemoteStoreSettings = Field(default_factory=RemoteStoreSettings, description="Remote store")
    enumerations: Enumerations = Field(default_factory=Enumerations, description="Selector lists")
    limits: ZoneLimits = Field(default_factory=lambda: ZoneLimits(zones=_default_limits()), description="Zone limits")
    export: ExportSettings = Field(default_factory=ExportSettings, description="CSV export settings")
    logging: LoggingSettings = Field(default_factory=LoggingSettings, description="Logging settings")

    @field_validator('limits', mode='before')
    @classmethod
    def wrap_limits(cls, v):
        """Accept the YAML shape (a plain zone mapping) as well as {'zones': ...}."""
        if isinstance(v, dict) and 'zones' not in v:
            return {'zones': v}
        return v

    @classmethod
    def from_yaml(cls, config_path: Union[str, Path]) -> "ClimateLogConfig":
        """Load configuration from YAML file."""
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        try:
            return cls(**config_data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration in {config_path}: {e}") from e
