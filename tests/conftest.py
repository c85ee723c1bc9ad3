"""
Pytest configuration and shared fixtures for testing.

Provides an in-memory configuration, raw store rows in the historical
spellings, a record factory and a fake spreadsheet store behind a session.
"""

import tempfile
from pathlib import Path
from typing import Any, Dict, List
from unittest.mock import Mock

import pytest
import requests

from climate_log.config import ClimateLogConfig
from climate_log.models import CanonicalRecord, ReadingKind, Shift

STORE_URL = "https://store.example.test/exec"


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def config_data(temp_dir) -> Dict[str, Any]:
    return {
        "app": {"name": "Test climate log", "version": "1.0.0"},
        "remote_store": {
            "url": STORE_URL,
            "timeout_seconds": 5,
            "confirm_delay_seconds": 0,
            "confirm_attempts": 3
        },
        "enumerations": {
            "zones": ["OPTICA", "FARMACIA", "LABORATORIO"],
            "laboratory_zone": "LABORATORIO",
            "laboratory_subzones": ["NEVERA", "CONGELADOR"],
            "shifts": ["Morning", "Afternoon"],
            "year_span": 5
        },
        "limits": {
            "CONGELADOR": {"temperature": {"min": -25, "max": -15}, "humidity": {"min": 0, "max": 100}},
            "FREEZER": {"temperature": {"min": -25, "max": -15}, "humidity": {"min": 0, "max": 100}},
            "NEVERA": {"temperature": {"min": 2, "max": 8}, "humidity": {"min": 35, "max": 70}},
            "DEFAULT": {"temperature": {"min": 15, "max": 30}, "humidity": {"min": 35, "max": 70}}
        },
        "export": {"reports_dir": str(temp_dir / "reports"), "filename": "report.csv", "missing_marker": "-"},
        "logging": {"level": "DEBUG", "log_file": None}
    }


@pytest.fixture
def sample_config(config_data) -> ClimateLogConfig:
    """Create a test configuration with temporary paths."""
    return ClimateLogConfig(**config_data)


@pytest.fixture
def raw_rows() -> List[Dict[str, Any]]:
    """Rows as the spreadsheet has returned them over the years."""
    return [
        {"Tipo": "Temperatura", "Fecha": "2024-03-15T05:00:00.000Z", "Hora Registro": "08:05",
         "Jornada": "Mañana", "Area": "OPTICA", "Mínima": "18,5", "Actual": "24,5", "Máxima": "26",
         "Responsable": "Ana", "Observaciones": "ok"},
        {" TIPO ": "Humedad", " FECHA ": "2024-03-15", "JORNADA": "Tarde", "AREA": "OPTICA",
         "MINIMA": 40, "ACTUAL": 55, "MAXIMA": 60, "RegistradoPor": "Luis"},
        {"type": "temperatura", "fecha": "2024-03-16", "jornada": "Tarde", "area": "OPTICA",
         "min": "", "actual": "abc", "max": None, "responsable": "Ana"},
        {"tipo": "Temperatura", "area": "OPTICA", "actual": 22},
        {"tipo": "Humedad", "fecha": "2024-04-02", "jornada": "Mañana", "area": "LABORATORIO - CONGELADOR",
         "m\u00c3\u00adnima": "30", "actual": "45", "m\u00c3\u00a1xima": "50", "responsable": "Eva"},
    ]


@pytest.fixture
def make_record():
    """Factory for canonical records with sensible defaults."""
    counter = {"next": 0}

    def _make(
        date="2024-03-15",
        zone="OPTICA",
        shift=Shift.MORNING,
        kind=ReadingKind.TEMPERATURE,
        current=None,
        minimum=None,
        maximum=None,
        **extra
    ) -> CanonicalRecord:
        counter["next"] += 1
        readings = dict(zip(kind.fields, (minimum, current, maximum)))
        fields = {"id": counter["next"], "date": date, "zone": zone, "shift": shift,
                  "kind": kind, "recorded_by": "Ana", **readings}
        fields.update(extra)
        return CanonicalRecord(**fields)

    return _make


class FakeStore:
    """
    Spreadsheet-like store: POSTed canonical records are kept as sheet rows
    (Spanish column names) and returned by GET.
    """

    def __init__(self, rows=None, visible_after: int = 0):
        self.rows: List[Dict[str, Any]] = list(rows or [])
        self.pending: List[Dict[str, Any]] = []
        self.visible_after = visible_after
        self.gets = 0
        self.posts: List[Dict[str, Any]] = []

    def get(self, url, timeout=None):
        self.gets += 1
        if self.pending and self.gets > self.visible_after:
            self.rows.extend(self.pending)
            self.pending = []
        response = Mock()
        response.raise_for_status.return_value = None
        response.json.return_value = [dict(row) for row in self.rows]
        return response

    def post(self, url, json=None, timeout=None):
        self.posts.append(json)
        prefix = "temp" if json["kind"] == "Temperature" else "hum"
        self.pending.append({
            "Tipo": "Temperatura" if prefix == "temp" else "Humedad",
            "Fecha": json["date"],
            "Hora Registro": json.get("time"),
            "Jornada": {"Morning": "Mañana", "Afternoon": "Tarde"}.get(json["shift"]),
            "Area": json["zone"],
            "Mínima": json[f"{prefix}Min"],
            "Actual": json[f"{prefix}Current"],
            "Máxima": json[f"{prefix}Max"],
            "Responsable": json["recordedBy"],
            "Observaciones": json.get("notes"),
        })
        self.gets = 0
        response = Mock()
        response.status_code = 0
        return response


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def failing_session():
    """Session whose every request fails at the network level."""
    session = Mock(spec=requests.Session)
    session.get.side_effect = requests.ConnectionError("network unreachable")
    session.post.side_effect = requests.ConnectionError("network unreachable")
    return session
