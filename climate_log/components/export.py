"""
CSV export component for the zone climate log.

Serializes an already filtered record set to the fixed 13-column layout used
by the facility's paper archive. Missing values render as the configured
marker, the notes column is always double-quoted and any other text cell
is quoted when it holds a delimiter.
"""

from pathlib import Path
from typing import Any, Optional, Sequence, Union

import pandas as pd

from climate_log.components.base import ExportComponent
from climate_log.config import ClimateLogConfig
from climate_log.models import CanonicalRecord, ReadingKind, Shift
from climate_log.models.data import READING_FIELDS
from climate_log.utils import ExportError, get_logger

CSV_HEADER = [
    "Tipo", "Fecha", "Hora", "Area", "Jornada",
    "T.Min", "T.Act", "T.Max", "H.Min", "H.Act", "H.Max",
    "Resp", "Obs"
]

KIND_LABELS = {ReadingKind.TEMPERATURE: "Temperatura", ReadingKind.HUMIDITY: "Humedad"}
SHIFT_LABELS = {Shift.MORNING: "Mañana", Shift.AFTERNOON: "Tarde"}


_NEEDS_QUOTING = (",", '"', "\n", "\r")


def _quote(text: Optional[str]) -> str:
    return '"' + (text or "").replace('"', '""') + '"'


def _escape(text: str) -> str:
    """Quote a free-text cell only when it would otherwise split the row."""
    if any(char in text for char in _NEEDS_QUOTING):
        return _quote(text)
    return text


class CsvExportComponent(ExportComponent):
    """Renders and writes the CSV report."""

    def __init__(self, config: ClimateLogConfig):
        super().__init__(config)
        self.logger = get_logger(__name__)
        self.missing = config.export.missing_marker
        self.output_dir = Path(config.export.reports_dir)

    def _cell(self, value: Any) -> str:
        if value is None or value == "":
            return self.missing
        if isinstance(value, float):
            return f"{value:g}"
        return _escape(str(value))

    def to_frame(self, records: Sequence[CanonicalRecord]) -> pd.DataFrame:
        """Rendered cells, one row per record, columns in CSV order."""
        rows = []
        for record in records:
            rows.append(
                [
                    KIND_LABELS[record.kind],
                    self._cell(record.date),
                    self._cell(record.time),
                    self._cell(record.zone),
                    self._cell(SHIFT_LABELS.get(record.shift)),
                ]
                + [self._cell(getattr(record, field)) for field in READING_FIELDS]
                + [self._cell(record.recorded_by), _quote(record.notes)]
            )
        return pd.DataFrame(rows, columns=CSV_HEADER)

    def render(self, records: Sequence[CanonicalRecord]) -> str:
        frame = self.to_frame(records)
        lines = [",".join(CSV_HEADER)]
        lines.extend(",".join(row) for row in frame.itertuples(index=False, name=None))
        return "\n".join(lines)

    def execute(
        self,
        records: Sequence[CanonicalRecord],
        output_path: Optional[Union[str, Path]] = None
    ) -> str:
        """
        Render the CSV and optionally write it.

        Args:
            records: Filtered records, exported in the given order
            output_path: File to write; nothing is written when omitted

        Returns:
            CSV text

        Raises:
            ExportError: If the file cannot be written
        """
        content = self.render(records)
        self.logger.info(f"Rendered {len(records)} records for export")
        if output_path is not None:
            self.write(content, output_path)
        return content

    def default_path(self) -> Path:
        return self.output_dir / self.config.export.filename

    def write(self, content: str, output_path: Union[str, Path]) -> Path:
        path = Path(output_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            self.logger.error(f"Failed to write export to {path}: {e}")
            raise ExportError(f"Could not write CSV export to {path}: {e}") from e

        self.logger.info(f"Wrote CSV export to {path}")
        return path
