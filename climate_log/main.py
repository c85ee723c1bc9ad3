"""
Application orchestrator for the zone climate log.

Coordinates the components around an explicit AppState value:
fetch -> normalize -> (records) -> filter -> {aggregate, averages, validation}
and form -> submit -> confirm -> (records). Every event handler takes a state
and returns a new one.
"""

import argparse
import time
from datetime import date
from pathlib import Path
from typing import Callable, List, Optional, Sequence

import requests

from climate_log.components import (
    ChartAggregator,
    CsvExportComponent,
    RecordFilter,
    RecordSubmissionComponent,
    RemoteStoreIngestionComponent,
    ZoneRangeValidator,
    summary_averages
)
from climate_log.config import ClimateLogConfig
from climate_log.models import (
    ALL_SHIFTS,
    AppState,
    CanonicalRecord,
    FilterCriteria,
    FormEntry,
    MonthlyReport,
    WriteStatus
)
from climate_log.utils import SubmissionError, get_logger, parse_date_parts, setup_logging

logger = get_logger(__name__)


class ClimateLogApp:
    """Main orchestrator that coordinates all components."""

    def __init__(self, config: ClimateLogConfig):
        """
        Initialize application with configuration.

        Args:
            config: Configuration loaded from YAML
        """
        self.config = config

        # Components are injected (dependency injection pattern)
        self.ingestion: Optional[RemoteStoreIngestionComponent] = None
        self.filter: Optional[RecordFilter] = None
        self.aggregator: Optional[ChartAggregator] = None
        self.validator: Optional[ZoneRangeValidator] = None
        self.exporter: Optional[CsvExportComponent] = None
        self.submission: Optional[RecordSubmissionComponent] = None

    def set_components(
        self,
        ingestion: RemoteStoreIngestionComponent,
        record_filter: RecordFilter,
        aggregator: ChartAggregator,
        validator: ZoneRangeValidator,
        exporter: CsvExportComponent,
        submission: RecordSubmissionComponent
    ):
        """Set application components (dependency injection)."""
        self.ingestion = ingestion
        self.filter = record_filter
        self.aggregator = aggregator
        self.validator = validator
        self.exporter = exporter
        self.submission = submission

    @classmethod
    def create(
        cls,
        config: ClimateLogConfig,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep
    ) -> "ClimateLogApp":
        """Build an application with the standard components."""
        app = cls(config)
        ingestion = RemoteStoreIngestionComponent(config, session=session)
        app.set_components(
            ingestion,
            RecordFilter(config),
            ChartAggregator(config),
            ZoneRangeValidator(config),
            CsvExportComponent(config),
            RecordSubmissionComponent(config, ingestion, sleep=sleep)
        )
        return app

    def initial_state(self, today: Optional[date] = None) -> AppState:
        """Empty dataset, current month selected for the first zone."""
        today = today or date.today()
        zone = self.config.enumerations.zone_options()[0]
        return AppState(
            criteria=FilterCriteria(zone=zone, year=today.year, month=today.month - 1, shift=ALL_SHIFTS),
            form=FormEntry(date=today.isoformat(), zone=zone)
        )

    def refresh(self, state: AppState) -> AppState:
        """Replace the dataset with a fresh fetch (empty on transport failure)."""
        records = self.ingestion.execute()
        return state.model_copy(update={"records": records, "last_fetch_error": self.ingestion.last_error})

    def select(self, state: AppState, **changes) -> AppState:
        """Change the filter selection."""
        criteria = FilterCriteria(**{**state.criteria.model_dump(), **changes})
        return state.model_copy(update={"criteria": criteria})

    def update_form(self, state: AppState, **changes) -> AppState:
        """Change form fields."""
        form = FormEntry(**{**state.form.model_dump(), **changes})
        return state.model_copy(update={"form": form})

    def submit(self, state: AppState) -> AppState:
        """
        Submit the current form and wait for the write to be confirmed.

        A rejected or failed submission keeps the form as typed and explains why
        in ``notice``. Otherwise the form readings are cleared and the dataset is
        replaced by the confirmation fetch.
        """
        try:
            pending, records = self.submission.submit_and_confirm(state.form)
        except SubmissionError as e:
            return state.model_copy(update={"notice": str(e)})

        writes = [*state.writes, pending]
        if pending.status is WriteStatus.FAILED:
            return state.model_copy(update={"writes": writes, "notice": pending.error})

        notice = (
            "Record saved."
            if pending.status is WriteStatus.CONFIRMED
            else "Record sent but not yet visible in the store; refresh later."
        )
        return state.model_copy(update={
            "writes": writes,
            "notice": notice,
            "form": state.form.cleared(),
            "records": records,
            "last_fetch_error": self.ingestion.last_error
        })

    def build_report(self, records: Sequence[CanonicalRecord], criteria: FilterCriteria) -> MonthlyReport:
        """Filtered history, chart series, averages and reference lines for a selection."""
        selected = self.filter.execute(records, criteria)
        chart = self.aggregator.execute(selected, criteria)
        validation = self.validator.execute(selected)
        zone_range = self.validator.resolve(criteria.zone)

        return MonthlyReport(
            title=self.report_title(criteria),
            criteria=criteria,
            records=newest_first(selected),
            chart=chart,
            averages=summary_averages(selected),
            temperature_limits=zone_range.temperature.as_tuple(),
            humidity_limits=zone_range.humidity.as_tuple(),
            out_of_range_count=len(validation.issues_found)
        )

    def report(self, state: AppState) -> MonthlyReport:
        return self.build_report(state.records, state.criteria)

    def report_title(self, criteria: FilterCriteria) -> str:
        title = f"{criteria.zone} - {self.config.enumerations.month_label(criteria.month)} {criteria.year}"
        if not criteria.all_shifts:
            title += f" ({criteria.shift})"
        return title

    def export(self, state: AppState, output_path: Optional[Path] = None) -> Path:
        """Write the CSV of the current selection and return its path."""
        selected = self.filter.execute(state.records, state.criteria)
        path = Path(output_path) if output_path else self.exporter.default_path()
        self.exporter.execute(selected, path)
        return path


def newest_first(records: Sequence[CanonicalRecord]) -> List[CanonicalRecord]:
    """History table order: most recent date first, store order within a day."""
    return sorted(records, key=lambda r: parse_date_parts(r.date) or (0, 0, 0), reverse=True)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Zone temperature and humidity monthly report")
    parser.add_argument("--config", default="config/default.yaml", help="YAML configuration file")
    parser.add_argument("--zone", help="Zone name (exact)")
    parser.add_argument("--year", type=int, help="Calendar year")
    parser.add_argument("--month", type=int, choices=range(1, 13), metavar="1-12", help="Calendar month")
    parser.add_argument("--shift", help="Morning, Afternoon or All")
    parser.add_argument("--export", action="store_true", help="Write the CSV export of the selection")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None):
    """Main entry point: fetch, report on one selection, optionally export."""
    args = parse_args(argv)
    try:
        config = ClimateLogConfig.from_yaml(Path(args.config))
        setup_logging(config.logging.level, config.logging.log_file)

        app = ClimateLogApp.create(config)
        state = app.refresh(app.initial_state())

        changes = {
            "zone": args.zone,
            "year": args.year,
            "month": args.month - 1 if args.month else None,
            "shift": args.shift
        }
        state = app.select(state, **{k: v for k, v in changes.items() if v is not None})
        report = app.report(state)

        print(f"\n📊 {config.app.name}: {report.title}")
        if state.last_fetch_error:
            print(f"   Could not load records: {state.last_fetch_error}")
        print(f"   Records loaded: {len(state.records)}")
        print(f"   Records in selection: {len(report.records)}")
        print(f"   Chart points: {len(report.chart)}")
        print(f"   Avg temperature: {report.averages['tempCurrent']} "
              f"(range {report.temperature_limits[0]:g} to {report.temperature_limits[1]:g})")
        print(f"   Avg humidity: {report.averages['humCurrent']} "
              f"(range {report.humidity_limits[0]:g} to {report.humidity_limits[1]:g})")
        print(f"   Out-of-range readings: {report.out_of_range_count}")

        if args.export:
            path = app.export(state)
            print(f"   CSV written to {path}")

    except Exception as e:
        logger.error(f"Run failed: {e}")
        print(f"Failed to run report: {e}")


if __name__ == "__main__":
    main()
