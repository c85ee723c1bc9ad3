"""
Form submission component for the zone climate log.

Turns operator input into a CanonicalRecord, POSTs it to the remote store and
tracks it through an explicit write protocol:

    pending -> confirmed   a later fetch contains a matching row
    pending -> stale       no match after the configured number of polls
    failed                 the POST itself raised

The store does not acknowledge writes, so confirmation comes only from reading
the row back.
"""

import math
import time
from typing import Callable, Dict, List, Optional, Tuple

import requests

from climate_log.components.base import PipelineComponent
from climate_log.components.ingestion import RemoteStoreIngestionComponent
from climate_log.components.validation import is_out_of_range, range_for, resolve_zone_limits
from climate_log.config import ClimateLogConfig
from climate_log.models import CanonicalRecord, FormEntry, PendingWrite, ReadingKind, WriteStatus
from climate_log.utils import SubmissionError, date_portion, get_logger, log_stats, parse_date_parts, parse_number


def record_matches(candidate: CanonicalRecord, submitted: CanonicalRecord) -> bool:
    """Whether a fetched record is the read-back of a submitted one."""
    if candidate.kind is not submitted.kind:
        return False
    if date_portion(candidate.date) != date_portion(submitted.date):
        return False
    if (candidate.zone, candidate.shift, candidate.recorded_by) != (submitted.zone, submitted.shift, submitted.recorded_by):
        return False
    if candidate.current is None or submitted.current is None:
        return False
    return math.isclose(candidate.current, submitted.current, abs_tol=1e-9)


class RecordSubmissionComponent(PipelineComponent):
    """Validates, sends and confirms operator submissions."""

    def __init__(
        self,
        config: ClimateLogConfig,
        ingestion: RemoteStoreIngestionComponent,
        sleep: Callable[[float], None] = time.sleep
    ):
        """
        Initialize submission component.

        Args:
            config: Application configuration
            ingestion: Used for the HTTP session and the confirmation fetches
            sleep: Delay function between confirmation polls
        """
        super().__init__(config)
        self.logger = get_logger(__name__)
        self.ingestion = ingestion
        self.session = ingestion.session
        self.sleep = sleep

        self.stats = {
            "submitted": 0,
            "rejected": 0,
            "failed": 0,
            "confirmed": 0,
            "stale": 0
        }

    def range_feedback(self, form: FormEntry) -> Dict[str, bool]:
        """Out-of-range flag for each reading input of the selected kind."""
        bounds = range_for(resolve_zone_limits(form.zone, self.config.limits), form.kind)
        return {field: is_out_of_range(getattr(form, field), bounds) for field in form.kind.fields}

    def validate_form(self, form: FormEntry) -> None:
        """
        Check the rules a form must satisfy before anything is sent.

        Raises:
            SubmissionError: With a message suitable for the operator
        """
        if not form.recorded_by.strip():
            raise SubmissionError("The 'Recorded by' field is required.")
        if not form.zone.strip():
            raise SubmissionError("A zone must be selected.")
        if parse_date_parts(form.date) is None:
            raise SubmissionError(f"Invalid date {form.date!r}; expected YYYY-MM-DD.")

        current_field = form.kind.fields[1]
        if parse_number(getattr(form, current_field)) is None:
            label = "temperature" if form.kind is ReadingKind.TEMPERATURE else "humidity"
            raise SubmissionError(f"The current {label} is required.")

    def build_record(self, form: FormEntry) -> CanonicalRecord:
        """Outbound record; readings of the other kind are dropped."""
        return CanonicalRecord(
            date=form.date,
            time=form.time or None,
            shift=form.shift,
            zone=form.zone.strip(),
            recorded_by=form.recorded_by.strip(),
            notes=form.notes.strip() or None,
            kind=form.kind,
            **{field: parse_number(getattr(form, field)) for field in form.kind.fields}
        )

    def dispatch(self, record: CanonicalRecord) -> None:
        """
        POST one record. The response is not inspected.

        Raises:
            SubmissionError: When no store is configured or the request raised
        """
        url = self.config.remote_store.url
        if not url:
            raise SubmissionError("No remote store configured.")
        try:
            response = self.session.post(
                url,
                json=record.to_payload(),
                timeout=self.config.remote_store.timeout_seconds
            )
        except requests.RequestException as e:
            raise SubmissionError(f"Connection error: {e}") from e
        self.logger.debug(f"Store answered POST with status {getattr(response, 'status_code', None)}")

    def execute(self, form: FormEntry) -> PendingWrite:
        """
        Validate and send a form.

        Args:
            form: Operator input

        Returns:
            PendingWrite in status PENDING, or FAILED when the POST raised

        Raises:
            SubmissionError: If the form breaks a submission rule
        """
        try:
            self.validate_form(form)
        except SubmissionError as e:
            self.stats["rejected"] += 1
            self.logger.warning(f"Submission rejected: {e}")
            raise

        record = self.build_record(form)
        try:
            self.dispatch(record)
        except SubmissionError as e:
            self.stats["failed"] += 1
            self.logger.error(f"Error saving record: {e}")
            return PendingWrite(record=record, form=form, status=WriteStatus.FAILED, error=str(e))

        self.stats["submitted"] += 1
        self.logger.info(f"Submitted {record.kind.value} reading for {record.zone} on {record.date}")
        return PendingWrite(record=record, form=form)

    def confirm(self, pending: PendingWrite) -> Tuple[PendingWrite, List[CanonicalRecord]]:
        """
        Poll the store until the write shows up or the attempts run out.

        Args:
            pending: A PENDING write

        Returns:
            The updated write and the dataset from the last poll
        """
        if pending.status is not WriteStatus.PENDING:
            return pending, []

        settings = self.config.remote_store
        records: List[CanonicalRecord] = []
        for attempt in range(1, settings.confirm_attempts + 1):
            self.sleep(settings.confirm_delay_seconds)
            records = self.ingestion.execute()
            if any(record_matches(record, pending.record) for record in records):
                self.stats["confirmed"] += 1
                self.logger.info(f"Write confirmed after {attempt} poll(s)")
                return pending.model_copy(update={"status": WriteStatus.CONFIRMED, "attempts": attempt}), records

        self.stats["stale"] += 1
        self.logger.warning(f"Write not visible after {settings.confirm_attempts} poll(s); marked stale")
        log_stats(self.logger, "Submission", self.stats)
        return pending.model_copy(update={"status": WriteStatus.STALE, "attempts": settings.confirm_attempts}), records

    def submit_and_confirm(self, form: FormEntry) -> Tuple[PendingWrite, Optional[List[CanonicalRecord]]]:
        """Send a form and, unless sending failed, wait for confirmation."""
        pending = self.execute(form)
        if pending.status is WriteStatus.FAILED:
            return pending, None
        return self.confirm(pending)
