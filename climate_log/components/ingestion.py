"""
Remote store ingestion component for the zone climate log.

Reads the whole dataset from the spreadsheet endpoint with one GET and hands
the rows to the normalizer. Transport failures are caught here: they are
logged and surface as an empty dataset plus ``last_error``.
"""

from typing import Any, List, Optional

import requests

from climate_log.components.base import IngestionComponent
from climate_log.components.normalization import RecordNormalizer
from climate_log.config import ClimateLogConfig
from climate_log.models import CanonicalRecord
from climate_log.utils import IngestionError, get_logger, log_stats


class RemoteStoreIngestionComponent(IngestionComponent):
    """Fetches and normalizes the remote record log."""

    def __init__(
        self,
        config: ClimateLogConfig,
        session: Optional[requests.Session] = None,
        normalizer: Optional[RecordNormalizer] = None
    ):
        """
        Initialize ingestion component.

        Args:
            config: Application configuration
            session: HTTP session, shared with the submission component
            normalizer: Normalizer for fetched rows
        """
        super().__init__(config)
        self.logger = get_logger(__name__)
        self.session = session or requests.Session()
        self.normalizer = normalizer or RecordNormalizer(config)
        self.last_error: Optional[str] = None

        self.stats = {
            "fetches": 0,
            "fetches_failed": 0,
            "rows_received": 0,
            "records_ingested": 0
        }

    @property
    def url(self) -> str:
        return self.config.remote_store.url

    def execute(self, raise_on_error: bool = False) -> List[CanonicalRecord]:
        """
        Fetch the entire dataset and normalize it.

        Args:
            raise_on_error: Raise instead of returning an empty dataset

        Returns:
            Canonical records in store order, empty on transport failure

        Raises:
            IngestionError: Only when ``raise_on_error`` is set
        """
        self.last_error = None
        try:
            rows = self.fetch_raw()
        except IngestionError as e:
            self.stats["fetches_failed"] += 1
            self.last_error = str(e)
            self.logger.error(f"Error loading records: {e}")
            if raise_on_error:
                raise
            return []

        records = self.normalizer.execute(rows)
        self.stats["records_ingested"] = len(records)
        log_stats(self.logger, "Ingestion", self.stats)
        return records

    def fetch_raw(self) -> List[Any]:
        """
        GET the store and return its JSON array.

        Returns:
            Raw rows; empty when no endpoint is configured or the payload is not an array

        Raises:
            IngestionError: On network, HTTP status or JSON decoding failure
        """
        if not self.url:
            self.logger.info("No remote store configured; dataset is empty")
            return []

        self.stats["fetches"] += 1
        try:
            response = self.session.get(self.url, timeout=self.config.remote_store.timeout_seconds)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise IngestionError(f"Remote store request failed: {e}") from e
        except ValueError as e:
            raise IngestionError(f"Remote store returned invalid JSON: {e}") from e

        if not isinstance(data, list):
            self.logger.warning(f"Remote store returned {type(data).__name__} instead of a list; ignoring")
            return []

        self.stats["rows_received"] = len(data)
        self.logger.info(f"Fetched {len(data)} rows from remote store")
        return data
