"""
Tests for the remote store ingestion component.

The HTTP session is always a mock; no test touches the network.
"""

from unittest.mock import Mock, patch

import pytest
import requests

from climate_log.components.ingestion import RemoteStoreIngestionComponent
from climate_log.models import ReadingKind
from climate_log.utils.exceptions import IngestionError
from tests.conftest import STORE_URL


def _session_returning(payload):
    session = Mock(spec=requests.Session)
    response = Mock()
    response.raise_for_status.return_value = None
    response.json.return_value = payload
    session.get.return_value = response
    return session


class TestRemoteStoreIngestionComponent:
    """Test suite for RemoteStoreIngestionComponent."""

    def test_init(self, sample_config):
        component = RemoteStoreIngestionComponent(sample_config, session=Mock())

        assert component.config == sample_config
        assert component.logger is not None
        assert component.normalizer is not None
        assert component.url == STORE_URL
        assert component.stats["fetches"] == 0

    def test_execute_fetches_and_normalizes(self, sample_config, raw_rows):
        session = _session_returning(raw_rows)
        component = RemoteStoreIngestionComponent(sample_config, session=session)

        records = component.execute()

        session.get.assert_called_once_with(STORE_URL, timeout=5)
        assert len(records) == len(raw_rows)
        assert records[1].kind is ReadingKind.HUMIDITY
        assert component.last_error is None
        assert component.stats["rows_received"] == len(raw_rows)
        assert component.stats["records_ingested"] == len(raw_rows)

    def test_transport_failure_yields_empty_dataset(self, sample_config, failing_session):
        component = RemoteStoreIngestionComponent(sample_config, session=failing_session)

        with patch.object(component.logger, 'error') as mock_error:
            records = component.execute()

        assert records == []
        assert "network unreachable" in component.last_error
        assert component.stats["fetches_failed"] == 1
        mock_error.assert_called_once()

    def test_transport_failure_can_raise(self, sample_config, failing_session):
        component = RemoteStoreIngestionComponent(sample_config, session=failing_session)

        with pytest.raises(IngestionError):
            component.execute(raise_on_error=True)

    def test_http_error_status(self, sample_config):
        session = _session_returning([])
        session.get.return_value.raise_for_status.side_effect = requests.HTTPError("500 Server Error")
        component = RemoteStoreIngestionComponent(sample_config, session=session)

        assert component.execute() == []
        assert "500" in component.last_error

    def test_invalid_json(self, sample_config):
        session = _session_returning(None)
        session.get.return_value.json.side_effect = ValueError("Expecting value")
        component = RemoteStoreIngestionComponent(sample_config, session=session)

        assert component.execute() == []
        assert "invalid JSON" in component.last_error

    def test_non_list_payload_is_ignored(self, sample_config):
        component = RemoteStoreIngestionComponent(sample_config, session=_session_returning({"error": "quota"}))

        assert component.execute() == []
        assert component.last_error is None

    def test_no_url_configured(self, sample_config):
        sample_config.remote_store.url = ""
        session = Mock(spec=requests.Session)
        component = RemoteStoreIngestionComponent(sample_config, session=session)

        assert component.execute() == []
        session.get.assert_not_called()

    def test_oversized_reading_keeps_the_fetch(self, sample_config):
        payload = [
            {"tipo": "Temperatura", "fecha": "2024-03-15", "area": "OPTICA", "actual": 10 ** 400},
            {"tipo": "Temperatura", "fecha": "2024-03-15", "area": "OPTICA", "actual": 22},
        ]
        component = RemoteStoreIngestionComponent(sample_config, session=_session_returning(payload))

        records = component.execute()

        assert len(records) == 2
        assert records[0].temp_current is None
        assert records[1].temp_current == 22.0
        assert component.last_error is None

    def test_last_error_cleared_on_success(self, sample_config, raw_rows):
        session = _session_returning(raw_rows)
        ok_response = session.get.return_value
        session.get.side_effect = [requests.Timeout("timed out"), ok_response]
        component = RemoteStoreIngestionComponent(sample_config, session=session)

        assert component.execute() == []
        assert component.last_error is not None
        assert len(component.execute()) == len(raw_rows)
        assert component.last_error is None
