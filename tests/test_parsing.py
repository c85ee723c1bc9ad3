"""
Tests for the tolerant scalar parsers.
"""

from datetime import date, datetime

import pytest

from climate_log.utils import date_portion, fold_key, parse_date_parts, parse_number


class TestParseNumber:
    """Test suite for parse_number."""

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_absent_values_are_none(self, value):
        assert parse_number(value) is None

    def test_comma_and_point_decimals_agree(self):
        """A decimal comma reads the same as a decimal point."""
        assert parse_number("24,5") == parse_number("24.5") == 24.5
        assert parse_number("-18,25") == -18.25

    def test_numbers_pass_through(self):
        assert parse_number(22) == 22.0
        assert parse_number(21.75) == 21.75
        assert parse_number(0) == 0.0

    def test_unparsable_is_none_not_error(self):
        assert parse_number("abc") is None
        assert parse_number("N/A") is None
        assert parse_number(float("nan")) is None
        assert parse_number(True) is None

    def test_oversized_integer_is_none(self):
        """Integers beyond float range, as json decodes very long digit runs."""
        assert parse_number(10 ** 400) is None
        assert parse_number(-(10 ** 400)) is None

    def test_trailing_units_are_ignored(self):
        """Only the leading numeric part is read."""
        assert parse_number("24,5 °C") == 24.5
        assert parse_number(" 60% ") == 60.0


class TestDateParts:
    """Test suite for date_portion and parse_date_parts."""

    def test_timestamp_keeps_only_date(self):
        assert date_portion("2024-03-15T05:00:00.000Z") == "2024-03-15"
        assert parse_date_parts("2024-03-15T05:00:00.000Z") == (2024, 3, 15)

    def test_plain_date(self):
        assert parse_date_parts("2024-12-01") == (2024, 12, 1)

    def test_date_objects(self):
        assert parse_date_parts(date(2024, 3, 15)) == (2024, 3, 15)
        assert date_portion(datetime(2024, 3, 15, 10, 30)) == "2024-03-15"

    @pytest.mark.parametrize("value", [None, "", "2024-03", "15/03/2024", "fecha", "xx-03-15"])
    def test_unparsable_dates(self, value):
        assert parse_date_parts(value) is None


class TestFoldKey:
    """Test suite for fold_key."""

    def test_case_and_whitespace(self):
        assert fold_key(" Fecha ") == fold_key("FECHA") == fold_key("fecha") == "fecha"
        assert fold_key("Hora  Registro") == "hora registro"

    def test_composed_and_decomposed_accents_fold_together(self):
        assert fold_key("Mi\u0301nima") == fold_key("M\u00cdNIMA") == "m\u00ednima"
