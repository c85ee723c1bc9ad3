"""
Tests for configuration loading and the selector enumerations.
"""

from datetime import date
from pathlib import Path

import pytest
import yaml

from climate_log.config import ClimateLogConfig, ZoneLimits
from climate_log.utils.exceptions import ConfigurationError

DEFAULT_CONFIG = Path(__file__).parent.parent / "config" / "default.yaml"


class TestClimateLogConfig:
    """Test suite for ClimateLogConfig."""

    def test_project_default_config_loads(self):
        config = ClimateLogConfig.from_yaml(DEFAULT_CONFIG)

        assert config.limits.default.temperature.as_tuple() == (15, 30)
        assert config.limits.default.humidity.as_tuple() == (35, 70)
        assert config.enumerations.zones[0] == "OPTICA"
        assert "FREEZER" in config.limits.keys()

    def test_built_in_defaults(self):
        config = ClimateLogConfig()

        assert config.remote_store.url == ""
        assert config.limits.default.temperature.as_tuple() == (15, 30)
        assert config.limits.keys()[0] == "CONGELADOR"

    def test_missing_file(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            ClimateLogConfig.from_yaml(temp_dir / "missing.yaml")

    def test_limits_require_default(self, temp_dir):
        path = temp_dir / "config.yaml"
        path.write_text(yaml.safe_dump({
            "limits": {"NEVERA": {"temperature": {"min": 2, "max": 8}, "humidity": {"min": 35, "max": 70}}}
        }))

        with pytest.raises(ConfigurationError):
            ClimateLogConfig.from_yaml(path)

    def test_unknown_section_rejected(self, temp_dir):
        path = temp_dir / "config.yaml"
        path.write_text("paths:\n  data_raw: data\n")

        with pytest.raises(ConfigurationError):
            ClimateLogConfig.from_yaml(path)

    def test_inverted_range_rejected(self, config_data):
        config_data["limits"]["DEFAULT"]["temperature"] = {"min": 30, "max": 15}

        with pytest.raises(ValueError):
            ClimateLogConfig(**config_data)

    def test_limits_are_immutable(self, sample_config):
        with pytest.raises(Exception):
            sample_config.limits.zones = {}
        with pytest.raises(Exception):
            sample_config.limits.default.temperature.min = 0

    def test_limits_table_is_read_only(self, sample_config):
        zones = sample_config.limits.zones

        with pytest.raises(TypeError):
            zones["FREEZER"] = zones["DEFAULT"]
        with pytest.raises(TypeError):
            del zones["DEFAULT"]
        assert sample_config.limits.keys()[0] == "CONGELADOR"

    def test_limits_dump_as_plain_mapping(self, sample_config):
        dumped = sample_config.limits.model_dump()
        assert dumped["zones"]["DEFAULT"]["temperature"] == {"min": 15, "max": 30}

    def test_relative_export_dir_is_resolved(self):
        config = ClimateLogConfig(export={"reports_dir": "reports"})
        assert Path(config.export.reports_dir).is_absolute()

    def test_limits_accept_wrapped_shape(self, config_data):
        config_data["limits"] = {"zones": config_data["limits"]}
        assert isinstance(ClimateLogConfig(**config_data).limits, ZoneLimits)


class TestEnumerations:
    """Test suite for selector lists."""

    def test_zone_options_expand_laboratory(self, sample_config):
        assert sample_config.enumerations.zone_options() == [
            "OPTICA", "FARMACIA", "LABORATORIO", "LABORATORIO - NEVERA", "LABORATORIO - CONGELADOR"
        ]

    def test_year_options(self, sample_config):
        assert sample_config.enumerations.year_options(date(2024, 6, 1)) == [2024, 2023, 2022, 2021, 2020]

    def test_month_label(self, sample_config):
        assert sample_config.enumerations.month_label(2) == "Marzo"

    def test_months_must_be_twelve(self):
        with pytest.raises(ValueError):
            ClimateLogConfig(enumerations={"months": ["Enero"]})
