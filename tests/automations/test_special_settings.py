"""Tests for roller shutter special settings."""

import dataclasses
import pytest
from datetime import time, timedelta

from home_automations import ConfigurationError
from home_automations.automations import SpecialSettings, parse_time_of_day


class TestDefaults:
    def test_all_overrides_disabled(self):
        settings = SpecialSettings()

        assert settings.skip_before_timestamp_enabled is False
        assert settings.skip_if_frozen_enabled is False
        assert settings.auto_close_if_too_hot_enabled is False
        assert settings.skip_before_timestamp == time(7, 15)
        assert settings.skip_if_frozen_temperature == 2.0
        assert settings.auto_close_if_too_hot_temperature == 25.0

    def test_immutable(self):
        settings = SpecialSettings()

        with pytest.raises(dataclasses.FrozenInstanceError):
            settings.skip_if_frozen_enabled = True


class TestWithHelpers:
    """The with_* helpers return new, validated instances."""

    def test_do_not_open_before(self):
        base = SpecialSettings()
        settings = base.with_do_not_open_before("08:00")

        assert settings.skip_before_timestamp_enabled is True
        assert settings.skip_before_timestamp == time(8, 0)
        assert base.skip_before_timestamp_enabled is False

    def test_frost_and_heat(self):
        settings = (
            SpecialSettings()
            .with_do_not_open_if_outside_temperature_below(3)
            .with_close_if_outside_temperature_above(28.5)
        )

        assert settings.skip_if_frozen_enabled is True
        assert settings.skip_if_frozen_temperature == 3.0
        assert settings.auto_close_if_too_hot_enabled is True
        assert settings.auto_close_if_too_hot_temperature == 28.5

    def test_invalid_value_rejected(self):
        with pytest.raises(ConfigurationError):
            SpecialSettings().with_close_if_outside_temperature_above(-1)


class TestValidation:
    """Invalid parameters are rejected at construction."""

    @pytest.mark.parametrize(
        "field",
        ["skip_if_frozen_temperature", "auto_close_if_too_hot_temperature"],
    )
    @pytest.mark.parametrize("value", [-0.5, float("nan"), float("inf"), "hot", True, None])
    def test_bad_thresholds(self, field, value):
        with pytest.raises(ConfigurationError):
            SpecialSettings(**{field: value})

    @pytest.mark.parametrize(
        "value",
        ["24:00", "8:00", "08:60", "08", "abc", "", timedelta(days=1), timedelta(minutes=-1), 800],
    )
    def test_bad_skip_time(self, value):
        with pytest.raises(ConfigurationError):
            SpecialSettings(skip_before_timestamp_enabled=True, skip_before_timestamp=value)

    def test_flags_must_be_bools(self):
        with pytest.raises(ConfigurationError):
            SpecialSettings(skip_if_frozen_enabled="yes")

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            SpecialSettings(skip_if_frozen_temperature=-5)

    def test_heat_below_frost_is_allowed(self):
        # Misconfigured but valid: heat protection wins at evaluation time
        settings = SpecialSettings(
            skip_if_frozen_enabled=True,
            skip_if_frozen_temperature=10.0,
            auto_close_if_too_hot_enabled=True,
            auto_close_if_too_hot_temperature=5.0,
        )
        assert settings.auto_close_if_too_hot_temperature < settings.skip_if_frozen_temperature


class TestParseTimeOfDay:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("08:00", time(8, 0)),
            ("23:59", time(23, 59)),
            ("00:00:30", time(0, 0, 30)),
            (" 07:15 ", time(7, 15)),
            (time(6, 45), time(6, 45)),
            (timedelta(hours=8, minutes=30), time(8, 30)),
            (timedelta(0), time(0, 0)),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_time_of_day(value) == expected


class TestSerialization:
    def test_to_dict(self):
        data = SpecialSettings().with_do_not_open_before(time(8, 0)).to_dict()

        assert data["skip_before_timestamp_enabled"] is True
        assert data["skip_before_timestamp"] == "08:00:00"
        assert data["skip_if_frozen_temperature"] == 2.0

    def test_from_dict_uses_defaults(self):
        settings = SpecialSettings.from_dict(
            {"auto_close_if_too_hot_enabled": True, "auto_close_if_too_hot_temperature": 30}
        )

        assert settings.auto_close_if_too_hot_enabled is True
        assert settings.auto_close_if_too_hot_temperature == 30.0
        assert settings.skip_before_timestamp == time(7, 15)

    def test_from_dict_validates(self):
        with pytest.raises(ConfigurationError):
            SpecialSettings.from_dict({"skip_before_timestamp": "25:00"})
