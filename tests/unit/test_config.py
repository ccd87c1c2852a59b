"""Tests for the configuration property readers."""

import pytest

from ingest_core.config import (
    read_boolean_property,
    read_choice,
    read_choice_list,
    read_list_property,
    read_map_property,
    read_object,
    read_optional_list_property,
    read_optional_string_property,
    read_string_property,
)
from ingest_core.errors import ConfigError, InvalidConfigType, InvalidConfigValue, MissingConfig


class TestStringProperty:

    def test_read_consumes_key(self):
        config = {"field": "x", "other": 1}
        assert read_string_property(config, "field") == "x"
        assert config == {"other": 1}

    def test_missing(self):
        with pytest.raises(MissingConfig, match=r"required property \[field\] is missing") as exc:
            read_string_property({}, "field")
        assert exc.value.property_name == "field"

    def test_none_is_missing(self):
        with pytest.raises(MissingConfig):
            read_string_property({"field": None}, "field")

    def test_default(self):
        assert read_string_property({}, "target_field", "geoip") == "geoip"

    def test_wrong_type(self):
        with pytest.raises(InvalidConfigType, match=r"property \[field\] isn't a string, but of type \[int\]"):
            read_string_property({"field": 1}, "field")

    def test_optional(self):
        assert read_optional_string_property({}, "tag") is None
        assert read_optional_string_property({"tag": "t"}, "tag") == "t"


class TestOtherProperties:

    def test_boolean(self):
        assert read_boolean_property({"b": False}, "b", True) is False
        assert read_boolean_property({}, "b", True) is True
        with pytest.raises(InvalidConfigType, match=r"isn't a boolean, but of type \[str\]"):
            read_boolean_property({"b": "yes"}, "b", True)

    def test_list(self):
        assert read_list_property({"l": [1]}, "l") == [1]
        assert read_list_property({"l": (1, 2)}, "l") == [1, 2]
        with pytest.raises(MissingConfig):
            read_list_property({}, "l")

    def test_list_wrong_type(self):
        with pytest.raises(InvalidConfigType, match=r"property \[fields\] isn't a list, but of type \[str\]"):
            read_list_property({"fields": "city_name"}, "fields")

    def test_optional_list(self):
        assert read_optional_list_property({}, "l") is None

    def test_map(self):
        assert read_map_property({"m": {"a": 1}}, "m") == {"a": 1}
        with pytest.raises(InvalidConfigType, match=r"isn't a map, but of type \[list\]"):
            read_map_property({"m": []}, "m")

    def test_object(self):
        assert read_object({"value": 0}, "value") == 0
        assert read_object({"value": [1]}, "value") == [1]
        with pytest.raises(MissingConfig, match=r"required property \[value\] is missing"):
            read_object({"value": None}, "value")


class TestChoices:

    def test_choice(self):
        assert read_choice({"type": "integer"}, "type", ["integer", "float"]) == "integer"

    def test_illegal_choice(self):
        with pytest.raises(InvalidConfigValue, match=r"illegal type option \[long\]. valid values are \[integer, float\]"):
            read_choice({"type": "long"}, "type", ["integer", "float"])

    def test_choice_list_normalizes(self):
        assert read_choice_list({"f": ["city_name", "IP"]}, "f", ["IP", "CITY_NAME"]) == ["CITY_NAME", "IP"]

    def test_choice_list_absent(self):
        assert read_choice_list({}, "f", ["IP"]) is None

    def test_choice_list_illegal(self):
        with pytest.raises(InvalidConfigValue, match=r"illegal field option \[bogus\]. valid values are \[IP, CITY_NAME\]"):
            read_choice_list({"fields": ["bogus"]}, "fields", ["IP", "CITY_NAME"], label="field")

    def test_config_errors_are_value_errors(self):
        """Every config failure is catchable as ConfigError and ValueError."""
        for exc in (MissingConfig, InvalidConfigType, InvalidConfigValue):
            assert issubclass(exc, ConfigError)
            assert issubclass(exc, ValueError)
