import json

import pytest
import yaml

from nucleikit.severity import (
    Holder,
    Severities,
    Severity,
    get_supported_severities,
    to_severity,
)


@pytest.mark.parametrize("payload", ["Info", "info", "inFo ", "infO ", " INFO "])
def test_yaml_unmarshal(payload):
    result = Holder.from_yaml(yaml.safe_load(payload))
    assert result.severity == Severity.INFO
    assert str(result.severity) == "info"


@pytest.mark.parametrize("payload", ["Info", "inFo ", " INFO "])
def test_unmarshal_raw_string(payload):
    assert Holder.from_yaml(payload).severity == Severity.INFO


def test_yaml_marshal():
    assert Holder(Severity.HIGH).to_yaml() == "high"


def test_yaml_unmarshal_fail_mapping():
    with pytest.raises(TypeError):
        Holder.from_yaml(yaml.safe_load("severity: invalid\n"))


def test_unmarshal_invalid_name():
    with pytest.raises(ValueError, match="Invalid severity: invalid"):
        Holder.from_yaml("invalid")


def test_get_supported_severities():
    assert get_supported_severities() == Severities(
        [Severity.INFO, Severity.LOW, Severity.MEDIUM, Severity.HIGH, Severity.CRITICAL]
    )


def test_supported_severities_string():
    assert str(get_supported_severities()) == "info, low, medium, high, critical"


def test_undefined_marshals_to_empty_string():
    assert Holder(Severity.UNDEFINED).to_yaml() == ""


def test_to_severity_roundtrip():
    for severity in get_supported_severities():
        assert to_severity(str(severity).upper()) == severity


def test_severities_set_appends():
    severities = Severities([Severity.INFO])
    severities.set("low, HIGH")
    assert severities == [Severity.INFO, Severity.LOW, Severity.HIGH]


def test_severities_set_invalid():
    severities = Severities()
    with pytest.raises(ValueError, match="'bogus' is not a valid severity"):
        severities.set("low,bogus")


def test_severities_from_yaml_string_and_list():
    from_text = Severities.from_yaml("high, critical")
    from_list = Severities.from_yaml(["high", "critical"])
    assert from_text == [Severity.HIGH, Severity.CRITICAL]
    assert from_text == from_list


def test_severities_from_yaml_invalid():
    with pytest.raises(ValueError):
        Severities.from_yaml(["low", "nope"])


def test_holder_to_json():
    assert json.loads(Holder(Severity.CRITICAL).to_json()) == "critical"


def test_holder_json_schema():
    schema = Holder.json_schema_type()
    assert schema["type"] == "string"
    assert schema["title"] == "severity of the template"
    assert schema["enum"] == ["info", "low", "medium", "high", "critical"]