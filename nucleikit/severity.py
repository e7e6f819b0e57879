"""Template severity levels and their (de)serialisation helpers."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Iterable

from nucleikit.stringslice import StringSlice


class Severity(IntEnum):
    """Seriousness of the implications of a template."""

    UNDEFINED = 0
    INFO = 1
    LOW = 2
    MEDIUM = 3
    HIGH = 4
    CRITICAL = 5

    def __str__(self) -> str:
        return _SEVERITY_NAMES.get(self, "")


_SEVERITY_NAMES = {
    Severity.INFO: "info",
    Severity.LOW: "low",
    Severity.MEDIUM: "medium",
    Severity.HIGH: "high",
    Severity.CRITICAL: "critical",
}
_NAMES_TO_SEVERITY = {name: severity for severity, name in _SEVERITY_NAMES.items()}


def _normalize(value: str) -> str:
    return value.lower().strip()


def to_severity(value: str) -> Severity:
    """Map a textual severity (case and surrounding space ignored) to a Severity."""
    try:
        return _NAMES_TO_SEVERITY[_normalize(value)]
    except KeyError:
        raise ValueError(f"Invalid severity: {value}") from None


def get_supported_severities() -> "Severities":
    """Return every defined severity, from lowest to highest."""
    return Severities(s for s in Severity if s is not Severity.UNDEFINED)


def _parse_severity(value: str) -> Severity:
    try:
        return to_severity(value)
    except ValueError:
        raise ValueError(f"'{value}' is not a valid severity") from None


class Severities(list):
    """An ordered list of severities, as given on the command line or in YAML."""

    def __init__(self, items: Iterable[Severity] = ()) -> None:
        super().__init__(items)

    def set(self, values: str) -> None:
        """Append the comma separated severities in ``values``."""
        parts = (_normalize(part) for part in values.split(","))
        for part in parts:
            if part:
                self.append(_parse_severity(part))

    @classmethod
    def from_yaml(cls, value: Any) -> "Severities":
        """Build from a YAML scalar (comma separated) or sequence."""
        names = StringSlice.from_yaml(value).to_slice()
        return cls(_parse_severity(name) for name in names)

    def __str__(self) -> str:
        return ", ".join(str(severity) for severity in self)


@dataclass(frozen=True)
class Holder:
    """Wraps a Severity for marshalling in template metadata."""

    severity: Severity = Severity.UNDEFINED

    @classmethod
    def from_yaml(cls, value: Any) -> "Holder":
        """Build from a YAML scalar holding the severity name."""
        if not isinstance(value, str):
            raise TypeError(f"severity must be a string, not {type(value).__name__}")
        return cls(to_severity(value))

    def to_yaml(self) -> str:
        return str(self.severity)

    def to_json(self) -> str:
        return json.dumps(str(self.severity))

    @classmethod
    def json_schema_type(cls) -> dict:
        """JSON schema fragment describing a severity value."""
        return {
            "type": "string",
            "title": "severity of the template",
            "description": "Seriousness of the implications of the template",
            "enum": [str(severity) for severity in get_supported_severities()],
        }