"""A value that is written either as one string or as a list of strings."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Union

_Value = Union[str, list, None]


def _scalar_text(value: Any) -> str:
    if isinstance(value, (str, int, float)):
        return str(value)
    raise TypeError(f"cannot read {type(value).__name__} as a string")


@dataclass
class StringSlice:
    """Holds a single in-lined string or a list of strings."""

    value: _Value = None

    def to_slice(self) -> list[str]:
        if self.value is None:
            return []
        if isinstance(self.value, str):
            return [self.value]
        if isinstance(self.value, list):
            return list(self.value)
        raise TypeError(f"Unexpected StringSlice type: '{type(self.value).__name__}'")

    def is_empty(self) -> bool:
        return not self.to_slice()

    def __str__(self) -> str:
        return ", ".join(self.to_slice())

    @classmethod
    def from_yaml(cls, value: Any) -> "StringSlice":
        """Build from a YAML node; strings are split on commas, items normalised."""
        if value is None:
            raw: list[str] = []
        elif isinstance(value, list):
            raw = [_scalar_text(item) for item in value]
        else:
            text = _scalar_text(value)
            raw = text.split(",") if text.strip() else []
        return cls([item.strip().lower() for item in raw])

    def to_yaml(self) -> _Value:
        return self.value

    def to_json(self) -> str:
        return json.dumps(self.value)

    @classmethod
    def json_schema_type(cls) -> dict:
        """JSON schema fragment: a string or an array."""
        return {"oneOf": [{"type": "string"}, {"type": "array"}]}