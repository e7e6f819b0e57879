"""Template metadata and the workflow loader interface."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import yaml

from nucleikit.severity import Holder, Severity
from nucleikit.stringslice import StringSlice


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (str, int, float)):
        return str(value)
    raise TypeError(f"cannot read {type(value).__name__} as a string")


@dataclass
class Info:
    """Metadata describing a template."""

    name: str = ""
    authors: StringSlice = field(default_factory=StringSlice)
    tags: StringSlice = field(default_factory=StringSlice)
    description: str = ""
    reference: StringSlice = field(default_factory=StringSlice)
    severity_holder: Holder = field(default_factory=Holder)
    additional_fields: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the serialisable form, leaving out empty fields."""
        candidates = [
            ("name", self.name or None),
            ("author", self.authors.to_yaml()),
            ("tags", self.tags.to_yaml()),
            ("description", self.description or None),
            ("reference", self.reference.to_yaml()),
            (
                "severity",
                None
                if self.severity_holder.severity is Severity.UNDEFINED
                else self.severity_holder.to_yaml(),
            ),
            ("additional-fields", dict(self.additional_fields) or None),
        ]
        return {key: value for key, value in candidates if value is not None}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)

    def to_yaml(self) -> str:
        return yaml.safe_dump(
            self.to_dict(),
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True,
        )

    @classmethod
    def from_dict(cls, data: Any) -> "Info":
        """Build from a parsed mapping; unknown keys are ignored."""
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise TypeError(f"template info must be a mapping, not {type(data).__name__}")
        severity = data.get("severity")
        extra = data.get("additional-fields") or {}
        if not isinstance(extra, Mapping):
            raise TypeError("additional-fields must be a mapping")
        return cls(
            name=_text(data.get("name")),
            authors=StringSlice.from_yaml(data.get("author")),
            tags=StringSlice.from_yaml(data.get("tags")),
            description=_text(data.get("description")),
            reference=StringSlice.from_yaml(data.get("reference")),
            severity_holder=Holder() if severity is None else Holder.from_yaml(severity),
            additional_fields={_text(k): _text(v) for k, v in extra.items()},
        )

    @classmethod
    def from_yaml(cls, text: str) -> "Info":
        return cls.from_dict(yaml.safe_load(text))


class WorkflowLoader(ABC):
    """Finds template paths needed when initialising workflows."""

    @abstractmethod
    def get_template_paths_by_tags(self, tags: list[str]) -> list[str]:
        """Return template paths from the templates directory matching ``tags``."""

    @abstractmethod
    def get_template_paths(self, templates_list: list[str], no_validate: bool) -> list[str]:
        """Return the paths for the given list of templates."""