"""The engine's internal configuration file and the template ignore file."""

from __future__ import annotations

import json
import logging
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

VERSION = "2.5.1-dev"
CONFIG_FILENAME = ".templates-config.json"
IGNORE_FILENAME = ".nuclei-ignore"
TEMPLATES_REPOSITORY = "projectdiscovery/nuclei-templates"
DEFAULT_IGNORE_URL = (
    f"https://raw.githubusercontent.com/{TEMPLATES_REPOSITORY}/master/{IGNORE_FILENAME}"
)

_ZERO_TIME = "0001-01-01T00:00:00Z"
_FRACTION = re.compile(r"\.(\d+)")


def _format_time(moment: Optional[datetime]) -> str:
    if moment is None:
        return _ZERO_TIME
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return moment.isoformat()


def _parse_time(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"invalid time value: {value!r}")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text)
    moment = datetime.fromisoformat(text)
    return None if moment.year == 1 else moment


def _text(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass
class Config:
    """Internal engine configuration persisted between runs."""

    templates_directory: str = ""
    current_version: str = ""
    last_checked: Optional[datetime] = None
    ignore_url: str = ""
    nuclei_version: str = ""
    last_checked_ignore: Optional[datetime] = None
    nuclei_latest_version: str = ""
    nuclei_templates_latest_version: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return the on-disk form; empty optional strings are left out."""
        data: dict[str, Any] = {}
        if self.templates_directory:
            data["templates-directory"] = self.templates_directory
        if self.current_version:
            data["current-version"] = self.current_version
        data["last-checked"] = _format_time(self.last_checked)
        if self.ignore_url:
            data["ignore-url"] = self.ignore_url
        if self.nuclei_version:
            data["nuclei-version"] = self.nuclei_version
        data["last-checked-ignore"] = _format_time(self.last_checked_ignore)
        data["nuclei-latest-version"] = self.nuclei_latest_version
        data["nuclei-templates-latest-version"] = self.nuclei_templates_latest_version
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "Config":
        """Build from the on-disk mapping; unknown keys are ignored."""
        if not isinstance(data, Mapping):
            raise ValueError("configuration must be a JSON object")
        return cls(
            templates_directory=_text(data.get("templates-directory")),
            current_version=_text(data.get("current-version")),
            last_checked=_parse_time(data.get("last-checked")),
            ignore_url=_text(data.get("ignore-url")),
            nuclei_version=_text(data.get("nuclei-version")),
            last_checked_ignore=_parse_time(data.get("last-checked-ignore")),
            nuclei_latest_version=_text(data.get("nuclei-latest-version")),
            nuclei_templates_latest_version=_text(data.get("nuclei-templates-latest-version")),
        )


def _config_directory() -> str:
    directory = os.path.join(os.path.expanduser("~"), ".config", "nuclei")
    os.makedirs(directory, exist_ok=True)
    return directory


def config_file_path() -> str:
    """Return the configuration file path, creating its directory."""
    return os.path.join(_config_directory(), CONFIG_FILENAME)


def read_configuration() -> Config:
    """Read the configuration file from disk."""
    with open(config_file_path(), encoding="utf-8") as handle:
        return Config.from_dict(json.load(handle))


def write_configuration(config: Config, checked: bool, checked_ignore: bool) -> None:
    """Stamp ``config`` with defaults and check times, then write it to disk."""
    if not config.ignore_url:
        config.ignore_url = DEFAULT_IGNORE_URL
    now = datetime.now().astimezone()
    if checked:
        config.last_checked = now
    if checked_ignore:
        config.last_checked_ignore = now
    config.nuclei_version = VERSION

    with open(config_file_path(), "w", encoding="utf-8") as handle:
        json.dump(config.to_dict(), handle, separators=(",", ":"))
        handle.write("\n")


@dataclass
class IgnoreFile:
    """Tags and template paths that are blocked by default."""

    tags: list[str] = field(default_factory=list)
    files: list[str] = field(default_factory=list)


def ignore_file_path() -> str:
    """Return the ignore file path in the config directory, or the working directory."""
    try:
        home = os.fspath(__import_home())
    except (RuntimeError, KeyError):
        return os.path.join(os.getcwd(), IGNORE_FILENAME)
    directory = os.path.join(home, ".config", "nuclei")
    os.makedirs(directory, exist_ok=True)
    return os.path.join(directory, IGNORE_FILENAME)


def __import_home() -> str:
    from pathlib import Path

    return str(Path.home())


def _string_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, list):
        return [str(item) for item in value]
    raise ValueError(f"expected a list, got {type(value).__name__}")


def read_ignore_file() -> IgnoreFile:
    """Read the ignore file; on any failure log it and return an empty one."""
    path = ignore_file_path()
    try:
        with open(path, encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except OSError as err:
        logger.error("Could not read nuclei-ignore file: %s", err)
        return IgnoreFile()
    except yaml.YAMLError as err:
        logger.error("Could not parse nuclei-ignore file: %s", err)
        return IgnoreFile()

    if data is None:
        return IgnoreFile()
    try:
        if not isinstance(data, Mapping):
            raise ValueError("ignore file must be a mapping")
        return IgnoreFile(tags=_string_list(data.get("tags")), files=_string_list(data.get("files")))
    except ValueError as err:
        logger.error("Could not parse nuclei-ignore file: %s", err)
        return IgnoreFile()