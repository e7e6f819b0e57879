"""Filtering template paths by explicit include and exclude lists."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from nucleikit.catalog import Catalog


@dataclass
class PathFilterConfig:
    """Template definitions that are always included or excluded."""

    included_templates: list[str] = field(default_factory=list)
    excluded_templates: list[str] = field(default_factory=list)


class PathFilter:
    """Removes excluded template paths unless they are explicitly included."""

    def __init__(self, config: PathFilterConfig, catalog: Catalog) -> None:
        self._excluded = catalog.get_templates_path(config.excluded_templates)
        self._always_included = set(catalog.get_templates_path(config.included_templates))

    def match(self, templates: Iterable[str]) -> list[str]:
        """Return the unique paths of ``templates`` that survive the filter, in order."""
        removed = {path for path in self._excluded if path not in self._always_included}
        return [path for path in dict.fromkeys(templates) if path not in removed]