"""Selecting the template paths for a scan from the loader configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from nucleikit.catalog import Catalog
from nucleikit.path_filter import PathFilter, PathFilterConfig
from nucleikit.severity import Severity
from nucleikit.tag_filter import FilterConfig, TagFilter


@dataclass
class LoaderConfig:
    """What to load and how to filter it."""

    templates: list[str] = field(default_factory=list)
    workflows: list[str] = field(default_factory=list)
    exclude_templates: list[str] = field(default_factory=list)
    include_templates: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    exclude_tags: list[str] = field(default_factory=list)
    authors: list[str] = field(default_factory=list)
    severities: list[Severity] = field(default_factory=list)
    include_tags: list[str] = field(default_factory=list)
    catalog: Optional[Catalog] = None
    templates_directory: str = ""


class Store:
    """Holds the filters and the template definitions selected for a scan.

    When neither templates nor workflows are configured, the templates
    directory itself is used as the only template definition.
    """

    def __init__(self, config: LoaderConfig) -> None:
        self.config = config
        self.catalog = config.catalog or Catalog(config.templates_directory)
        self.tag_filter = TagFilter(
            FilterConfig(
                tags=list(config.tags),
                exclude_tags=list(config.exclude_tags),
                authors=list(config.authors),
                severities=list(config.severities),
                include_tags=list(config.include_tags),
            )
        )
        self.path_filter = PathFilter(
            PathFilterConfig(
                included_templates=list(config.include_templates),
                excluded_templates=list(config.exclude_templates),
            ),
            self.catalog,
        )
        if not config.templates and not config.workflows:
            config.templates.append(config.templates_directory)
        self.final_templates: list[str] = list(config.templates)

    def resolve_paths(self, templates_list: Iterable[str]) -> list[str]:
        """Expand definitions into template paths and drop the excluded ones."""
        paths = self.catalog.get_templates_path(templates_list)
        return self.path_filter.match(paths)