"""Filtering templates by tags, authors and severity."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from nucleikit.severity import Severity


class TemplateExcluded(Exception):
    """Raised when a template carries a tag from the deny list."""

    def __init__(self, message: str = "the template was excluded") -> None:
        super().__init__(message)


@dataclass
class FilterConfig:
    """Options from which a TagFilter is built."""

    tags: list[str] = field(default_factory=list)
    exclude_tags: list[str] = field(default_factory=list)
    authors: list[str] = field(default_factory=list)
    severities: list[Severity] = field(default_factory=list)
    include_tags: list[str] = field(default_factory=list)


def split_comma_trim(value: str) -> list[str]:
    """Lower-case ``value``; if it holds commas, split it and trim each part."""
    if "," not in value:
        return [value.lower()]
    return [part.strip().lower() for part in value.split(",")]


def _expand(values: Iterable[str]) -> list[str]:
    return [item for value in values for item in split_comma_trim(value)]


class TagFilter:
    """Decides whether a template should run based on its metadata.

    Matching rule: (tag1 OR tag2 ...) AND (author1 OR author2 ...) AND
    (severity1 OR severity2 ...) AND (extra1 OR extra2 ...).
    """

    def __init__(self, config: Optional[FilterConfig] = None) -> None:
        config = config or FilterConfig()
        self._block: set[str] = set(_expand(config.exclude_tags))
        self._severities: set[Severity] = set(config.severities)
        self._authors: set[str] = set(_expand(config.authors))
        self._allowed_tags: set[str] = set()
        self._match_allows: set[str] = set()
        for tag in _expand(config.tags):
            self._allowed_tags.add(tag)
            self._block.discard(tag)
        for tag in _expand(config.include_tags):
            self._match_allows.add(tag)
            self._block.discard(tag)

    def match(
        self,
        template_tags: Iterable[str],
        template_authors: Iterable[str],
        template_severity: Severity,
        extra_tags: Optional[Iterable[str]] = None,
    ) -> bool:
        """Return whether the template matches; raise TemplateExcluded for denied tags."""
        tags = list(template_tags)
        for tag in tags:
            if tag in self._block and tag not in self._match_allows:
                raise TemplateExcluded()

        extras = list(extra_tags or ())
        if extras and not set(extras) & set(tags):
            return False
        if self._allowed_tags and not self._allowed_tags & set(tags):
            return False
        if self._authors and not self._authors & set(template_authors):
            return False
        if (
            self._severities
            and template_severity is not Severity.UNDEFINED
            and template_severity not in self._severities
        ):
            return False
        return True