"""Locating template files on disk from user supplied paths, globs and directories."""

from __future__ import annotations

import glob
import logging
import os
from typing import Iterable

logger = logging.getLogger(__name__)


class TemplateNotFound(LookupError):
    """Raised when a template path cannot be resolved or yields no templates."""


def _join(*parts: str) -> str:
    return os.path.normpath(os.path.join(*parts))


class Catalog:
    """Resolves template definitions against the working and templates directories."""

    def __init__(self, templates_directory: str = "") -> None:
        self.templates_directory = templates_directory

    def __repr__(self) -> str:
        return f"Catalog(templates_directory={self.templates_directory!r})"

    def get_templates_path(self, definitions: Iterable[str]) -> list[str]:
        """Return the unique absolute template paths for all ``definitions``.

        Definitions that cannot be resolved are logged and skipped.
        """
        seen: dict[str, None] = {}
        for definition in definitions:
            try:
                paths = self.get_template_path(definition)
            except TemplateNotFound as err:
                logger.error("Could not find template '%s': %s", definition, err)
                continue
            for path in paths:
                seen.setdefault(path, None)
        return list(seen)

    def get_template_path(self, target: str) -> list[str]:
        """Expand one file, directory or glob definition into absolute template paths."""
        try:
            abs_path = self._convert_path_to_absolute(target)
        except TemplateNotFound as err:
            raise TemplateNotFound(f"could not find template file: {err}") from err

        if "*" in abs_path:
            matches = self._find_glob_path_matches(abs_path)
            if not matches:
                raise TemplateNotFound("no templates found for path")
            return matches

        if not os.path.exists(abs_path):
            raise TemplateNotFound(f"could not find file: no such file or directory: {abs_path}")
        if os.path.isfile(abs_path):
            return [abs_path]

        matches = self._find_directory_matches(abs_path)
        if not matches:
            raise TemplateNotFound("no templates found in path")
        return matches

    def resolve_path(self, template_name: str, second: str = "") -> str:
        """Resolve ``template_name`` to an absolute path.

        Absolute names are returned unchanged. Otherwise the directory of
        ``second`` (when given), the current directory and the templates
        directory are tried in that order.
        """
        if os.path.isabs(template_name):
            return template_name

        if second:
            candidate = _join(os.path.dirname(second), template_name)
            if os.path.exists(candidate):
                return candidate

        candidate = _join(os.getcwd(), template_name)
        if os.path.exists(candidate):
            return candidate

        if self.templates_directory:
            candidate = _join(self.templates_directory, template_name)
            if os.path.exists(candidate):
                return candidate

        raise TemplateNotFound(f"no such path found: {template_name}")

    def _convert_path_to_absolute(self, target: str) -> str:
        if "*" in target:
            base = os.path.basename(target)
            directory = self.resolve_path(os.path.dirname(target) or ".")
            return os.path.join(directory, base)
        return self.resolve_path(target)

    @staticmethod
    def _find_glob_path_matches(abs_path: str) -> list[str]:
        return list(dict.fromkeys(sorted(glob.glob(abs_path))))

    @staticmethod
    def _find_directory_matches(abs_path: str) -> list[str]:
        results: list[str] = []
        for root, dirnames, filenames in os.walk(abs_path):
            dirnames.sort()
            results.extend(
                os.path.join(root, name) for name in sorted(filenames) if name.endswith(".yaml")
            )
        return list(dict.fromkeys(results))