"""Downloading, installing and updating the community template set."""

from __future__ import annotations

import hashlib
import io
import logging
import os
import re
import sys
import zipfile
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, TextIO

import requests
from semver import Version
from tabulate import tabulate

from nucleikit.config import (
    DEFAULT_IGNORE_URL,
    IGNORE_FILENAME,
    TEMPLATES_REPOSITORY,
    VERSION,
    Config,
    config_file_path,
    read_configuration,
    write_configuration,
)
from nucleikit.options import VERBOSE, Options

logger = logging.getLogger(__name__)

ENGINE_REPOSITORY = "projectdiscovery/nuclei"
DEFAULT_API_URL = "https://api.github.com"
CHECKSUM_FILENAME = ".checksum"
ADDITIONS_FILENAME = ".new-additions"

_VERSION_PATTERN = re.compile(r"\d+\.\d+\.\d+")
_REQUEST_TIMEOUT = 10


def _parse_version(text: str) -> Version:
    match = _VERSION_PATTERN.search(text)
    if match is None:
        raise ValueError(f"invalid release found with tag {text}")
    return Version.parse(text[match.start():])


def _since(moment: Optional[datetime]) -> Optional[timedelta]:
    """Time elapsed since ``moment``; None when it never happened."""
    if moment is None:
        return None
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return datetime.now(timezone.utc) - moment


def _md5_of_file(path: str) -> str:
    digest = hashlib.md5()
    with open(path, "rb") as handle:
        for chunk in iter(lambda: handle.read(65536), b""):
            digest.update(chunk)
    return digest.hexdigest()


def read_previous_templates_checksum(path: str) -> dict[str, tuple[str, str]]:
    """Read a checksum file into ``{path: (expected, actual)}``.

    The expected checksum is the one recorded in the file, the actual one is
    computed from the file currently on disk.
    """
    checksums: dict[str, tuple[str, str]] = {}
    with open(path, encoding="utf-8") as handle:
        for line in handle.read().splitlines():
            if not line:
                continue
            parts = line.split(",")
            if len(parts) < 2:
                continue
            checksums[parts[0]] = (parts[1], _md5_of_file(parts[0]))
    return checksums


def write_templates_checksum(path: str, checksums: dict[str, str]) -> None:
    """Write ``path,checksum`` lines for every entry."""
    with open(path, "w", encoding="utf-8") as handle:
        handle.writelines(f"{name},{value}\n" for name, value in checksums.items())


@dataclass
class UpdateResults:
    """What changed when a template release was written to disk."""

    additions: list[str] = field(default_factory=list)
    deletions: list[str] = field(default_factory=list)
    modifications: list[str] = field(default_factory=list)
    total_count: int = 0
    checksums: dict[str, str] = field(default_factory=dict)


class TemplateUpdater:
    """Keeps the local template directory in step with the latest release."""

    def __init__(
        self,
        options: Options,
        templates_config: Optional[Config] = None,
        *,
        api_url: str = DEFAULT_API_URL,
        session: Optional[requests.Session] = None,
        out: Optional[TextIO] = None,
    ) -> None:
        self.options = options
        self.templates_config = templates_config
        self.api_url = api_url.rstrip("/")
        self.out = out
        self._session = session or requests.Session()

    def _templates_directory(self) -> str:
        if self.templates_config is None:
            raise RuntimeError("no templates configuration available")
        return self.templates_config.templates_directory

    def update_templates(self) -> None:
        """Install the templates if missing, or update them when outdated."""
        home = os.path.expanduser("~")
        config_dir = os.path.join(home, ".config", "nuclei")
        os.makedirs(config_dir, exist_ok=True)
        default_directory = os.path.join(home, "nuclei-templates")

        try:
            self._read_internal_configuration_file(default_directory)
        except (OSError, ValueError) as err:
            raise RuntimeError(f"could not read configuration file: {err}") from err

        if self.templates_config is None:
            current = Config(
                templates_directory=default_directory,
                ignore_url=DEFAULT_IGNORE_URL,
                nuclei_version=VERSION,
            )
            try:
                write_configuration(current, False, False)
            except OSError as err:
                raise RuntimeError(f"could not write template configuration: {err}") from err
            self.templates_config = current

        if self.options.no_update_templates:
            return

        checked_ignore = False
        elapsed = _since(self.templates_config.last_checked_ignore)
        if elapsed is None or elapsed > timedelta(hours=1):
            checked_ignore = self.check_nuclei_ignore_file_updates(config_dir)

        requested_directory = self.options.templates_directory
        config = self.templates_config
        if not config.current_version or (
            requested_directory and config.templates_directory != requested_directory
        ):
            logger.info("nuclei-templates are not installed, installing...")
            self.templates_config = Config(templates_directory=default_directory)
            if requested_directory and requested_directory != default_directory:
                self.templates_config.templates_directory = os.path.abspath(requested_directory)

            version, release = self.get_latest_release_from_github()
            logger.log(
                VERBOSE,
                "Downloading nuclei-templates (v%s) to %s",
                version,
                self.templates_config.templates_directory,
            )
            self.fetch_latest_versions_from_github()
            self.download_release_and_unzip(str(version), str(release.get("zipball_url") or ""))
            self.templates_config.current_version = str(version)
            write_configuration(self.templates_config, True, checked_ignore)
            logger.info("Successfully downloaded nuclei-templates (v%s). GoodLuck!", version)
            return

        elapsed = _since(config.last_checked)
        if elapsed is not None and elapsed < timedelta(hours=24) and not self.options.update_templates:
            return

        old_version = _parse_version(config.current_version)
        version, release = self.get_latest_release_from_github()

        if version == old_version:
            write_configuration(config, False, checked_ignore)
            return

        if version > old_version:
            logger.info(
                "Your current nuclei-templates v%s are outdated. Latest is v%s",
                old_version,
                version,
            )
            logger.info("Downloading latest release...")
            if requested_directory:
                config.templates_directory = requested_directory
            config.current_version = str(version)
            logger.log(
                VERBOSE,
                "Downloading nuclei-templates (v%s) to %s",
                version,
                config.templates_directory,
            )
            self.fetch_latest_versions_from_github()
            self.download_release_and_unzip(str(version), str(release.get("zipball_url") or ""))
            write_configuration(config, True, checked_ignore)
            logger.info("Successfully updated nuclei-templates (v%s). GoodLuck!", version)

    def _read_internal_configuration_file(self, default_directory: str) -> None:
        if not os.path.exists(config_file_path()):
            return
        configuration = read_configuration()
        self.templates_config = configuration
        if (
            configuration.templates_directory
            and configuration.templates_directory != default_directory
        ):
            self.options.templates_directory = configuration.templates_directory

    def check_nuclei_ignore_file_updates(self, config_dir: str) -> bool:
        """Refresh the ignore file from its URL; always reports that a check was made."""
        ignore_url = DEFAULT_IGNORE_URL
        if self.templates_config is not None and self.templates_config.ignore_url:
            ignore_url = self.templates_config.ignore_url
        logger.log(VERBOSE, "Downloading config file from %s", ignore_url)

        try:
            response = self._session.get(ignore_url, timeout=_REQUEST_TIMEOUT)
        except requests.RequestException as err:
            logger.warning("Could not get ignore-file from %s: %s", ignore_url, err)
            return True

        data = response.content
        if data:
            try:
                with open(os.path.join(config_dir, IGNORE_FILENAME), "wb") as handle:
                    handle.write(data)
            except OSError as err:
                logger.warning("Could not write ignore-file: %s", err)
        if self.templates_config is not None:
            try:
                write_configuration(self.templates_config, False, True)
            except OSError as err:
                logger.warning("Could not get ignore-file from %s: %s", ignore_url, err)
        return True

    def get_latest_release_from_github(self) -> tuple[Version, dict[str, Any]]:
        """Return the highest semantic version among the template releases."""
        url = f"{self.api_url}/repos/{TEMPLATES_REPOSITORY}/releases"
        response = self._session.get(url, timeout=_REQUEST_TIMEOUT)
        response.raise_for_status()
        releases = response.json()

        latest_version: Optional[Version] = None
        latest_release: Optional[dict[str, Any]] = None
        for release in releases:
            version = _parse_version(str(release.get("tag_name") or ""))
            if latest_release is None or version >= latest_version:
                latest_version = version
                latest_release = release
        if latest_release is None or latest_version is None:
            raise LookupError("no version found for the templates")
        return latest_version, latest_release

    def download_release_and_unzip(self, version: str, download_url: str) -> UpdateResults:
        """Download a release archive and write its templates to the templates directory."""
        try:
            response = self._session.get(download_url)
        except requests.RequestException as err:
            raise RuntimeError(
                f"failed to download a release file from {download_url}: {err}"
            ) from err
        if response.status_code != 200:
            raise RuntimeError(
                f"failed to download a release file from {download_url}: "
                f"Not successful status {response.status_code}"
            )

        try:
            archive = zipfile.ZipFile(io.BytesIO(response.content))
        except zipfile.BadZipFile as err:
            raise RuntimeError(f"failed to uncompress zip file: {err}") from err

        directory = self._templates_directory()
        try:
            os.makedirs(directory, exist_ok=True)
        except OSError as err:
            raise RuntimeError(f"failed to create template base folder: {err}") from err

        with archive:
            try:
                results = self.compare_and_write_templates(archive)
            except (OSError, zipfile.BadZipFile) as err:
                raise RuntimeError(f"failed to write templates: {err}") from err

        if self.options.verbose:
            self.print_update_changelog(results, version)

        try:
            write_templates_checksum(os.path.join(directory, CHECKSUM_FILENAME), results.checksums)
        except OSError as err:
            raise RuntimeError(f"could not write checksum: {err}") from err

        try:
            with open(os.path.join(directory, ADDITIONS_FILENAME), "w", encoding="utf-8") as handle:
                handle.writelines(f"{addition}\n" for addition in results.additions)
        except OSError as err:
            raise RuntimeError(f"could not write new additions file: {err}") from err
        return results

    def compare_and_write_templates(self, archive: zipfile.ZipFile) -> UpdateResults:
        """Write the archive's templates and report additions, changes and deletions.

        The first path component of every archive member is dropped. Files
        recorded in the previous checksum file that are absent from the archive
        and unchanged on disk are removed.
        """
        directory = self._templates_directory()
        results = UpdateResults()
        try:
            previous = read_previous_templates_checksum(os.path.join(directory, CHECKSUM_FILENAME))
        except OSError:
            previous = {}

        for member in archive.infolist():
            head, _, name = member.filename.rpartition("/")
            if not name:
                continue
            parts = [part for part in head.split("/")[1:] if part]
            final_path = os.path.normpath(os.path.join(*parts)) if parts else ""

            if name.startswith(".") or final_path.startswith(".") or name.lower() == "readme.md":
                continue
            results.total_count += 1

            template_directory = os.path.join(directory, final_path) if final_path else directory
            try:
                os.makedirs(template_directory, exist_ok=True)
            except OSError as err:
                raise RuntimeError(
                    f"failed to create template folder {template_directory} : {err}"
                ) from err

            template_path = os.path.join(template_directory, name)
            is_addition = not os.path.exists(template_path)
            data = archive.read(member)
            with open(template_path, "wb") as handle:
                handle.write(data)
            checksum = hashlib.md5(data).hexdigest()

            relative = os.path.join(final_path, name) if final_path else name
            old = previous.get(template_path)
            if is_addition:
                results.additions.append(relative)
            elif old is not None and old[0] != checksum:
                results.modifications.append(relative)
            results.checksums[template_path] = checksum

        for path, (expected, actual) in previous.items():
            if path in results.checksums or expected != actual:
                continue
            try:
                os.remove(path)
            except OSError:
                pass
            results.deletions.append(path.removeprefix(directory).removeprefix(os.sep))
        return results

    def print_update_changelog(self, results: UpdateResults, version: str) -> None:
        """Print the newly added templates (when verbose) and a summary table."""
        out = self.out or sys.stdout
        if results.additions and self.options.verbose:
            print("\nNewly added templates: \n", file=out)
            for addition in results.additions:
                print(addition, file=out)

        print(f"\nNuclei Templates v{version} Changelog", file=out)
        row = [results.total_count, len(results.additions), len(results.deletions)]
        print(tabulate([row], headers=["Total", "Added", "Removed"], tablefmt="grid"), file=out)

    def fetch_latest_versions_from_github(self) -> None:
        """Record the latest engine and template versions in the configuration."""
        try:
            engine_latest = self.github_fetch_latest_tag_repo(ENGINE_REPOSITORY)
        except (requests.RequestException, ValueError) as err:
            logger.warning("Could not fetch latest nuclei release: %s", err)
            engine_latest = ""
        try:
            templates_latest = self.github_fetch_latest_tag_repo(TEMPLATES_REPOSITORY)
        except (requests.RequestException, ValueError) as err:
            logger.warning("Could not fetch latest nuclei-templates release: %s", err)
            templates_latest = ""
        if self.templates_config is not None:
            self.templates_config.nuclei_latest_version = engine_latest
            self.templates_config.nuclei_templates_latest_version = templates_latest

    def github_fetch_latest_tag_repo(self, repo: str) -> str:
        """Return the newest tag name of ``repo`` without a leading ``v``."""
        url = f"{self.api_url}/repos/{repo}/tags"
        response = self._session.get(url, timeout=_REQUEST_TIMEOUT)
        tags = response.json()
        if not isinstance(tags, list):
            raise ValueError(f"unexpected tags response for {repo}")
        if not tags:
            raise ValueError(f"no tags found for {repo}")
        return str(tags[0].get("name") or "").removeprefix("v")