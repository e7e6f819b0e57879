import json
import os
from datetime import datetime, timedelta

import pytest

from nucleikit.config import (
    DEFAULT_IGNORE_URL,
    VERSION,
    Config,
    IgnoreFile,
    config_file_path,
    ignore_file_path,
    read_configuration,
    read_ignore_file,
    write_configuration,
)


@pytest.fixture
def home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    return tmp_path


def test_config_file_path_is_under_home(home):
    path = config_file_path()
    assert path == os.path.join(str(home), ".config", "nuclei", ".templates-config.json")
    assert os.path.isdir(os.path.dirname(path))


def test_write_fills_defaults(home):
    config = Config(templates_directory="/tmp/templates")
    write_configuration(config, False, False)
    assert config.ignore_url == DEFAULT_IGNORE_URL
    assert config.nuclei_version == VERSION
    assert config.last_checked is None
    assert config.last_checked_ignore is None


def test_write_read_round_trip(home):
    config = Config(templates_directory="/tmp/templates", current_version="8.5.0")
    write_configuration(config, True, True)
    loaded = read_configuration()
    assert loaded == config
    assert abs(datetime.now().astimezone() - loaded.last_checked) < timedelta(minutes=1)


def test_written_json_layout(home):
    write_configuration(Config(), False, False)
    with open(config_file_path(), encoding="utf-8") as handle:
        data = json.load(handle)
    assert data["last-checked"] == "0001-01-01T00:00:00Z"
    assert data["nuclei-latest-version"] == ""
    assert "current-version" not in data
    assert data["nuclei-version"] == VERSION


def test_read_missing_configuration(home):
    with pytest.raises(FileNotFoundError):
        read_configuration()


def test_from_dict_parses_nanosecond_times():
    config = Config.from_dict({"last-checked": "2021-09-01T10:11:12.123456789+02:00"})
    assert config.last_checked.microsecond == 123456
    assert config.last_checked.utcoffset() == timedelta(hours=2)


def test_from_dict_rejects_non_mapping():
    with pytest.raises(ValueError):
        Config.from_dict(["not", "a", "mapping"])


def test_ignore_file_path_is_under_home(home):
    assert ignore_file_path() == os.path.join(str(home), ".config", "nuclei", ".nuclei-ignore")


def test_read_ignore_file(home):
    with open(ignore_file_path(), "w", encoding="utf-8") as handle:
        handle.write("tags:\n  - dos\n  - fuzz\nfiles:\n  - misc/a.yaml\n")
    assert read_ignore_file() == IgnoreFile(tags=["dos", "fuzz"], files=["misc/a.yaml"])


def test_read_missing_ignore_file_is_empty(home):
    assert read_ignore_file() == IgnoreFile()


def test_read_invalid_ignore_file_is_empty(home):
    with open(ignore_file_path(), "w", encoding="utf-8") as handle:
        handle.write("tags: [unclosed\n")
    assert read_ignore_file() == IgnoreFile()