import pytest

from nucleikit.cli import build_parser, merge_config_file, parse_args
from nucleikit.options import Options
from nucleikit.severity import Severities, Severity


def test_no_arguments_give_defaults():
    assert parse_args([]) == Options()


def test_targets_accumulate_across_names():
    options = parse_args(["-u", "a.example.com", "-target", "b.example.com"])
    assert options.targets == ["a.example.com", "b.example.com"]


def test_double_dash_long_names():
    options = parse_args(["--templates", "cves/", "--silent"])
    assert options.templates == ["cves/"]
    assert options.silent is True


def test_normalized_tags():
    options = parse_args(["-tags", "CVE, RCE", "-etags", "dos"])
    assert options.tags == ["cve", "rce"]
    assert options.exclude_tags == ["dos"]


def test_severities():
    options = parse_args(["-severity", "high,critical"])
    assert options.severities == Severities([Severity.HIGH, Severity.CRITICAL])


def test_invalid_severity_exits():
    with pytest.raises(SystemExit):
        parse_args(["-severity", "urgent"])


def test_integer_and_short_flags():
    options = parse_args(["-rl", "10", "-c", "3", "-v", "-vv"])
    assert options.rate_limit == 10
    assert options.template_threads == 3
    assert options.verbose is True
    assert options.verbose_verbose is True


def test_vars_map():
    options = parse_args(["-V", "name=value", "-var", "other=thing"])
    assert options.vars == {"name": "value", "other": "thing"}


def test_var_without_equals_exits():
    with pytest.raises(SystemExit):
        parse_args(["-V", "novalue"])


def test_parser_has_config_flag():
    namespace = build_parser().parse_args(["-config", "cfg.yaml"])
    assert namespace.config_file == "cfg.yaml"


def test_merge_config_keeps_command_line_values(tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("rate-limit: 50\nsilent: true\ntags: [A, b]\n")
    options = Options(rate_limit=10)
    merged = merge_config_file(options, str(config))
    assert merged is options
    assert options.rate_limit == 10
    assert options.silent is True
    assert options.tags == ["a", "b"]


def test_parse_args_merges_config(tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("severity: high\nbs: 5\n")
    options = parse_args(["-config", str(config)])
    assert options.severities == Severities([Severity.HIGH])
    assert options.bulk_size == 5


def test_merge_config_rejects_non_mapping(tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("- one\n- two\n")
    with pytest.raises(ValueError, match="Could not read config"):
        merge_config_file(Options(), str(config))


def test_merge_config_missing_file(tmp_path):
    with pytest.raises(ValueError, match="Could not read config"):
        merge_config_file(Options(), str(tmp_path / "absent.yaml"))