"""Command line flags and configuration file merging for a scan."""

from __future__ import annotations

import argparse
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence

import yaml

from nucleikit.options import Options
from nucleikit.severity import get_supported_severities

DESCRIPTION = (
    "Nuclei is a fast, template based vulnerability scanner focusing\n"
    "on extensive configurability, massive extensibility and ease of use."
)


class _Kind(Enum):
    STR = "str"
    BOOL = "bool"
    INT = "int"
    SLICE = "slice"
    NORMALIZED = "normalized"
    SEVERITY = "severity"
    MAP = "map"


@dataclass(frozen=True)
class _Flag:
    dest: str
    names: tuple[str, ...]
    kind: _Kind
    help: str


@dataclass(frozen=True)
class _Group:
    name: str
    description: str
    flags: tuple[_Flag, ...]


S, B, I = _Kind.STR, _Kind.BOOL, _Kind.INT
SL, NS, SEV, MAP = _Kind.SLICE, _Kind.NORMALIZED, _Kind.SEVERITY, _Kind.MAP

_GROUPS = (
    _Group("input", "Target", (
        _Flag("targets", ("target", "u"), SL, "target URLs/hosts to scan"),
        _Flag("targets_file_path", ("list", "l"), S,
              "path to file containing a list of target URLs/hosts to scan (one per line)"),
    )),
    _Group("templates", "Templates", (
        _Flag("template_list", ("tl",), B, "list all available templates"),
        _Flag("templates", ("templates", "t"), SL,
              "template or template directory paths to include in the scan"),
        _Flag("workflows", ("workflows", "w"), SL, "list of workflows to run"),
        _Flag("new_templates", ("new-templates", "nt"), B, "run newly added templates only"),
        _Flag("validate", ("validate",), B, "validate the passed templates to nuclei"),
    )),
    _Group("filters", "Filtering", (
        _Flag("tags", ("tags",), NS, "execute a subset of templates that contain the provided tags"),
        _Flag("include_tags", ("include-tags",), NS,
              "tags from the default deny list that permit executing more intrusive templates"),
        _Flag("exclude_tags", ("exclude-tags", "etags"), NS,
              "exclude templates with the provided tags"),
        _Flag("include_templates", ("include-templates",), SL,
              "templates to be executed even if they are excluded either by default or configuration"),
        _Flag("excluded_templates", ("exclude", "exclude-templates"), SL,
              "template or template directory paths to exclude"),
        _Flag("severities", ("impact", "severity"), SEV,
              f"Templates to run based on severity. Possible values: {get_supported_severities()}"),
        _Flag("author", ("author",), NS,
              "execute templates that are (co-)created by the specified authors"),
    )),
    _Group("output", "Output", (
        _Flag("output", ("output", "o"), S, "output file to write found issues/vulnerabilities"),
        _Flag("silent", ("silent",), B, "display findings only"),
        _Flag("verbose", ("verbose", "v"), B, "show verbose output"),
        _Flag("verbose_verbose", ("vv",), B, "display extra verbose information"),
        _Flag("no_color", ("no-color", "nc"), B,
              "disable output content coloring (ANSI escape codes)"),
        _Flag("json", ("json",), B, "write output in JSONL(ines) format"),
        _Flag("json_requests", ("include-rr", "irr"), B,
              "include request/response pairs in the JSONL output (for findings only)"),
        _Flag("no_meta", ("no-meta", "nm"), B, "don't display match metadata"),
        _Flag("no_timestamp", ("no-timestamp", "nts"), B,
              "don't display timestamp metadata in CLI output"),
        _Flag("reporting_db", ("report-db", "rdb"), S,
              "local nuclei reporting database (always use this to persist report data)"),
        _Flag("disk_export_directory", ("markdown-export", "me"), S,
              "directory to export results in markdown format"),
        _Flag("sarif_export", ("sarif-export", "se"), S, "file to export results in SARIF format"),
    )),
    _Group("configs", "Configurations", (
        _Flag("reporting_config", ("report-config", "rc"), S,
              "nuclei reporting module configuration file"),
        _Flag("custom_headers", ("header", "H"), SL, "custom headers in header:value format"),
        _Flag("vars", ("var", "V"), MAP, "custom vars in var=value format"),
        _Flag("resolvers_file", ("resolvers", "r"), S, "file containing resolver list for nuclei"),
        _Flag("system_resolvers", ("system-resolvers",), B,
              "use system DNS resolving as error fallback"),
        _Flag("offline_http", ("passive",), B, "enable passive HTTP response processing mode"),
        _Flag("environment_variables", ("env-vars",), B, "enable environment variables support"),
    )),
    _Group("interactsh", "interactsh", (
        _Flag("no_interactsh", ("no-interactsh",), B,
              "do not use interactsh server for blind interaction polling"),
        _Flag("interactsh_url", ("interactsh-url",), S, "self-hosted Interactsh Server URL"),
        _Flag("interactions_cache_size", ("interactions-cache-size",), I,
              "number of requests to keep in the interactions cache"),
        _Flag("interactions_eviction", ("interactions-eviction",), I,
              "number of seconds to wait before evicting requests from cache"),
        _Flag("interactions_poll_duration", ("interactions-poll-duration",), I,
              "number of seconds to wait before each interaction poll request"),
        _Flag("interactions_cooldown_period", ("interactions-cooldown-period",), I,
              "extra time for interaction polling before exiting"),
    )),
    _Group("rate-limit", "Rate-Limit", (
        _Flag("rate_limit", ("rate-limit", "rl"), I, "maximum number of requests to send per second"),
        _Flag("rate_limit_minute", ("rate-limit-minute", "rlm"), I,
              "maximum number of requests to send per minute"),
        _Flag("bulk_size", ("bulk-size", "bs"), I,
              "maximum number of hosts to be analyzed in parallel per template"),
        _Flag("template_threads", ("concurrency", "c"), I,
              "maximum number of templates to be executed in parallel"),
    )),
    _Group("optimization", "Optimizations", (
        _Flag("timeout", ("timeout",), I, "time to wait in seconds before timeout"),
        _Flag("retries", ("retries",), I, "number of times to retry a failed request"),
        _Flag("max_host_error", ("max-host-error",), I,
              "max errors for a host before skipping from scan"),
        _Flag("project", ("project",), B,
              "use a project folder to avoid sending same request multiple times"),
        _Flag("project_path", ("project-path",), S, "set a specific project path"),
        _Flag("stop_at_first_match", ("stop-at-first-path", "spm"), B,
              "stop processing HTTP requests after the first match (may break template/workflow logic)"),
    )),
    _Group("headless", "Headless", (
        _Flag("headless", ("headless",), B, "enable templates that require headless browser support"),
        _Flag("page_timeout", ("page-timeout",), I, "seconds to wait for each page in headless mode"),
        _Flag("show_browser", ("show-browser",), B,
              "show the browser on the screen when running templates with headless mode"),
    )),
    _Group("debug", "Debug", (
        _Flag("debug", ("debug",), B, "show all requests and responses"),
        _Flag("debug_requests", ("debug-req",), B, "show all sent requests"),
        _Flag("debug_response", ("debug-resp",), B, "show all received responses"),
        _Flag("proxy_url", ("proxy-url", "proxy"), S, "URL of the HTTP proxy server"),
        _Flag("proxy_socks_url", ("proxy-socks-url",), S, "URL of the SOCKS proxy server"),
        _Flag("trace_log_file", ("trace-log",), S, "file to write sent requests trace log"),
        _Flag("version", ("version",), B, "show nuclei version"),
        _Flag("templates_version", ("templates-version", "tv"), B,
              "shows the version of the installed nuclei-templates"),
    )),
    _Group("update", "Update", (
        _Flag("update_nuclei", ("update",), B, "update nuclei to the latest released version"),
        _Flag("update_templates", ("update-templates", "ut"), B,
              "update the community templates to latest released version"),
        _Flag("no_update_templates", ("no-update-templates", "nut"), B,
              "do not check for nuclei-templates updates"),
        _Flag("templates_directory", ("update-directory", "ud"), S,
              "overwrite the default nuclei-templates directory"),
    )),
    _Group("stats", "Statistics", (
        _Flag("enable_progress_bar", ("stats",), B, "display statistics about the running scan"),
        _Flag("stats_json", ("stats-json",), B,
              "write statistics data to an output file in JSONL(ines) format"),
        _Flag("stats_interval", ("stats-interval", "si"), I,
              "number of seconds to wait between showing a statistics update"),
        _Flag("metrics", ("metrics",), B, "expose nuclei metrics on a port"),
        _Flag("metrics_port", ("metrics-port",), I, "port to expose nuclei metrics on"),
    )),
)

_FLAGS = tuple(flag for group in _GROUPS for flag in group.flags)
_CONFIG_DEST = "config_file"


def _option_strings(names: Sequence[str]) -> list[str]:
    strings: list[str] = []
    for name in names:
        strings.append(f"-{name}")
        if len(name) > 1:
            strings.append(f"--{name}")
    return strings


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with every flag in its group."""
    parser = argparse.ArgumentParser(
        prog="nuclei",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )
    for group in _GROUPS:
        section = parser.add_argument_group(group.description)
        if group.name == "configs":
            section.add_argument(
                *_option_strings(("config",)),
                dest=_CONFIG_DEST,
                default=None,
                help="path to the nuclei configuration file",
            )
        for flag in group.flags:
            strings = _option_strings(flag.names)
            if flag.kind is _Kind.BOOL:
                section.add_argument(*strings, dest=flag.dest, action="store_true",
                                     default=None, help=flag.help)
            elif flag.kind is _Kind.INT:
                section.add_argument(*strings, dest=flag.dest, type=int,
                                     default=None, help=flag.help)
            elif flag.kind is _Kind.STR:
                section.add_argument(*strings, dest=flag.dest, default=None, help=flag.help)
            else:
                section.add_argument(*strings, dest=flag.dest, action="append",
                                     default=None, help=flag.help)
    return parser


_TRUE = {"1", "t", "true"}
_FALSE = {"0", "f", "false"}


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"invalid boolean value '{value}'")


def _extend(kind: _Kind, current: Any, item: str) -> None:
    if kind is _Kind.SLICE:
        current.append(item)
    elif kind is _Kind.NORMALIZED:
        current.extend(p.strip().lower() for p in item.split(",") if p.strip())
    elif kind is _Kind.SEVERITY:
        current.set(item)
    elif kind is _Kind.MAP:
        key, sep, value = item.partition("=")
        if not sep:
            raise ValueError(f"invalid var '{item}', expected var=value")
        current[key.strip()] = value.strip()


def _apply(options: Options, flag: _Flag, value: Any) -> None:
    if flag.kind is _Kind.BOOL:
        setattr(options, flag.dest, _to_bool(value))
    elif flag.kind is _Kind.INT:
        setattr(options, flag.dest, int(value))
    elif flag.kind is _Kind.STR:
        setattr(options, flag.dest, str(value))
    else:
        current = getattr(options, flag.dest)
        for item in value if isinstance(value, list) else [value]:
            _extend(flag.kind, current, str(item))


def parse_args(argv: Optional[Sequence[str]] = None) -> Options:
    """Parse command line arguments into Options, merging a config file if given."""
    parser = build_parser()
    namespace = parser.parse_args(argv)
    options = Options()
    for flag in _FLAGS:
        raw = getattr(namespace, flag.dest)
        if raw is None:
            continue
        try:
            _apply(options, flag, raw)
        except ValueError as err:
            parser.error(str(err))
    config_file = getattr(namespace, _CONFIG_DEST)
    if config_file:
        merge_config_file(options, config_file)
    return options


def merge_config_file(options: Options, path: str) -> Options:
    """Fill options still at their defaults from a YAML file keyed by flag names."""
    try:
        with open(path, encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except (OSError, yaml.YAMLError) as err:
        raise ValueError(f"Could not read config: {err}") from err
    if data is None:
        return options
    if not isinstance(data, Mapping):
        raise ValueError("Could not read config: expected a mapping of flag names")

    defaults = Options()
    for flag in _FLAGS:
        for name in flag.names:
            if name not in data:
                continue
            if getattr(options, flag.dest) != getattr(defaults, flag.dest):
                continue
            try:
                _apply(options, flag, data[name])
            except (TypeError, ValueError) as err:
                raise ValueError(f"Could not read config: {name}: {err}") from err
    return options