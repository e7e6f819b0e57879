# nucleikit

nucleikit provides the template-management side of a template-based
vulnerability scanner:

- a model of template metadata: severities, comma-or-list string values and
  the `info` block, readable from and writable to YAML and JSON;
- a catalog that resolves template names, globs and directories to template
  files;
- tag/author/severity and path filters;
- the engine configuration file and ignore file under `~/.config/nuclei`;
- command-line option parsing and validation;
- a template updater that installs release archives and tracks what changed;
- terminal display helpers;
- integration test helpers and a functional test command that compares two
  scanner binaries.

## Installation

```
pip install nucleikit
```

Tests:

```
pip install "nucleikit[test]"
pytest
```

## Severities (`nucleikit.severity`)

```python
from nucleikit.severity import Holder, Severities, get_supported_severities, to_severity

to_severity(" INFO ")                         # Severity.INFO
[str(s) for s in get_supported_severities()]  # ['info', 'low', 'medium', 'high', 'critical']

Holder.from_yaml("critical").to_yaml()        # 'critical'
Holder(to_severity("high")).to_json()         # '"high"'

levels = Severities()
levels.set("high, critical")                  # appends both
str(levels)                                   # 'high, critical'
```

An unknown name raises `ValueError`. `Holder.json_schema_type()` returns a
JSON schema fragment listing the allowed names.

## Template metadata (`nucleikit.model`, `nucleikit.stringslice`)

```python
from nucleikit.model import Info

info = Info.from_yaml("""
name: Test Template
author: alice, bob
tags: cve, misc
severity: high
""")

info.authors.to_slice()   # ['alice', 'bob']
info.to_json()            # compact JSON, empty fields left out
info.to_yaml()
```

`StringSlice` holds either one string or a list. `StringSlice.from_yaml`
splits a string on commas and trims and lowercases every item.
`WorkflowLoader` is an abstract base class with
`get_template_paths_by_tags(tags)` and `get_template_paths(templates_list, no_validate)`.

## Catalog (`nucleikit.catalog`)

`Catalog(templates_directory).resolve_path(name, second="")` returns `name`
unchanged when it is absolute; otherwise it tries the directory of `second`,
the working directory and the templates directory, in that order, and raises
`TemplateNotFound` if none exists.

`get_template_path(target)` expands a file, a directory (all `.yaml` files
below it) or a `*` glob, raising `TemplateNotFound` when nothing is found.
`get_templates_path(definitions)` does this for many definitions, logs and
skips the ones that fail, and returns the paths without duplicates.

## Filters (`nucleikit.tag_filter`, `nucleikit.path_filter`)

```python
from nucleikit.severity import Severity
from nucleikit.tag_filter import FilterConfig, TagFilter, split_comma_trim

split_comma_trim("CVE, Misc")   # ['cve', 'misc']

tag_filter = TagFilter(FilterConfig(tags=["cves"], exclude_tags=["dos"]))
tag_filter.match(["cves"], ["alice"], Severity.LOW)   # True
tag_filter.match(["dos"], ["alice"], Severity.LOW)    # raises TemplateExcluded
```

A template passes when one of its tags is allowed, one of its authors is
listed, its severity is listed (an undefined severity always passes) and,
when extra tags are given, one of them is among its tags. Any criterion left
empty passes. A tag on the deny list raises `TemplateExcluded` unless it is
in `include_tags`; tags named in `tags` or `include_tags` are taken off the
deny list.

`PathFilter(PathFilterConfig(included_templates, excluded_templates), catalog).match(paths)`
returns the paths without duplicates, minus the excluded ones that are not
also always included.

## Loader (`nucleikit.loader`)

`Store(LoaderConfig(...))` builds both filters. When neither templates nor
workflows are configured, the templates directory becomes the only template
definition (`store.final_templates`). `store.resolve_paths(definitions)`
expands definitions through the catalog and applies the path filter.

## Configuration (`nucleikit.config`)

- `config_file_path()`: `~/.config/nuclei/.templates-config.json`, creating
  the directory.
- `read_configuration()` / `write_configuration(config, checked, checked_ignore)`:
  read and write `Config`. Writing fills in the default ignore URL, stamps the
  check times requested and records the engine version.
- `ignore_file_path()` / `read_ignore_file()`: the `.nuclei-ignore` file; on
  any read or parse failure an empty `IgnoreFile` is returned and the error is
  logged.

## Options (`nucleikit.options`, `nucleikit.cli`)

`Options` holds every scan setting with its default. `nucleikit.cli`:

- `build_parser()` returns an `argparse` parser with the flags grouped as
  Target, Templates, Filtering, Output, Configurations, interactsh,
  Rate-Limit, Optimizations, Headless, Debug, Update and Statistics;
- `parse_args(argv)` returns `Options`, merging the file given with `-config`;
- `merge_config_file(options, path)` reads a YAML mapping keyed by flag names
  and sets only the options still at their defaults; it raises `ValueError`
  on unreadable or invalid files.

`validate_options(options)` raises `OptionsError` when both verbose and
silent are set or a proxy URL does not parse. `load_resolvers(options)`
appends the resolvers listed in the resolvers file, adding `:53` when no port
is given. `configure_output(options)` sets the log level of the `nucleikit`
logger. `has_stdin()` reports whether standard input is piped.

## Updating templates (`nucleikit.update`)

`TemplateUpdater(options, templates_config)`:

- `update_templates()` installs the latest template release when none is
  installed, or updates it when the installed version is older (checked at
  most once a day unless `options.update_templates` is set);
- `download_release_and_unzip(version, download_url)` downloads a zip
  archive, writes its templates (dropping the archive's top directory, hidden
  files and `README.md`) and writes `.checksum` and `.new-additions` files;
  it returns `UpdateResults` with `additions`, `modifications`, `deletions`,
  `total_count` and `checksums`. Files from an earlier release that are gone
  from the new one and were not changed locally are deleted.
- `print_update_changelog(results, version)` prints a Total/Added/Removed table.

Release and tag lookups go to the GitHub API (`api_url` can be changed).

## Display (`nucleikit.display`)

`get_color(severity, use_color)`, `severity_colorizer(use_color)`,
`append_at_sign_to_authors("alice,bob")` (`'@alice,@bob'`),
`template_log_msg(id, name, author, severity, use_color)`, `banner()` and
`show_banner()`.

## Test helpers (`nucleikit.testutils`, `nucleikit.functional`)

`run_nuclei_and_get_results` and `run_nuclei_workflow_and_get_results` run
`./nuclei` against a target and return its non-empty output lines;
`run_nuclei_binary_and_get_loaded_templates` returns the loaded-templates
count a binary reports. `TCPServer(handler)` is a local TCP server usable as a
context manager; its address is in `url`.

The functional test command runs each line of a test-case file (its first
word is ignored, the rest are arguments) against two binaries and compares
their loaded-template counts:

```
nucleikit-functional-test -main ./nuclei-main -dev ./nuclei-dev -testcases testcases.txt
```

It exits with status 1 if any case fails.

## What it does not do

nucleikit does not execute templates. There is no template parser or
compiler, no HTTP, DNS, network or headless request engine, no scan runner,
no result output or reporting, and no self-update of a scanner binary. The
`Store` only selects template paths; it does not load them.