import pytest

from nucleikit.catalog import Catalog
from nucleikit.path_filter import PathFilter, PathFilterConfig


@pytest.fixture
def tree(tmp_path):
    root = tmp_path / "templates"
    (root / "dos").mkdir(parents=True)
    (root / "dos" / "slow.yaml").write_text("id: slow")
    (root / "dos" / "flood.yaml").write_text("id: flood")
    (root / "ok.yaml").write_text("id: ok")
    return root


def _all(tree):
    return [str(tree / "ok.yaml"), str(tree / "dos" / "slow.yaml"), str(tree / "dos" / "flood.yaml")]


def test_no_configuration_keeps_everything(tree):
    path_filter = PathFilter(PathFilterConfig(), Catalog(str(tree)))
    assert path_filter.match(_all(tree)) == _all(tree)


def test_excluded_directory_is_removed(tree):
    config = PathFilterConfig(excluded_templates=[str(tree / "dos")])
    path_filter = PathFilter(config, Catalog(str(tree)))
    assert path_filter.match(_all(tree)) == [str(tree / "ok.yaml")]


def test_included_overrides_excluded(tree):
    config = PathFilterConfig(
        excluded_templates=[str(tree / "dos")],
        included_templates=[str(tree / "dos" / "slow.yaml")],
    )
    path_filter = PathFilter(config, Catalog(str(tree)))
    assert path_filter.match(_all(tree)) == [str(tree / "ok.yaml"), str(tree / "dos" / "slow.yaml")]


def test_duplicates_are_collapsed(tree):
    path_filter = PathFilter(PathFilterConfig(), Catalog(str(tree)))
    ok = str(tree / "ok.yaml")
    assert path_filter.match([ok, ok, ok]) == [ok]


def test_unresolvable_exclusion_is_ignored(tree, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = PathFilterConfig(excluded_templates=["missing.yaml"])
    path_filter = PathFilter(config, Catalog(str(tree)))
    assert path_filter.match(_all(tree)) == _all(tree)


def test_relative_exclusion_resolves_through_catalog(tree, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = PathFilterConfig(excluded_templates=["ok.yaml"])
    path_filter = PathFilter(config, Catalog(str(tree)))
    result = path_filter.match(_all(tree))
    assert str(tree / "ok.yaml") not in result
    assert len(result) == 2