import pytest

from nucleikit.severity import Severity
from nucleikit.tag_filter import FilterConfig, TagFilter, TemplateExcluded, split_comma_trim


@pytest.fixture
def tags_filter():
    return TagFilter(FilterConfig(tags=["cves", "2021", "jira"]))


def test_tags_true(tags_filter):
    assert tags_filter.match(["jira"], ["pdteam"], Severity.LOW, None) is True


def test_tags_false(tags_filter):
    assert tags_filter.match(["consul"], ["pdteam"], Severity.LOW, None) is False


def test_match_extra_tags_positive(tags_filter):
    assert tags_filter.match(["cves", "vuln"], ["pdteam"], Severity.LOW, ["vuln"]) is True


def test_match_extra_tags_negative(tags_filter):
    assert tags_filter.match(["cves"], ["pdteam"], Severity.LOW, ["vuln"]) is False


def test_not_match_excludes():
    tag_filter = TagFilter(FilterConfig(exclude_tags=["dos"]))
    with pytest.raises(TemplateExcluded, match="the template was excluded"):
        tag_filter.match(["dos"], ["pdteam"], Severity.LOW, None)


def test_match_includes_overrides_exclude():
    tag_filter = TagFilter(
        FilterConfig(tags=["cves", "fuzz"], exclude_tags=["dos", "fuzz"], include_tags=["fuzz"])
    )
    assert tag_filter.match(["fuzz"], ["pdteam"], Severity.LOW, None) is True


def test_match_tags_override_exclude():
    tag_filter = TagFilter(FilterConfig(tags=["fuzz"], exclude_tags=["fuzz"]))
    assert tag_filter.match(["fuzz"], ["pdteam"], Severity.LOW, None) is True


def test_match_author():
    tag_filter = TagFilter(FilterConfig(authors=["pdteam"]))
    assert tag_filter.match(["fuzz"], ["pdteam"], Severity.LOW, None) is True


def test_match_severity():
    tag_filter = TagFilter(FilterConfig(severities=[Severity.HIGH]))
    assert tag_filter.match(["fuzz"], ["pdteam"], Severity.HIGH, None) is True


def test_match_exclude_with_tags():
    tag_filter = TagFilter(FilterConfig(tags=["tag"], exclude_tags=["another"]))
    with pytest.raises(TemplateExcluded):
        tag_filter.match(["another"], ["pdteam"], Severity.HIGH, None)


def test_match_conditions():
    tag_filter = TagFilter(
        FilterConfig(authors=["pdteam"], tags=["jira"], severities=[Severity.HIGH])
    )
    assert tag_filter.match(["jira", "cve"], ["pdteam", "someOtherUser"], Severity.HIGH, None) is True
    assert tag_filter.match(["jira"], ["pdteam"], Severity.LOW, None) is False
    assert tag_filter.match(["jira"], ["random"], Severity.LOW, None) is False
    assert tag_filter.match(["consul"], ["random"], Severity.LOW, None) is False


def test_undefined_severity_always_matches():
    tag_filter = TagFilter(FilterConfig(severities=[Severity.HIGH]))
    assert tag_filter.match(["x"], ["pdteam"], Severity.UNDEFINED, None) is True


def test_empty_filter_matches_everything():
    assert TagFilter().match([], [], Severity.CRITICAL) is True


def test_comma_separated_config_values_are_split():
    tag_filter = TagFilter(FilterConfig(tags=["CVES, Jira"]))
    assert tag_filter.match(["jira"], [], Severity.LOW) is True
    assert tag_filter.match(["other"], [], Severity.LOW) is False


def test_split_comma_trim():
    assert split_comma_trim("A, B ,c") == ["a", "b", "c"]
    assert split_comma_trim("Foo") == ["foo"]
    assert split_comma_trim(" Foo ") == [" foo "]