#!/usr/bin/env python3
"""Tests for label matcher evaluation."""
import pytest

from readmock.errors import InvalidMatcherError, UnsupportedMatcherError
from readmock.matching import check_matchers, matches
from readmock.series import Series
from readmock.wire import LabelMatcher, MatcherType

SERIES = Series.create({"__name__": "up", "job": "api"}, [(1, 1.0)])


def test_no_matchers_match_everything():
    assert matches(SERIES, [])


def test_regex_match_on_named_label():
    assert matches(SERIES, [LabelMatcher("__name__", "up")])
    assert not matches(SERIES, [LabelMatcher("__name__", "down")])


def test_pattern_matches_anywhere_in_value():
    assert matches(SERIES, [LabelMatcher("job", "p")])
    assert matches(SERIES, [LabelMatcher("__name__", "^u")])
    assert not matches(SERIES, [LabelMatcher("__name__", "^p$")])


def test_all_matchers_on_a_label_must_pass():
    assert matches(SERIES, [LabelMatcher("job", "a"), LabelMatcher("job", "i$")])
    assert not matches(SERIES, [LabelMatcher("job", "a"), LabelMatcher("job", "^db$")])


def test_every_label_is_checked():
    assert not matches(SERIES, [LabelMatcher("__name__", "up"), LabelMatcher("job", "db")])


def test_matcher_for_absent_label_is_ignored():
    assert matches(SERIES, [LabelMatcher("instance", "i-99")])
    assert matches(SERIES, [LabelMatcher("__name__", "up"), LabelMatcher("instance", "^$")])
    assert not matches(SERIES, [LabelMatcher("__name__", "nope"), LabelMatcher("instance", ".*")])


@pytest.mark.parametrize("kind", [MatcherType.EQ, MatcherType.NEQ, MatcherType.NRE, 9])
@pytest.mark.parametrize("series", [SERIES, Series(), Series.create({"other": "x"})])
def test_unsupported_kind_always_fails(kind, series):
    with pytest.raises(UnsupportedMatcherError):
        matches(series, [LabelMatcher("__name__", "up", kind)])


def test_unsupported_kind_fails_with_no_series():
    with pytest.raises(UnsupportedMatcherError):
        check_matchers([LabelMatcher("__name__", "up"), LabelMatcher("job", "api", MatcherType.EQ)])


def test_invalid_regex_fails():
    with pytest.raises(InvalidMatcherError):
        matches(SERIES, [LabelMatcher("job", "(")])
