#!/usr/bin/env python3
"""Tests for series data structures."""
import dataclasses

import pytest

from readmock.series import Sample, Series, count_samples


def test_create_from_pairs_and_samples():
    series = Series.create({"job": "api", "__name__": "up"}, [(1, 2), Sample(3, 4.5)])
    assert series.labels == (("job", "api"), ("__name__", "up"))
    assert series.samples == (Sample(1, 2.0), Sample(3, 4.5))
    assert series.label_map == {"job": "api", "__name__": "up"}


def test_label_key_is_order_independent():
    a = Series.create({"b": "2", "a": "1"})
    b = Series.from_dict({"labels": {"a": "1", "b": "2"}})
    assert a.label_key() == b.label_key() == "a=1,b=2"


def test_empty_placeholder():
    assert Series().is_empty
    assert not Series.create({"a": "b"}).is_empty


def test_series_are_immutable():
    series = Series.create({"a": "b"}, [(1, 1.0)])
    with pytest.raises(dataclasses.FrozenInstanceError):
        series.labels = ()


def test_count_samples():
    assert count_samples([Series.create({}, [(1, 1.0), (2, 2.0)]), Series()]) == 2
