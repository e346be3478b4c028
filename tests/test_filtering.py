#!/usr/bin/env python3
"""Tests for half-open time range filtering."""
from readmock.filtering import filter_by_time
from readmock.series import Sample

SAMPLES = (Sample(100, 1.0), Sample(200, 2.0), Sample(300, 3.0))


def test_start_is_inclusive_and_end_exclusive():
    assert filter_by_time(SAMPLES, 100, 300) == (Sample(100, 1.0), Sample(200, 2.0))


def test_window_covering_everything():
    assert filter_by_time(SAMPLES, 0, 301) == SAMPLES


def test_single_point_window():
    assert filter_by_time(SAMPLES, 200, 201) == (Sample(200, 2.0),)


def test_empty_and_inverted_windows_return_nothing():
    assert filter_by_time(SAMPLES, 200, 200) == ()
    assert filter_by_time(SAMPLES, 300, 100) == ()
    assert filter_by_time(SAMPLES, 301, 400) == ()
    assert filter_by_time((), 0, 1000) == ()


def test_order_is_preserved_without_resorting():
    unordered = (Sample(5, 0.0), Sample(1, 0.0), Sample(3, 0.0))
    assert filter_by_time(unordered, 0, 10) == unordered
