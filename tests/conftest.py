"""Shared fixtures for the remote-read double tests."""
import sys
from pathlib import Path

import pytest

# Allow running the suite from a plain checkout
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from readmock.series import Series


@pytest.fixture
def up_series():
    return Series.create({"__name__": "up"}, [(100, 1.0), (200, 1.0), (300, 0.0)])


@pytest.fixture
def dataset():
    return (
        Series.create({"__name__": "up", "job": "api", "instance": "i-01"}, [(100, 1.0), (200, 1.0), (300, 0.0)]),
        Series.create({"__name__": "up", "job": "db", "instance": "i-02"}, [(100, 1.0), (250, 1.0)]),
        Series.create(
            {"__name__": "http_requests_total", "job": "api", "code": "200"},
            [(100, 10.0), (200, 25.0), (300, 41.0)],
        ),
    )
