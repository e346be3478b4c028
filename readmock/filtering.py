"""Time range filtering of sample sequences."""
from typing import Sequence, Tuple

from readmock.series import Sample


def filter_by_time(samples: Sequence[Sample], start: int, end: int) -> Tuple[Sample, ...]:
    """Keep samples with ``start <= timestamp < end``, in their original order."""
    # End boundary is exclusive, matching Prometheus.
    return tuple(s for s in samples if start <= s.timestamp < end)
