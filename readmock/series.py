"""Data structures for stored time series."""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Tuple


@dataclass(frozen=True)
class Sample:
    """A single timestamped value."""
    timestamp: int
    value: float


@dataclass(frozen=True)
class Series:
    """A label set with its timestamp-ordered samples."""
    labels: Tuple[Tuple[str, str], ...] = ()
    samples: Tuple[Sample, ...] = field(default_factory=tuple)

    @classmethod
    def create(cls, labels: Mapping[str, str], samples: Iterable[Any] = ()) -> "Series":
        """Build a series from a label mapping and (timestamp, value) pairs or Samples."""
        converted = []
        for sample in samples:
            if isinstance(sample, Sample):
                converted.append(sample)
            else:
                timestamp, value = sample
                converted.append(Sample(int(timestamp), float(value)))
        return cls(labels=tuple(labels.items()), samples=tuple(converted))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Series":
        """Build a series from a plain ``{"labels": ..., "samples": ...}`` mapping."""
        return cls.create(data.get("labels", {}), data.get("samples", []))

    @property
    def label_map(self) -> Dict[str, str]:
        return dict(self.labels)

    @property
    def is_empty(self) -> bool:
        return not self.labels and not self.samples

    def label_key(self) -> str:
        """Generate a stable key from sorted labels."""
        items = sorted(self.labels)
        return ",".join(f"{k}={v}" for k, v in items)


def count_samples(series: Iterable[Series]) -> int:
    """Total number of samples across all series."""
    return sum(len(s.samples) for s in series)
