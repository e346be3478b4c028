#!/usr/bin/env python3
"""Tests for configuration and dataset loading."""
from pathlib import Path

import pytest

from readmock.config import Config, ServerConfig, SeriesSpec, load_config, load_dataset
from readmock.series import Sample, Series

EXAMPLE = Path(__file__).resolve().parents[1] / "configs" / "example.yaml"


def test_example_config_loads():
    config = load_config(str(EXAMPLE))
    assert isinstance(config, Config)
    assert config.server.read_path == "/read"
    assert config.protocol.version_prefix == "0.1."

    dataset = config.dataset()
    assert len(dataset) == 3
    assert dataset[2].samples == (Sample(100, 10.0), Sample(200, 25.0), Sample(300, 41.0))


def test_defaults():
    config = Config()
    assert config.server.port == 0
    assert config.protocol.compression == "snappy"
    assert config.protocol.content_type == "application/x-protobuf"
    assert config.global_.log_level == "INFO"
    assert config.dataset() == ()


def test_env_overrides(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("global:\n  log_level: INFO\n")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("READMOCK_PORT", "9201")

    config = load_config(str(path))
    assert config.global_.log_level == "DEBUG"
    assert config.server.port == 9201


def test_empty_file_gives_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("READMOCK_PORT", raising=False)
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(str(path)) == Config()


def test_missing_file():
    with pytest.raises(FileNotFoundError):
        load_config("/nonexistent/readmock.yaml")


def test_unordered_samples_are_rejected(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("series:\n  - labels: {a: b}\n    samples: [[200, 1], [100, 2]]\n")
    with pytest.raises(ValueError, match="ordered by timestamp"):
        load_config(str(path))


def test_bad_sample_pair_is_rejected():
    with pytest.raises(ValueError):
        SeriesSpec(labels={"a": "b"}, samples=[[1, 2, 3]])


def test_read_path_must_be_absolute():
    with pytest.raises(ValueError):
        ServerConfig(read_path="read")


def test_load_dataset_from_list_or_mapping(tmp_path):
    listed = tmp_path / "listed.yaml"
    listed.write_text("- labels: {__name__: up}\n  samples: [[1, 1.0]]\n")
    mapped = tmp_path / "mapped.yaml"
    mapped.write_text("series:\n  - labels: {__name__: up}\n    samples: [{timestamp: 1, value: 1.0}]\n")

    expected = (Series.create({"__name__": "up"}, [(1, 1.0)]),)
    assert load_dataset(str(listed)) == expected
    assert load_dataset(str(mapped)) == expected
