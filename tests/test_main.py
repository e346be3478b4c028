#!/usr/bin/env python3
"""Tests for the command line entry point."""
import argparse
import json
import logging

import pytest

from readmock.main import _parse_selector, build_formatter, build_parser, main
from readmock.series import Series
from readmock.server import RemoteReadServer


def test_parse_selector():
    assert _parse_selector("__name__=up|down") == ("__name__", "up|down")
    assert _parse_selector("job=") == ("job", "")
    with pytest.raises(argparse.ArgumentTypeError):
        _parse_selector("nonsense")


def test_serve_arguments():
    args = build_parser().parse_args(["serve", "--config", "c.yaml", "--port", "9201"])
    assert args.command == "serve"
    assert args.config == "c.yaml"
    assert args.port == 9201


def test_serve_with_missing_config_fails():
    assert main(["serve", "--config", "/nonexistent/readmock.yaml"]) == 1


def test_query_prints_series(capsys):
    series = [Series.create({"__name__": "up", "job": "api"}, [(100, 1.0), (200, 0.5), (300, 0.0)])]
    with RemoteReadServer(series) as server:
        assert main([
            "query", "--url", server.read_url,
            "-m", "__name__=up", "--start", "100", "--end", "300",
        ]) == 0

    output = json.loads(capsys.readouterr().out)
    assert output == [{"labels": {"__name__": "up", "job": "api"}, "samples": [[100, 1.0], [200, 0.5]]}]


@pytest.mark.parametrize("message", [
    'bad header "Content-Type"',
    "line one\nline two",
    "plain message",
])
def test_json_log_lines_parse(message):
    formatter = build_formatter("json")
    record = logging.makeLogRecord({
        "name": "readmock.server",
        "levelname": "ERROR",
        "levelno": logging.ERROR,
        "msg": message,
    })

    line = formatter.format(record)
    parsed = json.loads(line)
    assert parsed["message"] == message
    assert parsed["level"] == "ERROR"
    assert parsed["logger"] == "readmock.server"
    assert "time" in parsed


def test_text_log_format():
    record = logging.makeLogRecord({"name": "readmock", "levelname": "INFO", "msg": "hello"})
    assert build_formatter("text").format(record).endswith("| INFO     | readmock | hello")
