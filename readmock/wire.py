"""Remote-read wire codec: ``prompb`` protobuf messages framed with snappy block compression.

The frozen dataclasses here are what the rest of the package works with; they
are mapped to and from the messages in ``readmock.prompb`` at the codec edge.
Fields outside the schema are skipped on decode.
"""
import enum
import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

import snappy
from google.protobuf.message import DecodeError, EncodeError

from readmock import prompb
from readmock.errors import CodecError
from readmock.series import Sample, Series

logger = logging.getLogger(__name__)


class MatcherType(enum.IntEnum):
    """Label matcher kinds defined by the remote-read schema."""
    EQ = 0
    NEQ = 1
    RE = 2
    NRE = 3


class ResponseType(enum.IntEnum):
    """Response encodings a client may accept."""
    SAMPLES = 0
    STREAMED_XOR_CHUNKS = 1


@dataclass(frozen=True)
class LabelMatcher:
    """Predicate over one named label. ``kind`` keeps unknown enum values as plain ints."""
    name: str
    pattern: str
    kind: Union[MatcherType, int] = MatcherType.RE


@dataclass(frozen=True)
class ReadHints:
    step_ms: int = 0
    func: str = ""
    start_ms: int = 0
    end_ms: int = 0
    grouping: Tuple[str, ...] = ()
    by: bool = False
    range_ms: int = 0


@dataclass(frozen=True)
class Query:
    """A half-open [start, end) window plus the matchers selecting series."""
    start_timestamp_ms: int = 0
    end_timestamp_ms: int = 0
    matchers: Tuple[LabelMatcher, ...] = ()
    hints: Optional[ReadHints] = None


@dataclass(frozen=True)
class ReadRequest:
    queries: Tuple[Query, ...] = ()
    accepted_response_types: Tuple[Union[ResponseType, int], ...] = ()


@dataclass(frozen=True)
class QueryResult:
    timeseries: Tuple[Series, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ReadResponse:
    results: Tuple[QueryResult, ...] = ()


# ---------------------------------------------------------------------------
# Protobuf mapping
# ---------------------------------------------------------------------------

def _enum_value(enum_cls, value: int):
    try:
        return enum_cls(value)
    except ValueError:
        return value


def _fill_timeseries(pb, series: Series) -> None:
    for name, value in series.labels:
        pb.labels.add(name=name, value=value)
    for sample in series.samples:
        pb.samples.add(value=sample.value, timestamp=sample.timestamp)


def _fill_query(pb, query: Query) -> None:
    pb.start_timestamp_ms = query.start_timestamp_ms
    pb.end_timestamp_ms = query.end_timestamp_ms
    for matcher in query.matchers:
        pb.matchers.add(type=int(matcher.kind), name=matcher.name, value=matcher.pattern)
    if query.hints is not None:
        hints = query.hints
        pb.hints.SetInParent()
        pb.hints.step_ms = hints.step_ms
        pb.hints.func = hints.func
        pb.hints.start_ms = hints.start_ms
        pb.hints.end_ms = hints.end_ms
        pb.hints.grouping.extend(hints.grouping)
        pb.hints.by = hints.by
        pb.hints.range_ms = hints.range_ms


def _series_from_pb(pb) -> Series:
    return Series(
        labels=tuple((label.name, label.value) for label in pb.labels),
        samples=tuple(Sample(s.timestamp, s.value) for s in pb.samples),
    )


def _query_from_pb(pb) -> Query:
    hints = None
    if pb.HasField("hints"):
        hints = ReadHints(
            step_ms=pb.hints.step_ms,
            func=pb.hints.func,
            start_ms=pb.hints.start_ms,
            end_ms=pb.hints.end_ms,
            grouping=tuple(pb.hints.grouping),
            by=pb.hints.by,
            range_ms=pb.hints.range_ms,
        )
    return Query(
        start_timestamp_ms=pb.start_timestamp_ms,
        end_timestamp_ms=pb.end_timestamp_ms,
        matchers=tuple(
            LabelMatcher(name=m.name, pattern=m.value, kind=_enum_value(MatcherType, m.type))
            for m in pb.matchers
        ),
        hints=hints,
    )


def marshal_read_request(request: ReadRequest) -> bytes:
    """Serialize a ReadRequest to protobuf bytes."""
    try:
        pb = prompb.ReadRequest()
        for query in request.queries:
            _fill_query(pb.queries.add(), query)
        pb.accepted_response_types.extend(int(t) for t in request.accepted_response_types)
        return pb.SerializeToString()
    except (EncodeError, TypeError, ValueError, AttributeError) as exc:
        raise CodecError("serialize", str(exc)) from exc


def marshal_read_response(response: ReadResponse) -> bytes:
    """Serialize a ReadResponse to protobuf bytes."""
    try:
        pb = prompb.ReadResponse()
        for result in response.results:
            result_pb = pb.results.add()
            if result is None:
                continue
            for series in result.timeseries:
                _fill_timeseries(result_pb.timeseries.add(), series)
        return pb.SerializeToString()
    except (EncodeError, TypeError, ValueError, AttributeError) as exc:
        raise CodecError("serialize", str(exc)) from exc


def _parse(message_cls, data: bytes):
    pb = message_cls()
    try:
        pb.ParseFromString(data)
    except (DecodeError, UnicodeDecodeError, ValueError) as exc:
        raise CodecError("deserialize", f"{pb.DESCRIPTOR.name}: {exc}") from exc
    return pb


def unmarshal_read_request(data: bytes) -> ReadRequest:
    """Deserialize protobuf bytes into a ReadRequest."""
    pb = _parse(prompb.ReadRequest, data)
    return ReadRequest(
        queries=tuple(_query_from_pb(q) for q in pb.queries),
        accepted_response_types=tuple(_enum_value(ResponseType, t) for t in pb.accepted_response_types),
    )


def unmarshal_read_response(data: bytes) -> ReadResponse:
    """Deserialize protobuf bytes into a ReadResponse."""
    pb = _parse(prompb.ReadResponse, data)
    return ReadResponse(results=tuple(
        QueryResult(timeseries=tuple(_series_from_pb(ts) for ts in result.timeseries))
        for result in pb.results
    ))


# ---------------------------------------------------------------------------
# Compression
# ---------------------------------------------------------------------------

def compress(data: bytes) -> bytes:
    """Snappy block-compress a serialized message."""
    try:
        return snappy.compress(data)
    except Exception as exc:
        raise CodecError("compress", str(exc)) from exc


def decompress(data: bytes) -> bytes:
    """Snappy block-decompress a request or response body."""
    try:
        return snappy.uncompress(data)
    except Exception as exc:
        raise CodecError("decompress", str(exc)) from exc


def encode_read_request(request: ReadRequest) -> bytes:
    return compress(marshal_read_request(request))


def decode_read_request(body: bytes) -> ReadRequest:
    """Decompress then deserialize an inbound read request body."""
    request = unmarshal_read_request(decompress(body))
    logger.debug(
        f"Decoded read request: {len(request.queries)} queries, "
        f"accepted response types {list(request.accepted_response_types)}"
    )
    return request


def encode_read_response(response: ReadResponse) -> bytes:
    """Serialize then compress an outbound read response."""
    return compress(marshal_read_response(response))


def decode_read_response(body: bytes) -> ReadResponse:
    return unmarshal_read_response(decompress(body))
