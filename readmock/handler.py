"""Remote-read query handling over a fixed, immutable dataset."""
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Tuple

from readmock.config import ProtocolConfig
from readmock.errors import EmptyQueryError
from readmock.filtering import filter_by_time
from readmock.headers import response_headers, validate_read_headers
from readmock.matching import check_matchers, matches
from readmock.series import Series, count_samples
from readmock.wire import (
    QueryResult,
    ReadRequest,
    ReadResponse,
    decode_read_request,
    encode_read_response,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReadExchange:
    """One inbound HTTP request as seen by the handler."""
    method: str
    headers: Dict[str, str]
    body: bytes = b""


@dataclass(frozen=True)
class ReadReply:
    """The HTTP response to write back."""
    body: bytes
    headers: Dict[str, str] = field(default_factory=dict)
    response: Optional[ReadResponse] = None


class QueryHandler:
    """Answers remote-read requests from a snapshot of series.

    The dataset is captured as a tuple at construction and never changes, so
    one handler can serve concurrent requests without locking. Any protocol
    violation raises a RemoteReadError and aborts the exchange.
    """

    def __init__(self, series: Iterable[Series], protocol: Optional[ProtocolConfig] = None):
        self._series: Tuple[Series, ...] = tuple(series)
        self.protocol = protocol or ProtocolConfig()

    @property
    def series(self) -> Tuple[Series, ...]:
        return self._series

    def series_count(self) -> int:
        return len(self._series)

    def sample_count(self) -> int:
        return count_samples(self._series)

    def validate(self, method: str, headers: Dict[str, str]) -> None:
        """Check transport headers; runs before the body is read."""
        validate_read_headers(method, headers, self.protocol)

    def evaluate(self, request: ReadRequest) -> ReadResponse:
        """Answer the first query of a decoded request.

        One result slot is allocated per query but only slot 0 is evaluated;
        the remaining slots stay empty. Every stored series gets a positional
        entry in slot 0, left empty when it is excluded by the matchers or has
        no samples inside the window.
        """
        if not request.queries:
            raise EmptyQueryError("queries num is 0")
        if len(request.queries) > 1:
            logger.debug(f"Read request carries {len(request.queries)} queries, only the first is evaluated")

        query = request.queries[0]
        check_matchers(query.matchers)
        if query.hints is not None:
            logger.debug(f"Ignoring read hints {query.hints}")

        timeseries = []
        for series in self._series:
            result = Series()
            if matches(series, query.matchers):
                samples = filter_by_time(series.samples, query.start_timestamp_ms, query.end_timestamp_ms)
                if samples:
                    result = Series(labels=series.labels, samples=samples)
            timeseries.append(result)

        results = [QueryResult() for _ in request.queries]
        results[0] = QueryResult(timeseries=tuple(timeseries))
        return ReadResponse(results=tuple(results))

    def process(self, body: bytes) -> ReadReply:
        """Decode a request body, evaluate it and encode the response."""
        request = decode_read_request(body)
        response = self.evaluate(request)
        return ReadReply(
            body=encode_read_response(response),
            headers=response_headers(self.protocol),
            response=response,
        )

    def handle(self, exchange: ReadExchange) -> ReadReply:
        """Validate, decode, evaluate and encode one exchange."""
        self.validate(exchange.method, exchange.headers)
        return self.process(exchange.body)
