"""Minimal remote-read client for driving the double."""
from typing import Dict, Iterable, Optional, Sequence, Tuple
import logging

import requests

from readmock.config import ProtocolConfig
from readmock.errors import HeaderValidationError
from readmock.headers import request_headers
from readmock.wire import (
    LabelMatcher,
    MatcherType,
    Query,
    ReadRequest,
    ReadResponse,
    ResponseType,
    decode_read_response,
    encode_read_request,
)

logger = logging.getLogger(__name__)


def regex_matchers(selectors: Dict[str, str]) -> Tuple[LabelMatcher, ...]:
    """Build regex matchers from a ``{label: pattern}`` mapping."""
    return tuple(LabelMatcher(name=name, pattern=pattern, kind=MatcherType.RE) for name, pattern in selectors.items())


def build_read_request(queries: Iterable[Query]) -> ReadRequest:
    return ReadRequest(queries=tuple(queries), accepted_response_types=(ResponseType.SAMPLES,))


class RemoteReadClient:
    """Sends conformant remote-read requests and decodes the responses."""

    def __init__(
        self,
        url: str,
        protocol: Optional[ProtocolConfig] = None,
        version: str = "0.1.0",
        timeout: float = 5.0,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.protocol = protocol or ProtocolConfig()
        self.version = version
        self.timeout = timeout
        self.session = session or requests.Session()

    def read_raw(self, request: ReadRequest, headers: Optional[Dict[str, str]] = None) -> requests.Response:
        """POST an encoded request; ``headers`` replaces the default protocol headers."""
        if headers is None:
            headers = request_headers(self.protocol, self.version)
        return self.session.post(self.url, data=encode_read_request(request), headers=headers, timeout=self.timeout)

    def read(self, queries: Sequence[Query]) -> ReadResponse:
        """Run the queries and return the decoded response."""
        response = self.read_raw(build_read_request(queries))
        response.raise_for_status()

        for name, expected in (
            ("Content-Type", self.protocol.content_type),
            ("Content-Encoding", self.protocol.compression),
        ):
            if response.headers.get(name) != expected:
                raise HeaderValidationError(name, f"response {name} {response.headers.get(name)!r}, expected {expected!r}")

        # requests would transparently decode a known Content-Encoding; snappy is not one of them
        decoded = decode_read_response(response.content)
        logger.debug(f"Read {len(decoded.results)} results from {self.url}")
        return decoded

    def query(self, start: int, end: int, selectors: Dict[str, str]) -> ReadResponse:
        """Convenience wrapper for a single regex query."""
        return self.read([Query(start_timestamp_ms=start, end_timestamp_ms=end, matchers=regex_matchers(selectors))])

    def close(self):
        self.session.close()
