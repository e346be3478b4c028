"""Transport header checks for inbound remote-read requests.

Mirrors what a Prometheus remote-read client sends: a snappy-compressed
protobuf body POSTed with a ``X-Prometheus-Remote-Read-Version: 0.1.x`` header.
"""
import logging
from typing import Dict, Mapping, Optional

from readmock.config import ProtocolConfig
from readmock.errors import HeaderValidationError

logger = logging.getLogger(__name__)


def _get(headers: Mapping[str, str], name: str) -> str:
    """Case-insensitive header lookup; missing headers read as empty."""
    value = headers.get(name)
    if value is None:
        lowered = name.lower()
        for key, candidate in headers.items():
            if key.lower() == lowered:
                return candidate
        return ""
    return value


def validate_read_headers(
    method: str,
    headers: Mapping[str, str],
    protocol: Optional[ProtocolConfig] = None,
) -> None:
    """Raise HeaderValidationError unless the request matches the remote-read contract."""
    protocol = protocol or ProtocolConfig()

    if method != "POST":
        raise HeaderValidationError("method", f"HTTP Method {method} instead of POST")

    encoding = _get(headers, "Content-Encoding")
    if protocol.compression not in encoding:
        raise HeaderValidationError(
            "Content-Encoding", f"non-{protocol.compression} compressed data got: {encoding!r}"
        )

    content_type = _get(headers, "Content-Type")
    if content_type != protocol.content_type:
        raise HeaderValidationError(
            "Content-Type", f"non-protobuf data: Content-Type {content_type!r}"
        )

    version = _get(headers, protocol.version_header)
    if not version:
        raise HeaderValidationError(protocol.version_header, f"missing {protocol.version_header}")
    if not version.startswith(protocol.version_prefix):
        raise HeaderValidationError(
            protocol.version_header,
            f"unexpected Remote-Read-Version {version}, expected {protocol.version_prefix}X",
        )

    logger.debug(f"Read headers valid (version {version})")


def response_headers(protocol: Optional[ProtocolConfig] = None) -> Dict[str, str]:
    """Content headers written on every successful read response."""
    protocol = protocol or ProtocolConfig()
    return {
        "Content-Type": protocol.content_type,
        "Content-Encoding": protocol.compression,
    }


def request_headers(protocol: Optional[ProtocolConfig] = None, version: str = "0.1.0") -> Dict[str, str]:
    """Headers a conformant client sends with a read request."""
    protocol = protocol or ProtocolConfig()
    return {
        "Content-Type": protocol.content_type,
        "Content-Encoding": protocol.compression,
        protocol.version_header: version,
    }
