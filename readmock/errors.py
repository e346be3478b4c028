"""Fatal error types raised while serving a remote-read exchange.

Every error here terminates the exchange. Nothing is retried or recovered:
the hosting test is expected to fail as soon as one is raised.
"""


class RemoteReadError(Exception):
    """Base class for all fatal remote-read protocol violations."""

    kind = "protocol"


class HeaderValidationError(RemoteReadError):
    """Request transport metadata does not match the remote-read contract."""

    kind = "headers"

    def __init__(self, header: str, message: str):
        super().__init__(message)
        self.header = header


class CodecError(RemoteReadError):
    """Compression or protobuf (de)serialization failed."""

    kind = "codec"

    def __init__(self, stage: str, message: str):
        super().__init__(f"{stage}: {message}")
        self.stage = stage


class ProtocolShapeError(RemoteReadError):
    """A decoded request is structurally valid but not servable by the double."""

    kind = "shape"


class EmptyQueryError(ProtocolShapeError):
    """The read request carries no queries."""


class UnsupportedMatcherError(ProtocolShapeError):
    """A label matcher uses a kind other than regex match."""


class InvalidMatcherError(ProtocolShapeError):
    """A regex matcher pattern does not compile."""
