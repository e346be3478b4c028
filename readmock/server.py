"""HTTP server exposing the remote-read double via FastAPI and uvicorn."""
from typing import Iterable, List, Optional, Tuple
from fastapi import FastAPI, HTTPException, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST
import logging
import socket
import threading
import time

from readmock.config import Config
from readmock.errors import RemoteReadError
from readmock.handler import QueryHandler
from readmock.self_metrics import SelfMetrics
from readmock.series import Series

logger = logging.getLogger(__name__)

# Every method is routed so that a non-POST read is reported as a violation, not a 405.
READ_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_app(server: "RemoteReadServer") -> FastAPI:
    """Build the FastAPI app serving the read endpoint and introspection routes."""
    app = FastAPI(title="Remote Read Test Double")
    read_path = server.config.server.read_path

    @app.api_route(read_path, methods=READ_METHODS)
    async def read(request: Request):
        """Serve one remote-read exchange."""
        started = time.perf_counter()
        server.self_metrics.record_request()
        try:
            # Headers are checked before the body is consumed
            server.handler.validate(request.method, request.headers)
            body = await request.body()
            reply = server.handler.process(body)
            returned = [ts for ts in reply.response.results[0].timeseries if not ts.is_empty]
        except Exception as e:
            server.record_failure(e)
            raise HTTPException(status_code=500, detail=str(e))

        samples = sum(len(ts.samples) for ts in returned)
        server.self_metrics.record_result(len(returned), samples, time.perf_counter() - started)
        logger.debug(f"Read served: {len(returned)} non-empty series, {samples} samples")

        return Response(content=reply.body, headers=reply.headers)

    @app.get("/healthz")
    async def healthz():
        """Health check endpoint."""
        return {"status": "healthy", "timestamp": time.time()}

    @app.get("/status")
    async def status():
        """Dataset and exchange counters."""
        return {
            "series": server.series_count(),
            "samples": server.sample_count(),
            "requests": server.self_metrics.requests_served(),
            "failures": len(server.failures),
            "read_path": read_path,
        }

    @app.get("/metrics")
    async def metrics():
        return Response(content=server.self_metrics.render(), media_type=CONTENT_TYPE_LATEST)

    return app


class RemoteReadServer:
    """Remote-read storage double bound to an ephemeral HTTP port.

    Fatal protocol violations are logged, answered with a 500 and kept in
    ``failures``; ``raise_for_failures`` re-raises the first one in the
    calling test. Leaving a ``with`` block does this automatically.
    """

    def __init__(self, series: Iterable[Series], config: Optional[Config] = None):
        self.config = config or Config()
        self.handler = QueryHandler(series, self.config.protocol)
        self.self_metrics = SelfMetrics()
        self.failures: List[Exception] = []
        self.app = create_app(self)

        self._uvicorn = None
        self._thread: Optional[threading.Thread] = None
        self._socket: Optional[socket.socket] = None
        self._address: Optional[Tuple[str, int]] = None

    def series_count(self) -> int:
        """Number of stored series."""
        # Stored series are immutable, so no read lock is needed.
        return self.handler.series_count()

    def sample_count(self) -> int:
        """Total number of samples across all stored series."""
        return self.handler.sample_count()

    @property
    def base_url(self) -> str:
        if self._address is None:
            raise RuntimeError("Remote read server is not running")
        host, port = self._address
        return f"http://{host}:{port}"

    @property
    def read_url(self) -> str:
        return f"{self.base_url}{self.config.server.read_path}"

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def record_failure(self, error: Exception):
        """Keep a fatal violation, or any unexpected handler error, for the hosting test to re-raise."""
        if isinstance(error, RemoteReadError):
            kind = error.kind
            logger.error(f"Remote read exchange failed ({kind}): {error}")
        else:
            kind = "internal"
            logger.error(f"Remote read exchange crashed: {error!r}", exc_info=error)
        self.failures.append(error)
        self.self_metrics.record_failure(kind)

    def raise_for_failures(self):
        """Re-raise the first fatal violation seen by the server, if any."""
        if self.failures:
            raise self.failures[0]

    def start(self) -> str:
        """Bind and serve in a background thread; returns the base URL."""
        import uvicorn

        if self._thread is not None:
            raise RuntimeError("Remote read server already started")

        server_config = self.config.server
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((server_config.host, server_config.port))
        except OSError:
            sock.close()
            raise
        self._socket = sock
        self._address = sock.getsockname()[:2]

        uvicorn_config = uvicorn.Config(
            self.app,
            log_level=self.config.global_.log_level.lower(),
            log_config=None,
            access_log=False,
            lifespan="off",
        )
        self._uvicorn = uvicorn.Server(uvicorn_config)
        self._thread = threading.Thread(
            target=self._uvicorn.run,
            kwargs={"sockets": [sock]},
            name="readmock-server",
            daemon=True
        )
        self._thread.start()

        deadline = time.monotonic() + server_config.startup_timeout_s
        while not self._uvicorn.started:
            if not self._thread.is_alive() or time.monotonic() > deadline:
                self.stop()
                raise RuntimeError("Remote read server failed to start")
            time.sleep(0.01)

        logger.info(
            f"Remote read server listening on {self.read_url} "
            f"({self.series_count()} series, {self.sample_count()} samples)"
        )
        return self.base_url

    def stop(self):
        """Shut the listener down and release its socket."""
        if self._uvicorn is not None:
            self._uvicorn.should_exit = True
        if self._thread is not None:
            self._thread.join(timeout=self.config.server.startup_timeout_s)
        if self._socket is not None:
            self._socket.close()
            logger.info("Remote read server stopped")

        self._uvicorn = None
        self._thread = None
        self._socket = None
        self._address = None

    def close(self):
        self.stop()

    def serve_forever(self):
        """Block until the server thread exits."""
        if self._thread is None:
            self.start()
        thread = self._thread
        while thread.is_alive():
            thread.join(timeout=0.5)

    def __enter__(self) -> "RemoteReadServer":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        if exc_type is None:
            self.raise_for_failures()


def create_remote_read_server(
    series: Iterable[Series],
    config: Optional[Config] = None,
) -> Tuple[RemoteReadServer, str]:
    """Start a server over ``series``; the caller must ``close()`` it."""
    server = RemoteReadServer(series, config)
    url = server.start()
    return server, url
