"""Main entry point for the remote-read test double."""
import argparse
import json
import logging
import signal
import sys

from pythonjsonlogger.json import JsonFormatter

from readmock.client import RemoteReadClient
from readmock.config import Config, load_config, load_dataset
from readmock.server import RemoteReadServer


LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def build_formatter(log_format: str = "text") -> logging.Formatter:
    """Formatter for the configured log format."""
    if log_format == "json":
        return JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={"asctime": "time", "levelname": "level", "name": "logger"},
            datefmt=DATE_FORMAT,
        )
    return logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)


def setup_logging(log_level: str, log_format: str = "text"):
    """Setup logging configuration."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    handler = logging.StreamHandler()
    handler.setFormatter(build_formatter(log_format))
    logging.basicConfig(level=level, handlers=[handler])

    # Reduce noise from some libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def _parse_selector(text: str):
    name, sep, pattern = text.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected name=regex, got {text!r}")
    return name, pattern


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Remote Read Test Double - serve a fixed dataset over the remote-read protocol"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Serve a dataset until interrupted")
    serve.add_argument("--config", "-c", help="Path to configuration YAML file")
    serve.add_argument("--dataset", "-d", help="Path to a YAML file whose series replace the configured ones")
    serve.add_argument("--port", "-p", type=int, help="Port to bind (0 for ephemeral)")

    query = subparsers.add_parser("query", help="Issue one read against a running server")
    query.add_argument("--url", required=True, help="Read endpoint URL")
    query.add_argument("--match", "-m", action="append", type=_parse_selector, default=[],
                       help="Regex matcher as name=regex (repeatable)")
    query.add_argument("--start", type=int, required=True, help="Start timestamp in ms (inclusive)")
    query.add_argument("--end", type=int, required=True, help="End timestamp in ms (exclusive)")
    query.add_argument("--log-level", default="WARNING")

    return parser


def run_serve(args) -> int:
    """Run the server in the foreground until SIGINT/SIGTERM."""
    try:
        config = load_config(args.config) if args.config else Config()
        series = load_dataset(args.dataset) if args.dataset else config.dataset()
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return 1

    if args.port is not None:
        config.server.port = args.port

    setup_logging(config.global_.log_level, config.global_.log_format)
    logger = logging.getLogger(__name__)

    logger.info("=" * 60)
    logger.info("Remote Read Test Double")
    logger.info("=" * 60)
    if args.config:
        logger.info(f"Configuration loaded from: {args.config}")
    logger.info(f"Series loaded: {len(series)}")

    server = RemoteReadServer(series, config)

    def signal_handler(signum, frame):
        logger.info(f"Received signal {signum}, shutting down...")
        server.stop()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        server.start()
        print(server.read_url, flush=True)
        server.serve_forever()
    except Exception as e:
        logger.error(f"Server error: {e}", exc_info=True)
        server.stop()
        return 1

    return 1 if server.failures else 0


def run_query(args) -> int:
    """Issue one read and print the first result as JSON."""
    setup_logging(args.log_level)
    client = RemoteReadClient(args.url)
    try:
        response = client.query(args.start, args.end, dict(args.match))
    finally:
        client.close()

    output = []
    if response.results:
        for ts in response.results[0].timeseries:
            output.append({
                "labels": dict(ts.labels),
                "samples": [[s.timestamp, s.value] for s in ts.samples],
            })
    print(json.dumps(output, indent=2))
    return 0


def main(argv=None):
    """Main function."""
    args = build_parser().parse_args(argv)
    if args.command == "serve":
        return run_serve(args)
    return run_query(args)


if __name__ == "__main__":
    sys.exit(main())
