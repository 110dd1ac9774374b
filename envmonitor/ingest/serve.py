"""
Ingest Server - CLI Entry Point
Receives sensor readings over TCP, keeps a queryable history and persists it
"""

import argparse
import logging
import os
import sys
import time

import structlog

from envmonitor.anomaly.detector import find_anomalies
from envmonitor.core.logger import resolve_level, setup_logging
from envmonitor.core.models import Thresholds
from envmonitor.ingest.models import ServerConfig
from envmonitor.ingest.server import IngestServer
from envmonitor.storage.persistence import ReadingPersistence
from envmonitor.storage.store import ReadingStore

logger = structlog.get_logger(__name__)


def parse_arguments(argv=None):
    """Parse command-line arguments"""
    parser = argparse.ArgumentParser(
        description="Ingest server for environmental sensor readings",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
        Examples:
        # Basic usage with defaults
        python -m envmonitor.ingest.serve

        # Custom port and storage files, reload previous history
        python -m envmonitor.ingest.serve --port 9000 --data-file data.bin --load-history

        # Stricter temperature range, run for 10 minutes
        python -m envmonitor.ingest.serve --min-temp 18 --max-temp 26 --duration 600
        """,
    )

    # Network settings
    parser.add_argument(
        "--host",
        default=os.getenv("ENVMONITOR_HOST", "0.0.0.0"),
        help="Interface to bind (default: 0.0.0.0 or ENVMONITOR_HOST env var)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("ENVMONITOR_PORT", "8080")),
        help="TCP port (default: 8080 or ENVMONITOR_PORT env var)",
    )
    parser.add_argument(
        "--max-workers",
        type=int,
        default=16,
        help="Maximum concurrently served connections (default: 16)",
    )

    # Storage settings
    parser.add_argument(
        "--data-file",
        default=os.getenv("ENVMONITOR_DATA_FILE", "sensor_data.bin"),
        help="Binary data file (default: sensor_data.bin or ENVMONITOR_DATA_FILE env var)",
    )
    parser.add_argument(
        "--report-file",
        default=os.getenv("ENVMONITOR_REPORT_FILE", "anomalies.json"),
        help="JSON anomaly report (default: anomalies.json or ENVMONITOR_REPORT_FILE env var)",
    )
    parser.add_argument(
        "--load-history",
        action="store_true",
        help="Load previously persisted readings into the history at startup",
    )

    # Thresholds
    defaults = Thresholds()
    parser.add_argument("--min-temp", type=float, default=defaults.min_temp)
    parser.add_argument("--max-temp", type=float, default=defaults.max_temp)
    parser.add_argument("--min-humidity", type=float, default=defaults.min_humidity)
    parser.add_argument("--max-humidity", type=float, default=defaults.max_humidity)
    parser.add_argument("--min-light", type=float, default=defaults.min_light)
    parser.add_argument("--max-light", type=float, default=defaults.max_light)

    # Runtime settings
    parser.add_argument(
        "--duration",
        type=int,
        help="Duration to run in seconds (default: infinite)",
    )

    # Logging
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=os.getenv("LOG_LEVEL", "INFO"),
        help="Logging level (default: INFO or LOG_LEVEL env var)",
    )

    return parser.parse_args(argv)


def build_config_from_args(args) -> ServerConfig:
    """Build a ServerConfig from command-line arguments"""
    config = ServerConfig(
        host=args.host,
        port=args.port,
        max_workers=args.max_workers,
        data_file=args.data_file,
        report_file=args.report_file,
        thresholds=Thresholds(
            min_temp=args.min_temp,
            max_temp=args.max_temp,
            min_humidity=args.min_humidity,
            max_humidity=args.max_humidity,
            min_light=args.min_light,
            max_light=args.max_light,
        ),
    )

    logger.info("Configuration built from arguments", config=config)
    return config


def serve(config: ServerConfig, load_history: bool = False, duration_seconds: int | None = None) -> int:
    """Run the server until interrupted, then export the anomaly report"""
    store = ReadingStore(config.thresholds)
    persistence = ReadingPersistence(config.data_file, config.report_file)

    if load_history:
        store.load_from(persistence)

    server = IngestServer(config, store=store, persistence=persistence)
    if not server.start():
        return 1

    start_time = time.time()
    try:
        while duration_seconds is None or time.time() - start_time < duration_seconds:
            time.sleep(1)
        logger.info("Duration limit reached", duration_seconds=duration_seconds)
    except KeyboardInterrupt:
        logger.info("Received interrupt signal, stopping server")
    finally:
        server.stop()

        anomalies = find_anomalies(store.all_readings(), config.thresholds)
        persistence.export_anomalies(anomalies)
        logger.info("History summary", total=store.count(), anomalies=len(anomalies))

    return 0


def main(argv=None):
    """Main entry point"""
    args = parse_arguments(argv)

    log_level = resolve_level(args.log_level, default=logging.INFO)
    setup_logging(level=log_level)

    logger.info("Starting Ingest Server")

    try:
        config = build_config_from_args(args)
        return serve(config, load_history=args.load_history, duration_seconds=args.duration)

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 0

    except Exception as e:
        logger.error("Server failed", error=str(e), exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
