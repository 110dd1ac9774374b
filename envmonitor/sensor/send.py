"""
Sensor Client - CLI Entry Point
Simulates an environmental sensor sending readings to the ingest server
"""

import argparse
import dataclasses
import logging
import os
import sys

import structlog

from envmonitor.core.logger import resolve_level, setup_logging
from envmonitor.sensor import CHAOS_CONFIG, DEV_CONFIG, NORMAL_CONFIG, ClientConfig, SensorClient

logger = structlog.get_logger(__name__)


# Predefined configurations
CONFIGS = {
    "normal": NORMAL_CONFIG,
    "chaos": CHAOS_CONFIG,
    "dev": DEV_CONFIG,
}


def parse_arguments(argv=None):
    """Parse command-line arguments"""
    parser = argparse.ArgumentParser(
        description="Simulated environmental sensor client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
            Examples:
            # Use predefined normal config
            python -m envmonitor.sensor.send --config normal

            # Chaos config for 60 seconds against a remote server
            python -m envmonitor.sensor.send --config chaos --host 10.0.0.5 --duration 60

            # Custom interval and retry policy
            python -m envmonitor.sensor.send --interval 2 --retries 5 --retry-delay 0.5
        """,
    )

    parser.add_argument(
        "--config", choices=list(CONFIGS.keys()), help="Use a predefined configuration"
    )

    # Server settings
    parser.add_argument(
        "--host",
        default=os.getenv("ENVMONITOR_HOST", "127.0.0.1"),
        help="Server host (default: 127.0.0.1 or ENVMONITOR_HOST env var)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("ENVMONITOR_PORT", "8080")),
        help="Server port (default: 8080 or ENVMONITOR_PORT env var)",
    )

    # Generation and retry settings
    parser.add_argument("--interval", type=float, help="Seconds between readings")
    parser.add_argument("--retries", type=int, help="Connection attempts before giving up")
    parser.add_argument("--retry-delay", type=float, help="Seconds between connection attempts")
    parser.add_argument(
        "--anomaly-prob", type=float, help="Probability of anomaly injection (0.0 to 1.0)"
    )

    # Runtime settings
    parser.add_argument(
        "--duration", type=int, help="Duration to run in seconds (default: infinite)"
    )

    # Logging
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=os.getenv("LOG_LEVEL", "INFO"),
        help="Logging level (default: INFO or LOG_LEVEL env var)",
    )

    return parser.parse_args(argv)


def build_config_from_args(args) -> ClientConfig:
    """Build a ClientConfig from command-line arguments"""

    if args.config:
        preset = CONFIGS[args.config]
        # Copy so CLI overrides never leak into the shared preset
        config = dataclasses.replace(preset, enabled_anomalies=list(preset.enabled_anomalies))
        logger.info("Using predefined configuration", config_name=args.config)
    else:
        config = ClientConfig()
        logger.info("Using default configuration")

    config.host = args.host
    config.port = args.port
    if args.interval:
        config.send_interval_seconds = args.interval
    if args.retries:
        config.max_retries = args.retries
    if args.retry_delay is not None:
        config.retry_delay_seconds = args.retry_delay
    if args.anomaly_prob is not None:
        config.anomaly_probability = args.anomaly_prob

    return config


def main(argv=None):
    """Main entry point"""
    args = parse_arguments(argv)

    log_level = resolve_level(args.log_level, default=logging.INFO)
    setup_logging(level=log_level)

    logger.info("Starting Sensor Client")

    try:
        config = build_config_from_args(args)
        client = SensorClient(config)
        client.run(duration_seconds=args.duration)

        logger.info("Sensor client completed successfully")
        return 0

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 0

    except Exception as e:
        logger.error("Sensor client failed", error=str(e), exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
