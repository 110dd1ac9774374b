import logging
import os

import structlog
from dotenv import load_dotenv

load_dotenv()

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def resolve_level(name: str | None, default: int = logging.DEBUG) -> int:
    """Map a level name such as "info" to its logging constant, falling back to `default`"""
    return LOG_LEVELS.get((name or "").strip().upper(), default)


def setup_logging(level: int | None = logging.INFO) -> None:
    """
    Configure structured logging for the server, the sensor client and the CLIs.

    Args:
        level: The logging level to use. Defaults to INFO.
    """
    logging.basicConfig(level=level, force=True)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
                pad_event=40,  # socket events are short, keep key/values close
            ),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


setup_logging(level=resolve_level(os.getenv("LOG_LEVEL")))
