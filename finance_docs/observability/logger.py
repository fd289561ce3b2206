"""
Logger configuration.

Installs a single stdout handler with ISO timestamps on the root logger and
quiets the chattier client libraries used by the ingestion workers.

Dependencies: logging (stdlib)
System role: Centralized logging configuration for API and workers
"""

import logging
import sys

NOISY_LOGGERS = (
    "httpx",
    "httpcore",
    "urllib3",
    "google_genai",
    "pypdf",
    "sqlalchemy.engine",
    "amqp",
)


def configure_logging(level: str | int = logging.INFO) -> None:
    """
    Configure Python logging with ISO timestamp format.

    Safe to call more than once; existing root handlers are replaced.

    Args:
        level: Root log level, as a name ("DEBUG") or a logging constant
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root_logger.setLevel(level)
    root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
