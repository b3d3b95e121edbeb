"""
Centralized logging configuration for the Deep Scan engine.

Every component logs under the ``deepscan`` namespace. Set
``DEEPSCAN_LOG_LEVEL`` to override the per-component default level.
"""

import logging
import os
import sys
from typing import Optional

ROOT_LOGGER = "deepscan"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s"


def _resolve_level(default: int) -> int:
    override = os.getenv("DEEPSCAN_LOG_LEVEL")
    if not override:
        return default
    level = logging.getLevelName(override.upper())
    return level if isinstance(level, int) else default


def setup_logger(
    component: Optional[str] = None,
    level: int = logging.INFO,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Return the logger for a scanner component, attaching handlers once.

    Args:
        component: Component name, nested under ``deepscan`` (None for the root)
        level: Default level when DEEPSCAN_LOG_LEVEL is unset
        log_file: Optional file to mirror records to

    Returns:
        Configured logger instance
    """
    name = f"{ROOT_LOGGER}.{component}" if component else ROOT_LOGGER
    logger = logging.getLogger(name)
    level = _resolve_level(level)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    # Handlers live on each component logger
    logger.propagate = False
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def log_event(logger: logging.Logger, event: str, **fields) -> None:
    """
    Emit a phase-boundary event as a single INFO record.

    The fields are rendered as key=value pairs in the message and also
    attached to the record (``record.event``, ``record.fields``) so that
    structured handlers can pick them up.

    Args:
        logger: Logger to emit on
        event: Event name (e.g. 'crawl-start', 'scan-complete')
        **fields: Event payload
    """
    rendered = " ".join(f"{key}={value}" for key, value in fields.items())
    logger.info(
        f"[EVENT] {event} {rendered}".rstrip(),
        extra={"event": event, "fields": fields},
    )


# Pre-configured loggers for different modules
def get_crawler_logger() -> logging.Logger:
    """Logger for the frontier crawler."""
    return setup_logger("crawler", logging.DEBUG)


def get_states_logger() -> logging.Logger:
    """Logger for UI state exploration."""
    return setup_logger("states", logging.DEBUG)


def get_scanner_logger() -> logging.Logger:
    """Logger for the scan orchestrator and job manager."""
    return setup_logger("scanner", logging.INFO)


def get_sitemap_logger() -> logging.Logger:
    """Logger for sitemap loading."""
    return setup_logger("sitemap", logging.DEBUG)


def get_api_logger() -> logging.Logger:
    """Logger for API routes."""
    return setup_logger("api", logging.INFO)
