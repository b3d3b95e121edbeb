"""Utility modules for the Deep Scan engine."""

from .logger import (
    setup_logger,
    log_event,
    get_crawler_logger,
    get_states_logger,
    get_scanner_logger,
    get_sitemap_logger,
    get_api_logger,
)

__all__ = [
    "setup_logger",
    "log_event",
    "get_crawler_logger",
    "get_states_logger",
    "get_scanner_logger",
    "get_sitemap_logger",
    "get_api_logger",
]
