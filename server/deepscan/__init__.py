"""
DeepScan Server Package

Multi-page, multi-state accessibility scanner.
"""

from .config import config, AppConfig
from .exceptions import (
    DeepScanError,
    ScanError,
    BrowserLaunchError,
    NavigationError,
    AuditError,
    AuditInjectionError,
    ProfileError,
    UnknownProfileError,
    ProfileAccessError,
    JobError,
    JobNotFoundError,
    JobNotCompletedError,
    JobFailedError,
)

__all__ = [
    # Config
    "config",
    "AppConfig",
    # Exceptions
    "DeepScanError",
    "ScanError",
    "BrowserLaunchError",
    "NavigationError",
    "AuditError",
    "AuditInjectionError",
    "ProfileError",
    "UnknownProfileError",
    "ProfileAccessError",
    "JobError",
    "JobNotFoundError",
    "JobNotCompletedError",
    "JobFailedError",
]
