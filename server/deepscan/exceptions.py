"""
Custom exceptions for the Deep Scan engine.

Provides a hierarchy of exceptions for consistent error handling
throughout the scanner and its API.
"""

from typing import Optional


class DeepScanError(Exception):
    """Base exception for all Deep Scan errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


# Scan exceptions
class ScanError(DeepScanError):
    """Base exception for scan execution errors."""
    pass


class BrowserLaunchError(ScanError):
    """Raised when the browser session cannot be acquired. Fatal to the scan."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Failed to launch browser session: {reason}", {"reason": reason})


class NavigationError(ScanError):
    """Raised when a page cannot be loaded."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Navigation failed for {url}: {reason}", {"url": url, "reason": reason})


class AuditError(ScanError):
    """Raised when an accessibility audit of one page state fails."""

    def __init__(self, reason: str, url: Optional[str] = None):
        self.url = url
        self.reason = reason
        where = f" for {url}" if url else ""
        super().__init__(f"Audit failed{where}: {reason}", {"url": url, "reason": reason})


class AuditInjectionError(AuditError):
    """Raised when the audit script cannot be injected into the page."""
    pass


# Profile exceptions
class ProfileError(DeepScanError):
    """Base exception for scan profile errors."""
    pass


class UnknownProfileError(ProfileError):
    """Raised when a profile name does not resolve to a budget."""

    def __init__(self, profile: str, valid_profiles: list[str]):
        self.profile = profile
        self.valid_profiles = valid_profiles
        super().__init__(
            f"Unknown scan profile '{profile}'. Valid profiles: {valid_profiles}",
            {"profile": profile, "valid_profiles": valid_profiles},
        )


class ProfileAccessError(ProfileError):
    """Raised when a user tier is not allowed to run a profile."""

    def __init__(self, profile: str, user_tier: str):
        self.profile = profile
        self.user_tier = user_tier
        super().__init__(
            f"{profile} profile requires Enterprise tier",
            {"profile": profile, "user_tier": user_tier},
        )


# Job-related exceptions
class JobError(DeepScanError):
    """Base exception for scan job errors."""
    pass


class JobNotFoundError(JobError):
    """Raised when a requested job does not exist."""

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Job {job_id} not found", {"job_id": job_id})


class JobNotCompletedError(JobError):
    """Raised when trying to access results of an incomplete job."""

    def __init__(self, job_id: str, state: str):
        self.job_id = job_id
        self.state = state
        super().__init__(
            f"Job {job_id} is not completed (current state: {state})",
            {"job_id": job_id, "state": state}
        )


class JobFailedError(JobError):
    """Raised when a job has failed."""

    def __init__(self, job_id: str, error: str):
        self.job_id = job_id
        self.error = error
        super().__init__(f"Job {job_id} failed: {error}", {"job_id": job_id, "error": error})
