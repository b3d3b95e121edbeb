"""
Job manager for deep scan jobs.

Handles job creation, profile selection, background execution, status
tracking and result retrieval. Jobs and results live in memory only.
"""

import uuid
import asyncio
from typing import Callable, Optional

from ..config import config
from ..exceptions import JobFailedError, JobNotCompletedError, JobNotFoundError
from ..models.profiles import ScanProfile, UserTier
from ..models.scan import DeepScanResult, ScanRequest, ScanState, ScanStatus
from ..utils.logger import get_scanner_logger
from .orchestrator import ScanOrchestrator
from .profiles import select_scan_profile
from .sitemap import SitemapLoader

# Initialize logger
logger = get_scanner_logger()


def choose_profile(
    requested: Optional[str],
    user_tier: UserTier,
    sitemap_url_count: Optional[int] = None,
) -> str:
    """
    Decide which profile a job runs with.

    An omitted profile is selected from the user tier and sitemap size. A
    budgeted name is checked against the tier; any other name is passed
    through to the resolver unchanged.

    Raises:
        ProfileAccessError: If the tier may not run the requested profile
    """
    if requested is None:
        return select_scan_profile(user_tier, sitemap_url_count).value

    try:
        budgeted = ScanProfile(requested)
    except ValueError:
        return requested

    return select_scan_profile(user_tier, sitemap_url_count, user_override=budgeted).value


def should_show_enterprise_gate(result: DeepScanResult) -> bool:
    """Whether to prompt for the Enterprise tier after a scan."""
    if not (config.features.enterprise_gating and config.features.scan_profiles):
        return False
    enterprise = result.coverage.enterprise if result.coverage else None
    return bool(enterprise and enterprise.is_enterprise)


def default_orchestrator() -> ScanOrchestrator:
    """Orchestrator with sitemap seeding for budgeted profiles."""
    return ScanOrchestrator(sitemap_loader=SitemapLoader())


class ScanJobManager:
    """
    Manages scan jobs with in-memory storage.

    Features:
    - Job creation with tier-aware profile selection
    - Background execution through ScanOrchestrator
    - Status tracking and result retrieval
    """

    def __init__(self, orchestrator_factory: Callable[[], ScanOrchestrator] = default_orchestrator):
        """
        Initialize the job manager.

        Args:
            orchestrator_factory: Builds the orchestrator for each job
        """
        self.orchestrator_factory = orchestrator_factory
        self._jobs: dict[str, ScanStatus] = {}
        self._results: dict[str, DeepScanResult] = {}
        self._tasks: dict[str, asyncio.Task] = {}

    def create_job(self, request: ScanRequest) -> str:
        """
        Create a new scan job.

        Args:
            request: Scan request parameters

        Returns:
            Unique job ID

        Raises:
            ProfileAccessError: If the tier may not run the requested profile
        """
        profile = choose_profile(request.profile, request.user_tier, request.sitemap_url_count)
        job_id = str(uuid.uuid4())[:8]

        self._jobs[job_id] = ScanStatus(
            job_id=job_id,
            state=ScanState.PENDING,
            url=str(request.url),
            profile=profile,
            user_tier=request.user_tier,
        )
        logger.info(f"[JOB] Created job {job_id}: {request.url} (profile={profile}, tier={request.user_tier.value})")
        return job_id

    def get_status(self, job_id: str) -> ScanStatus:
        """
        Get current status of a job.

        Raises:
            JobNotFoundError: If the job does not exist
        """
        status = self._jobs.get(job_id)
        if status is None:
            raise JobNotFoundError(job_id)
        return status

    def get_result(self, job_id: str) -> DeepScanResult:
        """
        Get the result of a finished job.

        Raises:
            JobNotFoundError: If the job does not exist
            JobFailedError: If the scan failed
            JobNotCompletedError: If the scan has not finished
        """
        status = self.get_status(job_id)
        if status.state == ScanState.FAILED:
            raise JobFailedError(job_id, status.error or "unknown error")
        if status.state != ScanState.COMPLETED:
            raise JobNotCompletedError(job_id, status.state.value)
        return self._results[job_id]

    async def start_job(self, job_id: str) -> None:
        """
        Start executing a scan job.

        Args:
            job_id: Job ID to start
        """
        self.get_status(job_id)

        # Create async task for the job
        task = asyncio.create_task(self.run_job(job_id))
        self._tasks[job_id] = task

    async def run_job(self, job_id: str) -> None:
        """
        Execute the scan for a job and record its outcome.

        Args:
            job_id: Job ID to execute
        """
        status = self.get_status(job_id)

        try:
            status.state = ScanState.RUNNING
            logger.info(f"[JOB] Starting job {job_id}: {status.url}")

            orchestrator = self.orchestrator_factory()
            result = await orchestrator.scan(status.url, status.profile)

            self._results[job_id] = result
            status.pages_scanned = result.pages_scanned
            status.total_issues = result.total_issues
            status.show_enterprise_gate = should_show_enterprise_gate(result)
            status.state = ScanState.COMPLETED

            logger.info(
                f"[JOB] Completed job {job_id}: {result.pages_scanned} pages, "
                f"{result.total_issues} issues in {result.time_to_scan:.2f}s"
            )

        except Exception as e:
            status.state = ScanState.FAILED
            status.error = str(e)
            logger.error(f"[JOB] Failed job {job_id}: {e}")

    def list_jobs(self) -> list[ScanStatus]:
        """List all jobs."""
        return list(self._jobs.values())

    def delete_job(self, job_id: str) -> bool:
        """Delete a job and its results."""
        if job_id in self._jobs:
            del self._jobs[job_id]
            self._results.pop(job_id, None)
            task = self._tasks.pop(job_id, None)
            if task and not task.done():
                task.cancel()
            return True
        return False


# Global job manager instance
scan_job_manager = ScanJobManager()
