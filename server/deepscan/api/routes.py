from fastapi import APIRouter, HTTPException, BackgroundTasks, Query
from typing import Optional

from ..exceptions import (
    JobFailedError,
    JobNotCompletedError,
    JobNotFoundError,
    ProfileAccessError,
    UnknownProfileError,
)
from ..models.scan import ScanRequest
from ..services.job_manager import scan_job_manager
from ..services.profiles import resolve_budget, resolve_crawl_config
from ..utils.logger import get_api_logger

# Initialize logger
logger = get_api_logger()

router = APIRouter(prefix="/api", tags=["scan"])


@router.post("/scans")
async def start_scan(request: ScanRequest, background_tasks: BackgroundTasks):
    """
    Start a new deep scan job.

    Args:
        request: Scan request with url, optional profile and user tier

    Returns:
        Job ID for tracking progress
    """
    logger.info(f"[API] POST /scans - url={request.url}, profile={request.profile}, tier={request.user_tier.value}")

    try:
        job_id = scan_job_manager.create_job(request)
    except ProfileAccessError as e:
        raise HTTPException(status_code=403, detail=e.message)

    # Start job in background
    background_tasks.add_task(scan_job_manager.start_job, job_id)

    status = scan_job_manager.get_status(job_id)
    logger.info(f"[API] Job created: {job_id}")

    return {
        "job_id": job_id,
        "message": "Scan job started",
        "url": status.url,
        "profile": status.profile,
        "user_tier": status.user_tier.value,
    }


@router.get("/scans")
async def list_scans():
    """
    List all scan jobs.

    Returns:
        List of all jobs with their current status
    """
    jobs = scan_job_manager.list_jobs()
    return {
        "jobs": [
            {
                "job_id": job.job_id,
                "state": job.state.value,
                "url": job.url,
                "profile": job.profile,
                "pages_scanned": job.pages_scanned,
            }
            for job in jobs
        ],
        "total": len(jobs),
    }


@router.get("/scans/{job_id}")
async def get_scan_status(job_id: str):
    """
    Get current status of a scan job.

    Args:
        job_id: Job ID to check
    """
    try:
        status = scan_job_manager.get_status(job_id)
    except JobNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)

    return status.model_dump(mode="json")


@router.get("/scans/{job_id}/result")
async def get_scan_result(job_id: str):
    """
    Get the complete result of a finished scan job.

    Args:
        job_id: Job ID to get results for

    Returns:
        DeepScanResult with pages, states and deduplicated issues
    """
    try:
        result = scan_job_manager.get_result(job_id)
    except JobNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except (JobNotCompletedError, JobFailedError) as e:
        raise HTTPException(status_code=400, detail=e.message)

    return result.model_dump(mode="json")


@router.delete("/scans/{job_id}")
async def delete_scan(job_id: str):
    """
    Delete a scan job.

    Args:
        job_id: Job ID to delete

    Returns:
        Confirmation message
    """
    if scan_job_manager.delete_job(job_id):
        return {"message": f"Job {job_id} deleted"}
    raise HTTPException(status_code=404, detail=f"Job {job_id} not found")


@router.get("/profiles/{profile}/config")
async def get_profile_config(
    profile: str,
    scan_profiles_enabled: Optional[bool] = Query(
        default=None,
        description="Override the scan profiles feature flag",
    ),
):
    """
    Get crawl options for a profile.

    Budgeted profiles include ``budget`` and ``profile``; legacy profiles
    return only maxPages, maxDepth, timeoutMs and sameOriginOnly.
    """
    return resolve_crawl_config(profile, scan_profiles_enabled).to_dict()


@router.get("/profiles/{profile}/budget")
async def get_profile_budget(profile: str):
    """
    Get the crawl budget for QUICK, SMART or DEEP.
    """
    try:
        budget = resolve_budget(profile)
    except UnknownProfileError as e:
        raise HTTPException(status_code=422, detail=e.message)

    return budget.model_dump(mode="json", by_alias=True, exclude_none=True)
