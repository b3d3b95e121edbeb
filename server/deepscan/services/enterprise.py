"""
Enterprise site detection.

Flags crawls of enterprise-scale sites from URL discovery and duration.
"""

from ..models.crawl import EnterpriseDetection, EnterpriseReason

URL_THRESHOLD = 150
TIME_THRESHOLD_MIN = 5


def detect_enterprise(
    discovered_urls: int,
    elapsed_minutes: float,
    frontier_growing: bool,
    url_threshold: int = URL_THRESHOLD,
    time_threshold_min: float = TIME_THRESHOLD_MIN,
) -> EnterpriseDetection:
    """
    Detect whether a crawl is looking at an enterprise-scale site.

    Rules, in order:
    - discovered_urls > url_threshold -> 'url_threshold'
    - elapsed_minutes > time_threshold_min and the frontier is still
      growing -> 'time_frontier'

    Args:
        discovered_urls: Distinct URLs discovered so far
        elapsed_minutes: Minutes since the crawl started
        frontier_growing: Whether the last expansion grew the frontier
        url_threshold: URL count threshold
        time_threshold_min: Duration threshold in minutes

    Returns:
        EnterpriseDetection verdict
    """
    if discovered_urls > url_threshold:
        return EnterpriseDetection(is_enterprise=True, reason=EnterpriseReason.URL_THRESHOLD)

    if elapsed_minutes > time_threshold_min and frontier_growing:
        return EnterpriseDetection(is_enterprise=True, reason=EnterpriseReason.TIME_FRONTIER)

    return EnterpriseDetection(is_enterprise=False, reason=None)
