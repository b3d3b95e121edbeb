import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Generator

from ..models.scan import ScanTiming


@dataclass
class ScanTimer:
    """
    Timing service for one scan.

    Uses time.perf_counter(); all times are stored and reported in
    milliseconds. Categories are 'crawl' (page discovery) and 'scanning'
    (per-page state exploration and audits).
    """

    crawl_ms: float = 0.0
    scanning_ms: float = 0.0
    total_ms: float = 0.0

    _total_start: float = field(default=0.0, repr=False)

    def start_total(self) -> None:
        """Start the total execution timer."""
        self._total_start = time.perf_counter()

    def stop_total(self) -> float:
        """Stop the total execution timer and return elapsed milliseconds."""
        if self._total_start > 0:
            self.total_ms = (time.perf_counter() - self._total_start) * 1000
        return self.total_ms

    @contextmanager
    def track(self, category: str) -> Generator[None, None, None]:
        """
        Context manager for tracking time in a category.

        Usage:
            with timer.track('crawl'):
                pages = await crawler.crawl(url)
        """
        start = time.perf_counter()
        try:
            yield
        finally:
            self._add_time(category, (time.perf_counter() - start) * 1000)

    def _add_time(self, category: str, milliseconds: float) -> None:
        if category == 'crawl':
            self.crawl_ms += milliseconds
        elif category == 'scanning':
            self.scanning_ms += milliseconds
        else:
            raise ValueError(f"Unknown timing category: {category}")

    def to_timing(self) -> ScanTiming:
        """Convert to the ScanTiming model."""
        return ScanTiming(
            crawl_ms=round(self.crawl_ms, 2),
            scanning_ms=round(self.scanning_ms, 2),
            total_ms=round(self.total_ms, 2),
        )
