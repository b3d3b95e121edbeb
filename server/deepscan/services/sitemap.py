"""
Sitemap loading service.

Fetches and parses a site's sitemap.xml so budgeted crawls can seed the
frontier before following links.
"""

import asyncio
import time
from typing import Optional, Union
from urllib.parse import urlparse

import aiohttp
from bs4 import BeautifulSoup

from ..config import SitemapConfig, config
from ..utils.logger import get_sitemap_logger

# Initialize logger
logger = get_sitemap_logger()


def parse_sitemap(content: Union[str, bytes]) -> tuple[list[str], list[str]]:
    """
    Parse sitemap XML.

    Args:
        content: Raw XML of a urlset or sitemapindex document. Bytes are
            decoded by BeautifulSoup, which detects the encoding

    Returns:
        Tuple of (page_urls, child_sitemap_urls), in document order
    """
    soup = BeautifulSoup(content, "xml")

    page_urls: list[str] = []
    for url_tag in soup.find_all("url"):
        loc = url_tag.find("loc")
        if loc and loc.get_text(strip=True):
            page_urls.append(loc.get_text(strip=True))

    child_sitemaps: list[str] = []
    for sitemap_tag in soup.find_all("sitemap"):
        loc = sitemap_tag.find("loc")
        if loc and loc.get_text(strip=True):
            child_sitemaps.append(loc.get_text(strip=True))

    return page_urls, child_sitemaps


class SitemapLoader:
    """
    Async sitemap fetcher.

    Loads ``<origin>/sitemap.xml`` and, for a sitemap index, up to
    MAX_CHILD_SITEMAPS child sitemaps. Any fetch or parse failure yields
    an empty result so the crawl falls back to link discovery.
    """

    def __init__(self, sitemap_config: Optional[SitemapConfig] = None):
        self.sitemap_config = sitemap_config or config.sitemap
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(
                total=self.sitemap_config.REQUEST_TIMEOUT,
                connect=self.sitemap_config.CONNECT_TIMEOUT,
            )
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                headers={"User-Agent": self.sitemap_config.USER_AGENT},
            )
        return self._session

    async def close(self):
        """Close the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def _fetch(self, sitemap_url: str) -> Optional[bytes]:
        start_time = time.perf_counter()
        try:
            session = await self._get_session()
            async with session.get(sitemap_url) as response:
                elapsed_ms = (time.perf_counter() - start_time) * 1000
                if response.status != 200:
                    logger.debug(f"[SITEMAP] No sitemap at {sitemap_url} (status={response.status}) in {elapsed_ms:.1f}ms")
                    return None
                content = await response.read()
                logger.info(f"[SITEMAP] Loaded {sitemap_url} in {elapsed_ms:.1f}ms")
                return content
        except asyncio.TimeoutError:
            logger.warning(f"[SITEMAP] Timeout for {sitemap_url}")
        except aiohttp.ClientError as e:
            logger.debug(f"[SITEMAP] Error for {sitemap_url}: {e}")
        return None

    async def load(self, seed_url: str, limit: Optional[int] = None) -> list[str]:
        """
        Load page URLs from the seed's sitemap.

        Args:
            seed_url: Any URL on the site
            limit: Maximum URLs to return

        Returns:
            Page URLs in sitemap order, without duplicates
        """
        parsed = urlparse(seed_url)
        root_sitemap = f"{parsed.scheme}://{parsed.netloc}/sitemap.xml"

        try:
            content = await self._fetch(root_sitemap)
            if content is None:
                return []

            urls, children = parse_sitemap(content)
            for child_url in children[:self.sitemap_config.MAX_CHILD_SITEMAPS]:
                if limit is not None and len(urls) >= limit:
                    break
                child_content = await self._fetch(child_url)
                if child_content:
                    child_urls, _ = parse_sitemap(child_content)
                    urls.extend(child_urls)
        except Exception as e:
            logger.warning(f"[SITEMAP] Failed to load {root_sitemap}: {e}")
            return []

        unique = list(dict.fromkeys(urls))
        if limit is not None:
            unique = unique[:limit]

        logger.debug(f"[SITEMAP] {len(unique)} URLs from {root_sitemap}")
        return unique
