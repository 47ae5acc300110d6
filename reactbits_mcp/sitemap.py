"""Discovery of component URLs grouped by category."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence
from urllib.parse import urlparse

import requests

from .config import BASE_URL, CATEGORIES
from .firecrawl import FirecrawlClient

logger = logging.getLogger("reactbits_mcp")

CURATED_LINKS: Sequence[str] = (
    "/components/stepper",
    "/components/counter",
    "/components/dock",
    "/components/carousel",
    "/components/stack",
    "/components/lanyard",
    "/components/folder",
    "/components/masonry",
    "/backgrounds/ballpit",
    "/backgrounds/dither",
    "/backgrounds/balatro",
    "/backgrounds/particles",
    "/backgrounds/aurora",
    "/backgrounds/iridescence",
    "/backgrounds/waves",
    "/backgrounds/hyperspeed",
    "/backgrounds/orb",
    "/backgrounds/lightning",
    "/backgrounds/threads",
    "/backgrounds/squares",
    "/backgrounds/grid-motion",
    "/animations/magnet",
    "/animations/ribbons",
    "/animations/noise",
    "/animations/crosshair",
    "/animations/splash-cursor",
    "/animations/pixel-transition",
    "/animations/animated-content",
)

SiteMap = Dict[str, List[str]]


def category_of(url: str) -> Optional[str]:
    """Category named by the first path segment, if it is a known one with an item after it."""
    segments = [segment for segment in urlparse(url).path.split("/") if segment]
    if len(segments) < 2 or segments[0] not in CATEGORIES:
        return None
    return segments[0]


def partition_urls(urls: Iterable[str]) -> SiteMap:
    """Group URLs by category, keeping input order and dropping exact duplicates."""
    result: SiteMap = {category: [] for category in CATEGORIES}
    seen = set()
    for url in urls:
        if url in seen:
            continue
        category = category_of(url)
        if category is None:
            continue
        seen.add(url)
        result[category].append(url)
    return result


class CuratedSiteMapper:
    """Check the site is reachable, then use the curated list of item paths."""

    def __init__(
        self,
        base_url: str = BASE_URL,
        links: Sequence[str] = CURATED_LINKS,
        session: Optional[requests.Session] = None,
        timeout: float = 15.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.links = links
        self.session = session or requests.Session()
        self.timeout = timeout

    def map(self) -> SiteMap:
        logger.info("Mapping %s site structure...", self.base_url)
        resp = self.session.get(self.base_url + "/", timeout=self.timeout)
        resp.raise_for_status()
        site_map = partition_urls(f"{self.base_url}{link}" for link in self.links)
        logger.info("Found %d total items to scrape", sum(len(v) for v in site_map.values()))
        return site_map


class FirecrawlSiteMapper:
    """Use the Firecrawl map endpoint to discover item URLs."""

    def __init__(self, client: FirecrawlClient, base_url: str = BASE_URL, limit: int = 100) -> None:
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.limit = limit

    def map(self) -> SiteMap:
        logger.info("Mapping %s site structure using Firecrawl...", self.base_url)
        host = urlparse(self.base_url).netloc
        links = self.client.map_site(self.base_url, limit=self.limit)
        site_map = partition_urls(
            link.rstrip("/") for link in links if urlparse(link).netloc == host
        )
        logger.info("Found %d total items to scrape", sum(len(v) for v in site_map.values()))
        return site_map
