"""High-level orchestration of a scrape run."""

from __future__ import annotations

import asyncio
import json
import logging
import random
from pathlib import Path
from typing import Awaitable, Callable, Optional

from playwright.async_api import async_playwright

from .cleaner import alternate_extension, determine_file_extension, format_code_with_headers
from .config import CATEGORIES, ScrapeConfig
from .extractor import ComponentExtractor
from .firecrawl import FirecrawlClient
from .images import preview_filename
from .markdown import write_readme
from .models import ComponentPayload, ScrapeStats
from .sitemap import SiteMap
from .utils import slug_from_url, utc_timestamp

logger = logging.getLogger("reactbits_mcp")

Sleeper = Callable[[float], Awaitable[None]]


def write_artifacts(
    payload: ComponentPayload,
    directory: Path,
    slug: str,
    category: str,
) -> Optional[Path]:
    """Write ``<slug>.json`` and the formatted code file; return the code path."""
    json_path = directory / f"{slug}.json"
    json_path.write_text(json.dumps(payload.to_dict(), indent=2), encoding="utf-8")
    logger.info("Saved JSON data to %s", json_path)

    if not payload.code:
        return None

    extension = determine_file_extension(payload.code, category)
    code_path = directory / f"{slug}.{extension}"
    code_path.write_text(
        format_code_with_headers(
            payload.code, payload.name, payload.description, payload.dependencies
        ),
        encoding="utf-8",
    )
    logger.info("Saved formatted code to %s", code_path)

    stale = directory / f"{slug}.{alternate_extension(extension)}"
    if stale.exists():
        stale.unlink()
        logger.info("Removed stale code file %s", stale)
    return code_path


async def _scrape_one(
    url: str,
    category: str,
    slug: str,
    extractor: ComponentExtractor,
    config: ScrapeConfig,
    stats: ScrapeStats,
) -> None:
    extraction = await extractor.extract(url, category)
    if extraction.failed:
        logger.error("All extraction methods failed for %s", url)
        stats.failed += 1
        return
    stats.record_method(extraction.method)

    payload = extraction.payload
    payload.category = category
    payload.scraped_at = payload.scraped_at or utc_timestamp()

    directory = config.category_dir(category)
    preview = await extractor.capture_preview(url, directory / preview_filename(slug))
    if preview is not None:
        payload.preview_image = preview.name

    write_artifacts(payload, directory, slug, category)
    stats.successful += 1


async def scrape_site_map(
    site_map: SiteMap,
    extractor: ComponentExtractor,
    config: ScrapeConfig,
    sleep: Sleeper = asyncio.sleep,
    jitter: Callable[[], float] = random.random,
) -> ScrapeStats:
    """Visit each discovered URL in turn, one at a time."""
    stats = ScrapeStats()
    config.ensure_dirs()

    for category in CATEGORIES:
        urls = site_map.get(category, [])
        total = len(urls) if config.limit is None else min(len(urls), config.limit)
        logger.info("Processing %d of %d %s...", total, len(urls), category)

        for index, url in enumerate(urls[:total], start=1):
            slug = slug_from_url(url)
            json_path = config.category_dir(category) / f"{slug}.json"
            logger.info("[%d/%d] Processing %s/%s", index, total, category, slug)

            if not config.force and json_path.exists():
                logger.info("Skipping %s, already scraped", slug)
                stats.skipped += 1
                continue

            try:
                await _scrape_one(url, category, slug, extractor, config, stats)
            except Exception:  # pylint: disable=broad-except
                logger.exception("Failed to scrape %s", url)
                stats.failed += 1

            delay = config.delay_base + jitter() * config.delay_jitter
            if delay > 0:
                logger.info("Waiting %dms before next request...", round(delay * 1000))
                await sleep(delay)

    return stats


async def run_scraper(
    config: ScrapeConfig,
    mapper,
    firecrawl: Optional[FirecrawlClient] = None,
) -> ScrapeStats:
    """Map the site, then scrape it with a single headless browser page."""
    logger.info("Force rescrape is %s", "enabled" if config.force else "disabled")
    logger.info(
        "Limit set to %s items per category",
        "unlimited" if config.limit is None else config.limit,
    )
    site_map = await asyncio.to_thread(mapper.map)

    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(
            headless=True, args=["--no-sandbox", "--disable-setuid-sandbox"]
        )
        try:
            width, height = config.viewport
            context = await browser.new_context(
                viewport={"width": width, "height": height},
                user_agent=config.user_agent,
            )
            page = await context.new_page()
            page.set_default_navigation_timeout(config.navigation_timeout * 1000)
            extractor = ComponentExtractor(page, config, firecrawl)
            stats = await scrape_site_map(site_map, extractor, config)
        finally:
            await browser.close()

    logger.info("Scraping completed! Results: %s", stats.summary())
    if config.write_readme:
        write_readme(config.output_root)
    return stats
