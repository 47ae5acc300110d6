"""Preview screenshots of rendered components."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from .config import ScrapeConfig

logger = logging.getLogger("reactbits_mcp")

MIN_PREVIEW_SIDE = 50
PREVIEW_SELECTORS = (
    'div[role="presentation"]',
    ".component-preview",
    ".preview-container",
    "main > div:not(:has(h1, h2, table))",
    "section:first-of-type",
)

_FIND_PREVIEW_JS = """
([selectors, minSide]) => {
  for (const selector of selectors) {
    let element = null;
    try {
      element = document.querySelector(selector);
    } catch (err) {
      continue;
    }
    if (element && element.offsetHeight > minSide && element.offsetWidth > minSide) {
      const rect = element.getBoundingClientRect();
      return { x: rect.x, y: rect.y, width: rect.width, height: rect.height };
    }
  }
  return null;
}
"""


def preview_filename(slug: str) -> str:
    return f"{slug}-preview.png"


async def capture_preview(
    page: Page,
    url: str,
    output_path: Path,
    config: ScrapeConfig,
) -> Optional[Path]:
    """Screenshot the component preview area, or the viewport when none is found.

    The page is only navigated when it is not already showing ``url``.
    """
    try:
        if (page.url or "").rstrip("/") != url.rstrip("/"):
            await page.goto(
                url, wait_until="networkidle", timeout=config.navigation_timeout * 1000
            )
        clip = await page.evaluate(
            _FIND_PREVIEW_JS, [list(PREVIEW_SELECTORS), MIN_PREVIEW_SIDE]
        )
        if clip:
            await page.screenshot(path=str(output_path), clip=clip)
        else:
            logger.debug("No preview element on %s; capturing viewport", url)
            await page.screenshot(path=str(output_path))
    except PlaywrightError as exc:
        logger.warning("Error capturing screenshot of %s: %s", url, exc)
        return None
    return output_path
