"""Layered extraction of one component page.

Stage 1 asks the structured-extraction service for the component. When that
does not yield a usable payload the page is rendered in the shared headless
browser page and parsed with DOM heuristics; if no code block is visible the
network responses triggered by the code tab are scanned for source text.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, Response
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .cleaner import clean_code_text
from .config import ScrapeConfig
from .content import parse_component_html
from .firecrawl import FirecrawlClient
from .images import capture_preview
from .models import ComponentPayload
from .utils import utc_timestamp

logger = logging.getLogger("reactbits_mcp")

STRUCTURED = "structured"
BROWSER = "browser"

CODE_KEYWORDS = ("import", "function", "export", "const")
CODE_URL_MARKERS = ("code", "snippet", ".jsx", ".tsx")
CODE_CONTENT_TYPES = ("json", "javascript", "text")

_CLICK_CODE_TAB_JS = """
() => {
  const tab = Array.from(document.querySelectorAll('button, a'))
    .find(el => (el.innerText || '').toLowerCase().includes('code'));
  if (tab) {
    tab.click();
    return true;
  }
  return false;
}
"""


def looks_like_code_response(url: str, content_type: str) -> bool:
    """True for responses whose URL and content type suggest source code."""
    content_type = (content_type or "").lower()
    return any(marker in url for marker in CODE_URL_MARKERS) and any(
        kind in content_type for kind in CODE_CONTENT_TYPES
    )


def contains_code(text: str) -> bool:
    return any(keyword in text for keyword in CODE_KEYWORDS)


@dataclass
class Extraction:
    """Payload plus the ladder stage that produced it (``None`` on failure)."""

    payload: ComponentPayload
    method: Optional[str]

    @property
    def failed(self) -> bool:
        return self.payload.error


class ComponentExtractor:
    """Runs the extraction ladder against one reused browser page."""

    def __init__(
        self,
        page: Page,
        config: ScrapeConfig,
        firecrawl: Optional[FirecrawlClient] = None,
    ) -> None:
        self.page = page
        self.config = config
        self.firecrawl = firecrawl

    @property
    def structured_enabled(self) -> bool:
        return bool(self.config.use_structured and self.firecrawl and self.firecrawl.enabled)

    async def extract(self, url: str, category: str) -> Extraction:
        if self.structured_enabled:
            logger.info("Attempting structured extraction for %s", url)
            result = await asyncio.to_thread(self.firecrawl.extract, url)
            if result.usable:
                logger.info("Extracted %s with structured extraction", url)
                return Extraction(self._stamp(result.payload, category), STRUCTURED)
            logger.info(
                "Structured extraction unusable for %s (%s); falling back to browser",
                url,
                result.error or "missing name",
            )

        payload = await self.extract_with_browser(url)
        if payload.error:
            return Extraction(payload, None)
        return Extraction(self._stamp(payload, category), BROWSER)

    async def capture_preview(self, url: str, output_path: Path) -> Optional[Path]:
        return await capture_preview(self.page, url, output_path, self.config)

    @staticmethod
    def _stamp(payload: ComponentPayload, category: str) -> ComponentPayload:
        payload.category = category
        payload.scraped_at = utc_timestamp()
        return payload

    async def _click_code_tab(self) -> bool:
        return bool(await self.page.evaluate(_CLICK_CODE_TAB_JS))

    async def extract_with_browser(self, url: str) -> ComponentPayload:
        """Render the page and read it with DOM heuristics."""
        logger.info("Scraping %s with the browser", url)
        try:
            await self.page.goto(
                url,
                wait_until="networkidle",
                timeout=self.config.navigation_timeout * 1000,
            )
            if await self._click_code_tab():
                logger.debug("Code tab found on %s, waiting for it to render", url)
                await self.page.wait_for_timeout(self.config.code_settle * 1000)
            html = await self.page.content()
            payload = parse_component_html(html, self.page.url or url)
        except PlaywrightTimeoutError as exc:
            logger.error("Timeout while loading %s: %s", url, exc)
            return ComponentPayload.failure(url, str(exc))
        except PlaywrightError as exc:
            logger.error("Error scraping %s: %s", url, exc)
            return ComponentPayload.failure(url, str(exc))

        if not payload.code:
            logger.info("No visible code on %s, watching network responses", url)
            payload.code = await self.intercept_code()
        return payload

    async def intercept_code(self) -> str:
        """Re-trigger the code tab and scan the responses it causes for source text."""
        captured: List[Response] = []

        def _on_response(response: Response) -> None:
            captured.append(response)

        self.page.on("response", _on_response)
        try:
            await self._click_code_tab()
            await self.page.wait_for_timeout(self.config.intercept_settle * 1000)
        except PlaywrightError as exc:
            logger.error("Error in advanced code extraction: %s", exc)
            return ""
        finally:
            self.page.remove_listener("response", _on_response)

        for response in captured:
            if not looks_like_code_response(
                response.url, response.headers.get("content-type", "")
            ):
                continue
            try:
                text = await response.text()
            except PlaywrightError as exc:
                logger.debug("Could not read response body of %s: %s", response.url, exc)
                continue
            if contains_code(text):
                return clean_code_text(text)
        return ""
