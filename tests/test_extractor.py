"""Tests for the extraction ladder in reactbits_mcp/extractor.py using a fake page."""

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from reactbits_mcp.config import ScrapeConfig
from reactbits_mcp.extractor import (
    BROWSER,
    STRUCTURED,
    ComponentExtractor,
    contains_code,
    looks_like_code_response,
)
from reactbits_mcp.models import ComponentPayload, ExtractionResult

URL = "https://www.reactbits.dev/components/counter"

PAGE_WITH_CODE = "<h2>Counter</h2><p>Rolling digits</p><pre><code>const x = 1;</code></pre>"
PAGE_WITHOUT_CODE = "<h2>Counter</h2><p>Rolling digits</p>"


class FakeResponse:
    def __init__(self, url, content_type, body):
        self.url = url
        self.headers = {"content-type": content_type}
        self.body = body

    async def text(self):
        return self.body


class FakePage:
    """Just enough of playwright's Page for the extractor."""

    def __init__(self, html, responses=(), goto_error=None, has_code_tab=True):
        self.html = html
        self.responses = list(responses)
        self.goto_error = goto_error
        self.has_code_tab = has_code_tab
        self.url = ""
        self.visited = []
        self.waits = []
        self.listeners = {}

    async def goto(self, url, wait_until=None, timeout=None):
        if self.goto_error is not None:
            raise self.goto_error
        self.visited.append(url)
        self.url = url

    async def evaluate(self, script, arg=None):
        if self.has_code_tab:
            for callback in list(self.listeners.get("response", [])):
                for response in self.responses:
                    callback(response)
        return self.has_code_tab

    async def wait_for_timeout(self, timeout):
        self.waits.append(timeout)

    async def content(self):
        return self.html

    def on(self, event, callback):
        self.listeners.setdefault(event, []).append(callback)

    def remove_listener(self, event, callback):
        self.listeners[event].remove(callback)


class FakeFirecrawl:
    def __init__(self, result, enabled=True):
        self.result = result
        self.enabled = enabled
        self.calls = []

    def extract(self, url):
        self.calls.append(url)
        return self.result


class TestHelpers:
    def test_looks_like_code_response(self):
        assert looks_like_code_response("https://x/code/counter.jsx", "application/javascript")
        assert looks_like_code_response("https://x/api/snippet", "application/json")
        assert not looks_like_code_response("https://x/app.css", "text/css")
        assert not looks_like_code_response("https://x/code/logo", "image/png")

    def test_contains_code(self):
        assert contains_code("export default Counter")
        assert not contains_code("<html>hello</html>")


class TestComponentExtractor:
    @pytest.mark.asyncio
    async def test_browser_path_without_firecrawl(self):
        page = FakePage(PAGE_WITH_CODE)
        extraction = await ComponentExtractor(page, ScrapeConfig()).extract(URL, "components")

        assert extraction.method == BROWSER
        assert not extraction.failed
        assert extraction.payload.name == "Counter"
        assert extraction.payload.code == "const x = 1;"
        assert extraction.payload.category == "components"
        assert extraction.payload.scraped_at.endswith("Z")
        assert page.visited == [URL]

    @pytest.mark.asyncio
    async def test_structured_path_skips_browser(self):
        firecrawl = FakeFirecrawl(ExtractionResult.success(ComponentPayload(name="Counter", url=URL)))
        page = FakePage(PAGE_WITH_CODE)
        extraction = await ComponentExtractor(page, ScrapeConfig(), firecrawl).extract(
            URL, "components"
        )

        assert extraction.method == STRUCTURED
        assert extraction.payload.category == "components"
        assert firecrawl.calls == [URL]
        assert page.visited == []

    @pytest.mark.asyncio
    async def test_unusable_structured_result_falls_back(self):
        firecrawl = FakeFirecrawl(ExtractionResult.success(ComponentPayload(name="  ")))
        page = FakePage(PAGE_WITH_CODE)
        extraction = await ComponentExtractor(page, ScrapeConfig(), firecrawl).extract(
            URL, "components"
        )
        assert extraction.method == BROWSER
        assert extraction.payload.name == "Counter"

    @pytest.mark.asyncio
    async def test_structured_disabled_by_config(self):
        firecrawl = FakeFirecrawl(ExtractionResult.success(ComponentPayload(name="Counter")))
        config = ScrapeConfig(use_structured=False)
        extraction = await ComponentExtractor(FakePage(PAGE_WITH_CODE), config, firecrawl).extract(
            URL, "components"
        )
        assert extraction.method == BROWSER
        assert firecrawl.calls == []

    @pytest.mark.asyncio
    async def test_disabled_client_is_not_called(self):
        firecrawl = FakeFirecrawl(ExtractionResult.failed("no key"), enabled=False)
        extractor = ComponentExtractor(FakePage(PAGE_WITH_CODE), ScrapeConfig(), firecrawl)
        assert not extractor.structured_enabled
        await extractor.extract(URL, "components")
        assert firecrawl.calls == []

    @pytest.mark.asyncio
    async def test_navigation_timeout_fails(self):
        page = FakePage(PAGE_WITH_CODE, goto_error=PlaywrightTimeoutError("Timeout 30000ms exceeded"))
        extraction = await ComponentExtractor(page, ScrapeConfig()).extract(URL, "components")

        assert extraction.failed
        assert extraction.method is None
        assert extraction.payload.name == "Error: counter"
        assert extraction.payload.description.startswith("Failed to scrape:")

    @pytest.mark.asyncio
    async def test_intercepts_code_from_network(self):
        responses = [
            FakeResponse("https://x/assets/app.css", "text/css", "body { }"),
            FakeResponse(
                "https://x/code/counter.jsx",
                "application/javascript",
                "1 import React from 'react';\n2 export default function Counter() {}",
            ),
            FakeResponse(
                "https://x/code/other.jsx", "application/javascript", "export const other = 1;"
            ),
        ]
        page = FakePage(PAGE_WITHOUT_CODE, responses=responses)
        extraction = await ComponentExtractor(page, ScrapeConfig()).extract(URL, "components")

        assert extraction.payload.code == (
            "import React from 'react';\nexport default function Counter() {}"
        )
        assert page.listeners["response"] == []

    @pytest.mark.asyncio
    async def test_no_code_anywhere(self):
        page = FakePage(PAGE_WITHOUT_CODE, has_code_tab=False)
        extraction = await ComponentExtractor(page, ScrapeConfig()).extract(URL, "components")
        assert not extraction.failed
        assert extraction.payload.code == ""
