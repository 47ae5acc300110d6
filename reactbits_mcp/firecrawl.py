"""Client for the Firecrawl structured-extraction and site-mapping endpoints."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Optional

import requests

from .config import FirecrawlConfig
from .models import ComponentPayload, ExtractionResult

logger = logging.getLogger("reactbits_mcp")

COMPONENT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "name": {
            "type": "string",
            "description": "The name of the component, found in h1 or h2",
        },
        "description": {
            "type": "string",
            "description": "Brief description of the component, often found in a paragraph under the heading",
        },
        "code": {
            "type": "string",
            "description": "The code example for the component, found in code blocks",
        },
        "props": {
            "type": "array",
            "description": "List of props from the props table",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "type": {"type": "string"},
                    "defaultValue": {"type": "string"},
                    "description": {"type": "string"},
                },
            },
        },
        "dependencies": {
            "type": "array",
            "description": "List of dependencies required for this component",
            "items": {"type": "string"},
        },
    },
    "required": ["name"],
}

EXTRACT_PROMPT = (
    "Extract detailed information about this React component from the page. "
    "Look for the component name in the heading. "
    "Find any code examples in code blocks or syntax-highlighted areas. "
    "Locate prop information in the props table if it exists. "
    "Check for dependencies listed at the bottom of the page."
)

_PENDING_STATES = {"processing", "pending", "queued", "scraping"}


class FirecrawlError(RuntimeError):
    """Raised when the service answers with an unsuccessful payload."""


class FirecrawlClient:
    """Thin wrapper around the Firecrawl REST API."""

    def __init__(
        self,
        config: Optional[FirecrawlConfig] = None,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config or FirecrawlConfig()
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {self.config.api_key}",
                "Content-Type": "application/json",
            }
        )
        self._sleep = sleep

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    def _url(self, path: str) -> str:
        return self.config.endpoint.rstrip("/") + path

    def _check(self, resp: requests.Response) -> Dict[str, Any]:
        resp.raise_for_status()
        data = resp.json()
        if not isinstance(data, dict) or data.get("success") is False:
            message = data.get("error") if isinstance(data, dict) else None
            raise FirecrawlError(message or "Firecrawl request was not successful")
        return data

    def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        resp = self.session.post(
            self._url(path), json=payload, timeout=self.config.request_timeout
        )
        return self._check(resp)

    def _get(self, path: str) -> Dict[str, Any]:
        resp = self.session.get(self._url(path), timeout=self.config.request_timeout)
        return self._check(resp)

    def map_site(
        self,
        url: str,
        limit: int = 100,
        include_subdomains: bool = False,
        sitemap_only: bool = False,
    ) -> List[str]:
        """Discover the URLs of a site."""
        data = self._post(
            "/v1/map",
            {
                "url": url,
                "includeSubdomains": include_subdomains,
                "limit": limit,
                "sitemapOnly": sitemap_only,
            },
        )
        links = data.get("links") or []
        return [link for link in links if isinstance(link, str)]

    def _await_extract_job(self, job_id: str) -> Dict[str, Any]:
        for _ in range(self.config.max_polls):
            data = self._get(f"/v1/extract/{job_id}")
            status = str(data.get("status", "completed")).lower()
            if status == "completed":
                return data.get("data") or {}
            if status not in _PENDING_STATES:
                raise FirecrawlError(f"Extract job {job_id} ended with status {status}")
            self._sleep(self.config.poll_interval)
        raise FirecrawlError(f"Extract job {job_id} did not complete in time")

    def extract(
        self,
        url: str,
        schema: Optional[Dict[str, Any]] = None,
        prompt: str = EXTRACT_PROMPT,
    ) -> ExtractionResult:
        """Run schema-driven extraction for one URL."""
        if not self.enabled:
            return ExtractionResult.failed("Firecrawl API key is not configured")
        try:
            data = self._post(
                "/v1/extract",
                {"urls": [url], "schema": schema or COMPONENT_SCHEMA, "prompt": prompt},
            )
            if isinstance(data.get("data"), dict):
                extracted = data["data"]
            elif data.get("id"):
                extracted = self._await_extract_job(str(data["id"]))
            else:
                raise FirecrawlError("Extract response carried neither data nor job id")
        except (requests.RequestException, ValueError, FirecrawlError) as exc:
            logger.warning("Structured extraction failed for %s: %s", url, exc)
            return ExtractionResult.failed(str(exc))

        if not isinstance(extracted, dict):
            return ExtractionResult.failed("Extract response data is not an object")
        payload = ComponentPayload.from_dict(extracted)
        payload.url = url
        return ExtractionResult.success(payload)
