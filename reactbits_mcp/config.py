"""Configuration objects and constants for the scraper, store and server."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

BASE_URL = "https://www.reactbits.dev"
CATEGORIES: Tuple[str, ...] = ("components", "backgrounds", "animations")

DEFAULT_OUTPUT_DIR = Path("scraped-components")
DEFAULT_DB_PATH = Path(os.getenv("REACTBITS_DB", "reactbits.db"))

DEFAULT_FIRECRAWL_URL = "https://api.firecrawl.dev"
# Placeholder used when FIRECRAWL_API_KEY is unset; it disables structured extraction.
PLACEHOLDER_API_KEY = "fc-your-api-key"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

SEARCH_LIMIT = 20


@dataclass
class ScrapeConfig:
    """Top-level settings that control scraping and artifact output."""

    output_root: Path = DEFAULT_OUTPUT_DIR
    limit: Optional[int] = None
    force: bool = False
    navigation_timeout: float = 30.0
    code_settle: float = 1.0
    intercept_settle: float = 2.0
    delay_base: float = 1.5
    delay_jitter: float = 1.0
    viewport: Tuple[int, int] = (1280, 800)
    user_agent: str = DEFAULT_USER_AGENT
    use_structured: bool = True
    write_readme: bool = True

    def category_dir(self, category: str) -> Path:
        return self.output_root / category

    def ensure_dirs(self) -> None:
        for category in CATEGORIES:
            self.category_dir(category).mkdir(parents=True, exist_ok=True)


@dataclass
class FirecrawlConfig:
    """Connection settings for the structured-extraction service."""

    api_key: str = field(
        default_factory=lambda: os.getenv("FIRECRAWL_API_KEY", PLACEHOLDER_API_KEY)
    )
    endpoint: str = field(
        default_factory=lambda: os.getenv("FIRECRAWL_API_URL", DEFAULT_FIRECRAWL_URL)
    )
    request_timeout: float = 30.0
    poll_interval: float = 2.0
    max_polls: int = 30

    @property
    def enabled(self) -> bool:
        return bool(self.api_key) and self.api_key != PLACEHOLDER_API_KEY
