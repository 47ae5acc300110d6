"""Slug and timestamp helpers shared by the scraper, loader and query layer."""

from __future__ import annotations

import datetime as dt
import re
from urllib.parse import urlparse

SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


def slugify(value: str, fallback: str = "component") -> str:
    """Lowercase ASCII slug; a component name and its item URL map to the same stem."""
    ascii_only = value.encode("ascii", "ignore").decode("ascii").lower()
    return SLUG_PATTERN.sub("-", ascii_only).strip("-") or fallback


def slug_from_url(url: str) -> str:
    """Slug for the last path segment of an item URL."""
    path = urlparse(url).path.rstrip("/")
    return slugify(path.split("/")[-1] if path else "")


def utc_timestamp() -> str:
    return (
        dt.datetime.now(dt.timezone.utc)
        .replace(microsecond=0)
        .isoformat()
        .replace("+00:00", "Z")
    )
