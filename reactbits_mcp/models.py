"""Data models used throughout the scrape, store and query pipeline."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

logger = logging.getLogger("reactbits_mcp")

_KNOWN_KEYS = {
    "name",
    "description",
    "url",
    "code",
    "props",
    "dependencies",
    "category",
    "scrapedAt",
    "previewImage",
    "error",
}


@dataclass
class PropSpec:
    """One row of a component props table."""

    type: str = ""
    default: str = ""
    description: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"type": self.type, "default": self.default, "description": self.description}

    @classmethod
    def from_dict(cls, data: Any) -> "PropSpec":
        if not isinstance(data, dict):
            return cls()
        return cls(
            type=str(data.get("type") or ""),
            default=str(data.get("default") or data.get("defaultValue") or ""),
            description=str(data.get("description") or ""),
        )


def _normalize_props(raw: Any) -> Dict[str, PropSpec]:
    """Accept either the prop-name mapping or the extraction service's list of rows."""
    props: Dict[str, PropSpec] = {}
    if isinstance(raw, dict):
        for key, value in raw.items():
            props[str(key)] = PropSpec.from_dict(value)
    elif isinstance(raw, list):
        for item in raw:
            if isinstance(item, dict) and item.get("name"):
                props[str(item["name"])] = PropSpec.from_dict(item)
    return props


def _normalize_dependencies(raw: Any) -> List[str]:
    if isinstance(raw, list):
        return [str(dep).strip() for dep in raw if str(dep).strip()]
    if isinstance(raw, str):
        return raw.split()
    return []


@dataclass
class ComponentPayload:
    """The raw extraction record written to ``<slug>.json``."""

    name: str
    description: str = ""
    url: str = ""
    code: str = ""
    props: Dict[str, PropSpec] = field(default_factory=dict)
    dependencies: List[str] = field(default_factory=list)
    category: Optional[str] = None
    scraped_at: Optional[str] = None
    preview_image: Optional[str] = None
    error: bool = False
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ComponentPayload":
        return cls(
            name=str(data.get("name") or ""),
            description=str(data.get("description") or ""),
            url=str(data.get("url") or ""),
            code=str(data.get("code") or ""),
            props=_normalize_props(data.get("props")),
            dependencies=_normalize_dependencies(data.get("dependencies")),
            category=data.get("category"),
            scraped_at=data.get("scrapedAt"),
            preview_image=data.get("previewImage") or None,
            error=bool(data.get("error", False)),
            extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
        )

    @classmethod
    def failure(cls, url: str, message: str) -> "ComponentPayload":
        slug = url.rstrip("/").split("/")[-1]
        return cls(
            name=f"Error: {slug}",
            description=f"Failed to scrape: {message}",
            url=url,
            error=True,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = dict(self.extra)
        data.update(
            {
                "name": self.name,
                "description": self.description,
                "props": {key: spec.to_dict() for key, spec in self.props.items()},
                "dependencies": list(self.dependencies),
                "url": self.url,
                "code": self.code,
            }
        )
        if self.category is not None:
            data["category"] = self.category
        if self.scraped_at is not None:
            data["scrapedAt"] = self.scraped_at
        if self.preview_image:
            data["previewImage"] = self.preview_image
        if self.error:
            data["error"] = True
        return data


@dataclass
class ExtractionResult:
    """Tagged result of one extraction stage: a payload or a failure reason."""

    payload: Optional[ComponentPayload] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, payload: ComponentPayload) -> "ExtractionResult":
        return cls(payload=payload)

    @classmethod
    def failed(cls, reason: str) -> "ExtractionResult":
        return cls(error=reason)

    @property
    def ok(self) -> bool:
        return self.error is None and self.payload is not None

    @property
    def usable(self) -> bool:
        """True when the payload names a component and carries no error marker."""
        return self.ok and bool(self.payload.name.strip()) and not self.payload.error


@dataclass
class ComponentRecord:
    """A row of the ``components`` table."""

    name: str
    category: str
    raw: Optional[ComponentPayload]
    description: str = ""
    code: str = ""
    dependencies: str = ""
    preview_image: str = ""
    file_path: str = ""
    id: Optional[int] = None
    created_at: Optional[str] = None

    @classmethod
    def from_payload(
        cls,
        payload: ComponentPayload,
        category: str,
        code: str = "",
        file_path: str = "",
    ) -> "ComponentRecord":
        """Build a write-time record; the dependencies column is derived from the payload."""
        return cls(
            name=payload.name,
            category=category,
            raw=payload,
            description=payload.description or "",
            code=code,
            dependencies=" ".join(payload.dependencies),
            preview_image=payload.preview_image or "",
            file_path=file_path,
        )

    @classmethod
    def from_row(cls, row: Any) -> "ComponentRecord":
        keys = row.keys()
        raw: Optional[ComponentPayload] = None
        json_data = row["json_data"] if "json_data" in keys else None
        if json_data:
            try:
                raw = ComponentPayload.from_dict(json.loads(json_data))
            except (json.JSONDecodeError, TypeError, AttributeError) as exc:
                logger.error("Error parsing JSON data for %s: %s", row["name"], exc)
        return cls(
            id=row["id"],
            name=row["name"],
            category=row["category"],
            raw=raw,
            description=row["description"] or "",
            code=(row["code"] if "code" in keys else "") or "",
            dependencies=(row["dependencies"] if "dependencies" in keys else "") or "",
            preview_image=(row["preview_image"] if "preview_image" in keys else "") or "",
            file_path=(row["file_path"] if "file_path" in keys else "") or "",
            created_at=row["created_at"] if "created_at" in keys else None,
        )

    @property
    def props(self) -> Dict[str, PropSpec]:
        return self.raw.props if self.raw else {}

    @property
    def dependency_list(self) -> List[str]:
        """Dependencies for display; the raw record wins over the flattened column."""
        if self.raw is not None:
            return list(self.raw.dependencies)
        return self.dependencies.split()

    def to_params(self) -> tuple:
        json_data = json.dumps(self.raw.to_dict()) if self.raw else ""
        return (
            self.name,
            self.description,
            self.category,
            self.code,
            self.dependencies,
            self.preview_image,
            json_data,
            self.file_path,
        )


@dataclass
class ScrapeStats:
    """Counters for one scrape run."""

    successful: int = 0
    failed: int = 0
    skipped: int = 0
    structured_extracted: int = 0
    browser_fallback: int = 0

    def record_method(self, method: Optional[str]) -> None:
        if method == "structured":
            self.structured_extracted += 1
        elif method == "browser":
            self.browser_fallback += 1

    def summary(self) -> str:
        return (
            f"{self.successful} successful ({self.structured_extracted} via structured extraction, "
            f"{self.browser_fallback} via browser fallback), {self.failed} failed, "
            f"{self.skipped} skipped"
        )
