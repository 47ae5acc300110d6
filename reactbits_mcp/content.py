"""HTML heuristics for component pages rendered by the headless browser."""

from __future__ import annotations

from typing import Dict, List, Optional

from bs4 import BeautifulSoup, Tag

from .models import ComponentPayload, PropSpec

UNKNOWN_COMPONENT = "Unknown Component"

CODE_BLOCK_SELECTORS = (
    "pre code",
    "code.language-jsx",
    "code.language-tsx",
    ".language-tsx",
    ".language-jsx",
    'div[data-language="jsx"]',
    'div[data-language="tsx"]',
    ".prism-code",
    '[class*="codeBlock"]',
    '[class*="CodeBlock"]',
    '[class*="code-block"]',
)


def _text(tag: Optional[Tag]) -> str:
    if tag is None:
        return ""
    return tag.get_text(" ", strip=True)


def extract_name(soup: BeautifulSoup) -> str:
    for selector in ("h2", "h1"):
        text = _text(soup.find(selector))
        if text:
            return text
    return UNKNOWN_COMPONENT


def extract_description(soup: BeautifulSoup) -> str:
    meta = soup.find("meta", attrs={"name": "description"})
    if meta and meta.get("content"):
        return meta["content"].strip()
    return _text(soup.find("p"))


def _prop_from_cells(cells: List[str]) -> PropSpec:
    count = len(cells)
    prop_type = cells[1] if count >= 3 else ""
    default = cells[2] if count >= 4 else ""
    if count >= 5:
        description = cells[3]
    elif count >= 3:
        description = cells[2]
    else:
        description = ""
    return PropSpec(type=prop_type, default=default, description=description)


def extract_props(soup: BeautifulSoup) -> Dict[str, PropSpec]:
    """Read the first table, skipping its header row."""
    table = soup.find("table")
    props: Dict[str, PropSpec] = {}
    if table is None:
        return props
    for row in table.find_all("tr")[1:]:
        cells = [cell.get_text(" ", strip=True) for cell in row.find_all("td")]
        if len(cells) < 2:
            continue
        props[cells[0]] = _prop_from_cells(cells)
    return props


def extract_dependencies(soup: BeautifulSoup) -> List[str]:
    for heading in soup.find_all(["h2", "h3"]):
        if "Dependencies" not in heading.get_text():
            continue
        sibling = heading.find_next_sibling()
        if sibling is None:
            return []
        return [line.strip() for line in sibling.get_text("\n").split("\n") if line.strip()]
    return []


def extract_code_blocks(soup: BeautifulSoup) -> str:
    """Collect code-like blocks, dropping empties and exact duplicates."""
    seen: Dict[str, None] = {}
    for element in soup.select(", ".join(CODE_BLOCK_SELECTORS)):
        text = element.get_text()
        if text and text.strip() and text not in seen:
            seen[text] = None
    return "\n\n".join(seen)


def parse_component_html(html: str, url: str) -> ComponentPayload:
    """Extract component metadata and visible code from rendered page HTML."""
    soup = BeautifulSoup(html, "html.parser")
    return ComponentPayload(
        name=extract_name(soup),
        description=extract_description(soup),
        url=url,
        code=extract_code_blocks(soup),
        props=extract_props(soup),
        dependencies=extract_dependencies(soup),
    )
