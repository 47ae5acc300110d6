"""Markdown-flavoured text rendering for tool responses and the catalog README."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .config import CATEGORIES
from .models import ComponentRecord
from .utils import utc_timestamp

logger = logging.getLogger("reactbits_mcp")

NO_DESCRIPTION = "No description available"


def install_command(dependencies: Sequence[str]) -> str:
    return f"npm install {' '.join(dependencies)}" if dependencies else ""


def render_search_results(
    records: Sequence[ComponentRecord],
    query: str,
    category: Optional[str] = None,
) -> str:
    suffix = f" in category {category}" if category else ""
    lines = [f'Found {len(records)} components matching "{query}"{suffix}:', ""]
    for index, record in enumerate(records, start=1):
        lines.append(f"{index}. **{record.name}** ({record.category})")
        lines.append(f"   {record.description or NO_DESCRIPTION}")
        command = install_command(record.dependency_list)
        if command:
            lines.append(f"   Installation: `{command}`")
        lines.append("")
    return "\n".join(lines) + "\n"


def render_component(record: ComponentRecord, code: str) -> str:
    """Full detail page for one component."""
    parts = [
        f"# {record.name}\n\n",
        f"**Category:** {record.category}\n\n",
        f"{record.description or NO_DESCRIPTION + '.'}\n\n",
    ]

    command = install_command(record.dependency_list)
    if command:
        parts.append(f"## Installation\n\n```bash\n{command}\n```\n\n")

    if record.props:
        parts.append("## Component Props\n\n")
        for name, spec in record.props.items():
            line = f"- **{name}**: {spec.type or 'any'}"
            if spec.default:
                line += f" (default: {spec.default})"
            parts.append(line + "\n")
            if spec.description:
                parts.append(f"  {spec.description}\n")
            parts.append("\n")

    parts.append(f"## Component Code\n\n```jsx\n{code}\n```\n\n")

    if record.preview_image:
        parts.append(f"## Preview\n\nPreview Image URL: {record.preview_image}\n\n")
    return "".join(parts)


def render_categories(categories: Sequence[str]) -> str:
    return f"Available categories: {', '.join(categories)}"


def render_component_list(
    records: Sequence[ComponentRecord],
    category: Optional[str] = None,
) -> str:
    suffix = f" in category {category}" if category else ""
    text = f"Found {len(records)} components{suffix}:\n\n"

    grouped: Dict[str, List[ComponentRecord]] = {}
    for record in records:
        grouped.setdefault(record.category, []).append(record)

    for group, members in grouped.items():
        text += f"## {group}\n\n"
        for index, record in enumerate(members, start=1):
            text += f"{index}. **{record.name}**\n"
            text += f"   {record.description or NO_DESCRIPTION}\n\n"
    return text


def compose_readme(output_root: Path) -> str:
    """Overview of every scraped artifact, grouped by category."""
    lines = [
        "# ReactBits Components Library",
        "",
        f"Scraped components from [ReactBits.dev](https://www.reactbits.dev/) as of {utc_timestamp()}",
        "",
    ]
    for category in CATEGORIES:
        category_dir = output_root / category
        json_files = sorted(category_dir.glob("*.json")) if category_dir.is_dir() else []
        if not json_files:
            continue

        lines.extend([f"## {category.capitalize()}", ""])
        for json_path in json_files:
            try:
                data = json.loads(json_path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as exc:
                logger.warning("Skipping %s in README: %s", json_path, exc)
                continue
            name = data.get("name") or json_path.stem
            lines.extend([f"### {name}", ""])
            if data.get("description"):
                lines.extend([data["description"], ""])
            if data.get("previewImage"):
                lines.extend([f"![{name} Preview](./{category}/{data['previewImage']})", ""])

            links = [f"[View Component Details](./{category}/{json_path.name})"]
            for extension in ("jsx", "js"):
                code_path = json_path.with_suffix(f".{extension}")
                if code_path.exists():
                    links.append(f"[View Code](./{category}/{code_path.name})")
                    break
            lines.extend([" | ".join(links), ""])
        lines.append("")
    return "\n".join(lines)


def write_readme(output_root: Path) -> Path:
    readme_path = output_root / "README.md"
    readme_path.parent.mkdir(parents=True, exist_ok=True)
    readme_path.write_text(compose_readme(output_root), encoding="utf-8")
    logger.info("README generated at %s", readme_path)
    return readme_path
