"""Normalisation and formatting of scraped component source code."""

from __future__ import annotations

import re
from typing import Dict, List, Sequence

INSTALL_LINE_PATTERN = re.compile(
    r"^\s*(?:\d+\s+)?(?:npm\s+(?:i|install)|yarn\s+add|pnpm\s+(?:add|i|install)|bun\s+add)\s.*$"
)
LINE_NUMBER_PATTERN = re.compile(r"^\s*\d+(?:\s|$)")
LINE_NUMBER_PREFIX = re.compile(r"^\s*\d+\s?")

BANNER = "// " + "=" * 76
BLOCK_ID_CHARS = 20

_IMPLEMENTATION_MARKERS = ("export default", "function ", "class ")
_REACT_IMPORT_MARKERS = ("import React", 'from "react"', "from 'react'")


def clean_code_text(text: str) -> str:
    """Drop package-install lines and strip line-number gutters copied with the code.

    Text counts as numbered only when every non-blank line starts with a
    number; only that number and one separator are removed.
    """
    if not text:
        return ""
    lines = [line for line in text.split("\n") if not INSTALL_LINE_PATTERN.match(line)]
    content = [line for line in lines if line.strip()]
    if content and all(LINE_NUMBER_PATTERN.match(line) for line in content):
        return "\n".join(LINE_NUMBER_PREFIX.sub("", line, count=1) for line in lines)
    return "\n".join(lines)


def determine_file_extension(code: str, category: str) -> str:
    """Return ``jsx`` for markup or React code, ``js`` otherwise."""
    if not code:
        return "jsx" if category == "components" else "js"
    if "</" in code or "/>" in code or ("<" in code and ">" in code and "props" in code):
        return "jsx"
    if any(marker in code for marker in _REACT_IMPORT_MARKERS):
        return "jsx"
    return "js"


def alternate_extension(extension: str) -> str:
    return "js" if extension == "jsx" else "jsx"


def split_code_blocks(code: str) -> Dict[str, str]:
    """Split code on ``import`` lines, keyed by the first characters of each block.

    A later block with an existing key replaces the earlier text but keeps its
    position, so iteration order is first-seen order.
    """
    blocks: Dict[str, str] = {}
    current = ""
    block_id = ""
    for line in code.split("\n"):
        stripped = line.strip()
        if not current and not stripped:
            continue
        if stripped.startswith("import ") and current:
            if current.strip():
                blocks[block_id] = current
            current = line + "\n"
            block_id = stripped[:BLOCK_ID_CHARS]
        else:
            current += line + "\n"
            if not block_id:
                block_id = stripped[:BLOCK_ID_CHARS]
    if current.strip() and block_id:
        blocks[block_id] = current
    return blocks


def classify_block(block: str) -> str:
    if any(marker in block for marker in _IMPLEMENTATION_MARKERS):
        return "implementation"
    if "import " in block and "from " in block:
        return "implementation"
    if "<" in block and ">" in block:
        return "usage"
    return "implementation"


def _section(title: str, body: str) -> str:
    return f"{BANNER}\n// {title}\n{BANNER}\n\n{body}\n"


def format_code_with_headers(
    code: str,
    name: str,
    description: str = "",
    dependencies: Sequence[str] = (),
) -> str:
    """Render cleaned code as a single file with installation/usage/implementation banners."""
    if not code:
        return ""

    usage: List[str] = []
    implementation: List[str] = []
    for block in split_code_blocks(clean_code_text(code)).values():
        block = block.strip()
        if classify_block(block) == "usage":
            usage.append(block)
        else:
            implementation.append(block)

    parts = [f"/**\n * {name}\n *\n * {description or ''}\n */\n\n"]
    if dependencies:
        parts.append(
            _section(
                "INSTALLATION",
                f"// Install dependencies:\n// npm install {' '.join(dependencies)}\n",
            )
        )
    if usage:
        parts.append(_section("USAGE EXAMPLE", "\n\n".join(usage) + "\n"))
    parts.append(_section("IMPLEMENTATION", "\n\n".join(implementation)))
    return "".join(parts)
