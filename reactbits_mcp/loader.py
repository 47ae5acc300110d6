"""Bulk load of scraped artifacts into the component store."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Iterator, Optional

from .config import CATEGORIES
from .models import ComponentPayload, ComponentRecord
from .store import ComponentStore

logger = logging.getLogger("reactbits_mcp")

CODE_EXTENSIONS = ("jsx", "js")


def find_code_file(json_path: Path) -> Optional[Path]:
    """Sibling ``.jsx`` file, else ``.js``, else ``None``."""
    for extension in CODE_EXTENSIONS:
        candidate = json_path.with_suffix(f".{extension}")
        if candidate.exists():
            return candidate
    return None


def _relative(path: Path, base_dir: Path) -> str:
    try:
        return Path(os.path.relpath(path, base_dir)).as_posix()
    except ValueError:
        return str(path)


def iter_records(root: Path, base_dir: Optional[Path] = None) -> Iterator[ComponentRecord]:
    """Yield one record per JSON artifact under ``root/<category>/``."""
    base_dir = base_dir or root.parent
    for category in CATEGORIES:
        category_dir = root / category
        if not category_dir.is_dir():
            logger.warning("Category directory not found: %s", category_dir)
            continue

        json_files = sorted(category_dir.glob("*.json"))
        logger.info("Processing %d %s...", len(json_files), category)
        for json_path in json_files:
            try:
                data = json.loads(json_path.read_text(encoding="utf-8"))
            except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
                logger.error("Skipping unreadable artifact %s: %s", json_path, exc)
                continue
            if not isinstance(data, dict):
                logger.error("Skipping artifact %s: not a JSON object", json_path)
                continue

            payload = ComponentPayload.from_dict(data)
            code_path = find_code_file(json_path)
            try:
                code = code_path.read_text(encoding="utf-8") if code_path else ""
            except (OSError, UnicodeDecodeError) as exc:
                logger.error("Skipping artifact with unreadable code file %s: %s", code_path, exc)
                continue
            yield ComponentRecord.from_payload(
                payload,
                category,
                code=code,
                file_path=_relative(code_path, base_dir) if code_path else "",
            )


def load_artifacts(store: ComponentStore, root: Path, base_dir: Optional[Path] = None) -> int:
    """Replace the table contents with the artifacts found under ``root``."""
    count = store.replace_all(iter_records(Path(root), base_dir))
    logger.info("Successfully imported %d components", count)
    return count
