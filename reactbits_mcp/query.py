"""Search, lookup and listing of stored components.

Every public operation returns display text; failures raise
:class:`~reactbits_mcp.errors.QueryError` subclasses.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import List, Optional

from .config import CATEGORIES, DEFAULT_OUTPUT_DIR, SEARCH_LIMIT
from .errors import ComponentNotFoundError, InvalidParamsError
from .markdown import (
    render_categories,
    render_component,
    render_component_list,
    render_search_results,
)
from .models import ComponentRecord
from .store import ComponentStore
from .utils import slugify

logger = logging.getLogger("reactbits_mcp")

NO_CODE = "// No code available for this component"


def fts_prefix_query(term: str) -> str:
    """Quote ``term`` as an FTS5 phrase and make it a prefix query."""
    return '"' + term.replace('"', '""') + '"*'


def like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class ComponentQueryService:
    """Read-side operations over a :class:`ComponentStore`."""

    def __init__(
        self,
        store: ComponentStore,
        base_dir: Path = Path("."),
        artifacts_root: Optional[Path] = None,
        limit: int = SEARCH_LIMIT,
    ) -> None:
        self.store = store
        self.base_dir = Path(base_dir)
        self.artifacts_root = Path(artifacts_root) if artifacts_root else self.base_dir / DEFAULT_OUTPUT_DIR
        self.limit = limit

    def _check_category(self, category: Optional[str]) -> Optional[str]:
        if not category:
            return None
        if category not in CATEGORIES:
            raise ComponentNotFoundError(
                f'Category "{category}" not found; expected one of {", ".join(CATEGORIES)}'
            )
        return category

    def _full_text(self, query: str, category: Optional[str]) -> List[sqlite3.Row]:
        sql = (
            "SELECT c.* FROM components_fts "
            "JOIN components c ON components_fts.rowid = c.id "
            "WHERE components_fts MATCH ?"
        )
        params: list = [fts_prefix_query(query)]
        if category:
            sql += " AND c.category = ?"
            params.append(category)
        sql += " ORDER BY rank LIMIT ?"
        params.append(self.limit)
        try:
            return self.store.fetch_all(sql, params)
        except sqlite3.OperationalError as exc:
            logger.warning("Full-text search failed for %r: %s", query, exc)
            return []

    def _substring(self, query: str, category: Optional[str]) -> List[sqlite3.Row]:
        pattern = like_pattern(query)
        if category:
            return self.store.fetch_all(
                "SELECT * FROM components "
                "WHERE (name LIKE ? ESCAPE '\\' OR description LIKE ? ESCAPE '\\') "
                "AND category = ? ORDER BY name LIMIT ?",
                (pattern, pattern, category, self.limit),
            )
        return self.store.fetch_all(
            "SELECT * FROM components "
            "WHERE name LIKE ? ESCAPE '\\' OR description LIKE ? ESCAPE '\\' "
            "ORDER BY category, name LIMIT ?",
            (pattern, pattern, self.limit),
        )

    def search_records(self, query: Optional[str], category: Optional[str] = None) -> List[ComponentRecord]:
        query = (query or "").strip()
        category = self._check_category(category)

        if query:
            rows = self._full_text(query, category)
            if not rows:
                logger.debug("No full-text hits for %r, trying substring match", query)
                rows = self._substring(query, category)
        elif category:
            rows = self.store.fetch_all(
                "SELECT * FROM components WHERE category = ? ORDER BY name LIMIT ?",
                (category, self.limit),
            )
        else:
            raise InvalidParamsError("Search query or category must be provided")
        return [ComponentRecord.from_row(row) for row in rows]

    def search(self, query: Optional[str], category: Optional[str] = None) -> str:
        records = self.search_records(query, category)
        return render_search_results(records, (query or "").strip(), category)

    def find_component(self, name: Optional[str]) -> ComponentRecord:
        """Exact, then case-insensitive, then substring match on the name."""
        name = (name or "").strip()
        if not name:
            raise InvalidParamsError("Component name is required")

        lookups = (
            ("SELECT * FROM components WHERE name = ? ORDER BY id LIMIT 1", name),
            ("SELECT * FROM components WHERE LOWER(name) = LOWER(?) ORDER BY id LIMIT 1", name),
            ("SELECT * FROM components WHERE name LIKE ? ESCAPE '\\' ORDER BY id LIMIT 1", like_pattern(name)),
        )
        for sql, param in lookups:
            row = self.store.fetch_one(sql, (param,))
            if row is not None:
                return ComponentRecord.from_row(row)
        raise ComponentNotFoundError(f'Component "{name}" not found')

    def component_code(self, record: ComponentRecord) -> str:
        """Stored code, else the code file on disk, else a placeholder."""
        if record.code.strip():
            return record.code

        candidates = []
        if record.file_path:
            candidates.append(self.base_dir / record.file_path)
        slug = slugify(record.name)
        candidates.extend(
            self.artifacts_root / record.category / f"{slug}.{extension}"
            for extension in ("jsx", "js")
        )
        for path in candidates:
            if not path.is_file():
                continue
            try:
                return path.read_text(encoding="utf-8")
            except OSError as exc:
                logger.error("Error reading component file %s: %s", path, exc)
        return NO_CODE

    def get_component(self, name: Optional[str]) -> str:
        record = self.find_component(name)
        return render_component(record, self.component_code(record))

    def categories(self) -> List[str]:
        rows = self.store.fetch_all("SELECT DISTINCT category FROM components")
        return [row["category"] for row in rows]

    def list_categories(self) -> str:
        return render_categories(self.categories())

    def list_records(self, category: Optional[str] = None) -> List[ComponentRecord]:
        category = self._check_category(category)
        columns = "id, name, description, category"
        if category:
            rows = self.store.fetch_all(
                f"SELECT {columns} FROM components WHERE category = ? ORDER BY name",
                (category,),
            )
        else:
            rows = self.store.fetch_all(
                f"SELECT {columns} FROM components ORDER BY category, name"
            )
        return [ComponentRecord.from_row(row) for row in rows]

    def list_components(self, category: Optional[str] = None) -> str:
        return render_component_list(self.list_records(category), category)
