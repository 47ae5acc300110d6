"""SQLite store of scraped components with an FTS5 shadow index."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence, Union

from .models import ComponentRecord

logger = logging.getLogger("reactbits_mcp")

SCHEMA = """
CREATE TABLE IF NOT EXISTS components (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    description TEXT,
    category TEXT NOT NULL,
    code TEXT,
    dependencies TEXT,
    preview_image TEXT,
    json_data TEXT,
    file_path TEXT,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_components_name ON components(name);
CREATE INDEX IF NOT EXISTS idx_components_category ON components(category);

CREATE VIRTUAL TABLE IF NOT EXISTS components_fts USING fts5(
    name, description, category,
    content='components',
    content_rowid='id'
);

CREATE TRIGGER IF NOT EXISTS components_ai AFTER INSERT ON components BEGIN
    INSERT INTO components_fts(rowid, name, description, category)
    VALUES (new.id, new.name, new.description, new.category);
END;

CREATE TRIGGER IF NOT EXISTS components_ad AFTER DELETE ON components BEGIN
    INSERT INTO components_fts(components_fts, rowid, name, description, category)
    VALUES ('delete', old.id, old.name, old.description, old.category);
END;

CREATE TRIGGER IF NOT EXISTS components_au AFTER UPDATE ON components BEGIN
    INSERT INTO components_fts(components_fts, rowid, name, description, category)
    VALUES ('delete', old.id, old.name, old.description, old.category);
    INSERT INTO components_fts(rowid, name, description, category)
    VALUES (new.id, new.name, new.description, new.category);
END;
"""

INSERT_SQL = """
INSERT INTO components (name, description, category, code, dependencies,
                        preview_image, json_data, file_path)
VALUES (?, ?, ?, ?, ?, ?, ?, ?)
"""


class ComponentStore:
    """Owns one connection; opened once and closed explicitly."""

    def __init__(self, connection: sqlite3.Connection, readonly: bool = False) -> None:
        self.connection = connection
        self.connection.row_factory = sqlite3.Row
        self.readonly = readonly

    @classmethod
    def open(cls, path: Union[str, Path], readonly: bool = False) -> "ComponentStore":
        path = Path(path)
        if readonly:
            if not path.exists():
                raise FileNotFoundError(f"Database does not exist: {path}")
            connection = sqlite3.connect(f"{path.resolve().as_uri()}?mode=ro", uri=True)
            return cls(connection, readonly=True)
        path.parent.mkdir(parents=True, exist_ok=True)
        store = cls(sqlite3.connect(str(path)))
        store.initialize()
        return store

    @classmethod
    def memory(cls) -> "ComponentStore":
        store = cls(sqlite3.connect(":memory:"))
        store.initialize()
        return store

    def initialize(self) -> None:
        if str(self.connection.execute("PRAGMA journal_mode").fetchone()[0]) != "memory":
            self.connection.execute("PRAGMA journal_mode = WAL")
        self.connection.executescript(SCHEMA)
        self.connection.commit()
        logger.debug("Database schema initialized")

    def close(self) -> None:
        self.connection.close()

    def __enter__(self) -> "ComponentStore":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> List[sqlite3.Row]:
        return self.connection.execute(sql, params).fetchall()

    def fetch_one(self, sql: str, params: Sequence[Any] = ()) -> Optional[sqlite3.Row]:
        return self.connection.execute(sql, params).fetchone()

    def replace_all(self, records: Iterable[ComponentRecord]) -> int:
        """Delete every row and insert ``records`` in one transaction."""
        count = 0
        with self.connection:
            self.connection.execute("DELETE FROM components")
            for record in records:
                self.connection.execute(INSERT_SQL, record.to_params())
                count += 1
            self.connection.execute(
                "INSERT INTO components_fts(components_fts) VALUES ('rebuild')"
            )
        return count

    def count(self) -> int:
        return self.connection.execute("SELECT COUNT(*) FROM components").fetchone()[0]
