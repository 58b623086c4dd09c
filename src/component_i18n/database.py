"""
DuckDB database operations for component-i18n.

Handles localization records, component manifests, and the processing log.
"""

from __future__ import annotations

import json
import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

import duckdb

from component_i18n.errors import DuplicateKeyError, InvalidFieldError, InvalidLocaleError

# Supported locales, in display order
LOCALES: tuple[str, ...] = ("en", "es", "fr", "de", "ja", "zh")

# Columns of a localization record that may be edited in place
EDITABLE_FIELDS: tuple[str, ...] = ("key", *LOCALES)

LOG_LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40}

MEMORY_PATH = ":memory:"


@dataclass
class LocalizationRecord:
    """Localization record: one key with its text in every locale."""

    id: int | None = None
    key: str = ""
    en: str = ""
    es: str = ""
    fr: str = ""
    de: str = ""
    ja: str = ""
    zh: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def text(self, locale: str) -> str:
        """Get the text for a locale."""
        if locale not in LOCALES:
            raise InvalidLocaleError(locale)
        return getattr(self, locale)

    def translations(self) -> dict[str, str]:
        """Get all locale texts as a mapping."""
        return {locale: getattr(self, locale) for locale in LOCALES}


@dataclass
class ComponentManifest:
    """Component record and the localization keys it depends on."""

    id: str = ""
    name: str = ""
    description: str = ""
    code: str = ""
    user_prompt: str = ""
    extracted_keys: list[str] = field(default_factory=list)
    demo_props: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Database:
    """DuckDB database wrapper for component-i18n."""

    _SCHEMA = """
    -- Localization records, one per key
    CREATE TABLE IF NOT EXISTS localizations (
        id INTEGER PRIMARY KEY,
        key VARCHAR NOT NULL UNIQUE,
        en VARCHAR NOT NULL DEFAULT '',
        es VARCHAR NOT NULL DEFAULT '',
        fr VARCHAR NOT NULL DEFAULT '',
        de VARCHAR NOT NULL DEFAULT '',
        ja VARCHAR NOT NULL DEFAULT '',
        zh VARCHAR NOT NULL DEFAULT '',
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    );

    CREATE SEQUENCE IF NOT EXISTS localizations_id_seq START 1;

    -- Generated components and the keys they use
    CREATE TABLE IF NOT EXISTS components (
        id VARCHAR PRIMARY KEY,
        name VARCHAR NOT NULL,
        description TEXT DEFAULT '',
        code TEXT NOT NULL,
        user_prompt TEXT NOT NULL,
        extracted_keys JSON,
        demo_props JSON,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    );

    -- Processing log for audit trail
    CREATE TABLE IF NOT EXISTS processing_log (
        id INTEGER PRIMARY KEY,
        run_id VARCHAR NOT NULL,
        component_id VARCHAR,
        stage VARCHAR NOT NULL,
        level VARCHAR NOT NULL,
        message TEXT NOT NULL,
        context JSON,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    );

    CREATE SEQUENCE IF NOT EXISTS processing_log_id_seq START 1;

    CREATE INDEX IF NOT EXISTS idx_log_lookup ON processing_log(run_id, stage, level);
    """

    _LOCALIZATION_COLUMNS = "id, key, en, es, fr, de, ja, zh, created_at, updated_at"

    _COMPONENT_COLUMNS = (
        "id, name, description, code, user_prompt, extracted_keys, demo_props, "
        "created_at, updated_at"
    )

    def __init__(self, db_path: Path | str, log_level: str = "INFO"):
        """
        Initialize database wrapper.

        The connection is opened lazily on first use and stays open until
        close() is called.

        Args:
            db_path: Path to the DuckDB file, or ":memory:".
            log_level: Minimum level of entries written by log().
        """
        self._in_memory = str(db_path) == MEMORY_PATH
        self.db_path = Path(db_path)
        if not self._in_memory:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn: duckdb.DuckDBPyConnection | None = None
        self._run_id = str(uuid.uuid4())
        self._min_log_level = LOG_LEVELS.get(log_level.upper(), LOG_LEVELS["INFO"])

    @property
    def conn(self) -> duckdb.DuckDBPyConnection:
        """Get or create database connection."""
        if self._conn is None:
            target = MEMORY_PATH if self._in_memory else str(self.db_path)
            self._conn = duckdb.connect(target)
            self._init_schema()
        return self._conn

    @property
    def run_id(self) -> str:
        """Get current run ID."""
        return self._run_id

    def _init_schema(self) -> None:
        """Initialize database schema."""
        self.conn.execute(self._SCHEMA)

    def close(self) -> None:
        """Close database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ==================== Localizations ====================

    def insert_localization_if_absent(self, key: str, texts: dict[str, str]) -> int | None:
        """
        Insert a localization record unless one already exists for the key.

        The existence check and the insert are one statement, so concurrent
        callers cannot create two records for the same key.

        Args:
            key: Translation key.
            texts: Locale -> text mapping. Missing locales are stored as ''.

        Returns:
            ID of the new record, or None if the key already existed.
        """
        values = [texts.get(locale) or "" for locale in LOCALES]
        try:
            result = self.conn.execute(
                """
                INSERT INTO localizations (id, key, en, es, fr, de, ja, zh)
                VALUES (nextval('localizations_id_seq'), ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT (key) DO NOTHING
                RETURNING id
                """,
                [key, *values],
            ).fetchone()
        except duckdb.ConstraintException:
            return None
        return result[0] if result else None

    def get_localization(self, key: str) -> LocalizationRecord | None:
        """Get a localization record by key."""
        row = self.conn.execute(
            f"SELECT {self._LOCALIZATION_COLUMNS} FROM localizations WHERE key = ?", [key]
        ).fetchone()
        if row:
            return self._row_to_localization(row)
        return None

    def get_localization_by_id(self, record_id: int) -> LocalizationRecord | None:
        """Get a localization record by ID."""
        row = self.conn.execute(
            f"SELECT {self._LOCALIZATION_COLUMNS} FROM localizations WHERE id = ?", [record_id]
        ).fetchone()
        if row:
            return self._row_to_localization(row)
        return None

    def get_all_localizations(self) -> list[LocalizationRecord]:
        """Get all localization records ordered by key."""
        rows = self.conn.execute(
            f"SELECT {self._LOCALIZATION_COLUMNS} FROM localizations ORDER BY key"
        ).fetchall()
        return [self._row_to_localization(row) for row in rows]

    def get_existing_keys(self, keys: Iterable[str]) -> set[str]:
        """Return the subset of keys that already have a record."""
        keys = list(dict.fromkeys(keys))
        if not keys:
            return set()
        placeholders = ", ".join("?" for _ in keys)
        rows = self.conn.execute(
            f"SELECT key FROM localizations WHERE key IN ({placeholders})", keys
        ).fetchall()
        return {row[0] for row in rows}

    def get_locale_translations(self, locale: str) -> dict[str, str]:
        """Get key -> text for one locale."""
        # Validate before interpolating the column name
        if locale not in LOCALES:
            raise InvalidLocaleError(locale)

        rows = self.conn.execute(f"SELECT key, {locale} FROM localizations").fetchall()
        return {row[0]: row[1] or "" for row in rows}

    def update_localization(self, record_id: int, field_name: str, value: str) -> bool:
        """
        Update one field of a localization record.

        Returns:
            True if a record was updated.

        Raises:
            InvalidFieldError: If field_name is not key or a locale.
            DuplicateKeyError: If renaming to a key another record uses.
        """
        if field_name not in EDITABLE_FIELDS:
            raise InvalidFieldError(field_name)

        try:
            result = self.conn.execute(
                f"""
                UPDATE localizations
                SET {field_name} = ?, updated_at = CURRENT_TIMESTAMP
                WHERE id = ?
                RETURNING id
                """,
                [value, record_id],
            ).fetchone()
        except duckdb.ConstraintException:
            raise DuplicateKeyError(value) from None
        return result is not None

    def delete_localization(self, record_id: int) -> bool:
        """Delete a localization record. Returns True if a record was removed."""
        result = self.conn.execute(
            "DELETE FROM localizations WHERE id = ? RETURNING id", [record_id]
        ).fetchone()
        return result is not None

    def _row_to_localization(self, row: tuple) -> LocalizationRecord:
        """Convert database row to LocalizationRecord."""
        return LocalizationRecord(
            id=row[0],
            key=row[1],
            en=row[2] or "",
            es=row[3] or "",
            fr=row[4] or "",
            de=row[5] or "",
            ja=row[6] or "",
            zh=row[7] or "",
            created_at=row[8],
            updated_at=row[9],
        )

    # ==================== Components ====================

    def save_component(self, component: ComponentManifest) -> str:
        """Insert a component, or replace the stored one with the same ID."""
        self.conn.execute(
            """
            INSERT INTO components (id, name, description, code, user_prompt, extracted_keys, demo_props)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT (id) DO UPDATE
            SET name = EXCLUDED.name,
                description = EXCLUDED.description,
                code = EXCLUDED.code,
                user_prompt = EXCLUDED.user_prompt,
                extracted_keys = EXCLUDED.extracted_keys,
                demo_props = EXCLUDED.demo_props,
                updated_at = CURRENT_TIMESTAMP
            """,
            [
                component.id,
                component.name,
                component.description,
                component.code,
                component.user_prompt,
                json.dumps(component.extracted_keys),
                json.dumps(component.demo_props),
            ],
        )
        return component.id

    def get_component(self, component_id: str) -> ComponentManifest | None:
        """Get a component by ID."""
        row = self.conn.execute(
            f"SELECT {self._COMPONENT_COLUMNS} FROM components WHERE id = ?", [component_id]
        ).fetchone()
        if row:
            return self._row_to_component(row)
        return None

    def get_all_components(self) -> list[ComponentManifest]:
        """Get all components, newest first."""
        rows = self.conn.execute(
            f"SELECT {self._COMPONENT_COLUMNS} FROM components ORDER BY created_at DESC, id"
        ).fetchall()
        return [self._row_to_component(row) for row in rows]

    def delete_component(self, component_id: str) -> bool:
        """Delete a component. Its localization records are kept."""
        result = self.conn.execute(
            "DELETE FROM components WHERE id = ? RETURNING id", [component_id]
        ).fetchone()
        return result is not None

    def _row_to_component(self, row: tuple) -> ComponentManifest:
        """Convert database row to ComponentManifest."""
        keys = row[5]
        if isinstance(keys, str):
            keys = json.loads(keys)
        props = row[6]
        if isinstance(props, str):
            props = json.loads(props)
        return ComponentManifest(
            id=row[0],
            name=row[1],
            description=row[2] or "",
            code=row[3],
            user_prompt=row[4],
            extracted_keys=list(keys or []),
            demo_props=dict(props or {}),
            created_at=row[7],
            updated_at=row[8],
        )

    # ==================== Logging ====================

    def log(
        self,
        level: str,
        stage: str,
        message: str,
        component_id: str | None = None,
        context: dict | None = None,
    ) -> None:
        """Insert a log entry if it meets the configured level."""
        level = level.upper()
        if LOG_LEVELS.get(level, LOG_LEVELS["INFO"]) < self._min_log_level:
            return

        context_json = json.dumps(context, default=str) if context else None
        self.conn.execute(
            """
            INSERT INTO processing_log
            (id, run_id, component_id, stage, level, message, context)
            VALUES (nextval('processing_log_id_seq'), ?, ?, ?, ?, ?, ?)
            """,
            [self._run_id, component_id, stage, level, message, context_json],
        )

    def get_logs(
        self,
        run_id: str | None = None,
        level: str | None = None,
        stage: str | None = None,
        component_id: str | None = None,
        limit: int = 100,
    ) -> list[dict]:
        """Get log entries, newest first."""
        conditions = []
        params: list[Any] = []

        if run_id:
            conditions.append("run_id = ?")
            params.append(run_id)
        if level:
            conditions.append("level = ?")
            params.append(level.upper())
        if stage:
            conditions.append("stage = ?")
            params.append(stage)
        if component_id:
            conditions.append("component_id = ?")
            params.append(component_id)

        where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""

        rows = self.conn.execute(
            f"""
            SELECT run_id, component_id, stage, level, message, context, created_at
            FROM processing_log
            {where_clause}
            ORDER BY created_at DESC, id DESC
            LIMIT ?
            """,
            [*params, limit],
        ).fetchall()

        return [
            {
                "run_id": row[0],
                "component_id": row[1],
                "stage": row[2],
                "level": row[3],
                "message": row[4],
                "context": json.loads(row[5]) if isinstance(row[5], str) else row[5],
                "created_at": row[6],
            }
            for row in rows
        ]

    # ==================== Statistics ====================

    def get_statistics(self) -> dict:
        """Get statistics for the CLI (formatted for display)."""
        total_keys = self.conn.execute("SELECT COUNT(*) FROM localizations").fetchone()[0] or 0

        # A record is incomplete when any locale is empty
        empty_checks = " OR ".join(f"{locale} = ''" for locale in LOCALES)
        incomplete_keys = (
            self.conn.execute(
                f"SELECT COUNT(*) FROM localizations WHERE {empty_checks}"
            ).fetchone()[0]
            or 0
        )

        # Keys whose text equals the key in every locale were never translated
        fallback_checks = " AND ".join(f"{locale} = key" for locale in LOCALES)
        fallback_keys = (
            self.conn.execute(
                f"SELECT COUNT(*) FROM localizations WHERE {fallback_checks}"
            ).fetchone()[0]
            or 0
        )

        total_components = self.conn.execute("SELECT COUNT(*) FROM components").fetchone()[0] or 0

        errors = (
            self.conn.execute(
                "SELECT COUNT(*) FROM processing_log WHERE level = 'ERROR'"
            ).fetchone()[0]
            or 0
        )

        return {
            "total_keys": total_keys,
            "incomplete_keys": incomplete_keys,
            "fallback_keys": fallback_keys,
            "total_components": total_components,
            "errors": errors,
        }
