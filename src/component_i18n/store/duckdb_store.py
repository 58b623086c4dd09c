"""
DuckDB-backed localization store.

Implements LocalizationStore on top of the `localizations` table of a
Database. The database connection is owned by the caller.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from component_i18n.database import LocalizationRecord
from component_i18n.store.base import LocalizationStore
from component_i18n.store.seed import DEFAULT_LOCALIZATIONS

if TYPE_CHECKING:
    from component_i18n.database import Database


class DuckDBLocalizationStore(LocalizationStore):
    """DuckDB-backed store implementing the localization store contract."""

    def __init__(self, db: Database):
        """
        Initialize DuckDB store.

        Args:
            db: Database instance with the localizations table.
        """
        self.db = db

    def upsert_if_absent(self, key: str, translations: Mapping[str, str]) -> bool:
        """
        Create a record for key unless one exists.

        A conflicting insert is treated as "already exists"; the stored
        record is left untouched.
        """
        record_id = self.db.insert_localization_if_absent(key, dict(translations))
        return record_id is not None

    def lookup_all(self) -> list[LocalizationRecord]:
        """Return every record ordered by key."""
        return self.db.get_all_localizations()

    def get_by_locale(self, locale: str) -> dict[str, str]:
        """Return key -> text for one locale."""
        return self.db.get_locale_translations(locale)

    def existing_keys(self, keys: Iterable[str]) -> set[str]:
        """Return the subset of keys that already have a record."""
        return self.db.get_existing_keys(keys)

    def get(self, key: str) -> LocalizationRecord | None:
        """Get one record by key."""
        return self.db.get_localization(key)

    def update(self, record_id: int, field: str, value: str) -> bool:
        """
        Edit one field of a record.

        Raises:
            InvalidFieldError: If field is not key or a supported locale.
            DuplicateKeyError: If renaming to a key another record uses.
        """
        return self.db.update_localization(record_id, field, value)

    def delete(self, record_id: int) -> bool:
        """Delete a record by ID."""
        return self.db.delete_localization(record_id)

    def seed_defaults(self) -> int:
        """
        Insert the default demo catalog.

        Returns:
            Number of records created; existing keys are skipped.
        """
        created = 0
        for key, translations in DEFAULT_LOCALIZATIONS.items():
            if self.upsert_if_absent(key, translations):
                created += 1
        return created
