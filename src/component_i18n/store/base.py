"""
Localization store interface and the renderer lookup helper.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Mapping

from component_i18n.database import LocalizationRecord

Lookup = Callable[[str], str]


class LocalizationStore(ABC):
    """
    Key -> translation-set persistence.

    At most one record exists per key. Records are created only through
    upsert_if_absent, which never overwrites an existing record.
    """

    @abstractmethod
    def upsert_if_absent(self, key: str, translations: Mapping[str, str]) -> bool:
        """
        Create a record for key unless one exists.

        Returns:
            True if a new record was created, False if the key already existed.
        """
        ...

    @abstractmethod
    def get(self, key: str) -> LocalizationRecord | None:
        """Return the record for key, or None."""
        ...

    @abstractmethod
    def lookup_all(self) -> list[LocalizationRecord]:
        """Return every record ordered by key."""
        ...

    @abstractmethod
    def get_by_locale(self, locale: str) -> dict[str, str]:
        """
        Return key -> text for one locale.

        Raises:
            InvalidLocaleError: If locale is not supported.
        """
        ...

    def existing_keys(self, keys: Iterable[str]) -> set[str]:
        """Return the subset of keys that already have a record."""
        wanted = set(keys)
        return {record.key for record in self.lookup_all() if record.key in wanted}

    def lookup(self, locale: str) -> Lookup:
        """Build the renderer lookup for one locale."""
        return make_lookup(self.get_by_locale(locale))


def make_lookup(translations: Mapping[str, str]) -> Lookup:
    """
    Build a total key -> text function.

    Unknown keys and empty translations resolve to the key itself, so the
    renderer always has something to display.
    """

    def lookup(key: str) -> str:
        return translations.get(key) or key

    return lookup
