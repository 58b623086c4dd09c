"""Persistence of localization records."""

from component_i18n.store.base import LocalizationStore, Lookup, make_lookup
from component_i18n.store.duckdb_store import DuckDBLocalizationStore
from component_i18n.store.seed import DEFAULT_LOCALIZATIONS

__all__ = [
    "DEFAULT_LOCALIZATIONS",
    "DuckDBLocalizationStore",
    "LocalizationStore",
    "Lookup",
    "make_lookup",
]
