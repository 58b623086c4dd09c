"""
component-i18n: localization pipeline for LLM-generated React components.

This package provides tools for:
- Extracting t('key') calls from generated component source
- Translating new keys into six locales with an LLM in one batch
- Storing translations idempotently in DuckDB
- Tracking which keys each component depends on
"""

__version__ = "0.1.0"

from component_i18n.config import Settings, load_config
from component_i18n.database import LOCALES, ComponentManifest, Database, LocalizationRecord
from component_i18n.errors import (
    DuplicateKeyError,
    ExtractionError,
    InvalidFieldError,
    InvalidLocaleError,
    TranslationUnavailableError,
)
from component_i18n.extraction import ContextLabel, ExtractedReference, RegexKeyExtractor
from component_i18n.pipeline import ComponentResult, LocalizationPipeline, PipelineResult
from component_i18n.store import DuckDBLocalizationStore, LocalizationStore, make_lookup
from component_i18n.translation import LLMKeyTranslator, TranslationService, TranslationSet

__all__ = [
    # Config
    "Settings",
    "load_config",
    # Database
    "LOCALES",
    "Database",
    "LocalizationRecord",
    "ComponentManifest",
    # Errors
    "DuplicateKeyError",
    "ExtractionError",
    "InvalidFieldError",
    "InvalidLocaleError",
    "TranslationUnavailableError",
    # Extraction
    "ContextLabel",
    "ExtractedReference",
    "RegexKeyExtractor",
    # Store
    "LocalizationStore",
    "DuckDBLocalizationStore",
    "make_lookup",
    # Translation
    "TranslationService",
    "TranslationSet",
    "LLMKeyTranslator",
    # Pipeline
    "LocalizationPipeline",
    "PipelineResult",
    "ComponentResult",
]
