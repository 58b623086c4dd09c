"""Translation-key extraction from generated component source."""

from component_i18n.extraction.base import ContextLabel, ExtractedReference, KeyExtractor
from component_i18n.extraction.context import classify_context
from component_i18n.extraction.regex_extractor import RegexKeyExtractor, extract_references

__all__ = [
    "ContextLabel",
    "ExtractedReference",
    "KeyExtractor",
    "RegexKeyExtractor",
    "classify_context",
    "extract_references",
]
