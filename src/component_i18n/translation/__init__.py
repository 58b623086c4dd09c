"""Machine translation of localization keys."""

from component_i18n.translation.base import TranslationService, TranslationSet
from component_i18n.translation.translator import LLMKeyTranslator, TextTranslation

__all__ = [
    "LLMKeyTranslator",
    "TextTranslation",
    "TranslationService",
    "TranslationSet",
]
