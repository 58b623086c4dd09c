"""
Translation service interface and the translation-set model.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from component_i18n.database import LOCALES
from component_i18n.extraction.base import ExtractedReference


class TranslationSet(BaseModel):
    """Text of one key in every supported locale. All six are required."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    en: str = Field(description="English")
    es: str = Field(description="Spanish")
    fr: str = Field(description="French")
    de: str = Field(description="German")
    ja: str = Field(description="Japanese")
    zh: str = Field(description="Chinese (Simplified)")

    @classmethod
    def fallback(cls, text: str) -> TranslationSet:
        """Use the same text for every locale."""
        return cls(**{locale: text for locale in LOCALES})

    @classmethod
    def parse_entry(cls, data: Any) -> TranslationSet | None:
        """Validate one response entry; None if any locale is missing."""
        try:
            return cls.model_validate(data)
        except ValidationError:
            return None

    def as_dict(self) -> dict[str, str]:
        """Locale -> text mapping."""
        return {locale: getattr(self, locale) for locale in LOCALES}


class TranslationService(ABC):
    """
    Abstract translation service.

    A batch either succeeds, possibly without some keys, or fails as a
    whole by raising TranslationUnavailableError. Implementations make one
    attempt per batch.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Service name for logging."""
        ...

    @abstractmethod
    async def translate_keys(
        self, references: Sequence[ExtractedReference]
    ) -> dict[str, TranslationSet]:
        """
        Translate a batch of keys.

        Args:
            references: Keys with their usage context.

        Returns:
            Mapping of key -> TranslationSet for every key the service
            translated completely.

        Raises:
            TranslationUnavailableError: If the batch failed.
        """
        ...
