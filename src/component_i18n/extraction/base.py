"""
Base classes and interfaces for translation-key extractors.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum


class ContextLabel(str, Enum):
    """Where a key appears in the component, used as a translation hint."""

    BUTTON = "button"
    PLACEHOLDER = "placeholder"
    HEADING = "heading"
    LABEL = "label"
    CONTENT = "content"
    GENERAL = "general"
    # Only assigned to the keys added for navigation components
    NAVIGATION = "navigation"


@dataclass
class ExtractedReference:
    """A translation key found in component source."""

    key: str
    context: ContextLabel = ContextLabel.GENERAL
    fallback_text: str = ""
    offset: int = 0
    translations: dict[str, str] | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not self.fallback_text:
            self.fallback_text = self.key


class KeyExtractor(ABC):
    """
    Abstract base class for key extractors.

    Implementations return references in first-seen order with each key
    appearing once. Source without any translation calls yields an empty
    list, never an error.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Extractor name."""
        ...

    @abstractmethod
    def extract(self, source: str) -> list[ExtractedReference]:
        """Extract translation keys from component source."""
        ...

    def extract_keys(self, source: str) -> list[str]:
        """Extract only the key strings."""
        return [ref.key for ref in self.extract(source)]
