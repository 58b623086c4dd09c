"""
Exceptions raised by the localization pipeline.
"""

from __future__ import annotations


class InvalidLocaleError(ValueError):
    """Requested locale is not one of the supported locales."""

    def __init__(self, locale: str):
        self.locale = locale
        super().__init__(f"Invalid locale: {locale}")


class InvalidFieldError(ValueError):
    """Requested record field cannot be read or written."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Invalid field: {field}")


class TranslationUnavailableError(Exception):
    """The translation service failed for a whole batch."""


class ExtractionError(Exception):
    """Source text could not be scanned for translation keys."""


class DuplicateKeyError(ValueError):
    """Another localization record already uses the key."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Key already exists: {key}")
