"""
Regex-based extraction of t() calls from generated React source.
"""

from __future__ import annotations

import re

from component_i18n.extraction.base import ExtractedReference, KeyExtractor
from component_i18n.extraction.context import classify_context

# t('key'), t("key") or t(`key`). The literal may not contain any quote
# character, so a key with an embedded quote does not match at all.
T_CALL_PATTERN = re.compile(r"""t\(['"`]([^'"`]+)['"`]\)""")


class RegexKeyExtractor(KeyExtractor):
    """
    Find translation keys by scanning for t() call syntax.

    Any captured literal is accepted as a key, including ones with spaces or
    punctuation. Calls such as `alert('x')` also match because the pattern
    is not anchored to a word boundary.
    """

    def __init__(self, pattern: re.Pattern[str] = T_CALL_PATTERN):
        self._pattern = pattern

    @property
    def name(self) -> str:
        """Extractor name."""
        return "regex"

    def extract(self, source: str) -> list[ExtractedReference]:
        """Extract references in first-seen order, one per key."""
        references: list[ExtractedReference] = []
        seen: set[str] = set()

        for match in self._pattern.finditer(source or ""):
            key = match.group(1)
            if key in seen:
                continue
            seen.add(key)
            references.append(
                ExtractedReference(
                    key=key,
                    context=classify_context(source, match.start()),
                    offset=match.start(),
                )
            )

        return references


def extract_references(source: str) -> list[ExtractedReference]:
    """Extract references with the default regex extractor."""
    return RegexKeyExtractor().extract(source)
