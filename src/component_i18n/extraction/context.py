"""
Heuristic usage-context detection for translation calls.

Looks at the raw text around a call site; no parsing is involved, so a
marker that happens to fall inside the window wins even when it belongs to
a neighbouring element.
"""

from __future__ import annotations

from component_i18n.extraction.base import ContextLabel

# Characters inspected on each side of the call site
WINDOW_SIZE = 50

# Checked in order; the first label with a marker in the window wins
CONTEXT_MARKERS: tuple[tuple[ContextLabel, tuple[str, ...]], ...] = (
    (ContextLabel.BUTTON, ("<button", "onclick")),
    (ContextLabel.PLACEHOLDER, ("placeholder",)),
    (ContextLabel.HEADING, ("<h1", "<h2", "<h3")),
    (ContextLabel.LABEL, ("<label",)),
    (ContextLabel.CONTENT, ("<p>", "<span")),
)


def context_window(source: str, offset: int, size: int = WINDOW_SIZE) -> str:
    """Return the lowercased text within `size` characters of offset."""
    start = max(0, offset - size)
    end = min(len(source), offset + size)
    return source[start:end].lower()


def classify_context(source: str, offset: int) -> ContextLabel:
    """
    Classify the call site at offset.

    Args:
        source: Full component source.
        offset: Character offset of the call.

    Returns:
        The first matching ContextLabel, or GENERAL.
    """
    window = context_window(source, offset)
    for label, markers in CONTEXT_MARKERS:
        if any(marker in window for marker in markers):
            return label
    return ContextLabel.GENERAL
