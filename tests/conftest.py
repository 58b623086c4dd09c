"""
Pytest configuration and fixtures
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Generator, Sequence
from pathlib import Path
from typing import Any

import pytest

from component_i18n.database import LOCALES, Database
from component_i18n.errors import TranslationUnavailableError
from component_i18n.extraction import ExtractedReference
from component_i18n.llm import LLMProvider, LLMResponse
from component_i18n.store import DuckDBLocalizationStore
from component_i18n.translation import TranslationService, TranslationSet


def translated(key: str) -> TranslationSet:
    """Deterministic fake translation: '<locale>:<key>' in every locale."""
    return TranslationSet(**{locale: f"{locale}:{key}" for locale in LOCALES})


class FakeTranslationService(TranslationService):
    """Translation service double recording every batch it receives."""

    def __init__(
        self,
        *,
        fail: bool = False,
        omit: Sequence[str] = (),
        delay: float = 0.0,
    ):
        self.fail = fail
        self.omit = set(omit)
        self.delay = delay
        self.calls: list[list[str]] = []

    @property
    def name(self) -> str:
        return "fake"

    async def translate_keys(
        self, references: Sequence[ExtractedReference]
    ) -> dict[str, TranslationSet]:
        self.calls.append([ref.key for ref in references])
        # Yield so concurrent runs interleave between reconcile and persist
        await asyncio.sleep(self.delay)
        if self.fail:
            raise TranslationUnavailableError("service down")
        return {ref.key: translated(ref.key) for ref in references if ref.key not in self.omit}


class FakeLLMProvider(LLMProvider):
    """LLM provider double returning canned replies."""

    def __init__(self, reply: str | dict | None = None, error: Exception | None = None, delay: float = 0.0):
        self.reply = reply
        self.error = error
        self.delay = delay
        self.requests: list[list[dict[str, str]]] = []

    @property
    def name(self) -> str:
        return "fake"

    @property
    def model(self) -> str:
        return "fake-model"

    async def complete(
        self,
        messages: list[dict[str, str]],
        *,
        temperature: float = 0.0,
        max_tokens: int = 4096,
        **kwargs: Any,
    ) -> LLMResponse:
        self.requests.append(messages)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        content = self.reply if isinstance(self.reply, str) else json.dumps(self.reply)
        return LLMResponse(content=content, model=self.model)


@pytest.fixture
def database(tmp_path: Path) -> Generator[Database, None, None]:
    """Create a file-backed database in a temporary directory."""
    db = Database(tmp_path / "localizations.duckdb", log_level="DEBUG")
    yield db
    db.close()


@pytest.fixture
def store(database: Database) -> DuckDBLocalizationStore:
    """Create an empty localization store."""
    return DuckDBLocalizationStore(database)


@pytest.fixture
def seeded_store(store: DuckDBLocalizationStore) -> DuckDBLocalizationStore:
    """Create a store holding the default catalog."""
    store.seed_defaults()
    return store


@pytest.fixture
def translator() -> FakeTranslationService:
    """Create a working translation service double."""
    return FakeTranslationService()


@pytest.fixture
def make_translator():
    """Factory for translation service doubles (fail, omit, delay)."""
    return FakeTranslationService


@pytest.fixture
def make_llm():
    """Factory for LLM provider doubles (reply, error, delay)."""
    return FakeLLMProvider


@pytest.fixture
def fake_translation():
    """The deterministic translation the service double produces for a key."""
    return translated


@pytest.fixture
def log_records() -> list[tuple[str, str, dict[str, Any]]]:
    """Collect (level, message, context) tuples from log callbacks."""
    return []


@pytest.fixture
def log_callback(log_records: list[tuple[str, str, dict[str, Any]]]):
    """Log callback appending to log_records."""

    def callback(level: str, message: str, context: dict[str, Any]) -> None:
        log_records.append((level, message, context))

    return callback
