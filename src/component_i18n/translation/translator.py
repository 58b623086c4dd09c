"""
Key translator using LLM providers.

Turns semantic keys such as `submit_button` into natural UI text in all
supported locales with a single request per batch.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from component_i18n.errors import TranslationUnavailableError
from component_i18n.extraction.base import ExtractedReference
from component_i18n.llm import LLMProvider, LLMProviderType, create_llm_provider
from component_i18n.translation.base import TranslationService, TranslationSet

LogCallback = Callable[[str, str, dict[str, Any]], None]

KEY_TRANSLATION_PROMPT = """You are a professional UI/UX translator and localization expert.

You receive semantic keys from a React component and turn each one into natural,
user-friendly interface text in 6 languages:
- en: English, clear and natural UI language
- es: Spanish, professional and culturally appropriate
- fr: French, formal when appropriate, natural phrasing
- de: German, proper capitalization, formal/informal as needed
- ja: Japanese, polite form suitable for UI
- zh: Chinese, Simplified characters, concise

Use the context of each key:
- button: action-oriented (Submit, Cancel, Save)
- heading: title case (Welcome Back, Contact Information)
- placeholder: instructional (Enter your email, Type a message)
- label: clear and descriptive (Email Address, Full Name)
- content: natural, conversational
- navigation: short menu entries (Home, About)
- general: infer from the key itself

Examples:
- submit_button -> "Submit" / "Enviar" / "Soumettre"
- enter_email -> "Enter your email" / "Ingresa tu email" / "Entrez votre e-mail"
- contact_us -> "Contact Us" / "Contáctanos" / "Contactez-nous"

Keep the tone consistent across all keys of the request.
Respond ONLY with a JSON object of this shape, one entry per key, no other text:
{"translations": {"<key>": {"en": "...", "es": "...", "fr": "...", "de": "...", "ja": "...", "zh": "..."}}}"""

TEXT_TRANSLATION_PROMPT = """You are a professional translator specializing in UI/UX localization for web applications.

Translate the given English interface text into en (keep original), es, fr, de, ja and zh (Simplified).
Use natural native-speaker phrasing, keep translations concise for UI space, and use the
imperative for buttons and actions.

Respond ONLY with a JSON object:
{"translations": {"en": "...", "es": "...", "fr": "...", "de": "...", "ja": "...", "zh": "..."}, "context": "<button|label|message|...>"}"""


@dataclass
class TextTranslation:
    """Result of translating a single piece of UI text."""

    text: str
    translations: TranslationSet
    context: str
    fallback: bool = False
    error: str | None = None


class LLMKeyTranslator(TranslationService):
    """
    Translates batches of keys with an LLM provider.

    Each batch is one request with no retry. A request that fails, times
    out, or returns something other than a JSON object raises
    TranslationUnavailableError; entries missing a locale are dropped.
    """

    def __init__(
        self,
        *,
        provider: LLMProviderType | str = LLMProviderType.OPENAI,
        api_key: str | None = None,
        model: str = "default",
        base_url: str | None = None,
        temperature: float = 0.0,
        max_tokens: int = 4096,
        timeout: float = 30.0,
        llm: LLMProvider | None = None,
        log_callback: LogCallback | None = None,
    ):
        """
        Initialize key translator.

        Args:
            provider: LLM provider type ("openai" or "openrouter").
            api_key: API key for the provider.
            model: Model alias or full model name.
            base_url: Override the provider endpoint.
            temperature: Sampling temperature.
            max_tokens: Maximum output tokens.
            timeout: Seconds before a request is abandoned.
            llm: Ready-made provider; skips provider creation when given.
            log_callback: Optional callback accepting (level, message, context).
        """
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._timeout = timeout
        self._log_callback = log_callback

        if llm is None:
            llm = create_llm_provider(
                provider,
                api_key=api_key,
                model=model,
                base_url=base_url or None,
                timeout=timeout,
            )
        self._provider = llm

    @property
    def name(self) -> str:
        """Service name."""
        return f"llm:{self._provider.name}"

    @property
    def model(self) -> str:
        """Get current model name."""
        return self._provider.model

    def _log(self, level: str, message: str, context: dict[str, Any] | None = None) -> None:
        """Log a message via callback if available."""
        if self._log_callback:
            self._log_callback(level, message, context or {})

    async def _request(self, system_prompt: str, user_prompt: str) -> dict[str, Any]:
        """Run one JSON request under the timeout."""
        try:
            return await asyncio.wait_for(
                self._provider.chat_json(
                    system_prompt,
                    user_prompt,
                    temperature=self._temperature,
                    max_tokens=self._max_tokens,
                ),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            raise TranslationUnavailableError(
                f"Translation request timed out after {self._timeout:.0f}s"
            ) from None
        except Exception as e:
            raise TranslationUnavailableError(f"Translation request failed: {e}") from e

    async def translate_keys(
        self, references: Sequence[ExtractedReference]
    ) -> dict[str, TranslationSet]:
        """
        Translate a batch of keys in one request.

        Args:
            references: Keys with their usage context.

        Returns:
            Mapping of key -> TranslationSet for completely translated keys.

        Raises:
            TranslationUnavailableError: If the request failed.
        """
        if not references:
            return {}

        keys_list = "\n".join(
            f'- "{ref.key}" (context: {ref.context.value})' for ref in references
        )
        user_prompt = f"""Translate these semantic keys into natural UI text in all 6 languages:

{keys_list}

Return ONLY the JSON object."""

        data = await self._request(KEY_TRANSLATION_PROMPT, user_prompt)

        entries = data.get("translations", data)
        if not isinstance(entries, dict):
            raise TranslationUnavailableError("Translation response has no translations object")

        translations: dict[str, TranslationSet] = {}
        incomplete: list[str] = []
        for ref in references:
            entry = TranslationSet.parse_entry(entries.get(ref.key))
            if entry is None:
                incomplete.append(ref.key)
                continue
            translations[ref.key] = entry

        if incomplete:
            self._log(
                "WARNING",
                f"Translation response missing {len(incomplete)} of {len(references)} keys",
                {"keys": incomplete, "model": self.model},
            )
        else:
            self._log(
                "DEBUG",
                f"Translated {len(translations)} keys",
                {"model": self.model},
            )

        return translations

    async def translate_text(self, text: str, context: str | None = None) -> TextTranslation:
        """
        Translate one English UI string into every locale.

        Falls back to the original text in every locale when the request
        fails, so the caller always gets a usable result.
        """
        user_prompt = f"""Translate this UI text into all 6 languages: "{text}"

Context: {context or "General UI text"}"""

        try:
            data = await self._request(TEXT_TRANSLATION_PROMPT, user_prompt)
            translations = TranslationSet.parse_entry(data.get("translations"))
            if translations is None:
                raise TranslationUnavailableError("Translation response is missing locales")
        except TranslationUnavailableError as e:
            self._log("WARNING", f"Text translation failed, using fallback: {e}", {"text": text})
            return TextTranslation(
                text=text,
                translations=TranslationSet.fallback(text),
                context="fallback",
                fallback=True,
                error=str(e),
            )

        return TextTranslation(
            text=text,
            translations=translations,
            context=str(data.get("context") or context or "general"),
        )
