"""
OpenAI-compatible LLM provider.

Talks to OpenAI directly or to any endpoint that speaks the same chat
completions API (OpenRouter, local gateways) through the openai SDK.
"""

from __future__ import annotations

import time
from typing import Any

from openai import AsyncOpenAI

from component_i18n.llm.base import LLMProvider, LLMResponse


class OpenAICompatibleProvider(LLMProvider):
    """
    Chat-completion provider for OpenAI-compatible APIs.

    Each call is a single attempt: the SDK's own retries are disabled so a
    failed request surfaces immediately to the caller.
    """

    OPENAI_URL = "https://api.openai.com/v1"
    OPENROUTER_URL = "https://openrouter.ai/api/v1"

    # Model aliases per endpoint
    OPENAI_MODELS = {
        "default": "gpt-4.1",
        "fast": "gpt-4.1-mini",
        "quality": "gpt-4.1",
    }

    OPENROUTER_MODELS = {
        "default": "openai/gpt-4.1",
        "fast": "openai/gpt-4.1-mini",
        "quality": "anthropic/claude-sonnet-4.5",
    }

    def __init__(
        self,
        api_key: str,
        model: str = "default",
        base_url: str | None = None,
        timeout: float = 30.0,
        provider_name: str = "openai",
    ):
        """
        Initialize the provider.

        Args:
            api_key: API key for the endpoint.
            model: Model alias or full model name.
            base_url: API base URL. Defaults to the endpoint for provider_name.
            timeout: Request timeout in seconds.
            provider_name: "openai" or "openrouter", used for defaults and logging.
        """
        self._provider_name = provider_name
        aliases = self.OPENROUTER_MODELS if provider_name == "openrouter" else self.OPENAI_MODELS
        self._model_name = aliases.get(model, model)

        if not base_url:
            base_url = self.OPENROUTER_URL if provider_name == "openrouter" else self.OPENAI_URL

        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
        )

    @property
    def name(self) -> str:
        """Provider name."""
        return self._provider_name

    @property
    def model(self) -> str:
        """Current model name."""
        return self._model_name

    async def complete(
        self,
        messages: list[dict[str, str]],
        *,
        temperature: float = 0.0,
        max_tokens: int = 4096,
        **kwargs: Any,
    ) -> LLMResponse:
        """
        Generate a completion.

        Args:
            messages: List of message dicts.
            temperature: Sampling temperature.
            max_tokens: Maximum output tokens.
            **kwargs: Additional options passed to the API.

        Returns:
            LLMResponse with content and usage stats.
        """
        start_time = time.perf_counter()

        response = await self._client.chat.completions.create(
            model=self._model_name,
            messages=messages,  # type: ignore[arg-type]
            temperature=temperature,
            max_tokens=max_tokens,
            **kwargs,
        )

        latency_ms = (time.perf_counter() - start_time) * 1000
        content = response.choices[0].message.content or ""
        usage = response.usage

        return LLMResponse(
            content=content.strip(),
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            model=self._model_name,
            latency_ms=latency_ms,
            metadata={
                "provider": self._provider_name,
                "finish_reason": response.choices[0].finish_reason,
            },
        )
