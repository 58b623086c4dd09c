"""
Base classes for LLM providers.

Defines the provider interface and the JSON-reply helpers shared by callers
that ask the model for structured output.
"""

from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


@dataclass
class LLMResponse:
    """Response from an LLM provider."""

    content: str
    input_tokens: int = 0
    output_tokens: int = 0
    model: str = ""
    latency_ms: float = 0.0
    metadata: dict[str, Any] = field(default_factory=dict)


def parse_json_object(content: str) -> dict[str, Any]:
    """
    Parse a JSON object out of a model reply.

    Accepts bare JSON, JSON wrapped in a markdown code fence, or JSON
    surrounded by prose.

    Raises:
        ValueError: If no JSON object can be recovered.
    """
    content = (content or "").strip()
    if content.startswith("```"):
        lines = content.split("\n")
        content = "\n".join(lines[1:-1]) if len(lines) > 2 else ""

    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        match = _JSON_OBJECT_RE.search(content)
        if not match:
            raise ValueError("Model reply contains no JSON object") from None
        try:
            data = json.loads(match.group())
        except json.JSONDecodeError as e:
            raise ValueError(f"Model reply contains malformed JSON: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data


class LLMProvider(ABC):
    """Abstract base class for chat-completion providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name for logging and identification."""
        ...

    @property
    @abstractmethod
    def model(self) -> str:
        """Current model name."""
        ...

    @abstractmethod
    async def complete(
        self,
        messages: list[dict[str, str]],
        *,
        temperature: float = 0.0,
        max_tokens: int = 4096,
        **kwargs: Any,
    ) -> LLMResponse:
        """
        Generate a completion from the LLM.

        Args:
            messages: List of message dicts with 'role' and 'content' keys.
            temperature: Sampling temperature (0.0 to 2.0).
            max_tokens: Maximum tokens to generate.
            **kwargs: Additional provider-specific options.

        Returns:
            LLMResponse with the generated content and metadata.
        """
        ...

    async def chat(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float = 0.0,
        max_tokens: int = 4096,
        **kwargs: Any,
    ) -> LLMResponse:
        """Send one system + user prompt pair."""
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
        return await self.complete(
            messages,
            temperature=temperature,
            max_tokens=max_tokens,
            **kwargs,
        )

    async def chat_json(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float = 0.0,
        max_tokens: int = 4096,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """
        Send a prompt pair and parse the reply as a JSON object.

        Raises:
            ValueError: If the reply does not contain a JSON object.
        """
        response = await self.chat(
            system_prompt,
            user_prompt,
            temperature=temperature,
            max_tokens=max_tokens,
            **kwargs,
        )
        return parse_json_object(response.content)
