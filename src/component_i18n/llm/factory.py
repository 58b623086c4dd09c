"""
LLM provider factory.

Creates the appropriate LLM provider based on configuration.
"""

from __future__ import annotations

from enum import Enum

from component_i18n.llm.base import LLMProvider


class LLMProviderType(str, Enum):
    """Available LLM provider types."""

    OPENAI = "openai"
    OPENROUTER = "openrouter"


def create_llm_provider(
    provider_type: LLMProviderType | str,
    *,
    api_key: str | None = None,
    model: str = "default",
    **kwargs,
) -> LLMProvider:
    """
    Create an LLM provider instance.

    Args:
        provider_type: Type of provider to create (openai or openrouter).
        api_key: API key for the endpoint.
        model: Model name or alias.
        **kwargs: Additional provider-specific options (base_url, timeout).

    Returns:
        LLMProvider instance.

    Raises:
        ValueError: If provider_type is invalid or the API key is missing.

    Examples:
        provider = create_llm_provider("openai", api_key="sk-...", model="fast")

        provider = create_llm_provider(
            "openrouter",
            api_key="sk-or-...",
            model="anthropic/claude-sonnet-4.5",
        )
    """
    if isinstance(provider_type, str):
        provider_type = provider_type.lower().replace("_", "-")
        try:
            provider_type = LLMProviderType(provider_type)
        except ValueError:
            valid = [p.value for p in LLMProviderType]
            raise ValueError(
                f"Invalid provider type: {provider_type}. Valid options: {valid}"
            ) from None

    if not api_key:
        raise ValueError(f"{provider_type.value} provider requires an API key")

    from component_i18n.llm.openai_compat import OpenAICompatibleProvider

    return OpenAICompatibleProvider(
        api_key=api_key,
        model=model,
        provider_name=provider_type.value,
        **kwargs,
    )
