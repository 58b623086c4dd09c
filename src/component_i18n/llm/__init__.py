"""
LLM provider abstraction layer.

Supports any OpenAI-compatible chat completions endpoint:
- OpenAI (default)
- OpenRouter
"""

from component_i18n.llm.base import LLMProvider, LLMResponse, parse_json_object
from component_i18n.llm.factory import LLMProviderType, create_llm_provider

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "parse_json_object",
    "LLMProviderType",
    "create_llm_provider",
]
