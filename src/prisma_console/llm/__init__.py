"""Prompt construction and LLM provider dispatch.

Three providers are supported, chosen by which credential is set:

    OPENROUTER_API_KEY  ->  OpenRouter (model from OPENROUTER_MODEL)
    OPENAI_API_KEY      ->  OpenAI gpt-4o-mini
    ANTHROPIC_API_KEY   ->  Anthropic Claude 3.5 Sonnet
"""

from prisma_console.llm.dispatcher import CommandGenerator
from prisma_console.llm.prompt import build_prompt
from prisma_console.llm.providers import (
    PROVIDER_PRIORITY,
    AnthropicProvider,
    LLMProvider,
    OpenAIProvider,
    OpenRouterProvider,
    select_provider,
)

__all__ = [
    "CommandGenerator",
    "build_prompt",
    "LLMProvider",
    "OpenRouterProvider",
    "OpenAIProvider",
    "AnthropicProvider",
    "PROVIDER_PRIORITY",
    "select_provider",
]
