"""LLM provider variants.

Each provider knows how to turn a prompt into an HTTP request and how to pull
the completion text out of its response envelope. Sending the request is left
to :class:`~prisma_console.llm.dispatcher.CommandGenerator`, so the providers
themselves stay free of I/O.

Example:
    >>> provider = select_provider({"OPENAI_API_KEY": "sk-..."})
    >>> provider.name
    'openai'
    >>> request = provider.build_request("find all users")
    >>> request.url
    'https://api.openai.com/v1/chat/completions'
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, ClassVar

from pydantic import BaseModel, Field, ValidationError

from prisma_console.config import (
    ANTHROPIC_API_KEY,
    OPENAI_API_KEY,
    OPENROUTER_API_KEY,
    OPENROUTER_MODEL,
)
from prisma_console.core.types import ProviderRequest
from prisma_console.exceptions import ConfigError, ProviderError

TEMPERATURE = 0.3
MAX_TOKENS = 500


# === Response envelopes ===


class _ChatMessage(BaseModel):
    content: str


class _ChatChoice(BaseModel):
    message: _ChatMessage


class ChatCompletionEnvelope(BaseModel):
    """OpenAI-compatible chat completion response (OpenAI, OpenRouter)."""

    choices: list[_ChatChoice] = Field(min_length=1)


class _ContentBlock(BaseModel):
    type: str = "text"
    text: str


class AnthropicMessageEnvelope(BaseModel):
    """Anthropic messages API response."""

    content: list[_ContentBlock] = Field(min_length=1)


# === Providers ===


class LLMProvider(ABC):
    """Interface for completion providers.

    Subclasses declare which environment variable holds their credential;
    :func:`select_provider` uses that to pick one.
    """

    name: ClassVar[str]
    label: ClassVar[str]
    credential_env: ClassVar[str]
    endpoint: ClassVar[str]
    default_model: ClassVar[str]

    def __init__(self, api_key: str, model: str | None = None) -> None:
        self.api_key = api_key
        self.model = model or self.default_model

    @classmethod
    def from_environ(cls, environ: Mapping[str, str]) -> LLMProvider:
        """Build the provider from its credential in ``environ``."""
        return cls(environ[cls.credential_env])

    @abstractmethod
    def build_request(self, prompt: str) -> ProviderRequest:
        """Build the HTTP request for a single-turn prompt."""
        ...

    @abstractmethod
    def extract_text(self, payload: Any) -> str:
        """Pull the completion text out of a decoded response body.

        Raises:
            pydantic.ValidationError: If the envelope does not match
        """
        ...

    def parse_response(self, payload: Any) -> str:
        """Return the trimmed completion text from a decoded response body.

        Raises:
            ProviderError: If the envelope is malformed
        """
        try:
            return self.extract_text(payload).strip()
        except ValidationError as e:
            raise ProviderError(
                self.label, f"unexpected response format ({e.error_count()} errors)"
            ) from e

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model!r})"


class OpenRouterProvider(LLMProvider):
    """OpenRouter chat completions. Model can be overridden with OPENROUTER_MODEL."""

    name = "openrouter"
    label = "OpenRouter"
    credential_env = OPENROUTER_API_KEY
    endpoint = "https://openrouter.ai/api/v1/chat/completions"
    default_model = "anthropic/claude-3.5-sonnet"

    REFERER = "https://github.com/prisma-console"
    TITLE = "Prisma Console AI"

    @classmethod
    def from_environ(cls, environ: Mapping[str, str]) -> LLMProvider:
        return cls(environ[cls.credential_env], model=environ.get(OPENROUTER_MODEL) or None)

    def build_request(self, prompt: str) -> ProviderRequest:
        return ProviderRequest(
            provider=self.name,
            url=self.endpoint,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.api_key}",
                "HTTP-Referer": self.REFERER,
                "X-Title": self.TITLE,
            },
            payload={
                "model": self.model,
                "messages": [{"role": "user", "content": prompt}],
                "temperature": TEMPERATURE,
                "max_tokens": MAX_TOKENS,
            },
        )

    def extract_text(self, payload: Any) -> str:
        return ChatCompletionEnvelope.model_validate(payload).choices[0].message.content


class OpenAIProvider(LLMProvider):
    """OpenAI chat completions."""

    name = "openai"
    label = "OpenAI"
    credential_env = OPENAI_API_KEY
    endpoint = "https://api.openai.com/v1/chat/completions"
    default_model = "gpt-4o-mini"

    def build_request(self, prompt: str) -> ProviderRequest:
        return ProviderRequest(
            provider=self.name,
            url=self.endpoint,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.api_key}",
            },
            payload={
                "model": self.model,
                "messages": [{"role": "user", "content": prompt}],
                "temperature": TEMPERATURE,
                "max_tokens": MAX_TOKENS,
            },
        )

    def extract_text(self, payload: Any) -> str:
        return ChatCompletionEnvelope.model_validate(payload).choices[0].message.content


class AnthropicProvider(LLMProvider):
    """Anthropic messages API."""

    name = "anthropic"
    label = "Anthropic"
    credential_env = ANTHROPIC_API_KEY
    endpoint = "https://api.anthropic.com/v1/messages"
    default_model = "claude-3-5-sonnet-20241022"

    API_VERSION = "2023-06-01"

    def build_request(self, prompt: str) -> ProviderRequest:
        return ProviderRequest(
            provider=self.name,
            url=self.endpoint,
            headers={
                "Content-Type": "application/json",
                "x-api-key": self.api_key,
                "anthropic-version": self.API_VERSION,
            },
            payload={
                "model": self.model,
                "max_tokens": MAX_TOKENS,
                "messages": [{"role": "user", "content": prompt}],
            },
        )

    def extract_text(self, payload: Any) -> str:
        return AnthropicMessageEnvelope.model_validate(payload).content[0].text


# First provider whose credential is set wins.
PROVIDER_PRIORITY: tuple[type[LLMProvider], ...] = (
    OpenRouterProvider,
    OpenAIProvider,
    AnthropicProvider,
)


def select_provider(environ: Mapping[str, str]) -> LLMProvider:
    """Pick the provider for one dispatch.

    Credentials are checked in :data:`PROVIDER_PRIORITY` order; an empty
    value counts as unset.

    Args:
        environ: Environment mapping (usually ``os.environ``)

    Returns:
        The configured provider

    Raises:
        ConfigError: If no credential is set
    """
    for provider_cls in PROVIDER_PRIORITY:
        if environ.get(provider_cls.credential_env):
            return provider_cls.from_environ(environ)
    raise ConfigError.missing_credentials()
