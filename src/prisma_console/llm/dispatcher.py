"""Send generation prompts to the configured LLM provider."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

import httpx

from prisma_console.config import CLIENT_NAME
from prisma_console.exceptions import ProviderError, UsageError
from prisma_console.llm.prompt import build_prompt
from prisma_console.llm.providers import LLMProvider, select_provider
from prisma_console.schema.loader import Schema

logger = logging.getLogger(__name__)


def require_query(user_query: object, function_name: str = "ai") -> str:
    """Return ``user_query`` if it is a non-empty string.

    Raises:
        UsageError: If the query is missing, empty or not a string
    """
    if not user_query or not isinstance(user_query, str):
        raise UsageError(function_name)
    return user_query


class CommandGenerator:
    """Turns natural language queries into raw completions.

    The provider is re-selected from the environment on every call, so
    exporting a different key mid-session takes effect on the next request.
    A failed call is never retried or routed to another provider.

    Example:
        >>> generator = CommandGenerator(schema)
        >>> raw = await generator.generate("find all users")
    """

    def __init__(
        self,
        schema: Schema,
        *,
        environ: Mapping[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        client_name: str = CLIENT_NAME,
    ) -> None:
        """Initialize generator.

        Args:
            schema: Loaded schema embedded in every prompt
            environ: Credential source. Defaults to ``os.environ``.
            transport: httpx transport override (tests use ``httpx.MockTransport``)
            client_name: Name the client instance is bound to in the console
        """
        self.schema = schema
        self.environ: Mapping[str, str] = os.environ if environ is None else environ
        self.transport = transport
        self.client_name = client_name

    def build_prompt(self, user_query: str) -> str:
        """Build the prompt for ``user_query`` against this generator's schema."""
        return build_prompt(self.schema.text, user_query, client_name=self.client_name)

    async def generate(self, user_query: object, *, function_name: str = "ai") -> str:
        """Generate a raw completion for ``user_query``.

        Args:
            user_query: The user's request. Anything other than a non-empty
                string is rejected before a provider is chosen.
            function_name: Console function name used in the usage message

        Returns:
            Completion text with surrounding whitespace stripped

        Raises:
            UsageError: If the query is missing or not a string
            ConfigError: If no provider credential is set
            ProviderError: If the provider call fails or returns a bad envelope
        """
        require_query(user_query, function_name)
        provider = select_provider(self.environ)
        prompt = self.build_prompt(user_query)
        return await self._dispatch(provider, prompt)

    async def _dispatch(self, provider: LLMProvider, prompt: str) -> str:
        request = provider.build_request(prompt)
        logger.info(f"Dispatching prompt to {provider.label} (model={provider.model})")

        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=None) as client:
                response = await client.post(
                    request.url, headers=request.headers, json=request.payload
                )
        except httpx.HTTPError as e:
            raise ProviderError(provider.label, str(e) or e.__class__.__name__) from e
        except UnicodeEncodeError as e:
            # header values (the API key among them) must be ASCII
            raise ProviderError(
                provider.label, f"request headers contain non-ASCII characters ({e.reason})"
            ) from e

        if not response.is_success:
            logger.debug(f"{provider.label} returned HTTP {response.status_code}")
            raise ProviderError(provider.label, response.text, status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise ProviderError(
                provider.label, "response body is not valid JSON", response.status_code
            ) from e

        return provider.parse_response(payload)
