"""Tests for CommandGenerator dispatch."""

import httpx
import pytest

from prisma_console.exceptions import ConfigError, ProviderError, UsageError
from prisma_console.llm.dispatcher import CommandGenerator, require_query
from prisma_console.schema.loader import Schema

ENDPOINTS = {
    "OPENROUTER_API_KEY": "https://openrouter.ai/api/v1/chat/completions",
    "OPENAI_API_KEY": "https://api.openai.com/v1/chat/completions",
    "ANTHROPIC_API_KEY": "https://api.anthropic.com/v1/messages",
}


class TestRequireQuery:
    """Query validation before any provider is chosen."""

    @pytest.mark.parametrize("query", [None, "", 42, ["find users"]])
    def test_rejects_missing_or_non_string(self, query: object) -> None:
        with pytest.raises(UsageError) as exc_info:
            require_query(query, "run")
        assert exc_info.value.usage_lines[0] == "Usage: run('your natural language query')"

    def test_accepts_string(self) -> None:
        assert require_query("find all users") == "find all users"


class TestCommandGenerator:
    """Provider dispatch through an injected transport."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("env_var", list(ENDPOINTS))
    async def test_single_credential_hits_its_endpoint(
        self, schema: Schema, make_transport, openai_reply, anthropic_reply, env_var: str
    ) -> None:
        """Exactly one request goes to the configured provider's endpoint."""
        body = (
            anthropic_reply("await prisma.user.count()")
            if env_var == "ANTHROPIC_API_KEY"
            else openai_reply("await prisma.user.count()")
        )
        transport = make_transport(body)
        generator = CommandGenerator(schema, environ={env_var: "key"}, transport=transport)

        raw = await generator.generate("count users")

        assert raw == "await prisma.user.count()"
        assert transport.calls == 1
        assert str(transport.requests[0].url) == ENDPOINTS[env_var]
        assert transport.requests[0].method == "POST"

    @pytest.mark.asyncio
    async def test_no_credentials_makes_no_request(self, schema: Schema, make_transport) -> None:
        """ConfigError is raised before the transport is touched."""
        transport = make_transport({})
        generator = CommandGenerator(schema, environ={}, transport=transport)

        with pytest.raises(ConfigError):
            await generator.generate("find all users")
        assert transport.calls == 0

    @pytest.mark.asyncio
    async def test_usage_error_makes_no_request(self, schema: Schema, make_transport) -> None:
        """A missing query is rejected without a provider call."""
        transport = make_transport({})
        generator = CommandGenerator(schema, environ={"OPENAI_API_KEY": "k"}, transport=transport)

        with pytest.raises(UsageError):
            await generator.generate(None)
        assert transport.calls == 0

    @pytest.mark.asyncio
    async def test_prompt_sent_to_provider(
        self, schema: Schema, make_transport, openai_reply
    ) -> None:
        """The request carries the prompt with schema and query embedded."""
        transport = make_transport(openai_reply("x"))
        generator = CommandGenerator(schema, environ={"OPENAI_API_KEY": "k"}, transport=transport)

        await generator.generate("find all users")

        content = transport.last_json()["messages"][0]["content"]
        assert schema.text in content
        assert "USER REQUEST: find all users" in content
        assert transport.requests[0].headers["Authorization"] == "Bearer k"

    @pytest.mark.asyncio
    async def test_error_status_raises_provider_error(
        self, schema: Schema, make_transport
    ) -> None:
        """Non-2xx responses raise ProviderError with the body text."""
        transport = make_transport(status_code=401, text="invalid api key")
        generator = CommandGenerator(schema, environ={"OPENAI_API_KEY": "k"}, transport=transport)

        with pytest.raises(ProviderError) as exc_info:
            await generator.generate("find all users")

        assert exc_info.value.message == "OpenAI API error: invalid api key"
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_no_fallback_after_failure(self, schema: Schema, make_transport) -> None:
        """A failed call is not retried against the next provider."""
        transport = make_transport(status_code=500, text="upstream down")
        environ = {"OPENROUTER_API_KEY": "a", "OPENAI_API_KEY": "b", "ANTHROPIC_API_KEY": "c"}
        generator = CommandGenerator(schema, environ=environ, transport=transport)

        with pytest.raises(ProviderError) as exc_info:
            await generator.generate("find all users")

        assert exc_info.value.provider == "OpenRouter"
        assert transport.calls == 1

    @pytest.mark.asyncio
    async def test_non_json_body(self, schema: Schema, make_transport) -> None:
        """A 200 response that is not JSON raises ProviderError."""
        transport = make_transport(status_code=200, text="<html>gateway</html>")
        generator = CommandGenerator(schema, environ={"OPENAI_API_KEY": "k"}, transport=transport)

        with pytest.raises(ProviderError) as exc_info:
            await generator.generate("find all users")
        assert "not valid JSON" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_transport_failure(self, schema: Schema) -> None:
        """Connection errors surface as ProviderError."""

        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        generator = CommandGenerator(
            schema,
            environ={"ANTHROPIC_API_KEY": "k"},
            transport=httpx.MockTransport(refuse),
        )

        with pytest.raises(ProviderError) as exc_info:
            await generator.generate("find all users")
        assert "connection refused" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_non_ascii_credential(self, schema: Schema, make_transport) -> None:
        """A key that cannot go into an HTTP header raises ProviderError."""
        transport = make_transport({})
        generator = CommandGenerator(
            schema, environ={"OPENAI_API_KEY": "sk-clé"}, transport=transport
        )

        with pytest.raises(ProviderError) as exc_info:
            await generator.generate("count users")

        assert exc_info.value.provider == "OpenAI"
        assert "non-ASCII" in exc_info.value.message
        assert transport.calls == 0

    @pytest.mark.asyncio
    async def test_provider_reselected_each_call(
        self, schema: Schema, make_transport, openai_reply
    ) -> None:
        """Changing credentials between calls switches provider."""
        transport = make_transport(openai_reply("x"))
        environ = {"OPENAI_API_KEY": "k"}
        generator = CommandGenerator(schema, environ=environ, transport=transport)

        await generator.generate("first")
        environ["OPENROUTER_API_KEY"] = "r"
        await generator.generate("second")

        assert [str(r.url) for r in transport.requests] == [
            ENDPOINTS["OPENAI_API_KEY"],
            ENDPOINTS["OPENROUTER_API_KEY"],
        ]

    @pytest.mark.asyncio
    async def test_reads_process_environment_by_default(
        self, schema: Schema, make_transport, openai_reply, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Without an explicit mapping, os.environ supplies credentials."""
        monkeypatch.setenv("OPENROUTER_API_KEY", "env-key")
        monkeypatch.setenv("OPENROUTER_MODEL", "meta/llama")
        transport = make_transport(openai_reply("x"))

        await CommandGenerator(schema, transport=transport).generate("q")

        assert transport.requests[0].headers["Authorization"] == "Bearer env-key"
        assert transport.last_json()["model"] == "meta/llama"
