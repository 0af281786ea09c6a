"""Shared test fixtures for prisma-console."""

import io
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest
from rich.console import Console

from prisma_console.cli.output import OutputFormatter
from prisma_console.config import (
    CLIENT_ENV_VAR,
    CREDENTIAL_ENV_VARS,
    OPENROUTER_MODEL,
    SCHEMA_ENV_VAR,
)
from prisma_console.schema.loader import Schema

SCHEMA_TEXT = "model User { id Int @id }"


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it handled."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def last_json(self) -> Any:
        return json.loads(self.requests[-1].content)


class CapturedOutput:
    """OutputFormatter writing into a string buffer."""

    def __init__(self) -> None:
        self.buffer = io.StringIO()
        self.formatter = OutputFormatter(
            Console(file=self.buffer, width=200, color_system=None, emoji=False)
        )

    @property
    def text(self) -> str:
        return self.buffer.getvalue()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test with no credentials or console overrides set."""
    for name in (*CREDENTIAL_ENV_VARS, OPENROUTER_MODEL, CLIENT_ENV_VAR, SCHEMA_ENV_VAR):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def schema() -> Schema:
    """Minimal schema used across prompt and generator tests."""
    return Schema(text=SCHEMA_TEXT, path=Path("schema.prisma"))


@pytest.fixture
def output() -> CapturedOutput:
    """Formatter whose output can be asserted on."""
    return CapturedOutput()


@pytest.fixture
def make_transport() -> Callable[..., RecordingTransport]:
    """Factory for recording transports.

    ``make_transport(json_body)`` answers every request with that JSON body;
    ``make_transport(status_code=500, text="boom")`` answers with an error.
    """

    def factory(
        json_body: Any = None,
        *,
        status_code: int = 200,
        text: str | None = None,
    ) -> RecordingTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            if text is not None:
                return httpx.Response(status_code, text=text)
            return httpx.Response(status_code, json=json_body)

        return RecordingTransport(handler)

    return factory


def chat_completion(content: str) -> dict[str, Any]:
    """OpenAI-style response envelope."""
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def anthropic_message(text: str) -> dict[str, Any]:
    """Anthropic messages response envelope."""
    return {"content": [{"type": "text", "text": text}]}


@pytest.fixture
def openai_reply() -> Callable[[str], dict[str, Any]]:
    return chat_completion


@pytest.fixture
def anthropic_reply() -> Callable[[str], dict[str, Any]]:
    return anthropic_message


class FakeUserDelegate:
    """Stands in for ``prisma.user`` with awaitable query methods."""

    def __init__(self, users: list[dict[str, Any]]) -> None:
        self.users = users
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def find_many(self, **kwargs: Any) -> list[dict[str, Any]]:
        self.calls.append(("find_many", kwargs))
        where = kwargs.get("where") or {}
        return [u for u in self.users if all(u.get(k) == v for k, v in where.items())]

    async def count(self, **kwargs: Any) -> int:
        self.calls.append(("count", kwargs))
        return len(self.users)


class FakePrisma:
    """Minimal async client exposing a ``user`` delegate."""

    def __init__(self, users: list[dict[str, Any]] | None = None) -> None:
        self.user = FakeUserDelegate(users if users is not None else [])
        self.connected = False

    async def connect(self) -> None:
        self.connected = True

    async def disconnect(self) -> None:
        self.connected = False

    def is_connected(self) -> bool:
        return self.connected


@pytest.fixture
def fake_prisma() -> FakePrisma:
    """Client with three users, one of them on gmail."""
    return FakePrisma(
        [
            {"id": 1, "email": "ada@gmail.com"},
            {"id": 2, "email": "grace@example.com"},
            {"id": 3, "email": "linus@example.com"},
        ]
    )
