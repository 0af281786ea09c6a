"""Core types shared by the dispatcher, executor and console wiring.

All models are JSON-serializable so results can be logged or inspected.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Workflow(StrEnum):
    """Which set of assistant functions the console exposes."""

    REPLAY = "replay"  # ai() generates and stores, run() replays, ai_run() does both
    DIRECT = "direct"  # ai() generates, run(query) generates and executes


class EvaluationMode(StrEnum):
    """How a command was evaluated against the session namespace."""

    ASYNC = "async"  # host exposes an awaitable evaluate(), top-level await resolves
    SYNC = "sync"  # plain eval/exec fallback, awaited sub-expressions cannot resolve


class ProviderRequest(BaseModel):
    """HTTP request a provider wants sent for one prompt."""

    model_config = ConfigDict(frozen=True)

    provider: str = Field(description="Provider name, e.g. 'openrouter'")
    url: str
    headers: dict[str, str]
    payload: dict[str, Any]


class ExecutionResult(BaseModel):
    """Outcome of evaluating one command in the live session."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    command: str
    mode: EvaluationMode
    value: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        """True when evaluation completed without raising."""
        return self.error is None
