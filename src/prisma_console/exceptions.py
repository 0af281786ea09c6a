"""Custom exceptions for prisma-console.

Every error carries a short, human-readable message plus an optional context
dict. The console entry points catch these at the boundary of the operation
that raised them and print the message; none of them end the session.
"""

from __future__ import annotations

from typing import Any

from prisma_console.config import CREDENTIAL_ENV_VARS


class PrismaConsoleError(Exception):
    """Base exception for all prisma-console errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ConfigError(PrismaConsoleError):
    """No usable credential, or a malformed client path."""

    @classmethod
    def missing_credentials(cls) -> ConfigError:
        """Error raised when none of the provider credentials is set."""
        names = ", ".join(CREDENTIAL_ENV_VARS[:-1]) + f", or {CREDENTIAL_ENV_VARS[-1]}"
        return cls(
            f"No API key found. Please set {names} environment variable.",
            {"checked": list(CREDENTIAL_ENV_VARS)},
        )


class SchemaNotFoundError(PrismaConsoleError):
    """No readable schema file could be located."""

    def __init__(self, path: str, reason: str | None = None) -> None:
        if reason:
            message = f"Could not read schema file {path}: {reason}"
        else:
            message = f"Schema file not found: {path}"
        super().__init__(message, {"path": path, "reason": reason})
        self.path = path
        self.reason = reason


class ProviderError(PrismaConsoleError):
    """The LLM provider returned an error or an unreadable response."""

    def __init__(
        self,
        provider: str,
        detail: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(
            f"{provider} API error: {detail}",
            {"provider": provider, "status_code": status_code},
        )
        self.provider = provider
        self.detail = detail
        self.status_code = status_code


class ExecutionError(PrismaConsoleError):
    """A generated or replayed command raised during evaluation."""

    def __init__(self, command: str, cause: BaseException) -> None:
        if isinstance(cause, SystemExit):
            message = f"command tried to exit the console (exit code {cause.code})"
        else:
            message = str(cause) or cause.__class__.__name__
        super().__init__(message, {"command": command})
        self.command = command
        self.cause = cause


class UsageError(PrismaConsoleError):
    """An assistant function was called without a usable query."""

    def __init__(self, function_name: str) -> None:
        usage = f"Usage: {function_name}('your natural language query')"
        example = f"Example: {function_name}('find all users with gmail addresses')"
        super().__init__(usage, {"example": example})
        self.function_name = function_name
        self.usage_lines = [usage, example]
