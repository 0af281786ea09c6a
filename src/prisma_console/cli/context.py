"""CLI context: resolved options shared by the console startup."""

import os
from dataclasses import dataclass, field

from prisma_console.config import CLIENT_ENV_VAR, DEFAULT_CLIENT, SCHEMA_ENV_VAR
from prisma_console.console.client import LoadedClient, load_client
from prisma_console.core.types import Workflow


def get_client_path(client: str | None) -> str:
    """Resolve the client location from CLI arg, environment variable, or default.

    Priority:
    1. Explicit ``--client`` argument
    2. PRISMA_CONSOLE_CLIENT environment variable
    3. Default: the importable ``prisma`` package
    """
    if client:
        return client
    if env_client := os.getenv(CLIENT_ENV_VAR):
        return env_client
    return DEFAULT_CLIENT


def get_schema_path(schema: str | None) -> str | None:
    """Resolve an explicit schema path from CLI arg or environment variable.

    None means "search the conventional locations".
    """
    if schema:
        return schema
    return os.getenv(SCHEMA_ENV_VAR) or None


@dataclass
class CLIContext:
    """Options for one console session.

    The client is imported lazily so ``--help`` and ``--version`` work
    without a generated client.
    """

    client_path: str
    schema_path: str | None
    workflow: Workflow
    _client: LoadedClient | None = field(default=None, init=False, repr=False)

    def get_client(self) -> LoadedClient:
        """Get or load the database client (lazy initialization).

        Raises:
            ConfigError: If the client cannot be imported or instantiated
        """
        if self._client is None:
            self._client = load_client(self.client_path)
        return self._client
