"""Environment variable names and defaults shared across the console."""

from __future__ import annotations

OPENROUTER_API_KEY = "OPENROUTER_API_KEY"
OPENAI_API_KEY = "OPENAI_API_KEY"
ANTHROPIC_API_KEY = "ANTHROPIC_API_KEY"
OPENROUTER_MODEL = "OPENROUTER_MODEL"

# Order matters: provider selection walks this tuple and takes the first key that is set.
CREDENTIAL_ENV_VARS: tuple[str, ...] = (OPENROUTER_API_KEY, OPENAI_API_KEY, ANTHROPIC_API_KEY)

CLIENT_ENV_VAR = "PRISMA_CONSOLE_CLIENT"
SCHEMA_ENV_VAR = "PRISMA_CONSOLE_SCHEMA"

DEFAULT_CLIENT = "prisma"
DEFAULT_CLIENT_CLASS = "Prisma"

# Name the generated commands use for the client instance.
CLIENT_NAME = "prisma"

SCHEMA_FILENAME = "schema.prisma"
