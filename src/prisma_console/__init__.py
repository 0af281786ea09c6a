"""prisma-console - Async Prisma Client Python console with AI command generation.

Describe what you want in plain language; the console sends your Prisma
schema and the request to an LLM, cleans up the reply, and can run the
resulting command in the live session.

Example:
    $ export OPENAI_API_KEY=sk-...
    $ prisma-console --schema prisma/schema.prisma
    ◭ > ai("find all users with gmail addresses")
    ◭ > run()

Programmatic use:
    from prisma_console import Assistant, ConsoleHost, load_schema

    host = ConsoleHost({"prisma": client})
    assistant = Assistant(host, load_schema())
    assistant.install()
    value = await host.evaluate("await ai_run('count all posts')")
"""

from prisma_console.assistant import Assistant, AssistantSession
from prisma_console.console.host import ConsoleHost
from prisma_console.core.types import EvaluationMode, ExecutionResult, ProviderRequest, Workflow
from prisma_console.exceptions import (
    ConfigError,
    ExecutionError,
    PrismaConsoleError,
    ProviderError,
    SchemaNotFoundError,
    UsageError,
)
from prisma_console.execution import CommandExecutor, normalize_command
from prisma_console.llm import CommandGenerator, build_prompt, select_provider
from prisma_console.schema import Schema, load_schema

__version__ = "0.1.0"

__all__ = [
    # Main classes
    "Assistant",
    "AssistantSession",
    "ConsoleHost",
    "CommandGenerator",
    "CommandExecutor",
    # Pipeline functions
    "load_schema",
    "build_prompt",
    "select_provider",
    "normalize_command",
    # Types
    "Schema",
    "Workflow",
    "EvaluationMode",
    "ExecutionResult",
    "ProviderRequest",
    # Exceptions
    "PrismaConsoleError",
    "ConfigError",
    "SchemaNotFoundError",
    "ProviderError",
    "ExecutionError",
    "UsageError",
]
