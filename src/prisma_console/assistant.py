"""Assistant functions injected into the console namespace.

Two workflows are available and exactly one is installed per session:

``replay`` (default)
    ``ai(query)`` generates a command, shows it and remembers it,
    ``run()`` executes the remembered command, and
    ``ai_run(query)`` generates, remembers and executes in one step.

``direct``
    ``ai(query)`` generates and shows a command, and
    ``run(query)`` generates and executes it. Nothing is remembered.

Every function returns None after printing a short message when something
goes wrong, so a failed request never ends the session.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from prisma_console.cli.output import OutputFormatter
from prisma_console.core.types import ExecutionResult, Workflow
from prisma_console.exceptions import PrismaConsoleError, UsageError
from prisma_console.execution.executor import CommandExecutor, SessionHost
from prisma_console.execution.normalize import normalize_command
from prisma_console.llm.dispatcher import CommandGenerator, require_query
from prisma_console.schema.loader import Schema

logger = logging.getLogger(__name__)

AssistantFunction = Callable[..., Awaitable[Any]]

SCHEMA_MISSING_MESSAGE = (
    "Could not find Prisma schema. Please ensure schema.prisma exists in your project."
)
SCHEMA_NOT_LOADED_MESSAGE = "Schema not loaded"


@dataclass
class AssistantSession:
    """Mutable state shared by the assistant functions of one console session.

    Calls are not serialized: if a second generation starts while one is
    still waiting on the provider, whichever finishes last owns
    ``last_command``. ``in_flight`` counts generations awaiting a provider.
    """

    last_command: str | None = None
    last_result: ExecutionResult | None = None
    in_flight: int = 0
    generations: int = 0

    def begin_generation(self) -> int:
        """Mark a generation as started and return its sequence number."""
        self.generations += 1
        self.in_flight += 1
        return self.generations

    def end_generation(self) -> None:
        """Mark a generation as finished, successfully or not."""
        self.in_flight -= 1

    def store(self, command: str) -> None:
        """Remember ``command`` for replay."""
        self.last_command = command


class Assistant:
    """Wires schema, generator and executor into console functions."""

    def __init__(
        self,
        host: SessionHost,
        schema: Schema | None,
        *,
        workflow: Workflow | str = Workflow.REPLAY,
        generator: CommandGenerator | None = None,
        executor: CommandExecutor | None = None,
        formatter: OutputFormatter | None = None,
        session: AssistantSession | None = None,
    ) -> None:
        """Initialize assistant.

        Args:
            host: Session host whose namespace receives the functions
            schema: Loaded schema, or None to install stubs
            workflow: ``replay`` or ``direct``
            generator: Command generator (built from ``schema`` if omitted)
            executor: Command executor (built from ``host`` if omitted)
            formatter: Output formatter for user-facing messages
            session: Shared session state (a fresh one if omitted)
        """
        self.host = host
        self.schema = schema
        self.workflow = Workflow(workflow)
        self.formatter = formatter or OutputFormatter()
        self.session = session or AssistantSession()
        self.executor = executor or CommandExecutor(host)
        if generator is None and schema is not None:
            generator = CommandGenerator(schema)
        self.generator = generator

    @property
    def ready(self) -> bool:
        """True when a schema is loaded and commands can be generated."""
        return self.schema is not None and self.generator is not None

    # === Operations ===

    async def generate(self, query: object, function_name: str, status: str) -> str | None:
        """Generate and normalize a command, printing any failure.

        Returns:
            The normalized command, or None on failure
        """
        try:
            require_query(query, function_name)
        except UsageError as e:
            self.formatter.print_usage(e.usage_lines)
            return None

        if self.generator is None:
            self.formatter.print_failure(SCHEMA_NOT_LOADED_MESSAGE)
            return None

        self.formatter.print_status(status)
        self.session.begin_generation()
        try:
            raw = await self.generator.generate(query, function_name=function_name)
        except PrismaConsoleError as e:
            logger.info(f"Generation failed: {e.message}")
            self.formatter.print_failure("Error generating command", e)
            return None
        finally:
            self.session.end_generation()

        command = normalize_command(raw)
        if not command:
            self.formatter.print_failure(
                "Error generating command", "the model returned no command"
            )
            return None
        return command

    async def execute(self, command: str) -> Any:
        """Execute ``command`` in the session and return its value (None on failure)."""
        result = await self.executor.execute(command)
        self.session.last_result = result
        if not result.ok:
            self.formatter.print_failure("Error", result.error)
            return None
        return result.value

    async def ai(self, query: object = None) -> str | None:
        """Generate and display a command; remember it in the replay workflow."""
        command = await self.generate(query, "ai", "🤖 Generating Prisma command...")
        if command is None:
            return None

        self.formatter.print_command(command)
        if self.workflow is Workflow.REPLAY:
            self.session.store(command)
            self.formatter.print_hint("\n💡 Execute it with run(), or copy and paste it\n")
        else:
            self.formatter.print_hint("\n💡 Copy and paste to execute\n")
        return command

    async def replay(self) -> Any:
        """Execute the remembered command."""
        command = self.session.last_command
        if command is None:
            self.formatter.print_hint("No command generated yet. Use ai('your query') first.")
            return None

        self.formatter.print_status(f"🚀 Executing: {command}\n")
        return await self.execute(command)

    async def generate_and_run(self, query: object = None, function_name: str = "ai_run") -> Any:
        """Generate a command and execute it immediately."""
        command = await self.generate(
            query, function_name, "🤖 Generating and running Prisma command..."
        )
        if command is None:
            return None

        if self.workflow is Workflow.REPLAY:
            self.session.store(command)
        self.formatter.print_status(f"\n✨ Generated: {command}")
        self.formatter.print_status("🚀 Executing...\n")
        return await self.execute(command)

    # === Namespace functions ===

    def functions(self) -> dict[str, AssistantFunction]:
        """Return the console functions for the selected workflow."""
        if not self.ready:
            return self._stub_functions()

        async def ai(query: str | None = None) -> str | None:
            """Generate a Prisma command from natural language and display it."""
            return await self.ai(query)

        if self.workflow is Workflow.DIRECT:

            async def run(query: str | None = None) -> Any:
                """Generate a Prisma command from natural language and execute it."""
                return await self.generate_and_run(query, function_name="run")

            return {"ai": ai, "run": run}

        async def run_last() -> Any:
            """Execute the command generated by the last ai() call."""
            return await self.replay()

        async def ai_run(query: str | None = None) -> Any:
            """Generate a Prisma command from natural language and execute it."""
            return await self.generate_and_run(query, function_name="ai_run")

        run_last.__name__ = run_last.__qualname__ = "run"
        return {"ai": ai, "run": run_last, "ai_run": ai_run}

    def _stub_functions(self) -> dict[str, AssistantFunction]:
        formatter = self.formatter

        async def ai(*args: Any, **kwargs: Any) -> None:
            """Unavailable: no Prisma schema was loaded."""
            formatter.print_failure(SCHEMA_MISSING_MESSAGE)

        async def run(*args: Any, **kwargs: Any) -> None:
            """Unavailable: no Prisma schema was loaded."""
            formatter.print_failure(SCHEMA_NOT_LOADED_MESSAGE)

        stubs: dict[str, AssistantFunction] = {"ai": ai, "run": run}
        if self.workflow is Workflow.REPLAY:
            stubs["ai_run"] = run
        return stubs

    def install(self) -> list[str]:
        """Inject the workflow's functions into the host namespace.

        Returns:
            Names that were bound
        """
        functions = self.functions()
        self.host.namespace.update(functions)
        return list(functions)
