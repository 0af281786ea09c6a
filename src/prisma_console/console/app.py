"""Console startup: client, schema, namespace and REPL."""

from __future__ import annotations

import logging
from pathlib import Path

from prisma_console.assistant import Assistant
from prisma_console.cli.output import OutputFormatter
from prisma_console.config import CLIENT_NAME
from prisma_console.console.client import LoadedClient
from prisma_console.console.host import ConsoleHost
from prisma_console.console.repl import ConsoleREPL
from prisma_console.core.types import Workflow
from prisma_console.schema.loader import load_schema

logger = logging.getLogger(__name__)

WORKFLOW_HELP = {
    Workflow.REPLAY: [
        "ai('find all users')      generate a command and remember it",
        "run()                     execute the remembered command",
        "ai_run('count posts')     generate and execute in one step",
    ],
    Workflow.DIRECT: [
        "ai('find all users')      generate and show a command",
        "run('count posts')        generate and execute a command",
    ],
}


def build_assistant(
    host: ConsoleHost,
    client: LoadedClient,
    *,
    schema_path: str | None,
    workflow: Workflow,
    formatter: OutputFormatter,
    cwd: Path | None = None,
) -> Assistant:
    """Bind the client and install the assistant functions into ``host``."""
    host.bind(**{CLIENT_NAME: client.instance})
    schema = load_schema(schema_path, client_dir=client.package_dir, cwd=cwd)
    assistant = Assistant(host, schema, workflow=workflow, formatter=formatter)
    names = assistant.install()
    logger.debug(f"Installed {', '.join(names)} ({workflow} workflow)")
    return assistant


def banner(assistant: Assistant) -> list[str]:
    """Startup lines describing what is available in the namespace."""
    lines = [
        f"Prisma Console ({assistant.workflow} workflow). "
        f"Client available as '{CLIENT_NAME}'."
    ]
    if assistant.schema is not None:
        lines.append(f"Schema: {assistant.schema.path}")
        lines.extend(WORKFLOW_HELP[assistant.workflow])
    else:
        lines.append("No Prisma schema found; AI commands are disabled.")
    return lines


async def start_console(
    client: LoadedClient,
    *,
    schema_path: str | None = None,
    workflow: Workflow = Workflow.REPLAY,
    formatter: OutputFormatter | None = None,
) -> None:
    """Connect the client, run the REPL until EOF, then disconnect."""
    formatter = formatter or OutputFormatter()
    host = ConsoleHost()
    assistant = build_assistant(
        host, client, schema_path=schema_path, workflow=workflow, formatter=formatter
    )

    await client.connect()
    try:
        formatter.print_banner(banner(assistant))
        await ConsoleREPL(host, formatter).run()
    finally:
        await client.disconnect()
