"""prisma-console CLI - Main entry point."""

import asyncio
import logging
import sys
from typing import Annotated

import typer

import prisma_console
from prisma_console.cli.context import CLIContext, get_client_path, get_schema_path
from prisma_console.cli.output import OutputFormatter
from prisma_console.config import CLIENT_ENV_VAR, SCHEMA_ENV_VAR
from prisma_console.console.app import start_console
from prisma_console.core.types import Workflow

HELP = """Prisma Client Python console with natural-language command generation.

Starts an async REPL with the generated client bound to 'prisma'. Top-level
'await' works, e.g. `await prisma.user.count()`.

Set one of OPENROUTER_API_KEY, OPENAI_API_KEY or ANTHROPIC_API_KEY to enable
AI commands (checked in that order; OPENROUTER_MODEL overrides the
OpenRouter model).

Workflows (--workflow):

  replay (default): ai('query') shows and remembers a command, run()
  executes the remembered command, ai_run('query') generates and executes.

  direct: ai('query') shows a command, run('query') generates and executes.
  Nothing is remembered between calls.
"""

app = typer.Typer(
    name="prisma-console",
    help=HELP,
    add_completion=False,
)


def configure_logging(verbose: bool) -> None:
    """Send diagnostics to stderr; DEBUG with --verbose, WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.INFO if verbose else logging.WARNING)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"prisma-console v{prisma_console.__version__}")
        raise typer.Exit()


@app.command(help=HELP)
def main_command(
    client: Annotated[
        str | None,
        typer.Option(
            "--client",
            "-c",
            envvar=CLIENT_ENV_VAR,
            help="Generated client package: a path or module name, optionally "
            "suffixed with :ClassName (default: prisma:Prisma)",
        ),
    ] = None,
    schema: Annotated[
        str | None,
        typer.Option(
            "--schema",
            "-s",
            envvar=SCHEMA_ENV_VAR,
            help="Path to schema.prisma (default: prisma/schema.prisma, "
            "schema.prisma, then the copy inside the client package)",
        ),
    ] = None,
    workflow: Annotated[
        Workflow,
        typer.Option(
            "--workflow",
            "-w",
            case_sensitive=False,
            help="replay: ai() + run() + ai_run(); direct: ai() + run(query)",
        ),
    ] = Workflow.REPLAY,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log diagnostics to stderr"),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version information.",
        ),
    ] = False,
) -> None:
    configure_logging(verbose)
    cli_ctx = CLIContext(
        client_path=get_client_path(client),
        schema_path=get_schema_path(schema),
        workflow=workflow,
    )
    formatter = OutputFormatter()

    try:
        loaded = cli_ctx.get_client()
        asyncio.run(
            start_console(
                loaded,
                schema_path=cli_ctx.schema_path,
                workflow=cli_ctx.workflow,
                formatter=formatter,
            )
        )
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
