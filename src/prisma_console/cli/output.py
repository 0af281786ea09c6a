"""Output formatting for the console and CLI."""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.pretty import Pretty

from prisma_console.exceptions import PrismaConsoleError

console = Console()


class OutputFormatter:
    """Prints assistant progress, commands, results and errors."""

    def __init__(self, rich_console: Console | None = None) -> None:
        """Initialize formatter.

        Args:
            rich_console: Console to write to. Defaults to the shared stdout console.
        """
        self.console = rich_console if rich_console is not None else console

    def print_status(self, message: str) -> None:
        """Print a one-line progress message."""
        self.console.print(message, markup=False, highlight=False)

    def print_command(self, command: str, heading: str = "\n✨ Generated command:") -> None:
        """Print a generated command under a heading.

        Args:
            command: Normalized command text
            heading: Line printed above the command
        """
        self.console.print(heading, markup=False, highlight=False)
        self.console.print(command, style="cyan", markup=False, highlight=False)

    def print_hint(self, message: str) -> None:
        """Print a dim follow-up hint."""
        self.console.print(message, style="dim", markup=False, highlight=False)

    def print_usage(self, lines: list[str]) -> None:
        """Print usage lines for an assistant function."""
        for line in lines:
            self.console.print(line, markup=False, highlight=False)

    def print_failure(self, prefix: str, error: Exception | str | None = None) -> None:
        """Print a short prefixed failure line, e.g. ``❌ Error: boom``.

        Args:
            prefix: Message shown after the marker
            error: Optional error or detail appended after a colon
        """
        if error is None:
            text = f"❌ {prefix}"
        else:
            detail = error.message if isinstance(error, PrismaConsoleError) else str(error)
            text = f"❌ {prefix}: {detail}"
        self.console.print(text, style="red", markup=False, highlight=False)

    def print_error(self, error: Exception) -> None:
        """Print an error panel, with context for console errors.

        Args:
            error: Exception to display
        """
        error_text = str(error)
        if isinstance(error, PrismaConsoleError) and error.context:
            context_str = "\n".join(
                f"{k}: {v}" for k, v in error.context.items() if v is not None
            )
            if context_str:
                error_text = f"{error_text}\n\n{context_str}"

        panel = Panel(
            error_text,
            title="[red]Error[/red]",
            border_style="red",
        )
        self.console.print(panel)

    def print_result(self, value: Any) -> None:
        """Pretty-print an evaluated value. None prints nothing."""
        if value is not None:
            self.console.print(Pretty(value))

    def print_banner(self, lines: list[str]) -> None:
        """Print the startup banner."""
        for line in lines:
            self.console.print(line, style="bold", markup=False, highlight=False)
