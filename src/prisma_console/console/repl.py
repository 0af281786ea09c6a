"""Interactive read-eval-print loop on top of :class:`ConsoleHost`."""

from __future__ import annotations

import codeop
import contextlib
import inspect
import traceback
from collections.abc import Callable
from typing import Any

from prompt_toolkit import PromptSession
from prompt_toolkit.patch_stdout import patch_stdout

from prisma_console.cli.output import OutputFormatter
from prisma_console.console.host import COMPILE_FLAGS, ConsoleHost

PROMPT = "◭ > "
CONTINUATION_PROMPT = "... "


class InputBuffer:
    """Collects input lines until they form a complete statement."""

    def __init__(self) -> None:
        self.lines: list[str] = []
        self._compiler = codeop.CommandCompiler()
        self._compiler.compiler.flags |= COMPILE_FLAGS

    @property
    def pending(self) -> bool:
        """True while a multi-line statement is being entered."""
        return bool(self.lines)

    def push(self, line: str) -> str | None:
        """Add a line; return the complete source once it compiles.

        Syntax errors are returned as complete source too, so the host
        reports them with a proper traceback.
        """
        self.lines.append(line)
        source = "\n".join(self.lines)
        try:
            if self._compiler(source, "<console>", "single") is None:
                return None
        except (SyntaxError, ValueError, OverflowError):
            pass
        self.reset()
        return source

    def reset(self) -> None:
        """Drop any partially entered statement."""
        self.lines = []


class ConsoleREPL:
    """Reads source with prompt_toolkit and evaluates it on the event loop.

    Coroutines returned by a bare expression (e.g. ``ai("...")`` without
    ``await``) are awaited before display, so assistant functions work
    either way.
    """

    def __init__(
        self,
        host: ConsoleHost,
        formatter: OutputFormatter | None = None,
        prompt: str = PROMPT,
        read_line: Callable[[str], Any] | None = None,
    ) -> None:
        """Initialize REPL.

        Args:
            host: Evaluation host holding the session namespace
            formatter: Output formatter for results and tracebacks
            prompt: Primary prompt string
            read_line: Async callable returning one line for a prompt string
                (defaults to a prompt_toolkit session)
        """
        self.host = host
        self.formatter = formatter or OutputFormatter()
        self.prompt = prompt
        self.buffer = InputBuffer()
        # stdout only needs patching while prompt_toolkit owns the terminal
        self._patch_stdout = read_line is None
        if read_line is None:
            session: PromptSession[str] = PromptSession()
            read_line = session.prompt_async
        self._read_line = read_line

    async def eval_and_print(self, source: str) -> Any:
        """Evaluate one complete input and print its value.

        Errors are printed as tracebacks and do not stop the loop.
        """
        if not source.strip():
            return None
        try:
            value = await self.host.evaluate(source)
            while inspect.isawaitable(value):
                value = await value
        except Exception as e:
            self._print_exception(e)
            return None

        if value is not None:
            self.host.namespace["_"] = value
            self.formatter.print_result(value)
        return value

    def _print_exception(self, error: Exception) -> None:
        text = "".join(traceback.format_exception(error)).rstrip()
        self.formatter.console.print(text, style="red", markup=False, highlight=False)

    async def run(self) -> None:
        """Loop until EOF (Ctrl-D) or ``exit()``."""
        with patch_stdout(raw=True) if self._patch_stdout else contextlib.nullcontext():
            while True:
                prompt = CONTINUATION_PROMPT if self.buffer.pending else self.prompt
                try:
                    line = await self._read_line(prompt)
                except KeyboardInterrupt:
                    self.buffer.reset()
                    continue
                except EOFError:
                    break

                source = self.buffer.push(line)
                if source is None:
                    continue
                try:
                    await self.eval_and_print(source)
                except SystemExit:
                    break
                except KeyboardInterrupt:
                    self.formatter.print_status("KeyboardInterrupt")
