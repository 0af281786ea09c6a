"""Evaluate commands inside the live console session."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from prisma_console.core.types import EvaluationMode, ExecutionResult
from prisma_console.exceptions import ExecutionError

logger = logging.getLogger(__name__)


class SessionHost(Protocol):
    """What the executor needs from the interactive session.

    Hosts that can resolve top-level ``await`` also provide an
    ``async def evaluate(source: str) -> Any`` method; hosts without it are
    evaluated in sync mode.
    """

    namespace: dict[str, Any]


def evaluate_sync(source: str, namespace: dict[str, Any]) -> Any:
    """Evaluate ``source`` without top-level await support.

    Expressions return their value; statements run for their side effects
    and return None. Source containing ``await`` raises SyntaxError.
    """
    try:
        code = compile(source, "<command>", "eval")
    except SyntaxError:
        code = compile(source, "<command>", "exec")
    return eval(code, namespace)


class CommandExecutor:
    """Runs command strings against a session host.

    Failures never propagate out of :meth:`execute`; they are logged and
    reported on the returned :class:`ExecutionResult`.
    """

    def __init__(self, host: SessionHost) -> None:
        self.host = host
        self._evaluate = self._async_primitive(host)
        self.mode = EvaluationMode.ASYNC if self._evaluate is not None else EvaluationMode.SYNC
        if self.mode is EvaluationMode.SYNC:
            logger.warning(
                "Session host has no async evaluate(); falling back to sync evaluation. "
                "Commands using 'await' will fail."
            )

    @staticmethod
    def _async_primitive(host: SessionHost) -> Callable[[str], Awaitable[Any]] | None:
        evaluate = getattr(host, "evaluate", None)
        if evaluate is not None and inspect.iscoroutinefunction(evaluate):
            return evaluate  # type: ignore[no-any-return]
        return None

    async def execute(self, command: str) -> ExecutionResult:
        """Evaluate ``command`` and return its outcome.

        Args:
            command: Normalized command text

        Returns:
            ExecutionResult with the value, or with ``error`` set on failure
        """
        logger.debug(f"Executing command in {self.mode} mode: {command!r}")
        try:
            value = await self.execute_or_raise(command)
        except ExecutionError as e:
            logger.info(f"Command failed: {e.message}")
            logger.debug("Command traceback", exc_info=e.cause)
            return ExecutionResult(command=command, mode=self.mode, error=e.message)

        return ExecutionResult(command=command, mode=self.mode, value=value)

    async def execute_or_raise(self, command: str) -> Any:
        """Evaluate ``command`` and return its resolved value.

        A command that evaluates to an awaitable (e.g. ``prisma.user.count()``
        without ``await``) is awaited until a plain value remains.

        Raises:
            ExecutionError: If evaluation raised or the command called exit()
        """
        try:
            if self._evaluate is not None:
                value = await self._evaluate(command)
            else:
                value = evaluate_sync(command, self.host.namespace)
            while inspect.isawaitable(value):
                value = await value
        except (Exception, SystemExit) as e:
            raise ExecutionError(command, e) from e
        return value
