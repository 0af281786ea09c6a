"""Async-aware evaluation host for the interactive console."""

from __future__ import annotations

import ast
import inspect
from types import CodeType
from typing import Any, cast

COMPILE_FLAGS = ast.PyCF_ALLOW_TOP_LEVEL_AWAIT


class ConsoleHost:
    """Namespace plus an evaluation primitive that understands top-level await.

    Source is evaluated like an interactive interpreter would: statements run
    in order and the value of a trailing expression statement is returned.
    Code objects compiled as coroutines are awaited before returning, so
    ``await prisma.user.count()`` yields the count rather than a coroutine.
    """

    def __init__(
        self,
        namespace: dict[str, Any] | None = None,
        filename: str = "<console>",
    ) -> None:
        self.namespace: dict[str, Any] = namespace if namespace is not None else {}
        self.namespace.setdefault("__name__", "__console__")
        self.namespace.setdefault("__builtins__", __builtins__)
        self.filename = filename

    def bind(self, **names: Any) -> None:
        """Inject names into the session namespace."""
        self.namespace.update(names)

    async def evaluate(self, source: str) -> Any:
        """Evaluate ``source`` in the session namespace.

        Args:
            source: One or more Python statements; may use top-level ``await``

        Returns:
            Value of the trailing expression statement, or None

        Raises:
            SyntaxError: If the source does not compile
            Exception: Whatever the evaluated code raises
        """
        tree = cast(
            ast.Module,
            compile(source, self.filename, "exec", flags=COMPILE_FLAGS | ast.PyCF_ONLY_AST),
        )

        trailing: ast.Expression | None = None
        if tree.body and isinstance(tree.body[-1], ast.Expr):
            trailing = ast.Expression(body=tree.body.pop().value)

        if tree.body:
            await self._run(compile(tree, self.filename, "exec", flags=COMPILE_FLAGS))
        if trailing is None:
            return None
        return await self._run(compile(trailing, self.filename, "eval", flags=COMPILE_FLAGS))

    async def _run(self, code: CodeType) -> Any:
        result = eval(code, self.namespace)
        if code.co_flags & inspect.CO_COROUTINE:
            result = await result
        return result
