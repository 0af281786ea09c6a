"""Core types for prisma-console."""

from prisma_console.core.types import (
    EvaluationMode,
    ExecutionResult,
    ProviderRequest,
    Workflow,
)

__all__ = [
    "EvaluationMode",
    "ExecutionResult",
    "ProviderRequest",
    "Workflow",
]
