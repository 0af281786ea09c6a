"""Command normalization and in-session execution."""

from prisma_console.execution.executor import CommandExecutor, SessionHost, evaluate_sync
from prisma_console.execution.normalize import normalize_command

__all__ = [
    "CommandExecutor",
    "SessionHost",
    "evaluate_sync",
    "normalize_command",
]
