"""Interactive console: client loading, evaluation host and REPL."""

from prisma_console.console.client import LoadedClient, load_client
from prisma_console.console.host import ConsoleHost
from prisma_console.console.repl import ConsoleREPL

__all__ = [
    "ConsoleHost",
    "ConsoleREPL",
    "LoadedClient",
    "load_client",
]
