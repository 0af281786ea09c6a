"""Load the generated Prisma Client Python package."""

from __future__ import annotations

import importlib
import importlib.util
import inspect
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Any

from prisma_console.config import DEFAULT_CLIENT_CLASS
from prisma_console.exceptions import ConfigError

logger = logging.getLogger(__name__)


@dataclass
class LoadedClient:
    """A client instance and where its package lives on disk."""

    instance: Any
    package_dir: Path | None

    async def connect(self) -> None:
        """Await ``connect()`` if the client has one."""
        await _maybe_await(getattr(self.instance, "connect", None))

    async def disconnect(self) -> None:
        """Await ``disconnect()`` if the client has one and is connected."""
        is_connected = getattr(self.instance, "is_connected", None)
        if callable(is_connected) and not is_connected():
            return
        await _maybe_await(getattr(self.instance, "disconnect", None))


async def _maybe_await(method: Any) -> None:
    if not callable(method):
        return
    result = method()
    if inspect.isawaitable(result):
        await result


def split_client_spec(spec: str) -> tuple[str, str]:
    """Split ``"target[:ClassName]"`` into its target and class name.

    A drive letter (``C:\\...``) is not mistaken for a class separator.
    """
    target, sep, attr = spec.rpartition(":")
    if not sep or not attr or not attr.isidentifier() or not target:
        return spec, DEFAULT_CLIENT_CLASS
    return target, attr


def _import_from_path(path: Path) -> ModuleType:
    if path.is_dir():
        init = path / "__init__.py"
        if not init.is_file():
            raise ConfigError(
                f"Client directory {path} is not a Python package (no __init__.py)",
                {"path": str(path)},
            )
        module_name, location = path.name, init
        search_locations: list[str] | None = [str(path)]
    else:
        module_name, location, search_locations = path.stem, path, None

    spec = importlib.util.spec_from_file_location(
        module_name, location, submodule_search_locations=search_locations
    )
    if spec is None or spec.loader is None:
        raise ConfigError(f"Cannot import client from {path}", {"path": str(path)})

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        sys.modules.pop(module_name, None)
        raise ConfigError(f"Failed to import client from {path}: {e}", {"path": str(path)}) from e
    return module


def import_client_module(target: str, cwd: Path | None = None) -> ModuleType:
    """Import the client package from a filesystem path or a dotted module name.

    Raises:
        ConfigError: If the target cannot be resolved or imported
    """
    base = cwd or Path.cwd()
    candidate = Path(target)
    path = candidate if candidate.is_absolute() else base / candidate
    if path.exists():
        return _import_from_path(path)

    if not all(part.isidentifier() for part in target.split(".")):
        raise ConfigError(
            f"Client path not found: {path}",
            {"client": target, "resolved": str(path)},
        )
    try:
        return importlib.import_module(target)
    except ImportError as e:
        raise ConfigError(
            f"Could not import client module '{target}': {e}. "
            "Run 'prisma generate' or pass --client with the generated client path.",
            {"client": target},
        ) from e


def load_client(spec: str, cwd: Path | None = None) -> LoadedClient:
    """Import the client package and instantiate its client class.

    Args:
        spec: ``--client`` value; a path or module name, optionally followed
            by ``:ClassName`` (defaults to ``Prisma``)
        cwd: Directory relative paths are resolved against

    Returns:
        The client instance and the package directory

    Raises:
        ConfigError: If the client cannot be imported or instantiated
    """
    target, class_name = split_client_spec(spec)
    module = import_client_module(target, cwd=cwd)

    client_cls = getattr(module, class_name, None)
    if client_cls is None:
        raise ConfigError(
            f"Client module '{module.__name__}' has no attribute '{class_name}'",
            {"client": spec, "class_name": class_name},
        )
    try:
        instance = client_cls()
    except Exception as e:
        raise ConfigError(f"Could not create {class_name}: {e}", {"client": spec}) from e

    module_file = getattr(module, "__file__", None)
    package_dir = Path(module_file).parent if module_file else None
    logger.info(f"Loaded client {class_name} from {module_file or module.__name__}")
    return LoadedClient(instance=instance, package_dir=package_dir)
