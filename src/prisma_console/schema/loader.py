"""Locate and read the Prisma schema file.

The schema is read once per console session and embedded verbatim in every
prompt. A missing schema is reported as ``None`` rather than an empty string,
so callers can tell "no schema" apart from an empty one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from prisma_console.config import SCHEMA_FILENAME
from prisma_console.exceptions import SchemaNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Schema:
    """Contents of one schema file."""

    text: str
    path: Path


def schema_candidates(
    path: str | Path | None = None,
    *,
    client_dir: Path | None = None,
    cwd: Path | None = None,
) -> list[Path]:
    """Return the ordered list of paths to try.

    An explicit path is the only candidate. Otherwise the conventional
    locations under the working directory come first, followed by the copy
    Prisma Client Python places inside the generated client package.

    Args:
        path: Explicit schema path (absolute, or relative to ``cwd``)
        client_dir: Install directory of the generated client package
        cwd: Working directory (defaults to the process working directory)

    Returns:
        Candidate paths in the order they should be tried
    """
    base = cwd or Path.cwd()
    if path is not None:
        explicit = Path(path)
        return [explicit if explicit.is_absolute() else base / explicit]

    candidates = [base / "prisma" / SCHEMA_FILENAME, base / SCHEMA_FILENAME]
    if client_dir is not None:
        candidates.append(client_dir / SCHEMA_FILENAME)
    return candidates


def read_schema(path: Path) -> Schema:
    """Read a single schema file as UTF-8.

    Raises:
        SchemaNotFoundError: If the file does not exist or cannot be read
    """
    if not path.is_file():
        raise SchemaNotFoundError(str(path))
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SchemaNotFoundError(str(path), reason=str(e)) from e
    return Schema(text=text, path=path)


def load_schema(
    path: str | Path | None = None,
    *,
    client_dir: Path | None = None,
    cwd: Path | None = None,
) -> Schema | None:
    """Load the first readable schema among the candidates.

    Failures are logged and collapse to ``None``; this never raises.

    Args:
        path: Explicit schema path from ``--schema``
        client_dir: Install directory of the generated client package
        cwd: Working directory used to resolve relative paths

    Returns:
        The loaded schema, or None if no candidate could be read
    """
    candidates = schema_candidates(path, client_dir=client_dir, cwd=cwd)
    for candidate in candidates:
        try:
            schema = read_schema(candidate)
        except SchemaNotFoundError as e:
            if e.reason:
                logger.warning(e.message)
            else:
                logger.debug(e.message)
            continue
        logger.info(f"Loaded schema from {schema.path}")
        return schema

    tried = ", ".join(str(c) for c in candidates)
    logger.warning(f"Schema file not found (tried: {tried})")
    return None
