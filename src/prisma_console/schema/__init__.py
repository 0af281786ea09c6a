"""Schema file discovery and loading."""

from prisma_console.schema.loader import Schema, load_schema, read_schema, schema_candidates

__all__ = [
    "Schema",
    "load_schema",
    "read_schema",
    "schema_candidates",
]
