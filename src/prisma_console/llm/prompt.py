"""Prompt template for Prisma Client Python command generation."""

from __future__ import annotations

from prisma_console.config import CLIENT_NAME

# Output-format rules appended to every prompt. Kept as data so tests can
# check that each one reaches the model.
INSTRUCTIONS = [
    "Return ONLY the Prisma Client Python command, no explanations",
    "Use the prisma client instance (already available as '{client_name}')",
    "Format as executable Python code with proper indentation",
    "Use multi-line formatting for better readability",
    "Include necessary options like 'where', 'include', 'order', 'take', etc.",
    "Use async/await syntax with 'await'",
]

EXAMPLE_OUTPUT = """await {client_name}.user.find_many(
    where={{
        "email": {{
            "contains": "@example.com",
        }},
    }},
)"""

PROMPT_TEMPLATE = """You are a Prisma ORM expert. Given the following Prisma schema, \
generate the exact Prisma Client Python command to accomplish the user's request.

PRISMA SCHEMA:
```prisma
{schema}
```

USER REQUEST: {query}

INSTRUCTIONS:
{instructions}

EXAMPLE OUTPUT FORMAT:
{example}

Generate the command:"""


def build_prompt(schema_text: str, user_query: str, *, client_name: str = CLIENT_NAME) -> str:
    """Build the generation prompt.

    The schema and query are inserted verbatim, without escaping or trimming.

    Args:
        schema_text: Full contents of the schema file
        user_query: The user's natural language request
        client_name: Name the client instance is bound to in the console

    Returns:
        Prompt text ready to send to a provider
    """
    instructions = "\n".join(f"- {line.format(client_name=client_name)}" for line in INSTRUCTIONS)
    return PROMPT_TEMPLATE.format(
        schema=schema_text,
        query=user_query,
        instructions=instructions,
        example=EXAMPLE_OUTPUT.format(client_name=client_name),
    )
