"""Strip markdown artifacts from LLM completions."""

from __future__ import annotations

import re

# Any tag word ending the fence line is dropped whole; inline fences lose only the backticks.
FENCE_PATTERN = re.compile(r"```(?:[\w.+#-]*[ \t]*(?:\r?\n|$))?")


def normalize_command(raw: str) -> str:
    """Remove code fences and surrounding whitespace from a completion.

    Fences are removed wherever they appear, not only at the ends. Removal
    repeats until none are left, which keeps the function idempotent even
    for runs of more than three backticks. The command text itself is not
    reformatted.

    Example:
        >>> normalize_command("```python\\nawait prisma.user.count()\\n```")
        'await prisma.user.count()'
    """
    text = raw
    while True:
        text, removed = FENCE_PATTERN.subn("", text)
        if not removed:
            break
    return text.strip()
