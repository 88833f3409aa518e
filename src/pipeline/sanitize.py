"""Textual repair of near-JSON produced by language models."""

import re

# Purely textual: a "//" inside a quoted string (e.g. a URL) is stripped too.
_LINE_COMMENT_RE = re.compile(r"//[^\n]*")
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")


def sanitize_json_text(text: str) -> str:
    """Fix the JSON mistakes LLMs make most often.

    1. Strip ``//`` line comments
    2. Strip trailing commas before ``}`` or ``]``

    Never raises. The result is more likely to parse with ``json.loads``
    but is not guaranteed to.
    """
    if not isinstance(text, str):
        return ""
    cleaned = _LINE_COMMENT_RE.sub("", text)
    cleaned = _TRAILING_COMMA_RE.sub(r"\1", cleaned)
    return cleaned
