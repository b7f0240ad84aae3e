"""Input hygiene for OData filter expressions sent to the roadmap API."""
import re

from core.errors import InvalidFilterError

# Statement separator, escape character and NUL
_STRIPPED_CHARS = re.compile(r"[;\\\x00]")

BLOCKED_KEYWORDS = (
    "drop",
    "delete",
    "insert",
    "truncate",
    "alter",
    "create",
    "exec",
    "execute",
    "grant",
    "revoke",
    "shutdown",
)

_BLOCKED_PATTERN = re.compile(r"\b(" + "|".join(BLOCKED_KEYWORDS) + r")\b", re.IGNORECASE)


def sanitize(expr: str) -> str:
    """Clean a caller-supplied filter expression.

    Dangerous characters are removed, then the expression is rejected if it
    mentions a blocked keyword as a whole word. Grammar is not validated: a
    malformed but harmless expression is left for the upstream API to refuse.
    """
    cleaned = _STRIPPED_CHARS.sub("", expr or "").strip()
    if not cleaned:
        raise InvalidFilterError("Filter expression is empty")

    match = _BLOCKED_PATTERN.search(cleaned)
    if match:
        raise InvalidFilterError(
            f"Filter expression contains blocked keyword '{match.group(1)}'",
            context={"filter": expr},
        )
    return cleaned


def escape_literal(value: str) -> str:
    """Double single quotes so `value` stays inside one OData string literal."""
    return value.replace("'", "''")
