"""Tolerant decoding of roadmap API response bodies."""
from __future__ import annotations

import json
from typing import Any


def robust_parse_text(text: str) -> Any:
    """Decode `text` as JSON, or the leading JSON object of a body with trailing noise.

    Returns the raw text when neither works.
    """
    try:
        return json.loads(text)
    except ValueError:
        pass

    try:
        obj, _ = json.JSONDecoder().raw_decode(text.lstrip())
        return obj
    except ValueError:
        return text


def extract_collection(payload: Any, field: str = "value") -> list[Any]:
    """Return `payload[field]` when it is a list, otherwise an empty list."""
    if isinstance(payload, dict):
        items = payload.get(field)
        if isinstance(items, list):
            return items
    return []
