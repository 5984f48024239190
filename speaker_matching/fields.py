"""
Field shape normalization.

Storage hands back loosely typed values: a list field may arrive as None,
a plain string, a JSON-encoded array, a list of strings or a list of
program objects. Everything is folded into a list of strings here so the
scoring code only ever sees one shape.
"""

import json
import logging
from typing import Any, List

logger = logging.getLogger(__name__)

# Keys read from structured entries such as {"title": ..., "description": ...}
ENTRY_TEXT_KEYS = ("title", "name", "description")


def _entry_text(entry: Any) -> str:
    if entry is None:
        return ""
    if isinstance(entry, str):
        return entry.strip()
    if isinstance(entry, dict):
        parts = [str(entry[k]).strip() for k in ENTRY_TEXT_KEYS if entry.get(k)]
        return " ".join(p for p in parts if p)
    # pydantic models and other objects exposing the same attributes
    parts = [str(getattr(entry, k)).strip() for k in ENTRY_TEXT_KEYS if getattr(entry, k, None)]
    if parts:
        return " ".join(parts)
    return str(entry).strip()


def as_string_list(value: Any) -> List[str]:
    """
    Coerce a loosely typed field into a list of non-empty strings.

    Args:
        value: None, a string, a JSON array string, or an iterable of
            strings / structured entries

    Returns:
        List of stripped, non-empty strings (never None)
    """
    if value is None:
        return []

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        if text.startswith("["):
            try:
                decoded = json.loads(text)
            except json.JSONDecodeError:
                logger.debug(f"Field looked like JSON but did not parse: {text[:40]!r}")
            else:
                if isinstance(decoded, list):
                    return as_string_list(decoded)
        return [text]

    if isinstance(value, dict):
        text = _entry_text(value)
        return [text] if text else []

    if isinstance(value, (list, tuple, set, frozenset)):
        items = [_entry_text(v) for v in value]
        return [i for i in items if i]

    text = str(value).strip()
    return [text] if text else []


def as_search_text(value: Any) -> str:
    """Join a field into a single lower-cased string for substring search."""
    return " ".join(as_string_list(value)).lower()
