"""Total value coercers for schema-unstable source columns.

Every function here accepts any value, well-formed or not, and returns
its documented target type. Malformed input resolves to a fallback
(empty list, None, or False) instead of raising.
"""

from __future__ import annotations

import json
import re
from typing import Any, Mapping

from core.constants import TRUTHY_WORDS

_NON_SLUG_CHARACTERS = re.compile(r"[^a-z0-9]+")


def to_bool(value: Any) -> bool:
    """Coerce a boolean expressed as bool, number, or word.

    Args:
        value: Raw column value.

    Returns:
        True for ``True``, non-zero numbers, and the words
        ``1``/``true``/``yes``/``y`` in any case; False otherwise.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY_WORDS
    return False


def try_json(value: Any) -> Any:
    """Parse JSON text, passing already-parsed structures through.

    Args:
        value: Raw column value.

    Returns:
        The mapping or list unchanged, the parsed value for valid JSON
        text, or None for anything else.
    """
    if isinstance(value, (Mapping, list)):
        return value
    if not isinstance(value, str):
        return None
    try:
        return json.loads(value)
    except (ValueError, RecursionError):
        return None


def to_array(value: Any) -> list[Any]:
    """Coerce a JSON array column into a list, empty on failure."""
    if isinstance(value, list):
        return value
    if isinstance(value, tuple):
        return list(value)
    parsed = try_json(value)
    return parsed if isinstance(parsed, list) else []


def to_object(value: Any) -> Mapping[str, Any] | None:
    """Coerce a JSON object column into a mapping, None on failure."""
    if isinstance(value, Mapping):
        return value
    parsed = try_json(value)
    return parsed if isinstance(parsed, Mapping) else None


def to_kebab(value: Any) -> str:
    """Build a lower-case hyphenated slug.

    Args:
        value: Label to slugify; None yields an empty slug.

    Returns:
        Slug with runs of non ``[a-z0-9]`` characters collapsed to one
        hyphen and no leading or trailing hyphen.
    """
    if value is None:
        return ""
    lowered = str(value).strip().lower()
    return _NON_SLUG_CHARACTERS.sub("-", lowered).strip("-")


def first_attachment_url(value: Any) -> str | None:
    """Extract a URL from a plain string or an attachment array.

    Args:
        value: URL string, or a list of attachment objects carrying ``url``.

    Returns:
        The trimmed URL, the first attachment's URL, or None.
    """
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, (list, tuple)) and value:
        first_attachment = value[0]
        if isinstance(first_attachment, Mapping):
            url = first_attachment.get("url")
            if isinstance(url, str) and url.strip():
                return url.strip()
    return None


def to_text(value: Any, trim: bool = False) -> str | None:
    """Coerce a scalar or structure into text.

    Args:
        value: Raw column value.
        trim: Strip surrounding whitespace from the result.

    Returns:
        None for None, compact JSON text for mappings and lists, and
        ``str`` of anything else.
    """
    if value is None:
        return None
    if isinstance(value, str):
        text = value
    elif isinstance(value, (Mapping, list, tuple)):
        text = _dump_json(value)
    else:
        text = str(value)
    return text.strip() if trim else text


def _dump_json(value: Any) -> str:
    try:
        return json.dumps(value, separators=(",", ":"), default=str)
    except (TypeError, ValueError):
        return str(value)
