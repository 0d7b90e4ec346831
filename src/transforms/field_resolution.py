"""Candidate-key field resolution.

Source columns are renamed and recapitalized across deployments, so each
canonical field names an ordered list of candidate keys. Resolution is a
two-pass lookup: exact key match first, then a normalized match that
ignores case and punctuation.
"""

from __future__ import annotations

import re
from typing import Any, Mapping, Sequence

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]")


class _Missing:
    """Sentinel type for an unresolved field."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def normalize_key(key: str) -> str:
    """Lower-case a key and strip every non-alphanumeric character."""
    return _NON_ALPHANUMERIC.sub("", str(key).lower())


def resolve_field(raw_fields: Mapping[str, Any], candidate_keys: Sequence[str]) -> Any:
    """Return the value of the highest-priority candidate present.

    Args:
        raw_fields: Source column mapping of one record.
        candidate_keys: Candidate column names, highest priority first.

    Returns:
        The resolved raw value (an explicit None counts as present), or
        ``MISSING`` when no candidate matches exactly or after
        normalization.
    """
    for candidate_key in candidate_keys:
        if candidate_key in raw_fields:
            return raw_fields[candidate_key]
    normalized_lookup = _build_normalized_lookup(raw_fields)
    for candidate_key in candidate_keys:
        normalized_candidate = normalize_key(candidate_key)
        if not normalized_candidate:
            continue
        raw_key = normalized_lookup.get(normalized_candidate)
        if raw_key is not None:
            return raw_fields[raw_key]
    return MISSING


def _build_normalized_lookup(raw_fields: Mapping[str, Any]) -> dict[str, str]:
    """Map normalized keys to raw keys; the first raw key wins on collision."""
    lookup: dict[str, str] = {}
    for raw_key in raw_fields:
        lookup.setdefault(normalize_key(raw_key), raw_key)
    return lookup
