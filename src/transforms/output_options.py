"""Output option parsing from caller query flags."""

from __future__ import annotations

from typing import Mapping

from core.constants import TYPE_STYLE_KEBAB, TYPE_STYLE_RAW
from core.types import OutputOptions
from transforms.value_coercion import to_bool


def output_options_from_query(query: Mapping[str, object]) -> OutputOptions:
    """Read output variants from boolean-ish query flags.

    Args:
        query: Caller flags such as ``slug``, ``type``, and ``slugify_id``.

    Returns:
        Output options; ``type`` selects raw casing only for ``raw``.
    """
    raw_style = query.get("type")
    type_style = (
        TYPE_STYLE_RAW
        if isinstance(raw_style, str) and raw_style.strip().lower() == TYPE_STYLE_RAW
        else TYPE_STYLE_KEBAB
    )
    return OutputOptions(
        want_slug=to_bool(query.get("slug")),
        type_style=type_style,
        slugify_id=to_bool(query.get("slugify_id")),
    )
