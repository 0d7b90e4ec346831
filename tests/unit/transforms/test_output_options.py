"""Unit tests for query-flag output options."""

from __future__ import annotations

from core.types import OutputOptions
from transforms.output_options import output_options_from_query


def test_output_options_from_query_defaults_to_kebab_without_slug() -> None:
    """An empty query should produce default output options."""
    assert output_options_from_query({}) == OutputOptions()


def test_output_options_from_query_reads_boolean_ish_flags() -> None:
    """Slug and id flags should accept boolean-ish strings."""
    options = output_options_from_query({"slug": "1", "type": "RAW", "slugify_id": "yes"})

    assert options == OutputOptions(want_slug=True, type_style="raw", slugify_id=True)


def test_output_options_from_query_treats_unknown_type_as_kebab() -> None:
    """Any type value other than raw should select kebab casing."""
    assert output_options_from_query({"type": "snake"}).type_style == "kebab"
