"""Canonical field table.

Each entry names a canonical output field, the source columns it may be
read from in priority order, its target type, and its default. The most
specific and most trusted column names come first.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Mapping

from core.constants import DEFAULT_OPTIONAL_INPUT, DEFAULT_REQUIRES_INPUT
from core.types import CoercionKind, FieldOverride, FieldSpec

TEMPLATE_ID_FIELD = "template_id"
NAME_FIELD = "name"
TYPE_LABEL_FIELD = "TYPE"
MACHINE_TYPE_FIELD = "type"
FIELDS_FIELD = "fields"
LAYOUT_FIELD = "layout"
REQUIRES_PHOTO_FIELD = "requires_photo"
REQUIRES_TEXT_FIELD = "requires_text"
OPTIONAL_FIELD = "optional"
OPTIONAL_PHOTO_FIELD = "optional_photo"
OPTIONAL_TEXT_FIELD = "optional_text"
BASE_IMAGE_FIELD = "base_image"
TYPE_TITLE_FIELD = "typeMeta.title"
TYPE_INSTRUCTIONS_FIELD = "typeMeta.instructions_md"
TYPE_REQUIREMENTS_FIELD = "typeMeta.requirements"

REQUIRES_FIELDS = (REQUIRES_PHOTO_FIELD, REQUIRES_TEXT_FIELD)
DERIVED_FIELDS = (TEMPLATE_ID_FIELD, MACHINE_TYPE_FIELD)

DEFAULT_FIELD_TABLE: tuple[FieldSpec, ...] = (
    FieldSpec(
        TEMPLATE_ID_FIELD,
        ("template_id", "Template_id", "Template ID", "templateId", "slug"),
        CoercionKind.TRIMMED_STRING,
    ),
    FieldSpec(
        NAME_FIELD,
        ("name", "Name", "template_name", "title"),
        CoercionKind.TRIMMED_STRING,
        "",
    ),
    FieldSpec(
        TYPE_LABEL_FIELD,
        ("TYPE", "Type", "type_label"),
        CoercionKind.TRIMMED_STRING,
        "",
    ),
    FieldSpec(
        MACHINE_TYPE_FIELD,
        ("type_slug", "type_key", "machine_type"),
        CoercionKind.TRIMMED_STRING,
    ),
    FieldSpec(
        FIELDS_FIELD,
        ("fields_json", "fields", "field_definitions"),
        CoercionKind.JSON_ARRAY,
        (),
    ),
    FieldSpec(
        LAYOUT_FIELD,
        ("layout_spec", "layout", "layout_json"),
        CoercionKind.JSON_OBJECT,
    ),
    FieldSpec(
        REQUIRES_PHOTO_FIELD,
        ("requires_photo", "Requires Photo", "photo_required"),
        CoercionKind.BOOLEAN,
        DEFAULT_REQUIRES_INPUT,
    ),
    FieldSpec(
        REQUIRES_TEXT_FIELD,
        ("requires_text", "Requires Text", "text_required"),
        CoercionKind.BOOLEAN,
        DEFAULT_REQUIRES_INPUT,
    ),
    FieldSpec(
        OPTIONAL_FIELD,
        ("optional", "is_optional"),
        CoercionKind.BOOLEAN,
        DEFAULT_OPTIONAL_INPUT,
    ),
    FieldSpec(
        OPTIONAL_PHOTO_FIELD,
        ("optional_photo", "photo_optional"),
        CoercionKind.BOOLEAN,
        DEFAULT_OPTIONAL_INPUT,
    ),
    FieldSpec(
        OPTIONAL_TEXT_FIELD,
        ("optional_text", "text_optional"),
        CoercionKind.BOOLEAN,
        DEFAULT_OPTIONAL_INPUT,
    ),
    FieldSpec(
        BASE_IMAGE_FIELD,
        ("base_image", "Base Image", "base_image_url", "background_image"),
        CoercionKind.ATTACHMENT_URL,
    ),
    FieldSpec(
        TYPE_TITLE_FIELD,
        ("type_title", "TYPE_title", "type_name"),
        CoercionKind.RAW_STRING,
    ),
    FieldSpec(
        TYPE_INSTRUCTIONS_FIELD,
        ("instructions_md", "instructions", "type_instructions"),
        CoercionKind.RAW_STRING,
        "",
    ),
    FieldSpec(
        TYPE_REQUIREMENTS_FIELD,
        ("requirements_json", "requirements", "type_requirements"),
        CoercionKind.JSON_ARRAY,
        (),
    ),
)


def build_field_table(
    overrides: Mapping[str, FieldOverride] | None = None,
    requires_default: bool = DEFAULT_REQUIRES_INPUT,
    base_table: tuple[FieldSpec, ...] = DEFAULT_FIELD_TABLE,
) -> tuple[FieldSpec, ...]:
    """Build a field table with deployment defaults and overrides applied.

    Args:
        overrides: Per-field overrides keyed by canonical name.
        requires_default: Default for the ``requires_*`` flags.
        base_table: Table to start from.

    Returns:
        New field table in the same field order.
    """
    overrides = overrides or {}
    table: list[FieldSpec] = []
    for spec in base_table:
        if spec.canonical_name in REQUIRES_FIELDS:
            spec = replace(spec, default=requires_default)
        override = overrides.get(spec.canonical_name)
        if override is not None:
            spec = _apply_override(spec, override)
        table.append(spec)
    return tuple(table)


def field_table_index(field_table: tuple[FieldSpec, ...]) -> dict[str, FieldSpec]:
    """Index a field table by canonical name."""
    return {spec.canonical_name: spec for spec in field_table}


def _apply_override(spec: FieldSpec, override: FieldOverride) -> FieldSpec:
    """Prepend override candidates and swap the default when one is set."""
    candidate_keys = tuple(override.candidate_keys) + tuple(
        key for key in spec.candidate_keys if key not in override.candidate_keys
    )
    default = override.default if override.has_default else spec.default
    if spec.coercion_kind is CoercionKind.JSON_ARRAY and isinstance(default, list):
        default = tuple(default)
    return replace(spec, candidate_keys=candidate_keys, default=default)

