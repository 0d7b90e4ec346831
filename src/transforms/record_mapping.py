"""Raw record to canonical template record mapping.

This module composes field resolution and value coercion over the field
table. Every field falls back to its default independently, so a record
that resolves nothing still maps to a valid canonical record.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from core.constants import TEMPLATE_ID_PREFIX, TYPE_STYLE_RAW
from core.types import (
    CanonicalRecord,
    CoercionKind,
    FieldSpec,
    OutputOptions,
    RawRecord,
    TypeMeta,
)
from transforms.field_resolution import MISSING, resolve_field
from transforms.field_table import (
    BASE_IMAGE_FIELD,
    DEFAULT_FIELD_TABLE,
    FIELDS_FIELD,
    LAYOUT_FIELD,
    MACHINE_TYPE_FIELD,
    NAME_FIELD,
    OPTIONAL_FIELD,
    OPTIONAL_PHOTO_FIELD,
    OPTIONAL_TEXT_FIELD,
    REQUIRES_PHOTO_FIELD,
    REQUIRES_TEXT_FIELD,
    TEMPLATE_ID_FIELD,
    TYPE_INSTRUCTIONS_FIELD,
    TYPE_LABEL_FIELD,
    TYPE_REQUIREMENTS_FIELD,
    TYPE_TITLE_FIELD,
    field_table_index,
)
from transforms.value_coercion import (
    first_attachment_url,
    to_array,
    to_bool,
    to_kebab,
    to_object,
    to_text,
)

_DEFAULT_SPECS = field_table_index(DEFAULT_FIELD_TABLE)


def map_record(
    raw: RawRecord,
    options: OutputOptions | None = None,
    field_table: tuple[FieldSpec, ...] = DEFAULT_FIELD_TABLE,
) -> CanonicalRecord:
    """Map one raw source record into a canonical record.

    Args:
        raw: Source record with unstable column names.
        options: Output variants; defaults apply when omitted.
        field_table: Field rules to resolve and coerce with; canonical
            fields it leaves out use their built-in rule.

    Returns:
        Canonical record honoring every field default.
    """
    return _RecordReader(raw, _complete_index(field_table)).build(options or OutputOptions())


def map_records(
    raws: Iterable[RawRecord],
    options: OutputOptions | None = None,
    field_table: tuple[FieldSpec, ...] = DEFAULT_FIELD_TABLE,
) -> list[CanonicalRecord]:
    """Map raw records in order.

    Args:
        raws: Source records in page order.
        options: Output variants shared by every record.
        field_table: Field rules to resolve and coerce with.

    Returns:
        Canonical records aligned to the input order.
    """
    specs = _complete_index(field_table)
    resolved_options = options or OutputOptions()
    return [_RecordReader(raw, specs).build(resolved_options) for raw in raws]


def coerce_value(spec: FieldSpec, raw_value: Any) -> Any:
    """Coerce a resolved value by the field's coercion kind.

    Args:
        spec: Field rule.
        raw_value: Resolved raw value, or ``MISSING``.

    Returns:
        The coerced value, or the field default when the value is
        ``MISSING``. Text and boolean fields also take the default for
        an explicit None.
    """
    if raw_value is MISSING:
        return spec.default
    kind = spec.coercion_kind
    if kind is CoercionKind.BOOLEAN:
        return spec.default if raw_value is None else to_bool(raw_value)
    if kind is CoercionKind.JSON_ARRAY:
        return tuple(to_array(raw_value))
    if kind is CoercionKind.JSON_OBJECT:
        return to_object(raw_value)
    if kind is CoercionKind.ATTACHMENT_URL:
        return first_attachment_url(raw_value)
    text = to_text(raw_value, trim=kind is CoercionKind.TRIMMED_STRING)
    return spec.default if text is None else text


def _complete_index(field_table: tuple[FieldSpec, ...]) -> dict[str, FieldSpec]:
    """Index a field table, filling omitted canonical fields from the default table."""
    return {**_DEFAULT_SPECS, **field_table_index(field_table)}


class _RecordReader:
    """Reads canonical fields out of one raw record."""

    def __init__(self, raw: RawRecord, specs: Mapping[str, FieldSpec]) -> None:
        self._raw = raw
        self._specs = specs

    def read(self, canonical_name: str) -> Any:
        spec = self._specs[canonical_name]
        return coerce_value(spec, resolve_field(self._raw.fields, spec.candidate_keys))

    def build(self, options: OutputOptions) -> CanonicalRecord:
        type_label = self.read(TYPE_LABEL_FIELD)
        machine_type = _build_machine_type(
            self.read(MACHINE_TYPE_FIELD), type_label, options.type_style
        )
        return CanonicalRecord(
            template_id=_build_template_id(
                self.read(TEMPLATE_ID_FIELD), self._raw.record_id, options.slugify_id
            ),
            name=self.read(NAME_FIELD),
            type_label=type_label,
            machine_type=machine_type,
            fields=self.read(FIELDS_FIELD),
            layout=_denest_layout(self.read(LAYOUT_FIELD)),
            requires_photo=self.read(REQUIRES_PHOTO_FIELD),
            requires_text=self.read(REQUIRES_TEXT_FIELD),
            optional=self.read(OPTIONAL_FIELD),
            optional_photo=self.read(OPTIONAL_PHOTO_FIELD),
            optional_text=self.read(OPTIONAL_TEXT_FIELD),
            base_image=self.read(BASE_IMAGE_FIELD),
            type_meta=TypeMeta(
                title=self.read(TYPE_TITLE_FIELD),
                instructions_md=self.read(TYPE_INSTRUCTIONS_FIELD),
                requirements=self.read(TYPE_REQUIREMENTS_FIELD),
            ),
            slug={"type": machine_type} if options.want_slug else None,
        )


def _build_template_id(resolved_id: str | None, record_id: str, slugify_id: bool) -> str:
    """Resolve the template id, falling back to the source record id."""
    template_id = resolved_id or record_id
    if not slugify_id:
        return template_id
    slug = to_kebab(template_id) or to_kebab(record_id)
    if slug.startswith(TEMPLATE_ID_PREFIX):
        return slug
    return f"{TEMPLATE_ID_PREFIX}{slug}"


def _build_machine_type(machine_type: str | None, type_label: str, type_style: str) -> str:
    """Prefer the explicit machine type column, else derive from the label."""
    source_value = machine_type or type_label
    if type_style == TYPE_STYLE_RAW:
        return source_value
    return to_kebab(source_value)


def _denest_layout(layout: Mapping[str, Any] | None) -> Mapping[str, Any] | None:
    """Hoist ``layout.layout`` when only the nested object carries elements."""
    if layout is None or isinstance(layout.get("elements"), list):
        return layout
    nested_layout = layout.get("layout")
    if isinstance(nested_layout, Mapping) and isinstance(nested_layout.get("elements"), list):
        return nested_layout
    return layout
