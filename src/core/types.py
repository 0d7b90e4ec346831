"""Shared typed models.

This module defines immutable data models used by the collector, the
record mapper, and the CLI to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from core.constants import DEFAULT_AIRTABLE_TABLE, DEFAULT_AIRTABLE_VIEW, TYPE_STYLE_KEBAB


@dataclass(frozen=True)
class RawRecord:
    """One source row as delivered by the remote table.

    Attributes:
        record_id: Opaque source-assigned identifier.
        fields: Column name to value mapping with unstable key names.
    """

    record_id: str
    fields: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RecordPage:
    """One page returned by a page fetch.

    Attributes:
        records: Raw records in source order.
        next_cursor: Continuation token, None on the last page.
    """

    records: tuple[RawRecord, ...]
    next_cursor: str | None = None


@dataclass(frozen=True)
class SourceCoordinates:
    """Location of the remote template collection.

    Attributes:
        base_id: Airtable base identifier.
        table: Table name or id.
        view: Optional view name.
        formula: Optional ``filterByFormula`` expression.
    """

    base_id: str
    table: str = DEFAULT_AIRTABLE_TABLE
    view: str | None = DEFAULT_AIRTABLE_VIEW
    formula: str | None = None


class CoercionKind(str, Enum):
    """Target type a canonical field is coerced into."""

    RAW_STRING = "raw-string"
    TRIMMED_STRING = "trimmed-string"
    BOOLEAN = "boolean"
    JSON_ARRAY = "json-array"
    JSON_OBJECT = "json-object"
    ATTACHMENT_URL = "url-or-first-attachment-url"


@dataclass(frozen=True)
class FieldSpec:
    """Static rule resolving and coercing one canonical field.

    Attributes:
        canonical_name: Output field name.
        candidate_keys: Source column names, highest priority first.
        coercion_kind: Target type of the field.
        default: Value used when no candidate key resolves.
    """

    canonical_name: str
    candidate_keys: tuple[str, ...]
    coercion_kind: CoercionKind
    default: Any = None


@dataclass(frozen=True)
class OutputOptions:
    """Caller-selected output variants.

    Attributes:
        want_slug: Include a ``slug`` object per record.
        type_style: ``kebab`` or ``raw`` machine type casing.
        slugify_id: Rewrite ``template_id`` into a prefixed kebab slug.
    """

    want_slug: bool = False
    type_style: str = TYPE_STYLE_KEBAB
    slugify_id: bool = False


@dataclass(frozen=True)
class TypeMeta:
    """Descriptive metadata for a template type.

    Attributes:
        title: Optional display title.
        instructions_md: Markdown instructions, empty when absent.
        requirements: Parsed requirement entries.
    """

    title: str | None = None
    instructions_md: str = ""
    requirements: tuple[Any, ...] = ()


@dataclass(frozen=True)
class CanonicalRecord:
    """Stable fixed-shape template record.

    Attributes:
        template_id: Non-empty template identifier.
        name: Display name.
        type_label: Original-case human type label (``TYPE``).
        machine_type: Derived machine type slug (``type``).
        fields: Field-definition mappings for the renderer.
        layout: Parsed layout object or None.
        requires_photo: Photo input is mandatory.
        requires_text: Text input is mandatory.
        optional: Template inputs are optional as a whole.
        optional_photo: Photo input is optional.
        optional_text: Text input is optional.
        base_image: Base image URL or None.
        type_meta: Type metadata block.
        slug: Optional slug object, present only on request.
    """

    template_id: str
    name: str
    type_label: str
    machine_type: str
    fields: tuple[Any, ...]
    layout: Mapping[str, Any] | None
    requires_photo: bool
    requires_text: bool
    optional: bool
    optional_photo: bool
    optional_text: bool
    base_image: str | None
    type_meta: TypeMeta
    slug: Mapping[str, str] | None = None

    def to_payload(self) -> dict[str, Any]:
        """Render the wire-contract mapping for JSON output."""
        payload: dict[str, Any] = {
            "template_id": self.template_id,
            "name": self.name,
            "TYPE": self.type_label,
            "type": self.machine_type,
            "fields": list(self.fields),
            "layout": dict(self.layout) if self.layout is not None else None,
            "requires_photo": self.requires_photo,
            "requires_text": self.requires_text,
            "optional": self.optional,
            "optional_photo": self.optional_photo,
            "optional_text": self.optional_text,
            "base_image": self.base_image,
            "typeMeta": {
                "title": self.type_meta.title,
                "instructions_md": self.type_meta.instructions_md,
                "requirements": list(self.type_meta.requirements),
            },
        }
        if self.slug is not None:
            payload["slug"] = dict(self.slug)
        return payload


@dataclass(frozen=True)
class FieldOverride:
    """Deployment override for one canonical field.

    Attributes:
        canonical_name: Field the override applies to.
        candidate_keys: Extra candidate columns, tried before built-ins.
        has_default: Whether ``default`` replaces the built-in default.
        default: Replacement default value.
    """

    canonical_name: str
    candidate_keys: tuple[str, ...] = ()
    has_default: bool = False
    default: Any = None
