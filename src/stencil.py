"""Public SDK surface for Stencil.

This module provides a stable import path for library users.
It re-exports the primary client, typed models, and pure helpers.
"""

from __future__ import annotations

from core.config import StencilConfig
from core.errors import (
    StencilConfigError,
    StencilError,
    StencilFieldMapError,
    StencilUpstreamError,
)
from core.field_map import load_field_map
from core.types import (
    CanonicalRecord,
    CoercionKind,
    FieldSpec,
    OutputOptions,
    RawRecord,
    RecordPage,
    SourceCoordinates,
)
from ingest.airtable_source import AirtablePageFetcher, template_id_formula
from ingest.pagination import collect_records
from ingest.pipeline import ingest_templates
from ingest.template_client import StencilClient
from transforms.field_resolution import MISSING, resolve_field
from transforms.field_table import DEFAULT_FIELD_TABLE, build_field_table
from transforms.output_options import output_options_from_query
from transforms.record_mapping import map_record, map_records

__all__ = [
    "AirtablePageFetcher",
    "CanonicalRecord",
    "CoercionKind",
    "DEFAULT_FIELD_TABLE",
    "FieldSpec",
    "MISSING",
    "OutputOptions",
    "RawRecord",
    "RecordPage",
    "SourceCoordinates",
    "StencilClient",
    "StencilConfig",
    "StencilConfigError",
    "StencilError",
    "StencilFieldMapError",
    "StencilUpstreamError",
    "build_field_table",
    "collect_records",
    "ingest_templates",
    "load_field_map",
    "map_record",
    "map_records",
    "output_options_from_query",
    "resolve_field",
    "template_id_formula",
]
