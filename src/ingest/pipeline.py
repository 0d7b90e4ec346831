"""Template ingest orchestration.

This module coordinates page collection, record mapping, and output
shaping for one ingestion call. The call either returns every canonical
record or fails with the upstream error; there is no partial result.
"""

from __future__ import annotations

from typing import Any

from core.config import StencilConfig
from core.constants import DEMO_CANVAS_MM, DEMO_TEMPLATE_ID, DEMO_TEMPLATE_NAME
from core.errors import StencilConfigError
from core.field_map import load_field_map
from core.logging_config import ensure_logging_configured, get_logger
from core.types import FieldSpec, OutputOptions, RawRecord, SourceCoordinates
from ingest.airtable_source import AirtablePageFetcher, coordinates_from_config
from ingest.pagination import PageFetcher, collect_records
from transforms.field_table import build_field_table
from transforms.record_mapping import map_records

_LOGGER = get_logger(__name__)


def ingest_templates(
    config: StencilConfig,
    options: OutputOptions | None = None,
    coordinates: SourceCoordinates | None = None,
    fetch_page: PageFetcher | None = None,
    template_id: str | None = None,
) -> dict[str, Any]:
    """Collect and normalize every template record.

    Args:
        config: Runtime configuration.
        options: Output variants for every record.
        coordinates: Optional source location; defaults from config.
        fetch_page: Optional injected page fetch capability.
        template_id: Optional id filter applied to the demo record; remote
            sources filter through ``coordinates`` instead.

    Returns:
        JSON-serializable ``{"records": [...]}`` object in source order.

    Raises:
        StencilUpstreamError: If any page request fails.
        StencilConfigError: If no source is configured and the demo
            fallback is disabled.
        StencilFieldMapError: If the configured field map is invalid.
    """
    ensure_logging_configured()
    resolved_options = options or OutputOptions()
    field_table = build_ingest_field_table(config)
    if fetch_page is not None:
        raw_records = collect_records(fetch_page)
        source = "injected"
    elif coordinates is not None or config.is_source_configured:
        raw_records = _collect_from_airtable(config, coordinates)
        source = "airtable"
    elif config.demo_fallback:
        raw_records = build_demo_records(template_id)
        source = "demo"
        _LOGGER.info(
            "demo_records_served", record_count=len(raw_records), template_id=template_id
        )
    else:
        raise StencilConfigError(
            "No template source configured. Set AIRTABLE_BASE and AIRTABLE_API_KEY, "
            "or enable STENCIL_DEMO_FALLBACK."
        )
    canonical_records = map_records(raw_records, resolved_options, field_table)
    _LOGGER.info(
        "ingest_completed",
        source=source,
        input_count=len(raw_records),
        output_count=len(canonical_records),
        type_style=resolved_options.type_style,
        want_slug=resolved_options.want_slug,
        slugify_id=resolved_options.slugify_id,
    )
    return {"records": [record.to_payload() for record in canonical_records]}


def build_ingest_field_table(config: StencilConfig) -> tuple[FieldSpec, ...]:
    """Build the field table from config defaults and the field map file."""
    overrides = load_field_map(config.field_map_path) if config.field_map_path else None
    return build_field_table(overrides, requires_default=config.requires_default)


def build_demo_records(template_id: str | None = None) -> list[RawRecord]:
    """Return the placeholder record served when no source is configured.

    Args:
        template_id: Optional id; a non-matching id yields no records.
    """
    if template_id is not None and template_id != DEMO_TEMPLATE_ID:
        return []
    return [
        RawRecord(
            record_id=DEMO_TEMPLATE_ID,
            fields={
                "template_id": DEMO_TEMPLATE_ID,
                "name": DEMO_TEMPLATE_NAME,
                "fields_json": [],
                "layout_spec": {"canvasMM": list(DEMO_CANVAS_MM), "elements": []},
            },
        )
    ]


def _collect_from_airtable(
    config: StencilConfig,
    coordinates: SourceCoordinates | None,
) -> list[RawRecord]:
    resolved_coordinates = coordinates or coordinates_from_config(config)
    with AirtablePageFetcher(config, resolved_coordinates) as fetch_page:
        return collect_records(fetch_page)
