"""Python SDK for template ingestion.

This module exposes a high-level client over the ingest pipeline so the
CLI and library callers share one entry point.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from core.config import StencilConfig
from core.logging_config import configure_logging
from core.types import OutputOptions, SourceCoordinates
from ingest.airtable_source import coordinates_from_config, template_id_formula
from ingest.pipeline import ingest_templates
from ingest.pagination import PageFetcher


class StencilClient:
    """Primary SDK entry point for template ingestion."""

    def __init__(self, config: StencilConfig | None = None) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration, read from the
                environment when omitted.
        """
        self._config = config or StencilConfig.from_env()
        configure_logging(self._config.log_level)

    @property
    def config(self) -> StencilConfig:
        """Runtime configuration used by this client."""
        return self._config

    def templates(
        self,
        options: OutputOptions | None = None,
        template_id: str | None = None,
        view: str | None = None,
        table: str | None = None,
        fetch_page: PageFetcher | None = None,
    ) -> dict[str, Any]:
        """List canonical template records.

        Args:
            options: Output variants.
            template_id: Optional template id to filter on server side.
            view: Optional view overriding the configured one.
            table: Optional table overriding the configured one.
            fetch_page: Optional injected page fetch capability.

        Returns:
            ``{"records": [...]}`` payload.

        Raises:
            StencilUpstreamError: If the source rejects a page request.
            StencilConfigError: If no source is available.
        """
        coordinates = self._build_coordinates(template_id, view, table)
        return ingest_templates(self._config, options, coordinates, fetch_page, template_id)

    def _build_coordinates(
        self,
        template_id: str | None,
        view: str | None,
        table: str | None,
    ) -> SourceCoordinates | None:
        if not self._config.is_source_configured:
            return None
        formula = template_id_formula(template_id) if template_id else None
        coordinates = coordinates_from_config(self._config, formula)
        if view is not None:
            coordinates = replace(coordinates, view=view or None)
        if table:
            coordinates = replace(coordinates, table=table)
        return coordinates
