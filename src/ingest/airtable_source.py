"""Airtable list-records page fetcher.

This module keeps all HTTP details of the Airtable REST API in one place
and exposes them as a ``fetch_page(cursor)`` callable for the collector.
Full records are requested; no ``fields[]`` subset is sent, so a renamed
column never makes the request itself fail.
"""

from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import quote

import httpx

from core.config import StencilConfig
from core.errors import StencilConfigError, StencilUpstreamError
from core.logging_config import get_logger
from core.types import RawRecord, RecordPage, SourceCoordinates

_LOGGER = get_logger(__name__)


def template_id_formula(value: str, column: str = "template_id") -> str:
    """Build a ``filterByFormula`` expression matching one template id.

    Args:
        value: Template id to match.
        column: Column holding template ids.

    Returns:
        Formula with backslashes and single quotes escaped.
    """
    escaped_value = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"{{{column}}} = '{escaped_value}'"


def coordinates_from_config(config: StencilConfig, formula: str | None = None) -> SourceCoordinates:
    """Build source coordinates from runtime configuration.

    Raises:
        StencilConfigError: If no Airtable base is configured.
    """
    if not config.airtable_base:
        raise StencilConfigError(
            "AIRTABLE_BASE is not set. Set AIRTABLE_BASE and AIRTABLE_API_KEY to read templates."
        )
    return SourceCoordinates(
        base_id=config.airtable_base,
        table=config.airtable_table,
        view=config.airtable_view,
        formula=formula,
    )


class AirtablePageFetcher:
    """Callable page fetcher over the Airtable list-records endpoint."""

    def __init__(
        self,
        config: StencilConfig,
        coordinates: SourceCoordinates,
        client: httpx.Client | None = None,
    ) -> None:
        """Create a page fetcher.

        Args:
            config: Runtime config with API key, URL, and timeouts.
            coordinates: Base, table, view, and filter to list.
            client: Optional injected HTTP client; left open on close.

        Raises:
            StencilConfigError: If no API key is configured.
        """
        if not config.airtable_api_key:
            raise StencilConfigError(
                "AIRTABLE_API_KEY is not set. Provide an Airtable token to read templates."
            )
        self._config = config
        self._coordinates = coordinates
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=config.http_timeout)
        self._url = (
            f"{config.api_url}/{quote(coordinates.base_id, safe='')}"
            f"/{quote(coordinates.table, safe='')}"
        )

    def __call__(self, cursor: str | None) -> RecordPage:
        """Fetch one page of records.

        Args:
            cursor: Airtable ``offset`` from the previous page, or None.

        Returns:
            Parsed page with the next cursor when more records remain.

        Raises:
            StencilUpstreamError: If the request fails or the response is
                not a list-records payload.
        """
        try:
            response = self._client.get(
                self._url,
                params=self._build_params(cursor),
                headers={"Authorization": f"Bearer {self._config.airtable_api_key}"},
            )
        except httpx.HTTPError as error:
            _LOGGER.error("upstream_request_failed", url=self._url, error=str(error))
            raise StencilUpstreamError(
                f"Airtable request failed: {error}. Check network access and AIRTABLE_API_URL.",
                status_code=None,
                body=str(error),
            ) from error
        if not response.is_success:
            _LOGGER.error(
                "upstream_request_failed", url=self._url, status_code=response.status_code
            )
            raise StencilUpstreamError(
                f"Airtable {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )
        return _parse_page(response)

    def close(self) -> None:
        """Close the HTTP client when this fetcher created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "AirtablePageFetcher":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _build_params(self, cursor: str | None) -> dict[str, str]:
        params: dict[str, str] = {}
        if self._coordinates.view:
            params["view"] = self._coordinates.view
        if self._coordinates.formula:
            params["filterByFormula"] = self._coordinates.formula
        if self._config.page_size is not None:
            params["pageSize"] = str(self._config.page_size)
        if cursor:
            params["offset"] = cursor
        return params


def _parse_page(response: httpx.Response) -> RecordPage:
    """Parse a list-records response body.

    Args:
        response: Successful HTTP response.

    Returns:
        Page of raw records.

    Raises:
        StencilUpstreamError: If the body is not a list-records payload.
    """
    try:
        payload = response.json()
    except ValueError as error:
        raise StencilUpstreamError(
            "Airtable returned a non-JSON body.",
            status_code=response.status_code,
            body=response.text,
        ) from error
    if not isinstance(payload, Mapping) or not isinstance(payload.get("records"), list):
        raise StencilUpstreamError(
            "Airtable response is missing a 'records' list.",
            status_code=response.status_code,
            body=response.text,
        )
    records = tuple(
        record
        for record in (_parse_record(row) for row in payload["records"])
        if record is not None
    )
    next_cursor = payload.get("offset")
    return RecordPage(
        records=records,
        next_cursor=next_cursor if isinstance(next_cursor, str) and next_cursor else None,
    )


def _parse_record(row: Any) -> RawRecord | None:
    if not isinstance(row, Mapping) or not isinstance(row.get("id"), str):
        _LOGGER.warning("record_skipped", reason="missing record id")
        return None
    fields = row.get("fields")
    return RawRecord(
        record_id=row["id"],
        fields=dict(fields) if isinstance(fields, Mapping) else {},
    )
