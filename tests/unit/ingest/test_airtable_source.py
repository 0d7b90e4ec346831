"""Unit tests for the Airtable page fetcher."""

from __future__ import annotations

from typing import Callable

import httpx
import pytest

from core.config import StencilConfig
from core.errors import StencilConfigError, StencilUpstreamError
from core.types import SourceCoordinates
from ingest.airtable_source import (
    AirtablePageFetcher,
    coordinates_from_config,
    template_id_formula,
)
from tests.fixture_paths import load_json_fixture

_CONFIG = StencilConfig(airtable_base="appTemplates", airtable_api_key="patSecret", page_size=50)


def _fetcher(
    handler: Callable[[httpx.Request], httpx.Response],
    coordinates: SourceCoordinates | None = None,
) -> AirtablePageFetcher:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return AirtablePageFetcher(_CONFIG, coordinates or coordinates_from_config(_CONFIG), client)


def test_fetch_first_page_sends_view_page_size_and_auth() -> None:
    """First page request should carry view, pageSize, and bearer auth only."""
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json=load_json_fixture("airtable/page_one.json"))

    page = _fetcher(handler)(None)

    request = captured[0]
    assert request.url.path == "/v0/appTemplates/templates"
    assert dict(request.url.params) == {"view": "Grid view", "pageSize": "50"}
    assert request.headers["Authorization"] == "Bearer patSecret"
    assert [record.record_id for record in page.records] == ["rec001", "rec002"]
    assert page.next_cursor == "itrPageTwo/rec002"


def test_fetch_page_passes_cursor_and_formula() -> None:
    """Follow-up requests should send the offset and filter formula."""
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json=load_json_fixture("airtable/page_two.json"))

    coordinates = coordinates_from_config(_CONFIG, template_id_formula("tpl-beer-mat"))
    page = _fetcher(handler, coordinates)("itrPageTwo/rec002")

    params = captured[0].url.params
    assert params["offset"] == "itrPageTwo/rec002"
    assert params["filterByFormula"] == "{template_id} = 'tpl-beer-mat'"
    assert "fields[]" not in params
    assert page.next_cursor is None


def test_fetch_page_raises_upstream_error_for_non_success_status() -> None:
    """A non-2xx response should raise with status and body attached."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(422, text='{"error":{"type":"UNKNOWN_FIELD_NAME"}}')

    with pytest.raises(StencilUpstreamError) as error_info:
        _fetcher(handler)(None)

    assert error_info.value.status_code == 422
    assert "UNKNOWN_FIELD_NAME" in error_info.value.body


def test_fetch_page_wraps_transport_failures() -> None:
    """Network failures should surface as upstream errors without a status."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(StencilUpstreamError) as error_info:
        _fetcher(handler)(None)

    assert error_info.value.status_code is None


@pytest.mark.parametrize("body", ["<html>maintenance</html>", '{"rows": []}', "[]"])
def test_fetch_page_rejects_unexpected_bodies(body: str) -> None:
    """Bodies that are not list-records payloads should raise."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text=body)

    with pytest.raises(StencilUpstreamError):
        _fetcher(handler)(None)


def test_fetch_page_skips_rows_without_id_and_tolerates_bad_fields() -> None:
    """Rows lacking an id are skipped and non-object fields become empty."""
    payload = {
        "records": [
            {"fields": {"name": "orphan"}},
            {"id": "rec9", "fields": "not-an-object"},
        ]
    }

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=payload)

    page = _fetcher(handler)(None)

    assert [(record.record_id, dict(record.fields)) for record in page.records] == [("rec9", {})]


def test_fetch_page_quotes_table_names() -> None:
    """Table names with spaces should be path-encoded."""
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"records": []})

    coordinates = SourceCoordinates(base_id="appTemplates", table="Print Templates", view=None)
    _fetcher(handler, coordinates)(None)

    assert captured[0].url.raw_path.startswith(b"/v0/appTemplates/Print%20Templates")
    assert "view" not in captured[0].url.params


def test_fetcher_requires_api_key() -> None:
    """Building a fetcher without an API key should fail fast."""
    config = StencilConfig(airtable_base="appTemplates")

    with pytest.raises(StencilConfigError):
        AirtablePageFetcher(config, coordinates_from_config(config))


def test_coordinates_from_config_requires_base() -> None:
    """Coordinates need a configured base id."""
    with pytest.raises(StencilConfigError):
        coordinates_from_config(StencilConfig(airtable_api_key="patSecret"))


def test_template_id_formula_escapes_quotes_and_backslashes() -> None:
    """Formula values should not be able to close the string literal."""
    assert template_id_formula("o'brien\\x") == "{template_id} = 'o\\'brien\\\\x'"
