"""Continuation-token pagination over a remote collection.

This module walks a page fetch capability to completion. The result is
all-or-nothing: an upstream failure on any page propagates and no
partial record list is returned.
"""

from __future__ import annotations

from typing import Callable

from core.errors import StencilUpstreamError
from core.logging_config import ensure_logging_configured, get_logger
from core.types import RawRecord, RecordPage

_LOGGER = get_logger(__name__)

PageFetcher = Callable[[str | None], RecordPage]


def collect_records(fetch_page: PageFetcher) -> list[RawRecord]:
    """Fetch every page and concatenate records in request order.

    Args:
        fetch_page: Callable returning one page for a cursor; the first
            call receives None.

    Returns:
        Raw records in page order, then within-page order.

    Raises:
        StencilUpstreamError: If any page request fails or the source
            hands back a cursor it already returned.
    """
    ensure_logging_configured()
    records: list[RawRecord] = []
    seen_cursors: set[str] = set()
    cursor: str | None = None
    page_index = 0
    while True:
        page = fetch_page(cursor)
        page_index += 1
        records.extend(page.records)
        _LOGGER.debug(
            "page_fetched",
            page_index=page_index,
            record_count=len(page.records),
            has_more=page.next_cursor is not None,
        )
        if not page.next_cursor:
            break
        if page.next_cursor in seen_cursors:
            raise StencilUpstreamError(
                f"Source repeated continuation token '{page.next_cursor}' "
                f"after {page_index} pages. Aborting to avoid an endless fetch."
            )
        seen_cursors.add(page.next_cursor)
        cursor = page.next_cursor
    _LOGGER.info("collection_completed", page_count=page_index, record_count=len(records))
    return records
