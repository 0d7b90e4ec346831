"""Runtime configuration model for Stencil.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from core.constants import (
    DEFAULT_AIRTABLE_API_URL,
    DEFAULT_AIRTABLE_TABLE,
    DEFAULT_AIRTABLE_VIEW,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_LOG_LEVEL,
    DEFAULT_REQUIRES_INPUT,
    FALSY_WORDS,
    MAX_AIRTABLE_PAGE_SIZE,
    SUPPORTED_LOG_LEVELS,
    TRUTHY_WORDS,
)
from core.errors import StencilConfigError


@dataclass(frozen=True)
class StencilConfig:
    """Validated runtime configuration.

    Attributes:
        airtable_base: Airtable base id holding the templates table.
        airtable_api_key: Bearer token for the Airtable API.
        airtable_table: Table name or id to list records from.
        airtable_view: Optional view applied to list requests.
        api_url: Airtable REST root URL.
        page_size: Optional records-per-page request hint.
        http_timeout: Per-request timeout in seconds.
        requires_default: Default for ``requires_photo``/``requires_text``.
        demo_fallback: Serve a demo record when no source is configured.
        field_map_path: Optional YAML field-map override file.
        log_level: Minimum structured log level.
    """

    airtable_base: str | None = None
    airtable_api_key: str | None = None
    airtable_table: str = DEFAULT_AIRTABLE_TABLE
    airtable_view: str | None = DEFAULT_AIRTABLE_VIEW
    api_url: str = DEFAULT_AIRTABLE_API_URL
    page_size: int | None = None
    http_timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    requires_default: bool = DEFAULT_REQUIRES_INPUT
    demo_fallback: bool = True
    field_map_path: Path | None = None
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def is_source_configured(self) -> bool:
        """Whether both the base id and API key are present."""
        return bool(self.airtable_base and self.airtable_api_key)

    @classmethod
    def from_env(cls) -> "StencilConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            StencilConfigError: If environment values are invalid.
        """
        field_map_value = _optional_env("STENCIL_FIELD_MAP")
        return cls(
            airtable_base=_optional_env("AIRTABLE_BASE"),
            airtable_api_key=_optional_env("AIRTABLE_API_KEY"),
            airtable_table=_optional_env("AIRTABLE_TABLE") or DEFAULT_AIRTABLE_TABLE,
            airtable_view=_parse_view(os.getenv("AIRTABLE_VIEW")),
            api_url=(_optional_env("AIRTABLE_API_URL") or DEFAULT_AIRTABLE_API_URL).rstrip("/"),
            page_size=_parse_page_size(_optional_env("STENCIL_PAGE_SIZE")),
            http_timeout=_parse_timeout(_optional_env("STENCIL_HTTP_TIMEOUT")),
            requires_default=_parse_flag(
                "STENCIL_REQUIRES_DEFAULT", os.getenv("STENCIL_REQUIRES_DEFAULT"), DEFAULT_REQUIRES_INPUT
            ),
            demo_fallback=_parse_flag(
                "STENCIL_DEMO_FALLBACK", os.getenv("STENCIL_DEMO_FALLBACK"), True
            ),
            field_map_path=Path(field_map_value).expanduser() if field_map_value else None,
            log_level=_parse_log_level(_optional_env("STENCIL_LOG_LEVEL")),
        )


def _optional_env(name: str) -> str | None:
    raw_value = os.getenv(name)
    if raw_value is None:
        return None
    stripped_value = raw_value.strip()
    return stripped_value or None


def _parse_view(raw_value: str | None) -> str | None:
    """Unset means the default view; an explicitly empty value disables it."""
    if raw_value is None:
        return DEFAULT_AIRTABLE_VIEW
    return raw_value.strip() or None


def _parse_page_size(raw_value: str | None) -> int | None:
    """Parse the optional page size hint.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Page size or None when unset.

    Raises:
        StencilConfigError: If value is not an integer in 1..100.
    """
    if raw_value is None:
        return None
    try:
        page_size = int(raw_value)
    except ValueError as error:
        raise StencilConfigError(
            "Invalid STENCIL_PAGE_SIZE value: "
            f"expected integer, got '{raw_value}'. "
            "Set STENCIL_PAGE_SIZE to a number between 1 and 100."
        ) from error
    if not 1 <= page_size <= MAX_AIRTABLE_PAGE_SIZE:
        raise StencilConfigError(
            f"Invalid STENCIL_PAGE_SIZE value {page_size}: "
            f"Airtable accepts 1 to {MAX_AIRTABLE_PAGE_SIZE} records per page."
        )
    return page_size


def _parse_timeout(raw_value: str | None) -> float:
    if raw_value is None:
        return DEFAULT_HTTP_TIMEOUT_SECONDS
    try:
        timeout = float(raw_value)
    except ValueError as error:
        raise StencilConfigError(
            "Invalid STENCIL_HTTP_TIMEOUT value: "
            f"expected seconds as a number, got '{raw_value}'."
        ) from error
    if timeout <= 0:
        raise StencilConfigError(
            f"Invalid STENCIL_HTTP_TIMEOUT value {timeout}: timeout must be positive."
        )
    return timeout


def _parse_flag(name: str, raw_value: str | None, default: bool) -> bool:
    """Parse a strict boolean environment flag.

    Args:
        name: Environment variable name, used in error messages.
        raw_value: Raw string from environment.
        default: Value used when the variable is unset or blank.

    Returns:
        Parsed flag value.

    Raises:
        StencilConfigError: If the value is not a recognized boolean word.
    """
    if raw_value is None or not raw_value.strip():
        return default
    normalized_value = raw_value.strip().lower()
    if normalized_value in TRUTHY_WORDS:
        return True
    if normalized_value in FALSY_WORDS:
        return False
    raise StencilConfigError(
        f"Invalid {name} value '{raw_value}': "
        f"use one of {', '.join(TRUTHY_WORDS + FALSY_WORDS)}."
    )


def _parse_log_level(raw_value: str | None) -> str:
    if raw_value is None:
        return DEFAULT_LOG_LEVEL
    level = raw_value.upper()
    if level not in SUPPORTED_LOG_LEVELS:
        raise StencilConfigError(
            f"Invalid STENCIL_LOG_LEVEL value '{raw_value}': "
            f"use one of {', '.join(SUPPORTED_LOG_LEVELS)}."
        )
    return level
