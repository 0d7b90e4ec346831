"""Core constants used across Stencil modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

DEFAULT_AIRTABLE_API_URL = "https://api.airtable.com/v0"
DEFAULT_AIRTABLE_TABLE = "templates"
DEFAULT_AIRTABLE_VIEW = "Grid view"
DEFAULT_HTTP_TIMEOUT_SECONDS = 20.0
MAX_AIRTABLE_PAGE_SIZE = 100
DEFAULT_LOG_LEVEL = "INFO"
SUPPORTED_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
DEFAULT_REQUIRES_INPUT = True
DEFAULT_OPTIONAL_INPUT = False
TEMPLATE_ID_PREFIX = "tpl-"
TYPE_STYLE_KEBAB = "kebab"
TYPE_STYLE_RAW = "raw"
SUPPORTED_TYPE_STYLES = (TYPE_STYLE_KEBAB, TYPE_STYLE_RAW)
TRUTHY_WORDS = ("1", "true", "yes", "y")
FALSY_WORDS = ("0", "false", "no", "n")
FIELD_MAP_VERSION = 1
DEMO_TEMPLATE_ID = "tpl-demo-1"
DEMO_TEMPLATE_NAME = "Demo Template"
DEMO_CANVAS_MM = (100, 100)
