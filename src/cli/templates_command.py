"""Templates command wiring for Stencil CLI.

This module registers the templates subcommand and prints the canonical
``{"records": [...]}`` payload as JSON.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from core.constants import SUPPORTED_TYPE_STYLES, TYPE_STYLE_KEBAB
from core.errors import StencilUpstreamError
from core.types import OutputOptions
from ingest.template_client import StencilClient

UPSTREAM_FAILURE_EXIT_CODE = 2


def add_templates_command(subparsers: Any) -> None:
    """Register templates subcommand."""
    parser = subparsers.add_parser("templates", help="List canonical template records")
    parser.add_argument("--slug", action="store_true", help="Include a slug object per record")
    parser.add_argument(
        "--type",
        dest="type_style",
        choices=SUPPORTED_TYPE_STYLES,
        default=TYPE_STYLE_KEBAB,
        help="Machine type casing",
    )
    parser.add_argument(
        "--slugify-id",
        action="store_true",
        help="Rewrite template ids into tpl- prefixed slugs",
    )
    parser.add_argument("--template-id", help="Only return the template with this id")
    parser.add_argument("--view", help="Override AIRTABLE_VIEW; pass '' for no view")
    parser.add_argument("--table", help="Override AIRTABLE_TABLE")
    parser.add_argument("--indent", type=int, help="Pretty-print JSON with this indent")


def run_templates_command(client: StencilClient, args: argparse.Namespace) -> int:
    """Handle templates command invocation."""
    options = OutputOptions(
        want_slug=args.slug,
        type_style=args.type_style,
        slugify_id=args.slugify_id,
    )
    try:
        payload = client.templates(
            options,
            template_id=args.template_id,
            view=args.view,
            table=args.table,
        )
    except StencilUpstreamError as error:
        error_payload = {
            "error": f"Airtable {error.status_code}" if error.status_code else str(error),
            "details": error.body,
        }
        print(json.dumps(error_payload), file=sys.stderr)
        return UPSTREAM_FAILURE_EXIT_CODE
    print(json.dumps(payload, indent=args.indent, ensure_ascii=False))
    return 0
