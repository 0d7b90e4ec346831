"""Field-table command wiring for Stencil CLI."""

from __future__ import annotations

import argparse
from typing import Any

from ingest.pipeline import build_ingest_field_table
from ingest.template_client import StencilClient


def add_field_table_command(subparsers: Any) -> None:
    """Register field-table subcommand."""
    subparsers.add_parser(
        "field-table",
        help="Show effective candidate keys and defaults per canonical field",
    )


def run_field_table_command(client: StencilClient, args: argparse.Namespace) -> int:
    """Print one tab-separated row per canonical field."""
    for spec in build_ingest_field_table(client.config):
        print(
            f"{spec.canonical_name}\t"
            f"{spec.coercion_kind.value}\t"
            f"{spec.default!r}\t"
            f"{', '.join(spec.candidate_keys)}"
        )
    return 0
