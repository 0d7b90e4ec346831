"""Stencil CLI entry points.

This module exposes template ingestion commands.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from cli.field_table_command import add_field_table_command, run_field_table_command
from cli.templates_command import add_templates_command, run_templates_command
from core.config import StencilConfig
from core.errors import StencilError
from ingest.template_client import StencilClient


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="stencil", description="Normalize templates from an Airtable table"
    )
    parser.add_argument("--field-map", help="Override STENCIL_FIELD_MAP for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    add_templates_command(subparsers)
    add_field_table_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Stencil CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        client = _build_client(args.field_map)
        if args.command == "templates":
            return run_templates_command(client, args)
        if args.command == "field-table":
            return run_field_table_command(client, args)
    except StencilError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(field_map: str | None) -> StencilClient:
    """Build SDK client with optional field-map override.

    Args:
        field_map: Optional field-map path.

    Returns:
        Configured SDK client.
    """
    config = StencilConfig.from_env()
    if field_map:
        config = replace(config, field_map_path=Path(field_map).expanduser())
    return StencilClient(config)
