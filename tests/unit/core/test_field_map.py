"""Unit tests for field-map override files."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import StencilFieldMapError
from core.field_map import load_field_map, parse_field_map
from tests.fixture_paths import fixture_path


def test_load_field_map_valid_file_parses_overrides() -> None:
    """A valid field map should parse candidates and defaults."""
    overrides = load_field_map(fixture_path("field_map/valid.yaml"))

    assert overrides["requires_photo"].has_default is True
    assert overrides["requires_photo"].default is False
    assert overrides["name"].candidate_keys == ("Template Name", "Titel")
    assert overrides["name"].has_default is False
    assert overrides["fields"].default == []


@pytest.mark.parametrize(
    "relative_path",
    [
        "field_map/unknown_field.yaml",
        "field_map/bad_default.yaml",
        "field_map/derived_default.yaml",
        "field_map/wrong_version.yaml",
    ],
)
def test_load_field_map_rejects_invalid_files(relative_path: str) -> None:
    """Schema violations should raise a field-map error."""
    with pytest.raises(StencilFieldMapError):
        load_field_map(fixture_path(relative_path))


def test_load_field_map_raises_for_missing_file(tmp_path: Path) -> None:
    """A missing file should raise a field-map error."""
    with pytest.raises(StencilFieldMapError):
        load_field_map(tmp_path / "absent.yaml")


def test_load_field_map_raises_for_invalid_yaml(tmp_path: Path) -> None:
    """Broken YAML syntax should raise a field-map error."""
    map_file = tmp_path / "broken.yaml"
    map_file.write_text("version: 1\nfields: [unclosed\n", encoding="utf-8")

    with pytest.raises(StencilFieldMapError):
        load_field_map(map_file)


def test_parse_field_map_without_fields_returns_no_overrides() -> None:
    """A field map with only a version should apply nothing."""
    assert parse_field_map({"version": 1}) == {}


def test_parse_field_map_rejects_blank_candidates() -> None:
    """Candidate keys must be non-empty strings."""
    with pytest.raises(StencilFieldMapError):
        parse_field_map({"version": 1, "fields": {"name": {"candidates": ["  "]}}})


@pytest.mark.parametrize("canonical_name", ["name", "TYPE", "typeMeta.instructions_md"])
def test_parse_field_map_rejects_null_default_for_string_fields(canonical_name: str) -> None:
    """Fields that always emit a string should not accept a null default."""
    with pytest.raises(StencilFieldMapError, match="must be a string"):
        parse_field_map({"version": 1, "fields": {canonical_name: {"default": None}}})


@pytest.mark.parametrize("canonical_name", ["typeMeta.title", "base_image"])
def test_parse_field_map_accepts_null_default_for_nullable_fields(canonical_name: str) -> None:
    """Fields that are null by default may keep a null default."""
    overrides = parse_field_map({"version": 1, "fields": {canonical_name: {"default": None}}})

    assert overrides[canonical_name].has_default is True
    assert overrides[canonical_name].default is None
