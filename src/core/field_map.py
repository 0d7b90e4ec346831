"""Field-map override files.

This module loads and validates YAML field-map files. A field map lets a
deployment add the column names its table actually uses and change the
default of any non-derived canonical field, without code changes.

Example::

    version: 1
    fields:
      requires_photo:
        default: false
      name:
        candidates: ["Template Name"]
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Sequence

import yaml

from core.constants import FIELD_MAP_VERSION
from core.errors import StencilFieldMapError
from core.types import CoercionKind, FieldOverride, FieldSpec
from transforms.field_table import DEFAULT_FIELD_TABLE, DERIVED_FIELDS, field_table_index

_ALLOWED_ROOT_KEYS = {"version", "fields"}
_ALLOWED_ENTRY_KEYS = {"candidates", "default"}


def load_field_map(map_path: str | Path) -> dict[str, FieldOverride]:
    """Load and validate a YAML field-map from disk.

    Args:
        map_path: File path to the YAML field map.

    Returns:
        Overrides keyed by canonical field name.

    Raises:
        StencilFieldMapError: If the file is missing, unparsable, or fails
            schema checks.
    """
    payload = _load_yaml_payload(map_path)
    return parse_field_map(payload)


def parse_field_map(payload: object) -> dict[str, FieldOverride]:
    """Validate an already-parsed field-map payload.

    Args:
        payload: Parsed YAML document.

    Returns:
        Overrides keyed by canonical field name.

    Raises:
        StencilFieldMapError: If schema checks fail.
    """
    root_mapping = _expect_mapping(payload, "field map root")
    unknown_keys = sorted(set(root_mapping) - _ALLOWED_ROOT_KEYS)
    if unknown_keys:
        raise StencilFieldMapError(
            f"Field map contains unknown root fields: {', '.join(unknown_keys)}."
        )
    _parse_version(root_mapping)
    raw_fields = root_mapping.get("fields")
    if raw_fields is None:
        return {}
    specs = field_table_index(DEFAULT_FIELD_TABLE)
    overrides: dict[str, FieldOverride] = {}
    for canonical_name, raw_entry in _expect_mapping(raw_fields, "field map fields").items():
        spec = specs.get(canonical_name)
        if spec is None:
            supported_rows = ", ".join(specs)
            raise StencilFieldMapError(
                f"Unknown canonical field '{canonical_name}' in field map. "
                f"Use one of: {supported_rows}."
            )
        overrides[canonical_name] = _parse_entry(spec, raw_entry)
    return overrides


def _load_yaml_payload(map_path: str | Path) -> object:
    map_file = Path(map_path).expanduser().resolve()
    if not map_file.exists():
        raise StencilFieldMapError(
            f"Field map file does not exist at {map_file}. Check STENCIL_FIELD_MAP."
        )
    try:
        payload = yaml.safe_load(map_file.read_text(encoding="utf-8"))
    except OSError as error:
        raise StencilFieldMapError(
            f"Failed to read field map at {map_file}: {error}. Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise StencilFieldMapError(
            f"Failed to parse YAML field map at {map_file}: {error}. Fix YAML syntax and retry."
        ) from error
    if payload is None:
        raise StencilFieldMapError(f"Field map at {map_file} is empty. Define 'version' and 'fields'.")
    return payload


def _parse_version(root_mapping: Mapping[str, object]) -> None:
    raw_version = root_mapping.get("version")
    if isinstance(raw_version, bool) or not isinstance(raw_version, int):
        raise StencilFieldMapError("Field map field 'version' must be an integer. Set version: 1.")
    if raw_version != FIELD_MAP_VERSION:
        raise StencilFieldMapError(
            f"Unsupported field map version {raw_version}. Use version: {FIELD_MAP_VERSION}."
        )


def _parse_entry(spec: FieldSpec, raw_entry: object) -> FieldOverride:
    context = f"field map entry '{spec.canonical_name}'"
    entry = _expect_mapping(raw_entry, context)
    unknown_keys = sorted(set(entry) - _ALLOWED_ENTRY_KEYS)
    if unknown_keys:
        raise StencilFieldMapError(f"Invalid {context}: unknown keys {', '.join(unknown_keys)}.")
    candidate_keys = _parse_candidates(entry.get("candidates"), context)
    if "default" not in entry:
        return FieldOverride(spec.canonical_name, candidate_keys=candidate_keys)
    if spec.canonical_name in DERIVED_FIELDS:
        raise StencilFieldMapError(
            f"Invalid {context}: '{spec.canonical_name}' is derived and has no overridable default."
        )
    default = entry["default"]
    _validate_default(spec, default, context)
    return FieldOverride(
        spec.canonical_name,
        candidate_keys=candidate_keys,
        has_default=True,
        default=default,
    )


def _parse_candidates(raw_candidates: object, context: str) -> tuple[str, ...]:
    if raw_candidates is None:
        return ()
    candidate_rows = _expect_sequence(raw_candidates, f"{context} candidates")
    candidate_keys = []
    for candidate in candidate_rows:
        if not isinstance(candidate, str) or not candidate.strip():
            raise StencilFieldMapError(
                f"Invalid {context}: candidates must be non-empty strings."
            )
        candidate_keys.append(candidate)
    return tuple(candidate_keys)


def _validate_default(spec: FieldSpec, default: Any, context: str) -> None:
    kind = spec.coercion_kind
    if kind is CoercionKind.BOOLEAN:
        valid = isinstance(default, bool)
        expected = "a boolean"
    elif kind is CoercionKind.JSON_ARRAY:
        valid = isinstance(default, list)
        expected = "a list"
    elif kind is CoercionKind.JSON_OBJECT:
        valid = default is None or isinstance(default, Mapping)
        expected = "a mapping or null"
    elif spec.default is None:
        valid = default is None or isinstance(default, str)
        expected = "a string or null"
    else:
        valid = isinstance(default, str)
        expected = "a string"
    if not valid:
        raise StencilFieldMapError(
            f"Invalid {context}: default must be {expected}, got {type(default).__name__}."
        )


def _expect_mapping(value: object, context: str) -> Mapping[str, object]:
    if isinstance(value, Mapping):
        normalized_mapping = {}
        for key, payload in value.items():
            if not isinstance(key, str):
                raise StencilFieldMapError(
                    f"Invalid {context}: expected string keys, got {type(key).__name__}."
                )
            normalized_mapping[key] = payload
        return normalized_mapping
    raise StencilFieldMapError(
        f"Invalid {context}: expected object mapping, got {type(value).__name__}."
    )


def _expect_sequence(value: object, context: str) -> Sequence[object]:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return value
    raise StencilFieldMapError(f"Invalid {context}: expected list, got {type(value).__name__}.")
