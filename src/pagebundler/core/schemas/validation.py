"""Shared schema validation utilities.

Configuration payloads are validated with JSON Schema. Schemas are stored as
YAML files under ``pagebundler.data/schemas`` (human-readable, easy to
review) and loaded in a single, consistent way.
"""
from __future__ import annotations

from typing import Any, Dict, List

from jsonschema import Draft202012Validator

from pagebundler.core.exceptions import SchemaValidationError
from pagebundler.data import get_data_path, read_yaml


def load_schema(schema_name: str) -> Dict[str, Any]:
    """Load a bundled schema dict.

    Automatically appends ``.yaml`` if no extension is present.

    Args:
        schema_name: Schema file name under the schemas root (e.g. "config.schema").

    Raises:
        FileNotFoundError: If schema file doesn't exist.
        ValueError: If schema is not a YAML mapping.
    """
    if not schema_name.lower().endswith((".yaml", ".yml")):
        schema_name = f"{schema_name}.yaml"

    if not get_data_path("schemas", schema_name).exists():
        raise FileNotFoundError(f"Schema not found: {schema_name}")

    schema = read_yaml("schemas", schema_name)
    if not isinstance(schema, dict):
        raise ValueError(f"Schema {schema_name} must be a mapping")
    return schema


def _format_error_path(path: List[Any]) -> str:
    return "/".join(str(p) for p in path) or "<root>"


def validate_payload(payload: Any, schema_name: str) -> None:
    """Validate ``payload`` against a bundled schema.

    Raises:
        SchemaValidationError: listing every violation, ordered by location.
    """
    schema = load_schema(schema_name)
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(payload), key=lambda e: [str(p) for p in e.absolute_path])
    if not errors:
        return

    lines = [f"{_format_error_path(list(err.absolute_path))}: {err.message}" for err in errors]
    raise SchemaValidationError(
        f"Schema validation failed ({schema_name}):\n  " + "\n  ".join(lines),
        context={"schema": schema_name, "errors": lines},
    )


__all__ = ["load_schema", "validate_payload"]
