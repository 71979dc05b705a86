"""Shared schema validation utilities.

textmod validates configuration documents using JSON Schema. Schemas are
bundled as YAML files under ``textmod/data/schemas/`` and loaded in a
single, consistent way.
"""
from __future__ import annotations

from typing import Any, Dict, List

from jsonschema import Draft202012Validator, ValidationError

from textmod.core.exceptions import SchemaValidationError
from textmod.data import get_data_path, read_yaml


def load_schema(schema_name: str) -> Dict[str, Any]:
    """Load a bundled schema dict.

    Automatically appends ``.yaml`` if no extension is present.

    Args:
        schema_name: Schema file name under the schemas root
            (e.g., "config.schema").

    Raises:
        FileNotFoundError: If schema file doesn't exist.
        ValueError: If schema is not a YAML mapping.
    """
    lowered = schema_name.lower()
    if not (lowered.endswith(".yaml") or lowered.endswith(".yml")):
        schema_name = f"{schema_name}.yaml"

    path = get_data_path("schemas", schema_name)
    if not path.exists():
        raise FileNotFoundError(f"Schema not found: {schema_name} (searched {path.parent})")

    schema = read_yaml("schemas", schema_name)
    if not isinstance(schema, dict):
        raise ValueError(f"Schema must be a YAML mapping, got {type(schema).__name__}")
    return schema


def _error_path(error: ValidationError) -> str:
    return ".".join(str(p) for p in error.absolute_path)


def validate_payload(payload: Dict[str, Any], schema_name: str) -> None:
    """Validate a payload against a bundled JSON schema.

    Every violation is collected; the raised error lists all of them and
    chains the first ``jsonschema.ValidationError`` as its cause.

    Raises:
        SchemaValidationError: If validation fails.
        FileNotFoundError: If schema doesn't exist.
    """
    schema = load_schema(schema_name)
    Draft202012Validator.check_schema(schema)
    validator = Draft202012Validator(schema)

    errors: List[ValidationError] = sorted(
        validator.iter_errors(payload), key=lambda e: [str(p) for p in e.absolute_path]
    )
    if not errors:
        return

    messages = []
    for error in errors:
        path_str = _error_path(error)
        messages.append(f"{path_str}: {error.message}" if path_str else error.message)

    raise SchemaValidationError(
        f"Validation failed against schema '{schema_name}':\n"
        + "\n".join(f"- {m}" for m in messages),
        context={
            "schema": schema_name,
            "path": _error_path(errors[0]) or "<root>",
            "errors": messages,
        },
    ) from errors[0]


__all__ = [
    "load_schema",
    "validate_payload",
]
