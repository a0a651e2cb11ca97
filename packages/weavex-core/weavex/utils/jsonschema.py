"""JSON Schema validation wrapper."""

from __future__ import annotations

from typing import Any

import jsonschema


def check_schema(schema: dict[str, Any]) -> None:
    """Raise ``jsonschema.SchemaError`` if *schema* is not a valid Draft 7 schema."""
    jsonschema.Draft7Validator.check_schema(schema)


def validate_json(instance: Any, schema: dict[str, Any]) -> list[str]:
    """Validate a value against a JSON Schema. Returns list of error messages.

    Messages for nested values are prefixed with their path, e.g.
    ``max_results: 0 is less than the minimum of 1``.
    """
    validator = jsonschema.Draft7Validator(schema)
    errors = []
    for err in sorted(validator.iter_errors(instance), key=lambda e: list(e.path)):
        path = ".".join(str(p) for p in err.path)
        errors.append(f"{path}: {err.message}" if path else err.message)
    return errors
