"""
Argument validation against a tool's input schema.

Covers the subset of JSON Schema the catalogue uses: required fields, primitive types and enums.
"""
from typing import Any, Dict, Mapping

from toolgateway.errors import ArgumentValidationError


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


TYPE_CHECKS = {
    "string": lambda v: isinstance(v, str),
    "number": _is_number,
    "integer": lambda v: (isinstance(v, int) and not isinstance(v, bool)) or (isinstance(v, float) and v.is_integer()),
    "boolean": lambda v: isinstance(v, bool),
    "object": lambda v: isinstance(v, dict),
    "array": lambda v: isinstance(v, list),
    "null": lambda v: v is None,
}


def validate_arguments(schema: Mapping[str, Any], arguments: Any) -> Dict[str, Any]:
    """Check arguments against the schema and return them as a plain dict.

    Raises ArgumentValidationError naming the first offending field.
    """
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        raise ArgumentValidationError(None, "Invalid arguments: expected an object")

    for name in schema.get("required", []):
        if arguments.get(name) is None:
            raise ArgumentValidationError(name, f"Missing required argument: {name}")

    properties = schema.get("properties", {})
    for name, value in arguments.items():
        prop = properties.get(name)
        if prop is None or value is None:
            continue

        expected = prop.get("type")
        if expected:
            check = TYPE_CHECKS.get(expected)
            if check is not None and not check(value):
                raise ArgumentValidationError(
                    name,
                    f"Invalid argument '{name}': expected {expected}, got {type(value).__name__}",
                )

        allowed = prop.get("enum")
        if allowed and value not in allowed:
            raise ArgumentValidationError(
                name,
                f"Invalid argument '{name}': must be one of {', '.join(map(str, allowed))}",
            )

    return dict(arguments)
