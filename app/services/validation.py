"""
Input validation: untrusted payloads in, validated commands out
"""

from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError

from app.core.errors import ValidationFailed

M = TypeVar("M", bound=BaseModel)


def first_error_message(exc: ValidationError) -> str:
    """Format only the first violation as "<field.path>: <message>"."""
    errors = exc.errors()
    if not errors:
        return "validation: error"
    first = errors[0]
    path = ".".join(str(part) for part in first.get("loc", ())) or "validation"
    return f"{path}: {first.get('msg') or 'error'}"


def validate_input(schema: Type[M], payload: Any) -> M:
    """Validate a payload against a schema, raising ValidationFailed on the first bad field"""
    if isinstance(payload, schema):
        return payload
    try:
        return schema.model_validate(payload)
    except ValidationError as exc:
        raise ValidationFailed(first_error_message(exc)) from exc
