"""Boundary validation: raw payloads in, typed schema instances out"""

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from ..errors import ValidationFailed

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def format_validation_errors(exc: ValidationError) -> list[dict]:
    """Flatten a pydantic ValidationError into {"path", "message"} pairs"""
    details = []
    for error in exc.errors():
        message = error.get("msg", "Invalid value")
        # Validators raise ValueError with user-facing text; drop pydantic's prefix
        if error.get("type") == "value_error" and error.get("ctx", {}).get("error"):
            message = str(error["ctx"]["error"])
        details.append({"path": list(error.get("loc", ())), "message": message})
    return details


def validate_payload(schema: type[SchemaT], payload: Any) -> SchemaT:
    """
    Validate a candidate payload against a schema.

    Raises:
        ValidationFailed: Carrying every failure, not just the first
    """
    try:
        return schema.model_validate(payload)
    except ValidationError as e:
        raise ValidationFailed(format_validation_errors(e), schema=schema.__name__) from e
