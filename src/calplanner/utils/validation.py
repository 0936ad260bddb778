"""Payload validation helpers."""

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from .exceptions import MalformedInput

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_payload(model: type[ModelT], payload: Any) -> ModelT:
    """
    Validate a payload against a pydantic model.

    Args:
        model: Model class to validate against
        payload: Model instance or raw mapping

    Returns:
        Validated model instance

    Raises:
        MalformedInput: If the payload does not validate
    """
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        details = [
            {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
            for error in e.errors()
        ]
        raise MalformedInput(f"Invalid {model.__name__} payload", details=details) from e
