"""Shared response envelope and boundary validation helpers."""

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from wayfinder.exceptions import InvalidInput, WayfinderError

ModelT = TypeVar("ModelT", bound=BaseModel)


class ServiceResponse(BaseModel):
    success: bool
    data: Any = None
    error: str | None = None
    error_type: str | None = None

    @classmethod
    def ok(cls, data: Any) -> "ServiceResponse":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, exc: WayfinderError) -> "ServiceResponse":
        return cls(success=False, error=exc.reason, error_type=exc.error_type)


def describe_validation_error(exc: ValidationError) -> str:
    """Flatten a pydantic ValidationError into ``field: message; ...``."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "payload"
        parts.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts)


def validate_payload(model: type[ModelT], payload: Any) -> ModelT:
    """Validate a loosely typed payload into ``model`` or raise InvalidInput."""
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise InvalidInput(describe_validation_error(e)) from e
