"""Build buffer validators from pydantic models."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any

from pydantic import TypeAdapter, ValidationError

if TYPE_CHECKING:
    from pydantic import BaseModel

    from changebuffer.domain.validation import ValidationOutcome, Validator


def pydantic_validator(model: type[BaseModel]) -> Validator:
    """Return a validator that checks proposals against ``model``'s field definitions.

    Each field's annotation and ``Field(...)`` constraints are checked in isolation;
    model-level and ``field_validator`` hooks are not run. Keys that are not model
    fields are accepted. Rejections carry the list of pydantic error messages.
    """

    adapters: dict[str, TypeAdapter[Any]] = {}

    def adapter_for(key: str) -> TypeAdapter[Any] | None:
        if key in adapters:
            return adapters[key]
        field_info = model.model_fields.get(key)
        if field_info is None:
            return None
        adapter: TypeAdapter[Any] = TypeAdapter(Annotated[field_info.annotation, field_info])
        adapters[key] = adapter
        return adapter

    def validate(key: str, new_value: Any, old_value: Any) -> ValidationOutcome:
        _ = old_value
        adapter = adapter_for(key)
        if adapter is None:
            return True
        try:
            adapter.validate_python(new_value)
        except ValidationError as exc:
            return [error["msg"] for error in exc.errors()]
        return True

    return validate
