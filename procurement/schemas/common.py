"""Shared schema helpers."""

from typing import Any, Type, TypeVar

from fastapi import HTTPException
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator


ModelT = TypeVar("ModelT", bound=BaseModel)


class FormModel(BaseModel):
    """
    Base for request models fed from HTML forms.

    Browsers submit untouched inputs as empty strings; those are treated as
    absent so optional numeric fields validate and partial updates keep the
    stored value.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def changes(self) -> dict[str, Any]:
        """Fields that were actually provided with a value."""
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None
        }


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


def parse_form(model: Type[ModelT], data: dict[str, Any]) -> ModelT:
    """
    Validate form fields into ``model``, answering 422 on failure.

    Args:
        model: Pydantic model class to build
        data: Raw form values keyed by field name

    Returns:
        ModelT: Validated model instance

    Raises:
        HTTPException: 422 with pydantic error details
    """
    try:
        return model.model_validate({key: value for key, value in data.items() if value is not None})
    except ValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail=exc.errors(include_url=False, include_context=False)
        ) from exc
