"""Reusable, strict base models for advertisement records."""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict, ModelWrapValidatorHandler, model_validator
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ValidationError


class StrictBaseModel(BaseModel):
    """
    A strict, immutable pydantic base model.

    Multiformat values (CIDs, peer ids, multiaddrs) are plain frozen dataclasses,
    so arbitrary types are allowed and checked with isinstance.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        strict=True,
        validate_default=True,
        arbitrary_types_allowed=True,
    )

    def copy(self: Self, **kwargs: Any) -> Self:
        """Create a copy of the model with the updated fields that are validated."""
        fields = {name: getattr(self, name) for name in type(self).model_fields}
        return self.__class__(**(fields | kwargs))


class CheckedModel(StrictBaseModel):
    """
    A strict model built directly by callers.

    Type and shape errors reported by pydantic surface as the package's
    ValidationError (rule "field_type"), so callers handle one error type.
    """

    @model_validator(mode="wrap")
    @classmethod
    def _raise_validation_error(cls, data: Any, handler: ModelWrapValidatorHandler[Self]) -> Self:
        try:
            return handler(data)
        except PydanticValidationError as e:
            details = "; ".join(
                f"{'.'.join(str(part) for part in error['loc']) or cls.__name__}: {error['msg']}"
                for error in e.errors()
            )
            raise ValidationError("field_type", details) from e
