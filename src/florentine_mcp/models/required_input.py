"""Targeting constraints that narrow which data the Florentine API may consult."""

from typing import Any

from pydantic import (
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
    model_validator,
)
from pydantic_core import PydanticCustomError

from florentine_mcp.models.base import WireModel, refinement_error

REQUIRED_VALUE_MESSAGE = (
    '"value" must be a string, a number, a boolean or an object with an "$in" list '
    "of strings and numbers."
)


class InFilter(WireModel):
    """Set membership value, sent as ``{"$in": [...]}``."""

    in_: list[StrictStr | StrictInt | StrictFloat] = Field(alias="$in")


RequiredInputValue = str | int | float | bool | InFilter


class RequiredInput(WireModel):
    """A required key path/value pair, optionally scoped to a database.

    Attributes:
        key_path: Dotted path of the document field, e.g. ``"user.id"``.
        value: Value the field must match, or an ``InFilter``.
        database: Database the constraint applies to. Without it the
            constraint applies everywhere.
        collections: Collections within ``database`` the constraint applies
            to. Only allowed together with ``database``.
    """

    key_path: str
    value: RequiredInputValue
    database: str | None = None
    collections: list[str] | None = None

    @field_validator("value", mode="wrap")
    @classmethod
    def single_value_error(
        cls, value: Any, handler: ValidatorFunctionWrapHandler
    ) -> RequiredInputValue:
        # One error at "value" instead of one per union member
        try:
            return handler(value)
        except ValidationError:
            raise PydanticCustomError("invalid_required_value", REQUIRED_VALUE_MESSAGE) from None

    @model_validator(mode="after")
    def collections_need_database(self) -> "RequiredInput":
        if self.collections is not None and self.database is None:
            raise refinement_error(
                "collections_without_database",
                "collections",
                '"collections" can only be set together with "database".',
            )
        return self
