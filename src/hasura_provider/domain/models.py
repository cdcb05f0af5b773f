"""Declarative state model for the hasura_remote_schema resource."""

from __future__ import annotations

from typing import Any, Mapping

import pydantic
from pydantic import BaseModel, Field, field_validator

from hasura_provider.core.errors import ValidationError
from hasura_provider.core.values import is_unknown


class RemoteSchema(BaseModel):
    """State of one remote schema registration.

    Decoding is strict: engine values of the wrong type are rejected
    rather than coerced, and unknown attributes fail the decode.
    """

    name: str = Field(..., min_length=1, description="Remote schema name, also the Hasura key")
    url: str = Field(..., min_length=1, description="GraphQL endpoint of the upstream service")
    forward_headers: bool = Field(False, description="Forward client headers to the upstream")
    additional_headers: dict[str, str] | None = Field(
        None, description="Extra headers Hasura sends to the upstream"
    )

    class Config:
        strict = True
        extra = "forbid"
        frozen = True

    @field_validator("forward_headers", mode="before")
    @classmethod
    def _unset_forward_headers(cls, value: Any) -> Any:
        # optional + computed: null in the plan means "use the default"
        return False if value is None else value

    @classmethod
    def decode(cls, values: Mapping[str, Any] | None, *, what: str = "state") -> RemoteSchema:
        """Decode raw engine values, raising ValidationError on any unexpected shape."""
        if values is None:
            raise ValidationError(f"No {what} was provided")
        if not isinstance(values, Mapping):
            raise ValidationError(f"Expected {what} to be an object, got {type(values).__name__}")
        unknown = sorted(key for key, value in values.items() if is_unknown(value))
        headers = values.get("additional_headers")
        if isinstance(headers, Mapping):
            unknown.extend(
                f"additional_headers.{key}" for key, value in headers.items() if is_unknown(value)
            )
        if unknown:
            raise ValidationError(
                f"The {what} contains values that are not yet known: {', '.join(unknown)}",
                {"attributes": unknown},
            )
        try:
            return cls.model_validate(dict(values))
        except pydantic.ValidationError as exc:
            raise ValidationError(f"Invalid {what}: {exc}") from exc

    def to_state(self) -> dict[str, Any]:
        return self.model_dump()

    def header_list(self) -> list[dict[str, str]]:
        """Flatten additional_headers into Hasura's name/value list."""
        return [
            {"name": key, "value": value}
            for key, value in sorted((self.additional_headers or {}).items())
        ]
